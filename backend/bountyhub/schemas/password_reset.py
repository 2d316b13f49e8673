from datetime import datetime

from pydantic import BaseModel, Field

from bountyhub.schemas.user import EMAIL_PATTERN


class PasswordResetRequest(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN, max_length=320)


class PasswordResetConfirm(BaseModel):
    token: str = Field(min_length=16, max_length=128)
    password: str = Field(min_length=6, max_length=128)


class PasswordResetOut(BaseModel):
    """Reset rows as seen by admins; the token itself is never echoed back."""

    id: str
    user_id: str
    expires_at: datetime
    created_at: datetime
    used: bool

    class Config:
        from_attributes = True
