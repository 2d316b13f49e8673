from datetime import datetime

from pydantic import BaseModel, Field

from bountyhub.db.models.user import UserRole

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserRegister(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN, max_length=320)
    password: str = Field(min_length=6, max_length=128)
    name: str = Field(min_length=3, max_length=200)


class LoginIn(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN, max_length=320)
    password: str = Field(min_length=1, max_length=128)


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=3, max_length=200)
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN, max_length=320)
    bio: str | None = None
    profile_picture: str | None = None
    phone_number: str | None = Field(default=None, max_length=32)
    evm_wallet_address: str | None = Field(default=None, max_length=64)
    role: UserRole | None = None
    is_active: bool | None = None


class UserOut(BaseModel):
    id: str
    name: str | None = None
    email: str | None = None
    role: UserRole | None = None
    bio: str | None = None
    profile_picture: str | None = None
    picture: str | None = None
    evm_wallet_address: str | None = None
    phone_number: str | None = None
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
