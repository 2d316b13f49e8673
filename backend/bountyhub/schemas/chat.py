from datetime import datetime

from pydantic import BaseModel, Field


class ChatCreate(BaseModel):
    report_id: str
    message: str = Field(min_length=1, max_length=5000)


class ChatOut(BaseModel):
    id: str
    report_id: str
    user_id: str
    message: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True
