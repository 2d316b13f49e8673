from datetime import datetime

from pydantic import BaseModel, Field


class ReportCreate(BaseModel):
    company_id: str
    title: str = Field(min_length=5, max_length=255)
    description: str = Field(min_length=20)
    platform: str = Field(min_length=2, max_length=100)
    message: str | None = Field(default=None, min_length=1)


class ReportUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=5, max_length=255)
    description: str | None = Field(default=None, min_length=20)
    platform: str | None = Field(default=None, min_length=2, max_length=100)


class ReportStatusUpdate(BaseModel):
    status: str = Field(min_length=1, max_length=50)
    company_id: str | None = None


class ReportOut(BaseModel):
    id: str
    user_id: str
    company_id: str
    title: str | None = None
    description: str | None = None
    platform: str | None = None
    status: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
