from datetime import datetime

from pydantic import BaseModel, Field


class CompanyCreate(BaseModel):
    name: str = Field(min_length=2, max_length=200)
    logo: str | None = None


class CompanyUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=200)
    logo: str | None = None


class CompanyOut(BaseModel):
    id: str
    name: str | None = None
    logo: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
