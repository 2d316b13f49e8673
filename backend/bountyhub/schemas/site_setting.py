from datetime import datetime

from pydantic import BaseModel, Field


class SiteSettingCreate(BaseModel):
    key: str = Field(min_length=1, max_length=128)
    value: str


class SiteSettingUpdate(BaseModel):
    value: str
    key: str | None = Field(default=None, min_length=1, max_length=128)


class SiteSettingOut(BaseModel):
    id: str
    key: str
    value: str
    updated_at: datetime
    updated_by_id: str

    class Config:
        from_attributes = True
