from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class BountyCreate(BaseModel):
    company_id: str
    max_payout: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    nsfw: bool | None = None
    cursing: bool | None = None
    nudity: bool | None = None
    language: str | None = Field(default=None, max_length=64)
    age_restriction: int | None = Field(default=None, ge=0, le=120)


class BountyUpdate(BaseModel):
    company_id: str | None = None
    max_payout: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    nsfw: bool | None = None
    cursing: bool | None = None
    nudity: bool | None = None
    language: str | None = Field(default=None, max_length=64)
    age_restriction: int | None = Field(default=None, ge=0, le=120)


class BountyOut(BountyCreate):
    id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
