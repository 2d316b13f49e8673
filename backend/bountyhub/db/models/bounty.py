from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bountyhub.db.base import Base, new_id, utc_now_naive

if TYPE_CHECKING:
    from bountyhub.db.models.company import Company


class Bounty(Base):
    __tablename__ = "bounties"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    company_id: Mapped[str] = mapped_column(ForeignKey("companies.id", ondelete="RESTRICT"), index=True)

    max_payout: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    # NULL means the moderation flag is unknown, not false.
    nsfw: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    cursing: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    nudity: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    language: Mapped[str | None] = mapped_column(String(64), nullable=True)
    age_restriction: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now_naive, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now_naive, onupdate=utc_now_naive)

    company: Mapped["Company"] = relationship(back_populates="bounties")
