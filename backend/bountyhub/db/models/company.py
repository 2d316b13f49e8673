from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bountyhub.db.base import Base, new_id, utc_now_naive

if TYPE_CHECKING:
    from bountyhub.db.models.bounty import Bounty
    from bountyhub.db.models.report import Report


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str | None] = mapped_column(String(200), index=True, nullable=True)
    logo: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now_naive)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now_naive, onupdate=utc_now_naive)

    bounties: Mapped[list["Bounty"]] = relationship(back_populates="company", passive_deletes="all")
    reports: Mapped[list["Report"]] = relationship(back_populates="company", passive_deletes="all")
