from sqlalchemy.orm import Session

from bountyhub.db.models.bounty import Bounty
from bountyhub.services import crud


def create_bounty(db: Session, **fields) -> Bounty:
    return crud.create(db, Bounty, fields)


def get_bounty(db: Session, bounty_id: str, *, include: tuple[str, ...] = ("company",)) -> Bounty:
    return crud.get_or_fail(db, Bounty, bounty_id, include=include)


def list_bounties(
    db: Session,
    *,
    company_id: str | None = None,
    language: str | None = None,
    offset: int = 0,
    limit: int | None = None,
) -> tuple[list[Bounty], int]:
    filters: dict[str, str] = {}
    if company_id:
        filters["company_id"] = company_id
    if language:
        filters["language"] = language
    items = crud.find(
        db,
        Bounty,
        filters,
        include=("company",),
        order_by="created_at",
        descending=True,
        offset=offset,
        limit=limit,
    )
    return items, crud.count(db, Bounty, filters)


def update_bounty(db: Session, bounty_id: str, **fields) -> Bounty:
    return crud.update(db, Bounty, bounty_id, fields)


def delete_bounty(db: Session, bounty_id: str) -> None:
    crud.delete(db, Bounty, bounty_id)
