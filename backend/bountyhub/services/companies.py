from typing import Literal

from sqlalchemy.orm import Session

from bountyhub.db.models.company import Company
from bountyhub.services import crud


def create_company(db: Session, **fields) -> Company:
    return crud.create(db, Company, fields)


def get_company(db: Session, company_id: str, *, include: tuple[str, ...] = ()) -> Company:
    return crud.get_or_fail(db, Company, company_id, include=include)


def list_companies(db: Session, *, offset: int = 0, limit: int | None = None) -> tuple[list[Company], int]:
    items = crud.find(db, Company, order_by="created_at", descending=True, offset=offset, limit=limit)
    return items, crud.count(db, Company)


def search_companies(db: Session, term: str, *, by: Literal["name", "id"] = "name") -> list[Company]:
    if by == "id":
        company = crud.get(db, Company, term.strip())
        return [company] if company else []
    query = db.query(Company).filter(Company.name.icontains(term.strip(), autoescape=True))
    return list(query.order_by(Company.name.asc()).all())


def update_company(db: Session, company_id: str, **fields) -> Company:
    return crud.update(db, Company, company_id, fields)


def delete_company(db: Session, company_id: str) -> None:
    crud.delete(db, Company, company_id)
