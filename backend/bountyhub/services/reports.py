from sqlalchemy.orm import Session

from bountyhub.core.config import DEFAULT_REPORT_STATUS
from bountyhub.core.errors import DataModelError, NotFound
from bountyhub.db.models.report import Report
from bountyhub.services import crud
from bountyhub.services.chats import create_chat

REPORT_DETAIL_RELATIONS = ("user", "company", "chats")
OWNER_EDITABLE_FIELDS = frozenset({"title", "description", "platform"})


def create_report(db: Session, *, commit: bool = True, **fields) -> Report:
    values = dict(fields)
    if not values.get("status"):
        values["status"] = DEFAULT_REPORT_STATUS
    return crud.create(db, Report, values, commit=commit)


def open_report(db: Session, *, message: str, **fields) -> Report:
    """Create a report together with its first chat message in one transaction."""
    try:
        report = create_report(db, commit=False, **fields)
        create_chat(db, report_id=report.id, user_id=report.user_id, message=message)
    except DataModelError:
        db.rollback()
        raise
    db.refresh(report)
    return report


def get_report(db: Session, report_id: str, *, include: tuple[str, ...] = REPORT_DETAIL_RELATIONS) -> Report:
    return crud.get_or_fail(db, Report, report_id, include=include)


def list_reports(
    db: Session,
    *,
    status: str | None = None,
    user_id: str | None = None,
    company_id: str | None = None,
    offset: int = 0,
    limit: int | None = None,
) -> tuple[list[Report], int]:
    filters = {
        key: value
        for key, value in {"status": status, "user_id": user_id, "company_id": company_id}.items()
        if value
    }
    items = crud.find(db, Report, filters, order_by="created_at", descending=True, offset=offset, limit=limit)
    return items, crud.count(db, Report, filters)


def search_reports_by_title(
    db: Session,
    title: str,
    *,
    offset: int = 0,
    limit: int | None = None,
) -> tuple[list[Report], int]:
    query = db.query(Report).filter(Report.title.icontains(title.strip(), autoescape=True))
    total = query.count()
    query = query.order_by(Report.created_at.desc(), Report.id.asc()).offset(offset)
    if limit is not None:
        query = query.limit(limit)
    return query.all(), total


def update_report(db: Session, report_id: str, *, user_id: str, **fields) -> Report:
    """Owner edit: only title, description and platform; status stays with the reviewer."""
    values = {k: v for k, v in fields.items() if k in OWNER_EDITABLE_FIELDS}
    matched = crud.update_many(db, Report, {"id": report_id, "user_id": user_id}, values)
    if not matched:
        raise NotFound("Report", {"id": report_id, "user_id": user_id})
    return get_report(db, report_id, include=())


def update_report_status(db: Session, report_id: str, status: str, *, company_id: str | None = None) -> Report:
    filters = {"id": report_id}
    if company_id is not None:
        filters["company_id"] = company_id
    matched = crud.update_many(db, Report, filters, {"status": status})
    if not matched:
        raise NotFound("Report", filters)
    return get_report(db, report_id, include=())


def delete_report(db: Session, report_id: str, *, user_id: str | None = None) -> None:
    if user_id is None:
        crud.delete(db, Report, report_id)
        return
    deleted = crud.delete_many(db, Report, {"id": report_id, "user_id": user_id})
    if not deleted:
        raise NotFound("Report", {"id": report_id, "user_id": user_id})
