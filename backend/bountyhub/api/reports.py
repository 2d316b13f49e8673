import logging

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from bountyhub.api.common import dump, ensure_report_access
from bountyhub.core.api_response import success_response_payload
from bountyhub.core.observability import log_business_event
from bountyhub.core.paging import build_paged_response, page_window
from bountyhub.core.security import get_current_user, is_admin, require_admin_user
from bountyhub.db.models.user import User
from bountyhub.db.session import get_db
from bountyhub.schemas.details import ReportDetailOut
from bountyhub.schemas.report import ReportCreate, ReportOut, ReportStatusUpdate, ReportUpdate
from bountyhub.services import reports as report_service

router = APIRouter(prefix="/reports", tags=["reports"])
logger = logging.getLogger(__name__)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_report(
    payload: ReportCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    fields = payload.model_dump(exclude={"message"})
    if payload.message:
        report = report_service.open_report(db, user_id=current_user.id, message=payload.message, **fields)
    else:
        report = report_service.create_report(db, user_id=current_user.id, **fields)
    log_business_event(logger, request, event="reports.create", actor_id=current_user.id, report_id=report.id)
    return success_response_payload(request, data=dump(ReportOut, report), message="Report created successfully")


@router.get("")
def list_reports(
    request: Request,
    page: int = 1,
    limit: int = 10,
    status_filter: str | None = Query(default=None, alias="status"),
    title: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    safe_page, safe_limit, offset = page_window(page, limit)
    if title and is_admin(current_user):
        items, total = report_service.search_reports_by_title(db, title, offset=offset, limit=safe_limit)
    else:
        items, total = report_service.list_reports(
            db,
            status=status_filter,
            user_id=None if is_admin(current_user) else current_user.id,
            offset=offset,
            limit=safe_limit,
        )
    return success_response_payload(
        request,
        data=build_paged_response(
            items=items,
            total=total,
            page=safe_page,
            limit=safe_limit,
            serializer=lambda r: dump(ReportOut, r),
        ),
    )


@router.get("/{report_id}")
def get_report(
    report_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    report = report_service.get_report(db, report_id)
    ensure_report_access(report, current_user)
    return success_response_payload(request, data=dump(ReportDetailOut, report))


@router.put("/{report_id}")
def update_report(
    report_id: str,
    payload: ReportUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    report = report_service.update_report(
        db,
        report_id,
        user_id=current_user.id,
        **payload.model_dump(exclude_unset=True),
    )
    log_business_event(logger, request, event="reports.update", actor_id=current_user.id, report_id=report_id)
    return success_response_payload(request, data=dump(ReportOut, report), message="Report updated successfully")


@router.patch("/{report_id}/status")
def update_report_status(
    report_id: str,
    payload: ReportStatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin_user),
):
    report = report_service.update_report_status(db, report_id, payload.status, company_id=payload.company_id)
    log_business_event(
        logger,
        request,
        event="reports.status",
        actor_id=admin.id,
        report_id=report_id,
        status=payload.status,
    )
    return success_response_payload(request, data=dump(ReportOut, report), message="Report status updated successfully")


@router.delete("/{report_id}")
def delete_report(
    report_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    owner_id = None if is_admin(current_user) else current_user.id
    report_service.delete_report(db, report_id, user_id=owner_id)
    log_business_event(logger, request, event="reports.delete", actor_id=current_user.id, report_id=report_id)
    return success_response_payload(request, data=None, message="Report deleted successfully")
