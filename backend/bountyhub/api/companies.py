import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from bountyhub.api.common import dump, dump_many
from bountyhub.core.api_response import success_response_payload
from bountyhub.core.observability import log_business_event
from bountyhub.core.paging import build_paged_response, page_window
from bountyhub.core.security import require_admin_user
from bountyhub.db.models.user import User
from bountyhub.db.session import get_db
from bountyhub.schemas.company import CompanyCreate, CompanyOut, CompanyUpdate
from bountyhub.schemas.details import CompanyDetailOut
from bountyhub.services import companies as company_service

router = APIRouter(prefix="/companies", tags=["companies"])
logger = logging.getLogger(__name__)


@router.get("")
def list_companies(
    request: Request,
    page: int = 1,
    limit: int = 10,
    q: str | None = None,
    db: Session = Depends(get_db),
):
    if q:
        items = company_service.search_companies(db, q)
        return success_response_payload(request, data=dump_many(CompanyOut, items))
    safe_page, safe_limit, offset = page_window(page, limit)
    items, total = company_service.list_companies(db, offset=offset, limit=safe_limit)
    return success_response_payload(
        request,
        data=build_paged_response(
            items=items,
            total=total,
            page=safe_page,
            limit=safe_limit,
            serializer=lambda c: dump(CompanyOut, c),
        ),
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_company(
    payload: CompanyCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin_user),
):
    company = company_service.create_company(db, **payload.model_dump())
    log_business_event(logger, request, event="companies.create", actor_id=admin.id, company_id=company.id)
    return success_response_payload(request, data=dump(CompanyOut, company), message="Company created successfully")


@router.get("/{company_id}")
def get_company(company_id: str, request: Request, db: Session = Depends(get_db)):
    company = company_service.get_company(db, company_id, include=("bounties",))
    return success_response_payload(request, data=dump(CompanyDetailOut, company))


@router.put("/{company_id}")
def update_company(
    company_id: str,
    payload: CompanyUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin_user),
):
    company = company_service.update_company(db, company_id, **payload.model_dump(exclude_unset=True))
    log_business_event(logger, request, event="companies.update", actor_id=admin.id, company_id=company_id)
    return success_response_payload(request, data=dump(CompanyOut, company), message="Company updated successfully")


@router.delete("/{company_id}")
def delete_company(
    company_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin_user),
):
    company_service.delete_company(db, company_id)
    log_business_event(logger, request, event="companies.delete", actor_id=admin.id, company_id=company_id)
    return success_response_payload(request, data=None, message="Company deleted successfully")
