import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from bountyhub.api.common import dump
from bountyhub.core.api_response import success_response_payload
from bountyhub.core.observability import log_business_event
from bountyhub.core.paging import build_paged_response, page_window
from bountyhub.core.security import require_admin_user
from bountyhub.db.models.user import User
from bountyhub.db.session import get_db
from bountyhub.schemas.bounty import BountyCreate, BountyOut, BountyUpdate
from bountyhub.schemas.details import BountyDetailOut
from bountyhub.services import bounties as bounty_service

router = APIRouter(prefix="/bounties", tags=["bounties"])
logger = logging.getLogger(__name__)


def _paged_bounties(request: Request, db: Session, *, page: int, limit: int, **filters) -> dict:
    safe_page, safe_limit, offset = page_window(page, limit)
    items, total = bounty_service.list_bounties(db, offset=offset, limit=safe_limit, **filters)
    return success_response_payload(
        request,
        data=build_paged_response(
            items=items,
            total=total,
            page=safe_page,
            limit=safe_limit,
            serializer=lambda b: dump(BountyDetailOut, b),
        ),
    )


@router.get("")
def list_bounties(
    request: Request,
    page: int = 1,
    limit: int = 10,
    company_id: str | None = None,
    language: str | None = None,
    db: Session = Depends(get_db),
):
    return _paged_bounties(request, db, page=page, limit=limit, company_id=company_id, language=language)


@router.get("/company/{company_id}")
def list_company_bounties(
    company_id: str,
    request: Request,
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db),
):
    return _paged_bounties(request, db, page=page, limit=limit, company_id=company_id)


@router.get("/{bounty_id}")
def get_bounty(bounty_id: str, request: Request, db: Session = Depends(get_db)):
    bounty = bounty_service.get_bounty(db, bounty_id)
    return success_response_payload(request, data=dump(BountyDetailOut, bounty))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_bounty(
    payload: BountyCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin_user),
):
    bounty = bounty_service.create_bounty(db, **payload.model_dump())
    log_business_event(logger, request, event="bounties.create", actor_id=admin.id, bounty_id=bounty.id)
    return success_response_payload(request, data=dump(BountyOut, bounty), message="Bounty created successfully")


@router.put("/{bounty_id}")
def update_bounty(
    bounty_id: str,
    payload: BountyUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin_user),
):
    bounty = bounty_service.update_bounty(db, bounty_id, **payload.model_dump(exclude_unset=True))
    log_business_event(logger, request, event="bounties.update", actor_id=admin.id, bounty_id=bounty_id)
    return success_response_payload(request, data=dump(BountyOut, bounty), message="Bounty updated successfully")


@router.delete("/{bounty_id}")
def delete_bounty(
    bounty_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin_user),
):
    bounty_service.delete_bounty(db, bounty_id)
    log_business_event(logger, request, event="bounties.delete", actor_id=admin.id, bounty_id=bounty_id)
    return success_response_payload(request, data=None, message="Bounty deleted successfully")
