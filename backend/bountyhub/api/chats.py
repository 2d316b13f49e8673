import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from bountyhub.api.common import dump, dump_many, ensure_report_access
from bountyhub.core.api_response import success_response_payload
from bountyhub.core.observability import log_business_event
from bountyhub.core.paging import build_paged_response, page_window
from bountyhub.core.security import get_current_user, require_admin_user
from bountyhub.db.models.user import User
from bountyhub.db.session import get_db
from bountyhub.schemas.chat import ChatCreate, ChatOut
from bountyhub.schemas.details import ChatDetailOut
from bountyhub.services import chats as chat_service
from bountyhub.services import reports as report_service

router = APIRouter(prefix="/chats", tags=["chats"])
logger = logging.getLogger(__name__)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_chat(
    payload: ChatCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    report = report_service.get_report(db, payload.report_id, include=())
    ensure_report_access(report, current_user)
    chat = chat_service.create_chat(db, report_id=report.id, user_id=current_user.id, message=payload.message)
    log_business_event(logger, request, event="chats.create", actor_id=current_user.id, report_id=report.id)
    return success_response_payload(request, data=dump(ChatOut, chat), message="Message sent")


@router.get("/user")
def list_my_chats(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    items = chat_service.list_user_chats(db, current_user.id)
    return success_response_payload(request, data=dump_many(ChatOut, items))


@router.get("/all")
def list_all_chats(
    request: Request,
    page: int = 1,
    limit: int = 20,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin_user),
):
    safe_page, safe_limit, offset = page_window(page, limit)
    items, total = chat_service.list_all_chats(db, offset=offset, limit=safe_limit)
    return success_response_payload(
        request,
        data=build_paged_response(
            items=items,
            total=total,
            page=safe_page,
            limit=safe_limit,
            serializer=lambda c: dump(ChatOut, c),
        ),
    )


@router.get("/report/{report_id}")
def list_report_chats(
    report_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    report = report_service.get_report(db, report_id, include=())
    ensure_report_access(report, current_user)
    items = chat_service.list_report_chats(db, report_id)
    return success_response_payload(request, data=dump_many(ChatDetailOut, items))


@router.get("/{chat_id}")
def get_chat(
    chat_id: str,
    request: Request,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin_user),
):
    chat = chat_service.get_chat(db, chat_id)
    return success_response_payload(request, data=dump(ChatDetailOut, chat))
