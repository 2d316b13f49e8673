import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from bountyhub.api.common import dump, dump_many
from bountyhub.core.api_response import success_response_payload
from bountyhub.core.observability import log_business_event
from bountyhub.core.paging import build_paged_response, page_window
from bountyhub.core.security import require_admin_user
from bountyhub.db.models.user import User, UserRole
from bountyhub.db.session import get_db
from bountyhub.schemas.details import UserDetailOut
from bountyhub.schemas.user import UserOut, UserUpdate
from bountyhub.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)

USER_DETAIL_RELATIONS = ("reports", "chats", "password_resets", "site_settings")


@router.get("")
def list_users(
    request: Request,
    page: int = 1,
    limit: int = 10,
    role: UserRole | None = None,
    q: str | None = None,
    by: Literal["email", "id"] = "email",
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin_user),
):
    if q:
        items = user_service.search_users(db, q, by=by)
        return success_response_payload(request, data=dump_many(UserOut, items))
    safe_page, safe_limit, offset = page_window(page, limit)
    items, total = user_service.list_users(db, role=role, offset=offset, limit=safe_limit)
    return success_response_payload(
        request,
        data=build_paged_response(
            items=items,
            total=total,
            page=safe_page,
            limit=safe_limit,
            serializer=lambda u: dump(UserOut, u),
        ),
    )


@router.get("/{user_id}")
def get_user(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin_user),
):
    user = user_service.get_user(db, user_id, include=USER_DETAIL_RELATIONS)
    return success_response_payload(request, data=dump(UserDetailOut, user))


@router.put("/{user_id}")
def update_user(
    user_id: str,
    payload: UserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin_user),
):
    user = user_service.update_user(db, user_id, **payload.model_dump(exclude_unset=True))
    log_business_event(logger, request, event="users.update", actor_id=admin.id, user_id=user_id)
    return success_response_payload(request, data=dump(UserOut, user), message="User updated successfully")


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin_user),
):
    if user_id == admin.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account")
    user_service.delete_user(db, user_id)
    log_business_event(logger, request, event="users.delete", actor_id=admin.id, user_id=user_id)
    return success_response_payload(request, data=None, message="User deleted successfully")
