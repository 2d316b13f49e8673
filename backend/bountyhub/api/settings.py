import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from bountyhub.api.common import dump, dump_many
from bountyhub.core.api_response import success_response_payload
from bountyhub.core.observability import log_business_event
from bountyhub.core.security import require_admin_user
from bountyhub.db.models.user import User
from bountyhub.db.session import get_db
from bountyhub.schemas.site_setting import SiteSettingCreate, SiteSettingOut, SiteSettingUpdate
from bountyhub.services import site_settings as settings_service

router = APIRouter(prefix="/settings", tags=["settings"])
logger = logging.getLogger(__name__)


@router.get("")
def list_settings(request: Request, db: Session = Depends(get_db)):
    return success_response_payload(request, data=dump_many(SiteSettingOut, settings_service.list_settings(db)))


@router.get("/{key}")
def get_setting(key: str, request: Request, db: Session = Depends(get_db)):
    setting = settings_service.get_setting_by_key(db, key)
    return success_response_payload(request, data=dump(SiteSettingOut, setting))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_setting(
    payload: SiteSettingCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin_user),
):
    setting = settings_service.create_setting(db, key=payload.key, value=payload.value, updated_by_id=admin.id)
    log_business_event(logger, request, event="settings.create", actor_id=admin.id, key=setting.key)
    return success_response_payload(request, data=dump(SiteSettingOut, setting), message="Setting created successfully")


@router.put("/{key}")
def update_setting(
    key: str,
    payload: SiteSettingUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin_user),
):
    current = settings_service.get_setting_by_key(db, key)
    fields = {"value": payload.value, "updated_by_id": admin.id}
    if payload.key is not None:
        fields["key"] = payload.key
    setting = settings_service.update_setting(db, current.id, **fields)
    log_business_event(logger, request, event="settings.update", actor_id=admin.id, key=key)
    return success_response_payload(request, data=dump(SiteSettingOut, setting), message="Setting updated successfully")


@router.delete("/{key}")
def delete_setting(
    key: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin_user),
):
    settings_service.delete_setting_by_key(db, key)
    log_business_event(logger, request, event="settings.delete", actor_id=admin.id, key=key)
    return success_response_payload(request, data=None, message="Setting deleted successfully")
