from sqlalchemy.orm import Session

from bountyhub.db.models.site_setting import SiteSetting
from bountyhub.services import crud

TRUE_VALUES = {"1", "true", "yes", "on"}


def create_setting(db: Session, *, key: str, value: str, updated_by_id: str) -> SiteSetting:
    return crud.create(db, SiteSetting, {"key": key, "value": value, "updated_by_id": updated_by_id})


def list_settings(db: Session) -> list[SiteSetting]:
    return crud.find(db, SiteSetting, order_by="key")


def get_setting(db: Session, setting_id: str) -> SiteSetting:
    return crud.get_or_fail(db, SiteSetting, setting_id)


def get_setting_by_key(db: Session, key: str) -> SiteSetting:
    return crud.find_one_or_fail(db, SiteSetting, {"key": key})


def setting_enabled(db: Session, key: str, default: bool = False) -> bool:
    setting = crud.find_one(db, SiteSetting, {"key": key})
    if setting is None:
        return default
    return setting.value.strip().lower() in TRUE_VALUES


def update_setting(db: Session, setting_id: str, **fields) -> SiteSetting:
    return crud.update(db, SiteSetting, setting_id, fields)


def update_setting_by_key(db: Session, key: str, *, value: str, updated_by_id: str) -> SiteSetting:
    setting = get_setting_by_key(db, key)
    return crud.update(db, SiteSetting, setting.id, {"value": value, "updated_by_id": updated_by_id})


def delete_setting_by_key(db: Session, key: str) -> None:
    setting = get_setting_by_key(db, key)
    crud.delete(db, SiteSetting, setting.id)
