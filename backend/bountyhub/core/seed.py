import logging
import os
from dataclasses import dataclass

from sqlalchemy.orm import Session

from bountyhub.core.config import DEFAULT_SITE_SETTINGS
from bountyhub.db.models.site_setting import SiteSetting
from bountyhub.db.models.user import User, UserRole
from bountyhub.services import crud
from bountyhub.services.users import create_user, find_user_by_email, normalize_email, update_user

logger = logging.getLogger(__name__)


@dataclass
class SeedResult:
    admin_created: bool = False
    admin_promoted: bool = False
    settings_created: int = 0


def get_seed_admin_credentials() -> tuple[str | None, str | None]:
    return normalize_email(os.getenv("ADMIN_EMAIL")), os.getenv("ADMIN_PASSWORD")


def ensure_admin(db: Session, email: str, password: str, result: SeedResult) -> User:
    existing = find_user_by_email(db, email)
    if existing is None:
        result.admin_created = True
        logger.info("seed_admin_created email=%s", email)
        return create_user(
            db,
            name="System Administrator",
            email=email,
            password=password,
            role=UserRole.ADMIN,
            is_active=True,
        )
    if existing.role != UserRole.ADMIN or not existing.is_active:
        result.admin_promoted = True
        logger.info("seed_admin_promoted email=%s", email)
        return update_user(db, existing.id, role=UserRole.ADMIN, is_active=True)
    return existing


def ensure_default_settings(db: Session, admin: User, result: SeedResult) -> None:
    for key, value in DEFAULT_SITE_SETTINGS.items():
        if crud.find_one(db, SiteSetting, {"key": key}) is not None:
            continue
        crud.create(db, SiteSetting, {"key": key, "value": value, "updated_by_id": admin.id})
        result.settings_created += 1


def seed_database(db: Session, admin_email: str, admin_password: str) -> SeedResult:
    result = SeedResult()
    admin = ensure_admin(db, admin_email, admin_password, result)
    ensure_default_settings(db, admin, result)
    logger.info(
        "seed_completed admin_created=%s admin_promoted=%s settings_created=%s",
        result.admin_created,
        result.admin_promoted,
        result.settings_created,
    )
    return result
