from datetime import datetime, timedelta

from sqlalchemy import update
from sqlalchemy.orm import Session

from bountyhub.core.config import PASSWORD_RESET_EXPIRE_MINUTES
from bountyhub.core.errors import NotFound
from bountyhub.core.security import generate_reset_token, hash_password
from bountyhub.db.base import utc_now_naive
from bountyhub.db.models.password_reset import PasswordReset
from bountyhub.db.models.user import User
from bountyhub.services import crud


def create_password_reset(db: Session, **fields) -> PasswordReset:
    return crud.create(db, PasswordReset, fields)


def issue_password_reset(db: Session, user: User, *, expire_minutes: int | None = None) -> PasswordReset:
    minutes = PASSWORD_RESET_EXPIRE_MINUTES if expire_minutes is None else expire_minutes
    return create_password_reset(
        db,
        user_id=user.id,
        token=generate_reset_token(),
        expires_at=utc_now_naive() + timedelta(minutes=minutes),
    )


def get_password_reset(db: Session, reset_id: str) -> PasswordReset:
    return crud.get_or_fail(db, PasswordReset, reset_id)


def find_usable_reset(db: Session, token: str, *, now: datetime | None = None) -> PasswordReset | None:
    reset = crud.find_one(db, PasswordReset, {"token": token, "used": False})
    if reset is None:
        return None
    if reset.expires_at <= (now or utc_now_naive()):
        return None
    return reset


def consume_password_reset(
    db: Session,
    reset: PasswordReset,
    new_password: str,
    *,
    now: datetime | None = None,
) -> User:
    """Spend a reset token and set the new password in one transaction.

    The token is claimed with a conditional UPDATE so a spent or expired token
    can never be claimed twice, even by concurrent requests.
    """
    reset_id, user_id = reset.id, reset.user_id
    claim = (
        update(PasswordReset)
        .where(
            PasswordReset.id == reset_id,
            PasswordReset.used.is_(False),
            PasswordReset.expires_at > (now or utc_now_naive()),
        )
        .values(used=True)
        .execution_options(synchronize_session=False)
    )
    if db.execute(claim).rowcount != 1:
        db.rollback()
        raise NotFound("PasswordReset", {"id": reset_id, "used": False})
    crud.update_many(db, User, {"id": user_id}, {"hashed_password": hash_password(new_password)}, commit=False)
    db.commit()
    return crud.get_or_fail(db, User, user_id)


def delete_password_reset(db: Session, reset_id: str) -> None:
    crud.delete(db, PasswordReset, reset_id)
