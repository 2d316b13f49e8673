from typing import Any, Literal

from sqlalchemy.orm import Session

from bountyhub.core.security import hash_password, verify_password
from bountyhub.db.base import utc_now_naive
from bountyhub.db.models.user import User, UserRole
from bountyhub.services import crud


def coerce_role(value: UserRole | str | None) -> UserRole | None:
    if value is None or isinstance(value, UserRole):
        return value
    try:
        return UserRole(str(value).strip().upper())
    except ValueError as exc:
        raise ValueError(f"Unknown role {value!r}") from exc


def normalize_email(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip().lower() or None


def _prepare(fields: dict[str, Any]) -> dict[str, Any]:
    values = dict(fields)
    password = values.pop("password", None)
    if password is not None:
        values["hashed_password"] = hash_password(password)
    if "role" in values:
        values["role"] = coerce_role(values["role"])
    if "email" in values:
        values["email"] = normalize_email(values["email"])
    return values


def create_user(db: Session, **fields) -> User:
    return crud.create(db, User, _prepare(fields))


def get_user(db: Session, user_id: str, *, include: tuple[str, ...] = ()) -> User:
    return crud.get_or_fail(db, User, user_id, include=include)


def find_user_by_email(db: Session, email: str) -> User | None:
    normalized = normalize_email(email)
    if normalized is None:
        return None
    return crud.find_one(db, User, {"email": normalized})


def list_users(
    db: Session,
    *,
    role: UserRole | str | None = None,
    offset: int = 0,
    limit: int | None = None,
) -> tuple[list[User], int]:
    filters = {"role": coerce_role(role)} if role else {}
    items = crud.find(db, User, filters, order_by="created_at", descending=True, offset=offset, limit=limit)
    return items, crud.count(db, User, filters)


def search_users(db: Session, term: str, *, by: Literal["email", "id"] = "email") -> list[User]:
    if by == "id":
        user = crud.get(db, User, term.strip())
        return [user] if user else []
    needle = term.strip().lower()
    return list(db.query(User).filter(User.email.contains(needle, autoescape=True)).order_by(User.email.asc()).all())


def update_user(db: Session, user_id: str, **fields) -> User:
    return crud.update(db, User, user_id, _prepare(fields))


def delete_user(db: Session, user_id: str) -> None:
    crud.delete(db, User, user_id)


def authenticate(db: Session, email: str, password: str) -> User | None:
    user = find_user_by_email(db, email)
    if user is None or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def record_login(db: Session, user: User) -> User:
    return crud.update(db, User, user.id, {"last_login": utc_now_naive()})
