import os
import secrets
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from bountyhub.core.config import ACCESS_TOKEN_EXPIRE_MINUTES, API_PREFIX, AUTH_COOKIE_NAME
from bountyhub.db.models.user import User, UserRole
from bountyhub.db.session import get_db

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{API_PREFIX}/auth/login", auto_error=False)


def _get_secret_key() -> str:
    secret = os.getenv("SECRET_KEY")
    if not secret:
        raise RuntimeError("SECRET_KEY is not set")
    return secret


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(password, hashed)


def create_access_token(payload: dict, expires_minutes: int | None = None) -> str:
    to_encode = payload.copy()
    minutes = ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, _get_secret_key(), algorithm=ALGORITHM)


def token_for_user(user: User) -> str:
    role = user.role.value if user.role else UserRole.USER.value
    return create_access_token({"sub": user.id, "role": role})


def generate_reset_token() -> str:
    return secrets.token_urlsafe(48)


def _extract_token(request: Request, bearer: str | None) -> str | None:
    if bearer:
        return bearer
    return request.cookies.get(AUTH_COOKIE_NAME)


def get_current_user(
    request: Request,
    bearer: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Please login and try again!",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = _extract_token(request, bearer)
    if not token:
        raise credentials_exception
    try:
        payload = jwt.decode(token, _get_secret_key(), algorithms=[ALGORITHM])
        user_id = payload.get("sub")
        if not user_id:
            raise credentials_exception
    except JWTError as exc:
        raise credentials_exception from exc

    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise credentials_exception
    return user


def effective_role(user: User) -> UserRole:
    return user.role or UserRole.USER


def is_admin(user: User) -> bool:
    return effective_role(user) == UserRole.ADMIN


def require_roles(*roles: UserRole):
    allowed = set(roles)

    def _dependency(current_user: User = Depends(get_current_user)) -> User:
        if effective_role(current_user) not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to access this resource",
            )
        return current_user

    return _dependency


require_admin_user = require_roles(UserRole.ADMIN)
