import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from bountyhub.api.common import dump
from bountyhub.core.api_response import success_response_payload
from bountyhub.core.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    AUTH_COOKIE_NAME,
    COOKIE_DOMAIN,
    COOKIE_SECURE,
    cors_origins,
    password_reset_dev_show_token,
)
from bountyhub.core.errors import NotFound
from bountyhub.core.mailer import send_password_reset_email
from bountyhub.core.observability import log_business_event
from bountyhub.core.security import get_current_user, token_for_user
from bountyhub.db.models.user import User, UserRole
from bountyhub.db.session import get_db
from bountyhub.schemas.password_reset import PasswordResetConfirm, PasswordResetRequest
from bountyhub.schemas.user import LoginIn, UserOut, UserRegister
from bountyhub.services.password_resets import consume_password_reset, find_usable_reset, issue_password_reset
from bountyhub.services.site_settings import setting_enabled
from bountyhub.services.users import authenticate, create_user, find_user_by_email, record_login

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        AUTH_COOKIE_NAME,
        token,
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
        domain=COOKIE_DOMAIN,
        secure=COOKIE_SECURE,
        httponly=True,
        samesite="none" if COOKIE_SECURE else "lax",
    )


def _session_payload(user: User, token: str) -> dict:
    return {"user": dump(UserOut, user), "access_token": token, "token_type": "bearer"}


def _reset_url() -> str | None:
    origins = cors_origins()
    return f"{origins[0]}/reset-password" if origins else None


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, request: Request, response: Response, db: Session = Depends(get_db)):
    if not setting_enabled(db, "allow_registration", default=True):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="We're not accepting new users at the moment. Please try again later.",
        )
    user = create_user(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=UserRole.USER,
    )
    token = token_for_user(user)
    _set_auth_cookie(response, token)
    log_business_event(logger, request, event="auth.register", actor_id=user.id)
    return success_response_payload(
        request,
        data=_session_payload(user, token),
        message="Account created successfully",
    )


@router.post("/login")
def login(payload: LoginIn, request: Request, response: Response, db: Session = Depends(get_db)):
    user = authenticate(db, payload.email, payload.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email or password")
    user = record_login(db, user)
    token = token_for_user(user)
    _set_auth_cookie(response, token)
    log_business_event(logger, request, event="auth.login", actor_id=user.id)
    return success_response_payload(request, data=_session_payload(user, token), message="User logged in successfully")


@router.get("/logout")
def logout(request: Request, response: Response):
    response.delete_cookie(AUTH_COOKIE_NAME, path="/", domain=COOKIE_DOMAIN)
    return success_response_payload(request, data=None, message="Logged out")


@router.get("/me")
def me(request: Request, current_user: User = Depends(get_current_user)):
    return success_response_payload(request, data=dump(UserOut, current_user))


@router.post("/password-reset")
def request_password_reset(payload: PasswordResetRequest, request: Request, db: Session = Depends(get_db)):
    data: dict = {"status": "requested"}
    user = find_user_by_email(db, payload.email)
    if user is not None and user.is_active:
        reset = issue_password_reset(db, user)
        sent = send_password_reset_email(user.email, reset.token, _reset_url())
        if not sent and password_reset_dev_show_token():
            data["dev_token"] = reset.token
        log_business_event(logger, request, event="auth.password_reset_requested", actor_id=user.id, sent=sent)
    return success_response_payload(
        request,
        data=data,
        message="If the account exists, a reset link has been sent.",
    )


@router.post("/password-reset/confirm")
def confirm_password_reset(payload: PasswordResetConfirm, request: Request, db: Session = Depends(get_db)):
    invalid = HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired reset token")
    reset = find_usable_reset(db, payload.token)
    if reset is None:
        raise invalid
    try:
        user = consume_password_reset(db, reset, payload.password)
    except NotFound as exc:
        raise invalid from exc
    log_business_event(logger, request, event="auth.password_reset_completed", actor_id=user.id)
    return success_response_payload(request, data=None, message="Password updated successfully")
