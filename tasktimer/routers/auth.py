from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.errors import AuthError, DuplicateEmailError, ValidationError
from ..core.security import hash_password, issue_session_token, verify_password
from ..crud.users import create_user, get_user, get_user_by_email, normalize_email
from ..db.session import get_db
from ..deps.auth import AuthContext, require_user
from ..models.user import User
from ..schemas.auth import LoginRequest, SignupRequest, UserEnvelope, UserOut
from ..schemas.common import MessageOut

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def _set_session_cookie(response: Response, user: User) -> None:
    token = issue_session_token(user.id, user.email)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.session_max_age,
        path="/",
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="strict",
    )


@router.post("/signup", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, response: Response, db: Session = Depends(get_db)):
    email = normalize_email(payload.email)
    name = (payload.name or "").strip()
    if not email or not payload.password or not name:
        raise ValidationError("All fields are required")
    if len(payload.password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters")
    if get_user_by_email(db, email) is not None:
        raise DuplicateEmailError()

    user = create_user(db, email=email, password_hash=hash_password(payload.password), name=name)
    _set_session_cookie(response, user)
    logger.info("auth.signup", extra={"extra_data": {"user_id": user.id}})
    return UserEnvelope(user=UserOut.model_validate(user))


@router.post("/login", response_model=UserEnvelope)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    if not payload.email or not payload.password:
        raise ValidationError("Email and password are required")

    user = get_user_by_email(db, payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("auth.login_failed")
        raise AuthError(INVALID_CREDENTIALS)

    _set_session_cookie(response, user)
    logger.info("auth.login", extra={"extra_data": {"user_id": user.id}})
    return UserEnvelope(user=UserOut.model_validate(user))


@router.post("/logout", response_model=MessageOut)
def logout(response: Response):
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="strict",
    )
    return MessageOut(message="Logged out successfully")


@router.get("/me", response_model=UserEnvelope)
def me(auth: AuthContext = Depends(require_user), db: Session = Depends(get_db)):
    user = get_user(db, auth.user_id)
    if user is None:
        raise AuthError()
    return UserEnvelope(user=UserOut.model_validate(user))
