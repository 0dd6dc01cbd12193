"""Password hashing and signed session tokens.

Passwords are hashed with bcrypt. Sessions are HS256 JWTs carrying the user
id (``sub``) and email, valid for ``JWT_SESSION_TTL_DAYS`` days, and travel
in an HttpOnly cookie set by the auth router.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from .config import settings

ALGORITHM = "HS256"
AUDIENCE = "tasktimer-clients"
ISSUER = "tasktimer"
SESSION_TOKEN_TYPE = "session"

# bcrypt only looks at the first 72 bytes; newer releases raise instead of truncating.
_BCRYPT_MAX_BYTES = 72


class TokenPayload(BaseModel):
    sub: str
    email: str
    exp: datetime
    iat: datetime
    typ: str
    aud: str
    iss: str

    @property
    def user_id(self) -> str:
        return self.sub


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def issue_session_token(user_id: str, email: str, *, expires_delta: timedelta | None = None) -> str:
    now = _now()
    delta = expires_delta if expires_delta is not None else timedelta(days=settings.JWT_SESSION_TTL_DAYS)
    payload: dict[str, Any] = {
        "sub": user_id,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int((now + delta).timestamp()),
        "typ": SESSION_TOKEN_TYPE,
        "aud": AUDIENCE,
        "iss": ISSUER,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def decode_session_token(token: str) -> TokenPayload:
    try:
        decoded = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[ALGORITHM],
            audience=AUDIENCE,
            issuer=ISSUER,
        )
    except JWTError as exc:
        raise ValueError("Invalid token") from exc
    try:
        payload = TokenPayload.model_validate(decoded)
    except ValidationError as exc:
        raise ValueError("Invalid token payload") from exc
    if payload.typ != SESSION_TOKEN_TYPE:
        raise ValueError("Invalid token type")
    return payload


def resolve_session(token: str | None) -> TokenPayload | None:
    """Return the payload of a valid session token, ``None`` for anything else."""

    if not token:
        return None
    try:
        return decode_session_token(token)
    except ValueError:
        return None
