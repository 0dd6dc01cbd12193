from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from ..core.config import settings
from ..core.errors import AuthError
from ..core.security import resolve_session
from ..middlewares import principal_ctx_var


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    email: str


def _set_principal(request: Request, principal: str) -> None:
    principal_ctx_var.set(principal)
    request.state.principal = principal


def get_optional_user(request: Request) -> AuthContext | None:
    """Identity carried by the session cookie, or ``None``. Never raises."""

    payload = resolve_session(request.cookies.get(settings.SESSION_COOKIE_NAME))
    if payload is None:
        return None
    _set_principal(request, f"user:{payload.user_id}")
    return AuthContext(user_id=payload.user_id, email=payload.email)


def require_user(request: Request) -> AuthContext:
    context = get_optional_user(request)
    if context is None:
        raise AuthError()
    return context
