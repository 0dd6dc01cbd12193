"""Error taxonomy and the handlers that turn it into JSON responses.

Repository and service code raises the ``AppError`` subclasses below; the
handlers registered by the application factory render them through a single
``ErrorEnvelope`` so clients always receive ``{"code", "message"}``.
Unexpected failures are logged with their traceback and reported to the
client only as a generic 500.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal_error"
    default_message = GENERIC_ERROR_MESSAGE

    def __init__(self, message: str | None = None, *, details: Any | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_message = "Invalid request"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    default_message = "Unauthorized"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not found"


class ConflictError(AppError):
    """The target exists but its current state does not allow the operation."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "conflict"
    default_message = "Operation not allowed in the current state"


class TaskLockedError(ConflictError):
    code = "task_completed"
    default_message = "Completed tasks cannot be changed"


class TimerConflictError(ConflictError):
    code = "timer_running"
    default_message = "Stop the current timer before starting a new one"


class DuplicateEmailError(ConflictError):
    code = "duplicate_email"
    default_message = "User already exists"


class InternalError(AppError):
    pass


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"code": code, "message": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("request.failed", exc_info=exc, extra={"extra_data": {"path": request.url.path}})
        return ErrorEnvelope(status_code=exc.status_code, code=exc.code, message=GENERIC_ERROR_MESSAGE)
    return ErrorEnvelope(status_code=exc.status_code, code=exc.code, message=exc.message, details=exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    message = detail if isinstance(detail, str) else "Error"
    details = detail if isinstance(detail, dict) else None
    return ErrorEnvelope(
        status_code=exc.status_code,
        code="http_error",
        message=message,
        details=details,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]
    return ErrorEnvelope(
        status_code=status.HTTP_400_BAD_REQUEST,
        code="validation_error",
        message="Validation failed",
        details={"errors": errors},
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("db.error", exc_info=exc, extra={"extra_data": {"path": request.url.path}})
    return ErrorEnvelope(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code=InternalError.code,
        message=GENERIC_ERROR_MESSAGE,
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("request.unhandled", exc_info=exc, extra={"extra_data": {"path": request.url.path}})
    return ErrorEnvelope(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code=InternalError.code,
        message=GENERIC_ERROR_MESSAGE,
    )
