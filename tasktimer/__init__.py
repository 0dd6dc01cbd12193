"""Application factory and top-level wiring for the Task Timer service.

``create_app`` assembles configuration, the database pool, middleware,
routers, and error handling into one FastAPI instance:

* the ``Database`` (engine + session factory) is built once and stored on
  ``app.state.database``; every request borrows a session from it;
* tables and indexes are created during the lifespan startup, before the
  first request is served;
* every error is rendered through the JSON envelope in ``core.errors``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import AppSettings, settings as default_settings
from .core.errors import (
    AppError,
    app_error_handler,
    database_error_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from .db.indexes import init_schema
from .db.session import Database
from .middlewares import RequestIdMiddleware, SecurityHeadersMiddleware
from .routers import auth as auth_router
from .routers import summary as summary_router
from .routers import tasks as tasks_router
from .routers import timelogs as timelogs_router
from .routers import timer as timer_router

logger = logging.getLogger(__name__)


def create_app(settings: AppSettings | None = None, database: Database | None = None) -> FastAPI:
    settings = settings or default_settings
    database = database or Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            init_schema(database.engine)
        except SQLAlchemyError:
            logger.exception("db.schema_failed")
            raise
        logger.info("app.started", extra={"extra_data": {"app": settings.APP_NAME}})
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database

    # Registered last runs first: request ids wrap everything else.
    app.add_middleware(SecurityHeadersMiddleware)
    if settings.ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(auth_router.router)
    app.include_router(tasks_router.router)
    app.include_router(timelogs_router.router)
    app.include_router(timer_router.router)
    app.include_router(summary_router.router)

    @app.get("/health", tags=["health"])
    def health() -> dict[str, bool]:
        return {"ok": True}

    return app


__all__ = ["create_app"]
