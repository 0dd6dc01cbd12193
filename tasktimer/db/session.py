"""SQLAlchemy engine/session wiring.

A single ``Database`` is built by the application factory at startup and
kept on ``app.state.database``. Requests borrow sessions from it through the
``get_db`` dependency; nothing here holds a module-level connection.
"""

from __future__ import annotations

from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..core.config import settings

# ``Base`` is the parent class for every SQLAlchemy model defined in tasktimer/models.
Base = declarative_base()


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        # SQLite connections are shared across the worker threads FastAPI uses
        # for sync endpoints; an in-memory database must also stay on one connection.
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if _is_memory_sqlite(url):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
    )


class Database:
    """Connection pool plus session factory for one process."""

    def __init__(self, url: str | None = None, *, engine: Engine | None = None) -> None:
        self.url = url or settings.database_url
        self.engine = engine if engine is not None else build_engine(self.url)
        self.session_factory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency that yields a session and guarantees cleanup."""

    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()
