"""Idempotent schema bootstrap run once at startup."""

from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .session import Base

# Importing the models registers their tables (and indexes) with ``Base.metadata``.
from ..models import task as _task  # noqa: F401
from ..models import time_log as _time_log  # noqa: F401
from ..models import user as _user  # noqa: F401

logger = logging.getLogger(__name__)


def _existing_indexes(engine: Engine, table: str) -> set[str]:
    return {record["name"] for record in inspect(engine).get_indexes(table) if record.get("name")}


def ensure_indexes(engine: Engine) -> list[str]:
    """Create any declared index the database is missing.

    Tables created by ``create_all`` already carry their indexes; this covers
    databases whose tables predate an index. Failures are logged and skipped.
    Returns the names of the indexes that were created.
    """

    created: list[str] = []
    for table in Base.metadata.sorted_tables:
        try:
            present = _existing_indexes(engine, table.name)
        except SQLAlchemyError:
            logger.warning("db.index_inspect_failed", exc_info=True, extra={"extra_data": {"table": table.name}})
            continue
        for index in sorted(table.indexes, key=lambda item: item.name or ""):
            if index.name in present:
                continue
            try:
                index.create(bind=engine, checkfirst=True)
            except SQLAlchemyError:
                logger.warning("db.indexes_failed", exc_info=True, extra={"extra_data": {"index": index.name}})
                continue
            created.append(index.name)
    if created:
        logger.info("db.indexes_created", extra={"extra_data": {"indexes": created}})
    return created


def init_schema(engine: Engine) -> None:
    """Create missing tables, then make sure every index exists."""

    Base.metadata.create_all(bind=engine)
    ensure_indexes(engine)
