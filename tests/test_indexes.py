"""Schema bootstrap: declared indexes exist, the email index is unique, failures are skipped."""

import logging
import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import Index, create_engine, inspect, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from tasktimer.core.errors import DuplicateEmailError
from tasktimer.crud.users import create_user, get_user_by_email
from tasktimer.db import indexes as indexes_module
from tasktimer.db.indexes import ensure_indexes, init_schema

EXPECTED_INDEXES = {
    "users": {"ux_users_email"},
    "tasks": {"ix_tasks_user_created"},
    "time_logs": {"ix_time_logs_user_end", "ix_time_logs_user_task_end", "ix_time_logs_user_start"},
}


@pytest.fixture()
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    init_schema(engine)
    try:
        yield engine
    finally:
        engine.dispose()


def test_init_schema_creates_declared_indexes(engine):
    inspector = inspect(engine)
    for table, names in EXPECTED_INDEXES.items():
        present = {index["name"] for index in inspector.get_indexes(table)}
        assert names <= present


def test_init_schema_is_idempotent(engine):
    init_schema(engine)
    assert ensure_indexes(engine) == []


def test_missing_index_is_recreated(engine):
    with engine.begin() as conn:
        conn.execute(text("DROP INDEX ix_time_logs_user_end"))

    assert ensure_indexes(engine) == ["ix_time_logs_user_end"]
    assert ensure_indexes(engine) == []


def test_unique_email_index_blocks_duplicates(engine):
    session = sessionmaker(bind=engine)()
    try:
        create_user(session, " Ada@Example.com ", "hash", "Ada")
        with pytest.raises(DuplicateEmailError):
            create_user(session, "ada@example.com", "other-hash", "Imposter")

        stored = get_user_by_email(session, "ADA@example.com")
        assert stored.email == "ada@example.com"
        assert stored.name == "Ada"
        assert session.execute(text("SELECT COUNT(*) FROM users")).scalar_one() == 1
    finally:
        session.close()


def _disk_full(*args, **kwargs):
    raise OperationalError("CREATE INDEX", {}, Exception("disk full"))


def test_index_creation_failure_is_logged_and_skipped(engine, monkeypatch, caplog):
    with engine.begin() as conn:
        conn.execute(text("DROP INDEX ix_time_logs_user_end"))
    monkeypatch.setattr(Index, "create", _disk_full)

    with caplog.at_level(logging.WARNING, logger="tasktimer.db.indexes"):
        assert ensure_indexes(engine) == []
        init_schema(engine)

    failed = [record for record in caplog.records if record.getMessage() == "db.indexes_failed"]
    assert len(failed) == 2
    assert all(record.levelno == logging.WARNING for record in failed)
    assert failed[0].extra_data == {"index": "ix_time_logs_user_end"}
    assert "ix_time_logs_user_end" not in {index["name"] for index in inspect(engine).get_indexes("time_logs")}

    monkeypatch.undo()
    assert ensure_indexes(engine) == ["ix_time_logs_user_end"]


def test_inspector_failure_skips_each_table(engine, monkeypatch, caplog):
    monkeypatch.setattr(indexes_module, "_existing_indexes", _disk_full)

    with caplog.at_level(logging.WARNING, logger="tasktimer.db.indexes"):
        assert ensure_indexes(engine) == []

    skipped = [record.extra_data["table"] for record in caplog.records if record.getMessage() == "db.index_inspect_failed"]
    assert sorted(skipped) == sorted(EXPECTED_INDEXES)
