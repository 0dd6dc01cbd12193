import os
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from tasktimer.crud.time_logs import (
    create_time_log,
    find_active_for_task,
    find_active_for_user,
    find_all_active_for_user,
    get_time_log,
    list_by_date_range,
    list_for_task,
    stop_time_log,
    total_duration_for_task,
)
from tasktimer.db.indexes import init_schema

T0 = datetime(2024, 5, 1, 9, 0, 0)


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    init_schema(engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def _closed(db, user_id, task_id, start, seconds):
    return create_time_log(
        db,
        user_id,
        task_id,
        start_time=start,
        end_time=start + timedelta(seconds=seconds),
        duration=seconds,
    )


def test_active_lookups_are_owner_and_task_scoped(db_session):
    _closed(db_session, "alice", "task-a", T0, 60)
    running = create_time_log(db_session, "alice", "task-b", start_time=T0 + timedelta(minutes=5))
    create_time_log(db_session, "bob", "task-c", start_time=T0)

    assert find_active_for_user(db_session, "alice").id == running.id
    assert [log.id for log in find_all_active_for_user(db_session, "alice")] == [running.id]
    assert find_active_for_task(db_session, "alice", "task-b").id == running.id
    assert find_active_for_task(db_session, "alice", "task-a") is None
    assert find_active_for_task(db_session, "bob", "task-b") is None
    assert find_active_for_user(db_session, "carol") is None


def test_first_active_is_earliest_started(db_session):
    later = create_time_log(db_session, "alice", "task-b", start_time=T0 + timedelta(minutes=1))
    earlier = create_time_log(db_session, "alice", "task-a", start_time=T0)

    assert find_active_for_user(db_session, "alice").id == earlier.id
    assert [log.id for log in find_all_active_for_user(db_session, "alice")] == [earlier.id, later.id]


def test_stop_time_log_sets_end_and_duration(db_session):
    log = create_time_log(db_session, "alice", "task-a", start_time=T0)
    end = T0 + timedelta(seconds=42)

    assert stop_time_log(db_session, log.id, end, 42) == 1

    stored = get_time_log(db_session, log.id, "alice")
    assert stored.end_time == end
    assert stored.duration == 42
    assert not stored.is_active
    assert stop_time_log(db_session, "0" * 32, end, 1) == 0


def test_list_for_task_newest_start_first(db_session):
    first = _closed(db_session, "alice", "task-a", T0, 10)
    second = _closed(db_session, "alice", "task-a", T0 + timedelta(hours=1), 20)
    _closed(db_session, "alice", "task-b", T0 + timedelta(hours=2), 30)
    _closed(db_session, "bob", "task-a", T0 + timedelta(hours=3), 40)

    assert [log.id for log in list_for_task(db_session, "task-a", "alice")] == [second.id, first.id]


def test_list_by_date_range_is_inclusive(db_session):
    start = datetime(2024, 5, 1, 0, 0, 0)
    end = datetime(2024, 5, 1, 23, 59, 59, 999999)
    at_start = _closed(db_session, "alice", "task-a", start, 5)
    at_end = create_time_log(db_session, "alice", "task-a", start_time=end)
    _closed(db_session, "alice", "task-a", start - timedelta(microseconds=1), 5)
    _closed(db_session, "alice", "task-a", end + timedelta(microseconds=1), 5)
    _closed(db_session, "bob", "task-a", start + timedelta(hours=1), 5)

    logs = list_by_date_range(db_session, "alice", start, end)

    assert [log.id for log in logs] == [at_end.id, at_start.id]


def test_total_duration_counts_only_stopped_logs(db_session):
    assert total_duration_for_task(db_session, "task-a", "alice") == 0

    _closed(db_session, "alice", "task-a", T0, 30)
    _closed(db_session, "alice", "task-a", T0 + timedelta(hours=1), 45)
    create_time_log(db_session, "alice", "task-a", start_time=T0 + timedelta(hours=2), duration=999)
    _closed(db_session, "alice", "task-b", T0, 100)
    _closed(db_session, "bob", "task-a", T0, 100)

    assert total_duration_for_task(db_session, "task-a", "alice") == 75
