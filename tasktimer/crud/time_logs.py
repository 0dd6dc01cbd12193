"""CRUD and query helpers for time logs.

All reads are owner-scoped. ``stop_time_log`` is the exception: it updates by
id alone, so callers must have fetched the log through an owner-scoped query
immediately beforehand.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import desc, func, select, update
from sqlalchemy.orm import Session

from ..models.time_log import TimeLog
from ..services.timecalc import utcnow


def create_time_log(
    db: Session,
    user_id: str,
    task_id: str,
    start_time: datetime,
    end_time: datetime | None = None,
    duration: int = 0,
) -> TimeLog:
    log = TimeLog(
        user_id=user_id,
        task_id=task_id,
        start_time=start_time,
        end_time=end_time,
        duration=duration,
        created_at=utcnow(),
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    return log


def _active_stmt(user_id: str):
    return (
        select(TimeLog)
        .where(TimeLog.user_id == user_id, TimeLog.end_time.is_(None))
        .order_by(TimeLog.start_time, TimeLog.created_at)
    )


def find_active_for_user(db: Session, user_id: str) -> TimeLog | None:
    """The user's running log; the earliest started one if several exist."""

    return db.execute(_active_stmt(user_id).limit(1)).scalars().first()


def find_all_active_for_user(db: Session, user_id: str) -> list[TimeLog]:
    return list(db.execute(_active_stmt(user_id)).scalars().all())


def find_active_for_task(db: Session, user_id: str, task_id: str) -> TimeLog | None:
    stmt = _active_stmt(user_id).where(TimeLog.task_id == task_id).limit(1)
    return db.execute(stmt).scalars().first()


def stop_time_log(db: Session, log_id: str, end_time: datetime, duration: int) -> int:
    """Close a log in one UPDATE. Returns the number of rows changed."""

    result = db.execute(
        update(TimeLog)
        .where(TimeLog.id == log_id)
        .values(end_time=end_time, duration=duration)
    )
    db.commit()
    return result.rowcount


def get_time_log(db: Session, log_id: str, user_id: str) -> TimeLog | None:
    stmt = select(TimeLog).where(TimeLog.id == log_id, TimeLog.user_id == user_id)
    return db.execute(stmt).scalars().first()


def list_for_task(db: Session, task_id: str, user_id: str) -> list[TimeLog]:
    stmt = (
        select(TimeLog)
        .where(TimeLog.task_id == task_id, TimeLog.user_id == user_id)
        .order_by(desc(TimeLog.start_time))
    )
    return list(db.execute(stmt).scalars().all())


def list_by_date_range(db: Session, user_id: str, start: datetime, end: datetime) -> list[TimeLog]:
    """Logs whose ``start_time`` lies within [start, end], newest first."""

    stmt = (
        select(TimeLog)
        .where(
            TimeLog.user_id == user_id,
            TimeLog.start_time >= start,
            TimeLog.start_time <= end,
        )
        .order_by(desc(TimeLog.start_time))
    )
    return list(db.execute(stmt).scalars().all())


def total_duration_for_task(db: Session, task_id: str, user_id: str) -> int:
    stmt = select(func.coalesce(func.sum(TimeLog.duration), 0)).where(
        TimeLog.task_id == task_id,
        TimeLog.user_id == user_id,
        TimeLog.end_time.is_not(None),
    )
    return int(db.execute(stmt).scalar_one())
