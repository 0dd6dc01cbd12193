"""CRUD helpers for tasks.

Every lookup filters on both the task id and the owner, so a task belonging
to someone else behaves exactly like one that does not exist.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError, TaskLockedError, ValidationError
from ..core.task_status import STATUS_CHOICES, STATUS_PENDING, is_locked
from ..models.task import Task
from ..services.timecalc import utcnow

TASK_NOT_FOUND = "Task not found"


def _clean_title(value: Any) -> str:
    title = value.strip() if isinstance(value, str) else ""
    if not title:
        raise ValidationError("Title is required")
    return title


def _check_status(value: Any) -> str:
    if value not in STATUS_CHOICES:
        raise ValidationError(f"status must be one of: {', '.join(STATUS_CHOICES)}")
    return value


def list_tasks(db: Session, user_id: str) -> list[Task]:
    stmt = select(Task).where(Task.user_id == user_id).order_by(desc(Task.created_at))
    return list(db.execute(stmt).scalars().all())


def get_task(db: Session, task_id: str, user_id: str) -> Task | None:
    stmt = select(Task).where(Task.id == task_id, Task.user_id == user_id)
    return db.execute(stmt).scalars().first()


def require_task(db: Session, task_id: str, user_id: str) -> Task:
    task = get_task(db, task_id, user_id)
    if task is None:
        raise NotFoundError(TASK_NOT_FOUND)
    return task


def create_task(
    db: Session,
    user_id: str,
    title: str,
    description: str | None = "",
    status: str = STATUS_PENDING,
    *,
    now: datetime | None = None,
) -> Task:
    now = now or utcnow()
    task = Task(
        user_id=user_id,
        title=_clean_title(title),
        description=description or "",
        status=_check_status(status),
        created_at=now,
        updated_at=now,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def update_task(
    db: Session,
    task_id: str,
    user_id: str,
    changes: Mapping[str, Any],
    *,
    now: datetime | None = None,
) -> Task:
    """Apply a partial update to an owned, non-completed task.

    ``changes`` holds only the fields the caller actually sent (title,
    description, status); anything else is ignored.
    """

    task = require_task(db, task_id, user_id)
    if is_locked(task.status):
        raise TaskLockedError("Cannot edit completed tasks")

    # Validate everything before touching the row.
    values: dict[str, Any] = {}
    if "title" in changes:
        values["title"] = _clean_title(changes["title"])
    if "description" in changes:
        values["description"] = changes["description"] or ""
    if "status" in changes:
        values["status"] = _check_status(changes["status"])

    for field, value in values.items():
        setattr(task, field, value)
    task.updated_at = now or utcnow()
    db.commit()
    db.refresh(task)
    return task


def set_task_status(db: Session, task: Task, status: str, *, now: datetime | None = None) -> Task:
    """Internal status transition used by the timer; skips the edit lock check."""

    task.status = _check_status(status)
    task.updated_at = now or utcnow()
    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, task_id: str, user_id: str) -> None:
    task = require_task(db, task_id, user_id)
    if is_locked(task.status):
        raise TaskLockedError("Cannot delete completed tasks")
    db.delete(task)
    db.commit()
