"""Start/stop logic for task timers.

A user is either idle (no running log) or running exactly one timer: starting
a second timer while one is running is refused. The check is a plain read
followed by an insert, so two concurrent starts can both succeed; nothing in
the application serialises them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from ..core.errors import NotFoundError, TaskLockedError, TimerConflictError
from ..core.task_status import STATUS_IN_PROGRESS, STATUS_PENDING, is_locked
from ..crud.tasks import require_task, set_task_status
from ..crud.time_logs import (
    create_time_log,
    find_active_for_task,
    find_active_for_user,
    get_time_log,
    stop_time_log,
)
from ..models.time_log import TimeLog
from .timecalc import elapsed_seconds, utcnow

logger = logging.getLogger(__name__)

NO_ACTIVE_TIMER = "No active timer found"


@dataclass
class StoppedTimer:
    time_log: TimeLog
    duration: int


def get_active_timer(db: Session, user_id: str) -> TimeLog | None:
    return find_active_for_user(db, user_id)


def start_timer(db: Session, user_id: str, task_id: str, *, now: datetime | None = None) -> TimeLog:
    task = require_task(db, task_id, user_id)
    if is_locked(task.status):
        raise TaskLockedError("Cannot start timer for completed tasks")
    if find_active_for_user(db, user_id) is not None:
        raise TimerConflictError()

    now = now or utcnow()
    time_log = create_time_log(db, user_id=user_id, task_id=task.id, start_time=now)
    if task.status == STATUS_PENDING:
        set_task_status(db, task, STATUS_IN_PROGRESS, now=now)

    logger.info(
        "timer.started",
        extra={"extra_data": {"user_id": user_id, "task_id": task.id, "time_log_id": time_log.id}},
    )
    return time_log


def stop_timer(
    db: Session,
    user_id: str,
    task_id: str | None = None,
    *,
    now: datetime | None = None,
) -> StoppedTimer:
    """Stop the running log for ``task_id``, or the user's running log when omitted.

    The duration is floored to whole seconds and never clamped. The task's
    status is left as it is.
    """

    # Owner-scoped lookup; stop_time_log itself does not check ownership.
    if task_id:
        active = find_active_for_task(db, user_id, task_id)
    else:
        active = find_active_for_user(db, user_id)
    if active is None:
        raise NotFoundError(NO_ACTIVE_TIMER)

    end_time = now or utcnow()
    duration = elapsed_seconds(active.start_time, end_time)
    stop_time_log(db, active.id, end_time, duration)

    logger.info(
        "timer.stopped",
        extra={
            "extra_data": {
                "user_id": user_id,
                "task_id": active.task_id,
                "time_log_id": active.id,
                "duration": duration,
            }
        },
    )
    stopped = get_time_log(db, active.id, user_id) or active
    return StoppedTimer(time_log=stopped, duration=duration)
