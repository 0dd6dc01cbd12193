"""Daily summary: what was worked on and for how long on one calendar day."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.task_status import empty_breakdown
from ..crud.tasks import list_tasks
from ..crud.time_logs import list_by_date_range
from .timecalc import day_window, elapsed_seconds, local_date, utcnow


def build_daily_summary(
    db: Session,
    user_id: str,
    target_date: date | None = None,
    *,
    tz: str | None = None,
    now: datetime | None = None,
) -> Dict[str, Any]:
    """Aggregate one user's tracked time for ``target_date`` (today by default).

    The day is taken in ``tz`` (the server zone unless given). Only tasks with
    at least one log starting that day count as worked on. The total adds the
    live elapsed time of a timer that started that day and is still running.
    """

    tz = tz or settings.TZ
    now = now or utcnow()
    day = target_date or local_date(now, tz)
    window_start, window_end = day_window(day, tz)

    time_logs = list_by_date_range(db, user_id, window_start, window_end)
    referenced = {log.task_id for log in time_logs}

    tasks_worked_on = [task for task in list_tasks(db, user_id) if task.id in referenced]

    total_time = sum(log.duration for log in time_logs if log.end_time is not None)
    active_timer = next((log for log in time_logs if log.end_time is None), None)
    if active_timer is not None:
        total_time += elapsed_seconds(active_timer.start_time, now)

    status_breakdown = empty_breakdown()
    for task in tasks_worked_on:
        if task.status in status_breakdown:
            status_breakdown[task.status] += 1

    return {
        "date": day.isoformat(),
        "tasks_worked_on": tasks_worked_on,
        "total_time": total_time,
        "status_breakdown": status_breakdown,
        "time_logs": time_logs,
        "active_timer": active_timer,
    }
