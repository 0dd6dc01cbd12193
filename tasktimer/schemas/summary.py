from __future__ import annotations

from typing import Optional

from pydantic import Field

from .common import ApiModel
from .task import TaskOut
from .time_log import TimeLogOut


class DailySummary(ApiModel):
    date: str = Field(..., description="Calendar day the summary covers (YYYY-MM-DD)")
    tasks_worked_on: list[TaskOut]
    total_time: int = Field(..., description="Seconds tracked that day, including a running timer")
    status_breakdown: dict[str, int]
    time_logs: list[TimeLogOut]
    active_timer: Optional[TimeLogOut] = None
