from __future__ import annotations

from typing import Optional

from .common import ApiModel, UtcDateTime


class TimeLogOut(ApiModel):
    id: str
    user_id: str
    task_id: str
    start_time: UtcDateTime
    end_time: Optional[UtcDateTime] = None
    duration: int
    created_at: UtcDateTime


class TimeLogEnvelope(ApiModel):
    time_log: TimeLogOut


class TimeLogList(ApiModel):
    time_logs: list[TimeLogOut]
    total_time: int


class ActiveTimerOut(ApiModel):
    active_timer: Optional[TimeLogOut] = None


class TimerStartRequest(ApiModel):
    task_id: Optional[str] = None


class TimerStopRequest(ApiModel):
    task_id: Optional[str] = None


class TimerStopOut(ApiModel):
    message: str
    duration: int
