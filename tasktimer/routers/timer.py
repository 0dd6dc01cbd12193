from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..core.errors import ValidationError
from ..db.session import get_db
from ..deps.auth import AuthContext, require_user
from ..schemas.time_log import (
    ActiveTimerOut,
    TimeLogEnvelope,
    TimeLogOut,
    TimerStartRequest,
    TimerStopOut,
    TimerStopRequest,
)
from ..services.timer import get_active_timer, start_timer, stop_timer

router = APIRouter(prefix="/timer", tags=["timer"])


@router.get("/active", response_model=ActiveTimerOut)
def api_active_timer(auth: AuthContext = Depends(require_user), db: Session = Depends(get_db)):
    active = get_active_timer(db, auth.user_id)
    return ActiveTimerOut(active_timer=TimeLogOut.model_validate(active) if active else None)


@router.post("/start", response_model=TimeLogEnvelope, status_code=status.HTTP_201_CREATED)
def api_start_timer(
    payload: TimerStartRequest,
    auth: AuthContext = Depends(require_user),
    db: Session = Depends(get_db),
):
    if not payload.task_id:
        raise ValidationError("taskId is required")
    time_log = start_timer(db, auth.user_id, payload.task_id)
    return TimeLogEnvelope(time_log=TimeLogOut.model_validate(time_log))


@router.post("/stop", response_model=TimerStopOut)
def api_stop_timer(
    payload: Optional[TimerStopRequest] = None,
    auth: AuthContext = Depends(require_user),
    db: Session = Depends(get_db),
):
    task_id = payload.task_id if payload else None
    stopped = stop_timer(db, auth.user_id, task_id)
    return TimerStopOut(message="Timer stopped successfully", duration=stopped.duration)
