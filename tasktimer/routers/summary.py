from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db.session import get_db
from ..deps.auth import AuthContext, require_user
from ..schemas.summary import DailySummary
from ..schemas.task import TaskOut
from ..schemas.time_log import TimeLogOut
from ..services.summary import build_daily_summary

router = APIRouter(prefix="/summary", tags=["summary"])


@router.get("", response_model=DailySummary)
def api_daily_summary(
    target_date: Optional[date] = Query(default=None, alias="date", description="YYYY-MM-DD; defaults to today"),
    auth: AuthContext = Depends(require_user),
    db: Session = Depends(get_db),
):
    summary = build_daily_summary(db, auth.user_id, target_date)
    active = summary["active_timer"]
    return DailySummary(
        date=summary["date"],
        tasks_worked_on=[TaskOut.model_validate(task) for task in summary["tasks_worked_on"]],
        total_time=summary["total_time"],
        status_breakdown=summary["status_breakdown"],
        time_logs=[TimeLogOut.model_validate(log) for log in summary["time_logs"]],
        active_timer=TimeLogOut.model_validate(active) if active else None,
    )
