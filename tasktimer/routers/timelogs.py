from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..crud.time_logs import list_for_task, total_duration_for_task
from ..db.session import get_db
from ..deps.auth import AuthContext, require_user
from ..schemas.time_log import TimeLogList, TimeLogOut

router = APIRouter(prefix="/timelogs", tags=["timelogs"])


@router.get("/{task_id}", response_model=TimeLogList)
def api_task_time_logs(task_id: str, auth: AuthContext = Depends(require_user), db: Session = Depends(get_db)):
    # Another user's task id yields an empty list, same as an unknown id.
    logs = list_for_task(db, task_id, auth.user_id)
    return TimeLogList(
        time_logs=[TimeLogOut.model_validate(log) for log in logs],
        total_time=total_duration_for_task(db, task_id, auth.user_id),
    )
