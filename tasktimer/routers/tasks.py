from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..crud.tasks import create_task, delete_task, list_tasks, require_task, update_task
from ..db.session import get_db
from ..deps.auth import AuthContext, require_user
from ..schemas.common import MessageOut
from ..schemas.task import TaskCreate, TaskEnvelope, TaskList, TaskOut, TaskUpdate

router = APIRouter(prefix="/tasks", tags=["tasks"])
logger = logging.getLogger(__name__)


@router.get("", response_model=TaskList)
def api_list_tasks(auth: AuthContext = Depends(require_user), db: Session = Depends(get_db)):
    tasks = list_tasks(db, auth.user_id)
    return TaskList(tasks=[TaskOut.model_validate(task) for task in tasks])


@router.post("", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def api_create_task(
    payload: TaskCreate,
    auth: AuthContext = Depends(require_user),
    db: Session = Depends(get_db),
):
    task = create_task(db, auth.user_id, title=payload.title, description=payload.description)
    logger.info("task.created", extra={"extra_data": {"task_id": task.id}})
    return TaskEnvelope(task=TaskOut.model_validate(task))


@router.get("/{task_id}", response_model=TaskEnvelope)
def api_get_task(task_id: str, auth: AuthContext = Depends(require_user), db: Session = Depends(get_db)):
    task = require_task(db, task_id, auth.user_id)
    return TaskEnvelope(task=TaskOut.model_validate(task))


@router.put("/{task_id}", response_model=TaskEnvelope)
def api_update_task(
    task_id: str,
    payload: TaskUpdate,
    auth: AuthContext = Depends(require_user),
    db: Session = Depends(get_db),
):
    task = update_task(db, task_id, auth.user_id, payload.model_dump(exclude_unset=True))
    logger.info("task.updated", extra={"extra_data": {"task_id": task.id, "status": task.status}})
    return TaskEnvelope(task=TaskOut.model_validate(task))


@router.delete("/{task_id}", response_model=MessageOut)
def api_delete_task(task_id: str, auth: AuthContext = Depends(require_user), db: Session = Depends(get_db)):
    delete_task(db, task_id, auth.user_id)
    logger.info("task.deleted", extra={"extra_data": {"task_id": task_id}})
    return MessageOut(message="Task deleted successfully")
