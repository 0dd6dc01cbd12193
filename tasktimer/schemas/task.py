"""Pydantic schemas that describe task payloads for the API."""

from __future__ import annotations

from typing import Optional

from ..core.task_status import TaskStatus
from .common import ApiModel, UtcDateTime


class TaskCreate(ApiModel):
    title: Optional[str] = None
    description: Optional[str] = None


class TaskUpdate(ApiModel):
    """Partial update: only the fields a client explicitly sends are applied.

    ``status`` must be one of the three known values; anything else is a
    validation error. Keys other than these three are ignored.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None


class TaskOut(ApiModel):
    id: str
    user_id: str
    title: str
    description: str
    status: TaskStatus
    created_at: UtcDateTime
    updated_at: UtcDateTime


class TaskEnvelope(ApiModel):
    task: TaskOut


class TaskList(ApiModel):
    tasks: list[TaskOut]
