"""Task status values shared by models, schemas, and services."""

from typing import Literal

STATUS_PENDING = "Pending"
STATUS_IN_PROGRESS = "In Progress"
STATUS_COMPLETED = "Completed"

STATUS_CHOICES = (
    STATUS_PENDING,
    STATUS_IN_PROGRESS,
    STATUS_COMPLETED,
)

TaskStatus = Literal["Pending", "In Progress", "Completed"]


def is_locked(status: str | None) -> bool:
    """Completed is terminal: nothing may edit, delete, or time the task."""

    return status == STATUS_COMPLETED


def empty_breakdown() -> dict[str, int]:
    return {STATUS_COMPLETED: 0, STATUS_IN_PROGRESS: 0, STATUS_PENDING: 0}


__all__ = [
    "STATUS_CHOICES",
    "STATUS_COMPLETED",
    "STATUS_IN_PROGRESS",
    "STATUS_PENDING",
    "TaskStatus",
    "empty_breakdown",
    "is_locked",
]
