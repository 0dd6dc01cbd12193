"""SQLAlchemy model for user-owned tasks."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Index, String, Text

from ..core.task_status import STATUS_PENDING
from ..db.session import Base
from .ids import new_id


class Task(Base):
    """A unit of work owned by one user; time is tracked against it via ``TimeLog``."""

    __tablename__ = "tasks"
    __allow_unmapped__ = True
    __table_args__ = (Index("ix_tasks_user_created", "user_id", "created_at"),)

    id = Column(String(32), primary_key=True, default=new_id)
    # Plain reference; ownership is enforced by filtering on it, not by a FK.
    user_id = Column(String(32), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    status = Column(String(32), nullable=False, default=STATUS_PENDING)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)


__all__ = ["Task"]
