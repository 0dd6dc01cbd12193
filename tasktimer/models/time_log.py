"""SQLAlchemy model for timer runs recorded against a task."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Index, Integer, String

from ..db.session import Base
from .ids import new_id


class TimeLog(Base):
    """One start/stop interval. ``end_time IS NULL`` means the timer is still running."""

    __tablename__ = "time_logs"
    __allow_unmapped__ = True
    __table_args__ = (
        Index("ix_time_logs_user_end", "user_id", "end_time"),
        Index("ix_time_logs_user_task_end", "user_id", "task_id", "end_time"),
        Index("ix_time_logs_user_start", "user_id", "start_time"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String(32), nullable=False)
    task_id = Column(String(32), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=True)
    # Whole seconds; stays 0 until the timer is stopped.
    duration = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False)

    @property
    def is_active(self) -> bool:
        return self.end_time is None


__all__ = ["TimeLog"]
