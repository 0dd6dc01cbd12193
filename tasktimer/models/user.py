"""SQLAlchemy model for registered users."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Index, String, Text

from ..db.session import Base
from .ids import new_id


class User(Base):
    __tablename__ = "users"
    __allow_unmapped__ = True
    __table_args__ = (Index("ux_users_email", "email", unique=True),)

    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String(320), nullable=False)
    password_hash = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False)


__all__ = ["User"]
