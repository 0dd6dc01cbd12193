"""CRUD helpers for user accounts."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import DuplicateEmailError
from ..models.user import User
from ..services.timecalc import utcnow


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    stmt = select(User).where(User.email == normalize_email(email))
    return db.execute(stmt).scalars().first()


def get_user(db: Session, user_id: str) -> User | None:
    return db.get(User, user_id)


def create_user(db: Session, email: str, password_hash: str, name: str) -> User:
    """Insert a user; the unique email index is the final word on duplicates."""

    user = User(
        email=normalize_email(email),
        password_hash=password_hash,
        name=name.strip(),
        created_at=utcnow(),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateEmailError() from exc
    db.refresh(user)
    return user
