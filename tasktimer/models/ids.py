from __future__ import annotations

from uuid import uuid4


def new_id() -> str:
    """Opaque identifier handed out for every stored record."""

    return uuid4().hex
