"""Shared pydantic building blocks for request/response payloads."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def _serialize_utc(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


# Stored timestamps are naive UTC; on the wire they get an explicit ``Z``.
UtcDateTime = Annotated[datetime, PlainSerializer(_serialize_utc, return_type=str, when_used="json")]


class ApiModel(BaseModel):
    """Base for every payload: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageOut(ApiModel):
    message: str
