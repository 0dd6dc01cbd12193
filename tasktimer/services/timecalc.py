from __future__ import annotations

import math
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

END_OF_DAY = time(23, 59, 59, 999999)


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form every timestamp is stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds from start to end, floored.

    Not clamped: if ``start`` lies after ``end`` (clock skew) the result is negative.
    """
    return math.floor((to_naive_utc(end) - to_naive_utc(start)).total_seconds())


def local_date(moment: datetime, tz: str) -> date:
    """Calendar date of a stored (naive UTC) timestamp in the given zone."""
    return moment.replace(tzinfo=timezone.utc).astimezone(ZoneInfo(tz)).date()


def day_window(day: date, tz: str) -> tuple[datetime, datetime]:
    """Inclusive [00:00, 23:59:59.999999] bounds of ``day`` in ``tz``, as naive UTC."""
    zone = ZoneInfo(tz)
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day, END_OF_DAY, tzinfo=zone)
    return to_naive_utc(start), to_naive_utc(end)
