from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_datetime(text: str) -> datetime:
    """Parse an ISO-8601 string; naive values are taken as UTC."""
    value = text.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_micros(value: Any) -> int | None:
    """Convert an int, numeric string, datetime or ISO string to microseconds since epoch."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("booleans are not timestamps")
    if isinstance(value, int):
        return value
    if isinstance(value, datetime):
        dt = value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
        delta = dt - _EPOCH
        return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return to_micros(parse_datetime(text))


def from_micros(ts: int) -> datetime:
    return _EPOCH + timedelta(microseconds=ts)
