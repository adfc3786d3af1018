"""Named transforms usable as ``{{transform variable}}``."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from types import MappingProxyType
from typing import Any


def stringify(value: Any) -> str:
    """Natural string form of a variable value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _coerce_datetime(value: Any) -> date | None:
    if isinstance(value, (datetime, date)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def _short_date(value: date) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def _clock(value: datetime) -> str:
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d}:{value.second:02d} {meridiem}"


def uppercase(value: Any) -> str:
    return value.upper() if isinstance(value, str) else stringify(value)


def lowercase(value: Any) -> str:
    return value.lower() if isinstance(value, str) else stringify(value)


def format_date(value: Any) -> str:
    """``1/15/2024``."""
    parsed = _coerce_datetime(value)
    if parsed is None:
        return stringify(value)
    return _short_date(parsed)


def format_date_time(value: Any) -> str:
    """``1/15/2024, 10:30:00 AM``. Plain dates render at midnight."""
    parsed = _coerce_datetime(value)
    if parsed is None:
        return stringify(value)
    if not isinstance(parsed, datetime):
        parsed = datetime(parsed.year, parsed.month, parsed.day)
    return f"{_short_date(parsed)}, {_clock(parsed)}"


TRANSFORMS: MappingProxyType[str, Callable[[Any], str]] = MappingProxyType(
    {
        "uppercase": uppercase,
        "lowercase": lowercase,
        "formatDate": format_date,
        "formatDateTime": format_date_time,
    }
)
