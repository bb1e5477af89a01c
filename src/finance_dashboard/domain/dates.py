"""
Date normalization for transaction records.

Stored and imported transactions carry their dates in more than one shape:
ISO-8601 strings written by the dashboard itself, and legacy
``{"seconds": ..., "nanoseconds": ...}`` pairs left over from the old backend
(older dumps spell the keys ``_seconds`` / ``_nanoseconds``).

Everything is resolved here, once, into a timezone-aware UTC ``datetime``.
Values without an offset (date-only strings, naive datetimes, ``date``
objects) are calendar times in the dashboard's timezone, passed as ``tz``.
Values that cannot be understood resolve to ``None``; nothing in this module
raises for bad input.
"""
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Mapping, Optional

import pandas as pd

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

INVALID_DATE = "Invalid Date"
NOT_AVAILABLE = "N/A"

_SECONDS_KEYS = ("seconds", "_seconds")

# pandas reads these as the current time
_RELATIVE_WORDS = {"now", "today"}


def normalize_date(value: Any, tz: tzinfo = timezone.utc) -> Optional[datetime]:
    """
    Convert any supported date representation into a UTC instant.

    Args:
        value: ISO string, seconds/nanoseconds mapping, datetime, date,
            epoch milliseconds, or None
        tz: Timezone that values without an offset are read in

    Returns:
        Aware UTC datetime, or None when the value is missing or unparseable

    Example:
        normalize_date({"seconds": 1709251200, "nanoseconds": 0})
        normalize_date("2024-03-01T00:00:00Z")  # same instant
    """
    if value is None or value == "":
        return None

    if isinstance(value, Mapping):
        return _from_seconds_pair(value)

    if isinstance(value, datetime):
        return _as_utc(value, tz)

    if isinstance(value, date):
        return _as_utc(datetime(value.year, value.month, value.day), tz)

    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        # Bare numbers are epoch milliseconds
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        return _from_string(value, tz)

    return None


def _from_seconds_pair(value: Mapping) -> Optional[datetime]:
    for key in _SECONDS_KEYS:
        if key in value:
            seconds = value[key]
            break
    else:
        return None

    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        return None

    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _from_string(value: str, tz: tzinfo) -> Optional[datetime]:
    text = value.strip()
    if not text or text.lower() in _RELATIVE_WORDS:
        return None

    try:
        parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None

    if pd.isna(parsed):
        return None

    return _as_utc(parsed.to_pydatetime(), tz)


def _as_utc(value: datetime, tz: tzinfo = timezone.utc) -> datetime:
    """Naive datetimes are wall-clock times in ``tz``"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz)
    return value.astimezone(timezone.utc)


def to_iso(instant: Optional[datetime]) -> Optional[str]:
    """Serialize an instant for storage"""
    if instant is None:
        return None
    return _as_utc(instant).isoformat()


def sort_key(instant: Optional[datetime]) -> datetime:
    """Unknown dates sort as the oldest possible instant"""
    return instant if instant is not None else EPOCH


def format_date(
    instant: Optional[datetime],
    placeholder: str = INVALID_DATE,
    tz: tzinfo = timezone.utc,
) -> str:
    """
    Render an instant as YYYY-MM-DD for tables and exports.

    Args:
        instant: Normalized instant, or None
        placeholder: Text shown when the instant is unknown
        tz: Timezone the calendar date is read in

    Returns:
        Formatted date, or the placeholder
    """
    if instant is None:
        return placeholder
    return instant.astimezone(tz).strftime("%Y-%m-%d")
