"""Date normalisation helpers shared by every projection stage.

Records arrive with dates in whatever shape their producer stored: Firestore
``Timestamp`` objects, native ``datetime`` values, ``YYYY-MM-DD`` strings or ISO
strings. Everything is reduced to a plain :class:`datetime.date`, interpreted as
a UTC calendar day, before any comparison happens.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any

import pandas as pd

from core.errors import InvalidDateError

__all__ = [
    "normalize_date",
    "require_date",
    "to_date_key",
    "add_days",
    "add_months",
    "add_years",
]

logger = logging.getLogger(__name__)

# Zero-argument accessors exposed by timestamp wrappers (Firestore, protobuf).
_TIMESTAMP_ACCESSORS = ("to_date", "toDate", "to_datetime", "ToDatetime")

# Leading integer of a date component, read the way JavaScript's parseInt does.
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def normalize_date(value: Any) -> date | None:
    """Return ``value`` as a date-only value, or ``None`` when it cannot be read.

    Parameters
    ----------
    value:
        A timestamp-like object, ``datetime``/``date``, ``pandas.Timestamp``,
        epoch milliseconds, or a string.

    Returns
    -------
    date | None
        The UTC calendar day represented by ``value``. Callers treat ``None``
        as "skip this record".
    """

    if value is None or value is pd.NaT or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _from_datetime(value)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return _from_string(value)
    if isinstance(value, (int, float)):
        return _from_epoch_millis(value)

    for accessor in _TIMESTAMP_ACCESSORS:
        method = getattr(value, accessor, None)
        if callable(method):
            try:
                converted = method()
            except Exception as exc:
                logger.warning("Could not read timestamp %r via %s(): %s", value, accessor, exc)
                return None
            if isinstance(converted, (datetime, date)):
                return normalize_date(converted)
            return None
    return None


def require_date(value: Any, *, name: str = "today") -> date:
    """Normalise a reference date supplied by the caller, raising if unusable."""

    resolved = normalize_date(value)
    if resolved is None:
        raise InvalidDateError(f"{name} must be a recognisable date, got {value!r}")
    return resolved


def to_date_key(value: Any) -> str:
    """Serialise a date to its ``YYYY-MM-DD`` lookup key.

    Returns an empty string when ``value`` cannot be normalised.
    """

    resolved = value if type(value) is date else normalize_date(value)
    if resolved is None:
        return ""
    return f"{resolved.year:04d}-{resolved.month:02d}-{resolved.day:02d}"


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def add_months(value: date, months: int) -> date:
    """Add calendar months, letting an out-of-range day roll into the next month.

    ``2025-01-31`` plus one month is ``2025-03-03``; the day of month is kept
    and any excess days spill forward rather than being clamped.
    """

    return _rollover_date(value.year, value.month - 1 + months, value.day)


def add_years(value: date, years: int) -> date:
    """Add calendar years; ``Feb 29`` rolls to ``Mar 1`` in a non-leap year."""

    return _rollover_date(value.year + years, value.month - 1, value.day)


def _rollover_date(year: int, month_index: int, day: int) -> date:
    """Build a date from a zero-based month index and a possibly overflowing day."""

    year += month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1) + timedelta(days=day - 1)


def _from_datetime(value: datetime) -> date:
    if value.tzinfo is not None and value.utcoffset() is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


def _from_string(value: str) -> date | None:
    if not value:
        return None

    parts = value.split("T")[0].split("-")
    if len(parts) == 3:
        matches = [_LEADING_INT.match(part) for part in parts]
        if not all(matches):
            return None
        year, month, day = (int(match.group(1)) for match in matches)
        try:
            return _rollover_date(year, month - 1, day)
        except (ValueError, OverflowError):
            return None

    # Lenient fallback for shapes like "03/15/2025"; may be locale-sensitive.
    parsed = pd.to_datetime(value, errors="coerce")
    if parsed is pd.NaT or pd.isna(parsed):
        return None
    return _from_datetime(parsed.to_pydatetime())


def _from_epoch_millis(value: int | float) -> date | None:
    parsed = pd.to_datetime(value, unit="ms", errors="coerce", utc=True)
    if parsed is pd.NaT or pd.isna(parsed):
        return None
    return parsed.date()
