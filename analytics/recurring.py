"""Recurring transaction definitions and occurrence expansion."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, Iterable, Iterator

from config.settings import DEFAULT_MAX_OCCURRENCES
from core.dates import add_days, add_months, add_years, normalize_date
from core.errors import InvalidHorizonError
from core.models import RecurringDefinition, TransactionRecord

__all__ = [
    "FREQUENCIES",
    "resolve_frequency",
    "advance_date",
    "expand_occurrences",
    "resolve_recurring_definition",
    "recurring_series",
]

logger = logging.getLogger(__name__)

FREQUENCIES: tuple[str, ...] = (
    "daily",
    "weekly",
    "bi-weekly",
    "monthly",
    "quarterly",
    "annually",
)

_FREQUENCY_ALIASES = {
    "biweekly": "bi-weekly",
    "bi_weekly": "bi-weekly",
}


def resolve_frequency(value: Any) -> str | None:
    """Return the canonical spelling of a frequency, or ``None`` if unsupported."""

    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    key = _FREQUENCY_ALIASES.get(key, key)
    return key if key in FREQUENCIES else None


def advance_date(current: date, frequency: str) -> date:
    """Return the occurrence following ``current`` for the given frequency.

    Arithmetic is done on calendar components, so monthly steps keep the day
    of month and let it roll over (``Jan 31`` becomes ``Mar 3``). An unknown
    frequency returns ``current`` unchanged.
    """

    canonical = resolve_frequency(frequency)
    if canonical == "daily":
        return add_days(current, 1)
    if canonical == "weekly":
        return add_days(current, 7)
    if canonical == "bi-weekly":
        return add_days(current, 14)
    if canonical == "monthly":
        return add_months(current, 1)
    if canonical == "quarterly":
        return add_months(current, 3)
    if canonical == "annually":
        return add_years(current, 1)
    return current


def expand_occurrences(
    anchor_date: date,
    frequency: str,
    horizon_end: date,
    *,
    end_date: date | None = None,
    excluded_dates: Iterable[Any] = (),
    max_iterations: int = DEFAULT_MAX_OCCURRENCES,
) -> Iterator[date]:
    """Yield the occurrence dates of a series from ``anchor_date`` onwards.

    Parameters
    ----------
    anchor_date:
        First occurrence to consider.
    frequency:
        One of :data:`FREQUENCIES` (``biweekly`` is accepted as a synonym).
    horizon_end:
        Last calendar day that may be emitted.
    end_date:
        Optional series end; no occurrence after it is emitted.
    excluded_dates:
        Dates to skip. The series keeps advancing past them.
    max_iterations:
        Hard bound on the number of cursor steps.

    Yields
    ------
    date
        Occurrences in chronological order.
    """

    if isinstance(max_iterations, bool) or not isinstance(max_iterations, int) or max_iterations <= 0:
        raise InvalidHorizonError(f"max_iterations must be a positive integer, got {max_iterations!r}")

    excluded = {d for d in (normalize_date(value) for value in excluded_dates) if d is not None}
    cursor = anchor_date

    for _ in range(max_iterations):
        if cursor > horizon_end:
            return
        if end_date is not None and cursor > end_date:
            return

        if cursor not in excluded:
            yield cursor

        try:
            following = advance_date(cursor, frequency)
        except (OverflowError, ValueError):
            logger.warning("Series advanced past the last representable date after %s", cursor)
            return
        if following <= cursor:
            logger.warning(
                "Frequency %r does not advance past %s; stopping expansion", frequency, cursor
            )
            return
        cursor = following

    logger.warning(
        "Expansion from %s (%s) stopped after %d iterations", anchor_date, frequency, max_iterations
    )


def resolve_recurring_definition(record: Mapping[str, Any]) -> RecurringDefinition | None:
    """Resolve a record's recurring fields into a :class:`RecurringDefinition`.

    Both the nested ``recurringDetails`` shape and the legacy flat shape
    (``nextOccurrence``/``frequency`` at the top level) are accepted. Returns
    ``None`` when the anchor date or frequency is missing or unusable.
    """

    details = record.get("recurringDetails")
    if not isinstance(details, Mapping):
        details = {}

    record_id = record.get("id")
    raw_anchor = details.get("nextDate") or record.get("nextOccurrence") or record.get("date")
    raw_frequency = details.get("frequency") or record.get("frequency")

    if not raw_anchor or not raw_frequency:
        logger.warning("Skipping recurring transaction %s: missing nextDate or frequency", record_id)
        return None

    anchor = normalize_date(raw_anchor)
    if anchor is None:
        logger.warning("Skipping recurring transaction %s: unparseable date %r", record_id, raw_anchor)
        return None

    frequency = resolve_frequency(raw_frequency)
    if frequency is None:
        logger.warning("Skipping recurring transaction %s: unknown frequency %r", record_id, raw_frequency)
        return None

    end_date = normalize_date(details.get("endDate"))
    if details.get("endDate") and end_date is None:
        logger.debug("Ignoring unparseable end date on recurring transaction %s", record_id)

    excluded = frozenset(
        d for d in (normalize_date(value) for value in details.get("excludedDates") or ()) if d is not None
    )
    return RecurringDefinition(
        anchor_date=anchor,
        frequency=frequency,
        end_date=end_date,
        excluded_dates=excluded,
    )


def recurring_series(records: Iterable[TransactionRecord]) -> list[TransactionRecord]:
    """Return the stored recurring series, leaving out materialised instances."""

    return [record for record in records if record.get("isRecurring") and not record.get("isInstance")]
