"""Materialisation of stored transactions into dated instances."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from numbers import Integral
from typing import Any, Iterable

from analytics.recurring import expand_occurrences, resolve_recurring_definition
from config.settings import DEFAULT_MAX_OCCURRENCES, get_settings
from core.dates import add_days, normalize_date, require_date, to_date_key
from core.errors import InvalidHorizonError
from core.models import TransactionInstance, TransactionRecord

__all__ = [
    "validate_horizon",
    "resolve_horizon_end",
    "materialize_instances",
    "instances_in_range",
]

logger = logging.getLogger(__name__)


def validate_horizon(horizon_days: Any) -> int:
    """Return ``horizon_days`` as an ``int``, raising if it is not a non-negative integer."""

    if isinstance(horizon_days, bool) or not isinstance(horizon_days, Integral):
        raise InvalidHorizonError(f"horizon_days must be an integer, got {horizon_days!r}")
    if horizon_days < 0:
        raise InvalidHorizonError(f"horizon_days must not be negative, got {horizon_days}")
    return int(horizon_days)


def resolve_horizon_end(today: date, horizon_days: Any) -> date:
    """Return the last projected day, raising if the horizon runs past the calendar."""

    horizon = validate_horizon(horizon_days)
    try:
        return add_days(today, horizon)
    except OverflowError:
        raise InvalidHorizonError(f"horizon_days {horizon} runs past the last representable date") from None


def materialize_instances(
    records: Iterable[TransactionRecord],
    today: Any,
    horizon_days: int,
    *,
    max_iterations: int = DEFAULT_MAX_OCCURRENCES,
) -> list[TransactionInstance]:
    """Expand stored records into dated transaction instances.

    One-off records pass through with their date normalised (falling back to
    ``createdAt`` for legacy records). Recurring records are expanded from
    their anchor date through ``today + horizon_days``; each occurrence gets a
    deterministic ``instanceId`` of ``"{id}-{YYYY-MM-DD}"``. Records that cannot
    be read are logged and skipped.

    The result keeps source-record order, chronological within each series.
    It is not globally sorted by date.
    """

    today_date = require_date(today)
    horizon_end = resolve_horizon_end(today_date, horizon_days)

    instances: list[TransactionInstance] = []
    skipped = 0
    for record in records:
        if not isinstance(record, Mapping):
            logger.warning("Skipping transaction that is not a mapping: %r", record)
            skipped += 1
            continue

        if not record.get("isRecurring"):
            one_off = _one_off_instance(record)
            if one_off is None:
                skipped += 1
            else:
                instances.append(one_off)
            continue

        definition = resolve_recurring_definition(record)
        if definition is None:
            skipped += 1
            continue

        occurrences = expand_occurrences(
            definition.anchor_date,
            definition.frequency,
            horizon_end,
            end_date=definition.end_date,
            excluded_dates=definition.excluded_dates,
            max_iterations=max_iterations,
        )
        for occurrence in occurrences:
            instances.append(
                {
                    **record,
                    "date": occurrence,
                    "isInstance": True,
                    "instanceId": f"{record.get('id')}-{to_date_key(occurrence)}",
                }
            )

    logger.debug(
        "Materialised %d instances through %s (%d records skipped)", len(instances), horizon_end, skipped
    )
    return instances


def instances_in_range(
    records: Iterable[TransactionRecord],
    start: Any,
    end: Any,
    today: Any,
    *,
    min_horizon_days: int | None = None,
    max_iterations: int = DEFAULT_MAX_OCCURRENCES,
) -> list[TransactionInstance]:
    """Return the instances dated within ``[start, end]``, inclusive.

    The expansion horizon reaches at least ``end`` and never less than
    ``min_horizon_days`` so calendar views see full series. When
    ``min_horizon_days`` is omitted the configured ``calendar_horizon_days``
    applies.
    """

    start_date = require_date(start, name="start")
    end_date = require_date(end, name="end")
    today_date = require_date(today)

    if min_horizon_days is None:
        min_horizon_days = get_settings().calendar_horizon_days
    horizon = max((end_date - today_date).days, validate_horizon(min_horizon_days))
    instances = materialize_instances(records, today_date, horizon, max_iterations=max_iterations)
    return [instance for instance in instances if start_date <= instance["date"] <= end_date]


def _one_off_instance(record: Mapping[str, Any]) -> TransactionInstance | None:
    raw_date = record.get("date") or record.get("createdAt")
    if not raw_date:
        logger.warning("Skipping transaction %s: no date", record.get("id"))
        return None

    resolved: date | None = normalize_date(raw_date)
    if resolved is None:
        logger.warning("Skipping transaction %s: unparseable date %r", record.get("id"), raw_date)
        return None

    return {**record, "date": resolved}
