"""Low-balance and upcoming-bill detection over projected balances."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Iterable

from analytics.forecasting import available_to_spend
from analytics.recurring import resolve_recurring_definition
from config.settings import DEFAULT_LOW_BALANCE_THRESHOLD
from core.dates import add_days, require_date
from core.formatting import format_currency
from core.models import (
    AccountProjection,
    AccountRecord,
    LowBalanceAlert,
    TransactionRecord,
    UpcomingBill,
)

__all__ = [
    "resolve_threshold",
    "detect_low_balance_alerts",
    "find_upcoming_bills",
]

logger = logging.getLogger(__name__)


def resolve_threshold(account: Mapping[str, Any], default: float = DEFAULT_LOW_BALANCE_THRESHOLD) -> float:
    """Return the account's low-balance threshold, falling back to ``default``."""

    settings = account.get("notificationSettings")
    if isinstance(settings, Mapping):
        value = settings.get("lowAvailableBalanceThreshold")
        if value is not None:
            try:
                return float(value)
            except (TypeError, ValueError):
                logger.warning("Account %s has an invalid threshold %r", account.get("id"), value)
    return float(default)


def detect_low_balance_alerts(
    accounts: Iterable[AccountRecord],
    projections: Iterable[AccountProjection],
    *,
    default_threshold: float = DEFAULT_LOW_BALANCE_THRESHOLD,
    currency: str = "USD",
) -> list[LowBalanceAlert]:
    """Flag accounts whose available-to-spend figure falls below their threshold."""

    by_account = {projection.account_id: projection for projection in projections}
    alerts: list[LowBalanceAlert] = []

    for account in accounts:
        account_id = account.get("id")
        projection = by_account.get(account_id)
        if projection is None:
            continue

        available = available_to_spend(projection)
        threshold = resolve_threshold(account, default_threshold)
        if available >= threshold:
            continue

        name = account.get("name") or str(account_id)
        alerts.append(
            {
                "account_id": account_id,
                "account_name": name,
                "available_to_spend": available,
                "threshold": threshold,
                "title": "Low Available Balance Alert",
                "message": (
                    f"Your {name} account's available balance is getting low "
                    f"({format_currency(available, currency)}). Be mindful of extra spending."
                ),
            }
        )

    return alerts


def find_upcoming_bills(
    records: Iterable[TransactionRecord],
    today: Any,
    *,
    days_ahead: int = 2,
    currency: str = "USD",
) -> list[UpcomingBill]:
    """Return recurring expenses whose next occurrence is ``days_ahead`` days away."""

    today_date = require_date(today)
    due_date = add_days(today_date, days_ahead)
    bills: list[UpcomingBill] = []

    for record in records:
        if not isinstance(record, Mapping) or not record.get("isRecurring"):
            continue
        try:
            amount = float(record.get("amount"))
        except (TypeError, ValueError):
            continue
        if amount >= 0:
            continue

        definition = resolve_recurring_definition(record)
        if definition is None or definition.anchor_date != due_date:
            continue
        if due_date in definition.excluded_dates:
            continue

        description = record.get("description") or record.get("category") or "recurring"
        bills.append(
            {
                "transaction_id": record.get("id"),
                "account_id": record.get("accountId"),
                "description": description,
                "amount": amount,
                "due_date": due_date,
                "days_until_due": days_ahead,
                "message": (
                    f"Heads up! Your {description} payment of "
                    f"{format_currency(abs(amount), currency)} is due on {due_date:%A}."
                ),
            }
        )

    bills.sort(key=lambda bill: bill["amount"])
    return bills
