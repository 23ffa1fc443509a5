"""Core logic for assembling per-account projection summaries."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from analytics.alerts import detect_low_balance_alerts, find_upcoming_bills
from analytics.forecasting import available_to_spend, project_account_balance
from analytics.instances import materialize_instances, validate_horizon
from config.settings import Settings, get_settings
from core.dates import require_date
from core.models import AccountRecord, AccountSummary, ProjectionSummary, TransactionRecord

__all__ = ["prepare_projection_summary"]

logger = logging.getLogger(__name__)


def prepare_projection_summary(
    accounts: Iterable[AccountRecord],
    transactions: Iterable[TransactionRecord],
    today: Any,
    horizon_days: Optional[int] = None,
    *,
    settings: Optional[Settings] = None,
) -> ProjectionSummary:
    settings = settings or get_settings()
    today_date = require_date(today)
    horizon = validate_horizon(settings.horizon_days if horizon_days is None else horizon_days)

    account_list = list(accounts)
    transaction_list = list(transactions)

    instances = materialize_instances(
        transaction_list,
        today_date,
        horizon,
        max_iterations=settings.max_occurrences,
    )

    summaries: list[AccountSummary] = []
    projections = []
    for account in account_list:
        projection = project_account_balance(
            account.get("id"),
            account.get("startingBalance") or 0.0,
            instances,
            today_date,
            horizon,
        )
        projections.append(projection)
        summaries.append(
            {
                "account_id": projection.account_id,
                "account_name": account.get("name") or str(projection.account_id),
                "projection": projection,
                "available_to_spend": available_to_spend(projection),
                "ending_balance": projection.points[-1].balance,
            }
        )

    alerts = detect_low_balance_alerts(
        account_list,
        projections,
        default_threshold=settings.low_balance_threshold,
        currency=settings.currency,
    )
    bills = find_upcoming_bills(
        transaction_list,
        today_date,
        days_ahead=settings.upcoming_bill_days,
        currency=settings.currency,
    )

    logger.debug(
        "Projected %d accounts over %d days: %d alerts, %d upcoming bills",
        len(summaries),
        horizon,
        len(alerts),
        len(bills),
    )

    return {
        "today": today_date,
        "horizon_days": horizon,
        "accounts": summaries,
        "low_balance_alerts": alerts,
        "upcoming_bills": bills,
        "instance_count": len(instances),
    }
