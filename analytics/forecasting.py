"""Day-by-day balance projection and available-to-spend analytics."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Mapping
from datetime import date
from typing import Any, Iterable, Sequence

import numpy as np
import pandas as pd

from analytics.instances import materialize_instances, resolve_horizon_end, validate_horizon
from config.settings import DEFAULT_HORIZON_DAYS, DEFAULT_MAX_OCCURRENCES
from core.dates import add_days, normalize_date, require_date
from core.models import (
    AccountProjection,
    AccountRecord,
    ProjectionPoint,
    SimulationResult,
    TransactionInstance,
    TransactionRecord,
)

__all__ = [
    "project_account_balance",
    "calculate_projections",
    "available_to_spend",
    "projection_frame",
    "simulate_purchase",
]

logger = logging.getLogger(__name__)

WHAT_IF_TRANSACTION_ID = "what-if"


def project_account_balance(
    account_id: str,
    starting_balance: float,
    instances: Iterable[TransactionInstance],
    today: Any,
    horizon_days: int,
) -> AccountProjection:
    """Roll an account balance forward one calendar day at a time.

    Instances dated before ``today`` are folded into the opening balance. Each
    day from ``today`` through ``today + horizon_days`` then adds the amounts of
    the instances dated exactly on it, so the result always holds
    ``horizon_days + 1`` points. No rounding is applied.
    """

    today_date = require_date(today)
    horizon = validate_horizon(horizon_days)
    horizon_end = resolve_horizon_end(today_date, horizon)

    baseline = _starting_balance(account_id, starting_balance)
    by_day: dict[date, list[TransactionInstance]] = defaultdict(list)
    for instance in instances:
        if instance.get("accountId") != account_id:
            continue
        instance_date = normalize_date(instance.get("date"))
        amount = _instance_amount(instance)
        if instance_date is None or amount is None:
            continue
        if instance_date < today_date:
            baseline += amount
        elif instance_date <= horizon_end:
            by_day[instance_date].append(instance)

    points: list[ProjectionPoint] = []
    balance = baseline
    for offset in range(horizon + 1):
        day = add_days(today_date, offset)
        day_instances = by_day.get(day, [])
        for instance in day_instances:
            balance += _instance_amount(instance) or 0.0
        points.append(ProjectionPoint(date=day, balance=balance, transactions=tuple(day_instances)))

    return AccountProjection(account_id=account_id, points=tuple(points))


def calculate_projections(
    accounts: Iterable[AccountRecord],
    records: Iterable[TransactionRecord],
    today: Any,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    *,
    max_iterations: int = DEFAULT_MAX_OCCURRENCES,
) -> list[AccountProjection]:
    """Project every account over the horizon from one shared instance set."""

    account_list = list(accounts)
    if not account_list:
        return []

    today_date = require_date(today)
    instances = materialize_instances(records, today_date, horizon_days, max_iterations=max_iterations)

    projections = []
    for account in account_list:
        projections.append(
            project_account_balance(
                account.get("id"),
                account.get("startingBalance") or 0.0,
                instances,
                today_date,
                horizon_days,
            )
        )
    return projections


def available_to_spend(projection: AccountProjection | Iterable[ProjectionPoint | float] | None) -> float:
    """Return the lowest projected balance, or ``0.0`` for an empty series."""

    if projection is None:
        return 0.0
    points = projection.points if isinstance(projection, AccountProjection) else projection
    balances = [point.balance if isinstance(point, ProjectionPoint) else float(point) for point in points]
    if not balances:
        return 0.0
    return float(np.min(np.asarray(balances, dtype=float)))


def projection_frame(projections: Sequence[AccountProjection]) -> pd.DataFrame:
    """Flatten projections into a long-format frame for charts and reports."""

    records: list[dict[str, object]] = []
    for projection in projections:
        previous: float | None = None
        for point in projection.points:
            records.append(
                {
                    "account_id": projection.account_id,
                    "date": pd.Timestamp(point.date),
                    "balance": point.balance,
                    "net_change": 0.0 if previous is None else point.balance - previous,
                    "transaction_count": len(point.transactions),
                }
            )
            previous = point.balance

    frame = pd.DataFrame(
        records,
        columns=["account_id", "date", "balance", "net_change", "transaction_count"],
    )
    if not frame.empty:
        frame = frame.sort_values(["account_id", "date"], kind="stable").reset_index(drop=True)
    return frame


def simulate_purchase(
    account: AccountRecord,
    records: Sequence[TransactionRecord],
    today: Any,
    amount: float,
    purchase_date: Any,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    *,
    description: str = "What if",
    max_iterations: int = DEFAULT_MAX_OCCURRENCES,
) -> SimulationResult:
    """Project an account with and without a hypothetical one-off purchase.

    ``amount`` is the purchase price; it is applied as an expense regardless of
    sign. Neither ``account`` nor ``records`` is modified.
    """

    today_date = require_date(today)
    purchase_day = require_date(purchase_date, name="purchase_date")
    account_id = account.get("id")

    hypothetical: TransactionRecord = {
        "id": WHAT_IF_TRANSACTION_ID,
        "amount": -abs(float(amount)),
        "type": "expense",
        "description": description,
        "accountId": account_id,
        "date": purchase_day,
        "isRecurring": False,
    }

    baseline = calculate_projections([account], records, today_date, horizon_days, max_iterations=max_iterations)[0]
    simulated = calculate_projections(
        [account], [*records, hypothetical], today_date, horizon_days, max_iterations=max_iterations
    )[0]

    baseline_available = available_to_spend(baseline)
    simulated_available = available_to_spend(simulated)
    return {
        "account_id": account_id,
        "baseline": baseline,
        "simulated": simulated,
        "baseline_available": baseline_available,
        "simulated_available": simulated_available,
        "available_change": simulated_available - baseline_available,
    }


def _starting_balance(account_id: Any, raw: Any) -> float:
    if raw is None:
        return 0.0
    try:
        return float(raw)
    except (TypeError, ValueError):
        logger.warning("Account %s has non-numeric starting balance %r; using 0.0", account_id, raw)
        return 0.0


def _instance_amount(instance: Mapping[str, Any]) -> float | None:
    raw = instance.get("amount")
    try:
        return float(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring transaction %s with non-numeric amount %r", instance.get("id"), raw)
        return None
