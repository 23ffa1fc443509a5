"""Shared data model definitions for the projection pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, TypedDict


class RecurringDetails(TypedDict, total=False):
    nextDate: Any
    frequency: str
    endDate: Any
    excludedDates: list[Any]


class TransactionRecord(TypedDict, total=False):
    """A stored transaction document, one-off or recurring.

    Recurring records carry either ``recurringDetails`` or the legacy flat
    ``nextOccurrence``/``frequency`` fields.
    """

    id: str
    amount: float
    type: str
    category: str
    description: str
    accountId: str
    date: Any
    createdAt: Any
    isRecurring: bool
    recurringDetails: RecurringDetails
    nextOccurrence: Any
    frequency: str


class TransactionInstance(TransactionRecord, total=False):
    """A dated transaction ready to be summed into a balance."""

    isInstance: bool
    instanceId: str


class NotificationSettings(TypedDict, total=False):
    lowAvailableBalanceThreshold: float


class AccountRecord(TypedDict, total=False):
    id: str
    name: str
    startingBalance: float
    notificationSettings: NotificationSettings


@dataclass(frozen=True)
class RecurringDefinition:
    anchor_date: date
    frequency: str
    end_date: date | None = None
    excluded_dates: frozenset[date] = field(default_factory=frozenset)


@dataclass(frozen=True)
class ProjectionPoint:
    date: date
    balance: float
    transactions: tuple[TransactionInstance, ...] = ()


@dataclass(frozen=True)
class AccountProjection:
    account_id: str
    points: tuple[ProjectionPoint, ...]

    @property
    def balances(self) -> list[float]:
        return [point.balance for point in self.points]


class LowBalanceAlert(TypedDict):
    account_id: str
    account_name: str
    available_to_spend: float
    threshold: float
    title: str
    message: str


class UpcomingBill(TypedDict):
    transaction_id: str
    account_id: str | None
    description: str
    amount: float
    due_date: date
    days_until_due: int
    message: str


class SimulationResult(TypedDict):
    account_id: str
    baseline: AccountProjection
    simulated: AccountProjection
    baseline_available: float
    simulated_available: float
    available_change: float


class AccountSummary(TypedDict):
    account_id: str
    account_name: str
    projection: AccountProjection
    available_to_spend: float
    ending_balance: float


class ProjectionSummary(TypedDict):
    today: date
    horizon_days: int
    accounts: list[AccountSummary]
    low_balance_alerts: list[LowBalanceAlert]
    upcoming_bills: list[UpcomingBill]
    instance_count: int


class Snapshot(TypedDict):
    accounts: list[AccountRecord]
    transactions: list[TransactionRecord]


__all__ = [
    "RecurringDetails",
    "TransactionRecord",
    "TransactionInstance",
    "NotificationSettings",
    "AccountRecord",
    "RecurringDefinition",
    "ProjectionPoint",
    "AccountProjection",
    "LowBalanceAlert",
    "UpcomingBill",
    "SimulationResult",
    "AccountSummary",
    "ProjectionSummary",
    "Snapshot",
]