"""Demo snapshot generator for the projection engine.

Produces a realistic household ledger for exploring projections without a
live database: a checking and a savings account, the usual recurring bills
and paychecks anchored relative to ``today``, and a few weeks of one-off card
spending drawn from a seeded random generator.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence, TypeVar

import numpy as np

from core.dates import require_date, to_date_key
from core.models import AccountRecord, Snapshot, TransactionRecord

__all__ = [
    "RecurringProfile",
    "CHECKING_ACCOUNT_ID",
    "SAVINGS_ACCOUNT_ID",
    "generate_demo_snapshot",
]

T = TypeVar("T")

CHECKING_ACCOUNT_ID = "demo-checking"
SAVINGS_ACCOUNT_ID = "demo-savings"


@dataclass(frozen=True)
class RecurringProfile:
    """A recurring bill or paycheck seeded into the demo ledger."""

    description: str
    amount: float
    category: str
    frequency: str
    days_from_today: int
    account_id: str = CHECKING_ACCOUNT_ID


RECURRING_PROFILES: Sequence[RecurringProfile] = (
    RecurringProfile("Bi-weekly paycheck", 2400.00, "Salary", "biweekly", 7),
    RecurringProfile("Monthly rent payment", -1200.00, "Housing", "monthly", 3),
    RecurringProfile("Monthly electricity", -85.00, "Utilities", "monthly", 10),
    RecurringProfile("Home internet service", -60.00, "Utilities", "monthly", 15),
    RecurringProfile("Music streaming", -10.99, "Entertainment", "monthly", 5),
    RecurringProfile("Streaming service", -15.99, "Entertainment", "monthly", 8),
    RecurringProfile("Auto insurance", -360.00, "Insurance", "quarterly", 12),
    RecurringProfile("Gym membership", -35.00, "Health", "monthly", 6),
    RecurringProfile("Weekly grocery shopping", -120.00, "Food", "weekly", 2),
    RecurringProfile("Savings transfer in", 200.00, "Savings", "monthly", 1, SAVINGS_ACCOUNT_ID),
)

ONE_OFF_MERCHANTS: Sequence[tuple[str, str, float, float]] = (
    ("Coffee shop", "Food", 3.5, 9.0),
    ("Fuel station", "Transport", 30.0, 70.0),
    ("Pharmacy", "Health", 8.0, 40.0),
    ("Bookshop", "Entertainment", 10.0, 45.0),
    ("Takeaway", "Food", 15.0, 48.0),
)


def generate_demo_snapshot(
    today: date | str,
    *,
    seed: Optional[int] = None,
    history_days: int = 21,
    checking_balance: float = 3250.00,
    savings_balance: float = 8500.00,
) -> Snapshot:
    """Return demo accounts and transactions anchored on ``today``.

    Parameters
    ----------
    today:
        Reference date; recurring anchors and one-off history are placed
        relative to it.
    seed:
        Optional random seed for reproducible one-off spending.
    history_days:
        How many days of past one-off spending to generate.
    checking_balance, savings_balance:
        Opening balances of the two demo accounts.
    """

    if history_days < 0:
        raise ValueError("history_days must not be negative")

    today_date = require_date(today)
    rng = np.random.default_rng(seed)
    txn_counter = itertools.count(1)

    accounts: list[AccountRecord] = [
        {
            "id": CHECKING_ACCOUNT_ID,
            "name": "Demo Checking",
            "startingBalance": checking_balance,
            "notificationSettings": {"lowAvailableBalanceThreshold": 500.0},
        },
        {
            "id": SAVINGS_ACCOUNT_ID,
            "name": "Demo Savings",
            "startingBalance": savings_balance,
        },
    ]

    transactions: list[TransactionRecord] = []
    for profile in RECURRING_PROFILES:
        anchor = today_date + timedelta(days=profile.days_from_today)
        transactions.append(
            {
                "id": f"demo_{next(txn_counter):04d}",
                "description": profile.description,
                "amount": profile.amount,
                "type": "income" if profile.amount > 0 else "expense",
                "category": profile.category,
                "accountId": profile.account_id,
                "isRecurring": True,
                "recurringDetails": {
                    "nextDate": to_date_key(anchor),
                    "frequency": profile.frequency,
                },
            }
        )

    for offset in range(history_days, 0, -1):
        txn_date = today_date - timedelta(days=offset)
        for _ in range(int(rng.poisson(0.8))):
            description, category, low, high = _rng_choice(ONE_OFF_MERCHANTS, rng)
            amount = -round(float(rng.uniform(low, high)), 2)
            transactions.append(
                {
                    "id": f"demo_{next(txn_counter):04d}",
                    "description": description,
                    "amount": amount,
                    "type": "expense",
                    "category": category,
                    "accountId": CHECKING_ACCOUNT_ID,
                    "isRecurring": False,
                    "date": to_date_key(txn_date),
                }
            )

    return {"accounts": accounts, "transactions": transactions}


def _rng_choice(options: Sequence[T], rng: np.random.Generator) -> T:
    if not options:
        raise ValueError("Cannot choose from an empty sequence")
    idx = int(rng.integers(0, len(options)))
    return options[idx]
