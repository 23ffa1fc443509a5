"""Snapshot loading utilities for the projection pipeline."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Final

import pandas as pd

from core.models import Snapshot, TransactionRecord

__all__ = ["load_snapshot", "load_transactions_csv"]


_BOOLEAN_COLUMNS: Final[tuple[str, ...]] = ("isRecurring",)


def load_snapshot(json_path: str | Path) -> Snapshot:
    """Return the accounts and transactions stored in a JSON export.

    The file holds a single object with ``accounts`` and ``transactions``
    arrays, matching the documents kept per user in the app's database.
    """

    path = Path(json_path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")

    with path.open(encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, dict):
        raise ValueError("Snapshot must be a JSON object with accounts and transactions.")

    accounts = payload.get("accounts", [])
    transactions = payload.get("transactions", [])
    if not isinstance(accounts, list) or not isinstance(transactions, list):
        raise ValueError("Snapshot accounts and transactions must be arrays.")

    return {"accounts": accounts, "transactions": transactions}


def load_transactions_csv(csv_path: str | Path) -> list[TransactionRecord]:
    """Return transaction records from a flat CSV export.

    Recurring rows use the legacy flat columns (``frequency``,
    ``nextOccurrence``). Empty cells are dropped from each record rather than
    kept as ``NaN``.
    """

    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")

    df = pd.read_csv(path, dtype={"id": str, "accountId": str})
    for column in _BOOLEAN_COLUMNS:
        if column in df.columns:
            df[column] = df[column].map(_parse_flag)

    records: list[TransactionRecord] = []
    for row in df.to_dict(orient="records"):
        records.append({key: _native(value) for key, value in row.items() if not _is_missing(value)})
    return records


def _parse_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "y"}
    if _is_missing(value):
        return False
    return bool(value)


def _is_missing(value: Any) -> bool:
    return not isinstance(value, (list, dict)) and bool(pd.isna(value))


def _native(value: Any) -> Any:
    # numpy scalars -> builtin types
    return value.item() if hasattr(value, "item") else value
