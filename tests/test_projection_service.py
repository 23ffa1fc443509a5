"""Tests for the projection summary service, snapshot loading and settings."""

from __future__ import annotations

import json
from datetime import date

import pytest

from analytics.instances import materialize_instances
from config.settings import Settings, get_settings
from core.data_loader import load_snapshot, load_transactions_csv
from core.projection_service import prepare_projection_summary
from data.demo import CHECKING_ACCOUNT_ID, SAVINGS_ACCOUNT_ID, generate_demo_snapshot

TODAY = date(2025, 3, 10)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep FINCH_* variables from the environment out of the tests."""

    for name in ((
        "FINCH_HORIZON_DAYS",
        "FINCH_CALENDAR_HORIZON_DAYS",
        "FINCH_LOW_BALANCE_THRESHOLD",
        "FINCH_MAX_OCCURRENCES",
    )):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def demo_snapshot():
    return generate_demo_snapshot(TODAY, seed=7)


def test_demo_snapshot_is_reproducible(demo_snapshot):
    again = generate_demo_snapshot(TODAY, seed=7)

    assert again == demo_snapshot
    assert [account["id"] for account in demo_snapshot["accounts"]] == [CHECKING_ACCOUNT_ID, SAVINGS_ACCOUNT_ID]
    one_offs = [t for t in demo_snapshot["transactions"] if not t["isRecurring"]]
    assert all(t["date"] < "2025-03-10" for t in one_offs)


def test_prepare_projection_summary_basic(demo_snapshot):
    summary = prepare_projection_summary(
        demo_snapshot["accounts"],
        demo_snapshot["transactions"],
        TODAY,
        settings=Settings(horizon_days=30),
    )

    assert summary["today"] == TODAY
    assert summary["horizon_days"] == 30
    assert summary["instance_count"] > len(demo_snapshot["transactions"])
    assert [row["account_id"] for row in summary["accounts"]] == [CHECKING_ACCOUNT_ID, SAVINGS_ACCOUNT_ID]

    savings = summary["accounts"][1]
    assert len(savings["projection"].points) == 31
    assert savings["available_to_spend"] == pytest.approx(8500.0)
    assert savings["ending_balance"] == pytest.approx(8700.0)

    assert [bill["description"] for bill in summary["upcoming_bills"]] == ["Weekly grocery shopping"]


def test_prepare_projection_summary_horizon_override(demo_snapshot):
    summary = prepare_projection_summary(
        demo_snapshot["accounts"],
        demo_snapshot["transactions"],
        "2025-03-10",
        horizon_days=365,
        settings=Settings(low_balance_threshold=1_000_000.0),
    )

    assert summary["horizon_days"] == 365
    assert all(len(row["projection"].points) == 366 for row in summary["accounts"])
    # Checking carries its own threshold; savings falls back to the settings default.
    assert [alert["account_id"] for alert in summary["low_balance_alerts"]] == [SAVINGS_ACCOUNT_ID]


def test_settings_are_read_from_environment(monkeypatch):
    monkeypatch.setenv("FINCH_HORIZON_DAYS", "90")
    monkeypatch.setenv("FINCH_LOW_BALANCE_THRESHOLD", "125.5")

    settings = get_settings()

    assert settings.horizon_days == 90
    assert settings.low_balance_threshold == pytest.approx(125.5)
    assert settings.max_occurrences == 1000
    assert prepare_projection_summary([], [], TODAY)["horizon_days"] == 90


def test_load_snapshot_round_trips_json(tmp_path, demo_snapshot):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(demo_snapshot), encoding="utf-8")

    assert load_snapshot(path) == demo_snapshot


def test_load_snapshot_rejects_bad_payloads(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")

    with pytest.raises(ValueError):
        load_snapshot(path)
    with pytest.raises(FileNotFoundError):
        load_snapshot(tmp_path / "missing.json")


def test_load_transactions_csv_reads_legacy_recurring_rows(tmp_path):
    path = tmp_path / "transactions.csv"
    path.write_text(
        "id,amount,type,accountId,date,isRecurring,frequency,nextOccurrence\n"
        "t1,-20.0,expense,001,2025-03-05,False,,\n"
        "t2,-50.0,expense,001,,True,weekly,2025-03-12\n",
        encoding="utf-8",
    )

    records = load_transactions_csv(path)

    assert records[0] == {
        "id": "t1",
        "amount": -20.0,
        "type": "expense",
        "accountId": "001",
        "date": "2025-03-05",
        "isRecurring": False,
    }
    assert records[1]["isRecurring"] is True
    assert "date" not in records[1]

    instances = materialize_instances(records, TODAY, 10)
    assert [i.get("instanceId", i["id"]) for i in instances] == ["t1", "t2-2025-03-12", "t2-2025-03-19"]
