"""Unit tests for balance projection and available-to-spend analytics."""

from __future__ import annotations

import logging
from datetime import date, timedelta

import pytest

from analytics.forecasting import (
    available_to_spend,
    calculate_projections,
    project_account_balance,
    projection_frame,
    simulate_purchase,
)
from analytics.instances import materialize_instances
from core.errors import InvalidHorizonError
from core.models import AccountProjection, ProjectionPoint

TODAY = date(2025, 3, 10)


def test_past_expense_is_folded_into_opening_balance():
    records = [
        {"id": "groceries", "amount": -45.0, "accountId": "checking", "date": TODAY - timedelta(days=3)},
    ]
    instances = materialize_instances(records, TODAY, 10)

    projection = project_account_balance("checking", 100.0, instances, TODAY, 10)

    assert len(projection.points) == 11
    assert projection.points[0].date == TODAY
    assert projection.points[-1].date == date(2025, 3, 20)
    assert all(point.balance == pytest.approx(55.0) for point in projection.points)
    assert all(point.transactions == () for point in projection.points)


def test_biweekly_income_steps_up_on_each_occurrence():
    records = [
        {
            "id": "paycheck",
            "amount": 1000.0,
            "type": "income",
            "accountId": "checking",
            "isRecurring": True,
            "recurringDetails": {"nextDate": TODAY, "frequency": "biweekly"},
        }
    ]
    instances = materialize_instances(records, TODAY, 30)

    balances = project_account_balance("checking", 0.0, instances, TODAY, 30).balances

    assert len(balances) == 31
    assert balances[0] == pytest.approx(1000.0)
    assert balances[13] == pytest.approx(1000.0)
    assert balances[14] == pytest.approx(2000.0)
    assert balances[27] == pytest.approx(2000.0)
    assert balances[28] == pytest.approx(3000.0)
    assert balances[30] == pytest.approx(3000.0)


def test_each_day_adds_only_its_own_instances():
    records = [
        {"id": "a", "amount": -10.0, "accountId": "checking", "date": "2025-03-11"},
        {"id": "b", "amount": -5.0, "accountId": "checking", "date": "2025-03-11"},
        {"id": "c", "amount": 20.0, "accountId": "checking", "date": "2025-03-13"},
        {"id": "other", "amount": -999.0, "accountId": "savings", "date": "2025-03-11"},
    ]
    instances = materialize_instances(records, TODAY, 5)

    projection = project_account_balance("checking", 100.0, instances, TODAY, 5)

    assert projection.balances == pytest.approx([100.0, 85.0, 85.0, 105.0, 105.0, 105.0])
    assert [t["id"] for t in projection.points[1].transactions] == ["a", "b"]
    for previous, current in zip(projection.points, projection.points[1:]):
        day_total = sum(t["amount"] for t in current.transactions)
        assert current.balance == pytest.approx(previous.balance + day_total)


def test_final_balance_conserves_one_off_amounts():
    records = [
        {"id": f"t{offset}", "amount": amount, "accountId": "checking", "date": TODAY + timedelta(days=offset)}
        for offset, amount in [(-20, -12.34), (-1, 250.0), (0, -99.99), (7, -0.01), (15, 40.5)]
    ]
    instances = materialize_instances(records, TODAY, 15)

    projection = project_account_balance("checking", 1000.0, instances, TODAY, 15)

    expected = 1000.0 + sum(record["amount"] for record in records)
    assert projection.points[-1].balance == pytest.approx(expected)


def test_instances_beyond_the_horizon_are_ignored():
    instances = [{"id": "late", "amount": -50.0, "accountId": "checking", "date": date(2025, 4, 30)}]

    projection = project_account_balance("checking", 10.0, instances, TODAY, 5)

    assert projection.balances == pytest.approx([10.0] * 6)


def test_negative_horizon_raises():
    with pytest.raises(InvalidHorizonError):
        project_account_balance("checking", 0.0, [], TODAY, -1)


def test_calculate_projections_covers_every_account():
    accounts = [
        {"id": "checking", "startingBalance": 500.0},
        {"id": "savings", "startingBalance": 2000.0},
        {"id": "empty"},
    ]
    records = [
        {"id": "rent", "amount": -450.0, "accountId": "checking", "isRecurring": True, "recurringDetails": {"nextDate": "2025-03-15", "frequency": "monthly"}},
        {"id": "interest", "amount": 3.0, "accountId": "savings", "date": "2025-03-31"},
    ]

    projections = calculate_projections(accounts, records, TODAY, 60)

    assert [p.account_id for p in projections] == ["checking", "savings", "empty"]
    assert all(len(p.points) == 61 for p in projections)
    assert available_to_spend(projections[0]) == pytest.approx(-400.0)
    assert projections[1].points[-1].balance == pytest.approx(2003.0)
    assert available_to_spend(projections[2]) == pytest.approx(0.0)
    assert calculate_projections([], records, TODAY, 60) == []


def test_available_to_spend_is_the_minimum_balance():
    assert available_to_spend([100, 80, -20, 50, 90]) == -20
    assert available_to_spend([]) == 0
    assert available_to_spend(None) == 0

    projection = AccountProjection(
        account_id="checking",
        points=(ProjectionPoint(TODAY, 12.5), ProjectionPoint(TODAY + timedelta(days=1), 7.25)),
    )
    assert available_to_spend(projection) == pytest.approx(7.25)
    assert available_to_spend(projection.points) == pytest.approx(7.25)


def test_projection_frame_is_long_format():
    accounts = [{"id": "checking", "startingBalance": 100.0}, {"id": "savings", "startingBalance": 50.0}]
    records = [{"id": "a", "amount": -30.0, "accountId": "checking", "date": "2025-03-12"}]

    frame = projection_frame(calculate_projections(accounts, records, TODAY, 3))

    assert list(frame.columns) == ["account_id", "date", "balance", "net_change", "transaction_count"]
    assert len(frame) == 8
    checking = frame[frame["account_id"] == "checking"]
    assert checking["balance"].tolist() == pytest.approx([100.0, 100.0, 70.0, 70.0])
    assert checking["net_change"].tolist() == pytest.approx([0.0, 0.0, -30.0, 0.0])
    assert checking["transaction_count"].tolist() == [0, 0, 1, 0]


def test_projection_frame_handles_no_projections():
    frame = projection_frame([])

    assert frame.empty
    assert "balance" in frame.columns


def test_simulate_purchase_leaves_inputs_untouched():
    account = {"id": "checking", "startingBalance": 500.0}
    records = [{"id": "pay", "amount": 100.0, "accountId": "checking", "date": "2025-03-20"}]

    result = simulate_purchase(account, records, TODAY, 200.0, "2025-03-15", horizon_days=15)

    assert result["baseline_available"] == pytest.approx(500.0)
    assert result["simulated_available"] == pytest.approx(300.0)
    assert result["available_change"] == pytest.approx(-200.0)
    assert result["simulated"].points[4].balance == pytest.approx(500.0)
    assert result["simulated"].points[5].balance == pytest.approx(300.0)
    assert result["simulated"].points[-1].balance == pytest.approx(400.0)
    assert len(records) == 1
    assert account == {"id": "checking", "startingBalance": 500.0}


def test_horizon_past_the_calendar_raises_invalid_horizon():
    with pytest.raises(InvalidHorizonError):
        project_account_balance("checking", 0.0, [], TODAY, 10**9)


def test_non_numeric_starting_balance_projects_from_zero(caplog):
    caplog.set_level(logging.WARNING)
    accounts = [
        {"id": "a", "startingBalance": "n/a"},
        {"id": "b", "startingBalance": 10.0},
    ]

    projections = calculate_projections(accounts, [], TODAY, 5)

    assert [p.account_id for p in projections] == ["a", "b"]
    assert projections[0].balances == pytest.approx([0.0] * 6)
    assert projections[1].balances == pytest.approx([10.0] * 6)
    assert "non-numeric starting balance" in caplog.text
