"""Analytics helpers for the projection pipeline."""

from analytics.alerts import detect_low_balance_alerts, find_upcoming_bills, resolve_threshold
from analytics.forecasting import (
    available_to_spend,
    calculate_projections,
    project_account_balance,
    projection_frame,
    simulate_purchase,
)
from analytics.instances import instances_in_range, materialize_instances, validate_horizon
from analytics.recurring import (
    FREQUENCIES,
    advance_date,
    expand_occurrences,
    recurring_series,
    resolve_frequency,
    resolve_recurring_definition,
)

__all__ = [
    "detect_low_balance_alerts",
    "find_upcoming_bills",
    "resolve_threshold",
    "available_to_spend",
    "calculate_projections",
    "project_account_balance",
    "projection_frame",
    "simulate_purchase",
    "instances_in_range",
    "materialize_instances",
    "validate_horizon",
    "FREQUENCIES",
    "advance_date",
    "expand_occurrences",
    "recurring_series",
    "resolve_frequency",
    "resolve_recurring_definition",
]
