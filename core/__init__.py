"""Core domain package for the Finch projection engine."""

from .dates import add_days, add_months, add_years, normalize_date, require_date, to_date_key
from .errors import InvalidDateError, InvalidHorizonError, ProjectionError
from .models import (
    AccountProjection,
    AccountRecord,
    ProjectionPoint,
    RecurringDefinition,
    TransactionInstance,
    TransactionRecord,
)

__all__ = [
    "AccountProjection",
    "AccountRecord",
    "ProjectionPoint",
    "RecurringDefinition",
    "TransactionInstance",
    "TransactionRecord",
    "InvalidDateError",
    "InvalidHorizonError",
    "ProjectionError",
    "add_days",
    "add_months",
    "add_years",
    "normalize_date",
    "require_date",
    "to_date_key",
]
