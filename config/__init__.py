"""Application configuration utilities."""

from .settings import (
    DEFAULT_CALENDAR_HORIZON_DAYS,
    DEFAULT_HORIZON_DAYS,
    DEFAULT_LOW_BALANCE_THRESHOLD,
    DEFAULT_MAX_OCCURRENCES,
    Settings,
    get_settings,
)

__all__ = [
    "DEFAULT_CALENDAR_HORIZON_DAYS",
    "DEFAULT_HORIZON_DAYS",
    "DEFAULT_LOW_BALANCE_THRESHOLD",
    "DEFAULT_MAX_OCCURRENCES",
    "Settings",
    "get_settings",
]
