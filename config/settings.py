"""Centralised configuration handling for the projection engine."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HORIZON_DAYS = 60
DEFAULT_CALENDAR_HORIZON_DAYS = 365
DEFAULT_MAX_OCCURRENCES = 1000
DEFAULT_LOW_BALANCE_THRESHOLD = 50.0


class Settings(BaseSettings):
    """Projection settings sourced from ``FINCH_*`` environment variables."""

    horizon_days: int = Field(default=DEFAULT_HORIZON_DAYS, ge=0)
    calendar_horizon_days: int = Field(default=DEFAULT_CALENDAR_HORIZON_DAYS, ge=0)
    max_occurrences: int = Field(default=DEFAULT_MAX_OCCURRENCES, gt=0)
    low_balance_threshold: float = DEFAULT_LOW_BALANCE_THRESHOLD
    upcoming_bill_days: int = Field(default=2, ge=0)
    currency: str = "USD"

    model_config = SettingsConfigDict(env_prefix="FINCH_", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()
