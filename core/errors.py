"""Exceptions raised by the projection pipeline.

Malformed records are skipped and logged rather than raised; these errors are
reserved for programming-contract violations such as a negative horizon.
"""

from __future__ import annotations

__all__ = [
    "ProjectionError",
    "InvalidHorizonError",
    "InvalidDateError",
]


class ProjectionError(Exception):
    """Base class for errors raised by the projection pipeline."""


class InvalidHorizonError(ProjectionError, ValueError):
    """Raised when a horizon or iteration bound is not a usable integer."""


class InvalidDateError(ProjectionError, ValueError):
    """Raised when a required reference date cannot be normalised."""
