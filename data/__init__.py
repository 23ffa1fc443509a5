"""Demo data for exploring projections."""

from data.demo import generate_demo_snapshot

__all__ = ["generate_demo_snapshot"]
