"""Formatting helpers for projection messages."""

from __future__ import annotations

__all__ = ["format_currency"]

_CURRENCY_SYMBOLS = {
    "USD": "$",
    "CAD": "$",
    "AUD": "$",
    "GBP": "£",
    "EUR": "€",
}


def format_currency(amount: float, currency: str = "USD") -> str:
    """Format ``amount`` with two decimals, e.g. ``-$1,234.50``."""

    code = currency.upper()
    sign = "-" if amount < 0 else ""
    value = f"{abs(amount):,.2f}"
    symbol = _CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{code} {value}"
    return f"{sign}{symbol}{value}"
