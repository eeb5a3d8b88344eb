"""Formatting helpers for monetary amounts shown in notifications."""

from __future__ import annotations

from decimal import Decimal
from typing import Final

_CURRENCY_SYMBOLS: Final[dict[str, str]] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "BDT": "৳",
    "CAD": "CA$",
    "AUD": "A$",
}


def format_amount(amount: Decimal | float | int | None, currency: str | None = None) -> str:
    """Return ``amount`` formatted with two decimals and its currency symbol."""

    value = Decimal(str(amount if amount is not None else 0))
    code = (currency or "USD").strip().upper()
    formatted = f"{value:,.2f}"
    symbol = _CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{code} {formatted}"
    if value < 0:
        return f"-{symbol}{formatted[1:]}"
    return f"{symbol}{formatted}"


__all__ = ["format_amount"]
