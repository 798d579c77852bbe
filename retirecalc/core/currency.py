"""Country-to-currency policy and money formatting."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

# Ordered: the first code is what the form selects when the country changes.
COUNTRY_CURRENCIES: Dict[str, List[str]] = {
    "United States": ["USD"],
    "Canada": ["CAD"],
    "United Kingdom": ["GBP"],
    "Ireland": ["EUR"],
    "Germany": ["EUR"],
    "France": ["EUR"],
    "Netherlands": ["EUR"],
    "Spain": ["EUR"],
    "Australia": ["AUD"],
    "New Zealand": ["NZD"],
    "Singapore": ["SGD", "USD"],
    "United Arab Emirates": ["AED", "USD"],
    "India": ["INR", "USD"],
    "South Africa": ["ZAR", "USD"],
}

DEFAULT_CURRENCIES: List[str] = ["USD"]

CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "CAD": "CA$",
    "GBP": "£",
    "EUR": "€",
    "AUD": "A$",
    "NZD": "NZ$",
    "SGD": "SGD ",
    "AED": "AED ",
    "INR": "₹",
    "ZAR": "ZAR ",
}


def allowed_currencies(country: Optional[str]) -> List[str]:
    """Return the currencies offered for ``country`` (a fresh list)."""
    return list(COUNTRY_CURRENCIES.get((country or "").strip(), DEFAULT_CURRENCIES))


def default_currency(country: Optional[str]) -> str:
    return allowed_currencies(country)[0]


def is_currency_allowed(country: Optional[str], currency: str) -> bool:
    return currency in allowed_currencies(country)


def currency_symbol(currency: Optional[str]) -> str:
    code = (currency or "USD").upper()
    return CURRENCY_SYMBOLS.get(code, f"{code} ")


def round_half_up(value: float) -> int:
    """Round to a whole number, ties away from zero on the exact binary value.

    Browsers round ``toFixed(0)`` and currency formatting this way, so
    12.5 becomes 13 rather than Python's 12.
    """
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_money(amount: float, currency: Optional[str] = "USD") -> str:
    """Format ``amount`` with symbol, thousands separators and no decimals."""
    symbol = currency_symbol(currency)
    if not math.isfinite(amount):
        return f"{symbol}0"

    whole = round_half_up(amount)
    if whole < 0:
        return f"-{symbol}{abs(whole):,}"
    return f"{symbol}{whole:,}"


def format_axis_money(value: float, currency: Optional[str] = "USD") -> str:
    """Compact tick label used on the projection chart's y axis."""
    symbol = currency_symbol(currency).strip()
    if value >= 1000:
        return f"{symbol}{round_half_up(value / 1000)}k"
    if float(value).is_integer():
        return f"{symbol}{int(value)}"
    return f"{symbol}{value:g}"
