#!/usr/bin/env python3
"""
Currency Conversion and Handling Utilities

All ledger sums use integer cents to avoid floating-point drift. Statistics
(regression, z-scores, seasonal averages) work in float dollars and are
rounded back to 2 decimals only for reporting.

Currency Systems:
- Internal sums use cents: 100 cents = $1.00
- Ledger input may carry floats, ints or dollar strings
- Display uses dollar strings: "$12.34"
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union


def cents_to_dollars_str(cents: int) -> str:
    """
    Convert cents to dollar string using pure integer arithmetic.

    Example:
        cents_to_dollars_str(4599) -> "45.99"
    """
    is_negative = cents < 0
    abs_cents = abs(int(cents))

    dollars = abs_cents // 100
    remainder = abs_cents % 100

    if is_negative:
        return f"-{dollars}.{remainder:02d}"
    return f"{dollars}.{remainder:02d}"


def safe_currency_to_cents(value: Union[str, int, float, None]) -> int:
    """
    Safely convert a ledger amount to integer cents.

    Floats and dollar strings share one rule: both go through their decimal
    string form and are rounded half-up to the cent, so 0.29 becomes 29 rather
    than 28 and "12.345" becomes 1235. Missing or unparseable input yields 0.

    Examples:
        safe_currency_to_cents('$45.99') -> 4599
        safe_currency_to_cents(12.5) -> 1250
        safe_currency_to_cents(None) -> 0
    """
    if value is None or isinstance(value, bool):
        return 0
    try:
        if isinstance(value, int):
            return value * 100

        clean_str = str(value).replace("$", "").replace(",", "").strip()
        if not clean_str or clean_str.lower() in ["nan", "none", "null"]:
            return 0

        decimal_amount = Decimal(clean_str) * 100
        if not decimal_amount.is_finite():
            return 0
        return int(decimal_amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except (ValueError, TypeError, OverflowError, InvalidOperation):
        return 0


def round_currency(value: float) -> float:
    """Round a float dollar amount to 2 decimals for reporting."""
    return round(float(value), 2)


def format_dollars(value: float) -> str:
    """Format a float dollar amount with thousands separators, e.g. "$1,234.50"."""
    if value < 0:
        return f"-${abs(value):,.2f}"
    return f"${value:,.2f}"
