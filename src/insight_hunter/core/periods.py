#!/usr/bin/env python3
"""
Request Parameter Mapping

Translates the route layer's query parameters (period, time_range) into the
typed windows the analytics functions accept.
"""

import re
from datetime import date

from .dates import FinancialDate, MonthKey, add_months, to_month_key

DEFAULT_PERIOD_DAYS = 30
DEFAULT_TIME_RANGE_MONTHS = 6

PERIOD_PATTERN = re.compile(r"^(\d+)([dmy])$")
PERIOD_UNIT_DAYS = {"d": 1, "m": 30, "y": 365}

TIME_RANGE_MONTHS = {
    "30days": 3,
    "90days": 6,
    "180days": 12,
    "1year": 12,
    "2years": 24,
}


def parse_period(period: str | None) -> int:
    """
    Convert a period string like "30d", "3m" or "1y" to a number of days.

    Months count as 30 days and years as 365. Anything not matching the
    grammar falls back to 30 days.

    Examples:
        parse_period("7d") -> 7
        parse_period("2m") -> 60
        parse_period("weekly") -> 30
    """
    if not period:
        return DEFAULT_PERIOD_DAYS
    match = PERIOD_PATTERN.match(period.strip())
    if not match:
        return DEFAULT_PERIOD_DAYS
    value, unit = match.groups()
    return int(value) * PERIOD_UNIT_DAYS[unit]


def time_range_months(time_range: str | None) -> int:
    """Months of history to aggregate for a forecast time range such as "90days"."""
    if not time_range:
        return DEFAULT_TIME_RANGE_MONTHS
    return TIME_RANGE_MONTHS.get(time_range.strip(), DEFAULT_TIME_RANGE_MONTHS)


def month_window(end: "FinancialDate | date | MonthKey", months_back: int) -> tuple[MonthKey, MonthKey]:
    """
    Month window ending at `end` and reaching `months_back` months earlier.

    The window is inclusive on both sides, so it covers months_back + 1 months.
    """
    if months_back < 0:
        raise ValueError("months_back must be non-negative")
    end_key = to_month_key(end)
    return add_months(end_key, -months_back), end_key


def cache_key(kind: str, user_id: str, client_id: str | None, time_range: str | None = None) -> str:
    """
    Key under which callers memoize a result in the session cache.

    Example:
        cache_key("forecast", "42", None, "90days") -> "forecast:42:none:90days"
    """
    parts = [kind, str(user_id), str(client_id) if client_id else "none"]
    if time_range:
        parts.append(time_range)
    return ":".join(parts)
