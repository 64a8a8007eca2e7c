#!/usr/bin/env python3
"""
FinancialDate Primitive Type and Month Keys

Immutable date wrapper plus helpers for the "YYYY-MM" month keys that the
aggregation, forecasting and seasonality code index by.
"""

from dataclasses import dataclass
from datetime import date, datetime

import pandas as pd

MonthKey = str  # "YYYY-MM"


@dataclass(frozen=True, order=True)
class FinancialDate:
    """Immutable financial date wrapper with consistent formatting."""

    date: date

    @classmethod
    def from_string(cls, date_str: str, date_format: str = "%Y-%m-%d") -> "FinancialDate":
        """
        Parse from string in the given format.

        Timestamps such as "2024-03-05T14:30:00" or "2024-03-05 14:30:00" are
        accepted with the default format; only the calendar date is kept.
        """
        text = date_str.strip()
        if date_format == "%Y-%m-%d" and len(text) > 10:
            text = text[:10]
        return cls(date=datetime.strptime(text, date_format).date())

    @classmethod
    def from_value(cls, value: "FinancialDate | date | datetime | str") -> "FinancialDate":
        """Coerce a date-like value."""
        if isinstance(value, FinancialDate):
            return value
        if isinstance(value, datetime):
            return cls(date=value.date())
        if isinstance(value, date):
            return cls(date=value)
        if isinstance(value, str):
            return cls.from_string(value)
        raise ValueError(f"Cannot interpret {value!r} as a date")

    @classmethod
    def today(cls) -> "FinancialDate":
        return cls(date=date.today())

    @property
    def month_key(self) -> MonthKey:
        """Calendar month of this date as "YYYY-MM"."""
        return f"{self.date.year:04d}-{self.date.month:02d}"

    def to_iso_string(self) -> str:
        """Format as YYYY-MM-DD."""
        return self.date.isoformat()

    def __str__(self) -> str:
        return self.to_iso_string()

    def __repr__(self) -> str:
        return f"FinancialDate(date={self.date!r})"


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """
    Parse an ISO timestamp carrying a time of day.

    Returns None for plain dates ("2024-03-05") and for unparseable input,
    since the time-of-day checks only apply to records with a real time.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if len(text) <= 10:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_month_key(month_key: MonthKey) -> tuple[int, int]:
    """
    Parse "YYYY-MM" into (year, month).

    Raises:
        ValueError: If the key is malformed or the month is out of range
    """
    try:
        year_str, month_str = month_key.split("-")
        year, month = int(year_str), int(month_str)
    except (AttributeError, ValueError) as e:
        raise ValueError(f"Invalid month key: {month_key!r}") from e
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month key: {month_key!r}")
    return year, month


def to_month_key(value: "MonthKey | FinancialDate | date") -> MonthKey:
    """Normalize a month key, FinancialDate or date to "YYYY-MM"."""
    if isinstance(value, FinancialDate):
        return value.month_key
    if isinstance(value, date):
        return f"{value.year:04d}-{value.month:02d}"
    year, month = parse_month_key(value)
    return f"{year:04d}-{month:02d}"


def add_months(month_key: MonthKey, months: int) -> MonthKey:
    """Shift a month key by a (possibly negative) number of months."""
    year, month = parse_month_key(month_key)
    index = year * 12 + (month - 1) + months
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def months_between(start: MonthKey, end: MonthKey) -> int:
    """Number of whole months from start to end (0 when equal, negative if end is earlier)."""
    start_year, start_month = parse_month_key(start)
    end_year, end_month = parse_month_key(end)
    return (end_year - start_year) * 12 + (end_month - start_month)


def month_range(start: MonthKey, end: MonthKey) -> list[MonthKey]:
    """Every month key from start to end inclusive; empty when end precedes start."""
    if months_between(start, end) < 0:
        return []
    periods = pd.period_range(start=to_month_key(start), end=to_month_key(end), freq="M")
    return [str(period) for period in periods]


def month_of(month_key: MonthKey) -> int:
    """Calendar month number (1-12) of a month key."""
    return parse_month_key(month_key)[1]
