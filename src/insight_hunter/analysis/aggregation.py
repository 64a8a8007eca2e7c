#!/usr/bin/env python3
"""
Ledger Aggregation

Turns ledger records into the continuous monthly series that forecasting,
seasonality and trend analysis run on, plus per-category spending totals.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable

from ..core.dates import FinancialDate, MonthKey, month_range, months_between, to_month_key
from ..core.models import CategoryTotal, LedgerRecord, MonthlyBucket
from ..core.money import Money

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"
CATEGORY_BREAKDOWN_LIMIT = 15


def aggregate_monthly(
    records: Iterable[LedgerRecord],
    start_month: "MonthKey | FinancialDate",
    end_month: "MonthKey | FinancialDate",
) -> list[MonthlyBucket]:
    """
    Aggregate records into one bucket per calendar month.

    Every month in [start_month, end_month] gets a bucket, including months
    with no records (all-zero totals), so the result never has gaps.
    Records dated outside the window are ignored.

    Args:
        records: Ledger records in any order
        start_month: First month of the window ("YYYY-MM" or a date)
        end_month: Last month of the window, inclusive

    Returns:
        Buckets ordered oldest to newest

    Raises:
        ValueError: If end_month precedes start_month
    """
    start_key = to_month_key(start_month)
    end_key = to_month_key(end_month)
    if months_between(start_key, end_key) < 0:
        raise ValueError(f"Month window is inverted: {start_key} > {end_key}")

    revenue: dict[MonthKey, int] = defaultdict(int)
    expenses: dict[MonthKey, int] = defaultdict(int)
    counts: dict[MonthKey, int] = defaultdict(int)

    for record in records:
        key = record.month_key
        if key < start_key or key > end_key:
            continue
        cents = record.amount.to_cents()
        if cents < 0:
            expenses[key] += -cents
        else:
            revenue[key] += cents
        counts[key] += 1

    buckets = [
        MonthlyBucket(
            period_key=key,
            revenue=Money.from_cents(revenue.get(key, 0)),
            expenses=Money.from_cents(expenses.get(key, 0)),
            transaction_count=counts.get(key, 0),
        )
        for key in month_range(start_key, end_key)
    ]

    logger.debug(
        "Aggregated %d records into %d monthly buckets (%s to %s)",
        sum(counts.values()),
        len(buckets),
        start_key,
        end_key,
    )
    return buckets


def category_breakdown(
    records: Iterable[LedgerRecord],
    since: FinancialDate | None = None,
    limit: int | None = CATEGORY_BREAKDOWN_LIMIT,
) -> list[CategoryTotal]:
    """
    Outflow totals per category, largest first.

    Records without a category, or categorized as "Uncategorized", are left
    out. Ties on total keep first-seen category order.
    """
    totals: dict[str, int] = {}
    counts: dict[str, int] = {}

    for record in records:
        if not record.is_outflow or not record.category or record.category == UNCATEGORIZED:
            continue
        if since is not None and record.date < since:
            continue
        totals[record.category] = totals.get(record.category, 0) + record.abs_amount.to_cents()
        counts[record.category] = counts.get(record.category, 0) + 1

    breakdown = [
        CategoryTotal(category=category, total=Money.from_cents(total), count=counts[category])
        for category, total in totals.items()
    ]
    breakdown.sort(key=lambda c: c.total.cents, reverse=True)
    return breakdown[:limit] if limit is not None else breakdown


def monthly_category_totals(records: Iterable[LedgerRecord], category: str) -> dict[MonthKey, Money]:
    """Outflow total per month for a single category, keyed by month; months without spend are absent."""
    totals: dict[MonthKey, int] = defaultdict(int)
    for record in records:
        if record.is_outflow and record.category == category:
            totals[record.month_key] += record.abs_amount.to_cents()
    return {key: Money.from_cents(cents) for key, cents in sorted(totals.items())}


def monthly_income_totals(records: Iterable[LedgerRecord]) -> dict[MonthKey, Money]:
    """Inflow total per month, keyed by month; only months with a positive inflow appear."""
    totals: dict[MonthKey, int] = defaultdict(int)
    for record in records:
        if record.amount.to_cents() > 0:
            totals[record.month_key] += record.amount.to_cents()
    return {key: Money.from_cents(cents) for key, cents in sorted(totals.items())}
