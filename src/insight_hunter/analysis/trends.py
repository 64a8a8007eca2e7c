#!/usr/bin/env python3
"""
Trend Metrics

Dashboard-level metrics over a monthly series: moving averages for
smoothing, month-over-month revenue growth, and headline KPIs.
"""

from collections.abc import Sequence
from typing import Any

import pandas as pd

from ..core.models import METRICS, MonthlyBucket

GROWTH_TREND_THRESHOLD = 5.0  # percent


def buckets_to_frame(buckets: Sequence[MonthlyBucket]) -> pd.DataFrame:
    """Monthly buckets as a DataFrame indexed by month key, one float column per metric."""
    frame = pd.DataFrame(
        [{"month": b.period_key, **{metric: b.value(metric) for metric in METRICS}} for b in buckets],
        columns=["month", *METRICS],
    )
    return frame.set_index("month")


def moving_averages(buckets: Sequence[MonthlyBucket], window: int = 3) -> list[dict[str, Any]]:
    """
    Trailing moving average of revenue, expenses and profit.

    Early months average over however many months are available, so the
    output has one row per bucket.
    """
    if window < 1:
        raise ValueError(f"window must be at least 1, got {window}")
    if not buckets:
        return []

    smoothed = buckets_to_frame(buckets).rolling(window=window, min_periods=1).mean().round(2)
    return [
        {"month": month, **{metric: float(row[metric]) for metric in METRICS}}
        for month, row in smoothed.iterrows()
    ]


def growth_metrics(buckets: Sequence[MonthlyBucket]) -> dict[str, Any]:
    """
    Month-over-month revenue growth.

    A month following a zero-revenue month reports 0% growth. The summary
    trend is "up" or "down" when average growth exceeds 5% either way.
    """
    frame = buckets_to_frame(buckets)
    previous = frame["revenue"].shift(1)

    data = []
    for month, revenue, prev_revenue in zip(frame.index[1:], frame["revenue"].iloc[1:], previous.iloc[1:]):
        growth = (revenue - prev_revenue) / prev_revenue * 100 if prev_revenue > 0 else 0.0
        data.append(
            {
                "month": month,
                "revenue": float(revenue),
                "prevRevenue": float(prev_revenue),
                "growthRate": round(float(growth), 2),
            }
        )

    rates = [point["growthRate"] for point in data]
    average = sum(rates) / len(rates) if rates else 0.0
    if average > GROWTH_TREND_THRESHOLD:
        trend = "up"
    elif average < -GROWTH_TREND_THRESHOLD:
        trend = "down"
    else:
        trend = "stable"

    return {
        "data": data,
        "summary": {
            "averageGrowthRate": round(average, 2),
            "highestGrowth": max(rates) if rates else 0.0,
            "lowestGrowth": min(rates) if rates else 0.0,
            "trend": trend,
        },
    }


def dashboard_kpis(buckets: Sequence[MonthlyBucket]) -> dict[str, float]:
    """Headline numbers for the latest month, with profit margin and revenue change in percent."""
    if not buckets:
        return {
            "monthlyRevenue": 0.0,
            "monthlyExpenses": 0.0,
            "netProfit": 0.0,
            "profitMargin": 0.0,
            "revenueChange": 0.0,
        }

    current = buckets[-1]
    revenue = current.value("revenue")
    profit = current.value("profit")
    previous_revenue = buckets[-2].value("revenue") if len(buckets) > 1 else 0.0

    return {
        "monthlyRevenue": revenue,
        "monthlyExpenses": current.value("expenses"),
        "netProfit": profit,
        "profitMargin": round(profit / revenue * 100, 1) if revenue > 0 else 0.0,
        "revenueChange": (
            round((revenue - previous_revenue) / previous_revenue * 100, 1) if previous_revenue > 0 else 0.0
        ),
    }
