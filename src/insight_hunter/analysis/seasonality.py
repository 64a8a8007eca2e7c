#!/usr/bin/env python3
"""
Seasonality Detection and Adjustment

Finds calendar months whose historical average sits well above or below the
typical month, and rescales forecast points that land in those months.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace

import numpy as np

from ..core.currency import round_currency
from ..core.dates import month_of
from ..core.models import ForecastPoint, MonthlyBucket, SeasonalPattern

logger = logging.getLogger(__name__)

SIGNIFICANCE_THRESHOLD = 15.0  # percent deviation from the overall monthly average
MIN_SEASONAL_MONTHS = 12
MIN_MONTH_OCCURRENCES = 2


def _month_averages(
    buckets: Sequence[MonthlyBucket], metric: str, min_occurrences: int
) -> dict[int, tuple[float, int]]:
    """Average and occurrence count per calendar month, keeping months seen at least min_occurrences times."""
    by_month: dict[int, list[float]] = {}
    for bucket in buckets:
        by_month.setdefault(month_of(bucket.period_key), []).append(bucket.value(metric))

    return {
        month: (float(np.mean(values)), len(values))
        for month, values in by_month.items()
        if len(values) >= min_occurrences
    }


def seasonal_overall_average(
    buckets: Sequence[MonthlyBucket],
    metric: str = "revenue",
    min_occurrences: int = MIN_MONTH_OCCURRENCES,
) -> float | None:
    """
    Mean of the per-calendar-month averages.

    Averaging the month averages (rather than all raw values) keeps months
    that appear three times from outweighing months that appear twice.
    Returns None when no month has enough occurrences.
    """
    averages = _month_averages(buckets, metric, min_occurrences)
    if not averages:
        return None
    return float(np.mean([avg for avg, _ in averages.values()]))


def detect_seasonality(
    buckets: Sequence[MonthlyBucket],
    metric: str = "revenue",
    *,
    threshold: float = SIGNIFICANCE_THRESHOLD,
    min_months: int = MIN_SEASONAL_MONTHS,
    min_occurrences: int = MIN_MONTH_OCCURRENCES,
) -> list[SeasonalPattern] | None:
    """
    Detect calendar months that deviate from the overall monthly average.

    Args:
        buckets: Continuous monthly buckets, oldest first
        metric: revenue, expenses or profit
        threshold: Minimum absolute deviation, in percent, to report a month
        min_months: Minimum number of buckets required
        min_occurrences: Minimum times a calendar month must appear

    Returns:
        Patterns ordered by absolute deviation, largest first, or None when
        there is too little data, the overall average is zero, or no month
        crosses the threshold
    """
    if len(buckets) < min_months:
        return None

    averages = _month_averages(buckets, metric, min_occurrences)
    if not averages:
        return None

    overall_average = float(np.mean([avg for avg, _ in averages.values()]))
    if overall_average == 0:
        logger.debug("Seasonality skipped for %s: overall average is zero", metric)
        return None

    patterns = []
    for month in sorted(averages):
        month_average, occurrences = averages[month]
        deviation = (month_average - overall_average) / overall_average * 100
        if abs(deviation) > threshold:
            patterns.append(
                SeasonalPattern(
                    month=month,
                    deviation_percent=round(deviation, 2),
                    average_value=round_currency(month_average),
                    occurrences=occurrences,
                )
            )

    patterns.sort(key=lambda p: abs(p.deviation_percent), reverse=True)
    return patterns or None


def apply_seasonal_adjustment(
    points: Sequence[ForecastPoint],
    patterns: Sequence[SeasonalPattern] | None,
    overall_average: float | None = None,
) -> list[ForecastPoint]:
    """
    Scale forecast points that fall in a seasonal month by (1 + deviation/100).

    Adjusted points record the deviation applied and their pre-adjustment
    value. Applying this twice compounds the adjustment, so call it once per
    forecast. Points without a month key, or in months without a pattern, pass
    through unchanged. A zero overall_average means the patterns carry no
    usable scale and the points are returned as-is.
    """
    if not patterns or overall_average == 0:
        return list(points)

    by_month = {pattern.month: pattern for pattern in patterns}
    adjusted = []
    for point in points:
        pattern = by_month.get(month_of(point.period_key)) if point.period_key else None
        if pattern is None:
            adjusted.append(point)
            continue

        factor = 1 + pattern.deviation_percent / 100
        adjusted.append(
            replace(
                point,
                value=round_currency(point.value * factor),
                seasonal_adjustment=pattern.deviation_percent,
                unadjusted_value=round_currency(point.value),
            )
        )
    return adjusted
