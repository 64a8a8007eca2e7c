#!/usr/bin/env python3
"""
Linear Trend Forecasting

Fits an ordinary least-squares line to a monthly series and projects it
forward. Confidence comes from the residual spread relative to the series
mean, not from a p-value.
"""

import logging
from collections.abc import Sequence

import numpy as np
from scipy import stats

from ..core.currency import round_currency
from ..core.dates import MonthKey, add_months
from ..core.models import METRICS, ForecastMethod, ForecastPoint, ForecastResult, MonthlyBucket, Trend

logger = logging.getLogger(__name__)

MIN_REGRESSION_POINTS = 3
STABLE_SLOPE_RATIO = 0.01
NON_NEGATIVE_METRICS = {"revenue"}


def forecast_series(
    values: Sequence[float],
    periods_ahead: int = 3,
    *,
    last_period_key: MonthKey | None = None,
    non_negative: bool = False,
) -> ForecastResult:
    """
    Project a series forward along its least-squares trend line.

    Args:
        values: Historical values, oldest first, one per period
        periods_ahead: How many periods to project (at least 1)
        last_period_key: Month of the last value; when given, projected
            points carry their own month keys
        non_negative: Clamp negative projections to zero (revenue-like series)

    Returns:
        ForecastResult. Fewer than 3 values gives an insufficient_data result
        and a fit that cannot be computed gives an error result; neither raises.

    Raises:
        ValueError: If periods_ahead is less than 1
    """
    if periods_ahead < 1:
        raise ValueError(f"periods_ahead must be at least 1, got {periods_ahead}")

    if len(values) < MIN_REGRESSION_POINTS:
        logger.debug("Forecast skipped: %d points, need %d", len(values), MIN_REGRESSION_POINTS)
        return ForecastResult.insufficient_data()

    y = np.asarray(values, dtype=float)
    if not np.all(np.isfinite(y)):
        logger.error("Forecasting error: series contains non-finite values")
        return ForecastResult.error()

    n = len(y)
    x = np.arange(n, dtype=float)

    try:
        fit = stats.linregress(x, y)
    except ValueError as e:
        logger.error(f"Forecasting error: {e}")
        return ForecastResult.error()

    slope = float(fit.slope)
    intercept = float(fit.intercept)
    if not (np.isfinite(slope) and np.isfinite(intercept)):
        logger.error("Forecasting error: regression produced a non-finite fit")
        return ForecastResult.error()

    points = []
    for i in range(1, periods_ahead + 1):
        forecast_value = slope * (n - 1 + i) + intercept
        if non_negative and forecast_value < 0:
            forecast_value = 0.0
        points.append(
            ForecastPoint(
                period_index=i,
                value=round_currency(forecast_value),
                period_key=add_months(last_period_key, i) if last_period_key else None,
            )
        )

    mean_value = float(np.mean(y))
    residuals = y - (slope * x + intercept)

    if mean_value == 0:
        confidence = 0.0
    else:
        variation_coefficient = float(np.std(residuals)) / abs(mean_value)
        confidence = min(1.0, max(0.0, 1 - variation_coefficient))

    return ForecastResult(
        points=points,
        confidence=round(confidence, 2),
        method=ForecastMethod.LINEAR_REGRESSION,
        trend=classify_trend(slope, mean_value),
        slope=slope,
        intercept=intercept,
    )


def classify_trend(slope: float, mean_value: float) -> Trend:
    """
    Classify a slope relative to the series level.

    Slopes smaller than 1% of the mean's magnitude count as stable.
    """
    if slope == 0 or abs(slope) < STABLE_SLOPE_RATIO * abs(mean_value):
        return Trend.STABLE
    return Trend.INCREASING if slope > 0 else Trend.DECREASING


def forecast_buckets(buckets: Sequence[MonthlyBucket], metric: str, periods_ahead: int = 3) -> ForecastResult:
    """
    Forecast one metric of a monthly series.

    Revenue projections are clamped at zero; expenses and profit are not.

    Raises:
        ValueError: If metric is unknown or periods_ahead is less than 1
    """
    if metric not in METRICS:
        raise ValueError(f"Unknown metric {metric!r}; expected one of {', '.join(METRICS)}")
    values = [bucket.value(metric) for bucket in buckets]
    last_key = buckets[-1].period_key if buckets else None
    return forecast_series(
        values,
        periods_ahead,
        last_period_key=last_key,
        non_negative=metric in NON_NEGATIVE_METRICS,
    )
