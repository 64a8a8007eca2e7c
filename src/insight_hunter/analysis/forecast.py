#!/usr/bin/env python3
"""
Forecast Reports

Runs the forecasting pipeline end to end: monthly aggregation, linear
forecasts for revenue, expenses and profit, seasonality detection on
revenue, and seasonal adjustment of the revenue forecast.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from ..core.dates import FinancialDate
from ..core.models import METRICS, ForecastResult, LedgerRecord, MonthlyBucket, SeasonalPattern
from ..core.periods import month_window, time_range_months
from .aggregation import aggregate_monthly
from .regression import forecast_buckets
from .seasonality import (
    MIN_SEASONAL_MONTHS,
    SIGNIFICANCE_THRESHOLD,
    apply_seasonal_adjustment,
    detect_seasonality,
    seasonal_overall_average,
)

logger = logging.getLogger(__name__)

SEASONAL_METRIC = "revenue"


@dataclass
class ForecastReport:
    """Historical series plus per-metric forecasts and detected seasonality."""

    historical: list[MonthlyBucket]
    forecasts: dict[str, ForecastResult]
    seasonality: list[SeasonalPattern] | None = None
    generated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "historical": [b.to_dict() for b in self.historical],
            "forecasts": {metric: result.to_dict() for metric, result in self.forecasts.items()},
            "seasonality": [p.to_dict() for p in self.seasonality] if self.seasonality else None,
            "generatedAt": self.generated_at.isoformat(),
        }


def build_forecast_report(
    buckets: Sequence[MonthlyBucket],
    periods_ahead: int = 3,
    *,
    seasonal: bool = True,
    threshold: float = SIGNIFICANCE_THRESHOLD,
    min_months: int = MIN_SEASONAL_MONTHS,
) -> ForecastReport:
    """
    Forecast every metric of a monthly series.

    When seasonal patterns are found in revenue and `seasonal` is set, the
    revenue forecast points are seasonally adjusted exactly once.
    """
    forecasts = {metric: forecast_buckets(buckets, metric, periods_ahead) for metric in METRICS}
    seasonality = detect_seasonality(buckets, SEASONAL_METRIC, threshold=threshold, min_months=min_months)

    if seasonal and seasonality:
        overall_average = seasonal_overall_average(buckets, SEASONAL_METRIC)
        revenue = forecasts[SEASONAL_METRIC]
        forecasts[SEASONAL_METRIC] = replace(
            revenue,
            points=apply_seasonal_adjustment(revenue.points, seasonality, overall_average),
        )
        logger.debug("Applied %d seasonal patterns to the revenue forecast", len(seasonality))

    return ForecastReport(historical=list(buckets), forecasts=forecasts, seasonality=seasonality)


def forecast_ledger(
    records: Iterable[LedgerRecord],
    *,
    end: FinancialDate | None = None,
    time_range: str | None = "90days",
    periods_ahead: int = 3,
    seasonal: bool = True,
    threshold: float = SIGNIFICANCE_THRESHOLD,
    min_months: int = MIN_SEASONAL_MONTHS,
) -> ForecastReport:
    """
    Aggregate a ledger over a time range and forecast it.

    The window ends in the month of `end` (default: the latest record date,
    or today for an empty ledger) and reaches back time_range_months(time_range)
    months.
    """
    all_records = list(records)
    if end is None:
        end = max((r.date for r in all_records), default=FinancialDate.today())

    start_key, end_key = month_window(end, time_range_months(time_range))
    buckets = aggregate_monthly(all_records, start_key, end_key)
    logger.info("Forecasting %d months (%s to %s), %d periods ahead", len(buckets), start_key, end_key, periods_ahead)

    return build_forecast_report(
        buckets,
        periods_ahead,
        seasonal=seasonal,
        threshold=threshold,
        min_months=min_months,
    )
