"""
Core Utilities Package

Shared primitives and configuration used across the analytics package.

This package provides:
- Money and FinancialDate value types with integer-cent arithmetic
- Data models for ledger records, monthly buckets, forecasts and anomalies
- Request parameter mapping (period strings, time ranges, month windows)
- Environment-based configuration
"""

from .config import AnalyticsConfig, Config, Environment, get_config, reload_config
from .dates import FinancialDate, add_months, month_range, months_between
from .models import (
    Anomaly,
    AnomalyKind,
    CategoryTotal,
    ExpectedRange,
    FlowDirection,
    ForecastMethod,
    ForecastPoint,
    ForecastResult,
    LedgerRecord,
    MonthlyBucket,
    SeasonalPattern,
    Sensitivity,
    Severity,
    Trend,
)
from .money import Money
from .periods import cache_key, month_window, parse_period, time_range_months

__all__ = [
    "AnalyticsConfig",
    "Anomaly",
    "AnomalyKind",
    "CategoryTotal",
    "Config",
    "Environment",
    "ExpectedRange",
    "FinancialDate",
    "FlowDirection",
    "ForecastMethod",
    "ForecastPoint",
    "ForecastResult",
    "LedgerRecord",
    "Money",
    "MonthlyBucket",
    "SeasonalPattern",
    "Sensitivity",
    "Severity",
    "Trend",
    "add_months",
    "cache_key",
    "get_config",
    "month_range",
    "month_window",
    "months_between",
    "parse_period",
    "reload_config",
    "time_range_months",
]
