"""
Financial Analysis Package

Forecasting and anomaly detection over a tenant's ledger.

Key Components:
- aggregation: Continuous monthly buckets and category breakdowns
- regression: Linear-trend forecasts with residual-based confidence
- seasonality: Calendar-month pattern detection and forecast adjustment
- anomalies: Spending spikes, outliers, repeats, income drops, odd hours
- trends: Moving averages, growth metrics and dashboard KPIs
- forecast: End-to-end forecast reports
"""

from .aggregation import aggregate_monthly, category_breakdown
from .anomalies import AnomalyReport, AnomalyRules, build_anomaly_report, detect_anomalies
from .forecast import ForecastReport, build_forecast_report, forecast_ledger
from .regression import forecast_buckets, forecast_series
from .seasonality import apply_seasonal_adjustment, detect_seasonality, seasonal_overall_average
from .trends import dashboard_kpis, growth_metrics, moving_averages

__all__ = [
    "AnomalyReport",
    "AnomalyRules",
    "ForecastReport",
    "aggregate_monthly",
    "apply_seasonal_adjustment",
    "build_anomaly_report",
    "build_forecast_report",
    "category_breakdown",
    "dashboard_kpis",
    "detect_anomalies",
    "detect_seasonality",
    "forecast_buckets",
    "forecast_ledger",
    "forecast_series",
    "growth_metrics",
    "moving_averages",
    "seasonal_overall_average",
]
