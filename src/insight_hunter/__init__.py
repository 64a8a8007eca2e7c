"""
Insight Hunter - Analytics Core

Forecasting and anomaly detection for the Insight Hunter auto-CFO service.

Key Features:
- Continuous monthly aggregation of tenant ledgers
- Linear-trend forecasts with confidence scores
- Seasonality detection and seasonal forecast adjustment
- Anomaly detection with sensitivity tiers
- Command-line reports over exported ledgers

Domain Packages:
- core: Money, dates, data models, configuration, request parameters
- ledger: Ledger file loading and tenant-scoped queries
- analysis: Aggregation, forecasting, seasonality, anomalies, trends
- cli: Command-line interface

Example Usage:
    from insight_hunter.analysis import aggregate_monthly, forecast_buckets
    from insight_hunter.ledger import LedgerQuery, load_ledger
"""

__version__ = "0.3.0"
__author__ = "Insight Hunter Team"

from .core.models import Anomaly, ForecastResult, LedgerRecord, MonthlyBucket
from .core.money import Money

__all__ = [
    "Anomaly",
    "ForecastResult",
    "LedgerRecord",
    "Money",
    "MonthlyBucket",
]
