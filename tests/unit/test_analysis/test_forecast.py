#!/usr/bin/env python3
"""Tests for end-to-end forecast reports."""

import json

import pytest

from insight_hunter.analysis.forecast import build_forecast_report, forecast_ledger
from insight_hunter.core.dates import FinancialDate
from insight_hunter.core.models import ForecastMethod
from insight_hunter.ledger import parse_records
from tests.fixtures.synthetic_data import generate_synthetic_ledger, make_buckets


def seasonal_buckets():
    """24 months ending in November with December revenue 50% higher."""
    revenues = [1500.0 if i % 12 == 0 else 1000.0 for i in range(24)]
    return make_buckets("2021-12", revenues, [400.0] * 24)


@pytest.mark.forecast
class TestBuildForecastReport:
    """Test build_forecast_report."""

    def test_forecasts_every_metric(self):
        """Test revenue, expenses and profit each get a forecast."""
        report = build_forecast_report(make_buckets("2024-01", [100, 200, 300], [50, 60, 70]), 2)

        assert set(report.forecasts) == {"revenue", "expenses", "profit"}
        assert [p.value for p in report.forecasts["revenue"].points] == [400.0, 500.0]
        assert [p.value for p in report.forecasts["expenses"].points] == [80.0, 90.0]
        assert report.seasonality is None

    def test_revenue_adjusted_once_for_seasonal_month(self):
        """Test a December forecast point is scaled by the December pattern."""
        report = build_forecast_report(seasonal_buckets(), 3)

        revenue_points = report.forecasts["revenue"].points
        december = revenue_points[0]
        assert december.period_key == "2023-12"
        assert december.seasonal_adjustment == 44.0
        assert december.value == pytest.approx(round(december.unadjusted_value * 1.44, 2), abs=0.01)
        assert revenue_points[1].seasonal_adjustment is None
        assert all(p.seasonal_adjustment is None for p in report.forecasts["expenses"].points)
        assert [p.month for p in report.seasonality] == [12]

    def test_seasonal_adjustment_can_be_disabled(self):
        """Test seasonality is still reported without adjusting the forecast."""
        report = build_forecast_report(seasonal_buckets(), 3, seasonal=False)

        assert report.seasonality is not None
        assert all(p.seasonal_adjustment is None for p in report.forecasts["revenue"].points)

    def test_short_history(self):
        """Test two months give insufficient data for every metric."""
        report = build_forecast_report(make_buckets("2024-01", [100, 200]), 3)

        assert all(r.method == ForecastMethod.INSUFFICIENT_DATA for r in report.forecasts.values())
        assert report.seasonality is None

    def test_to_dict(self):
        """Test the report serializes to JSON."""
        result = build_forecast_report(seasonal_buckets(), 3).to_dict()

        assert set(result) == {"historical", "forecasts", "seasonality", "generatedAt"}
        assert len(result["historical"]) == 24
        assert result["forecasts"]["revenue"]["forecasts"][0]["seasonalAdjustment"] == 44.0
        json.dumps(result)


@pytest.mark.forecast
class TestForecastLedger:
    """Test forecast_ledger."""

    def test_window_ends_at_latest_record(self):
        """Test the default window ends in the latest record's month."""
        records = parse_records(generate_synthetic_ledger("2023-01", months=12))

        report = forecast_ledger(records, time_range="90days")

        assert [b.period_key for b in report.historical][0] == "2023-06"
        assert report.historical[-1].period_key == "2023-12"
        assert report.forecasts["revenue"].points[0].period_key == "2024-01"

    def test_constant_ledger_forecasts_flat(self):
        """Test a constant ledger forecasts its constant values with full confidence."""
        records = parse_records(generate_synthetic_ledger("2023-01", months=12))

        report = forecast_ledger(records, time_range="90days", periods_ahead=2)

        expenses = report.forecasts["expenses"]
        assert [p.value for p in expenses.points] == [3850.0, 3850.0]
        assert expenses.confidence == 1.0
        assert expenses.trend.value == "stable"

    def test_explicit_end(self):
        """Test an explicit end date moves the window."""
        records = parse_records(generate_synthetic_ledger("2023-01", months=12))

        report = forecast_ledger(records, end=FinancialDate.from_string("2023-06-30"), time_range="30days")

        assert [b.period_key for b in report.historical] == ["2023-03", "2023-04", "2023-05", "2023-06"]

    def test_empty_ledger(self):
        """Test an empty ledger yields zero buckets and no forecast."""
        report = forecast_ledger([], time_range="30days")

        assert len(report.historical) == 4
        assert all(b.transaction_count == 0 for b in report.historical)
        assert report.forecasts["revenue"].confidence == 0.0
