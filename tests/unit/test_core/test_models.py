#!/usr/bin/env python3
"""Tests for core data models."""

import json
from datetime import date

import pytest

from insight_hunter.core.models import (
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
from insight_hunter.core.money import Money


class TestLedgerRecord:
    """Test LedgerRecord parsing and normalization."""

    def test_from_dict(self, sample_ledger_row):
        """Test parsing a ledger-store row."""
        record = LedgerRecord.from_dict(sample_ledger_row)

        assert record.id == "txn-123"
        assert record.date.date == date(2024, 8, 15)
        assert record.amount == Money.from_cents(-4599)
        assert record.category == "Office"
        assert record.user_id == "42"
        assert record.client_id == "7"
        assert record.month_key == "2024-08"

    def test_sign_defines_direction(self):
        """Test negative amounts are outflows and positive amounts inflows."""
        expense = LedgerRecord.from_dict({"id": "a", "date": "2024-01-01", "amount": -10})
        income = LedgerRecord.from_dict({"id": "b", "date": "2024-01-01", "amount": 10})

        assert expense.direction == FlowDirection.OUTFLOW
        assert expense.is_outflow
        assert expense.abs_amount == Money.from_cents(1000)
        assert income.direction == FlowDirection.INFLOW
        assert not income.is_outflow

    def test_kind_flag_normalizes_sign(self):
        """Test an explicit type flag overrides the amount's sign."""
        expense = LedgerRecord.from_dict({"id": "a", "date": "2024-01-01", "amount": 25, "type": "expense"})
        income = LedgerRecord.from_dict({"id": "b", "date": "2024-01-01", "amount": -25, "kind": "Income"})

        assert expense.amount.to_cents() == -2500
        assert income.amount.to_cents() == 2500

    def test_unknown_kind_raises(self):
        """Test unrecognized kind flags are rejected."""
        with pytest.raises(ValueError, match="unknown kind"):
            LedgerRecord.from_dict({"id": "a", "date": "2024-01-01", "amount": 25, "type": "transfer"})

    def test_missing_date_raises(self):
        """Test a row without a date is rejected."""
        with pytest.raises(ValueError, match="has no date"):
            LedgerRecord.from_dict({"id": "a", "amount": 25})

    def test_invalid_date_raises(self):
        """Test a malformed date is rejected."""
        with pytest.raises(ValueError, match="invalid date"):
            LedgerRecord.from_dict({"id": "a", "date": "yesterday", "amount": 25})

    def test_missing_amount_is_zero(self):
        """Test a missing amount becomes zero."""
        record = LedgerRecord.from_dict({"id": "a", "date": "2024-01-01"})
        assert record.amount == Money.zero()
        assert not record.is_outflow

    def test_posted_at_from_timestamp(self):
        """Test time of day is kept from timestamped dates."""
        record = LedgerRecord.from_dict({"id": "a", "date": "2024-01-01T02:30:00", "amount": -5})
        plain = LedgerRecord.from_dict({"id": "b", "date": "2024-01-01", "amount": -5})

        assert record.posted_at.hour == 2
        assert record.date.date == date(2024, 1, 1)
        assert plain.posted_at is None

    def test_to_dict(self, sample_ledger_row):
        """Test serialization."""
        result = LedgerRecord.from_dict(sample_ledger_row).to_dict()

        assert result["amount"] == -45.99
        assert result["date"] == "2024-08-15"
        assert result["userId"] == "42"
        json.dumps(result)


class TestMonthlyBucket:
    """Test MonthlyBucket metrics."""

    def test_profit_and_values(self):
        """Test derived profit and metric access."""
        bucket = MonthlyBucket("2024-01", Money.from_cents(500000), Money.from_cents(320050), 4)

        assert bucket.profit == Money.from_cents(179950)
        assert bucket.value("revenue") == 5000.0
        assert bucket.value("expenses") == 3200.5
        assert bucket.value("profit") == 1799.5

    def test_unknown_metric_raises(self):
        """Test unknown metrics are rejected."""
        with pytest.raises(ValueError):
            MonthlyBucket("2024-01").value("margin")

    def test_to_dict(self):
        """Test serialization."""
        result = MonthlyBucket("2024-01", Money.from_cents(1000), Money.from_cents(1500), 2).to_dict()
        assert result == {
            "month": "2024-01",
            "revenue": 10.0,
            "expenses": 15.0,
            "profit": -5.0,
            "transactionCount": 2,
        }


class TestEnums:
    """Test enum helpers."""

    def test_severity_rank(self):
        """Test high sorts before medium before low."""
        ordered = sorted([Severity.LOW, Severity.HIGH, Severity.MEDIUM], key=lambda s: s.rank)
        assert ordered == [Severity.HIGH, Severity.MEDIUM, Severity.LOW]

    def test_sensitivity_thresholds(self):
        """Test z-score thresholds per tier."""
        assert Sensitivity.LOW.threshold == 3.5
        assert Sensitivity.MEDIUM.threshold == 2.5
        assert Sensitivity.HIGH.threshold == 2.0

    def test_sensitivity_parse(self):
        """Test parsing with fallback to medium."""
        assert Sensitivity.parse("HIGH") == Sensitivity.HIGH
        assert Sensitivity.parse(Sensitivity.LOW) == Sensitivity.LOW
        assert Sensitivity.parse("extreme") == Sensitivity.MEDIUM
        assert Sensitivity.parse(None) == Sensitivity.MEDIUM


class TestResultModels:
    """Test forecast, seasonality and anomaly models."""

    def test_category_total_average(self):
        """Test average spend per transaction."""
        total = CategoryTotal("Rent", Money.from_cents(300000), 2)
        assert total.average == Money.from_cents(150000)
        assert CategoryTotal("Empty", Money.zero(), 0).average == Money.zero()

    def test_insufficient_data_result(self):
        """Test the insufficient-data result shape."""
        result = ForecastResult.insufficient_data().to_dict()
        assert result == {"forecasts": [], "confidence": 0.0, "method": "insufficient_data"}

    def test_forecast_result_to_dict(self):
        """Test rounding and optional fields."""
        result = ForecastResult(
            points=[ForecastPoint(1, 120.0, "2024-04")],
            confidence=0.876,
            method=ForecastMethod.LINEAR_REGRESSION,
            trend=Trend.INCREASING,
            slope=10.456,
            intercept=90.0,
        ).to_dict()

        assert result["confidence"] == 0.88
        assert result["slope"] == 10.46
        assert result["trend"] == "increasing"
        assert result["forecasts"] == [{"period": 1, "periodLabel": "2024-04", "value": 120.0}]

    def test_adjusted_point_to_dict(self):
        """Test seasonal fields appear only on adjusted points."""
        point = ForecastPoint(1, 144.0, "2024-12", seasonal_adjustment=44.0, unadjusted_value=100.0)
        assert point.to_dict()["seasonalAdjustment"] == 44.0
        assert point.to_dict()["unadjustedValue"] == 100.0

    def test_seasonal_pattern(self):
        """Test pattern labels."""
        high = SeasonalPattern(month=12, deviation_percent=44.0, average_value=1500.0, occurrences=2)
        low = SeasonalPattern(month=2, deviation_percent=-20.0, average_value=800.0, occurrences=2)

        assert high.pattern == "high"
        assert high.month_name == "December"
        assert low.pattern == "low"
        assert high.to_dict()["deviation"] == 44.0

    def test_anomaly_to_dict_omits_missing_fields(self):
        """Test only populated fields are serialized."""
        anomaly = Anomaly(
            kind=AnomalyKind.INCOME_DROP,
            severity=Severity.HIGH,
            reason="Income dropped",
            amount=4000.0,
            expected_range=ExpectedRange(min=0.0, max=10000.0),
            period_key="2024-02",
        )
        result = anomaly.to_dict()

        assert result["type"] == "income_drop"
        assert result["severity"] == "high"
        assert result["month"] == "2024-02"
        assert result["expectedRange"] == {"min": 0.0, "max": 10000.0}
        assert "occurrences" not in result
        assert "transactionId" not in result
