#!/usr/bin/env python3
"""Tests for the insight-hunter command line."""

import json

import pytest
from click.testing import CliRunner

from insight_hunter.cli.main import main
from tests.fixtures.synthetic_data import generate_synthetic_ledger, write_synthetic_ledger


@pytest.fixture
def ledger_file(temp_dir):
    """Two users' ledgers in one export; user 42 has a December revenue peak."""
    rows = generate_synthetic_ledger("2021-12", months=25, seasonal_uplift={12: 0.5}, user_id="42", client_id="7")
    rows += generate_synthetic_ledger("2023-01", months=12, monthly_revenue=2000.0, user_id="99")
    rows.append(
        {
            "id": "repair",
            "date": "2023-12-10",
            "amount": -8000,
            "description": "Emergency Repair",
            "category": "Home",
            "user_id": "42",
            "client_id": "7",
        }
    )
    return write_synthetic_ledger(temp_dir / "ledger.json", rows)


class TestMainGroup:
    """Test the main group and utility commands."""

    def setup_method(self):
        """Set up test environment."""
        self.runner = CliRunner()

    def test_help_lists_subcommands(self):
        """Test --help shows all registered subcommands."""
        result = self.runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        for command in ("forecast", "anomalies", "trends", "version", "config"):
            assert command in result.output

    def test_version(self):
        """Test version output."""
        result = self.runner.invoke(main, ["version"])

        assert result.exit_code == 0
        assert "Insight Hunter v0.3.0" in result.output
        assert "Author:" in result.output

    def test_config(self):
        """Test configuration display."""
        result = self.runner.invoke(main, ["config"])

        assert result.exit_code == 0
        assert "Current Configuration:" in result.output
        assert "Environment: test" in result.output
        assert "Anomaly Sensitivity: medium" in result.output

    def test_config_json(self):
        """Test configuration as JSON."""
        result = self.runner.invoke(main, ["config", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["environment"] == "test"

    def test_invalid_configuration_is_reported(self, monkeypatch):
        """Test invalid settings fail with a readable error."""
        monkeypatch.setenv("FORECAST_PERIODS", "0")

        result = self.runner.invoke(main, ["config"])

        assert result.exit_code != 0
        assert "FORECAST_PERIODS" in result.output


class TestForecastCommand:
    """Test the forecast command."""

    def setup_method(self):
        """Set up test environment."""
        self.runner = CliRunner()

    def test_forecast_json(self, ledger_file):
        """Test the JSON report for one tenant."""
        result = self.runner.invoke(
            main,
            ["forecast", "--ledger", str(ledger_file), "--user", "42", "--time-range", "2years", "--json"],
        )

        assert result.exit_code == 0, result.output
        report = json.loads(result.stdout)
        assert set(report["forecasts"]) == {"revenue", "expenses", "profit"}
        assert len(report["historical"]) == 25
        assert report["forecasts"]["revenue"]["method"] == "linear_regression"
        assert [p["month"] for p in report["seasonality"]] == [12]

    def test_forecast_text(self, ledger_file):
        """Test the human-readable report."""
        result = self.runner.invoke(main, ["forecast", "--ledger", str(ledger_file), "--user", "99", "--periods", "2"])

        assert result.exit_code == 0, result.output
        assert "[FORECAST]" in result.output
        assert "Revenue:" in result.output
        assert "2024-02" in result.output

    def test_missing_ledger(self, temp_dir):
        """Test a missing ledger file is a clean error."""
        result = self.runner.invoke(main, ["forecast", "--ledger", str(temp_dir / "missing.json")])

        assert result.exit_code == 1
        assert "Ledger file not found" in result.output

    def test_invalid_periods(self, ledger_file):
        """Test a zero horizon is a usage error."""
        result = self.runner.invoke(main, ["forecast", "--ledger", str(ledger_file), "--periods", "0"])
        assert result.exit_code == 2

    def test_invalid_end_date(self, ledger_file):
        """Test a malformed --end is a usage error."""
        result = self.runner.invoke(main, ["forecast", "--ledger", str(ledger_file), "--end", "12/31/2023"])

        assert result.exit_code == 2
        assert "expected YYYY-MM-DD" in result.output


class TestAnomaliesCommand:
    """Test the anomalies command."""

    def setup_method(self):
        """Set up test environment."""
        self.runner = CliRunner()

    def test_anomalies_json(self, ledger_file):
        """Test the injected expense is reported."""
        result = self.runner.invoke(
            main, ["anomalies", "--ledger", str(ledger_file), "--user", "42", "--client", "7", "--json"]
        )

        assert result.exit_code == 0, result.output
        report = json.loads(result.stdout)
        assert report["period"] == "30d"
        assert report["sensitivity"] == "medium"
        flagged = [a for a in report["anomalies"] if a.get("transactionId") == "repair"]
        assert flagged and flagged[0]["severity"] == "high"
        assert report["summary"]["expenseOutliers"] >= 1

    def test_anomalies_text(self, ledger_file):
        """Test the human-readable report."""
        result = self.runner.invoke(
            main, ["anomalies", "--ledger", str(ledger_file), "--user", "42", "--sensitivity", "low"]
        )

        assert result.exit_code == 0, result.output
        assert "[ANOMALIES]" in result.output
        assert "low sensitivity" in result.output

    def test_invalid_sensitivity(self, ledger_file):
        """Test unknown sensitivity tiers are rejected by the CLI."""
        result = self.runner.invoke(main, ["anomalies", "--ledger", str(ledger_file), "--sensitivity", "extreme"])
        assert result.exit_code == 2


class TestTrendsCommand:
    """Test the trends command."""

    def setup_method(self):
        """Set up test environment."""
        self.runner = CliRunner()

    def test_trends_json(self, ledger_file):
        """Test KPIs, moving averages and growth."""
        result = self.runner.invoke(
            main, ["trends", "--ledger", str(ledger_file), "--user", "99", "--months", "5", "--json"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["kpis"]["monthlyRevenue"] == 2000.0
        assert data["kpis"]["monthlyExpenses"] == 3850.0
        assert len(data["movingAverages"]) == 6
        assert data["growth"]["summary"]["trend"] == "stable"

    def test_trends_text(self, ledger_file):
        """Test the human-readable report."""
        result = self.runner.invoke(main, ["trends", "--ledger", str(ledger_file), "--user", "99"])

        assert result.exit_code == 0, result.output
        assert "[TRENDS]" in result.output
        assert "3-month moving averages" in result.output

    def test_invalid_window(self, ledger_file):
        """Test a zero window is a usage error."""
        result = self.runner.invoke(main, ["trends", "--ledger", str(ledger_file), "--window", "0"])
        assert result.exit_code == 2
