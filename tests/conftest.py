"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import tempfile
from pathlib import Path
from typing import Any

import pytest

from insight_hunter.core import config as config_module
from insight_hunter.core.models import LedgerRecord
from insight_hunter.ledger import parse_records

ANALYTICS_ENV_VARS = (
    "LOG_LEVEL",
    "DEBUG",
    "FORECAST_PERIODS",
    "SEASONALITY_THRESHOLD",
    "SEASONALITY_MIN_MONTHS",
    "ANOMALY_SENSITIVITY",
    "REPEATED_MIN_OCCURRENCES",
    "SPIKE_MULTIPLIER",
    "INCOME_DROP_RATIO",
    "MOVING_AVERAGE_WINDOW",
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def sample_ledger_row() -> dict[str, Any]:
    """Sample ledger-store row for testing."""
    return {
        "id": "txn-123",
        "date": "2024-08-15",
        "amount": -45.99,
        "description": "Office Supplies Co",
        "category": "Office",
        "user_id": 42,
        "client_id": 7,
    }


@pytest.fixture
def sample_records() -> list[LedgerRecord]:
    """A small two-month ledger for one user with two clients."""
    return parse_records(
        [
            {"id": "r1", "date": "2024-01-03", "amount": 5000, "description": "Invoice 1001", "user_id": "42"},
            {"id": "r2", "date": "2024-01-10", "amount": -1200, "category": "Rent", "user_id": "42"},
            {"id": "r3", "date": "2024-01-18", "amount": -150.5, "category": "Software", "user_id": "42"},
            {
                "id": "r4",
                "date": "2024-02-02",
                "amount": 6200,
                "description": "Invoice 1002",
                "user_id": "42",
                "client_id": "7",
            },
            {"id": "r5", "date": "2024-02-10", "amount": -1200, "category": "Rent", "user_id": "42"},
            {"id": "r6", "date": "2024-02-11", "amount": -80, "category": "Meals", "user_id": "99"},
        ]
    )


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables."""
    # Ensure tests don't use real ledger data
    monkeypatch.setenv("INSIGHT_HUNTER_ENV", "test")
    monkeypatch.setenv("INSIGHT_HUNTER_DATA_DIR", str(tmp_path / "insight_hunter_data"))

    # Ignore tuning from a developer's .env
    for name in ANALYTICS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    monkeypatch.setattr(config_module, "_config", None)


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for currency handling and precision")
    config.addinivalue_line("markers", "forecast: Tests for trend forecasting and seasonality")
    config.addinivalue_line("markers", "anomalies: Tests for anomaly detection")
    config.addinivalue_line("markers", "ledger: Tests for ledger loading and queries")
