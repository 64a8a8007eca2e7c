#!/usr/bin/env python3
"""
Configuration Management for Insight Hunter

Environment-based configuration with defaults for every analytics threshold.
The analytics functions themselves never read configuration; callers (the CLI,
route handlers) pass values from here explicitly.
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from .models import Sensitivity

if TYPE_CHECKING:
    from ..analysis.anomalies import AnomalyRules

# Load environment variables from .env file
load_dotenv()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class AnalyticsConfig:
    """Forecasting and anomaly-detection tuning."""

    forecast_periods: int = 3
    seasonality_threshold: float = 15.0
    seasonality_min_months: int = 12
    anomaly_sensitivity: Sensitivity = Sensitivity.MEDIUM
    repeated_min_occurrences: int = 5
    spike_multiplier: float = 2.0
    income_drop_ratio: float = 0.5
    moving_average_window: int = 3

    def anomaly_rules(self) -> "AnomalyRules":
        """Build the anomaly detector's rule set from this configuration."""
        from ..analysis.anomalies import AnomalyRules

        return AnomalyRules(
            repeated_min_occurrences=self.repeated_min_occurrences,
            spike_multiplier=self.spike_multiplier,
            income_drop_ratio=self.income_drop_ratio,
        )


@dataclass
class Config:
    """
    Main configuration for the insight_hunter tools.

    Loads from environment variables with defaults suitable for local use.
    """

    environment: Environment
    data_dir: Path
    ledger_file: Path
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)

    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("INSIGHT_HUNTER_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_insight_hunter"
            data_dir = Path(os.getenv("INSIGHT_HUNTER_DATA_DIR", str(default_test_dir)))
        else:
            data_dir = Path(os.getenv("INSIGHT_HUNTER_DATA_DIR", "./data")).expanduser().resolve()

        analytics = AnalyticsConfig(
            forecast_periods=int(os.getenv("FORECAST_PERIODS", "3")),
            seasonality_threshold=float(os.getenv("SEASONALITY_THRESHOLD", "15")),
            seasonality_min_months=int(os.getenv("SEASONALITY_MIN_MONTHS", "12")),
            anomaly_sensitivity=Sensitivity.parse(os.getenv("ANOMALY_SENSITIVITY", "medium")),
            repeated_min_occurrences=int(os.getenv("REPEATED_MIN_OCCURRENCES", "5")),
            spike_multiplier=float(os.getenv("SPIKE_MULTIPLIER", "2.0")),
            income_drop_ratio=float(os.getenv("INCOME_DROP_RATIO", "0.5")),
            moving_average_window=int(os.getenv("MOVING_AVERAGE_WINDOW", "3")),
        )

        return cls(
            environment=env,
            data_dir=data_dir,
            ledger_file=data_dir / "ledger" / "transactions.json",
            analytics=analytics,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []
        analytics = self.analytics

        if analytics.forecast_periods < 1:
            errors.append("FORECAST_PERIODS must be at least 1")
        if analytics.seasonality_threshold <= 0:
            errors.append("SEASONALITY_THRESHOLD must be positive")
        if analytics.seasonality_min_months < 12:
            errors.append("SEASONALITY_MIN_MONTHS must be at least 12")
        if analytics.repeated_min_occurrences < 2:
            errors.append("REPEATED_MIN_OCCURRENCES must be at least 2")
        if analytics.spike_multiplier <= 1:
            errors.append("SPIKE_MULTIPLIER must be greater than 1")
        if not 0 < analytics.income_drop_ratio < 1:
            errors.append("INCOME_DROP_RATIO must be between 0 and 1")
        if analytics.moving_average_window < 1:
            errors.append("MOVING_AVERAGE_WINDOW must be at least 1")
        if self.log_level not in LOG_LEVELS:
            errors.append(f"Unknown LOG_LEVEL: {self.log_level}")

        return errors

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a JSON-friendly dictionary."""
        analytics = {
            name: value.value if isinstance(value, Enum) else value
            for name, value in self.analytics.__dict__.items()
        }
        return {
            "environment": self.environment.value,
            "data_dir": str(self.data_dir),
            "ledger_file": str(self.ledger_file),
            "analytics": analytics,
            "debug": self.debug,
            "log_level": self.log_level,
        }


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_environment()

        errors = _config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        _config.setup_logging()

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()

