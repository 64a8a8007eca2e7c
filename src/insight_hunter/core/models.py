#!/usr/bin/env python3
"""
Core Data Models for Insight Hunter

Value types flowing through the analytics pipeline: ledger records in,
monthly buckets, forecasts, seasonal patterns and anomalies out. Every model
is a plain dataclass; computations return new instances and never mutate
their inputs.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .currency import round_currency
from .dates import FinancialDate, MonthKey, parse_timestamp
from .money import Money

METRICS = ("revenue", "expenses", "profit")

OUTFLOW_KINDS = {"expense", "expenses", "outflow", "debit", "withdrawal"}
INFLOW_KINDS = {"income", "revenue", "inflow", "credit", "deposit"}


class FlowDirection(Enum):
    """Direction of money movement for a ledger record."""

    INFLOW = "inflow"
    OUTFLOW = "outflow"


class Trend(Enum):
    """Direction of a fitted linear trend."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class ForecastMethod(Enum):
    """How a forecast was produced."""

    LINEAR_REGRESSION = "linear_regression"
    INSUFFICIENT_DATA = "insufficient_data"
    ERROR = "error"


class AnomalyKind(Enum):
    EXPENSE_OUTLIER = "expense_outlier"
    REPEATED_TRANSACTION = "repeated_transaction"
    SPENDING_SPIKE = "spending_spike"
    INCOME_DROP = "income_drop"
    UNUSUAL_PATTERN = "unusual_pattern"


class Severity(Enum):
    """Anomaly severity, ordered by rank (high first)."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {"high": 0, "medium": 1, "low": 2}[self.value]


class Sensitivity(Enum):
    """
    Outlier sensitivity tier.

    Higher sensitivity means a lower z-score threshold, so more flags.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def threshold(self) -> float:
        return {"low": 3.5, "medium": 2.5, "high": 2.0}[self.value]

    @classmethod
    def parse(cls, value: "str | Sensitivity | None") -> "Sensitivity":
        """Parse a query-string value, falling back to MEDIUM for unknown tiers."""
        if isinstance(value, Sensitivity):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MEDIUM


@dataclass(frozen=True)
class LedgerRecord:
    """
    A single ledger transaction as supplied by the ledger store.

    The signed amount is canonical: positive amounts are inflows and negative
    amounts are outflows. Sources that send unsigned amounts with an explicit
    kind flag are normalized by from_dict().
    """

    id: str
    date: FinancialDate
    amount: Money
    description: str = ""
    category: str | None = None
    user_id: str | None = None
    client_id: str | None = None
    posted_at: datetime | None = None

    @property
    def direction(self) -> FlowDirection:
        return FlowDirection.OUTFLOW if self.amount.is_negative() else FlowDirection.INFLOW

    @property
    def is_outflow(self) -> bool:
        return self.amount.is_negative()

    @property
    def abs_amount(self) -> Money:
        return self.amount.abs()

    @property
    def month_key(self) -> MonthKey:
        return self.date.month_key

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LedgerRecord":
        """
        Build a record from a ledger-store row.

        Raises:
            ValueError: If the date is missing or malformed, or the kind flag
                is not a recognized inflow/outflow value
        """
        record_id = str(data.get("id", ""))
        raw_date = data.get("date")
        if not raw_date:
            raise ValueError(f"Ledger record {record_id or '<no id>'} has no date")
        try:
            record_date = FinancialDate.from_value(raw_date)
        except ValueError as e:
            raise ValueError(f"Ledger record {record_id or '<no id>'} has invalid date {raw_date!r}") from e

        amount = Money.from_dollars(data.get("amount"))
        kind = data.get("type") or data.get("kind")
        if kind:
            kind_str = str(kind).strip().lower()
            if kind_str in OUTFLOW_KINDS:
                amount = -amount.abs()
            elif kind_str in INFLOW_KINDS:
                amount = amount.abs()
            else:
                raise ValueError(f"Ledger record {record_id or '<no id>'} has unknown kind {kind!r}")

        client_id = data.get("client_id")
        user_id = data.get("user_id")
        return cls(
            id=record_id,
            date=record_date,
            amount=amount,
            description=str(data.get("description") or ""),
            category=data.get("category") or None,
            user_id=str(user_id) if user_id is not None else None,
            client_id=str(client_id) if client_id is not None else None,
            posted_at=parse_timestamp(data.get("posted_at") or raw_date),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.to_iso_string(),
            "amount": self.amount.to_float(),
            "description": self.description,
            "category": self.category,
            "userId": self.user_id,
            "clientId": self.client_id,
        }


@dataclass(frozen=True)
class MonthlyBucket:
    """One calendar month's aggregated totals."""

    period_key: MonthKey
    revenue: Money = field(default_factory=Money.zero)
    expenses: Money = field(default_factory=Money.zero)
    transaction_count: int = 0

    @property
    def profit(self) -> Money:
        return self.revenue - self.expenses

    def value(self, metric: str) -> float:
        """
        Float dollar value of one metric.

        Raises:
            ValueError: If metric is not one of revenue, expenses, profit
        """
        if metric == "revenue":
            return self.revenue.to_float()
        if metric == "expenses":
            return self.expenses.to_float()
        if metric == "profit":
            return self.profit.to_float()
        raise ValueError(f"Unknown metric {metric!r}; expected one of {', '.join(METRICS)}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.period_key,
            "revenue": self.revenue.to_float(),
            "expenses": self.expenses.to_float(),
            "profit": self.profit.to_float(),
            "transactionCount": self.transaction_count,
        }


@dataclass(frozen=True)
class CategoryTotal:
    """Spending total for one category."""

    category: str
    total: Money
    count: int

    @property
    def average(self) -> Money:
        if self.count == 0:
            return Money.zero()
        return Money.from_cents(round(self.total.cents / self.count))

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "total": self.total.to_float(),
            "count": self.count,
            "average": self.average.to_float(),
        }


@dataclass(frozen=True)
class ForecastPoint:
    """A single projected period."""

    period_index: int
    value: float
    period_key: MonthKey | None = None
    seasonal_adjustment: float | None = None
    unadjusted_value: float | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "period": self.period_index,
            "periodLabel": self.period_key,
            "value": self.value,
        }
        if self.seasonal_adjustment is not None:
            result["seasonalAdjustment"] = self.seasonal_adjustment
            result["unadjustedValue"] = self.unadjusted_value
        return result


@dataclass(frozen=True)
class ForecastResult:
    """
    Outcome of a trend forecast.

    slope and intercept keep full precision for chained computations;
    to_dict() rounds them for reporting.
    """

    points: list[ForecastPoint]
    confidence: float
    method: ForecastMethod
    trend: Trend | None = None
    slope: float | None = None
    intercept: float | None = None

    @classmethod
    def insufficient_data(cls) -> "ForecastResult":
        return cls(points=[], confidence=0.0, method=ForecastMethod.INSUFFICIENT_DATA)

    @classmethod
    def error(cls) -> "ForecastResult":
        return cls(points=[], confidence=0.0, method=ForecastMethod.ERROR)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "forecasts": [p.to_dict() for p in self.points],
            "confidence": round(self.confidence, 2),
            "method": self.method.value,
        }
        if self.trend is not None:
            result["trend"] = self.trend.value
        if self.slope is not None and math.isfinite(self.slope):
            result["slope"] = round(self.slope, 2)
        return result


@dataclass(frozen=True)
class SeasonalPattern:
    """A calendar month whose average deviates significantly from the overall monthly average."""

    month: int
    deviation_percent: float
    average_value: float
    occurrences: int

    @property
    def pattern(self) -> str:
        return "high" if self.deviation_percent > 0 else "low"

    @property
    def month_name(self) -> str:
        return datetime(2024, self.month, 1).strftime("%B")

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "monthName": self.month_name,
            "deviation": self.deviation_percent,
            "pattern": self.pattern,
            "averageValue": self.average_value,
            "occurrences": self.occurrences,
        }


@dataclass(frozen=True)
class ExpectedRange:
    min: float
    max: float

    def to_dict(self) -> dict[str, float]:
        return {"min": round_currency(self.min), "max": round_currency(self.max)}


@dataclass(frozen=True)
class Anomaly:
    """A flagged transaction, group of transactions, or period."""

    kind: AnomalyKind
    severity: Severity
    reason: str
    amount: float | None = None
    count: int | None = None
    expected_range: ExpectedRange | None = None
    category: str | None = None
    period_key: MonthKey | None = None
    transaction_id: str | None = None
    date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.kind.value,
            "severity": self.severity.value,
            "reason": self.reason,
        }
        optional = {
            "amount": self.amount,
            "occurrences": self.count,
            "category": self.category,
            "month": self.period_key,
            "transactionId": self.transaction_id,
            "date": self.date,
        }
        result.update({key: value for key, value in optional.items() if value is not None})
        if self.expected_range is not None:
            result["expectedRange"] = self.expected_range.to_dict()
        return result
