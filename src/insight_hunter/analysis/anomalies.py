#!/usr/bin/env python3
"""
Anomaly Detection

Flags unusual spending and income in a tenant's ledger:

- Category spikes: this month's spend in a top category against its recent monthly average
- Expense outliers: z-score of each expense against the other expenses in the window
- Repeated transactions: the same amount and description recurring many times
- Income drops: the latest month's income against the month before
- Unusual time of day: clusters of late-night or early-morning spending

Each check runs independently. A check that fails is logged and skipped so
the remaining checks still report.
"""

import logging
import math
from collections import Counter, defaultdict
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

import numpy as np

from ..core.currency import format_dollars, round_currency
from ..core.dates import FinancialDate, MonthKey, add_months, to_month_key
from ..core.models import (
    Anomaly,
    AnomalyKind,
    CategoryTotal,
    ExpectedRange,
    LedgerRecord,
    Sensitivity,
    Severity,
)
from ..core.periods import parse_period
from .aggregation import UNCATEGORIZED, category_breakdown, monthly_category_totals, monthly_income_totals

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnomalyRules:
    """Thresholds for the anomaly checks."""

    # Category spikes
    top_categories: int = 5
    history_months: int = 6
    spike_multiplier: float = 2.0

    # Expense outliers
    min_outlier_sample: int = 4
    high_severity_factor: float = 1.5

    # Repeated transactions: grouped by (amount, description)
    repeated_min_occurrences: int = 5

    # Income drops: flagged when current < ratio * previous
    income_drop_ratio: float = 0.5

    # Time of day: hours first_normal_hour..last_normal_hour are normal
    unusual_hour_min_count: int = 5
    first_normal_hour: int = 6
    last_normal_hour: int = 22


def detect_anomalies(
    transactions: Iterable[LedgerRecord],
    category_totals: Sequence[CategoryTotal] | None = None,
    sensitivity: Sensitivity | str = Sensitivity.MEDIUM,
    *,
    as_of: FinancialDate | None = None,
    history: Iterable[LedgerRecord] | None = None,
    rules: AnomalyRules | None = None,
) -> list[Anomaly]:
    """
    Run every anomaly check and return the findings, most severe first.

    Args:
        transactions: Records in the analysis window (outliers, repeats, time of day)
        category_totals: Spending breakdown whose top categories are checked
            for spikes; computed from transactions when omitted
        sensitivity: Outlier sensitivity tier
        as_of: Date whose month counts as "current"; defaults to the latest
            record date
        history: Records used for month-over-month checks (spikes, income
            drops); defaults to transactions
        rules: Thresholds; defaults to AnomalyRules()

    Returns:
        Anomalies stably sorted by severity (high, medium, low)
    """
    records = list(transactions)
    history_records = list(history) if history is not None else records
    rules = rules or AnomalyRules()
    sensitivity = Sensitivity.parse(sensitivity)

    if category_totals is None:
        category_totals = category_breakdown(records)

    if as_of is not None:
        current_month: MonthKey | None = to_month_key(as_of)
    elif history_records:
        current_month = max(r.date for r in history_records).month_key
    else:
        current_month = None

    checks: list[tuple[str, Callable[[], list[Anomaly]]]] = [
        ("category spikes", lambda: check_category_spikes(history_records, category_totals, current_month, rules)),
        ("expense outliers", lambda: check_expense_outliers(records, sensitivity, rules)),
        ("repeated transactions", lambda: check_repeated_transactions(records, rules)),
        ("income drops", lambda: check_income_drop(history_records, rules)),
        ("unusual time of day", lambda: check_unusual_hours(records, rules)),
    ]

    anomalies: list[Anomaly] = []
    for name, check in checks:
        try:
            found = check()
        except Exception:
            logger.exception(f"Anomaly check failed: {name}")
            continue
        logger.debug("Anomaly check %s found %d anomalies", name, len(found))
        anomalies.extend(found)

    return sort_by_severity(anomalies)


def sort_by_severity(anomalies: Iterable[Anomaly]) -> list[Anomaly]:
    """Stable sort by severity rank; anomalies of equal severity keep their order."""
    return sorted(anomalies, key=lambda a: a.severity.rank)


def check_category_spikes(
    records: Sequence[LedgerRecord],
    category_totals: Sequence[CategoryTotal],
    current_month: MonthKey | None,
    rules: AnomalyRules,
) -> list[Anomaly]:
    """
    Flag top categories whose current-month spend exceeds a multiple of their recent average.

    The historical average covers the history_months calendar months before
    the current month, counting only months with spend in the category.
    Categories with no history are skipped, so a brand-new category is never
    reported as a spike.
    """
    if current_month is None:
        return []

    history_keys = [add_months(current_month, -offset) for offset in range(1, rules.history_months + 1)]
    anomalies = []

    for entry in category_totals[: rules.top_categories]:
        try:
            monthly = monthly_category_totals(records, entry.category)
            history_values = [monthly[key].to_float() for key in history_keys if key in monthly]
            if not history_values:
                continue
            historical_average = float(np.mean(history_values))
            if historical_average == 0:
                continue

            current = monthly[current_month].to_float() if current_month in monthly else 0.0
            if current > rules.spike_multiplier * historical_average:
                anomalies.append(
                    Anomaly(
                        kind=AnomalyKind.SPENDING_SPIKE,
                        severity=Severity.HIGH,
                        reason=(
                            f"Spending spike in {entry.category}: {format_dollars(current)} this month "
                            f"vs {format_dollars(historical_average)} monthly average"
                        ),
                        amount=round_currency(current),
                        expected_range=ExpectedRange(min=0.0, max=historical_average),
                        category=entry.category,
                        period_key=current_month,
                    )
                )
        except Exception:
            logger.exception(f"Category spike check failed for {entry.category!r}")

    return anomalies


def _leave_one_out_stats(amounts: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Mean and population standard deviation of every other element, for each element."""
    n = len(amounts)
    center = float(np.mean(amounts))
    deviations = amounts - center
    total_sq = float(np.sum(deviations**2))

    others_mean_dev = -deviations / (n - 1)
    others_var = (total_sq - deviations**2) / (n - 1) - others_mean_dev**2
    return center + others_mean_dev, np.sqrt(np.clip(others_var, 0.0, None))


def check_expense_outliers(
    records: Sequence[LedgerRecord],
    sensitivity: Sensitivity,
    rules: AnomalyRules,
) -> list[Anomaly]:
    """
    Flag expenses far from the other expenses in the window.

    Each expense is scored as |amount - mean| / std where mean and std
    describe the remaining expenses, so a single large expense cannot mask
    itself by inflating the spread. When the others do not vary at all, any
    difference counts as an infinite score.

    The tradeoff: removing the scored expense also shrinks the spread it is
    measured against, so in very small samples the ends of evenly spaced data
    can score as outliers. [10, 20, 30, 40, 50] flags 10 and 50 at high
    sensitivity (z = 2.24) but nothing at medium or low.
    """
    expenses = [r for r in records if r.is_outflow]
    if len(expenses) < max(rules.min_outlier_sample, 2):
        return []

    threshold = sensitivity.threshold
    amounts = np.array([r.abs_amount.to_float() for r in expenses])
    means, stds = _leave_one_out_stats(amounts)

    anomalies = []
    for record, amount, mean, std in zip(expenses, amounts, means, stds):
        tolerance = 1e-9 * max(1.0, abs(mean))
        deviation = abs(amount - mean)
        if std <= tolerance:
            z_score = math.inf if deviation > tolerance else 0.0
        else:
            z_score = deviation / std

        if z_score <= threshold:
            continue

        if math.isinf(z_score):
            reason = f"Expense of {format_dollars(amount)} while other expenses are all {format_dollars(mean)}"
        else:
            reason = f"Expense {z_score:.2f} standard deviations from average"

        anomalies.append(
            Anomaly(
                kind=AnomalyKind.EXPENSE_OUTLIER,
                severity=Severity.HIGH if z_score > rules.high_severity_factor * threshold else Severity.MEDIUM,
                reason=reason,
                amount=round_currency(amount),
                expected_range=ExpectedRange(min=mean - threshold * std, max=mean + threshold * std),
                category=record.category,
                transaction_id=record.id,
                date=record.date.to_iso_string(),
            )
        )
    return anomalies


def check_repeated_transactions(records: Sequence[LedgerRecord], rules: AnomalyRules) -> list[Anomaly]:
    """Flag expenses with the same amount and description recurring at least repeated_min_occurrences times."""
    groups: Counter[tuple[int, str]] = Counter(
        (r.abs_amount.to_cents(), r.description.strip()) for r in records if r.is_outflow
    )

    anomalies = []
    for (cents, description), count in groups.items():
        if count < rules.repeated_min_occurrences:
            continue
        amount = cents / 100
        severity = Severity.MEDIUM if count >= 2 * rules.repeated_min_occurrences else Severity.LOW
        anomalies.append(
            Anomaly(
                kind=AnomalyKind.REPEATED_TRANSACTION,
                severity=severity,
                reason=f"Repeated transaction: {description or 'no description'} ({format_dollars(amount)}) x{count}",
                amount=amount,
                count=count,
            )
        )
    return anomalies


def check_income_drop(records: Sequence[LedgerRecord], rules: AnomalyRules) -> list[Anomaly]:
    """
    Compare the two most recent months with income; flag when the latest fell below the ratio.

    Months without any income are skipped rather than treated as zero, so
    income falling from 10000 to nothing in the latest month is not reported
    here; the comparison is between the last two months that had income.
    """
    income = monthly_income_totals(records)
    if len(income) < 2:
        return []

    (previous_key, previous), (current_key, current) = list(income.items())[-2:]
    if current.to_float() >= rules.income_drop_ratio * previous.to_float():
        return []

    drop_percent = round((1 - rules.income_drop_ratio) * 100)
    return [
        Anomaly(
            kind=AnomalyKind.INCOME_DROP,
            severity=Severity.HIGH,
            reason=f"Income dropped by more than {drop_percent}% from {previous_key} to {current_key}",
            amount=current.to_float(),
            expected_range=ExpectedRange(min=0.0, max=previous.to_float()),
            period_key=current_key,
        )
    ]


def check_unusual_hours(records: Sequence[LedgerRecord], rules: AnomalyRules) -> list[Anomaly]:
    """Flag categories with repeated spending outside normal hours."""
    groups: dict[tuple[str, int], int] = defaultdict(int)
    for record in records:
        if record.is_outflow and record.posted_at is not None:
            groups[(record.category or UNCATEGORIZED, record.posted_at.hour)] += 1

    anomalies = []
    for (category, hour), count in sorted(groups.items(), key=lambda item: item[1], reverse=True):
        if count <= rules.unusual_hour_min_count:
            continue
        if rules.first_normal_hour <= hour <= rules.last_normal_hour:
            continue
        anomalies.append(
            Anomaly(
                kind=AnomalyKind.UNUSUAL_PATTERN,
                severity=Severity.MEDIUM,
                reason=f"Unusual spending pattern: {count} {category} expenses at {hour:02d}:00",
                count=count,
                category=category,
            )
        )
    return anomalies


SUMMARY_KEYS = {
    AnomalyKind.EXPENSE_OUTLIER: "expenseOutliers",
    AnomalyKind.REPEATED_TRANSACTION: "repeatedTransactions",
    AnomalyKind.SPENDING_SPIKE: "spendingSpikes",
    AnomalyKind.INCOME_DROP: "incomeDrops",
    AnomalyKind.UNUSUAL_PATTERN: "unusualPatterns",
}


@dataclass
class AnomalyReport:
    """Anomaly detection result for one request."""

    period: str
    sensitivity: Sensitivity
    anomalies: list[Anomaly] = field(default_factory=list)

    @property
    def summary(self) -> dict[str, int]:
        counts = Counter(a.kind for a in self.anomalies)
        return {key: counts.get(kind, 0) for kind, key in SUMMARY_KEYS.items()}

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period,
            "sensitivity": self.sensitivity.value,
            "anomaliesFound": len(self.anomalies),
            "anomalies": [a.to_dict() for a in self.anomalies],
            "summary": self.summary,
        }


def build_anomaly_report(
    records: Iterable[LedgerRecord],
    period: str = "30d",
    sensitivity: Sensitivity | str = Sensitivity.MEDIUM,
    *,
    as_of: FinancialDate | None = None,
    rules: AnomalyRules | None = None,
) -> AnomalyReport:
    """
    Detect anomalies over the last `period` of a ledger.

    Transaction-level checks see only records within the period ending at
    as_of (default: the latest record date); month-level checks see the whole
    ledger so they have history to compare against.
    """
    all_records = list(records)
    sensitivity = Sensitivity.parse(sensitivity)

    if as_of is None:
        if not all_records:
            return AnomalyReport(period=period, sensitivity=sensitivity)
        as_of = max(r.date for r in all_records)

    window_start = as_of.date - timedelta(days=parse_period(period))
    window = [r for r in all_records if window_start <= r.date.date <= as_of.date]
    history = [r for r in all_records if r.date.date <= as_of.date]

    anomalies = detect_anomalies(
        window,
        sensitivity=sensitivity,
        as_of=as_of,
        history=history,
        rules=rules,
    )
    logger.info(
        "Found %d anomalies in %d transactions (%s ending %s)",
        len(anomalies),
        len(window),
        period,
        as_of,
    )
    return AnomalyReport(period=period, sensitivity=sensitivity, anomalies=anomalies)
