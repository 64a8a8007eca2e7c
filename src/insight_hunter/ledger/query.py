#!/usr/bin/env python3
"""
Ledger Queries

A tenant-scoped, date-bounded selection of ledger records expressed as a
list of predicates. The optional client filter is just one more predicate,
so no query text is ever assembled from fragments.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date

from ..core.dates import FinancialDate
from ..core.models import LedgerRecord

Predicate = Callable[[LedgerRecord], bool]


@dataclass(frozen=True)
class LedgerQuery:
    """Selects one user's records, optionally for one client, within a date range."""

    user_id: str | None = None
    client_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None

    def predicates(self) -> list[Predicate]:
        """The active filters; an empty list matches everything."""
        predicates: list[Predicate] = []
        if self.user_id is not None:
            user_id = str(self.user_id)
            predicates.append(lambda r: r.user_id == user_id)
        if self.client_id is not None:
            client_id = str(self.client_id)
            predicates.append(lambda r: r.client_id == client_id)
        if self.start_date is not None:
            start = FinancialDate.from_value(self.start_date)
            predicates.append(lambda r: r.date >= start)
        if self.end_date is not None:
            end = FinancialDate.from_value(self.end_date)
            predicates.append(lambda r: r.date <= end)
        return predicates

    def matches(self, record: LedgerRecord) -> bool:
        return all(predicate(record) for predicate in self.predicates())

    def apply(self, records: Iterable[LedgerRecord]) -> list[LedgerRecord]:
        """Matching records ordered by date."""
        predicates = self.predicates()
        selected = [r for r in records if all(predicate(r) for predicate in predicates)]
        return sorted(selected, key=lambda r: r.date)
