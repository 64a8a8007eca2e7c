#!/usr/bin/env python3
"""
Money Primitive Type

Immutable currency value wrapper that uses integer cents internally.
Ledger sums (monthly revenue, expenses, category totals) stay exact; the
analytics layer converts to float dollars only at the statistics boundary.
"""

from dataclasses import dataclass
from typing import Union

from .currency import cents_to_dollars_str, safe_currency_to_cents


@dataclass(frozen=True, order=True)
class Money:
    """
    Immutable money value in cents.

    Positive amounts are inflows (revenue), negative amounts are outflows
    (expenses).

    Examples:
        >>> income = Money.from_cents(1234)
        >>> str(income)
        '$12.34'

        >>> expense = Money.from_dollars("-45.99")
        >>> expense.abs()
        Money(cents=4599)

        >>> (income + expense).to_float()
        -33.65
    """

    cents: int

    @classmethod
    def zero(cls) -> "Money":
        """Zero amount."""
        return cls(cents=0)

    @classmethod
    def from_cents(cls, cents: int) -> "Money":
        """Create Money from cents."""
        return cls(cents=int(cents))

    @classmethod
    def from_dollars(cls, dollars: Union[str, int, float, None]) -> "Money":
        """
        Parse from a dollar string like '$123.45', integer dollars, or a float.

        Strings and floats are both rounded half-up to the cent. Missing or
        unparseable values become zero.
        """
        return cls(cents=safe_currency_to_cents(dollars))

    def to_cents(self) -> int:
        """Get value in cents."""
        return self.cents

    def to_float(self) -> float:
        """Get value as float dollars, for statistics and JSON output."""
        return self.cents / 100

    def abs(self) -> "Money":
        """Return absolute value."""
        return Money(cents=abs(self.cents))

    def is_negative(self) -> bool:
        return self.cents < 0

    def __add__(self, other: "Money") -> "Money":
        return Money(cents=self.cents + other.cents)

    def __sub__(self, other: "Money") -> "Money":
        return Money(cents=self.cents - other.cents)

    def __neg__(self) -> "Money":
        return Money(cents=-self.cents)

    def __bool__(self) -> bool:
        return self.cents != 0

    def __str__(self) -> str:
        """Format as dollar string."""
        return f"${cents_to_dollars_str(self.cents)}"

    def __repr__(self) -> str:
        return f"Money(cents={self.cents})"
