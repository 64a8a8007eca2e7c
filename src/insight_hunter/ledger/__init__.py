"""
Ledger Access Package

Reads tenant ledger records from the ledger store's JSON export and scopes
them by user, client and date range.
"""

from .loader import load_ledger, parse_records
from .query import LedgerQuery

__all__ = [
    "LedgerQuery",
    "load_ledger",
    "parse_records",
]
