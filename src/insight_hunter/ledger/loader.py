#!/usr/bin/env python3
"""
Ledger Loader

Loads ledger records exported by the ledger store from a local JSON file.
The file holds either a list of records or an object with a "transactions"
list.
"""

import logging
from pathlib import Path
from typing import Any

from ..core.config import get_config
from ..core.json_utils import read_json
from ..core.models import LedgerRecord
from .query import LedgerQuery

logger = logging.getLogger(__name__)


def parse_records(rows: list[dict[str, Any]], strict: bool = False) -> list[LedgerRecord]:
    """
    Convert raw rows into LedgerRecords.

    Args:
        rows: Ledger-store rows
        strict: Raise on the first malformed row instead of skipping it

    Raises:
        ValueError: In strict mode, for a row without a valid date or with an
            unknown kind flag
    """
    records = []
    for index, row in enumerate(rows):
        try:
            records.append(LedgerRecord.from_dict(row))
        except (ValueError, TypeError, AttributeError) as e:
            if strict:
                raise ValueError(f"Invalid ledger row {index}: {e}") from e
            logger.warning("Skipping ledger row %d: %s", index, e)
    return records


def load_ledger(
    ledger_file: str | Path | None = None,
    query: LedgerQuery | None = None,
    strict: bool = False,
) -> list[LedgerRecord]:
    """
    Load ledger records from a JSON file.

    Args:
        ledger_file: Path to the ledger JSON. If None, uses config.ledger_file
        query: Optional tenant/date filter applied after loading
        strict: Raise on malformed rows instead of skipping them

    Returns:
        Ledger records, ordered by date

    Raises:
        FileNotFoundError: If the ledger file does not exist
        ValueError: If the file is not a list or an object with "transactions"
    """
    if ledger_file is None:
        ledger_file = get_config().ledger_file
    ledger_file = Path(ledger_file)

    if not ledger_file.exists():
        raise FileNotFoundError(f"Ledger file not found: {ledger_file}")

    data: Any = read_json(ledger_file)
    if isinstance(data, dict):
        rows = data.get("transactions", [])
    elif isinstance(data, list):
        rows = data
    else:
        raise ValueError(f"Unrecognized ledger format in {ledger_file}")

    records = parse_records(rows, strict=strict)
    if query is not None:
        records = query.apply(records)
    else:
        records.sort(key=lambda r: r.date)

    logger.info("Loaded %d ledger records from %s", len(records), ledger_file)
    return records
