#!/usr/bin/env python3
"""
JSON Utilities Module

Consistent JSON reading and formatting for ledger files and CLI output.
"""

import json
from pathlib import Path
from typing import Any


def read_json(filepath: str | Path) -> Any:
    """Read data from a JSON file."""
    with open(filepath, encoding="utf-8") as f:
        return json.load(f)


def write_json(filepath: str | Path, data: Any) -> None:
    """Write data to a JSON file with standard pretty-printing, creating parent directories."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=str)


def format_json(data: Any, sort_keys: bool = False) -> str:
    """Format data as a pretty-printed JSON string; non-JSON types are stringified."""
    return json.dumps(data, indent=2, ensure_ascii=False, sort_keys=sort_keys, default=str)
