#!/usr/bin/env python3
"""Shared CLI helpers for loading a tenant's ledger."""

from datetime import date

import click

from ..core.config import Config, get_config
from ..core.dates import FinancialDate
from ..core.models import LedgerRecord
from ..ledger import LedgerQuery, load_ledger


def ledger_options(func):
    """Attach the --ledger/--user/--client options shared by every report command."""
    func = click.option("--client", "client_id", help="Restrict to one client of the user")(func)
    func = click.option("--user", "user_id", help="Restrict to one user's records")(func)
    func = click.option(
        "--ledger",
        "ledger_file",
        type=click.Path(dir_okay=False),
        help="Ledger JSON file (default: <data_dir>/ledger/transactions.json)",
    )(func)
    return func


def resolve_config(ctx: click.Context) -> Config:
    """Configuration stored by the main group, or the global one when a command runs standalone."""
    if ctx.obj and "config" in ctx.obj:
        return ctx.obj["config"]
    return get_config()


def load_records(
    config: Config,
    ledger_file: str | None,
    user_id: str | None,
    client_id: str | None,
) -> list[LedgerRecord]:
    """Load and scope the ledger, converting failures into click errors."""
    try:
        return load_ledger(
            ledger_file or config.ledger_file,
            query=LedgerQuery(user_id=user_id, client_id=client_id),
        )
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e


def parse_date_option(value: str | None, option_name: str) -> FinancialDate | None:
    """Parse a YYYY-MM-DD option value."""
    if not value:
        return None
    try:
        return FinancialDate(date=date.fromisoformat(value))
    except ValueError as e:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}", param_hint=option_name) from e
