#!/usr/bin/env python3
"""
Trends CLI

Moving averages, month-over-month growth and headline KPIs.
"""

import click

from ..analysis import aggregate_monthly, dashboard_kpis, growth_metrics, moving_averages
from ..core.currency import format_dollars
from ..core.dates import FinancialDate
from ..core.json_utils import format_json
from ..core.periods import month_window
from .common import ledger_options, load_records, parse_date_option, resolve_config


@click.command()
@ledger_options
@click.option("--months", type=int, default=12, show_default=True, help="Months of history before the end month")
@click.option("--window", type=int, help="Moving-average window in months (default: MOVING_AVERAGE_WINDOW)")
@click.option("--end", help="Last day to include (YYYY-MM-DD), defaults to the latest record")
@click.option("--json", "as_json", is_flag=True, help="Print the full report as JSON")
@click.pass_context
def trends(
    ctx: click.Context,
    ledger_file: str | None,
    user_id: str | None,
    client_id: str | None,
    months: int,
    window: int | None,
    end: str | None,
    as_json: bool,
) -> None:
    """
    Show moving averages, revenue growth and KPIs.

    Examples:
      insight-hunter trends --user 42
      insight-hunter trends --user 42 --months 24 --window 6 --json
    """
    config = resolve_config(ctx)
    window = window if window is not None else config.analytics.moving_average_window
    if window < 1:
        raise click.BadParameter("must be at least 1", param_hint="--window")
    if months < 0:
        raise click.BadParameter("must be non-negative", param_hint="--months")

    records = load_records(config, ledger_file, user_id, client_id)
    end_date = parse_date_option(end, "--end") or max((r.date for r in records), default=FinancialDate.today())
    start_key, end_key = month_window(end_date, months)
    buckets = aggregate_monthly(records, start_key, end_key)

    result = {
        "kpis": dashboard_kpis(buckets),
        "movingAverages": moving_averages(buckets, window),
        "growth": growth_metrics(buckets),
    }

    if as_json:
        click.echo(format_json(result))
        return

    kpis = result["kpis"]
    growth = result["growth"]["summary"]
    click.echo(f"[TRENDS] {start_key} to {end_key}")
    click.echo(f"   Revenue: {format_dollars(kpis['monthlyRevenue'])} ({kpis['revenueChange']:+.1f}% vs last month)")
    click.echo(f"   Expenses: {format_dollars(kpis['monthlyExpenses'])}")
    click.echo(f"   Net Profit: {format_dollars(kpis['netProfit'])} ({kpis['profitMargin']:.1f}% margin)")
    click.echo(f"   Average Growth: {growth['averageGrowthRate']:+.2f}%/month ({growth['trend']})")
    click.echo(f"\n{window}-month moving averages:")
    for row in result["movingAverages"]:
        click.echo(
            f"   {row['month']}: revenue {format_dollars(row['revenue'])}, expenses {format_dollars(row['expenses'])}"
        )
