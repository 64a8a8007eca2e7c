#!/usr/bin/env python3
"""
Forecast CLI

Linear-trend forecasts of revenue, expenses and profit, with revenue
seasonality detection and adjustment.
"""

import click

from ..analysis import forecast_ledger
from ..core.currency import format_dollars
from ..core.json_utils import format_json
from ..core.models import ForecastMethod
from ..core.periods import TIME_RANGE_MONTHS
from .common import ledger_options, load_records, parse_date_option, resolve_config


@click.command()
@ledger_options
@click.option(
    "--time-range",
    type=click.Choice(list(TIME_RANGE_MONTHS)),
    default="90days",
    show_default=True,
    help="History to aggregate",
)
@click.option("--periods", type=int, help="Months to forecast (default: FORECAST_PERIODS)")
@click.option("--end", help="Last historical day (YYYY-MM-DD), defaults to the latest record")
@click.option("--no-seasonal", is_flag=True, help="Skip seasonal adjustment of the revenue forecast")
@click.option("--json", "as_json", is_flag=True, help="Print the full report as JSON")
@click.pass_context
def forecast(
    ctx: click.Context,
    ledger_file: str | None,
    user_id: str | None,
    client_id: str | None,
    time_range: str,
    periods: int | None,
    end: str | None,
    no_seasonal: bool,
    as_json: bool,
) -> None:
    """
    Forecast revenue, expenses and profit.

    Examples:
      insight-hunter forecast --user 42
      insight-hunter forecast --user 42 --client 7 --time-range 2years --periods 6
      insight-hunter forecast --ledger export.json --json
    """
    config = resolve_config(ctx)
    periods_ahead = periods if periods is not None else config.analytics.forecast_periods
    if periods_ahead < 1:
        raise click.BadParameter("must be at least 1", param_hint="--periods")

    records = load_records(config, ledger_file, user_id, client_id)
    report = forecast_ledger(
        records,
        end=parse_date_option(end, "--end"),
        time_range=time_range,
        periods_ahead=periods_ahead,
        seasonal=not no_seasonal,
        threshold=config.analytics.seasonality_threshold,
        min_months=config.analytics.seasonality_min_months,
    )

    if as_json:
        click.echo(format_json(report.to_dict()))
        return

    first, last = report.historical[0].period_key, report.historical[-1].period_key
    click.echo(f"[FORECAST] {len(records)} transactions, {first} to {last}")

    for metric, result in report.forecasts.items():
        click.echo(f"\n{metric.capitalize()}:")
        if result.method != ForecastMethod.LINEAR_REGRESSION:
            click.echo(f"   No forecast ({result.method.value})")
            continue
        click.echo(f"   Trend: {result.trend.value}   Confidence: {result.confidence * 100:.0f}%")
        for point in result.points:
            line = f"   {point.period_key}: {format_dollars(point.value)}"
            if point.seasonal_adjustment is not None:
                line += f" (seasonal {point.seasonal_adjustment:+.1f}% from {format_dollars(point.unadjusted_value)})"
            click.echo(line)

    if report.seasonality:
        click.echo("\n[SEASONALITY] Revenue months that stand out:")
        for pattern in report.seasonality:
            click.echo(f"   {pattern.month_name}: {pattern.deviation_percent:+.1f}% ({pattern.pattern})")
