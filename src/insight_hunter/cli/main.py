#!/usr/bin/env python3
"""
Main CLI Entry Point for Insight Hunter

Unified command-line interface for the forecasting and anomaly reports.
"""

import logging
import os

import click

from ..core.config import get_config
from ..core.json_utils import format_json


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    Insight Hunter - forecasting and anomaly detection for tenant ledgers.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["INSIGHT_HUNTER_ENV"] = config_env

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"

    try:
        config = get_config()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("insight_hunter").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config"] = config

    if verbose:
        click.echo(f"Environment: {config.environment.value}")
        click.echo(f"Ledger file: {config.ledger_file}")


@main.command()
def version() -> None:
    """Show version information."""
    from insight_hunter import __author__, __version__

    click.echo(f"Insight Hunter v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Print configuration as JSON")
@click.pass_context
def config(ctx: click.Context, as_json: bool) -> None:
    """Show current configuration."""
    config_obj = ctx.obj["config"]

    if as_json:
        click.echo(format_json(config_obj.to_dict()))
        return

    analytics = config_obj.analytics
    click.echo("Current Configuration:")
    click.echo(f"  Environment: {config_obj.environment.value}")
    click.echo(f"  Data Directory: {config_obj.data_dir}")
    click.echo(f"  Ledger File: {config_obj.ledger_file}")
    click.echo(f"  Log Level: {config_obj.log_level}")
    click.echo(f"  Forecast Periods: {analytics.forecast_periods}")
    click.echo(f"  Seasonality Threshold: {analytics.seasonality_threshold}%")
    click.echo(f"  Anomaly Sensitivity: {analytics.anomaly_sensitivity.value}")


from .anomalies import anomalies  # noqa: E402
from .forecast import forecast  # noqa: E402
from .trends import trends  # noqa: E402

main.add_command(forecast)
main.add_command(anomalies)
main.add_command(trends)


if __name__ == "__main__":
    main()
