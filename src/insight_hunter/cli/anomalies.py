#!/usr/bin/env python3
"""
Anomalies CLI

Detects unusual spending and income in a tenant's ledger.
"""

import click

from ..analysis import build_anomaly_report
from ..core.json_utils import format_json
from ..core.models import Sensitivity
from .common import ledger_options, load_records, parse_date_option, resolve_config


@click.command()
@ledger_options
@click.option("--period", default="30d", show_default=True, help="Window to scan, e.g. 30d, 3m, 1y")
@click.option(
    "--sensitivity",
    type=click.Choice([s.value for s in Sensitivity]),
    help="Outlier sensitivity (default: ANOMALY_SENSITIVITY)",
)
@click.option("--as-of", help="End of the window (YYYY-MM-DD), defaults to the latest record")
@click.option("--json", "as_json", is_flag=True, help="Print the full report as JSON")
@click.pass_context
def anomalies(
    ctx: click.Context,
    ledger_file: str | None,
    user_id: str | None,
    client_id: str | None,
    period: str,
    sensitivity: str | None,
    as_of: str | None,
    as_json: bool,
) -> None:
    """
    Detect spending spikes, outliers, repeats, income drops and odd-hour spending.

    Examples:
      insight-hunter anomalies --user 42
      insight-hunter anomalies --user 42 --period 3m --sensitivity high
    """
    config = resolve_config(ctx)
    records = load_records(config, ledger_file, user_id, client_id)

    report = build_anomaly_report(
        records,
        period=period,
        sensitivity=Sensitivity.parse(sensitivity) if sensitivity else config.analytics.anomaly_sensitivity,
        as_of=parse_date_option(as_of, "--as-of"),
        rules=config.analytics.anomaly_rules(),
    )

    if as_json:
        click.echo(format_json(report.to_dict()))
        return

    click.echo(f"[ANOMALIES] {len(report.anomalies)} found ({report.period}, {report.sensitivity.value} sensitivity)")
    for anomaly in report.anomalies:
        click.echo(f"   [{anomaly.severity.value.upper()}] {anomaly.kind.value}: {anomaly.reason}")
