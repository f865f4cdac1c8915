"""
CLI interface for Cloud Cost Summary.

Prints month-to-date spend compared with last month, as text or JSON.
"""

import json
import sys
from datetime import datetime, timezone
from typing import Optional

import structlog
import typer
import yaml
from rich.console import Console
from rich.markup import escape

from cloud_cost_summary.config.loader import (
    AppConfig,
    load_config,
    parse_granularity,
)
from cloud_cost_summary.core.changes import format_percentage
from cloud_cost_summary.core.errors import ConfigurationError, CostReportError
from cloud_cost_summary.core.periods import (
    BillingPeriods,
    TimeWindow,
    compute_billing_periods,
)
from cloud_cost_summary.core.summary import CostSummary, build_cost_summary
from cloud_cost_summary.observability.logger import setup_logging
from cloud_cost_summary.providers.aws import AwsCostExplorerProvider

app = typer.Typer()
console = Console(soft_wrap=True)
logger = structlog.get_logger()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

DATE_FORMAT = "%Y-%m-%d"

ConfigOption = typer.Option(None, "--config", "-c", help="Path to YAML configuration file")
NowOption = typer.Option(None, "--now", help="Override the current time (ISO-8601, UTC if no offset)")
GranularityOption = typer.Option(None, "--granularity", "-g", help="Sub-period size: daily or monthly")
RegionOption = typer.Option(None, "--region", "-r", help="Cost Explorer region")
ProfileOption = typer.Option(None, "--profile", "-p", help="Named AWS profile")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable debug logging on stderr")


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """Cloud Cost Summary CLI."""
    if ctx.invoked_subcommand is None:
        console.print("Cloud Cost Summary - Use --help to see available commands")


def get_provider(config: AppConfig) -> AwsCostExplorerProvider:
    """Create the cost provider for a run."""
    return AwsCostExplorerProvider(
        config=config.provider,
        granularity=config.report.granularity
    )


def _resolve_now(now: Optional[str]) -> datetime:
    """Parse the --now override, defaulting to the current UTC time.

    Naive timestamps are interpreted as UTC by compute_billing_periods.
    """
    if now is None:
        return datetime.now(timezone.utc)
    try:
        return datetime.fromisoformat(now.replace("Z", "+00:00"))
    except ValueError:
        raise ConfigurationError(f"Invalid --now timestamp: {now}")


def _load_app_config(
    config_path: Optional[str],
    granularity: Optional[str],
    region: Optional[str],
    profile: Optional[str]
) -> AppConfig:
    """Load the YAML config and apply command-line overrides."""
    try:
        config = load_config(config_path)
        return config.with_overrides(
            region=region,
            profile=profile,
            granularity=parse_granularity(granularity) if granularity else None
        )
    except (FileNotFoundError, yaml.YAMLError, ValueError) as e:
        raise ConfigurationError(str(e))


def _collect_summary(
    config_path: Optional[str],
    now: Optional[str],
    granularity: Optional[str],
    region: Optional[str],
    profile: Optional[str]
) -> CostSummary:
    config = _load_app_config(config_path, granularity, region, profile)
    periods = compute_billing_periods(_resolve_now(now))
    logger.info(
        "billing_periods_computed",
        now=periods.now.isoformat(),
        days_elapsed=periods.days_elapsed
    )
    return build_cost_summary(get_provider(config), periods)


def _fail(error: CostReportError) -> None:
    """Report a fatal error and exit."""
    logger.error("cost_report_failed", step=error.step, error=str(error))
    if error.step:
        console.print(f"[red]Error getting {error.step}:[/] {escape(str(error))}")
    else:
        console.print(f"[red]Error:[/] {escape(str(error))}")
    sys.exit(EXIT_CODE_FAIL)


@app.command()
def summary(
    config_path: Optional[str] = ConfigOption,
    now: Optional[str] = NowOption,
    granularity: Optional[str] = GranularityOption,
    region: Optional[str] = RegionOption,
    profile: Optional[str] = ProfileOption,
    verbose: bool = VerboseOption
):
    """Print a human-readable cost summary."""
    setup_logging(verbose)
    try:
        result = _collect_summary(config_path, now, granularity, region, profile)
    except CostReportError as e:
        _fail(e)

    _display_summary(result)
    sys.exit(EXIT_CODE_PASS)


@app.command("json")
def json_report(
    config_path: Optional[str] = ConfigOption,
    now: Optional[str] = NowOption,
    granularity: Optional[str] = GranularityOption,
    region: Optional[str] = RegionOption,
    profile: Optional[str] = ProfileOption,
    verbose: bool = VerboseOption
):
    """Print the cost summary as JSON."""
    setup_logging(verbose)
    try:
        result = _collect_summary(config_path, now, granularity, region, profile)
    except CostReportError as e:
        _fail(e)

    typer.echo(json.dumps(result.to_payload(), indent=2))
    sys.exit(EXIT_CODE_PASS)


@app.command()
def periods(
    now: Optional[str] = NowOption,
    verbose: bool = VerboseOption
):
    """Show the billing periods that would be queried, without querying."""
    setup_logging(verbose)
    try:
        result = compute_billing_periods(_resolve_now(now))
    except CostReportError as e:
        _fail(e)

    _display_periods(result)
    sys.exit(EXIT_CODE_PASS)


def _format_currency(amount: float) -> str:
    """Format currency with two decimal places and thousands separators."""
    return f"${amount:,.2f}"


def _format_date_range(window: TimeWindow) -> str:
    """Format the calendar days a window queries, both ends inclusive."""
    if window.is_empty:
        return f"no full days from {window.start_date.strftime(DATE_FORMAT)}"
    return f"{window.start_date.strftime(DATE_FORMAT)} to {window.last_day.strftime(DATE_FORMAT)}"


def _display_summary(result: CostSummary):
    """Display the cost summary in a plain financial format."""
    comparison = result.periods.last_month_comparison

    console.print("\n[bold]Cost Summary[/bold]")
    console.print(f"Month-to-date cost: {_format_currency(result.month_to_date.as_float())}")
    console.print(
        f"{format_percentage(result.change_vs_same_period)} compared to last month "
        f"for same period ({_format_currency(result.same_period_last_month.as_float())}, "
        f"{_format_date_range(comparison)})"
    )
    console.print(
        f"Forecasted total for current month: "
        f"{_format_currency(result.forecast_total.as_float())}"
    )
    console.print(
        f"{format_percentage(result.change_vs_last_month_total)} compared to last month's total"
    )
    console.print(
        f"Last month's total cost: {_format_currency(result.last_month_total.as_float())}"
    )


def _display_periods(result: BillingPeriods):
    """Display computed billing windows."""
    console.print("\n[bold]Billing Periods[/bold]")
    console.print(f"Now: {result.now.isoformat()}")
    console.print(f"Days elapsed: {result.days_elapsed}")
    for label, window in (
        ("Month-to-date", result.month_to_date),
        ("Last month (same period)", result.last_month_comparison),
        ("Last month (total)", result.last_month),
        ("Forecast", result.forecast),
    ):
        console.print(f"{label}: {_format_date_range(window)}")


if __name__ == "__main__":
    app()
