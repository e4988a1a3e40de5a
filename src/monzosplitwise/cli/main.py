#!/usr/bin/env python3
"""
Main CLI Entry Point for Monzo to Splitwise Reconciliation

Provides the command-line interface for running a reconciliation pass.
"""

import logging
import os

import click

from ..core.config import get_config, reload_config
from ..core.currency import format_minor_units
from ..core.json_utils import format_json, write_json
from ..core.models import OutcomeStatus, ReconciliationSummary
from ..monzo.client import MonzoAPIError, MonzoClient
from ..reconcile.orchestrator import Reconciler
from ..splitwise.client import SplitwiseAPIError, SplitwiseClient

STATUS_ICONS = {
    OutcomeStatus.POSTED: "✅",
    OutcomeStatus.PLANNED: "📝",
    OutcomeStatus.SKIPPED_DUPLICATE: "⏭️ ",
    OutcomeStatus.SKIPPED_NO_GROUP: "⚠️ ",
    OutcomeStatus.FAILED: "❌",
}


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
    Monzo to Splitwise - post tagged card spending as shared expenses.

    Add "#splitwise-<group>" to a Monzo transaction's notes and the next run
    creates a matching Splitwise expense, split equally across the group.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["MONZOSPLITWISE_ENV"] = config_env

    if debug:
        os.environ["DEBUG"] = "true"

    try:
        config_obj = reload_config() if (config_env or debug) else get_config()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("monzosplitwise").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config"] = config_obj

    if verbose:
        click.echo(f"Environment: {config_obj.environment.value}")
        click.echo(f"Data directory: {config_obj.data_dir}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
def version() -> None:
    """Show version information."""
    from monzosplitwise import __author__, __version__

    click.echo(f"Monzo to Splitwise v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration (tokens redacted)."""
    config_obj = ctx.obj["config"]

    click.echo("Current Configuration:")
    click.echo(format_json(config_obj.to_dict()))


@main.command()
@click.option("--dry-run", is_flag=True, help="Build expenses without posting them")
@click.option("--lookback-days", type=click.IntRange(min=1), help="Override the transaction window in days")
@click.option("--limit", type=click.IntRange(min=1), help="Override the Monzo transaction page size")
@click.option("--account-id", help="Monzo account to reconcile (default: current account)")
@click.option("--report-file", type=click.Path(dir_okay=False), help="Write the run summary as JSON")
@click.pass_context
def run(
    ctx: click.Context,
    dry_run: bool,
    lookback_days: int | None,
    limit: int | None,
    account_id: str | None,
    report_file: str | None,
) -> None:
    """
    Reconcile tagged Monzo transactions into Splitwise.

    Examples:
      monzosplitwise run --dry-run
      monzosplitwise run --lookback-days 30 --report-file data/reports/latest.json
    """
    config_obj = ctx.obj["config"]

    missing = config_obj.missing_credentials()
    if missing:
        raise click.ClickException(f"Missing credentials: {', '.join(missing)}")

    monzo = MonzoClient(
        config_obj.monzo.access_token,
        base_url=config_obj.monzo.base_url,
        timeout=config_obj.monzo.timeout,
    )
    splitwise = SplitwiseClient(
        config_obj.splitwise.access_token,
        base_url=config_obj.splitwise.base_url,
        timeout=config_obj.splitwise.timeout,
    )
    reconciler = Reconciler(
        monzo,
        splitwise,
        lookback_days=lookback_days or config_obj.reconcile.lookback_days,
        transaction_limit=limit or config_obj.reconcile.transaction_limit,
        expense_limit=config_obj.reconcile.expense_limit,
        account_id=account_id or config_obj.monzo.account_id,
        creation_method=config_obj.reconcile.creation_method,
    )

    if ctx.obj.get("verbose"):
        click.echo(f"Mode: {'Dry run' if dry_run else 'Post expenses'}")
        click.echo(f"Window: last {reconciler.lookback_days} days, up to {reconciler.transaction_limit} transactions")
        click.echo()

    try:
        summary = reconciler.run(dry_run=dry_run)
    except (MonzoAPIError, SplitwiseAPIError) as e:
        raise click.ClickException(f"Failed to fetch data: {e}") from e

    _echo_summary(summary)

    if report_file:
        write_json(report_file, summary.to_dict())
        click.echo(f"   Report saved to: {report_file}")

    if summary.has_failures:
        ctx.exit(1)


def _echo_summary(summary: ReconciliationSummary) -> None:
    for outcome in summary.outcomes:
        icon = STATUS_ICONS[outcome.status]
        if outcome.amount is not None and outcome.currency:
            amount = format_minor_units(outcome.amount, outcome.currency)
        else:
            amount = "?"
        line = f"{icon} {outcome.transaction_id} {outcome.tag} {amount}: {outcome.status.value}"
        if outcome.group_name:
            line += f" ({outcome.group_name})"
        if outcome.error:
            line += f" - {outcome.error}"
        click.echo(line)

    if summary.transaction_cap_reached:
        click.echo(f"⚠️  Fetched {summary.transactions_fetched} transactions, the cap; older ones may be missing")
    if summary.cancelled:
        click.echo("⚠️  Run cancelled before all transactions were processed")

    if summary.dry_run:
        click.echo(f"📝 Planned {summary.planned} expenses (dry run, nothing posted)")
    else:
        click.echo(f"✅ Posted {summary.posted} expenses")
    click.echo(f"   Already in Splitwise: {summary.skipped_duplicate}")
    click.echo(f"   No matching group: {summary.skipped_no_group}")
    click.echo(f"   Failed: {summary.failed}")


if __name__ == "__main__":
    main()
