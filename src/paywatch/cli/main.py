#!/usr/bin/env python3
"""
Main CLI Entry Point for paywatch

Provides the command-line interface for watching payment notifications and
for checking how a saved email would be parsed.
"""

import asyncio
import json
import logging
import os
from datetime import datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfoNotFoundError

import click

from ..core.config import Config, ConfigurationError, load_config
from ..core.dates import DEFAULT_TIMEZONE, get_timezone
from ..export.ledger import build_ledger_entries
from ..mail.models import Email
from ..providers import PROVIDERS, get_provider

logger = logging.getLogger(__name__)


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
    paywatch - Payment Notification Watcher

    Watches 楽天ペイ, ANA Pay, VポイントPay and JAL Pay notification emails
    and exports each transaction to the household ledger.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["PAYWATCH_ENV"] = config_env

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        logging.getLogger("paywatch").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug


def _load_config(ctx: click.Context) -> Config:
    """Load configuration or stop with a diagnostic and exit status 1."""
    try:
        config = load_config()
    except ConfigurationError as e:
        click.echo(f"❌ {e}", err=True)
        ctx.exit(1)

    if ctx.obj.get("verbose"):
        click.echo(f"Environment: {config.environment.value}")
        click.echo(f"Data directory: {config.data_dir}")
    return config


@main.command()
def version() -> None:
    """Show version information."""
    from paywatch import __author__, __version__

    click.echo(f"paywatch v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration (credentials redacted)."""
    config_obj = _load_config(ctx)

    click.echo("Current Configuration:")
    for name, value in config_obj.to_dict().items():
        if isinstance(value, dict):
            click.echo(f"  {name}:")
            for nested_name, nested_value in value.items():
                click.echo(f"    {nested_name}: {nested_value}")
        else:
            click.echo(f"  {name}: {value}")


@main.command()
@click.option(
    "--provider",
    "-p",
    "providers",
    multiple=True,
    type=click.Choice(sorted(PROVIDERS)),
    help="Provider to watch (repeatable; default: PAYWATCH_PROVIDERS)",
)
@click.option("--interval", type=float, help="Poll interval in seconds for every watcher")
@click.option("--lookback-hours", type=float, help="How far back the first poll reaches")
@click.option("--no-banner", is_flag=True, help="Skip the start-up banner")
@click.pass_context
def run(
    ctx: click.Context,
    providers: tuple[str, ...],
    interval: float | None,
    lookback_hours: float | None,
    no_banner: bool,
) -> None:
    """
    Watch notification emails and export new transactions.

    Runs until interrupted.

    Examples:
      paywatch run
      paywatch run -p rakuten -p jal --interval 30
    """
    from paywatch import __version__

    from ..app import build_watchers
    from ..watcher import run_watchers

    config_obj = _load_config(ctx)
    config_obj.setup_logging()
    if ctx.obj.get("debug"):
        logging.getLogger("paywatch").setLevel(logging.DEBUG)

    if not no_banner:
        click.echo("\x1bc", nl=False)
        click.secho(f"\n   paywatch {__version__}\n", bold=True, fg=172)

    def show_progress(now: datetime) -> None:
        click.echo(f"\r{now:%Y/%m/%d %H:%M:%S}", nl=False)

    watchers = build_watchers(
        config_obj,
        provider_names=list(providers) or None,
        interval=interval,
        lookback=timedelta(hours=lookback_hours) if lookback_hours is not None else None,
        on_poll=show_progress,
    )

    try:
        asyncio.run(run_watchers(watchers))
    except KeyboardInterrupt:
        click.echo("\nStopped.")


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--provider", "-p", required=True, type=click.Choice(sorted(PROVIDERS)), help="Provider template")
@click.option("--received-at", help="Email receipt time (ISO 8601); used by templates without a date")
@click.option("--timezone", default=DEFAULT_TIMEZONE, show_default=True, help="Timezone for dates")
@click.option("--html/--text", "as_html", default=None, help="Body format (default: by file extension)")
def parse(path: Path, provider: str, received_at: str | None, timezone: str, as_html: bool | None) -> None:
    """
    Parse a saved email body and show the extracted transaction.

    Example:
      paywatch parse -p jal --received-at 2025-06-10T09:00 charge.txt
    """
    try:
        tz = get_timezone(timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise click.BadParameter(f"Unknown timezone: {timezone}", param_hint="--timezone") from e

    received = None
    if received_at:
        try:
            received = datetime.fromisoformat(received_at)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--received-at") from e
        if received.tzinfo is None:
            received = received.replace(tzinfo=tz)

    content = path.read_text(encoding="utf-8")
    is_html = as_html if as_html is not None else path.suffix.lower() in (".html", ".htm")
    email = Email(
        id=str(path),
        html=content if is_html else None,
        text=None if is_html else content,
        received_at=received,
    )

    body = email.body()
    if body is None:
        raise click.ClickException(f"{path} has no body")

    parser = get_provider(provider, timezone=tz)
    try:
        record = parser.parse(body, email.received_at)
    except ValueError as e:
        raise click.ClickException(f"Could not parse {path}: {e}") from e

    click.echo(json.dumps(record.to_dict(), ensure_ascii=False, indent=2))

    if not record.is_valid():
        click.echo("❌ Not a valid transaction (date, merchant and amount are all required)")
        return

    click.echo("✅ Valid transaction")
    for entry in build_ledger_entries(record, parser):
        click.echo(f"   ⏬ {entry.date} {entry.content} {entry.amount} ({entry.source})")


if __name__ == "__main__":
    main()
