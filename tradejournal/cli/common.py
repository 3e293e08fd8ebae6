"""Helpers shared by the TradeJournal CLI commands."""

from datetime import date, datetime
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

from tradejournal.models.trade import JOURNAL_KINDS

console = Console()

KIND_OPTION_HELP = "Journal to use: 'live' or 'backtest' (default from config)."


def error_panel(message: str, title: str = "Error") -> None:
    """Print an error panel."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def fail(message: str, title: str = "Error") -> None:
    """Print an error panel and exit with status 1."""
    error_panel(message, title)
    raise SystemExit(1)


def get_config() -> dict:
    """Lazily load configuration, exiting on a malformed file."""
    from tradejournal.config import load_config
    from tradejournal.errors import ConfigError

    try:
        return load_config()
    except ConfigError as exc:
        fail(str(exc), "Configuration Error")


def get_store(config: dict):
    """Get the journal store instance."""
    from tradejournal.config import get_db_path
    from tradejournal.db.store import JournalStore

    return JournalStore(get_db_path(config))


def resolve_kind(config: dict, kind: Optional[str]) -> str:
    """Use the requested journal kind or the configured default."""
    if kind:
        return kind
    from tradejournal.config import get_default_kind
    from tradejournal.errors import ConfigError

    try:
        return get_default_kind(config)
    except ConfigError as exc:
        fail(str(exc), "Configuration Error")


def as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


def money(value: float, symbol: str = "$", colored: bool = True) -> str:
    """Format a signed amount, green for gains and red for losses."""
    sign = "-" if value < 0 else ""
    text = f"{sign}{symbol}{abs(value):,.2f}"
    if not colored:
        return text
    color = "green" if value >= 0 else "red"
    return f"[{color}]{text}[/{color}]"


kind_option = click.option(
    "--kind",
    type=click.Choice(JOURNAL_KINDS),
    default=None,
    help=KIND_OPTION_HELP,
)
from_option = click.option(
    "--from", "from_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Only trades on or after this date (YYYY-MM-DD).",
)
to_option = click.option(
    "--to", "to_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Only trades on or before this date (YYYY-MM-DD).",
)
