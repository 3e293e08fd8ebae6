"""Main CLI entry point for TradeJournal.

This module provides the main click group. Subcommand modules are only
imported when invoked so that pandas is not loaded for a simple
``stats`` call.
"""

import importlib
import logging

import click
from rich.logging import RichHandler

from tradejournal.cli.common import console

logger = logging.getLogger(__name__)


class LazyGroup(click.Group):
    """A click Group whose subcommands are ``"module:attribute"`` targets.

    Nothing is imported until a command is looked up, so ``--help`` and
    ``stats`` never pay for pandas.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.lazy_subcommands = dict(lazy_subcommands or {})

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(set(super().list_commands(ctx)) | set(self.lazy_subcommands))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        command = super().get_command(ctx, cmd_name)
        if command is None and cmd_name in self.lazy_subcommands:
            command = self._resolve(cmd_name)
            self.add_command(command, cmd_name)
        return command

    def _resolve(self, cmd_name: str) -> click.Command:
        target = self.lazy_subcommands[cmd_name]
        module_path, _, attr = target.partition(":")
        logger.debug("Loading command %s from %s", cmd_name, target)
        command = getattr(importlib.import_module(module_path), attr, None)
        if not isinstance(command, click.Command):
            raise click.ClickException(f"{target} is not a click command")
        return command


LAZY_SUBCOMMANDS = {
    # Statistics
    "stats": "tradejournal.cli.stats:stats",
    "sessions": "tradejournal.cli.stats:sessions",
    "calendar": "tradejournal.cli.stats:calendar_cmd",
    "strategies": "tradejournal.cli.stats:strategies",
    "emotions": "tradejournal.cli.stats:emotions",
    "score": "tradejournal.cli.stats:score",
    "performance": "tradejournal.cli.stats:performance",
    # Journal management
    "trades": "tradejournal.cli.journal:trades",
    "add": "tradejournal.cli.journal:add",
    "delete": "tradejournal.cli.journal:delete",
    "import": "tradejournal.cli.journal:import_cmd",
    "strategy": "tradejournal.cli.journal:strategy",
    # Reports
    "report": "tradejournal.cli.report:report",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def configure_logging(verbose: bool) -> None:
    """Route log records through rich; DEBUG when verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="tradejournal")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """TradeJournal - log trades and review your performance.

    Keep a live and a backtest journal, import broker exports, and see
    net P&L, win rate, R:R, best and worst days, session and strategy
    breakdowns computed from your trades.

    \b
    Quick Start:
      tradejournal add --pair EURUSD --direction Long ...
      tradejournal import history.csv
      tradejournal stats
    """
    configure_logging(verbose)
    ctx.ensure_object(dict)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
