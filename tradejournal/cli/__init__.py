"""CLI commands for TradeJournal.

This package provides the command-line interface: statistics views,
journal management, spreadsheet import and report export.
"""

from tradejournal.cli.main import cli, main

__all__ = ["cli", "main"]
