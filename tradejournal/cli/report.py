"""Report command for TradeJournal CLI.

Summarises a journal over a date range and exports the trades as JSON
or CSV.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel

from tradejournal.cli.common import (
    as_date,
    console,
    from_option,
    get_config,
    get_store,
    kind_option,
    money,
    resolve_kind,
    to_option,
)


def _date_range_label(start, end) -> str:
    if start is None and end is None:
        return "All time"
    begin = f"{start:%b %d, %Y}" if start else "start"
    finish = f"{end:%b %d, %Y}" if end else "present"
    return f"{begin} to {finish}"


@click.command()
@kind_option
@from_option
@to_option
@click.option(
    "--format", "fmt",
    type=click.Choice(["json", "csv"]),
    default=None,
    help="Export the report instead of printing the summary.",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="File to write the export to. Defaults to stdout.",
)
def report(
    kind: Optional[str],
    from_date: Optional[datetime],
    to_date: Optional[datetime],
    fmt: Optional[str],
    output: Optional[Path],
) -> None:
    """Summarise or export a journal report.

    The report win rate counts wins against losses only; breakeven
    trades are listed separately.

    \b
    Examples:
      tradejournal report
      tradejournal report --from 2024-05-01 --to 2024-05-31
      tradejournal report --format csv -o may.csv
      tradejournal report --kind backtest --format json
    """
    import pandas as pd

    from tradejournal.config import get_currency_symbol
    from tradejournal.stats import REPORT_COLUMNS, filter_by_date, report_summary, trade_rows

    config = get_config()
    kind = resolve_kind(config, kind)
    store = get_store(config)

    start, end = as_date(from_date), as_date(to_date)
    selected = filter_by_date(store.get_trades(kind), start, end)
    summary = report_summary(selected)
    title = "Live Trading Journal Report" if kind == "live" else "Backtest Trading Journal Report"

    if fmt is None:
        currency = get_currency_symbol(config)
        console.print(Panel(
            f"[dim]Date Range: {_date_range_label(start, end)}[/dim]\n\n"
            f"Total Trades: {summary.total_trades}\n"
            f"Net P&L:      {money(summary.net_pnl, currency)}\n"
            f"Win Rate:     {summary.win_rate:.2f}%\n"
            f"Wins:         {summary.wins}\n"
            f"Losses:       {summary.losses}\n"
            f"Breakevens:   {summary.breakevens}",
            title=f"[bold cyan]{title}[/bold cyan]",
            border_style="cyan",
        ))
        return

    rows = trade_rows(selected)
    if fmt == "json":
        text = json.dumps({
            "title": title,
            "date_range": _date_range_label(start, end),
            "generated_on": datetime.now().isoformat(timespec="seconds"),
            "summary": summary.model_dump(mode="json"),
            "trades": rows,
        }, indent=2)
    else:
        # Empty ranges still get a header row
        text = pd.DataFrame(rows, columns=list(REPORT_COLUMNS)).to_csv(index=False)

    if output is None:
        click.echo(text)
    else:
        output.write_text(text)
        console.print(f"[green]Report written to {output}[/green]")
