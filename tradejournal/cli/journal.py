"""Journal management commands for TradeJournal CLI.

Handles listing, adding, deleting and importing trades, and managing
strategy checklists.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.common import (
    as_date,
    console,
    fail,
    from_option,
    get_config,
    get_store,
    kind_option,
    money,
    resolve_kind,
    to_option,
)

logger = logging.getLogger(__name__)

RESULT_COLORS = {
    "Win": "green",
    "Loss": "red",
    "Breakeven": "yellow",
    "Ongoing": "cyan",
}


@click.command()
@kind_option
@from_option
@to_option
def trades(
    kind: Optional[str], from_date: Optional[datetime], to_date: Optional[datetime]
) -> None:
    """List journal trades, oldest first.

    \b
    Examples:
      tradejournal trades
      tradejournal trades --kind backtest --from 2024-05-01
    """
    from tradejournal.config import get_currency_symbol

    config = get_config()
    kind = resolve_kind(config, kind)
    store = get_store(config)
    records = store.get_trades(kind, as_date(from_date), as_date(to_date))
    currency = get_currency_symbol(config)

    if not records:
        console.print(Panel(
            "[dim]No trades found[/dim]",
            title="[bold]Trade Journal[/bold]",
            border_style="dim",
        ))
        return

    table = Table(title="Trade Journal", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim", max_width=8)
    table.add_column("Date")
    table.add_column("Pair", style="bold")
    table.add_column("Dir", justify="center")
    table.add_column("Entry", justify="right")
    table.add_column("R:R", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("R", justify="right")
    table.add_column("Result", justify="center")

    for trade in records:
        rr = trade.risk_reward_ratio
        pnl = getattr(trade, "pnl", None)
        r_multiple = getattr(trade, "r_multiple", None)
        color = RESULT_COLORS[trade.result]
        table.add_row(
            trade.id[:8],
            trade.date.isoformat(),
            trade.symbol or "-",
            trade.direction,
            f"{trade.entry_price:g}",
            f"{rr:.2f}" if rr is not None else "-",
            money(pnl, currency) if pnl is not None else "-",
            f"{r_multiple:.2f}" if r_multiple is not None else "-",
            f"[{color}]{trade.result}[/{color}]",
        )

    console.print(table)
    console.print(f"\n[bold]Total Trades:[/bold] {len(records)}")


@click.command()
@kind_option
@click.option("--date", "trade_date", type=click.DateTime(formats=["%Y-%m-%d"]),
              default=None, help="Trade date (YYYY-MM-DD). Defaults to today.")
@click.option("--pair", "symbol", default=None, help="Instrument or currency pair.")
@click.option("--direction", type=click.Choice(["Long", "Short"]), default=None)
@click.option("--entry", "entry_price", type=float, default=None, help="Entry price.")
@click.option("--sl", "stop_loss", type=float, default=None, help="Stop-loss price.")
@click.option("--tp", "take_profit", type=float, default=None, help="Take-profit price.")
@click.option("--size", "position_size", type=float, default=None, help="Position size.")
@click.option("--pnl", type=float, default=None, help="Realized P&L for a closed trade.")
@click.option(
    "--result",
    type=click.Choice(["Win", "Loss", "Breakeven", "Ongoing"]),
    default=None,
    help="Outcome. Inferred from --pnl when omitted.",
)
@click.option("--session", type=click.Choice(["London", "New York", "Tokyo", "Sydney"]),
              default=None, help="Market session.")
@click.option("--strategy", "strategy_id", default=None, help="Strategy ID.")
@click.option("--adherence", type=click.Choice(["Yes", "No", "Partial"]), default=None,
              help="Did the trade follow the plan? [default: Yes]")
@click.option("--emotion", default=None, help="How you felt during the trade.")
@click.option("--notes", default=None, help="Free-form notes.")
@click.option("--id", "trade_id", default=None,
              help="Edit this existing trade; omitted options keep their values.")
def add(
    kind: Optional[str],
    trade_date: Optional[datetime],
    symbol: Optional[str],
    direction: Optional[str],
    entry_price: Optional[float],
    stop_loss: Optional[float],
    take_profit: Optional[float],
    position_size: Optional[float],
    pnl: Optional[float],
    result: Optional[str],
    session: Optional[str],
    strategy_id: Optional[str],
    adherence: Optional[str],
    emotion: Optional[str],
    notes: Optional[str],
    trade_id: Optional[str],
) -> None:
    """Add a trade to the journal, or edit one with --id.

    A new trade needs --direction, --entry, --sl, --tp and --size. When
    editing, only the options given are changed and the trade stays in
    its journal unless --kind is passed.

    \b
    Examples:
      tradejournal add --pair EURUSD --direction Long --entry 1.1 \\
          --sl 1.095 --tp 1.11 --size 1 --pnl 100 --session London
      tradejournal add --pair GBPUSD --direction Short --entry 1.27 \\
          --sl 1.275 --tp 1.26 --size 0.5   # ongoing trade
      tradejournal add --id <trade-id> --pnl -25   # close it
    """
    from tradejournal.errors import RecordNotFoundError
    from tradejournal.models import parse_trade

    config = get_config()
    store = get_store(config)

    if trade_id:
        try:
            existing = store.get_trade(trade_id)
        except RecordNotFoundError:
            fail(f"Trade not found: {trade_id}")
        data = existing.model_dump()
        previous_strategy = existing.strategy_id
        kind = kind or store.trade_kind(trade_id)
    else:
        missing = [
            flag for flag, value in (
                ("--direction", direction),
                ("--entry", entry_price),
                ("--sl", stop_loss),
                ("--tp", take_profit),
                ("--size", position_size),
            )
            if value is None
        ]
        if missing:
            fail(f"Missing option(s) for a new trade: {', '.join(missing)}")
        data = {"date": datetime.now().date()}
        previous_strategy = None
    kind = resolve_kind(config, kind)

    supplied = {
        "date": trade_date.date() if trade_date else None,
        "symbol": symbol,
        "direction": direction,
        "entry_price": entry_price,
        "stop_loss": stop_loss,
        "take_profit": take_profit,
        "position_size": position_size,
        "pnl": pnl,
        "session": session,
        "strategy_id": strategy_id,
        "adherence_to_plan": adherence,
        "emotion": emotion,
        "notes": notes,
    }
    data.update({key: value for key, value in supplied.items() if value is not None})

    if result is None:
        if pnl is not None:
            result = "Win" if pnl > 0 else "Loss" if pnl < 0 else "Breakeven"
        else:
            result = data.get("result", "Ongoing")
    data["result"] = result
    if result == "Ongoing":
        data.pop("pnl", None)

    try:
        trade = parse_trade(data)
    except ValidationError as exc:
        messages = "\n".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        fail(f"Invalid trade:\n\n{messages}")

    store.save_trade(trade, kind)

    if trade.strategy_id and trade.strategy_id != previous_strategy:
        try:
            store.increment_strategy_use(trade.strategy_id)
        except RecordNotFoundError:
            logger.warning("Strategy %s is not in the checklist library", trade.strategy_id)

    action = "Updated" if trade_id else "Saved"
    console.print(Panel(
        f"[green]{action} {trade.result.lower()} trade[/green] [bold]{trade.id}[/bold] "
        f"in the {kind} journal",
        title=f"[bold green]Trade {action}[/bold green]",
        border_style="green",
    ))


@click.command()
@click.argument("trade_id")
def delete(trade_id: str) -> None:
    """Delete a trade by ID."""
    from tradejournal.errors import RecordNotFoundError

    config = get_config()
    store = get_store(config)
    try:
        store.delete_trade(trade_id)
    except RecordNotFoundError as exc:
        fail(str(exc))
    console.print(f"[green]Deleted trade {trade_id}[/green]")


@click.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@kind_option
@click.option(
    "--replace",
    is_flag=True,
    default=False,
    help="Remove previously imported trades first.",
)
def import_cmd(file: Path, kind: Optional[str], replace: bool) -> None:
    """Import closed trades from a broker CSV or XLSX export.

    Columns are matched by common header names (Symbol, Type, Open Price,
    S/L, T/P, Lots, Profit, Open Time, Ticket, Comment).

    \b
    Examples:
      tradejournal import history.csv
      tradejournal import report.xlsx --kind backtest --replace
    """
    from tradejournal.errors import TradeImportError
    from tradejournal.importer import import_trades

    config = get_config()
    kind = resolve_kind(config, kind)

    try:
        outcome = import_trades(file)
    except TradeImportError as exc:
        fail(str(exc), "Import Failed")

    if not outcome.trades:
        fail(
            "No valid trades were found in the file. "
            "Please check the file format and column headers.",
            "Import Failed",
        )

    store = get_store(config)
    removed = store.delete_imported(kind) if replace else 0
    saved = store.save_trades(outcome.trades, kind)

    lines = [f"Imported: {saved} trades"]
    if outcome.skipped:
        lines.append(f"Skipped:  {outcome.skipped} rows")
    if removed:
        lines.append(f"Replaced: {removed} previously imported trades")
    console.print(Panel(
        "\n".join(lines),
        title="[bold green]Import Successful[/bold green]",
        border_style="green",
    ))


@click.group()
def strategy() -> None:
    """Manage strategy checklists.

    \b
    Examples:
      tradejournal strategy add "London Breakout" --rule "Asian range marked"
      tradejournal strategy list
    """
    pass


@strategy.command("add")
@click.argument("title")
@click.option("--description", default=None, help="Short description of the setup.")
@click.option("--rule", "rules", multiple=True, help="Checklist item (repeatable).")
def add_strategy(title: str, description: Optional[str], rules: tuple[str, ...]) -> None:
    """Add a strategy checklist."""
    from tradejournal.models import Strategy

    try:
        item = Strategy(title=title, description=description, rules=list(rules))
    except ValidationError as exc:
        fail(f"Invalid strategy: {exc.errors()[0]['msg']}")

    store = get_store(get_config())
    store.save_strategy(item)
    console.print(f"[green]Added strategy[/green] [bold]{item.title}[/bold] [dim]({item.id})[/dim]")


@strategy.command("list")
def list_strategies() -> None:
    """List strategy checklists."""
    store = get_store(get_config())
    items = store.get_strategies()

    if not items:
        console.print(Panel(
            "[dim]No strategies yet[/dim]",
            title="[bold]Strategies[/bold]",
            border_style="dim",
        ))
        return

    table = Table(title="Strategies", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Rules", justify="right")
    table.add_column("Used", justify="right")
    for item in items:
        table.add_row(item.id, item.title, str(len(item.rules)), str(item.use_count))
    console.print(table)
