"""Statistics commands for TradeJournal CLI.

Shows the dashboard metrics, session and strategy breakdowns, the
monthly trading calendar, emotions and the journal scores.
"""

import json
from datetime import date, datetime
from typing import Optional

import click
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


def _load_trades(kind: Optional[str], from_date=None, to_date=None):
    """Snapshot the journal and return (config, store, kind, trades)."""
    config = get_config()
    kind = resolve_kind(config, kind)
    store = get_store(config)
    trades = store.get_trades(kind, as_date(from_date), as_date(to_date))
    return config, store, kind, trades


def _currency(config: dict) -> str:
    from tradejournal.config import get_currency_symbol

    return get_currency_symbol(config)


def render_statistics(stats, currency: str = "$", title: str = "Journal Statistics") -> Panel:
    """Build the dashboard panel for a Statistics result."""
    from tradejournal.models import DayPnl

    if stats.best_day is not None:
        best = f"{money(stats.best_day.pnl, currency)} on {stats.best_day.date:%b %d}"
    else:
        best = "N/A"

    if stats.worst_day is None:
        worst = "N/A"
    elif isinstance(stats.worst_day, DayPnl):
        worst = f"{money(stats.worst_day.pnl, currency)} on {stats.worst_day.date:%b %d}"
    else:
        worst = "[green]No losing days[/green]"

    if stats.best_session is not None:
        session = f"{stats.best_session.session} ({money(stats.best_session.pnl, currency)})"
    else:
        session = "N/A"

    summary = (
        f"[bold]Net P&L:[/bold]           {money(stats.net_pnl, currency)}\n"
        f"[bold]Win Rate:[/bold]          {stats.win_rate:.1f}%"
        f"  [dim]({stats.wins}W / {stats.losses}L / {stats.breakevens}BE)[/dim]\n"
        f"[bold]Avg R:R:[/bold]           {stats.avg_risk_reward:.2f}\n"
        f"[bold]Sharpe Ratio:[/bold]      {stats.consistency_ratio:.2f}\n"
        f"[bold]Best Day:[/bold]          {best}\n"
        f"[bold]Worst Day:[/bold]         {worst}\n"
        f"[bold]Best Session:[/bold]      {session}\n\n"
        f"[dim]{stats.closed_trades} closed, {stats.ongoing_trades} ongoing, "
        f"{stats.total_trades} total[/dim]"
    )
    return Panel(summary, title=f"[bold cyan]{title}[/bold cyan]", border_style="cyan")


@click.command()
@kind_option
@from_option
@to_option
@click.option(
    "--json", "as_json",
    is_flag=True,
    default=False,
    help="Print the full statistics as JSON.",
)
@click.option(
    "--curve/--no-curve",
    default=False,
    help="Also show the cumulative P&L curve.",
)
def stats(
    kind: Optional[str],
    from_date: Optional[datetime],
    to_date: Optional[datetime],
    as_json: bool,
    curve: bool,
) -> None:
    """Display journal performance statistics.

    Net P&L, win rate, average R:R, best and worst day, the Sharpe-like
    consistency ratio and best session, computed from closed trades.

    \b
    Examples:
      tradejournal stats
      tradejournal stats --kind backtest
      tradejournal stats --from 2024-05-01 --to 2024-05-31
      tradejournal stats --json
    """
    from tradejournal.stats import compute_statistics

    config, store, kind, trades = _load_trades(kind, from_date, to_date)
    result = compute_statistics(trades, store.get_strategies())

    if as_json:
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return

    currency = _currency(config)
    title = "Live Journal" if kind == "live" else "Backtest Journal"
    console.print(render_statistics(result, currency, title=title))

    if curve and result.cumulative_pnl:
        table = Table(title="Cumulative P&L", show_header=True, header_style="bold cyan")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Date", style="bold")
        table.add_column("Cumulative", justify="right")
        for index, point in enumerate(result.cumulative_pnl, start=1):
            table.add_row(str(index), point.date.isoformat(), money(point.cumulative_pnl, currency))
        console.print(table)


@click.command()
@kind_option
@from_option
@to_option
def sessions(
    kind: Optional[str], from_date: Optional[datetime], to_date: Optional[datetime]
) -> None:
    """Display performance per market session.

    Tokyo and Sydney trades are grouped as the Asian session.
    """
    from tradejournal.stats import session_performance

    config, _, _, trades = _load_trades(kind, from_date, to_date)
    currency = _currency(config)

    table = Table(title="Session Performance", show_header=True, header_style="bold cyan")
    table.add_column("Session", style="bold")
    table.add_column("Trades", justify="right")
    table.add_column("Wins", justify="right")
    table.add_column("Win Rate", justify="right")
    table.add_column("P&L", justify="right")

    for bucket in session_performance(trades):
        table.add_row(
            bucket.name,
            str(bucket.trades),
            str(bucket.wins),
            f"{bucket.win_rate:.1f}%",
            money(bucket.pnl, currency),
        )
    console.print(table)


def _parse_month(value: Optional[str]) -> tuple[int, int]:
    if not value:
        today = date.today()
        return today.year, today.month
    try:
        parsed = datetime.strptime(value, "%Y-%m")
    except ValueError:
        fail(f"Invalid month: {value}. Use YYYY-MM")
    return parsed.year, parsed.month


@click.command("calendar")
@kind_option
@click.option(
    "--month",
    type=str,
    default=None,
    help="Month to show (YYYY-MM). Defaults to the current month.",
)
@click.option(
    "--days",
    type=int,
    default=7,
    show_default=True,
    help="Number of most recent trading days to list.",
)
def calendar_cmd(kind: Optional[str], month: Optional[str], days: int) -> None:
    """Display weekly P&L for a month and recent daily P&L.

    \b
    Examples:
      tradejournal calendar
      tradejournal calendar --month 2024-05
    """
    from tradejournal.stats import daily_series, weekly_summary

    year, month_number = _parse_month(month)
    config, _, _, trades = _load_trades(kind)
    currency = _currency(config)

    weeks = Table(
        title=f"Weekly P&L - {date(year, month_number, 1):%B %Y}",
        show_header=True,
        header_style="bold cyan",
    )
    weeks.add_column("Week", style="bold")
    weeks.add_column("From", style="dim")
    weeks.add_column("Trading Days", justify="right")
    weeks.add_column("P&L", justify="right")
    for week in weekly_summary(trades, year, month_number):
        weeks.add_row(week.label, week.start.isoformat(), str(week.trade_days), money(week.pnl, currency))
    console.print(weeks)

    recent = daily_series(trades, last=days)
    if not recent:
        console.print(Panel("[dim]No closed trades yet[/dim]", title="[bold]Daily P&L[/bold]", border_style="dim"))
        return

    daily = Table(title="Daily P&L", show_header=True, header_style="bold cyan")
    daily.add_column("Date", style="bold")
    daily.add_column("Day", style="dim")
    daily.add_column("P&L", justify="right")
    for day in recent:
        daily.add_row(day.date.isoformat(), f"{day.date:%a}", money(day.pnl, currency))
    console.print(daily)


@click.command()
@kind_option
@from_option
@to_option
def strategies(
    kind: Optional[str], from_date: Optional[datetime], to_date: Optional[datetime]
) -> None:
    """Display performance per strategy, best net P&L first."""
    from tradejournal.stats import strategy_breakdown

    config, store, _, trades = _load_trades(kind, from_date, to_date)
    currency = _currency(config)
    breakdown = strategy_breakdown(trades, store.get_strategies())

    if not breakdown:
        console.print(Panel(
            "[dim]No strategy performance data yet.[/dim]\n"
            "Assign strategies to your trades to see results.",
            title="[bold]Strategy Performance[/bold]",
            border_style="dim",
        ))
        return

    table = Table(title="Strategy Performance", show_header=True, header_style="bold cyan")
    table.add_column("Strategy", style="bold")
    table.add_column("Trades", justify="right")
    table.add_column("Win Rate", justify="right")
    table.add_column("Avg R:R", justify="right")
    table.add_column("Net P&L", justify="right")

    for row in breakdown:
        rate_color = "green" if row.win_rate > 50 else "red"
        table.add_row(
            row.title or row.strategy_id,
            str(row.trades),
            f"[{rate_color}]{row.win_rate:.1f}%[/{rate_color}]",
            f"{row.avg_risk_reward:.2f}",
            money(row.net_pnl, currency),
        )
    console.print(table)


@click.command()
@kind_option
@from_option
@to_option
def emotions(
    kind: Optional[str], from_date: Optional[datetime], to_date: Optional[datetime]
) -> None:
    """Display P&L per recorded emotion.

    The share column counts closed trades against every trade that
    records an emotion, ongoing ones included.
    """
    from tradejournal.stats import emotion_breakdown

    config, _, _, trades = _load_trades(kind, from_date, to_date)
    currency = _currency(config)
    breakdown = emotion_breakdown(trades)

    if not breakdown:
        console.print(Panel(
            "[dim]No emotion data yet.[/dim]\n"
            "Record an emotion with --emotion when adding trades.",
            title="[bold]Emotion Analysis[/bold]",
            border_style="dim",
        ))
        return

    table = Table(title="Emotion Analysis", show_header=True, header_style="bold cyan")
    table.add_column("Emotion", style="bold")
    table.add_column("Trades", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("P&L", justify="right")
    for row in breakdown:
        table.add_row(row.emotion, str(row.trades), f"{row.share:.1f}%", money(row.pnl, currency))
    console.print(table)


def _score_color(value: float) -> str:
    return "green" if value >= 70 else "yellow" if value >= 40 else "red"


@click.command()
@kind_option
def score(kind: Optional[str]) -> None:
    """Display the 0-100 journal score.

    Blends win rate, plan adherence and R-multiple consistency.
    """
    from tradejournal.stats import journal_score

    _, _, _, trades = _load_trades(kind)
    value = journal_score(trades)
    color = _score_color(value)
    console.print(Panel(
        f"[bold {color}]{value}[/bold {color}] / 100",
        title="[bold cyan]Journal Score[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
@kind_option
def performance(kind: Optional[str]) -> None:
    """Display the five-part performance score.

    Averages win rate, R:R against 2:1, discipline, consistency and
    profit factor against 3:1. Needs at least five closed trades.
    """
    from tradejournal.stats import performance_score
    from tradejournal.stats.score import MIN_SCORED_TRADES

    _, _, _, trades = _load_trades(kind)
    result = performance_score(trades)
    if result is None:
        console.print(Panel(
            f"[dim]Not enough data. Close at least {MIN_SCORED_TRADES} trades.[/dim]",
            title="[bold]Performance Score[/bold]",
            border_style="dim",
        ))
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Component", style="bold")
    table.add_column("Score", justify="right")
    for label, value in (
        ("Win Rate", result.win_rate),
        ("Risk:Reward", result.risk_reward),
        ("Discipline", result.discipline),
        ("Consistency", result.consistency),
        ("Profit Factor", result.profit_factor),
    ):
        color = _score_color(value)
        table.add_row(label, f"[{color}]{value:.0f}[/{color}]")

    color = _score_color(result.overall)
    console.print(Panel(
        table,
        title=f"[bold cyan]Performance Score[/bold cyan] [bold {color}]{result.overall:.0f}[/bold {color}] / 100",
        border_style="cyan",
    ))
