"""Report summaries and flat trade rows for export."""

from datetime import date
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field

from tradejournal.stats.aggregator import Trade, closed_trades, finite_sum

NOT_AVAILABLE = "N/A"

# Export columns, in order
REPORT_COLUMNS = (
    "Date",
    "Session",
    "Symbol",
    "Direction",
    "Entry Price",
    "Stop-Loss",
    "Take-Profit",
    "Position Size",
    "P&L",
    "R-Multiple",
    "Result",
    "Adherence to Plan",
    "Notes",
)


class ReportSummary(BaseModel):
    """Headline numbers of a journal report."""

    total_trades: int = Field(default=0, ge=0, description="Closed trades")
    net_pnl: float = Field(default=0.0, description="Net P&L")
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    breakevens: int = Field(default=0, ge=0)
    win_rate: float = Field(
        default=0.0, ge=0, le=100, description="Wins over wins plus losses"
    )

    model_config = {"frozen": True}


def filter_by_date(
    records: Iterable[Trade],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[Trade]:
    """Keep trades dated within ``[start, end]``; either bound may be open."""
    selected = []
    for trade in records:
        if start is not None and trade.date < start:
            continue
        if end is not None and trade.date > end:
            continue
        selected.append(trade)
    return selected


def report_summary(records: Iterable[Trade]) -> ReportSummary:
    """Summarise closed trades for a report.

    Unlike the dashboard win rate, breakeven trades are left out of the
    denominator here.
    """
    closed = closed_trades(records)
    wins = sum(1 for t in closed if t.result == "Win")
    losses = sum(1 for t in closed if t.result == "Loss")
    decided = wins + losses
    return ReportSummary(
        total_trades=len(closed),
        net_pnl=finite_sum(t.pnl for t in closed),
        wins=wins,
        losses=losses,
        breakevens=sum(1 for t in closed if t.result == "Breakeven"),
        win_rate=(wins / decided * 100) if decided > 0 else 0.0,
    )


def trade_rows(records: Iterable[Trade]) -> list[dict[str, Any]]:
    """One flat, export-ready row per trade with "N/A" for missing values.

    Keys follow ``REPORT_COLUMNS``.
    """
    rows = []
    for trade in records:
        pnl = getattr(trade, "pnl", None)
        r_multiple = getattr(trade, "r_multiple", None)
        values = (
            trade.date.isoformat(),
            trade.session or NOT_AVAILABLE,
            trade.symbol,
            trade.direction,
            trade.entry_price,
            trade.stop_loss,
            trade.take_profit,
            trade.position_size,
            pnl if pnl is not None else NOT_AVAILABLE,
            round(r_multiple, 2) if r_multiple is not None else NOT_AVAILABLE,
            trade.result,
            trade.adherence_to_plan,
            trade.notes,
        )
        rows.append(dict(zip(REPORT_COLUMNS, values)))
    return rows
