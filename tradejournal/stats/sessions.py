"""Market-session performance buckets.

Tokyo and Sydney trades are reported together as the Asian session,
next to London and New York.
"""

from typing import Iterable

from pydantic import BaseModel, Field

from tradejournal.stats.aggregator import Trade, closed_trades, finite_sum

SESSION_BUCKETS: dict[str, tuple[str, ...]] = {
    "Asian": ("Tokyo", "Sydney"),
    "London": ("London",),
    "New York": ("New York",),
}


class SessionPerformance(BaseModel):
    """Closed-trade results for one session bucket."""

    name: str = Field(..., description="Bucket name")
    trades: int = Field(default=0, ge=0, description="Closed trades")
    wins: int = Field(default=0, ge=0, description="Winning trades")
    pnl: float = Field(default=0.0, description="Net P&L")

    model_config = {"frozen": True}

    @property
    def win_rate(self) -> float:
        if self.trades == 0:
            return 0.0
        return self.wins / self.trades * 100


def session_performance(records: Iterable[Trade]) -> list[SessionPerformance]:
    """Group closed trades into Asian, London and New York buckets.

    Every bucket is returned, in that order, even when it has no trades.
    Trades without a session are ignored.
    """
    totals = {name: {"trades": 0, "wins": 0, "pnl": 0.0} for name in SESSION_BUCKETS}
    for trade in closed_trades(records):
        if trade.session is None:
            continue
        for name, members in SESSION_BUCKETS.items():
            if trade.session in members:
                bucket = totals[name]
                bucket["trades"] += 1
                bucket["pnl"] = finite_sum((bucket["pnl"], trade.pnl))
                if trade.result == "Win":
                    bucket["wins"] += 1
                break
    return [SessionPerformance(name=name, **values) for name, values in totals.items()]
