"""Data models for TradeJournal."""

from tradejournal.models.trade import (
    ClosedTrade,
    OngoingTrade,
    TradeRecord,
    parse_trade,
    parse_trades,
)
from tradejournal.models.strategy import Strategy
from tradejournal.models.statistics import (
    DayPnl,
    EquityPoint,
    NoLosingDays,
    SessionPnl,
    Statistics,
    StrategyStats,
)

__all__ = [
    "ClosedTrade",
    "OngoingTrade",
    "TradeRecord",
    "parse_trade",
    "parse_trades",
    "Strategy",
    "DayPnl",
    "EquityPoint",
    "NoLosingDays",
    "SessionPnl",
    "Statistics",
    "StrategyStats",
]
