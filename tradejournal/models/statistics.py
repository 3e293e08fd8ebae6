"""Result models produced by the statistics engine.

All models are frozen and serialise to plain JSON with
``model_dump(mode="json")``. Monetary values are raw floats; currency
formatting is left to the caller.
"""

from datetime import date as date_type
from typing import Literal, Optional, Union
from pydantic import BaseModel, Field


class DayPnl(BaseModel):
    """Summed P&L of all closed trades on one calendar day."""

    date: date_type = Field(..., description="Calendar day")
    pnl: float = Field(..., description="Net P&L for the day")

    model_config = {"frozen": True}


class NoLosingDays(BaseModel):
    """Worst-day marker used when no day closed with a net loss."""

    status: Literal["no_losing_days"] = "no_losing_days"

    model_config = {"frozen": True}


class SessionPnl(BaseModel):
    """Net P&L of one market session."""

    session: str = Field(..., description="Session name")
    pnl: float = Field(..., description="Net P&L")

    model_config = {"frozen": True}


class StrategyStats(BaseModel):
    """Performance of the closed trades tagged with one strategy."""

    strategy_id: str = Field(..., description="Strategy ID")
    title: Optional[str] = Field(default=None, description="Strategy name if known")
    trades: int = Field(..., ge=0, description="Closed trades")
    wins: int = Field(..., ge=0, description="Winning trades")
    win_rate: float = Field(..., ge=0, le=100, description="Win rate percentage")
    avg_risk_reward: float = Field(..., ge=0, description="Average planned R:R")
    net_pnl: float = Field(..., description="Net P&L")

    model_config = {"frozen": True}


class EquityPoint(BaseModel):
    """One point of the trade-indexed cumulative P&L curve."""

    date: date_type = Field(..., description="Trade date")
    cumulative_pnl: float = Field(..., description="Running P&L after this trade")

    model_config = {"frozen": True}


class Statistics(BaseModel):
    """Every metric derived from a snapshot of journal trades."""

    total_trades: int = Field(default=0, ge=0, description="All records, ongoing included")
    closed_trades: int = Field(default=0, ge=0, description="Records with a realized P&L")
    ongoing_trades: int = Field(default=0, ge=0, description="Open records")
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    breakevens: int = Field(default=0, ge=0)
    net_pnl: float = Field(default=0.0, description="Sum of closed-trade P&L")
    win_rate: float = Field(default=0.0, ge=0, le=100, description="Win rate percentage")
    avg_risk_reward: float = Field(default=0.0, ge=0, description="Average planned R:R")
    best_day: Optional[DayPnl] = Field(default=None, description="None when no closed trades")
    worst_day: Optional[Union[DayPnl, NoLosingDays]] = Field(
        default=None, description="None when no closed trades"
    )
    consistency_ratio: float = Field(
        default=0.0, description="Mean over population std-dev of non-zero P&L"
    )
    best_session: Optional[SessionPnl] = Field(
        default=None, description="None when no session made money"
    )
    strategy_breakdown: list[StrategyStats] = Field(default_factory=list)
    cumulative_pnl: list[EquityPoint] = Field(default_factory=list)
    daily_pnl: list[DayPnl] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def has_losing_day(self) -> bool:
        return isinstance(self.worst_day, DayPnl)
