"""Scores that rate a journal from 0 to 100.

The journal score blends three closed-trade measures:

    win rate (P&L > 0)          weight 0.5
    plan adherence rate         weight 0.3
    R-multiple consistency      weight 0.2

Consistency is ``10 / std(R)`` capped at 10 and scaled to 0-100; it is
10 when R-multiples are missing or identical.

The performance score is the plain mean of five 0-100 components (win
rate, R:R against a 2:1 target, discipline, Sharpe-like consistency and
profit factor against a 3:1 target) and needs at least five closed
trades.
"""

import math
import statistics
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from tradejournal.stats.aggregator import Trade, closed_trades, dispersion_ratio, finite_sum

WIN_RATE_WEIGHT = 0.5
ADHERENCE_WEIGHT = 0.3
CONSISTENCY_WEIGHT = 0.2
MAX_CONSISTENCY = 10.0

MIN_SCORED_TRADES = 5
TARGET_RISK_REWARD = 2.0
TARGET_PROFIT_FACTOR = 3.0
# Profit factor reported when there are profits but no losses
NO_LOSS_PROFIT_FACTOR = 100.0


def r_multiple_consistency(r_multiples: list[float]) -> float:
    if not r_multiples:
        return MAX_CONSISTENCY
    scale = max(abs(r) for r in r_multiples)
    if scale == 0:
        return MAX_CONSISTENCY
    deviation = statistics.pstdev([r / scale for r in r_multiples]) * scale
    if deviation == 0:
        return MAX_CONSISTENCY
    return min(MAX_CONSISTENCY, 10.0 / deviation)


def journal_score(records: Iterable[Trade]) -> int:
    """Score the journal from 0 to 100; 0 when nothing is closed."""
    closed = closed_trades(records)
    if not closed:
        return 0

    profitable = sum(1 for t in closed if t.pnl > 0)
    followed_plan = sum(1 for t in closed if t.adherence_to_plan == "Yes")
    r_multiples = [t.r_multiple for t in closed if t.r_multiple is not None]

    raw = (
        profitable / len(closed) * 100 * WIN_RATE_WEIGHT
        + followed_plan / len(closed) * 100 * ADHERENCE_WEIGHT
        + r_multiple_consistency(r_multiples) * 10 * CONSISTENCY_WEIGHT
    )
    # Round half up
    return max(0, min(100, math.floor(raw + 0.5)))


class PerformanceScore(BaseModel):
    """The five performance components and their mean, each 0-100."""

    win_rate: float = Field(..., ge=0, le=100, description="Share of Win results")
    risk_reward: float = Field(..., ge=0, le=100, description="Average R:R against 2:1")
    discipline: float = Field(..., ge=0, le=100, description="Plan adherence, Partial counts half")
    consistency: float = Field(..., ge=0, le=100, description="(Sharpe-like ratio + 1) * 50")
    profit_factor: float = Field(..., ge=0, le=100, description="Profit factor against 3:1")
    overall: float = Field(..., ge=0, le=100, description="Mean of the five components")

    model_config = {"frozen": True}


def profit_factor(records: Iterable[Trade]) -> float:
    """Gross profit over gross loss of closed trades.

    Without losses this is 100 when there is any profit and 0 otherwise.
    """
    closed = closed_trades(records)
    gross_profit = finite_sum(t.pnl for t in closed if t.pnl > 0)
    gross_loss = abs(finite_sum(t.pnl for t in closed if t.pnl < 0))
    if gross_loss > 0:
        return gross_profit / gross_loss
    return NO_LOSS_PROFIT_FACTOR if gross_profit > 0 else 0.0


def performance_score(records: Iterable[Trade]) -> Optional[PerformanceScore]:
    """Rate closed trades on five components.

    Unlike the dashboard R:R, only closed trades count here, and the
    consistency ratio keeps zero P&L trades.

    Returns:
        The component scores, or None with fewer than five closed trades.
    """
    closed = closed_trades(records)
    if len(closed) < MIN_SCORED_TRADES:
        return None
    total = len(closed)

    win_rate = sum(1 for t in closed if t.result == "Win") / total * 100

    ratios = [r for r in (t.risk_reward_ratio for t in closed) if r is not None and r > 0]
    average_rr = finite_sum(ratios) / len(ratios) if ratios else 0.0
    risk_reward = min(100.0, average_rr / TARGET_RISK_REWARD * 100)

    followed = sum(1 for t in closed if t.adherence_to_plan == "Yes")
    partial = sum(1 for t in closed if t.adherence_to_plan == "Partial")
    discipline = (followed + partial * 0.5) / total * 100

    sharpe = dispersion_ratio([t.pnl for t in closed])
    consistency = min(100.0, max(0.0, (sharpe + 1) * 50))

    factor_score = min(100.0, profit_factor(closed) / TARGET_PROFIT_FACTOR * 100)

    components = (win_rate, risk_reward, discipline, consistency, factor_score)
    return PerformanceScore(
        win_rate=win_rate,
        risk_reward=risk_reward,
        discipline=discipline,
        consistency=consistency,
        profit_factor=factor_score,
        overall=sum(components) / len(components),
    )
