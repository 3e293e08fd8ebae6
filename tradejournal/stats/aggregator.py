"""Trade statistics aggregation.

Pure functions over a snapshot of journal trades. Nothing here mutates
its input, performs I/O or raises on degenerate data: every metric has
a documented default for empty or unusable input.
"""

import math
import statistics
import sys
from typing import Iterable, Mapping, Optional, Sequence, Union

from tradejournal.models.statistics import (
    DayPnl,
    EquityPoint,
    NoLosingDays,
    SessionPnl,
    Statistics,
    StrategyStats,
)
from tradejournal.models.strategy import Strategy
from tradejournal.models.trade import SESSIONS, ClosedTrade, OngoingTrade

Trade = Union[OngoingTrade, ClosedTrade]
StrategyLookup = Union[Mapping[str, str], Sequence[Strategy], None]


def finite_sum(values: Iterable[float]) -> float:
    """Sum floats without overflowing.

    An exact sum too large for a float saturates at the largest finite
    value of the same sign.
    """
    values = list(values)
    try:
        total = math.fsum(values)
    except OverflowError:
        scale = max(abs(v) for v in values)
        total = math.fsum(v / scale for v in values) * scale
    if math.isinf(total):
        return math.copysign(sys.float_info.max, total)
    return total


def dispersion_ratio(values: Sequence[float]) -> float:
    """Population mean over population standard deviation, 0 when flat.

    The ratio does not depend on scale, so values are first divided by
    their largest magnitude to keep the moments finite.
    """
    if not values:
        return 0.0
    scale = max(abs(v) for v in values)
    if scale == 0:
        return 0.0
    scaled = [v / scale for v in values]
    deviation = statistics.pstdev(scaled)
    if deviation == 0:
        return 0.0
    return statistics.fmean(scaled) / deviation


def closed_trades(records: Iterable[Trade]) -> list[ClosedTrade]:
    """Return the trades that have a realized P&L, in input order."""
    return [r for r in records if isinstance(r, ClosedTrade)]


def net_pnl(records: Iterable[Trade]) -> float:
    """Sum of P&L over closed trades."""
    return finite_sum(t.pnl for t in closed_trades(records))


def win_rate(records: Iterable[Trade]) -> float:
    """Percentage of decided trades that were wins.

    Breakeven trades count as decided but never as wins. Returns 0 when
    nothing has been decided yet.
    """
    closed = closed_trades(records)
    decided = len(closed)
    if decided == 0:
        return 0.0
    wins = sum(1 for t in closed if t.result == "Win")
    return wins / decided * 100


def average_risk_reward(records: Iterable[Trade]) -> float:
    """Mean planned R:R over every trade with a positive, defined ratio.

    Ongoing trades are included since the plan exists before the outcome.
    """
    ratios = [
        ratio
        for ratio in (r.risk_reward_ratio for r in records)
        if ratio is not None and ratio > 0
    ]
    if not ratios:
        return 0.0
    return finite_sum(ratios) / len(ratios)


def daily_pnl(records: Iterable[Trade]) -> list[DayPnl]:
    """Closed-trade P&L summed per calendar day, oldest day first."""
    by_day: dict = {}
    for trade in closed_trades(records):
        by_day.setdefault(trade.date, []).append(trade.pnl)
    return [DayPnl(date=day, pnl=finite_sum(values)) for day, values in sorted(by_day.items())]


def best_day(days: Sequence[DayPnl]) -> Optional[DayPnl]:
    """Day with the highest P&L; the earliest day wins a tie."""
    if not days:
        return None
    return max(sorted(days, key=lambda d: d.date), key=lambda d: d.pnl)


def worst_day(days: Sequence[DayPnl]) -> Optional[Union[DayPnl, NoLosingDays]]:
    """Day with the lowest P&L; the earliest day wins a tie.

    Returns ``NoLosingDays`` when no day closed below zero, and None
    when there are no days at all.
    """
    if not days:
        return None
    lowest = min(sorted(days, key=lambda d: d.date), key=lambda d: d.pnl)
    if lowest.pnl >= 0:
        return NoLosingDays()
    return lowest


def consistency_ratio(records: Iterable[Trade]) -> float:
    """Mean P&L divided by its population standard deviation.

    A simplified Sharpe-like ratio: no risk-free rate and no annualisation.
    Trades with a P&L of exactly zero are left out. Returns 0 when the
    deviation is zero, which covers fewer than two distinct values.
    """
    return dispersion_ratio([t.pnl for t in closed_trades(records) if t.pnl != 0])


def best_session(records: Iterable[Trade]) -> Optional[SessionPnl]:
    """Session with the largest positive net P&L.

    Ties go to the first session in London, New York, Tokyo, Sydney order.
    Returns None when no session has a strictly positive total.
    """
    by_session: dict[str, list[float]] = {session: [] for session in SESSIONS}
    for trade in closed_trades(records):
        if trade.session is not None:
            by_session[trade.session].append(trade.pnl)
    totals = {session: finite_sum(values) for session, values in by_session.items()}
    session, pnl = max(totals.items(), key=lambda item: item[1])
    if pnl <= 0:
        return None
    return SessionPnl(session=session, pnl=pnl)


def _strategy_titles(strategies: StrategyLookup) -> dict[str, str]:
    if strategies is None:
        return {}
    if isinstance(strategies, Mapping):
        return dict(strategies)
    return {s.id: s.title for s in strategies}


def strategy_breakdown(
    records: Iterable[Trade], strategies: StrategyLookup = None
) -> list[StrategyStats]:
    """Per-strategy performance of closed trades, best net P&L first.

    Average R:R is taken over every trade in the group, with zero-risk
    trades contributing 0. Equal net P&L keeps first-seen order.

    Args:
        records: Journal trades.
        strategies: Optional id to title mapping, or Strategy models.
    """
    titles = _strategy_titles(strategies)
    groups: dict[str, list[ClosedTrade]] = {}
    for trade in closed_trades(records):
        if trade.strategy_id:
            groups.setdefault(trade.strategy_id, []).append(trade)

    breakdown = []
    for strategy_id, trades in groups.items():
        wins = sum(1 for t in trades if t.result == "Win")
        rr_total = finite_sum(t.risk_reward_ratio or 0.0 for t in trades)
        breakdown.append(StrategyStats(
            strategy_id=strategy_id,
            title=titles.get(strategy_id),
            trades=len(trades),
            wins=wins,
            win_rate=wins / len(trades) * 100,
            avg_risk_reward=rr_total / len(trades),
            net_pnl=finite_sum(t.pnl for t in trades),
        ))

    breakdown.sort(key=lambda s: s.net_pnl, reverse=True)
    return breakdown


def cumulative_pnl(records: Iterable[Trade]) -> list[EquityPoint]:
    """Running P&L with one point per closed trade, ordered by date.

    Trades sharing a date each get their own point, in input order.
    """
    points = []
    running = 0.0
    for trade in sorted(closed_trades(records), key=lambda t: t.date):
        running = finite_sum((running, trade.pnl))
        points.append(EquityPoint(date=trade.date, cumulative_pnl=running))
    return points


def compute_statistics(
    records: Iterable[Trade], strategies: StrategyLookup = None
) -> Statistics:
    """Compute every journal metric from a snapshot of trades.

    Args:
        records: Trades to aggregate. Consumed once into a tuple.
        strategies: Optional titles for the per-strategy breakdown.

    Returns:
        A complete Statistics result, including for an empty journal.
    """
    snapshot = tuple(records)
    closed = closed_trades(snapshot)
    days = daily_pnl(closed)

    return Statistics(
        total_trades=len(snapshot),
        closed_trades=len(closed),
        ongoing_trades=len(snapshot) - len(closed),
        wins=sum(1 for t in closed if t.result == "Win"),
        losses=sum(1 for t in closed if t.result == "Loss"),
        breakevens=sum(1 for t in closed if t.result == "Breakeven"),
        net_pnl=net_pnl(closed),
        win_rate=win_rate(closed),
        avg_risk_reward=average_risk_reward(snapshot),
        best_day=best_day(days),
        worst_day=worst_day(days),
        consistency_ratio=consistency_ratio(closed),
        best_session=best_session(closed),
        strategy_breakdown=strategy_breakdown(closed, strategies),
        cumulative_pnl=cumulative_pnl(closed),
        daily_pnl=days,
    )
