"""Day and week views of closed-trade P&L for the trading calendar."""

import calendar as cal
from datetime import date, timedelta
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from tradejournal.models.statistics import DayPnl
from tradejournal.stats.aggregator import Trade, closed_trades, daily_pnl, finite_sum


class WeekSummary(BaseModel):
    """P&L of one ISO week (Monday start) within a calendar month."""

    label: str = Field(..., description="Display label, e.g. 'Week 1'")
    key: str = Field(..., description="ISO week key, e.g. '2024-W18'")
    start: date = Field(..., description="Monday of the week")
    pnl: float = Field(default=0.0, description="Net P&L of in-month trades")
    trade_days: int = Field(default=0, ge=0, description="Distinct trading days")

    model_config = {"frozen": True}


def week_key(day: date) -> str:
    """ISO year and week of a date, as ``YYYY-Www``."""
    iso_year, iso_week, _ = day.isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def daily_series(records: Iterable[Trade], last: Optional[int] = None) -> list[DayPnl]:
    """Day-bucketed P&L, oldest first, optionally only the last N trading days."""
    days = daily_pnl(records)
    if last is not None:
        if last <= 0:
            return []
        days = days[-last:]
    return days


def profitable_days(records: Iterable[Trade]) -> list[date]:
    return [d.date for d in daily_pnl(records) if d.pnl > 0]


def losing_days(records: Iterable[Trade]) -> list[date]:
    """Days whose net P&L is zero or negative."""
    return [d.date for d in daily_pnl(records) if d.pnl <= 0]


def weekly_summary(records: Iterable[Trade], year: int, month: int) -> list[WeekSummary]:
    """Summarise each week that overlaps a month.

    Only closed trades dated inside the month are counted, so the first
    and last week may cover days from neighbouring months without their
    trades.

    Args:
        records: Journal trades.
        year: Calendar year.
        month: Calendar month, 1-12.

    Returns:
        One summary per overlapping week, in calendar order.
    """
    month_start = date(year, month, 1)
    month_end = date(year, month, cal.monthrange(year, month)[1])

    pnl_by_week: dict[str, float] = {}
    days_by_week: dict[str, set] = {}
    for trade in closed_trades(records):
        if not month_start <= trade.date <= month_end:
            continue
        key = week_key(trade.date)
        pnl_by_week[key] = finite_sum((pnl_by_week.get(key, 0.0), trade.pnl))
        days_by_week.setdefault(key, set()).add(trade.date)

    weeks = []
    current = month_start - timedelta(days=month_start.weekday())
    while current <= month_end:
        key = week_key(current)
        weeks.append(WeekSummary(
            label=f"Week {len(weeks) + 1}",
            key=key,
            start=current,
            pnl=pnl_by_week.get(key, 0.0),
            trade_days=len(days_by_week.get(key, ())),
        ))
        current += timedelta(days=7)
    return weeks
