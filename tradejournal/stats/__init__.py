"""Performance statistics over journal trades."""

from tradejournal.stats.aggregator import (
    average_risk_reward,
    best_day,
    best_session,
    closed_trades,
    compute_statistics,
    consistency_ratio,
    cumulative_pnl,
    daily_pnl,
    dispersion_ratio,
    finite_sum,
    net_pnl,
    strategy_breakdown,
    win_rate,
    worst_day,
)
from tradejournal.stats.daily import (
    daily_series,
    losing_days,
    profitable_days,
    week_key,
    weekly_summary,
)
from tradejournal.stats.emotions import EmotionStats, emotion_breakdown
from tradejournal.stats.report import REPORT_COLUMNS, filter_by_date, report_summary, trade_rows
from tradejournal.stats.score import (
    PerformanceScore,
    journal_score,
    performance_score,
    profit_factor,
    r_multiple_consistency,
)
from tradejournal.stats.sessions import session_performance

__all__ = [
    "average_risk_reward",
    "best_day",
    "best_session",
    "closed_trades",
    "compute_statistics",
    "consistency_ratio",
    "cumulative_pnl",
    "daily_pnl",
    "dispersion_ratio",
    "finite_sum",
    "net_pnl",
    "strategy_breakdown",
    "win_rate",
    "worst_day",
    "daily_series",
    "losing_days",
    "profitable_days",
    "week_key",
    "weekly_summary",
    "EmotionStats",
    "emotion_breakdown",
    "REPORT_COLUMNS",
    "filter_by_date",
    "report_summary",
    "trade_rows",
    "PerformanceScore",
    "journal_score",
    "performance_score",
    "profit_factor",
    "r_multiple_consistency",
    "session_performance",
]
