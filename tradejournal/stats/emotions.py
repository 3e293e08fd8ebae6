"""P&L broken down by the emotion recorded on each trade."""

from typing import Iterable

from pydantic import BaseModel, Field

from tradejournal.stats.aggregator import Trade, closed_trades, finite_sum


class EmotionStats(BaseModel):
    """Closed-trade results for one recorded emotion."""

    emotion: str = Field(..., description="Emotion as entered")
    trades: int = Field(..., ge=0, description="Closed trades with this emotion")
    pnl: float = Field(..., description="Net P&L")
    share: float = Field(
        ..., ge=0, le=100, description="Percent of all trades that record an emotion"
    )

    model_config = {"frozen": True}


def emotion_breakdown(records: Iterable[Trade]) -> list[EmotionStats]:
    """Group closed trades by emotion, in first-seen order.

    The share is taken against every trade with an emotion, ongoing ones
    included, so shares need not add up to 100.
    """
    snapshot = tuple(records)
    with_emotion = sum(1 for t in snapshot if t.emotion)

    groups: dict[str, list[float]] = {}
    for trade in closed_trades(snapshot):
        if trade.emotion:
            groups.setdefault(trade.emotion, []).append(trade.pnl)

    return [
        EmotionStats(
            emotion=emotion,
            trades=len(values),
            pnl=finite_sum(values),
            share=len(values) / with_emotion * 100,
        )
        for emotion, values in groups.items()
    ]
