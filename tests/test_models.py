"""Tests for the trade and strategy models.

**Feature: trade-journal**
"""

import logging
from datetime import date, datetime

import pytest
from pydantic import ValidationError

from tradejournal.models import (
    ClosedTrade,
    OngoingTrade,
    Strategy,
    parse_trade,
    parse_trades,
)


BASE = {
    "date": "2024-05-01",
    "direction": "Long",
    "entry_price": 1.1000,
    "stop_loss": 1.0950,
    "take_profit": 1.1100,
    "position_size": 2.0,
}


class TestTradeVariants:
    """Ongoing and closed trades are distinct variants keyed on result."""

    def test_closed_trade_requires_pnl(self):
        with pytest.raises(ValidationError):
            parse_trade({**BASE, "result": "Win"})

    def test_closed_trade_with_zero_pnl(self):
        trade = parse_trade({**BASE, "result": "Breakeven", "pnl": 0})
        assert isinstance(trade, ClosedTrade)
        assert trade.pnl == 0
        assert trade.is_closed

    def test_ongoing_trade_rejects_pnl(self):
        with pytest.raises(ValidationError):
            parse_trade({**BASE, "result": "Ongoing", "pnl": 25})

    def test_missing_result_defaults_to_ongoing(self):
        trade = parse_trade(BASE)
        assert isinstance(trade, OngoingTrade)
        assert trade.result == "Ongoing"
        assert not trade.is_closed

    def test_unknown_result_rejected(self):
        with pytest.raises(ValidationError):
            parse_trade({**BASE, "result": "Cancelled", "pnl": 1})

    def test_nan_pnl_rejected(self):
        with pytest.raises(ValidationError):
            parse_trade({**BASE, "result": "Loss", "pnl": float("nan")})

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            parse_trade({**BASE, "entry_price": -1})

    def test_trades_are_frozen(self):
        trade = parse_trade({**BASE, "result": "Win", "pnl": 10})
        with pytest.raises(ValidationError):
            trade.pnl = 20

    def test_ids_are_generated_and_unique(self):
        first = parse_trade(BASE)
        second = parse_trade(BASE)
        assert first.id and second.id
        assert first.id != second.id


class TestFieldParsing:
    """Loosely shaped input is normalised."""

    def test_camel_case_keys(self):
        trade = parse_trade({
            "date": "2024-05-01",
            "currencyPair": "EURUSD",
            "direction": "Short",
            "entryPrice": 1.27,
            "stopLoss": 1.275,
            "takeProfit": 1.26,
            "positionSize": 0.5,
            "result": "Loss",
            "pnl": -25,
            "strategyId": "s1",
            "adherenceToPlan": "Partial",
        })
        assert trade.symbol == "EURUSD"
        assert trade.entry_price == 1.27
        assert trade.strategy_id == "s1"
        assert trade.adherence_to_plan == "Partial"

    def test_iso_timestamp_truncated_to_date(self):
        trade = parse_trade({**BASE, "date": "2024-05-01T23:30:00Z"})
        assert trade.date == date(2024, 5, 1)

    def test_datetime_truncated_to_date(self):
        trade = parse_trade({**BASE, "date": datetime(2024, 5, 1, 9, 15)})
        assert trade.date == date(2024, 5, 1)

    def test_blank_optional_fields_become_none(self):
        trade = parse_trade({**BASE, "session": "", "strategy_id": "  ", "emotion": ""})
        assert trade.session is None
        assert trade.strategy_id is None
        assert trade.emotion is None

    def test_unknown_session_rejected(self):
        with pytest.raises(ValidationError):
            parse_trade({**BASE, "session": "Frankfurt"})


class TestDerivedValues:
    """Risk, reward and R-multiple."""

    def test_risk_reward_ratio(self):
        trade = parse_trade(BASE)
        assert trade.risk == pytest.approx(0.005)
        assert trade.reward == pytest.approx(0.01)
        assert trade.risk_reward_ratio == pytest.approx(2.0)

    def test_short_trade_distances_are_absolute(self):
        trade = parse_trade({**BASE, "direction": "Short", "stop_loss": 1.1050, "take_profit": 1.0850})
        assert trade.risk_reward_ratio == pytest.approx(3.0)

    def test_zero_risk_has_no_ratio(self):
        trade = parse_trade({**BASE, "stop_loss": 1.1000})
        assert trade.risk_reward_ratio is None

    def test_r_multiple(self):
        # risk 0.005 * size 2.0 = 0.01 at stake
        trade = parse_trade({**BASE, "result": "Win", "pnl": 0.02})
        assert trade.r_multiple == pytest.approx(2.0)

    def test_r_multiple_without_size(self):
        trade = parse_trade({**BASE, "position_size": 0, "result": "Loss", "pnl": -5})
        assert trade.r_multiple is None


class TestParseTrades:
    """Batch parsing with optional skipping."""

    def test_invalid_items_skipped_with_warning(self, caplog):
        items = [
            {**BASE, "result": "Win", "pnl": 10},
            {**BASE, "id": "broken", "result": "Win"},
            {**BASE},
        ]
        with caplog.at_level(logging.WARNING):
            trades = parse_trades(items)

        assert len(trades) == 2
        assert isinstance(trades[0], ClosedTrade)
        assert isinstance(trades[1], OngoingTrade)
        assert "broken" in caplog.text

    def test_strict_mode_raises(self):
        with pytest.raises(ValidationError):
            parse_trades([{**BASE, "result": "Win"}], skip_invalid=False)


class TestStrategy:
    """Strategy checklist model."""

    def test_defaults(self):
        item = Strategy(title="London Breakout")
        assert item.rules == []
        assert item.use_count == 0
        assert len(item.id) == 32

    def test_title_required(self):
        with pytest.raises(ValidationError):
            Strategy(title="")
