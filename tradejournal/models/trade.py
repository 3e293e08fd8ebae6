"""Trade record data models.

A journal trade is either ongoing (no realized P&L yet) or closed
(Win, Loss or Breakeven with a realized P&L, possibly exactly zero).
The two states are separate models joined in a discriminated union on
``result`` so that a closed trade without ``pnl`` cannot be built.
"""

import logging
import math
import uuid
from datetime import date as date_type
from datetime import datetime
from typing import Annotated, Any, Iterable, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

Session = Literal["London", "New York", "Tokyo", "Sydney"]
Direction = Literal["Long", "Short"]
Adherence = Literal["Yes", "No", "Partial"]
ClosedResult = Literal["Win", "Loss", "Breakeven"]
JournalKind = Literal["live", "backtest"]

SESSIONS: tuple[str, ...] = ("London", "New York", "Tokyo", "Sydney")
JOURNAL_KINDS: tuple[str, ...] = ("live", "backtest")


def _new_id() -> str:
    return uuid.uuid4().hex


def _to_date(value: Any) -> Any:
    """Truncate datetimes and ISO timestamps to their calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and ("T" in value or " " in value.strip()):
        text = value.strip().replace("Z", "+00:00")
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return value
    return value


class _TradeBase(BaseModel):
    """Fields shared by ongoing and closed trades."""

    id: str = Field(default_factory=_new_id, description="Journal-unique identifier")
    date: date_type = Field(..., description="Calendar date the trade was opened")
    session: Optional[Session] = Field(default=None, description="Market session")
    symbol: str = Field(
        default="",
        validation_alias=AliasChoices("symbol", "currencyPair", "currency_pair"),
        description="Instrument or currency pair",
    )
    direction: Direction = Field(..., description="Trade direction")
    entry_price: float = Field(..., ge=0, allow_inf_nan=False, description="Entry price")
    stop_loss: float = Field(..., ge=0, allow_inf_nan=False, description="Stop-loss price")
    take_profit: float = Field(..., ge=0, allow_inf_nan=False, description="Take-profit price")
    position_size: float = Field(..., ge=0, allow_inf_nan=False, description="Position size")
    entry_time: Optional[datetime] = Field(default=None, description="Entry time")
    exit_time: Optional[datetime] = Field(default=None, description="Exit time")
    strategy_id: Optional[str] = Field(default=None, description="Strategy used")
    adherence_to_plan: Adherence = Field(default="Yes", description="Followed the plan")
    emotion: Optional[str] = Field(default=None, description="Emotion while trading")
    notes: str = Field(default="", description="Free-form notes")
    is_imported: bool = Field(default=False, description="Created by spreadsheet import")

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    @field_validator("date", mode="before")
    @classmethod
    def _truncate_date(cls, value: Any) -> Any:
        return _to_date(value)

    @field_validator("strategy_id", "session", "emotion", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def risk(self) -> float:
        """Price distance between entry and stop-loss."""
        return abs(self.entry_price - self.stop_loss)

    @property
    def reward(self) -> float:
        """Price distance between take-profit and entry."""
        return abs(self.take_profit - self.entry_price)

    @property
    def risk_reward_ratio(self) -> Optional[float]:
        """Planned reward per unit of risk.

        None when the stop sits on entry or the quotient overflows.
        """
        risk = self.risk
        if risk == 0:
            return None
        ratio = self.reward / risk
        return ratio if math.isfinite(ratio) else None

    @property
    def is_closed(self) -> bool:
        return False


class OngoingTrade(_TradeBase):
    """A trade that is still open and has no realized P&L."""

    result: Literal["Ongoing"] = Field(default="Ongoing", description="Trade outcome")

    @model_validator(mode="before")
    @classmethod
    def _reject_pnl(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("pnl") is not None:
            raise ValueError("an ongoing trade cannot carry a realized pnl")
        return data


class ClosedTrade(_TradeBase):
    """A finished trade with a realized P&L."""

    result: ClosedResult = Field(..., description="Trade outcome")
    pnl: float = Field(..., allow_inf_nan=False, description="Realized P&L")

    @property
    def is_closed(self) -> bool:
        return True

    @property
    def r_multiple(self) -> Optional[float]:
        """P&L expressed in multiples of the money put at risk."""
        denominator = self.risk * self.position_size
        if denominator == 0:
            return None
        value = self.pnl / denominator
        return value if math.isfinite(value) else None


TradeRecord = Annotated[Union[OngoingTrade, ClosedTrade], Field(discriminator="result")]

TRADE_ADAPTER: TypeAdapter = TypeAdapter(TradeRecord)


def parse_trade(data: dict) -> Union[OngoingTrade, ClosedTrade]:
    """Build the matching trade variant from a loosely shaped mapping.

    Accepts both snake_case and camelCase keys. A missing ``result``
    defaults to ``Ongoing``.

    Raises:
        pydantic.ValidationError: If the mapping does not describe a valid trade.
    """
    if "result" not in data or data.get("result") in (None, ""):
        data = {**data, "result": "Ongoing"}
    return TRADE_ADAPTER.validate_python(data)


def parse_trades(
    items: Iterable[dict], skip_invalid: bool = True
) -> list[Union[OngoingTrade, ClosedTrade]]:
    """Parse many trade mappings.

    Args:
        items: Raw trade mappings.
        skip_invalid: Drop malformed items with a warning instead of raising.

    Returns:
        Parsed trades in input order.
    """
    trades = []
    for index, item in enumerate(items):
        try:
            trades.append(parse_trade(item))
        except ValidationError as exc:
            if not skip_invalid:
                raise
            logger.warning(
                "Skipping invalid trade #%d (%s): %d error(s)",
                index, item.get("id", "?"), exc.error_count(),
            )
    return trades
