"""Import closed trades from broker CSV or XLSX exports.

Broker exports name their columns differently, so each trade field is
looked up through a list of header aliases after trimming and
lower-casing the sheet's headers.
"""

import logging
import math
import uuid
from datetime import date
from pathlib import Path
from typing import IO, Any, Optional, Union

import pandas as pd
from pydantic import BaseModel, Field

from tradejournal.errors import TradeImportError
from tradejournal.models.trade import ClosedTrade

logger = logging.getLogger(__name__)

COLUMN_ALIASES: dict[str, list[str]] = {
    "pnl": ["profit", "profit_usd", "pnl"],
    "entry_price": ["open price", "open_price", "price", "entry price", "entry_price"],
    "stop_loss": ["sl", "s/l", "stop_loss", "stoploss", "stop loss"],
    "take_profit": ["tp", "t/p", "take_profit", "takeprofit", "take profit"],
    "position_size": ["lots", "volume", "size", "positionsize", "position size"],
    "direction": ["type", "direction"],
    "symbol": ["symbol"],
    "open_time": ["open time", "open_time", "time"],
    "ticket": ["ticket id", "ticket_id", "ticket", "order", "id"],
    "reason": ["reason", "comment"],
}

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}


class ImportResult(BaseModel):
    """Outcome of a spreadsheet import."""

    trades: list[ClosedTrade] = Field(default_factory=list, description="Parsed trades")
    skipped: int = Field(default=0, ge=0, description="Rows missing required columns")

    @property
    def imported(self) -> int:
        return len(self.trades)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def _to_float(value: Any) -> float:
    """Parse a cell as a number, NaN when it is empty or not numeric."""
    if _is_missing(value):
        return math.nan
    try:
        number = float(str(value).strip().replace(",", ""))
    except ValueError:
        return math.nan
    return number if math.isfinite(number) else math.nan


def _or_zero(value: float) -> float:
    if math.isnan(value) or value < 0:
        return 0.0
    return value


def _to_date(value: Any) -> date:
    if _is_missing(value):
        return date.today()
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        logger.debug("Unparseable open time %r, using today", value)
        return date.today()
    return parsed.date()


def _header_map(columns) -> dict[str, str]:
    """Map normalised header names to the sheet's original headers."""
    return {str(column).strip().lower(): column for column in columns}


def _lookup(row: pd.Series, headers: dict[str, str], field: str) -> Any:
    for alias in COLUMN_ALIASES[field]:
        column = headers.get(alias)
        if column is not None and not _is_missing(row[column]):
            return row[column]
    return None


def read_sheet(source: Union[str, Path, IO], kind: Optional[str] = None) -> pd.DataFrame:
    """Read the first sheet of a CSV or Excel file as strings.

    Args:
        source: File path or binary buffer.
        kind: File suffix such as ``.csv`` or ``.xlsx``. Inferred from a path.

    Raises:
        TradeImportError: If the file cannot be read.
    """
    if kind is None:
        kind = Path(source).suffix if isinstance(source, (str, Path)) else ".csv"
    kind = kind.lower()
    try:
        if kind in EXCEL_SUFFIXES:
            return pd.read_excel(source, sheet_name=0, dtype=str)
        return pd.read_csv(source, dtype=str, skipinitialspace=True)
    except (OSError, ValueError, pd.errors.ParserError) as exc:
        raise TradeImportError(f"Could not read spreadsheet: {exc}") from exc


def rows_to_trades(frame: pd.DataFrame) -> ImportResult:
    """Turn spreadsheet rows into closed trades.

    Rows without a symbol, direction or numeric entry price are skipped.
    The sign of the P&L decides the result; a missing P&L counts as 0.

    Raises:
        TradeImportError: If the sheet has no rows.
    """
    if frame.empty:
        raise TradeImportError("Spreadsheet is empty or in the wrong format")

    headers = _header_map(frame.columns)
    trades = []
    skipped = 0

    for index, row in frame.iterrows():
        symbol = _lookup(row, headers, "symbol")
        direction = str(_lookup(row, headers, "direction") or "").strip().lower()
        entry_price = _to_float(_lookup(row, headers, "entry_price"))

        if symbol is None or not direction or math.isnan(entry_price) or entry_price < 0:
            logger.warning(
                "Skipping row %s: missing symbol, direction or entry price", index
            )
            skipped += 1
            continue

        pnl = _to_float(_lookup(row, headers, "pnl"))
        if math.isnan(pnl):
            pnl = 0.0

        notes = "Imported trade."
        ticket = _lookup(row, headers, "ticket")
        if ticket is not None:
            notes += f" Order #{ticket}."
        reason = _lookup(row, headers, "reason")
        if reason is not None:
            notes += f" Reason: {reason}."

        trades.append(ClosedTrade(
            id=uuid.uuid4().hex,
            date=_to_date(_lookup(row, headers, "open_time")),
            symbol=str(symbol).strip(),
            direction="Long" if "buy" in direction else "Short",
            entry_price=entry_price,
            stop_loss=_or_zero(_to_float(_lookup(row, headers, "stop_loss"))),
            take_profit=_or_zero(_to_float(_lookup(row, headers, "take_profit"))),
            position_size=_or_zero(_to_float(_lookup(row, headers, "position_size"))),
            pnl=pnl,
            result="Win" if pnl > 0 else "Loss" if pnl < 0 else "Breakeven",
            adherence_to_plan="Yes",
            notes=notes,
            is_imported=True,
        ))

    logger.info("Parsed %d trade(s), skipped %d row(s)", len(trades), skipped)
    return ImportResult(trades=trades, skipped=skipped)


def import_trades(
    source: Union[str, Path, IO], kind: Optional[str] = None
) -> ImportResult:
    """Read a broker export and return the trades it contains.

    Raises:
        TradeImportError: If the file cannot be read or holds no rows.
    """
    return rows_to_trades(read_sheet(source, kind))
