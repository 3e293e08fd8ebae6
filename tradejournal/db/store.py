"""SQLite journal store for TradeJournal."""

import json
import logging
import sqlite3
from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Union

from tradejournal.errors import RecordNotFoundError
from tradejournal.models import ClosedTrade, OngoingTrade, Strategy, parse_trade
from tradejournal.models.trade import JournalKind

logger = logging.getLogger(__name__)

Trade = Union[OngoingTrade, ClosedTrade]

TRADE_COLUMNS = [
    "id",
    "kind",
    "date",
    "session",
    "symbol",
    "direction",
    "entry_price",
    "stop_loss",
    "take_profit",
    "position_size",
    "entry_time",
    "exit_time",
    "pnl",
    "result",
    "strategy_id",
    "adherence_to_plan",
    "emotion",
    "notes",
    "is_imported",
]


class JournalStore:
    """SQLite-based store for live and backtest journal trades."""

    REQUIRED_TABLES = [
        "trades",
        "strategies",
    ]

    def __init__(self, db_path: Path):
        """Initialize the journal store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            # seq keeps insertion order stable across edits
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trades (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    kind TEXT NOT NULL DEFAULT 'live',
                    date TEXT NOT NULL,
                    session TEXT,
                    symbol TEXT NOT NULL DEFAULT '',
                    direction TEXT NOT NULL,
                    entry_price REAL NOT NULL,
                    stop_loss REAL NOT NULL,
                    take_profit REAL NOT NULL,
                    position_size REAL NOT NULL,
                    entry_time TEXT,
                    exit_time TEXT,
                    pnl REAL,
                    result TEXT NOT NULL,
                    strategy_id TEXT,
                    adherence_to_plan TEXT NOT NULL DEFAULT 'Yes',
                    emotion TEXT,
                    notes TEXT NOT NULL DEFAULT '',
                    is_imported INTEGER NOT NULL DEFAULT 0
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS strategies (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    description TEXT,
                    rules TEXT NOT NULL DEFAULT '[]',
                    use_count INTEGER NOT NULL DEFAULT 0
                )
            """)

            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_trades_kind_date ON trades (kind, date)"
            )

            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Trades ====================

    @staticmethod
    def _trade_values(trade: Trade, kind: JournalKind) -> tuple:
        return (
            trade.id,
            kind,
            trade.date.isoformat(),
            trade.session,
            trade.symbol,
            trade.direction,
            trade.entry_price,
            trade.stop_loss,
            trade.take_profit,
            trade.position_size,
            trade.entry_time.isoformat() if trade.entry_time else None,
            trade.exit_time.isoformat() if trade.exit_time else None,
            getattr(trade, "pnl", None),
            trade.result,
            trade.strategy_id,
            trade.adherence_to_plan,
            trade.emotion,
            trade.notes,
            1 if trade.is_imported else 0,
        )

    @staticmethod
    def _row_to_trade(row: sqlite3.Row) -> Trade:
        data = {column: row[column] for column in TRADE_COLUMNS if column != "kind"}
        data["is_imported"] = bool(data["is_imported"])
        if data["pnl"] is None:
            data.pop("pnl")
        return parse_trade(data)

    def save_trade(self, trade: Trade, kind: JournalKind = "live") -> None:
        """Insert a trade, or replace the stored trade with the same id.

        Args:
            trade: Trade to save.
            kind: Journal the trade belongs to ('live' or 'backtest').
        """
        self.save_trades([trade], kind)

    def save_trades(self, trades: Iterable[Trade], kind: JournalKind = "live") -> int:
        """Save several trades in one transaction.

        Returns:
            Number of trades written.
        """
        columns = ", ".join(TRADE_COLUMNS)
        placeholders = ", ".join("?" for _ in TRADE_COLUMNS)
        updates = ", ".join(
            f"{column} = excluded.{column}" for column in TRADE_COLUMNS if column != "id"
        )
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            count = 0
            for trade in trades:
                cursor.execute(
                    f"""
                    INSERT INTO trades ({columns})
                    VALUES ({placeholders})
                    ON CONFLICT(id) DO UPDATE SET {updates}
                    """,
                    self._trade_values(trade, kind),
                )
                count += 1
            conn.commit()
            logger.debug("Saved %d trade(s) to %s journal", count, kind)
            return count
        finally:
            conn.close()

    def get_trades(
        self,
        kind: JournalKind = "live",
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> tuple[Trade, ...]:
        """Get a snapshot of journal trades.

        Args:
            kind: Journal to read ('live' or 'backtest').
            from_date: Optional inclusive start date.
            to_date: Optional inclusive end date.

        Returns:
            Trades ordered by date, then by insertion.
        """
        query = f"SELECT {', '.join(TRADE_COLUMNS)} FROM trades WHERE kind = ?"
        params: list = [kind]
        if from_date:
            query += " AND date >= ?"
            params.append(from_date.isoformat())
        if to_date:
            query += " AND date <= ?"
            params.append(to_date.isoformat())
        query += " ORDER BY date, seq"

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return tuple(self._row_to_trade(row) for row in cursor.fetchall())
        finally:
            conn.close()

    def get_trade(self, trade_id: str) -> Trade:
        """Get one trade by id.

        Raises:
            RecordNotFoundError: If no trade has this id.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {', '.join(TRADE_COLUMNS)} FROM trades WHERE id = ?",
                (trade_id,),
            )
            row = cursor.fetchone()
        finally:
            conn.close()
        if row is None:
            raise RecordNotFoundError(trade_id)
        return self._row_to_trade(row)

    def trade_kind(self, trade_id: str) -> JournalKind:
        """Get the journal a stored trade belongs to.

        Raises:
            RecordNotFoundError: If no trade has this id.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT kind FROM trades WHERE id = ?", (trade_id,))
            row = cursor.fetchone()
        finally:
            conn.close()
        if row is None:
            raise RecordNotFoundError(trade_id)
        return row["kind"]

    def delete_trade(self, trade_id: str) -> None:
        """Delete a trade by id.

        Raises:
            RecordNotFoundError: If no trade has this id.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM trades WHERE id = ?", (trade_id,))
            conn.commit()
            deleted = cursor.rowcount
        finally:
            conn.close()
        if deleted == 0:
            raise RecordNotFoundError(trade_id)

    def delete_imported(self, kind: JournalKind = "live") -> int:
        """Delete every imported trade of a journal.

        Returns:
            Number of trades removed.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM trades WHERE kind = ? AND is_imported = 1", (kind,)
            )
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()

    # ==================== Strategies ====================

    def save_strategy(self, strategy: Strategy) -> None:
        """Insert or replace a strategy checklist."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT OR REPLACE INTO strategies (id, title, description, rules, use_count)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    strategy.id,
                    strategy.title,
                    strategy.description,
                    json.dumps(strategy.rules),
                    strategy.use_count,
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def get_strategies(self) -> list[Strategy]:
        """Get all strategies ordered by title."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, title, description, rules, use_count FROM strategies ORDER BY title"
            )
            return [
                Strategy(
                    id=row["id"],
                    title=row["title"],
                    description=row["description"],
                    rules=json.loads(row["rules"]),
                    use_count=row["use_count"],
                )
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()

    def get_strategy(self, strategy_id: str) -> Strategy:
        """Get one strategy by id.

        Raises:
            RecordNotFoundError: If no strategy has this id.
        """
        for strategy in self.get_strategies():
            if strategy.id == strategy_id:
                return strategy
        raise RecordNotFoundError(strategy_id, kind="strategy")

    def increment_strategy_use(self, strategy_id: str) -> None:
        """Count one more use of a strategy.

        Raises:
            RecordNotFoundError: If no strategy has this id.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE strategies SET use_count = use_count + 1 WHERE id = ?",
                (strategy_id,),
            )
            conn.commit()
            updated = cursor.rowcount
        finally:
            conn.close()
        if updated == 0:
            raise RecordNotFoundError(strategy_id, kind="strategy")

