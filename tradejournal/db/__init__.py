"""Local persistence for TradeJournal."""

from tradejournal.db.store import JournalStore

__all__ = ["JournalStore"]
