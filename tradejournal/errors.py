"""Exception types for TradeJournal."""


class TradeJournalError(Exception):
    """Base class for all TradeJournal errors."""


class ConfigError(TradeJournalError):
    """Raised when the configuration file cannot be parsed."""


class TradeImportError(TradeJournalError):
    """Raised when a spreadsheet cannot be turned into trades."""


class RecordNotFoundError(TradeJournalError):
    """Raised when a trade or strategy id does not exist in the store."""

    def __init__(self, record_id: str, kind: str = "trade"):
        super().__init__(f"No {kind} with id '{record_id}'")
        self.record_id = record_id
        self.kind = kind
