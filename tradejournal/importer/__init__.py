"""Spreadsheet import of broker trade history."""

from tradejournal.importer.spreadsheet import (
    COLUMN_ALIASES,
    ImportResult,
    import_trades,
    read_sheet,
    rows_to_trades,
)

__all__ = [
    "COLUMN_ALIASES",
    "ImportResult",
    "import_trades",
    "read_sheet",
    "rows_to_trades",
]
