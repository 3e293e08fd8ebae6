"""TradeJournal - trading journal with performance statistics.

Log live and backtest trades, import broker exports, and compute
P&L, win rate, R-multiples and consistency metrics from the journal.
"""

__version__ = "0.1.0"
