"""Configuration loading for TradeJournal.

Settings live in ``~/.config/tradejournal/config.toml``::

    [journal]
    db_path = "~/journals/trades.db"
    default_kind = "live"

    [display]
    currency_symbol = "$"

``TRADEJOURNAL_DB`` overrides the database path.
"""

import os
from pathlib import Path
from typing import Optional

import toml

from tradejournal.errors import ConfigError
from tradejournal.models.trade import JOURNAL_KINDS

CONFIG_DIR = Path.home() / ".config" / "tradejournal"
CONFIG_PATH = CONFIG_DIR / "config.toml"
DEFAULT_DB_PATH = CONFIG_DIR / "tradejournal.db"
DB_ENV_VAR = "TRADEJOURNAL_DB"


def load_config(path: Optional[Path] = None) -> dict:
    """Load the TOML config, or an empty dict when the file is missing.

    Raises:
        ConfigError: If the file exists but is not valid TOML.
    """
    config_path = path or CONFIG_PATH
    if not config_path.exists():
        return {}
    try:
        return toml.load(config_path)
    except toml.TomlDecodeError as exc:
        raise ConfigError(f"Invalid config file {config_path}: {exc}") from exc


def get_db_path(config: dict) -> Path:
    """Resolve the journal database path from env, config, then default."""
    override = os.environ.get(DB_ENV_VAR)
    if override:
        return Path(override).expanduser()
    configured = config.get("journal", {}).get("db_path")
    if configured:
        return Path(configured).expanduser()
    return DEFAULT_DB_PATH


def get_default_kind(config: dict) -> str:
    kind = config.get("journal", {}).get("default_kind", "live")
    if kind not in JOURNAL_KINDS:
        raise ConfigError(f"journal.default_kind must be 'live' or 'backtest', got {kind!r}")
    return kind


def get_currency_symbol(config: dict) -> str:
    return config.get("display", {}).get("currency_symbol", "$")
