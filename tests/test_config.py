"""Tests for configuration loading.

**Feature: trade-journal**
"""

from pathlib import Path

import pytest

from tradejournal import config
from tradejournal.errors import ConfigError


class TestLoadConfig:
    """TOML config file handling."""

    def test_missing_file_gives_empty_config(self, tmp_path: Path):
        assert config.load_config(tmp_path / "absent.toml") == {}

    def test_reads_sections(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text(
            '[journal]\ndb_path = "/data/journal.db"\ndefault_kind = "backtest"\n'
            '[display]\ncurrency_symbol = "EUR "\n'
        )
        loaded = config.load_config(path)

        assert loaded["journal"]["default_kind"] == "backtest"
        assert config.get_currency_symbol(loaded) == "EUR "

    def test_malformed_file_raises(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[journal\ndb_path = ")
        with pytest.raises(ConfigError):
            config.load_config(path)

    def test_default_path_is_looked_up_at_call_time(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text('[display]\ncurrency_symbol = "GBP"\n')
        monkeypatch.setattr(config, "CONFIG_PATH", path)

        assert config.load_config()["display"]["currency_symbol"] == "GBP"


class TestDbPath:
    """Database location precedence."""

    def test_env_overrides_config(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv(config.DB_ENV_VAR, str(tmp_path / "env.db"))
        resolved = config.get_db_path({"journal": {"db_path": "/elsewhere.db"}})
        assert resolved == tmp_path / "env.db"

    def test_config_path_used(self, monkeypatch):
        monkeypatch.delenv(config.DB_ENV_VAR, raising=False)
        assert config.get_db_path({"journal": {"db_path": "/data/j.db"}}) == Path("/data/j.db")

    def test_default_path(self, monkeypatch):
        monkeypatch.delenv(config.DB_ENV_VAR, raising=False)
        assert config.get_db_path({}) == config.DEFAULT_DB_PATH


class TestDefaults:
    """Fallback values."""

    def test_default_kind(self):
        assert config.get_default_kind({}) == "live"
        assert config.get_default_kind({"journal": {"default_kind": "backtest"}}) == "backtest"

    def test_invalid_kind(self):
        with pytest.raises(ConfigError):
            config.get_default_kind({"journal": {"default_kind": "paper"}})

    def test_default_currency(self):
        assert config.get_currency_symbol({}) == "$"
