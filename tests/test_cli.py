"""Tests for the TradeJournal CLI commands.

**Feature: trade-journal**
"""

import json
from pathlib import Path

import click
import pandas as pd
import pytest
from click.testing import CliRunner

from tradejournal import config
from tradejournal.cli.main import LAZY_SUBCOMMANDS, cli
from tradejournal.db.store import JournalStore
from tradejournal.stats import REPORT_COLUMNS


@pytest.fixture
def journal(tmp_path: Path, monkeypatch):
    """Point the CLI at a temporary database and an absent config file."""
    db_path = tmp_path / "journal.db"
    monkeypatch.setenv(config.DB_ENV_VAR, str(db_path))
    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "config.toml")
    return db_path


@pytest.fixture
def runner():
    return CliRunner()


ADD_WIN = [
    "add", "--date", "2024-05-01", "--pair", "EURUSD", "--direction", "Long",
    "--entry", "1.1", "--sl", "1.095", "--tp", "1.11", "--size", "1",
    "--pnl", "100", "--session", "London",
]
ADD_LOSS = [
    "add", "--date", "2024-05-02", "--pair", "GBPUSD", "--direction", "Short",
    "--entry", "1.27", "--sl", "1.275", "--tp", "1.26", "--size", "0.5",
    "--pnl", "-40",
]
ADD_ONGOING = [
    "add", "--date", "2024-05-03", "--pair", "USDJPY", "--direction", "Long",
    "--entry", "155", "--sl", "154", "--tp", "157", "--size", "1",
]


def stats_json(runner: CliRunner, *args: str) -> dict:
    result = runner.invoke(cli, ["stats", "--json", *args])
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


class TestCliGroup:
    """The lazy command group."""

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ("stats", "calendar", "import", "report", "strategy"):
            assert name in result.output

    def test_unknown_command(self, runner):
        result = runner.invoke(cli, ["nope"])
        assert result.exit_code != 0

    def test_every_lazy_command_resolves(self):
        ctx = click.Context(cli)
        for name in LAZY_SUBCOMMANDS:
            command = cli.get_command(ctx, name)
            assert isinstance(command, click.Command), name
            assert command.name == name

    def test_list_commands_includes_lazy_commands(self):
        ctx = click.Context(cli)
        assert set(LAZY_SUBCOMMANDS) <= set(cli.list_commands(ctx))


class TestAddAndStats:
    """Adding trades and reading statistics."""

    def test_empty_journal_stats(self, runner, journal):
        payload = stats_json(runner)

        assert payload["total_trades"] == 0
        assert payload["best_day"] is None
        assert payload["worst_day"] is None

    def test_stats_after_adding_trades(self, runner, journal):
        for args in (ADD_WIN, ADD_LOSS, ADD_ONGOING):
            result = runner.invoke(cli, args)
            assert result.exit_code == 0, result.output

        payload = stats_json(runner)

        assert payload["total_trades"] == 3
        assert payload["closed_trades"] == 2
        assert payload["net_pnl"] == pytest.approx(60)
        assert payload["win_rate"] == pytest.approx(50)
        assert payload["best_day"] == {"date": "2024-05-01", "pnl": 100.0}
        assert payload["worst_day"] == {"date": "2024-05-02", "pnl": -40.0}
        assert payload["best_session"] == {"session": "London", "pnl": 100.0}

    def test_result_inferred_from_pnl(self, runner, journal):
        runner.invoke(cli, ADD_WIN)
        trades = JournalStore(journal).get_trades()
        assert trades[0].result == "Win"

    def test_ongoing_when_no_pnl(self, runner, journal):
        runner.invoke(cli, ADD_ONGOING)
        trades = JournalStore(journal).get_trades()
        assert trades[0].result == "Ongoing"

    def test_closed_result_without_pnl_rejected(self, runner, journal):
        result = runner.invoke(cli, ADD_ONGOING + ["--result", "Win"])
        assert result.exit_code == 1
        assert JournalStore(journal).get_trades() == ()

    def test_backtest_journal_is_separate(self, runner, journal):
        runner.invoke(cli, ADD_WIN + ["--kind", "backtest"])

        assert stats_json(runner)["total_trades"] == 0
        assert stats_json(runner, "--kind", "backtest")["total_trades"] == 1

    def test_date_range(self, runner, journal):
        runner.invoke(cli, ADD_WIN)
        runner.invoke(cli, ADD_LOSS)

        payload = stats_json(runner, "--from", "2024-05-02")
        assert payload["net_pnl"] == pytest.approx(-40)

    def test_dashboard_panel(self, runner, journal):
        runner.invoke(cli, ADD_WIN)
        result = runner.invoke(cli, ["stats", "--curve"])

        assert result.exit_code == 0
        assert "Net P&L" in result.output
        assert "No losing days" in result.output

    def test_other_views_render(self, runner, journal):
        runner.invoke(cli, ADD_WIN)
        runner.invoke(cli, ADD_LOSS)
        for args in (["sessions"], ["strategies"], ["score"], ["trades"],
                     ["calendar", "--month", "2024-05"]):
            result = runner.invoke(cli, args)
            assert result.exit_code == 0, (args, result.output)

    def test_invalid_month(self, runner, journal):
        result = runner.invoke(cli, ["calendar", "--month", "May"])
        assert result.exit_code == 1

    def test_emotions_view(self, runner, journal):
        runner.invoke(cli, ADD_WIN + ["--emotion", "Calm"])
        runner.invoke(cli, ADD_LOSS + ["--emotion", "Fearful"])

        result = runner.invoke(cli, ["emotions"])

        assert result.exit_code == 0, result.output
        assert "Calm" in result.output
        assert "Fearful" in result.output

    def test_performance_needs_five_closed_trades(self, runner, journal):
        runner.invoke(cli, ADD_WIN)

        result = runner.invoke(cli, ["performance"])

        assert result.exit_code == 0
        assert "Not enough data" in result.output

    def test_performance_view(self, runner, journal):
        for _ in range(3):
            runner.invoke(cli, ADD_WIN)
        for _ in range(2):
            runner.invoke(cli, ADD_LOSS)

        result = runner.invoke(cli, ["performance"])

        assert result.exit_code == 0, result.output
        assert "Profit Factor" in result.output
        assert "Not enough data" not in result.output


class TestEdit:
    """Editing trades with add --id."""

    def test_unknown_id_is_rejected(self, runner, journal):
        result = runner.invoke(cli, ADD_WIN + ["--id", "missing-id"])

        assert result.exit_code == 1
        assert "Trade not found" in result.output
        assert JournalStore(journal).get_trades() == ()

    def test_new_trade_needs_prices(self, runner, journal):
        result = runner.invoke(cli, ["add", "--pair", "EURUSD", "--direction", "Long"])

        assert result.exit_code == 1
        assert "--entry" in result.output
        assert JournalStore(journal).get_trades() == ()

    def test_closing_an_ongoing_trade_keeps_other_fields(self, runner, journal):
        runner.invoke(cli, ADD_ONGOING + ["--notes", "waiting for NFP"])
        trade_id = JournalStore(journal).get_trades()[0].id

        result = runner.invoke(cli, ["add", "--id", trade_id, "--pnl", "50"])

        assert result.exit_code == 0, result.output
        (trade,) = JournalStore(journal).get_trades()
        assert trade.id == trade_id
        assert trade.result == "Win"
        assert trade.pnl == 50
        assert trade.symbol == "USDJPY"
        assert trade.entry_price == 155
        assert trade.date.isoformat() == "2024-05-03"
        assert trade.notes == "waiting for NFP"

    def test_reopening_drops_pnl(self, runner, journal):
        runner.invoke(cli, ADD_WIN)
        trade_id = JournalStore(journal).get_trades()[0].id

        result = runner.invoke(cli, ["add", "--id", trade_id, "--result", "Ongoing"])

        assert result.exit_code == 0, result.output
        assert JournalStore(journal).get_trade(trade_id).result == "Ongoing"

    def test_edit_stays_in_backtest_journal(self, runner, journal):
        runner.invoke(cli, ADD_ONGOING + ["--kind", "backtest"])
        trade_id = JournalStore(journal).get_trades("backtest")[0].id

        result = runner.invoke(cli, ["add", "--id", trade_id, "--pnl", "-10"])

        assert result.exit_code == 0, result.output
        assert stats_json(runner)["total_trades"] == 0
        assert stats_json(runner, "--kind", "backtest")["net_pnl"] == pytest.approx(-10)

    def test_edit_does_not_count_strategy_again(self, runner, journal):
        runner.invoke(cli, ["strategy", "add", "Breakout"])
        strategy_id = JournalStore(journal).get_strategies()[0].id
        runner.invoke(cli, ADD_WIN + ["--strategy", strategy_id])
        trade_id = JournalStore(journal).get_trades()[0].id

        runner.invoke(cli, ["add", "--id", trade_id, "--notes", "clean entry"])

        assert JournalStore(journal).get_strategy(strategy_id).use_count == 1
        assert JournalStore(journal).get_trade(trade_id).notes == "clean entry"


class TestDelete:
    """Deleting trades."""

    def test_delete_existing(self, runner, journal):
        runner.invoke(cli, ADD_WIN)
        trade_id = JournalStore(journal).get_trades()[0].id

        result = runner.invoke(cli, ["delete", trade_id])

        assert result.exit_code == 0
        assert JournalStore(journal).get_trades() == ()

    def test_delete_missing(self, runner, journal):
        result = runner.invoke(cli, ["delete", "missing-id"])
        assert result.exit_code == 1


class TestImport:
    """Importing broker exports."""

    def test_import_csv(self, runner, journal, tmp_path: Path):
        path = tmp_path / "history.csv"
        path.write_text(
            "Ticket,Open Time,Type,Lots,Symbol,Open Price,S/L,T/P,Profit\n"
            "1,2024-05-01 10:00:00,buy,1,EURUSD,1.1,1.095,1.11,100\n"
            "2,2024-05-02 10:00:00,sell,1,EURUSD,1.1,1.105,1.09,-30\n"
        )
        result = runner.invoke(cli, ["import", str(path)])

        assert result.exit_code == 0, result.output
        assert "Import Successful" in result.output
        assert stats_json(runner)["net_pnl"] == pytest.approx(70)

    def test_replace_removes_previous_import(self, runner, journal, tmp_path: Path):
        path = tmp_path / "history.csv"
        path.write_text("Symbol,Type,Open Price,Profit\nEURUSD,buy,1.1,10\n")

        runner.invoke(cli, ["import", str(path)])
        runner.invoke(cli, ADD_LOSS)
        result = runner.invoke(cli, ["import", str(path), "--replace"])

        assert result.exit_code == 0, result.output
        assert stats_json(runner)["total_trades"] == 2

    def test_file_without_valid_rows(self, runner, journal, tmp_path: Path):
        path = tmp_path / "history.csv"
        path.write_text("Symbol,Type,Open Price\n,buy,1.1\n")

        result = runner.invoke(cli, ["import", str(path)])

        assert result.exit_code == 1
        assert "Import Failed" in result.output


class TestReport:
    """Report summary and exports."""

    def test_summary_panel(self, runner, journal):
        runner.invoke(cli, ADD_WIN)
        result = runner.invoke(cli, ["report"])

        assert result.exit_code == 0
        assert "Live Trading Journal Report" in result.output

    def test_json_export(self, runner, journal):
        runner.invoke(cli, ADD_WIN)
        runner.invoke(cli, ADD_ONGOING)

        result = runner.invoke(cli, ["report", "--format", "json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["summary"]["total_trades"] == 1
        assert payload["date_range"] == "All time"
        assert [row["P&L"] for row in payload["trades"]] == [100.0, "N/A"]

    def test_csv_export_to_file(self, runner, journal, tmp_path: Path):
        runner.invoke(cli, ADD_WIN)
        runner.invoke(cli, ADD_LOSS)
        output = tmp_path / "report.csv"

        result = runner.invoke(
            cli, ["report", "--format", "csv", "--from", "2024-05-02", "-o", str(output)]
        )

        assert result.exit_code == 0, result.output
        frame = pd.read_csv(output)
        assert list(frame["Symbol"]) == ["GBPUSD"]
        assert "R-Multiple" in frame.columns

    def test_csv_export_of_empty_range_has_header(self, runner, journal):
        runner.invoke(cli, ADD_WIN)

        result = runner.invoke(cli, ["report", "--format", "csv", "--from", "2030-01-01"])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0] == ",".join(REPORT_COLUMNS)


class TestStrategyCommands:
    """Strategy checklist commands."""

    def test_add_and_list(self, runner, journal):
        result = runner.invoke(cli, ["strategy", "add", "Breakout", "--rule", "Range marked"])
        assert result.exit_code == 0, result.output

        items = JournalStore(journal).get_strategies()
        assert [s.title for s in items] == ["Breakout"]
        assert items[0].rules == ["Range marked"]

        listing = runner.invoke(cli, ["strategy", "list"])
        assert "Breakout" in listing.output

    def test_trade_increments_use(self, runner, journal):
        runner.invoke(cli, ["strategy", "add", "Breakout"])
        strategy_id = JournalStore(journal).get_strategies()[0].id

        runner.invoke(cli, ADD_WIN + ["--strategy", strategy_id])

        assert JournalStore(journal).get_strategy(strategy_id).use_count == 1
        payload = stats_json(runner)
        assert payload["strategy_breakdown"][0]["title"] == "Breakout"


class TestConfigErrors:
    """A malformed config file is reported, not raised."""

    def test_bad_config(self, runner, journal, tmp_path: Path):
        (tmp_path / "config.toml").write_text("[journal\n")
        result = runner.invoke(cli, ["stats"])

        assert result.exit_code == 1
        assert "Configuration Error" in result.output
