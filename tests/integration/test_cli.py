"""End-to-end tests of the ``wtime`` command line.

Each invocation opens the SQLite file given by ``--db``, runs one command
and closes the store, exactly as separate shell invocations would.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from click.testing import CliRunner

from wtime.cli import _format_duration, main
from wtime.core.clock import SimClock
from wtime.core.config import Settings, StoreConfig
from wtime.core.errors import StoreUnavailable
from wtime.main import WorkLog


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def db(tmp_path) -> str:
    return str(tmp_path / "cli.sqlite")


@pytest.fixture
def clock() -> SimClock:
    # Wednesday
    return SimClock(datetime(2024, 6, 5, 8, 0, tzinfo=timezone.utc))


def _run(runner, db, clock, *args):
    return runner.invoke(main, ["--db", db, *args], obj={"clock": clock})


class TestFormatDuration:
    def test_components(self):
        assert _format_duration(timedelta(hours=2, minutes=15, seconds=20)) == (
            "2 hours, 15 minutes and 20 seconds"
        )

    def test_more_than_a_day(self):
        assert _format_duration(timedelta(days=1, minutes=1)) == (
            "24 hours, 1 minutes and 0 seconds"
        )

    def test_negative(self):
        assert _format_duration(timedelta(minutes=-90)) == "-1 hours, 30 minutes and 0 seconds"


class TestCommands:
    def test_default_runs_summary(self, runner, db, clock):
        result = _run(runner, db, clock)
        assert result.exit_code == 0, result.output
        assert "You worked 0 hours, 0 minutes and 0 seconds today" in result.output

    def test_checkin_checkout_cycle(self, runner, db, clock):
        result = _run(runner, db, clock, "checkin")
        assert result.exit_code == 0, result.output
        assert "Checked in at 08:00" in result.output

        clock.advance(timedelta(hours=1, minutes=30, seconds=5))
        result = _run(runner, db, clock, "checkout")
        assert result.exit_code == 0, result.output
        assert "Checked out at 09:30" in result.output
        assert "You worked 1 hours, 30 minutes and 5 seconds" in result.output

    def test_double_checkin_rejected(self, runner, db, clock):
        _run(runner, db, clock, "checkin")
        result = _run(runner, db, clock, "checkin")
        assert result.exit_code == 1
        assert "Already checked in" in result.output

    def test_checkout_without_checkin_rejected(self, runner, db, clock):
        result = _run(runner, db, clock, "checkout")
        assert result.exit_code == 1
        assert "Already checked out" in result.output

    def test_summary_shows_week_after_first_day(self, runner, db):
        monday = SimClock(datetime(2024, 6, 3, 8, 0, tzinfo=timezone.utc))
        _run(runner, db, monday, "checkin")
        monday.advance(timedelta(hours=3))
        _run(runner, db, monday, "checkout")

        wednesday = SimClock(datetime(2024, 6, 5, 8, 0, tzinfo=timezone.utc))
        _run(runner, db, wednesday, "checkin")
        wednesday.advance(timedelta(hours=1))
        _run(runner, db, wednesday, "checkout")

        result = _run(runner, db, wednesday, "summary")
        assert result.exit_code == 0, result.output
        lines = result.output.strip().splitlines()
        assert lines[0] == (
            "You worked 1 hours, 0 minutes and 0 seconds today (since 2024-06-05 00:00 UTC)"
        )
        assert lines[1] == (
            "You worked 4 hours, 0 minutes and 0 seconds this week (since 2024-06-03 00:00 UTC)"
        )

    def test_summary_hides_week_when_equal(self, runner, db, clock):
        _run(runner, db, clock, "checkin")
        clock.advance(timedelta(hours=2))
        _run(runner, db, clock, "checkout")
        result = _run(runner, db, clock, "summary")
        assert result.exit_code == 0, result.output
        assert "today" in result.output
        assert "this week" not in result.output

    def test_config_file(self, runner, tmp_path, clock):
        config = tmp_path / "wtime.toml"
        config.write_text(f'[store]\npath = "{(tmp_path / "from_config.sqlite").as_posix()}"\n')
        result = runner.invoke(main, ["--config", str(config), "checkin"], obj={"clock": clock})
        assert result.exit_code == 0, result.output
        assert (tmp_path / "from_config.sqlite").exists()

    def test_unreachable_store(self, runner, tmp_path, clock):
        bad = str(tmp_path / "missing" / "dir" / "db.sqlite")
        result = _run(runner, bad, clock, "summary")
        assert result.exit_code == 1
        assert "Error" in result.output


class TestWorkLog:
    def test_context_manager(self, settings, clock):
        with WorkLog(settings, clock=clock) as worklog:
            worklog.sessions.check_in()
            assert len(worklog.ledger) == 1

        with WorkLog(settings, clock=clock) as worklog:
            assert worklog.ledger.last().id == 1

    def test_unavailable_store_raises(self, tmp_path):
        settings = Settings(
            store=StoreConfig(path=str(tmp_path / "missing" / "dir" / "db.sqlite"))
        )
        with pytest.raises(StoreUnavailable):
            WorkLog(settings)
