"""Tests for the day / week summary reporter."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from wtime.core.clock import SimClock
from wtime.core.models import Stamp
from wtime.reporting.summary import SummaryReporter, WorkSummary


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestSummary:
    def test_empty_ledger(self, ledger, sim_clock):
        result = SummaryReporter(ledger, sim_clock).summary()
        assert isinstance(result, WorkSummary)
        assert result.day_total == timedelta(0)
        # Equal to the day total, so suppressed
        assert result.week_total is None

    def test_day_and_week_totals(self, ledger, fill_cycles):
        # Monday: 2 hours; Wednesday: 1 hour
        fill_cycles(ledger, 2, _utc(2024, 6, 3, 8), pause=timedelta(minutes=30))
        fill_cycles(ledger, 1, _utc(2024, 6, 5, 8))
        clock = SimClock(_utc(2024, 6, 5, 17))

        reporter = SummaryReporter(ledger, clock)
        assert reporter.today_total() == timedelta(hours=1)
        assert reporter.week_total() == timedelta(hours=3)

        result = reporter.summary()
        assert result.day_start == _utc(2024, 6, 5)
        assert result.week_start == _utc(2024, 6, 3)
        assert result.day_total == timedelta(hours=1)
        assert result.week_total == timedelta(hours=3)

    def test_week_suppressed_on_first_day(self, ledger, fill_cycles):
        fill_cycles(ledger, 1, _utc(2024, 6, 3, 8))
        clock = SimClock(_utc(2024, 6, 3, 12))
        result = SummaryReporter(ledger, clock).summary()
        assert result.day_total == timedelta(hours=1)
        assert result.week_total is None

    def test_week_start_setting(self, ledger, fill_cycles):
        # Sunday 2 hours, Monday 1 hour; weeks starting Sunday include both
        fill_cycles(ledger, 1, _utc(2024, 6, 2, 8), work=timedelta(hours=2))
        fill_cycles(ledger, 1, _utc(2024, 6, 3, 8))
        clock = SimClock(_utc(2024, 6, 3, 12))

        monday_weeks = SummaryReporter(ledger, clock, week_start=0).summary()
        assert monday_weeks.week_total is None

        sunday_weeks = SummaryReporter(ledger, clock, week_start=6).summary()
        assert sunday_weeks.week_start == _utc(2024, 6, 2)
        assert sunday_weeks.week_total == timedelta(hours=3)


class TestLastSession:
    def test_uses_preceding_identity(self, ledger, fill_cycles):
        (_, check_out), = fill_cycles(ledger, 1, _utc(2024, 6, 3, 8), work=timedelta(minutes=75))
        reporter = SummaryReporter(ledger, SimClock(_utc(2024, 6, 3, 12)))
        assert reporter.last_session(check_out) == timedelta(minutes=75)

    def test_no_preceding_stamp(self, ledger):
        lone = ledger.insert(Stamp.check_out(_utc(2024, 6, 3, 8)))
        reporter = SummaryReporter(ledger, SimClock(_utc(2024, 6, 3, 12)))
        assert reporter.last_session(lone) is None

    def test_difference_is_absolute(self, ledger):
        ledger.insert(Stamp.check_in(_utc(2024, 6, 3, 9)))
        out = ledger.insert(Stamp.check_out(_utc(2024, 6, 3, 8)))
        reporter = SummaryReporter(ledger, SimClock(_utc(2024, 6, 3, 12)))
        assert reporter.last_session(out) == timedelta(hours=1)
