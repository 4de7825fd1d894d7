"""Day / week worked-time summary."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from wtime.core.clock import IClock, WallClock, start_of_day, start_of_week
from wtime.core.models import Stamp
from wtime.infrastructure.ledger import ILedger

from .aggregator import Aggregator


@dataclass(frozen=True)
class WorkSummary:
    """Totals for the current day and week.

    ``week_total`` is ``None`` when it would repeat ``day_total``, which is
    the case on the first day of the week.
    """

    day_start: datetime
    day_total: timedelta
    week_start: datetime
    week_total: timedelta | None


class SummaryReporter:
    """Composes the aggregator over calendar windows.

    Parameters
    ----------
    ledger:
        Ledger to aggregate over.
    clock:
        Supplies "now" for the day and week boundaries.
    week_start:
        First day of the week, 0 = Monday ... 6 = Sunday.
    """

    def __init__(
        self,
        ledger: ILedger,
        clock: IClock | None = None,
        week_start: int = 0,
    ) -> None:
        self._ledger = ledger
        self._clock = clock or WallClock()
        self._week_start = week_start
        self._aggregator = Aggregator(ledger)

    def today_total(self) -> timedelta:
        return self._aggregator.total(start_of_day(self._clock.now()))

    def week_total(self) -> timedelta:
        return self._aggregator.total(
            start_of_week(self._clock.now(), self._week_start)
        )

    def summary(self) -> WorkSummary:
        now = self._clock.now()
        day_start = start_of_day(now)
        week_start = start_of_week(now, self._week_start)
        day_total = self._aggregator.total(day_start)
        week_total = self._aggregator.total(week_start)
        return WorkSummary(
            day_start=day_start,
            day_total=day_total,
            week_start=week_start,
            week_total=None if week_total == day_total else week_total,
        )

    def last_session(self, checkout: Stamp) -> timedelta | None:
        """Length of the session closed by *checkout*.

        Looks up the stamp at identity ``checkout.id - 1``; ``None`` when
        there is none.
        """
        previous = self._ledger.previous(checkout)
        if previous is None:
            return None
        return previous.delta(checkout)
