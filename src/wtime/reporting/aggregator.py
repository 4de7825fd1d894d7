"""Worked-time aggregation over a window of the ledger.

A closed interval is a check-in immediately followed, by identity, by a
check-out.  Only those pairs count; every other adjacent pairing
(in/in, out/out, out/in) contributes nothing, and a trailing open session
contributes nothing until it is closed.  The sum is not clamped: a
check-out stamped earlier than its check-in subtracts from the total.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from datetime import datetime, timedelta

from wtime.core.enums import Direction
from wtime.core.errors import NotFound
from wtime.core.models import Stamp
from wtime.infrastructure.ledger import ILedger

logger = logging.getLogger(__name__)


def closed_intervals(stamps: Iterable[Stamp]) -> Iterator[tuple[Stamp, Stamp]]:
    """Yield each adjacent ``(check_in, check_out)`` pair of *stamps*."""
    previous: Stamp | None = None
    for stamp in stamps:
        if (
            previous is not None
            and previous.direction == Direction.IN
            and stamp.direction == Direction.OUT
        ):
            yield previous, stamp
        previous = stamp


def sum_closed_intervals(stamps: Iterable[Stamp]) -> timedelta:
    total = timedelta(0)
    for check_in, check_out in closed_intervals(stamps):
        total += check_out.timestamp - check_in.timestamp
    return total


class Aggregator:
    """Sums worked time from a given instant to the end of the ledger."""

    def __init__(self, ledger: ILedger) -> None:
        self._ledger = ledger

    def _window(self, since: datetime) -> Iterator[Stamp]:
        try:
            first = self._ledger.first_at_or_after(since)
        except NotFound:
            return iter(())
        return self._ledger.iterate_from(first.id)

    def intervals(self, since: datetime) -> list[tuple[Stamp, Stamp]]:
        """Closed sessions whose check-in lies in the window."""
        return list(closed_intervals(self._window(since)))

    def total(self, since: datetime) -> timedelta:
        """Total worked duration since *since*; zero for an empty window."""
        total = sum_closed_intervals(self._window(since))
        logger.debug("Worked %s since %s", total, since.isoformat())
        return total
