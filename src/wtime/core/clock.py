"""Clock abstraction and calendar boundaries.

WallClock: real wall-clock time
SimClock: deterministic time for tests and replays

Nothing in the work log calls datetime.now() directly; the session machine
and the reporter are handed a clock.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class IClock(Protocol):
    """Clock interface used by all time-dependent code."""

    def now(self) -> datetime:
        """Current time as timezone-aware UTC datetime."""
        ...


class WallClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class SimClock:
    """Simulated clock.

    Time advances only when explicitly set or advanced.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._time = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._time

    def set_time(self, t: datetime) -> None:
        """Move to *t*. Must be monotonically increasing."""
        if t < self._time:
            raise ValueError(
                f"SimClock cannot go backwards: {t} < {self._time}"
            )
        self._time = t

    def advance(self, delta: timedelta) -> datetime:
        """Advance time by *delta* and return the new instant."""
        self.set_time(self._time + delta)
        return self._time


# ---------------------------------------------------------------------------
# Calendar boundaries (UTC)
# ---------------------------------------------------------------------------

def as_utc(t: datetime) -> datetime:
    """Aware UTC view of *t*; a naive value is taken to be UTC already."""
    if t.tzinfo is None:
        return t.replace(tzinfo=timezone.utc)
    return t.astimezone(timezone.utc)


def start_of_day(t: datetime) -> datetime:
    """Midnight UTC of the day containing *t*."""
    return as_utc(t).replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(t: datetime, week_start: int = 0) -> datetime:
    """Midnight UTC of the first day of the week containing *t*.

    Args:
        t: Any instant inside the week.
        week_start: First day of the week, 0 = Monday ... 6 = Sunday.
    """
    if not 0 <= week_start <= 6:
        raise ValueError(f"week_start must be 0-6, got {week_start}")
    day = start_of_day(t)
    return day - timedelta(days=(day.weekday() - week_start) % 7)
