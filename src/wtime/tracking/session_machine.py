"""Check-in / check-out state machine.

The machine holds no state of its own: the current state is derived from
the direction of the ledger's last stamp every time it is needed.  Each
successful transition appends exactly one stamp; a rejected transition
writes nothing.
"""

from __future__ import annotations

import logging

from wtime.core.clock import IClock, WallClock
from wtime.core.enums import Direction, SessionState
from wtime.core.errors import AlreadyCheckedIn, AlreadyCheckedOut
from wtime.core.models import Stamp
from wtime.infrastructure.ledger import ILedger

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Valid state transitions
# ---------------------------------------------------------------------------

# Direction accepted in each state, and the state it leads to.
_VALID_TRANSITIONS: dict[SessionState, tuple[Direction, SessionState]] = {
    SessionState.AWAITING_CHECK_IN: (Direction.IN, SessionState.AWAITING_CHECK_OUT),
    SessionState.AWAITING_CHECK_OUT: (Direction.OUT, SessionState.AWAITING_CHECK_IN),
}


def state_after(last: Stamp | None) -> SessionState:
    """State implied by the ledger tail *last*."""
    if last is None or last.direction == Direction.OUT:
        return SessionState.AWAITING_CHECK_IN
    return SessionState.AWAITING_CHECK_OUT


class SessionMachine:
    """Guards alternation of check-ins and check-outs.

    Parameters
    ----------
    ledger:
        Where stamps are read from and appended to.
    clock:
        Source of the timestamp given to new stamps (default wall clock).
    """

    def __init__(self, ledger: ILedger, clock: IClock | None = None) -> None:
        self._ledger = ledger
        self._clock = clock or WallClock()

    def state(self) -> SessionState:
        return state_after(self._ledger.last())

    def check_in(self) -> Stamp:
        """Open a session.

        Raises ``AlreadyCheckedIn`` if the last stamp is a check-in.
        """
        return self._transition(Direction.IN)

    def check_out(self) -> Stamp:
        """Close the open session.

        Raises ``AlreadyCheckedOut`` if the last stamp is a check-out or the
        ledger is empty.
        """
        return self._transition(Direction.OUT)

    def _transition(self, direction: Direction) -> Stamp:
        current = self.state()
        allowed, next_state = _VALID_TRANSITIONS[current]
        if direction != allowed:
            logger.warning(
                "Rejected %s stamp while %s", direction.value, current.value,
            )
            if direction == Direction.IN:
                raise AlreadyCheckedIn()
            raise AlreadyCheckedOut()

        stamp = self._ledger.insert(
            Stamp(timestamp=self._clock.now(), direction=direction)
        )
        logger.info(
            "Stamp #%d %s at %s, now %s",
            stamp.id, direction.value, stamp.timestamp.isoformat(), next_state.value,
        )
        return stamp
