"""Ordered, append-mostly ledger of check-in / check-out stamps.

Design invariants
-----------------
1.  ``insert()`` assigns identity ``max(id) + 1`` (or ``1`` on an empty
    ledger), so identities are dense and strictly increasing.
2.  ``iterate_from()`` walks identities ``id, id + 1, ...`` lazily and
    stops at the first missing identity.  A gap left by ``delete()``
    therefore ends iteration early; this is expected, not an error.
3.  ``last()`` is a single critical section: finding the maximum identity
    and fetching its stamp never acquire the store twice.
4.  ``update()`` and ``delete()`` exist for administrative correction only.

This module provides:

*  ``ILedger`` -- the protocol.
*  ``iterate_stamps`` -- the shared forward iterator.
*  ``InMemoryLedger`` -- dict-backed implementation for tests and
   throwaway sessions.

The durable implementation is
:class:`wtime.storage.sqlite.repos.SqlLedger`.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from datetime import datetime
from typing import Protocol

from wtime.core.clock import as_utc
from wtime.core.errors import NotFound
from wtime.core.models import Stamp

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------

class ILedger(Protocol):
    """Ordered, randomly addressable, appendable stamp storage."""

    def first(self) -> Stamp | None:
        """Stamp with the smallest identity, ``None`` when empty."""
        ...

    def last(self) -> Stamp | None:
        """Stamp with the largest identity, ``None`` when empty."""
        ...

    def by_id(self, stamp_id: int) -> Stamp:
        """Stamp with identity *stamp_id*.  Raises ``NotFound``."""
        ...

    def first_at_or_after(self, t: datetime) -> Stamp:
        """Smallest-identity stamp with ``timestamp >= t``.  Raises ``NotFound``."""
        ...

    def iterate_from(self, stamp_id: int) -> Iterator[Stamp]:
        """Yield stamps ``stamp_id, stamp_id + 1, ...`` until the first gap."""
        ...

    def previous(self, stamp: Stamp) -> Stamp | None:
        """Stamp at identity ``stamp.id - 1``, ``None`` when absent."""
        ...

    def insert(self, stamp: Stamp) -> Stamp:
        """Persist *stamp* and return it with its assigned identity."""
        ...

    def update(self, stamp: Stamp) -> Stamp:
        """Overwrite the stored stamp with the same identity.  Raises ``NotFound``."""
        ...

    def delete(self, stamp: Stamp) -> None:
        """Remove the stored stamp with the same identity.  Raises ``NotFound``."""
        ...

    def __len__(self) -> int:
        ...


# ---------------------------------------------------------------------------
# Shared iteration
# ---------------------------------------------------------------------------

def iterate_stamps(ledger: ILedger, start_id: int) -> Iterator[Stamp]:
    """Lazily yield consecutive identities from *start_id* until one is missing."""
    next_id = start_id
    while True:
        try:
            stamp = ledger.by_id(next_id)
        except NotFound:
            return
        yield stamp
        next_id += 1


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------

class InMemoryLedger:
    """Dict-backed ledger.  No persistence across restarts.

    Good for: unit tests, property tests, dry runs.
    """

    def __init__(self) -> None:
        self._stamps: dict[int, Stamp] = {}
        self._lock = threading.Lock()

    def first(self) -> Stamp | None:
        with self._lock:
            if not self._stamps:
                return None
            return self._stamps[min(self._stamps)]

    def last(self) -> Stamp | None:
        with self._lock:
            if not self._stamps:
                return None
            return self._stamps[max(self._stamps)]

    def by_id(self, stamp_id: int) -> Stamp:
        with self._lock:
            try:
                return self._stamps[stamp_id]
            except KeyError:
                raise NotFound(f"No stamp with id {stamp_id}", stamp_id=stamp_id) from None

    def first_at_or_after(self, t: datetime) -> Stamp:
        t = as_utc(t)
        with self._lock:
            for stamp_id in sorted(self._stamps):
                stamp = self._stamps[stamp_id]
                if stamp.timestamp >= t:
                    return stamp
        raise NotFound(f"No stamp at or after {t.isoformat()}")

    def iterate_from(self, stamp_id: int) -> Iterator[Stamp]:
        return iterate_stamps(self, stamp_id)

    def previous(self, stamp: Stamp) -> Stamp | None:
        try:
            return self.by_id(stamp.id - 1)
        except NotFound:
            return None

    def insert(self, stamp: Stamp) -> Stamp:
        with self._lock:
            next_id = max(self._stamps, default=0) + 1
            stored = stamp.with_id(next_id)
            self._stamps[next_id] = stored
        logger.debug("Inserted stamp %s", stored)
        return stored

    def update(self, stamp: Stamp) -> Stamp:
        with self._lock:
            if stamp.id not in self._stamps:
                raise NotFound(f"No stamp with id {stamp.id}", stamp_id=stamp.id)
            self._stamps[stamp.id] = stamp
        logger.info("Corrected stamp %s", stamp)
        return stamp

    def delete(self, stamp: Stamp) -> None:
        with self._lock:
            if self._stamps.pop(stamp.id, None) is None:
                raise NotFound(f"No stamp with id {stamp.id}", stamp_id=stamp.id)
        logger.info("Deleted stamp #%d", stamp.id)

    def __len__(self) -> int:
        return len(self._stamps)
