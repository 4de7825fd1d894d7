"""SQL-backed ledger.

:class:`SqlLedger` implements :class:`wtime.infrastructure.ledger.ILedger`
on top of the ``Stamp`` table.  Every public method runs as one critical
section: the ledger lock is taken once, one session is opened, and any
``SQLAlchemyError`` leaves as :class:`StoreUnavailable`.

Conversion helpers translate between the domain :class:`Stamp` and the
text-encoded :class:`StampRecord`.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wtime.core.clock import as_utc
from wtime.core.enums import Direction
from wtime.core.errors import MalformedRecord, NotFound, StoreUnavailable
from wtime.core.models import Stamp
from wtime.infrastructure.ledger import iterate_stamps

from .connection import create_session_factory, session_scope
from .models import StampRecord

logger = logging.getLogger(__name__)

# RFC 3339 with optional fraction of any length and optional offset.
_TIMESTAMP_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<tz>[Zz]|[+-]\d{2}:?\d{2})?$"
)


# ---------------------------------------------------------------------------
# Conversion helpers
# ---------------------------------------------------------------------------

def format_timestamp(t: datetime) -> str:
    """Fixed-width UTC text, so that string order matches time order."""
    return as_utc(t).isoformat(timespec="microseconds")


def parse_timestamp(text: str | None) -> datetime:
    """Parse a stored RFC 3339 timestamp into an aware UTC datetime."""
    match = _TIMESTAMP_RE.match(text.strip()) if text else None
    if match is None:
        raise MalformedRecord(f"Invalid timestamp: {text!r}")

    frac = (match["frac"] or "")[:6].ljust(6, "0")
    tz = match["tz"] or "+00:00"
    if tz in ("Z", "z"):
        tz = "+00:00"
    elif ":" not in tz:
        tz = f"{tz[:3]}:{tz[3:]}"

    try:
        parsed = datetime.fromisoformat(f"{match['base']}.{frac}{tz}")
    except ValueError as exc:
        raise MalformedRecord(f"Invalid timestamp: {text!r}") from exc
    return parsed.astimezone(timezone.utc)


def _stamp_to_record(stamp: Stamp, stamp_id: int) -> StampRecord:
    return StampRecord(
        id=stamp_id,
        stamped_at=format_timestamp(stamp.timestamp),
        in_out=stamp.direction.value,
    )


def _record_to_stamp(record: StampRecord) -> Stamp:
    try:
        return Stamp(
            id=record.id,
            timestamp=parse_timestamp(record.stamped_at),
            direction=Direction.parse(record.in_out or ""),
        )
    except MalformedRecord as exc:
        raise MalformedRecord(str(exc), record_id=record.id) from exc


# ---------------------------------------------------------------------------
# SqlLedger
# ---------------------------------------------------------------------------

class SqlLedger:
    """Durable ledger over a SQLAlchemy engine.

    Args:
        engine: Open engine owned by the caller.  The ledger never disposes it.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._sessions = create_session_factory(engine)
        self._lock = threading.Lock()

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        with self._lock:
            try:
                with session_scope(self._sessions) as session:
                    yield session
            except SQLAlchemyError as exc:
                raise StoreUnavailable(f"Stamp store error: {exc}") from exc

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def first(self) -> Stamp | None:
        with self._transaction() as session:
            record = session.scalars(
                select(StampRecord).order_by(StampRecord.id.asc()).limit(1)
            ).first()
            return _record_to_stamp(record) if record is not None else None

    def last(self) -> Stamp | None:
        # One query, one lock acquisition: max id and its row together.
        with self._transaction() as session:
            record = session.scalars(
                select(StampRecord).order_by(StampRecord.id.desc()).limit(1)
            ).first()
            return _record_to_stamp(record) if record is not None else None

    def by_id(self, stamp_id: int) -> Stamp:
        with self._transaction() as session:
            record = session.get(StampRecord, stamp_id)
            if record is None:
                raise NotFound(f"No stamp with id {stamp_id}", stamp_id=stamp_id)
            return _record_to_stamp(record)

    def first_at_or_after(self, t: datetime) -> Stamp:
        t = as_utc(t)
        # Legacy rows may carry a shorter fraction than the boundary text, so
        # narrow to the boundary second in SQL and compare parsed values here.
        second = format_timestamp(t)[:19]
        with self._transaction() as session:
            candidates = session.scalars(
                select(StampRecord)
                .where(StampRecord.stamped_at >= second)
                .order_by(StampRecord.id.asc())
            )
            for record in candidates:
                stamp = _record_to_stamp(record)
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

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, stamp: Stamp) -> Stamp:
        with self._transaction() as session:
            max_id = session.scalar(select(func.max(StampRecord.id)))
            next_id = (max_id or 0) + 1
            session.add(_stamp_to_record(stamp, next_id))
        stored = stamp.with_id(next_id)
        logger.debug("Inserted stamp %s", stored)
        return stored

    def update(self, stamp: Stamp) -> Stamp:
        with self._transaction() as session:
            record = session.get(StampRecord, stamp.id)
            if record is None:
                raise NotFound(f"No stamp with id {stamp.id}", stamp_id=stamp.id)
            record.stamped_at = format_timestamp(stamp.timestamp)
            record.in_out = stamp.direction.value
        logger.info("Corrected stamp %s", stamp)
        return stamp

    def delete(self, stamp: Stamp) -> None:
        with self._transaction() as session:
            record = session.get(StampRecord, stamp.id)
            if record is None:
                raise NotFound(f"No stamp with id {stamp.id}", stamp_id=stamp.id)
            session.delete(record)
        logger.info("Deleted stamp #%d", stamp.id)

    def __len__(self) -> int:
        with self._transaction() as session:
            return session.scalar(select(func.count()).select_from(StampRecord)) or 0
