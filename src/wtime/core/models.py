"""Core domain model: the timestamped check-in / check-out stamp.

A ``Stamp`` is created in memory with ``id == 0`` and receives its final
identity from the ledger on insert.  All timestamps are timezone-aware UTC.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, field_validator

from .clock import as_utc
from .enums import Direction


class Stamp(BaseModel):
    """One check-in or check-out record."""

    model_config = ConfigDict(frozen=True)

    id: int = 0  # Assigned by the ledger; 0 until persisted
    timestamp: datetime
    direction: Direction

    @field_validator("timestamp")
    @classmethod
    def timestamp_must_be_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    @field_validator("id")
    @classmethod
    def id_must_not_be_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Stamp id must be >= 0, got {v}")
        return v

    @classmethod
    def check_in(cls, at: datetime) -> Stamp:
        return cls(timestamp=at, direction=Direction.IN)

    @classmethod
    def check_out(cls, at: datetime) -> Stamp:
        return cls(timestamp=at, direction=Direction.OUT)

    @property
    def is_persisted(self) -> bool:
        return self.id > 0

    def with_id(self, stamp_id: int) -> Stamp:
        """Return a copy of this stamp bearing identity *stamp_id*."""
        return self.model_copy(update={"id": stamp_id})

    def delta(self, other: Stamp) -> timedelta:
        """Absolute duration between this stamp and *other*."""
        return abs(other.timestamp - self.timestamp)

    def __str__(self) -> str:
        return f"#{self.id} {self.direction.value} {self.timestamp.isoformat()}"
