"""Enumerations used across the work log."""

from __future__ import annotations

from enum import Enum

from .errors import MalformedRecord


class Direction(str, Enum):
    """Stamping direction, persisted verbatim in the ``in_out`` column."""

    IN = "In"
    OUT = "Out"

    @classmethod
    def parse(cls, text: str) -> Direction:
        """Parse a stored direction, ignoring case and surrounding blanks."""
        normalized = text.strip().lower() if isinstance(text, str) else ""
        for member in cls:
            if member.value.lower() == normalized:
                return member
        raise MalformedRecord(f"Unknown stamp direction: {text!r}")

    def __str__(self) -> str:
        return self.value


class SessionState(str, Enum):
    AWAITING_CHECK_IN = "awaiting_check_in"
    AWAITING_CHECK_OUT = "awaiting_check_out"
