"""Custom exception hierarchy for the work log."""

from __future__ import annotations


class WtimeError(Exception):
    """Base exception for all work log errors."""


# --- Configuration ---
class ConfigError(WtimeError):
    """Invalid or unreadable configuration."""


# --- Ledger ---
class LedgerError(WtimeError):
    """Ledger read or write failure."""


class NotFound(LedgerError):
    """No stamp matches the requested identity or time window."""

    def __init__(self, message: str, stamp_id: int | None = None):
        self.stamp_id = stamp_id
        super().__init__(message)


class StoreUnavailable(LedgerError):
    """The backing store could not be opened or queried."""


class MalformedRecord(LedgerError):
    """A persisted stamp does not parse as a valid direction or timestamp."""

    def __init__(self, message: str, record_id: int | None = None):
        self.record_id = record_id
        if record_id is not None:
            message = f"Stamp #{record_id}: {message}"
        super().__init__(message)


# --- Session ---
class SessionError(WtimeError):
    """Check-in / check-out precondition violated."""


class AlreadyCheckedIn(SessionError):
    """A check-in was requested while a session is already open."""

    def __init__(self, message: str = "Already checked in! (Did you mean to check out?)"):
        super().__init__(message)


class AlreadyCheckedOut(SessionError):
    """A check-out was requested while no session is open."""

    def __init__(self, message: str = "Already checked out! (Did you mean to check in?)"):
        super().__init__(message)
