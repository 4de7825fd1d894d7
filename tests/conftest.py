"""Shared fixtures for the wtime test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from wtime.core.clock import SimClock
from wtime.core.config import Settings, StoreConfig
from wtime.core.models import Stamp
from wtime.infrastructure.ledger import InMemoryLedger
from wtime.storage.sqlite.connection import create_all, create_engine
from wtime.storage.sqlite.repos import SqlLedger


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------

@pytest.fixture
def sim_clock() -> SimClock:
    """Clock starting Wednesday 2024-06-05 09:00 UTC."""
    return SimClock(start=datetime(2024, 6, 5, 9, 0, tzinfo=timezone.utc))


# ---------------------------------------------------------------------------
# Ledgers
# ---------------------------------------------------------------------------

@pytest.fixture
def sqlite_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'test.sqlite'}"


@pytest.fixture
def sql_engine(sqlite_url):
    engine = create_engine(sqlite_url)
    create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_ledger(sql_engine) -> SqlLedger:
    return SqlLedger(sql_engine)


@pytest.fixture
def memory_ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture(params=["memory", "sqlite"])
def ledger(request):
    """Every ledger implementation, for contract tests."""
    if request.param == "memory":
        return request.getfixturevalue("memory_ledger")
    return request.getfixturevalue("sql_ledger")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(store=StoreConfig(path=str(tmp_path / "worklog.sqlite")))


# ---------------------------------------------------------------------------
# Stamp helpers
# ---------------------------------------------------------------------------

def _fill_cycles(
    ledger,
    count: int,
    start: datetime,
    work: timedelta = timedelta(hours=1),
    pause: timedelta = timedelta(minutes=30),
) -> list[tuple[Stamp, Stamp]]:
    """Insert *count* check-in/check-out cycles; return the stored pairs."""
    pairs = []
    t = start
    for _ in range(count):
        check_in = ledger.insert(Stamp.check_in(t))
        t += work
        check_out = ledger.insert(Stamp.check_out(t))
        t += pause
        pairs.append((check_in, check_out))
    return pairs


@pytest.fixture
def fill_cycles():
    """Factory inserting closed check-in/check-out cycles into a ledger."""
    return _fill_cycles
