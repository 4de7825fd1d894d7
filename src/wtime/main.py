"""Application bootstrap.

Wires the store, the ledger, the session machine and the reporter
together.  The engine is owned by :class:`WorkLog` and lives exactly as
long as it does.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .core.clock import IClock, WallClock
from .core.config import Settings, load_settings
from .observability.logger import setup_logging
from .reporting.summary import SummaryReporter
from .storage.sqlite.connection import create_all, create_engine
from .storage.sqlite.repos import SqlLedger
from .tracking.session_machine import SessionMachine

logger = logging.getLogger(__name__)


class WorkLog:
    """One open work log: store handle plus the components built on it.

    Usage::

        with WorkLog(settings) as worklog:
            worklog.sessions.check_in()

    Raises ``StoreUnavailable`` if the store cannot be opened.
    """

    def __init__(self, settings: Settings, clock: IClock | None = None) -> None:
        self.settings = settings
        self.clock = clock or WallClock()

        self._engine = create_engine(
            settings.store.database_url, echo=settings.store.echo,
        )
        if settings.store.create_tables:
            try:
                create_all(self._engine)
            except Exception:
                self._engine.dispose()
                raise

        self.ledger = SqlLedger(self._engine)
        self.sessions = SessionMachine(self.ledger, self.clock)
        self.reporter = SummaryReporter(
            self.ledger, self.clock, week_start=settings.report.week_start,
        )
        logger.info("Opened work log at %s", settings.store.database_url)

    def close(self) -> None:
        """Release the store handle."""
        self._engine.dispose()
        logger.info("Closed work log")

    def __enter__(self) -> WorkLog:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def open_worklog(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
    clock: IClock | None = None,
) -> WorkLog:
    """Load config, set up logging and open the work log."""
    settings = load_settings(config_path=config_path, overrides=overrides)
    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )
    return WorkLog(settings, clock=clock)
