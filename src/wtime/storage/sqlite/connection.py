"""SQLAlchemy engine and session management.

Provides a factory for creating engines (SQLite by default), a context
manager for scoped sessions, and schema lifecycle helpers.

There is no module-level engine: whoever opens the store owns the engine
and passes it on (see :class:`wtime.main.WorkLog`).
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from wtime.core.errors import StoreUnavailable

from .models import Base

logger = logging.getLogger(__name__)


def create_engine(url: str, *, echo: bool = False) -> Engine:
    """Create and return a new SQLAlchemy :class:`Engine`.

    Args:
        url: Database URL, e.g. ``sqlite:///wtime.sqlite``.
        echo: If ``True``, log all emitted SQL statements.

    Raises:
        StoreUnavailable: If the URL cannot be turned into an engine.
    """
    try:
        engine = sa_create_engine(url, echo=echo)
    except (SQLAlchemyError, ValueError) as exc:
        raise StoreUnavailable(f"Cannot open store {url!r}: {exc}") from exc
    logger.info("Created engine for %s", engine.url.render_as_string(hide_password=True))
    return engine


def create_all(engine: Engine) -> None:
    """Create the stamp table if it does not exist yet.

    Raises:
        StoreUnavailable: If the database cannot be reached.
    """
    try:
        Base.metadata.create_all(engine)
    except SQLAlchemyError as exc:
        raise StoreUnavailable(f"Cannot create stamp table: {exc}") from exc
    logger.info("Database tables created / verified.")


def drop_all(engine: Engine) -> None:
    """Drop the stamp table.  Mainly used by tests."""
    try:
        Base.metadata.drop_all(engine)
    except SQLAlchemyError as exc:
        raise StoreUnavailable(f"Cannot drop stamp table: {exc}") from exc
    logger.info("Database tables dropped.")


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """Yield a session scoped to the caller's block.

    Usage::

        with session_scope(factory) as session:
            session.execute(select(StampRecord))

    The session is committed on successful exit and rolled back on
    exception.  It is always closed afterwards.
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
