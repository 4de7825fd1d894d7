"""SQLAlchemy ORM model for the stamp table.

The table keeps the historical layout (``Stamp``: ``id``, ``datetime``,
``in_out``) so databases written by earlier releases open unchanged.
Timestamps and directions are stored as text; conversion to the domain
:class:`wtime.core.models.Stamp` happens in :mod:`.repos`.
"""

from __future__ import annotations

from sqlalchemy import Index, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""

    pass


class StampRecord(Base):
    """Persisted check-in / check-out stamp.

    ``id`` is assigned explicitly by the ledger (``max(id) + 1``) rather
    than left to the database's autoincrement.
    """

    __tablename__ = "Stamp"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    stamped_at: Mapped[str | None] = mapped_column("datetime", Text, nullable=True)
    in_out: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_stamp_datetime", "datetime"),
    )

    def __repr__(self) -> str:
        return (
            f"<StampRecord(id={self.id!r}, datetime={self.stamped_at!r}, "
            f"in_out={self.in_out!r})>"
        )
