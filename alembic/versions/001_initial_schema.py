"""Initial schema: Stamp table.

Revision ID: 001_initial
Revises: None
Create Date: 2024-01-01 00:00:00.000000
"""
from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "Stamp",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("datetime", sa.Text(), nullable=True),
        sa.Column("in_out", sa.Text(), nullable=True),
    )
    op.create_index("ix_stamp_datetime", "Stamp", ["datetime"])


def downgrade() -> None:
    op.drop_index("ix_stamp_datetime", table_name="Stamp")
    op.drop_table("Stamp")
