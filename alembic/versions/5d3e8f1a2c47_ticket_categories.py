"""Ticket tracking categories

Revision ID: 5d3e8f1a2c47
Revises: 0a1c5e7d9b21
Create Date: 2026-10-19 15:30:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5d3e8f1a2c47"
down_revision: str | Sequence[str] | None = "0a1c5e7d9b21"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "ticket_categories",
        sa.Column("guild_id", sa.BigInteger(), primary_key=True),
        sa.Column("category_id", sa.BigInteger(), primary_key=True),
    )


def downgrade() -> None:
    op.drop_table("ticket_categories")
