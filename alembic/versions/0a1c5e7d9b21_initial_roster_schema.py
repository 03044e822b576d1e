"""Initial roster schema

Revision ID: 0a1c5e7d9b21
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0a1c5e7d9b21"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=True,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    """Create roster, activity, discipline and guild configuration tables."""
    op.create_table(
        "lawyers",
        sa.Column("guild_id", sa.BigInteger(), primary_key=True),
        sa.Column("user_id", sa.BigInteger(), primary_key=True),
        sa.Column("added_by", sa.String(32), nullable=False),
        _created_at("added_at"),
        sa.Column("display_name", sa.String(100), nullable=True),
        sa.Column("hire_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("archived", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("archived_by", sa.String(32), nullable=True),
    )
    op.create_index("ix_lawyers_guild_archived", "lawyers", ["guild_id", "archived"])

    op.create_table(
        "activity_log",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("guild_id", sa.BigInteger(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("channel_id", sa.BigInteger(), nullable=False),
        sa.Column("channel_name", sa.String(100), nullable=True),
        _created_at("logged_at"),
    )
    op.create_index(
        "ix_activity_log_guild_user_time",
        "activity_log",
        ["guild_id", "user_id", "logged_at"],
    )

    op.create_table(
        "lawyer_notes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("guild_id", sa.BigInteger(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("author_id", sa.BigInteger(), nullable=False),
        sa.Column("note", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index(
        "ix_lawyer_notes_guild_user",
        "lawyer_notes",
        ["guild_id", "user_id", "created_at"],
    )

    op.create_table(
        "lawyer_strikes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("guild_id", sa.BigInteger(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("issued_by", sa.BigInteger(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_lawyer_strikes_guild_user", "lawyer_strikes", ["guild_id", "user_id"])

    op.create_table(
        "guild_config",
        sa.Column("guild_id", sa.BigInteger(), primary_key=True),
        sa.Column("alert_channel_id", sa.BigInteger(), nullable=True),
        sa.Column("inactivity_days", sa.Integer(), nullable=True, server_default="7"),
    )

    op.create_table(
        "monitored_channels",
        sa.Column("guild_id", sa.BigInteger(), primary_key=True),
        sa.Column("channel_id", sa.BigInteger(), primary_key=True),
        sa.Column("channel_type", sa.String(20), nullable=False, server_default="channel"),
    )

    op.create_table(
        "guild_roles",
        sa.Column("guild_id", sa.BigInteger(), primary_key=True),
        sa.Column("role_id", sa.BigInteger(), primary_key=True),
        sa.Column("purpose", sa.String(20), primary_key=True),
    )


def downgrade() -> None:
    """Drop every Gavel table."""
    op.drop_table("guild_roles")
    op.drop_table("monitored_channels")
    op.drop_table("guild_config")
    op.drop_index("ix_lawyer_strikes_guild_user", table_name="lawyer_strikes")
    op.drop_table("lawyer_strikes")
    op.drop_index("ix_lawyer_notes_guild_user", table_name="lawyer_notes")
    op.drop_table("lawyer_notes")
    op.drop_index("ix_activity_log_guild_user_time", table_name="activity_log")
    op.drop_table("activity_log")
    op.drop_index("ix_lawyers_guild_archived", table_name="lawyers")
    op.drop_table("lawyers")
