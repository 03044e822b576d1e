"""
gavel.database.models — SQLAlchemy 2.0 Data Models
===================================================

Tables:
- lawyers             — Roster entries, one per (guild, member); archived, never deleted
- activity_log        — Append-only activity journal (one row per tracked message)
- lawyer_notes        — Append-only staff notes about a roster member
- lawyer_strikes      — Disciplinary strikes, removable by id
- guild_config        — Per-guild alert channel and inactivity threshold
- monitored_channels  — Channels / categories whose messages count as activity
- guild_roles         — Role mappings (roster auto-sync, dashboard access)

Every table carries ``guild_id`` and every query filters on it.
"""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all Gavel ORM models."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ScopeKind(enum.StrEnum):
    """How a monitored scope was registered."""
    CHANNEL = "channel"
    CATEGORY = "category"


class RolePurpose(enum.StrEnum):
    """What a mapped guild role grants."""
    ROSTER_SYNC = "roster_sync"
    DASHBOARD = "dashboard"


# ---------------------------------------------------------------------------
# RosterEntry — one row per lawyer per guild
# ---------------------------------------------------------------------------
class RosterEntry(Base):
    __tablename__ = "lawyers"

    guild_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    # A member snowflake as text, or the "auto-sync" marker
    added_by: Mapped[str] = mapped_column(String(32), nullable=False)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    display_name: Mapped[str | None] = mapped_column(String(100), default=None)
    hire_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    archived_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    archived_by: Mapped[str | None] = mapped_column(String(32), default=None)

    __table_args__ = (
        Index("ix_lawyers_guild_archived", "guild_id", "archived"),
    )

    def __repr__(self) -> str:
        return (
            f"<RosterEntry guild={self.guild_id} user={self.user_id} "
            f"archived={self.archived}>"
        )


# ---------------------------------------------------------------------------
# ActivityEvent — append-only activity journal
# ---------------------------------------------------------------------------
class ActivityEvent(Base):
    __tablename__ = "activity_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    guild_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    channel_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    channel_name: Mapped[str | None] = mapped_column(String(100), default=None)
    logged_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("ix_activity_log_guild_user_time", "guild_id", "user_id", "logged_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<ActivityEvent id={self.id} user={self.user_id} "
            f"channel={self.channel_name!r}>"
        )


# ---------------------------------------------------------------------------
# LawyerNote — append-only notes
# ---------------------------------------------------------------------------
class LawyerNote(Base):
    __tablename__ = "lawyer_notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    guild_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    author_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    note: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("ix_lawyer_notes_guild_user", "guild_id", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<LawyerNote id={self.id} user={self.user_id}>"


# ---------------------------------------------------------------------------
# Strike — disciplinary record
# ---------------------------------------------------------------------------
class Strike(Base):
    __tablename__ = "lawyer_strikes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    guild_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    issued_by: Mapped[int] = mapped_column(BigInteger, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("ix_lawyer_strikes_guild_user", "guild_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Strike id={self.id} user={self.user_id}>"


# ---------------------------------------------------------------------------
# GuildConfigRow — per-guild scalar settings
# ---------------------------------------------------------------------------
class GuildConfigRow(Base):
    __tablename__ = "guild_config"

    guild_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    alert_channel_id: Mapped[int | None] = mapped_column(BigInteger, default=None)
    inactivity_days: Mapped[int | None] = mapped_column(Integer, default=7)

    def __repr__(self) -> str:
        return f"<GuildConfigRow guild={self.guild_id} days={self.inactivity_days}>"


# ---------------------------------------------------------------------------
# MonitoredScope — channels / categories tracked for activity
# ---------------------------------------------------------------------------
class MonitoredScope(Base):
    __tablename__ = "monitored_channels"

    guild_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    channel_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    channel_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ScopeKind.CHANNEL.value
    )

    def __repr__(self) -> str:
        return f"<MonitoredScope guild={self.guild_id} id={self.channel_id} {self.channel_type}>"


# ---------------------------------------------------------------------------
# GuildRole — role → purpose mapping
# ---------------------------------------------------------------------------
class GuildRole(Base):
    __tablename__ = "guild_roles"

    guild_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    role_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    purpose: Mapped[str] = mapped_column(String(20), primary_key=True)

    def __repr__(self) -> str:
        return f"<GuildRole guild={self.guild_id} role={self.role_id} {self.purpose}>"


# ---------------------------------------------------------------------------
# TicketCategory — categories whose channels are ticket threads
# ---------------------------------------------------------------------------
class TicketCategory(Base):
    __tablename__ = "ticket_categories"

    guild_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    category_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)

    def __repr__(self) -> str:
        return f"<TicketCategory guild={self.guild_id} category={self.category_id}>"
