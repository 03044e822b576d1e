"""
gavel.services.config_service — Per-Guild Configuration Store
==============================================================

Reads and writes the per-guild settings an admin controls from ``/config``:

- alert channel and inactivity threshold (``guild_config``)
- monitored channels / categories (``monitored_channels``)
- roster auto-sync roles and dashboard roles (``guild_roles``)
- ticket-tracking categories (``ticket_categories``)

Reads return a frozen :class:`GuildSettings` with every default already
applied, so callers never deal with missing rows or NULL columns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import Engine, delete, select
from sqlalchemy.orm import Session

from gavel.database.engine import get_session
from gavel.database.models import (
    GuildConfigRow,
    GuildRole,
    MonitoredScope,
    RolePurpose,
    ScopeKind,
    TicketCategory,
)
from gavel.engine.validation import validate_inactivity_days

logger = logging.getLogger(__name__)

DEFAULT_INACTIVITY_DAYS = 7


@dataclass(frozen=True, slots=True)
class GuildSettings:
    """Resolved configuration for one guild."""

    guild_id: int
    alert_channel_id: int | None = None
    inactivity_days: int = DEFAULT_INACTIVITY_DAYS
    monitored_scopes: dict[int, ScopeKind] = field(default_factory=dict)
    roster_sync_role_ids: frozenset[int] = frozenset()
    dashboard_role_ids: frozenset[int] = frozenset()


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
def get_guild_settings(engine: Engine, guild_id: int) -> GuildSettings:
    with get_session(engine) as session:
        row = session.get(GuildConfigRow, guild_id)
        roles = load_roles(session, guild_id)
        return GuildSettings(
            guild_id=guild_id,
            alert_channel_id=row.alert_channel_id if row else None,
            inactivity_days=(row.inactivity_days if row and row.inactivity_days
                             else DEFAULT_INACTIVITY_DAYS),
            monitored_scopes=load_monitored_scopes(session, guild_id),
            roster_sync_role_ids=roles[RolePurpose.ROSTER_SYNC],
            dashboard_role_ids=roles[RolePurpose.DASHBOARD],
        )


def load_monitored_scopes(session: Session, guild_id: int) -> dict[int, ScopeKind]:
    rows = session.scalars(
        select(MonitoredScope).where(MonitoredScope.guild_id == guild_id)
    ).all()
    return {r.channel_id: ScopeKind(r.channel_type) for r in rows}


def load_roles(session: Session, guild_id: int) -> dict[RolePurpose, frozenset[int]]:
    rows = session.scalars(
        select(GuildRole).where(GuildRole.guild_id == guild_id)
    ).all()
    by_purpose: dict[RolePurpose, set[int]] = {p: set() for p in RolePurpose}
    for r in rows:
        by_purpose[RolePurpose(r.purpose)].add(r.role_id)
    return {p: frozenset(ids) for p, ids in by_purpose.items()}


def list_roles(engine: Engine, guild_id: int, purpose: RolePurpose) -> list[int]:
    with get_session(engine) as session:
        return sorted(load_roles(session, guild_id)[purpose])


def list_configured_guild_ids(engine: Engine, purpose: RolePurpose) -> list[int]:
    """Guilds that have at least one role mapped for *purpose*."""
    with get_session(engine) as session:
        return sorted(set(session.scalars(
            select(GuildRole.guild_id).where(GuildRole.purpose == purpose.value)
        ).all()))


# ---------------------------------------------------------------------------
# Scalar settings
# ---------------------------------------------------------------------------
def _get_or_create_row(session: Session, guild_id: int) -> GuildConfigRow:
    row = session.get(GuildConfigRow, guild_id)
    if row is None:
        row = GuildConfigRow(guild_id=guild_id, inactivity_days=DEFAULT_INACTIVITY_DAYS)
        session.add(row)
    return row


def set_alert_channel(engine: Engine, guild_id: int, channel_id: int | None) -> None:
    with get_session(engine) as session:
        _get_or_create_row(session, guild_id).alert_channel_id = channel_id
    logger.info("Guild %d alert channel → %s", guild_id, channel_id)


def set_inactivity_days(engine: Engine, guild_id: int, days: int) -> int:
    days = validate_inactivity_days(days)
    with get_session(engine) as session:
        _get_or_create_row(session, guild_id).inactivity_days = days
    logger.info("Guild %d inactivity threshold → %d days", guild_id, days)
    return days


# ---------------------------------------------------------------------------
# Monitored scopes
# ---------------------------------------------------------------------------
def add_monitored_scope(
    engine: Engine, guild_id: int, scope_id: int, kind: ScopeKind,
) -> bool:
    """Register a channel or category.  ``False`` if it was already registered."""
    with get_session(engine) as session:
        if session.get(MonitoredScope, (guild_id, scope_id)) is not None:
            return False
        session.add(MonitoredScope(
            guild_id=guild_id, channel_id=scope_id, channel_type=kind.value,
        ))
    logger.info("Guild %d now monitors %s %d", guild_id, kind.value, scope_id)
    return True


def remove_monitored_scope(engine: Engine, guild_id: int, scope_id: int) -> bool:
    with get_session(engine) as session:
        result = session.execute(
            delete(MonitoredScope).where(
                MonitoredScope.guild_id == guild_id,
                MonitoredScope.channel_id == scope_id,
            )
        )
        return result.rowcount > 0


# ---------------------------------------------------------------------------
# Role mappings
# ---------------------------------------------------------------------------
def add_role(engine: Engine, guild_id: int, role_id: int, purpose: RolePurpose) -> bool:
    with get_session(engine) as session:
        if session.get(GuildRole, (guild_id, role_id, purpose.value)) is not None:
            return False
        session.add(GuildRole(guild_id=guild_id, role_id=role_id, purpose=purpose.value))
    logger.info("Guild %d role %d mapped to %s", guild_id, role_id, purpose.value)
    return True


def remove_role(engine: Engine, guild_id: int, role_id: int, purpose: RolePurpose) -> bool:
    with get_session(engine) as session:
        result = session.execute(
            delete(GuildRole).where(
                GuildRole.guild_id == guild_id,
                GuildRole.role_id == role_id,
                GuildRole.purpose == purpose.value,
            )
        )
        return result.rowcount > 0


# ---------------------------------------------------------------------------
# Ticket categories
# ---------------------------------------------------------------------------
def list_ticket_categories(engine: Engine, guild_id: int) -> list[int]:
    with get_session(engine) as session:
        return sorted(session.scalars(
            select(TicketCategory.category_id).where(TicketCategory.guild_id == guild_id)
        ).all())


def add_ticket_category(engine: Engine, guild_id: int, category_id: int) -> bool:
    """Track tickets under *category_id*.  ``False`` if it was already tracked."""
    with get_session(engine) as session:
        if session.get(TicketCategory, (guild_id, category_id)) is not None:
            return False
        session.add(TicketCategory(guild_id=guild_id, category_id=category_id))
    logger.info("Guild %d now tracks tickets under category %d", guild_id, category_id)
    return True


def remove_ticket_category(engine: Engine, guild_id: int, category_id: int) -> bool:
    with get_session(engine) as session:
        result = session.execute(
            delete(TicketCategory).where(
                TicketCategory.guild_id == guild_id,
                TicketCategory.category_id == category_id,
            )
        )
        return result.rowcount > 0
