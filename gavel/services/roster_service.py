"""
gavel.services.roster_service — Roster Store
=============================================

Authoritative record of who is on each guild's lawyer roster.

Lifecycle of a :class:`~gavel.database.models.RosterEntry`::

    (absent) --add--> active --archive--> archived --add--> active ...

Entries are never deleted.  ``add_or_reactivate`` and ``archive`` are single
conditional statements, so duplicate triggers racing each other (a manual
``/lawyer add`` while the role sync fires) resolve inside the database.

All functions are synchronous — call them through ``run_db``.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import DateTime, Engine, bindparam, select, text, update

from gavel.database.engine import get_session
from gavel.database.models import RosterEntry
from gavel.engine.validation import clean_display_name, parse_hire_date

logger = logging.getLogger(__name__)

# Insert a fresh entry, or flip an archived one back to active.  The WHERE on
# the DO UPDATE branch makes the statement a no-op for already-active rows.
_UPSERT_SQL = text("""
    INSERT INTO lawyers
        (guild_id, user_id, added_by, added_at, display_name, hire_date, archived)
    VALUES
        (:guild_id, :user_id, :added_by, :now, :display_name, :now, FALSE)
    ON CONFLICT (guild_id, user_id) DO UPDATE SET
        archived = FALSE,
        archived_at = NULL,
        archived_by = NULL,
        added_by = excluded.added_by,
        added_at = excluded.added_at,
        hire_date = COALESCE(lawyers.hire_date, excluded.hire_date),
        display_name = COALESCE(excluded.display_name, lawyers.display_name)
    WHERE lawyers.archived = TRUE
""").bindparams(bindparam("now", type_=DateTime(timezone=True)))


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------
def add_or_reactivate(
    engine: Engine,
    guild_id: int,
    user_id: int,
    added_by: str,
    display_name: str | None = None,
    *,
    now: datetime | None = None,
) -> bool:
    """Put *user_id* on the active roster.

    Returns ``True`` if a row was inserted or re-activated, ``False`` if the
    member was already active (nothing changes in that case).
    """
    now = now or datetime.now(UTC)
    with get_session(engine) as session:
        result = session.execute(
            _UPSERT_SQL,
            {
                "guild_id": guild_id,
                "user_id": user_id,
                "added_by": str(added_by),
                "now": now,
                "display_name": display_name,
            },
        )
        changed = result.rowcount > 0

    if changed:
        logger.info(
            "Roster add: guild=%d user=%d by=%s", guild_id, user_id, added_by,
        )
    return changed


def archive(
    engine: Engine,
    guild_id: int,
    user_id: int,
    archived_by: str,
    *,
    now: datetime | None = None,
) -> bool:
    """Archive an active entry.

    Returns ``False`` when the member was not active (already archived or
    never on the roster).
    """
    now = now or datetime.now(UTC)
    with get_session(engine) as session:
        result = session.execute(
            update(RosterEntry)
            .where(
                RosterEntry.guild_id == guild_id,
                RosterEntry.user_id == user_id,
                RosterEntry.archived.is_(False),
            )
            .values(archived=True, archived_at=now, archived_by=str(archived_by))
        )
        changed = result.rowcount > 0

    if changed:
        logger.info(
            "Roster archive: guild=%d user=%d by=%s", guild_id, user_id, archived_by,
        )
    return changed


def update_hire_date(
    engine: Engine, guild_id: int, user_id: int, hire_date: str | datetime,
) -> bool:
    """Overwrite the hire date of an existing (active or archived) entry."""
    parsed = parse_hire_date(hire_date)
    return _update_field(engine, guild_id, user_id, hire_date=parsed)


def update_display_name(
    engine: Engine, guild_id: int, user_id: int, display_name: str,
) -> bool:
    """Overwrite the roster display name of an existing entry."""
    name = clean_display_name(display_name)
    return _update_field(engine, guild_id, user_id, display_name=name)


def _update_field(engine: Engine, guild_id: int, user_id: int, **values) -> bool:
    with get_session(engine) as session:
        result = session.execute(
            update(RosterEntry)
            .where(RosterEntry.guild_id == guild_id, RosterEntry.user_id == user_id)
            .values(**values)
        )
        return result.rowcount > 0


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
def list_active(engine: Engine, guild_id: int) -> list[RosterEntry]:
    """Active roster, oldest addition first."""
    with get_session(engine) as session:
        return list(session.scalars(
            select(RosterEntry)
            .where(RosterEntry.guild_id == guild_id, RosterEntry.archived.is_(False))
            .order_by(RosterEntry.added_at.asc(), RosterEntry.user_id.asc())
        ).all())


def list_archived(engine: Engine, guild_id: int) -> list[RosterEntry]:
    """Archived entries, most recently archived first."""
    with get_session(engine) as session:
        return list(session.scalars(
            select(RosterEntry)
            .where(RosterEntry.guild_id == guild_id, RosterEntry.archived.is_(True))
            .order_by(RosterEntry.archived_at.desc(), RosterEntry.user_id.asc())
        ).all())


def is_active_member(engine: Engine, guild_id: int, user_id: int) -> bool:
    with get_session(engine) as session:
        return member_is_active(session, guild_id, user_id)


def member_is_active(session, guild_id: int, user_id: int) -> bool:
    found = session.scalar(
        select(RosterEntry.user_id).where(
            RosterEntry.guild_id == guild_id,
            RosterEntry.user_id == user_id,
            RosterEntry.archived.is_(False),
        )
    )
    return found is not None


def get_entry(engine: Engine, guild_id: int, user_id: int) -> RosterEntry | None:
    """Fetch an entry regardless of archive state."""
    with get_session(engine) as session:
        return session.get(RosterEntry, (guild_id, user_id))


def active_member_ids(engine: Engine, guild_id: int) -> set[int]:
    with get_session(engine) as session:
        return set(session.scalars(
            select(RosterEntry.user_id).where(
                RosterEntry.guild_id == guild_id, RosterEntry.archived.is_(False),
            )
        ).all())
