"""
gavel.services.activity_service — Activity Ledger
==================================================

Append-only log of tracked messages plus the recency/count queries the
roster views and the inactivity evaluator need.

Write path::

    on_message ──► capture_activity ──► (active lawyer? monitored scope?) ──► record

Both checks are evaluated at write time, so changing the monitored set never
rewrites history.  There is no dedup: every qualifying message is a row.

All windows are computed against "now" at query time; nothing here is cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy import Engine, func, select
from sqlalchemy.orm import Session

from gavel.database.engine import get_session
from gavel.database.models import ActivityEvent
from gavel.engine.scopes import is_scope_monitored
from gavel.engine.validation import ensure_utc
from gavel.services.config_service import load_monitored_scopes
from gavel.services.roster_service import member_is_active

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


@dataclass(frozen=True, slots=True)
class ActivityFilter:
    """Optional filters for :func:`query`.  Date bounds are inclusive."""

    start: datetime | None = None
    end: datetime | None = None
    channel_name: str | None = None


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------
def record(
    engine: Engine,
    guild_id: int,
    user_id: int,
    channel_id: int,
    channel_name: str | None,
    *,
    now: datetime | None = None,
) -> ActivityEvent:
    """Append one event, timestamped at call time."""
    with get_session(engine) as session:
        return append_event(session, guild_id, user_id, channel_id, channel_name, now=now)


def append_event(
    session: Session,
    guild_id: int,
    user_id: int,
    channel_id: int,
    channel_name: str | None,
    *,
    now: datetime | None = None,
) -> ActivityEvent:
    """Session-level write shared by :func:`record` and :func:`capture_activity`."""
    event = ActivityEvent(
        guild_id=guild_id,
        user_id=user_id,
        channel_id=channel_id,
        channel_name=channel_name,
        logged_at=now or datetime.now(UTC),
    )
    session.add(event)
    return event


def capture_activity(
    engine: Engine,
    guild_id: int,
    user_id: int,
    channel_id: int,
    parent_id: int | None,
    channel_name: str | None,
    *,
    now: datetime | None = None,
) -> bool:
    """Record a message only if its author is an active lawyer in a monitored scope.

    Archived entries do not accrue activity.  Returns whether a row was written.
    """
    with get_session(engine) as session:
        if not member_is_active(session, guild_id, user_id):
            return False
        monitored = load_monitored_scopes(session, guild_id)
        if not is_scope_monitored(monitored, channel_id, parent_id):
            return False
        append_event(session, guild_id, user_id, channel_id, channel_name, now=now)

    logger.debug(
        "Activity logged: guild=%d user=%d channel=#%s", guild_id, user_id, channel_name,
    )
    return True


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
def count(
    engine: Engine,
    guild_id: int,
    user_id: int,
    window_days: int,
    *,
    now: datetime | None = None,
) -> int:
    """Events in the trailing *window_days* (boundary inclusive)."""
    cutoff = (now or datetime.now(UTC)) - timedelta(days=window_days)
    with get_session(engine) as session:
        return session.scalar(
            select(func.count())
            .select_from(ActivityEvent)
            .where(
                ActivityEvent.guild_id == guild_id,
                ActivityEvent.user_id == user_id,
                ActivityEvent.logged_at >= cutoff,
            )
        ) or 0


def last_activity(engine: Engine, guild_id: int, user_id: int) -> datetime | None:
    with get_session(engine) as session:
        latest = session.scalar(
            select(func.max(ActivityEvent.logged_at)).where(
                ActivityEvent.guild_id == guild_id,
                ActivityEvent.user_id == user_id,
            )
        )
    return ensure_utc(latest) if latest is not None else None


def last_activity_map(engine: Engine, guild_id: int) -> dict[int, datetime]:
    """Most recent event per member of *guild_id*, in one grouped query."""
    with get_session(engine) as session:
        rows = session.execute(
            select(ActivityEvent.user_id, func.max(ActivityEvent.logged_at).label("latest"))
            .where(ActivityEvent.guild_id == guild_id)
            .group_by(ActivityEvent.user_id)
        ).all()
    return {row.user_id: ensure_utc(row.latest) for row in rows}


def count_map(
    engine: Engine, guild_id: int, window_days: int, *, now: datetime | None = None,
) -> dict[int, int]:
    """Per-member event counts for the trailing window, members with zero omitted."""
    cutoff = (now or datetime.now(UTC)) - timedelta(days=window_days)
    with get_session(engine) as session:
        rows = session.execute(
            select(ActivityEvent.user_id, func.count().label("n"))
            .where(ActivityEvent.guild_id == guild_id, ActivityEvent.logged_at >= cutoff)
            .group_by(ActivityEvent.user_id)
        ).all()
    return {row.user_id: row.n for row in rows}


def recent(engine: Engine, guild_id: int, user_id: int, limit: int = 5) -> list[ActivityEvent]:
    """Latest *limit* events, newest first."""
    with get_session(engine) as session:
        return list(session.scalars(
            select(ActivityEvent)
            .where(ActivityEvent.guild_id == guild_id, ActivityEvent.user_id == user_id)
            .order_by(ActivityEvent.logged_at.desc(), ActivityEvent.id.desc())
            .limit(limit)
        ).all())


def query(
    engine: Engine,
    guild_id: int,
    user_id: int,
    filters: ActivityFilter | None = None,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> list[ActivityEvent]:
    """Filtered, paged activity history, newest first.

    *limit* is clamped to ``1..MAX_PAGE_SIZE`` and *offset* to ``>= 0``.
    """
    filters = filters or ActivityFilter()
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    offset = max(0, offset)

    stmt = select(ActivityEvent).where(
        ActivityEvent.guild_id == guild_id, ActivityEvent.user_id == user_id,
    )
    if filters.start is not None:
        stmt = stmt.where(ActivityEvent.logged_at >= ensure_utc(filters.start))
    if filters.end is not None:
        stmt = stmt.where(ActivityEvent.logged_at <= ensure_utc(filters.end))
    if filters.channel_name:
        needle = filters.channel_name.strip().lower()
        stmt = stmt.where(func.lower(ActivityEvent.channel_name).contains(needle, autoescape=True))

    with get_session(engine) as session:
        return list(session.scalars(
            stmt.order_by(ActivityEvent.logged_at.desc(), ActivityEvent.id.desc())
            .limit(limit)
            .offset(offset)
        ).all())
