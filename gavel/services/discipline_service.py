"""
gavel.services.discipline_service — Notes & Strikes
====================================================

Notes are append-only and shown newest first, capped to the latest
``NOTES_VIEW_LIMIT``.  Strikes can be removed by id; removal is scoped to the
guild so one server can never delete another server's records.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import Engine, delete, func, select

from gavel.database.engine import get_session
from gavel.database.models import LawyerNote, Strike
from gavel.engine.validation import clean_note_text, clean_strike_reason

logger = logging.getLogger(__name__)

NOTES_VIEW_LIMIT = 10


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------
def add_note(
    engine: Engine,
    guild_id: int,
    user_id: int,
    author_id: int,
    text: str,
    *,
    now: datetime | None = None,
) -> LawyerNote:
    note = LawyerNote(
        guild_id=guild_id,
        user_id=user_id,
        author_id=author_id,
        note=clean_note_text(text),
        created_at=now or datetime.now(UTC),
    )
    with get_session(engine) as session:
        session.add(note)
        session.flush()
    logger.info("Note %d added for user=%d in guild=%d", note.id, user_id, guild_id)
    return note


def get_notes(
    engine: Engine, guild_id: int, user_id: int, limit: int = NOTES_VIEW_LIMIT,
) -> list[LawyerNote]:
    with get_session(engine) as session:
        return list(session.scalars(
            select(LawyerNote)
            .where(LawyerNote.guild_id == guild_id, LawyerNote.user_id == user_id)
            .order_by(LawyerNote.created_at.desc(), LawyerNote.id.desc())
            .limit(limit)
        ).all())


# ---------------------------------------------------------------------------
# Strikes
# ---------------------------------------------------------------------------
def add_strike(
    engine: Engine,
    guild_id: int,
    user_id: int,
    issued_by: int,
    reason: str,
    *,
    now: datetime | None = None,
) -> Strike:
    strike = Strike(
        guild_id=guild_id,
        user_id=user_id,
        issued_by=issued_by,
        reason=clean_strike_reason(reason),
        created_at=now or datetime.now(UTC),
    )
    with get_session(engine) as session:
        session.add(strike)
        session.flush()
    logger.info(
        "Strike %d issued to user=%d in guild=%d by %d",
        strike.id, user_id, guild_id, issued_by,
    )
    return strike


def remove_strike(engine: Engine, guild_id: int, strike_id: int) -> bool:
    """Delete a strike.  ``False`` if no such strike exists in *guild_id*."""
    with get_session(engine) as session:
        result = session.execute(
            delete(Strike).where(Strike.guild_id == guild_id, Strike.id == strike_id)
        )
        removed = result.rowcount > 0
    if removed:
        logger.info("Strike %d removed in guild=%d", strike_id, guild_id)
    return removed


def get_strikes(engine: Engine, guild_id: int, user_id: int) -> list[Strike]:
    with get_session(engine) as session:
        return list(session.scalars(
            select(Strike)
            .where(Strike.guild_id == guild_id, Strike.user_id == user_id)
            .order_by(Strike.created_at.desc(), Strike.id.desc())
        ).all())


def get_strike_count(engine: Engine, guild_id: int, user_id: int) -> int:
    with get_session(engine) as session:
        return session.scalar(
            select(func.count())
            .select_from(Strike)
            .where(Strike.guild_id == guild_id, Strike.user_id == user_id)
        ) or 0


def strike_count_map(engine: Engine, guild_id: int) -> dict[int, int]:
    """Strike totals per member of *guild_id*, members with none omitted."""
    with get_session(engine) as session:
        rows = session.execute(
            select(Strike.user_id, func.count().label("n"))
            .where(Strike.guild_id == guild_id)
            .group_by(Strike.user_id)
        ).all()
    return {row.user_id: row.n for row in rows}
