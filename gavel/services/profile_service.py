"""
gavel.services.profile_service — Lawyer Profile View
=====================================================

Everything ``/lawyer profile`` and the dashboard detail page show about one
lawyer, gathered in a single call so both front ends render the same data.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import Engine

from gavel.database.models import ActivityEvent, LawyerNote, RosterEntry, Strike
from gavel.engine.inactivity import ActivityStatus, days_since, evaluate_status
from gavel.services import activity_service, config_service, discipline_service, roster_service

PROFILE_WINDOWS = (7, 14, 30)
RECENT_LIMIT = 15


@dataclass(frozen=True, slots=True)
class LawyerProfile:
    entry: RosterEntry
    status: ActivityStatus
    threshold_days: int
    last_activity: datetime | None
    days_since: int | None
    counts: dict[int, int]
    recent: list[ActivityEvent]
    notes: list[LawyerNote]
    strikes: list[Strike]


def build_profile(
    engine: Engine,
    guild_id: int,
    user_id: int,
    *,
    now: datetime | None = None,
    recent_limit: int = RECENT_LIMIT,
    notes_limit: int = discipline_service.NOTES_VIEW_LIMIT,
) -> LawyerProfile | None:
    """``None`` when *user_id* has never been on this guild's roster.

    Archived entries still get a profile so their history stays readable.
    """
    entry = roster_service.get_entry(engine, guild_id, user_id)
    if entry is None:
        return None

    now = now or datetime.now(UTC)
    threshold = config_service.get_guild_settings(engine, guild_id).inactivity_days
    last = activity_service.last_activity(engine, guild_id, user_id)

    return LawyerProfile(
        entry=entry,
        status=evaluate_status(last, threshold, now),
        threshold_days=threshold,
        last_activity=last,
        days_since=days_since(last, now) if last else None,
        counts={
            window: activity_service.count(engine, guild_id, user_id, window, now=now)
            for window in PROFILE_WINDOWS
        },
        recent=activity_service.recent(engine, guild_id, user_id, recent_limit),
        notes=discipline_service.get_notes(engine, guild_id, user_id, notes_limit),
        strikes=discipline_service.get_strikes(engine, guild_id, user_id),
    )
