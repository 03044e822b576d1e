"""
gavel.services.inactivity_service — Roster Inactivity Views
============================================================

Joins the active roster with the activity ledger and runs every entry through
:func:`~gavel.engine.inactivity.evaluate_status`.

- :func:`get_inactive_set` — who the alert should name.
- :func:`review_roster` — status of every active lawyer, for ``/lawyer review``
  and the dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import Engine

from gavel.engine.inactivity import ActivityStatus, days_since, evaluate_status
from gavel.engine.validation import ensure_utc
from gavel.services import activity_service, roster_service

REVIEW_WINDOW_DAYS = 30

_EPOCH = datetime.min.replace(tzinfo=UTC)


@dataclass(frozen=True, slots=True)
class InactiveLawyer:
    user_id: int
    status: ActivityStatus
    last_activity: datetime | None
    days_since: int | None
    added_at: datetime


@dataclass(frozen=True, slots=True)
class LawyerReview:
    user_id: int
    display_name: str | None
    status: ActivityStatus
    last_activity: datetime | None
    days_since: int | None
    activity_30d: int


def get_inactive_set(
    engine: Engine,
    guild_id: int,
    threshold_days: int,
    *,
    now: datetime | None = None,
) -> list[InactiveLawyer]:
    """Active lawyers that are NEVER_ACTIVE or INACTIVE.

    Ordered by last activity ascending, members with no activity first;
    ties fall back to roster order.
    """
    now = now or datetime.now(UTC)
    entries = roster_service.list_active(engine, guild_id)
    latest = activity_service.last_activity_map(engine, guild_id)

    flagged: list[InactiveLawyer] = []
    for entry in entries:
        last = latest.get(entry.user_id)
        status = evaluate_status(last, threshold_days, now)
        if not status.flagged:
            continue
        flagged.append(InactiveLawyer(
            user_id=entry.user_id,
            status=status,
            last_activity=last,
            days_since=days_since(last, now) if last else None,
            added_at=ensure_utc(entry.added_at),
        ))

    flagged.sort(key=lambda x: (
        x.last_activity is not None,
        x.last_activity or _EPOCH,
        x.added_at,
    ))
    return flagged


def review_roster(
    engine: Engine,
    guild_id: int,
    threshold_days: int,
    *,
    now: datetime | None = None,
) -> list[LawyerReview]:
    """Status line for every active lawyer, in roster order."""
    now = now or datetime.now(UTC)
    entries = roster_service.list_active(engine, guild_id)
    latest = activity_service.last_activity_map(engine, guild_id)
    counts = activity_service.count_map(engine, guild_id, REVIEW_WINDOW_DAYS, now=now)

    return [
        LawyerReview(
            user_id=entry.user_id,
            display_name=entry.display_name,
            status=evaluate_status(latest.get(entry.user_id), threshold_days, now),
            last_activity=latest.get(entry.user_id),
            days_since=(days_since(latest[entry.user_id], now)
                        if entry.user_id in latest else None),
            activity_30d=counts.get(entry.user_id, 0),
        )
        for entry in entries
    ]
