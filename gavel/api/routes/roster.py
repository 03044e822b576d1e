"""
gavel.api.routes.roster — Dashboard roster endpoints
====================================================

Every route is scoped to ``/guilds/{guild_id}`` and requires the caller to
hold a dashboard role there (see :mod:`gavel.api.authz`).
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy import Engine

from gavel.api.deps import get_config, get_engine, get_ticket_tracker, require_guild_access
from gavel.api.tickets import TicketActivity, TicketTracker
from gavel.config import GavelConfig
from gavel.database.models import ActivityEvent, LawyerNote, RosterEntry, Strike
from gavel.engine.inactivity import days_since, evaluate_status
from gavel.engine.validation import ensure_utc, parse_datetime
from gavel.errors import InvalidInput
from gavel.services import (
    activity_service,
    config_service,
    discipline_service,
    profile_service,
    roster_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/guilds/{guild_id}", tags=["roster"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class HireDateUpdate(BaseModel):
    hire_date: str


class DisplayNameUpdate(BaseModel):
    display_name: str


# ---------------------------------------------------------------------------
# Serialisers
# ---------------------------------------------------------------------------
def _iso(value: datetime | None) -> str | None:
    return ensure_utc(value).isoformat() if value is not None else None


def _entry_dict(e: RosterEntry) -> dict:
    return {
        "user_id": str(e.user_id),
        "display_name": e.display_name,
        "added_by": e.added_by,
        "added_at": _iso(e.added_at),
        "hire_date": _iso(e.hire_date),
        "archived": e.archived,
        "archived_at": _iso(e.archived_at),
        "archived_by": e.archived_by,
    }


def _event_dict(ev: ActivityEvent) -> dict:
    return {
        "id": ev.id,
        "channel_id": str(ev.channel_id),
        "channel_name": ev.channel_name,
        "logged_at": _iso(ev.logged_at),
    }


def _note_dict(n: LawyerNote) -> dict:
    return {
        "id": n.id,
        "author_id": str(n.author_id),
        "note": n.note,
        "created_at": _iso(n.created_at),
    }


def _strike_dict(s: Strike) -> dict:
    return {
        "id": s.id,
        "issued_by": str(s.issued_by),
        "reason": s.reason,
        "created_at": _iso(s.created_at),
    }


def _ticket_dict(t: TicketActivity) -> dict:
    return {
        "channel_id": str(t.channel_id),
        "channel_name": t.channel_name,
        "category_name": t.category_name,
        "message_count": t.message_count,
        "last_message_at": _iso(t.last_message_at),
    }


def _bad_request(exc: InvalidInput) -> HTTPException:
    return HTTPException(400, detail={"field": exc.field, "message": exc.message})


# ---------------------------------------------------------------------------
# GET /guilds/{guild_id}/roster
# ---------------------------------------------------------------------------
@router.get("/roster")
def get_roster(
    guild_id: int,
    user: dict = Depends(require_guild_access),
    engine: Engine = Depends(get_engine),
):
    """Active roster with activity recency, counts and strike totals."""
    now = datetime.now(UTC)
    threshold = config_service.get_guild_settings(engine, guild_id).inactivity_days
    entries = roster_service.list_active(engine, guild_id)
    latest = activity_service.last_activity_map(engine, guild_id)
    week = activity_service.count_map(engine, guild_id, 7, now=now)
    month = activity_service.count_map(engine, guild_id, 30, now=now)
    strikes = discipline_service.strike_count_map(engine, guild_id)

    roster = []
    for e in entries:
        last = latest.get(e.user_id)
        roster.append({
            **_entry_dict(e),
            "last_active": _iso(last),
            "days_since": days_since(last, now) if last else None,
            "status": evaluate_status(last, threshold, now).value,
            "activity_7d": week.get(e.user_id, 0),
            "activity_30d": month.get(e.user_id, 0),
            "strike_count": strikes.get(e.user_id, 0),
        })
    return {"roster": roster, "inactivity_days": threshold}


@router.get("/archive")
def get_archive(
    guild_id: int,
    user: dict = Depends(require_guild_access),
    engine: Engine = Depends(get_engine),
):
    """Archived entries, most recently archived first."""
    return {"archived": [_entry_dict(e) for e in roster_service.list_archived(engine, guild_id)]}


# ---------------------------------------------------------------------------
# /guilds/{guild_id}/lawyers/{user_id}
# ---------------------------------------------------------------------------
@router.get("/lawyers/{user_id}")
def get_lawyer(
    guild_id: int,
    user_id: int,
    user: dict = Depends(require_guild_access),
    engine: Engine = Depends(get_engine),
    cfg: GavelConfig = Depends(get_config),
):
    profile = profile_service.build_profile(
        engine, guild_id, user_id, notes_limit=cfg.notes_view_limit,
    )
    if profile is None:
        raise HTTPException(404, "Lawyer not found")
    return {
        **_entry_dict(profile.entry),
        "status": profile.status.value,
        "inactivity_days": profile.threshold_days,
        "last_active": _iso(profile.last_activity),
        "days_since": profile.days_since,
        "activity": {f"{window}d": n for window, n in profile.counts.items()},
        "recent": [_event_dict(ev) for ev in profile.recent],
        "notes": [_note_dict(n) for n in profile.notes],
        "strikes": [_strike_dict(s) for s in profile.strikes],
    }


@router.put("/lawyers/{user_id}/hire-date")
def put_hire_date(
    guild_id: int,
    user_id: int,
    body: HireDateUpdate,
    user: dict = Depends(require_guild_access),
    engine: Engine = Depends(get_engine),
):
    try:
        updated = roster_service.update_hire_date(engine, guild_id, user_id, body.hire_date)
    except InvalidInput as exc:
        raise _bad_request(exc)
    if not updated:
        raise HTTPException(404, "Lawyer not found")
    return {"success": True}


@router.put("/lawyers/{user_id}/display-name")
def put_display_name(
    guild_id: int,
    user_id: int,
    body: DisplayNameUpdate,
    user: dict = Depends(require_guild_access),
    engine: Engine = Depends(get_engine),
):
    try:
        updated = roster_service.update_display_name(engine, guild_id, user_id, body.display_name)
    except InvalidInput as exc:
        raise _bad_request(exc)
    if not updated:
        raise HTTPException(404, "Lawyer not found")
    return {"success": True}


@router.get("/lawyers/{user_id}/strikes")
def get_strikes(
    guild_id: int,
    user_id: int,
    user: dict = Depends(require_guild_access),
    engine: Engine = Depends(get_engine),
):
    return {"strikes": [_strike_dict(s) for s in discipline_service.get_strikes(engine, guild_id, user_id)]}


@router.get("/lawyers/{user_id}/activity")
def get_activity(
    guild_id: int,
    user_id: int,
    start: str | None = None,
    end: str | None = None,
    channel: str | None = None,
    limit: int = Query(activity_service.DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    user: dict = Depends(require_guild_access),
    engine: Engine = Depends(get_engine),
):
    """Paged activity log, newest first.  ``limit`` is capped at 200."""
    try:
        filters = activity_service.ActivityFilter(
            start=parse_datetime(start, "start") if start else None,
            end=parse_datetime(end, "end", end_of_day=True) if end else None,
            channel_name=channel or None,
        )
    except InvalidInput as exc:
        raise _bad_request(exc)

    events = activity_service.query(engine, guild_id, user_id, filters, limit, offset)
    return {
        "activity": [_event_dict(ev) for ev in events],
        "limit": max(1, min(limit, activity_service.MAX_PAGE_SIZE)),
        "offset": max(0, offset),
    }


@router.get("/lawyers/{user_id}/tickets")
async def get_tickets(
    guild_id: int,
    user_id: int,
    user: dict = Depends(require_guild_access),
    tracker: TicketTracker = Depends(get_ticket_tracker),
):
    """Per-channel message counts in ticket categories, cached briefly."""
    try:
        tickets = await tracker.activity_for(guild_id, user_id)
    except httpx.HTTPError:
        logger.warning("Ticket lookup failed for guild %d", guild_id, exc_info=True)
        raise HTTPException(502, "Discord is unavailable")
    return {"tickets": [_ticket_dict(t) for t in tickets]}
