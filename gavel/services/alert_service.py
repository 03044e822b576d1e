"""
gavel.services.alert_service — Inactivity Alert Sweep
======================================================

One sweep walks the given guilds in order and, for each:

1. loads its settings (alert destination, threshold),
2. computes the inactive set,
3. hands a payload to the :class:`Notifier` when there is something to say.

A guild with no destination, or nobody inactive, is skipped without
output.  A failure in one guild is logged and the sweep moves on.

The payload is plain data; turning it into a Discord embed is the
notifier's job (see :mod:`gavel.services.embeds`).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from sqlalchemy import Engine

from gavel.database.engine import run_db
from gavel.engine.inactivity import ActivityStatus
from gavel.services import config_service, inactivity_service
from gavel.services.config_service import GuildSettings
from gavel.services.inactivity_service import InactiveLawyer

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AlertEntry:
    user_id: int
    status: ActivityStatus
    days_since: int | None
    status_text: str


@dataclass(frozen=True, slots=True)
class AlertPayload:
    guild_id: int
    destination_id: int
    threshold_days: int
    entries: tuple[AlertEntry, ...]


@dataclass(slots=True)
class SweepReport:
    sent: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)


class Notifier(Protocol):
    async def send_alert(self, payload: AlertPayload) -> None:
        """Deliver *payload* to its destination.  May raise on failure."""
        ...


def describe(lawyer: InactiveLawyer) -> str:
    if lawyer.status is ActivityStatus.NEVER_ACTIVE:
        return "No recorded activity"
    return f"Last active {lawyer.days_since} days ago"


def build_alert_payload(
    guild_id: int,
    settings: GuildSettings,
    inactive: Sequence[InactiveLawyer],
) -> AlertPayload | None:
    """``None`` when there is no destination or nobody to report."""
    if settings.alert_channel_id is None or not inactive:
        return None
    return AlertPayload(
        guild_id=guild_id,
        destination_id=settings.alert_channel_id,
        threshold_days=settings.inactivity_days,
        entries=tuple(
            AlertEntry(
                user_id=lawyer.user_id,
                status=lawyer.status,
                days_since=lawyer.days_since,
                status_text=describe(lawyer),
            )
            for lawyer in inactive
        ),
    )


def _collect(engine: Engine, guild_id: int, now: datetime) -> AlertPayload | None:
    settings = config_service.get_guild_settings(engine, guild_id)
    if settings.alert_channel_id is None:
        return None
    inactive = inactivity_service.get_inactive_set(
        engine, guild_id, settings.inactivity_days, now=now,
    )
    return build_alert_payload(guild_id, settings, inactive)


async def run_inactivity_sweep(
    engine: Engine,
    guild_ids: Iterable[int],
    notifier: Notifier,
    *,
    now: datetime | None = None,
) -> SweepReport:
    """Evaluate and notify each guild in turn."""
    now = now or datetime.now(UTC)
    report = SweepReport()

    for guild_id in guild_ids:
        try:
            payload = await run_db(_collect, engine, guild_id, now)
            if payload is None:
                report.skipped.append(guild_id)
                continue
            await notifier.send_alert(payload)
            report.sent.append(guild_id)
        except Exception:
            logger.exception(
                "Inactivity alert failed for guild %d", guild_id,
                extra={"guild_id": guild_id, "task": "inactivity_alert"},
            )
            report.failed.append(guild_id)

    logger.info(
        "Inactivity sweep: %d sent, %d skipped, %d failed",
        len(report.sent), len(report.skipped), len(report.failed),
    )
    return report
