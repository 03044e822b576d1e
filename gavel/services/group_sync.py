"""
gavel.services.group_sync — Roster ↔ Role Reconciliation
=========================================================

Keeps the roster in step with the guild's *roster-sync roles*: holding any
one of them means "is a lawyer".

Two entry points:

1. :func:`full_resync` — runs at startup and whenever the role mapping
   changes.  Walks the whole membership snapshot:

   * holder of a sync role, not active on the roster  → add (``auto-sync``)
   * active on the roster, holds no sync role         → archive (``auto-sync``)
   * neither                                          → untouched

2. :func:`apply_role_change` — one member's roles changed (gateway
   ``GUILD_MEMBER_UPDATE``).  Only acts when the "holds any sync role" boolean
   actually flips.

A lookup that fails for one member is logged and that member is skipped;
a resync is never aborted by a single failure.  A guild with no sync roles
configured is left alone, so hand-curated rosters are never wiped.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Collection, Iterable
from dataclasses import dataclass, field
from typing import Protocol

from sqlalchemy import Engine

from gavel.database.engine import run_db
from gavel.errors import UpstreamUnavailable
from gavel.services import config_service, roster_service

logger = logging.getLogger(__name__)

# Attribution written to added_by / archived_by for reconciler changes
AUTO_SYNC = "auto-sync"


class MembershipSource(Protocol):
    """Read-only view of a guild's live membership."""

    async def list_member_ids(self) -> Iterable[int]:
        """Every current member of the guild."""
        ...

    async def get_member_roles(self, user_id: int) -> set[int] | None:
        """Role ids held by *user_id*; ``None`` if they are not in the guild.

        Raises :class:`UpstreamUnavailable` if the lookup itself failed.
        """
        ...


class SyncAction(enum.StrEnum):
    NONE = "none"
    ADDED = "added"
    ARCHIVED = "archived"


@dataclass(slots=True)
class SyncResult:
    guild_id: int
    added: list[int] = field(default_factory=list)
    archived: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.archived)


def has_qualifying_role(roles: Collection[int] | None, sync_role_ids: Collection[int]) -> bool:
    """Holding several sync roles is the same as holding one."""
    if not roles:
        return False
    return any(role_id in sync_role_ids for role_id in roles)


async def _sync_roles_for(engine: Engine, guild_id: int) -> frozenset[int]:
    settings = await run_db(config_service.get_guild_settings, engine, guild_id)
    return settings.roster_sync_role_ids


# ---------------------------------------------------------------------------
# Full resync
# ---------------------------------------------------------------------------
async def full_resync(
    engine: Engine,
    guild_id: int,
    source: MembershipSource,
    sync_role_ids: Collection[int] | None = None,
) -> SyncResult:
    """Reconcile the whole roster of *guild_id* against *source*."""
    result = SyncResult(guild_id=guild_id)
    if sync_role_ids is None:
        sync_role_ids = await _sync_roles_for(engine, guild_id)
    if not sync_role_ids:
        logger.debug("Guild %d has no roster-sync roles — resync skipped", guild_id)
        return result

    holders: set[int] = set()
    non_holders: set[int] = set()
    unknown: set[int] = set()

    for user_id in await source.list_member_ids():
        try:
            roles = await source.get_member_roles(user_id)
        except UpstreamUnavailable:
            logger.warning(
                "Role lookup failed for user %d in guild %d — skipping",
                user_id, guild_id, extra={"guild_id": guild_id, "user_id": user_id},
            )
            unknown.add(user_id)
            continue
        if has_qualifying_role(roles, sync_role_ids):
            holders.add(user_id)
        else:
            non_holders.add(user_id)

    active = await run_db(roster_service.active_member_ids, engine, guild_id)

    for user_id in sorted(holders - active):
        if await run_db(roster_service.add_or_reactivate, engine, guild_id, user_id, AUTO_SYNC):
            result.added.append(user_id)

    for user_id in sorted(active - holders):
        if user_id in unknown:
            result.skipped.append(user_id)
            continue
        if user_id not in non_holders:
            # Not in the snapshot (left the guild, or the member list was
            # partial); ask about this one member directly.
            try:
                roles = await source.get_member_roles(user_id)
            except UpstreamUnavailable:
                logger.warning(
                    "Role lookup failed for rostered user %d in guild %d — skipping",
                    user_id, guild_id, extra={"guild_id": guild_id, "user_id": user_id},
                )
                result.skipped.append(user_id)
                continue
            if has_qualifying_role(roles, sync_role_ids):
                continue
        if await run_db(roster_service.archive, engine, guild_id, user_id, AUTO_SYNC):
            result.archived.append(user_id)

    result.skipped.extend(sorted(unknown - active))
    logger.info(
        "Roster resync for guild %d: %d added, %d archived, %d skipped",
        guild_id, len(result.added), len(result.archived), len(result.skipped),
    )
    return result


async def resync_all(
    engine: Engine, sources: dict[int, MembershipSource],
) -> list[SyncResult]:
    """Full resync of every guild in *sources*, one after another."""
    results: list[SyncResult] = []
    for guild_id, source in sources.items():
        try:
            results.append(await full_resync(engine, guild_id, source))
        except Exception:
            logger.exception(
                "Roster resync failed for guild %d", guild_id,
                extra={"guild_id": guild_id, "task": "group_sync"},
            )
    return results


# ---------------------------------------------------------------------------
# Incremental
# ---------------------------------------------------------------------------
async def apply_role_change(
    engine: Engine,
    guild_id: int,
    user_id: int,
    before_roles: Collection[int] | None,
    after_roles: Collection[int] | None,
    sync_role_ids: Collection[int] | None = None,
) -> SyncAction:
    """React to one member's role change.  ``after_roles=None`` means they left."""
    if sync_role_ids is None:
        sync_role_ids = await _sync_roles_for(engine, guild_id)
    if not sync_role_ids:
        return SyncAction.NONE

    had = has_qualifying_role(before_roles, sync_role_ids)
    has = has_qualifying_role(after_roles, sync_role_ids)
    if had == has:
        return SyncAction.NONE

    if has:
        changed = await run_db(
            roster_service.add_or_reactivate, engine, guild_id, user_id, AUTO_SYNC,
        )
        return SyncAction.ADDED if changed else SyncAction.NONE

    changed = await run_db(roster_service.archive, engine, guild_id, user_id, AUTO_SYNC)
    return SyncAction.ARCHIVED if changed else SyncAction.NONE
