"""
gavel.api.tickets — Ticket Activity per Lawyer
==============================================

Ticket channels live under the categories registered with
``/config add-ticket-category``.  For one lawyer, each such channel yields
how many of its latest 100 messages they wrote and when they last wrote
there; channels they never posted in are left out.

Nothing is persisted: the numbers are read from Discord on demand and the
per-(guild, lawyer) result is cached for ``ttl_seconds`` (60 s by default).
A channel the bot cannot read is skipped; failing to list the guild's
channels at all raises ``httpx.HTTPError``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

import httpx
from sqlalchemy import Engine

from gavel.api.discord_rest import CATEGORY_CHANNEL, TEXT_CHANNEL_TYPES, DiscordRest
from gavel.database.engine import run_db
from gavel.engine.cache import TTLCache
from gavel.engine.validation import ensure_utc
from gavel.services import config_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TicketActivity:
    channel_id: int
    channel_name: str
    category_name: str | None
    message_count: int
    last_message_at: datetime


def summarize_ticket(
    channel: dict, category_name: str | None, messages: list[dict], user_id: int,
) -> TicketActivity | None:
    """Fold one channel's message page into a :class:`TicketActivity`.

    ``None`` when *user_id* wrote none of *messages*.
    """
    author = str(user_id)
    stamps = [
        ensure_utc(datetime.fromisoformat(m["timestamp"]))
        for m in messages
        if m.get("author", {}).get("id") == author
    ]
    if not stamps:
        return None
    return TicketActivity(
        channel_id=int(channel["id"]),
        channel_name=channel.get("name", ""),
        category_name=category_name,
        message_count=len(stamps),
        last_message_at=max(stamps),
    )


class TicketTracker:
    """Reads ticket-channel activity for one lawyer, with a short TTL cache."""

    def __init__(
        self,
        bot_token: str,
        engine: Engine,
        *,
        ttl_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._engine = engine
        self.rest = DiscordRest(bot_token, transport=transport)
        self.cache = TTLCache(ttl_seconds, clock=clock)

    async def activity_for(self, guild_id: int, user_id: int) -> list[TicketActivity]:
        """Ticket channels *user_id* posted in, most recently active first."""
        key = (guild_id, user_id)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        category_ids = set(await run_db(
            config_service.list_ticket_categories, self._engine, guild_id,
        ))
        if not category_ids:
            return []

        channels = await self.rest.guild_channels(guild_id)
        categories = {
            int(ch["id"]): ch.get("name")
            for ch in channels
            if ch.get("type") == CATEGORY_CHANNEL and int(ch["id"]) in category_ids
        }

        tickets: list[TicketActivity] = []
        for channel in channels:
            parent = channel.get("parent_id")
            if channel.get("type") not in TEXT_CHANNEL_TYPES or parent is None:
                continue
            if int(parent) not in categories:
                continue
            try:
                messages = await self.rest.recent_messages(int(channel["id"]))
            except httpx.HTTPStatusError as exc:
                logger.warning(
                    "Skipping ticket channel %s in guild %d (HTTP %d)",
                    channel["id"], guild_id, exc.response.status_code,
                    extra={"guild_id": guild_id},
                )
                continue
            ticket = summarize_ticket(channel, categories[int(parent)], messages, user_id)
            if ticket is not None:
                tickets.append(ticket)

        tickets.sort(key=lambda t: t.last_message_at, reverse=True)
        self.cache.set(key, tickets)
        return tickets
