"""
gavel.api.authz — Dashboard Guild Authorization
===============================================

A dashboard user may read or edit a guild's roster only while they hold one
of that guild's *dashboard roles*.  Membership is checked live against the
Discord REST API with the bot's token, and each decision is cached for
``ttl_seconds`` (60 s by default) to stay well clear of rate limits.

Role changes therefore take up to one TTL to reach the dashboard.

:meth:`GuildAuthorizer.authorized_guilds` applies the same check to every
guild the bot is in, which is how the dashboard builds its guild picker.

Any lookup failure (network error, 5xx, unexpected payload) denies access and
is logged; it is never cached, so the next request asks Discord again.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import httpx
from sqlalchemy import Engine

from gavel.api.discord_rest import DiscordRest
from gavel.database.engine import run_db
from gavel.database.models import RolePurpose
from gavel.engine.cache import TTLCache
from gavel.services import config_service

logger = logging.getLogger(__name__)


class GuildAuthorizer:
    """Answers "may *user_id* use the dashboard for *guild_id*?"."""

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
        self._bot_guilds = TTLCache(ttl_seconds, clock=clock, max_entries=1)

    async def is_authorized(self, guild_id: int, user_id: int) -> bool:
        key = (guild_id, user_id)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        allowed = await run_db(
            config_service.list_roles, self._engine, guild_id, RolePurpose.DASHBOARD,
        )
        if not allowed:
            self.cache.set(key, False)
            return False

        try:
            roles = await self.rest.member_roles(guild_id, user_id)
        except (httpx.HTTPError, ValueError):
            logger.warning(
                "Dashboard role lookup failed for user %d in guild %d — denying",
                user_id, guild_id, exc_info=True,
                extra={"guild_id": guild_id, "user_id": user_id},
            )
            return False

        decision = bool(roles and roles.intersection(allowed))
        self.cache.set(key, decision)
        return decision

    async def authorized_guilds(self, user_id: int) -> list[dict]:
        """The bot's guilds in which *user_id* may use the dashboard.

        Raises ``httpx.HTTPError`` if the bot's own guild list is unavailable.
        """
        guilds = self._bot_guilds.get("all")
        if guilds is None:
            guilds = await self.rest.bot_guilds()
            self._bot_guilds.set("all", guilds)

        visible = []
        for guild in guilds:
            if await self.is_authorized(int(guild["id"]), user_id):
                visible.append(guild)
        return visible
