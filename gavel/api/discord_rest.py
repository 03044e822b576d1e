"""
gavel.api.discord_rest — Bot-Token Discord REST Reads
=====================================================

The dashboard process has no gateway connection, so everything it needs to
know about live guild state comes from a handful of REST reads made with the
bot's token.  Each call opens a short-lived ``httpx.AsyncClient``; tests pass
an ``httpx.MockTransport`` instead of a real one.

Transport and 5xx failures surface as ``httpx.HTTPError``.  A 404 on a
member lookup is an answer ("not in the guild"), not an error.
"""

from __future__ import annotations

from typing import Any

import httpx

DISCORD_API = "https://discord.com/api/v10"

CATEGORY_CHANNEL = 4
# Guild text and announcement channels carry a readable message history
TEXT_CHANNEL_TYPES = frozenset({0, 5})

MESSAGE_PAGE_SIZE = 100


class DiscordRest:
    def __init__(
        self, bot_token: str, *, transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._bot_token = bot_token
        self._transport = transport

    async def _get(self, path: str, **params: Any) -> httpx.Response:
        transport = self._transport or httpx.AsyncHTTPTransport(retries=1)
        async with httpx.AsyncClient(timeout=10, transport=transport) as client:
            return await client.get(
                f"{DISCORD_API}{path}",
                params=params or None,
                headers={"Authorization": f"Bot {self._bot_token}"},
            )

    async def member_roles(self, guild_id: int, user_id: int) -> set[int] | None:
        """Role ids of the member, ``None`` if not in the guild."""
        resp = await self._get(f"/guilds/{guild_id}/members/{user_id}")
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return {int(r) for r in resp.json().get("roles", [])}

    async def bot_guilds(self) -> list[dict]:
        """Guilds the bot is a member of, as ``{"id", "name", "icon"}`` dicts."""
        resp = await self._get("/users/@me/guilds")
        resp.raise_for_status()
        return resp.json()

    async def guild_channels(self, guild_id: int) -> list[dict]:
        resp = await self._get(f"/guilds/{guild_id}/channels")
        resp.raise_for_status()
        return resp.json()

    async def recent_messages(
        self, channel_id: int, limit: int = MESSAGE_PAGE_SIZE,
    ) -> list[dict]:
        """Latest *limit* messages of a channel, newest first."""
        resp = await self._get(f"/channels/{channel_id}/messages", limit=limit)
        resp.raise_for_status()
        return resp.json()
