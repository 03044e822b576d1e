"""
gavel.bot.membership — Live Guild Membership Adapter
=====================================================

Implements :class:`gavel.services.group_sync.MembershipSource` on top of a
``discord.Guild``.  The member cache is used when it is complete; a single
member missing from it is fetched over REST.
"""

from __future__ import annotations

import logging

import discord

from gavel.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


class DiscordMembershipSource:
    """Membership view of one guild.  Bots are never reported."""

    def __init__(self, guild: discord.Guild) -> None:
        self.guild = guild

    async def list_member_ids(self) -> list[int]:
        if not self.guild.chunked:
            try:
                await self.guild.chunk()
            except discord.HTTPException as exc:
                raise UpstreamUnavailable(f"could not load members of guild {self.guild.id}") from exc
        return [m.id for m in self.guild.members if not m.bot]

    async def get_member_roles(self, user_id: int) -> set[int] | None:
        member = self.guild.get_member(user_id)
        if member is None:
            try:
                member = await self.guild.fetch_member(user_id)
            except discord.NotFound:
                return None
            except discord.HTTPException as exc:
                raise UpstreamUnavailable(
                    f"role lookup failed for user {user_id} in guild {self.guild.id}"
                ) from exc
        if member.bot:
            return None
        return {role.id for role in member.roles}
