"""
gavel.bot.cogs.membership — Incremental Roster Sync
===================================================

Turns ``GUILD_MEMBER_UPDATE`` and ``GUILD_MEMBER_REMOVE`` gateway events into
:func:`gavel.services.group_sync.apply_role_change` calls.  Requires the
GUILD_MEMBERS privileged intent.

A member leaving the guild is treated as losing every role.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from gavel.services.group_sync import SyncAction, apply_role_change

if TYPE_CHECKING:
    from gavel.bot.core import GavelBot

logger = logging.getLogger(__name__)


def role_ids(member: discord.Member) -> set[int]:
    return {role.id for role in member.roles}


class Membership(commands.Cog, name="Membership"):
    """Keeps the roster in step with role changes as they happen."""

    def __init__(self, bot: GavelBot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_member_update(self, before: discord.Member, after: discord.Member) -> None:
        if after.bot:
            return
        old, new = role_ids(before), role_ids(after)
        if old == new:
            return
        try:
            action = await apply_role_change(
                self.bot.engine, after.guild.id, after.id, old, new,
            )
            if action is not SyncAction.NONE:
                logger.info(
                    "Roster %s via role change: %s (ID: %d) in guild %d",
                    action.value, after.display_name, after.id, after.guild.id,
                )
        except Exception:
            logger.exception(
                "Error syncing roles for %s", after.id,
                extra={"guild_id": after.guild.id, "user_id": after.id},
            )

    @commands.Cog.listener()
    async def on_member_remove(self, member: discord.Member) -> None:
        if member.bot:
            return
        try:
            action = await apply_role_change(
                self.bot.engine, member.guild.id, member.id, role_ids(member), None,
            )
            if action is SyncAction.ARCHIVED:
                logger.info(
                    "Roster archived on leave: %s (ID: %d) in guild %d",
                    member.display_name, member.id, member.guild.id,
                )
        except Exception:
            logger.exception(
                "Error processing member_leave for %s", member.id,
                extra={"guild_id": member.guild.id, "user_id": member.id},
            )


async def setup(bot: GavelBot) -> None:
    await bot.add_cog(Membership(bot))
