"""
gavel.bot.cogs.activity — Message Activity Capture
==================================================

Listens for ``on_message`` and hands qualifying messages to
:func:`gavel.services.activity_service.capture_activity`, which decides
(author on the roster, location monitored) whether a row is written.

Only metadata is recorded: who, where, when.  Message content is never read.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from gavel.database.engine import run_db
from gavel.services.activity_service import capture_activity

if TYPE_CHECKING:
    from gavel.bot.core import GavelBot

logger = logging.getLogger(__name__)


def parent_scope_id(channel) -> int | None:
    """The grouping a message location belongs to.

    A thread's parent is its channel; a regular channel's is its category.
    """
    if isinstance(channel, discord.Thread):
        return channel.parent_id
    return getattr(channel, "category_id", None)


class Activity(commands.Cog, name="Activity"):
    """Feeds guild messages into the activity ledger."""

    def __init__(self, bot: GavelBot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot or message.guild is None:
            return

        channel = message.channel
        try:
            await run_db(
                capture_activity,
                self.bot.engine,
                message.guild.id,
                message.author.id,
                channel.id,
                parent_scope_id(channel),
                getattr(channel, "name", None),
            )
        except Exception:
            logger.exception(
                "Error capturing activity for %s", message.author.id,
                extra={"guild_id": message.guild.id, "user_id": message.author.id},
            )


async def setup(bot: GavelBot) -> None:
    await bot.add_cog(Activity(bot))
