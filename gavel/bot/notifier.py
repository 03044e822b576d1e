"""
gavel.bot.notifier — Alert Delivery
===================================

Posts inactivity alerts to the guild's configured channel as an embed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from gavel.services.alert_service import AlertPayload
from gavel.services.embeds import build_alert_embed

if TYPE_CHECKING:
    from gavel.bot.core import GavelBot

logger = logging.getLogger(__name__)


class ChannelNotifier:
    """:class:`~gavel.services.alert_service.Notifier` backed by a Discord channel."""

    def __init__(self, bot: GavelBot) -> None:
        self.bot = bot

    async def _resolve(self, channel_id: int) -> discord.abc.Messageable | None:
        channel = self.bot.get_channel(channel_id)
        if channel is not None:
            return channel
        try:
            return await self.bot.fetch_channel(channel_id)
        except (discord.NotFound, discord.Forbidden):
            return None

    async def send_alert(self, payload: AlertPayload) -> None:
        channel = await self._resolve(payload.destination_id)
        if channel is None:
            # Deleted or hidden alert channel: nothing to deliver to
            logger.warning(
                "Alert channel %d for guild %d is unavailable — alert dropped",
                payload.destination_id, payload.guild_id,
                extra={"guild_id": payload.guild_id},
            )
            return
        await channel.send(embed=build_alert_embed(payload))
        logger.info(
            "Inactivity alert posted to #%s in guild %d (%d lawyers)",
            getattr(channel, "name", payload.destination_id), payload.guild_id,
            len(payload.entries),
        )
