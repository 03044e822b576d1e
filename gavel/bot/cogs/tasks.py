"""
gavel.bot.cogs.tasks — Periodic Background Tasks
================================================

Drives the :class:`~gavel.engine.scheduler.AlertScheduler` from a short
``discord.ext.tasks`` loop.  The loop only asks "is a sweep due?"; the
scheduler owns the actual cadence (kickoff shortly after start, then every
``alert_interval_hours``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from discord.ext import commands, tasks

from gavel.services.alert_service import SweepReport, run_inactivity_sweep

if TYPE_CHECKING:
    from gavel.bot.core import GavelBot

logger = logging.getLogger(__name__)


class PeriodicTasks(commands.Cog):
    """Cog for scheduled background tasks."""

    def __init__(self, bot: GavelBot) -> None:
        self.bot = bot

    async def cog_load(self) -> None:
        self.alert_loop.start()

    async def cog_unload(self) -> None:
        self.alert_loop.cancel()

    async def run_sweep(self) -> SweepReport:
        guild_ids = [guild.id for guild in self.bot.guilds]
        return await run_inactivity_sweep(self.bot.engine, guild_ids, self.bot.notifier)

    # -------------------------------------------------------------------
    # Inactivity alert: checks every few seconds whether a sweep is due
    # -------------------------------------------------------------------
    @tasks.loop(seconds=5)
    async def alert_loop(self):
        await self.bot.scheduler.tick(self.run_sweep)

    @alert_loop.before_loop
    async def _wait_alert(self):
        await self.bot.wait_until_ready()
        logger.info(
            "First inactivity sweep in %.0fs", self.bot.scheduler.seconds_until_due(),
        )


async def setup(bot: GavelBot) -> None:
    await bot.add_cog(PeriodicTasks(bot))
