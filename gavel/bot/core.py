"""
gavel.bot.core — Bot Instance & Cog Loader
==========================================

Defines :class:`GavelBot`, a ``commands.Bot`` subclass that:

1. Stores the shared config (``bot.cfg``), DB engine (``bot.engine``) and
   alert scheduler (``bot.scheduler``) so every Cog can reach them.
2. Loads every Cog listed in :data:`EXTENSIONS`.
3. Syncs the slash-command tree on startup (guild-scoped for dev, global
   for production — controlled by the ``DEV_GUILD_ID`` env var).
4. Runs a full roster resync for every joined guild with roster-sync roles
   configured, so role changes made while the bot was offline are picked up.
"""

from __future__ import annotations

import logging
import os

import discord
from discord.ext import commands
from sqlalchemy import Engine

from gavel.bot.membership import DiscordMembershipSource
from gavel.bot.notifier import ChannelNotifier
from gavel.config import GavelConfig
from gavel.database.engine import run_db
from gavel.database.models import RolePurpose
from gavel.engine.scheduler import AlertScheduler
from gavel.services.config_service import list_configured_guild_ids
from gavel.services.group_sync import SyncResult, full_resync, resync_all

logger = logging.getLogger(__name__)

EXTENSIONS: list[str] = [
    "gavel.bot.cogs.activity",
    "gavel.bot.cogs.membership",
    "gavel.bot.cogs.roster",
    "gavel.bot.cogs.settings",
    "gavel.bot.cogs.tasks",
]


class GavelBot(commands.Bot):
    """Custom Bot subclass that carries project-wide state.

    Parameters
    ----------
    cfg:
        The parsed :class:`GavelConfig` from ``config.yaml``.
    engine:
        A SQLAlchemy :class:`Engine`.
    """

    def __init__(self, cfg: GavelConfig, engine: Engine) -> None:
        # MESSAGE_CONTENT is not needed: only message metadata is recorded.
        # GUILD_MEMBERS is privileged and required for role sync.
        intents = discord.Intents.default()
        intents.members = True
        intents.presences = False

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            description=f"{cfg.bot_name} — lawyer roster & activity tracking",
        )

        self.cfg = cfg
        self.engine = engine
        self.scheduler = AlertScheduler(
            interval=cfg.alert_interval, kickoff_delay=cfg.kickoff_delay,
        )
        self.notifier = ChannelNotifier(self)
        self._resynced = False

    # -----------------------------------------------------------------------
    # Lifecycle hooks
    # -----------------------------------------------------------------------
    async def setup_hook(self) -> None:
        """Load all Cog extensions.  One broken Cog doesn't stop the rest."""
        for ext in EXTENSIONS:
            try:
                await self.load_extension(ext)
                logger.info("Loaded extension: %s", ext)
            except Exception as exc:
                logger.error("Failed to load extension %s: %s", ext, exc)

    async def on_ready(self) -> None:
        """Fired when the bot has connected and the cache is populated."""
        assert self.user is not None
        logger.info("Logged in as %s (ID: %s)", self.user.name, self.user.id)

        # --- Slash-command sync ---------------------------------------------
        dev_guild_id = os.getenv("DEV_GUILD_ID")
        if dev_guild_id:
            guild = discord.Object(id=int(dev_guild_id))
            self.tree.copy_global_to(guild=guild)
            synced = await self.tree.sync(guild=guild)
            logger.info("Synced %d commands to dev guild %s", len(synced), dev_guild_id)
        else:
            synced = await self.tree.sync()
            logger.info("Synced %d commands globally", len(synced))

        # on_ready fires again after every reconnect; the gateway events
        # keep the roster current from then on.
        if not self._resynced:
            self._resynced = True
            await self.resync_configured_guilds()

    async def on_guild_join(self, guild: discord.Guild) -> None:
        logger.info("Joined guild %s (ID: %d)", guild.name, guild.id)
        await self.resync_guild(guild)

    # -----------------------------------------------------------------------
    # Roster reconciliation
    # -----------------------------------------------------------------------
    async def resync_configured_guilds(self) -> list[SyncResult]:
        """Resync the joined guilds that have at least one roster-sync role."""
        configured = set(await run_db(
            list_configured_guild_ids, self.engine, RolePurpose.ROSTER_SYNC,
        ))
        sources = {
            g.id: DiscordMembershipSource(g) for g in self.guilds if g.id in configured
        }
        logger.info("Startup resync of %d configured guild(s)", len(sources))
        return await resync_all(self.engine, sources)

    async def resync_guild(self, guild: discord.Guild) -> SyncResult | None:
        """Full roster resync for *guild*.  Failures are logged, not raised."""
        try:
            return await full_resync(self.engine, guild.id, DiscordMembershipSource(guild))
        except Exception:
            logger.exception(
                "Roster resync failed for guild %s", guild.id,
                extra={"guild_id": guild.id, "task": "group_sync"},
            )
            return None
