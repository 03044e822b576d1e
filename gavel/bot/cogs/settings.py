"""
gavel.bot.cogs.settings — /config Slash Commands
================================================

Per-guild configuration, all gated on **Manage Server**:

- alert-channel, inactivity-days
- add-channel, add-category, remove-channel, list-channels
- roster-role, remove-roster-role, list-roster-roles
- add-dashboard-role, remove-dashboard-role, list-dashboard-roles
- add-ticket-category, remove-ticket-category, list-ticket-categories

Changing the roster-sync role set triggers a full roster resync of the
guild, so the roster reflects the new mapping immediately.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from gavel.bot.checks import handle_command_error, manages_guild, reply
from gavel.database.engine import run_db
from gavel.database.models import RolePurpose, ScopeKind
from gavel.engine.scopes import split_by_kind
from gavel.engine.validation import MAX_INACTIVITY_DAYS, MIN_INACTIVITY_DAYS
from gavel.services import config_service
from gavel.services.group_sync import SyncResult

if TYPE_CHECKING:
    from gavel.bot.core import GavelBot

logger = logging.getLogger(__name__)


def _sync_summary(result: SyncResult | None) -> str:
    if result is None:
        return "Roster resync failed; check the bot logs."
    if not result.changed:
        return "Roster already in sync."
    return f"Roster resynced: **{len(result.added)}** added, **{len(result.archived)}** archived."


def _role_list(role_ids: list[int]) -> str:
    return "\n".join(f"<@&{rid}>" for rid in role_ids) or "None configured."


@app_commands.guild_only()
class Settings(commands.GroupCog, group_name="config", group_description="Gavel server settings"):
    """Per-guild Gavel configuration."""

    def __init__(self, bot: GavelBot) -> None:
        self.bot = bot
        super().__init__()

    # -------------------------------------------------------------------
    # Alerts
    # -------------------------------------------------------------------
    @app_commands.command(name="alert-channel", description="Set (or clear) the inactivity alert channel.")
    @app_commands.describe(channel="Where alerts are posted; leave empty to turn alerts off")
    @manages_guild()
    async def alert_channel(
        self, interaction: discord.Interaction, channel: discord.TextChannel | None = None,
    ) -> None:
        await run_db(
            config_service.set_alert_channel,
            self.bot.engine,
            interaction.guild_id,
            channel.id if channel else None,
        )
        if channel is None:
            await reply(interaction, "✅ Inactivity alerts turned off.")
        else:
            await reply(interaction, f"✅ Inactivity alerts will be posted in {channel.mention}.")

    @app_commands.command(
        name="inactivity-days",
        description="Set how many days before a lawyer is flagged inactive.",
    )
    @app_commands.describe(days=f"Days without activity ({MIN_INACTIVITY_DAYS}-{MAX_INACTIVITY_DAYS})")
    @manages_guild()
    async def inactivity_days(
        self,
        interaction: discord.Interaction,
        days: app_commands.Range[int, MIN_INACTIVITY_DAYS, MAX_INACTIVITY_DAYS],
    ) -> None:
        saved = await run_db(
            config_service.set_inactivity_days, self.bot.engine, interaction.guild_id, days,
        )
        await reply(interaction, f"✅ Inactivity threshold set to **{saved}** days.")

    # -------------------------------------------------------------------
    # Monitored scopes
    # -------------------------------------------------------------------
    @app_commands.command(name="add-channel", description="Track lawyer activity in a channel.")
    @app_commands.describe(channel="Channel to monitor")
    @manages_guild()
    async def add_channel(
        self,
        interaction: discord.Interaction,
        channel: discord.TextChannel | discord.ForumChannel | discord.VoiceChannel,
    ) -> None:
        added = await run_db(
            config_service.add_monitored_scope,
            self.bot.engine, interaction.guild_id, channel.id, ScopeKind.CHANNEL,
        )
        if added:
            await reply(interaction, f"✅ Now monitoring {channel.mention}.")
        else:
            await reply(interaction, f"{channel.mention} is already monitored.")

    @app_commands.command(
        name="add-category",
        description="Track lawyer activity in every channel of a category.",
    )
    @app_commands.describe(category="Category to monitor")
    @manages_guild()
    async def add_category(
        self, interaction: discord.Interaction, category: discord.CategoryChannel,
    ) -> None:
        added = await run_db(
            config_service.add_monitored_scope,
            self.bot.engine, interaction.guild_id, category.id, ScopeKind.CATEGORY,
        )
        if added:
            await reply(interaction, f"✅ Now monitoring every channel in **{category.name}**.")
        else:
            await reply(interaction, f"**{category.name}** is already monitored.")

    @app_commands.command(name="remove-channel", description="Stop monitoring a channel or category.")
    @app_commands.describe(scope="Channel or category to stop monitoring")
    @manages_guild()
    async def remove_channel(
        self,
        interaction: discord.Interaction,
        scope: discord.TextChannel | discord.ForumChannel | discord.VoiceChannel | discord.CategoryChannel,
    ) -> None:
        removed = await run_db(
            config_service.remove_monitored_scope, self.bot.engine, interaction.guild_id, scope.id,
        )
        if removed:
            await reply(interaction, f"✅ Stopped monitoring **{scope.name}**.")
        else:
            await reply(interaction, f"**{scope.name}** was not being monitored.")

    @app_commands.command(name="list-channels", description="Show monitored channels and categories.")
    @manages_guild()
    async def list_channels(self, interaction: discord.Interaction) -> None:
        settings = await run_db(
            config_service.get_guild_settings, self.bot.engine, interaction.guild_id,
        )
        channels, categories = split_by_kind(settings.monitored_scopes)
        if not channels and not categories:
            await reply(interaction, "No channels are monitored yet. Use `/config add-channel`.")
            return

        embed = discord.Embed(title="Monitored Scopes", color=discord.Color(0x3498DB))
        if channels:
            embed.add_field(
                name="Channels", value="\n".join(f"<#{cid}>" for cid in channels), inline=False,
            )
        if categories:
            names = []
            for cid in categories:
                category = interaction.guild.get_channel(cid) if interaction.guild else None
                names.append(f"**{category.name}**" if category else f"`{cid}` (deleted)")
            embed.add_field(name="Categories", value="\n".join(names), inline=False)
        await reply(interaction, embed=embed)

    # -------------------------------------------------------------------
    # Roster-sync roles
    # -------------------------------------------------------------------
    @app_commands.command(name="roster-role", description="Auto-add holders of a role to the roster.")
    @app_commands.describe(role="Members with this role are lawyers")
    @manages_guild()
    async def roster_role(self, interaction: discord.Interaction, role: discord.Role) -> None:
        added = await run_db(
            config_service.add_role,
            self.bot.engine, interaction.guild_id, role.id, RolePurpose.ROSTER_SYNC,
        )
        if not added:
            await reply(interaction, f"{role.mention} is already a roster role.")
            return
        await interaction.response.defer(ephemeral=True, thinking=True)
        result = await self.bot.resync_guild(interaction.guild)
        await reply(interaction, f"✅ {role.mention} now syncs to the roster. {_sync_summary(result)}")

    @app_commands.command(name="remove-roster-role", description="Stop syncing a role to the roster.")
    @app_commands.describe(role="Role to stop syncing")
    @manages_guild()
    async def remove_roster_role(self, interaction: discord.Interaction, role: discord.Role) -> None:
        removed = await run_db(
            config_service.remove_role,
            self.bot.engine, interaction.guild_id, role.id, RolePurpose.ROSTER_SYNC,
        )
        if not removed:
            await reply(interaction, f"{role.mention} is not a roster role.")
            return
        await interaction.response.defer(ephemeral=True, thinking=True)
        result = await self.bot.resync_guild(interaction.guild)
        await reply(interaction, f"✅ {role.mention} no longer syncs. {_sync_summary(result)}")

    @app_commands.command(name="list-roster-roles", description="Show roles that sync to the roster.")
    @manages_guild()
    async def list_roster_roles(self, interaction: discord.Interaction) -> None:
        role_ids = await run_db(
            config_service.list_roles,
            self.bot.engine, interaction.guild_id, RolePurpose.ROSTER_SYNC,
        )
        await reply(interaction, f"**Roster roles**\n{_role_list(role_ids)}")

    # -------------------------------------------------------------------
    # Dashboard roles
    # -------------------------------------------------------------------
    @app_commands.command(name="add-dashboard-role", description="Grant a role dashboard access.")
    @app_commands.describe(role="Role allowed to use the dashboard")
    @manages_guild()
    async def add_dashboard_role(self, interaction: discord.Interaction, role: discord.Role) -> None:
        added = await run_db(
            config_service.add_role,
            self.bot.engine, interaction.guild_id, role.id, RolePurpose.DASHBOARD,
        )
        if added:
            await reply(interaction, f"✅ {role.mention} can now use the dashboard.")
        else:
            await reply(interaction, f"{role.mention} already has dashboard access.")

    @app_commands.command(name="remove-dashboard-role", description="Revoke a role's dashboard access.")
    @app_commands.describe(role="Role to revoke")
    @manages_guild()
    async def remove_dashboard_role(self, interaction: discord.Interaction, role: discord.Role) -> None:
        removed = await run_db(
            config_service.remove_role,
            self.bot.engine, interaction.guild_id, role.id, RolePurpose.DASHBOARD,
        )
        if removed:
            await reply(interaction, f"✅ {role.mention} no longer has dashboard access.")
        else:
            await reply(interaction, f"{role.mention} did not have dashboard access.")

    @app_commands.command(name="list-dashboard-roles", description="Show roles with dashboard access.")
    @manages_guild()
    async def list_dashboard_roles(self, interaction: discord.Interaction) -> None:
        role_ids = await run_db(
            config_service.list_roles,
            self.bot.engine, interaction.guild_id, RolePurpose.DASHBOARD,
        )
        await reply(interaction, f"**Dashboard roles**\n{_role_list(role_ids)}")

    # -------------------------------------------------------------------
    # Ticket categories
    # -------------------------------------------------------------------
    @app_commands.command(name="add-ticket-category", description="Add a category for ticket tracking.")
    @app_commands.describe(category="Category whose channels are tickets")
    @manages_guild()
    async def add_ticket_category(
        self, interaction: discord.Interaction, category: discord.CategoryChannel,
    ) -> None:
        added = await run_db(
            config_service.add_ticket_category, self.bot.engine, interaction.guild_id, category.id,
        )
        if added:
            await reply(interaction, f"✅ Tickets in **{category.name}** are now tracked.")
        else:
            await reply(interaction, f"**{category.name}** is already a ticket category.")

    @app_commands.command(name="remove-ticket-category", description="Remove a ticket tracking category.")
    @app_commands.describe(category="Category to stop tracking")
    @manages_guild()
    async def remove_ticket_category(
        self, interaction: discord.Interaction, category: discord.CategoryChannel,
    ) -> None:
        removed = await run_db(
            config_service.remove_ticket_category, self.bot.engine, interaction.guild_id, category.id,
        )
        if removed:
            await reply(interaction, f"✅ Stopped tracking tickets in **{category.name}**.")
        else:
            await reply(interaction, f"**{category.name}** was not a ticket category.")

    @app_commands.command(name="list-ticket-categories", description="List all ticket tracking categories.")
    @manages_guild()
    async def list_ticket_categories(self, interaction: discord.Interaction) -> None:
        category_ids = await run_db(
            config_service.list_ticket_categories, self.bot.engine, interaction.guild_id,
        )
        if not category_ids:
            await reply(interaction, "No ticket categories yet. Use `/config add-ticket-category`.")
            return
        names = []
        for cid in category_ids:
            category = interaction.guild.get_channel(cid) if interaction.guild else None
            names.append(f"**{category.name}**" if category else f"`{cid}` (deleted)")
        await reply(interaction, "**Ticket categories**\n" + "\n".join(names))

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError,
    ) -> None:
        await handle_command_error(interaction, error)


async def setup(bot: GavelBot) -> None:
    await bot.add_cog(Settings(bot))
