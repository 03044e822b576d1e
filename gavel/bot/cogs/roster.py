"""
gavel.bot.cogs.roster — /lawyer Slash Commands
==============================================

- /lawyer add | remove        — manual roster edits
- /lawyer list | review       — roster overview with activity status
- /lawyer profile             — one lawyer's activity, notes and strikes
- /lawyer note                — append a staff note
- /lawyer strike | unstrike   — issue or withdraw a strike
- /lawyer strikes             — strike history

Mutating commands require **Manage Server**.  Every answer is ephemeral.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from gavel.bot.checks import handle_command_error, manages_guild, reply
from gavel.database.engine import run_db
from gavel.engine.validation import clean_display_name
from gavel.services import (
    config_service,
    discipline_service,
    inactivity_service,
    profile_service,
    roster_service,
)
from gavel.services.embeds import (
    build_profile_embed,
    build_review_embed,
    build_roster_embed,
    build_strikes_embed,
)

if TYPE_CHECKING:
    from gavel.bot.core import GavelBot

logger = logging.getLogger(__name__)


@app_commands.guild_only()
class Roster(commands.GroupCog, group_name="lawyer", group_description="Lawyer roster"):
    """Roster management and review commands."""

    def __init__(self, bot: GavelBot) -> None:
        self.bot = bot
        super().__init__()

    async def _threshold(self, guild_id: int) -> int:
        settings = await run_db(config_service.get_guild_settings, self.bot.engine, guild_id)
        return settings.inactivity_days

    # -------------------------------------------------------------------
    # /lawyer add
    # -------------------------------------------------------------------
    @app_commands.command(name="add", description="Add a member to the lawyer roster.")
    @app_commands.describe(
        user="The member to add",
        display_name="Optional name to show on the roster",
    )
    @manages_guild()
    async def add(
        self,
        interaction: discord.Interaction,
        user: discord.Member,
        display_name: str | None = None,
    ) -> None:
        if display_name is not None:
            display_name = clean_display_name(display_name)

        changed = await run_db(
            roster_service.add_or_reactivate,
            self.bot.engine,
            interaction.guild_id,
            user.id,
            str(interaction.user.id),
            display_name,
        )
        if changed:
            await reply(interaction, f"✅ **{user}** has been added to the lawyer roster.")
        else:
            await reply(interaction, f"**{user}** is already on the roster.")

    # -------------------------------------------------------------------
    # /lawyer remove
    # -------------------------------------------------------------------
    @app_commands.command(name="remove", description="Archive a lawyer's roster entry.")
    @app_commands.describe(user="The lawyer to remove")
    @manages_guild()
    async def remove(self, interaction: discord.Interaction, user: discord.User) -> None:
        removed = await run_db(
            roster_service.archive,
            self.bot.engine,
            interaction.guild_id,
            user.id,
            str(interaction.user.id),
        )
        if not removed:
            await reply(interaction, f"**{user}** is not on the roster.")
            return
        await reply(interaction, f"✅ **{user}** has been removed from the lawyer roster.")

    # -------------------------------------------------------------------
    # /lawyer list
    # -------------------------------------------------------------------
    @app_commands.command(name="list", description="Show the lawyer roster.")
    async def list_roster(self, interaction: discord.Interaction) -> None:
        threshold = await self._threshold(interaction.guild_id)
        rows = await run_db(
            inactivity_service.review_roster, self.bot.engine, interaction.guild_id, threshold,
        )
        if not rows:
            await reply(interaction, "No lawyers on the roster.")
            return
        await reply(interaction, embed=build_roster_embed(rows))

    # -------------------------------------------------------------------
    # /lawyer review
    # -------------------------------------------------------------------
    @app_commands.command(name="review", description="Activity status of every lawyer.")
    async def review(self, interaction: discord.Interaction) -> None:
        threshold = await self._threshold(interaction.guild_id)
        rows = await run_db(
            inactivity_service.review_roster, self.bot.engine, interaction.guild_id, threshold,
        )
        if not rows:
            await reply(interaction, "No lawyers on the roster.")
            return
        await reply(interaction, embed=build_review_embed(rows, threshold))

    # -------------------------------------------------------------------
    # /lawyer profile
    # -------------------------------------------------------------------
    @app_commands.command(name="profile", description="Show a lawyer's activity profile.")
    @app_commands.describe(user="The lawyer to look up")
    async def profile(self, interaction: discord.Interaction, user: discord.User) -> None:
        profile = await run_db(
            profile_service.build_profile,
            self.bot.engine,
            interaction.guild_id,
            user.id,
            notes_limit=self.bot.cfg.notes_view_limit,
        )
        if profile is None:
            await reply(interaction, f"**{user}** is not on the roster.")
            return
        embed = build_profile_embed(
            profile,
            title=profile.entry.display_name or str(user),
            avatar_url=user.display_avatar.url,
        )
        await reply(interaction, embed=embed)

    # -------------------------------------------------------------------
    # /lawyer note
    # -------------------------------------------------------------------
    @app_commands.command(name="note", description="Add a note to a lawyer's profile.")
    @app_commands.describe(user="The lawyer", note="The note to add")
    @manages_guild()
    async def note(self, interaction: discord.Interaction, user: discord.User, note: str) -> None:
        on_roster = await run_db(
            roster_service.is_active_member, self.bot.engine, interaction.guild_id, user.id,
        )
        if not on_roster:
            await reply(interaction, f"**{user}** is not on the roster.")
            return
        await run_db(
            discipline_service.add_note,
            self.bot.engine,
            interaction.guild_id,
            user.id,
            interaction.user.id,
            note,
        )
        await reply(interaction, f"✅ Note added to **{user}**'s profile.")

    # -------------------------------------------------------------------
    # /lawyer strike | unstrike | strikes
    # -------------------------------------------------------------------
    @app_commands.command(name="strike", description="Issue a strike to a lawyer.")
    @app_commands.describe(user="The lawyer", reason="Why the strike is issued")
    @manages_guild()
    async def strike(
        self, interaction: discord.Interaction, user: discord.User, reason: str,
    ) -> None:
        on_roster = await run_db(
            roster_service.is_active_member, self.bot.engine, interaction.guild_id, user.id,
        )
        if not on_roster:
            await reply(interaction, f"**{user}** is not on the roster.")
            return
        issued = await run_db(
            discipline_service.add_strike,
            self.bot.engine,
            interaction.guild_id,
            user.id,
            interaction.user.id,
            reason,
        )
        total = await run_db(
            discipline_service.get_strike_count, self.bot.engine, interaction.guild_id, user.id,
        )
        await reply(
            interaction,
            f"⚠️ Strike `#{issued.id}` issued to **{user}**. They now have **{total}** "
            f"strike{'' if total == 1 else 's'}.",
        )

    @app_commands.command(name="unstrike", description="Remove a strike by its id.")
    @app_commands.describe(strike_id="The strike number shown by /lawyer strikes")
    @manages_guild()
    async def unstrike(self, interaction: discord.Interaction, strike_id: int) -> None:
        removed = await run_db(
            discipline_service.remove_strike, self.bot.engine, interaction.guild_id, strike_id,
        )
        if not removed:
            await reply(interaction, f"No strike `#{strike_id}` in this server.")
            return
        await reply(interaction, f"✅ Strike `#{strike_id}` removed.")

    @app_commands.command(name="strikes", description="Show a lawyer's strike history.")
    @app_commands.describe(user="The lawyer")
    async def strikes(self, interaction: discord.Interaction, user: discord.User) -> None:
        history = await run_db(
            discipline_service.get_strikes, self.bot.engine, interaction.guild_id, user.id,
        )
        await reply(interaction, embed=build_strikes_embed(str(user), history))

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError,
    ) -> None:
        await handle_command_error(interaction, error)


async def setup(bot: GavelBot) -> None:
    await bot.add_cog(Roster(bot))
