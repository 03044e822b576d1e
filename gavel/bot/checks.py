"""
gavel.bot.checks — Shared Command Checks & Replies
===================================================

- :func:`manages_guild` — gate for every mutating slash command.
- :func:`reply` — ephemeral answer that works before or after a defer.
- :func:`handle_command_error` — maps failures to short user-facing messages.
"""

from __future__ import annotations

import logging

import discord
from discord import app_commands

from gavel.errors import InvalidInput

logger = logging.getLogger(__name__)

PERMISSION_DENIED = "\U0001f512 You need **Manage Server** permission."
GENERIC_FAILURE = "❌ Something went wrong. Please try again later."


def manages_guild():
    """Decorator that requires the Manage Server permission."""
    async def predicate(interaction: discord.Interaction) -> bool:
        perms = getattr(interaction.user, "guild_permissions", None)
        return bool(perms and perms.manage_guild)
    return app_commands.check(predicate)


async def reply(interaction: discord.Interaction, content: str | None = None, **kwargs) -> None:
    kwargs.setdefault("ephemeral", True)
    if interaction.response.is_done():
        await interaction.followup.send(content, **kwargs)
    else:
        await interaction.response.send_message(content, **kwargs)


async def handle_command_error(
    interaction: discord.Interaction, error: app_commands.AppCommandError,
) -> None:
    if isinstance(error, app_commands.CheckFailure):
        await reply(interaction, PERMISSION_DENIED)
        return

    original = getattr(error, "original", error)
    if isinstance(original, InvalidInput):
        await reply(interaction, f"❌ {original.message}")
        return

    command = interaction.command.qualified_name if interaction.command else "?"
    logger.exception(
        "Command /%s failed", command, exc_info=original,
        extra={"guild_id": interaction.guild_id, "command": command},
    )
    await reply(interaction, GENERIC_FAILURE)
