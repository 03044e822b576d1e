"""
gavel.services.embeds — Discord embed builders
===============================================

All embed construction lives here so the cogs and the notifier only need
to supply data — no layout concerns.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

import discord

from gavel.database.models import Strike
from gavel.engine.inactivity import ActivityStatus
from gavel.engine.validation import ensure_utc
from gavel.services.alert_service import AlertPayload
from gavel.services.inactivity_service import LawyerReview
from gavel.services.profile_service import LawyerProfile

# Discord caps an embed field value at 1024 characters
FIELD_LIMIT = 1024
DESCRIPTION_LIMIT = 4096

STATUS_ICONS = {
    ActivityStatus.ACTIVE: "\U0001f7e2",
    ActivityStatus.WARNING: "\U0001f7e1",
    ActivityStatus.INACTIVE: "\U0001f534",
    ActivityStatus.NEVER_ACTIVE: "\U0001f534",
}


def _clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 3] + "..."


def _ts(dt: datetime, style: str = "R") -> str:
    return f"<t:{int(ensure_utc(dt).timestamp())}:{style}>"


def _days_ago(days: int | None) -> str:
    if days is None:
        return "No activity recorded"
    if days == 0:
        return "Active today"
    return f"{days} day{'' if days == 1 else 's'} ago"


def build_alert_embed(payload: AlertPayload) -> discord.Embed:
    lines = [f"<@{e.user_id}> — **{e.status_text}**" for e in payload.entries]
    embed = discord.Embed(
        title="Inactivity Alert",
        description=_clip("\n".join(lines), DESCRIPTION_LIMIT),
        color=discord.Color(0xE74C3C),
        timestamp=discord.utils.utcnow(),
    )
    embed.set_footer(text=f"Lawyers with no activity in {payload.threshold_days}+ days")
    return embed


def build_roster_embed(rows: Sequence[LawyerReview]) -> discord.Embed:
    lines = [f"<@{r.user_id}> — Last active: **{_days_ago(r.days_since)}**" for r in rows]
    embed = discord.Embed(
        title="Lawyer Roster",
        description=_clip("\n".join(lines), DESCRIPTION_LIMIT),
        color=discord.Color(0x3498DB),
    )
    n = len(rows)
    embed.set_footer(text=f"{n} lawyer{'' if n == 1 else 's'} on roster")
    return embed


def build_review_embed(rows: Sequence[LawyerReview], threshold_days: int) -> discord.Embed:
    lines = []
    for row in rows:
        if row.days_since is None:
            last = "Never"
        elif row.days_since == 0:
            last = "Today"
        else:
            last = f"{row.days_since}d ago"
        lines.append(
            f"{STATUS_ICONS[row.status]} <@{row.user_id}> — Last: **{last}** "
            f"| 30d msgs: **{row.activity_30d}**"
        )
    embed = discord.Embed(
        title="Lawyer Activity Review",
        description=_clip("\n".join(lines), DESCRIPTION_LIMIT),
        color=discord.Color(0x3498DB),
        timestamp=discord.utils.utcnow(),
    )
    embed.set_footer(
        text=f"\U0001f7e2 Active | \U0001f7e1 Warning | \U0001f534 Inactive ({threshold_days}+ days)"
    )
    return embed


def build_profile_embed(
    profile: LawyerProfile, title: str, avatar_url: str | None = None,
) -> discord.Embed:
    entry = profile.entry
    embed = discord.Embed(
        title=title,
        color=discord.Color.dark_grey() if entry.archived else discord.Color(0x3498DB),
    )
    if avatar_url:
        embed.set_thumbnail(url=avatar_url)

    if profile.last_activity is None:
        last_text, since_text = "No activity recorded", "N/A"
    else:
        last_text = f"{_ts(profile.last_activity, 'F')} ({_ts(profile.last_activity)})"
        since_text = f"{profile.days_since} day{'' if profile.days_since == 1 else 's'}"

    embed.add_field(name="Last Active", value=last_text, inline=True)
    embed.add_field(name="Days Since Activity", value=since_text, inline=True)
    embed.add_field(
        name="Status",
        value=f"{STATUS_ICONS[profile.status]} {profile.status.value.replace('_', ' ')}",
        inline=True,
    )
    for window, n in profile.counts.items():
        embed.add_field(name=f"Messages ({window}d)", value=str(n), inline=True)

    if entry.hire_date is not None:
        embed.add_field(name="Hired", value=_ts(entry.hire_date, "D"), inline=True)
    embed.add_field(name="Strikes", value=str(len(profile.strikes)), inline=True)

    if profile.recent:
        text = "\n".join(
            f"#{ev.channel_name or ev.channel_id} — {_ts(ev.logged_at)}" for ev in profile.recent
        )
        embed.add_field(name="Recent Activity", value=_clip(text, FIELD_LIMIT), inline=False)

    if profile.notes:
        text = "\n".join(
            f"{_ts(n.created_at, 'd')} by <@{n.author_id}>: {n.note}" for n in profile.notes
        )
        embed.add_field(name="Notes", value=_clip(text, FIELD_LIMIT), inline=False)

    if entry.archived:
        embed.set_footer(text="Archived")
    return embed


def build_strikes_embed(user_label: str, strikes: Sequence[Strike]) -> discord.Embed:
    if strikes:
        text = "\n".join(
            f"`#{s.id}` {_ts(s.created_at, 'd')} by <@{s.issued_by}>: {s.reason}" for s in strikes
        )
    else:
        text = "No strikes on record."
    embed = discord.Embed(
        title=f"Strikes — {user_label}",
        description=_clip(text, DESCRIPTION_LIMIT),
        color=discord.Color.orange(),
    )
    embed.set_footer(text=f"{len(strikes)} strike{'' if len(strikes) == 1 else 's'}")
    return embed
