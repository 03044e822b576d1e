"""
gavel.engine.scopes — Monitored Scope Resolution
=================================================

A *scope* is where activity happens: a text channel, a thread, or a category
grouping channels.  Admins register either leaf channels or whole categories.
This module is the single place that decides whether a message location is
covered, so the activity filter and the scope listings always agree.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping

from gavel.database.models import ScopeKind


def is_scope_monitored(
    monitored_ids: Collection[int],
    scope_id: int,
    parent_id: int | None = None,
) -> bool:
    """True if *scope_id* itself, or its parent group, is monitored.

    *parent_id* is the category of a channel, or the parent channel of a
    thread.  Either registration kind matches either position.
    """
    if scope_id in monitored_ids:
        return True
    return parent_id is not None and parent_id in monitored_ids


def split_by_kind(monitored: Mapping[int, ScopeKind]) -> tuple[list[int], list[int]]:
    """Split registrations into (channels, categories), each sorted by id."""
    channels = sorted(sid for sid, kind in monitored.items() if kind == ScopeKind.CHANNEL)
    categories = sorted(sid for sid, kind in monitored.items() if kind == ScopeKind.CATEGORY)
    return channels, categories
