"""
gavel.api.routes.guilds — Guild picker endpoint
===============================================
"""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException

from gavel.api.authz import GuildAuthorizer
from gavel.api.deps import get_authorizer, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["guilds"])


@router.get("/guilds")
async def list_guilds(
    user: dict = Depends(get_current_user),
    authorizer: GuildAuthorizer = Depends(get_authorizer),
):
    """Guilds the bot is in where the caller holds a dashboard role."""
    try:
        guilds = await authorizer.authorized_guilds(int(user["sub"]))
    except httpx.HTTPError:
        logger.warning("Bot guild list unavailable", exc_info=True)
        raise HTTPException(502, "Discord is unavailable")
    return {
        "guilds": [
            {"id": str(g["id"]), "name": g.get("name"), "icon": g.get("icon")}
            for g in guilds
        ],
    }
