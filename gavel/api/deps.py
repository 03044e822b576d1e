"""
gavel.api.deps — FastAPI dependency injection
=============================================
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Annotated

import jwt
from fastapi import Depends, Header, HTTPException, Path, status
from jwt.exceptions import InvalidTokenError
from sqlalchemy import Engine

from gavel.api.authz import GuildAuthorizer
from gavel.api.tickets import TicketTracker
from gavel.config import GavelConfig, load_config
from gavel.database.engine import create_db_engine

_WEAK_SECRETS = frozenset({
    "gavel-dev-secret-change-me",
    "change-me",
    "secret",
    "dev",
    "",
})

_MIN_SECRET_LENGTH = 32

JWT_ALGORITHM = "HS256"


def _load_jwt_secret() -> str:
    """Load and validate JWT_SECRET from the environment.

    Raises RuntimeError at import time if the secret is missing, blank,
    too short (< 32 chars), or a known weak default.
    """
    secret = os.getenv("JWT_SECRET", "")
    if not secret:
        raise RuntimeError(
            "JWT_SECRET environment variable is not set. "
            "Generate one with: openssl rand -hex 32"
        )
    if secret in _WEAK_SECRETS:
        raise RuntimeError(
            f"JWT_SECRET is set to a known weak default ('{secret}'). "
            "Please set a strong, unique secret."
        )
    if len(secret) < _MIN_SECRET_LENGTH:
        raise RuntimeError(
            f"JWT_SECRET is too short ({len(secret)} chars). "
            f"Minimum length is {_MIN_SECRET_LENGTH} characters."
        )
    return secret


JWT_SECRET: str = _load_jwt_secret()


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine()


@lru_cache(maxsize=1)
def get_config() -> GavelConfig:
    return load_config()


@lru_cache(maxsize=1)
def get_authorizer() -> GuildAuthorizer:
    return GuildAuthorizer(
        bot_token=os.getenv("DISCORD_TOKEN", ""),
        engine=get_engine(),
        ttl_seconds=get_config().auth_cache_ttl_seconds,
    )


@lru_cache(maxsize=1)
def get_ticket_tracker() -> TicketTracker:
    return TicketTracker(
        bot_token=os.getenv("DISCORD_TOKEN", ""),
        engine=get_engine(),
        ttl_seconds=get_config().ticket_cache_ttl_seconds,
    )


def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
) -> dict:
    """Validate the bearer JWT and return its payload.  Raises 401 if invalid."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Missing token")
    token = authorization.split(" ", 1)[1]
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except InvalidTokenError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token")
    sub = payload.get("sub")
    if not sub or not str(sub).isdigit():
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token")
    return payload


async def require_guild_access(
    guild_id: Annotated[int, Path()],
    user: Annotated[dict, Depends(get_current_user)],
    authorizer: Annotated[GuildAuthorizer, Depends(get_authorizer)],
) -> dict:
    """403 unless the caller holds a dashboard role in *guild_id*."""
    if not await authorizer.is_authorized(guild_id, int(user["sub"])):
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Not authorized for this guild")
    return user
