"""
gavel.database.engine — Database Connection & Async Helper
===========================================================

discord.py runs on an ``asyncio`` event loop while SQLAlchemy + psycopg2 is
synchronous.  Every store function in :mod:`gavel.services` is a plain sync
function taking an :class:`Engine`; async callers (cogs, the scheduler, API
routes) ship it to a worker thread with :func:`run_db`::

    from gavel.database.engine import engine_scope, run_db

    with engine_scope() as engine:          # DATABASE_URL from .env
        ok = await run_db(archive, engine, guild_id, user_id, "1234")

The engine is created once per process and passed explicitly to every
component; :func:`engine_scope` ties its lifetime to the process.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import ParamSpec, TypeVar

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from gavel.database.models import Base

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


# ---------------------------------------------------------------------------
# Engine creation
# ---------------------------------------------------------------------------
def create_db_engine(url: str | None = None) -> Engine:
    """Build a SQLAlchemy :class:`Engine` from *url* or ``DATABASE_URL``.

    The pool is sized for a single bot process plus the dashboard API:
    * ``pool_size=5`` — five persistent connections.
    * ``max_overflow=10`` — up to 10 extra connections under load.
    * ``pool_timeout=10`` — fail after 10 s if no connection is available.
    * ``pool_recycle=3600`` — recycle connections after 1 hour.

    Raises
    ------
    RuntimeError
        If no URL is given and ``DATABASE_URL`` is not set.
    """
    url = url or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError(
            "DATABASE_URL is not set.  "
            "Copy .env.example → .env and set a valid PostgreSQL URL."
        )

    engine = create_engine(
        url,
        echo=False,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_timeout=10,
        pool_recycle=3600,
    )
    logger.info("Database engine created → %s", engine.url.host)
    return engine


def init_db(engine: Engine) -> None:
    """Create all tables defined in :mod:`gavel.database.models`.

    Safe on every startup (``CREATE TABLE IF NOT EXISTS``).  Production
    schemas are managed by Alembic; this is the dev/test safety net.
    """
    Base.metadata.create_all(engine)
    logger.info("Database tables verified / created.")


@contextmanager
def engine_scope(url: str | None = None) -> Iterator[Engine]:
    """Create, initialise and finally dispose the process-wide engine."""
    engine = create_db_engine(url)
    try:
        init_db(engine)
        yield engine
    finally:
        engine.dispose()
        logger.info("Database engine disposed.")


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------
@contextmanager
def get_session(engine: Engine):
    """Yield a :class:`Session` that commits on success and rolls back on
    exception.  Objects stay readable after the block closes.
    """
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---------------------------------------------------------------------------
# Async bridge
# ---------------------------------------------------------------------------
async def run_db(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a **synchronous** database function on a background thread.

    Every store call made from a cog, the scheduler or an async route goes
    through this wrapper so the event loop is never blocked::

        entries = await run_db(list_active, engine, guild_id)
    """
    return await asyncio.to_thread(func, *args, **kwargs)
