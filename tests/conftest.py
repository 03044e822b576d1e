"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import asyncio
import os
from datetime import UTC, datetime

# ---------------------------------------------------------------------------
# Ensure a valid JWT_SECRET is always set for test runs.
# This must happen before any import of gavel.api.deps which validates
# the secret at module-load time.
# ---------------------------------------------------------------------------
_TEST_JWT_SECRET = "test-secret-for-pytest-only-" + "x" * 40  # > 32 chars
os.environ.setdefault("JWT_SECRET", _TEST_JWT_SECRET)

import pytest  # noqa: E402
from sqlalchemy import BigInteger, Engine, create_engine  # noqa: E402
from sqlalchemy.ext.compiler import compiles  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from gavel.database.models import Base  # noqa: E402


# ---------------------------------------------------------------------------
# SQLite renders BigInteger as INTEGER so snowflake columns behave like the
# PostgreSQL BIGINT they are in production.
# ---------------------------------------------------------------------------
@compiles(BigInteger, "sqlite")
def _compile_bigint_as_integer(type_, compiler, **kw):
    return "INTEGER"


GUILD = 1_000_000_000_000_000_001
OTHER_GUILD = 1_000_000_000_000_000_002
NOW = datetime(2026, 3, 15, 12, 0, tzinfo=UTC)


def run_async(coro):
    """Run a coroutine to completion in a fresh event loop."""
    return asyncio.get_event_loop_policy().new_event_loop().run_until_complete(coro)


@pytest.fixture
def db_engine() -> Engine:
    """Create an in-memory SQLite engine with all Gavel tables.

    Uses StaticPool so all threads share the same in-memory database
    (required by ``asyncio.to_thread`` used in ``run_db``).
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


def make_token(sub: str = "99999", username: str = "FixtureUser") -> str:
    """Create a dashboard JWT.  Usable as both a fixture and a factory function."""
    import jwt

    from gavel.api.deps import JWT_ALGORITHM, JWT_SECRET

    return jwt.encode({"sub": sub, "username": username}, JWT_SECRET, algorithm=JWT_ALGORITHM)


@pytest.fixture
def user_token():
    return make_token()
