"""
gavel.config — YAML Configuration Loader
=========================================

Reads ``config.yaml`` for **infrastructure-only** settings (bot identity,
dashboard port, scheduler cadence, cache TTLs).  Per-guild behaviour
(alert channel, threshold, monitored scopes, roles) lives in the database
and is edited through ``/config`` — see :mod:`gavel.services.config_service`.

Secrets never go in the YAML file; they come from the environment
(``DISCORD_TOKEN``, ``DATABASE_URL``, ``JWT_SECRET``, optional
``DEV_GUILD_ID``), loaded from ``.env`` by python-dotenv in the entry points.

Usage::

    from gavel.config import load_config

    cfg = load_config()              # reads ./config.yaml by default
    print(cfg.alert_interval)        # datetime.timedelta(days=1)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

import yaml


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class GavelConfig:
    """Immutable configuration loaded from ``config.yaml``.

    Every key is optional; missing keys fall back to the defaults below.
    """

    bot_name: str = "Gavel"
    dashboard_port: int = 8000

    # Inactivity alert cadence
    alert_interval_hours: float = 24
    kickoff_delay_seconds: float = 10

    # Dashboard authorization lookups are cached this long
    auth_cache_ttl_seconds: float = 60

    # Ticket activity per (guild, lawyer) is cached this long
    ticket_cache_ttl_seconds: float = 60

    notes_view_limit: int = 10

    @property
    def alert_interval(self) -> timedelta:
        return timedelta(hours=self.alert_interval_hours)

    @property
    def kickoff_delay(self) -> timedelta:
        return timedelta(seconds=self.kickoff_delay_seconds)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> GavelConfig:
    """Read *path* and return a :class:`GavelConfig` instance.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    ValueError
        If a value has the wrong type or is out of range.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    defaults = GavelConfig()
    cfg = GavelConfig(
        bot_name=str(raw.get("bot_name", defaults.bot_name)),
        dashboard_port=int(raw.get("dashboard_port", defaults.dashboard_port)),
        alert_interval_hours=float(raw.get("alert_interval_hours", defaults.alert_interval_hours)),
        kickoff_delay_seconds=float(
            raw.get("kickoff_delay_seconds", defaults.kickoff_delay_seconds)
        ),
        auth_cache_ttl_seconds=float(
            raw.get("auth_cache_ttl_seconds", defaults.auth_cache_ttl_seconds)
        ),
        ticket_cache_ttl_seconds=float(
            raw.get("ticket_cache_ttl_seconds", defaults.ticket_cache_ttl_seconds)
        ),
        notes_view_limit=int(raw.get("notes_view_limit", defaults.notes_view_limit)),
    )

    if cfg.alert_interval_hours <= 0:
        raise ValueError("alert_interval_hours must be positive")
    if cfg.kickoff_delay_seconds < 0:
        raise ValueError("kickoff_delay_seconds cannot be negative")
    if cfg.auth_cache_ttl_seconds <= 0:
        raise ValueError("auth_cache_ttl_seconds must be positive")
    if cfg.ticket_cache_ttl_seconds <= 0:
        raise ValueError("ticket_cache_ttl_seconds must be positive")
    if cfg.notes_view_limit < 1:
        raise ValueError("notes_view_limit must be at least 1")
    return cfg
