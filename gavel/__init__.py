"""
Gavel — Lawyer Roster & Activity Tracking for Discord
======================================================
Keeps a per-server roster of lawyers in step with their Discord roles,
logs their activity in monitored channels, and flags anyone who has gone
quiet for too long.

Package layout::

    gavel/
    ├── config.py          # YAML → typed Python config
    ├── errors.py          # GavelError, InvalidInput, UpstreamUnavailable
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   └── models.py      # ORM models (roster, activity, notes, strikes, config)
    ├── engine/
    │   ├── inactivity.py  # ActivityStatus + pure evaluator
    │   ├── scopes.py      # Monitored channel / category membership
    │   ├── scheduler.py   # Alert scheduler state machine
    │   ├── validation.py  # Boundary validators
    │   └── cache.py       # TTL cache
    ├── services/
    │   ├── roster_service.py      # Add / archive / reactivate / edit
    │   ├── activity_service.py    # Activity ledger
    │   ├── discipline_service.py  # Notes and strikes
    │   ├── config_service.py      # Per-guild settings
    │   ├── group_sync.py          # Roster ↔ role reconciliation
    │   ├── inactivity_service.py  # Inactive set + roster review
    │   ├── profile_service.py     # One-lawyer profile view
    │   ├── alert_service.py       # Inactivity alert sweep
    │   └── embeds.py              # Discord embed builders
    ├── bot/
    │   ├── core.py        # Bot subclass, cog loader
    │   └── cogs/          # activity, membership, roster, settings, tasks
    └── api/
        ├── main.py        # FastAPI app
        ├── deps.py        # Engine / config / JWT dependencies
        ├── authz.py       # Dashboard-role check via Discord REST
        └── routes/        # Roster read + edit endpoints
"""

__version__ = "0.1.0"
