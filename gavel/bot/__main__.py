"""
gavel.bot.__main__ — Entry point for ``python -m gavel.bot``
============================================================

Wiring:
1. Load .env (secrets).
2. Load config.yaml (infrastructure settings).
3. Create the SQLAlchemy engine and ensure tables exist.
4. Create the GavelBot and hand it config + engine.
5. Start the bot (blocking — runs the asyncio event loop).
6. Dispose the engine on exit.

Run with::

    python -m gavel.bot
"""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv

from gavel.bot.core import GavelBot
from gavel.config import load_config
from gavel.database.engine import engine_scope

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("gavel")


def main() -> None:
    """Bootstrap and run the Gavel bot."""

    # 1. Environment variables (secrets).
    load_dotenv()

    token = os.getenv("DISCORD_TOKEN")
    if not token or token == "your-discord-bot-token-here":
        logger.critical(
            "DISCORD_TOKEN is not set.  "
            "Copy .env.example → .env and paste your bot token."
        )
        sys.exit(1)

    # 2. Soft configuration.
    cfg = load_config()
    logger.info("Config loaded — %s", cfg.bot_name)

    # 3. Database (created, initialised and disposed by the scope).
    with engine_scope() as engine:
        # 4. Bot.
        bot = GavelBot(cfg=cfg, engine=engine)

        # 5. Run (blocks until Ctrl+C or SIGTERM).
        logger.info("Starting Gavel bot…")
        try:
            bot.run(token, log_handler=None)
        except KeyboardInterrupt:
            logger.info("Shutting down gracefully…")


if __name__ == "__main__":
    main()
