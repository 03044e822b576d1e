"""
gavel.engine.scheduler — Inactivity Alert Scheduler
====================================================

Two triggers drive the inactivity sweep:

1. a one-time kickoff ``kickoff_delay`` after start (10 s by default) so a
   restart surfaces roster state without waiting a full day, then
2. a fixed cadence of ``interval`` (24 h by default), measured from the
   previous run.

:class:`AlertScheduler` owns that timing as a small state machine over an
injectable clock.  Something else calls :meth:`AlertScheduler.tick` often
(the bot's ``tasks.loop``); tests call it with a virtual clock instead.

States::

    WAITING_KICKOFF ──tick(due)──► RUNNING ──► WAITING_INTERVAL ──tick(due)──► RUNNING ...
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = timedelta(hours=24)
DEFAULT_KICKOFF_DELAY = timedelta(seconds=10)


def utc_now() -> datetime:
    return datetime.now(UTC)


class SchedulerState(enum.StrEnum):
    WAITING_KICKOFF = "waiting_kickoff"
    RUNNING = "running"
    WAITING_INTERVAL = "waiting_interval"


class AlertScheduler:
    """Decides when the next sweep is due and runs it."""

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = utc_now,
        interval: timedelta = DEFAULT_INTERVAL,
        kickoff_delay: timedelta = DEFAULT_KICKOFF_DELAY,
    ) -> None:
        self._clock = clock
        self.interval = interval
        self.kickoff_delay = kickoff_delay
        self.started_at = clock()
        self.next_run_at = self.started_at + kickoff_delay
        self.last_run_at: datetime | None = None
        self.state = SchedulerState.WAITING_KICKOFF
        self.runs = 0
        self._lock = asyncio.Lock()

    def is_due(self, now: datetime | None = None) -> bool:
        if self.state is SchedulerState.RUNNING:
            return False
        return (now or self._clock()) >= self.next_run_at

    def seconds_until_due(self, now: datetime | None = None) -> float:
        remaining = (self.next_run_at - (now or self._clock())).total_seconds()
        return max(0.0, remaining)

    async def tick(self, sweep: Callable[[], Awaitable[object]]) -> bool:
        """Run *sweep* if a run is due.  Returns whether it ran.

        A failing sweep is logged; the schedule still advances so one bad
        run cannot cause a tight retry loop.
        """
        if not self.is_due():
            return False

        async with self._lock:
            if not self.is_due():
                return False
            self.state = SchedulerState.RUNNING
            started = self._clock()
            try:
                await sweep()
            except Exception:
                logger.exception("Inactivity sweep failed", extra={"task": "inactivity_alert"})
            finally:
                self.last_run_at = started
                self.next_run_at = started + self.interval
                self.state = SchedulerState.WAITING_INTERVAL
                self.runs += 1
            logger.info(
                "Inactivity sweep #%d finished; next run at %s",
                self.runs, self.next_run_at.isoformat(),
            )
            return True
