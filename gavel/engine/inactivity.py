"""
gavel.engine.inactivity — Activity Status Evaluation
=====================================================

Pure function of (last activity, threshold, now) → :class:`ActivityStatus`::

    no activity ever                    → NEVER_ACTIVE
    days_since >= threshold             → INACTIVE
    days_since >  threshold // 2        → WARNING
    otherwise                           → ACTIVE

``days_since`` is the number of *whole* days elapsed, so 6 days 23 hours
counts as 6.
"""

from __future__ import annotations

import enum
from datetime import datetime, timedelta

from gavel.engine.validation import ensure_utc

ONE_DAY = timedelta(days=1)


class ActivityStatus(enum.StrEnum):
    NEVER_ACTIVE = "never_active"
    INACTIVE = "inactive"
    WARNING = "warning"
    ACTIVE = "active"

    @property
    def flagged(self) -> bool:
        """Statuses that land a lawyer in the inactivity alert."""
        return self in (ActivityStatus.NEVER_ACTIVE, ActivityStatus.INACTIVE)


def days_since(last_activity: datetime, now: datetime) -> int:
    """Whole days between *last_activity* and *now* (never negative)."""
    elapsed = ensure_utc(now) - ensure_utc(last_activity)
    return max(0, elapsed // ONE_DAY)


def evaluate_status(
    last_activity: datetime | None, threshold_days: int, now: datetime,
) -> ActivityStatus:
    """
    The WARNING band is strict (``days > threshold // 2``), not ``>=``:
    with a 7-day threshold, 3 days idle is still ACTIVE. Keep it strict.
    """
    if last_activity is None:
        return ActivityStatus.NEVER_ACTIVE

    days = days_since(last_activity, now)
    if days >= threshold_days:
        return ActivityStatus.INACTIVE
    if days > threshold_days // 2:
        return ActivityStatus.WARNING
    return ActivityStatus.ACTIVE
