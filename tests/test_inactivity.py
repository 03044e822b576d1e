"""
tests/test_inactivity.py — Activity Status Evaluation
=====================================================
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from conftest import NOW
from gavel.engine.inactivity import ActivityStatus, days_since, evaluate_status


class TestDaysSince:
    def test_whole_days_are_floored(self):
        assert days_since(NOW - timedelta(days=6, hours=23), NOW) == 6

    def test_exact_day_boundary(self):
        assert days_since(NOW - timedelta(days=7), NOW) == 7

    def test_future_timestamp_is_zero(self):
        assert days_since(NOW + timedelta(hours=5), NOW) == 0

    def test_naive_timestamp_is_treated_as_utc(self):
        naive = (NOW - timedelta(days=2)).replace(tzinfo=None)
        assert days_since(naive, NOW) == 2


class TestEvaluateStatus:
    """Threshold 7: warning band is 4-6 days, inactive from 7."""

    def test_never_active(self):
        assert evaluate_status(None, 7, NOW) is ActivityStatus.NEVER_ACTIVE

    def test_ten_days_is_inactive(self):
        assert evaluate_status(NOW - timedelta(days=10), 7, NOW) is ActivityStatus.INACTIVE

    def test_three_days_is_active(self):
        assert evaluate_status(NOW - timedelta(days=3), 7, NOW) is ActivityStatus.ACTIVE

    def test_five_days_is_warning(self):
        assert evaluate_status(NOW - timedelta(days=5), 7, NOW) is ActivityStatus.WARNING

    def test_threshold_reached_is_inactive(self):
        assert evaluate_status(NOW - timedelta(days=7), 7, NOW) is ActivityStatus.INACTIVE

    def test_just_under_threshold_is_warning(self):
        last = NOW - timedelta(days=6, hours=23, minutes=59)
        assert evaluate_status(last, 7, NOW) is ActivityStatus.WARNING

    def test_today_is_active(self):
        assert evaluate_status(NOW, 7, NOW) is ActivityStatus.ACTIVE

    def test_threshold_of_one(self):
        assert evaluate_status(NOW - timedelta(hours=5), 1, NOW) is ActivityStatus.ACTIVE
        assert evaluate_status(NOW - timedelta(days=1), 1, NOW) is ActivityStatus.INACTIVE

    def test_aware_non_utc_input(self):
        tz = datetime(2026, 3, 10, 12, 0, tzinfo=UTC).astimezone()
        assert evaluate_status(tz, 7, NOW) is ActivityStatus.WARNING


class TestFlagged:
    def test_only_never_active_and_inactive_are_flagged(self):
        assert ActivityStatus.NEVER_ACTIVE.flagged
        assert ActivityStatus.INACTIVE.flagged
        assert not ActivityStatus.WARNING.flagged
        assert not ActivityStatus.ACTIVE.flagged
