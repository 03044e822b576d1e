"""
tests/test_profile_service.py — Lawyer Profile View
===================================================
"""

from __future__ import annotations

from datetime import timedelta

from conftest import GUILD, NOW
from gavel.engine.inactivity import ActivityStatus
from gavel.services import (
    activity_service,
    config_service,
    discipline_service,
    profile_service,
    roster_service,
)


def _seed(engine):
    roster_service.add_or_reactivate(
        engine, GUILD, 1, "42", display_name="Jane", now=NOW - timedelta(days=90),
    )
    for days in (1, 5, 10, 20, 40):
        activity_service.record(
            engine, GUILD, 1, 500, "filings", now=NOW - timedelta(days=days),
        )


class TestBuildProfile:
    def test_unknown_user(self, db_engine):
        assert profile_service.build_profile(db_engine, GUILD, 1, now=NOW) is None

    def test_window_counts_and_status(self, db_engine):
        _seed(db_engine)
        profile = profile_service.build_profile(db_engine, GUILD, 1, now=NOW)

        assert profile.entry.display_name == "Jane"
        assert profile.counts == {7: 2, 14: 3, 30: 4}
        assert profile.days_since == 1
        assert profile.status is ActivityStatus.ACTIVE
        assert profile.threshold_days == 7

    def test_recent_is_newest_first_and_limited(self, db_engine):
        _seed(db_engine)
        profile = profile_service.build_profile(db_engine, GUILD, 1, now=NOW, recent_limit=2)
        assert len(profile.recent) == 2
        assert profile.recent[0].logged_at > profile.recent[1].logged_at

    def test_guild_threshold_is_used(self, db_engine):
        _seed(db_engine)
        config_service.set_inactivity_days(db_engine, GUILD, 1)
        profile = profile_service.build_profile(db_engine, GUILD, 1, now=NOW)
        assert profile.status is ActivityStatus.INACTIVE

    def test_notes_and_strikes(self, db_engine):
        _seed(db_engine)
        for i in range(4):
            discipline_service.add_note(
                db_engine, GUILD, 1, 42, f"note {i}", now=NOW - timedelta(hours=4 - i),
            )
        discipline_service.add_strike(db_engine, GUILD, 1, 42, "missed deadline", now=NOW)

        profile = profile_service.build_profile(db_engine, GUILD, 1, now=NOW, notes_limit=3)
        assert [n.note for n in profile.notes] == ["note 3", "note 2", "note 1"]
        assert [s.reason for s in profile.strikes] == ["missed deadline"]

    def test_archived_entry_keeps_its_profile(self, db_engine):
        _seed(db_engine)
        roster_service.archive(db_engine, GUILD, 1, "42", now=NOW)
        profile = profile_service.build_profile(db_engine, GUILD, 1, now=NOW)
        assert profile is not None
        assert profile.entry.archived is True
        assert profile.counts[30] == 4

    def test_never_active(self, db_engine):
        roster_service.add_or_reactivate(db_engine, GUILD, 1, "42")
        profile = profile_service.build_profile(db_engine, GUILD, 1, now=NOW)
        assert profile.status is ActivityStatus.NEVER_ACTIVE
        assert profile.last_activity is None
        assert profile.days_since is None
        assert profile.counts == {7: 0, 14: 0, 30: 0}
