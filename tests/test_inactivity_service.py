"""
tests/test_inactivity_service.py — Roster Inactivity Views
==========================================================
"""

from __future__ import annotations

from datetime import timedelta

from conftest import GUILD, NOW, OTHER_GUILD
from gavel.engine.inactivity import ActivityStatus
from gavel.services import activity_service, inactivity_service, roster_service

HIRED = NOW - timedelta(days=60)


def _lawyer(engine, user_id, *, days_ago=None, guild=GUILD, added=HIRED):
    roster_service.add_or_reactivate(engine, guild, user_id, "42", now=added)
    if days_ago is not None:
        activity_service.record(
            engine, guild, user_id, 500, "general", now=NOW - timedelta(days=days_ago),
        )


class TestGetInactiveSet:
    def test_flags_inactive_and_never_active_only(self, db_engine):
        _lawyer(db_engine, 1, days_ago=10)
        _lawyer(db_engine, 2)
        _lawyer(db_engine, 3, days_ago=2)
        _lawyer(db_engine, 4, days_ago=5)

        flagged = inactivity_service.get_inactive_set(db_engine, GUILD, 7, now=NOW)
        assert [(x.user_id, x.status) for x in flagged] == [
            (2, ActivityStatus.NEVER_ACTIVE),
            (1, ActivityStatus.INACTIVE),
        ]

    def test_never_active_first_then_oldest_activity(self, db_engine):
        _lawyer(db_engine, 1, days_ago=10)
        _lawyer(db_engine, 2, days_ago=30)
        _lawyer(db_engine, 3)

        flagged = inactivity_service.get_inactive_set(db_engine, GUILD, 7, now=NOW)
        assert [x.user_id for x in flagged] == [3, 2, 1]
        assert flagged[0].days_since is None
        assert flagged[1].days_since == 30

    def test_never_active_ties_follow_roster_order(self, db_engine):
        _lawyer(db_engine, 9, added=HIRED)
        _lawyer(db_engine, 5, added=HIRED + timedelta(days=1))

        flagged = inactivity_service.get_inactive_set(db_engine, GUILD, 7, now=NOW)
        assert [x.user_id for x in flagged] == [9, 5]

    def test_archived_entries_are_excluded(self, db_engine):
        _lawyer(db_engine, 1, days_ago=40)
        roster_service.archive(db_engine, GUILD, 1, "42", now=NOW)
        assert inactivity_service.get_inactive_set(db_engine, GUILD, 7, now=NOW) == []

    def test_threshold_changes_the_set(self, db_engine):
        _lawyer(db_engine, 1, days_ago=10)
        assert inactivity_service.get_inactive_set(db_engine, GUILD, 14, now=NOW) == []
        assert len(inactivity_service.get_inactive_set(db_engine, GUILD, 7, now=NOW)) == 1

    def test_other_guild_activity_does_not_count(self, db_engine):
        _lawyer(db_engine, 1)
        _lawyer(db_engine, 1, days_ago=1, guild=OTHER_GUILD)
        flagged = inactivity_service.get_inactive_set(db_engine, GUILD, 7, now=NOW)
        assert [x.status for x in flagged] == [ActivityStatus.NEVER_ACTIVE]


class TestReviewRoster:
    def test_every_active_lawyer_in_roster_order(self, db_engine):
        _lawyer(db_engine, 1, days_ago=10)
        _lawyer(db_engine, 2)
        _lawyer(db_engine, 3, days_ago=1)
        _lawyer(db_engine, 4, days_ago=5)

        rows = inactivity_service.review_roster(db_engine, GUILD, 7, now=NOW)
        assert [(r.user_id, r.status) for r in rows] == [
            (1, ActivityStatus.INACTIVE),
            (2, ActivityStatus.NEVER_ACTIVE),
            (3, ActivityStatus.ACTIVE),
            (4, ActivityStatus.WARNING),
        ]

    def test_counts_and_days(self, db_engine):
        _lawyer(db_engine, 1, days_ago=3)
        activity_service.record(db_engine, GUILD, 1, 500, "general", now=NOW - timedelta(days=45))

        (row,) = inactivity_service.review_roster(db_engine, GUILD, 7, now=NOW)
        assert row.days_since == 3
        assert row.activity_30d == 1

    def test_empty_roster(self, db_engine):
        assert inactivity_service.review_roster(db_engine, GUILD, 7, now=NOW) == []
