"""
tests/test_group_sync.py — Roster ↔ Role Reconciliation
=======================================================

Drives the reconciler with an in-memory :class:`MembershipSource` so the
full and incremental paths can be checked against the same snapshot.
"""

from __future__ import annotations

from conftest import GUILD, OTHER_GUILD, run_async
from gavel.database.models import RolePurpose
from gavel.errors import UpstreamUnavailable
from gavel.services import config_service, roster_service
from gavel.services.group_sync import (
    AUTO_SYNC,
    SyncAction,
    apply_role_change,
    full_resync,
    has_qualifying_role,
    resync_all,
)

LAWYER_ROLE = 11
SENIOR_ROLE = 12
OTHER_ROLE = 99


class FakeSource:
    """Membership snapshot: user id → role ids.  ``failing`` ids raise."""

    def __init__(self, members: dict[int, set[int]], failing: set[int] = frozenset()):
        self.members = members
        self.failing = set(failing)
        self.lookups: list[int] = []

    async def list_member_ids(self):
        return list(self.members)

    async def get_member_roles(self, user_id):
        self.lookups.append(user_id)
        if user_id in self.failing:
            raise UpstreamUnavailable(f"lookup failed for {user_id}")
        return self.members.get(user_id)


class BrokenSource:
    async def list_member_ids(self):
        raise UpstreamUnavailable("member list unavailable")

    async def get_member_roles(self, user_id):
        return None


def _sync_roles(engine, *role_ids, guild=GUILD):
    for rid in role_ids:
        config_service.add_role(engine, guild, rid, RolePurpose.ROSTER_SYNC)


class TestHasQualifyingRole:
    def test_any_role_is_enough(self):
        assert has_qualifying_role({OTHER_ROLE, SENIOR_ROLE}, {LAWYER_ROLE, SENIOR_ROLE})

    def test_multiple_roles_same_as_one(self):
        assert has_qualifying_role({LAWYER_ROLE, SENIOR_ROLE}, {LAWYER_ROLE, SENIOR_ROLE})

    def test_none_or_empty(self):
        assert not has_qualifying_role(None, {LAWYER_ROLE})
        assert not has_qualifying_role(set(), {LAWYER_ROLE})

    def test_no_overlap(self):
        assert not has_qualifying_role({OTHER_ROLE}, {LAWYER_ROLE})


class TestFullResync:
    def test_role_holders_are_added(self, db_engine):
        _sync_roles(db_engine, LAWYER_ROLE)
        source = FakeSource({1: {LAWYER_ROLE}, 2: {OTHER_ROLE}, 3: set()})

        result = run_async(full_resync(db_engine, GUILD, source))

        assert result.added == [1]
        assert result.archived == []
        assert roster_service.active_member_ids(db_engine, GUILD) == {1}
        assert roster_service.get_entry(db_engine, GUILD, 1).added_by == AUTO_SYNC

    def test_lost_role_is_archived(self, db_engine):
        _sync_roles(db_engine, LAWYER_ROLE)
        roster_service.add_or_reactivate(db_engine, GUILD, 1, "42")

        result = run_async(full_resync(db_engine, GUILD, FakeSource({1: {OTHER_ROLE}})))

        assert result.archived == [1]
        entry = roster_service.get_entry(db_engine, GUILD, 1)
        assert entry.archived is True
        assert entry.archived_by == AUTO_SYNC

    def test_member_who_left_is_archived(self, db_engine):
        _sync_roles(db_engine, LAWYER_ROLE)
        roster_service.add_or_reactivate(db_engine, GUILD, 7, "42")

        result = run_async(full_resync(db_engine, GUILD, FakeSource({})))

        assert result.archived == [7]

    def test_rostered_member_missing_from_partial_list_is_looked_up(self, db_engine):
        _sync_roles(db_engine, LAWYER_ROLE)
        roster_service.add_or_reactivate(db_engine, GUILD, 7, "42")

        class PartialSource(FakeSource):
            async def list_member_ids(self):
                return []

        source = PartialSource({7: {LAWYER_ROLE}})
        result = run_async(full_resync(db_engine, GUILD, source))

        assert result.archived == []
        assert 7 in source.lookups
        assert roster_service.is_active_member(db_engine, GUILD, 7)

    def test_archived_holder_is_reactivated(self, db_engine):
        _sync_roles(db_engine, LAWYER_ROLE)
        roster_service.add_or_reactivate(db_engine, GUILD, 1, "42", display_name="Jane")
        roster_service.archive(db_engine, GUILD, 1, "42")

        result = run_async(full_resync(db_engine, GUILD, FakeSource({1: {LAWYER_ROLE}})))

        assert result.added == [1]
        assert roster_service.get_entry(db_engine, GUILD, 1).display_name == "Jane"

    def test_second_run_is_a_no_op(self, db_engine):
        _sync_roles(db_engine, LAWYER_ROLE)
        source = FakeSource({1: {LAWYER_ROLE}, 2: {LAWYER_ROLE, SENIOR_ROLE}, 3: set()})

        first = run_async(full_resync(db_engine, GUILD, source))
        second = run_async(full_resync(db_engine, GUILD, source))

        assert first.changed
        assert not second.changed

    def test_failed_lookup_is_skipped_not_archived(self, db_engine):
        _sync_roles(db_engine, LAWYER_ROLE)
        roster_service.add_or_reactivate(db_engine, GUILD, 1, "42")
        source = FakeSource({1: {LAWYER_ROLE}, 2: {LAWYER_ROLE}}, failing={1})

        result = run_async(full_resync(db_engine, GUILD, source))

        assert result.added == [2]
        assert result.archived == []
        assert result.skipped == [1]
        assert roster_service.is_active_member(db_engine, GUILD, 1)

    def test_failed_lookup_for_non_rostered_member(self, db_engine):
        _sync_roles(db_engine, LAWYER_ROLE)
        source = FakeSource({1: {LAWYER_ROLE}, 2: {LAWYER_ROLE}}, failing={2})

        result = run_async(full_resync(db_engine, GUILD, source))

        assert result.added == [1]
        assert result.skipped == [2]

    def test_no_sync_roles_leaves_manual_roster_alone(self, db_engine):
        roster_service.add_or_reactivate(db_engine, GUILD, 1, "42")

        result = run_async(full_resync(db_engine, GUILD, FakeSource({1: set()})))

        assert not result.changed
        assert roster_service.is_active_member(db_engine, GUILD, 1)

    def test_explicit_role_set_overrides_config(self, db_engine):
        source = FakeSource({1: {SENIOR_ROLE}})
        result = run_async(full_resync(db_engine, GUILD, source, sync_role_ids={SENIOR_ROLE}))
        assert result.added == [1]


class TestResyncAll:
    def test_one_failing_guild_does_not_stop_the_rest(self, db_engine):
        _sync_roles(db_engine, LAWYER_ROLE, guild=GUILD)
        _sync_roles(db_engine, LAWYER_ROLE, guild=OTHER_GUILD)

        results = run_async(resync_all(db_engine, {
            GUILD: BrokenSource(),
            OTHER_GUILD: FakeSource({1: {LAWYER_ROLE}}),
        }))

        assert [r.guild_id for r in results] == [OTHER_GUILD]
        assert roster_service.active_member_ids(db_engine, OTHER_GUILD) == {1}


class TestApplyRoleChange:
    def test_gaining_role_adds(self, db_engine):
        _sync_roles(db_engine, LAWYER_ROLE)
        action = run_async(apply_role_change(db_engine, GUILD, 1, set(), {LAWYER_ROLE}))
        assert action is SyncAction.ADDED
        assert roster_service.is_active_member(db_engine, GUILD, 1)

    def test_losing_last_role_archives(self, db_engine):
        _sync_roles(db_engine, LAWYER_ROLE, SENIOR_ROLE)
        run_async(apply_role_change(db_engine, GUILD, 1, set(), {LAWYER_ROLE, SENIOR_ROLE}))

        partial = run_async(apply_role_change(
            db_engine, GUILD, 1, {LAWYER_ROLE, SENIOR_ROLE}, {SENIOR_ROLE},
        ))
        assert partial is SyncAction.NONE
        assert roster_service.is_active_member(db_engine, GUILD, 1)

        gone = run_async(apply_role_change(db_engine, GUILD, 1, {SENIOR_ROLE}, set()))
        assert gone is SyncAction.ARCHIVED
        assert not roster_service.is_active_member(db_engine, GUILD, 1)

    def test_unrelated_role_change_is_ignored(self, db_engine):
        _sync_roles(db_engine, LAWYER_ROLE)
        action = run_async(apply_role_change(db_engine, GUILD, 1, set(), {OTHER_ROLE}))
        assert action is SyncAction.NONE
        assert roster_service.get_entry(db_engine, GUILD, 1) is None

    def test_member_leaving_archives(self, db_engine):
        _sync_roles(db_engine, LAWYER_ROLE)
        roster_service.add_or_reactivate(db_engine, GUILD, 1, "42")
        action = run_async(apply_role_change(db_engine, GUILD, 1, {LAWYER_ROLE}, None))
        assert action is SyncAction.ARCHIVED

    def test_already_active_manual_entry_reports_no_change(self, db_engine):
        _sync_roles(db_engine, LAWYER_ROLE)
        roster_service.add_or_reactivate(db_engine, GUILD, 1, "42")
        action = run_async(apply_role_change(db_engine, GUILD, 1, set(), {LAWYER_ROLE}))
        assert action is SyncAction.NONE
        assert roster_service.get_entry(db_engine, GUILD, 1).added_by == "42"

    def test_no_sync_roles_configured(self, db_engine):
        action = run_async(apply_role_change(db_engine, GUILD, 1, set(), {LAWYER_ROLE}))
        assert action is SyncAction.NONE

    def test_incremental_after_full_resync_is_a_no_op(self, db_engine):
        _sync_roles(db_engine, LAWYER_ROLE)
        snapshot = {1: {LAWYER_ROLE}, 2: {OTHER_ROLE}}
        run_async(full_resync(db_engine, GUILD, FakeSource(snapshot)))

        for uid, roles in snapshot.items():
            action = run_async(apply_role_change(db_engine, GUILD, uid, roles, roles))
            assert action is SyncAction.NONE
        assert roster_service.active_member_ids(db_engine, GUILD) == {1}
