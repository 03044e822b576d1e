"""
tests/test_alert_service.py — Inactivity Alert Sweep
====================================================
"""

from __future__ import annotations

from datetime import timedelta

from conftest import GUILD, NOW, OTHER_GUILD, run_async
from gavel.engine.inactivity import ActivityStatus
from gavel.services import activity_service, config_service, roster_service
from gavel.services.alert_service import build_alert_payload, run_inactivity_sweep
from gavel.services.config_service import GuildSettings
from gavel.services.inactivity_service import InactiveLawyer

THIRD_GUILD = 1_000_000_000_000_000_003
ALERT_CHANNEL = 4242


class RecordingNotifier:
    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    async def send_alert(self, payload):
        if payload.guild_id in self.fail_for:
            raise RuntimeError("channel gone")
        self.sent.append(payload)


def _lawyer(engine, guild, user_id, days_ago=None):
    roster_service.add_or_reactivate(engine, guild, user_id, "42", now=NOW - timedelta(days=60))
    if days_ago is not None:
        activity_service.record(
            engine, guild, user_id, 500, "general", now=NOW - timedelta(days=days_ago),
        )


class TestBuildAlertPayload:
    def _inactive(self):
        return [
            InactiveLawyer(1, ActivityStatus.NEVER_ACTIVE, None, None, NOW),
            InactiveLawyer(2, ActivityStatus.INACTIVE, NOW - timedelta(days=12), 12, NOW),
        ]

    def test_status_text(self):
        settings = GuildSettings(guild_id=GUILD, alert_channel_id=ALERT_CHANNEL)
        payload = build_alert_payload(GUILD, settings, self._inactive())
        assert payload.destination_id == ALERT_CHANNEL
        assert payload.threshold_days == 7
        assert [e.status_text for e in payload.entries] == [
            "No recorded activity",
            "Last active 12 days ago",
        ]

    def test_no_destination(self):
        settings = GuildSettings(guild_id=GUILD)
        assert build_alert_payload(GUILD, settings, self._inactive()) is None

    def test_nobody_inactive(self):
        settings = GuildSettings(guild_id=GUILD, alert_channel_id=ALERT_CHANNEL)
        assert build_alert_payload(GUILD, settings, []) is None


class TestRunInactivitySweep:
    def test_sends_for_guild_with_inactive_lawyers(self, db_engine):
        config_service.set_alert_channel(db_engine, GUILD, ALERT_CHANNEL)
        _lawyer(db_engine, GUILD, 1, days_ago=10)
        _lawyer(db_engine, GUILD, 2, days_ago=1)
        notifier = RecordingNotifier()

        report = run_async(run_inactivity_sweep(db_engine, [GUILD], notifier, now=NOW))

        assert report.sent == [GUILD]
        (payload,) = notifier.sent
        assert [e.user_id for e in payload.entries] == [1]
        assert payload.entries[0].days_since == 10

    def test_skips_guild_without_destination(self, db_engine):
        _lawyer(db_engine, GUILD, 1)
        notifier = RecordingNotifier()

        report = run_async(run_inactivity_sweep(db_engine, [GUILD], notifier, now=NOW))

        assert report.skipped == [GUILD]
        assert notifier.sent == []

    def test_skips_guild_where_everyone_is_active(self, db_engine):
        config_service.set_alert_channel(db_engine, GUILD, ALERT_CHANNEL)
        _lawyer(db_engine, GUILD, 1, days_ago=0)

        report = run_async(run_inactivity_sweep(
            db_engine, [GUILD], RecordingNotifier(), now=NOW,
        ))
        assert report.skipped == [GUILD]

    def test_failing_guild_does_not_stop_the_sweep(self, db_engine):
        for guild in (GUILD, OTHER_GUILD, THIRD_GUILD):
            config_service.set_alert_channel(db_engine, guild, ALERT_CHANNEL)
            _lawyer(db_engine, guild, 1)
        notifier = RecordingNotifier(fail_for={OTHER_GUILD})

        report = run_async(run_inactivity_sweep(
            db_engine, [GUILD, OTHER_GUILD, THIRD_GUILD], notifier, now=NOW,
        ))

        assert report.sent == [GUILD, THIRD_GUILD]
        assert report.failed == [OTHER_GUILD]

    def test_uses_guild_threshold(self, db_engine):
        config_service.set_alert_channel(db_engine, GUILD, ALERT_CHANNEL)
        config_service.set_inactivity_days(db_engine, GUILD, 14)
        _lawyer(db_engine, GUILD, 1, days_ago=10)

        report = run_async(run_inactivity_sweep(
            db_engine, [GUILD], RecordingNotifier(), now=NOW,
        ))
        assert report.skipped == [GUILD]
