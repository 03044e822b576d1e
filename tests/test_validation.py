"""
tests/test_validation.py — Boundary Validators
==============================================
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from gavel.engine.validation import (
    DISPLAY_NAME_MAX,
    NOTE_MAX,
    REASON_MAX,
    clean_display_name,
    clean_note_text,
    clean_strike_reason,
    ensure_utc,
    parse_datetime,
    parse_hire_date,
    validate_inactivity_days,
)
from gavel.errors import InvalidInput


class TestEnsureUtc:
    def test_naive_gets_utc(self):
        assert ensure_utc(datetime(2026, 1, 1)).tzinfo is UTC

    def test_aware_is_converted(self):
        plus_two = datetime(2026, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert ensure_utc(plus_two) == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


class TestParseDatetime:
    def test_bare_date_is_midnight_utc(self):
        assert parse_hire_date("2025-06-01") == datetime(2025, 6, 1, tzinfo=UTC)

    def test_full_timestamp(self):
        assert parse_hire_date("2025-06-01T10:30:00+00:00") == datetime(
            2025, 6, 1, 10, 30, tzinfo=UTC,
        )

    def test_date_object(self):
        assert parse_hire_date(date(2025, 6, 1)) == datetime(2025, 6, 1, tzinfo=UTC)

    def test_garbage_is_rejected(self):
        with pytest.raises(InvalidInput) as exc:
            parse_hire_date("last tuesday")
        assert exc.value.field == "hire_date"

    def test_empty_is_rejected(self):
        with pytest.raises(InvalidInput, match="hire date is required"):
            parse_hire_date("   ")

    def test_field_name_is_carried(self):
        with pytest.raises(InvalidInput) as exc:
            parse_datetime("nope", "start")
        assert exc.value.field == "start"

    def test_bare_date_end_of_day(self):
        assert parse_datetime("2026-03-03", "end", end_of_day=True) == datetime(
            2026, 3, 3, 23, 59, 59, 999999, tzinfo=UTC,
        )
        assert parse_datetime(date(2026, 3, 3), "end", end_of_day=True).day == 3

    def test_end_of_day_leaves_timestamps_alone(self):
        assert parse_datetime("2026-03-03T08:00:00+00:00", "end", end_of_day=True) == datetime(
            2026, 3, 3, 8, 0, tzinfo=UTC,
        )


class TestTextFields:
    def test_display_name_is_stripped(self):
        assert clean_display_name("  Jane Doe ") == "Jane Doe"

    def test_display_name_blank(self):
        with pytest.raises(InvalidInput):
            clean_display_name("   ")

    def test_display_name_too_long(self):
        with pytest.raises(InvalidInput):
            clean_display_name("x" * (DISPLAY_NAME_MAX + 1))

    def test_note_limits(self):
        assert clean_note_text("ok") == "ok"
        with pytest.raises(InvalidInput):
            clean_note_text("")
        with pytest.raises(InvalidInput):
            clean_note_text("x" * (NOTE_MAX + 1))

    def test_reason_limits(self):
        assert clean_strike_reason(" missed hearing ") == "missed hearing"
        with pytest.raises(InvalidInput):
            clean_strike_reason(None)
        with pytest.raises(InvalidInput):
            clean_strike_reason("x" * (REASON_MAX + 1))


class TestInactivityDays:
    @pytest.mark.parametrize("days", [1, 7, 90])
    def test_in_range(self, days):
        assert validate_inactivity_days(days) == days

    @pytest.mark.parametrize("days", [0, -3, 91])
    def test_out_of_range(self, days):
        with pytest.raises(InvalidInput):
            validate_inactivity_days(days)

    @pytest.mark.parametrize("days", [True, 7.5, "7"])
    def test_not_an_int(self, days):
        with pytest.raises(InvalidInput):
            validate_inactivity_days(days)
