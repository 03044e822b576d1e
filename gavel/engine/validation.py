"""
gavel.engine.validation — Input Validation
===========================================

Pure validators run at the boundary (slash commands, API bodies) before any
store call.  Each raises :class:`~gavel.errors.InvalidInput` naming the field.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

from gavel.errors import InvalidInput

DISPLAY_NAME_MAX = 100
NOTE_MAX = 1000
REASON_MAX = 500
MIN_INACTIVITY_DAYS = 1
MAX_INACTIVITY_DAYS = 90


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo) and convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_datetime(
    value: str | date | datetime | None, field: str, *, end_of_day: bool = False,
) -> datetime:
    """Parse an ISO-8601 date or datetime into an aware UTC datetime.

    A bare date means midnight UTC, or the last microsecond of that day when
    *end_of_day* is set (inclusive upper bounds).  A naive datetime is taken
    as UTC.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidInput(field, f"{field.replace('_', ' ')} is required")

    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) == 10:
                value = date.fromisoformat(text)
            else:
                return ensure_utc(datetime.fromisoformat(text))
        except ValueError:
            raise InvalidInput(field, f"not a valid date: {value!r}")

    day = datetime(value.year, value.month, value.day, tzinfo=UTC)
    if end_of_day:
        return day + (timedelta(days=1) - timedelta(microseconds=1))
    return day


def parse_hire_date(value: str | date | datetime | None) -> datetime:
    return parse_datetime(value, "hire_date")


def clean_display_name(value: str | None) -> str:
    name = (value or "").strip()
    if not name:
        raise InvalidInput("display_name", "display name cannot be empty")
    if len(name) > DISPLAY_NAME_MAX:
        raise InvalidInput(
            "display_name", f"display name is longer than {DISPLAY_NAME_MAX} characters",
        )
    return name


def clean_note_text(value: str | None) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidInput("note", "note cannot be empty")
    if len(text) > NOTE_MAX:
        raise InvalidInput("note", f"note is longer than {NOTE_MAX} characters")
    return text


def clean_strike_reason(value: str | None) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidInput("reason", "a strike needs a reason")
    if len(text) > REASON_MAX:
        raise InvalidInput("reason", f"reason is longer than {REASON_MAX} characters")
    return text


def validate_inactivity_days(value: int) -> int:
    """Threshold must be a whole number of days within 1..90."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput("inactivity_days", "must be a whole number of days")
    if not MIN_INACTIVITY_DAYS <= value <= MAX_INACTIVITY_DAYS:
        raise InvalidInput(
            "inactivity_days",
            f"must be between {MIN_INACTIVITY_DAYS} and {MAX_INACTIVITY_DAYS}",
        )
    return value
