"""
Clock and timezone helpers.

Every function takes the current time explicitly so that callers (and
tests) decide which clock and local timezone are in effect.
"""

from datetime import date, datetime, timedelta, tzinfo
from typing import Optional

from shared.models import DateRange

TODAY = "today"
YESTERDAY = "yesterday"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def local_now(tz: Optional[tzinfo] = None) -> datetime:
    """Current time as an aware datetime in ``tz`` (system local when None)."""
    if tz is None:
        return datetime.now().astimezone()
    return datetime.now(tz)


def format_tz_offset(moment: datetime) -> str:
    """Render the UTC offset of ``moment`` as a signed HHMM string.

    The sign follows the raw "UTC minus local" offset in minutes: zero or
    negative renders "+", positive renders "-". UTC+01:00 gives "+0100",
    UTC-05:00 gives "-0500".
    """
    offset = moment.utcoffset()
    local_minutes = int(offset.total_seconds() // 60) if offset is not None else 0
    raw = -local_minutes
    sign = "+" if raw <= 0 else "-"
    hours, minutes = divmod(abs(raw), 60)
    return f"{sign}{hours:02d}{minutes:02d}"


def format_timestamp(moment: datetime, tz: Optional[tzinfo] = None) -> str:
    """Format ``moment`` in the local timezone with its offset suffix."""
    local = moment.astimezone(tz) if tz is not None else moment.astimezone()
    return f"{local.strftime(TIMESTAMP_FORMAT)} {format_tz_offset(local)}"


def _day_bounds(day: date, offset: str) -> DateRange:
    return DateRange(
        since=f"{day.isoformat()} 00:00:00 {offset}",
        before=f"{day.isoformat()} 23:59:59 {offset}",
    )


def default_range(now: datetime) -> DateRange:
    """First through last calendar day of the month before ``now``."""
    offset = format_tz_offset(now)
    first_of_month = now.date().replace(day=1)
    last_of_previous = first_of_month - timedelta(days=1)
    first_of_previous = last_of_previous.replace(day=1)
    return DateRange(
        since=f"{first_of_previous.isoformat()} 00:00:00 {offset}",
        before=f"{last_of_previous.isoformat()} 23:59:59 {offset}",
    )


def day_range(day: str, now: datetime) -> DateRange:
    """Resolve "today", "yesterday" or YYYY-MM-DD into a one-day range.

    Raises:
        ValueError: if ``day`` is none of the accepted forms
    """
    key = day.strip().lower()
    if key == TODAY:
        target = now.date()
    elif key == YESTERDAY:
        target = now.date() - timedelta(days=1)
    else:
        try:
            target = date.fromisoformat(key)
        except ValueError:
            raise ValueError(f"Unrecognized day: {day!r} (use today, yesterday or YYYY-MM-DD)")
    return _day_bounds(target, format_tz_offset(now))


def resolve_before(before: str, now: datetime) -> str:
    """Replace the "today" sentinel with the current local time."""
    if before.strip().lower() == TODAY:
        return f"{now.strftime(TIMESTAMP_FORMAT)} {format_tz_offset(now)}"
    return before
