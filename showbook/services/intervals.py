"""Helpers for turning a booking's date/time text into wall-clock intervals.

Bookings keep their date and times as the raw text the user typed, so every
helper here is total: empty or malformed input yields ``None`` (or ``0``)
instead of raising.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta

from dateutil.parser import isoparser

_iso = isoparser()
_FULL_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")

ONE_DAY = timedelta(days=1)


def parse_date(text: str | None) -> date | None:
    """Parse an ISO ``YYYY-MM-DD`` date; truncated and basic forms are rejected."""
    if not text:
        return None
    text = text.strip()
    if not _FULL_DATE.fullmatch(text):
        return None
    try:
        return _iso.parse_isodate(text)
    except (ValueError, OverflowError):
        return None


def parse_time(text: str | None) -> time | None:
    """Parse an ``HH:MM`` or ``HH:MM:SS`` time of day."""
    if not text:
        return None
    try:
        parsed = _iso.parse_isotime(text.strip())
    except (ValueError, OverflowError):
        return None
    # bookings are local wall-clock; an offset suffix is ignored
    return parsed.replace(tzinfo=None)


def anchor(date_text: str | None, time_text: str | None) -> datetime | None:
    """Combine a date and a time of day into a naive datetime."""
    day = parse_date(date_text)
    moment = parse_time(time_text)
    if day is None or moment is None:
        return None
    return datetime.combine(day, moment)


def booking_interval(
    date_text: str | None,
    start_text: str | None,
    end_text: str | None,
) -> tuple[datetime, datetime] | None:
    """Return the ``(start, end)`` instants of a booking.

    An end earlier than the start means the show crosses midnight, so the end
    is moved onto the following day.
    """
    start = anchor(date_text, start_text)
    end = anchor(date_text, end_text)
    if start is None or end is None:
        return None
    if end < start:
        end += ONE_DAY
    return start, end


def duration_between(start_text: str | None, end_text: str | None) -> int:
    """Minutes from start to end time, wrapping past midnight."""
    start = parse_time(start_text)
    end = parse_time(end_text)
    if start is None or end is None:
        return 0
    base = date(1970, 1, 1)
    delta = datetime.combine(base, end) - datetime.combine(base, start)
    if delta < timedelta(0):
        delta += ONE_DAY
    return int(delta.total_seconds() // 60)


def end_time_after(start_text: str | None, minutes: int) -> str:
    """The ``HH:MM`` end time reached *minutes* after the start time.

    Returns an empty string when the start time is missing or unparseable.
    """
    start = parse_time(start_text)
    if start is None:
        return ""
    end = datetime.combine(date(1970, 1, 1), start) + timedelta(minutes=max(minutes, 0))
    return end.strftime("%H:%M")
