"""Service for detecting scheduling conflicts between bookings."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import timedelta

from showbook.domain.models import Booking
from showbook.services.intervals import booking_interval

CONFLICT_MARGIN = timedelta(minutes=30)


def find_conflicts(candidate: Booking, existing: Iterable[Booking]) -> list[Booking]:
    """Return the existing bookings whose time window collides with *candidate*.

    Overlap rule: conflict if candidate.start < other.end + margin AND
    candidate.end > other.start - margin, so shows closer than 30 minutes
    apart (including exact boundary touches) collide.

    Only bookings on the same ``date`` are compared, and a booking never
    conflicts with a record carrying its own id. Bookings without a start or
    end time, or whose date/time text cannot be parsed, take no part on
    either side.
    """
    if not candidate.date or not candidate.start_time or not candidate.end_time:
        return []
    window = booking_interval(candidate.date, candidate.start_time, candidate.end_time)
    if window is None:
        return []
    start, end = window

    conflicts: list[Booking] = []
    for other in existing:
        if other.id == candidate.id:
            continue
        if other.date != candidate.date:
            continue
        if not other.start_time or not other.end_time:
            continue
        other_window = booking_interval(other.date, other.start_time, other.end_time)
        if other_window is None:
            continue
        other_start, other_end = other_window
        if start < other_end + CONFLICT_MARGIN and end > other_start - CONFLICT_MARGIN:
            conflicts.append(other)
    return conflicts


def has_conflict(candidate: Booking, existing: Iterable[Booking]) -> bool:
    return bool(find_conflicts(candidate, existing))
