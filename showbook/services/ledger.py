"""Derived views over the booking list: totals, filters, ordering."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from showbook.domain.models import Booking, BookingStats, DisplayStatus
from showbook.services.intervals import anchor, parse_date
from showbook.services.status import derive_status


class Period(StrEnum):
    ALL = "all"
    UPCOMING = "upcoming"
    PAST = "past"


def summarize(bookings: Iterable[Booking], year: int | None = None) -> BookingStats:
    """Count and money totals, optionally restricted to one calendar year."""
    selected = list(bookings)
    if year is not None:
        selected = [
            b for b in selected if (day := parse_date(b.date)) is not None and day.year == year
        ]
    revenue = sum((b.fee for b in selected), Decimal("0"))
    advance = sum((b.advance_paid for b in selected), Decimal("0"))
    return BookingStats(
        total_shows=len(selected),
        total_revenue=revenue,
        advance_paid=advance,
        balance=revenue - advance,
    )


def _starts_at(booking: Booking, fallback: str) -> datetime | None:
    return anchor(booking.date, booking.start_time or fallback)


def filter_bookings(
    bookings: Iterable[Booking],
    now: datetime,
    period: Period = Period.ALL,
    location: str | None = None,
    status: DisplayStatus | None = None,
) -> list[Booking]:
    """Apply the list-view filters.

    A booking with no start time counts as starting at 23:59, so a show
    without a set time stays "upcoming" for the whole of its day.
    """
    result: list[Booking] = []
    for booking in bookings:
        if location is not None and booking.location != location:
            continue
        if status is not None and derive_status(booking, now) != status:
            continue
        if period != Period.ALL:
            starts = _starts_at(booking, "23:59")
            if starts is None:
                continue
            if period == Period.UPCOMING and starts < now:
                continue
            if period == Period.PAST and starts >= now:
                continue
        result.append(booking)
    return result


def sort_chronologically(bookings: Iterable[Booking]) -> list[Booking]:
    """Order by date and start time; unreadable dates go last."""

    def key(booking: Booking) -> tuple[bool, datetime]:
        starts = _starts_at(booking, "00:00")
        return (starts is None, starts or datetime.max)

    return sorted(bookings, key=key)


def group_by_date(bookings: Iterable[Booking]) -> dict[str, list[Booking]]:
    grouped: dict[str, list[Booking]] = defaultdict(list)
    for booking in sort_chronologically(bookings):
        grouped[booking.date].append(booking)
    return dict(grouped)

