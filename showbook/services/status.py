"""Service for deriving a booking's display status from the clock."""

from __future__ import annotations

from datetime import datetime, time

from showbook.domain.models import Booking, BookingStatus, DisplayStatus, StatusInfo
from showbook.services.intervals import ONE_DAY, parse_date, parse_time

_PRESENTATION: dict[DisplayStatus, tuple[str, str, str]] = {
    DisplayStatus.CANCELLED: ("Cancelado", "fa-times-circle", "gray"),
    DisplayStatus.COMPLETED: ("Concluído", "fa-check-circle", "green"),
    DisplayStatus.IN_PROGRESS: ("Em Andamento", "fa-compact-disc", "yellow"),
    DisplayStatus.CONFIRMED: ("Confirmado", "fa-calendar-check", "blue"),
    DisplayStatus.SCHEDULED: ("Agendado", "fa-calendar-alt", "purple"),
}

_TERMINAL = {DisplayStatus.CANCELLED, DisplayStatus.COMPLETED}


def status_info(label: DisplayStatus) -> StatusInfo:
    text, icon, tone = _PRESENTATION[label]
    return StatusInfo(
        label=label, is_terminal=label in _TERMINAL, text=text, icon=icon, tone=tone
    )


def derive_status(booking: Booking, now: datetime) -> DisplayStatus:
    """Pick the display status; the first matching rule wins.

    1. editorial cancellation
    2. completed: has an end time and *now* is past it
    3. in progress: has both times and start <= now <= end
    4. editorial confirmation
    5. scheduled
    """
    if booking.status == BookingStatus.CANCELLED:
        return DisplayStatus.CANCELLED

    if now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)

    day = parse_date(booking.date)
    start_clock = parse_time(booking.start_time) if booking.start_time else time(0, 0)
    end_clock = parse_time(booking.end_time) if booking.end_time else time(0, 0)

    # A time that fails to parse only disables the rules that compare against it.
    if day is not None:
        show_start = datetime.combine(day, start_clock) if start_clock is not None else None
        show_end = datetime.combine(day, end_clock) if end_clock is not None else None
        timed = bool(booking.start_time and booking.end_time)
        if timed and show_start is not None and show_end is not None and show_end < show_start:
            show_end += ONE_DAY

        if booking.end_time and show_end is not None and now > show_end:
            return DisplayStatus.COMPLETED
        if (
            timed
            and show_start is not None
            and show_end is not None
            and show_start <= now <= show_end
        ):
            return DisplayStatus.IN_PROGRESS

    if booking.status == BookingStatus.CONFIRMED:
        return DisplayStatus.CONFIRMED
    return DisplayStatus.SCHEDULED


def classify(booking: Booking, now: datetime) -> StatusInfo:
    """Classify *booking* at instant *now* (naive local wall-clock)."""
    return status_info(derive_status(booking, now))
