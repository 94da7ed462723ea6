"""Plain-text agenda for pasting into messaging apps.

Asterisks mark bold text in WhatsApp; the layout matches what the artist's
followers are used to receiving.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from showbook.domain.models import ArtistProfile, Booking
from showbook.services.intervals import parse_date
from showbook.services.ledger import sort_chronologically

_WEEKDAYS = (
    "segunda-feira",
    "terça-feira",
    "quarta-feira",
    "quinta-feira",
    "sexta-feira",
    "sábado",
    "domingo",
)
_MONTHS = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)

NAME_RULE = "_" * 27
SEPARATOR = "-" * 28
EMPTY_AGENDA = "Nenhum show na agenda por enquanto."


def long_date(day: date) -> str:
    """``quarta-feira, 12 de novembro``"""
    return f"{_WEEKDAYS[day.weekday()]}, {day.day} de {_MONTHS[day.month - 1]}"


def time_line(booking: Booking) -> str:
    # an end time only counts when the duration backs it up
    if booking.start_time and booking.end_time and booking.duration_minutes > 0:
        return f"*Das* {booking.start_time} *às* {booking.end_time}"
    if booking.start_time:
        return f"*Das* {booking.start_time}"
    return ""


def render_agenda(bookings: Iterable[Booking], profile: ArtistProfile) -> str:
    lines: list[str] = []
    if profile.name:
        lines.append(f"*{profile.name.upper()}*")
        lines.append(NAME_RULE)
    lines.append("")
    lines.append("*PRÓXIMOS SHOWS*:")

    ordered = sort_chronologically(bookings)
    if not ordered:
        return "\n".join(lines) + "\n" + EMPTY_AGENDA

    for booking in ordered:
        day = parse_date(booking.date)
        lines.append(long_date(day) if day is not None else booking.date)
        lines.append(f"*{booking.location.upper()}*")
        when = time_line(booking)
        if when:
            lines.append(when)
        lines.append(SEPARATOR)
    return "\n".join(lines) + "\n"
