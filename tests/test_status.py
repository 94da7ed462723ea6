"""Tests for the display-status classifier."""

from datetime import datetime, timedelta, timezone

import pytest

from showbook.domain.models import Booking, BookingStatus, DisplayStatus
from showbook.services.status import classify, derive_status

_TODAY = datetime(2025, 6, 14, 15, 0)


def _make_booking(
    date: str = "2025-06-14",
    start: str = "20:00",
    end: str = "22:00",
    status: BookingStatus = BookingStatus.SCHEDULED,
) -> Booking:
    return Booking(
        location="Casa de Show XYZ",
        date=date,
        start_time=start,
        end_time=end,
        duration_minutes=120 if start and end else 0,
        status=status,
    )


def test_future_booking_is_scheduled():
    info = classify(_make_booking(), _TODAY)
    assert info.label == DisplayStatus.SCHEDULED
    assert info.is_terminal is False
    assert info.text == "Agendado"


def test_future_confirmed_booking():
    info = classify(_make_booking(status=BookingStatus.CONFIRMED), _TODAY)
    assert info.label == DisplayStatus.CONFIRMED
    assert info.is_terminal is False


def test_yesterday_show_is_completed():
    booking = _make_booking(date="2025-06-13")
    info = classify(booking, datetime(2025, 6, 14, 0, 0))
    assert info.label == DisplayStatus.COMPLETED
    assert info.is_terminal is True
    assert info.text == "Concluído"


def test_cancelled_beats_completed():
    booking = _make_booking(date="2025-06-01", status=BookingStatus.CANCELLED)
    info = classify(booking, _TODAY)
    assert info.label == DisplayStatus.CANCELLED
    assert info.is_terminal is True


def test_cancelled_beats_in_progress():
    booking = _make_booking(status=BookingStatus.CANCELLED)
    assert derive_status(booking, datetime(2025, 6, 14, 21, 0)) == DisplayStatus.CANCELLED


@pytest.mark.parametrize(
    "now",
    [
        datetime(2025, 6, 14, 20, 0),
        datetime(2025, 6, 14, 21, 0),
        datetime(2025, 6, 14, 22, 0),
    ],
)
def test_in_progress_bounds_are_inclusive(now):
    assert derive_status(_make_booking(), now) == DisplayStatus.IN_PROGRESS


def test_completed_right_after_end():
    now = datetime(2025, 6, 14, 22, 0) + timedelta(seconds=1)
    assert derive_status(_make_booking(), now) == DisplayStatus.COMPLETED


def test_in_progress_overrides_confirmed():
    booking = _make_booking(status=BookingStatus.CONFIRMED)
    assert derive_status(booking, datetime(2025, 6, 14, 21, 0)) == DisplayStatus.IN_PROGRESS


def test_midnight_crossing_show_in_progress_after_midnight():
    booking = _make_booking(start="23:00", end="02:00")
    assert derive_status(booking, datetime(2025, 6, 15, 1, 0)) == DisplayStatus.IN_PROGRESS
    assert derive_status(booking, datetime(2025, 6, 15, 2, 1)) == DisplayStatus.COMPLETED


def test_no_end_time_never_completes():
    booking = _make_booking(date="2020-01-01", end="")
    assert derive_status(booking, _TODAY) == DisplayStatus.SCHEDULED

    confirmed = _make_booking(date="2020-01-01", end="", status=BookingStatus.CONFIRMED)
    assert derive_status(confirmed, _TODAY) == DisplayStatus.CONFIRMED


def test_end_without_start_can_complete():
    """Only the end time matters for completion; the start defaults to 00:00."""
    booking = _make_booking(start="", end="03:00")
    assert derive_status(booking, datetime(2025, 6, 14, 2, 0)) == DisplayStatus.SCHEDULED
    assert derive_status(booking, datetime(2025, 6, 14, 3, 1)) == DisplayStatus.COMPLETED


def test_unrecognised_editorial_status_falls_back_to_scheduled():
    booking = Booking(date="2030-01-01", start_time="20:00", end_time="22:00", status="Pendente")
    assert booking.status == BookingStatus.SCHEDULED
    assert derive_status(booking, _TODAY) == DisplayStatus.SCHEDULED


def test_legacy_portuguese_status_labels():
    booking = Booking(date="2030-01-01", status="Confirmado")
    assert derive_status(booking, _TODAY) == DisplayStatus.CONFIRMED


def test_unreadable_date_uses_editorial_status():
    booking = _make_booking(date="sometime", status=BookingStatus.CONFIRMED)
    assert derive_status(booking, _TODAY) == DisplayStatus.CONFIRMED
    assert derive_status(_make_booking(end="9pm"), _TODAY) == DisplayStatus.SCHEDULED


def test_malformed_start_time_still_completes_after_end():
    booking = _make_booking(date="2025-06-13", start="8pm", end="22:00")
    assert derive_status(booking, datetime(2025, 6, 14, 12, 0)) == DisplayStatus.COMPLETED
    # no in-progress window without a readable start
    assert derive_status(booking, datetime(2025, 6, 13, 21, 0)) == DisplayStatus.SCHEDULED


def test_aware_now_is_compared_as_local_wall_clock():
    now = datetime(2020, 1, 1, tzinfo=timezone.utc)
    assert derive_status(_make_booking(), now) == DisplayStatus.SCHEDULED


def test_classify_is_idempotent():
    booking = _make_booking()
    now = datetime(2025, 6, 14, 21, 30)
    assert classify(booking, now) == classify(booking, now)
