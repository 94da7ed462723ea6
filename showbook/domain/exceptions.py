"""Errors raised by the booking store and catalogue repositories."""

from __future__ import annotations


class BookingNotFoundError(LookupError):
    """Raised when a booking id is not in the store."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(f"Booking {booking_id} not found")
        self.booking_id = booking_id


class BookingConflictError(ValueError):
    """Raised when a save would overlap other bookings on the same date."""

    def __init__(self, booking_id: str, conflicting_ids: list[str]) -> None:
        super().__init__(
            f"Booking {booking_id} conflicts with: {', '.join(conflicting_ids)}"
        )
        self.booking_id = booking_id
        self.conflicting_ids = conflicting_ids


class LocationNotFoundError(LookupError):
    pass


class DuplicateLocationError(ValueError):
    pass
