"""Booking store: saves and deletes bookings behind the conflict check."""

from __future__ import annotations

from showbook.domain.bus import EventBus
from showbook.domain.events import BookingConflictRejected, BookingDeleted, BookingSaved
from showbook.domain.exceptions import BookingConflictError, BookingNotFoundError
from showbook.domain.models import Booking
from showbook.repos.bookings import BookingRepository
from showbook.services.conflicts import find_conflicts


class BookingStore:
    def __init__(self, repo: BookingRepository, bus: EventBus) -> None:
        self.repo = repo
        self.bus = bus

    def check(self, candidate: Booking) -> list[Booking]:
        """Bookings *candidate* would collide with, without saving anything."""
        return find_conflicts(candidate, self.repo.list_all())

    def save(self, booking: Booking) -> Booking:
        """Create or edit *booking* (matched by id).

        Raises ``BookingConflictError`` and leaves the store untouched when the
        booking overlaps another one on the same date.
        """
        existing = self.repo.list_all()
        conflicts = find_conflicts(booking, existing)
        if conflicts:
            conflicting_ids = [c.id for c in conflicts]
            self.bus.publish(
                BookingConflictRejected(
                    booking_id=booking.id, conflicting_booking_ids=conflicting_ids
                )
            )
            raise BookingConflictError(booking.id, conflicting_ids)

        created = not any(b.id == booking.id for b in existing)
        if created:
            self.repo.add(booking)
        else:
            self.repo.replace(booking)
        self.bus.publish(BookingSaved(booking_id=booking.id, created=created))
        return booking

    def update(self, booking: Booking) -> Booking:
        """Edit an existing booking; unknown ids raise ``BookingNotFoundError``."""
        if self.repo.get(booking.id) is None:
            raise BookingNotFoundError(booking.id)
        return self.save(booking)

    def delete(self, booking_id: str) -> None:
        self.repo.delete(booking_id)
        self.bus.publish(BookingDeleted(booking_id=booking_id))
