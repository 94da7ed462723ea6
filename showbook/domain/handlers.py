"""Domain event handlers — wired up at application startup."""

from __future__ import annotations

import logging

from showbook.domain.bus import EventBus
from showbook.domain.events import (
    AccountBlocked,
    AccountDeleted,
    BookingConflictRejected,
    BookingDeleted,
    BookingSaved,
)
from showbook.repos.accounts import SessionRepository

log = logging.getLogger("showbook.handlers")


class HandlerRegistry:
    """Wires domain-event handlers to the bus."""

    def __init__(self, bus: EventBus, session_repo: SessionRepository) -> None:
        self.bus = bus
        self.session_repo = session_repo
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(BookingSaved, self.on_booking_saved)
        self.bus.subscribe(BookingDeleted, self.on_booking_deleted)
        self.bus.subscribe(BookingConflictRejected, self.on_conflict_rejected)
        self.bus.subscribe(AccountBlocked, self.on_account_blocked)
        self.bus.subscribe(AccountDeleted, self.on_account_deleted)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_booking_saved(self, event: BookingSaved) -> None:
        log.info(
            "Booking %s %s", event.booking_id, "created" if event.created else "updated"
        )

    def on_booking_deleted(self, event: BookingDeleted) -> None:
        log.info("Booking %s deleted", event.booking_id)

    def on_conflict_rejected(self, event: BookingConflictRejected) -> None:
        log.warning(
            "Booking %s rejected, overlaps %s",
            event.booking_id,
            ", ".join(event.conflicting_booking_ids),
        )

    def on_account_blocked(self, event: AccountBlocked) -> None:
        log.info("Account %s blocked (%s)", event.cpf, event.reason)
        self._end_session_of(event.cpf)

    def on_account_deleted(self, event: AccountDeleted) -> None:
        log.info("Account %s deleted", event.cpf)
        self._end_session_of(event.cpf)

    def _end_session_of(self, cpf: str) -> None:
        if self.session_repo.active_user() == cpf:
            self.session_repo.end_user()
