"""Domain events emitted by the booking store and the account gate."""

from __future__ import annotations

from pydantic import BaseModel


class BookingSaved(BaseModel):
    """Fired after a booking is created or edited."""

    booking_id: str
    created: bool


class BookingDeleted(BaseModel):
    booking_id: str


class BookingConflictRejected(BaseModel):
    """Fired when a save is refused because of overlapping bookings."""

    booking_id: str
    conflicting_booking_ids: list[str]


class AccountBlocked(BaseModel):
    """Fired when an account is blocked, manually or by subscription expiry."""

    cpf: str
    reason: str


class AccountDeleted(BaseModel):
    cpf: str
