"""Domain models for the show booking ledger."""

from __future__ import annotations

import uuid
from datetime import date, timedelta
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator


class BookingStatus(StrEnum):
    """Editorial status, set directly by the user."""

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class DisplayStatus(StrEnum):
    """Derived presentation status, computed against the clock."""

    CANCELLED = "cancelled"
    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"
    CONFIRMED = "confirmed"
    SCHEDULED = "scheduled"


class PaymentStatus(StrEnum):
    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"


class LoginResult(StrEnum):
    SUCCESS = "success"
    BLOCKED = "blocked"
    INVALID = "invalid"


# Labels written by the legacy pt-BR front end.
_LEGACY_STATUS = {
    "agendado": BookingStatus.SCHEDULED,
    "confirmado": BookingStatus.CONFIRMED,
    "cancelado": BookingStatus.CANCELLED,
}

SUBSCRIPTION_DAYS = 30


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Booking(BaseModel):
    id: str = Field(default_factory=_new_id)
    location: str = ""
    date: str
    start_time: str = ""
    end_time: str = ""
    duration_minutes: int = Field(default=0, ge=0)
    fee: Decimal = Field(default=Decimal("0"), ge=0)
    advance_paid: Decimal = Field(default=Decimal("0"), ge=0)
    status: BookingStatus = BookingStatus.SCHEDULED
    notes: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: object) -> BookingStatus:
        if isinstance(value, BookingStatus):
            return value
        text = str(value or "").strip().lower()
        if text in _LEGACY_STATUS:
            return _LEGACY_STATUS[text]
        try:
            return BookingStatus(text)
        except ValueError:
            return BookingStatus.SCHEDULED

    @property
    def balance_due(self) -> Decimal:
        return self.fee - self.advance_paid


class StatusInfo(BaseModel):
    label: DisplayStatus
    is_terminal: bool
    text: str
    icon: str
    tone: str


class Location(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str


class ArtistProfile(BaseModel):
    name: str = "Seu Nome de Artista"
    contact: str = ""
    instagram: str = ""
    logo: str = ""  # base64 image


class Subscription(BaseModel):
    start_date: date
    end_date: date
    monthly_value: Decimal = Field(default=Decimal("0"), ge=0)
    payment_status: PaymentStatus = PaymentStatus.PENDING

    @classmethod
    def starting(cls, start: date, monthly_value: Decimal, **kwargs) -> Subscription:
        """Build a subscription running for the standard 30-day period."""
        return cls(
            start_date=start,
            end_date=start + timedelta(days=SUBSCRIPTION_DAYS),
            monthly_value=monthly_value,
            **kwargs,
        )

    def is_expired(self, today: date) -> bool:
        return today > self.end_date


class Account(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    cpf: str
    year_of_birth: str
    hashed_year_of_birth: str
    is_blocked: bool = False
    subscription: Subscription | None = None


class AccountView(BaseModel):
    """Account as shown to the admin, without the credential digest."""

    id: str
    name: str
    cpf: str
    year_of_birth: str
    is_blocked: bool
    subscription: Subscription | None = None


class BookingStats(BaseModel):
    total_shows: int
    total_revenue: Decimal
    advance_paid: Decimal
    balance: Decimal


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    location: str = ""
    date: str
    start_time: str = ""
    end_time: str = ""
    duration_minutes: int = Field(default=0, ge=0)
    fee: Decimal = Field(default=Decimal("0"), ge=0)
    advance_paid: Decimal = Field(default=Decimal("0"), ge=0)
    status: BookingStatus = BookingStatus.SCHEDULED
    notes: str = ""

    def to_booking(self, booking_id: str | None = None) -> Booking:
        data = self.model_dump()
        if booking_id is not None:
            data["id"] = booking_id
        return Booking(**data)


class BookingView(Booking):
    """Booking as returned by the API, with derived fields filled in."""

    balance: Decimal
    display: StatusInfo


class ConflictCheckResponse(BaseModel):
    conflict: bool
    conflicting_ids: list[str] = Field(default_factory=list)


class LocationRequest(BaseModel):
    name: str


class CredentialsRequest(BaseModel):
    cpf: str
    year_of_birth: str


class AccountCreateRequest(BaseModel):
    name: str
    cpf: str
    year_of_birth: str


class SubscriptionRequest(BaseModel):
    start_date: date
    monthly_value: Decimal = Field(default=Decimal("0"), ge=0)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    end_date: date | None = None

    def to_subscription(self) -> Subscription:
        if self.end_date is None:
            return Subscription.starting(
                self.start_date,
                self.monthly_value,
                payment_status=self.payment_status,
            )
        return Subscription(
            start_date=self.start_date,
            end_date=self.end_date,
            monthly_value=self.monthly_value,
            payment_status=self.payment_status,
        )
