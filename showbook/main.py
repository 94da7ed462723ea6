"""FastAPI application — entry point for the show booking ledger."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse

from showbook.config import build_storage, settings
from showbook.domain.bus import EventBus
from showbook.domain.exceptions import (
    BookingConflictError,
    BookingNotFoundError,
    DuplicateLocationError,
    LocationNotFoundError,
)
from showbook.domain.handlers import HandlerRegistry
from showbook.domain.models import (
    AccountCreateRequest,
    AccountView,
    ArtistProfile,
    Booking,
    BookingCreate,
    BookingStats,
    BookingView,
    ConflictCheckResponse,
    CredentialsRequest,
    DisplayStatus,
    Location,
    LocationRequest,
    LoginResult,
    StatusInfo,
    SubscriptionRequest,
)
from showbook.repos.accounts import AccountRepository, SessionRepository
from showbook.repos.bookings import BookingRepository, LocationRepository, ProfileRepository
from showbook.services.accounts import AccountService, normalize_cpf
from showbook.services.booking_store import BookingStore
from showbook.services.intervals import duration_between, end_time_after
from showbook.services.ledger import Period, filter_bookings, group_by_date, summarize
from showbook.services.share import render_agenda
from showbook.services.status import classify

logging.basicConfig(level=settings.log_level.upper())

app = FastAPI(title=settings.app_title)

# ── Singletons (created at import time for simplicity) ────────────────
storage = build_storage(settings)
event_bus = EventBus()
booking_repo = BookingRepository(storage)
location_repo = LocationRepository(storage)
profile_repo = ProfileRepository(storage)
account_repo = AccountRepository(storage)
session_repo = SessionRepository(storage)

booking_store = BookingStore(booking_repo, event_bus)
account_service = AccountService(account_repo, session_repo, event_bus)
handler_registry = HandlerRegistry(bus=event_bus, session_repo=session_repo)


def _wall_clock(now: datetime | None) -> datetime:
    """Resolve the optional *now* parameter to a naive local datetime."""
    if now is None:
        return datetime.now()
    if now.tzinfo is not None:
        return now.astimezone().replace(tzinfo=None)
    return now


def _from_request(body: BookingCreate, booking_id: str | None = None) -> Booking:
    """Build a booking, keeping duration and end time in step with each other.

    Both times given: the duration is recomputed from them. Only a start time
    and a duration: the end time is filled in.
    """
    booking = body.to_booking(booking_id)
    if booking.start_time and booking.end_time:
        booking.duration_minutes = duration_between(booking.start_time, booking.end_time)
    elif booking.start_time and booking.duration_minutes > 0:
        booking.end_time = end_time_after(booking.start_time, booking.duration_minutes)
    return booking


def _view(booking: Booking, now: datetime) -> BookingView:
    return BookingView(
        **booking.model_dump(),
        balance=booking.balance_due,
        display=classify(booking, now),
    )


def _conflict(exc: BookingConflictError) -> HTTPException:
    return HTTPException(
        status_code=409,
        detail={
            "message": "Booking overlaps another show on the same date",
            "conflicting_ids": exc.conflicting_ids,
        },
    )


def require_admin() -> None:
    if not account_service.is_admin_session_active():
        raise HTTPException(status_code=403, detail="Admin session required")


# ── Bookings ──────────────────────────────────────────────────────────


@app.get("/bookings", response_model=list[BookingView])
def list_bookings(
    period: Period = Period.ALL,
    location: str | None = None,
    status: DisplayStatus | None = None,
    now: datetime | None = None,
) -> list[BookingView]:
    """Return bookings, optionally filtered by period, venue or display status."""
    current = _wall_clock(now)
    selected = filter_bookings(
        booking_repo.list_all(), current, period=period, location=location, status=status
    )
    return [_view(b, current) for b in selected]


@app.post("/bookings", response_model=BookingView)
def create_booking(body: BookingCreate, now: datetime | None = None) -> BookingView:
    """Create a booking; rejected with 409 when it overlaps another one."""
    booking = _from_request(body)
    try:
        booking_store.save(booking)
    except BookingConflictError as exc:
        raise _conflict(exc) from exc
    return _view(booking, _wall_clock(now))


@app.post("/bookings/check-conflict", response_model=ConflictCheckResponse)
def check_conflict(candidate: Booking) -> ConflictCheckResponse:
    """Preview the conflict check for a new or edited booking without saving it."""
    conflicts = booking_store.check(candidate)
    return ConflictCheckResponse(
        conflict=bool(conflicts), conflicting_ids=[c.id for c in conflicts]
    )


@app.get("/bookings/{booking_id}", response_model=BookingView)
def get_booking(booking_id: str, now: datetime | None = None) -> BookingView:
    booking = booking_repo.get(booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return _view(booking, _wall_clock(now))


@app.put("/bookings/{booking_id}", response_model=BookingView)
def update_booking(
    booking_id: str, body: BookingCreate, now: datetime | None = None
) -> BookingView:
    """Edit a booking in place; its id is preserved."""
    booking = _from_request(body, booking_id)
    try:
        booking_store.update(booking)
    except BookingNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Booking not found") from exc
    except BookingConflictError as exc:
        raise _conflict(exc) from exc
    return _view(booking, _wall_clock(now))


@app.delete("/bookings/{booking_id}")
def delete_booking(booking_id: str) -> dict:
    try:
        booking_store.delete(booking_id)
    except BookingNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Booking not found") from exc
    return {"status": "deleted"}


@app.get("/bookings/{booking_id}/status", response_model=StatusInfo)
def booking_status(booking_id: str, now: datetime | None = None) -> StatusInfo:
    """Derived display status of one booking at *now* (defaults to the wall clock)."""
    booking = booking_repo.get(booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return classify(booking, _wall_clock(now))


@app.get("/stats", response_model=BookingStats)
def stats(year: int | None = None, now: datetime | None = None) -> BookingStats:
    """Totals for one calendar year, the current one unless *year* is given."""
    return summarize(booking_repo.list_all(), year or _wall_clock(now).year)


@app.get("/calendar", response_model=dict[str, list[Booking]])
def calendar() -> dict[str, list[Booking]]:
    return group_by_date(booking_repo.list_all())


@app.get("/share", response_class=PlainTextResponse)
def share() -> str:
    """Agenda text ready to paste into a messaging app."""
    return render_agenda(booking_repo.list_all(), profile_repo.get())


# ── Venues and artist profile ─────────────────────────────────────────


@app.get("/locations", response_model=list[Location])
def list_locations() -> list[Location]:
    return location_repo.list_all()


@app.post("/locations", response_model=Location)
def add_location(body: LocationRequest) -> Location:
    try:
        return location_repo.add(body.name)
    except DuplicateLocationError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.put("/locations/{location_id}", response_model=Location)
def rename_location(location_id: str, body: LocationRequest) -> Location:
    try:
        return location_repo.rename(location_id, body.name)
    except LocationNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Location not found") from exc
    except DuplicateLocationError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.delete("/locations/{location_id}")
def delete_location(location_id: str) -> dict:
    try:
        location_repo.delete(location_id)
    except LocationNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Location not found") from exc
    return {"status": "deleted"}


@app.get("/artist", response_model=ArtistProfile)
def get_artist() -> ArtistProfile:
    return profile_repo.get()


@app.put("/artist", response_model=ArtistProfile)
def update_artist(body: ArtistProfile) -> ArtistProfile:
    profile_repo.save(body)
    return body


# ── Account gate ──────────────────────────────────────────────────────


@app.post("/auth/admin/register")
def register_admin(body: CredentialsRequest) -> dict:
    """Register the admin on first use; afterwards this behaves as a login."""
    if not account_service.register_admin(body.cpf, body.year_of_birth):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"status": "success"}


@app.post("/auth/admin/login")
def login_admin(body: CredentialsRequest) -> dict:
    if not account_service.login_admin(body.cpf, body.year_of_birth):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"status": "success"}


@app.post("/auth/register")
def register_account(body: AccountCreateRequest, now: datetime | None = None) -> dict:
    today = _wall_clock(now).date()
    if not account_service.register_account(body.name, body.cpf, body.year_of_birth, today):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"status": "success"}


@app.post("/auth/login")
def login(body: CredentialsRequest, now: datetime | None = None) -> dict:
    result = account_service.login(body.cpf, body.year_of_birth, _wall_clock(now).date())
    if result == LoginResult.BLOCKED:
        raise HTTPException(status_code=403, detail="Account blocked")
    if result == LoginResult.INVALID:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"status": result}


@app.post("/auth/logout")
def logout() -> dict:
    account_service.logout()
    account_service.logout_admin()
    return {"status": "logged_out"}


# ── Admin ─────────────────────────────────────────────────────────────


@app.get("/admin/users", response_model=list[AccountView], dependencies=[Depends(require_admin)])
def list_users() -> list[AccountView]:
    return [
        AccountView.model_validate(account.model_dump())
        for account in account_service.list_accounts()
    ]


@app.post("/admin/users", dependencies=[Depends(require_admin)])
def add_user(body: AccountCreateRequest) -> dict:
    if not body.name.strip() or not normalize_cpf(body.cpf) or not body.year_of_birth:
        raise HTTPException(status_code=422, detail="Name, CPF and year of birth are required")
    if not account_service.add_account(body.name, body.cpf, body.year_of_birth):
        raise HTTPException(status_code=409, detail="CPF already registered")
    return {"status": "created", "cpf": normalize_cpf(body.cpf)}


@app.delete("/admin/users/{cpf}", dependencies=[Depends(require_admin)])
def delete_user(cpf: str) -> dict:
    if not account_service.delete_account(cpf):
        raise HTTPException(status_code=404, detail="Account not found")
    return {"status": "deleted"}


@app.post("/admin/users/{cpf}/block", dependencies=[Depends(require_admin)])
def block_user(cpf: str) -> dict:
    if not account_service.block(cpf):
        raise HTTPException(status_code=404, detail="Account not found")
    return {"status": "blocked"}


@app.post("/admin/users/{cpf}/unblock", dependencies=[Depends(require_admin)])
def unblock_user(cpf: str) -> dict:
    if not account_service.unblock(cpf):
        raise HTTPException(status_code=404, detail="Account not found")
    return {"status": "unblocked"}


@app.put("/admin/users/{cpf}/subscription", dependencies=[Depends(require_admin)])
def set_subscription(cpf: str, body: SubscriptionRequest, now: datetime | None = None) -> dict:
    today = _wall_clock(now).date()
    if not account_service.update_subscription(cpf, body.to_subscription(), today):
        raise HTTPException(status_code=404, detail="Account not found")
    return {"status": "success"}


@app.delete("/admin/users/{cpf}/subscription", dependencies=[Depends(require_admin)])
def remove_subscription(cpf: str, now: datetime | None = None) -> dict:
    today = _wall_clock(now).date()
    if not account_service.update_subscription(cpf, None, today):
        raise HTTPException(status_code=404, detail="Account not found")
    return {"status": "success"}


@app.post("/admin/subscriptions/check", dependencies=[Depends(require_admin)])
def check_subscriptions(now: datetime | None = None) -> dict:
    """Block every account whose subscription has expired."""
    blocked = account_service.block_expired_subscriptions(_wall_clock(now).date())
    return {"blocked": blocked}
