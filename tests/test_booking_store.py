"""Tests for the booking store, its repositories and the domain-event wiring."""

from __future__ import annotations

from decimal import Decimal

import pytest

from showbook.domain.bus import EventBus
from showbook.domain.events import BookingConflictRejected, BookingDeleted, BookingSaved
from showbook.domain.exceptions import BookingConflictError, BookingNotFoundError
from showbook.domain.handlers import HandlerRegistry
from showbook.domain.models import Booking, BookingStatus
from showbook.repos.accounts import SessionRepository
from showbook.repos.bookings import BOOKINGS_KEY, BookingRepository
from showbook.repos.storage import MemoryStorage
from showbook.services.booking_store import BookingStore


@pytest.fixture()
def env():
    """Fresh bus + storage + store for each test, recording published events."""
    bus = EventBus()
    storage = MemoryStorage()
    repo = BookingRepository(storage)
    store = BookingStore(repo, bus)
    HandlerRegistry(bus=bus, session_repo=SessionRepository(storage))

    published: list = []
    for event_type in (BookingSaved, BookingDeleted, BookingConflictRejected):
        bus.subscribe(event_type, published.append)

    class Env:
        pass

    e = Env()
    e.bus = bus
    e.storage = storage
    e.repo = repo
    e.store = store
    e.published = published
    return e


def _make_booking(**overrides) -> Booking:
    defaults = dict(
        location="Bar do Zé",
        date="2025-06-14",
        start_time="20:00",
        end_time="22:00",
        duration_minutes=120,
        fee=Decimal("1500.00"),
        advance_paid=Decimal("500.00"),
    )
    defaults.update(overrides)
    return Booking(**defaults)


def test_save_new_booking(env):
    booking = _make_booking()
    env.store.save(booking)

    assert env.repo.get(booking.id) == booking
    assert env.published == [BookingSaved(booking_id=booking.id, created=True)]


def test_balance_due():
    assert _make_booking().balance_due == Decimal("1000.00")
    overpaid = _make_booking(fee=Decimal("100"), advance_paid=Decimal("150"))
    assert overpaid.balance_due == Decimal("-50")


def test_edit_keeps_id_and_position(env):
    first = _make_booking()
    second = _make_booking(date="2025-06-20")
    env.store.save(first)
    env.store.save(second)

    edited = first.model_copy(update={"start_time": "20:30", "status": BookingStatus.CONFIRMED})
    env.store.update(edited)

    stored = env.repo.list_all()
    assert [b.id for b in stored] == [first.id, second.id]
    assert stored[0].start_time == "20:30"
    assert stored[0].status == BookingStatus.CONFIRMED
    assert env.published[-1] == BookingSaved(booking_id=first.id, created=False)


def test_conflicting_save_is_rejected_without_changes(env):
    existing = _make_booking()
    env.store.save(existing)

    clash = _make_booking(start_time="22:15", end_time="23:30")
    with pytest.raises(BookingConflictError) as exc_info:
        env.store.save(clash)

    assert exc_info.value.conflicting_ids == [existing.id]
    assert [b.id for b in env.repo.list_all()] == [existing.id]
    assert env.published[-1] == BookingConflictRejected(
        booking_id=clash.id, conflicting_booking_ids=[existing.id]
    )


def test_conflicting_edit_leaves_stored_version(env):
    early = _make_booking(start_time="18:00", end_time="19:00")
    late = _make_booking(start_time="21:00", end_time="22:00")
    env.store.save(early)
    env.store.save(late)

    with pytest.raises(BookingConflictError):
        env.store.update(early.model_copy(update={"end_time": "20:45"}))

    assert env.repo.get(early.id).end_time == "19:00"


def test_check_previews_conflicts(env):
    existing = _make_booking()
    env.store.save(existing)

    assert env.store.check(_make_booking(start_time="22:10", end_time="23:00")) == [existing]
    assert env.store.check(_make_booking(date="2025-06-15")) == []
    assert len(env.repo.list_all()) == 1


def test_bookings_without_times_are_always_saved(env):
    env.store.save(_make_booking(start_time="", end_time=""))
    env.store.save(_make_booking(start_time="", end_time=""))
    assert len(env.repo.list_all()) == 2


def test_update_unknown_booking(env):
    with pytest.raises(BookingNotFoundError):
        env.store.update(_make_booking())


def test_delete(env):
    booking = _make_booking()
    env.store.save(booking)
    env.store.delete(booking.id)

    assert env.repo.list_all() == []
    assert env.published[-1] == BookingDeleted(booking_id=booking.id)

    with pytest.raises(BookingNotFoundError):
        env.store.delete(booking.id)


def test_unreadable_records_are_skipped(env):
    good = _make_booking()
    env.store.save(good)
    raw = env.storage.get(BOOKINGS_KEY)
    raw.append({"location": "no date"})
    env.storage.set(BOOKINGS_KEY, raw)

    assert [b.id for b in env.repo.list_all()] == [good.id]
