"""Repositories for bookings, venues and the artist profile.

Each repository keeps its whole collection under one storage key, the same
layout the original browser app used for its local storage.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from showbook.domain.exceptions import (
    BookingNotFoundError,
    DuplicateLocationError,
    LocationNotFoundError,
)
from showbook.domain.models import ArtistProfile, Booking, Location
from showbook.repos.storage import KeyValueStorage

log = logging.getLogger("showbook.repos")

BOOKINGS_KEY = "shows"
LOCATIONS_KEY = "locations"
PROFILE_KEY = "artistInfo"

DEFAULT_LOCATIONS = ("Bar do Zé", "Casa de Show XYZ")


class BookingRepository:
    """Storage-backed list of Booking instances."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def _load(self) -> list[Booking]:
        bookings: list[Booking] = []
        for raw in self._storage.get(BOOKINGS_KEY) or []:
            try:
                bookings.append(Booking.model_validate(raw))
            except ValidationError as e:
                log.warning("Skipping unreadable booking record %r: %s", raw, e)
        return bookings

    def _save(self, bookings: list[Booking]) -> None:
        self._storage.set(BOOKINGS_KEY, [b.model_dump(mode="json") for b in bookings])

    def list_all(self) -> list[Booking]:
        return self._load()

    def get(self, booking_id: str) -> Booking | None:
        return next((b for b in self._load() if b.id == booking_id), None)

    def add(self, booking: Booking) -> None:
        bookings = self._load()
        bookings.append(booking)
        self._save(bookings)

    def replace(self, booking: Booking) -> None:
        """Overwrite the stored booking with the same id, keeping its position."""
        bookings = self._load()
        for index, existing in enumerate(bookings):
            if existing.id == booking.id:
                bookings[index] = booking
                self._save(bookings)
                return
        raise BookingNotFoundError(booking.id)

    def delete(self, booking_id: str) -> None:
        bookings = self._load()
        remaining = [b for b in bookings if b.id != booking_id]
        if len(remaining) == len(bookings):
            raise BookingNotFoundError(booking_id)
        self._save(remaining)


class LocationRepository:
    """Venue catalogue; names are unique ignoring case and surrounding spaces."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def _load(self) -> list[Location]:
        raw = self._storage.get(LOCATIONS_KEY)
        if raw is None:
            defaults = [Location(name=name) for name in DEFAULT_LOCATIONS]
            self._save(defaults)
            return defaults
        locations: list[Location] = []
        for item in raw:
            try:
                locations.append(Location.model_validate(item))
            except ValidationError as e:
                log.warning("Skipping unreadable location record %r: %s", item, e)
        return locations

    def _save(self, locations: list[Location]) -> None:
        self._storage.set(LOCATIONS_KEY, [loc.model_dump(mode="json") for loc in locations])

    @staticmethod
    def _clean(name: str) -> str:
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Location name must not be blank")
        return cleaned

    @staticmethod
    def _ensure_unique(name: str, locations: list[Location], skip_id: str | None = None) -> None:
        if any(
            loc.id != skip_id and loc.name.lower() == name.lower() for loc in locations
        ):
            raise DuplicateLocationError(f"Location {name!r} already exists")

    def list_all(self) -> list[Location]:
        return self._load()

    def get(self, location_id: str) -> Location | None:
        return next((loc for loc in self._load() if loc.id == location_id), None)

    def add(self, name: str) -> Location:
        name = self._clean(name)
        locations = self._load()
        self._ensure_unique(name, locations)
        location = Location(name=name)
        locations.append(location)
        self._save(locations)
        return location

    def rename(self, location_id: str, name: str) -> Location:
        if self.get(location_id) is None:
            raise LocationNotFoundError(location_id)
        name = self._clean(name)
        locations = self._load()
        self._ensure_unique(name, locations, skip_id=location_id)
        renamed = Location(id=location_id, name=name)
        self._save([renamed if loc.id == location_id else loc for loc in locations])
        return renamed

    def delete(self, location_id: str) -> None:
        locations = self._load()
        remaining = [loc for loc in locations if loc.id != location_id]
        if len(remaining) == len(locations):
            raise LocationNotFoundError(location_id)
        self._save(remaining)


class ProfileRepository:
    """Single ArtistProfile record."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def get(self) -> ArtistProfile:
        raw = self._storage.get(PROFILE_KEY)
        if raw is None:
            return ArtistProfile()
        return ArtistProfile.model_validate(raw)

    def save(self, profile: ArtistProfile) -> None:
        self._storage.set(PROFILE_KEY, profile.model_dump(mode="json"))
