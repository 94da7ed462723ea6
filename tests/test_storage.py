"""Tests for the storage adapters and the catalogue repositories."""

from __future__ import annotations

import pytest

from showbook.config import Settings, build_storage
from showbook.domain.exceptions import DuplicateLocationError, LocationNotFoundError
from showbook.domain.models import ArtistProfile
from showbook.repos.bookings import (
    DEFAULT_LOCATIONS,
    LOCATIONS_KEY,
    LocationRepository,
    ProfileRepository,
)
from showbook.repos.storage import JsonFileStorage, MemoryStorage


def test_memory_storage_returns_copies():
    storage = MemoryStorage()
    value = {"items": [1, 2]}
    storage.set("k", value)
    value["items"].append(3)

    loaded = storage.get("k")
    assert loaded == {"items": [1, 2]}
    loaded["items"].append(4)
    assert storage.get("k") == {"items": [1, 2]}

    storage.delete("k")
    assert storage.get("k") is None


def test_json_file_storage_persists(tmp_path):
    path = tmp_path / "nested" / "data.json"
    JsonFileStorage(path).set("shows", [{"id": "a"}])

    reopened = JsonFileStorage(path)
    assert reopened.get("shows") == [{"id": "a"}]
    reopened.delete("shows")
    assert JsonFileStorage(path).get("shows") is None


def test_json_file_storage_survives_corruption(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("{not json", encoding="utf-8")
    storage = JsonFileStorage(path)

    assert storage.get("shows") is None
    storage.set("shows", [])
    assert storage.get("shows") == []


def test_build_storage_backends(tmp_path):
    assert isinstance(build_storage(Settings(storage_backend="memory")), MemoryStorage)
    json_storage = build_storage(
        Settings(storage_backend="json", storage_path=tmp_path / "s.json")
    )
    assert isinstance(json_storage, JsonFileStorage)
    with pytest.raises(ValueError):
        build_storage(Settings(storage_backend="redis"))


# ---------------------------------------------------------------------------
# Locations and profile
# ---------------------------------------------------------------------------


def test_locations_seeded_with_defaults():
    repo = LocationRepository(MemoryStorage())
    assert [loc.name for loc in repo.list_all()] == list(DEFAULT_LOCATIONS)


def test_location_names_unique_ignoring_case():
    repo = LocationRepository(MemoryStorage())
    added = repo.add("  Teatro Municipal ")
    assert added.name == "Teatro Municipal"

    with pytest.raises(DuplicateLocationError):
        repo.add("teatro municipal")
    with pytest.raises(ValueError):
        repo.add("   ")


def test_rename_and_delete_location():
    repo = LocationRepository(MemoryStorage())
    bar = repo.list_all()[0]

    assert repo.rename(bar.id, "BAR DO ZÉ").name == "BAR DO ZÉ"
    with pytest.raises(DuplicateLocationError):
        repo.rename(bar.id, "casa de show xyz")
    with pytest.raises(LocationNotFoundError):
        repo.rename("missing", "Outro")

    repo.delete(bar.id)
    assert repo.get(bar.id) is None
    with pytest.raises(LocationNotFoundError):
        repo.delete(bar.id)


def test_rename_unknown_location_before_duplicate_check():
    repo = LocationRepository(MemoryStorage())
    with pytest.raises(LocationNotFoundError):
        repo.rename("missing", "casa de show xyz")


def test_unreadable_location_records_are_skipped():
    storage = MemoryStorage()
    storage.set(LOCATIONS_KEY, [{"id": "a", "name": "Teatro"}, {"id": "b"}, "junk"])
    repo = LocationRepository(storage)

    assert [loc.name for loc in repo.list_all()] == ["Teatro"]
    assert repo.add("Arena").name == "Arena"


def test_profile_defaults_and_save():
    repo = ProfileRepository(MemoryStorage())
    assert repo.get() == ArtistProfile()

    repo.save(ArtistProfile(name="Duo Serenata", instagram="@serenata"))
    assert repo.get().instagram == "@serenata"
