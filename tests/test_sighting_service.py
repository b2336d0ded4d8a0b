"""Submission and deletion service tests with in-memory collaborators."""

import asyncio
import uuid
from datetime import datetime, timezone

import pytest

from app.core.exceptions import (
    CoordinateValidationError,
    IntegrityError,
    PhotoUploadError,
    SightingNotFoundOrUnauthorized,
    SightingValidationError,
    SpeciesNotFoundError,
)
from app.schemas.sighting import SightingCreate
from app.services.sighting_service import create_sighting, delete_sighting
from app.services.sighting_store import MemorySightingStore
from app.services.species_client import SpeciesValidator
from tests.conftest import StubSpeciesValidator


class RecordingPhotoStorage:
    def __init__(self, fail=False):
        self.fail = fail
        self.saved = []

    def save(self, data: bytes) -> str:
        if self.fail:
            raise PhotoUploadError("Photo could not be stored")
        self.saved.append(data)
        return f"/uploads/{len(self.saved)}.png"


@pytest.fixture
def store():
    return MemorySightingStore()


@pytest.fixture
def owner(store):
    owner_id = uuid.uuid4()
    store.add_owner(owner_id)
    return owner_id


def _create(store, owner_id, data, validator=None, storage=None, photo=None):
    return asyncio.run(
        create_sighting(
            store,
            owner_id,
            data,
            species_validator=validator or StubSpeciesValidator(unknown=["Dragon"]),
            photo_storage=storage or RecordingPhotoStorage(),
            photo=photo,
        )
    )


def test_create_defaults_observed_at_to_now(store, owner):
    before = datetime.now(timezone.utc)
    stored = _create(store, owner, SightingCreate(species_name=" Bubo bubo ", latitude=1, longitude=2))
    assert stored.species_name == "Bubo bubo"
    assert stored.observed_at >= before
    assert stored.photo_url is None


def test_create_treats_naive_observed_at_as_utc(store, owner):
    stored = _create(
        store,
        owner,
        SightingCreate(species_name="Bubo bubo", latitude=1, longitude=2, observed_at=datetime(2026, 4, 1, 5, 0)),
    )
    assert stored.observed_at == datetime(2026, 4, 1, 5, 0, tzinfo=timezone.utc)


def test_create_with_photo(store, owner):
    storage = RecordingPhotoStorage()
    stored = _create(
        store, owner, SightingCreate(species_name="Bubo bubo", latitude=1, longitude=2), storage=storage, photo=b"img"
    )
    assert stored.photo_url == "/uploads/1.png"
    assert storage.saved == [b"img"]


def test_create_rejects_failed_photo_upload(store, owner):
    with pytest.raises(PhotoUploadError):
        _create(
            store,
            owner,
            SightingCreate(species_name="Bubo bubo", latitude=1, longitude=2),
            storage=RecordingPhotoStorage(fail=True),
            photo=b"img",
        )
    assert store.list_all() == []


def test_create_rejects_unknown_species_before_upload(store, owner):
    storage = RecordingPhotoStorage()
    with pytest.raises(SpeciesNotFoundError):
        _create(
            store, owner, SightingCreate(species_name="Dragon", latitude=1, longitude=2), storage=storage, photo=b"img"
        )
    assert storage.saved == []
    assert store.list_all() == []


def test_create_rejects_out_of_range_coordinates(store, owner):
    validator = StubSpeciesValidator()
    with pytest.raises(CoordinateValidationError):
        _create(store, owner, SightingCreate(species_name="Bubo bubo", latitude=-90.01, longitude=0), validator=validator)
    assert validator.calls == []


def test_create_for_unknown_owner_raises_integrity_error(store):
    with pytest.raises(IntegrityError):
        _create(store, uuid.uuid4(), SightingCreate(species_name="Bubo bubo", latitude=1, longitude=2))
    assert store.list_all() == []


def test_delete_sighting(store, owner):
    stored = _create(store, owner, SightingCreate(species_name="Bubo bubo", latitude=1, longitude=2))
    delete_sighting(store, stored.id, owner)
    assert store.get(stored.id) is None


def test_delete_sighting_not_owned(store, owner):
    stored = _create(store, owner, SightingCreate(species_name="Bubo bubo", latitude=1, longitude=2))
    with pytest.raises(SightingNotFoundOrUnauthorized):
        delete_sighting(store, stored.id, uuid.uuid4())
    assert store.get(stored.id) is not None


def test_create_rejects_blank_species_even_without_lookup(store, owner):
    with pytest.raises(SightingValidationError) as exc_info:
        _create(
            store,
            owner,
            SightingCreate(species_name="   ", latitude=1, longitude=2),
            validator=SpeciesValidator(enabled=False),
        )
    assert exc_info.value.status_code == 400
    assert exc_info.value.field == "species_name"
    assert store.list_all() == []
