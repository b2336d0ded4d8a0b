"""Sighting submission and deletion, with species and photo collaborators."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from app.core.exceptions import (
    SightingNotFoundOrUnauthorized,
    SightingValidationError,
    SpeciesNotFoundError,
)
from app.core.geo import validate_coordinates
from app.schemas.sighting import SightingCreate
from app.services.photo_storage import LocalPhotoStorage
from app.services.sighting_store import NewSighting, SightingStore
from app.services.species_client import SpeciesValidator

logger = logging.getLogger(__name__)


async def create_sighting(
    store: SightingStore,
    owner_id: uuid.UUID,
    data: SightingCreate,
    *,
    species_validator: SpeciesValidator,
    photo_storage: LocalPhotoStorage,
    photo: Optional[bytes] = None,
):
    """
    Validate a submission and insert it.

    Order: coordinates, non-blank species name, photo upload, insert. Any failure
    raises before the store is touched, except IntegrityError from the
    insert itself.
    """
    validate_coordinates(data.latitude, data.longitude)

    species_name = data.species_name.strip()
    if not species_name:
        raise SightingValidationError("Species name must not be blank", field="species_name")
    if not await species_validator.validate(species_name):
        logger.warning(f"Rejected sighting from {owner_id}: unknown species {species_name!r}")
        raise SpeciesNotFoundError(species_name)

    photo_url = None
    if photo is not None:
        photo_url = photo_storage.save(photo)

    observed_at = data.observed_at
    if observed_at is not None and observed_at.tzinfo is None:
        observed_at = observed_at.replace(tzinfo=timezone.utc)

    return store.insert(
        NewSighting(
            user_id=owner_id,
            species_name=species_name,
            latitude=data.latitude,
            longitude=data.longitude,
            notes=data.notes,
            observed_at=observed_at or datetime.now(timezone.utc),
            photo_url=photo_url,
        )
    )


def delete_sighting(store: SightingStore, sighting_id: int, owner_id: uuid.UUID) -> None:
    """Delete a sighting owned by owner_id; missing and not-owned are reported the same way."""
    if not store.delete_by_owner(sighting_id, owner_id):
        logger.warning(f"Delete of sighting {sighting_id} by {owner_id} refused")
        raise SightingNotFoundOrUnauthorized()
