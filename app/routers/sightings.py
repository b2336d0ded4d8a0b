"""Sighting endpoints: listing and radius search, submission, deletion."""

import logging
from datetime import datetime
from typing import Optional, Union

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.sighting import SightingCreate, SightingRead, SightingNearbyRead
from app.services.photo_storage import LocalPhotoStorage, get_photo_storage
from app.services.query_service import SightingQueryService, parse_geo_filter
from app.services.sighting_service import create_sighting, delete_sighting
from app.services.sighting_store import SightingStore, SqlSightingStore
from app.services.species_client import SpeciesValidator, get_species_validator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sightings", tags=["sightings"])


def get_sighting_store(db: Session = Depends(get_db)) -> SightingStore:
    return SqlSightingStore(db)


def get_query_service(store: SightingStore = Depends(get_sighting_store)) -> SightingQueryService:
    return SightingQueryService(store)


@router.get("", response_model=list[Union[SightingNearbyRead, SightingRead]])
def list_sightings(
    lat: Optional[str] = Query(None, description="Latitude of the search center"),
    lon: Optional[str] = Query(None, description="Longitude of the search center"),
    radius: Optional[str] = Query(None, description="Search radius in kilometers"),
    service: SightingQueryService = Depends(get_query_service),
):
    """
    List sightings.

    When lat, lon and radius are all present and numeric, returns sightings
    strictly within `radius` km of (lat, lon), nearest first, each with a
    `distance` field. Otherwise (including partial input) returns every
    sighting, newest first, without `distance`.
    """
    geo_filter = parse_geo_filter(lat, lon, radius)
    results = service.query(geo_filter)
    if geo_filter is None:
        return [SightingRead.model_validate(r.sighting) for r in results]
    return [
        SightingNearbyRead(
            **SightingRead.model_validate(r.sighting).model_dump(),
            distance=r.distance,
        )
        for r in results
    ]


@router.get("/mine", response_model=list[SightingRead])
def list_my_sightings(
    current_user: User = Depends(get_current_user),
    service: SightingQueryService = Depends(get_query_service),
):
    """List the authenticated user's sightings, newest first."""
    return service.list_mine(current_user.id)


@router.get("/{sighting_id}", response_model=SightingRead)
def get_sighting(sighting_id: int, store: SightingStore = Depends(get_sighting_store)):
    """Get sighting by ID."""
    sighting = store.get(sighting_id)
    if not sighting:
        raise HTTPException(status_code=404, detail="Sighting not found")
    return sighting


@router.post("", response_model=SightingRead, status_code=201)
async def submit_sighting(
    species_name: str = Form(..., min_length=1),
    latitude: float = Form(...),
    longitude: float = Form(...),
    notes: Optional[str] = Form(None),
    observed_at: Optional[datetime] = Form(None),
    photo: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    store: SightingStore = Depends(get_sighting_store),
    species_validator: SpeciesValidator = Depends(get_species_validator),
    photo_storage: LocalPhotoStorage = Depends(get_photo_storage),
):
    """
    Submit a sighting as multipart form data with an optional `photo` file.

    Rejected with 400 for out-of-range coordinates or an unusable photo,
    422 when the species name is not recognised, 502 when species lookup
    is unavailable.
    """
    photo_bytes = None
    if photo is not None and photo.filename:
        photo_bytes = await photo.read()

    data = SightingCreate(
        species_name=species_name,
        latitude=latitude,
        longitude=longitude,
        notes=notes or None,
        observed_at=observed_at,
    )
    return await create_sighting(
        store,
        current_user.id,
        data,
        species_validator=species_validator,
        photo_storage=photo_storage,
        photo=photo_bytes,
    )


@router.delete("/{sighting_id}", status_code=204)
def remove_sighting(
    sighting_id: int,
    current_user: User = Depends(get_current_user),
    store: SightingStore = Depends(get_sighting_store),
):
    """
    Delete one of the authenticated user's sightings.
    A missing sighting and someone else's sighting both return 404.
    """
    delete_sighting(store, sighting_id, current_user.id)
    return Response(status_code=204)
