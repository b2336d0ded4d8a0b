"""
Sighting persistence.

``SightingStore`` is the capability the query and submission services depend
on. ``SqlSightingStore`` is backed by a SQLAlchemy session; ``MemorySightingStore``
keeps records in process and follows the same contract.

Radius queries are a linear scan: every stored sighting is measured against the
center with ``distance_km`` and kept when strictly closer than the radius.
A spatial index could replace the scan behind ``list_within_radius`` without
changing results.
"""

import itertools
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional, Protocol

from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import Session

from app.core.exceptions import IntegrityError
from app.core.geo import GeoPoint, distance_km
from app.models.sighting import Sighting
from app.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_VERIFICATION_STATUS = "unverified"


@dataclass
class NewSighting:
    """Validated submission ready to be stored."""
    user_id: uuid.UUID
    species_name: str
    latitude: float
    longitude: float
    notes: Optional[str] = None
    observed_at: Optional[datetime] = None
    photo_url: Optional[str] = None
    verification_status: str = DEFAULT_VERIFICATION_STATUS


@dataclass
class StoredSighting:
    """Sighting record held by MemorySightingStore."""
    id: int
    user_id: uuid.UUID
    species_name: str
    latitude: float
    longitude: float
    notes: Optional[str]
    observed_at: datetime
    photo_url: Optional[str]
    verification_status: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def location_of(sighting) -> GeoPoint:
    return GeoPoint(sighting.latitude, sighting.longitude)


def rank_within_radius(sightings: Iterable, center: GeoPoint, radius_km: float) -> list[tuple]:
    """
    Return (sighting, distance_km) pairs strictly inside radius_km, nearest first.

    ``sightings`` must be in storage order; ``list.sort`` is stable, so equal
    distances keep that order.
    """
    matching = []
    for sighting in sightings:
        dist = distance_km(center, location_of(sighting))
        if dist < radius_km:
            matching.append((sighting, dist))
    matching.sort(key=lambda pair: pair[1])
    return matching


class SightingStore(Protocol):
    def insert(self, new: NewSighting): ...

    def get(self, sighting_id: int): ...

    def delete_by_owner(self, sighting_id: int, owner_id: uuid.UUID) -> bool: ...

    def list_all(self) -> list: ...

    def list_by_owner(self, owner_id: uuid.UUID) -> list: ...

    def list_within_radius(self, center: GeoPoint, radius_km: float) -> list[tuple]: ...


class SqlSightingStore:
    """SightingStore over a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, new: NewSighting) -> Sighting:
        owner = self.db.query(User).filter(User.id == new.user_id).first()
        if owner is None:
            logger.warning(f"Rejected sighting insert: owner {new.user_id} does not exist")
            raise IntegrityError(f"Owner {new.user_id} does not exist")

        now = datetime.now(timezone.utc)
        sighting = Sighting(
            user_id=new.user_id,
            species_name=new.species_name,
            latitude=new.latitude,
            longitude=new.longitude,
            notes=new.notes,
            observed_at=new.observed_at or now,
            photo_url=new.photo_url,
            verification_status=new.verification_status,
            created_at=now,
        )
        self.db.add(sighting)
        try:
            self.db.commit()
        except sa_exc.IntegrityError as e:
            # Owner removed between the lookup and the commit
            self.db.rollback()
            logger.warning(f"Sighting insert violated a constraint: {e.orig}")
            raise IntegrityError(f"Owner {new.user_id} does not exist") from e
        self.db.refresh(sighting)
        logger.info(f"Stored sighting id={sighting.id} species={sighting.species_name!r} owner={sighting.user_id}")
        return sighting

    def get(self, sighting_id: int) -> Sighting | None:
        return self.db.query(Sighting).filter(Sighting.id == sighting_id).first()

    def delete_by_owner(self, sighting_id: int, owner_id: uuid.UUID) -> bool:
        deleted = (
            self.db.query(Sighting)
            .filter(Sighting.id == sighting_id, Sighting.user_id == owner_id)
            .delete()
        )
        self.db.commit()
        if deleted:
            logger.info(f"Deleted sighting id={sighting_id} owner={owner_id}")
        return bool(deleted)

    def list_all(self) -> list[Sighting]:
        return (
            self.db.query(Sighting)
            .order_by(Sighting.created_at.desc(), Sighting.id.desc())
            .all()
        )

    def list_by_owner(self, owner_id: uuid.UUID) -> list[Sighting]:
        return (
            self.db.query(Sighting)
            .filter(Sighting.user_id == owner_id)
            .order_by(Sighting.created_at.desc(), Sighting.id.desc())
            .all()
        )

    def list_within_radius(self, center: GeoPoint, radius_km: float) -> list[tuple[Sighting, float]]:
        scanned = self.db.query(Sighting).order_by(Sighting.id.asc()).all()
        return rank_within_radius(scanned, center, radius_km)


class MemorySightingStore:
    """In-process SightingStore. Owners must be registered with add_owner()."""

    def __init__(self):
        self._owners: set[uuid.UUID] = set()
        self._rows: list[StoredSighting] = []
        self._ids = itertools.count(1)

    def add_owner(self, owner_id: uuid.UUID) -> None:
        self._owners.add(owner_id)

    def remove_owner(self, owner_id: uuid.UUID) -> None:
        """Drop an owner and cascade to their sightings."""
        self._owners.discard(owner_id)
        self._rows = [row for row in self._rows if row.user_id != owner_id]

    def insert(self, new: NewSighting) -> StoredSighting:
        if new.user_id not in self._owners:
            raise IntegrityError(f"Owner {new.user_id} does not exist")
        now = datetime.now(timezone.utc)
        row = StoredSighting(
            id=next(self._ids),
            user_id=new.user_id,
            species_name=new.species_name,
            latitude=new.latitude,
            longitude=new.longitude,
            notes=new.notes,
            observed_at=new.observed_at or now,
            photo_url=new.photo_url,
            verification_status=new.verification_status,
            created_at=now,
        )
        self._rows.append(row)
        return row

    def get(self, sighting_id: int) -> StoredSighting | None:
        for row in self._rows:
            if row.id == sighting_id:
                return row
        return None

    def delete_by_owner(self, sighting_id: int, owner_id: uuid.UUID) -> bool:
        for i, row in enumerate(self._rows):
            if row.id == sighting_id and row.user_id == owner_id:
                del self._rows[i]
                return True
        return False

    def list_all(self) -> list[StoredSighting]:
        return sorted(self._rows, key=lambda r: (r.created_at, r.id), reverse=True)

    def list_by_owner(self, owner_id: uuid.UUID) -> list[StoredSighting]:
        return [row for row in self.list_all() if row.user_id == owner_id]

    def list_within_radius(self, center: GeoPoint, radius_km: float) -> list[tuple[StoredSighting, float]]:
        return rank_within_radius(list(self._rows), center, radius_km)
