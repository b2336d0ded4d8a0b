"""Sighting read policy: unfiltered newest-first listing vs. radius search nearest-first."""

import logging
import math
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from app.core.geo import GeoPoint, validate_coordinates
from app.services.sighting_store import SightingStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeoFilter:
    center: GeoPoint
    radius_km: float


@dataclass
class SightingResult:
    """A sighting plus its distance from the query center, when one was given."""
    sighting: Any
    distance: Optional[float] = None


def _parse_finite(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        value = float(str(raw).strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_geo_filter(
    lat: Optional[str],
    lon: Optional[str],
    radius: Optional[str],
) -> Optional[GeoFilter]:
    """
    Build a GeoFilter from raw query-string values.

    Returns None unless all three values are present and parse as finite
    numbers. Partial input (e.g. lat without lon) is not an error; the caller
    falls back to the unfiltered listing. A parsed center outside geographic
    range raises CoordinateValidationError.
    """
    lat_value = _parse_finite(lat)
    lon_value = _parse_finite(lon)
    radius_value = _parse_finite(radius)
    if lat_value is None or lon_value is None or radius_value is None:
        if any(v is not None for v in (lat, lon, radius)):
            logger.debug(f"Incomplete geo filter lat={lat!r} lon={lon!r} radius={radius!r}; listing all")
        return None
    center = validate_coordinates(lat_value, lon_value)
    return GeoFilter(center=center, radius_km=radius_value)


class SightingQueryService:
    def __init__(self, store: SightingStore):
        self.store = store

    def query(self, geo_filter: Optional[GeoFilter] = None) -> list[SightingResult]:
        """
        With a filter: sightings strictly within the radius, nearest first,
        each carrying its distance in km. Without: every sighting, newest first.
        """
        if geo_filter is None:
            return [SightingResult(s) for s in self.store.list_all()]

        ranked = self.store.list_within_radius(geo_filter.center, geo_filter.radius_km)
        logger.info(
            f"Radius query center=({geo_filter.center.latitude}, {geo_filter.center.longitude}) "
            f"radius_km={geo_filter.radius_km} matched={len(ranked)}"
        )
        return [SightingResult(s, dist) for s, dist in ranked]

    def list_mine(self, owner_id: uuid.UUID) -> list:
        return self.store.list_by_owner(owner_id)
