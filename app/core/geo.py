"""Geo utilities: great-circle distance and coordinate validation."""

import math
from typing import NamedTuple

from app.core.exceptions import CoordinateValidationError

EARTH_RADIUS_KM = 6371.0

LAT_MIN = -90.0
LAT_MAX = 90.0
LON_MIN = -180.0
LON_MAX = 180.0


class GeoPoint(NamedTuple):
    latitude: float
    longitude: float


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    """
    Compute great-circle distance between two points in kilometers.

    Uses the spherical law of cosines on a sphere of radius EARTH_RADIUS_KM.
    Inputs are not validated; out-of-range coordinates give meaningless output.
    """
    if a == b:
        return 0.0
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    dlambda = math.radians(b.longitude - a.longitude)

    cos_angle = math.cos(phi1) * math.cos(phi2) * math.cos(dlambda) + math.sin(phi1) * math.sin(phi2)
    # Rounding can push identical or antipodal points just outside acos' domain
    cos_angle = max(-1.0, min(1.0, cos_angle))
    return EARTH_RADIUS_KM * math.acos(cos_angle)


def validate_coordinates(latitude: float, longitude: float) -> GeoPoint:
    """Return a GeoPoint, or raise CoordinateValidationError if out of range."""
    if latitude is None or longitude is None:
        raise CoordinateValidationError("Latitude and longitude are required")
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise CoordinateValidationError("Latitude and longitude must be finite numbers")
    if not LAT_MIN <= latitude <= LAT_MAX:
        raise CoordinateValidationError(
            f"Latitude {latitude} out of range [{LAT_MIN}, {LAT_MAX}]", field="latitude"
        )
    if not LON_MIN <= longitude <= LON_MAX:
        raise CoordinateValidationError(
            f"Longitude {longitude} out of range [{LON_MIN}, {LON_MAX}]", field="longitude"
        )
    return GeoPoint(latitude, longitude)
