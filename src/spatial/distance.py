"""Great-circle distance helpers used across the routing engine."""

from __future__ import annotations

import math

from .coordinates import Coordinate

EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_M = EARTH_RADIUS_KM * 1000.0


def _central_angle(a: Coordinate, b: Coordinate) -> float:
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    # Clamp against rounding drift just above 1.0 for antipodal points.
    h = min(1.0, max(0.0, h))
    return 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two points in kilometers."""
    return EARTH_RADIUS_KM * _central_angle(a, b)


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two points in meters."""
    return EARTH_RADIUS_M * _central_angle(a, b)


def planar_degrees(a: Coordinate, b: Coordinate) -> float:
    """Euclidean length of the segment in raw degree space."""
    return math.hypot(b.latitude - a.latitude, b.longitude - a.longitude)


def interpolate(a: Coordinate, b: Coordinate, ratio: float) -> Coordinate:
    """Linear interpolation between ``a`` and ``b`` (``ratio`` in [0, 1])."""
    return Coordinate(
        latitude=a.latitude + (b.latitude - a.latitude) * ratio,
        longitude=a.longitude + (b.longitude - a.longitude) * ratio,
    )
