"""
Synthetic routes: the last stage of the fallback chain.

Distance and duration come from the straight-line haversine distance and an
average speed per mode, never from the estimated waypoints, which exist for
the map only.
"""

from __future__ import annotations

import random
from typing import Dict, Optional, Tuple

from src.spatial.coordinates import Coordinate
from src.spatial.distance import haversine_km
from src.spatial.estimate import generate_estimated_route

from .formatting import format_distance, format_duration
from .models import Route, TrafficInfo, TravelMode

SYNTHETIC_SOURCE = "synthetic"

# Average speeds (km/h)
AVERAGE_SPEEDS_KMH: Dict[TravelMode, float] = {
    TravelMode.DRIVING: 40.0,
    TravelMode.WALKING: 5.0,
    TravelMode.BICYCLING: 15.0,
    TravelMode.TRANSIT: 25.0,
}


def straight_line_estimate(
    origin: Coordinate,
    destination: Coordinate,
    mode: TravelMode,
) -> Tuple[float, float]:
    """Return ``(distance_km, duration_min)`` for a straight-line trip."""
    distance_km = haversine_km(origin, destination)
    speed = AVERAGE_SPEEDS_KMH.get(mode, AVERAGE_SPEEDS_KMH[TravelMode.WALKING])
    return distance_km, distance_km / speed * 60.0


def synthesize_route(
    origin: Coordinate,
    destination: Coordinate,
    mode: TravelMode,
    traffic: TrafficInfo,
    rng: Optional[random.Random] = None,
) -> Route:
    """Assemble a complete synthetic ``Route`` for the given trip."""
    distance_km, duration_min = straight_line_estimate(origin, destination, mode)
    return Route(
        coordinates=tuple(generate_estimated_route(origin, destination, rng=rng)),
        distance_text=format_distance(distance_km),
        duration_text=format_duration(duration_min),
        traffic=traffic,
        distance_km=distance_km,
        duration_min=duration_min,
        source=SYNTHETIC_SOURCE,
    )
