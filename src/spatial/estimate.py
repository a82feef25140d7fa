"""
Estimated polyline generation for when no routing provider answers.

The generated polyline only exists to look plausible on a map: instead of a
single diagonal it zig-zags between "horizontal-first" and "vertical-first"
steps the way a city grid does, with a little jitter per point.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional

from .coordinates import Coordinate
from .distance import planar_degrees

logger = logging.getLogger(__name__)

MIN_WAYPOINTS = 2
MAX_WAYPOINTS = 15
MIN_SPAN_DEG = 0.001  # below this the route is just origin -> destination
WAYPOINTS_PER_DEGREE = 1000
JITTER_DEG = 0.0005   # full width of the per-axis perturbation
GRID_STRETCH = 1.2


def waypoint_count(origin: Coordinate, destination: Coordinate) -> int:
    """Number of grid steps for an estimated route, clamped to [2, 15]."""
    span = planar_degrees(origin, destination)
    return min(max(int(span * WAYPOINTS_PER_DEGREE), MIN_WAYPOINTS), MAX_WAYPOINTS)


def _clamp_lat(value: float) -> float:
    return min(90.0, max(-90.0, value))


def _clamp_lon(value: float) -> float:
    return min(180.0, max(-180.0, value))


def generate_estimated_route(
    origin: Coordinate,
    destination: Coordinate,
    rng: Optional[random.Random] = None,
) -> List[Coordinate]:
    """
    Build a grid-like polyline from ``origin`` to ``destination``.

    Args:
        origin: Start point, emitted first exactly
        destination: End point, emitted last exactly
        rng: Random source for the jitter (seed it for reproducible output)

    Returns:
        Polyline with at least two points
    """
    rng = rng or random.Random()
    points = [origin]

    if planar_degrees(origin, destination) > MIN_SPAN_DEG:
        n = waypoint_count(origin, destination)
        d_lat = destination.latitude - origin.latitude
        d_lon = destination.longitude - origin.longitude

        for i in range(1, n):
            ratio = i / n
            lat_jitter = (rng.random() - 0.5) * JITTER_DEG
            lon_jitter = (rng.random() - 0.5) * JITTER_DEG
            stretched = min(ratio * GRID_STRETCH, 1.0)

            if i % 2 == 0:
                # horizontal first
                lat = origin.latitude + d_lat * ratio
                lon = origin.longitude + d_lon * stretched
            else:
                # vertical first
                lat = origin.latitude + d_lat * stretched
                lon = origin.longitude + d_lon * ratio

            points.append(
                Coordinate(
                    latitude=_clamp_lat(lat + lat_jitter),
                    longitude=_clamp_lon(lon + lon_jitter),
                )
            )

    points.append(destination)
    logger.debug("Generated estimated route with %d points", len(points))
    return points
