"""
src/spatial: Geographic primitives and polyline geometry.

Coordinates, great-circle distances, polyline thinning, estimated
(grid-like) polylines and gap connectors between a route and its true
endpoints.
"""

from .coordinates import Coordinate
from .distance import (
    EARTH_RADIUS_KM,
    distance_meters,
    haversine_km,
    interpolate,
    planar_degrees,
)
from .estimate import generate_estimated_route, waypoint_count
from .gap import (
    DOT_SPACING_M,
    GAP_THRESHOLD_M,
    GapBridge,
    GapConnector,
    bridge_endpoints,
    bridge_gap,
    connect,
    dots_along,
)
from .simplify import simplify, stride_for

__all__ = [
    "Coordinate",
    "EARTH_RADIUS_KM",
    "distance_meters",
    "haversine_km",
    "interpolate",
    "planar_degrees",
    "generate_estimated_route",
    "waypoint_count",
    "DOT_SPACING_M",
    "GAP_THRESHOLD_M",
    "GapBridge",
    "GapConnector",
    "bridge_endpoints",
    "bridge_gap",
    "connect",
    "dots_along",
    "simplify",
    "stride_for",
]
