"""
Gap bridging between a resolved route and the true trip endpoints.

Providers snap endpoints to the road graph and cached routes go stale as
the user moves, so the polyline's ends can drift away from the real
origin/destination markers. When the drift exceeds a threshold we emit a
dashed connector with evenly spaced dots along it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from .coordinates import Coordinate
from .distance import distance_meters, interpolate

if TYPE_CHECKING:
    from src.routing.models import Route

GAP_THRESHOLD_M = 20.0
DOT_SPACING_M = 30.0


@dataclass(frozen=True)
class GapConnector:
    """Dashed connector geometry for one end of a route."""
    start: Coordinate
    end: Coordinate
    gap_m: float
    dots: Tuple[Coordinate, ...]

    @property
    def line(self) -> Tuple[Coordinate, Coordinate]:
        return (self.start, self.end)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line": [self.start.to_dict(), self.end.to_dict()],
            "gapMeters": self.gap_m,
            "dots": [d.to_dict() for d in self.dots],
        }


@dataclass(frozen=True)
class GapBridge:
    """Connectors for the origin side and/or the destination side."""
    origin: Optional[GapConnector] = None
    destination: Optional[GapConnector] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "origin": self.origin.to_dict() if self.origin else None,
            "destination": self.destination.to_dict() if self.destination else None,
        }


def dots_along(start: Coordinate, end: Coordinate, spacing_m: float = DOT_SPACING_M) -> Tuple[Coordinate, ...]:
    """
    Evenly spaced interior dots between ``start`` and ``end``.

    ``floor(length / spacing_m)`` dots are placed strictly inside the segment;
    the endpoints are left out because markers already sit there.
    """
    if spacing_m <= 0:
        raise ValueError("spacing_m must be positive")
    count = int(distance_meters(start, end) // spacing_m)
    return tuple(interpolate(start, end, i / (count + 1)) for i in range(1, count + 1))


def connect(
    start: Coordinate,
    end: Coordinate,
    threshold_m: float = GAP_THRESHOLD_M,
    spacing_m: float = DOT_SPACING_M,
) -> Optional[GapConnector]:
    """Connector from ``start`` to ``end``, or None when the gap is within threshold."""
    gap = distance_meters(start, end)
    if gap <= threshold_m:
        return None
    return GapConnector(start=start, end=end, gap_m=gap, dots=dots_along(start, end, spacing_m))


def bridge_gap(
    route: Route,
    true_origin: Coordinate,
    true_destination: Coordinate,
    threshold_m: float = GAP_THRESHOLD_M,
    spacing_m: float = DOT_SPACING_M,
) -> Optional[GapBridge]:
    """
    Compute connectors between ``route``'s ends and the true endpoints.

    Returns:
        ``GapBridge`` with the connectors that crossed the threshold, or None
        when neither end needs one.
    """
    return bridge_endpoints(route.start, route.end, true_origin, true_destination, threshold_m, spacing_m)


def bridge_endpoints(
    path_start: Coordinate,
    path_end: Coordinate,
    true_origin: Coordinate,
    true_destination: Coordinate,
    threshold_m: float = GAP_THRESHOLD_M,
    spacing_m: float = DOT_SPACING_M,
) -> Optional[GapBridge]:
    """Same as ``bridge_gap`` for a bare polyline given by its two ends."""
    origin_connector = connect(true_origin, path_start, threshold_m, spacing_m)
    destination_connector = connect(path_end, true_destination, threshold_m, spacing_m)
    if origin_connector is None and destination_connector is None:
        return None
    return GapBridge(origin=origin_connector, destination=destination_connector)
