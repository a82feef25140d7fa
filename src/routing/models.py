"""
Core data models shared by the route resolution engine.

Routes are immutable: every post-processing step (simplification,
densification) builds a new ``Route`` instead of touching a cached one.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, Tuple

from src.spatial.coordinates import Coordinate


class TravelMode(Enum):
    """Supported travel modes. Each provider maps these to its own vocabulary."""
    DRIVING = "driving"
    WALKING = "walking"
    BICYCLING = "bicycling"
    TRANSIT = "transit"

    @classmethod
    def parse(cls, value: "str | TravelMode") -> "TravelMode":
        """Accept an enum member or a case-insensitive mode name."""
        if isinstance(value, TravelMode):
            return value
        key = str(value).strip().lower()
        for mode in cls:
            if mode.value == key:
                return mode
        raise ValueError(
            f"Unknown travel mode '{value}'. Expected one of: "
            f"{', '.join(m.value for m in cls)}"
        )


class TrafficCondition(Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"


@dataclass(frozen=True)
class TrafficInfo:
    """
    Heuristic congestion estimate attached to a route.

    Derived from time of day, distance and mode only; it is never measured
    traffic and should not be treated as such.
    """
    condition: TrafficCondition
    estimated_delay: str
    alternative_routes: int = 1

    def __post_init__(self) -> None:
        if self.alternative_routes < 1:
            raise ValueError("alternative_routes must be >= 1")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "condition": self.condition.value,
            "estimatedDelay": self.estimated_delay,
            "alternativeRoutes": self.alternative_routes,
        }


@dataclass(frozen=True)
class Route:
    """A resolved path between two points."""

    coordinates: Tuple[Coordinate, ...]
    """Ordered polyline, first point near the origin, last near the destination."""

    distance_text: str
    """Display distance, e.g. ``"1.2 km"``."""

    duration_text: str
    """Display duration, e.g. ``"15 min"``."""

    traffic: TrafficInfo

    distance_km: float = 0.0
    """Canonical distance in kilometers."""

    duration_min: float = 0.0
    """Canonical duration in minutes."""

    source: str = "unknown"
    """Stage that produced the route: a provider name or ``"synthetic"``."""

    def __post_init__(self) -> None:
        # Freeze whatever sequence the caller handed in.
        object.__setattr__(self, "coordinates", tuple(self.coordinates))
        if len(self.coordinates) < 2:
            raise ValueError("A route needs at least two coordinates")

    @property
    def start(self) -> Coordinate:
        return self.coordinates[0]

    @property
    def end(self) -> Coordinate:
        return self.coordinates[-1]

    @property
    def is_synthetic(self) -> bool:
        return self.source == "synthetic"

    def with_coordinates(self, coordinates: Iterable[Coordinate]) -> "Route":
        """Return a copy of this route with new geometry."""
        return replace(self, coordinates=tuple(coordinates))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coordinates": [c.to_dict() for c in self.coordinates],
            "distance": self.distance_text,
            "duration": self.duration_text,
            "trafficInfo": self.traffic.to_dict(),
            "distanceKm": self.distance_km,
            "durationMin": self.duration_min,
            "source": self.source,
        }
