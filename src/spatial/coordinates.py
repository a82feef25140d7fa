"""Geographic point type shared by the spatial helpers and the routing engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple


@dataclass(frozen=True)
class Coordinate:
    """WGS-84 point in decimal degrees."""
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range [-90, 90]: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range [-180, 180]: {self.longitude}")

    @classmethod
    def from_lonlat(cls, pair: Sequence[float]) -> "Coordinate":
        """Build from a GeoJSON-style ``[lon, lat]`` pair."""
        return cls(latitude=float(pair[1]), longitude=float(pair[0]))

    def as_lonlat(self) -> Tuple[float, float]:
        return (self.longitude, self.latitude)

    def as_latlng(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

    def to_dict(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}
