"""Encoded polyline conversion (precision 5) between strings and coordinates."""

from __future__ import annotations

from typing import Iterable, List

import polyline

from ..models import Coordinate

PRECISION = 5


def decode_polyline(encoded: str) -> List[Coordinate]:
    """Decode an encoded polyline into coordinates."""
    return [Coordinate(latitude=lat, longitude=lng) for lat, lng in polyline.decode(encoded, PRECISION)]


def encode_polyline(points: Iterable[Coordinate]) -> str:
    """Encode coordinates into a polyline string."""
    return polyline.encode([p.as_latlng() for p in points], PRECISION)
