"""Google Directions API client (alternate)."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..errors import InvalidResponse
from ..formatting import parse_distance_text, parse_duration_text
from ..models import Coordinate, TravelMode
from .base import ParsedRoute, ProviderRequest, RouteProvider
from .codec import decode_polyline

logger = logging.getLogger(__name__)


def _latlng(c: Coordinate) -> str:
    return f"{c.latitude},{c.longitude}"


class GoogleDirectionsProvider(RouteProvider):
    """
    ``GET /directions/json`` client.

    Unlike the other providers, coordinates travel as ``lat,lng`` query
    parameters. Geometry comes back as an encoded overview polyline.
    """

    name = "google"
    default_base_url = "https://maps.googleapis.com/maps/api"
    requires_api_key = True
    mode_map = {
        TravelMode.DRIVING: "driving",
        TravelMode.WALKING: "walking",
        TravelMode.BICYCLING: "bicycling",
        TravelMode.TRANSIT: "transit",
    }

    def build_request(self, origin: Coordinate, destination: Coordinate, mode: TravelMode) -> ProviderRequest:
        return ProviderRequest(
            method="GET",
            url=f"{self.base_url}/directions/json",
            params={
                "origin": _latlng(origin),
                "destination": _latlng(destination),
                "mode": self.provider_mode(mode),
                "key": self.api_key,
            },
        )

    def parse_response(self, payload: Dict[str, Any]) -> ParsedRoute:
        status = payload.get("status")
        routes = payload.get("routes") or []
        if status != "OK" or not routes:
            raise InvalidResponse(f"Google status {status}", provider=self.name, payload=payload)

        route = routes[0]
        encoded = (route.get("overview_polyline") or {}).get("points")
        legs = route.get("legs") or []
        if not encoded or not legs:
            raise InvalidResponse("route is missing overview polyline or legs", provider=self.name, payload=payload)

        leg = legs[0]
        distance_km = _leg_value(leg.get("distance"), 1000.0, parse_distance_text)
        duration_min = _leg_value(leg.get("duration"), 60.0, parse_duration_text)
        if distance_km is None or duration_min is None:
            raise InvalidResponse("leg is missing distance or duration", provider=self.name, payload=payload)

        return ParsedRoute(
            coordinates=decode_polyline(encoded),
            distance_km=distance_km,
            duration_min=duration_min,
        )


def _leg_value(field: Optional[Dict[str, Any]], divisor: float, parse_text) -> Optional[float]:
    """Prefer the numeric ``value`` (meters / seconds), fall back to parsing ``text``."""
    if not field:
        return None
    if field.get("value") is not None:
        return float(field["value"]) / divisor
    text = field.get("text")
    if text:
        logger.debug("Parsing Google text field %r", text)
        return parse_text(text)
    return None
