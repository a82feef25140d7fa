"""Mapbox Directions API client (alternate)."""

from __future__ import annotations

from typing import Any, Dict

from ..errors import InvalidResponse
from ..models import Coordinate, TravelMode
from .base import (
    ParsedRoute,
    ProviderRequest,
    RouteProvider,
    coordinates_from_lonlat,
    lonlat_path,
)


class MapboxProvider(RouteProvider):
    """``GET /directions/v5/mapbox/{profile}/{lon,lat;lon,lat}`` client."""

    name = "mapbox"
    default_base_url = "https://api.mapbox.com/directions/v5/mapbox"
    requires_api_key = True
    mode_map = {
        TravelMode.DRIVING: "driving",
        TravelMode.WALKING: "walking",
        TravelMode.BICYCLING: "cycling",
        TravelMode.TRANSIT: "walking",
    }

    def build_request(self, origin: Coordinate, destination: Coordinate, mode: TravelMode) -> ProviderRequest:
        return ProviderRequest(
            method="GET",
            url=f"{self.base_url}/{self.provider_mode(mode)}/{lonlat_path(origin, destination)}",
            params={
                "geometries": "geojson",
                "access_token": self.api_key,
            },
        )

    def parse_response(self, payload: Dict[str, Any]) -> ParsedRoute:
        routes = payload.get("routes") or []
        if not routes:
            raise InvalidResponse(
                f"no routes in response ({payload.get('code') or payload.get('message')})",
                provider=self.name,
                payload=payload,
            )

        route = routes[0]
        coords = (route.get("geometry") or {}).get("coordinates")
        if coords is None or "distance" not in route or "duration" not in route:
            raise InvalidResponse("route is missing geometry, distance or duration", provider=self.name, payload=payload)

        return ParsedRoute(
            coordinates=coordinates_from_lonlat(coords),
            distance_km=float(route["distance"]) / 1000.0,
            duration_min=float(route["duration"]) / 60.0,
        )
