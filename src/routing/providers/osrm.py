"""OSRM route service client (primary provider)."""

from __future__ import annotations

from typing import Any, Dict

from ..errors import InvalidResponse
from ..models import Coordinate, TravelMode
from .base import (
    PRIMARY_TIMEOUT_S,
    ParsedRoute,
    ProviderRequest,
    RouteProvider,
    coordinates_from_lonlat,
    lonlat_path,
)


class OSRMProvider(RouteProvider):
    """
    OSRM ``/route/v1`` client.

    Coordinates go into the path as ``lon,lat``. No API key. Distance is
    returned in meters and duration in seconds. OSRM has no transit profile,
    so transit is routed as driving.
    """

    name = "osrm"
    default_timeout_s = PRIMARY_TIMEOUT_S
    default_base_url = "https://router.project-osrm.org/route/v1"
    mode_map = {
        TravelMode.DRIVING: "driving",
        TravelMode.WALKING: "walking",
        TravelMode.BICYCLING: "bike",
        TravelMode.TRANSIT: "driving",
    }

    def build_request(self, origin: Coordinate, destination: Coordinate, mode: TravelMode) -> ProviderRequest:
        return ProviderRequest(
            method="GET",
            url=f"{self.base_url}/{self.provider_mode(mode)}/{lonlat_path(origin, destination)}",
            params={
                "overview": "full",
                "geometries": "geojson",
                "steps": "true",
            },
        )

    def parse_response(self, payload: Dict[str, Any]) -> ParsedRoute:
        code = payload.get("code")
        if code is not None and code != "Ok":
            raise InvalidResponse(
                f"OSRM code {code}: {payload.get('message', 'unknown error')}",
                provider=self.name,
                payload=payload,
            )

        routes = payload.get("routes") or []
        if not routes:
            raise InvalidResponse("no routes in response", provider=self.name, payload=payload)

        route = routes[0]
        geometry = route.get("geometry") or {}
        if "coordinates" not in geometry or "distance" not in route or "duration" not in route:
            raise InvalidResponse("route is missing geometry, distance or duration", provider=self.name, payload=payload)

        return ParsedRoute(
            coordinates=coordinates_from_lonlat(geometry["coordinates"]),
            distance_km=float(route["distance"]) / 1000.0,
            duration_min=float(route["duration"]) / 60.0,
        )
