"""OpenRouteService directions client (geometry-rich alternate)."""

from __future__ import annotations

from typing import Any, Dict

from ..errors import InvalidResponse
from ..models import Coordinate, TravelMode
from .base import ParsedRoute, ProviderRequest, RouteProvider, coordinates_from_lonlat


class OpenRouteServiceProvider(RouteProvider):
    """
    ``POST /v2/directions/{profile}/geojson`` client.

    Coordinates go into the JSON body as ``[lon, lat]`` pairs and the API key
    is sent in the ``Authorization`` header. The route's first segment carries
    distance (meters) and duration (seconds).
    """

    name = "openrouteservice"
    default_base_url = "https://api.openrouteservice.org"
    requires_api_key = True
    mode_map = {
        TravelMode.DRIVING: "driving-car",
        TravelMode.WALKING: "foot-walking",
        TravelMode.BICYCLING: "cycling-regular",
        TravelMode.TRANSIT: "foot-walking",
    }

    def build_request(self, origin: Coordinate, destination: Coordinate, mode: TravelMode) -> ProviderRequest:
        return ProviderRequest(
            method="POST",
            url=f"{self.base_url}/v2/directions/{self.provider_mode(mode)}/geojson",
            json={
                "coordinates": [list(origin.as_lonlat()), list(destination.as_lonlat())],
                "units": "km",
            },
            headers={
                "Authorization": self.api_key or "",
                "Content-Type": "application/json; charset=utf-8",
            },
        )

    def parse_response(self, payload: Dict[str, Any]) -> ParsedRoute:
        features = payload.get("features") or []
        if not features:
            raise InvalidResponse("no features in response", provider=self.name, payload=payload)

        feature = features[0]
        coords = (feature.get("geometry") or {}).get("coordinates")
        if not coords or len(coords) < 2:
            raise InvalidResponse("invalid route geometry", provider=self.name, payload=payload)

        segments = (feature.get("properties") or {}).get("segments") or []
        if not segments:
            raise InvalidResponse("no segments in route properties", provider=self.name, payload=payload)

        segment = segments[0]
        return ParsedRoute(
            coordinates=coordinates_from_lonlat(coords),
            distance_km=float(segment["distance"]) / 1000.0,
            duration_min=float(segment["duration"]) / 60.0,
        )
