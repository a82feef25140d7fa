"""
Common plumbing for routing provider clients.

Each provider only knows how to build its own HTTP request and how to pull
geometry, distance and duration out of its own response. Sending, deadline
enforcement, status checks, the degenerate-distance guard and formatting
into a ``Route`` are shared here.
"""

from __future__ import annotations

import asyncio
import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx

from ..errors import (
    DegenerateDistance,
    InvalidResponse,
    ProviderTimeout,
    ProviderUnavailable,
)
from ..formatting import format_distance, format_duration, is_zero_distance
from ..models import Coordinate, Route, TravelMode
from ..traffic import TrafficEstimator

logger = logging.getLogger(__name__)

PRIMARY_TIMEOUT_S = 15.0
ALTERNATE_TIMEOUT_S = 8.0

DEFAULT_HEADERS = {
    "Accept": "application/json, application/geo+json;q=0.9, */*;q=0.8",
}


@dataclass
class ProviderRequest:
    """Fully described HTTP request, built without touching the network."""
    method: str
    url: str
    params: Dict[str, Any] = field(default_factory=dict)
    json: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class ParsedRoute:
    """Provider response reduced to canonical units."""
    coordinates: List[Coordinate]
    distance_km: float
    duration_min: float


class RouteProvider(ABC):
    """One external routing service."""

    name: str = "provider"
    default_base_url: str = ""
    mode_map: Mapping[TravelMode, str]
    requires_api_key: bool = False
    default_timeout_s: float = ALTERNATE_TIMEOUT_S

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout_s: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        traffic: Optional[TrafficEstimator] = None,
    ):
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self.api_key = api_key
        self.timeout_s = self.default_timeout_s if timeout_s is None else timeout_s
        self._transport = transport
        self.traffic = traffic or TrafficEstimator()

        if self.requires_api_key and not self.api_key:
            raise ValueError(f"{self.name} requires an API key")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r}, timeout_s={self.timeout_s})"

    def provider_mode(self, mode: TravelMode) -> str:
        """Translate a travel mode into this provider's vocabulary."""
        return self.mode_map[mode]

    @abstractmethod
    def build_request(self, origin: Coordinate, destination: Coordinate, mode: TravelMode) -> ProviderRequest:
        """Describe the HTTP request for a trip."""

    @abstractmethod
    def parse_response(self, payload: Dict[str, Any]) -> ParsedRoute:
        """
        Extract geometry, distance (km) and duration (min) from a response body.

        Raises:
            InvalidResponse: If required fields are missing or malformed
        """

    async def resolve(
        self,
        origin: Coordinate,
        destination: Coordinate,
        mode: TravelMode,
        timeout_s: Optional[float] = None,
    ) -> Route:
        """
        Request a route from this provider.

        Args:
            origin: Trip start
            destination: Trip end
            mode: Travel mode
            timeout_s: Overall deadline; defaults to the provider's timeout

        Returns:
            Route with display strings and traffic estimate

        Raises:
            ProviderTimeout: Deadline elapsed before the request settled
            ProviderUnavailable: Request-level failure (transport, decoding, redirects)
            InvalidResponse: Non-success status or malformed body
            DegenerateDistance: Distance rounds to zero
        """
        timeout = self.timeout_s if timeout_s is None else timeout_s
        request = self.build_request(origin, destination, mode)
        logger.debug("%s %s %s", self.name, request.method, request.url)

        try:
            payload = await asyncio.wait_for(self._send(request, timeout), timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise ProviderTimeout(f"no response within {timeout:g}s", provider=self.name) from e
        except httpx.RequestError as e:
            raise ProviderUnavailable(f"{type(e).__name__}: {e}", provider=self.name) from e

        try:
            parsed = self.parse_response(payload)
        except InvalidResponse as e:
            e.provider = e.provider or self.name
            raise
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise InvalidResponse(
                f"malformed response: {type(e).__name__}: {e}",
                provider=self.name,
                payload=payload,
            ) from e

        return self._to_route(parsed, mode, payload)

    async def _send(self, request: ProviderRequest, timeout: float) -> Dict[str, Any]:
        headers = {**DEFAULT_HEADERS, **request.headers}
        async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
            response = await client.request(
                request.method,
                request.url,
                params=request.params or None,
                json=request.json,
                headers=headers,
            )

        if response.status_code >= 400:
            raise InvalidResponse(
                f"HTTP {response.status_code}",
                provider=self.name,
                payload=_safe_body(response),
            )

        try:
            return response.json()
        except ValueError as e:
            raise InvalidResponse("response body is not JSON", provider=self.name, payload=response.text) from e

    def _to_route(self, parsed: ParsedRoute, mode: TravelMode, payload: Any) -> Route:
        if len(parsed.coordinates) < 2:
            raise InvalidResponse(
                f"route geometry has {len(parsed.coordinates)} point(s)",
                provider=self.name,
                payload=payload,
            )

        if is_zero_distance(parsed.distance_km):
            raise DegenerateDistance(
                f"distance {parsed.distance_km!r} km rounds to zero",
                provider=self.name,
                payload=payload,
            )

        if not math.isfinite(parsed.distance_km):
            raise InvalidResponse(
                f"distance {parsed.distance_km!r} km is not finite",
                provider=self.name,
                payload=payload,
            )

        if not math.isfinite(parsed.duration_min) or parsed.duration_min < 0:
            raise InvalidResponse(
                f"duration {parsed.duration_min!r} min is not a finite non-negative value",
                provider=self.name,
                payload=payload,
            )

        return Route(
            coordinates=tuple(parsed.coordinates),
            distance_text=format_distance(parsed.distance_km),
            duration_text=format_duration(parsed.duration_min),
            traffic=self.traffic.estimate(parsed.distance_km, mode),
            distance_km=parsed.distance_km,
            duration_min=parsed.duration_min,
            source=self.name,
        )


def _safe_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def lonlat_path(origin: Coordinate, destination: Coordinate) -> str:
    """``lon,lat;lon,lat`` path segment used by OSRM-style APIs."""
    return ";".join(f"{c.longitude},{c.latitude}" for c in (origin, destination))


def coordinates_from_lonlat(raw: Sequence[Sequence[float]]) -> List[Coordinate]:
    """Convert a GeoJSON ``[[lon, lat], ...]`` list into coordinates."""
    return [Coordinate.from_lonlat(pair) for pair in raw]
