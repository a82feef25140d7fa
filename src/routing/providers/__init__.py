"""Routing provider clients."""

from .base import (
    ALTERNATE_TIMEOUT_S,
    PRIMARY_TIMEOUT_S,
    ParsedRoute,
    ProviderRequest,
    RouteProvider,
)
from .google import GoogleDirectionsProvider
from .mapbox import MapboxProvider
from .openrouteservice import OpenRouteServiceProvider
from .osrm import OSRMProvider
from .codec import decode_polyline, encode_polyline

# Registry used by the factory to build providers from configuration
PROVIDER_CLASSES = {
    OSRMProvider.name: OSRMProvider,
    OpenRouteServiceProvider.name: OpenRouteServiceProvider,
    GoogleDirectionsProvider.name: GoogleDirectionsProvider,
    MapboxProvider.name: MapboxProvider,
}

__all__ = [
    "RouteProvider",
    "ProviderRequest",
    "ParsedRoute",
    "PRIMARY_TIMEOUT_S",
    "ALTERNATE_TIMEOUT_S",
    "OSRMProvider",
    "OpenRouteServiceProvider",
    "GoogleDirectionsProvider",
    "MapboxProvider",
    "PROVIDER_CLASSES",
    "decode_polyline",
    "encode_polyline",
]
