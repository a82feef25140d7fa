"""Route resolution engine: providers, fallback chain, caching and traffic estimates."""

from .models import (
    Coordinate,
    Route,
    TrafficCondition,
    TrafficInfo,
    TravelMode,
)

from .errors import (
    AllProvidersFailed,
    DegenerateDistance,
    FailureKind,
    InvalidResponse,
    ProviderError,
    ProviderTimeout,
    ProviderUnavailable,
)

from .cache import RouteCache
from .config import ProviderSettings, ResolverConfig
from .traffic import TrafficEstimator, estimate_traffic

from .providers import (
    GoogleDirectionsProvider,
    MapboxProvider,
    OpenRouteServiceProvider,
    OSRMProvider,
    RouteProvider,
)

from .resolver import (
    Attempt,
    ResolutionStage,
    ResolutionTrace,
    RouteResolver,
)

from .factory import build_providers, create_resolver

__all__ = [
    # Data models
    "Coordinate",
    "Route",
    "TrafficCondition",
    "TrafficInfo",
    "TravelMode",

    # Errors
    "AllProvidersFailed",
    "DegenerateDistance",
    "FailureKind",
    "InvalidResponse",
    "ProviderError",
    "ProviderTimeout",
    "ProviderUnavailable",

    # Cache and configuration
    "RouteCache",
    "ProviderSettings",
    "ResolverConfig",

    # Traffic
    "TrafficEstimator",
    "estimate_traffic",

    # Providers
    "RouteProvider",
    "OSRMProvider",
    "OpenRouteServiceProvider",
    "GoogleDirectionsProvider",
    "MapboxProvider",

    # Resolver
    "RouteResolver",
    "ResolutionStage",
    "ResolutionTrace",
    "Attempt",
    "build_providers",
    "create_resolver",
]
