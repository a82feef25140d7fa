"""
In-session route cache.

Provider routes and synthetic routes live in separate caches. Provider
routes never expire by default; synthetic routes carry a TTL so that a
later resolution can pick up a real route once the network recovers.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional

from cachetools import LRUCache, TTLCache

from .models import Coordinate, Route, TravelMode

DEFAULT_MAXSIZE = 512
DEFAULT_SYNTHETIC_TTL = 5 * 60  # seconds
DEFAULT_PRECISION = 5  # ~1m


def _make_cache(maxsize: int, ttl: Optional[float], timer: Callable[[], float]):
    if ttl is None:
        return LRUCache(maxsize=maxsize)
    return TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)


class RouteCache:
    """Route memo keyed by rounded origin, destination and travel mode."""

    def __init__(
        self,
        maxsize: int = DEFAULT_MAXSIZE,
        provider_ttl: Optional[float] = None,
        synthetic_ttl: Optional[float] = DEFAULT_SYNTHETIC_TTL,
        precision: int = DEFAULT_PRECISION,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.precision = precision
        self.provider_ttl = provider_ttl
        self.synthetic_ttl = synthetic_ttl
        self._provider_cache = _make_cache(maxsize, provider_ttl, timer)
        self._synthetic_cache = _make_cache(maxsize, synthetic_ttl, timer)

    def key(self, origin: Coordinate, destination: Coordinate, mode: TravelMode) -> str:
        """
        Composite cache key.

        Coordinates are rounded to ``precision`` decimal places so GPS jitter
        below ~1m still hits the cache.
        """
        p = self.precision
        return (
            f"{origin.latitude:.{p}f},{origin.longitude:.{p}f}|"
            f"{destination.latitude:.{p}f},{destination.longitude:.{p}f}|"
            f"{mode.value}"
        )

    def get(self, origin: Coordinate, destination: Coordinate, mode: TravelMode) -> Optional[Route]:
        """Cached route for the trip, preferring a provider route over a synthetic one."""
        key = self.key(origin, destination, mode)
        route = self._provider_cache.get(key)
        if route is None:
            route = self._synthetic_cache.get(key)
        return route

    def set(self, origin: Coordinate, destination: Coordinate, mode: TravelMode, route: Route) -> None:
        key = self.key(origin, destination, mode)
        if route.is_synthetic:
            self._synthetic_cache[key] = route
        else:
            # A real route supersedes any synthetic placeholder.
            self._synthetic_cache.pop(key, None)
            self._provider_cache[key] = route

    def __contains__(self, key: str) -> bool:
        return key in self._provider_cache or key in self._synthetic_cache

    def __len__(self) -> int:
        return len(self._provider_cache) + len(self._synthetic_cache)

    def clear(self) -> None:
        self._provider_cache.clear()
        self._synthetic_cache.clear()

    def stats(self) -> Dict[str, Any]:
        return {
            "provider_cache": {
                "size": len(self._provider_cache),
                "maxsize": self._provider_cache.maxsize,
                "ttl": self.provider_ttl,
            },
            "synthetic_cache": {
                "size": len(self._synthetic_cache),
                "maxsize": self._synthetic_cache.maxsize,
                "ttl": self.synthetic_ttl,
            },
        }
