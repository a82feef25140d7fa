"""
Route resolution with provider fallback, retries, caching and degradation.

A resolution request walks a small state machine:

    Idle -> TryPrimary -> (RetryPrimary -> TryPrimary)* -> TryAlternate ... ->
    AllFailed -> SyntheticFallback -> Done

A cache hit short-circuits straight to Done. Providers are tried one at a
time, never raced, and only the first one is retried. When every provider
fails the caller still gets a usable synthetic route; provider failures
never propagate to the caller.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from src.spatial.distance import haversine_km
from src.spatial.estimate import generate_estimated_route
from src.spatial.gap import GapBridge, bridge_endpoints, bridge_gap
from src.spatial.simplify import simplify

from .cache import RouteCache
from .config import ResolverConfig
from .errors import AllProvidersFailed, FailureKind, ProviderError
from .models import Coordinate, Route, TravelMode
from .providers.base import RouteProvider
from .synthetic import synthesize_route
from .traffic import TrafficEstimator

logger = logging.getLogger(__name__)

STRAIGHT_LINE_TOLERANCE_DEG = 0.00001


class ResolutionStage(Enum):
    IDLE = "idle"
    CACHE_HIT = "cache_hit"
    TRY_PRIMARY = "try_primary"
    RETRY_PRIMARY = "retry_primary"
    TRY_ALTERNATE = "try_alternate"
    ALL_FAILED = "all_failed"
    SYNTHETIC_FALLBACK = "synthetic_fallback"
    DONE = "done"


@dataclass
class Attempt:
    """One provider call made during a resolution."""
    provider: str
    attempt: int
    stage: ResolutionStage
    outcome: str
    """``"success"`` or the failure kind value."""
    message: str = ""
    backoff_s: float = 0.0


@dataclass
class ResolutionTrace:
    """Diagnostics for one resolution: stages visited and attempts made."""
    key: str
    stages: List[ResolutionStage] = field(default_factory=lambda: [ResolutionStage.IDLE])
    attempts: List[Attempt] = field(default_factory=list)
    source: Optional[str] = None
    cache_hit: bool = False

    def enter(self, stage: ResolutionStage) -> None:
        self.stages.append(stage)

    @property
    def stage(self) -> ResolutionStage:
        return self.stages[-1]

    def calls_to(self, provider: str) -> int:
        return sum(1 for a in self.attempts if a.provider == provider)


def _is_bare_straight_line(route: Route, origin: Coordinate, destination: Coordinate) -> bool:
    if len(route.coordinates) != 2:
        return False
    tol = STRAIGHT_LINE_TOLERANCE_DEG
    first, last = route.coordinates
    return (
        abs(first.latitude - origin.latitude) < tol
        and abs(first.longitude - origin.longitude) < tol
        and abs(last.latitude - destination.latitude) < tol
        and abs(last.longitude - destination.longitude) < tol
    )


class RouteResolver:
    """
    Resolve routes through an ordered chain of providers.

    The resolver is the only writer of its ``RouteCache``. Pass a cache in to
    share it, or let the resolver create its own.
    """

    def __init__(
        self,
        providers: Sequence[RouteProvider],
        cache: Optional[RouteCache] = None,
        config: Optional[ResolverConfig] = None,
        traffic: Optional[TrafficEstimator] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.providers = list(providers)
        self.config = config or ResolverConfig()
        if cache is None:
            cache = RouteCache(
                maxsize=self.config.cache_maxsize,
                provider_ttl=self.config.provider_ttl_s,
                synthetic_ttl=self.config.synthetic_ttl_s,
                precision=self.config.cache_precision,
            )
        self.cache = cache
        self.traffic = traffic or TrafficEstimator()
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._in_flight: Dict[str, "asyncio.Future[Tuple[Route, ResolutionTrace]]"] = {}
        self._background: Set[asyncio.Task] = set()

    @property
    def provider_names(self) -> List[str]:
        return [p.name for p in self.providers]

    # -----------------------------
    # Public API
    # -----------------------------

    async def resolve_route(self, origin: Coordinate, destination: Coordinate, mode: TravelMode | str) -> Route:
        """Resolve a route. Always returns a usable Route."""
        route, _ = await self.resolve_with_trace(origin, destination, mode)
        return route

    async def resolve_with_trace(
        self,
        origin: Coordinate,
        destination: Coordinate,
        mode: TravelMode | str,
    ) -> Tuple[Route, ResolutionTrace]:
        """
        Resolve a route and report how it was produced.

        Concurrent callers that join an in-flight resolution share its trace.
        """
        mode = TravelMode.parse(mode)
        key = self.cache.key(origin, destination, mode)

        cached = self.cache.get(origin, destination, mode)
        if cached is not None:
            trace = ResolutionTrace(key=key, source=cached.source, cache_hit=True)
            trace.enter(ResolutionStage.CACHE_HIT)
            trace.enter(ResolutionStage.DONE)
            logger.info("Route %s served from cache (source: %s)", key, cached.source)
            return cached, trace

        if not self.config.single_flight:
            return await self._resolve_uncached(origin, destination, mode, key)

        future = self._in_flight.get(key)
        if future is None:
            future = asyncio.ensure_future(self._resolve_uncached(origin, destination, mode, key))
            self._in_flight[key] = future
            future.add_done_callback(lambda done, key=key: self._forget(key, done))
        else:
            logger.debug("Joining in-flight resolution for %s", key)
        return await asyncio.shield(future)

    async def precompute_routes(
        self,
        origin: Coordinate,
        destination: Coordinate,
        modes: Optional[Iterable[TravelMode | str]] = None,
    ) -> Dict[TravelMode, Route]:
        """
        Resolve the trip for several modes concurrently.

        Waits until every resolution has settled; one failing mode does not
        cancel the others. Returns the routes that succeeded.
        """
        mode_list = [TravelMode.parse(m) for m in (modes if modes is not None else TravelMode)]
        results = await asyncio.gather(
            *(self.resolve_route(origin, destination, m) for m in mode_list),
            return_exceptions=True,
        )

        routes: Dict[TravelMode, Route] = {}
        for mode, result in zip(mode_list, results):
            if isinstance(result, BaseException):
                logger.error("Pre-computing %s route failed: %r", mode.value, result)
            else:
                routes[mode] = result

        logger.info("Pre-computed %d/%d routes", len(routes), len(mode_list))
        return routes

    def precompute_in_background(
        self,
        origin: Coordinate,
        destination: Coordinate,
        modes: Optional[Iterable[TravelMode | str]] = None,
    ) -> "asyncio.Task[Dict[TravelMode, Route]]":
        """Schedule ``precompute_routes`` without waiting for it."""
        task = asyncio.ensure_future(self.precompute_routes(origin, destination, modes))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    def bridge_gap(self, route: Route, true_origin: Coordinate, true_destination: Coordinate) -> Optional[GapBridge]:
        """Gap connectors for ``route`` using the configured threshold and spacing."""
        return bridge_gap(
            route,
            true_origin,
            true_destination,
            threshold_m=self.config.gap_threshold_m,
            spacing_m=self.config.gap_dot_spacing_m,
        )

    def bridge_path(
        self,
        coordinates: Sequence[Coordinate],
        true_origin: Coordinate,
        true_destination: Coordinate,
    ) -> Optional[GapBridge]:
        """Like ``bridge_gap`` for a polyline the caller already holds."""
        if len(coordinates) < 2:
            raise ValueError("A polyline needs at least two coordinates")
        return bridge_endpoints(
            coordinates[0],
            coordinates[-1],
            true_origin,
            true_destination,
            threshold_m=self.config.gap_threshold_m,
            spacing_m=self.config.gap_dot_spacing_m,
        )

    # -----------------------------
    # Fallback chain
    # -----------------------------

    def _forget(self, key: str, future: asyncio.Future) -> None:
        if self._in_flight.get(key) is future:
            del self._in_flight[key]

    async def _resolve_uncached(
        self,
        origin: Coordinate,
        destination: Coordinate,
        mode: TravelMode,
        key: str,
    ) -> Tuple[Route, ResolutionTrace]:
        trace = ResolutionTrace(key=key)
        failures: List[ProviderError] = []

        for index, provider in enumerate(self.providers):
            retries = self.config.primary_retries if index == 0 else 0
            route = await self._try_provider(provider, index, retries, origin, destination, mode, trace, failures)
            if route is not None:
                return self._finish(route, origin, destination, mode, trace), trace

        trace.enter(ResolutionStage.ALL_FAILED)
        error = AllProvidersFailed(failures)
        logger.warning("%s; using synthetic route for %s", error, key)

        trace.enter(ResolutionStage.SYNTHETIC_FALLBACK)
        traffic = self.traffic.estimate(haversine_km(origin, destination), mode)
        route = synthesize_route(origin, destination, mode, traffic, rng=self._rng)
        return self._finish(route, origin, destination, mode, trace), trace

    async def _try_provider(
        self,
        provider: RouteProvider,
        index: int,
        retries: int,
        origin: Coordinate,
        destination: Coordinate,
        mode: TravelMode,
        trace: ResolutionTrace,
        failures: List[ProviderError],
    ) -> Optional[Route]:
        for attempt in range(retries + 1):
            if index > 0:
                stage = ResolutionStage.TRY_ALTERNATE
            elif attempt > 0:
                stage = ResolutionStage.RETRY_PRIMARY
            else:
                stage = ResolutionStage.TRY_PRIMARY
            trace.enter(stage)

            try:
                route = await provider.resolve(origin, destination, mode)
            except ProviderError as e:
                record = Attempt(provider.name, attempt, stage, e.kind.value, str(e))
                trace.attempts.append(record)
                logger.warning("%s attempt %d failed (%s): %s", provider.name, attempt + 1, e.kind.value, e)
                if e.payload is not None:
                    logger.debug("%s diagnostic payload: %r", provider.name, e.payload)

                # A zero distance will not improve on retry.
                if attempt < retries and e.kind is not FailureKind.DEGENERATE_DISTANCE:
                    record.backoff_s = self.config.backoff_delay(attempt, timed_out=e.kind is FailureKind.TIMEOUT)
                    logger.info("Retrying %s in %.1fs", provider.name, record.backoff_s)
                    await self._sleep(record.backoff_s)
                    continue

                failures.append(e)
                return None

            trace.attempts.append(Attempt(provider.name, attempt, stage, "success"))
            return route

        return None

    def _finish(
        self,
        route: Route,
        origin: Coordinate,
        destination: Coordinate,
        mode: TravelMode,
        trace: ResolutionTrace,
    ) -> Route:
        if self.config.densify_straight_lines and not route.is_synthetic and _is_bare_straight_line(route, origin, destination):
            logger.info("%s returned a bare straight line; adding estimated waypoints", route.source)
            route = route.with_coordinates(generate_estimated_route(origin, destination, rng=self._rng))

        route = route.with_coordinates(simplify(route.coordinates, origin, destination))

        if not route.is_synthetic or self.config.cache_synthetic:
            self.cache.set(origin, destination, mode, route)

        trace.source = route.source
        trace.enter(ResolutionStage.DONE)
        logger.info(
            "Route %s resolved via %s: %s, %s (%d points)",
            trace.key,
            route.source,
            route.distance_text,
            route.duration_text,
            len(route.coordinates),
        )
        return route
