"""
Pytest configuration and shared fixtures for route resolver tests.

This file provides:
- Sample trip coordinates
- A traffic estimator pinned to a fixed hour
- Scripted fake providers that never touch the network
- Canned provider response bodies
"""

import asyncio
import random
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

import polyline
import pytest

from src.routing import Coordinate, TrafficEstimator
from src.routing.errors import ProviderError
from src.routing.providers.base import ParsedRoute, ProviderRequest, RouteProvider


# ==============================================================================
# Sample Coordinates
# ==============================================================================

@pytest.fixture
def origin() -> Coordinate:
    """Trip start in Bacolod."""
    return Coordinate(latitude=10.7989, longitude=122.9744)


@pytest.fixture
def destination() -> Coordinate:
    """Trip end roughly 1 km north-east of the origin."""
    return Coordinate(latitude=10.805, longitude=122.98)


# ==============================================================================
# Clock and Randomness
# ==============================================================================

def fixed_clock(hour: int):
    """Clock that always reports the given hour."""
    return lambda: datetime(2024, 5, 14, hour, 30)


@pytest.fixture
def off_peak_traffic() -> TrafficEstimator:
    """Traffic estimator pinned to noon (not a peak hour)."""
    return TrafficEstimator(clock=fixed_clock(12))


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


# ==============================================================================
# Fake Providers
# ==============================================================================

Outcome = Union[ParsedRoute, ProviderError]


class ScriptedProvider(RouteProvider):
    """
    Provider that replays a script of outcomes instead of calling HTTP.

    Each call consumes the next outcome; the last one repeats forever.
    A ``ProviderError`` outcome is raised, a ``ParsedRoute`` becomes a Route.
    """

    def __init__(
        self,
        name: str,
        outcomes: List[Outcome],
        traffic: Optional[TrafficEstimator] = None,
        delay: float = 0.0,
    ):
        super().__init__(traffic=traffic)
        self.name = name
        self.outcomes = list(outcomes)
        self.delay = delay
        self.calls = 0

    def build_request(self, origin, destination, mode) -> ProviderRequest:
        return ProviderRequest(method="GET", url=f"fake://{self.name}")

    def parse_response(self, payload: Dict[str, Any]) -> ParsedRoute:
        return payload["parsed"]

    async def resolve(self, origin, destination, mode, timeout_s=None):
        index = min(self.calls, len(self.outcomes) - 1)
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        outcome = self.outcomes[index]
        if isinstance(outcome, ProviderError):
            raise outcome
        return self._to_route(outcome, mode, payload=None)


def parsed_route(distance_m: float, duration_s: float, points: int = 10) -> ParsedRoute:
    """ParsedRoute along a straight line with ``points`` vertices."""
    coords = [
        Coordinate(latitude=10.7989 + i * 0.0001, longitude=122.9744 + i * 0.0001)
        for i in range(points)
    ]
    return ParsedRoute(coordinates=coords, distance_km=distance_m / 1000.0, duration_min=duration_s / 60.0)


class SleepRecorder:
    """Stand-in for ``asyncio.sleep`` that records delays without waiting."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()



# ==============================================================================
# Canned Provider Responses
# ==============================================================================

@pytest.fixture
def osrm_payload() -> Dict[str, Any]:
    return {
        "code": "Ok",
        "routes": [
            {
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[122.9744, 10.7989], [122.977, 10.801], [122.98, 10.805]],
                },
                "distance": 1200.0,
                "duration": 900.0,
            }
        ],
    }


@pytest.fixture
def ors_payload() -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[122.9744, 10.7989], [122.977, 10.801], [122.98, 10.805]],
                },
                "properties": {"segments": [{"distance": 2500.0, "duration": 300.0}]},
            }
        ],
    }


@pytest.fixture
def google_payload() -> Dict[str, Any]:
    return {
        "status": "OK",
        "routes": [
            {
                "overview_polyline": {
                    "points": polyline.encode([(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)]),
                },
                "legs": [
                    {
                        "distance": {"text": "3.4 km", "value": 3400},
                        "duration": {"text": "1 hour 5 mins", "value": 3900},
                    }
                ],
            }
        ],
    }


@pytest.fixture
def mapbox_payload() -> Dict[str, Any]:
    return {
        "code": "Ok",
        "routes": [
            {
                "geometry": {"coordinates": [[122.9744, 10.7989], [122.98, 10.805]]},
                "distance": 1500.0,
                "duration": 45.0,
            }
        ],
    }
