"""
Unit Tests for Routing Module (src/routing)

Tests data models, display formatting, traffic heuristics, the route cache
and resolver configuration.
"""

import math

import pytest

from src.routing import (
    Coordinate,
    ProviderSettings,
    ResolverConfig,
    Route,
    RouteCache,
    TrafficCondition,
    TrafficEstimator,
    TrafficInfo,
    TravelMode,
    estimate_traffic,
)
from src.routing.formatting import (
    format_distance,
    format_duration,
    is_zero_distance,
    parse_distance_text,
    parse_duration_text,
)
from src.routing.synthetic import AVERAGE_SPEEDS_KMH, straight_line_estimate, synthesize_route
from src.routing.traffic import is_peak_hour

from tests.conftest import fixed_clock


LIGHT = TrafficInfo(TrafficCondition.LIGHT, "No delays", 1)


def make_route(origin, destination, source="osrm") -> Route:
    return Route(
        coordinates=(origin, destination),
        distance_text="0.9 km",
        duration_text="11 min",
        traffic=LIGHT,
        distance_km=0.9,
        duration_min=11,
        source=source,
    )


# ==============================================================================
# Model Tests
# ==============================================================================

class TestTravelMode:
    """Test travel mode parsing."""

    def test_parse_case_insensitive(self):
        """Test that mode names parse regardless of case."""
        assert TravelMode.parse("Walking") is TravelMode.WALKING
        assert TravelMode.parse(" TRANSIT ") is TravelMode.TRANSIT

    def test_parse_member_passthrough(self):
        """Test that enum members pass through unchanged."""
        assert TravelMode.parse(TravelMode.DRIVING) is TravelMode.DRIVING

    def test_parse_unknown(self):
        """Test that unknown modes raise ValueError."""
        with pytest.raises(ValueError, match="Unknown travel mode"):
            TravelMode.parse("teleport")


class TestRoute:
    """Test route invariants."""

    def test_requires_two_points(self, origin):
        """Test that a route with one coordinate is rejected."""
        with pytest.raises(ValueError):
            Route(coordinates=(origin,), distance_text="0.0 km", duration_text="< 1 min", traffic=LIGHT)

    def test_coordinates_frozen_to_tuple(self, origin, destination):
        """Test that list input is stored as a tuple."""
        route = Route(coordinates=[origin, destination], distance_text="0.9 km",
                      duration_text="11 min", traffic=LIGHT)
        assert isinstance(route.coordinates, tuple)
        assert route.start == origin
        assert route.end == destination

    def test_with_coordinates_returns_copy(self, origin, destination):
        """Test that replacing geometry leaves the original untouched."""
        route = make_route(origin, destination)
        mid = Coordinate(latitude=10.8, longitude=122.977)
        updated = route.with_coordinates([origin, mid, destination])
        assert len(updated.coordinates) == 3
        assert len(route.coordinates) == 2
        assert updated.distance_text == route.distance_text

    def test_to_dict(self, origin, destination):
        """Test the serialized form."""
        data = make_route(origin, destination).to_dict()
        assert data["distance"] == "0.9 km"
        assert data["trafficInfo"] == {
            "condition": "light",
            "estimatedDelay": "No delays",
            "alternativeRoutes": 1,
        }
        assert data["coordinates"][0] == {"latitude": 10.7989, "longitude": 122.9744}

    def test_alternative_routes_at_least_one(self):
        """Test that zero alternatives is rejected."""
        with pytest.raises(ValueError):
            TrafficInfo(TrafficCondition.LIGHT, "No delays", 0)


# ==============================================================================
# Formatting Tests
# ==============================================================================

class TestFormatting:
    """Test display strings for distance and duration."""

    def test_distance_one_decimal(self):
        assert format_distance(1.2) == "1.2 km"
        assert format_distance(12.345) == "12.3 km"

    @pytest.mark.parametrize(
        "minutes,expected",
        [
            (0.5, "< 1 min"),
            (1, "1 min"),
            (15, "15 min"),
            (14.5, "15 min"),
            (60, "1h"),
            (65, "1h 5m"),
            (120, "2h"),
            (119.7, "2h"),
        ],
    )
    def test_duration(self, minutes, expected):
        """Test minute, hour and sub-minute renderings."""
        assert format_duration(minutes) == expected

    @pytest.mark.parametrize("km", [0.0, 0.005, 0.04, float("nan"), -1.0])
    def test_zero_distance_detected(self, km):
        """Test distances that must not be shown."""
        assert is_zero_distance(km)

    def test_real_distance_not_zero(self):
        assert not is_zero_distance(0.2)

    def test_parse_distance_text(self):
        """Test parsing provider distance text into kilometers."""
        assert parse_distance_text("1.2 km") == pytest.approx(1.2)
        assert parse_distance_text("850 m") == pytest.approx(0.85)
        assert parse_distance_text("1,234 km") == pytest.approx(1234)
        assert parse_distance_text("somewhere") is None

    def test_parse_duration_text(self):
        """Test parsing provider duration text into minutes."""
        assert parse_duration_text("15 mins") == pytest.approx(15)
        assert parse_duration_text("1 hour 5 mins") == pytest.approx(65)
        assert parse_duration_text("") is None


# ==============================================================================
# Traffic Tests
# ==============================================================================

class TestTraffic:
    """Test heuristic traffic estimates."""

    def test_peak_hours(self):
        """Test that peak buckets are 7-9 and 17-19 inclusive."""
        assert [h for h in range(24) if is_peak_hour(h)] == [7, 8, 9, 17, 18, 19]

    def test_driving_peak_long_is_heavy(self):
        info = estimate_traffic(3.0, TravelMode.DRIVING, 8)
        assert info.condition is TrafficCondition.HEAVY
        assert info.estimated_delay == "6 min delay"
        assert info.alternative_routes == 3

    def test_driving_peak_short_is_moderate(self):
        info = estimate_traffic(1.5, TravelMode.DRIVING, 18)
        assert info.condition is TrafficCondition.MODERATE
        assert info.estimated_delay == "2 min delay"
        assert info.alternative_routes == 2

    def test_driving_off_peak_long_is_moderate(self):
        info = estimate_traffic(6.0, TravelMode.DRIVING, 12)
        assert info.condition is TrafficCondition.MODERATE
        assert info.estimated_delay == "6 min delay"

    def test_driving_off_peak_short_is_light(self):
        info = estimate_traffic(3.0, TravelMode.DRIVING, 12)
        assert info.condition is TrafficCondition.LIGHT
        assert info.estimated_delay == "No delays"
        assert info.alternative_routes == 1

    def test_transit(self):
        """Test transit delays inside and outside peak hours."""
        peak = estimate_traffic(10.0, TravelMode.TRANSIT, 17)
        assert (peak.condition, peak.estimated_delay, peak.alternative_routes) == (
            TrafficCondition.MODERATE, "2-5 min delay", 2
        )
        quiet = estimate_traffic(10.0, TravelMode.TRANSIT, 22)
        assert (quiet.condition, quiet.estimated_delay) == (TrafficCondition.LIGHT, "On time")

    @pytest.mark.parametrize("mode", [TravelMode.WALKING, TravelMode.BICYCLING])
    def test_active_modes_always_light(self, mode):
        info = estimate_traffic(20.0, mode, 8)
        assert info.condition is TrafficCondition.LIGHT
        assert info.estimated_delay == "No delays"

    def test_estimator_uses_clock(self):
        """Test that the estimator reads the hour from its clock."""
        estimator = TrafficEstimator(clock=fixed_clock(8))
        assert estimator.current_hour() == 8
        assert estimator.estimate(3.0, TravelMode.DRIVING).condition is TrafficCondition.HEAVY
        assert estimator.estimate(3.0, TravelMode.DRIVING, hour=12).condition is TrafficCondition.LIGHT


# ==============================================================================
# Synthetic Route Tests
# ==============================================================================

class TestSyntheticRoute:
    """Test routes built without any provider."""

    def test_straight_line_estimate_uses_mode_speed(self, origin, destination):
        distance_km, duration_min = straight_line_estimate(origin, destination, TravelMode.WALKING)
        assert duration_min == pytest.approx(distance_km / AVERAGE_SPEEDS_KMH[TravelMode.WALKING] * 60)

    def test_synthesized_route(self, origin, destination, rng):
        """Test that display strings come from the haversine distance."""
        route = synthesize_route(origin, destination, TravelMode.WALKING, LIGHT, rng=rng)
        assert route.is_synthetic
        assert route.distance_text == "0.9 km"
        assert route.duration_text == "11 min"
        assert route.start == origin
        assert route.end == destination


# ==============================================================================
# Cache Tests
# ==============================================================================

class FakeTimer:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestRouteCache:
    """Test the in-session route cache."""

    def test_key_rounds_to_five_decimals(self, origin, destination):
        cache = RouteCache()
        assert cache.key(origin, destination, TravelMode.WALKING) == (
            "10.79890,122.97440|10.80500,122.98000|walking"
        )

    def test_gps_jitter_hits_same_entry(self, origin, destination):
        """Test that sub-meter differences share a cache entry."""
        cache = RouteCache()
        cache.set(origin, destination, TravelMode.DRIVING, make_route(origin, destination))
        jittered = Coordinate(latitude=origin.latitude + 0.000001, longitude=origin.longitude)
        assert cache.get(jittered, destination, TravelMode.DRIVING) is not None

    def test_mode_is_part_of_key(self, origin, destination):
        cache = RouteCache()
        cache.set(origin, destination, TravelMode.DRIVING, make_route(origin, destination))
        assert cache.get(origin, destination, TravelMode.WALKING) is None

    def test_synthetic_entries_expire(self, origin, destination):
        """Test that synthetic routes expire after their TTL."""
        timer = FakeTimer()
        cache = RouteCache(synthetic_ttl=300, timer=timer)
        cache.set(origin, destination, TravelMode.DRIVING, make_route(origin, destination, source="synthetic"))
        assert cache.get(origin, destination, TravelMode.DRIVING) is not None
        timer.now = 301
        assert cache.get(origin, destination, TravelMode.DRIVING) is None

    def test_provider_route_replaces_synthetic(self, origin, destination):
        cache = RouteCache()
        cache.set(origin, destination, TravelMode.DRIVING, make_route(origin, destination, source="synthetic"))
        cache.set(origin, destination, TravelMode.DRIVING, make_route(origin, destination, source="osrm"))
        assert cache.get(origin, destination, TravelMode.DRIVING).source == "osrm"
        assert len(cache) == 1

    def test_stats_and_clear(self, origin, destination):
        cache = RouteCache(maxsize=8)
        cache.set(origin, destination, TravelMode.DRIVING, make_route(origin, destination))
        stats = cache.stats()
        assert stats["provider_cache"]["size"] == 1
        assert stats["provider_cache"]["maxsize"] == 8
        assert stats["synthetic_cache"]["size"] == 0
        cache.clear()
        assert len(cache) == 0


# ==============================================================================
# Configuration Tests
# ==============================================================================

class TestResolverConfig:
    """Test resolver configuration parsing."""

    def test_defaults(self):
        config = ResolverConfig()
        assert config.primary_retries == 2
        assert config.single_flight is True
        assert config.densify_straight_lines is False
        assert config.gap_threshold_m == 20.0

    def test_backoff_is_linear(self):
        """Test backoff grows with the attempt index, doubled after timeouts."""
        config = ResolverConfig()
        assert [config.backoff_delay(i, timed_out=False) for i in range(2)] == [1.0, 2.0]
        assert [config.backoff_delay(i, timed_out=True) for i in range(2)] == [2.0, 4.0]

    def test_from_dict_with_providers(self):
        config = ResolverConfig.from_dict({
            "primary_retries": 1,
            "providers": [{"name": "osrm", "timeout_s": 10}, {"name": "google", "api_key_env": "GKEY"}],
        })
        assert config.primary_retries == 1
        assert config.providers == [
            ProviderSettings(name="osrm", timeout_s=10),
            ProviderSettings(name="google", api_key_env="GKEY"),
        ]

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="Unknown resolver setting"):
            ResolverConfig.from_dict({"retries": 3})
        with pytest.raises(ValueError, match="Unknown provider setting"):
            ResolverConfig.from_dict({"providers": [{"name": "osrm", "url": "x"}]})

    def test_negative_retries_rejected(self):
        with pytest.raises(ValueError):
            ResolverConfig(primary_retries=-1)

    def test_empty_section(self):
        assert ResolverConfig.from_dict(None) == ResolverConfig()
