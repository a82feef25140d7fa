"""
Heuristic traffic estimates.

This is a presentation feature, not measured traffic: the condition is a
pure function of distance, travel mode and hour of day. Do not use it for
anything that needs real congestion data.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from .formatting import round_half_up
from .models import TrafficCondition, TrafficInfo, TravelMode

# Peak hour buckets: 07:00-09:59 and 17:00-19:59 local time
PEAK_HOURS = frozenset({7, 8, 9, 17, 18, 19})

HEAVY_MIN_KM = 2.0
MODERATE_MIN_KM = 5.0

ALTERNATIVES = {
    TrafficCondition.HEAVY: 3,
    TrafficCondition.MODERATE: 2,
    TrafficCondition.LIGHT: 1,
}


def is_peak_hour(hour: int) -> bool:
    return hour in PEAK_HOURS


def estimate_traffic(distance_km: float, mode: TravelMode, hour: int) -> TrafficInfo:
    """
    Estimate traffic for a trip.

    Args:
        distance_km: Trip distance in kilometers
        mode: Travel mode
        hour: Local hour of day (0-23)

    Returns:
        TrafficInfo with condition, delay text and alternative route count
    """
    peak = is_peak_hour(hour)

    if mode == TravelMode.DRIVING:
        if peak and distance_km > HEAVY_MIN_KM:
            condition = TrafficCondition.HEAVY
            delay = f"{round_half_up(distance_km * 2)} min delay"
        elif peak or distance_km > MODERATE_MIN_KM:
            condition = TrafficCondition.MODERATE
            delay = f"{round_half_up(distance_km)} min delay"
        else:
            condition = TrafficCondition.LIGHT
            delay = "No delays"
    elif mode == TravelMode.TRANSIT:
        if peak:
            condition = TrafficCondition.MODERATE
            delay = "2-5 min delay"
        else:
            condition = TrafficCondition.LIGHT
            delay = "On time"
    else:
        condition = TrafficCondition.LIGHT
        delay = "No delays"

    return TrafficInfo(
        condition=condition,
        estimated_delay=delay,
        alternative_routes=ALTERNATIVES[condition],
    )


class TrafficEstimator:
    """``estimate_traffic`` bound to a clock so callers need not pass the hour."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or datetime.now

    def current_hour(self) -> int:
        return self._clock().hour

    def estimate(self, distance_km: float, mode: TravelMode, hour: Optional[int] = None) -> TrafficInfo:
        return estimate_traffic(distance_km, mode, self.current_hour() if hour is None else hour)
