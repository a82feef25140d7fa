"""Display formatting for distances and durations."""

from __future__ import annotations

import math
import re
from typing import Optional


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def format_distance(distance_km: float) -> str:
    """``1.234`` -> ``"1.2 km"``."""
    return f"{distance_km:.1f} km"


def format_duration(duration_min: float) -> str:
    """
    Render a duration in minutes.

    ``< 1 min`` below one minute, ``"1h 5m"`` (or ``"2h"``) from an hour up,
    otherwise whole minutes such as ``"15 min"``.
    """
    if duration_min < 1:
        return "< 1 min"
    if duration_min >= 60:
        hours = int(duration_min // 60)
        mins = round_half_up(duration_min % 60)
        if mins == 60:
            hours, mins = hours + 1, 0
        return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"
    return f"{round_half_up(duration_min)} min"


def is_zero_distance(distance_km: float) -> bool:
    """True when a distance is unusable for display (NaN, < 10 m, or "0.0 km")."""
    if distance_km is None or math.isnan(distance_km):
        return True
    return distance_km < 0.01 or format_distance(distance_km) == "0.0 km"


_DISTANCE_RE = re.compile(r"([\d.,]+)\s*(km|m|mi|ft)\b", re.IGNORECASE)
_DURATION_RE = re.compile(r"([\d.]+)\s*(day|hour|hr|h|min|m)\w*", re.IGNORECASE)

_TO_KM = {"km": 1.0, "m": 0.001, "mi": 1.609344, "ft": 0.0003048}
_TO_MIN = {"day": 1440.0, "hour": 60.0, "hr": 60.0, "h": 60.0, "min": 1.0, "m": 1.0}


def parse_distance_text(text: str) -> Optional[float]:
    """Parse provider text such as ``"1.2 km"`` or ``"850 m"`` into kilometers."""
    match = _DISTANCE_RE.search(text or "")
    if not match:
        return None
    value = float(match.group(1).replace(",", ""))
    return value * _TO_KM[match.group(2).lower()]


def parse_duration_text(text: str) -> Optional[float]:
    """Parse provider text such as ``"1 hour 5 mins"`` into minutes."""
    parts = _DURATION_RE.findall(text or "")
    if not parts:
        return None
    return sum(float(value) * _TO_MIN[unit.lower()] for value, unit in parts)
