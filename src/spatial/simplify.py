"""
Polyline thinning for rendering.

Dense provider geometry is reduced with a tiered stride that always keeps
the first and last points:

- more than 200 points: every 4th point
- 51 to 200 points: every 2nd point
- 50 points or fewer: unchanged
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from .coordinates import Coordinate

logger = logging.getLogger(__name__)

DENSE_THRESHOLD = 200
MEDIUM_THRESHOLD = 50
DENSE_STRIDE = 4
MEDIUM_STRIDE = 2


def stride_for(n_points: int) -> int:
    """Sampling stride for a polyline of ``n_points`` points."""
    if n_points > DENSE_THRESHOLD:
        return DENSE_STRIDE
    if n_points > MEDIUM_THRESHOLD:
        return MEDIUM_STRIDE
    return 1


def simplify(
    coordinates: Sequence[Coordinate],
    origin: Coordinate,
    destination: Coordinate,
) -> List[Coordinate]:
    """
    Reduce ``coordinates`` to a bounded point count.

    Args:
        coordinates: Raw polyline, origin side first
        origin: Fallback start point when the polyline is unusable
        destination: Fallback end point when the polyline is unusable

    Returns:
        Thinned polyline with at least two points. First and last points are
        the input's first and last points, or ``[origin, destination]`` if the
        input had fewer than two points.
    """
    points = list(coordinates)
    if len(points) < 2:
        logger.warning(
            "Polyline has %d point(s); substituting straight line origin -> destination",
            len(points),
        )
        return [origin, destination]

    step = stride_for(len(points))
    if step == 1:
        return points

    last = len(points) - 1
    kept = [p for i, p in enumerate(points) if i == 0 or i == last or i % step == 0]
    logger.debug("Simplified polyline %d -> %d points (stride %d)", len(points), len(kept), step)
    return kept
