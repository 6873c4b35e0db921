"""
Douglas-Peucker polyline simplification.

The algorithm is generic over the point type: the caller supplies a metric
that measures how far an interior point lies from the chord between two
endpoints.
"""
import math
from typing import Callable, List, Sequence, TypeVar

T = TypeVar("T")

# metric(chord_start, chord_end, point) -> distance of point from the chord
ChordMetric = Callable[[T, T, T], float]


def chord_height(
    x1: float, y1: float,
    x2: float, y2: float,
    x: float, y: float
) -> float:
    """
    Height of (x, y) over the chord (x1, y1)-(x2, y2) in the plane.

    Computed from the triangle area: height = 2 * area / base.
    A degenerate chord (both ends equal) falls back to the plain
    distance from its start.
    """
    area = abs(0.5 * (
        x1 * y2 + x2 * y + x * y1 -
        x2 * y1 - x * y2 - x1 * y
    ))
    bottom = math.hypot(x1 - x2, y1 - y2)
    if bottom == 0:
        return math.hypot(x - x1, y - y1)
    return area / bottom * 2


def douglas_peucker(
    points: Sequence[T],
    tolerance: float,
    metric: ChordMetric
) -> List[T]:
    """
    Reduce a polyline to the points needed to keep its shape.

    For every range, the interior point furthest from the chord between the
    range endpoints is kept when its distance exceeds ``tolerance``, and
    both halves are processed again. Otherwise the range collapses to its
    endpoints. Points whose metric is 0 are never chosen as a split point.

    Args:
        points: Ordered points
        tolerance: Distance a point must exceed to be kept (no bounds enforced)
        metric: Chord distance function

    Returns:
        New list in input order; the first and last points are always kept
    """
    count = len(points)
    if count < 3:
        return list(points)

    keep = {0, count - 1}
    # Ranges still to split, as (first, last) index pairs
    ranges = [(0, count - 1)]

    while ranges:
        first, last = ranges.pop()
        max_distance = 0.0
        split = None

        for index in range(first + 1, last):
            distance = metric(points[first], points[last], points[index])
            if distance > max_distance:
                max_distance = distance
                split = index

        if split is not None and max_distance > tolerance:
            keep.add(split)
            ranges.append((first, split))
            ranges.append((split, last))

    return [points[index] for index in sorted(keep)]
