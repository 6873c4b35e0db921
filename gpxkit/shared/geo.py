"""
Geographic utility functions.

This is the SINGLE SOURCE OF TRUTH for great-circle calculations.
All distances are kilometers, all angles degrees.
"""
import math
from typing import Iterable, Tuple

# Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate great-circle distance between two points.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) *
        math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def calculate_total_distance(coordinates: Iterable[Tuple[float, float]]) -> float:
    """
    Calculate cumulative distance along a sequence of coordinates.

    Args:
        coordinates: (lat, lon) pairs in travel order

    Returns:
        Total distance in kilometers, 0 for fewer than two coordinates
    """
    total = 0.0
    previous = None

    for lat, lon in coordinates:
        if previous is not None:
            total += haversine(previous[0], previous[1], lat, lon)
        previous = (lat, lon)

    return total
