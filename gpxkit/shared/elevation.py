"""
Elevation processing utilities.

This is the SINGLE SOURCE OF TRUTH for elevation calculations.
"""
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class ElevationRange:
    """Spread of elevations over a point sequence (meters)."""
    range_m: float
    low_m: float
    high_m: float


def calculate_elevation_range(
    elevations: Iterable[Optional[float]]
) -> ElevationRange:
    """
    Calculate the lowest, highest and spread of known elevations.

    Missing elevations (None) are skipped, never treated as zero.

    Args:
        elevations: Elevation values, None where a point has no elevation

    Returns:
        ElevationRange, all zero when no elevation is known
    """
    low: Optional[float] = None
    high: Optional[float] = None

    for elevation in elevations:
        if elevation is None:
            continue
        if low is None or elevation < low:
            low = elevation
        if high is None or elevation > high:
            high = elevation

    if low is None:
        return ElevationRange(range_m=0.0, low_m=0.0, high_m=0.0)

    return ElevationRange(range_m=high - low, low_m=low, high_m=high)
