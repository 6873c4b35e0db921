"""
Shared utilities (NOT GPX document logic).

Usage:
    from gpxkit.shared import haversine, douglas_peucker
    from gpxkit.shared.formatters import format_time
"""
from .constants import (
    GPX_NAMESPACE,
    GPX_VERSION,
    MIN_TIME,
)
from .geo import (
    haversine,
    calculate_total_distance,
    EARTH_RADIUS_KM,
)
from .elevation import (
    ElevationRange,
    calculate_elevation_range,
)
from .simplify import (
    chord_height,
    douglas_peucker,
)
from .formatters import (
    format_double,
    format_time,
    parse_double,
    parse_uint,
    parse_time,
)

__all__ = [
    # constants
    "GPX_NAMESPACE",
    "GPX_VERSION",
    "MIN_TIME",
    # geo
    "haversine",
    "calculate_total_distance",
    "EARTH_RADIUS_KM",
    # elevation
    "ElevationRange",
    "calculate_elevation_range",
    # simplify
    "chord_height",
    "douglas_peucker",
    # formatters
    "format_double",
    "format_time",
    "parse_double",
    "parse_uint",
    "parse_time",
]
