"""
Track and route analytics.

Distance, elevation range, timing, position at a time offset and
Douglas-Peucker reduction over ordered point sequences. The track_*
functions apply the same measures to a track's segment list, summing or
concatenating per-segment results in order.

Nothing here modifies the points it reads.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from gpxkit.config import settings
from gpxkit.shared.constants import MIN_TIME
from gpxkit.shared.elevation import ElevationRange, calculate_elevation_range
from gpxkit.shared.geo import calculate_total_distance, haversine
from gpxkit.shared.simplify import ChordMetric, chord_height, douglas_peucker

from .models import GPXPoint, GPXTrackSegment


@dataclass
class LocationAtOffset:
    """Where a recording was at some time offset."""
    point: GPXPoint  # interpolated copy, time set to the requested instant
    distance_km: float  # distance covered up to that instant


# =============================================================================
# Point sequences
# =============================================================================

def distance_between(point1: GPXPoint, point2: GPXPoint) -> float:
    """Great-circle distance between two points in kilometers."""
    return haversine(point1.latitude, point1.longitude, point2.latitude, point2.longitude)


def total_distance(points: Sequence[GPXPoint]) -> float:
    """Sum of consecutive point-to-point distances in kilometers."""
    return calculate_total_distance((p.latitude, p.longitude) for p in points)


def elevation_range(points: Sequence[GPXPoint]) -> ElevationRange:
    """Lowest, highest and spread of the elevations that are present."""
    return calculate_elevation_range(p.elevation for p in points)


def start_time(points: Sequence[GPXPoint]) -> datetime:
    """Time of the first point that has one, else MIN_TIME."""
    for point in points:
        if point.time is not None:
            return point.time
    return MIN_TIME


def end_time(points: Sequence[GPXPoint]) -> datetime:
    """Time of the last point that has one, else MIN_TIME."""
    for point in reversed(points):
        if point.time is not None:
            return point.time
    return MIN_TIME


def duration(points: Sequence[GPXPoint]) -> timedelta:
    return end_time(points) - start_time(points)


def location_at_offset(
    points: Sequence[GPXPoint],
    offset: timedelta
) -> Optional[LocationAtOffset]:
    """
    Position and distance covered at ``start_time + offset``.

    The offset is clamped into [0, duration]. Between two timestamped
    points, elevation and distance are interpolated linearly by time.
    Points without a time count as earlier than any real time; legs
    before the first timestamped point add no distance.

    Args:
        points: Ordered points
        offset: Time since the first timestamped point

    Returns:
        LocationAtOffset, or None if there are no points
    """
    if not points:
        return None

    total = duration(points)
    if offset < timedelta(0):
        offset = timedelta(0)
    elif offset > total:
        offset = total

    start = start_time(points)
    target = start + offset
    # Distance is measured from the first timestamped point
    first_timed = next(
        (i for i, p in enumerate(points) if p.time is not None),
        len(points)
    )
    distance = 0.0

    def leg(index: int) -> float:
        if index - 1 < first_timed:
            return 0.0
        return distance_between(points[index], points[index - 1])

    index = 0
    while index < len(points) and points[index].time_value < target:
        if index > 0:
            distance += leg(index)
        index += 1

    if index == len(points):
        point = points[-1].clone()
    elif index == 0 or points[index].time_value == target:
        point = points[index].clone()
        if index > 0:
            distance += leg(index)
    else:
        lower = points[index - 1]
        upper = points[index]
        portion = (
            (target - lower.time_value).total_seconds() /
            (upper.time_value - lower.time_value).total_seconds()
        )
        point = lower.clone()
        if lower.elevation is not None and upper.elevation is not None:
            point.elevation = lower.elevation + (upper.elevation - lower.elevation) * portion
        else:
            point.elevation = None
        distance += leg(index) * portion

    point.time = start + offset
    return LocationAtOffset(point=point, distance_km=distance)


def elevation_metric(start: datetime) -> ChordMetric:
    """
    Chord metric over (elevation, seconds since ``start``).

    Points missing a time or an elevation measure 0, so they are never
    chosen to split a range.
    """
    def metric(point1: GPXPoint, point2: GPXPoint, point: GPXPoint) -> float:
        for p in (point1, point2, point):
            if p.time is None or p.elevation is None:
                return 0.0
        return chord_height(
            point1.elevation, (point1.time - start).total_seconds(),
            point2.elevation, (point2.time - start).total_seconds(),
            point.elevation, (point.time - start).total_seconds(),
        )

    return metric


def location_metric(point1: GPXPoint, point2: GPXPoint, point: GPXPoint) -> float:
    """Chord metric over (latitude, longitude) in degrees."""
    return chord_height(
        point1.latitude, point1.longitude,
        point2.latitude, point2.longitude,
        point.latitude, point.longitude,
    )


def reduce_elevation_points(
    points: Sequence[GPXPoint],
    tolerance: Optional[float] = None
) -> List[GPXPoint]:
    """Points needed to draw the elevation profile."""
    if tolerance is None:
        tolerance = settings.simplify_tolerance
    return douglas_peucker(points, tolerance, elevation_metric(start_time(points)))


def reduce_location_points(
    points: Sequence[GPXPoint],
    tolerance: Optional[float] = None
) -> List[GPXPoint]:
    """Points needed to draw the path on a map."""
    if tolerance is None:
        tolerance = settings.simplify_tolerance
    return douglas_peucker(points, tolerance, location_metric)


# =============================================================================
# Track segment lists
# =============================================================================

def track_start_time(segments: Sequence[GPXTrackSegment]) -> datetime:
    for segment in segments:
        time = start_time(segment.points)
        if time != MIN_TIME:
            return time
    return MIN_TIME


def track_end_time(segments: Sequence[GPXTrackSegment]) -> datetime:
    for segment in reversed(segments):
        time = end_time(segment.points)
        if time != MIN_TIME:
            return time
    return MIN_TIME


def track_duration(segments: Sequence[GPXTrackSegment]) -> timedelta:
    return track_end_time(segments) - track_start_time(segments)


def track_distance(segments: Sequence[GPXTrackSegment]) -> float:
    """Total distance; gaps between segments are not counted."""
    return sum(total_distance(segment.points) for segment in segments)


def track_elevation_range(segments: Sequence[GPXTrackSegment]) -> float:
    """Sum of the per-segment elevation ranges."""
    return sum(elevation_range(segment.points).range_m for segment in segments)


def track_location_at_offset(
    segments: Sequence[GPXTrackSegment],
    offset: timedelta
) -> Optional[LocationAtOffset]:
    """
    Position and distance covered at ``track_start_time + offset``.

    The offset is clamped into the track duration. The first segment
    ending at or after the target instant answers; an instant inside a
    recording gap resolves to the start of the next segment. The distance
    includes every earlier segment.

    Returns:
        LocationAtOffset, or None if no segment has points
    """
    total = track_duration(segments)
    if offset < timedelta(0):
        offset = timedelta(0)
    elif offset > total:
        offset = total

    target = track_start_time(segments) + offset
    covered = 0.0

    for segment in segments:
        if not segment.points:
            continue
        if target <= end_time(segment.points):
            result = location_at_offset(segment.points, target - start_time(segment.points))
            return LocationAtOffset(
                point=result.point,
                distance_km=covered + result.distance_km
            )
        covered += total_distance(segment.points)

    return None


def track_reduce_elevation_points(
    segments: Sequence[GPXTrackSegment],
    tolerance: Optional[float] = None
) -> List[GPXPoint]:
    """Per-segment elevation reduction, concatenated in order."""
    reduced: List[GPXPoint] = []
    for segment in segments:
        reduced.extend(reduce_elevation_points(segment.points, tolerance))
    return reduced


def track_reduce_location_points(
    segments: Sequence[GPXTrackSegment],
    tolerance: Optional[float] = None
) -> List[GPXPoint]:
    """Per-segment map reduction, concatenated in order."""
    reduced: List[GPXPoint] = []
    for segment in segments:
        reduced.extend(reduce_location_points(segment.points, tolerance))
    return reduced
