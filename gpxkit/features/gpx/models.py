"""
GPX document model (dataclasses, no XML dependency).

Optional fields are None when absent; a missing elevation is None, never 0.
List fields always exist and keep document order.
"""

import dataclasses
import weakref
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from gpxkit.shared.constants import MIN_TIME

from .extensions import GPXExtension, GPXNamespace


class GPXFix(str, Enum):
    """Type of satellite fix, valued by its wire literal."""
    NONE = "none"
    TWO_D = "2d"
    THREE_D = "3d"
    DGPS = "dgps"
    PPS = "pps"

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["GPXFix"]:
        """Case-insensitive lookup, None for anything unknown."""
        if text is None:
            return None
        try:
            return cls(text.strip().lower())
        except ValueError:
            return None


def _join(*parts: Optional[str], separator: str = ",") -> str:
    return separator.join(part for part in parts if part)


@dataclass
class GPXBounds:
    """Axis-aligned latitude/longitude box."""
    min_latitude: float
    min_longitude: float
    max_latitude: float
    max_longitude: float

    def __str__(self) -> str:
        return (
            f"{self.min_latitude},{self.min_longitude} - "
            f"{self.max_latitude},{self.max_longitude}"
        )


@dataclass
class GPXCopyright:
    author: Optional[str] = None
    year: Optional[str] = None  # kept as text, e.g. "2024"
    license: Optional[str] = None  # URI

    @property
    def has_data(self) -> bool:
        return bool(self.author) or bool(self.year) or bool(self.license)

    def __str__(self) -> str:
        return _join(self.year, self.author, self.license)


@dataclass
class GPXEmail:
    """An email split in two to hinder harvesting; never validated."""
    id: Optional[str] = None
    domain: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return bool(self.id) or bool(self.domain)

    @property
    def address(self) -> str:
        """'id@domain', with empty parts left out."""
        return _join(self.id, self.domain, separator="@")

    def __str__(self) -> str:
        return self.address


@dataclass
class GPXLink:
    href: Optional[str] = None  # URI
    text: Optional[str] = None
    type: Optional[str] = None  # MIME type, e.g. "image/jpeg"

    @property
    def has_data(self) -> bool:
        return bool(self.href) or bool(self.text) or bool(self.type)

    def __str__(self) -> str:
        return _join(self.href, self.text, self.type)


@dataclass
class GPXPerson:
    name: Optional[str] = None
    email: Optional[GPXEmail] = None
    link: Optional[GPXLink] = None

    @property
    def has_data(self) -> bool:
        return (
            bool(self.name)
            or (self.email is not None and self.email.has_data)
            or (self.link is not None and self.link.has_data)
        )


@dataclass
class GPXMetadata:
    """File-level information (<metadata>)."""
    name: Optional[str] = None
    description: Optional[str] = None
    author: Optional[GPXPerson] = None
    copyright: Optional[GPXCopyright] = None
    links: List[GPXLink] = field(default_factory=list)
    time: Optional[datetime] = None
    keywords: Optional[str] = None
    bounds: Optional[GPXBounds] = None
    extensions: List[GPXExtension] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return (
            bool(self.name)
            or bool(self.description)
            or (self.author is not None and self.author.has_data)
            or (self.copyright is not None and self.copyright.has_data)
            or any(link.has_data for link in self.links)
            or self.time is not None
            or bool(self.keywords)
            or self.bounds is not None
            or any(extension.has_data for extension in self.extensions)
        )


@dataclass
class GPXPoint:
    """
    A waypoint, route point or track point.

    The three share one structure; only latitude and longitude are required.
    Coordinates are not range-checked.
    """
    latitude: float
    longitude: float
    elevation: Optional[float] = None  # meters
    time: Optional[datetime] = None  # UTC
    magnetic_variation: Optional[float] = None  # degrees
    geoid_height: Optional[float] = None  # meters
    name: Optional[str] = None
    comment: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    links: List[GPXLink] = field(default_factory=list)
    symbol: Optional[str] = None
    type: Optional[str] = None
    fix: Optional[GPXFix] = None
    satellites: Optional[int] = None
    hdop: Optional[float] = None
    pdop: Optional[float] = None
    vdop: Optional[float] = None
    age_of_dgps_data: Optional[float] = None  # seconds
    dgps_id: Optional[int] = None
    extensions: List[GPXExtension] = field(default_factory=list)

    @property
    def time_value(self) -> datetime:
        """Timestamp, or MIN_TIME when the point has none."""
        return self.time if self.time is not None else MIN_TIME

    @property
    def elevation_value(self) -> float:
        """Elevation, or 0 when the point has none."""
        return self.elevation if self.elevation is not None else 0.0

    def clone(self) -> "GPXPoint":
        """Copy with its own link and extension lists."""
        return dataclasses.replace(
            self,
            links=list(self.links),
            extensions=list(self.extensions)
        )

    def __str__(self) -> str:
        return f"{self.latitude}, {self.longitude}"


def _display_name(entity, first_point: Optional[GPXPoint], fallback: str) -> str:
    for candidate in (entity.name, entity.description, entity.comment):
        if candidate:
            return candidate
    if first_point is None:
        return fallback
    for candidate in (first_point.name, first_point.description, first_point.comment):
        if candidate:
            return candidate
    return f"{first_point.latitude},{first_point.longitude}"


@dataclass
class GPXRoute:
    """An ordered list of points leading to a destination (<rte>)."""
    name: Optional[str] = None
    comment: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    links: List[GPXLink] = field(default_factory=list)
    number: Optional[int] = None
    type: Optional[str] = None
    points: List[GPXPoint] = field(default_factory=list)
    extensions: List[GPXExtension] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return (
            bool(self.name)
            or bool(self.comment)
            or bool(self.description)
            or bool(self.source)
            or any(link.has_data for link in self.links)
            or self.number is not None
            or bool(self.type)
            or len(self.points) > 0
            or any(extension.has_data for extension in self.extensions)
        )

    @property
    def display_name(self) -> str:
        first_point = self.points[0] if self.points else None
        return _display_name(self, first_point, "Route")

    def __str__(self) -> str:
        return self.display_name


@dataclass
class GPXTrackSegment:
    """
    A run of track points recorded without a gap (<trkseg>).

    The owning track is held through a weak reference and only used to
    work out the segment's position for display.
    """
    points: List[GPXPoint] = field(default_factory=list)
    extensions: List[GPXExtension] = field(default_factory=list)
    _track: Optional[weakref.ReferenceType] = field(
        default=None, init=False, repr=False, compare=False
    )

    @property
    def track(self) -> Optional["GPXTrack"]:
        return self._track() if self._track is not None else None

    @track.setter
    def track(self, track: Optional["GPXTrack"]) -> None:
        self._track = weakref.ref(track) if track is not None else None

    @property
    def display_index(self) -> Optional[int]:
        """1-based position in the owning track, None when detached."""
        track = self.track
        if track is None:
            return None
        for index, segment in enumerate(track.segments):
            if segment is self:
                return index + 1
        return None

    def __str__(self) -> str:
        index = self.display_index
        label = f"Segment {index}" if index is not None else "Segment"
        return f"{label} - {len(self.points)} Points"


@dataclass
class GPXTrack:
    """An ordered list of segments describing a path (<trk>)."""
    name: Optional[str] = None
    comment: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    links: List[GPXLink] = field(default_factory=list)
    number: Optional[int] = None
    type: Optional[str] = None
    segments: List[GPXTrackSegment] = field(default_factory=list)
    extensions: List[GPXExtension] = field(default_factory=list)

    def __post_init__(self):
        for segment in self.segments:
            segment.track = self

    def add_segment(self, segment: GPXTrackSegment) -> GPXTrackSegment:
        """Append a segment and point it back at this track."""
        segment.track = self
        self.segments.append(segment)
        return segment

    @property
    def has_points(self) -> bool:
        return any(segment.points for segment in self.segments)

    @property
    def has_data(self) -> bool:
        return (
            bool(self.name)
            or bool(self.comment)
            or bool(self.description)
            or bool(self.source)
            or any(link.has_data for link in self.links)
            or self.number is not None
            or bool(self.type)
            or self.has_points
            or any(extension.has_data for extension in self.extensions)
        )

    @property
    def display_name(self) -> str:
        first_point = None
        if self.segments and self.segments[0].points:
            first_point = self.segments[0].points[0]
        return _display_name(self, first_point, "Track")

    def __str__(self) -> str:
        return self.display_name


@dataclass
class GPXDocument:
    """A whole GPX file."""
    version: Optional[str] = None
    creator: Optional[str] = None
    metadata: GPXMetadata = field(default_factory=GPXMetadata)
    waypoints: List[GPXPoint] = field(default_factory=list)
    routes: List[GPXRoute] = field(default_factory=list)
    tracks: List[GPXTrack] = field(default_factory=list)
    namespaces: List[GPXNamespace] = field(default_factory=list)
    extensions: List[GPXExtension] = field(default_factory=list)
    file_name: Optional[str] = field(default=None, compare=False)
