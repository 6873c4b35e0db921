"""
GPX document handling module.

Usage:
    from gpxkit.features.gpx import GPXService, GPXDocument
    from gpxkit.features.gpx import analytics

Components:
- GPXDocument and friends: dataclass model of a GPX 1.1 file
- GPXExtension: opaque vendor extension tree
- GPXReader / GPXWriter: XML decoder and encoder
- GPXService: decode/encode/load/save facade
- analytics: distance, elevation, timing and simplification
"""

from . import analytics
from .errors import (
    GPXError,
    GPXDecodeError,
    GPXSourceError,
    GPXStructureError,
    GPXEncodeError,
)
from .extensions import GPXExtension, GPXNamespace, NamespaceScope
from .models import (
    GPXBounds,
    GPXCopyright,
    GPXDocument,
    GPXEmail,
    GPXFix,
    GPXLink,
    GPXMetadata,
    GPXPerson,
    GPXPoint,
    GPXRoute,
    GPXTrack,
    GPXTrackSegment,
)
from .reader import GPXReader
from .writer import GPXWriter
from .service import GPXService, decode, encode

__all__ = [
    # Analytics
    "analytics",
    # Errors
    "GPXError",
    "GPXDecodeError",
    "GPXSourceError",
    "GPXStructureError",
    "GPXEncodeError",
    # Extensions
    "GPXExtension",
    "GPXNamespace",
    "NamespaceScope",
    # Models
    "GPXBounds",
    "GPXCopyright",
    "GPXDocument",
    "GPXEmail",
    "GPXFix",
    "GPXLink",
    "GPXMetadata",
    "GPXPerson",
    "GPXPoint",
    "GPXRoute",
    "GPXTrack",
    "GPXTrackSegment",
    # Codec
    "GPXReader",
    "GPXWriter",
    "GPXService",
    "decode",
    "encode",
]
