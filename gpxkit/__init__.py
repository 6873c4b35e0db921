"""
gpxkit - GPX 1.1 codec and track analytics.

Usage:
    from gpxkit import decode, encode
    from gpxkit.features.gpx import analytics
"""

from gpxkit.features.gpx import (
    GPXDocument,
    GPXService,
    GPXDecodeError,
    GPXEncodeError,
    decode,
    encode,
)

__version__ = "0.1.0"

__all__ = [
    "GPXDocument",
    "GPXService",
    "GPXDecodeError",
    "GPXEncodeError",
    "decode",
    "encode",
]
