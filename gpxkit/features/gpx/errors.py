"""
GPX codec errors.

Decoding is all-or-nothing: either a complete document is returned or a
GPXDecodeError is raised. Individual fields that fail to parse are not
errors; they are read as absent.
"""


class GPXError(Exception):
    """Base GPX codec error."""
    pass


class GPXDecodeError(GPXError):
    """Decoding failed; no document was produced."""
    pass


class GPXSourceError(GPXDecodeError):
    """Source could not be read or is not well-formed XML."""
    pass


class GPXStructureError(GPXDecodeError):
    """Root element is missing or is not <gpx>."""
    pass


class GPXEncodeError(GPXError):
    """Encoding or writing failed; any output is unreliable."""
    pass
