"""
GPX Writer

Encodes a GPXDocument as GPX 1.1 XML.

Elements are built with literal 'prefix:name' tags and explicit xmlns
attributes, so the output keeps the document's prefixes. The process-wide
ET.register_namespace() table is never touched.
"""

import logging
import xml.etree.ElementTree as ET
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from gpxkit.config import Settings, settings as default_settings
from gpxkit.shared.constants import GPX_NAMESPACE, GPX_VERSION
from gpxkit.shared.formatters import format_double, format_time

from .errors import GPXEncodeError
from .extensions import GPXExtension, NamespaceScope
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

logger = logging.getLogger(__name__)


class _TreeWriter:
    """
    Builds the XML tree for one document.

    Created per encode call; holds that call's root namespace scope.
    """

    def __init__(self, document: GPXDocument):
        self.document = document
        bindings = {None: GPX_NAMESPACE}
        bindings.update({ns.prefix: ns.uri for ns in document.namespaces})
        self.root_scope = NamespaceScope(bindings)

    # -------------------------------------------------------------------------
    # Scalar helpers (absent values are omitted, never written empty)
    # -------------------------------------------------------------------------

    @staticmethod
    def _write_string(parent: ET.Element, name: str, value: Optional[str]) -> None:
        if value is not None:
            ET.SubElement(parent, name).text = value

    @staticmethod
    def _write_double(parent: ET.Element, name: str, value: Optional[float]) -> None:
        if value is not None:
            ET.SubElement(parent, name).text = format_double(value)

    @staticmethod
    def _write_uint(parent: ET.Element, name: str, value: Optional[int]) -> None:
        if value is not None:
            ET.SubElement(parent, name).text = str(value)

    @staticmethod
    def _write_time(parent: ET.Element, name: str, value: Optional[datetime]) -> None:
        if value is not None:
            ET.SubElement(parent, name).text = format_time(value)

    @staticmethod
    def _write_string_attr(node: ET.Element, name: str, value: Optional[str]) -> None:
        if value is not None:
            node.set(name, value)

    @staticmethod
    def _write_double_attr(node: ET.Element, name: str, value: float) -> None:
        node.set(name, format_double(value))

    # -------------------------------------------------------------------------
    # Extensions
    # -------------------------------------------------------------------------

    def _write_extension(
        self,
        parent: ET.Element,
        extension: GPXExtension,
        scope: NamespaceScope
    ) -> None:
        if not extension.name:
            logger.debug("Dropping extension node without a name")
            return

        if extension.namespace is not None:
            scope = scope.child({extension.namespace.prefix: extension.namespace.uri})

        if scope.resolve(extension.prefix) is None:
            logger.debug(
                f"Dropping extension <{extension.qualified_name}>: "
                f"no namespace for prefix {extension.prefix!r}"
            )
            return

        node = ET.SubElement(parent, extension.qualified_name)
        if extension.namespace is not None:
            node.set(f"xmlns:{extension.namespace.prefix}", extension.namespace.uri)

        if extension.children:
            for child in extension.children:
                self._write_extension(node, child, scope)
        elif extension.value is not None:
            node.text = extension.value

    def _write_extensions(self, parent: ET.Element, extensions: List[GPXExtension]) -> None:
        extensions = [extension for extension in extensions if extension.has_data]
        if not extensions:
            return
        node = ET.SubElement(parent, "extensions")
        for extension in extensions:
            self._write_extension(node, extension, self.root_scope)
        if len(node) == 0:
            parent.remove(node)

    # -------------------------------------------------------------------------
    # Composite fields
    # -------------------------------------------------------------------------

    def _write_bounds(self, parent: ET.Element, bounds: Optional[GPXBounds]) -> None:
        if bounds is None:
            return
        node = ET.SubElement(parent, "bounds")
        self._write_double_attr(node, "minlat", bounds.min_latitude)
        self._write_double_attr(node, "minlon", bounds.min_longitude)
        self._write_double_attr(node, "maxlat", bounds.max_latitude)
        self._write_double_attr(node, "maxlon", bounds.max_longitude)

    def _write_copyright(self, parent: ET.Element, copyright: Optional[GPXCopyright]) -> None:
        if copyright is None or not copyright.has_data:
            return
        node = ET.SubElement(parent, "copyright")
        self._write_string_attr(node, "author", copyright.author)
        self._write_string(node, "year", copyright.year)
        self._write_string(node, "license", copyright.license)

    def _write_email(self, parent: ET.Element, email: Optional[GPXEmail]) -> None:
        if email is None or not email.has_data:
            return
        node = ET.SubElement(parent, "email")
        self._write_string_attr(node, "id", email.id)
        self._write_string_attr(node, "domain", email.domain)

    def _write_link(self, parent: ET.Element, link: Optional[GPXLink]) -> None:
        if link is None or not link.has_data:
            return
        node = ET.SubElement(parent, "link")
        self._write_string_attr(node, "href", link.href)
        self._write_string(node, "text", link.text)
        self._write_string(node, "type", link.type)

    def _write_links(self, parent: ET.Element, links: List[GPXLink]) -> None:
        for link in links:
            self._write_link(parent, link)

    def _write_person(self, parent: ET.Element, name: str, person: Optional[GPXPerson]) -> None:
        if person is None or not person.has_data:
            return
        node = ET.SubElement(parent, name)
        self._write_string(node, "name", person.name)
        self._write_email(node, person.email)
        self._write_link(node, person.link)

    def _write_metadata(self, parent: ET.Element, metadata: GPXMetadata) -> None:
        if not metadata.has_data:
            return
        node = ET.SubElement(parent, "metadata")
        self._write_string(node, "name", metadata.name)
        self._write_string(node, "desc", metadata.description)
        self._write_person(node, "author", metadata.author)
        self._write_copyright(node, metadata.copyright)
        self._write_links(node, metadata.links)
        self._write_time(node, "time", metadata.time)
        self._write_string(node, "keywords", metadata.keywords)
        self._write_bounds(node, metadata.bounds)
        self._write_extensions(node, metadata.extensions)

    # -------------------------------------------------------------------------
    # Points, routes, tracks
    # -------------------------------------------------------------------------

    def _write_fix(self, parent: ET.Element, fix: Optional[GPXFix]) -> None:
        if fix is not None:
            ET.SubElement(parent, "fix").text = fix.value

    def _write_point(self, parent: ET.Element, name: str, point: GPXPoint) -> None:
        node = ET.SubElement(parent, name)
        self._write_double_attr(node, "lat", point.latitude)
        self._write_double_attr(node, "lon", point.longitude)
        self._write_double(node, "ele", point.elevation)
        self._write_time(node, "time", point.time)
        self._write_double(node, "magvar", point.magnetic_variation)
        self._write_double(node, "geoidheight", point.geoid_height)
        self._write_string(node, "name", point.name)
        self._write_string(node, "cmt", point.comment)
        self._write_string(node, "desc", point.description)
        self._write_string(node, "src", point.source)
        self._write_links(node, point.links)
        self._write_string(node, "sym", point.symbol)
        self._write_string(node, "type", point.type)
        self._write_fix(node, point.fix)
        self._write_uint(node, "sat", point.satellites)
        self._write_double(node, "hdop", point.hdop)
        self._write_double(node, "pdop", point.pdop)
        self._write_double(node, "vdop", point.vdop)
        self._write_double(node, "ageofdgpsdata", point.age_of_dgps_data)
        self._write_uint(node, "dgpsid", point.dgps_id)
        self._write_extensions(node, point.extensions)

    def _write_route(self, parent: ET.Element, route: GPXRoute) -> None:
        if not route.has_data:
            return
        node = ET.SubElement(parent, "rte")
        self._write_string(node, "name", route.name)
        self._write_string(node, "cmt", route.comment)
        self._write_string(node, "desc", route.description)
        self._write_string(node, "src", route.source)
        self._write_links(node, route.links)
        self._write_uint(node, "number", route.number)
        self._write_string(node, "type", route.type)
        self._write_extensions(node, route.extensions)
        for point in route.points:
            self._write_point(node, "rtept", point)

    def _write_track_segment(self, parent: ET.Element, segment: GPXTrackSegment) -> None:
        node = ET.SubElement(parent, "trkseg")
        for point in segment.points:
            self._write_point(node, "trkpt", point)
        self._write_extensions(node, segment.extensions)

    def _write_track(self, parent: ET.Element, track: GPXTrack) -> None:
        if not track.has_data:
            return
        node = ET.SubElement(parent, "trk")
        self._write_string(node, "name", track.name)
        self._write_string(node, "cmt", track.comment)
        self._write_string(node, "desc", track.description)
        self._write_string(node, "src", track.source)
        self._write_links(node, track.links)
        self._write_uint(node, "number", track.number)
        self._write_string(node, "type", track.type)
        self._write_extensions(node, track.extensions)
        for segment in track.segments:
            if segment.points:
                self._write_track_segment(node, segment)

    def build(self) -> ET.Element:
        document = self.document
        root = ET.Element("gpx")
        root.set("xmlns", GPX_NAMESPACE)
        for namespace in document.namespaces:
            root.set(f"xmlns:{namespace.prefix}", namespace.uri)
        root.set("version", GPX_VERSION)
        self._write_string_attr(root, "creator", document.creator)

        self._write_metadata(root, document.metadata)
        for waypoint in document.waypoints:
            self._write_point(root, "wpt", waypoint)
        for route in document.routes:
            self._write_route(root, route)
        for track in document.tracks:
            self._write_track(root, track)
        self._write_extensions(root, document.extensions)
        return root


class GPXWriter:
    """
    Encoder for GPX 1.1 XML.

    Stateless apart from its settings; every call builds its own tree.
    The document is never modified (its version may say anything, the
    output always says 1.1).
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    def write(self, document: GPXDocument) -> str:
        """
        Encode a document as XML text, declaration included.

        Raises:
            GPXEncodeError: If serialization fails
        """
        try:
            root = _TreeWriter(document).build()
            if self.settings.indent:
                ET.indent(root, space=self.settings.indent)
            body = ET.tostring(root, encoding="unicode")
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to encode GPX: {e}")
            raise GPXEncodeError(f"Cannot encode GPX: {e}") from e

        logger.debug(
            f"Encoded GPX: {len(document.waypoints)} waypoints, "
            f"{len(document.routes)} routes, {len(document.tracks)} tracks"
        )
        return f'<?xml version="1.0" encoding="{self.settings.encoding}"?>\n{body}\n'

    def write_bytes(self, document: GPXDocument) -> bytes:
        """Encode a document as bytes in the configured encoding."""
        text = self.write(document)
        try:
            return text.encode(self.settings.encoding, errors="xmlcharrefreplace")
        except LookupError as e:
            logger.error(f"Failed to encode GPX: {e}")
            raise GPXEncodeError(f"Unknown encoding {self.settings.encoding!r}") from e

    def write_file(self, document: GPXDocument, path: Union[str, Path]) -> None:
        """
        Encode a document into a file.

        On failure the file may be missing or partially written.
        """
        data = self.write_bytes(document)
        path = Path(path)
        try:
            path.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to write GPX file {path}: {e}")
            raise GPXEncodeError(f"Cannot write {path}: {e}") from e
