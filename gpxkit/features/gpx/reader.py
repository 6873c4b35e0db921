"""
GPX Reader

Decodes GPX XML into a GPXDocument.

The XML is parsed with ElementTree's pull parser so namespace declarations
(start-ns events) can be tied to the elements that carry them; plain
ElementTree parsing discards both prefixes and xmlns attributes, which the
extension tree needs.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, TextIO, Tuple, Union

from gpxkit.shared.constants import GPX_NAMESPACE
from gpxkit.shared.formatters import parse_double, parse_time, parse_uint

from .errors import GPXSourceError, GPXStructureError
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

logger = logging.getLogger(__name__)

GPXSource = Union[str, bytes, bytearray, BinaryIO, TextIO]


def _split_tag(tag: str) -> Tuple[Optional[str], str]:
    """'{uri}local' -> (uri, local); 'local' -> (None, local)."""
    if tag.startswith("{"):
        uri, _, local = tag[1:].partition("}")
        return uri, local
    return None, tag


# =============================================================================
# Parse context
# =============================================================================

@dataclass
class _ParsedXml:
    """
    Everything one decode call learns from the XML parser.

    Owned by a single call; never shared between decodes.
    """
    root: ET.Element
    # Namespaces declared on each element, in declaration order
    declarations: Dict[ET.Element, Dict[Optional[str], str]] = field(default_factory=dict)
    # Prefix each element was written with (None = default namespace)
    prefixes: Dict[ET.Element, Optional[str]] = field(default_factory=dict)


def _read_data(source: GPXSource) -> Union[str, bytes]:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, str):
        return source.lstrip("\ufeff")
    if hasattr(source, "read"):
        try:
            data = source.read()
        except (OSError, UnicodeDecodeError) as e:
            raise GPXSourceError(f"Cannot read GPX source: {e}") from e
        if isinstance(data, str):
            return data.lstrip("\ufeff")
        return data
    raise GPXSourceError(f"Unsupported GPX source type: {type(source).__name__}")


def _parse_xml(data: Union[str, bytes]) -> _ParsedXml:
    """Parse XML, recording namespace declarations and prefixes per element."""
    parser = ET.XMLPullParser(events=("start-ns", "start", "end"))
    try:
        parser.feed(data)
        parser.close()
        # Syntax errors hit during feed() are queued and raised from here
        events = list(parser.read_events())
    except ET.ParseError as e:
        raise GPXSourceError(f"Malformed XML: {e}") from e

    parsed: Optional[_ParsedXml] = None
    pending: Dict[Optional[str], str] = {}
    scopes = [NamespaceScope()]

    for event, payload in events:
        if event == "start-ns":
            prefix, uri = payload
            pending[prefix or None] = uri
        elif event == "start":
            element = payload
            if parsed is None:
                parsed = _ParsedXml(root=element)
            scope = scopes[-1].child(pending)
            scopes.append(scope)
            parsed.declarations[element] = pending
            pending = {}

            uri, _ = _split_tag(element.tag)
            try:
                parsed.prefixes[element] = scope.prefix_for(uri) if uri else None
            except KeyError:
                parsed.prefixes[element] = None
        elif event == "end":
            scopes.pop()

    if parsed is None:
        raise GPXSourceError("Document has no elements")
    return parsed


# =============================================================================
# Tree reader
# =============================================================================

class _TreeReader:
    """
    Builds a GPXDocument from one parsed tree.

    Instances are created per decode call and hold that call's namespace
    context.
    """

    def __init__(self, parsed: _ParsedXml):
        self.parsed = parsed
        root_declarations = parsed.declarations.get(parsed.root, {})
        declared_default = root_declarations.get(None)
        self.namespace = declared_default or GPX_NAMESPACE
        # Without a declared default, unqualified children count as GPX elements
        self.match_unqualified = not declared_default
        self.namespaces = [
            GPXNamespace(prefix=prefix, uri=uri)
            for prefix, uri in root_declarations.items()
            if prefix is not None
        ]

    # -------------------------------------------------------------------------
    # Lookup helpers
    # -------------------------------------------------------------------------

    def _is(self, element: ET.Element, name: str) -> bool:
        if element.tag == f"{{{self.namespace}}}{name}":
            return True
        return self.match_unqualified and element.tag == name

    def _find(self, parent: ET.Element, name: str) -> Optional[ET.Element]:
        for child in parent:
            if self._is(child, name):
                return child
        return None

    def _findall(self, parent: ET.Element, name: str) -> List[ET.Element]:
        return [child for child in parent if self._is(child, name)]

    def _read_string(self, parent: ET.Element, name: str) -> Optional[str]:
        node = self._find(parent, name)
        if node is None:
            return None
        return "".join(node.itertext())

    def _read_double(self, parent: ET.Element, name: str) -> Optional[float]:
        text = self._read_string(parent, name)
        value = parse_double(text)
        if text is not None and value is None:
            logger.debug(f"Ignoring unparsable <{name}>: {text!r}")
        return value

    def _read_uint(self, parent: ET.Element, name: str) -> Optional[int]:
        text = self._read_string(parent, name)
        value = parse_uint(text)
        if text is not None and value is None:
            logger.debug(f"Ignoring unparsable <{name}>: {text!r}")
        return value

    def _read_time(self, parent: ET.Element, name: str) -> Optional[datetime]:
        text = self._read_string(parent, name)
        value = parse_time(text)
        if text is not None and value is None:
            logger.debug(f"Ignoring unparsable <{name}>: {text!r}")
        return value

    def _read_double_attr(self, node: ET.Element, name: str) -> float:
        """Required numeric attribute; missing or unparsable reads as 0."""
        text = node.get(name)
        value = parse_double(text)
        if value is None:
            logger.debug(f"Attribute {name}={text!r} unreadable, using 0")
            return 0.0
        return value

    # -------------------------------------------------------------------------
    # Extensions
    # -------------------------------------------------------------------------

    def _read_extension(
        self,
        node: ET.Element,
        carried: Optional[Dict[str, str]] = None
    ) -> GPXExtension:
        """
        Read one extension element and its subtree.

        A node keeps the declaration of its own prefix. Declarations it
        does not use itself are passed down and kept by each descendant
        written with that prefix.
        """
        _, local = _split_tag(node.tag)
        prefix = self.parsed.prefixes.get(node)
        extension = GPXExtension(name=local, prefix=prefix)

        pending = dict(carried or {})
        for declared, uri in self.parsed.declarations.get(node, {}).items():
            if declared is not None:
                pending[declared] = uri
        if prefix in pending:
            extension.namespace = GPXNamespace(prefix=prefix, uri=pending.pop(prefix))

        children = list(node)
        if children:
            extension.children = [self._read_extension(child, pending) for child in children]
        else:
            extension.value = node.text or None
        return extension

    def _read_extensions(self, parent: ET.Element) -> List[GPXExtension]:
        node = self._find(parent, "extensions")
        if node is None:
            return []
        return [self._read_extension(child) for child in node]

    # -------------------------------------------------------------------------
    # Composite fields
    # -------------------------------------------------------------------------

    def _read_bounds(self, parent: ET.Element) -> Optional[GPXBounds]:
        node = self._find(parent, "bounds")
        if node is None:
            return None
        return GPXBounds(
            min_latitude=self._read_double_attr(node, "minlat"),
            min_longitude=self._read_double_attr(node, "minlon"),
            max_latitude=self._read_double_attr(node, "maxlat"),
            max_longitude=self._read_double_attr(node, "maxlon"),
        )

    def _read_copyright(self, parent: ET.Element) -> Optional[GPXCopyright]:
        node = self._find(parent, "copyright")
        if node is None:
            return None
        return GPXCopyright(
            author=node.get("author"),
            year=self._read_string(node, "year"),
            license=self._read_string(node, "license"),
        )

    def _read_email(self, parent: ET.Element) -> Optional[GPXEmail]:
        node = self._find(parent, "email")
        if node is None:
            return None
        return GPXEmail(id=node.get("id"), domain=node.get("domain"))

    def _link_from(self, node: ET.Element) -> GPXLink:
        return GPXLink(
            href=node.get("href"),
            text=self._read_string(node, "text"),
            type=self._read_string(node, "type"),
        )

    def _read_link(self, parent: ET.Element) -> Optional[GPXLink]:
        node = self._find(parent, "link")
        return self._link_from(node) if node is not None else None

    def _read_links(self, parent: ET.Element) -> List[GPXLink]:
        return [self._link_from(node) for node in self._findall(parent, "link")]

    def _read_person(self, parent: ET.Element, name: str) -> Optional[GPXPerson]:
        node = self._find(parent, name)
        if node is None:
            return None
        return GPXPerson(
            name=self._read_string(node, "name"),
            email=self._read_email(node),
            link=self._read_link(node),
        )

    def _read_metadata(self, gpx_node: ET.Element) -> GPXMetadata:
        node = self._find(gpx_node, "metadata")
        if node is None:
            return GPXMetadata()
        return GPXMetadata(
            name=self._read_string(node, "name"),
            description=self._read_string(node, "desc"),
            author=self._read_person(node, "author"),
            copyright=self._read_copyright(node),
            links=self._read_links(node),
            time=self._read_time(node, "time"),
            keywords=self._read_string(node, "keywords"),
            bounds=self._read_bounds(node),
            extensions=self._read_extensions(node),
        )

    # -------------------------------------------------------------------------
    # Points, routes, tracks
    # -------------------------------------------------------------------------

    def _read_point(self, node: ET.Element) -> GPXPoint:
        fix_text = self._read_string(node, "fix")
        fix = GPXFix.parse(fix_text)
        if fix_text is not None and fix is None:
            logger.debug(f"Ignoring unknown <fix>: {fix_text!r}")

        return GPXPoint(
            latitude=self._read_double_attr(node, "lat"),
            longitude=self._read_double_attr(node, "lon"),
            elevation=self._read_double(node, "ele"),
            time=self._read_time(node, "time"),
            magnetic_variation=self._read_double(node, "magvar"),
            geoid_height=self._read_double(node, "geoidheight"),
            name=self._read_string(node, "name"),
            comment=self._read_string(node, "cmt"),
            description=self._read_string(node, "desc"),
            source=self._read_string(node, "src"),
            links=self._read_links(node),
            symbol=self._read_string(node, "sym"),
            type=self._read_string(node, "type"),
            fix=fix,
            satellites=self._read_uint(node, "sat"),
            hdop=self._read_double(node, "hdop"),
            pdop=self._read_double(node, "pdop"),
            vdop=self._read_double(node, "vdop"),
            age_of_dgps_data=self._read_double(node, "ageofdgpsdata"),
            dgps_id=self._read_uint(node, "dgpsid"),
            extensions=self._read_extensions(node),
        )

    def _read_route(self, node: ET.Element) -> GPXRoute:
        return GPXRoute(
            name=self._read_string(node, "name"),
            comment=self._read_string(node, "cmt"),
            description=self._read_string(node, "desc"),
            source=self._read_string(node, "src"),
            links=self._read_links(node),
            number=self._read_uint(node, "number"),
            type=self._read_string(node, "type"),
            points=[self._read_point(pt) for pt in self._findall(node, "rtept")],
            extensions=self._read_extensions(node),
        )

    def _read_track_segment(self, node: ET.Element) -> GPXTrackSegment:
        return GPXTrackSegment(
            points=[self._read_point(pt) for pt in self._findall(node, "trkpt")],
            extensions=self._read_extensions(node),
        )

    def _read_track(self, node: ET.Element) -> GPXTrack:
        track = GPXTrack(
            name=self._read_string(node, "name"),
            comment=self._read_string(node, "cmt"),
            description=self._read_string(node, "desc"),
            source=self._read_string(node, "src"),
            links=self._read_links(node),
            number=self._read_uint(node, "number"),
            type=self._read_string(node, "type"),
            extensions=self._read_extensions(node),
        )
        for segment_node in self._findall(node, "trkseg"):
            track.add_segment(self._read_track_segment(segment_node))
        return track

    def read_document(self) -> GPXDocument:
        root = self.parsed.root
        return GPXDocument(
            version=root.get("version"),
            creator=root.get("creator"),
            metadata=self._read_metadata(root),
            routes=[self._read_route(node) for node in self._findall(root, "rte")],
            waypoints=[self._read_point(node) for node in self._findall(root, "wpt")],
            tracks=[self._read_track(node) for node in self._findall(root, "trk")],
            namespaces=self.namespaces,
            extensions=self._read_extensions(root),
        )


# =============================================================================
# Public API
# =============================================================================

class GPXReader:
    """
    Decoder for GPX XML.

    Stateless: every call builds its own parse context, so one reader can
    serve concurrent decodes.
    """

    def read(self, source: GPXSource) -> GPXDocument:
        """
        Decode a GPX document.

        Args:
            source: XML as str or bytes, or a readable text/binary file object

        Returns:
            Fully populated GPXDocument

        Raises:
            GPXSourceError: If the source is unreadable or not well-formed XML
            GPXStructureError: If the root element is not <gpx>
        """
        try:
            parsed = _parse_xml(_read_data(source))
        except GPXSourceError as e:
            logger.error(f"Failed to parse GPX: {e}")
            raise

        _, root_name = _split_tag(parsed.root.tag)
        if root_name != "gpx":
            logger.error(f"Failed to parse GPX: root element is <{root_name}>")
            raise GPXStructureError(f"Expected <gpx> root element, found <{root_name}>")

        document = _TreeReader(parsed).read_document()
        logger.debug(
            f"Decoded GPX: {len(document.waypoints)} waypoints, "
            f"{len(document.routes)} routes, {len(document.tracks)} tracks"
        )
        return document

    def read_file(self, path: Union[str, Path]) -> GPXDocument:
        """Decode a GPX file from disk."""
        path = Path(path)
        try:
            with path.open("rb") as gpx_file:
                document = self.read(gpx_file)
        except OSError as e:
            logger.error(f"Failed to read GPX file {path}: {e}")
            raise GPXSourceError(f"Cannot read {path}: {e}") from e
        document.file_name = str(path)
        return document
