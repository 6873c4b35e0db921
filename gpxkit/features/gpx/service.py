"""
GPX Service

Single entry point for decoding and encoding GPX documents.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from gpxkit.config import Settings, settings as default_settings

from .models import GPXDocument
from .reader import GPXReader, GPXSource
from .writer import GPXWriter

logger = logging.getLogger(__name__)


class GPXService:
    """
    Facade over GPXReader and GPXWriter.

    Holds no per-call state, so one service may be shared across threads.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.reader = GPXReader()
        self.writer = GPXWriter(self.settings)

    def decode(self, source: GPXSource) -> GPXDocument:
        """
        Decode GPX XML.

        Args:
            source: XML as str or bytes, or a readable file object

        Returns:
            GPXDocument

        Raises:
            GPXDecodeError: If the source is unreadable or not a GPX document
        """
        return self.reader.read(source)

    def encode(self, document: GPXDocument) -> str:
        """
        Encode a document as GPX 1.1 XML text.

        Raises:
            GPXEncodeError: If serialization fails
        """
        return self.writer.write(document)

    def encode_bytes(self, document: GPXDocument) -> bytes:
        """Encode a document as GPX 1.1 XML bytes."""
        return self.writer.write_bytes(document)

    def load(self, path: Union[str, Path]) -> GPXDocument:
        """Decode a GPX file; the path is kept as document.file_name."""
        logger.info(f"Loading GPX file {path}")
        return self.reader.read_file(path)

    def save(self, document: GPXDocument, path: Union[str, Path]) -> None:
        """Encode a document into a file."""
        logger.info(f"Saving GPX file {path}")
        self.writer.write_file(document, path)


_default_service = GPXService()


def decode(source: GPXSource) -> GPXDocument:
    """Decode GPX XML with the default service."""
    return _default_service.decode(source)


def encode(document: GPXDocument) -> str:
    """Encode a document with the default service."""
    return _default_service.encode(document)
