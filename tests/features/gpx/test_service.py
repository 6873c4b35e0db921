"""
Tests for GPXService and the module-level entry points.
"""

import logging

import pytest

import gpxkit
from gpxkit.config import Settings
from gpxkit.features.gpx import (
    GPXDecodeError,
    GPXDocument,
    GPXEncodeError,
    GPXPoint,
    GPXService,
)


SAMPLE_GPX = (
    '<gpx xmlns="http://www.topografix.com/GPX/1/1" version="1.1" creator="sample">'
    '<wpt lat="43.2" lon="76.9"><name>Medeu</name></wpt>'
    "</gpx>"
)


@pytest.fixture
def service():
    return GPXService(Settings(_env_file=None))


class TestGPXService:
    """Tests for GPXService."""

    def test_decode(self, service):
        document = service.decode(SAMPLE_GPX)
        assert document.creator == "sample"
        assert document.waypoints[0].name == "Medeu"

    def test_decode_failure(self, service):
        with pytest.raises(GPXDecodeError):
            service.decode("<gpx>")

    def test_encode(self, service):
        text = service.encode(GPXDocument(creator="svc"))
        assert text.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert 'creator="svc"' in text

    def test_encode_uses_settings(self):
        service = GPXService(Settings(_env_file=None, encoding="ISO-8859-1"))
        assert service.encode_bytes(GPXDocument()).startswith(
            b'<?xml version="1.0" encoding="ISO-8859-1"?>'
        )

    def test_save_and_load(self, service, tmp_path, caplog):
        caplog.set_level(logging.INFO, logger="gpxkit.features.gpx.service")
        path = tmp_path / "medeu.gpx"
        document = service.decode(SAMPLE_GPX)

        service.save(document, path)
        loaded = service.load(path)

        assert loaded == document
        assert loaded.file_name == str(path)
        assert f"Saving GPX file {path}" in caplog.text
        assert f"Loading GPX file {path}" in caplog.text

    def test_load_missing(self, service, tmp_path):
        with pytest.raises(GPXDecodeError):
            service.load(tmp_path / "missing.gpx")

    def test_save_unwritable(self, service, tmp_path):
        with pytest.raises(GPXEncodeError):
            service.save(GPXDocument(), tmp_path / "no" / "such" / "dir.gpx")


class TestModuleFunctions:
    """Tests for gpxkit.decode and gpxkit.encode."""

    def test_round_trip(self):
        document = gpxkit.decode(SAMPLE_GPX)
        again = gpxkit.decode(gpxkit.encode(document))
        assert again == document

    def test_encode(self):
        text = gpxkit.encode(GPXDocument(waypoints=[GPXPoint(latitude=1.0, longitude=2.0)]))
        assert '<wpt lat="1.0" lon="2.0"' in text
