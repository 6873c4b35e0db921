"""
Tests for the GPX document model.
"""

import gc
from datetime import datetime, timezone

import pytest

from gpxkit.features.gpx import (
    GPXBounds,
    GPXCopyright,
    GPXDocument,
    GPXEmail,
    GPXExtension,
    GPXFix,
    GPXLink,
    GPXMetadata,
    GPXPerson,
    GPXPoint,
    GPXRoute,
    GPXTrack,
    GPXTrackSegment,
)
from gpxkit.shared.constants import MIN_TIME


# =============================================================================
# Test Points
# =============================================================================

class TestGPXPoint:
    """Tests for GPXPoint."""

    def test_optional_fields_default_to_absent(self):
        point = GPXPoint(latitude=43.23, longitude=76.94)
        assert point.elevation is None
        assert point.time is None
        assert point.fix is None
        assert point.links == []
        assert point.extensions == []

    def test_zero_elevation_is_not_absent(self):
        point = GPXPoint(latitude=0.0, longitude=0.0, elevation=0.0)
        assert point.elevation is not None
        assert point.elevation_value == 0.0

    def test_value_accessors(self):
        point = GPXPoint(latitude=1.0, longitude=2.0)
        assert point.time_value == MIN_TIME
        assert point.elevation_value == 0.0

        when = datetime(2024, 1, 1, tzinfo=timezone.utc)
        point.time = when
        point.elevation = 812.5
        assert point.time_value == when
        assert point.elevation_value == 812.5

    def test_clone_is_independent(self):
        point = GPXPoint(latitude=1.0, longitude=2.0, links=[GPXLink(href="a")])
        copy = point.clone()
        assert copy == point

        copy.links.append(GPXLink(href="b"))
        copy.elevation = 5.0
        assert len(point.links) == 1
        assert point.elevation is None

    def test_out_of_range_coordinates_kept(self):
        point = GPXPoint(latitude=123.0, longitude=-400.0)
        assert point.latitude == 123.0
        assert point.longitude == -400.0

    def test_str(self):
        assert str(GPXPoint(latitude=43.5, longitude=76.25)) == "43.5, 76.25"


class TestGPXFix:
    """Tests for GPXFix literals."""

    @pytest.mark.parametrize("text, expected", [
        ("none", GPXFix.NONE),
        ("2d", GPXFix.TWO_D),
        ("3D", GPXFix.THREE_D),
        (" dgps ", GPXFix.DGPS),
        ("pps", GPXFix.PPS),
    ])
    def test_parse(self, text, expected):
        assert GPXFix.parse(text) is expected

    @pytest.mark.parametrize("text", [None, "", "4d", "gps"])
    def test_parse_unknown(self, text):
        assert GPXFix.parse(text) is None

    def test_wire_value(self):
        assert GPXFix.TWO_D.value == "2d"


# =============================================================================
# Test Small Records
# =============================================================================

class TestRecords:
    """Tests for email, link, copyright, person and bounds."""

    def test_email_address(self):
        assert GPXEmail(id="runner", domain="example.com").address == "runner@example.com"
        assert GPXEmail(id="runner").address == "runner"
        assert not GPXEmail().has_data

    def test_link(self):
        link = GPXLink(href="https://example.com", text="Home")
        assert link.has_data
        assert str(link) == "https://example.com,Home"
        assert not GPXLink().has_data

    def test_copyright(self):
        copyright = GPXCopyright(author="Alice", year="2024")
        assert copyright.has_data
        assert str(copyright) == "2024,Alice"
        assert not GPXCopyright().has_data

    def test_person_has_data(self):
        assert GPXPerson(name="Alice").has_data
        assert GPXPerson(email=GPXEmail(id="a", domain="b")).has_data
        assert not GPXPerson(email=GPXEmail(), link=GPXLink()).has_data

    def test_bounds_str(self):
        bounds = GPXBounds(43.0, 76.0, 44.0, 77.5)
        assert str(bounds) == "43.0,76.0 - 44.0,77.5"

    def test_metadata_has_data(self):
        assert not GPXMetadata().has_data
        assert GPXMetadata(keywords="trail").has_data
        assert GPXMetadata(extensions=[GPXExtension(name="x")]).has_data

    def test_metadata_ignores_empty_parts(self):
        assert not GPXMetadata(author=GPXPerson(), copyright=GPXCopyright()).has_data
        assert not GPXMetadata(links=[GPXLink()], extensions=[GPXExtension(name="")]).has_data
        assert GPXMetadata(author=GPXPerson(name="Alice")).has_data

    def test_copyright_empty_strings(self):
        assert not GPXCopyright(author="", year="", license="").has_data
        assert GPXCopyright(license="https://example.com/license").has_data


# =============================================================================
# Test Routes and Tracks
# =============================================================================

class TestGPXRoute:
    """Tests for GPXRoute."""

    def test_has_data(self):
        assert not GPXRoute().has_data
        assert GPXRoute(number=0).has_data
        assert GPXRoute(extensions=[GPXExtension(name="x")]).has_data

    def test_display_name_prefers_own_fields(self):
        route = GPXRoute(description="Loop", comment="cmt")
        assert route.display_name == "Loop"

    def test_display_name_from_first_point(self):
        route = GPXRoute(points=[GPXPoint(latitude=1.0, longitude=2.0, name="Start")])
        assert route.display_name == "Start"

    def test_display_name_coordinates(self):
        route = GPXRoute(points=[GPXPoint(latitude=1.5, longitude=2.5)])
        assert route.display_name == "1.5,2.5"
        assert str(route) == "1.5,2.5"

    def test_display_name_fallback(self):
        assert GPXRoute().display_name == "Route"


class TestGPXTrack:
    """Tests for GPXTrack and its segments."""

    def test_segments_point_back_to_track(self):
        first = GPXTrackSegment()
        second = GPXTrackSegment()
        track = GPXTrack(segments=[first, second])
        assert first.track is track
        assert second.display_index == 2

    def test_add_segment(self):
        track = GPXTrack()
        segment = track.add_segment(
            GPXTrackSegment(points=[GPXPoint(latitude=0.0, longitude=0.0)])
        )
        assert track.segments == [segment]
        assert segment.display_index == 1
        assert str(segment) == "Segment 1 - 1 Points"

    def test_detached_segment(self):
        segment = GPXTrackSegment()
        assert segment.track is None
        assert segment.display_index is None
        assert str(segment) == "Segment - 0 Points"

    def test_back_reference_does_not_keep_track_alive(self):
        segment = GPXTrackSegment()
        track = GPXTrack(segments=[segment])
        del track
        gc.collect()
        assert segment.track is None

    def test_back_reference_ignored_in_equality(self):
        attached = GPXTrackSegment()
        GPXTrack(segments=[attached])
        assert attached == GPXTrackSegment()

    def test_has_points(self):
        track = GPXTrack(segments=[GPXTrackSegment()])
        assert not track.has_points
        assert not track.has_data

        track.add_segment(GPXTrackSegment(points=[GPXPoint(latitude=0.0, longitude=0.0)]))
        assert track.has_points
        assert track.has_data

    def test_display_name(self):
        assert GPXTrack(name="Morning run").display_name == "Morning run"
        assert GPXTrack().display_name == "Track"


class TestGPXDocument:
    """Tests for GPXDocument."""

    def test_defaults(self):
        document = GPXDocument()
        assert document.version is None
        assert document.creator is None
        assert not document.metadata.has_data
        assert document.waypoints == []
        assert document.routes == []
        assert document.tracks == []
        assert document.namespaces == []
        assert document.extensions == []

    def test_file_name_ignored_in_equality(self):
        assert GPXDocument(file_name="a.gpx") == GPXDocument()


# =============================================================================
# Test Extensions
# =============================================================================

class TestGPXExtension:
    """Tests for GPXExtension nodes."""

    def test_has_data(self):
        assert GPXExtension(name="flag").has_data
        assert GPXExtension(name="", value="1").has_data
        assert not GPXExtension(name="").has_data

    def test_empty_value_is_absent(self):
        assert GPXExtension(name="flag", value="").value is None
        assert GPXExtension(name="flag", value=" ").value == " "

    def test_qualified_name(self):
        assert GPXExtension(name="hr", prefix="gpxtpx").qualified_name == "gpxtpx:hr"
        assert GPXExtension(name="color").qualified_name == "color"

    def test_find_direct_children_only(self):
        inner = GPXExtension(name="hr", value="120")
        node = GPXExtension(name="TrackPointExtension", children=[
            GPXExtension(name="wrapper", children=[inner]),
            GPXExtension(name="cad", value="80"),
        ])
        assert node.find("cad").value == "80"
        assert node.find("hr") is None
        assert node.find("wrapper").find("hr") is inner
