"""
Tests for shared elevation functions.
"""

from gpxkit.shared.elevation import ElevationRange, calculate_elevation_range


class TestCalculateElevationRange:
    """Tests for calculate_elevation_range function."""

    def test_range_low_high(self):
        """[100, 50, 150] spans 100 m from 50 to 150."""
        result = calculate_elevation_range([100.0, 50.0, 150.0])
        assert result == ElevationRange(range_m=100.0, low_m=50.0, high_m=150.0)

    def test_no_elevations(self):
        """No known elevation gives an all-zero range."""
        result = calculate_elevation_range([None, None])
        assert result == ElevationRange(range_m=0.0, low_m=0.0, high_m=0.0)

    def test_empty(self):
        assert calculate_elevation_range([]).range_m == 0.0

    def test_missing_values_are_skipped_not_zero(self):
        """A missing elevation must not drag the low end down to 0."""
        result = calculate_elevation_range([None, 200.0, None, 250.0])
        assert result.low_m == 200.0
        assert result.high_m == 250.0
        assert result.range_m == 50.0

    def test_zero_elevation_counts(self):
        """Elevation 0 is a real value."""
        result = calculate_elevation_range([0.0, 10.0])
        assert result.low_m == 0.0
        assert result.range_m == 10.0

    def test_negative_elevations(self):
        """Below sea level (Dead Sea shore)."""
        result = calculate_elevation_range([-430.0, -400.0])
        assert result.range_m == 30.0
