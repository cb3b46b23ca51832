"""
Tests for geodesy utilities.
"""

import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from ais_reception.utils.geodesy import (
    bearing_deg,
    compass_direction,
    destination_point,
    distance_nm,
    is_valid_position,
)


STATION = (51.50092998192453, -0.20671121337722095)


class TestDistance:
    """Tests for haversine distance in nautical miles."""

    def test_same_point_zero_distance(self):
        """Same point should have zero distance."""
        assert distance_nm(*STATION, *STATION) == 0.0
        assert distance_nm(-33.9, 151.2, -33.9, 151.2) == 0.0

    def test_one_degree_latitude(self):
        """One degree of latitude is ~60 nm on a 6371 km sphere."""
        dist = distance_nm(50.0, 0.0, 51.0, 0.0)
        expected = 6371.0 * math.radians(1.0) / 1.852
        assert_allclose(dist, expected, rtol=1e-12)
        assert_allclose(dist, 60.04, atol=0.01)

    def test_symmetric(self):
        """Distance should be symmetric."""
        d1 = distance_nm(*STATION, 51.9, 1.3)
        d2 = distance_nm(51.9, 1.3, *STATION)
        assert_allclose(d1, d2, rtol=1e-9)

    def test_near_antipodal_points(self):
        """Rounding near the antipode must not leave the sqrt domain."""
        half_circumference = 6371.0 * math.pi / 1.852
        dist = distance_nm(-87.843, 0.0, 87.843, 180.0)
        assert math.isfinite(dist)
        assert dist <= half_circumference + 1e-6

        for lat in np.linspace(-89.0, 89.0, 2001):
            assert math.isfinite(distance_nm(lat, 0.0, -lat, 180.0))

    def test_never_negative(self):
        assert distance_nm(0.0, 0.0, 0.0, 180.0) > 0
        assert distance_nm(89.9, 10.0, -89.9, -170.0) > 0


class TestBearing:
    """Tests for initial bearing."""

    @pytest.mark.parametrize(
        "lat,lon,expected",
        [
            (52.0, 0.0, 0.0),     # north
            (51.0, 1.0, 90.0),    # east, same parallel
            (50.0, 0.0, 180.0),   # south
        ],
    )
    def test_cardinal_directions(self, lat, lon, expected):
        result = bearing_deg(51.0, 0.0, lat, lon)
        assert_allclose(result, expected, atol=0.5)

    def test_west_is_270(self):
        assert_allclose(bearing_deg(0.0, 0.0, 0.0, -1.0), 270.0, atol=1e-9)

    def test_range(self):
        """Bearings are normalized into [0, 360)."""
        for lat, lon in [(51.0, -1.0), (52.0, -0.5), (50.0, 0.5), (51.5, -0.2067)]:
            b = bearing_deg(*STATION, lat, lon)
            assert 0.0 <= b < 360.0

    def test_coincident_points_deterministic(self):
        """Undefined bearing returns 0 rather than NaN."""
        b = bearing_deg(*STATION, *STATION)
        assert b == 0.0
        assert not math.isnan(b)

    def test_reverse_on_meridian(self):
        """Reverse bearing differs by 180 degrees along a meridian."""
        forward = bearing_deg(10.0, 20.0, 30.0, 20.0)
        backward = bearing_deg(30.0, 20.0, 10.0, 20.0)
        assert_allclose((backward - forward) % 360, 180.0, atol=1e-9)

    def test_reverse_on_equator(self):
        """Reverse bearing differs by 180 degrees along the equator."""
        forward = bearing_deg(0.0, 10.0, 0.0, 40.0)
        backward = bearing_deg(0.0, 40.0, 0.0, 10.0)
        assert_allclose((backward - forward) % 360, 180.0, atol=1e-9)

    def test_reverse_short_range(self):
        """Over receiver ranges the reverse bearing is ~180 degrees off."""
        forward = bearing_deg(*STATION, 51.2, 0.4)
        backward = bearing_deg(51.2, 0.4, *STATION)
        assert_allclose((backward - forward) % 360, 180.0, atol=1.0)


class TestHelpers:
    """Tests for validation and compass helpers."""

    def test_valid_positions(self):
        assert is_valid_position(90.0, 180.0)
        assert is_valid_position(-90.0, -180.0)
        assert not is_valid_position(90.1, 0.0)
        assert not is_valid_position(0.0, -180.5)

    def test_compass_direction(self):
        assert compass_direction(0.0) == "N"
        assert compass_direction(7.5) == "N"
        assert compass_direction(22.5) == "NNE"
        assert compass_direction(90.0) == "E"
        assert compass_direction(202.5) == "SSW"
        assert compass_direction(359.0) == "N"

    def test_destination_point_round_trip(self):
        """Walking out along a bearing lands at that distance and bearing."""
        lat, lon = destination_point(*STATION, 30 * 1852.0, 200.0)
        assert_allclose(distance_nm(*STATION, lat, lon), 30.0, rtol=1e-9)
        assert_allclose(bearing_deg(*STATION, lat, lon), 200.0, atol=1e-6)
