# -*- coding: utf-8 -*-
"""
Projector Tests - Column to ground projection with slant-range correction.

Dependencies
------------
pytest
numpy
pyproj

Author
------
Duane Smalley, PhD
duane.d.smalley@gmail.com

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-19

Modified
--------
2026-10-19
"""

import math

import numpy as np
import pytest

from sidescan.geolocation.projector import (
    ground_range,
    project,
    project_columns,
    slant_range,
)
from sidescan.geolocation.utils import geographic_distance, ned_offset
from sidescan.IO.models import SensorInfo


WIDTH = 100
SENSOR = SensorInfo(min_range=-50.0, max_range=50.0)


def _dist(a, b):
    return geographic_distance(a.lat, a.lon, b.lat, b.lon)


# ---------------------------------------------------------------------------
# Slant and ground range
# ---------------------------------------------------------------------------

class TestRanges:
    """Column to slant range and slant to ground range."""

    def test_slant_range_linear(self):
        assert slant_range(0, WIDTH, SENSOR) == -50.0
        assert slant_range(50, WIDTH, SENSOR) == 0.0
        assert slant_range(100, WIDTH, SENSOR) == 50.0
        np.testing.assert_allclose(
            slant_range(np.array([25.0, 75.0]), WIDTH, SENSOR),
            [-25.0, 25.0],
        )

    def test_slant_range_bad_width(self):
        with pytest.raises(ValueError):
            slant_range(0, 0, SENSOR)

    def test_nadir_boundary_is_zero(self):
        assert ground_range(10.0, 10.0) == 0.0
        assert ground_range(-10.0, 10.0) == 0.0

    def test_inside_shadow_is_zero(self):
        assert ground_range(5.0, 10.0) == 0.0
        assert ground_range(-0.5, 10.0) == 0.0

    def test_outside_shadow(self):
        assert ground_range(20.0, 10.0) == pytest.approx(math.sqrt(300.0))
        assert ground_range(-20.0, 10.0) == pytest.approx(-math.sqrt(300.0))

    def test_zero_altitude_passthrough(self):
        assert ground_range(12.5, 0.0) == 12.5
        assert ground_range(-12.5, -3.0) == -12.5

    def test_array_never_nan(self):
        slant = np.array([-20.0, -10.0, -3.0, 0.0, 3.0, 10.0, 20.0])
        ground = ground_range(slant, 10.0)
        assert not np.isnan(ground).any()
        expected = [-math.sqrt(300.0), 0, 0, 0, 0, 0, math.sqrt(300.0)]
        np.testing.assert_allclose(ground, expected)


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------

class TestProject:
    """Pixel column to ground location."""

    def test_center_column_is_vehicle(self, make_track):
        sample = make_track(2).samples[1]
        loc = project(sample, 50, WIDTH, SENSOR)
        assert loc == sample.pose.location

    def test_nadir_shadow_is_vehicle(self, make_track):
        sample = make_track(2, altitude=10.0).samples[0]
        # Column 60 is slant range +10 m, on the shadow boundary
        assert project(sample, 60, WIDTH, SENSOR) == sample.pose.location
        assert project(sample, 45, WIDTH, SENSOR) == sample.pose.location

    def test_slant_corrected_distance(self, make_track):
        sample = make_track(2, altitude=10.0).samples[0]
        loc = project(sample, 80, WIDTH, SENSOR)
        assert _dist(loc, sample.pose.location) == pytest.approx(
            math.sqrt(800.0), rel=1e-6)

    def test_uncorrected_distance(self, make_track):
        sample = make_track(2, altitude=10.0).samples[0]
        loc = project(sample, 80, WIDTH, SENSOR, slant_corrected=False)
        assert _dist(loc, sample.pose.location) == pytest.approx(30.0,
                                                                rel=1e-6)

    def test_unknown_altitude_uses_slant(self, make_track):
        sample = make_track(2, altitude=None).samples[0]
        loc = project(sample, 80, WIDTH, SENSOR)
        assert _dist(loc, sample.pose.location) == pytest.approx(30.0,
                                                                rel=1e-6)

    def test_starboard_and_port_heading_north(self, make_track):
        sample = make_track(2, heading=0.0).samples[0]
        pose = sample.pose
        starboard = project(sample, 90, WIDTH, SENSOR)
        port = project(sample, 10, WIDTH, SENSOR)
        assert starboard.lon > pose.longitude
        assert port.lon < pose.longitude
        assert starboard.lat == pytest.approx(pose.latitude, abs=1e-6)

    def test_starboard_heading_east_is_south(self, make_track):
        sample = make_track(2, heading=90.0).samples[0]
        loc = project(sample, 90, WIDTH, SENSOR)
        north, east = ned_offset(sample.pose.latitude, sample.pose.longitude,
                                 loc.lat, loc.lon)
        assert north[0] == pytest.approx(-40.0, abs=1e-3)
        assert east[0] == pytest.approx(0.0, abs=1e-3)

    def test_adjacent_columns_continuous(self, make_track):
        sample = make_track(2, heading=30.0).samples[1]
        spacing = SENSOR.swath_width / WIDTH
        prev = project(sample, 0, WIDTH, SENSOR)
        for col in range(1, WIDTH):
            loc = project(sample, col, WIDTH, SENSOR)
            assert _dist(prev, loc) <= spacing * (1 + 1e-6)
            prev = loc

    def test_project_columns_matches_scalar(self, make_track):
        sample = make_track(2, heading=200.0, altitude=8.0).samples[1]
        columns = np.array([0, 30, 55, 58, 70, 99])
        lats, lons = project_columns(sample, columns, WIDTH, SENSOR)
        for col, lat, lon in zip(columns, lats, lons):
            loc = project(sample, float(col), WIDTH, SENSOR)
            assert lat == pytest.approx(loc.lat, abs=1e-9)
            assert lon == pytest.approx(loc.lon, abs=1e-9)
