# -*- coding: utf-8 -*-
"""
Model Tests - Validation of raster, pose and contact data models.

Dependencies
------------
pytest

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

from datetime import datetime, timedelta, timezone

import pytest

from sidescan.exceptions import MalformedRasterError, SidescanError
from sidescan.IO.models import (
    Contact,
    LatLon,
    Observation,
    Pose,
    Raster,
    Sample,
    SensorInfo,
)
from sidescan.vocabulary import RasterType

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Pose
# ---------------------------------------------------------------------------

class TestPose:
    """Pose accessors with missing optional fields."""

    def test_defaults_for_missing_attitude(self):
        pose = Pose(latitude=41.0, longitude=-8.7)
        assert pose.heading == 0.0
        assert pose.roll == 0.0
        assert pose.altitude_or_zero == 0.0

    def test_negative_altitude_clamped(self):
        pose = Pose(latitude=41.0, longitude=-8.7, altitude=-1.5)
        assert pose.altitude_or_zero == 0.0

    def test_location(self):
        pose = Pose(latitude=41.0, longitude=-8.7, psi=120.0, phi=-3.0)
        assert pose.location == LatLon(41.0, -8.7)
        assert pose.heading == 120.0
        assert pose.roll == -3.0


# ---------------------------------------------------------------------------
# SensorInfo
# ---------------------------------------------------------------------------

class TestSensorInfo:
    """Range interval validation."""

    def test_swath_width(self):
        sensor = SensorInfo(min_range=-30.0, max_range=50.0)
        assert sensor.swath_width == 80.0

    def test_inverted_range_rejected(self):
        with pytest.raises(MalformedRasterError, match="max_range"):
            SensorInfo(min_range=50.0, max_range=-50.0)

    def test_empty_range_rejected(self):
        with pytest.raises(MalformedRasterError):
            SensorInfo(min_range=10.0, max_range=10.0)


# ---------------------------------------------------------------------------
# Raster
# ---------------------------------------------------------------------------

class TestRaster:
    """Raster invariants."""

    def test_valid_track(self, make_track):
        raster = make_track(10)
        assert len(raster) == 10
        assert isinstance(raster.samples, tuple)
        assert raster.start_time == T0
        assert raster.end_time == T0 + timedelta(seconds=9)
        assert raster.center_sample.index == 5
        assert raster.raster_type is RasterType.IMAGE

    def test_empty_samples_rejected(self):
        with pytest.raises(MalformedRasterError):
            Raster('empty.png', [], SensorInfo(-50.0, 50.0))

    def test_missing_sensor_info_rejected(self, make_track):
        samples = make_track(3).samples
        with pytest.raises(MalformedRasterError):
            Raster('nosensor.png', samples, None)

    def test_decreasing_timestamps_rejected(self, make_track):
        samples = list(make_track(3).samples)
        samples[2] = Sample(2, T0 - timedelta(seconds=1), samples[2].pose)
        with pytest.raises(MalformedRasterError):
            Raster('backwards.png', samples, SensorInfo(-50.0, 50.0))

    def test_equal_timestamps_allowed(self, make_track):
        raster = make_track(4, dt=0.0)
        assert raster.start_time == raster.end_time

    def test_error_hierarchy(self):
        with pytest.raises(SidescanError):
            Raster('empty.png', [], SensorInfo(-50.0, 50.0))
        with pytest.raises(ValueError):
            Raster('empty.png', [], SensorInfo(-50.0, 50.0))


# ---------------------------------------------------------------------------
# Contact
# ---------------------------------------------------------------------------

class TestContact:
    """Contact and observation models."""

    def test_first_observation_time(self):
        contact = Contact(latitude=41.0, longitude=-8.7, label='mine')
        assert contact.first_observation_time is None

        late = Observation(41.0, -8.7, T0 + timedelta(seconds=30))
        early = Observation(41.0, -8.7, T0)
        contact.observations.extend([late, early])
        assert contact.first_observation_time == T0

    def test_observation_ids_unique(self):
        a = Observation(41.0, -8.7, T0)
        b = Observation(41.0, -8.7, T0)
        assert a.uuid != b.uuid
