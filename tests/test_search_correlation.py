# -*- coding: utf-8 -*-
"""
Correlation Search Tests - Column and sample refinement, re-observation
search with time exclusion, and multi-raster contact search.

Dependencies
------------
pytest
numpy
Pillow

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

import json
from datetime import timedelta

import numpy as np
import pytest

from sidescan.geolocation.footprint import swath_bounds
from sidescan.geolocation.projector import project
from sidescan.geolocation.utils import geographic_distance, offset_location
from sidescan.IO.models import (
    Contact,
    LatLon,
    Observation,
    Raster,
    SensorInfo,
)
from sidescan.IO.reader import SidescanReader
from sidescan.search.correlation import (
    ReacquisitionSearch,
    _descend,
    _may_contain,
    find_closest_sample,
    find_min_column,
    find_reacquisitions,
    generate_observations,
    search_folder,
    search_rasters,
)


WIDTH = 200


@pytest.fixture
def line(make_track):
    """200 scanlines, 0.5 m apart, 1 s apart, heading north."""
    return make_track(200, spacing=0.5)


@pytest.fixture
def target(line):
    """Ground point imaged by column 150 of scanline 120."""
    return project(line.samples[120], 150, WIDTH, line.sensor_info)


# ---------------------------------------------------------------------------
# Integer descent
# ---------------------------------------------------------------------------

class TestDescend:
    """Coarse-to-fine integer minimization."""

    def test_parabola(self):
        x, c = _descend(lambda v: (v - 37) ** 2, 0, 99, 0, 50)
        assert x == 37
        assert c == 0

    def test_minimum_at_bound(self):
        x, _ = _descend(lambda v: float(v), 0, 99, 60, 50)
        assert x == 0

    def test_cost_memoized(self):
        calls = []

        def cost(v):
            calls.append(v)
            return abs(v - 10)

        _descend(cost, 0, 63, 0, 32)
        assert len(calls) == len(set(calls))


# ---------------------------------------------------------------------------
# Single-scanline refinements
# ---------------------------------------------------------------------------

class TestRefinement:
    """Across-track and along-track refinement."""

    def test_vehicle_position_is_center_column(self, make_track):
        raster = make_track(2, spacing=1.0)
        sample = raster.samples[1]
        column, distance = find_min_column(sample, sample.pose.location,
                                           100, raster)
        assert column == 50
        assert distance == pytest.approx(0.0, abs=1e-9)

    def test_column_of_target(self, line, target):
        column, distance = find_min_column(line.samples[120], target,
                                           WIDTH, line)
        assert column == 150
        assert distance < 1e-6

    def test_closest_sample(self, line, target):
        index, distance = find_closest_sample(line, 100, 150, target, WIDTH)
        assert index == 120
        assert distance < 1e-6

    def test_window_clamped_to_raster(self, line, target):
        index, _ = find_closest_sample(line, 190, 150, target, WIDTH,
                                       window=5)
        assert 185 <= index <= 199


# ---------------------------------------------------------------------------
# Raster search
# ---------------------------------------------------------------------------

class TestReacquisitionSearch:
    """Searching one raster for a target."""

    def test_finds_injected_target(self, line, target):
        seed_time = line.samples[40].timestamp
        found = find_reacquisitions(line, target, WIDTH,
                                    exclude_around=seed_time)
        assert len(found) == 1
        obs = found[0]
        assert isinstance(obs, Observation)
        assert geographic_distance(obs.latitude, obs.longitude,
                                   target.lat, target.lon) < 2.0
        assert obs.timestamp == line.samples[120].timestamp
        assert obs.raster_filename == line.filename
        assert obs.system_name == 'auv-1'
        assert obs.depth == 3.0

    def test_exclusion_window_respected(self, line, target):
        seed_time = line.samples[120].timestamp
        found = find_reacquisitions(line, target, WIDTH,
                                    exclude_around=seed_time)
        assert found == []

    def test_wider_acceptance_still_excluded(self, line, target):
        seed_time = line.samples[120].timestamp
        window = timedelta(seconds=5)
        found = find_reacquisitions(line, target, WIDTH,
                                    exclude_around=seed_time,
                                    exclude_window=window,
                                    acceptance_distance=10.0)
        for obs in found:
            assert abs(obs.timestamp - seed_time) >= window

    def test_far_target(self, line):
        assert find_reacquisitions(line, LatLon(42.0, -8.7), WIDTH) == []

    def test_match_details(self, line, target):
        search = ReacquisitionSearch(line, WIDTH)
        matches = list(search.iter_matches(target))
        assert len(matches) == 1
        assert matches[0].sample_index == 120
        assert matches[0].column == 150
        assert matches[0].location.lat == pytest.approx(target.lat)

    def test_invalid_parameters(self, line):
        with pytest.raises(ValueError):
            ReacquisitionSearch(line, 0)
        with pytest.raises(ValueError):
            ReacquisitionSearch(line, WIDTH, acceptance_distance=0.0)
        with pytest.raises(ValueError):
            ReacquisitionSearch(line, WIDTH, skip_samples=-1)

    def test_unknown_system_name(self, make_track):
        track = make_track(2)
        raster = Raster(track.filename, track.samples, SensorInfo(-50.0, 50.0))
        search = ReacquisitionSearch(raster, 100)
        match = next(search.iter_matches(raster.samples[1].pose.location))
        assert search.observation(match).system_name == 'unknown'


# ---------------------------------------------------------------------------
# Multi-raster search
# ---------------------------------------------------------------------------

class TestContactSearch:
    """Searching readers and folders for a contact."""

    @pytest.fixture
    def survey(self, tmp_path, line, make_raster_file):
        image = np.zeros((200, WIDTH), dtype=np.uint8)
        make_raster_file(tmp_path / 'rasterIndex', line, image)
        return tmp_path

    def test_generate_observations_appends(self, survey, line, target):
        contact = Contact(latitude=target.lat, longitude=target.lon)
        contact.observations.append(
            Observation(target.lat, target.lon, line.samples[40].timestamp))
        reader = SidescanReader(survey / 'rasterIndex' / 'line.json')

        found = generate_observations(contact, [reader])
        assert len(found) == 1
        assert len(contact.observations) == 2
        assert contact.observations[1] is found[0]

    def test_search_folder(self, survey, line, target):
        contact = Contact(latitude=target.lat, longitude=target.lon)
        contact.observations.append(
            Observation(target.lat, target.lon, line.samples[120].timestamp))
        assert search_folder(survey, contact) == []
        assert len(contact.observations) == 1

    def test_skips_unavailable_image(self, tmp_path, line, target,
                                     make_raster_file):
        path = make_raster_file(tmp_path / 'rasterIndex', line)
        with pytest.warns(UserWarning, match="Skipping raster"):
            found = search_rasters([SidescanReader(path)], target)
        assert found == []

    def test_search_folder_skips_corrupt_indexes(self, survey, line, target):
        index_dir = survey / 'rasterIndex'
        (index_dir / 'binary.json').write_bytes(b'\xff\xfe')
        (index_dir / 'entries.json').write_text(json.dumps(
            {'filename': 'x.png', 'samples': ['oops'],
             'sensor-info': {'min-range': -50, 'max-range': 50}}))
        contact = Contact(latitude=target.lat, longitude=target.lon)
        contact.observations.append(
            Observation(target.lat, target.lon, line.samples[40].timestamp))

        with pytest.warns(UserWarning, match="Failed to index raster"):
            found = search_folder(survey, contact)
        assert len(found) == 1
        assert found[0].raster_filename == 'line.png'

    def test_skips_row_count_mismatch(self, tmp_path, line, target,
                                      make_raster_file):
        path = make_raster_file(tmp_path / 'rasterIndex', line,
                                np.zeros((50, WIDTH), dtype=np.uint8))
        with pytest.warns(UserWarning, match="Skipping raster"):
            found = search_rasters([SidescanReader(path)], target)
        assert found == []

    def test_prefilter_skips_distant_raster(self, tmp_path, line,
                                            make_raster_file):
        # No image on disk: the raster must be rejected before it is read
        path = make_raster_file(tmp_path / 'rasterIndex', line)
        found = search_rasters([SidescanReader(path)], LatLon(0.0, 0.0))
        assert found == []


# ---------------------------------------------------------------------------
# Altitude-corrected search
# ---------------------------------------------------------------------------

class TestAltitudeCorrectedSearch:
    """Search across the nadir shadow of a line flown 10 m off the seabed."""

    @pytest.fixture
    def high_line(self, make_track):
        return make_track(200, spacing=0.5, altitude=10.0)

    @pytest.mark.parametrize('column', [10, 30, 150, 190])
    def test_column_found_across_nadir(self, high_line, column):
        # Columns 80-120 all project onto the vehicle position
        sample = high_line.samples[120]
        target = project(sample, column, WIDTH, high_line.sensor_info)
        found, distance = find_min_column(sample, target, WIDTH, high_line)
        assert found == column
        assert distance < 1e-6

    def test_nadir_plateau_snaps_to_vehicle(self, high_line):
        sample = high_line.samples[120]
        on_plateau = project(sample, 90, WIDTH, high_line.sensor_info)
        assert on_plateau == sample.pose.location
        _, distance = find_min_column(sample, sample.pose.location, WIDTH,
                                      high_line)
        assert distance == pytest.approx(0.0, abs=1e-9)

    @pytest.mark.parametrize('column', [30, 150])
    def test_reacquires_port_and_starboard(self, high_line, column):
        target = project(high_line.samples[120], column, WIDTH,
                         high_line.sensor_info)
        found = find_reacquisitions(
            high_line, target, WIDTH,
            exclude_around=high_line.samples[40].timestamp)
        assert len(found) == 1
        assert found[0].timestamp == high_line.samples[120].timestamp
        assert geographic_distance(found[0].latitude, found[0].longitude,
                                   target.lat, target.lon) < 2.0

    def test_uncorrected_search_uses_slant_column(self, high_line):
        # 22.9 m of ground range is imaged at slant 25 m (column 150); read
        # as slant range it falls on column 146
        target = project(high_line.samples[120], 150, WIDTH,
                         high_line.sensor_info)
        search = ReacquisitionSearch(high_line, WIDTH, slant_corrected=False)
        matches = list(search.iter_matches(target))
        assert [(m.sample_index, m.column) for m in matches] == [(120, 146)]


class TestSwathPrefilter:
    """Geodesic margin around the swath box."""

    @pytest.fixture
    def box(self, line):
        return swath_bounds(line)

    def test_margin_keeps_nearby_target(self, line, box):
        min_lon, min_lat, max_lon, max_lat = box
        mid_lat = (min_lat + max_lat) / 2
        lat, lon = offset_location(mid_lat, max_lon, 90.0, 1.0)
        assert _may_contain(line, LatLon(lat, lon), 2.0)

    def test_margin_rejects_distant_target(self, line, box):
        min_lon, min_lat, max_lon, max_lat = box
        mid_lat = (min_lat + max_lat) / 2
        lat, lon = offset_location(mid_lat, max_lon, 90.0, 3.0)
        assert not _may_contain(line, LatLon(lat, lon), 2.0)
        lat, lon = offset_location(max_lat, min_lon, 0.0, 3.0)
        assert not _may_contain(line, LatLon(lat, lon), 2.0)
