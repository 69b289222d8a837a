# -*- coding: utf-8 -*-
"""
Reader and Catalog Tests - SidescanReader image access and RasterCatalog
discovery.

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

from datetime import timedelta

import numpy as np
import pytest

from sidescan.exceptions import ImageUnavailableError, MalformedRasterError
from sidescan.geolocation.footprint import swath_bounds
from sidescan.geolocation.sidescan import SidescanGeolocation
from sidescan.IO.catalog import RasterCatalog
from sidescan.IO.reader import SidescanReader
from sidescan.vocabulary import RasterType


def _ramp(rows, cols):
    """Image whose row ``i`` holds the value ``i``."""
    return np.repeat(np.arange(rows, dtype=np.uint8)[:, None], cols, axis=1)


# ---------------------------------------------------------------------------
# SidescanReader
# ---------------------------------------------------------------------------

class TestSidescanReader:
    """Reading images through raster indexes."""

    def test_read_full_image_type(self, tmp_path, make_track,
                                  make_raster_file):
        raster = make_track(20)
        path = make_raster_file(tmp_path / 'rasterIndex', raster,
                                _ramp(20, 64))
        with SidescanReader(path) as reader:
            assert reader.metadata == raster
            assert reader.get_shape() == (20, 64)
            data = reader.read_full()
            assert data.shape == (20, 64)
            np.testing.assert_array_equal(data[:, 0], np.arange(20))

    def test_scanline_rows_flipped(self, tmp_path, make_track,
                                   make_raster_file):
        raster = make_track(20, raster_type=RasterType.SCANLINE)
        path = make_raster_file(tmp_path / 'rasterIndex', raster,
                                _ramp(20, 64)[::-1])
        with SidescanReader(path) as reader:
            data = reader.read_full()
        np.testing.assert_array_equal(data[:, 10], np.arange(20))

    def test_rgb_shape(self, tmp_path, make_track, make_raster_file):
        raster = make_track(8)
        image = np.zeros((8, 16, 3), dtype=np.uint8)
        image[..., 1] = 200
        path = make_raster_file(tmp_path, raster, image)
        with SidescanReader(path) as reader:
            assert reader.get_shape() == (8, 16, 3)
            assert reader.read_full()[0, 0, 1] == 200

    def test_read_chip(self, tmp_path, make_track, make_raster_file):
        raster = make_track(20)
        path = make_raster_file(tmp_path, raster, _ramp(20, 64))
        with SidescanReader(path) as reader:
            chip = reader.read_chip(5, 10, 0, 32)
            assert chip.shape == (5, 32)
            assert chip[0, 0] == 5
            with pytest.raises(ValueError):
                reader.read_chip(10, 5, 0, 32)
            with pytest.raises(ValueError):
                reader.read_chip(0, 21, 0, 32)

    def test_row_count_mismatch(self, tmp_path, make_track,
                                make_raster_file):
        raster = make_track(20)
        path = make_raster_file(tmp_path, raster, _ramp(19, 64))
        reader = SidescanReader(path)
        with pytest.raises(MalformedRasterError, match="19 rows"):
            reader.get_shape()
        with pytest.raises(MalformedRasterError):
            reader.read_full()

    def test_missing_image(self, tmp_path, make_track, make_raster_file):
        path = make_raster_file(tmp_path, make_track(20))
        reader = SidescanReader(path)
        assert reader.metadata.filename == 'line.png'
        with pytest.raises(ImageUnavailableError):
            reader.read_full()
        with pytest.raises(OSError):
            reader.get_shape()

    def test_missing_index(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SidescanReader(tmp_path / 'absent.json')

    def test_geolocation(self, tmp_path, make_track, make_raster_file):
        path = make_raster_file(tmp_path, make_track(20), _ramp(20, 100))
        with SidescanReader(path) as reader:
            geo = reader.get_geolocation()
        assert isinstance(geo, SidescanGeolocation)
        assert geo.shape == (20, 100)


# ---------------------------------------------------------------------------
# RasterCatalog
# ---------------------------------------------------------------------------

class TestRasterCatalog:
    """Discovery of raster indexes under a folder tree."""

    @pytest.fixture
    def survey(self, tmp_path, make_track, make_raster_file):
        """Two valid lines, one malformed index, one stray JSON file."""
        late = make_track(10, filename='late.png')
        early = make_track(10, filename='early.png',
                           start=late.start_time - timedelta(hours=1))
        make_raster_file(tmp_path / 'a' / 'rasterIndex', late,
                         _ramp(10, 32))
        make_raster_file(tmp_path / 'b' / 'rasterIndex', early,
                         _ramp(10, 32))
        (tmp_path / 'a' / 'rasterIndex' / 'broken.json').write_text('{oops')
        (tmp_path / 'other').mkdir()
        (tmp_path / 'other' / 'stray.json').write_text('{}')
        return tmp_path

    def test_discover_only_index_folders(self, survey):
        catalog = RasterCatalog(survey)
        names = [p.name for p in catalog.discover()]
        assert sorted(names) == ['broken.json', 'early.json', 'late.json']

    def test_non_recursive(self, survey):
        catalog = RasterCatalog(survey / 'a')
        names = [p.name for p in catalog.discover(recursive=False)]
        assert sorted(names) == ['broken.json', 'late.json']

    def test_open_all_skips_malformed(self, survey):
        with RasterCatalog(survey) as catalog:
            with pytest.warns(UserWarning, match="broken.json"):
                readers = catalog.open_all()
            assert [r.metadata.filename for r in readers] == [
                'early.png', 'late.png']

    def test_find_overlapping(self, survey):
        catalog = RasterCatalog(survey)
        paths = [p for p in catalog.discover() if p.name != 'broken.json']
        with SidescanReader(paths[0]) as reader:
            box = swath_bounds(reader.metadata)
        assert len(catalog.find_overlapping(box, paths)) == 2
        far = (10.0, 10.0, 10.1, 10.1)
        assert catalog.find_overlapping(far, paths) == []

    def test_not_a_directory(self, tmp_path):
        with pytest.raises(NotADirectoryError):
            RasterCatalog(tmp_path / 'missing')
