# -*- coding: utf-8 -*-
"""
Shared fixtures - Synthetic survey lines for the sidescan test suite.

Builds straight-line rasters by walking geodesically from a fixed start
point, and writes raster indexes with their images to disk.

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

# Standard library
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Third-party
import numpy as np
import pytest
from PIL import Image

# sidescan internal
from sidescan.geolocation.utils import offset_location
from sidescan.IO.index import save_raster_index
from sidescan.IO.models import Pose, Raster, Sample, SensorInfo
from sidescan.vocabulary import RasterType


LAT0 = 41.0
LON0 = -8.7
T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def build_track(
    n,
    spacing=1.0,
    heading=0.0,
    altitude=None,
    roll=None,
    dt=1.0,
    min_range=-50.0,
    max_range=50.0,
    filename='line.png',
    raster_type=RasterType.IMAGE,
    start=T0,
    depth=3.0,
):
    """Straight track of ``n`` samples, ``spacing`` meters apart."""
    samples = []
    for i in range(n):
        lat, lon = offset_location(LAT0, LON0, heading, i * spacing)
        pose = Pose(latitude=lat, longitude=lon, depth=depth,
                    altitude=altitude, phi=roll, psi=heading)
        samples.append(Sample(index=i,
                              timestamp=start + timedelta(seconds=i * dt),
                              pose=pose))
    sensor = SensorInfo(min_range=min_range, max_range=max_range,
                        frequency=900e3, system_name='auv-1')
    return Raster(filename, samples, sensor, raster_type)


def write_raster(folder, raster, image=None, width=100):
    """Write ``raster``'s index and, if given, its image into ``folder``.

    Returns the index path. ``image`` is written exactly as given, so
    scanline rasters expect it already flipped.
    """
    folder = Path(folder)
    folder.mkdir(parents=True, exist_ok=True)
    stem = Path(raster.filename).stem
    index_path = folder / f"{stem}.json"
    save_raster_index(raster, index_path)
    if image is not None:
        Image.fromarray(np.ascontiguousarray(image)).save(
            folder / raster.filename)
    return index_path


@pytest.fixture
def make_track():
    """Factory for synthetic straight-line rasters."""
    return build_track


@pytest.fixture
def make_raster_file():
    """Factory that writes a raster index and image to disk."""
    return write_raster
