# -*- coding: utf-8 -*-
"""
Geolocation Module - Geometry of sidescan rasters on the WGS84 ellipsoid.

Provides the range-to-ground projector, footprint hulls, ellipsoidal
geodesy helpers, and the ``SidescanGeolocation`` pixel transform.

Dependencies
------------
numpy
pyproj
shapely

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

from sidescan.geolocation.base import Geolocation
from sidescan.geolocation.projector import (
    ground_range,
    project,
    project_columns,
    project_range,
    slant_range,
)
from sidescan.geolocation.footprint import (
    Footprint,
    bounds,
    convex_hull,
    footprint,
    swath_bounds,
)
from sidescan.geolocation.utils import (
    bounds_intersect,
    geographic_distance,
    geographic_distance_batch,
    ned_offset,
    offset_location,
)
from sidescan.geolocation.sidescan import SidescanGeolocation

__all__ = [
    'Geolocation',
    'SidescanGeolocation',
    'Footprint',
    'footprint',
    'bounds',
    'swath_bounds',
    'convex_hull',
    'project',
    'project_range',
    'project_columns',
    'slant_range',
    'ground_range',
    'geographic_distance',
    'geographic_distance_batch',
    'offset_location',
    'ned_offset',
    'bounds_intersect',
]
