# -*- coding: utf-8 -*-
"""
sidescan - Georeferenced sidescan-sonar mosaics and target reacquisition.

Turns indexed sidescan rasters (a strip-scan image plus one vehicle pose
per scanline) into geo-rectified mosaics for map display, and searches
those rasters for re-observations of previously logged point targets.

Dependencies
------------
numpy
scipy
pyproj
shapely
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

__version__ = "0.1.0"
__author__ = "Duane Smalley"

from sidescan.exceptions import (
    SidescanError,
    MalformedRasterError,
    DegenerateGeometryError,
    ImageUnavailableError,
    MosaicCancelled,
)
from sidescan.vocabulary import (
    RasterType,
    GateState,
)

__all__ = [
    'SidescanError',
    'MalformedRasterError',
    'DegenerateGeometryError',
    'ImageUnavailableError',
    'MosaicCancelled',
    'RasterType',
    'GateState',
]
