# -*- coding: utf-8 -*-
"""
Mosaic Module - Geo-rectified composites of sidescan rasters.

Dependencies
------------
numpy
scipy

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

from sidescan.mosaic.compositor import (
    MAX_ROLL_DEGREES,
    CancelToken,
    Mosaic,
    MosaicGrid,
    build_mosaic,
    preview_step,
)
from sidescan.mosaic.filters import (
    DEFAULT_MAX_GAP,
    fill_gaps,
    ground_to_columns,
    range_alpha,
)

__all__ = [
    'MAX_ROLL_DEGREES',
    'DEFAULT_MAX_GAP',
    'CancelToken',
    'Mosaic',
    'MosaicGrid',
    'build_mosaic',
    'preview_step',
    'fill_gaps',
    'ground_to_columns',
    'range_alpha',
]
