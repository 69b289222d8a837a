# -*- coding: utf-8 -*-
"""
Vocabulary - Canonical enums for the sidescan library.

Controlled vocabularies shared by the IO, mosaic and render layers: the
storage layout of a raster image and the states of the render gate.

Author
------
Steven Siebert

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

from enum import Enum


class RasterType(Enum):
    """Storage layout of the pixel image referenced by a raster index.

    ``IMAGE`` rasters store sample ``i`` at row ``i``. ``SCANLINE``
    rasters are written waterfall style, newest line on top, so sample
    ``i`` sits at row ``n - 1 - i``. ``VIDEO`` rasters carry one frame per
    sample and are indexed like ``IMAGE``.
    """

    IMAGE = "image"
    SCANLINE = "scanline"
    VIDEO = "video"


class GateState(Enum):
    """Render states of a raster displayed on a map.

    The render gate moves between these on every paint request depending
    on viewport visibility, zoom and the progress of the background
    mosaic build.
    """

    HIDDEN = "hidden"
    FOOTPRINT = "footprint"
    MOSAIC_PENDING = "mosaic_pending"
    MOSAIC_READY = "mosaic_ready"
