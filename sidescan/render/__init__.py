# -*- coding: utf-8 -*-
"""
Render Module - Map display of sidescan rasters.

Provides the per-raster render gate, the multi-raster layer, and the
shared background worker pool.

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

from sidescan.render.gate import (
    MAX_MOSAIC_RESOLUTION,
    MIN_MOSAIC_RESOLUTION,
    Graphics,
    MosaicGate,
    Viewport,
)
from sidescan.render.layer import MosaicLayer, Orderable
from sidescan.render.workers import (
    background,
    default_worker_count,
    get_executor,
    shutdown,
)

__all__ = [
    'MIN_MOSAIC_RESOLUTION',
    'MAX_MOSAIC_RESOLUTION',
    'Graphics',
    'Viewport',
    'MosaicGate',
    'MosaicLayer',
    'Orderable',
    'background',
    'default_worker_count',
    'get_executor',
    'shutdown',
]
