# -*- coding: utf-8 -*-
"""
IO Models - Typed records for sidescan rasters and contacts.

Frozen dataclasses describing scanline navigation (``Pose``, ``Sample``),
sensor geometry (``SensorInfo``), indexed rasters (``Raster``) and point
targets with their sightings (``Contact``, ``Observation``).

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

# Common primitives
from sidescan.IO.models.common import LatLon

# Rasters
from sidescan.IO.models.raster import (
    Pose,
    Sample,
    SensorInfo,
    Raster,
)

# Contacts
from sidescan.IO.models.contact import (
    Observation,
    Contact,
)

__all__ = [
    'LatLon',
    'Pose',
    'Sample',
    'SensorInfo',
    'Raster',
    'Observation',
    'Contact',
]
