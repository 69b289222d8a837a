# -*- coding: utf-8 -*-
"""
IO Module - Input/output for indexed sidescan rasters and contacts.

Provides the raster index and contact JSON codec, a Pillow-backed raster
reader, a catalog that discovers rasters in survey folders, and a PNG
writer for mosaic exports.

Dependencies
------------
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

from sidescan.IO.models import (
    Contact,
    LatLon,
    Observation,
    Pose,
    Raster,
    Sample,
    SensorInfo,
)
from sidescan.IO.base import CatalogInterface, ImageReader, ImageWriter
from sidescan.IO.index import (
    contact_from_dict,
    contact_to_dict,
    load_contact,
    load_raster_index,
    raster_from_dict,
    raster_to_dict,
    save_contact,
    save_raster_index,
)
from sidescan.IO.reader import SidescanReader
from sidescan.IO.catalog import RasterCatalog
from sidescan.IO.png import PngWriter

__all__ = [
    'Contact',
    'LatLon',
    'Observation',
    'Pose',
    'Raster',
    'Sample',
    'SensorInfo',
    'ImageReader',
    'ImageWriter',
    'CatalogInterface',
    'load_raster_index',
    'save_raster_index',
    'raster_from_dict',
    'raster_to_dict',
    'load_contact',
    'save_contact',
    'contact_from_dict',
    'contact_to_dict',
    'SidescanReader',
    'RasterCatalog',
    'PngWriter',
]
