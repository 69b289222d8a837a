# -*- coding: utf-8 -*-
"""
Sidescan Exception Hierarchy - Domain-specific exceptions for sidescan operations.

Provides a small exception hierarchy that lets callers (map layers, contact
browsers, batch tools) catch sidescan-specific errors distinctly from
Python built-in exceptions. Each exception subclasses both ``SidescanError``
and the appropriate built-in exception so existing ``except ValueError`` or
``except OSError`` handlers keep working.

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


class SidescanError(Exception):
    """Base exception for all sidescan errors."""


class MalformedRasterError(SidescanError, ValueError):
    """Structurally invalid raster data.

    Raised at load time for rasters with no samples, timestamps that go
    backwards, missing sensor information, ``max_range <= min_range``, or
    an image whose row count differs from the number of samples. No
    geometry is attempted on such rasters.
    """


class DegenerateGeometryError(SidescanError, ValueError):
    """Footprint hull with fewer than three usable vertices.

    Raised for single-sample rasters and collinear corner sets. Renderers
    fall back to drawing nothing for the raster.
    """


class ImageUnavailableError(SidescanError, OSError):
    """The pixel image referenced by a raster is missing or unreadable.

    Footprint and projection remain computable from pose data; only
    mosaic building needs the pixels.
    """


class MosaicCancelled(SidescanError):
    """A mosaic build observed its cancel token and stopped.

    Not an error condition. No partial mosaic exists; the caller discards
    the build and may request a new one.
    """
