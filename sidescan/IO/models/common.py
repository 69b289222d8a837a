# -*- coding: utf-8 -*-
"""
IO Models Common - Reusable primitive types for sidescan models.

Provides the geographic point type shared by the projector, footprint,
mosaic grid and correlation search.

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
from dataclasses import dataclass


@dataclass(frozen=True)
class LatLon:
    """WGS-84 geographic point (2D).

    Parameters
    ----------
    lat : float
        Latitude in degrees.
    lon : float
        Longitude in degrees.
    """

    lat: float = 0.0
    lon: float = 0.0
