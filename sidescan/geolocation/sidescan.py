# -*- coding: utf-8 -*-
"""
Sidescan Geolocation - Pixel/geographic transforms for sidescan rasters.

Rows of a sidescan raster are scanlines (one per sample) and columns are
signed slant range. The forward transform projects a (row, column) pair
through the scanline's pose; the inverse runs the target correlation
search and reports the best-matching pixel, or NaN when the point was not
imaged within the acceptance distance.

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

# Standard library
from typing import Any, Dict, Optional, Tuple

# Third-party
import numpy as np

# sidescan internal
from sidescan.exceptions import DegenerateGeometryError
from sidescan.geolocation.base import Geolocation
from sidescan.geolocation.footprint import Footprint, footprint
from sidescan.geolocation.projector import project
from sidescan.IO.models import LatLon, Raster


class SidescanGeolocation(Geolocation):
    """
    Geolocation of a sidescan raster's pixels.

    Parameters
    ----------
    raster : Raster
        Raster whose samples give the scanline poses.
    image_width : int
        Number of image columns.
    slant_corrected : bool, default=True
        Remove vehicle altitude when projecting columns.

    Examples
    --------
    >>> geo = SidescanGeolocation(raster, image_width=1000)
    >>> lat, lon = geo.image_to_latlon(120, 750)
    >>> row, col = geo.latlon_to_image(lat, lon)
    """

    def __init__(
        self,
        raster: Raster,
        image_width: int,
        slant_corrected: bool = True,
    ) -> None:
        if image_width <= 0:
            raise ValueError(f"image_width must be positive, got {image_width}")
        super().__init__((len(raster.samples), image_width))
        self.raster = raster
        self.image_width = image_width
        self.slant_corrected = slant_corrected
        self._footprint: Optional[Footprint] = None

    def _image_to_latlon_array(
        self,
        rows: np.ndarray,
        cols: np.ndarray,
    ) -> Tuple[np.ndarray, np.ndarray]:
        n_rows, n_cols = self.shape
        if np.any((rows < 0) | (rows >= n_rows)):
            raise ValueError(
                f"Row coordinates must lie in [0, {n_rows - 1}]"
            )
        if np.any((cols < 0) | (cols > n_cols)):
            raise ValueError(
                f"Column coordinates must lie in [0, {n_cols}]"
            )

        lats = np.empty(rows.shape, dtype=np.float64)
        lons = np.empty(rows.shape, dtype=np.float64)
        for i, (row, col) in enumerate(zip(rows, cols)):
            loc = project(self.raster.samples[int(round(row))], float(col),
                          self.image_width, self.raster.sensor_info,
                          self.slant_corrected)
            lats[i] = loc.lat
            lons[i] = loc.lon
        return lats, lons

    def _latlon_to_image_array(
        self,
        lats: np.ndarray,
        lons: np.ndarray,
    ) -> Tuple[np.ndarray, np.ndarray]:
        from sidescan.search.correlation import ReacquisitionSearch

        search = ReacquisitionSearch(
            self.raster, self.image_width,
            slant_corrected=self.slant_corrected,
        )
        rows = np.full(lats.shape, np.nan)
        cols = np.full(lats.shape, np.nan)
        for i, (lat, lon) in enumerate(zip(lats, lons)):
            matches = list(search.iter_matches(LatLon(float(lat), float(lon))))
            if matches:
                best = min(matches, key=lambda m: m.distance)
                rows[i] = best.sample_index
                cols[i] = best.column
        return rows, cols

    @property
    def footprint(self) -> Footprint:
        """Cached footprint of the raster.

        Raises
        ------
        DegenerateGeometryError
            If the raster has no area.
        """
        if self._footprint is None:
            self._footprint = footprint(self.raster)
        return self._footprint

    def get_footprint(self) -> Dict[str, Any]:
        """Footprint dictionary; type 'None' for degenerate rasters."""
        try:
            return self.footprint.to_dict()
        except DegenerateGeometryError:
            return {
                'type': 'None',
                'coordinates': None,
                'bounds': None,
            }
