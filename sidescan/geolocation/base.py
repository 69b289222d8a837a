# -*- coding: utf-8 -*-
"""
Geolocation Base - Shared front end for sidescan pixel/ground transforms.

A sidescan pixel is addressed by its sample (the scanline, in acquisition
order) and its range column (0 at the port edge of the swath). Subclasses
map arrays of those to WGS84 latitude/longitude and back; this module
turns the public calls into those array calls, whatever the caller passed.

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

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple, Union

import numpy as np

Coords = Union[float, list, np.ndarray]
ArrayTransform = Callable[[np.ndarray, np.ndarray],
                          Tuple[np.ndarray, np.ndarray]]


def _dispatch(
    transform: ArrayTransform,
    first: Coords,
    second: Optional[Coords],
) -> Union[Tuple[float, float], Tuple[np.ndarray, np.ndarray], np.ndarray]:
    """
    Apply an array transform to scalar, paired or stacked coordinates.

    A missing ``second`` means ``first`` is a ``(2, N)`` stack and the
    result is stacked the same way. Two plain numbers give a tuple of
    floats; anything else gives a tuple of 1D arrays.
    """
    if second is None:
        stack = np.asarray(first, dtype=np.float64)
        if stack.ndim != 2 or stack.shape[0] != 2:
            raise ValueError(
                f"Stacked coordinates must have shape (2, N), "
                f"got {stack.shape}"
            )
        return np.vstack(transform(stack[0], stack[1]))

    a = np.asarray(first, dtype=np.float64)
    b = np.asarray(second, dtype=np.float64)
    out_a, out_b = transform(np.atleast_1d(a), np.atleast_1d(b))
    if a.ndim == 0 and b.ndim == 0 and not isinstance(first, list):
        return float(out_a[0]), float(out_b[0])
    return out_a, out_b


class Geolocation(ABC):
    """
    Pixel/ground transform for one sidescan raster.

    Both directions take the coordinates as two scalars, two arrays (or
    lists), or a single ``(2, N)`` stack, and answer in the same form::

        lat, lon = geo.image_to_latlon(120, 300)
        lats, lons = geo.image_to_latlon(samples, columns)
        stacked = geo.image_to_latlon(np.array([samples, columns]))

    Parameters
    ----------
    shape : Tuple[int, int]
        ``(samples, columns)`` of the raster image.
    """

    def __init__(self, shape: Tuple[int, int]) -> None:
        self.shape = shape

    # ------------------------------------------------------------------
    # Subclass hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _image_to_latlon_array(
        self,
        rows: np.ndarray,
        cols: np.ndarray,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Ground position, in degrees, of each (sample, column) pair."""

    @abstractmethod
    def _latlon_to_image_array(
        self,
        lats: np.ndarray,
        lons: np.ndarray,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """(sample, column) that imaged each point; NaN when none did."""

    @abstractmethod
    def get_footprint(self) -> Dict[str, Any]:
        """
        Ground coverage of the raster.

        Returns
        -------
        Dict[str, Any]
            ``type`` is ``'Polygon'``, with ``coordinates`` as (lon, lat)
            vertices and ``bounds`` as (min_lon, min_lat, max_lon,
            max_lat); or ``'None'`` with both left as None when the track
            encloses no area.
        """

    # ------------------------------------------------------------------
    # Public transforms
    # ------------------------------------------------------------------

    def image_to_latlon(
        self,
        row_or_points: Coords,
        col: Optional[Coords] = None,
    ) -> Union[Tuple[float, float], Tuple[np.ndarray, np.ndarray], np.ndarray]:
        """
        Ground position of sidescan pixels.

        Parameters
        ----------
        row_or_points : float, list or np.ndarray
            Sample index(es), or a ``(2, N)`` stack of samples over
            columns when ``col`` is omitted.
        col : float, list or np.ndarray, optional
            Range column(s).

        Raises
        ------
        ValueError
            If a sample index falls outside the raster or the stack has
            the wrong shape.
        """
        return _dispatch(self._image_to_latlon_array, row_or_points, col)

    def latlon_to_image(
        self,
        lat_or_points: Coords,
        lon: Optional[Coords] = None,
    ) -> Union[Tuple[float, float], Tuple[np.ndarray, np.ndarray], np.ndarray]:
        """
        Sample and column that imaged each ground point.

        Accepts the same input forms as ``image_to_latlon`` with
        latitudes in place of samples and longitudes in place of columns.
        """
        return _dispatch(self._latlon_to_image_array, lat_or_points, lon)

    def get_bounds(self) -> Tuple[float, float, float, float]:
        """
        (min_lon, min_lat, max_lon, max_lat) of the footprint.

        Raises
        ------
        NotImplementedError
            If the raster has no footprint.
        """
        box = self.get_footprint().get('bounds')
        if box is None:
            raise NotImplementedError(
                "Raster track encloses no area; no footprint bounds")
        return box
