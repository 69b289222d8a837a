# -*- coding: utf-8 -*-
"""
Footprint Geometry - Ground-projected coverage polygons of sidescan rasters.

A raster's footprint is the convex hull of the port and starboard swath
ends of its first and last scanline. It is cheap to compute from pose data
alone and is used for viewport culling and as the placeholder outline
while a mosaic is being built.

The hull is computed with a Graham scan in longitude/latitude space.
Convex hulls commute with affine maps, so scanning in degrees gives the
same vertex set as scanning in a local metric frame.

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
import math
from typing import Any, Dict, List, Sequence, Tuple

# Third-party
import numpy as np
from shapely.geometry import Point, Polygon

# sidescan internal
from sidescan.exceptions import DegenerateGeometryError
from sidescan.geolocation.projector import project_range
from sidescan.geolocation.utils import (
    bounds_from_corners,
    bounds_intersect,
    polygon_area,
)
from sidescan.IO.models import LatLon, Raster, Sample


def _cross(o: LatLon, a: LatLon, b: LatLon) -> float:
    """Z component of (a - o) x (b - o) in (lon, lat) space."""
    return ((a.lon - o.lon) * (b.lat - o.lat)
            - (a.lat - o.lat) * (b.lon - o.lon))


def convex_hull(points: Sequence[LatLon]) -> List[LatLon]:
    """
    Convex hull of geographic points by Graham scan.

    The pivot is the lowest-latitude point (lowest longitude on ties).
    Remaining points are sorted by polar angle around the pivot, nearer
    points first on equal angles, and any point that does not make a
    strict left turn is rejected.

    Parameters
    ----------
    points : Sequence[LatLon]
        Input points. Duplicates are ignored.

    Returns
    -------
    List[LatLon]
        Hull vertices in counter-clockwise order starting at the pivot.

    Raises
    ------
    DegenerateGeometryError
        If fewer than three distinct points are given or all points are
        collinear.
    """
    unique = list(dict.fromkeys(points))
    if len(unique) < 3:
        raise DegenerateGeometryError(
            f"Convex hull needs at least 3 distinct points, got {len(unique)}"
        )

    pivot = min(unique, key=lambda p: (p.lat, p.lon))
    rest = [p for p in unique if p != pivot]
    rest.sort(key=lambda p: (
        math.atan2(p.lat - pivot.lat, p.lon - pivot.lon),
        (p.lat - pivot.lat) ** 2 + (p.lon - pivot.lon) ** 2,
    ))

    hull = [pivot]
    for point in rest:
        while len(hull) >= 2 and _cross(hull[-2], hull[-1], point) <= 0:
            hull.pop()
        hull.append(point)

    if len(hull) < 3:
        raise DegenerateGeometryError(
            "Convex hull is degenerate: all points are collinear"
        )
    return hull


class Footprint:
    """
    Ground coverage polygon of a raster.

    Parameters
    ----------
    vertices : Sequence[LatLon]
        Hull vertices in counter-clockwise order.

    Attributes
    ----------
    vertices : Tuple[LatLon, ...]
        Hull vertices.
    bounds : Tuple[float, float, float, float]
        (min_lon, min_lat, max_lon, max_lat) in degrees.
    """

    def __init__(self, vertices: Sequence[LatLon]) -> None:
        if len(vertices) < 3:
            raise DegenerateGeometryError(
                f"Footprint needs at least 3 vertices, got {len(vertices)}"
            )
        self.vertices: Tuple[LatLon, ...] = tuple(vertices)
        self.bounds = bounds_from_corners(
            [(v.lon, v.lat) for v in self.vertices]
        )
        self._polygon = None

    @property
    def polygon(self) -> Polygon:
        """Shapely polygon in (lon, lat) coordinates."""
        if self._polygon is None:
            self._polygon = Polygon([(v.lon, v.lat) for v in self.vertices])
        return self._polygon

    @property
    def northwest(self) -> LatLon:
        """North-west corner of the bounding box."""
        return LatLon(self.bounds[3], self.bounds[0])

    def area(self) -> float:
        """Geodesic area of the footprint in square meters."""
        return polygon_area([v.lon for v in self.vertices],
                            [v.lat for v in self.vertices])

    def contains(self, lat: float, lon: float) -> bool:
        """Whether a point lies inside or on the footprint."""
        return self.polygon.intersects(Point(lon, lat))

    def intersects(self, bounds: Tuple[float, float, float, float]) -> bool:
        """Whether the footprint's bounding box overlaps ``bounds``."""
        return bounds_intersect(self.bounds, bounds)

    def to_dict(self) -> Dict[str, Any]:
        """
        Footprint as a geolocation footprint dictionary.

        Returns
        -------
        Dict[str, Any]
            Keys 'type' ('Polygon'), 'coordinates' (list of (lon, lat))
            and 'bounds'.
        """
        return {
            'type': 'Polygon',
            'coordinates': [(v.lon, v.lat) for v in self.vertices],
            'bounds': self.bounds,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Footprint):
            return NotImplemented
        return self.vertices == other.vertices

    def __hash__(self) -> int:
        return hash(self.vertices)

    def __repr__(self) -> str:
        return f"Footprint(vertices={len(self.vertices)}, bounds={self.bounds})"


def _swath_ends(sample: Sample, raster: Raster) -> Tuple[LatLon, LatLon]:
    sensor = raster.sensor_info
    return (project_range(sample, sensor.min_range, slant_corrected=False),
            project_range(sample, sensor.max_range, slant_corrected=False))


def footprint(raster: Raster) -> Footprint:
    """
    Compute the footprint of a raster.

    Parameters
    ----------
    raster : Raster
        Raster to outline.

    Returns
    -------
    Footprint
        Hull of the swath ends of the first and last sample.

    Raises
    ------
    DegenerateGeometryError
        If the corners do not span an area (single-sample rasters,
        zero-length tracks).
    """
    corners = [*_swath_ends(raster.samples[0], raster),
               *_swath_ends(raster.samples[-1], raster)]
    return Footprint(convex_hull(corners))


def bounds(raster: Raster) -> Tuple[float, float, float, float]:
    """Bounding box (min_lon, min_lat, max_lon, max_lat) of the footprint."""
    return footprint(raster).bounds


def swath_bounds(
    raster: Raster,
    max_lines: int = 100,
) -> Tuple[float, float, float, float]:
    """
    Bounding box of the swath ends of evenly spaced scanlines.

    Unlike ``bounds``, this follows curved tracks and works for
    single-sample rasters.

    Parameters
    ----------
    raster : Raster
        Raster to bound.
    max_lines : int, default=100
        Maximum number of scanlines sampled.

    Returns
    -------
    Tuple[float, float, float, float]
        (min_lon, min_lat, max_lon, max_lat)
    """
    count = len(raster.samples)
    indices = np.unique(np.linspace(0, count - 1,
                                    min(count, max(max_lines, 2))).astype(int))
    corners = []
    for i in indices:
        for loc in _swath_ends(raster.samples[i], raster):
            corners.append((loc.lon, loc.lat))
    return bounds_from_corners(corners)
