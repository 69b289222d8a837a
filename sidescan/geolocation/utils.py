# -*- coding: utf-8 -*-
"""
Geolocation Utilities - Ellipsoidal geodesy and bounding-box helpers.

Distances, forward offsets and local north/east displacements are computed
on the WGS84 ellipsoid with ``pyproj.Geod``, so projection and search stay
accurate for long sonar ranges and high latitudes. All scalar functions
also accept numpy arrays.

Dependencies
------------
pyproj

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
from typing import List, Tuple, Union

# Third-party
import numpy as np
from pyproj import Geod

ArrayLike = Union[float, np.ndarray]

_GEOD = Geod(ellps='WGS84')


def geographic_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float
) -> float:
    """
    Calculate the geodesic distance between two geographic coordinates.

    Parameters
    ----------
    lat1, lon1 : float
        First point (latitude, longitude) in degrees
    lat2, lon2 : float
        Second point (latitude, longitude) in degrees

    Returns
    -------
    float
        Distance in meters along the WGS84 ellipsoid

    Notes
    -----
    For batch operations on arrays, use geographic_distance_batch().
    """
    _, _, dist = _GEOD.inv(lon1, lat1, lon2, lat2)
    return float(dist)


def geographic_distance_batch(
    lats1: ArrayLike,
    lons1: ArrayLike,
    lats2: ArrayLike,
    lons2: ArrayLike
) -> np.ndarray:
    """
    Calculate geodesic distances between arrays of geographic coordinates.

    Parameters
    ----------
    lats1, lons1 : np.ndarray
        First points (latitude, longitude) in degrees
    lats2, lons2 : np.ndarray
        Second points (latitude, longitude) in degrees

    Returns
    -------
    np.ndarray
        Distances in meters, broadcast shape of the inputs
    """
    lats1, lons1, lats2, lons2 = np.broadcast_arrays(
        np.asarray(lats1, dtype=np.float64),
        np.asarray(lons1, dtype=np.float64),
        np.asarray(lats2, dtype=np.float64),
        np.asarray(lons2, dtype=np.float64),
    )
    _, _, dist = _GEOD.inv(lons1, lats1, lons2, lats2)
    return np.asarray(dist, dtype=np.float64)


def offset_location(
    lat: ArrayLike,
    lon: ArrayLike,
    azimuth: ArrayLike,
    distance: ArrayLike
) -> Tuple[ArrayLike, ArrayLike]:
    """
    Move a point a given distance along a geodesic bearing.

    Parameters
    ----------
    lat, lon : float or np.ndarray
        Start point in degrees
    azimuth : float or np.ndarray
        Bearing in degrees clockwise from true north
    distance : float or np.ndarray
        Distance in meters

    Returns
    -------
    Tuple[float, float] or Tuple[np.ndarray, np.ndarray]
        (lat, lon) of the destination in degrees
    """
    if all(np.ndim(v) == 0 for v in (lat, lon, azimuth, distance)):
        lon2, lat2, _ = _GEOD.fwd(lon, lat, azimuth, distance)
        return float(lat2), float(lon2)

    lat, lon, azimuth, distance = np.broadcast_arrays(
        np.asarray(lat, dtype=np.float64),
        np.asarray(lon, dtype=np.float64),
        np.asarray(azimuth, dtype=np.float64),
        np.asarray(distance, dtype=np.float64),
    )
    lon2, lat2, _ = _GEOD.fwd(lon, lat, azimuth, distance)
    return np.asarray(lat2), np.asarray(lon2)


def ned_offset(
    lat0: float,
    lon0: float,
    lats: ArrayLike,
    lons: ArrayLike
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Local north/east displacement of points from a reference point.

    The displacement is the geodesic distance resolved along the
    geodesic's starting azimuth, which matches a local tangent-plane
    offset at survey scales.

    Parameters
    ----------
    lat0, lon0 : float
        Reference point in degrees
    lats, lons : float or np.ndarray
        Points to displace, degrees

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        (north, east) offsets in meters, shaped like ``lats``
    """
    lats = np.atleast_1d(np.asarray(lats, dtype=np.float64))
    lons = np.atleast_1d(np.asarray(lons, dtype=np.float64))
    lat0s = np.full_like(lats, lat0)
    lon0s = np.full_like(lons, lon0)
    az, _, dist = _GEOD.inv(lon0s, lat0s, lons, lats)
    az = np.radians(np.asarray(az, dtype=np.float64))
    dist = np.asarray(dist, dtype=np.float64)
    return dist * np.cos(az), dist * np.sin(az)


def polygon_area(lons: ArrayLike, lats: ArrayLike) -> float:
    """
    Geodesic area of a polygon on the WGS84 ellipsoid.

    Parameters
    ----------
    lons, lats : array-like
        Vertex coordinates in degrees, in either winding order

    Returns
    -------
    float
        Area in square meters
    """
    area, _ = _GEOD.polygon_area_perimeter(
        np.asarray(lons, dtype=np.float64),
        np.asarray(lats, dtype=np.float64),
    )
    return abs(float(area))


def bounds_from_corners(
    corners: List[Tuple[float, float]]
) -> Tuple[float, float, float, float]:
    """Axis-aligned box (min_lon, min_lat, max_lon, max_lat) around
    a sequence of (lon, lat) pairs."""
    if not corners:
        raise ValueError("Cannot bound an empty set of points")

    lon_lat = np.asarray(corners, dtype=np.float64)
    low = lon_lat.min(axis=0)
    high = lon_lat.max(axis=0)
    return (float(low[0]), float(low[1]), float(high[0]), float(high[1]))


def bounds_intersect(
    a: Tuple[float, float, float, float],
    b: Tuple[float, float, float, float]
) -> bool:
    """
    Check whether two (min_lon, min_lat, max_lon, max_lat) boxes overlap.

    Boxes that only touch along an edge count as overlapping.
    """
    return not (a[2] < b[0] or b[2] < a[0] or a[3] < b[1] or b[3] < a[1])
