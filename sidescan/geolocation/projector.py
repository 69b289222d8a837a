# -*- coding: utf-8 -*-
"""
Range-to-Ground Projector - Map sidescan pixel columns to geographic points.

Image columns span the sensor's signed slant-range interval
``[min_range, max_range]`` linearly. A column is turned into a location by
removing the vehicle altitude from its slant range (optional), then moving
the resulting ground range from the vehicle position perpendicular to the
heading: to port for negative ranges, to starboard for positive ones.

Points inside the nadir shadow (``|slant| <= altitude``) have no ground
range and resolve to the vehicle position.

Dependencies
------------
numpy
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
import math
from typing import Tuple, Union

# Third-party
import numpy as np

# sidescan internal
from sidescan.geolocation.utils import offset_location
from sidescan.IO.models import LatLon, Sample, SensorInfo

# Ground ranges shorter than this resolve to the vehicle position (meters)
NADIR_EPSILON = 0.01


def slant_range(
    column: Union[float, np.ndarray],
    image_width: int,
    sensor_info: SensorInfo,
) -> Union[float, np.ndarray]:
    """Signed slant range of a pixel column in meters.

    Parameters
    ----------
    column : float or np.ndarray
        Pixel column(s), 0 at ``min_range``.
    image_width : int
        Number of image columns.
    sensor_info : SensorInfo
        Range interval of the image.

    Returns
    -------
    float or np.ndarray
        ``column * swath_width / image_width + min_range``.
    """
    if image_width <= 0:
        raise ValueError(f"image_width must be positive, got {image_width}")
    return column * (sensor_info.swath_width / image_width) + sensor_info.min_range


def ground_range(
    slant: Union[float, np.ndarray],
    altitude: float,
) -> Union[float, np.ndarray]:
    """Signed ground range for a signed slant range.

    ``sign(slant) * sqrt(slant**2 - altitude**2)`` outside the nadir
    shadow, exactly 0 inside it (``|slant| <= altitude``).

    Parameters
    ----------
    slant : float or np.ndarray
        Signed slant range(s) in meters.
    altitude : float
        Altitude above the seabed in meters. Negative values count as 0.

    Returns
    -------
    float or np.ndarray
        Signed ground range(s) in meters.
    """
    altitude = max(altitude, 0.0)
    if np.ndim(slant) == 0:
        if abs(slant) <= altitude:
            return 0.0
        return math.copysign(math.sqrt(slant * slant - altitude * altitude),
                             slant)

    slant = np.asarray(slant, dtype=np.float64)
    outside = np.abs(slant) > altitude
    ground = np.zeros_like(slant)
    ground[outside] = np.sign(slant[outside]) * np.sqrt(
        slant[outside] ** 2 - altitude ** 2
    )
    return ground


def project_range(
    sample: Sample,
    signed_range: float,
    slant_corrected: bool = True,
) -> LatLon:
    """Project a signed range across track from a sample's position.

    Parameters
    ----------
    sample : Sample
        Scanline to project from.
    signed_range : float
        Slant range in meters, negative to port.
    slant_corrected : bool, default=True
        Remove the vehicle altitude before offsetting. With altitude
        unknown the range is used as ground range.

    Returns
    -------
    LatLon
        Ground location.
    """
    pose = sample.pose
    if slant_corrected:
        dist = ground_range(signed_range, pose.altitude_or_zero)
    else:
        dist = signed_range

    if abs(dist) < NADIR_EPSILON:
        return pose.location

    # Starboard for non-negative slant, port otherwise
    if signed_range >= 0:
        azimuth = pose.heading + 90.0
    else:
        azimuth = pose.heading - 90.0
    lat, lon = offset_location(pose.latitude, pose.longitude,
                               azimuth, abs(dist))
    return LatLon(lat, lon)


def project(
    sample: Sample,
    column: float,
    image_width: int,
    sensor_info: SensorInfo,
    slant_corrected: bool = True,
) -> LatLon:
    """Project a pixel column of a scanline to a geographic location.

    Parameters
    ----------
    sample : Sample
        Scanline the column belongs to.
    column : float
        Pixel column, ``0 <= column < image_width``.
    image_width : int
        Number of image columns.
    sensor_info : SensorInfo
        Range interval of the image.
    slant_corrected : bool, default=True
        Apply the altitude correction.

    Returns
    -------
    LatLon

    Examples
    --------
    >>> loc = project(raster.samples[10], 512, 1024, raster.sensor_info)
    >>> loc.lat, loc.lon
    """
    return project_range(
        sample,
        slant_range(column, image_width, sensor_info),
        slant_corrected,
    )


def project_columns(
    sample: Sample,
    columns: np.ndarray,
    image_width: int,
    sensor_info: SensorInfo,
    slant_corrected: bool = True,
) -> Tuple[np.ndarray, np.ndarray]:
    """Vectorized ``project`` over many columns of one scanline.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        (lats, lons) in degrees, one entry per column.
    """
    pose = sample.pose
    slant = np.atleast_1d(slant_range(
        np.asarray(columns, dtype=np.float64), image_width, sensor_info
    ))
    if slant_corrected:
        dist = ground_range(slant, pose.altitude_or_zero)
    else:
        dist = slant

    azimuth = np.where(slant >= 0, pose.heading + 90.0, pose.heading - 90.0)
    lats, lons = offset_location(
        np.full_like(slant, pose.latitude),
        np.full_like(slant, pose.longitude),
        azimuth,
        np.abs(dist),
    )
    lats = np.asarray(lats, dtype=np.float64)
    lons = np.asarray(lons, dtype=np.float64)
    at_nadir = np.abs(dist) < NADIR_EPSILON
    lats[at_nadir] = pose.latitude
    lons[at_nadir] = pose.longitude
    return lats, lons
