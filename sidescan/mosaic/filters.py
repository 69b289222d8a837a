# -*- coding: utf-8 -*-
"""
Mosaic Line Filters - Per-line resampling, weighting and hole filling.

Helpers used by the compositor while stamping scanlines:

- ``ground_to_columns`` maps ground ranges back to image columns through
  the slant-range geometry, so stamped lines are ground-range corrected
  and the nadir water column is dropped.
- ``range_alpha`` weights pixels by range so near-range returns win where
  neighbouring lines overlap.
- ``fill_gaps`` closes small transparent holes left between stamped lines.

Dependencies
------------
numpy
scipy

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

# Third-party
import numpy as np
from scipy import ndimage

# sidescan internal
from sidescan.IO.models import SensorInfo

DEFAULT_MAX_GAP = 5


def ground_to_columns(
    ground: np.ndarray,
    altitude: float,
    image_width: int,
    sensor_info: SensorInfo,
    slant_corrected: bool = True,
) -> np.ndarray:
    """
    Image columns imaging the given signed ground ranges.

    Parameters
    ----------
    ground : np.ndarray
        Signed ground ranges in meters, negative to port.
    altitude : float
        Vehicle altitude in meters; 0 disables the correction.
    image_width : int
        Number of image columns.
    sensor_info : SensorInfo
        Range interval of the image.
    slant_corrected : bool, default=True
        Treat ``ground`` as ground range. When False it is used directly
        as slant range.

    Returns
    -------
    np.ndarray
        Integer columns (int64); -1 where the range is outside the image.
    """
    ground = np.asarray(ground, dtype=np.float64)
    if slant_corrected and altitude > 0:
        sign = np.where(ground >= 0, 1.0, -1.0)
        slant = sign * np.sqrt(ground ** 2 + altitude ** 2)
    else:
        slant = ground

    columns = np.floor(
        (slant - sensor_info.min_range) / sensor_info.swath_width * image_width
    )
    valid = (columns >= 0) & (columns < image_width)
    return np.where(valid, columns, -1).astype(np.int64)


def range_alpha(
    ground: np.ndarray,
    reach: float,
    floor: float = 0.25,
) -> np.ndarray:
    """
    Alpha weights that fall off linearly with absolute range.

    Parameters
    ----------
    ground : np.ndarray
        Signed ground ranges in meters.
    reach : float
        Range mapped to the lowest weight.
    floor : float, default=0.25
        Weight at ``reach`` relative to nadir, in ``(0, 1]``.

    Returns
    -------
    np.ndarray
        uint8 alpha values in ``[1, 255]``.
    """
    if reach <= 0:
        raise ValueError(f"reach must be positive, got {reach}")
    if not 0 < floor <= 1:
        raise ValueError(f"floor must lie in (0, 1], got {floor}")
    frac = np.clip(np.abs(np.asarray(ground, dtype=np.float64)) / reach, 0, 1)
    weight = 1.0 - (1.0 - floor) * frac
    return np.clip(np.round(weight * 255), 1, 255).astype(np.uint8)


def fill_gaps(rgba: np.ndarray, max_gap: int = DEFAULT_MAX_GAP) -> np.ndarray:
    """
    Fill small transparent holes with the nearest stamped pixel.

    Only holes enclosed by stamped pixels within a ``(2*max_gap+1)``
    square neighbourhood are filled, so the outer edge of the swath does
    not grow.

    Parameters
    ----------
    rgba : np.ndarray
        ``(rows, cols, 4)`` uint8 buffer; alpha 0 marks empty pixels.
    max_gap : int, default=5
        Widest hole, in pixels, that is filled.

    Returns
    -------
    np.ndarray
        New buffer with holes filled. The input is not modified.
    """
    if rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError(f"Expected (rows, cols, 4) RGBA array, got {rgba.shape}")
    if max_gap < 1:
        return rgba.copy()

    valid = rgba[..., 3] > 0
    if not valid.any() or valid.all():
        return rgba.copy()

    size = 2 * max_gap + 1
    closed = ndimage.binary_closing(valid, structure=np.ones((size, size),
                                                            dtype=bool))
    holes = closed & ~valid
    if not holes.any():
        return rgba.copy()

    _, (near_r, near_c) = ndimage.distance_transform_edt(
        ~valid, return_indices=True
    )
    out = rgba.copy()
    out[holes] = rgba[near_r[holes], near_c[holes]]
    return out
