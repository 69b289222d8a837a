# -*- coding: utf-8 -*-
"""
Mosaic Compositor - Geo-rectified composite images of sidescan rasters.

Builds an RGBA mosaic of one raster on a north-up canvas anchored at the
north-west corner of the raster's footprint. Every scanline is placed at
its vehicle position, rotated to its heading, and its pixels are stamped
across track at their ground ranges. Overlapping pixels are resolved by
range-weighted alpha (nearest range wins), and small holes between lines
are filled afterwards.

Builds are cooperative-cancellable: the compositor checks a
``CancelToken`` before each scanline and raises ``MosaicCancelled``
without returning partial output.

Dependencies
------------
numpy
scipy
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
import logging
import math
import threading
from pathlib import Path
from typing import Optional, Tuple, Union

# Third-party
import numpy as np

# sidescan internal
from sidescan.exceptions import MalformedRasterError, MosaicCancelled
from sidescan.geolocation.footprint import Footprint, footprint
from sidescan.geolocation.utils import (
    geographic_distance,
    ned_offset,
    offset_location,
)
from sidescan.IO.models import LatLon, Raster
from sidescan.mosaic.filters import (
    DEFAULT_MAX_GAP,
    fill_gaps,
    ground_to_columns,
    range_alpha,
)

logger = logging.getLogger(__name__)

# Scanlines rolled more than this are not stamped (degrees)
MAX_ROLL_DEGREES = 5.0


class CancelToken:
    """Cooperative cancellation flag shared by a build and its owner.

    Examples
    --------
    >>> token = CancelToken()
    >>> token.cancel()
    >>> token.cancelled
    True
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation was requested."""
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise ``MosaicCancelled`` if cancellation was requested."""
        if self._event.is_set():
            raise MosaicCancelled("Mosaic build cancelled")


class MosaicGrid:
    """
    North-up pixel grid anchored at a north-west corner.

    Row 0 is the northern edge and rows increase southward; column 0 is
    the western edge and columns increase eastward. Pixel spacing is
    ``1 / resolution`` meters in both directions.

    Attributes
    ----------
    north_west : LatLon
        Geographic position of pixel (0, 0).
    resolution : float
        Pixels per meter.
    rows : int
        Canvas height in pixels (at least 1).
    cols : int
        Canvas width in pixels (at least 1).
    """

    def __init__(
        self,
        north_west: LatLon,
        width_m: float,
        height_m: float,
        resolution: float,
    ) -> None:
        """
        Parameters
        ----------
        north_west : LatLon
            Geographic position of pixel (0, 0).
        width_m : float
            East-west extent in meters.
        height_m : float
            North-south extent in meters.
        resolution : float
            Pixels per meter. Must be positive.

        Raises
        ------
        ValueError
            If ``resolution`` is not positive or an extent is negative.
        """
        if resolution <= 0:
            raise ValueError(f"resolution must be positive, got {resolution}")
        if width_m < 0 or height_m < 0:
            raise ValueError(
                f"extents must be non-negative, got {width_m} x {height_m}"
            )
        self.north_west = north_west
        self.resolution = resolution
        self.width_m = width_m
        self.height_m = height_m
        self.rows = max(1, int(round(height_m * resolution)))
        self.cols = max(1, int(round(width_m * resolution)))

    @classmethod
    def from_footprint(
        cls,
        fp: Footprint,
        resolution: float,
    ) -> 'MosaicGrid':
        """Grid covering a footprint's bounding box."""
        min_lon, min_lat, max_lon, max_lat = fp.bounds
        width_m = geographic_distance(max_lat, min_lon, max_lat, max_lon)
        height_m = geographic_distance(max_lat, min_lon, min_lat, min_lon)
        return cls(LatLon(max_lat, min_lon), width_m, height_m, resolution)

    def latlon_to_pixel(
        self,
        lats: Union[float, np.ndarray],
        lons: Union[float, np.ndarray],
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Fractional (row, col) of geographic points."""
        north, east = ned_offset(self.north_west.lat, self.north_west.lon,
                                 lats, lons)
        return -north * self.resolution, east * self.resolution

    def pixel_to_latlon(self, row: float, col: float) -> LatLon:
        """Geographic position of a (fractional) pixel."""
        north = -row / self.resolution
        east = col / self.resolution
        dist = math.hypot(north, east)
        if dist == 0:
            return self.north_west
        azimuth = math.degrees(math.atan2(east, north))
        lat, lon = offset_location(self.north_west.lat, self.north_west.lon,
                                   azimuth, dist)
        return LatLon(lat, lon)

    def __repr__(self) -> str:
        return (
            f"MosaicGrid(nw=({self.north_west.lat:.6f}, "
            f"{self.north_west.lon:.6f}), {self.rows}x{self.cols}, "
            f"resolution={self.resolution})"
        )


class Mosaic:
    """
    Result of a mosaic build.

    Attributes
    ----------
    data : np.ndarray
        ``(rows, cols, 4)`` uint8 RGBA buffer; alpha 0 is empty.
    grid : MosaicGrid
        Georeferencing of ``data``.
    """

    def __init__(self, data: np.ndarray, grid: MosaicGrid) -> None:
        self.data = data
        self.grid = grid

    @property
    def resolution(self) -> float:
        """Pixels per meter of the buffer."""
        return self.grid.resolution

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.data.shape

    def coverage(self) -> float:
        """Fraction of canvas pixels holding data."""
        return float(np.count_nonzero(self.data[..., 3])) / (
            self.data.shape[0] * self.data.shape[1]
        )

    def save_png(self, filepath: Union[str, Path]) -> None:
        """Write the buffer as an RGBA PNG."""
        from sidescan.IO.png import PngWriter

        with PngWriter(filepath) as writer:
            writer.write(self.data)

    def __repr__(self) -> str:
        return f"Mosaic(shape={self.data.shape}, resolution={self.resolution})"


def _as_rgb(image: np.ndarray) -> np.ndarray:
    """Normalize a sample-ordered image to ``(rows, cols, 3)`` uint8."""
    if image.ndim == 2:
        image = image[..., np.newaxis]
    elif image.ndim != 3:
        raise ValueError(
            f"Expected 2D or 3D image array, got shape {image.shape}"
        )

    if np.issubdtype(image.dtype, np.floating):
        vmin, vmax = np.nanmin(image), np.nanmax(image)
        if vmax > vmin:
            image = (image - vmin) / (vmax - vmin) * 255.0
        else:
            image = np.zeros_like(image)
        image = np.nan_to_num(image)
    image = np.clip(image, 0, 255).astype(np.uint8)

    bands = image.shape[2]
    if bands == 1:
        return np.repeat(image, 3, axis=2)
    if bands >= 3:
        return image[..., :3]
    return np.repeat(image[..., :1], 3, axis=2)


def preview_step(raster: Raster, resolution: float) -> int:
    """
    Scanline stride that still places about one line per canvas pixel.

    Parameters
    ----------
    raster : Raster
        Raster to be mosaicked.
    resolution : float
        Target pixels per meter.

    Returns
    -------
    int
        Stride of at least 1.
    """
    samples = raster.samples
    if len(samples) < 2 or resolution <= 0:
        return 1
    track = geographic_distance(
        samples[0].pose.latitude, samples[0].pose.longitude,
        samples[-1].pose.latitude, samples[-1].pose.longitude,
    )
    spacing = track / (len(samples) - 1)
    if spacing <= 0:
        return 1
    return max(1, int(1.0 / (spacing * resolution)))


def build_mosaic(
    raster: Raster,
    image: np.ndarray,
    resolution: float,
    cancel_token: Optional[CancelToken] = None,
    step: int = 1,
    slant_corrected: bool = True,
    fill: bool = True,
    max_gap: int = DEFAULT_MAX_GAP,
) -> Mosaic:
    """
    Build the geo-rectified mosaic of a raster.

    Parameters
    ----------
    raster : Raster
        Raster with one sample per image row.
    image : np.ndarray
        Sample-ordered image, ``(rows, cols)`` or ``(rows, cols, bands)``.
    resolution : float
        Canvas pixels per meter.
    cancel_token : CancelToken, optional
        Checked before each scanline.
    step : int, default=1
        Scanline stride; strided lines are thickened to cover the skipped
        ones.
    slant_corrected : bool, default=True
        Stamp pixels at ground range. Samples with unknown altitude are
        stamped at slant range.
    fill : bool, default=True
        Fill holes up to ``max_gap`` pixels wide after stamping.
    max_gap : int, default=5
        Widest hole filled, in pixels.

    Returns
    -------
    Mosaic

    Raises
    ------
    MosaicCancelled
        If ``cancel_token`` was cancelled during the build.
    ValueError
        If ``resolution`` or ``step`` is invalid.
    MalformedRasterError
        If the image row count differs from the number of samples.
    DegenerateGeometryError
        If the raster footprint has no area.
    """
    if resolution <= 0:
        raise ValueError(f"resolution must be positive, got {resolution}")
    if step < 1:
        raise ValueError(f"step must be >= 1, got {step}")
    if image.shape[0] != len(raster.samples):
        raise MalformedRasterError(
            f"Image has {image.shape[0]} rows but raster has "
            f"{len(raster.samples)} samples"
        )

    token = cancel_token if cancel_token is not None else CancelToken()
    token.raise_if_cancelled()

    rgb = _as_rgb(image)
    image_width = rgb.shape[1]
    sensor = raster.sensor_info

    grid = MosaicGrid.from_footprint(footprint(raster), resolution)
    canvas = np.zeros((grid.rows, grid.cols, 4), dtype=np.uint8)
    logger.debug("Building mosaic of %s on %r (step=%d)",
                 raster.filename, grid, step)

    # Across-track positions at half-pixel spacing, along-track thickness
    ground = np.arange(sensor.min_range, sensor.max_range,
                       0.5 / resolution, dtype=np.float64)
    across = ground * resolution
    along = np.arange(-(step + 1), step + 1.5, 0.5, dtype=np.float64)
    alpha = range_alpha(ground, max(abs(sensor.min_range),
                                    abs(sensor.max_range)))

    lats = np.array([s.pose.latitude for s in raster.samples])
    lons = np.array([s.pose.longitude for s in raster.samples])
    rows_c, cols_c = grid.latlon_to_pixel(lats, lons)

    for i in range(0, len(raster.samples), step):
        token.raise_if_cancelled()

        pose = raster.samples[i].pose
        if abs(pose.roll) > MAX_ROLL_DEGREES:
            continue

        columns = ground_to_columns(ground, pose.altitude_or_zero,
                                    image_width, sensor, slant_corrected)
        keep = columns >= 0
        if not keep.any():
            continue

        psi = math.radians(pose.heading)
        cos_h, sin_h = math.cos(psi), math.sin(psi)
        a = across[keep][np.newaxis, :]
        b = along[:, np.newaxis]
        px_col = np.rint(cols_c[i] + a * cos_h + b * sin_h).astype(np.int64)
        px_row = np.rint(rows_c[i] + a * sin_h - b * cos_h).astype(np.int64)

        colors = np.broadcast_to(rgb[i, columns[keep]], px_col.shape + (3,))
        weights = np.broadcast_to(alpha[keep], px_col.shape)

        inside = ((px_row >= 0) & (px_row < grid.rows)
                  & (px_col >= 0) & (px_col < grid.cols))
        r = px_row[inside]
        c = px_col[inside]
        w = weights[inside]
        wins = w >= canvas[r, c, 3]
        canvas[r[wins], c[wins], :3] = colors[inside][wins]
        canvas[r[wins], c[wins], 3] = w[wins]

    token.raise_if_cancelled()
    if fill:
        canvas = fill_gaps(canvas, max_gap)

    logger.debug("Finished mosaic of %s", raster.filename)
    return Mosaic(canvas, grid)
