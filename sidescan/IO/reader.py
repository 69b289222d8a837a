# -*- coding: utf-8 -*-
"""
Sidescan Raster Reader - Read indexed sidescan rasters with Pillow.

Opens a raster index JSON file and the image it references (resolved
relative to the index file's folder). Pixels are decoded lazily on the
first read and returned in sample order: waterfall-style ``scanline``
images, stored newest line on top, are flipped so that row ``i`` always
belongs to ``samples[i]``.

Dependencies
------------
Pillow

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

# Standard library
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

# Third-party
import numpy as np
from PIL import Image

# sidescan internal
from sidescan.exceptions import ImageUnavailableError, MalformedRasterError
from sidescan.IO.base import ImageReader
from sidescan.IO.index import load_raster_index
from sidescan.IO.models import Raster
from sidescan.vocabulary import RasterType

logger = logging.getLogger(__name__)

_KEPT_MODES = ('L', 'RGB', 'RGBA')


class SidescanReader(ImageReader):
    """Read a sidescan raster index and its image.

    Parameters
    ----------
    filepath : str or Path
        Path to the raster index JSON file.

    Raises
    ------
    FileNotFoundError
        If the index file does not exist.
    MalformedRasterError
        If the index is invalid.

    Examples
    --------
    >>> from sidescan.IO.reader import SidescanReader
    >>> with SidescanReader('rasterIndex/line_001.json') as reader:
    ...     raster = reader.metadata
    ...     image = reader.read_full()
    """

    def __init__(self, filepath: Union[str, Path]) -> None:
        self._pixels: Optional[np.ndarray] = None
        super().__init__(filepath)

    def _load_metadata(self) -> Raster:
        return load_raster_index(self.filepath)

    @property
    def image_path(self) -> Path:
        """Path of the image referenced by the index."""
        return self.filepath.parent / self.metadata.filename

    def _check_rows(self, rows: int) -> None:
        expected = len(self.metadata.samples)
        if rows != expected:
            raise MalformedRasterError(
                f"Image {self.image_path} has {rows} rows but the index "
                f"lists {expected} samples"
            )

    def _load_pixels(self) -> np.ndarray:
        if self._pixels is not None:
            return self._pixels

        try:
            with Image.open(self.image_path) as img:
                if img.mode not in _KEPT_MODES:
                    img = img.convert('RGB' if img.mode == 'P' else 'L')
                pixels = np.array(img)
        except OSError as e:
            raise ImageUnavailableError(
                f"Cannot read image {self.image_path}: {e}"
            ) from e

        self._check_rows(pixels.shape[0])
        if self.metadata.raster_type == RasterType.SCANLINE:
            pixels = pixels[::-1]
        self._pixels = np.ascontiguousarray(pixels)
        logger.debug("Decoded %s with shape %s", self.image_path, pixels.shape)
        return self._pixels

    def get_shape(self) -> Tuple[int, ...]:
        """Image shape, read from the file header when pixels are not loaded.

        Raises
        ------
        ImageUnavailableError
            If the image cannot be opened.
        MalformedRasterError
            If the row count differs from the number of samples.
        """
        if self._pixels is not None:
            return self._pixels.shape

        try:
            with Image.open(self.image_path) as img:
                width, height = img.size
                if img.mode in _KEPT_MODES:
                    bands = len(img.getbands())
                else:
                    bands = 3 if img.mode == 'P' else 1
        except OSError as e:
            raise ImageUnavailableError(
                f"Cannot read image {self.image_path}: {e}"
            ) from e

        self._check_rows(height)
        if bands == 1:
            return (height, width)
        return (height, width, bands)

    def read_chip(
        self,
        row_start: int,
        row_end: int,
        col_start: int,
        col_end: int,
    ) -> np.ndarray:
        """Read a subset of the image in sample order.

        Raises
        ------
        ValueError
            If the window is empty or outside the image.
        ImageUnavailableError
            If the image cannot be read.
        """
        pixels = self._load_pixels()
        rows, cols = pixels.shape[:2]
        if not (0 <= row_start < row_end <= rows
                and 0 <= col_start < col_end <= cols):
            raise ValueError(
                f"Chip [{row_start}:{row_end}, {col_start}:{col_end}] is "
                f"outside image of shape ({rows}, {cols})"
            )
        return pixels[row_start:row_end, col_start:col_end]

    def read_full(self) -> np.ndarray:
        """Read the full image in sample order."""
        return self._load_pixels()

    def get_geolocation(self):
        """Pixel/geographic transform for this raster.

        Returns
        -------
        SidescanGeolocation
        """
        from sidescan.geolocation.sidescan import SidescanGeolocation

        return SidescanGeolocation(self.metadata, self.get_shape()[1])

    def close(self) -> None:
        """Release decoded pixels."""
        self._pixels = None
