# -*- coding: utf-8 -*-
"""
PNG Writer - Write grayscale, RGB and RGBA mosaics to PNG format.

Writes 2D grayscale or 3D RGB/RGBA arrays to PNG files using Pillow.
Float inputs are auto-normalized to 0-255 with a warning. RGBA output
keeps mosaic transparency so exports can be layered over base maps.

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
import warnings

# Third-party
import numpy as np
from PIL import Image

# sidescan internal
from sidescan.IO.base import ImageWriter

# Pillow infers L, RGB or RGBA from the uint8 array shape
_CHANNELS = (3, 4)


class PngWriter(ImageWriter):
    """Write uint8 grayscale, RGB or RGBA arrays to PNG files.

    Parameters
    ----------
    filepath : str or Path
        Output PNG file path.

    Examples
    --------
    >>> from sidescan.IO.png import PngWriter
    >>> with PngWriter('mosaic.png') as writer:
    ...     writer.write(mosaic.data)
    """

    def write(self, data: np.ndarray) -> None:
        """Write image data to a PNG file.

        Parameters
        ----------
        data : np.ndarray
            ``(rows, cols)`` grayscale, ``(rows, cols, 3)`` RGB or
            ``(rows, cols, 4)`` RGBA. Must be uint8, or a float array
            (auto-normalized to 0-255).

        Raises
        ------
        ValueError
            If the array shape is not supported.
        """
        if not (data.ndim == 2
                or (data.ndim == 3 and data.shape[2] in _CHANNELS)):
            raise ValueError(
                f"Expected 2D grayscale (rows, cols) or 3D RGB/RGBA "
                f"(rows, cols, 3|4), got shape {data.shape}"
            )

        if np.issubdtype(data.dtype, np.floating):
            warnings.warn(
                f"Float array (dtype={data.dtype}) auto-normalized to "
                f"uint8 [0, 255] for PNG output.",
                UserWarning,
                stacklevel=2,
            )
            dmin = data.min()
            dmax = data.max()
            if dmax - dmin > 0:
                data = ((data - dmin) / (dmax - dmin) * 255.0)
            else:
                data = np.zeros_like(data)

        if data.dtype != np.uint8:
            data = data.astype(np.uint8)

        Image.fromarray(np.ascontiguousarray(data)).save(
            str(self.filepath)
        )
