# -*- coding: utf-8 -*-
"""
IO Base - Contracts for raster index readers, product writers and catalogs.

A sidescan raster on disk is a JSON index (per-scanline pose, timestamp
and sensor description) next to the waterfall image it describes. Readers
parse the index eagerly and the image on demand; writers persist rendered
mosaics; catalogs find index files under a survey folder.

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
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np

from sidescan.IO.models import Raster

PathLike = Union[str, Path]
BoundingBox = Tuple[float, float, float, float]


class _Closeable:
    """Context-manager support; ``close`` is a no-op unless overridden."""

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class ImageReader(_Closeable, ABC):
    """
    Reader for one indexed sidescan raster.

    Pixel rows always follow ``metadata.samples``: row ``i`` of any array
    returned here was recorded at ``metadata.samples[i]``, whatever line
    order the image file itself uses. Footprints, projection and search
    need only ``metadata``, so implementations should not touch the image
    until pixels are asked for.

    Parameters
    ----------
    filepath : str or Path
        Raster index file.

    Raises
    ------
    FileNotFoundError
        If ``filepath`` does not exist.
    """

    def __init__(self, filepath: PathLike) -> None:
        self.filepath = Path(filepath)
        if not self.filepath.exists():
            raise FileNotFoundError(
                f"Raster index does not exist: {self.filepath}")
        self.metadata: Raster = self._load_metadata()

    @abstractmethod
    def _load_metadata(self) -> Raster:
        """Decode the index into a ``Raster``."""

    @abstractmethod
    def get_shape(self) -> Tuple[int, ...]:
        """``(samples, columns)``, or ``(samples, columns, bands)``."""

    @abstractmethod
    def read_chip(
        self,
        row_start: int,
        row_end: int,
        col_start: int,
        col_end: int,
    ) -> np.ndarray:
        """
        Pixels for a half-open block of samples and range columns.

        Raises
        ------
        ValueError
            If the block is empty or reaches past the image.
        """

    def read_full(self) -> np.ndarray:
        """Every scanline, in sample order."""
        n_samples, n_columns = self.get_shape()[:2]
        return self.read_chip(0, n_samples, 0, n_columns)


class ImageWriter(_Closeable, ABC):
    """
    Writer for a rendered raster product.

    Parameters
    ----------
    filepath : str or Path
        Destination file.
    """

    def __init__(self, filepath: PathLike) -> None:
        self.filepath = Path(filepath)

    @abstractmethod
    def write(self, data: np.ndarray) -> None:
        """
        Persist ``data`` to ``filepath``.

        Raises
        ------
        ValueError
            If the array layout cannot be stored in this format.
        """


class CatalogInterface(ABC):
    """
    Discovery of raster index files beneath a survey folder.

    Parameters
    ----------
    search_path : str or Path
        Folder to search.

    Raises
    ------
    NotADirectoryError
        If ``search_path`` is not an existing folder.
    """

    def __init__(self, search_path: PathLike) -> None:
        self.search_path = Path(search_path)
        if not self.search_path.is_dir():
            raise NotADirectoryError(
                f"Survey folder is not a directory: {self.search_path}")

    @abstractmethod
    def discover(self, recursive: bool = True) -> List[Path]:
        """Index files under ``search_path``, sorted by path."""

    @abstractmethod
    def find_overlapping(
        self,
        reference_bounds: BoundingBox,
        index_paths: Optional[List[Path]] = None,
    ) -> List[Path]:
        """
        Index files whose footprint box meets ``reference_bounds``.

        Parameters
        ----------
        reference_bounds : Tuple[float, float, float, float]
            (min_lon, min_lat, max_lon, max_lat) in degrees.
        index_paths : List[Path], optional
            Candidates to test; ``discover()`` when omitted.
        """
