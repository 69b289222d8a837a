# -*- coding: utf-8 -*-
"""
Raster Catalog - Discover indexed sidescan rasters on disk.

Raster index files live in folders named ``rasterIndex`` next to the
images they reference. The catalog walks a survey folder, opens each
index, and hands out readers ordered by acquisition start time. Index
files that fail to parse are skipped with a warning so one corrupt file
does not hide a whole survey.

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
import warnings
from pathlib import Path
from typing import List, Optional, Tuple, Union

# sidescan internal
from sidescan.exceptions import MalformedRasterError
from sidescan.IO.base import CatalogInterface
from sidescan.IO.reader import SidescanReader

logger = logging.getLogger(__name__)

INDEX_FOLDER_NAME = "rasterIndex"


class RasterCatalog(CatalogInterface):
    """Catalog of sidescan raster indexes under a folder.

    Parameters
    ----------
    search_path : str or Path
        Survey folder to search.

    Raises
    ------
    NotADirectoryError
        If ``search_path`` is not a directory.

    Examples
    --------
    >>> with RasterCatalog('/data/survey_2024') as catalog:
    ...     for reader in catalog.open_all():
    ...         print(reader.metadata.filename, reader.metadata.start_time)
    """

    def __init__(self, search_path: Union[str, Path]) -> None:
        super().__init__(search_path)
        self._readers: List[SidescanReader] = []

    def discover(self, recursive: bool = True) -> List[Path]:
        """Find ``*.json`` files inside ``rasterIndex`` folders.

        Parameters
        ----------
        recursive : bool, default=True
            Search nested folders. When False only ``search_path`` itself
            and its direct ``rasterIndex`` child are considered.

        Returns
        -------
        List[Path]
            Sorted index file paths.
        """
        if recursive:
            candidates = self.search_path.rglob('*.json')
        else:
            candidates = [*self.search_path.glob('*.json'),
                          *(self.search_path / INDEX_FOLDER_NAME).glob('*.json')]
        found = sorted(p for p in candidates
                       if p.is_file() and p.parent.name == INDEX_FOLDER_NAME)
        logger.debug("Discovered %d raster index file(s) under %s",
                     len(found), self.search_path)
        return found

    def _open(self, path: Path) -> Optional[SidescanReader]:
        try:
            return SidescanReader(path)
        except (MalformedRasterError, OSError) as e:
            warnings.warn(f"Failed to index raster {path}: {e}",
                          UserWarning, stacklevel=3)
            return None

    def open_all(self, recursive: bool = True) -> List[SidescanReader]:
        """Open every discovered raster, ordered by start time.

        Returns
        -------
        List[SidescanReader]
            Readers for all valid indexes. They are closed with the
            catalog.
        """
        readers = [r for r in (self._open(p) for p in self.discover(recursive))
                   if r is not None]
        readers.sort(key=lambda r: r.metadata.start_time)
        self._readers.extend(readers)
        return readers

    def find_overlapping(
        self,
        reference_bounds: Tuple[float, float, float, float],
        index_paths: Optional[List[Path]] = None,
    ) -> List[Path]:
        """Index files whose swath bounds overlap a bounding box.

        Parameters
        ----------
        reference_bounds : Tuple[float, float, float, float]
            (min_lon, min_lat, max_lon, max_lat)
        index_paths : List[Path], optional
            Index files to check. Defaults to ``discover()``.

        Returns
        -------
        List[Path]
        """
        # Deferred: sidescan.geolocation imports the IO models package
        from sidescan.geolocation.footprint import swath_bounds
        from sidescan.geolocation.utils import bounds_intersect

        if index_paths is None:
            index_paths = self.discover()

        overlapping = []
        for path in index_paths:
            reader = self._open(Path(path))
            if reader is None:
                continue
            with reader:
                if bounds_intersect(swath_bounds(reader.metadata),
                                    reference_bounds):
                    overlapping.append(Path(path))
        return overlapping

    def close(self) -> None:
        """Close all readers handed out by ``open_all``."""
        for reader in self._readers:
            reader.close()
        self._readers.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
