# -*- coding: utf-8 -*-
"""
Target Correlation Search - Find re-observations of point targets in rasters.

Given a known target location, scans a raster's scanlines for the place
where the target falls inside the swath, then refines across track (pixel
column) and along track (sample index) to the scanline/column whose ground
projection is closest to the target. Each sufficiently close hit becomes an
``Observation`` for the target's contact.

Both refinements use the same coarse-to-fine integer search: starting from
a seed with a large step, the squared ground distance is probed one step
either side, the search moves one step downhill when that improves, and
the step is halved otherwise until it reaches one pixel (or one sample).
The search is monotone and always terminates, but it is a local heuristic:
it can stop at a plateau edge, for example at the boundary of the nadir
shadow where every column projects to the vehicle position.

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
import logging
import math
import warnings
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union

# sidescan internal
from sidescan.exceptions import ImageUnavailableError, MalformedRasterError
from sidescan.geolocation.footprint import swath_bounds
from sidescan.geolocation.projector import project
from sidescan.geolocation.utils import geographic_distance, offset_location
from sidescan.IO.base import ImageReader
from sidescan.IO.models import Contact, LatLon, Observation, Raster, Sample

logger = logging.getLogger(__name__)

DEFAULT_ACCEPTANCE_DISTANCE = 2.0
DEFAULT_EXCLUDE_WINDOW = timedelta(seconds=5)
DEFAULT_SKIP_SAMPLES = 4
DEFAULT_SAMPLE_WINDOW = 100


# ---------------------------------------------------------------------------
# Coarse-to-fine integer search
# ---------------------------------------------------------------------------

def _descend(
    cost: Callable[[int], float],
    lo: int,
    hi: int,
    start: int,
    step: int,
) -> Tuple[int, float]:
    """Minimize ``cost`` over the integers ``[lo, hi]``.

    The slope at the current point is estimated by the central difference
    over ``+-step``. The search moves one step downhill when that lowers
    the cost; otherwise it stays put and halves the step. It stops once a
    step of one no longer improves.

    Probing at a distance lets the search cross flat runs of the cost,
    such as the nadir shadow where every column projects to the vehicle.
    It is a heuristic: it ends in a local minimum over the integers. Ties
    go to the current point, then to the forward probe.

    Returns
    -------
    Tuple[int, float]
        (argmin, cost at argmin)
    """
    cache: Dict[int, float] = {}

    def evaluate(x: int) -> float:
        if x not in cache:
            cache[x] = cost(x)
        return cache[x]

    x = min(max(start, lo), hi)
    best = evaluate(x)
    step = max(1, step)
    while True:
        forward = min(hi, x + step)
        backward = max(lo, x - step)
        c_forward = evaluate(forward)
        c_backward = evaluate(backward)
        slope = (c_forward - c_backward) / max(1, forward - backward)
        if slope > 0:
            candidate, c_candidate = backward, c_backward
        else:
            candidate, c_candidate = forward, c_forward

        if c_candidate < best:
            x, best = candidate, c_candidate
        elif step <= 1:
            return x, best
        else:
            step //= 2


def find_min_column(
    sample: Sample,
    target: LatLon,
    image_width: int,
    raster: Raster,
    start: int = 0,
    slant_corrected: bool = True,
) -> Tuple[int, float]:
    """
    Column of a scanline whose ground projection is closest to a target.

    Parameters
    ----------
    sample : Sample
        Scanline to search.
    target : LatLon
        Target location.
    image_width : int
        Number of image columns.
    raster : Raster
        Raster the sample belongs to (provides the sensor range).
    start : int, default=0
        Seed column.
    slant_corrected : bool, default=True
        Project columns with altitude correction.

    Returns
    -------
    Tuple[int, float]
        (column, ground distance in meters)
    """
    sensor = raster.sensor_info

    def cost(column: int) -> float:
        loc = project(sample, column, image_width, sensor, slant_corrected)
        return geographic_distance(loc.lat, loc.lon, target.lat, target.lon) ** 2

    column, sq = _descend(cost, 0, image_width - 1, start,
                          max(1, image_width // 2))
    return column, math.sqrt(sq)


def find_closest_sample(
    raster: Raster,
    start_index: int,
    column: int,
    target: LatLon,
    image_width: int,
    window: int = DEFAULT_SAMPLE_WINDOW,
    slant_corrected: bool = True,
) -> Tuple[int, float]:
    """
    Sample near ``start_index`` whose projection of ``column`` is closest.

    Parameters
    ----------
    raster : Raster
        Raster to search.
    start_index : int
        Seed sample index.
    column : int
        Pixel column evaluated on each candidate scanline.
    target : LatLon
        Target location.
    image_width : int
        Number of image columns.
    window : int, default=100
        Search is limited to ``start_index +- window`` samples so a later
        lap over the same spot is not merged into this pass.
    slant_corrected : bool, default=True
        Project with altitude correction.

    Returns
    -------
    Tuple[int, float]
        (sample index, ground distance in meters)
    """
    samples = raster.samples
    sensor = raster.sensor_info
    lo = max(0, start_index - window)
    hi = min(len(samples) - 1, start_index + window)

    def cost(index: int) -> float:
        loc = project(samples[index], column, image_width, sensor,
                      slant_corrected)
        return geographic_distance(loc.lat, loc.lon, target.lat, target.lon) ** 2

    index, sq = _descend(cost, lo, hi, start_index, max(1, (hi - lo) // 4))
    return index, math.sqrt(sq)


# ---------------------------------------------------------------------------
# Raster search
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Match:
    """A refined re-observation of a target within one raster.

    Attributes
    ----------
    sample_index : int
        Position of the scanline in ``raster.samples``.
    column : int
        Pixel column of the hit.
    distance : float
        Ground distance from the projected pixel to the target, meters.
    location : LatLon
        Ground projection of ``(sample_index, column)``.
    """

    sample_index: int
    column: int
    distance: float
    location: LatLon


class ReacquisitionSearch:
    """
    Search one raster for re-observations of point targets.

    Parameters
    ----------
    raster : Raster
        Raster to search.
    image_width : int
        Number of columns of the raster's image.
    acceptance_distance : float, default=2.0
        Maximum ground distance in meters for a hit.
    exclude_window : timedelta, default=5 s
        Scanlines closer than this to the exclusion instant are skipped.
    skip_samples : int, default=4
        Samples skipped after each hit.
    min_separation : timedelta, optional
        Minimum time between two hits. Defaults to ``exclude_window``.
    sample_window : int, default=100
        Half-width of the along-track refinement window, in samples.
    slant_corrected : bool, default=True
        Project with altitude correction.

    Raises
    ------
    ValueError
        If ``image_width`` or ``acceptance_distance`` is not positive, or
        ``skip_samples`` is negative.

    Examples
    --------
    >>> search = ReacquisitionSearch(raster, image_width=1024)
    >>> observations = search.find(LatLon(41.18, -8.70),
    ...                            exclude_around=seed_time)
    """

    def __init__(
        self,
        raster: Raster,
        image_width: int,
        acceptance_distance: float = DEFAULT_ACCEPTANCE_DISTANCE,
        exclude_window: timedelta = DEFAULT_EXCLUDE_WINDOW,
        skip_samples: int = DEFAULT_SKIP_SAMPLES,
        min_separation: Optional[timedelta] = None,
        sample_window: int = DEFAULT_SAMPLE_WINDOW,
        slant_corrected: bool = True,
    ) -> None:
        if image_width <= 0:
            raise ValueError(f"image_width must be positive, got {image_width}")
        if acceptance_distance <= 0:
            raise ValueError(
                f"acceptance_distance must be positive, got {acceptance_distance}"
            )
        if skip_samples < 0:
            raise ValueError(
                f"skip_samples must be non-negative, got {skip_samples}"
            )

        self.raster = raster
        self.image_width = image_width
        self.acceptance_distance = acceptance_distance
        self.exclude_window = exclude_window
        self.skip_samples = skip_samples
        self.min_separation = (exclude_window if min_separation is None
                               else min_separation)
        self.sample_window = sample_window
        self.slant_corrected = slant_corrected

        sensor = raster.sensor_info
        self._reach = max(abs(sensor.min_range), abs(sensor.max_range))

    def _excluded(
        self,
        timestamp: datetime,
        exclude_around: Optional[datetime],
    ) -> bool:
        if exclude_around is None:
            return False
        return abs(timestamp - exclude_around) < self.exclude_window

    def _out_of_reach(self, sample: Sample, target: LatLon) -> bool:
        mid = project(sample, self.image_width // 2, self.image_width,
                      self.raster.sensor_info, self.slant_corrected)
        return geographic_distance(mid.lat, mid.lon,
                                   target.lat, target.lon) > self._reach

    def iter_matches(
        self,
        target: LatLon,
        exclude_around: Optional[datetime] = None,
    ) -> Iterator[Match]:
        """
        Yield refined hits for ``target`` in scanline order.

        Parameters
        ----------
        target : LatLon
            Target location.
        exclude_around : datetime, optional
            Instant whose surroundings (``exclude_window``) are skipped,
            normally the time of the sighting the search starts from.

        Yields
        ------
        Match
        """
        samples = self.raster.samples
        count = len(samples)
        index = 0
        while index < count:
            sample = samples[index]
            if (self._excluded(sample.timestamp, exclude_around)
                    or self._out_of_reach(sample, target)):
                index += 1
                continue

            column, distance = find_min_column(
                sample, target, self.image_width, self.raster,
                slant_corrected=self.slant_corrected,
            )
            if distance >= self.acceptance_distance:
                index += 1
                continue

            best_index, _ = find_closest_sample(
                self.raster, index, column, target, self.image_width,
                window=self.sample_window,
                slant_corrected=self.slant_corrected,
            )
            best = samples[best_index]
            if self._excluded(best.timestamp, exclude_around):
                index += 1
                continue

            column, distance = find_min_column(
                best, target, self.image_width, self.raster, start=column,
                slant_corrected=self.slant_corrected,
            )
            location = project(best, column, self.image_width,
                               self.raster.sensor_info, self.slant_corrected)
            logger.debug("Target hit in %s at sample %d column %d (%.2f m)",
                         self.raster.filename, best_index, column, distance)
            yield Match(best_index, column, distance, location)

            index = max(index, best_index) + self.skip_samples + 1
            while (index < count
                   and samples[index].timestamp - best.timestamp
                   < self.min_separation):
                index += 1

    def observation(self, match: Match) -> Observation:
        """
        Build the ``Observation`` for a match.

        The observation is placed at the ground projection of the matched
        pixel (``match.location``, degrees), not at the searched target,
        so it records where this pass actually imaged the object. The two
        differ by at most ``acceptance_distance``.
        """
        sample = self.raster.samples[match.sample_index]
        depth = sample.pose.depth if sample.pose.depth is not None else 0.0
        return Observation(
            latitude=match.location.lat,
            longitude=match.location.lon,
            timestamp=sample.timestamp,
            depth=depth,
            raster_filename=self.raster.filename,
            system_name=self.raster.sensor_info.system_name or "unknown",
        )

    def find(
        self,
        target: LatLon,
        exclude_around: Optional[datetime] = None,
    ) -> List[Observation]:
        """
        All re-observations of ``target`` in the raster.

        Returns
        -------
        List[Observation]
            Observations in scanline order; empty when the target was
            not seen.
        """
        return [self.observation(m)
                for m in self.iter_matches(target, exclude_around)]


def find_reacquisitions(
    raster: Raster,
    target: LatLon,
    image_width: int,
    exclude_around: Optional[datetime] = None,
    exclude_window: timedelta = DEFAULT_EXCLUDE_WINDOW,
    **kwargs,
) -> List[Observation]:
    """
    Search a raster for re-observations of a target.

    Parameters
    ----------
    raster : Raster
        Raster to search.
    target : LatLon
        Target location.
    image_width : int
        Number of columns of the raster's image.
    exclude_around : datetime, optional
        Seed sighting time; scanlines within ``exclude_window`` of it are
        never reported.
    exclude_window : timedelta, default=5 s
        Half-width of the exclusion interval.
    **kwargs
        Further ``ReacquisitionSearch`` options.

    Returns
    -------
    List[Observation]
        Possibly empty.
    """
    search = ReacquisitionSearch(raster, image_width,
                                 exclude_window=exclude_window, **kwargs)
    return search.find(target, exclude_around)


# ---------------------------------------------------------------------------
# Multi-raster search
# ---------------------------------------------------------------------------

def _may_contain(raster: Raster, target: LatLon, margin: float) -> bool:
    """Whether the swath box, grown by ``margin`` meters, holds the target."""
    min_lon, min_lat, max_lon, max_lat = swath_bounds(raster)
    south, _ = offset_location(min_lat, min_lon, 180.0, margin)
    north, _ = offset_location(max_lat, max_lon, 0.0, margin)
    # East-west growth measured at the target latitude
    _, west = offset_location(target.lat, min_lon, 270.0, margin)
    _, east = offset_location(target.lat, max_lon, 90.0, margin)
    return south <= target.lat <= north and west <= target.lon <= east


def search_rasters(
    readers: Iterable[ImageReader],
    target: LatLon,
    exclude_around: Optional[datetime] = None,
    **kwargs,
) -> List[Observation]:
    """
    Search several rasters for re-observations of a target.

    Rasters whose swath cannot contain the target are skipped without
    reading their image. Rasters whose image cannot be read, or does not
    match its index, are skipped with a warning.

    Parameters
    ----------
    readers : Iterable[ImageReader]
        Open raster readers.
    target : LatLon
        Target location.
    exclude_around : datetime, optional
        Seed sighting time.
    **kwargs
        ``ReacquisitionSearch`` options.

    Returns
    -------
    List[Observation]
        Observations from all rasters, raster by raster.
    """
    margin = kwargs.get('acceptance_distance', DEFAULT_ACCEPTANCE_DISTANCE)
    observations: List[Observation] = []
    for reader in readers:
        raster = reader.metadata
        if not _may_contain(raster, target, margin):
            continue
        try:
            image_width = reader.get_shape()[1]
        except (ImageUnavailableError, MalformedRasterError) as e:
            warnings.warn(
                f"Skipping raster {raster.filename}: {e}",
                UserWarning,
                stacklevel=2,
            )
            continue
        found = find_reacquisitions(raster, target, image_width,
                                    exclude_around=exclude_around, **kwargs)
        logger.debug("%d observation(s) in %s", len(found), raster.filename)
        observations.extend(found)
    return observations


def generate_observations(
    contact: Contact,
    readers: Iterable[ImageReader],
    **kwargs,
) -> List[Observation]:
    """
    Search rasters for a contact and append the hits to it.

    The exclusion instant is the contact's earliest observation, so the
    sighting the contact was created from is not reported again. A
    contact without observations is searched with no exclusion.

    Parameters
    ----------
    contact : Contact
        Target contact. Its ``observations`` list is extended in place.
    readers : Iterable[ImageReader]
        Open raster readers.
    **kwargs
        ``ReacquisitionSearch`` options.

    Returns
    -------
    List[Observation]
        The newly appended observations.
    """
    found = search_rasters(
        readers,
        LatLon(contact.latitude, contact.longitude),
        exclude_around=contact.first_observation_time,
        **kwargs,
    )
    contact.observations.extend(found)
    return found


def search_folder(
    folder: Union[str, Path],
    contact: Contact,
    **kwargs,
) -> List[Observation]:
    """
    Search every raster under a folder for a contact.

    Parameters
    ----------
    folder : str or Path
        Root folder; raster indexes are discovered by ``RasterCatalog``.
    contact : Contact
        Target contact, extended in place.
    **kwargs
        ``ReacquisitionSearch`` options.

    Returns
    -------
    List[Observation]
        The newly appended observations.
    """
    from sidescan.IO.catalog import RasterCatalog

    with RasterCatalog(folder) as catalog:
        return generate_observations(contact, catalog.open_all(), **kwargs)
