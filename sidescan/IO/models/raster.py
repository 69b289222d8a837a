# -*- coding: utf-8 -*-
"""
Raster Models - Immutable navigation and sensor records for sidescan rasters.

A raster pairs a strip-scan image with one ``Sample`` per image row. Each
sample carries the vehicle ``Pose`` at the time the scanline was acquired,
and the raster's ``SensorInfo`` maps image columns to signed slant range.
All records are frozen after load; geometry and search code read them
from several threads without locking.

Validation happens at construction: a raster that violates the row/sample
correspondence invariants raises ``MalformedRasterError`` and never reaches
footprint, mosaic or search code.

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
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

# sidescan internal
from sidescan.exceptions import MalformedRasterError
from sidescan.IO.models.common import LatLon
from sidescan.vocabulary import RasterType


@dataclass(frozen=True)
class Pose:
    """Vehicle navigation state for one scanline.

    Only ``latitude`` and ``longitude`` are required. Every other field
    may be ``None`` meaning "not reported"; geometry reads them through
    the ``roll``, ``heading`` and ``altitude_or_zero`` accessors, which
    resolve missing values to 0.

    Parameters
    ----------
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    depth : float, optional
        Vehicle depth below the surface in meters.
    altitude : float, optional
        Vehicle height above the seabed in meters.
    height : float, optional
        Height above the ellipsoid in meters.
    phi, theta, psi : float, optional
        Roll, pitch and heading in degrees.
    p, q, r : float, optional
        Body angular rates.
    u, v, w : float, optional
        Body-frame velocities in m/s.
    hacc : float, optional
        Horizontal position accuracy in meters.
    """

    latitude: float
    longitude: float
    depth: Optional[float] = None
    altitude: Optional[float] = None
    height: Optional[float] = None
    phi: Optional[float] = None
    theta: Optional[float] = None
    psi: Optional[float] = None
    p: Optional[float] = None
    q: Optional[float] = None
    r: Optional[float] = None
    u: Optional[float] = None
    v: Optional[float] = None
    w: Optional[float] = None
    hacc: Optional[float] = None

    @property
    def location(self) -> LatLon:
        """Vehicle position as a ``LatLon``."""
        return LatLon(self.latitude, self.longitude)

    @property
    def heading(self) -> float:
        """Heading in degrees, 0 when not reported."""
        return self.psi if self.psi is not None else 0.0

    @property
    def roll(self) -> float:
        """Roll in degrees, 0 when not reported."""
        return self.phi if self.phi is not None else 0.0

    @property
    def altitude_or_zero(self) -> float:
        """Altitude above the seabed in meters, clamped to be non-negative."""
        if self.altitude is None:
            return 0.0
        return max(self.altitude, 0.0)


@dataclass(frozen=True)
class Sample:
    """One scanline's acquisition record.

    Parameters
    ----------
    index : int
        Scanline index as recorded by the acquisition system.
    timestamp : datetime
        Timezone-aware acquisition instant.
    pose : Pose
        Vehicle navigation state at ``timestamp``.
    offset : int, optional
        Byte offset of the scanline in the source log, when known.
    """

    index: int
    timestamp: datetime
    pose: Pose
    offset: Optional[int] = None


@dataclass(frozen=True)
class SensorInfo:
    """Sensor description mapping image columns to signed slant range.

    Column 0 corresponds to ``min_range`` and the last column to
    ``max_range``. Negative ranges are port side, positive starboard.

    Parameters
    ----------
    min_range : float
        Signed range of the first image column in meters.
    max_range : float
        Signed range past the last image column in meters.
    frequency : float, optional
        Acoustic frequency in Hz.
    sensor_model : str, optional
        Sensor make or model.
    system_name : str, optional
        Name of the vehicle or system that carried the sensor.
    hfov, vfov : float, optional
        Horizontal and vertical fields of view in degrees.
    color_mode : str, optional
        Palette used when the image was rendered.

    Raises
    ------
    MalformedRasterError
        If ``max_range <= min_range``.
    """

    min_range: float
    max_range: float
    frequency: Optional[float] = None
    sensor_model: Optional[str] = None
    system_name: Optional[str] = None
    hfov: Optional[float] = None
    vfov: Optional[float] = None
    color_mode: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.max_range > self.min_range:
            raise MalformedRasterError(
                f"max_range ({self.max_range}) must be greater than "
                f"min_range ({self.min_range})"
            )

    @property
    def swath_width(self) -> float:
        """Width of the imaged range interval in meters."""
        return self.max_range - self.min_range


@dataclass(frozen=True)
class Raster:
    """Indexed sidescan raster: image reference, scanline samples, sensor.

    The referenced image has exactly ``len(samples)`` rows once read in
    sample order (see ``sidescan.IO.reader``) and its columns span
    ``[min_range, max_range]`` linearly.

    Parameters
    ----------
    filename : str
        Image file name, relative to the index file's folder.
    samples : Tuple[Sample, ...]
        Scanline samples in acquisition order. Lists are converted to
        tuples.
    sensor_info : SensorInfo
        Range description of the image columns.
    raster_type : RasterType, default=RasterType.IMAGE
        Row layout of the image file.

    Raises
    ------
    MalformedRasterError
        If ``samples`` is empty, timestamps decrease, or ``sensor_info``
        is missing.
    """

    filename: str
    samples: Tuple[Sample, ...]
    sensor_info: SensorInfo
    raster_type: RasterType = RasterType.IMAGE

    def __post_init__(self) -> None:
        samples = tuple(self.samples)
        object.__setattr__(self, 'samples', samples)

        if not samples:
            raise MalformedRasterError(
                f"Raster {self.filename!r} has no samples"
            )
        if self.sensor_info is None:
            raise MalformedRasterError(
                f"Raster {self.filename!r} has no sensor info"
            )
        for i in range(1, len(samples)):
            if samples[i].timestamp < samples[i - 1].timestamp:
                raise MalformedRasterError(
                    f"Raster {self.filename!r}: sample {i} timestamp "
                    f"{samples[i].timestamp.isoformat()} precedes sample "
                    f"{i - 1} ({samples[i - 1].timestamp.isoformat()})"
                )

    @property
    def start_time(self) -> datetime:
        """Timestamp of the first sample."""
        return self.samples[0].timestamp

    @property
    def end_time(self) -> datetime:
        """Timestamp of the last sample."""
        return self.samples[-1].timestamp

    @property
    def center_sample(self) -> Sample:
        """Sample in the middle of the acquisition."""
        return self.samples[len(self.samples) // 2]

    def __len__(self) -> int:
        return len(self.samples)
