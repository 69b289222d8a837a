# -*- coding: utf-8 -*-
"""
Contact Models - Point targets and their sightings across sonar passes.

A ``Contact`` is a previously logged point target. Each time the target is
seen, in the pass where it was first marked or in a later pass found by
the correlation search, an ``Observation`` is appended to the contact.
Observations are immutable; the contact owns its observation list.

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
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


def _new_uuid() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Observation:
    """One sighting of a contact in a specific raster.

    Parameters
    ----------
    latitude : float
        Latitude of the sighting in degrees.
    longitude : float
        Longitude of the sighting in degrees.
    timestamp : datetime
        Acquisition time of the scanline the sighting was made on.
    depth : float, default=0.0
        Vehicle depth at the sighting, meters.
    raster_filename : str, optional
        Image file of the raster containing the sighting.
    system_name : str, optional
        Vehicle or system that acquired the raster.
    user_name : str, optional
        Operator who confirmed the sighting, if any.
    annotations : list of dict, optional
        Free-form annotations attached by operators.
    uuid : str
        Unique identifier, generated when omitted.
    """

    latitude: float
    longitude: float
    timestamp: datetime
    depth: float = 0.0
    raster_filename: Optional[str] = None
    system_name: Optional[str] = None
    user_name: Optional[str] = None
    annotations: List[Dict[str, Any]] = field(default_factory=list,
                                              compare=False)
    uuid: str = field(default_factory=_new_uuid)


@dataclass
class Contact:
    """A point target and the observations made of it.

    Parameters
    ----------
    latitude : float
        Reference latitude of the target in degrees.
    longitude : float
        Reference longitude of the target in degrees.
    label : str, optional
        Human-readable name.
    depth : float, default=0.0
        Target depth in meters.
    observations : list of Observation
        Sightings in acquisition order of discovery.
    uuid : str
        Unique identifier, generated when omitted.
    """

    latitude: float
    longitude: float
    label: Optional[str] = None
    depth: float = 0.0
    observations: List[Observation] = field(default_factory=list)
    uuid: str = field(default_factory=_new_uuid)

    @property
    def first_observation_time(self) -> Optional[datetime]:
        """Timestamp of the earliest observation, or None without any."""
        if not self.observations:
            return None
        return min(obs.timestamp for obs in self.observations)
