# -*- coding: utf-8 -*-
"""
Raster Index Codec - Read and write sidescan index and contact JSON.

Raster index files describe one sidescan raster: the image file name, its
row layout, one sample per scanline with the vehicle pose, and the sensor
range configuration. Keys are kebab-case (``raster-type``,
``sensor-info``, ``min-range``). Pose coordinates accept both the long
(``latitude``/``longitude``) and short (``lat``/``lon``) spellings. Unknown
keys are ignored so newer writers stay readable.

Contacts and their observations use the same conventions and are
round-tripped for the correlation search.

Dependencies
------------
(standard library only)

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
import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

# sidescan internal
from sidescan.exceptions import MalformedRasterError
from sidescan.IO.models import (
    Contact,
    Observation,
    Pose,
    Raster,
    Sample,
    SensorInfo,
)
from sidescan.vocabulary import RasterType

logger = logging.getLogger(__name__)

# Fractional seconds of any length, e.g. nanosecond writers
_FRACTION = re.compile(r'(\.\d{1,6})\d*')

# Optional pose fields, JSON key -> Pose attribute
_POSE_FIELDS = (
    'depth', 'altitude', 'height', 'phi', 'theta', 'psi',
    'p', 'q', 'r', 'u', 'v', 'w', 'hacc',
)

# SensorInfo attribute -> JSON key
_SENSOR_KEYS = {
    'min_range': 'min-range',
    'max_range': 'max-range',
    'frequency': 'frequency',
    'sensor_model': 'sensor-model',
    'system_name': 'system-name',
    'hfov': 'hfov',
    'vfov': 'vfov',
    'color_mode': 'color-mode',
}


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------

def parse_timestamp(value: Union[str, int, float, datetime]) -> datetime:
    """Parse an index timestamp into a timezone-aware datetime.

    Accepts ISO-8601 strings with ``Z`` or numeric offsets, the
    ``yyyy-MM-dd HH:mm:ss[.S]`` form, epoch seconds, and datetimes.
    Values without an offset are taken as UTC.

    Parameters
    ----------
    value : str, int, float or datetime
        Timestamp as stored in JSON.

    Returns
    -------
    datetime
        Timezone-aware datetime.

    Raises
    ------
    ValueError
        If the string cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        parsed = datetime.fromtimestamp(value, tz=timezone.utc)
    else:
        text = str(value).strip()
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        # Pad or truncate fractional seconds to microseconds
        text = _FRACTION.sub(lambda m: m.group(1).ljust(7, '0'), text, count=1)
        parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ISO-8601 with ``Z`` for UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.isoformat()
    if text.endswith('+00:00'):
        text = text[:-6] + 'Z'
    return text


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: val for key, val in data.items() if val is not None}


# ---------------------------------------------------------------------------
# Rasters
# ---------------------------------------------------------------------------

def _coordinates(data: Dict[str, Any]) -> Tuple[float, float]:
    """(latitude, longitude) under the full or the short key names."""
    lat = data['latitude'] if 'latitude' in data else data['lat']
    lon = data['longitude'] if 'longitude' in data else data['lon']
    return float(lat), float(lon)


def pose_from_dict(data: Dict[str, Any]) -> Pose:
    """Build a ``Pose`` from its JSON mapping.

    Raises
    ------
    KeyError
        If neither ``latitude`` nor ``lat`` (or the longitude
        equivalents) is present.
    """
    lat, lon = _coordinates(data)
    optional = {name: _optional_float(data.get(name)) for name in _POSE_FIELDS}
    return Pose(latitude=lat, longitude=lon, **optional)


def pose_to_dict(pose: Pose) -> Dict[str, Any]:
    """Serialize a ``Pose`` to its JSON mapping."""
    data = {'latitude': pose.latitude, 'longitude': pose.longitude}
    for name in _POSE_FIELDS:
        data[name] = getattr(pose, name)
    return _drop_none(data)


def sensor_info_from_dict(data: Dict[str, Any]) -> SensorInfo:
    """Build a ``SensorInfo`` from its JSON mapping."""
    kwargs = {}
    for attr, key in _SENSOR_KEYS.items():
        value = data.get(key)
        if value is not None and attr in ('min_range', 'max_range',
                                          'frequency', 'hfov', 'vfov'):
            value = float(value)
        kwargs[attr] = value
    if kwargs['min_range'] is None or kwargs['max_range'] is None:
        raise MalformedRasterError(
            "sensor-info requires both 'min-range' and 'max-range'"
        )
    return SensorInfo(**kwargs)


def raster_from_dict(data: Dict[str, Any]) -> Raster:
    """Build a ``Raster`` from a parsed index mapping.

    Parameters
    ----------
    data : dict
        Parsed raster index JSON.

    Returns
    -------
    Raster

    Raises
    ------
    MalformedRasterError
        If required keys are missing, values are malformed, or the
        raster violates its invariants (no samples, timestamps out of
        order, invalid range interval).
    """
    try:
        filename = data['filename']
        sensor_data = data.get('sensor-info')
        if sensor_data is None:
            raise MalformedRasterError(
                f"Raster {filename!r} has no sensor-info"
            )
        sensor_info = sensor_info_from_dict(sensor_data)
        raster_type = RasterType(data.get('raster-type', 'image'))
        samples = [
            Sample(
                index=int(entry.get('index', i)),
                timestamp=parse_timestamp(entry['timestamp']),
                pose=pose_from_dict(entry['pose']),
                offset=entry.get('offset'),
            )
            for i, entry in enumerate(data.get('samples') or [])
        ]
    except MalformedRasterError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise MalformedRasterError(f"Invalid raster index: {e}") from e

    return Raster(
        filename=filename,
        samples=samples,
        sensor_info=sensor_info,
        raster_type=raster_type,
    )


def raster_to_dict(raster: Raster) -> Dict[str, Any]:
    """Serialize a ``Raster`` to its index mapping."""
    sensor = {
        key: getattr(raster.sensor_info, attr)
        for attr, key in _SENSOR_KEYS.items()
    }
    samples = []
    for sample in raster.samples:
        entry = {
            'index': sample.index,
            'timestamp': format_timestamp(sample.timestamp),
            'pose': pose_to_dict(sample.pose),
        }
        if sample.offset is not None:
            entry['offset'] = sample.offset
        samples.append(entry)
    return {
        'filename': raster.filename,
        'raster-type': raster.raster_type.value,
        'samples': samples,
        'sensor-info': _drop_none(sensor),
    }


def load_raster_index(filepath: Union[str, Path]) -> Raster:
    """Read a raster index JSON file.

    Parameters
    ----------
    filepath : str or Path
        Path to the index file.

    Returns
    -------
    Raster

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    MalformedRasterError
        If the file is not valid JSON or describes an invalid raster.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError
        raise MalformedRasterError(
            f"Raster index {filepath} is not valid JSON: {e}"
        ) from e

    if not isinstance(data, dict):
        raise MalformedRasterError(
            f"Raster index {filepath} must contain a JSON object"
        )

    raster = raster_from_dict(data)
    logger.debug("Loaded raster index %s (%d samples)",
                 filepath, len(raster.samples))
    return raster


def save_raster_index(raster: Raster, filepath: Union[str, Path]) -> None:
    """Write a raster index JSON file."""
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(raster_to_dict(raster), f, indent=2)


# ---------------------------------------------------------------------------
# Contacts
# ---------------------------------------------------------------------------

def observation_from_dict(data: Dict[str, Any]) -> Observation:
    """Build an ``Observation`` from its JSON mapping."""
    kwargs = {}
    if data.get('uuid'):
        kwargs['uuid'] = data['uuid']
    lat, lon = _coordinates(data)
    return Observation(
        latitude=lat,
        longitude=lon,
        timestamp=parse_timestamp(data['timestamp']),
        depth=float(data.get('depth') or 0.0),
        raster_filename=data.get('raster-filename'),
        system_name=data.get('system-name'),
        user_name=data.get('user-name'),
        annotations=list(data.get('annotations') or []),
        **kwargs,
    )


def observation_to_dict(observation: Observation) -> Dict[str, Any]:
    """Serialize an ``Observation`` to its JSON mapping."""
    return _drop_none({
        'uuid': observation.uuid,
        'latitude': observation.latitude,
        'longitude': observation.longitude,
        'depth': observation.depth,
        'timestamp': format_timestamp(observation.timestamp),
        'raster-filename': observation.raster_filename,
        'system-name': observation.system_name,
        'user-name': observation.user_name,
        'annotations': list(observation.annotations),
    })


def contact_from_dict(data: Dict[str, Any]) -> Contact:
    """Build a ``Contact`` from its JSON mapping."""
    kwargs = {}
    if data.get('uuid'):
        kwargs['uuid'] = data['uuid']
    lat, lon = _coordinates(data)
    return Contact(
        latitude=lat,
        longitude=lon,
        label=data.get('label'),
        depth=float(data.get('depth') or 0.0),
        observations=[observation_from_dict(obs)
                      for obs in data.get('observations') or []],
        **kwargs,
    )


def contact_to_dict(contact: Contact) -> Dict[str, Any]:
    """Serialize a ``Contact`` to its JSON mapping."""
    return _drop_none({
        'uuid': contact.uuid,
        'label': contact.label,
        'latitude': contact.latitude,
        'longitude': contact.longitude,
        'depth': contact.depth,
        'observations': [observation_to_dict(obs)
                         for obs in contact.observations],
    })


def load_contact(filepath: Union[str, Path]) -> Contact:
    """Read a contact JSON file."""
    with open(filepath, 'r', encoding='utf-8') as f:
        return contact_from_dict(json.load(f))


def save_contact(contact: Contact, filepath: Union[str, Path]) -> None:
    """Write a contact JSON file."""
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(contact_to_dict(contact), f, indent=2)
