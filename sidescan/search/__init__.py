# -*- coding: utf-8 -*-
"""
Search Module - Reacquisition of point targets in sidescan rasters.

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

from sidescan.search.correlation import (
    DEFAULT_ACCEPTANCE_DISTANCE,
    DEFAULT_EXCLUDE_WINDOW,
    DEFAULT_SKIP_SAMPLES,
    Match,
    ReacquisitionSearch,
    find_closest_sample,
    find_min_column,
    find_reacquisitions,
    generate_observations,
    search_folder,
    search_rasters,
)

__all__ = [
    'DEFAULT_ACCEPTANCE_DISTANCE',
    'DEFAULT_EXCLUDE_WINDOW',
    'DEFAULT_SKIP_SAMPLES',
    'Match',
    'ReacquisitionSearch',
    'find_min_column',
    'find_closest_sample',
    'find_reacquisitions',
    'search_rasters',
    'generate_observations',
    'search_folder',
]
