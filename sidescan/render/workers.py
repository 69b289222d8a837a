# -*- coding: utf-8 -*-
"""
Background Workers - Shared bounded thread pool for mosaic builds and exports.

Mosaic builds and batch exports run on a small process-wide thread pool so
the render thread never blocks. numpy and pyproj release the GIL in their
inner loops, which keeps a thread pool effective for these jobs.

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
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

_executor: Optional[ThreadPoolExecutor] = None
_lock = threading.Lock()


def default_worker_count() -> int:
    """Two workers, or all but two CPUs on machines with more than four."""
    cpus = os.cpu_count() or 1
    return cpus - 2 if cpus > 4 else 2


def get_executor() -> ThreadPoolExecutor:
    """Shared executor, created on first use."""
    global _executor
    with _lock:
        if _executor is None:
            workers = default_worker_count()
            _executor = ThreadPoolExecutor(
                max_workers=workers, thread_name_prefix='sidescan-worker'
            )
            logger.debug("Started background pool with %d workers", workers)
        return _executor


def background(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
    """Run ``fn(*args, **kwargs)`` on the shared executor."""
    return get_executor().submit(fn, *args, **kwargs)


def shutdown(wait: bool = True) -> None:
    """Shut down the shared executor; a later call to ``background``
    starts a new one."""
    global _executor
    with _lock:
        executor, _executor = _executor, None
    if executor is not None:
        executor.shutdown(wait=wait, cancel_futures=True)
