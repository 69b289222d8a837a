# -*- coding: utf-8 -*-
"""
Render Gate - Per-raster visibility and mosaic lifecycle for map display.

A ``MosaicGate`` decides on every paint request what to draw for one
raster: nothing when it is off screen, its footprint outline when zoomed
out, or its mosaic when zoomed in. Mosaics are built in the background at
the viewport's ground resolution; until a build at the current resolution
completes, the outline is drawn as a placeholder.

The gate's state is owned by the thread that calls ``paint`` and
``close``. Background builds never touch it: finished builds are committed
on the next paint, and builds whose cancel token was set in the meantime
are discarded.

The map widget is external. It is described here by the ``Viewport`` and
``Graphics`` protocols.

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
from concurrent.futures import Executor, Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Protocol, Sequence, Tuple, Union

# Third-party
import numpy as np

# sidescan internal
from sidescan.exceptions import (
    DegenerateGeometryError,
    ImageUnavailableError,
    MalformedRasterError,
    MosaicCancelled,
)
from sidescan.geolocation.footprint import Footprint, footprint
from sidescan.IO.base import ImageReader
from sidescan.IO.models import Raster
from sidescan.mosaic.compositor import (
    CancelToken,
    Mosaic,
    build_mosaic,
    preview_step,
)
from sidescan.render.workers import background
from sidescan.vocabulary import GateState

logger = logging.getLogger(__name__)

MIN_MOSAIC_RESOLUTION = 2
MAX_MOSAIC_RESOLUTION = 20

Builder = Callable[..., Mosaic]


class Viewport(Protocol):
    """Map viewport supplied by the map widget."""

    @property
    def pixels_per_meter(self) -> float:
        """Current zoom as screen pixels per ground meter."""
        ...

    def visible_bounds(self) -> Tuple[float, float, float, float]:
        """(min_lon, min_lat, max_lon, max_lat) currently on screen."""
        ...

    def latlon_to_screen(self, lat: float, lon: float) -> Tuple[float, float]:
        """Screen (x, y) of a geographic point."""
        ...


class Graphics(Protocol):
    """Drawing surface supplied by the map widget."""

    def draw_polygon(self, points: Sequence[Tuple[float, float]]) -> None:
        ...

    def draw_image(self, data: np.ndarray, x: float, y: float,
                   scale: float) -> None:
        ...


class MosaicGate:
    """
    Visibility gate and mosaic cache for one displayed raster.

    Parameters
    ----------
    raster : Raster
        Raster to display.
    image_loader : Callable[[], np.ndarray]
        Returns the sample-ordered image; called on a worker thread.
    executor : Executor, optional
        Where builds run. Defaults to the shared background pool.
    builder : Callable, default=build_mosaic
        ``builder(raster, image, resolution, cancel_token, step=...)``.
    min_resolution : int, default=2
        Below this many pixels per meter only the outline is drawn.
    max_resolution : int, default=20
        Mosaics are never built finer than this.
    preview : bool, default=True
        Stride scanlines to about one per canvas pixel.
    on_ready : Callable[[], None], optional
        Called from the worker thread when a build finishes, typically
        to request a repaint.

    Examples
    --------
    >>> gate = MosaicGate.from_reader(reader, on_ready=map_widget.repaint)
    >>> gate.paint(graphics, viewport)
    <GateState.MOSAIC_PENDING: 'mosaic_pending'>
    """

    def __init__(
        self,
        raster: Raster,
        image_loader: Callable[[], np.ndarray],
        executor: Optional[Executor] = None,
        builder: Builder = build_mosaic,
        min_resolution: int = MIN_MOSAIC_RESOLUTION,
        max_resolution: int = MAX_MOSAIC_RESOLUTION,
        preview: bool = True,
        on_ready: Optional[Callable[[], None]] = None,
    ) -> None:
        if min_resolution < 1:
            raise ValueError(
                f"min_resolution must be >= 1, got {min_resolution}"
            )
        if max_resolution < min_resolution:
            raise ValueError(
                f"max_resolution ({max_resolution}) must be >= "
                f"min_resolution ({min_resolution})"
            )

        self.raster = raster
        self._image_loader = image_loader
        self._executor = executor
        self._builder = builder
        self.min_resolution = min_resolution
        self.max_resolution = max_resolution
        self.preview = preview
        self._on_ready = on_ready

        try:
            self._footprint: Optional[Footprint] = footprint(raster)
        except DegenerateGeometryError as e:
            logger.debug("No footprint for %s: %s", raster.filename, e)
            self._footprint = None

        self._state = GateState.HIDDEN
        self._mosaic: Optional[Mosaic] = None
        self._pending: Optional[Future] = None
        self._pending_token: Optional[CancelToken] = None
        self._pending_resolution: Optional[int] = None
        self._failed_resolution: Optional[int] = None

    @classmethod
    def from_reader(cls, reader: ImageReader, **kwargs) -> 'MosaicGate':
        """Gate for a raster reader; pixels are read on first build."""
        return cls(reader.metadata, reader.read_full, **kwargs)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def footprint(self) -> Optional[Footprint]:
        """Cached footprint, None for degenerate rasters."""
        return self._footprint

    @property
    def mosaic(self) -> Optional[Mosaic]:
        """Committed mosaic, only set in ``MOSAIC_READY``."""
        return self._mosaic

    @property
    def pending_resolution(self) -> Optional[int]:
        return self._pending_resolution

    @property
    def sort_key(self) -> datetime:
        """Paint order key: acquisition start time."""
        return self.raster.start_time

    def resolution_for(self, viewport: Viewport) -> int:
        """Mosaic resolution, in pixels per meter, for a viewport."""
        return min(self.max_resolution, int(viewport.pixels_per_meter))

    # ------------------------------------------------------------------
    # Build lifecycle
    # ------------------------------------------------------------------

    def _run_build(self, token: CancelToken, resolution: int) -> Mosaic:
        token.raise_if_cancelled()
        image = self._image_loader()
        step = preview_step(self.raster, resolution) if self.preview else 1
        return self._builder(self.raster, image, resolution, token, step=step)

    def _dispatch(self, fn: Callable, *args) -> Future:
        if self._executor is None:
            return background(fn, *args)
        return self._executor.submit(fn, *args)

    def _submit(self, resolution: int) -> None:
        token = CancelToken()
        future = self._dispatch(self._run_build, token, resolution)
        if self._on_ready is not None:
            callback = self._on_ready
            future.add_done_callback(lambda _f: callback())
        self._pending = future
        self._pending_token = token
        self._pending_resolution = resolution
        logger.debug("Submitted mosaic build of %s at %d px/m",
                     self.raster.filename, resolution)

    def _cancel_pending(self) -> None:
        if self._pending_token is not None:
            self._pending_token.cancel()
            logger.debug("Cancelled mosaic build of %s at %d px/m",
                         self.raster.filename, self._pending_resolution)
        self._pending = None
        self._pending_token = None
        self._pending_resolution = None

    def _release(self) -> None:
        self._mosaic = None

    def _build_failed(self, resolution: int, error: Exception) -> None:
        """Fall back to the outline and do not retry this resolution."""
        warnings.warn(
            f"Cannot build mosaic of {self.raster.filename}: {error}",
            UserWarning,
            stacklevel=4,
        )
        self._failed_resolution = resolution
        self._state = GateState.FOOTPRINT

    def _poll(self) -> None:
        """Commit a finished build, or discard it if it was superseded."""
        future = self._pending
        if future is None or not future.done():
            return

        token = self._pending_token
        resolution = self._pending_resolution
        self._pending = None
        self._pending_token = None
        self._pending_resolution = None
        if token.cancelled or future.cancelled():
            return

        try:
            mosaic = future.result()
        except MosaicCancelled:
            return
        except (ImageUnavailableError, MalformedRasterError) as e:
            self._build_failed(resolution, e)
            return
        except Exception as e:
            # Worker failures must not escape paint() on the render thread
            logger.exception("Mosaic build of %s at %d px/m failed",
                             self.raster.filename, resolution)
            self._build_failed(resolution, e)
            return

        self._mosaic = mosaic
        self._failed_resolution = None
        self._state = GateState.MOSAIC_READY
        logger.debug("Mosaic of %s ready at %d px/m",
                     self.raster.filename, resolution)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the pending build (if any) finishes.

        Returns
        -------
        bool
            False if the build is still running after ``timeout``.
        """
        future = self._pending
        if future is None:
            return True
        try:
            future.exception(timeout=timeout)
        except FutureTimeoutError:
            return False
        return True

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def _draw_outline(self, graphics: Graphics, viewport: Viewport) -> None:
        points = [viewport.latlon_to_screen(v.lat, v.lon)
                  for v in self._footprint.vertices]
        graphics.draw_polygon(points)

    def _draw_mosaic(self, graphics: Graphics, viewport: Viewport) -> None:
        mosaic = self._mosaic
        nw = mosaic.grid.north_west
        x, y = viewport.latlon_to_screen(nw.lat, nw.lon)
        scale = viewport.pixels_per_meter / mosaic.resolution
        graphics.draw_image(mosaic.data, x, y, scale)

    def paint(self, graphics: Graphics, viewport: Viewport) -> GateState:
        """
        Draw the raster for the current viewport.

        Parameters
        ----------
        graphics : Graphics
            Drawing surface.
        viewport : Viewport
            Current map viewport.

        Returns
        -------
        GateState
            State after this paint.
        """
        self._poll()

        if self._footprint is None:
            self._state = GateState.HIDDEN
            return self._state

        if not self._footprint.intersects(viewport.visible_bounds()):
            if self._state is not GateState.HIDDEN:
                logger.debug("%s left the viewport", self.raster.filename)
            self._cancel_pending()
            self._release()
            self._state = GateState.HIDDEN
            return self._state

        resolution = self.resolution_for(viewport)
        if resolution < self.min_resolution:
            self._cancel_pending()
            self._release()
            self._state = GateState.FOOTPRINT
            self._draw_outline(graphics, viewport)
            return self._state

        if (self._state is GateState.MOSAIC_READY
                and self._mosaic is not None
                and self._mosaic.resolution == resolution):
            self._draw_mosaic(graphics, viewport)
            return self._state

        if self._pending is not None and self._pending_resolution == resolution:
            self._state = GateState.MOSAIC_PENDING
        elif self._failed_resolution == resolution:
            self._state = GateState.FOOTPRINT
        else:
            self._cancel_pending()
            self._release()
            self._submit(resolution)
            self._state = GateState.MOSAIC_PENDING

        self._draw_outline(graphics, viewport)
        return self._state

    # ------------------------------------------------------------------
    # Export and teardown
    # ------------------------------------------------------------------

    def export(self, filepath: Union[str, Path], resolution: float) -> Future:
        """Build a full-density mosaic in the background and save it as PNG.

        Returns
        -------
        Future
            Resolves to the written path.
        """
        def job() -> Path:
            mosaic = build_mosaic(self.raster, self._image_loader(), resolution)
            mosaic.save_png(filepath)
            logger.debug("Exported %s to %s", self.raster.filename, filepath)
            return Path(filepath)

        return self._dispatch(job)

    def close(self) -> None:
        """Cancel any build and release the mosaic."""
        self._cancel_pending()
        self._release()
        self._state = GateState.HIDDEN

    def __repr__(self) -> str:
        return f"MosaicGate({self.raster.filename!r}, state={self._state.name})"
