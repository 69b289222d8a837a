# -*- coding: utf-8 -*-
"""
Mosaic Layer - Paint and export a collection of sidescan rasters.

Holds one ``MosaicGate`` per raster and paints them in a stable order
given by each gate's ``sort_key`` (acquisition start time), so later
passes are drawn over earlier ones. Gates render independently; the layer
only orders them.

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
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Any, List, Optional, Protocol, Union

# sidescan internal
from sidescan.IO.catalog import RasterCatalog
from sidescan.render.gate import Graphics, MosaicGate, Viewport
from sidescan.vocabulary import GateState

logger = logging.getLogger(__name__)


class Orderable(Protocol):
    """Anything with a paint-order key."""

    @property
    def sort_key(self) -> Any:
        ...


class MosaicLayer:
    """
    Ordered collection of raster gates drawn as one map layer.

    Parameters
    ----------
    executor : Executor, optional
        Executor handed to gates created by ``from_catalog``.

    Examples
    --------
    >>> layer = MosaicLayer.from_catalog(RasterCatalog('/data/survey'))
    >>> states = layer.paint(graphics, viewport)
    """

    def __init__(self, executor: Optional[Executor] = None) -> None:
        self._executor = executor
        self._gates: List[MosaicGate] = []

    @classmethod
    def from_catalog(
        cls,
        catalog: RasterCatalog,
        executor: Optional[Executor] = None,
        **gate_kwargs,
    ) -> 'MosaicLayer':
        """Layer with one gate per valid raster in a catalog."""
        layer = cls(executor)
        for reader in catalog.open_all():
            layer.add(MosaicGate.from_reader(reader, executor=executor,
                                             **gate_kwargs))
        return layer

    @property
    def gates(self) -> List[MosaicGate]:
        """Gates in paint order."""
        return list(self._gates)

    def add(self, gate: MosaicGate) -> None:
        """Add a gate, keeping paint order."""
        self._gates.append(gate)
        self._gates.sort(key=_order)

    def remove(self, gate: MosaicGate) -> None:
        """Remove and close a gate."""
        self._gates.remove(gate)
        gate.close()

    def paint(self, graphics: Graphics, viewport: Viewport) -> List[GateState]:
        """Paint every gate in order.

        Returns
        -------
        List[GateState]
            State of each gate after painting, in paint order.
        """
        return [gate.paint(graphics, viewport) for gate in self._gates]

    def export(
        self,
        folder: Union[str, Path],
        resolution: float,
    ) -> List[Future]:
        """Write one PNG mosaic per raster into ``folder`` in the background.

        Returns
        -------
        List[Future]
            One future per raster, resolving to the written path.
        """
        folder = Path(folder)
        folder.mkdir(parents=True, exist_ok=True)
        futures = []
        for gate in self._gates:
            target = folder / (Path(gate.raster.filename).stem + '.png')
            futures.append(gate.export(target, resolution))
        logger.debug("Queued %d mosaic export(s) to %s", len(futures), folder)
        return futures

    def close(self) -> None:
        """Close all gates."""
        for gate in self._gates:
            gate.close()
        self._gates.clear()

    def __len__(self) -> int:
        return len(self._gates)


def _order(item: Orderable) -> Any:
    return item.sort_key
