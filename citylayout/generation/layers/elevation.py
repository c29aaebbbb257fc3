"""Elevation layer: raise flat plateau "hills" on the zoned grid.

Hills are discs stamped at ``max_elevation``. There is no smoothing; the
road resolver turns each road edge that climbs one level into a slant tile
and the engine stacks foundation columns under raised cells.
"""

from __future__ import annotations

import logging

import numpy as np

from citylayout import config as defaults
from citylayout.generation.context import ELEVATION_STREAM, GenerationContext
from citylayout.generation.layer import GenerationLayer
from citylayout.util.rng import RNG

logger = logging.getLogger(__name__)


def hill_count(width: int, height: int, frequency: float) -> int:
    """Number of hills for a grid, rounded half-to-even like ``round``."""
    return round(width * height / defaults.HILL_AREA_PER_HILL * frequency)


def _hill_center(extent: int, rng: RNG) -> int:
    margin = defaults.HILL_MARGIN
    if extent - margin > margin:
        return rng.randrange(margin, extent - margin)
    return margin


def stamp_hill(
    elevation: np.ndarray, cx: int, cy: int, radius: int, level: int
) -> None:
    """Set every cell within Euclidean ``radius`` of (cx, cy) to ``level``."""
    width, height = elevation.shape
    xs = np.arange(width)[:, np.newaxis]
    ys = np.arange(height)[np.newaxis, :]
    mask = (xs - cx) ** 2 + (ys - cy) ** 2 <= radius * radius
    elevation[mask] = level


class ElevationLayer(GenerationLayer):
    """Drops hills on strategies that model elevation.

    Draw order per hill: centre x, centre y, radius. Nothing is drawn when the
    run is not elevation-aware, so toggling elevation never shifts the other
    streams.
    """

    writes_grid = True

    def apply(self, ctx: GenerationContext) -> None:
        cfg = ctx.config
        if not cfg.elevation_aware:
            logger.debug("Elevation disabled for this run")
            return

        grid = ctx.grid
        rng = ctx.stream(ELEVATION_STREAM)
        count = hill_count(grid.width, grid.height, cfg.hill_frequency)

        for _ in range(count):
            cx = _hill_center(grid.width, rng)
            cy = _hill_center(grid.height, rng)
            radius = rng.randrange(defaults.HILL_MIN_RADIUS, defaults.HILL_MAX_RADIUS)
            stamp_hill(grid.elevation, cx, cy, radius, cfg.max_elevation)

        raised = int(np.count_nonzero(grid.elevation))
        logger.debug(f"Elevation: {count} hills raised {raised} cells")
