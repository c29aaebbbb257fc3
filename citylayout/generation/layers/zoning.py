"""Zoning layers: partition the grid into road-bordered, zoned blocks.

Two interchangeable strategies:
- BSPZoningLayer: recursive binary space partition into irregular blocks.
  Every leaf's border ring becomes road and its interior gets one zone.
- LatticeZoningLayer: randomly spaced full-length road lines on both axes,
  with zones from a smooth noise field so neighbouring blocks blend.
"""

from __future__ import annotations

import logging
from collections import deque

import numpy as np
import tcod.noise

from citylayout import config as defaults
from citylayout.generation.config import ZoningStrategy
from citylayout.generation.context import ZONING_STREAM, Block, GenerationContext
from citylayout.generation.grid import ZoneKind
from citylayout.generation.layer import GenerationLayer
from citylayout.util.coordinates import Rect
from citylayout.util.rng import RNG, derive_seed

logger = logging.getLogger(__name__)

# Cumulative thresholds for the zone a BSP leaf receives; the rest is EMPTY
LEAF_ZONE_THRESHOLDS: tuple[tuple[float, ZoneKind], ...] = (
    (0.45, ZoneKind.RESIDENTIAL),
    (0.70, ZoneKind.COMMERCIAL),
    (0.85, ZoneKind.INDUSTRIAL),
    (0.95, ZoneKind.PARK),
)


def zone_for_roll(roll: float) -> ZoneKind:
    """Map a uniform roll in [0, 1) to a leaf zone."""
    for threshold, zone in LEAF_ZONE_THRESHOLDS:
        if roll < threshold:
            return zone
    return ZoneKind.EMPTY


# =============================================================================
# BSP
# =============================================================================


def split_rect(rect: Rect, min_size: int, rng: RNG) -> tuple[Rect, Rect] | None:
    """Try to cut a rect in two, each side at least ``min_size`` long.

    The cut direction is a coin flip unless the rect is elongated, in which
    case the long side is always cut so children tend toward squares. The
    coin is drawn even when the aspect ratio overrides it.

    Returns:
        The two halves, or None if the chosen side is too short to cut.
    """
    w, h = rect.width, rect.height
    cut_horizontal = rng.random() > 0.5

    ratio = defaults.BSP_ASPECT_SPLIT_RATIO
    if w > h and w / h >= ratio:
        cut_horizontal = False
    elif h > w and h / w >= ratio:
        cut_horizontal = True

    side = h if cut_horizontal else w
    upper = side - min_size
    if upper <= min_size:
        return None

    cut = rng.randrange(min_size, upper)
    if cut_horizontal:
        return (
            Rect(rect.x1, rect.y1, w, cut),
            Rect(rect.x1, rect.y1 + cut, w, h - cut),
        )
    return (
        Rect(rect.x1, rect.y1, cut, h),
        Rect(rect.x1 + cut, rect.y1, w - cut, h),
    )


def partition(root: Rect, min_size: int, max_size: int, rng: RNG) -> list[Block]:
    """Breadth-first BSP of ``root`` into zoned leaf blocks.

    Draw order per node: the early-stop roll (only when the node already fits
    within ``max_size``), then the split (coin, cut position), then the leaf
    zone roll if the node is a leaf.
    """
    leaves: list[Block] = []
    queue: deque[Rect] = deque([root])

    while queue:
        node = queue.popleft()

        try_split = True
        if node.width <= max_size and node.height <= max_size:
            # Keeps splitting with chance 0.7; a roll above it stops here
            if rng.random() > defaults.BSP_CONTINUE_SPLIT_CHANCE:
                try_split = False

        children = split_rect(node, min_size, rng) if try_split else None
        if children is not None:
            queue.extend(children)
        else:
            leaves.append(Block(bounds=node, zone=zone_for_roll(rng.random())))

    return leaves


class BSPZoningLayer(GenerationLayer):
    """Zones the grid with a binary space partition.

    Leaves exactly tile the grid. Each leaf's outermost ring of cells is
    stamped ROAD, so adjacent leaves share a double-width road along their
    common edge and the grid border is always road.
    """

    writes_grid = True

    def __init__(
        self,
        min_block_size: int | None = None,
        max_block_size: int | None = None,
    ) -> None:
        """Initialize the BSP zoning layer.

        Args:
            min_block_size: Smallest leaf side. Defaults to the config's.
            max_block_size: Leaf size below which splitting becomes optional.
                Defaults to the config's.
        """
        self.min_block_size = min_block_size
        self.max_block_size = max_block_size

    def apply(self, ctx: GenerationContext) -> None:
        grid = ctx.grid
        min_size = self.min_block_size or ctx.config.min_block_size
        max_size = self.max_block_size or ctx.config.max_block_size

        root = Rect(0, 0, grid.width, grid.height)
        blocks = partition(root, min_size, max_size, ctx.stream(ZONING_STREAM))

        for block in blocks:
            b = block.bounds
            grid.zones[b.x1 : b.x2, b.y1 : b.y2] = ZoneKind.ROAD
            if b.width > 2 and b.height > 2:
                grid.zones[b.x1 + 1 : b.x2 - 1, b.y1 + 1 : b.y2 - 1] = block.zone

        ctx.blocks = blocks
        logger.debug(f"BSP zoning produced {len(blocks)} blocks")


# =============================================================================
# LATTICE
# =============================================================================


def road_lines(extent: int, min_step: int, max_step: int, rng: RNG) -> list[int]:
    """Road line indices along one axis, sorted.

    Starts at 0 and advances by a random step in [min_step, max_step] until
    it passes the far edge. The last index is always a road line.
    """
    lines: set[int] = set()
    current = 0
    while current < extent:
        lines.add(current)
        current += rng.randint(min_step, max_step)
    lines.add(extent - 1)
    return sorted(lines)


def noise_offset(seed: int) -> float:
    """Deterministic sample-space offset for the zoning noise field."""
    return (derive_seed(seed, "city.noise.offset") % 10_000) * 0.1


def sample_zone_field(width: int, height: int, scale: float, seed: int) -> np.ndarray:
    """Sample the zoning noise field at (x * scale + offset, y * scale + offset).

    Returns:
        Array of shape (width, height) with values in [0, 1].
    """
    noise = tcod.noise.Noise(
        dimensions=2,
        algorithm=tcod.noise.Algorithm.SIMPLEX,
        implementation=tcod.noise.Implementation.SIMPLE,
        seed=derive_seed(seed, "city.noise"),
    )
    offset = noise_offset(seed)
    sample_grid = tcod.noise.grid(
        shape=(width, height),
        scale=scale,
        origin=(offset, offset),
        indexing="ij",
    )
    # Simplex output is in [-1, 1]
    field = (noise[sample_grid] + 1.0) * 0.5
    return np.clip(field, 0.0, 1.0)


def zones_from_field(field: np.ndarray) -> np.ndarray:
    """Bucket noise samples into RESIDENTIAL / COMMERCIAL / INDUSTRIAL."""
    zones = np.full(field.shape, ZoneKind.RESIDENTIAL, dtype=np.uint8)
    zones[field > defaults.NOISE_COMMERCIAL_THRESHOLD] = ZoneKind.COMMERCIAL
    zones[field > defaults.NOISE_INDUSTRIAL_THRESHOLD] = ZoneKind.INDUSTRIAL
    return zones


class LatticeZoningLayer(GenerationLayer):
    """Zones the grid with a lattice of roads and a noise-driven zone field.

    Every cell on a road line is ROAD. The field is sampled for every cell so
    that the zone pattern does not depend on where the road lines fall.
    """

    writes_grid = True

    def __init__(self, noise_scale: float | None = None) -> None:
        """Initialize the lattice zoning layer.

        Args:
            noise_scale: Noise sample step per cell. Defaults to the config's.
        """
        self.noise_scale = noise_scale

    def apply(self, ctx: GenerationContext) -> None:
        grid = ctx.grid
        cfg = ctx.config
        rng = ctx.stream(ZONING_STREAM)
        scale = self.noise_scale if self.noise_scale is not None else cfg.noise_scale

        xs = road_lines(grid.width, cfg.min_block_size, cfg.max_block_size, rng)
        ys = road_lines(grid.height, cfg.min_block_size, cfg.max_block_size, rng)

        zones = zones_from_field(
            sample_zone_field(grid.width, grid.height, scale, cfg.seed)
        )
        zones[xs, :] = ZoneKind.ROAD
        zones[:, ys] = ZoneKind.ROAD
        grid.zones[:, :] = zones

        ctx.road_lines_x = xs
        ctx.road_lines_y = ys
        logger.debug(f"Lattice zoning: road lines x={xs} y={ys}")


def create_zoning_layer(strategy: ZoningStrategy) -> GenerationLayer:
    """Return the zoning layer implementing ``strategy``."""
    match strategy:
        case ZoningStrategy.BSP:
            return BSPZoningLayer()
        case ZoningStrategy.LATTICE:
            return LatticeZoningLayer()
    raise ValueError(f"Unknown zoning strategy: {strategy!r}")
