"""Placement layer: decide what stands on every non-road cell.

Building zones pass a density gate and then face their first road neighbour
(N, E, S, W scan). Lots the gate leaves empty may get a tree instead. Park
cells get loosely clustered trees and the odd path. Assets are drawn from a
shuffle-bag per category so a category's assets are all used before any of
them repeats.

Two random streams are used. The density stream is consumed exactly once per
building-zone cell, so raising the density can only turn unbuilt lots into
built ones. Everything else draws from the asset stream.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from citylayout import config as defaults
from citylayout.generation.assets import (
    AssetCategory,
    AssetProvider,
    Footprint,
    require_assets,
)
from citylayout.generation.config import SelectionMode
from citylayout.generation.context import (
    ASSET_STREAM,
    DENSITY_STREAM,
    GenerationContext,
)
from citylayout.generation.errors import (
    DegenerateGeometryError,
    EmptyAssetCategoryError,
)
from citylayout.generation.grid import Direction, ZoneKind
from citylayout.generation.layer import GenerationLayer
from citylayout.generation.plan import UNIT_SCALE, PlacementCommand
from citylayout.types import Scale3, WorldPos
from citylayout.util.rng import RNG

logger = logging.getLogger(__name__)

BUILDING_CATEGORY_FOR_ZONE: dict[ZoneKind, AssetCategory] = {
    ZoneKind.RESIDENTIAL: AssetCategory.BUILDING_RESIDENTIAL,
    ZoneKind.COMMERCIAL: AssetCategory.BUILDING_COMMERCIAL,
    ZoneKind.INDUSTRIAL: AssetCategory.BUILDING_INDUSTRIAL,
}


class ShuffleBag[T]:
    """Draws every item once, in random order, before any item repeats.

    When the bag runs empty it is refilled with the full item list and
    shuffled (Fisher-Yates); draws pop from the front.
    """

    def __init__(self, items: Sequence[T], rng: RNG) -> None:
        self._items = list(items)
        self._rng = rng
        self._pending: list[T] = []

    def __len__(self) -> int:
        return len(self._pending)

    def draw(self) -> T:
        if not self._items:
            raise IndexError("draw from an empty ShuffleBag")
        if not self._pending:
            self._pending = list(self._items)
            self._rng.shuffle(self._pending)
        return self._pending.pop(0)


class AssetPicker:
    """Picks asset variant indices per category for one run."""

    def __init__(self, provider: AssetProvider, mode: SelectionMode, rng: RNG) -> None:
        self.provider = provider
        self.mode = mode
        self.rng = rng
        self._bags: dict[AssetCategory, ShuffleBag[int]] = {}

    def pick(self, category: AssetCategory) -> int:
        """Return a variant index for ``category``.

        Raises:
            EmptyAssetCategoryError: If the provider has no assets for it.
        """
        handles = require_assets(self.provider, category)
        if self.mode is SelectionMode.UNIFORM:
            return self.rng.randrange(len(handles))
        bag = self._bags.get(category)
        if bag is None:
            bag = ShuffleBag(range(len(handles)), self.rng)
            self._bags[category] = bag
        return bag.draw()


def fit_to_cell(
    target: WorldPos,
    rotation: float,
    footprint: Footprint,
    cell_size: float,
) -> tuple[WorldPos, Scale3]:
    """Centre a footprint on ``target`` and shrink it to fit inside a cell.

    The footprint is rotated about the vertical axis first. If its larger
    horizontal extent exceeds ``cell_size * 0.95`` it is scaled down
    uniformly; it is never scaled up.

    Returns:
        The pivot position that puts the footprint's centre on ``target``
        and the uniform scale to apply.

    Raises:
        DegenerateGeometryError: If the footprint is not finite and positive.
    """
    footprint.validate()

    theta = math.radians(rotation)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    size_x = abs(footprint.size_x * cos_t) + abs(footprint.size_z * sin_t)
    size_z = abs(footprint.size_x * sin_t) + abs(footprint.size_z * cos_t)
    center_x = footprint.center_x * cos_t + footprint.center_z * sin_t
    center_z = -footprint.center_x * sin_t + footprint.center_z * cos_t

    scale = 1.0
    max_dim = max(size_x, size_z)
    max_allowed = cell_size * defaults.FIT_TO_CELL_MARGIN
    if max_dim > max_allowed and max_dim > defaults.FIT_TO_CELL_MIN_SIZE:
        scale = max_allowed / max_dim

    x, y, z = target
    position = (x - center_x * scale, y, z - center_z * scale)
    return position, (scale, scale, scale)


class PlacementLayer(GenerationLayer):
    """Plans buildings and props for every non-road cell of the frozen grid."""

    def apply(self, ctx: GenerationContext) -> None:
        grid = ctx.grid
        density_rng = ctx.stream(DENSITY_STREAM)
        rng = ctx.stream(ASSET_STREAM)
        picker = AssetPicker(ctx.assets, ctx.config.selection, rng)

        for x in range(grid.width):
            for y in range(grid.height):
                zone = grid.zone_at(x, y)
                if zone.is_buildable:
                    self._place_lot(ctx, picker, density_rng, rng, x, y, zone)
                elif zone is ZoneKind.PARK:
                    self._place_park(ctx, picker, rng, x, y)

        placed = sum(len(cmds) for cmds in ctx.cell_commands.values())
        logger.debug(f"Planned {placed} placements on {len(ctx.cell_commands)} cells")

    def _place_lot(
        self,
        ctx: GenerationContext,
        picker: AssetPicker,
        density_rng: RNG,
        rng: RNG,
        x: int,
        y: int,
        zone: ZoneKind,
    ) -> None:
        cfg = ctx.config
        roll = density_rng.random()
        facing = ctx.grid.facing_road(x, y)
        has_frontage = facing is not None or not cfg.require_road_frontage

        if roll < cfg.density and has_frontage:
            self._place_building(ctx, picker, rng, x, y, zone, facing)
        elif rng.random() < cfg.fallback_tree_chance:
            rotation = rng.randrange(4) * 90.0
            self._emit(
                ctx,
                picker,
                (x, y),
                AssetCategory.TREE,
                ctx.world_position(x, y),
                rotation,
                "Tree",
                fit=cfg.fit_to_cell,
            )

    def _place_building(
        self,
        ctx: GenerationContext,
        picker: AssetPicker,
        rng: RNG,
        x: int,
        y: int,
        zone: ZoneKind,
        facing: Direction | None,
    ) -> None:
        cfg = ctx.config
        category = BUILDING_CATEGORY_FOR_ZONE[zone]
        centre = ctx.world_position(x, y)
        rotation = facing.angle if facing is not None else rng.randrange(4) * 90.0

        position = centre
        if facing is not None and cfg.setback > 0:
            position = _push_back(centre, facing, cfg.setback * cfg.cell_size)

        placed = self._emit(
            ctx,
            picker,
            (x, y),
            category,
            position,
            rotation,
            zone.name.title(),
            fit=cfg.fit_to_cell,
        )
        if not placed or facing is None or cfg.driveway_chance <= 0:
            return
        if rng.random() < cfg.driveway_chance:
            self._emit(
                ctx, picker, (x, y), AssetCategory.PATH, centre, rotation, "Path"
            )

    def _place_park(
        self, ctx: GenerationContext, picker: AssetPicker, rng: RNG, x: int, y: int
    ) -> None:
        cfg = ctx.config
        if rng.random() < cfg.park_tree_chance:
            jitter = defaults.PARK_TREE_JITTER * cfg.cell_size
            cx, cy, cz = ctx.world_position(x, y)
            position = (
                cx + rng.uniform(-jitter, jitter),
                cy,
                cz + rng.uniform(-jitter, jitter),
            )
            rotation = rng.uniform(0.0, 360.0)
            self._emit(
                ctx, picker, (x, y), AssetCategory.TREE, position, rotation, "Tree"
            )
        elif rng.random() < cfg.park_path_chance:
            rotation = rng.randrange(4) * 90.0
            position = ctx.world_position(x, y)
            self._emit(
                ctx, picker, (x, y), AssetCategory.PATH, position, rotation, "Path"
            )

    def _emit(
        self,
        ctx: GenerationContext,
        picker: AssetPicker,
        cell: tuple[int, int],
        category: AssetCategory,
        position: WorldPos,
        rotation: float,
        label: str,
        fit: bool = False,
    ) -> bool:
        """Pick an asset and record the command. Returns False if skipped."""
        try:
            variant = picker.pick(category)
        except EmptyAssetCategoryError:
            ctx.skipped[category] += 1
            return False

        offset = ctx.config.rotation_offsets.for_category(category)
        rotation = (rotation + offset) % 360

        scale = UNIT_SCALE
        if fit:
            position, scale = _fitted(ctx, category, variant, position, rotation)

        ctx.add_cell_command(
            cell,
            PlacementCommand(
                category=category,
                variant=variant,
                position=position,
                rotation=rotation,
                label=label,
                scale=scale,
            ),
        )
        return True


def _push_back(position: WorldPos, facing: Direction, distance: float) -> WorldPos:
    """Move ``position`` ``distance`` away from the road in ``facing``."""
    dx, dz = facing.offset
    x, y, z = position
    return (x - dx * distance, y, z - dz * distance)


def _fitted(
    ctx: GenerationContext,
    category: AssetCategory,
    variant: int,
    position: WorldPos,
    rotation: float,
) -> tuple[WorldPos, Scale3]:
    handle = ctx.assets.assets(category)[variant]
    footprint = ctx.assets.footprint(handle)
    if footprint is None:
        return position, UNIT_SCALE
    try:
        return fit_to_cell(position, rotation, footprint, ctx.config.cell_size)
    except DegenerateGeometryError as e:
        logger.debug(f"Placing {handle!r} unscaled: {e}")
        return position, UNIT_SCALE

