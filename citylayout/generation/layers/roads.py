"""Road topology layer: pick a tile and rotation for every road cell.

Each road cell is classified by which of its four neighbours are also road.
The flags form a 4-bit mask (N=1, E=2, S=4, W=8) looked up in
ROAD_TILE_TABLE. On elevation-aware runs a road that climbs to a higher road
neighbour becomes a slant tile instead, whatever its junction shape.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import NamedTuple

import numpy as np

from citylayout.generation.assets import AssetCategory, require_assets
from citylayout.generation.config import DeadEndStyle, RotationOffsets
from citylayout.generation.context import GenerationContext
from citylayout.generation.errors import EmptyAssetCategoryError
from citylayout.generation.grid import DIRECTIONS, Direction, ZoneKind
from citylayout.generation.layer import GenerationLayer
from citylayout.generation.plan import PlacementCommand

logger = logging.getLogger(__name__)

ROAD_LABEL = "Road"


class RoadTile(NamedTuple):
    category: AssetCategory
    rotation: float


def road_mask(n: bool, e: bool, s: bool, w: bool) -> int:
    """Pack neighbour-is-road flags into a bitmask."""
    return int(bool(n)) | int(bool(e)) << 1 | int(bool(s)) << 2 | int(bool(w)) << 3


_STRAIGHT = AssetCategory.ROAD_STRAIGHT
_CORNER = AssetCategory.ROAD_CORNER
_T = AssetCategory.ROAD_T
_CROSS = AssetCategory.ROAD_CROSS
_END = AssetCategory.ROAD_END

# Base tile for every neighbour combination. Dead ends face their one road
# neighbour; T rotations are keyed by the missing leg.
ROAD_TILE_TABLE: dict[int, RoadTile] = {
    0b0000: RoadTile(_STRAIGHT, 0.0),
    0b0001: RoadTile(_END, 0.0),  # N
    0b0010: RoadTile(_END, 90.0),  # E
    0b0100: RoadTile(_END, 180.0),  # S
    0b1000: RoadTile(_END, 270.0),  # W
    0b0101: RoadTile(_STRAIGHT, 0.0),  # N S
    0b1010: RoadTile(_STRAIGHT, 90.0),  # E W
    0b0011: RoadTile(_CORNER, 0.0),  # N E
    0b0110: RoadTile(_CORNER, 90.0),  # E S
    0b1100: RoadTile(_CORNER, 180.0),  # S W
    0b1001: RoadTile(_CORNER, 270.0),  # W N
    0b1110: RoadTile(_T, 270.0),  # missing N
    0b1101: RoadTile(_T, 180.0),  # missing E
    0b1011: RoadTile(_T, 90.0),  # missing S
    0b0111: RoadTile(_T, 0.0),  # missing W
    0b1111: RoadTile(_CROSS, 0.0),
}


def resolve_road_tile(
    n: bool,
    e: bool,
    s: bool,
    w: bool,
    dead_end_style: DeadEndStyle = DeadEndStyle.END,
) -> RoadTile:
    """Tile category and base rotation for a flat road cell.

    Args:
        n, e, s, w: Whether the neighbour in each direction is road.
        dead_end_style: STRAIGHT reuses the straight tile for dead ends,
            keeping the rotation that faces the open side.
    """
    tile = ROAD_TILE_TABLE[road_mask(n, e, s, w)]
    if tile.category is _END and dead_end_style is DeadEndStyle.STRAIGHT:
        return RoadTile(_STRAIGHT, tile.rotation)
    return tile


def slope_direction(
    elevation: int, road_neighbor_elevations: Mapping[Direction, int | None]
) -> Direction | None:
    """First direction, in N, E, S, W order, whose road neighbour is higher.

    Args:
        elevation: The road cell's own elevation.
        road_neighbor_elevations: Elevation of each road neighbour, or None
            where the neighbour is not road or off the grid.
    """
    for direction in DIRECTIONS:
        other = road_neighbor_elevations.get(direction)
        if other is not None and other > elevation:
            return direction
    return None


def final_rotation(tile: RoadTile, offsets: RotationOffsets) -> float:
    return (tile.rotation + offsets.for_category(tile.category)) % 360


class RoadTopologyLayer(GenerationLayer):
    """Resolves every road cell of the frozen grid into one road command."""

    def apply(self, ctx: GenerationContext) -> None:
        grid = ctx.grid
        cfg = ctx.config
        slopes = cfg.elevation_aware
        resolved = 0

        # argwhere yields cells in x-major order
        for x, y in np.argwhere(grid.zones == ZoneKind.ROAD):
            x, y = int(x), int(y)
            elevation = int(grid.elevation[x, y])
            label = ROAD_LABEL

            direction = None
            if slopes:
                direction = slope_direction(
                    elevation, self._road_neighbor_elevations(ctx, x, y)
                )

            if direction is not None:
                tile = RoadTile(AssetCategory.ROAD_SLANT, direction.angle)
                label = f"Slant_{direction.name}"
            else:
                flags = grid.road_neighbors(x, y)
                tile = resolve_road_tile(
                    flags[Direction.N],
                    flags[Direction.E],
                    flags[Direction.S],
                    flags[Direction.W],
                    cfg.dead_end_style,
                )

            try:
                require_assets(ctx.assets, tile.category)
            except EmptyAssetCategoryError:
                ctx.skipped[tile.category] += 1
                continue

            ctx.road_commands[(x, y)] = PlacementCommand(
                category=tile.category,
                variant=0,
                position=ctx.world_position(x, y, elevation),
                rotation=final_rotation(tile, cfg.rotation_offsets),
                label=label,
            )
            resolved += 1

        logger.debug(f"Resolved {resolved} road tiles")

    @staticmethod
    def _road_neighbor_elevations(
        ctx: GenerationContext, x: int, y: int
    ) -> dict[Direction, int | None]:
        result: dict[Direction, int | None] = {}
        for direction in DIRECTIONS:
            dx, dy = direction.offset
            if ctx.grid.is_road(x + dx, y + dy):
                result[direction] = int(ctx.grid.elevation[x + dx, y + dy])
            else:
                result[direction] = None
        return result
