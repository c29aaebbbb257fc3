"""The shared cell grid that every generation stage reads and writes.

Zones and elevations are stored as two numpy arrays of shape (width, height),
indexed ``[x, y]`` like the rest of the pipeline. Zoning and elevation write
into the arrays; after that the grid is frozen and every later stage only
reads it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

import numpy as np

from citylayout.types import CellCoord, CellOffset

from .config import ELEVATION_DTYPE, CityConfig


class ZoneKind(IntEnum):
    EMPTY = 0
    ROAD = 1
    RESIDENTIAL = 2
    COMMERCIAL = 3
    INDUSTRIAL = 4
    PARK = 5  # BSP strategy only

    @property
    def is_buildable(self) -> bool:
        return self in (ZoneKind.RESIDENTIAL, ZoneKind.COMMERCIAL, ZoneKind.INDUSTRIAL)


class Direction(Enum):
    """Cardinal directions in scan order. North is +y."""

    N = (0, 1)
    E = (1, 0)
    S = (0, -1)
    W = (-1, 0)

    @property
    def offset(self) -> CellOffset:
        return self.value

    @property
    def angle(self) -> float:
        """Rotation in degrees that faces this direction."""
        return _DIRECTION_ANGLES[self]


_DIRECTION_ANGLES = {
    Direction.N: 0.0,
    Direction.E: 90.0,
    Direction.S: 180.0,
    Direction.W: 270.0,
}

# Fixed scan order for neighbour checks
DIRECTIONS: tuple[Direction, ...] = (Direction.N, Direction.E, Direction.S, Direction.W)


@dataclass(frozen=True)
class Cell:
    zone: ZoneKind
    elevation: int = 0


class Grid:
    """Fixed-size 2D array of cells.

    Attributes:
        width: Grid width in cells.
        height: Grid height in cells.
        zones: ZoneKind values, shape (width, height).
        elevation: Elevation levels, shape (width, height).
    """

    def __init__(self, width: CellCoord, height: CellCoord) -> None:
        self.width = width
        self.height = height
        self.zones = np.full(
            (width, height), ZoneKind.EMPTY, dtype=np.uint8, order="F"
        )
        self.elevation = np.zeros((width, height), dtype=ELEVATION_DTYPE, order="F")

    @classmethod
    def from_config(cls, config: CityConfig) -> Grid:
        """Create an empty grid for a config.

        Raises:
            InvalidConfigError: If the config fails validation.
        """
        config.validate()
        return cls(config.width, config.height)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def freeze(self) -> None:
        """Make the grid read-only. Writes afterwards raise ValueError."""
        self.zones.flags.writeable = False
        self.elevation.flags.writeable = False

    @property
    def frozen(self) -> bool:
        return not self.zones.flags.writeable

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def in_bounds(self, x: CellCoord, y: CellCoord) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: CellCoord, y: CellCoord) -> Cell:
        return Cell(ZoneKind(int(self.zones[x, y])), int(self.elevation[x, y]))

    def zone_at(self, x: CellCoord, y: CellCoord) -> ZoneKind:
        return ZoneKind(int(self.zones[x, y]))

    def is_road(self, x: CellCoord, y: CellCoord) -> bool:
        """True if (x, y) is in bounds and zoned ROAD."""
        return self.in_bounds(x, y) and self.zones[x, y] == ZoneKind.ROAD

    def neighbor(self, x: CellCoord, y: CellCoord, direction: Direction) -> Cell | None:
        """The cell one step in ``direction``, or None off the grid."""
        dx, dy = direction.offset
        nx, ny = x + dx, y + dy
        if not self.in_bounds(nx, ny):
            return None
        return self.cell(nx, ny)

    def road_neighbors(self, x: CellCoord, y: CellCoord) -> dict[Direction, bool]:
        """Neighbour-is-road flag for each direction, in scan order."""
        return {
            d: self.is_road(x + d.offset[0], y + d.offset[1]) for d in DIRECTIONS
        }

    def facing_road(self, x: CellCoord, y: CellCoord) -> Direction | None:
        """First direction in N, E, S, W order with a road neighbour."""
        for d in DIRECTIONS:
            if self.is_road(x + d.offset[0], y + d.offset[1]):
                return d
        return None

    def count(self, zone: ZoneKind) -> int:
        return int(np.count_nonzero(self.zones == zone))


def new_grid(config: CityConfig) -> Grid:
    """Validate ``config`` and return an empty grid sized for it."""
    return Grid.from_config(config)
