"""Configuration for one city layout run.

CityConfig bundles every option the generator recognises. It is an immutable
value: build a new one (``dataclasses.replace`` or ``for_strategy``) to change
anything. Validation is explicit via ``validate()`` so that a bad config is
reported before any generation work begins.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

from citylayout import config as defaults

from .assets import AssetCategory
from .errors import InvalidConfigError

# Storage type of the grid elevation array; bounds max_elevation
ELEVATION_DTYPE = np.int16


class ZoningStrategy(Enum):
    """How the grid is partitioned into zoned blocks."""

    BSP = "bsp"
    LATTICE = "lattice"

    @property
    def supports_elevation(self) -> bool:
        return self is ZoningStrategy.LATTICE


class DeadEndStyle(Enum):
    """Tile used for a road cell with exactly one road neighbour."""

    END = "end"
    STRAIGHT = "straight"


class SelectionMode(Enum):
    """How an asset is drawn from a zone's list."""

    SHUFFLE_BAG = "shuffle_bag"
    UNIFORM = "uniform"


@dataclass(frozen=True)
class RotationOffsets:
    """Per-category rotation calibration, in degrees.

    These correct for authoring differences in the external asset set. They
    never influence layout decisions, only the emitted rotation values.
    """

    straight: float = 0.0
    corner: float = 0.0
    t: float = 0.0
    cross: float = 0.0
    end: float = 0.0
    slant: float = 0.0
    residential: float = 0.0
    commercial: float = 0.0
    industrial: float = 0.0
    prop: float = 0.0

    def for_category(self, category: AssetCategory) -> float:
        """Offset applied to commands of the given category."""
        match category:
            case AssetCategory.ROAD_STRAIGHT:
                return self.straight
            case AssetCategory.ROAD_CORNER:
                return self.corner
            case AssetCategory.ROAD_T:
                return self.t
            case AssetCategory.ROAD_CROSS:
                return self.cross
            case AssetCategory.ROAD_END:
                return self.end
            case AssetCategory.ROAD_SLANT:
                return self.slant
            case AssetCategory.BUILDING_RESIDENTIAL:
                return self.residential
            case AssetCategory.BUILDING_COMMERCIAL:
                return self.commercial
            case AssetCategory.BUILDING_INDUSTRIAL:
                return self.industrial
            case AssetCategory.TREE | AssetCategory.FENCE | AssetCategory.PATH:
                return self.prop
            case _:
                return 0.0


@dataclass(frozen=True)
class CityConfig:
    """Immutable bundle of every option for one layout run.

    Attributes:
        width: Grid width in cells.
        height: Grid height in cells.
        cell_size: Physical size of one cell in scene units.
        strategy: Which zoner partitions the grid.
        seed: Master seed; the same config and seed give the same plan.
        min_block_size: Smallest block side (BSP) or road spacing (lattice).
        max_block_size: Largest block side (BSP) or road spacing (lattice).
        noise_scale: Sample step of the lattice zoning noise field.
        density: Chance a building lot is built on, in [0, 1].
        hill_frequency: Hills per 50 cells, lattice only.
        max_elevation: Level a hill raises its cells to.
        elevation_step: Height of one elevation level in scene units.
        elevation_enabled: Run the elevation planner when the strategy supports it.
        rotation_offsets: Rotation calibration per asset category.
        dead_end_style: Tile used for dead-end road cells.
        selection: Shuffle-bag or uniform asset selection.
        require_road_frontage: Only build on cells with a road neighbour.
        setback: Fraction of a cell a building is pushed away from its road.
        driveway_chance: Chance of a path in front of a road-facing building.
        fallback_tree_chance: Chance of a tree on a lot left unbuilt.
        park_tree_chance: Chance of a tree on a park cell.
        park_path_chance: Chance of a path on a park cell without a tree.
        fit_to_cell: Scale and re-centre footprints that overhang their cell.
    """

    width: int = defaults.LATTICE_MAP_WIDTH
    height: int = defaults.LATTICE_MAP_HEIGHT
    cell_size: float = defaults.CELL_SIZE
    strategy: ZoningStrategy = ZoningStrategy.LATTICE
    seed: int = defaults.RANDOM_SEED
    min_block_size: int = defaults.LATTICE_MIN_BLOCK_SIZE
    max_block_size: int = defaults.LATTICE_MAX_BLOCK_SIZE
    noise_scale: float = defaults.NOISE_SCALE
    density: float = defaults.BUILDING_DENSITY
    hill_frequency: float = defaults.HILL_FREQUENCY
    max_elevation: int = defaults.MAX_ELEVATION
    elevation_step: float = defaults.ELEVATION_STEP
    elevation_enabled: bool = True
    rotation_offsets: RotationOffsets = field(default_factory=RotationOffsets)
    dead_end_style: DeadEndStyle = DeadEndStyle.END
    selection: SelectionMode = SelectionMode.SHUFFLE_BAG
    require_road_frontage: bool = False
    setback: float = 0.0
    driveway_chance: float = 0.0
    fallback_tree_chance: float = defaults.LATTICE_FALLBACK_TREE_CHANCE
    park_tree_chance: float = defaults.PARK_TREE_CHANCE
    park_path_chance: float = defaults.PARK_PATH_CHANCE
    fit_to_cell: bool = True

    @classmethod
    def for_strategy(cls, strategy: ZoningStrategy, **overrides: Any) -> CityConfig:
        """Build a config with the tuned defaults for a zoning strategy.

        Args:
            strategy: The zoning strategy to configure for.
            **overrides: Any CityConfig field to set explicitly.

        Returns:
            A new CityConfig.
        """
        if strategy is ZoningStrategy.BSP:
            base: dict[str, Any] = {
                "width": defaults.BSP_MAP_WIDTH,
                "height": defaults.BSP_MAP_HEIGHT,
                "min_block_size": defaults.BSP_MIN_BLOCK_SIZE,
                "max_block_size": defaults.BSP_MAX_BLOCK_SIZE,
                "density": defaults.BSP_BUILDING_DENSITY,
                "elevation_enabled": False,
                "dead_end_style": DeadEndStyle.END,
                "require_road_frontage": True,
                "setback": defaults.BSP_SETBACK,
                "driveway_chance": defaults.BSP_DRIVEWAY_CHANCE,
                "fallback_tree_chance": defaults.BSP_FALLBACK_TREE_CHANCE,
                "fit_to_cell": False,
            }
        else:
            base = {}
        base.update(overrides)
        return cls(strategy=strategy, **base)

    @property
    def elevation_aware(self) -> bool:
        """True when this run models elevation (foundations, slants)."""
        return self.elevation_enabled and self.strategy.supports_elevation

    def validate(self) -> None:
        """Check every field, raising InvalidConfigError listing all problems."""
        problems: list[str] = []

        if self.width <= 0:
            problems.append(f"width must be positive, got {self.width}")
        if self.height <= 0:
            problems.append(f"height must be positive, got {self.height}")
        if not (self.cell_size > 0 and math.isfinite(self.cell_size)):
            problems.append(f"cell_size must be positive, got {self.cell_size}")
        if self.min_block_size < 1:
            problems.append(
                f"min_block_size must be at least 1, got {self.min_block_size}"
            )
        if self.min_block_size > self.max_block_size:
            problems.append(
                f"min_block_size ({self.min_block_size}) exceeds "
                f"max_block_size ({self.max_block_size})"
            )
        if self.hill_frequency < 0:
            problems.append(
                f"hill_frequency must not be negative, got {self.hill_frequency}"
            )
        if self.max_elevation < 0:
            problems.append(
                f"max_elevation must not be negative, got {self.max_elevation}"
            )
        elif self.max_elevation > np.iinfo(ELEVATION_DTYPE).max:
            problems.append(
                f"max_elevation must be at most {np.iinfo(ELEVATION_DTYPE).max}, "
                f"got {self.max_elevation}"
            )
        if self.elevation_step < 0:
            problems.append(
                f"elevation_step must not be negative, got {self.elevation_step}"
            )
        if self.setback < 0 or self.setback >= 0.5:
            problems.append(f"setback must be in [0, 0.5), got {self.setback}")

        for name in (
            "density",
            "driveway_chance",
            "fallback_tree_chance",
            "park_tree_chance",
            "park_path_chance",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                problems.append(f"{name} must be in [0, 1], got {value}")

        if problems:
            raise InvalidConfigError(problems)
