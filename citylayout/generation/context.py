"""Generation context for the city layout pipeline.

The GenerationContext is a mutable container that holds all state during one
run. Each layer in the pipeline receives the same context and modifies it in
place. It is created fresh per run and never shared between runs.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from citylayout.types import CellPos
from citylayout.util.coordinates import Rect
from citylayout.util.rng import RNGProvider, RNGStream

from .assets import AssetCatalog, AssetCategory, AssetProvider
from .config import CityConfig
from .grid import Grid, ZoneKind
from .plan import PlacementCommand

# Named RNG streams, one per consumer. A stage's draws never shift another's.
ZONING_STREAM = "city.zoning"
ELEVATION_STREAM = "city.elevation"
DENSITY_STREAM = "city.placement.density"
ASSET_STREAM = "city.placement.assets"


@dataclass
class Block:
    """A leaf of the zoning partition.

    Attributes:
        bounds: The block's rectangle, border ring included.
        zone: Zone assigned to the block's interior.
    """

    bounds: Rect
    zone: ZoneKind


@dataclass
class GenerationContext:
    """Mutable state container passed through the generation pipeline.

    Attributes:
        config: The validated config for this run.
        grid: Zone and elevation arrays, frozen after the terrain stages.
        assets: Provider of asset handles per category.
        rng: Per-run provider of named random streams.
        blocks: Leaf blocks produced by the BSP zoner (empty for lattice).
        road_lines_x: Lattice road columns (empty for BSP).
        road_lines_y: Lattice road rows (empty for BSP).
        road_commands: Resolved road command per road cell.
        cell_commands: Building/prop commands per non-road cell.
        skipped: Placements dropped because a category had no assets.
    """

    config: CityConfig
    grid: Grid
    assets: AssetProvider
    rng: RNGProvider
    blocks: list[Block] = field(default_factory=list)
    road_lines_x: list[int] = field(default_factory=list)
    road_lines_y: list[int] = field(default_factory=list)
    road_commands: dict[CellPos, PlacementCommand] = field(default_factory=dict)
    cell_commands: dict[CellPos, list[PlacementCommand]] = field(default_factory=dict)
    skipped: Counter[AssetCategory] = field(default_factory=Counter)

    @classmethod
    def create(
        cls,
        config: CityConfig,
        assets: AssetProvider | None = None,
    ) -> GenerationContext:
        """Create an empty generation context for a config.

        Args:
            config: Run configuration. Validated here.
            assets: Asset provider. Defaults to an empty catalog.

        Returns:
            A new GenerationContext ready for layer processing.

        Raises:
            InvalidConfigError: If the config fails validation.
        """
        grid = Grid.from_config(config)
        return cls(
            config=config,
            grid=grid,
            assets=assets if assets is not None else AssetCatalog(),
            rng=RNGProvider(config.seed),
        )

    def stream(self, domain: str) -> RNGStream:
        return self.rng.get(domain)

    def add_cell_command(self, pos: CellPos, command: PlacementCommand) -> None:
        self.cell_commands.setdefault(pos, []).append(command)

    def world_position(
        self, x: int, y: int, elevation: int | None = None
    ) -> tuple[float, float, float]:
        """Scene position of a cell's centre (x, up, z)."""
        if elevation is None:
            elevation = int(self.grid.elevation[x, y])
        cs = self.config.cell_size
        return (x * cs, elevation * self.config.elevation_step, y * cs)
