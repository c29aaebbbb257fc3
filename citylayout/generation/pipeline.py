"""Layout engine that orchestrates layer-based city generation.

The CityLayoutEngine runs a sequence of GenerationLayers, each transforming
a shared GenerationContext, and then assembles the context into one ordered
LayoutPlan. Each layer focuses on one aspect of the city: zoning, hills,
road tiles or placements.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from citylayout.types import CellPos

from .assets import AssetCategory, AssetProvider
from .config import CityConfig
from .context import GenerationContext
from .layer import GenerationLayer
from .plan import PRIMITIVE_VARIANT, LayoutPlan, PlacementCommand

logger = logging.getLogger(__name__)

BASE_SLAB_LABEL = "CityBaseFoundation"
FOUNDATION_LABEL = "Foundation"

type ProgressCallback = Callable[[int, int], None]


class CityLayoutEngine:
    """Runs layers sequentially on a fresh context and emits the plan.

    Example:
        engine = CityLayoutEngine(
            config=CityConfig.for_strategy(ZoningStrategy.LATTICE, seed=7),
            assets=catalog,
        )
        plan = engine.generate()

    Attributes:
        config: The run configuration.
        assets: Provider of asset handles per category.
        layers: GenerationLayers applied in order.
    """

    def __init__(
        self,
        config: CityConfig,
        assets: AssetProvider,
        layers: list[GenerationLayer] | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Run configuration. Validated on every generate().
            assets: Asset provider for every category the plan may use.
            layers: Layers to run. Defaults to the standard pipeline for the
                config's strategy.
        """
        if layers is None:
            from .factory import create_layers

            layers = create_layers(config)
        self.config = config
        self.assets = assets
        self.layers = layers

    def generate(self, progress: ProgressCallback | None = None) -> LayoutPlan:
        """Generate a plan by running all layers in sequence.

        Args:
            progress: Optional callback receiving (done_columns, total_columns)
                after each grid column is assembled.

        Returns:
            The complete LayoutPlan for this config and seed.

        Raises:
            InvalidConfigError: If the config is invalid. Nothing is generated.
        """
        _, plan = self.build(progress)
        return plan

    def build(
        self, progress: ProgressCallback | None = None
    ) -> tuple[GenerationContext, LayoutPlan]:
        """Like generate(), but also return the finished context.

        The context gives access to the frozen grid and the BSP blocks, for
        previews and diagnostics.
        """
        start = time.perf_counter()
        ctx = self.run_layers()
        plan = self.assemble(ctx, progress)

        for category, count in sorted(ctx.skipped.items(), key=lambda i: i[0].value):
            logger.warning(
                f"No assets for {category.value}: skipped {count} placements"
            )

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Generated {self.config.strategy.value} city "
            f"{self.config.width}x{self.config.height} seed={self.config.seed}: "
            f"{len(plan)} commands in {elapsed_ms:.1f}ms"
        )
        return ctx, plan

    def run_layers(self) -> GenerationContext:
        """Create a context and apply every layer to it.

        The grid is frozen before the first layer that does not write it, so
        road and placement layers only ever see finished terrain.
        """
        ctx = GenerationContext.create(self.config, self.assets)

        for layer in self.layers:
            if not layer.writes_grid and not ctx.grid.frozen:
                ctx.grid.freeze()
            layer.apply(ctx)

        if not ctx.grid.frozen:
            ctx.grid.freeze()
        return ctx

    def assemble(
        self, ctx: GenerationContext, progress: ProgressCallback | None = None
    ) -> LayoutPlan:
        """Order the context's commands into a plan.

        Order: the base slab (elevation-aware runs), then per cell in x-major
        order the foundation columns followed by the road command or the
        cell's placement commands.
        """
        cfg = ctx.config
        grid = ctx.grid
        commands: list[PlacementCommand] = []

        if cfg.elevation_aware:
            commands.append(base_slab(cfg))

        for x in range(grid.width):
            for y in range(grid.height):
                pos: CellPos = (x, y)
                commands.extend(self._foundation_column(ctx, x, y))
                road = ctx.road_commands.get(pos)
                if road is not None:
                    commands.append(road)
                else:
                    commands.extend(ctx.cell_commands.get(pos, ()))
            if progress is not None:
                progress(x + 1, grid.width)

        return LayoutPlan(commands)

    @staticmethod
    def _foundation_column(
        ctx: GenerationContext, x: int, y: int
    ) -> list[PlacementCommand]:
        elevation = int(ctx.grid.elevation[x, y])
        if elevation <= 0:
            return []
        if not ctx.assets.assets(AssetCategory.FOUNDATION):
            ctx.skipped[AssetCategory.FOUNDATION] += elevation
            return []
        cs = ctx.config.cell_size
        step = ctx.config.elevation_step
        return [
            PlacementCommand(
                category=AssetCategory.FOUNDATION,
                variant=0,
                position=(x * cs, (level - 1) * step, y * cs),
                rotation=0.0,
                label=FOUNDATION_LABEL,
            )
            for level in range(1, elevation + 1)
        ]


def base_slab(config: CityConfig) -> PlacementCommand:
    """The single ground slab under an elevation-aware city."""
    cs = config.cell_size
    step = config.elevation_step
    return PlacementCommand(
        category=AssetCategory.FOUNDATION,
        variant=PRIMITIVE_VARIANT,
        position=(
            (config.width - 1) * cs / 2,
            -step / 2,
            (config.height - 1) * cs / 2,
        ),
        rotation=0.0,
        label=BASE_SLAB_LABEL,
        scale=(config.width * cs, step, config.height * cs),
    )
