"""Layered city layout generation.

Each layer transforms a shared GenerationContext, and the engine assembles
the result into an ordered LayoutPlan of PlacementCommands.

Example usage:
    from citylayout.generation import create_engine

    engine = create_engine("lattice", width=20, height=20, seed=7)
    plan = engine.generate()

The engine can also be assembled manually for custom configurations:
    from citylayout.generation import (
        AssetCatalog,
        BSPZoningLayer,
        CityConfig,
        CityLayoutEngine,
        PlacementLayer,
        RoadTopologyLayer,
        ZoningStrategy,
    )

    engine = CityLayoutEngine(
        config=CityConfig.for_strategy(ZoningStrategy.BSP),
        assets=AssetCatalog.placeholder(),
        layers=[BSPZoningLayer(), RoadTopologyLayer(), PlacementLayer()],
    )
"""

from .assets import AssetCatalog, AssetCategory, AssetProvider, Footprint
from .config import (
    CityConfig,
    DeadEndStyle,
    RotationOffsets,
    SelectionMode,
    ZoningStrategy,
)
from .context import GenerationContext
from .errors import (
    CityLayoutError,
    DegenerateGeometryError,
    EmptyAssetCategoryError,
    InvalidConfigError,
)
from .factory import create_engine, create_layers
from .grid import Direction, Grid, ZoneKind, new_grid
from .layer import GenerationLayer
from .layers import (
    BSPZoningLayer,
    ElevationLayer,
    LatticeZoningLayer,
    PlacementLayer,
    RoadTopologyLayer,
)
from .pipeline import CityLayoutEngine
from .plan import PRIMITIVE_VARIANT, LayoutPlan, PlacementCommand

__all__ = [
    "PRIMITIVE_VARIANT",
    "AssetCatalog",
    "AssetCategory",
    "AssetProvider",
    "BSPZoningLayer",
    "CityConfig",
    "CityLayoutEngine",
    "CityLayoutError",
    "DeadEndStyle",
    "DegenerateGeometryError",
    "Direction",
    "ElevationLayer",
    "EmptyAssetCategoryError",
    "Footprint",
    "GenerationContext",
    "GenerationLayer",
    "Grid",
    "InvalidConfigError",
    "LatticeZoningLayer",
    "LayoutPlan",
    "PlacementCommand",
    "PlacementLayer",
    "RoadTopologyLayer",
    "RotationOffsets",
    "SelectionMode",
    "ZoneKind",
    "ZoningStrategy",
    "create_engine",
    "create_layers",
    "new_grid",
]
