"""Factory functions for creating pre-configured layout engines.

These functions provide convenient ways to build the standard layer stack
for a config, or a whole engine from a strategy name, without assembling
layers by hand.

Available strategies:
- "bsp": Irregular road-ringed blocks with parks, setbacks and driveways
- "lattice": Road grid with noise-blended zones, hills and slant ramps
"""

from __future__ import annotations

from typing import Any

from .assets import AssetCatalog, AssetProvider
from .config import CityConfig, ZoningStrategy
from .layer import GenerationLayer
from .layers import (
    ElevationLayer,
    PlacementLayer,
    RoadTopologyLayer,
    create_zoning_layer,
)
from .pipeline import CityLayoutEngine


def create_layers(config: CityConfig) -> list[GenerationLayer]:
    """The standard layer stack for a config.

    1. Zoning for the config's strategy (roads and zones)
    2. Hills (a no-op unless the run is elevation-aware)
    3. Road tile resolution
    4. Building and prop placement
    """
    return [
        create_zoning_layer(config.strategy),
        ElevationLayer(),
        RoadTopologyLayer(),
        PlacementLayer(),
    ]


def create_engine(
    strategy: str | ZoningStrategy,
    assets: AssetProvider | None = None,
    **overrides: Any,
) -> CityLayoutEngine:
    """Create an engine with the tuned defaults for a strategy.

    Args:
        strategy: Strategy name ("bsp", "lattice") or enum value.
        assets: Asset provider. Defaults to a placeholder catalog.
        **overrides: CityConfig fields to set explicitly (width, seed, ...).

    Returns:
        A CityLayoutEngine ready to generate.

    Raises:
        ValueError: If the strategy name is not recognized.
    """
    if isinstance(strategy, str):
        try:
            strategy = ZoningStrategy(strategy)
        except ValueError:
            raise ValueError(f"Unknown zoning strategy: {strategy!r}") from None

    config = CityConfig.for_strategy(strategy, **overrides)
    if assets is None:
        assets = AssetCatalog.placeholder()
    return CityLayoutEngine(config=config, assets=assets, layers=create_layers(config))
