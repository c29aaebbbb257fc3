"""Generation layers for the city layout engine.

Each layer transforms the GenerationContext in a specific way:
- Zoning layers: Partition the grid into roads and zoned blocks
- Elevation layer: Raise plateau hills on elevation-aware runs
- Road layer: Resolve every road cell to a tile and rotation
- Placement layer: Place buildings and props on the remaining cells
"""

from .elevation import ElevationLayer
from .placement import PlacementLayer, ShuffleBag, fit_to_cell
from .roads import ROAD_TILE_TABLE, RoadTile, RoadTopologyLayer, resolve_road_tile
from .zoning import BSPZoningLayer, LatticeZoningLayer, create_zoning_layer

__all__ = [
    "ROAD_TILE_TABLE",
    "BSPZoningLayer",
    "ElevationLayer",
    "LatticeZoningLayer",
    "PlacementLayer",
    "RoadTile",
    "RoadTopologyLayer",
    "ShuffleBag",
    "create_zoning_layer",
    "fit_to_cell",
    "resolve_road_tile",
]
