"""Asset categories and the asset provider seam.

The generator never inspects assets. Callers hand it already-categorised
handles (any hashable objects: prefab paths, ids, model objects) and, when
fit-to-cell is wanted, a footprint query. PlacementCommands refer back to an
asset by its index in the category list.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Hashable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from .errors import DegenerateGeometryError, EmptyAssetCategoryError

type AssetHandle = Hashable


class AssetCategory(Enum):
    ROAD_STRAIGHT = "road_straight"
    ROAD_CORNER = "road_corner"
    ROAD_T = "road_t"
    ROAD_CROSS = "road_cross"
    ROAD_END = "road_end"
    ROAD_SLANT = "road_slant"
    FOUNDATION = "foundation"
    BUILDING_RESIDENTIAL = "building_residential"
    BUILDING_COMMERCIAL = "building_commercial"
    BUILDING_INDUSTRIAL = "building_industrial"
    TREE = "tree"
    FENCE = "fence"
    PATH = "path"

    @property
    def is_road(self) -> bool:
        return self.name.startswith("ROAD_")


@dataclass(frozen=True)
class Footprint:
    """Horizontal bounds of an asset at unit scale and zero rotation.

    Attributes:
        size_x: Extent along x in scene units.
        size_z: Extent along z in scene units.
        center_x: Bounds centre relative to the asset pivot, along x.
        center_z: Bounds centre relative to the asset pivot, along z.
    """

    size_x: float
    size_z: float
    center_x: float = 0.0
    center_z: float = 0.0

    def validate(self) -> None:
        """Raise DegenerateGeometryError unless every extent is finite and positive."""
        values = (self.size_x, self.size_z, self.center_x, self.center_z)
        if not all(math.isfinite(v) for v in values):
            raise DegenerateGeometryError(f"Non-finite footprint: {self}")
        if self.size_x <= 0 or self.size_z <= 0:
            raise DegenerateGeometryError(f"Non-positive footprint: {self}")


class AssetProvider(Protocol):
    """What the generator needs from the caller's asset library."""

    def assets(self, category: AssetCategory) -> Sequence[AssetHandle]:
        """Return the handles registered for a category, possibly none."""
        ...

    def footprint(self, handle: AssetHandle) -> Footprint | None:
        """Return the handle's footprint, or None when it is unknown."""
        ...


@dataclass
class AssetCatalog:
    """In-memory AssetProvider built from pre-categorised lists.

    Attributes:
        entries: Handles per category. Missing categories count as empty.
        footprints: Optional footprint query used by fit-to-cell.
    """

    entries: Mapping[AssetCategory, Sequence[AssetHandle]] = field(
        default_factory=dict
    )
    footprints: Callable[[AssetHandle], Footprint | None] | None = None

    def assets(self, category: AssetCategory) -> Sequence[AssetHandle]:
        return self.entries.get(category, ())

    def footprint(self, handle: AssetHandle) -> Footprint | None:
        if self.footprints is None:
            return None
        return self.footprints(handle)

    @classmethod
    def placeholder(cls, variants: int = 3) -> AssetCatalog:
        """Catalog of string handles for every category.

        Road and foundation tiles get one variant each; buildings and props
        get ``variants`` each. Useful for previews and tests.
        """
        entries: dict[AssetCategory, list[AssetHandle]] = {}
        for category in AssetCategory:
            single = category.is_road or category is AssetCategory.FOUNDATION
            count = 1 if single else variants
            entries[category] = [f"{category.value}-{i}" for i in range(count)]
        return cls(entries=entries)


def require_assets(
    provider: AssetProvider, category: AssetCategory
) -> Sequence[AssetHandle]:
    """Return the category's handles, raising EmptyAssetCategoryError if none."""
    handles = provider.assets(category)
    if not handles:
        raise EmptyAssetCategoryError(category)
    return handles
