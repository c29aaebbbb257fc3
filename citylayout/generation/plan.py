"""Placement commands and the layout plan that carries them.

A LayoutPlan is the whole output of one run: an ordered, immutable sequence
of PlacementCommands for an external sink to instantiate in order. It can be
flattened to tuples or JSON for golden-file comparisons.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import overload

from citylayout.types import Degrees, Scale3, WorldPos

from .assets import AssetCategory

# Variant index for commands the sink realises without an asset (base slab)
PRIMITIVE_VARIANT = -1

UNIT_SCALE: Scale3 = (1.0, 1.0, 1.0)

type PlanRow = tuple[str, int, float, float, float, float, str]


@dataclass(frozen=True)
class PlacementCommand:
    """One object for the sink to place.

    Attributes:
        category: Asset category to draw from.
        variant: Index into the caller's asset list for the category.
        position: Scene position (x, up, z).
        rotation: Rotation about the vertical axis in degrees, in [0, 360).
        label: Name for the placed object.
        scale: Scale to apply; (1, 1, 1) unless fitted or a slab.
    """

    category: AssetCategory
    variant: int
    position: WorldPos
    rotation: Degrees
    label: str
    scale: Scale3 = UNIT_SCALE

    def to_row(self) -> PlanRow:
        x, y, z = self.position
        return (self.category.value, self.variant, x, y, z, self.rotation, self.label)

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "variant": self.variant,
            "position": list(self.position),
            "rotation": self.rotation,
            "label": self.label,
            "scale": list(self.scale),
        }

    @classmethod
    def from_dict(cls, data: dict) -> PlacementCommand:
        x, y, z = data["position"]
        sx, sy, sz = data.get("scale", UNIT_SCALE)
        return cls(
            category=AssetCategory(data["category"]),
            variant=int(data["variant"]),
            position=(float(x), float(y), float(z)),
            rotation=float(data["rotation"]),
            label=data["label"],
            scale=(float(sx), float(sy), float(sz)),
        )


class LayoutPlan(Sequence[PlacementCommand]):
    """Ordered, immutable output of one generation run."""

    def __init__(self, commands: Sequence[PlacementCommand] = ()) -> None:
        self._commands: tuple[PlacementCommand, ...] = tuple(commands)

    @overload
    def __getitem__(self, index: int) -> PlacementCommand: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[PlacementCommand]: ...

    def __getitem__(self, index):
        return self._commands[index]

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[PlacementCommand]:
        return iter(self._commands)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LayoutPlan):
            return NotImplemented
        return self._commands == other._commands

    def __hash__(self) -> int:
        return hash(self._commands)

    def __repr__(self) -> str:
        return f"LayoutPlan({len(self._commands)} commands)"

    def count_category(self, category: AssetCategory) -> int:
        """Number of commands of the given category."""
        return sum(1 for c in self._commands if c.category is category)

    def by_category(self, category: AssetCategory) -> list[PlacementCommand]:
        return [c for c in self._commands if c.category is category]

    def to_rows(self) -> list[PlanRow]:
        """Flatten to (category, variant, x, y, z, rotation, label) tuples."""
        return [c.to_row() for c in self._commands]

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps([c.to_dict() for c in self._commands], indent=indent)

    @classmethod
    def from_json(cls, text: str) -> LayoutPlan:
        return cls([PlacementCommand.from_dict(d) for d in json.loads(text)])
