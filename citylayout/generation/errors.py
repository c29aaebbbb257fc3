"""Error types raised by the layout generator.

Only InvalidConfigError ever reaches the caller. The other two are raised
inside the pipeline and handled where they occur: the affected placement is
skipped (EmptyAssetCategoryError) or placed unscaled (DegenerateGeometryError).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .assets import AssetCategory


class CityLayoutError(Exception):
    """Base class for all layout generation errors."""


class InvalidConfigError(CityLayoutError, ValueError):
    """Raised when a CityConfig cannot produce a layout.

    Attributes:
        problems: Human-readable description of every invalid field.
    """

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("Invalid city config: " + "; ".join(problems))


class EmptyAssetCategoryError(CityLayoutError, LookupError):
    """Raised when the asset provider has no handles for a needed category."""

    def __init__(self, category: AssetCategory) -> None:
        self.category = category
        super().__init__(f"No assets registered for {category.name}")


class DegenerateGeometryError(CityLayoutError, ArithmeticError):
    """Raised when a footprint query returns a non-finite or non-positive size."""
