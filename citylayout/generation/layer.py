"""Abstract base class for generation layers.

Each stage of the pipeline implements the GenerationLayer interface and
transforms the GenerationContext in some way: zoning cells, raising hills,
resolving road tiles or planning placements.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .context import GenerationContext


class GenerationLayer(ABC):
    """Abstract base class for layout generation layers.

    Layers are applied sequentially by the CityLayoutEngine. Each layer
    receives a GenerationContext and modifies it in place.

    Subclasses must implement the apply() method to perform their specific
    generation logic.

    Attributes:
        writes_grid: True for terrain layers that write zones or elevation.
            The engine freezes the grid before the first layer without it.
    """

    writes_grid: bool = False

    @abstractmethod
    def apply(self, ctx: GenerationContext) -> None:
        """Apply this layer's generation logic to the context.

        This method should modify the context in place. It may:
        - Write zones or elevations (only before the grid is frozen)
        - Record road or cell commands
        - Draw from its own named stream via ctx.stream()

        Args:
            ctx: The generation context to modify.
        """
        raise NotImplementedError
