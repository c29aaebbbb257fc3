"""Grid rectangles used for BSP blocks."""

from __future__ import annotations

from collections.abc import Iterator

from citylayout.types import CellCoord, CellPos


class Rect:
    """Rectangle/bounding box in cell coordinates (x2/y2 exclusive)."""

    def __init__(self, x: CellCoord, y: CellCoord, w: CellCoord, h: CellCoord) -> None:
        self.x1: CellCoord = x
        self.y1: CellCoord = y
        self.x2: CellCoord = x + w
        self.y2: CellCoord = y + h

    @property
    def width(self) -> CellCoord:
        return self.x2 - self.x1

    @property
    def height(self) -> CellCoord:
        return self.y2 - self.y1

    @property
    def area(self) -> int:
        return self.width * self.height

    def contains(self, x: CellCoord, y: CellCoord) -> bool:
        return self.x1 <= x < self.x2 and self.y1 <= y < self.y2

    def on_border(self, x: CellCoord, y: CellCoord) -> bool:
        """True if (x, y) lies on this rect's outermost one-cell ring."""
        return self.contains(x, y) and (
            x in (self.x1, self.x2 - 1) or y in (self.y1, self.y2 - 1)
        )

    def cells(self) -> Iterator[CellPos]:
        """Yield every cell in the rect, x-major."""
        for x in range(self.x1, self.x2):
            for y in range(self.y1, self.y2):
                yield (x, y)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rect):
            return NotImplemented
        return (self.x1, self.y1, self.x2, self.y2) == (
            other.x1,
            other.y1,
            other.x2,
            other.y2,
        )

    def __hash__(self) -> int:
        return hash((self.x1, self.y1, self.x2, self.y2))

    def __repr__(self) -> str:
        return f"Rect(x1={self.x1}, y1={self.y1}, x2={self.x2}, y2={self.y2})"
