from __future__ import annotations

# =============================================================================
# GRID COORDINATES (Always integers)
# =============================================================================

CellCoord = int  # Always integer cell index
CellPos = tuple[CellCoord, CellCoord]  # Example: (5, 3) = cell 5,3 on the grid

# Unit step between neighbouring cells, e.g. (0, 1) for north
CellOffset = tuple[int, int]

# =============================================================================
# WORLD SPACE (Scene units, y is up)
# =============================================================================

WorldCoord = float
WorldPos = tuple[WorldCoord, WorldCoord, WorldCoord]  # (x, up, z)
Scale3 = tuple[float, float, float]

# Rotation about the vertical axis, clockwise seen from above
Degrees = float

# =============================================================================
# UTILITY TYPES
# =============================================================================

RandomSeed = int | str
