"""
Configuration constants.

Centralizes the default values and tuning numbers used by the layout
generator. `CityConfig` (citylayout.generation.config) reads its defaults
from here. Organized by pipeline stage for easy maintenance.
"""

# =============================================================================
# GENERAL
# =============================================================================

RANDOM_SEED = 12345

# Physical size of one grid cell in scene units
CELL_SIZE = 10.0

# =============================================================================
# ZONING - BSP
# =============================================================================

BSP_MAP_WIDTH = 40
BSP_MAP_HEIGHT = 40
BSP_MIN_BLOCK_SIZE = 6
BSP_MAX_BLOCK_SIZE = 15

# Force a cut across the long side once it exceeds the short one by this ratio
BSP_ASPECT_SPLIT_RATIO = 1.25
# Once a block fits inside max_block_size, it keeps splitting with this chance
BSP_CONTINUE_SPLIT_CHANCE = 0.7

# =============================================================================
# ZONING - LATTICE
# =============================================================================

LATTICE_MAP_WIDTH = 30
LATTICE_MAP_HEIGHT = 30
LATTICE_MIN_BLOCK_SIZE = 2
LATTICE_MAX_BLOCK_SIZE = 5

# 0.05 = big zone patches, 0.2 = small patches
NOISE_SCALE = 0.05
NOISE_INDUSTRIAL_THRESHOLD = 0.65
NOISE_COMMERCIAL_THRESHOLD = 0.35

# =============================================================================
# ELEVATION
# =============================================================================

HILL_FREQUENCY = 0.3
# One hill per this many cells at hill_frequency = 1.0
HILL_AREA_PER_HILL = 50
HILL_MARGIN = 3
HILL_MIN_RADIUS = 2
HILL_MAX_RADIUS = 6  # exclusive

MAX_ELEVATION = 1
ELEVATION_STEP = 5.0

# =============================================================================
# PLACEMENT
# =============================================================================

BUILDING_DENSITY = 0.95
BSP_BUILDING_DENSITY = 0.7

# Fraction of cell size a building is pushed away from the road it faces
BSP_SETBACK = 0.2
BSP_DRIVEWAY_CHANCE = 0.5
BSP_FALLBACK_TREE_CHANCE = 0.2
LATTICE_FALLBACK_TREE_CHANCE = 0.5

PARK_TREE_CHANCE = 0.4
PARK_PATH_CHANCE = 0.2
# Park trees wander up to this fraction of a cell from the centre
PARK_TREE_JITTER = 0.3

# Largest footprint allowed inside a cell, as a fraction of cell size
FIT_TO_CELL_MARGIN = 0.95
# Footprints below this size are left unscaled
FIT_TO_CELL_MIN_SIZE = 0.1
