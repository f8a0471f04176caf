from __future__ import annotations

from typing import Literal, TypeAlias

# =============================================================================
# SPATIAL TYPES
# =============================================================================

TileCoord: TypeAlias = int  # Always integer tile position

# World coordinates - absolute positions on the generated map
WorldTileCoord: TypeAlias = TileCoord  # Example: x=5, y=3
WorldTilePos: TypeAlias = tuple[
    WorldTileCoord, WorldTileCoord
]  # Example: (5, 3) = tile 5,3 on map

# Continuous positions used by carving cursors and drift walkers
FloatPos: TypeAlias = tuple[float, float]  # Example: (12.5, 40.25)
Heading: TypeAlias = tuple[float, float]  # Example: (1.0, 0.3) = continuous drift direction

# Directions - discrete grid steps
UnitStep: TypeAlias = Literal[-1, 0, 1]
Direction: TypeAlias = tuple[UnitStep, UnitStep]  # Example: (-1, 0) = westward step

# Pixel coordinates in the caller's world space (tile size is caller-owned)
PixelCoord: TypeAlias = int | float  # Example: px_x=123.5
PixelPos: TypeAlias = tuple[PixelCoord, PixelCoord]  # Example: (123.5, 456.7)

# =============================================================================
# GENERATION TYPES
# =============================================================================

# Random seed for deterministic generation.
# Can be an int for numeric seeds or a descriptive string like "burrito1".
RandomSeed: TypeAlias = int | str | None

# Unordered pair of hub indices, always stored as (min, max).
Edge: TypeAlias = tuple[int, int]

# Recipe tags used for dispatch in the pipeline factory.
RecipeName: TypeAlias = Literal[
    "cave-chambers",
    "rooms-and-corridors",
    "clearings-and-paths",
    "islands-and-bridges",
]

# Room shapes understood by the room carver.
RoomShape: TypeAlias = Literal["rect", "l", "oval"]

# =============================================================================
# UTILITY TYPES
# =============================================================================

# Inclusive integer range rolled with randint (e.g., hub counts, radii)
IntRange: TypeAlias = tuple[int, int]

# Generic min/max float range (e.g., windiness, noise amplitude)
FloatRange: TypeAlias = tuple[float, float]
