"""
Terrain type system using the flyweight pattern.

This module defines:
- `TerrainTypeData`: The intrinsic properties of a *type* of terrain (display name,
  preview glyph, whether it is inherently a hazard). These are the flyweight objects.
- An automated registration system for `TerrainTypeData` instances. Each registered
  terrain is assigned a unique integer ID, exposed through the `TerrainID` enum.
  Grids store a NumPy array of these IDs rather than full records per cell.
- `TerrainTable`: the closed subset of terrain a biome uses, and which of those codes
  count as walkable, hazard, or decorable *in that biome*. Walkability is a biome
  decision (shallow water is walkable on the world map but not on the beach), so it
  lives in the table rather than in the flyweight.
- Helper functions that turn a grid of IDs into property maps in one vectorized
  lookup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np

# Defines the intrinsic data for a *type* of terrain (flyweight).
TerrainTypeData = np.dtype(
    [
        ("glyph", "U1"),  # Single character used by ASCII previews
        ("hazard", bool),  # Damaging terrain (lava); never smoothed away
        ("display_name", "U32"),  # Human-readable name (Unicode string, max 32 chars)
    ]
)

# --- Automated Terrain Registration System ---

# The index of a terrain type in this list becomes its ID.
_registered_terrain_data_list: list[np.ndarray] = []

# Symbolic name (e.g., "WALL") -> assigned ID.
_terrain_name_to_id_map: dict[str, int] = {}


def register_terrain_type(name: str, terrain_data_instance: np.ndarray) -> int:
    """
    Registers a new terrain type and assigns it the next free ID.

    Args:
        name: A symbolic, unique name for this terrain (e.g., "WALL", "LAVA").
              Case-insensitive.
        terrain_data_instance: A numpy scalar structured with TerrainTypeData.

    Returns:
        The assigned integer ID.

    Raises:
        ValueError: If the name (case-insensitive) is already registered.
    """
    normalized_name = name.upper()
    if normalized_name in _terrain_name_to_id_map:
        raise ValueError(
            f"Terrain name '{name}' (as '{normalized_name}') is already registered."
        )

    terrain_id = len(_registered_terrain_data_list)
    _registered_terrain_data_list.append(terrain_data_instance)
    _terrain_name_to_id_map[normalized_name] = terrain_id
    return terrain_id


def make_terrain_type_data(
    *,  # Forces keyword arguments - prevents bugs from wrong parameter order
    glyph: str,
    display_name: str,
    hazard: bool = False,
) -> np.ndarray:
    """Helper function to create a TerrainTypeData instance."""
    return np.array((glyph, hazard, display_name), dtype=TerrainTypeData)


# --- Define and Register Core Terrain Types ---
# Registration order fixes the IDs, and the TerrainID enum below mirrors it.

register_terrain_type("WALL", make_terrain_type_data(glyph="#", display_name="Wall"))
register_terrain_type("FLOOR", make_terrain_type_data(glyph=".", display_name="Floor"))
register_terrain_type(
    "LAVA", make_terrain_type_data(glyph="~", display_name="Lava", hazard=True)
)
register_terrain_type("GRASS", make_terrain_type_data(glyph=",", display_name="Grass"))
register_terrain_type(
    "OBSTACLE", make_terrain_type_data(glyph="T", display_name="Obstacle")
)
register_terrain_type("PATH", make_terrain_type_data(glyph=":", display_name="Path"))
register_terrain_type("SAND", make_terrain_type_data(glyph="_", display_name="Sand"))
register_terrain_type(
    "DEEP_WATER", make_terrain_type_data(glyph="W", display_name="Deep Water")
)
register_terrain_type(
    "SHALLOW_WATER", make_terrain_type_data(glyph="w", display_name="Shallow Water")
)
register_terrain_type("SKY", make_terrain_type_data(glyph=" ", display_name="Open Sky"))
register_terrain_type("CLOUD", make_terrain_type_data(glyph="o", display_name="Cloud"))
register_terrain_type(
    "DENSE_CLOUD", make_terrain_type_data(glyph="O", display_name="Dense Cloud")
)
register_terrain_type(
    "UNDERGROWTH", make_terrain_type_data(glyph="%", display_name="Dense Jungle")
)
register_terrain_type("WATER", make_terrain_type_data(glyph="=", display_name="Water"))
register_terrain_type("OCEAN", make_terrain_type_data(glyph="~", display_name="Ocean"))
register_terrain_type(
    "FOREST", make_terrain_type_data(glyph="f", display_name="Forest")
)
register_terrain_type(
    "MOUNTAIN", make_terrain_type_data(glyph="^", display_name="Mountain")
)
register_terrain_type("SNOW", make_terrain_type_data(glyph="*", display_name="Snow"))
register_terrain_type(
    "DARKLAND", make_terrain_type_data(glyph="d", display_name="Darklands")
)
register_terrain_type(
    "VOLCANO", make_terrain_type_data(glyph="V", display_name="Volcano")
)
register_terrain_type(
    "JUNGLE", make_terrain_type_data(glyph="j", display_name="Jungle")
)


class TerrainID(IntEnum):
    """Integer IDs of the registered terrain types."""

    WALL = 0
    FLOOR = 1
    LAVA = 2
    GRASS = 3
    OBSTACLE = 4
    PATH = 5
    SAND = 6
    DEEP_WATER = 7
    SHALLOW_WATER = 8
    SKY = 9
    CLOUD = 10
    DENSE_CLOUD = 11
    UNDERGROWTH = 12
    WATER = 13
    OCEAN = 14
    FOREST = 15
    MOUNTAIN = 16
    SNOW = 17
    DARKLAND = 18
    VOLCANO = 19
    JUNGLE = 20


# --- Pre-calculated Property Arrays for Efficient Lookups ---

_terrain_properties_glyph = np.array(
    [t["glyph"] for t in _registered_terrain_data_list], dtype="U1"
)
_terrain_properties_hazard = np.array(
    [t["hazard"] for t in _registered_terrain_data_list], dtype=bool
)
_terrain_properties_display_name = np.array(
    [t["display_name"] for t in _registered_terrain_data_list], dtype="U32"
)

# --- Public Helper Functions for Accessing Terrain Properties ---


def get_glyph_map(terrain_ids_map: np.ndarray) -> np.ndarray:
    """Converts a map of terrain IDs into a map of preview glyphs."""
    return _terrain_properties_glyph[terrain_ids_map]


def get_hazard_map(terrain_ids_map: np.ndarray) -> np.ndarray:
    """Boolean map of cells whose terrain is intrinsically a hazard."""
    return _terrain_properties_hazard[terrain_ids_map]


def get_terrain_data_by_id(terrain_id: int) -> np.ndarray:
    """Retrieves the full TerrainTypeData instance for a given ID."""
    if 0 <= terrain_id < len(_registered_terrain_data_list):
        return _registered_terrain_data_list[terrain_id]
    raise IndexError(
        f"Invalid terrain ID: {terrain_id}. "
        f"Registered IDs are 0 to {len(_registered_terrain_data_list) - 1}."
    )


def get_terrain_name_by_id(terrain_id: int) -> str:
    """Get the human-readable name of a terrain type by its ID."""
    if 0 <= terrain_id < len(_terrain_properties_display_name):
        return str(_terrain_properties_display_name[terrain_id])
    return f"Unknown Terrain (ID: {terrain_id})"


def _lookup_table(codes: frozenset[TerrainID]) -> np.ndarray:
    lut = np.zeros(256, dtype=bool)
    lut[[int(code) for code in codes]] = True
    return lut


@dataclass(frozen=True)
class TerrainTable:
    """The terrain codes one biome uses and what each of them means there.

    Attributes:
        floor: Primary walkable code written by hub and room carvers.
        blocked: Code reported for out-of-range cells; the default fill for
            enclosed biomes.
        walkable: Codes actors can stand on.
        hazards: Codes that smoothing skips and protected corridors never overwrite.
        decorable: Codes that scatter and cluster features may decorate.
        background: Initial fill. Defaults to `blocked`.
        border: Code forced onto the outer rings. Defaults to `blocked`.
        path: Code laid by corridors and paths. Defaults to `floor`.
        extra: Any further codes the biome writes (rivers, cores, ...).
    """

    floor: TerrainID
    blocked: TerrainID
    walkable: frozenset[TerrainID]
    hazards: frozenset[TerrainID] = frozenset()
    decorable: frozenset[TerrainID] = frozenset()
    background: TerrainID | None = None
    border: TerrainID | None = None
    path: TerrainID | None = None
    extra: frozenset[TerrainID] = frozenset()
    _walkable_lut: np.ndarray = field(init=False, repr=False, compare=False)
    _hazard_lut: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.floor not in self.walkable:
            raise ValueError(f"Floor code {self.floor.name} must be walkable")
        if self.blocked in self.walkable:
            raise ValueError(f"Blocked code {self.blocked.name} cannot be walkable")
        # Frozen dataclass: lookup tables are attached once via object.__setattr__
        object.__setattr__(self, "_walkable_lut", _lookup_table(self.walkable))
        object.__setattr__(self, "_hazard_lut", _lookup_table(self.hazards))

    @property
    def fill_code(self) -> TerrainID:
        return self.background if self.background is not None else self.blocked

    @property
    def border_code(self) -> TerrainID:
        return self.border if self.border is not None else self.blocked

    @property
    def path_code(self) -> TerrainID:
        return self.path if self.path is not None else self.floor

    @property
    def codes(self) -> frozenset[TerrainID]:
        """The closed set of codes this biome can produce."""
        optional = {self.background, self.border, self.path} - {None}
        return frozenset(
            {self.floor, self.blocked}
            | self.walkable
            | self.hazards
            | self.decorable
            | self.extra
            | optional
        )

    @property
    def obstacles(self) -> frozenset[TerrainID]:
        """Every code in the table that actors cannot stand on."""
        return self.codes - self.walkable

    def is_walkable(self, code: int) -> bool:
        return bool(self._walkable_lut[code])

    def is_hazard(self, code: int) -> bool:
        return bool(self._hazard_lut[code])

    def walkable_map(self, terrain_ids_map: np.ndarray) -> np.ndarray:
        """Boolean map of walkable cells under this biome's rules."""
        return self._walkable_lut[terrain_ids_map]

    def hazard_map(self, terrain_ids_map: np.ndarray) -> np.ndarray:
        return self._hazard_lut[terrain_ids_map]
