"""Read-only query facade over a generated level.

Renderers and gameplay code never see the GridBuilder or the pipeline; they
ask a LevelMap. All queries are total: out-of-range cells are obstacles and
never walkable or hazardous.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from mapwright import config
from mapwright.environment.generators import placement
from mapwright.types import PixelCoord, PixelPos, TileCoord, WorldTilePos
from mapwright.util import coordinates
from mapwright.util.rng import RNGProvider

if TYPE_CHECKING:
    from mapwright.types import RandomSeed
    from mapwright.util.rng import RNG

    from .generators import GeneratedMapData


class LevelMap:
    """A frozen level: terrain, hubs and the links between them.

    Attributes:
        grid: Frozen terrain grid.
        table: Terrain table that defines walkability for this level.
        edges: Hub pairs joined by a corridor.
        special_index: Index of the special hub, if the level has one.
        rooms: Room rectangles (room-based levels only).
    """

    def __init__(self, map_data: GeneratedMapData, seed: RandomSeed = None) -> None:
        self.grid = map_data.grid
        self.table = map_data.table
        self.width: TileCoord = self.grid.width
        self.height: TileCoord = self.grid.height
        self.edges = list(map_data.edges)
        self.special_index = map_data.special_index
        self.rooms = list(map_data.rooms)
        self._hubs = list(map_data.hubs)

        # Entity placement draws from the level's own stream unless the
        # caller passes one.
        self._streams = RNGProvider(seed)

        # Cached property arrays, populated on demand.
        self._walkable_map_cache: np.ndarray | None = None
        self._hazard_map_cache: np.ndarray | None = None
        self._player_start_cache: WorldTilePos | None = None

    # -------------------------------------------------------------------------
    # Property maps
    # -------------------------------------------------------------------------

    @property
    def walkable(self) -> np.ndarray:
        """Boolean array of shape (width, height) where True means walkable."""
        if self._walkable_map_cache is None:
            walkable = self.table.walkable_map(self.grid.tiles)
            walkable.setflags(write=False)
            self._walkable_map_cache = walkable
        return self._walkable_map_cache

    @property
    def obstacles(self) -> np.ndarray:
        """Complement of `walkable`."""
        return ~self.walkable

    @property
    def hazards(self) -> np.ndarray:
        if self._hazard_map_cache is None:
            hazards = self.table.hazard_map(self.grid.tiles)
            hazards.setflags(write=False)
            self._hazard_map_cache = hazards
        return self._hazard_map_cache

    # -------------------------------------------------------------------------
    # Cell queries
    # -------------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return self.grid.in_bounds(x, y)

    def terrain_at(self, x: int, y: int) -> int:
        """Terrain code at (x, y); the blocked code out of range."""
        return self.grid.get(x, y)

    def is_walkable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and bool(self.walkable[x, y])

    def is_obstacle(self, x: int, y: int) -> bool:
        return not self.is_walkable(x, y)

    def is_hazard(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and bool(self.hazards[x, y])

    # -------------------------------------------------------------------------
    # Hubs and placement
    # -------------------------------------------------------------------------

    def hub_list(self) -> list[WorldTilePos]:
        """Hub centres in creation order. Returns a copy."""
        return list(self._hubs)

    def player_start_position(self) -> WorldTilePos:
        """Hub 0, else the walkable cell nearest the centre, else the centre."""
        if self._player_start_cache is None:
            self._player_start_cache = placement.find_player_start(
                self.walkable, self._hubs
            )
        return self._player_start_cache

    def exit_position(self) -> WorldTilePos | None:
        """The last hub, where the level exit goes. None with fewer than 2 hubs."""
        if len(self._hubs) < 2:
            return None
        return self._hubs[-1]

    def special_hub(self) -> WorldTilePos | None:
        if self.special_index is None:
            return None
        return self._hubs[self.special_index]

    def sample_entity_positions(
        self,
        count: int,
        exclusion_radius: float,
        rng: RNG | None = None,
    ) -> list[WorldTilePos]:
        """Up to `count` distinct walkable cells at least `exclusion_radius`
        from the player start.

        Args:
            count: Maximum number of positions.
            exclusion_radius: Minimum Euclidean distance to the player start.
            rng: Stream to draw from. Defaults to the level's placement stream.
        """
        if rng is None:
            rng = self._streams.get("level.placement")
        return placement.sample_positions(
            self.grid,
            self.table.is_walkable,
            count,
            self.player_start_position(),
            exclusion_radius,
            rng,
        )

    def nearest_walkable(
        self,
        pos: WorldTilePos,
        max_radius: int = config.PLAYER_START_SEARCH_RADIUS,
    ) -> WorldTilePos | None:
        """Closest walkable cell to `pos` by expanding Chebyshev rings."""
        return placement.nearest_walkable(self.walkable, pos, max_radius)

    # -------------------------------------------------------------------------
    # Coordinate conversion (tile size is owned by the caller)
    # -------------------------------------------------------------------------

    @staticmethod
    def tile_to_world(pos: WorldTilePos, tile_size: PixelCoord) -> PixelPos:
        return coordinates.tile_to_world(pos, tile_size)

    @staticmethod
    def world_to_tile(pos: PixelPos, tile_size: PixelCoord) -> WorldTilePos:
        return coordinates.world_to_tile(pos, tile_size)

    def __repr__(self) -> str:
        return f"LevelMap({self.width}x{self.height}, hubs={len(self._hubs)})"
