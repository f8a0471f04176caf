"""Base classes for map generation."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mapwright.environment.grid import TerrainGrid
    from mapwright.environment.tile_types import TerrainTable
    from mapwright.types import Edge, TileCoord, WorldTilePos
    from mapwright.util.coordinates import Rect


@dataclass
class GeneratedMapData:
    """A container for all raw data produced by a map generator.

    Attributes:
        grid: The frozen terrain grid.
        table: Terrain table the grid was generated under.
        hubs: Hub centres in creation order. Index 0 is the player start.
        edges: Hub pairs joined by a corridor, in carving order.
        special_index: Index of the special hub (throne room, volcano), if any.
            It is always the last hub.
        rooms: Room rectangles for room-based maps.
    """

    grid: TerrainGrid
    table: TerrainTable
    hubs: list[WorldTilePos]
    edges: list[Edge] = field(default_factory=list)
    special_index: int | None = None
    rooms: list[Rect] = field(default_factory=list)


class BaseMapGenerator(abc.ABC):
    """Abstract base class for map generation algorithms."""

    def __init__(self, map_width: TileCoord, map_height: TileCoord) -> None:
        self.map_width = map_width
        self.map_height = map_height

    @abc.abstractmethod
    def generate(self) -> GeneratedMapData:
        """Generate the map layout and its structural data."""
        raise NotImplementedError
