"""Generation context for the pipeline map generator.

The GenerationContext is a mutable container that holds all state during map
generation. Each layer in the pipeline receives the same context and modifies
it in place. This avoids copying large numpy arrays between layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from mapwright import config
from mapwright.environment.generators.base import GeneratedMapData
from mapwright.environment.generators.refine import grow_mask
from mapwright.environment.grid import GridBuilder
from mapwright.util.coordinates import distance
from mapwright.util.rng import RNGProvider, RNGStream

if TYPE_CHECKING:
    from mapwright.environment.biomes import BiomeConfig
    from mapwright.environment.tile_types import TerrainTable
    from mapwright.types import Edge, RandomSeed, WorldTilePos
    from mapwright.util.coordinates import Rect


@dataclass
class GenerationContext:
    """Mutable state container passed through the generation pipeline.

    Each layer receives this context and modifies it in place.

    Attributes:
        grid: The terrain buffer being carved.
        table: Terrain codes of the biome being generated.
        streams: Per-run RNG provider. Layers take named streams from it via
            `rng()` so their random consumption stays independent.
        biome: The biome config, when generating from one.
        hubs: Hub centres in creation order.
        rooms: Accepted room rectangles (room-based recipes).
        edges: Carved hub links.
        special_center: Centre of the special structure (volcano, throne
            room) once it is placed. Feature layers keep clear of it.
        special_hub: Hub position of the special structure. It joins `hubs`
            when the special link layer runs.
        special_index: Index of the special hub in `hubs`, once appended.
        protected: Cells around hub centres that hazard and obstacle
            features must not write.
    """

    grid: GridBuilder
    table: TerrainTable
    streams: RNGProvider
    biome: BiomeConfig | None = None
    hubs: list[WorldTilePos] = field(default_factory=list)
    rooms: list[Rect] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    special_center: WorldTilePos | None = None
    special_hub: WorldTilePos | None = None
    special_index: int | None = None
    protected: np.ndarray = field(default_factory=lambda: np.zeros((0, 0), bool))

    @classmethod
    def create_empty(
        cls,
        width: int,
        height: int,
        table: TerrainTable,
        seed: RandomSeed = None,
        biome: BiomeConfig | None = None,
    ) -> GenerationContext:
        """Create a context whose grid is filled with the table's background.

        Args:
            width: Map width in tiles.
            height: Map height in tiles.
            table: Terrain table of the biome.
            seed: Master seed for the run's RNG streams.
            biome: Optional biome config carried for the layers.

        Returns:
            A new GenerationContext ready for layer processing.
        """
        grid = GridBuilder(width, height, table.fill_code, table.blocked)
        return cls(
            grid=grid,
            table=table,
            streams=RNGProvider(seed),
            biome=biome,
            protected=np.zeros((width, height), dtype=bool, order="F"),
        )

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def rng(self, domain: str) -> RNGStream:
        """The run's stream for `domain` (e.g. "map.hubs")."""
        return self.streams.get(domain)

    def add_hub(self, pos: WorldTilePos) -> int:
        """Append a hub, protect the cells around it and return its index."""
        self.hubs.append(pos)
        self.protect_disk(pos, config.HUB_PROTECT_RADIUS)
        return len(self.hubs) - 1

    def protect_disk(self, center: WorldTilePos, radius: int) -> None:
        cx, cy = center
        x0, x1 = max(0, cx - radius), min(self.width, cx + radius + 1)
        y0, y1 = max(0, cy - radius), min(self.height, cy + radius + 1)
        if x0 >= x1 or y0 >= y1:
            return
        xs = np.arange(x0, x1)[:, np.newaxis] - cx
        ys = np.arange(y0, y1)[np.newaxis, :] - cy
        self.protected[x0:x1, y0:y1] |= xs * xs + ys * ys <= radius * radius

    @property
    def regular_hubs(self) -> list[WorldTilePos]:
        """Hubs other than the special one."""
        return [h for i, h in enumerate(self.hubs) if i != self.special_index]

    def near_hub(self, pos: WorldTilePos, radius: float) -> bool:
        """True if any hub lies closer than `radius` to `pos`."""
        return any(distance(pos, hub) < radius for hub in self.hubs)

    def near_special(self, pos: WorldTilePos, radius: float) -> bool:
        return (
            self.special_center is not None
            and distance(pos, self.special_center) < radius
        )

    def hub_mask(self, radius: float) -> np.ndarray:
        """Cells within `radius` of any hub centre."""
        mask = np.zeros(self.grid.tiles.shape, dtype=bool, order="F")
        for x, y in self.hubs:
            if self.grid.in_bounds(x, y):
                mask[x, y] = True
        return grow_mask(mask, radius)

    def to_generated_map_data(self) -> GeneratedMapData:
        """Freeze the grid and package the run's results.

        Returns:
            A GeneratedMapData instance containing the final map data.
        """
        return GeneratedMapData(
            grid=self.grid.freeze(),
            table=self.table,
            hubs=list(self.hubs),
            edges=list(self.edges),
            special_index=self.special_index,
            rooms=list(self.rooms),
        )
