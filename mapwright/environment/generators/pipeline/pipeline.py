"""Pipeline generator that orchestrates layer-based map generation.

The PipelineGenerator runs a sequence of GenerationLayers, each transforming
a shared GenerationContext. This enables compositional map generation where
each layer focuses on one aspect of the map.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from mapwright import config
from mapwright.environment.generators.base import BaseMapGenerator, GeneratedMapData
from mapwright.environment.generators.connectivity import (
    DisconnectedMapError,
    validate_connectivity,
)

from .context import GenerationContext

if TYPE_CHECKING:
    from mapwright.environment.biomes import BiomeConfig
    from mapwright.environment.tile_types import TerrainTable
    from mapwright.types import RandomSeed, TileCoord

    from .layer import GenerationLayer

logger = logging.getLogger(__name__)


class PipelineGenerator(BaseMapGenerator):
    """Map generator that runs layers sequentially on a shared context.

    The pipeline creates a GenerationContext filled with the table's
    background and passes it through each layer in order. Afterwards the
    grid is frozen and hub reachability is checked.

    Example:
        generator = PipelineGenerator(
            layers=[
                HubLayer(spec),
                LinkLayer(links),
                BorderLayer(),
                RepairLayer(),
            ],
            table=table,
            map_width=200,
            map_height=150,
            seed=12345,
        )
        map_data = generator.generate()

    Attributes:
        layers: List of GenerationLayer instances to apply.
        table: Terrain table of the biome.
        seed: Optional random seed for reproducible generation.
        biome: Biome config handed to the context, if any.
    """

    def __init__(
        self,
        layers: list[GenerationLayer],
        table: TerrainTable,
        map_width: TileCoord,
        map_height: TileCoord,
        seed: RandomSeed = None,
        biome: BiomeConfig | None = None,
    ) -> None:
        """Initialize the pipeline generator.

        Args:
            layers: List of GenerationLayer instances to apply in order.
            table: Terrain table the layers carve with.
            map_width: Width of the map in tiles.
            map_height: Height of the map in tiles.
            seed: Optional random seed for deterministic generation.
            biome: Biome config, used for logging and by layers that need it.
        """
        super().__init__(map_width, map_height)
        self.layers = layers
        self.table = table
        self.seed = seed
        self.biome = biome

    def generate(self) -> GeneratedMapData:
        """Generate a map by running all layers in sequence.

        Returns:
            GeneratedMapData with the frozen grid, hubs and edges.

        Raises:
            DisconnectedMapError: If a hub is unreachable from hub 0 and
                config.VALIDATE_CONNECTIVITY is set.
        """
        ctx = GenerationContext.create_empty(
            width=self.map_width,
            height=self.map_height,
            table=self.table,
            seed=self.seed,
            biome=self.biome,
        )

        for layer in self.layers:
            logger.debug(f"Applying {type(layer).__name__}")
            layer.apply(ctx)

        data = ctx.to_generated_map_data()
        name = self.biome.name if self.biome is not None else "custom"

        try:
            validate_connectivity(data.grid, data.table, data.hubs)
        except DisconnectedMapError as e:
            if config.VALIDATE_CONNECTIVITY:
                raise
            logger.warning(f"{name} seed={self.seed!r}: {e}")

        walkable = float(np.mean(data.table.walkable_map(data.grid.tiles)))
        logger.info(
            f"Generated {name} seed={self.seed!r}: {len(data.hubs)} hubs, "
            f"{len(data.edges)} links, {walkable:.0%} walkable"
        )
        return data
