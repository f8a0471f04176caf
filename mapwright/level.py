"""Level generation entry points.

`generate` is the pure core: the same seed and biome always give the same
grid and hubs. `LevelSession` owns one active level at a time for callers
that enter and leave levels, and is the only place a seed is ever invented.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from mapwright import config
from mapwright.environment.biomes import BiomeConfig, get_biome
from mapwright.environment.generators.pipeline import create_pipeline
from mapwright.environment.map import LevelMap
from mapwright.util.rng import RNGProvider, roll

if TYPE_CHECKING:
    from mapwright.environment.grid import TerrainGrid
    from mapwright.types import RandomSeed, WorldTilePos

logger = logging.getLogger(__name__)


def generate(
    seed: RandomSeed, biome: BiomeConfig | str = config.DEFAULT_BIOME
) -> tuple[TerrainGrid, list[WorldTilePos]]:
    """Generate a level and return its frozen grid and hub list.

    Raises:
        ValueError: If the biome is unknown.
        DisconnectedMapError: If a hub is unreachable and validation is on.
    """
    data = create_pipeline(biome, seed).generate()
    return data.grid, data.hubs


def generate_level(
    seed: RandomSeed, biome: BiomeConfig | str = config.DEFAULT_BIOME
) -> LevelMap:
    """Generate a level wrapped in its query facade."""
    return LevelMap(create_pipeline(biome, seed).generate(), seed=seed)


class LevelSession:
    """Owns the active level of one biome between enter() and teardown()."""

    def __init__(self, biome: BiomeConfig | str = config.DEFAULT_BIOME) -> None:
        self.biome = get_biome(biome) if isinstance(biome, str) else biome
        self.seed: RandomSeed = None
        self._level: LevelMap | None = None

    @property
    def level(self) -> LevelMap:
        """The active level.

        Raises:
            RuntimeError: If no level has been entered.
        """
        if self._level is None:
            raise RuntimeError("No active level; call enter() first")
        return self._level

    @property
    def active(self) -> bool:
        return self._level is not None

    def enter(self, seed: RandomSeed = None) -> LevelMap:
        """Generate and activate a level, replacing any previous one.

        A missing seed is derived from the clock, so each unseeded entry
        differs; the chosen seed is kept on `self.seed` for reproduction.
        """
        if seed is None:
            seed = time.time_ns() & 0xFFFFFFFF
        self.seed = seed
        self._level = generate_level(seed, self.biome)
        logger.debug(f"Entered {self.biome.name} level with seed {seed!r}")
        return self._level

    def spawn_entities(self) -> list[WorldTilePos]:
        """Entity positions for the active level, per the biome's settings.

        The count is rolled from the biome's entity range; positions keep the
        biome's exclusion radius from the player start.
        """
        level = self.level
        rng = RNGProvider(self.seed).get("level.entities")
        count = roll(rng, self.biome.entity_count)
        return level.sample_entity_positions(
            count, self.biome.entity_exclusion, rng=rng
        )

    def teardown(self) -> None:
        """Drop the active level. Safe to call when nothing is active."""
        if self._level is not None:
            logger.debug(f"Tearing down {self.biome.name} level")
        self._level = None
        self.seed = None
