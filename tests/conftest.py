from __future__ import annotations

import pytest

from mapwright.environment.grid import GridBuilder
from mapwright.environment.tile_types import TerrainID, TerrainTable
from mapwright.util.rng import RNGProvider, RNGStream


@pytest.fixture
def caves_table() -> TerrainTable:
    """Floor/wall table with lava as the only hazard."""
    return TerrainTable(
        floor=TerrainID.FLOOR,
        blocked=TerrainID.WALL,
        walkable=frozenset({TerrainID.FLOOR}),
        hazards=frozenset({TerrainID.LAVA}),
    )


@pytest.fixture
def wall_grid() -> GridBuilder:
    """A 40x30 builder filled with wall."""
    return GridBuilder(40, 30, TerrainID.WALL)


@pytest.fixture
def stream() -> RNGStream:
    return RNGProvider(master_seed=42).get("test.stream")
