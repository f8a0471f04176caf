"""Tests for hub, player start and entity placement."""

from __future__ import annotations

import numpy as np
import pytest

from mapwright.environment.generators.placement import (
    find_player_start,
    nearest_walkable,
    ring,
    sample_hub_centers,
    sample_positions,
)
from mapwright.environment.grid import GridBuilder
from mapwright.environment.tile_types import TerrainID
from mapwright.util.coordinates import distance
from mapwright.util.rng import RNGProvider, RNGStream


def _is_floor(code: int) -> bool:
    return code == TerrainID.FLOOR


class TestSamplePositions:
    """Tests for entity position sampling."""

    def test_positions_are_distinct_and_walkable(self, stream: RNGStream) -> None:
        grid = GridBuilder(20, 20, TerrainID.WALL)
        grid.tiles[5:15, 5:15] = TerrainID.FLOOR
        positions = sample_positions(grid, _is_floor, 30, None, 0.0, stream)

        assert len(positions) == 30
        assert len(set(positions)) == 30
        assert all(grid.get(x, y) == TerrainID.FLOOR for x, y in positions)

    def test_exclusion_radius_is_respected(self, stream: RNGStream) -> None:
        grid = GridBuilder(30, 30, TerrainID.FLOOR)
        positions = sample_positions(grid, _is_floor, 50, (15, 15), 6.0, stream)
        assert positions
        assert all(distance(pos, (15, 15)) >= 6.0 for pos in positions)

    def test_small_pool_returns_fewer(self, stream: RNGStream) -> None:
        grid = GridBuilder(10, 10, TerrainID.WALL)
        grid.set(3, 3, TerrainID.FLOOR)
        grid.set(4, 3, TerrainID.FLOOR)
        positions = sample_positions(grid, _is_floor, 5, None, 0.0, stream)
        assert sorted(positions) == [(3, 3), (4, 3)]

    def test_no_walkable_cells(self, wall_grid: GridBuilder, stream) -> None:
        assert sample_positions(wall_grid, _is_floor, 5, None, 0.0, stream) == []

    def test_zero_count(self, wall_grid: GridBuilder, stream: RNGStream) -> None:
        assert sample_positions(wall_grid, _is_floor, 0, None, 0.0, stream) == []

    def test_same_seed_same_positions(self) -> None:
        grid = GridBuilder(30, 30, TerrainID.FLOOR)
        first = sample_positions(
            grid, _is_floor, 10, (5, 5), 4.0, RNGProvider(3).get("level.placement")
        )
        second = sample_positions(
            grid, _is_floor, 10, (5, 5), 4.0, RNGProvider(3).get("level.placement")
        )
        assert first == second


class TestRingSearch:
    def test_ring_sizes(self) -> None:
        assert list(ring((5, 5), 0)) == [(5, 5)]
        assert len(set(ring((5, 5), 1))) == 8
        assert len(set(ring((5, 5), 3))) == 24

    def test_ring_is_at_chebyshev_radius(self) -> None:
        for x, y in ring((0, 0), 2):
            assert max(abs(x), abs(y)) == 2

    def test_nearest_walkable(self) -> None:
        walkable = np.zeros((10, 10), dtype=bool)
        walkable[8, 5] = True
        assert nearest_walkable(walkable, (5, 5), 5) == (8, 5)
        assert nearest_walkable(walkable, (5, 5), 2) is None


class TestFindPlayerStart:
    def test_first_hub_wins(self) -> None:
        walkable = np.zeros((10, 10), dtype=bool)
        assert find_player_start(walkable, [(3, 4), (6, 6)]) == (3, 4)

    def test_falls_back_to_walkable_near_centre(self) -> None:
        walkable = np.zeros((20, 10), dtype=bool)
        walkable[12, 5] = True
        assert find_player_start(walkable, []) == (12, 5)

    def test_falls_back_to_centre(self) -> None:
        walkable = np.zeros((20, 10), dtype=bool)
        assert find_player_start(walkable, []) == (10, 5)


class TestSampleHubCenters:
    """Tests for spaced hub rejection sampling."""

    @pytest.mark.parametrize("seed", range(5))
    def test_spacing_and_bounds(self, seed: int) -> None:
        stream = RNGProvider(seed).get("map.hubs")
        centers = sample_hub_centers(stream, 6, (10, 90), (10, 60), 15.0)
        assert len(centers) <= 6
        for i, a in enumerate(centers):
            assert 10 <= a[0] <= 90
            assert 10 <= a[1] <= 60
            for b in centers[i + 1 :]:
                assert distance(a, b) >= 15.0

    def test_existing_centres_are_avoided(self, stream: RNGStream) -> None:
        centers = sample_hub_centers(
            stream, 5, (0, 100), (0, 100), 20.0, attempts=200, existing=[(50, 50)]
        )
        assert all(distance(c, (50, 50)) >= 20.0 for c in centers)

    def test_accept_filters_candidates(self, stream: RNGStream) -> None:
        centers = sample_hub_centers(
            stream, 4, (0, 100), (0, 100), 1.0, accept=lambda pos: pos[0] < 50
        )
        assert all(x < 50 for x, _ in centers)

    def test_impossible_spacing_falls_short(self, stream: RNGStream) -> None:
        centers = sample_hub_centers(stream, 5, (0, 3), (0, 3), 100.0)
        assert len(centers) == 1
