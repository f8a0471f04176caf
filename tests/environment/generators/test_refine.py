"""Tests for smoothing, passage widening and the decoration passes."""

from __future__ import annotations

import numpy as np
import pytest

from mapwright.environment.generators.refine import (
    grow_mask,
    neighbor_counts,
    reclear,
    shoreline,
    smooth,
    widen_narrow_passages,
)
from mapwright.environment.grid import GridBuilder
from mapwright.environment.tile_types import TerrainID
from mapwright.util.rng import RNGStream

# =============================================================================
# Smoothing
# =============================================================================


class TestSmooth:
    """Tests for the cellular-automata pass."""

    def test_neighbor_counts(self) -> None:
        counts = neighbor_counts(np.ones((3, 3), dtype=bool))
        assert counts[1, 1] == 8
        assert counts[0, 0] == 3
        assert counts[0, 1] == 5

    def test_isolated_floor_closes(self, wall_grid: GridBuilder) -> None:
        wall_grid.set(10, 10, TerrainID.FLOOR)
        changed = smooth(wall_grid, TerrainID.FLOOR, TerrainID.WALL, [TerrainID.LAVA])
        assert changed == 1
        assert wall_grid.get(10, 10) == TerrainID.WALL

    def test_enclosed_wall_opens(self, wall_grid: GridBuilder) -> None:
        wall_grid.tiles[9:12, 9:12] = TerrainID.FLOOR
        wall_grid.set(10, 10, TerrainID.WALL)
        smooth(wall_grid, TerrainID.FLOOR, TerrainID.WALL, [])
        assert wall_grid.get(10, 10) == TerrainID.FLOOR

    def test_hazards_are_never_smoothed(self, wall_grid: GridBuilder) -> None:
        wall_grid.tiles[9:12, 9:12] = TerrainID.FLOOR
        wall_grid.set(10, 10, TerrainID.LAVA)
        wall_grid.set(20, 20, TerrainID.LAVA)
        smooth(wall_grid, TerrainID.FLOOR, TerrainID.WALL, [TerrainID.LAVA])
        assert wall_grid.get(10, 10) == TerrainID.LAVA
        assert wall_grid.get(20, 20) == TerrainID.LAVA

    def test_pass_reads_a_snapshot(self, wall_grid: GridBuilder) -> None:
        """Two adjacent floor cells both close; order cannot save either."""
        wall_grid.set(10, 10, TerrainID.FLOOR)
        wall_grid.set(11, 10, TerrainID.FLOOR)
        assert smooth(wall_grid, TerrainID.FLOOR, TerrainID.WALL, []) == 2

    def test_border_cells_are_left_alone(self) -> None:
        grid = GridBuilder(10, 10, TerrainID.FLOOR)
        grid.set(0, 5, TerrainID.WALL)
        grid.set(5, 0, TerrainID.WALL)
        smooth(grid, TerrainID.FLOOR, TerrainID.WALL, [])
        assert grid.get(0, 5) == TerrainID.WALL
        assert grid.get(5, 0) == TerrainID.WALL

    def test_counted_codes_widen_the_neighbourhood(self) -> None:
        grid = GridBuilder(10, 10, TerrainID.PATH)
        grid.set(5, 5, TerrainID.DARKLAND)
        smooth(grid, TerrainID.DARKLAND, TerrainID.OBSTACLE, [])
        assert grid.get(5, 5) == TerrainID.OBSTACLE

        grid.set(5, 5, TerrainID.DARKLAND)
        smooth(
            grid,
            TerrainID.DARKLAND,
            TerrainID.OBSTACLE,
            [],
            counted_codes=[TerrainID.DARKLAND, TerrainID.PATH],
        )
        assert grid.get(5, 5) == TerrainID.DARKLAND

    def test_other_codes_are_untouched(self, wall_grid: GridBuilder) -> None:
        wall_grid.set(10, 10, TerrainID.WATER)
        smooth(wall_grid, TerrainID.FLOOR, TerrainID.WALL, [])
        assert wall_grid.get(10, 10) == TerrainID.WATER


class TestWidenNarrowPassages:
    def test_single_tile_corridor_opens_to_three(self) -> None:
        grid = GridBuilder(10, 10, TerrainID.WALL)
        grid.tiles[2:8, 5] = TerrainID.FLOOR
        changed = widen_narrow_passages(grid, TerrainID.FLOOR, TerrainID.WALL)
        assert changed == 12
        assert (grid.tiles[2:8, 4:7] == TerrainID.FLOOR).all()
        assert (grid.tiles[2:8, 3] == TerrainID.WALL).all()

    def test_tiny_grid_is_skipped(self) -> None:
        grid = GridBuilder(4, 4, TerrainID.WALL)
        assert widen_narrow_passages(grid, TerrainID.FLOOR, TerrainID.WALL) == 0


# =============================================================================
# Decoration passes
# =============================================================================


class TestGrowMask:
    @pytest.mark.parametrize(("radius", "cells"), [(0, 1), (1, 5), (1.5, 9), (2, 13)])
    def test_single_cell_growth(self, radius: float, cells: int) -> None:
        mask = np.zeros((9, 9), dtype=bool)
        mask[4, 4] = True
        assert np.count_nonzero(grow_mask(mask, radius)) == cells

    def test_growth_clips_at_edges(self) -> None:
        mask = np.zeros((5, 5), dtype=bool)
        mask[0, 0] = True
        assert np.count_nonzero(grow_mask(mask, 1)) == 3


class TestShoreline:
    def test_converts_cells_near_target(self) -> None:
        grid = GridBuilder(10, 10, TerrainID.GRASS)
        grid.tiles[0:3, :] = TerrainID.OCEAN
        changed = shoreline(
            grid, [TerrainID.GRASS], TerrainID.SAND, [TerrainID.OCEAN], 2
        )
        assert changed == 20
        assert (grid.tiles[3:5, :] == TerrainID.SAND).all()
        assert (grid.tiles[5, :] == TerrainID.GRASS).all()

    def test_partial_chance_requires_rng(self) -> None:
        grid = GridBuilder(10, 10, TerrainID.GRASS)
        with pytest.raises(ValueError, match="rng"):
            shoreline(
                grid,
                [TerrainID.GRASS],
                TerrainID.SAND,
                [TerrainID.OCEAN],
                2,
                chance=0.5,
            )

    def test_zero_chance_changes_nothing(self, stream: RNGStream) -> None:
        grid = GridBuilder(10, 10, TerrainID.GRASS)
        grid.tiles[0:3, :] = TerrainID.OCEAN
        changed = shoreline(
            grid,
            [TerrainID.GRASS],
            TerrainID.SAND,
            [TerrainID.OCEAN],
            2,
            chance=0.0,
            rng=stream,
        )
        assert changed == 0


class TestReclear:
    def test_reopens_disks_but_keeps_codes(self, stream: RNGStream) -> None:
        grid = GridBuilder(30, 30, TerrainID.OBSTACLE)
        grid.set(10, 11, TerrainID.LAVA)
        reclear(
            grid,
            [(10, 10), (20, 20)],
            (2, 2),
            TerrainID.GRASS,
            [TerrainID.LAVA],
            stream,
        )
        assert grid.get(10, 10) == TerrainID.GRASS
        assert grid.get(20, 22) == TerrainID.GRASS
        assert grid.get(10, 11) == TerrainID.LAVA
        assert grid.get(10, 13) == TerrainID.OBSTACLE
