"""Tests for link planning, reachability checks and repair."""

from __future__ import annotations

import numpy as np
import pytest

from mapwright.environment.generators.carvers import carve_room
from mapwright.environment.generators.connectivity import (
    DisconnectedMapError,
    flood_fill,
    label_regions,
    link_special_hub,
    make_edge,
    plan_chain_links,
    plan_nearest_links,
    plan_spanning_links,
    repair_connectivity,
    unreachable_hubs,
    validate_connectivity,
)
from mapwright.environment.generators.paths import carve_elbow
from mapwright.environment.grid import GridBuilder
from mapwright.environment.tile_types import TerrainID, TerrainTable
from mapwright.util.coordinates import Rect
from mapwright.util.rng import RNGStream

LINE_HUBS = [(0, 0), (10, 0), (20, 0), (50, 0)]


@pytest.fixture
def two_rooms(wall_grid: GridBuilder) -> tuple[GridBuilder, list[tuple[int, int]]]:
    """Two disjoint rooms on a 40x30 wall map, one hub in each."""
    first = Rect(5, 5, 10, 8)
    second = Rect(25, 15, 8, 6)
    carve_room(wall_grid, first, TerrainID.FLOOR)
    carve_room(wall_grid, second, TerrainID.FLOOR)
    return wall_grid, [first.center(), second.center()]


# =============================================================================
# Planning
# =============================================================================


class TestPlanning:
    """Tests for the edge planners."""

    def test_make_edge_orders_pair(self) -> None:
        assert make_edge(5, 2) == (2, 5)
        assert make_edge(2, 5) == (2, 5)

    def test_nearest_links_skip_duplicates(self, stream: RNGStream) -> None:
        edges = plan_nearest_links(LINE_HUBS, (1, 1), stream)
        assert edges == [(0, 1), (1, 2), (2, 3)]

    def test_nearest_links_honour_exclude(self, stream: RNGStream) -> None:
        edges = plan_nearest_links(LINE_HUBS, (3, 3), stream, exclude={3})
        assert all(3 not in edge for edge in edges)
        assert set(edges) == {(0, 1), (0, 2), (1, 2)}

    @pytest.mark.parametrize(
        "planner", [plan_nearest_links, plan_spanning_links, plan_chain_links]
    )
    def test_single_hub_has_no_edges(self, planner, stream: RNGStream) -> None:
        assert planner([(5, 5)], (1, 2), stream) == []

    def test_spanning_links_form_a_tree(self, stream: RNGStream) -> None:
        edges = plan_spanning_links(LINE_HUBS, (0, 0), stream)
        assert edges == [(0, 1), (1, 2), (2, 3)]

    def test_spanning_extras_never_duplicate(self, stream: RNGStream) -> None:
        hubs = [(i * 7 % 40, i * 13 % 30) for i in range(8)]
        edges = plan_spanning_links(hubs, (5, 10), stream)
        assert len(edges) == len(set(edges))
        assert all(a < b for a, b in edges)
        assert len(edges) >= len(hubs) - 1

    def test_chain_links_follow_diagonal_order(self, stream: RNGStream) -> None:
        hubs = [(30, 30), (5, 5), (20, 10)]
        assert plan_chain_links(hubs, (0, 0), stream) == [(1, 2), (0, 2)]

    def test_link_special_hub_picks_nearest(self) -> None:
        hubs = [(0, 0), (40, 40), (35, 38)]
        assert link_special_hub(hubs, 2) == (1, 2)
        assert link_special_hub([(0, 0)], 0) is None
        assert link_special_hub(hubs, 7) is None


# =============================================================================
# Verification
# =============================================================================


class TestVerification:
    def test_flood_fill_is_four_connected(self) -> None:
        walkable = np.zeros((5, 5), dtype=bool)
        walkable[1, 1] = walkable[2, 2] = walkable[2, 3] = True
        reach = flood_fill(walkable, (2, 2))
        assert reach[2, 3]
        assert not reach[1, 1]

    def test_flood_fill_from_blocked_start_is_empty(self) -> None:
        walkable = np.ones((5, 5), dtype=bool)
        walkable[0, 0] = False
        assert not flood_fill(walkable, (0, 0)).any()
        assert not flood_fill(walkable, (9, 9)).any()

    def test_unreachable_hubs_without_hubs(self) -> None:
        assert unreachable_hubs(np.ones((3, 3), dtype=bool), []) == []

    def test_disjoint_rooms_fail_validation(
        self, two_rooms, caves_table: TerrainTable
    ) -> None:
        grid, hubs = two_rooms
        with pytest.raises(DisconnectedMapError) as excinfo:
            validate_connectivity(grid.freeze(), caves_table, hubs)
        assert excinfo.value.unreachable == [1]
        assert isinstance(excinfo.value, AssertionError)

    def test_corridor_connects_rooms(
        self, two_rooms, caves_table: TerrainTable
    ) -> None:
        grid, hubs = two_rooms
        carve_elbow(grid, hubs[0], hubs[1], 1, True, [], code=TerrainID.FLOOR)
        validate_connectivity(grid.freeze(), caves_table, hubs)

    def test_label_regions(self) -> None:
        walkable = np.zeros((6, 4), dtype=bool)
        walkable[0:2, 0:2] = True
        walkable[4, 3] = True
        labels, sizes = label_regions(walkable)
        assert sizes == [4, 1]
        assert labels[1, 1] == 0
        assert labels[4, 3] == 1
        assert labels[3, 0] == -1


# =============================================================================
# Repair
# =============================================================================


class TestRepair:
    """Tests for repair_connectivity."""

    def test_joins_hub_regions(self, two_rooms, caves_table: TerrainTable) -> None:
        grid, hubs = two_rooms
        summary = repair_connectivity(grid, caves_table, hubs)
        assert summary.joined == 1
        validate_connectivity(grid.freeze(), caves_table, hubs)

    def test_fills_small_hubless_pockets(
        self, two_rooms, caves_table: TerrainTable
    ) -> None:
        grid, hubs = two_rooms
        grid.tiles[20:22, 4:6] = TerrainID.FLOOR
        carve_elbow(grid, hubs[0], hubs[1], 1, True, [], code=TerrainID.FLOOR)

        summary = repair_connectivity(grid, caves_table, hubs)

        assert summary.filled == 1
        assert summary.joined == 0
        assert (grid.tiles[20:22, 4:6] == TerrainID.WALL).all()

    def test_restores_blocked_hub_centres(
        self, two_rooms, caves_table: TerrainTable
    ) -> None:
        grid, hubs = two_rooms
        grid.set(*hubs[1], TerrainID.LAVA)
        summary = repair_connectivity(grid, caves_table, hubs)
        assert summary.restored_hubs == 1
        assert grid.get(*hubs[1]) == TerrainID.FLOOR
        validate_connectivity(grid.freeze(), caves_table, hubs)

    def test_route_stays_inside_border(
        self, two_rooms, caves_table: TerrainTable
    ) -> None:
        grid, hubs = two_rooms
        repair_connectivity(grid, caves_table, hubs, border_rings=2)
        assert (grid.tiles[:2, :] == TerrainID.WALL).all()
        assert (grid.tiles[:, -2:] == TerrainID.WALL).all()

    def test_no_hubs_is_a_no_op(self, wall_grid: GridBuilder, caves_table) -> None:
        summary = repair_connectivity(wall_grid, caves_table, [])
        assert (summary.joined, summary.filled, summary.restored_hubs) == (0, 0, 0)

    def test_pocket_on_route_is_not_refilled(self, caves_table: TerrainTable) -> None:
        """A one-cell pocket between two rooms must not cut the join route."""
        grid = GridBuilder(40, 20, TerrainID.WALL)
        grid.tiles[31:35, 7:12] = TerrainID.FLOOR
        grid.tiles[3:7, 7:12] = TerrainID.FLOOR
        grid.set(15, 9, TerrainID.FLOOR)
        hubs = [(32, 9), (4, 9)]

        summary = repair_connectivity(grid, caves_table, hubs, passage_radius=0)

        assert (summary.joined, summary.filled) == (1, 1)
        walkable = caves_table.walkable_map(grid.tiles)
        assert unreachable_hubs(walkable, hubs) == []

    def test_counts_bridged_hazard_cells(
        self, two_rooms, caves_table: TerrainTable
    ) -> None:
        grid, hubs = two_rooms
        grid.tiles[20, 1:29] = TerrainID.LAVA

        summary = repair_connectivity(grid, caves_table, hubs, passage_radius=0)

        assert summary.joined == 1
        assert summary.bridged_hazards == 1
        assert np.count_nonzero(grid.tiles == TerrainID.LAVA) == 27
        validate_connectivity(grid.freeze(), caves_table, hubs)
