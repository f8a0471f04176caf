"""Connectivity planning, verification and repair.

Planning turns a hub list into corridor edges:
- `plan_nearest_links`: every hub links to its k nearest neighbours
  (k rolled per hub), giving a connected-with-high-probability graph with
  some loops.
- `plan_spanning_links`: Prim-style chain over the hubs plus a few random
  extra edges for cycles, used by the castle biomes.
- `plan_chain_links`: hubs chained in diagonal order plus random extras, used
  by the dungeon floor.
- `link_special_hub`: a late-added special hub joins its nearest regular hub.

Edges are (min, max) index pairs kept in a set so no pair is carved twice.
The returned lists preserve planning order, which carving follows.

Verification is a 4-connected flood fill from hub 0 over walkable cells.
Repair labels the walkable regions, fills tiny hubless pockets, and joins
everything else to hub 0's region along an A* route.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import tcod.path

from mapwright import config
from mapwright.environment.grid import CARDINAL_OFFSETS, BaseGrid, GridBuilder
from mapwright.util.coordinates import distance
from mapwright.util.rng import roll

from .carvers import stamp_disk

if TYPE_CHECKING:
    from mapwright.environment.tile_types import TerrainTable
    from mapwright.types import Edge, IntRange, WorldTilePos
    from mapwright.util.rng import RNG

logger = logging.getLogger(__name__)


class DisconnectedMapError(AssertionError):
    """Raised when generation leaves hubs unreachable from hub 0."""

    def __init__(self, unreachable: list[int]) -> None:
        super().__init__(f"Hubs unreachable from hub 0: {unreachable}")
        self.unreachable = unreachable


def make_edge(a: int, b: int) -> Edge:
    return (min(a, b), max(a, b))


# =============================================================================
# PLANNING
# =============================================================================


def plan_nearest_links(
    hubs: Sequence[WorldTilePos],
    k_range: IntRange,
    rng: RNG,
    *,
    exclude: Collection[int] = (),
) -> list[Edge]:
    """Link each hub to its nearest k hubs, skipping pairs already linked.

    Only the first k entries of the sorted distance list are considered, so
    a hub whose nearest neighbours are already linked may gain no new edge.

    Args:
        hubs: Hub centres in creation order.
        k_range: Inclusive range k is rolled from, once per hub.
        rng: Stream for the k rolls.
        exclude: Hub indices left out of planning (special hubs).
    """
    edges: list[Edge] = []
    seen: set[Edge] = set()
    indices = [i for i in range(len(hubs)) if i not in exclude]
    if len(indices) < 2:
        return edges

    for i in indices:
        by_distance = sorted(
            ((distance(hubs[i], hubs[j]), j) for j in indices if j != i),
        )
        k = roll(rng, k_range)
        for _, j in by_distance[:k]:
            edge = make_edge(i, j)
            if edge not in seen:
                seen.add(edge)
                edges.append(edge)
    return edges


def plan_spanning_links(
    hubs: Sequence[WorldTilePos],
    extra_range: IntRange,
    rng: RNG,
    *,
    exclude: Collection[int] = (),
) -> list[Edge]:
    """Connect hubs with a nearest-pair spanning chain plus random extras.

    Starting from the first hub, repeatedly links the closest
    (connected, unconnected) pair until every hub is connected, then adds
    `extra_range` random edges so the layout has loops.
    """
    indices = [i for i in range(len(hubs)) if i not in exclude]
    edges: list[Edge] = []
    if len(indices) < 2:
        return edges

    seen: set[Edge] = set()
    connected = [indices[0]]
    unconnected = indices[1:]
    while unconnected:
        _, best_from, best_to = min(
            (distance(hubs[a], hubs[b]), a, b) for a in connected for b in unconnected
        )
        edge = make_edge(best_from, best_to)
        seen.add(edge)
        edges.append(edge)
        connected.append(best_to)
        unconnected.remove(best_to)

    for _ in range(roll(rng, extra_range)):
        a = rng.choice(indices)
        b = rng.choice(indices)
        if a == b:
            continue
        edge = make_edge(a, b)
        if edge not in seen:
            seen.add(edge)
            edges.append(edge)
    return edges


def plan_chain_links(
    hubs: Sequence[WorldTilePos],
    extra_range: IntRange,
    rng: RNG,
    *,
    exclude: Collection[int] = (),
) -> list[Edge]:
    """Chain hubs in diagonal (x + y) order, then add random extras."""
    indices = sorted(
        (i for i in range(len(hubs)) if i not in exclude),
        key=lambda i: (hubs[i][0] + hubs[i][1], i),
    )
    edges: list[Edge] = []
    seen: set[Edge] = set()
    for a, b in zip(indices, indices[1:], strict=False):
        edge = make_edge(a, b)
        if edge not in seen:
            seen.add(edge)
            edges.append(edge)

    if len(indices) < 2:
        return edges
    for _ in range(roll(rng, extra_range)):
        a = rng.choice(indices)
        b = rng.choice(indices)
        edge = make_edge(a, b)
        if a != b and edge not in seen:
            seen.add(edge)
            edges.append(edge)
    return edges


def link_special_hub(
    hubs: Sequence[WorldTilePos], special_index: int
) -> Edge | None:
    """Edge from the special hub to its nearest regular hub, if any exists."""
    others = [i for i in range(len(hubs)) if i != special_index]
    if not others or not 0 <= special_index < len(hubs):
        return None
    nearest = min(others, key=lambda i: distance(hubs[i], hubs[special_index]))
    return make_edge(special_index, nearest)


# =============================================================================
# VERIFICATION
# =============================================================================


def flood_fill(walkable: np.ndarray, start: WorldTilePos) -> np.ndarray:
    """Boolean mask of cells 4-connected to `start` through walkable cells.

    Uses tcod's Dijkstra with cardinal moves only; cells left at the
    sentinel distance are unreachable.
    """
    x, y = start
    width, height = walkable.shape
    if not (0 <= x < width and 0 <= y < height) or not walkable[x, y]:
        return np.zeros(walkable.shape, dtype=bool)

    cost = np.ascontiguousarray(walkable, dtype=np.int8)
    dist = tcod.path.maxarray(walkable.shape, dtype=np.int32)
    dist[x, y] = 0
    tcod.path.dijkstra2d(dist, cost, cardinal=1, diagonal=None, out=dist)
    return dist != np.iinfo(np.int32).max


def unreachable_hubs(walkable: np.ndarray, hubs: Sequence[WorldTilePos]) -> list[int]:
    """Indices of hubs that hub 0 cannot reach. Empty when there are no hubs."""
    if not hubs:
        return []
    reach = flood_fill(walkable, hubs[0])
    return [i for i, (x, y) in enumerate(hubs) if not reach[x, y]]


def validate_connectivity(
    grid: BaseGrid, table: TerrainTable, hubs: Sequence[WorldTilePos]
) -> None:
    """Raise DisconnectedMapError if any hub is unreachable from hub 0."""
    missing = unreachable_hubs(table.walkable_map(grid.tiles), hubs)
    if missing:
        raise DisconnectedMapError(missing)


def label_regions(walkable: np.ndarray) -> tuple[np.ndarray, list[int]]:
    """Label 4-connected walkable regions.

    Returns:
        (labels, sizes): labels has -1 on non-walkable cells and the region
        index elsewhere; sizes[i] is the cell count of region i. Regions are
        numbered in column-major scan order.
    """
    width, height = walkable.shape
    # Plain lists: the BFS touches every cell and numpy scalar access is slow
    open_cells: list[list[bool]] = walkable.tolist()
    labels: list[list[int]] = [[-1] * height for _ in range(width)]
    sizes: list[int] = []

    for x in range(width):
        for y in range(height):
            if not open_cells[x][y] or labels[x][y] != -1:
                continue
            region_id = len(sizes)
            labels[x][y] = region_id
            queue = deque([(x, y)])
            size = 0
            while queue:
                cx, cy = queue.popleft()
                size += 1
                for dx, dy in CARDINAL_OFFSETS:
                    nx, ny = cx + dx, cy + dy
                    if (
                        0 <= nx < width
                        and 0 <= ny < height
                        and open_cells[nx][ny]
                        and labels[nx][ny] == -1
                    ):
                        labels[nx][ny] = region_id
                        queue.append((nx, ny))
            sizes.append(size)

    return np.array(labels, dtype=np.int32, order="F"), sizes


# =============================================================================
# REPAIR
# =============================================================================


@dataclass
class RepairSummary:
    """What a repair pass changed."""

    joined: int = 0
    filled: int = 0
    restored_hubs: int = 0
    bridged_hazards: int = 0


def _route_cost(
    grid: GridBuilder, table: TerrainTable, walkable: np.ndarray, margin: int
) -> np.ndarray:
    cost = np.full(grid.tiles.shape, config.REPAIR_BLOCKED_COST, dtype=np.int16)
    cost[table.hazard_map(grid.tiles)] = config.REPAIR_HAZARD_COST
    cost[walkable] = 1
    cost[:margin, :] = 0
    cost[-margin:, :] = 0
    cost[:, :margin] = 0
    cost[:, -margin:] = 0
    return cost


def _fill_pockets(
    grid: GridBuilder,
    table: TerrainTable,
    hubs: Sequence[WorldTilePos],
    min_region_size: int,
) -> int:
    """Fill hub-less regions smaller than `min_region_size`. Returns the count."""
    labels, sizes = label_regions(table.walkable_map(grid.tiles))
    hub_regions = {int(labels[x, y]) for x, y in hubs}
    pockets = [
        region_id
        for region_id, size in enumerate(sizes)
        if region_id not in hub_regions and size < min_region_size
    ]
    if pockets:
        grid.tiles[np.isin(labels, pockets)] = table.blocked
    return len(pockets)


def repair_connectivity(
    grid: GridBuilder,
    table: TerrainTable,
    hubs: Sequence[WorldTilePos],
    *,
    min_region_size: int = config.REPAIR_MIN_REGION_SIZE,
    passage_radius: int = config.REPAIR_PASSAGE_RADIUS,
    border_rings: int = 1,
) -> RepairSummary:
    """Make every walkable region worth keeping reachable from hub 0.

    - Hub centres that ended up non-walkable are reset to the floor code.
    - Regions without a hub and smaller than `min_region_size` are filled
      with the blocked code. This happens before any routing, so a route
      that later crosses an open cell is never cut by a fill.
    - Every other region is joined to hub 0's region along a 4-connected
      A* route. Walking costs 1, tunnelling through blocked terrain costs
      REPAIR_BLOCKED_COST and crossing a hazard costs REPAIR_HAZARD_COST, so
      hazards are only bridged when there is no reasonable way around.
      Bridged hazard cells are counted in the summary. The outer
      `border_rings` rings are impassable.
    """
    summary = RepairSummary()
    if not hubs:
        return summary

    for x, y in hubs:
        if not table.is_walkable(grid.get(x, y)):
            grid.set(x, y, table.floor)
            summary.restored_hubs += 1

    summary.filled = _fill_pockets(grid, table, hubs, min_region_size)

    walkable = table.walkable_map(grid.tiles)
    labels, sizes = label_regions(walkable)
    anchor = hubs[0]
    main_region = int(labels[anchor])

    cost = _route_cost(grid, table, walkable, max(1, border_rings))
    astar = tcod.path.AStar(cost=cost, diagonal=0)
    widen_codes = [int(c) for c in table.obstacles - table.hazards]

    for region_id in range(len(sizes)):
        if region_id == main_region:
            continue

        cells = np.argwhere(labels == region_id)
        source = (int(cells[0][0]), int(cells[0][1]))
        route: list[WorldTilePos] = astar.get_path(
            source[0], source[1], anchor[0], anchor[1]
        )
        if not route:
            logger.warning(f"No repair route from region {region_id} at {source}")
            continue

        for x, y in route:
            code = grid.get(x, y)
            if not table.is_walkable(code):
                if table.is_hazard(code):
                    summary.bridged_hazards += 1
                grid.set(x, y, table.floor)
            if passage_radius > 0:
                stamp_disk(
                    grid,
                    (x, y),
                    passage_radius,
                    table.floor,
                    overwritable_codes=widen_codes,
                    edge_margin=max(1, border_rings),
                )
        summary.joined += 1

    if summary.joined or summary.filled or summary.restored_hubs:
        logger.debug(
            f"Repair joined {summary.joined} regions, filled {summary.filled} "
            f"pockets, restored {summary.restored_hubs} hubs, bridged "
            f"{summary.bridged_hazards} hazard cells"
        )
    return summary
