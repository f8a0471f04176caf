"""Terrain refinement passes.

These run after hubs and corridors are carved and clean up what the carvers
leave behind:
- `smooth`: one cellular-automata pass that removes isolated cells and fills
  pockets, never touching hazard cells.
- `widen_narrow_passages`: opens single-tile corridors in room-based maps.
- `shoreline`: converts cells near one kind of terrain into another
  (shallow water along coasts, sandy beaches along oceans).
- `reclear`: re-opens hub disks after decoration has cluttered them.

All passes read a snapshot of the grid and write the result in one step, so
cell order never influences the outcome.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

import numpy as np

from mapwright import config
from mapwright.environment.grid import MOORE_OFFSETS, GridBuilder, code_mask
from mapwright.util.rng import numpy_rng, roll

from .carvers import stamp_disk

if TYPE_CHECKING:
    from mapwright.types import IntRange, WorldTilePos
    from mapwright.util.rng import RNG


def neighbor_counts(mask: np.ndarray) -> np.ndarray:
    """Count True cells in each cell's Moore neighborhood.

    Cells outside the grid count as False.
    """
    width, height = mask.shape
    padded = np.pad(mask.astype(np.uint8), 1)
    counts = np.zeros(mask.shape, dtype=np.uint8)
    for dx, dy in MOORE_OFFSETS:
        counts += padded[1 + dx : 1 + dx + width, 1 + dy : 1 + dy + height]
    return counts


def smooth(
    grid: GridBuilder,
    walkable_code: int,
    blocked_code: int,
    hazard_codes: Iterable[int],
    *,
    counted_codes: Iterable[int] | None = None,
    birth: int = config.SMOOTH_BIRTH_LIMIT,
    death: int = config.SMOOTH_DEATH_LIMIT,
) -> int:
    """Run a single smoothing pass over the interior cells.

    For each interior cell, count the 8 neighbours holding a counted code
    (just `walkable_code` unless `counted_codes` is given):
    - a `blocked_code` cell with >= birth counted neighbours opens up;
    - a `walkable_code` cell with <= death counted neighbours closes.
    Hazard cells are skipped, and cells of any other code are left alone.
    The caller re-applies the border afterwards.

    Returns:
        Number of cells changed.
    """
    tiles = grid.tiles
    counted = code_mask(
        tiles, [walkable_code] if counted_codes is None else counted_codes
    )
    counts = neighbor_counts(counted)

    eligible = np.zeros(tiles.shape, dtype=bool)
    eligible[1:-1, 1:-1] = True
    eligible &= ~code_mask(tiles, hazard_codes)

    opens = eligible & (tiles == blocked_code) & (counts >= birth)
    closes = eligible & (tiles == walkable_code) & (counts <= death)
    tiles[opens] = walkable_code
    tiles[closes] = blocked_code
    return int(np.count_nonzero(opens) + np.count_nonzero(closes))


def widen_narrow_passages(
    grid: GridBuilder, floor_code: int, wall_code: int, iterations: int = 5
) -> int:
    """Open the walls beside one-tile-wide passages.

    A floor cell with walls directly above and below opens the wall on each
    side that is itself backed by wall (likewise left/right), repeated until
    nothing changes or `iterations` passes have run.
    """
    tiles = grid.tiles
    if tiles.shape[0] < 5 or tiles.shape[1] < 5:
        return 0

    total = 0
    for _ in range(iterations):
        floor = tiles == floor_code
        wall = tiles == wall_code
        core = floor[2:-2, 2:-2]
        opened = np.zeros(tiles.shape, dtype=bool)

        narrow_h = core & wall[2:-2, 1:-3] & wall[2:-2, 3:-1]
        opened[2:-2, 1:-3] |= narrow_h & wall[2:-2, :-4]
        opened[2:-2, 3:-1] |= narrow_h & wall[2:-2, 4:]

        narrow_v = core & wall[1:-3, 2:-2] & wall[3:-1, 2:-2]
        opened[1:-3, 2:-2] |= narrow_v & wall[:-4, 2:-2]
        opened[3:-1, 2:-2] |= narrow_v & wall[4:, 2:-2]

        changed = int(np.count_nonzero(opened))
        if changed == 0:
            break
        tiles[opened] = floor_code
        total += changed
    return total


def grow_mask(mask: np.ndarray, radius: float) -> np.ndarray:
    """Cells within Euclidean `radius` of any True cell in `mask`."""
    width, height = mask.shape
    grown = mask.copy()
    reach = math.ceil(radius)
    for dx in range(-reach, reach + 1):
        for dy in range(-reach, reach + 1):
            if (dx == 0 and dy == 0) or dx * dx + dy * dy > radius * radius:
                continue
            dst = (
                slice(max(0, dx), width + min(0, dx)),
                slice(max(0, dy), height + min(0, dy)),
            )
            src = (
                slice(max(0, -dx), width - max(0, dx)),
                slice(max(0, -dy), height - max(0, dy)),
            )
            grown[dst] |= mask[src]
    return grown


def shoreline(
    grid: GridBuilder,
    source_codes: Iterable[int],
    target_code: int,
    near_codes: Iterable[int],
    radius: float,
    *,
    chance: float = 1.0,
    rng: RNG | None = None,
) -> int:
    """Turn `source_codes` cells within `radius` of `near_codes` into `target_code`.

    With chance < 1 each qualifying cell converts independently.
    """
    tiles = grid.tiles
    mask = grow_mask(code_mask(tiles, near_codes), radius) & code_mask(
        tiles, source_codes
    )
    if chance < 1.0:
        if rng is None:
            raise ValueError("shoreline needs an rng when chance < 1")
        mask &= numpy_rng(rng).random(tiles.shape) < chance
    tiles[mask] = target_code
    return int(np.count_nonzero(mask))


def reclear(
    grid: GridBuilder,
    centers: Sequence[WorldTilePos],
    radius_range: IntRange,
    code: int,
    keep_codes: Iterable[int],
    rng: RNG,
) -> int:
    """Re-open a disk around each centre, leaving `keep_codes` cells intact."""
    keep = [int(c) for c in keep_codes]
    return sum(
        stamp_disk(grid, center, roll(rng, radius_range), code, skip_codes=keep)
        for center in centers
    )
