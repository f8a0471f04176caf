"""Safe placement of hubs, the player start and entities."""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterator, Sequence
from typing import TYPE_CHECKING

import numpy as np

from mapwright import config
from mapwright.environment.grid import BaseGrid, code_mask
from mapwright.util.coordinates import distance

if TYPE_CHECKING:
    from mapwright.types import IntRange, WorldTilePos
    from mapwright.util.rng import RNG


def sample_positions(
    grid: BaseGrid,
    walkable_predicate: Callable[[int], bool],
    count: int,
    exclusion_center: WorldTilePos | None,
    exclusion_radius: float,
    rng: RNG,
) -> list[WorldTilePos]:
    """Draw up to `count` distinct cells whose code satisfies the predicate.

    Candidates are drawn uniformly without replacement. A draw closer than
    `exclusion_radius` to `exclusion_center` is discarded and not retried,
    so the loop ends after `count` acceptances or when the pool runs dry.
    """
    if count <= 0:
        return []
    codes = [int(c) for c in np.unique(grid.tiles) if walkable_predicate(int(c))]
    pool = [(int(x), int(y)) for x, y in np.argwhere(code_mask(grid.tiles, codes))]
    return sample_from_pool(pool, count, exclusion_center, exclusion_radius, rng)


def sample_from_pool(
    pool: list[WorldTilePos],
    count: int,
    exclusion_center: WorldTilePos | None,
    exclusion_radius: float,
    rng: RNG,
) -> list[WorldTilePos]:
    """Rejection-sample from `pool` in place (the pool is consumed)."""
    picked: list[WorldTilePos] = []
    while len(picked) < count and pool:
        index = rng.randint(0, len(pool) - 1)
        # Swap-remove keeps each draw O(1)
        pos = pool[index]
        pool[index] = pool[-1]
        pool.pop()
        if (
            exclusion_center is not None
            and distance(pos, exclusion_center) < exclusion_radius
        ):
            continue
        picked.append(pos)
    return picked


def ring(center: WorldTilePos, radius: int) -> Iterator[WorldTilePos]:
    """Cells at Chebyshev distance exactly `radius` from `center`."""
    cx, cy = center
    if radius == 0:
        yield center
        return
    for x in range(cx - radius, cx + radius + 1):
        yield (x, cy - radius)
    for y in range(cy - radius + 1, cy + radius):
        yield (cx - radius, y)
        yield (cx + radius, y)
    for x in range(cx - radius, cx + radius + 1):
        yield (x, cy + radius)


def nearest_walkable(
    walkable: np.ndarray, origin: WorldTilePos, max_radius: int
) -> WorldTilePos | None:
    """Expanding ring search for the closest walkable cell to `origin`."""
    width, height = walkable.shape
    for radius in range(max_radius + 1):
        for x, y in ring(origin, radius):
            if 0 <= x < width and 0 <= y < height and walkable[x, y]:
                return (x, y)
    return None


def find_player_start(
    walkable: np.ndarray,
    hubs: Sequence[WorldTilePos],
    *,
    max_radius: int = config.PLAYER_START_SEARCH_RADIUS,
) -> WorldTilePos:
    """Hub 0, else the walkable cell nearest the map centre, else the centre."""
    if hubs:
        return hubs[0]
    width, height = walkable.shape
    center = (width // 2, height // 2)
    found = nearest_walkable(walkable, center, max_radius)
    return found if found is not None else center


def sample_hub_centers(
    rng: RNG,
    count: int,
    x_range: IntRange,
    y_range: IntRange,
    spacing: float,
    *,
    attempts: int | None = None,
    existing: Collection[WorldTilePos] = (),
    accept: Callable[[WorldTilePos], bool] | None = None,
) -> list[WorldTilePos]:
    """Rejection-sample up to `count` centres at least `spacing` apart.

    Candidates also keep `spacing` from `existing` centres and must pass
    `accept` when given. At most `attempts` candidates are drawn (default
    HUB_ATTEMPT_FACTOR * count); falling short is not an error.
    """
    if attempts is None:
        attempts = config.HUB_ATTEMPT_FACTOR * count
    placed: list[WorldTilePos] = []
    for _ in range(attempts):
        if len(placed) >= count:
            break
        pos = (rng.randint(*x_range), rng.randint(*y_range))
        if any(distance(pos, other) < spacing for other in (*existing, *placed)):
            continue
        if accept is not None and not accept(pos):
            continue
        placed.append(pos)
    return placed
