"""Path and tunnel carving.

`carve_path` is the one corridor primitive: tunnels, castle corridors, field
paths, cloud bridges and causeways all go through it and differ only in
width, windiness and which codes they may overwrite. `carve_drift` covers the
features that wander without a destination (rivers, lava flows, mountain
ranges).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

import numpy as np

from mapwright import config
from mapwright.environment.grid import GridBuilder
from mapwright.util.coordinates import manhattan

from .carvers import stamp_disk

if TYPE_CHECKING:
    from mapwright.types import FloatPos, Heading, WorldTilePos
    from mapwright.util.rng import RNG

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _cell(pos: FloatPos) -> WorldTilePos:
    return (round(pos[0]), round(pos[1]))


def carve_path(
    grid: GridBuilder,
    start: WorldTilePos,
    end: WorldTilePos,
    width: int,
    windiness: float,
    non_overwritable_codes: Iterable[int],
    rng: RNG | None = None,
    *,
    code: int,
    wind_frequency: float = config.WIND_FREQUENCY,
    wind_scale: float = config.WIND_SCALE,
    jitter: float = config.PATH_JITTER,
    step: float = config.PATH_STEP,
    edge_margin: int = 1,
    clamp_margin: int = 3,
    overwritable_codes: Iterable[int] | None = None,
    allowed: np.ndarray | None = None,
) -> int:
    """Carve a meandering corridor of disk radius `width` from start to end.

    Algorithm:
    1. Stamp a disk at the rounded cursor, skipping `non_overwritable_codes`
       and cells within `edge_margin` of the edge.
    2. Head toward `end`, bend along the perpendicular by
       sin(|cursor| * wind_frequency) * windiness * wind_scale, add +/- jitter
       per axis and renormalize.
    3. Advance by `step` and clamp the cursor `clamp_margin` inside the map.

    The seek loop ends within PATH_ARRIVAL_DISTANCE of `end`, or after
    PATH_ITERATION_FACTOR * manhattan / step iterations. The remaining gap is
    then stamped along a straight line so the corridor always meets `end`.

    Returns:
        Number of cells changed.
    """
    non_overwritable = [int(c) for c in non_overwritable_codes]
    overwritable = (
        None if overwritable_codes is None else [int(c) for c in overwritable_codes]
    )
    if jitter > 0 and rng is None:
        raise ValueError("carve_path needs an rng when jitter > 0")

    def stamp(pos: FloatPos) -> int:
        return stamp_disk(
            grid,
            _cell(pos),
            width,
            code,
            skip_codes=non_overwritable,
            overwritable_codes=overwritable,
            edge_margin=edge_margin,
            allowed=allowed,
        )

    target_x, target_y = float(end[0]), float(end[1])
    cur_x, cur_y = float(start[0]), float(start[1])
    max_iterations = max(
        1, int(config.PATH_ITERATION_FACTOR * manhattan(start, end) / step)
    )
    low_x, high_x = clamp_margin, grid.width - 1 - clamp_margin
    low_y, high_y = clamp_margin, grid.height - 1 - clamp_margin

    changed = 0
    iterations = 0
    while (
        math.hypot(target_x - cur_x, target_y - cur_y) > config.PATH_ARRIVAL_DISTANCE
        and iterations < max_iterations
    ):
        iterations += 1
        changed += stamp((cur_x, cur_y))

        length = math.hypot(target_x - cur_x, target_y - cur_y)
        dir_x = (target_x - cur_x) / length
        dir_y = (target_y - cur_y) / length

        wind = (
            math.sin(math.hypot(cur_x, cur_y) * wind_frequency) * windiness * wind_scale
        )
        dir_x, dir_y = dir_x - dir_y * wind, dir_y + dir_x * wind

        if jitter > 0 and rng is not None:
            dir_x += rng.uniform(-jitter, jitter)
            dir_y += rng.uniform(-jitter, jitter)

        norm = math.hypot(dir_x, dir_y)
        if norm > 0:
            dir_x /= norm
            dir_y /= norm

        cur_x = _clamp(cur_x + dir_x * step, low_x, high_x)
        cur_y = _clamp(cur_y + dir_y * step, low_y, high_y)

    if iterations >= max_iterations:
        logger.debug(f"Path {start}->{end} hit the {max_iterations} iteration cap")

    # Close the remaining gap in unit steps.
    gap = math.hypot(target_x - cur_x, target_y - cur_y)
    steps = max(1, math.ceil(gap))
    for i in range(steps + 1):
        t = i / steps
        changed += stamp(
            (cur_x + (target_x - cur_x) * t, cur_y + (target_y - cur_y) * t)
        )

    return changed


def carve_elbow(
    grid: GridBuilder,
    start: WorldTilePos,
    end: WorldTilePos,
    width: int,
    horizontal_first: bool,
    non_overwritable_codes: Iterable[int],
    *,
    code: int,
    edge_margin: int = 1,
) -> int:
    """Carve an L-shaped corridor as two straight, jitter-free paths."""
    if horizontal_first:
        corner = (end[0], start[1])
    else:
        corner = (start[0], end[1])
    blocked = list(non_overwritable_codes)
    changed = carve_path(
        grid,
        start,
        corner,
        width,
        0.0,
        blocked,
        code=code,
        jitter=0.0,
        edge_margin=edge_margin,
        clamp_margin=edge_margin,
    )
    changed += carve_path(
        grid,
        corner,
        end,
        width,
        0.0,
        blocked,
        code=code,
        jitter=0.0,
        edge_margin=edge_margin,
        clamp_margin=edge_margin,
    )
    return changed


def carve_drift(
    grid: GridBuilder,
    start: WorldTilePos,
    heading: Heading,
    length: int,
    width: int,
    code: int,
    rng: RNG,
    *,
    drift: Heading = (0.2, 0.2),
    step: float = config.PATH_STEP,
    taper: bool = False,
    wave: tuple[float, float] = (0.0, 0.0),
    skip_codes: Iterable[int] | None = None,
    overwritable_codes: Iterable[int] | None = None,
    stop: Callable[[int, int], bool] | None = None,
    edge_margin: int = 1,
    travel_margin: int = 5,
    allowed: np.ndarray | None = None,
) -> int:
    """Walk from `start` along a drifting heading, stamping disks.

    Each step adds +/- drift[0] and +/- drift[1] to the heading and
    renormalizes. With `taper`, the radius shrinks by one per step over the
    second half of the walk (minimum 1). `wave = (frequency, amplitude)`
    offsets each stamp perpendicular to the heading by
    sin(i * frequency) * amplitude.

    The walk ends after `length` steps, when the cursor leaves the map by
    `travel_margin`, or as soon as `stop(x, y)` returns True.
    """
    skip = None if skip_codes is None else [int(c) for c in skip_codes]
    overwritable = (
        None if overwritable_codes is None else [int(c) for c in overwritable_codes]
    )
    dir_x, dir_y = heading
    norm = math.hypot(dir_x, dir_y) or 1.0
    dir_x, dir_y = dir_x / norm, dir_y / norm
    cur_x, cur_y = float(start[0]), float(start[1])
    frequency, amplitude = wave
    radius = width
    changed = 0

    for i in range(length):
        offset = math.sin(i * frequency) * amplitude if amplitude else 0.0
        x, y = _cell((cur_x - dir_y * offset, cur_y + dir_x * offset))
        if stop is not None and stop(x, y):
            break
        changed += stamp_disk(
            grid,
            (x, y),
            radius,
            code,
            skip_codes=skip,
            overwritable_codes=overwritable,
            edge_margin=edge_margin,
            allowed=allowed,
        )

        dir_x += rng.uniform(-drift[0], drift[0])
        dir_y += rng.uniform(-drift[1], drift[1])
        norm = math.hypot(dir_x, dir_y) or 1.0
        dir_x, dir_y = dir_x / norm, dir_y / norm
        cur_x += dir_x * step
        cur_y += dir_y * step

        if taper and i > length // 2 and radius > 1:
            radius -= 1

        if not (
            travel_margin <= cur_x <= grid.width - travel_margin
            and travel_margin <= cur_y <= grid.height - travel_margin
        ):
            break

    return changed
