"""Shape carving primitives.

Every function here stamps a region onto a GridBuilder and returns the number
of cells it changed. None of them fail: a carve that finds nothing to do
simply changes zero cells. Elliptical blobs are the shared primitive behind
chambers, islands, clearings and pools; only radii, noise and the overwritable
set differ between biomes.

All carvers are vectorized over the affected bounding box. Per-cell noise is
drawn from a numpy Generator derived from the caller's RNG stream, so results
stay reproducible from the run seed.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np

from mapwright import config
from mapwright.environment.grid import GridBuilder, code_mask
from mapwright.util.coordinates import Rect
from mapwright.util.rng import numpy_rng

if TYPE_CHECKING:
    from mapwright.types import RoomShape, WorldTilePos
    from mapwright.util.rng import RNG


def _clip_box(
    grid: GridBuilder, x0: int, y0: int, x1: int, y1: int, edge_margin: int
) -> tuple[int, int, int, int] | None:
    """Clip a half-open box to the interior; None if nothing remains."""
    x0 = max(edge_margin, x0)
    y0 = max(edge_margin, y0)
    x1 = min(grid.width - edge_margin, x1)
    y1 = min(grid.height - edge_margin, y1)
    if x0 >= x1 or y0 >= y1:
        return None
    return x0, y0, x1, y1


def _apply(
    region: np.ndarray,
    mask: np.ndarray,
    code: int,
    overwritable_codes: Iterable[int] | None,
    skip_codes: Iterable[int] | None,
) -> int:
    if overwritable_codes is not None:
        mask &= code_mask(region, overwritable_codes)
    if skip_codes:
        mask &= ~code_mask(region, skip_codes)
    mask &= region != code
    region[mask] = code
    return int(np.count_nonzero(mask))


# =============================================================================
# ELLIPSES AND DISKS
# =============================================================================


def carve_blob(
    grid: GridBuilder,
    center: WorldTilePos,
    radius_x: int,
    radius_y: int,
    noise_amplitude: float,
    target_code: int,
    overwritable_codes: Iterable[int] | None,
    rng: RNG | None = None,
    *,
    threshold: float = 1.0,
    edge_margin: int = config.DEFAULT_EDGE_MARGIN,
    bbox_margin: int = config.BLOB_BBOX_MARGIN,
    allowed: np.ndarray | None = None,
) -> int:
    """Carve a noisy ellipse.

    A cell inside the bounding box (radius + bbox_margin) is carved when
    (dx/rx)^2 + (dy/ry)^2 < threshold + U[0, noise_amplitude) and its current
    code is overwritable. Cells within `edge_margin` of the map edge are never
    touched.

    Args:
        grid: Grid to modify.
        center: Ellipse centre.
        radius_x: Horizontal radius in tiles.
        radius_y: Vertical radius in tiles.
        noise_amplitude: Upper bound of the per-cell perturbation. 0 gives an
            exact, RNG-free ellipse.
        target_code: Code to write.
        overwritable_codes: Only cells currently holding one of these change.
            None lets every code change.
        rng: Stream for the perturbation. Required when noise_amplitude > 0.
        threshold: Base squared-distance cutoff. Values below 1 shrink the
            blob inside its nominal radii (cloud islands, dense cores).
        allowed: Optional full-size boolean mask; False cells are left alone.

    Returns:
        Number of cells changed.
    """
    cx, cy = center
    box = _clip_box(
        grid,
        cx - radius_x - bbox_margin,
        cy - radius_y - bbox_margin,
        cx + radius_x + bbox_margin + 1,
        cy + radius_y + bbox_margin + 1,
        edge_margin,
    )
    if box is None or radius_x <= 0 or radius_y <= 0:
        return 0
    x0, y0, x1, y1 = box

    xs = (np.arange(x0, x1)[:, np.newaxis] - cx) / radius_x
    ys = (np.arange(y0, y1)[np.newaxis, :] - cy) / radius_y
    dist = xs * xs + ys * ys

    cutoff: np.ndarray | float = threshold
    if noise_amplitude > 0:
        if rng is None:
            raise ValueError("carve_blob needs an rng when noise_amplitude > 0")
        cutoff = threshold + numpy_rng(rng).random(dist.shape) * noise_amplitude

    mask = dist < cutoff
    if allowed is not None:
        mask &= allowed[x0:x1, y0:y1]
    return _apply(grid.tiles[x0:x1, y0:y1], mask, target_code, overwritable_codes, None)


def stamp_disk(
    grid: GridBuilder,
    center: WorldTilePos,
    radius: int,
    code: int,
    *,
    skip_codes: Iterable[int] | None = None,
    overwritable_codes: Iterable[int] | None = None,
    edge_margin: int = 1,
    allowed: np.ndarray | None = None,
) -> int:
    """Fill the disk dx^2 + dy^2 <= radius^2 around `center`.

    Cells holding a code in `skip_codes` are left alone, as are cells within
    `edge_margin` of the map edge.
    """
    cx, cy = center
    radius = max(0, radius)
    box = _clip_box(
        grid, cx - radius, cy - radius, cx + radius + 1, cy + radius + 1, edge_margin
    )
    if box is None:
        return 0
    x0, y0, x1, y1 = box

    xs = np.arange(x0, x1)[:, np.newaxis] - cx
    ys = np.arange(y0, y1)[np.newaxis, :] - cy
    mask = xs * xs + ys * ys <= radius * radius
    if allowed is not None:
        mask &= allowed[x0:x1, y0:y1]
    return _apply(grid.tiles[x0:x1, y0:y1], mask, code, overwritable_codes, skip_codes)


def carve_landmass(
    grid: GridBuilder,
    center: WorldTilePos,
    radius_x: int,
    radius_y: int,
    target_code: int,
    overwritable_codes: Iterable[int] | None,
    rng: RNG,
    *,
    threshold: float = 1.0,
    wave: tuple[float, float, float, float] = (0.1, 0.15, 0.15, 0.1),
    grain: float = 0.1,
    edge_margin: int = config.DEFAULT_EDGE_MARGIN,
) -> int:
    """Carve an ellipse with a rolling sinusoidal coastline.

    The coastline offset is sin(x * fx) * ax + cos(y * fy) * ay + U[0, grain),
    where wave = (fx, ax, fy, ay). Coordinates are absolute, so neighbouring
    landmasses share one coastline pattern.
    """
    fx, ax, fy, ay = wave
    reach = 1.0 + abs(ax) + abs(ay) + grain
    box = _clip_box(
        grid,
        int(center[0] - radius_x * reach) - 1,
        int(center[1] - radius_y * reach) - 1,
        int(center[0] + radius_x * reach) + 2,
        int(center[1] + radius_y * reach) + 2,
        edge_margin,
    )
    if box is None or radius_x <= 0 or radius_y <= 0:
        return 0
    x0, y0, x1, y1 = box

    abs_x = np.arange(x0, x1)[:, np.newaxis]
    abs_y = np.arange(y0, y1)[np.newaxis, :]
    dx = (abs_x - center[0]) / radius_x
    dy = (abs_y - center[1]) / radius_y
    dist = dx * dx + dy * dy

    coast = np.sin(abs_x * fx) * ax + np.cos(abs_y * fy) * ay
    coast = coast + numpy_rng(rng).random(dist.shape) * grain

    mask = dist < threshold + coast
    return _apply(grid.tiles[x0:x1, y0:y1], mask, target_code, overwritable_codes, None)


# =============================================================================
# ROOMS
# =============================================================================


def room_fits(rooms: Iterable[Rect], candidate: Rect, margin: int) -> bool:
    """True if `candidate` clears every accepted room by `margin` tiles."""
    expanded = candidate.expanded(margin)
    return not any(expanded.intersects(other) for other in rooms)


def carve_room(grid: GridBuilder, room: Rect, code: int) -> int:
    """Set every interior cell of `room` (inside a 1-cell rim) to `code`."""
    box = _clip_box(grid, room.x1 + 1, room.y1 + 1, room.x2, room.y2, 1)
    if box is None:
        return 0
    x0, y0, x1, y1 = box
    region = grid.tiles[x0:x1, y0:y1]
    changed = int(np.count_nonzero(region != code))
    region[:, :] = code
    return changed


def carve_room_shape(
    grid: GridBuilder,
    room: Rect,
    shape: RoomShape,
    code: int,
    rng: RNG,
    *,
    oval_noise: float = 0.2,
) -> int:
    """Carve a room as a ragged rectangle, an L, or a noisy oval."""
    match shape:
        case "rect":
            changed = carve_room(grid, room, code)
            return changed + _add_irregular_edges(grid, room, code, rng)
        case "l":
            half_w = room.width // 2
            half_h = room.height // 2
            arm_a = Rect(room.x1, room.y1, room.width, half_h + 3)
            arm_b = Rect(room.x1, room.y1, half_w + 3, room.height)
            return carve_room(grid, arm_a, code) + carve_room(grid, arm_b, code)
        case "oval":
            return carve_blob(
                grid,
                room.center(),
                max(1, room.width // 2),
                max(1, room.height // 2),
                oval_noise,
                code,
                [grid.blocked_code],
                rng,
                bbox_margin=0,
                edge_margin=1,
            )
    raise ValueError(f"Unknown room shape: {shape!r}")


def _add_irregular_edges(grid: GridBuilder, room: Rect, code: int, rng: RNG) -> int:
    """Push small notches out of the room walls."""
    changed = 0
    for _ in range(rng.randint(3, 8)):
        side = rng.randint(0, 3)
        size = rng.randint(2, 5)
        depth = rng.randint(2, 4)
        if side in (0, 1):
            px = rng.randint(room.x1 + 2, max(room.x1 + 2, room.x2 - 3))
            notch = (
                Rect(px - 1, room.y1 - depth, size + 1, depth + 1)
                if side == 0
                else Rect(px - 1, room.y2 - 1, size + 1, depth + 1)
            )
        else:
            py = rng.randint(room.y1 + 2, max(room.y1 + 2, room.y2 - 3))
            notch = (
                Rect(room.x1 - depth, py - 1, depth + 1, size + 1)
                if side == 2
                else Rect(room.x2 - 1, py - 1, depth + 1, size + 1)
            )
        changed += carve_room(grid, notch, code)
    return changed


# =============================================================================
# BORDERS AND DECORATION
# =============================================================================


def enforce_border(grid: GridBuilder, code: int, rings: int = 1) -> None:
    """Force the outermost `rings` rings of the grid to `code`."""
    rings = max(1, min(rings, grid.width // 2, grid.height // 2))
    grid.tiles[:rings, :] = code
    grid.tiles[-rings:, :] = code
    grid.tiles[:, :rings] = code
    grid.tiles[:, -rings:] = code


def border_band(
    grid: GridBuilder,
    depth: int,
    chance: float,
    code: int,
    overwritable_codes: Iterable[int] | None,
    rng: RNG,
) -> int:
    """Scatter `code` over the outer `depth` rings with probability `chance`."""
    band = np.zeros(grid.tiles.shape, dtype=bool)
    band[:depth, :] = True
    band[-depth:, :] = True
    band[:, :depth] = True
    band[:, -depth:] = True
    mask = band & (numpy_rng(rng).random(grid.tiles.shape) < chance)
    return _apply(grid.tiles, mask, code, overwritable_codes, None)


def scatter_cluster(
    grid: GridBuilder,
    center: WorldTilePos,
    radius_x: int,
    radius_y: int,
    density: float,
    code: int,
    overwritable_codes: Iterable[int] | None,
    rng: RNG,
    *,
    edge_margin: int = 3,
    allowed: np.ndarray | None = None,
) -> int:
    """Sprinkle `code` inside an ellipse, each cell with probability `density`."""
    cx, cy = center
    box = _clip_box(
        grid,
        cx - radius_x,
        cy - radius_y,
        cx + radius_x + 1,
        cy + radius_y + 1,
        edge_margin,
    )
    if box is None or radius_x <= 0 or radius_y <= 0:
        return 0
    x0, y0, x1, y1 = box

    xs = (np.arange(x0, x1)[:, np.newaxis] - cx) / radius_x
    ys = (np.arange(y0, y1)[np.newaxis, :] - cy) / radius_y
    mask = (xs * xs + ys * ys < 1.0) & (
        numpy_rng(rng).random((x1 - x0, y1 - y0)) < density
    )
    if allowed is not None:
        mask &= allowed[x0:x1, y0:y1]
    return _apply(grid.tiles[x0:x1, y0:y1], mask, code, overwritable_codes, None)


def carve_ridge(
    grid: GridBuilder,
    start: WorldTilePos,
    length: int,
    width: int,
    code: int,
    overwritable_codes: Iterable[int] | None,
    rng: RNG,
    *,
    wave: tuple[float, float] = (0.3, 3.0),
    falloff: float = 0.5,
    allowed: np.ndarray | None = None,
) -> int:
    """Lay an eastward band of `code` along a sinusoidal baseline.

    Column i sits at start.x + i with its baseline at
    start.y + int(sin(i * frequency) * amplitude). A cell dy rows off the
    baseline is written with probability 1 - falloff * |dy| / (width // 2),
    so ranges thin out toward their flanks.
    """
    half = max(1, width // 2)
    frequency, amplitude = wave
    noise = numpy_rng(rng).random((length, 2 * half + 1))
    changed = 0
    for i in range(length):
        x = start[0] + i
        if not 0 <= x < grid.width:
            continue
        base_y = start[1] + int(np.sin(i * frequency) * amplitude)
        y0 = max(0, base_y - half)
        y1 = min(grid.height, base_y + half + 1)
        if y0 >= y1:
            continue
        top = base_y - half
        offsets = np.abs(np.arange(y0, y1) - base_y) / half
        mask = noise[i, y0 - top : y1 - top] > offsets * falloff
        if allowed is not None:
            mask &= allowed[x, y0:y1]
        changed += _apply(
            grid.tiles[x : x + 1, y0:y1],
            mask[np.newaxis, :],
            code,
            overwritable_codes,
            None,
        )
    return changed
