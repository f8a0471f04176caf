"""Terrain grids: a mutable builder used during generation and a frozen result.

Both wrap a numpy array of terrain IDs with shape (width, height), indexed
`tiles[x, y]`, in Fortran order like every other per-tile array in the game.
Every accessor is total: out-of-range reads return the blocked code and
out-of-range writes are ignored, because neighbor scans probe the map edges
constantly.

Carvers work on `GridBuilder.tiles` directly with numpy slicing where they can,
and fall back to `get`/`set` for per-cell logic.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

import numpy as np

from mapwright.types import TileCoord

# Offsets of the 8-connected Moore neighborhood.
MOORE_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (-1, 0),
    (1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
)

# Offsets of the 4-connected neighborhood used for reachability.
CARDINAL_OFFSETS: tuple[tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


class BaseGrid:
    """Read-only operations shared by the builder and the frozen grid."""

    tiles: np.ndarray
    blocked_code: int

    @property
    def width(self) -> TileCoord:
        return self.tiles.shape[0]

    @property
    def height(self) -> TileCoord:
        return self.tiles.shape[1]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_interior(self, x: int, y: int, margin: int = 1) -> bool:
        """True if (x, y) is at least `margin` cells away from every edge."""
        return margin <= x < self.width - margin and margin <= y < self.height - margin

    def get(self, x: int, y: int) -> int:
        """Terrain code at (x, y), or the blocked code when out of range."""
        if not self.in_bounds(x, y):
            return self.blocked_code
        return int(self.tiles[x, y])

    def count_neighbors(self, x: int, y: int, predicate: Callable[[int], bool]) -> int:
        """Count Moore neighbors of (x, y) whose code satisfies `predicate`.

        Neighbors outside the grid are skipped rather than read as blocked.
        """
        count = 0
        for dx, dy in MOORE_OFFSETS:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny) and predicate(int(self.tiles[nx, ny])):
                count += 1
        return count

    def count(self, code: int) -> int:
        return int(np.count_nonzero(self.tiles == code))


class GridBuilder(BaseGrid):
    """Mutable terrain buffer owned by a single generation run."""

    def __init__(
        self,
        width: TileCoord,
        height: TileCoord,
        default_code: int,
        blocked_code: int | None = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.tiles = np.full(
            (width, height),
            fill_value=default_code,
            dtype=np.uint8,
            order="F",
        )
        self.blocked_code = default_code if blocked_code is None else blocked_code

    @classmethod
    def from_array(cls, tiles: np.ndarray, blocked_code: int) -> GridBuilder:
        """Wrap a copy of an existing (width, height) array."""
        builder = cls.__new__(cls)
        builder.tiles = np.array(tiles, dtype=np.uint8, order="F", copy=True)
        builder.blocked_code = blocked_code
        return builder

    def set(self, x: int, y: int, code: int) -> None:
        """Write `code` at (x, y). Out-of-range writes are ignored."""
        if self.in_bounds(x, y):
            self.tiles[x, y] = code

    def fill(self, code: int) -> None:
        self.tiles[:, :] = code

    def freeze(self) -> TerrainGrid:
        """Snapshot the buffer into an immutable TerrainGrid."""
        return TerrainGrid(self.tiles, self.blocked_code)


class TerrainGrid(BaseGrid):
    """Immutable terrain grid handed to query consumers after generation.

    The underlying array is a private copy with its write flag cleared, so
    any attempt to mutate it raises ValueError from numpy. It is safe to
    read from several threads at once.
    """

    def __init__(self, tiles: np.ndarray, blocked_code: int) -> None:
        frozen = np.array(tiles, dtype=np.uint8, order="F", copy=True)
        frozen.setflags(write=False)
        self._tiles = frozen
        self.blocked_code = blocked_code

    @property
    def tiles(self) -> np.ndarray:  # type: ignore[override]
        return self._tiles

    def thaw(self) -> GridBuilder:
        """Return a mutable copy, for tooling and tests."""
        return GridBuilder.from_array(self._tiles, self.blocked_code)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TerrainGrid):
            return NotImplemented
        return self.blocked_code == other.blocked_code and np.array_equal(
            self._tiles, other._tiles
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"TerrainGrid({self.width}x{self.height})"


def code_mask(tiles: np.ndarray, codes: Iterable[int]) -> np.ndarray:
    """Boolean mask of cells whose code is in `codes`."""
    return np.isin(tiles, [int(code) for code in codes])
