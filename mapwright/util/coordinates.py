"""Rectangles, distances and conversions between tile and world space."""

from __future__ import annotations

import math

from mapwright.types import (
    FloatPos,
    PixelCoord,
    PixelPos,
    TileCoord,
    WorldTilePos,
)


class Rect:
    """Rectangle/bounding box in tile coordinates."""

    def __init__(self, x: TileCoord, y: TileCoord, w: TileCoord, h: TileCoord) -> None:
        self.x1: TileCoord = x
        self.y1: TileCoord = y
        self.x2: TileCoord = x + w
        self.y2: TileCoord = y + h

    @classmethod
    def from_bounds(
        cls, x1: TileCoord, y1: TileCoord, x2: TileCoord, y2: TileCoord
    ) -> Rect:
        """Create a Rect from corner coordinates (x1, y1, x2, y2)."""
        width = x2 - x1
        height = y2 - y1
        return cls(x1, y1, width, height)

    @property
    def width(self) -> TileCoord:
        return self.x2 - self.x1

    @property
    def height(self) -> TileCoord:
        return self.y2 - self.y1

    def center(self) -> tuple[int, int]:
        return (int((self.x1 + self.x2) / 2), int((self.y1 + self.y2) / 2))

    def intersects(self, other: Rect) -> bool:
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def expanded(self, margin: int) -> Rect:
        """Return a copy grown by `margin` tiles on every side."""
        return Rect.from_bounds(
            self.x1 - margin, self.y1 - margin, self.x2 + margin, self.y2 + margin
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rect):
            return NotImplemented
        return (self.x1, self.y1, self.x2, self.y2) == (
            other.x1,
            other.y1,
            other.x2,
            other.y2,
        )

    def __hash__(self) -> int:
        return hash((self.x1, self.y1, self.x2, self.y2))

    def __repr__(self) -> str:
        return f"Rect(x1={self.x1}, y1={self.y1}, x2={self.x2}, y2={self.y2})"


# =============================================================================
# DISTANCE HELPERS
# =============================================================================


def distance(a: WorldTilePos | FloatPos, b: WorldTilePos | FloatPos) -> float:
    """Euclidean distance between two positions."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def manhattan(a: WorldTilePos | FloatPos, b: WorldTilePos | FloatPos) -> float:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


# =============================================================================
# TILE <-> WORLD CONVERSION
# =============================================================================


def tile_to_world(pos: WorldTilePos, tile_size: PixelCoord) -> PixelPos:
    """Convert a tile position to the world-space centre of that tile."""
    x, y = pos
    return ((x + 0.5) * tile_size, (y + 0.5) * tile_size)


def world_to_tile(pos: PixelPos, tile_size: PixelCoord) -> WorldTilePos:
    """Convert a world-space position to the tile containing it."""
    px, py = pos
    return (int(px // tile_size), int(py // tile_size))
