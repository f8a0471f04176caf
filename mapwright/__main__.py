"""Seed diagnosis tool.

Generates a biome for a range of seeds, checks hub connectivity and prints
per-seed statistics, optionally with an ASCII preview:

    python -m mapwright --biome jungle --seed 100 --count 20
    python -m mapwright --biome beach --seed 7 --count 1 --preview
"""

from __future__ import annotations

import argparse
import logging
import time

import numpy as np

from mapwright import config
from mapwright.environment.biomes import BIOMES
from mapwright.environment.generators.connectivity import DisconnectedMapError
from mapwright.environment.map import LevelMap
from mapwright.environment.tile_types import get_glyph_map
from mapwright.level import generate_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mapwright", description="Generate levels and report on them"
    )
    parser.add_argument(
        "--biome",
        choices=sorted(BIOMES),
        default=config.DEFAULT_BIOME,
        help=f"Biome to generate (default: {config.DEFAULT_BIOME})",
    )
    parser.add_argument(
        "--seed", type=int, default=0, help="First seed of the range (default: 0)"
    )
    parser.add_argument(
        "--count",
        type=int,
        default=10,
        help="Number of consecutive seeds to generate (default: 10)",
    )
    parser.add_argument(
        "--preview", action="store_true", help="Print an ASCII preview of each level"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    return parser


def render_preview(level: LevelMap) -> str:
    """ASCII rendering: terrain glyphs, hubs as digits, the start as '@'."""
    glyphs = get_glyph_map(np.asarray(level.grid.tiles)).copy()
    for index, (x, y) in enumerate(level.hub_list()):
        glyphs[x, y] = str(index % 10)
    sx, sy = level.player_start_position()
    glyphs[sx, sy] = "@"
    return "\n".join("".join(glyphs[:, y]) for y in range(level.height))


def describe(seed: int, level: LevelMap, elapsed: float) -> str:
    walkable = float(np.mean(level.walkable))
    return (
        f"seed={seed:<6} hubs={len(level.hub_list()):<3} "
        f"links={len(level.edges):<3} walkable={walkable:6.1%} "
        f"time={elapsed * 1000:7.1f}ms"
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format="%(levelname)s %(name)s: %(message)s",
    )

    failures = 0
    for seed in range(args.seed, args.seed + args.count):
        start = time.perf_counter()
        try:
            level = generate_level(seed, args.biome)
        except DisconnectedMapError as e:
            failures += 1
            print(f"seed={seed:<6} FAILED: {e}")
            continue
        print(describe(seed, level, time.perf_counter() - start))
        if args.preview:
            print(render_preview(level))
            print()

    print(f"{args.biome}: {args.count - failures}/{args.count} seeds connected")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
