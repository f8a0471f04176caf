"""Feature layers.

A biome lists its features as data (`mapwright.environment.biomes`); the
FeatureLayer walks that list and dispatches each entry to the function that
builds it. Every feature draws from its own stream, "<domain>.<index>", so
adding a feature to a biome never reshuffles the ones before it.

Features that write a non-walkable code (lava, water, obstacles) never touch
the protected disks around hub centres.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from typing import TYPE_CHECKING

import numpy as np

from mapwright.environment.biomes import (
    Blobs,
    BorderBand,
    Branches,
    Clusters,
    Feature,
    Flows,
    Reclear,
    Ridge,
    Scatter,
    Shoreline,
)
from mapwright.environment.generators.carvers import (
    border_band,
    carve_blob,
    carve_ridge,
    scatter_cluster,
)
from mapwright.environment.generators.paths import carve_drift, carve_path
from mapwright.environment.generators.pipeline.context import GenerationContext
from mapwright.environment.generators.pipeline.layer import GenerationLayer
from mapwright.environment.generators.refine import reclear, shoreline
from mapwright.environment.grid import code_mask
from mapwright.util.coordinates import distance
from mapwright.util.rng import roll, roll_float

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mapwright.environment.tile_types import TerrainID
    from mapwright.types import Heading, WorldTilePos
    from mapwright.util.rng import RNG

logger = logging.getLogger(__name__)


class FeatureLayer(GenerationLayer):
    """Applies a biome's feature list in order.

    Attributes:
        features: Feature specs to build.
        domain: Stream prefix. Pre-smoothing features use "map.features",
            post-smoothing details use "map.details".
    """

    def __init__(
        self, features: tuple[Feature, ...], domain: str = "map.features"
    ) -> None:
        self.features = features
        self.domain = domain

    def apply(self, ctx: GenerationContext) -> None:
        for index, feature in enumerate(self.features):
            rng = ctx.rng(f"{self.domain}.{index}")
            changed = apply_feature(ctx, feature, rng)
            logger.debug(f"{type(feature).__name__} changed {changed} cells")


def apply_feature(ctx: GenerationContext, feature: Feature, rng: RNG) -> int:
    """Build one feature and return the number of cells it changed."""
    match feature:
        case Blobs():
            return carve_blobs(ctx, feature, rng)
        case Flows():
            return carve_flows(ctx, feature, rng)
        case Branches():
            return carve_branches(ctx, feature, rng)
        case Scatter():
            return scatter_obstacles(ctx, feature, rng)
        case Clusters():
            return scatter_clusters(ctx, feature, rng)
        case Ridge():
            return carve_ridge(
                ctx.grid,
                feature.start,
                feature.length,
                feature.width,
                feature.code,
                feature.on_codes,
                rng,
                wave=feature.wave,
                falloff=feature.falloff,
                allowed=_allowed(ctx, feature.code),
            )
        case Shoreline():
            return shoreline(
                ctx.grid,
                feature.source,
                feature.target,
                feature.near,
                feature.radius,
                chance=feature.chance,
                rng=rng,
            )
        case BorderBand():
            return border_band(
                ctx.grid,
                feature.depth,
                feature.chance,
                feature.code,
                feature.overwritable,
                rng,
            )
        case Reclear():
            return reclear(
                ctx.grid,
                ctx.regular_hubs,
                feature.radius,
                feature.code,
                feature.keep,
                rng,
            )
    raise ValueError(f"Unknown feature: {feature!r}")


# =============================================================================
# HELPERS
# =============================================================================


def _allowed(
    ctx: GenerationContext, code: int, keep_clear: float = 0.0
) -> np.ndarray | None:
    """Write mask for a feature laying `code`, or None when unrestricted."""
    allowed = None if ctx.table.is_walkable(code) else ~ctx.protected
    if keep_clear > 0:
        clear = ~ctx.hub_mask(keep_clear)
        allowed = clear if allowed is None else allowed & clear
    return allowed


def _writable(
    ctx: GenerationContext,
    overwritable: Iterable[TerrainID] | None,
    skip: frozenset[TerrainID],
) -> frozenset[TerrainID] | None:
    if not skip:
        return None if overwritable is None else frozenset(overwritable)
    base = ctx.table.codes if overwritable is None else frozenset(overwritable)
    return base - skip


def _random_center(
    ctx: GenerationContext, rng: RNG, x_margin: int, y_margin: int
) -> WorldTilePos:
    return (
        rng.randint(x_margin, max(x_margin, ctx.width - x_margin - 1)),
        rng.randint(y_margin, max(y_margin, ctx.height - y_margin - 1)),
    )


def _has_nearby(
    ctx: GenerationContext, center: WorldTilePos, codes: Iterable[int], radius: int
) -> bool:
    """True if any of `codes` lies within Chebyshev `radius` of `center`."""
    x, y = center
    box = ctx.grid.tiles[
        max(0, x - radius) : x + radius + 1, max(0, y - radius) : y + radius + 1
    ]
    return bool(code_mask(box, codes).any())


def _heading(angle: float) -> Heading:
    return (math.cos(angle), math.sin(angle))


def _within(center: WorldTilePos, radius: float) -> Callable[[int, int], bool]:
    def check(x: int, y: int) -> bool:
        return distance((x, y), center) < radius

    return check


# =============================================================================
# FEATURES
# =============================================================================


def _blob_site_ok(ctx: GenerationContext, spec: Blobs, center: WorldTilePos) -> bool:
    if spec.on_codes and ctx.grid.get(*center) not in spec.on_codes:
        return False
    if spec.near_codes and not _has_nearby(
        ctx, center, spec.near_codes, spec.near_radius
    ):
        return False
    if spec.hub_clearance and ctx.near_hub(center, spec.hub_clearance):
        return False
    return not (
        spec.special_clearance and ctx.near_special(center, spec.special_clearance)
    )


def carve_blobs(ctx: GenerationContext, spec: Blobs, rng: RNG) -> int:
    """Pools, ponds, side chambers, platforms and forests."""
    allowed = _allowed(ctx, spec.code)
    writable = _writable(ctx, spec.overwritable, spec.skip)
    changed = 0
    for _ in range(roll(rng, spec.count)):
        if spec.anchor is not None:
            center = spec.anchor
        else:
            center = _random_center(ctx, rng, spec.x_margin, spec.y_margin)
        if not _blob_site_ok(ctx, spec, center):
            continue

        radius_x = roll(rng, spec.radius_x)
        radius_y = radius_x if spec.radius_y is None else roll(rng, spec.radius_y)
        changed += carve_blob(
            ctx.grid,
            center,
            radius_x,
            radius_y,
            spec.noise,
            spec.code,
            writable,
            rng,
            threshold=spec.threshold,
            edge_margin=spec.edge_margin,
            bbox_margin=spec.bbox_margin,
            allowed=allowed,
        )
        if spec.core_code is not None:
            changed += carve_blob(
                ctx.grid,
                center,
                radius_x,
                radius_y,
                0.0,
                spec.core_code,
                [spec.code],
                threshold=spec.core_threshold,
                edge_margin=spec.edge_margin,
                bbox_margin=spec.bbox_margin,
                allowed=allowed,
            )
    return changed


def _flow_start(
    ctx: GenerationContext, spec: Flows, rng: RNG
) -> tuple[WorldTilePos, Heading] | None:
    width, height = ctx.width, ctx.height
    match spec.start:
        case "edge":
            side = rng.choice(spec.sides)
            match side:
                case "t":
                    start = (rng.randint(10, width - 10), 5)
                    heading = (rng.uniform(-1.0, 1.0), 1.0)
                case "b":
                    start = (rng.randint(10, width - 10), height - 5)
                    heading = (rng.uniform(-1.0, 1.0), -1.0)
                case "l":
                    start = (5, rng.randint(10, height - 10))
                    heading = (1.0, rng.uniform(-1.0, 1.0))
                case "r":
                    start = (width - 5, rng.randint(10, height - 10))
                    heading = (-1.0, rng.uniform(-1.0, 1.0))
                case _:
                    raise ValueError(f"Unknown flow side: {side!r}")
            if spec.aim_center:
                spread = spec.aim_spread
                target_x = width // 2 + rng.randint(-spread, spread)
                target_y = height // 2 + rng.randint(-spread, spread)
                heading = (float(target_x - start[0]), float(target_y - start[1]))
        case "interior":
            start = _random_center(ctx, rng, spec.x_margin, spec.y_margin)
            heading = _heading(rng.uniform(0.0, 2 * math.pi))
        case "special":
            if ctx.special_center is None:
                return None
            start = ctx.special_center
            heading = _heading(rng.uniform(0.0, 2 * math.pi))
        case _:
            raise ValueError(f"Unknown flow start: {spec.start!r}")
    return start, heading


def carve_flows(ctx: GenerationContext, spec: Flows, rng: RNG) -> int:
    """Lava rivers, water rivers and volcano flows."""
    allowed = _allowed(ctx, spec.code, spec.keep_clear)
    stop = None
    if spec.special_stop > 0 and ctx.special_center is not None:
        stop = _within(ctx.special_center, spec.special_stop)

    changed = 0
    for _ in range(roll(rng, spec.count)):
        placed = _flow_start(ctx, spec, rng)
        if placed is None:
            continue
        start, heading = placed
        if spec.hub_clearance and ctx.near_hub(start, spec.hub_clearance):
            continue
        changed += carve_drift(
            ctx.grid,
            start,
            heading,
            roll(rng, spec.length),
            roll(rng, spec.width),
            spec.code,
            rng,
            drift=spec.drift,
            taper=spec.taper,
            skip_codes=spec.skip,
            stop=stop,
            allowed=allowed,
        )
    return changed


def carve_branches(ctx: GenerationContext, spec: Branches, rng: RNG) -> int:
    """Dead-end tunnels that start on an open cell and wander off."""
    floor = ctx.table.floor
    changed = 0
    for _ in range(roll(rng, spec.count)):
        base_x, base_y = _random_center(ctx, rng, spec.margin, spec.margin)
        start: WorldTilePos | None = None
        for _ in range(spec.tries):
            x = base_x + rng.randint(-spec.scatter, spec.scatter)
            y = base_y + rng.randint(-spec.scatter, spec.scatter)
            if ctx.grid.get(x, y) == floor:
                start = (x, y)
                break
        if start is None:
            continue

        angle = rng.uniform(0.0, 2 * math.pi)
        length = roll(rng, spec.length)
        end = (
            max(5, min(ctx.width - 6, int(start[0] + math.cos(angle) * length))),
            max(5, min(ctx.height - 6, int(start[1] + math.sin(angle) * length))),
        )
        changed += carve_path(
            ctx.grid,
            start,
            end,
            roll(rng, spec.width),
            roll_float(rng, spec.windiness),
            ctx.table.hazards,
            rng,
            code=floor,
            wind_frequency=spec.wind_frequency,
            wind_scale=spec.wind_scale,
            jitter=spec.jitter,
            overwritable_codes=spec.overwritable,
        )
    return changed


def scatter_obstacles(ctx: GenerationContext, spec: Scatter, rng: RNG) -> int:
    """Drop single obstacle cells, keeping clear of hubs."""
    changed = 0
    for _ in range(roll(rng, spec.count)):
        x, y = _random_center(ctx, rng, spec.margin, spec.margin)
        if ctx.grid.get(x, y) not in spec.on_codes or ctx.protected[x, y]:
            continue
        if spec.hub_clearance and ctx.near_hub((x, y), spec.hub_clearance):
            continue
        ctx.grid.set(x, y, spec.code)
        changed += 1
    return changed


def scatter_clusters(ctx: GenerationContext, spec: Clusters, rng: RNG) -> int:
    """Forest patches, palm groves, dead-tree clusters and snow peaks."""
    allowed = _allowed(ctx, spec.code)
    changed = 0
    for _ in range(roll(rng, spec.count)):
        if spec.anchor is not None:
            center = spec.anchor
        else:
            center = _random_center(ctx, rng, spec.x_margin, spec.y_margin)
        code = ctx.grid.get(*center)
        if spec.center_on and code not in spec.center_on:
            continue
        if code in spec.center_not:
            continue
        if spec.hub_clearance and ctx.near_hub(center, spec.hub_clearance):
            continue

        radius_x = roll(rng, spec.radius_x)
        radius_y = radius_x if spec.radius_y is None else roll(rng, spec.radius_y)
        changed += scatter_cluster(
            ctx.grid,
            center,
            radius_x,
            radius_y,
            roll_float(rng, spec.density),
            spec.code,
            spec.on_codes,
            rng,
            allowed=allowed,
        )
    return changed
