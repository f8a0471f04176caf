"""Connectivity layers.

- LinkLayer: plans hub pairs and carves a corridor for each
- SpecialHubLayer: appends the special hub and links it to its nearest hub
- RepairLayer: joins or fills whatever the carvers left disconnected
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mapwright import config
from mapwright.environment.generators.connectivity import (
    link_special_hub,
    plan_chain_links,
    plan_nearest_links,
    plan_spanning_links,
    repair_connectivity,
)
from mapwright.environment.generators.paths import carve_elbow, carve_path
from mapwright.environment.generators.pipeline.context import GenerationContext
from mapwright.environment.generators.pipeline.layer import GenerationLayer
from mapwright.util.rng import roll, roll_float

if TYPE_CHECKING:
    from mapwright.environment.biomes import LinkSpec
    from mapwright.types import Edge, WorldTilePos
    from mapwright.util.rng import RNG

logger = logging.getLogger(__name__)


def carve_link(
    ctx: GenerationContext,
    spec: LinkSpec,
    start: WorldTilePos,
    end: WorldTilePos,
    rng: RNG,
) -> int:
    """Carve one corridor in the style the link spec asks for."""
    width = roll(rng, spec.width)
    code = spec.code if spec.code is not None else ctx.table.path_code
    match spec.style:
        case "elbow":
            return carve_elbow(
                ctx.grid,
                start,
                end,
                width,
                rng.random() < 0.5,
                spec.protected,
                code=code,
            )
        case "winding":
            return carve_path(
                ctx.grid,
                start,
                end,
                width,
                roll_float(rng, spec.windiness),
                spec.protected,
                rng,
                code=code,
                wind_frequency=spec.wind_frequency,
                wind_scale=spec.wind_scale,
                jitter=spec.jitter,
                overwritable_codes=spec.overwritable,
            )
    raise ValueError(f"Unknown corridor style: {spec.style!r}")


class LinkLayer(GenerationLayer):
    """Plans which hubs to join and carves the corridors in planning order."""

    def __init__(self, spec: LinkSpec) -> None:
        self.spec = spec

    def plan(self, ctx: GenerationContext, rng: RNG) -> list[Edge]:
        spec = self.spec
        exclude = () if ctx.special_index is None else (ctx.special_index,)
        match spec.planner:
            case "nearest":
                return plan_nearest_links(ctx.hubs, spec.k, rng, exclude=exclude)
            case "spanning":
                return plan_spanning_links(ctx.hubs, spec.extra, rng, exclude=exclude)
            case "chain":
                return plan_chain_links(ctx.hubs, spec.extra, rng, exclude=exclude)
        raise ValueError(f"Unknown link planner: {spec.planner!r}")

    def apply(self, ctx: GenerationContext) -> None:
        rng = ctx.rng("map.links")
        edges = self.plan(ctx, rng)
        changed = 0
        for a, b in edges:
            changed += carve_link(ctx, self.spec, ctx.hubs[a], ctx.hubs[b], rng)
            ctx.edges.append((a, b))
        logger.debug(f"Carved {len(edges)} links ({changed} cells)")


class SpecialHubLayer(GenerationLayer):
    """Appends the special hub last and joins it to its nearest regular hub."""

    def __init__(self, spec: LinkSpec) -> None:
        self.spec = spec

    def apply(self, ctx: GenerationContext) -> None:
        if ctx.special_hub is None:
            return
        ctx.special_index = ctx.add_hub(ctx.special_hub)
        edge = link_special_hub(ctx.hubs, ctx.special_index)
        if edge is None:
            return
        # Carve from the regular hub toward the special one
        a, b = edge
        if a == ctx.special_index:
            a, b = b, a
        carve_link(ctx, self.spec, ctx.hubs[a], ctx.hubs[b], ctx.rng("map.special"))
        ctx.edges.append(edge)


class RepairLayer(GenerationLayer):
    """Joins stray walkable regions to hub 0 and fills tiny pockets."""

    def __init__(self, border_rings: int = 1) -> None:
        self.border_rings = border_rings

    def apply(self, ctx: GenerationContext) -> None:
        if not config.REPAIR_ENABLED:
            return
        repair_connectivity(
            ctx.grid,
            ctx.table,
            ctx.hubs,
            border_rings=self.border_rings,
        )
