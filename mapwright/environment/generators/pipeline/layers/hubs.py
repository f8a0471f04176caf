"""Hub placement layers.

Hubs are the points every level guarantees to connect:
- HubLayer: organic hubs (cave chambers, clearings, cloud islands)
- RoomLayer: rectangular rooms with an overlap margin
- LandmassLayer: fixed land bodies, optionally anchoring a hub each
- ThroneRoomLayer / VolcanoLayer: the special structure, whose hub is
  appended last by SpecialHubLayer
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from mapwright import config
from mapwright.environment.generators.carvers import (
    carve_blob,
    carve_landmass,
    carve_room,
    carve_room_shape,
    room_fits,
)
from mapwright.environment.generators.pipeline.context import GenerationContext
from mapwright.environment.generators.pipeline.layer import GenerationLayer
from mapwright.environment.generators.placement import sample_hub_centers
from mapwright.environment.tile_types import TerrainID
from mapwright.util.coordinates import Rect
from mapwright.util.rng import numpy_rng, roll

from .features import carve_flows

if TYPE_CHECKING:
    from mapwright.environment.biomes import (
        HubSpec,
        Landmass,
        RoomSpec,
        ThroneRoom,
        Volcano,
    )
    from mapwright.types import WorldTilePos

logger = logging.getLogger(__name__)


class HubLayer(GenerationLayer):
    """Places organic hubs and carves a noisy ellipse at each.

    Centres are rejection-sampled with a minimum spacing. Hubs with a zero
    radius range are only recorded (open-field clearings). With a core code,
    a tighter ellipse of it is stamped inside each carved hub.
    """

    def __init__(self, spec: HubSpec) -> None:
        self.spec = spec

    def apply(self, ctx: GenerationContext) -> None:
        spec = self.spec
        rng = ctx.rng("map.hubs")
        target = roll(rng, spec.count)

        def accept(pos: WorldTilePos) -> bool:
            if spec.on_codes and ctx.grid.get(*pos) not in spec.on_codes:
                return False
            return not (
                spec.special_clearance
                and ctx.near_special(pos, spec.special_clearance)
            )

        centers = sample_hub_centers(
            rng,
            target,
            (spec.x_margin, ctx.width - spec.x_margin),
            (spec.y_margin, ctx.height - spec.y_margin),
            spec.spacing,
            attempts=spec.attempts_per_hub * target,
            existing=ctx.hubs,
            accept=accept,
        )
        if len(centers) < target:
            logger.debug(f"Placed {len(centers)} of {target} hubs")

        floor = ctx.table.floor
        for center in centers:
            if spec.radius_x[1] > 0:
                radius_x = roll(rng, spec.radius_x)
                radius_y = roll(rng, spec.radius_y)
                carve_blob(
                    ctx.grid,
                    center,
                    radius_x,
                    radius_y,
                    spec.noise,
                    floor,
                    spec.overwritable,
                    rng,
                    threshold=spec.threshold,
                    bbox_margin=spec.bbox_margin,
                )
                if spec.core_code is not None:
                    carve_blob(
                        ctx.grid,
                        center,
                        radius_x,
                        radius_y,
                        0.0,
                        spec.core_code,
                        [floor],
                        threshold=spec.core_threshold,
                        bbox_margin=spec.bbox_margin,
                    )
            ctx.add_hub(center)


class RoomLayer(GenerationLayer):
    """Places non-overlapping rooms and makes each room's centre a hub.

    Each attempt rolls a size class by weight, then a size and a position.
    Attempts are bounded (HUB_ATTEMPT_FACTOR per room unless the spec sets
    `max_attempts`); falling short of the target is not an error.
    """

    def __init__(self, spec: RoomSpec) -> None:
        self.spec = spec

    def apply(self, ctx: GenerationContext) -> None:
        spec = self.spec
        rng = ctx.rng("map.rooms")
        target = roll(rng, spec.count)
        attempts = spec.max_attempts or config.HUB_ATTEMPT_FACTOR * target
        weights = [size.weight for size in spec.size_classes]
        margin = spec.placement_margin

        placed = 0
        for _ in range(attempts):
            if placed >= target:
                break
            size = rng.choices(spec.size_classes, weights=weights)[0]
            width = roll(rng, size.width)
            height = roll(rng, size.height)
            max_x = ctx.width - width - margin
            max_y = ctx.height - height - margin
            if max_x < margin or max_y < margin:
                continue
            x = rng.randint(margin, max_x)
            y = rng.randint(margin, max_y)
            room = Rect(x, y, width, height)
            if not room_fits(ctx.rooms, room, spec.overlap_margin):
                continue

            if spec.shapes:
                shape = rng.choices(
                    [name for name, _ in spec.shapes],
                    weights=[weight for _, weight in spec.shapes],
                )[0]
                carve_room_shape(ctx.grid, room, shape, ctx.table.floor, rng)
            else:
                carve_room(ctx.grid, room, ctx.table.floor)
            ctx.rooms.append(room)
            ctx.add_hub(room.center())
            placed += 1

        if placed < target:
            logger.debug(f"Placed {placed} of {target} rooms in {attempts} attempts")


class LandmassLayer(GenerationLayer):
    """Carves fixed land bodies over the background."""

    def __init__(self, landmasses: tuple[Landmass, ...]) -> None:
        self.landmasses = landmasses

    def apply(self, ctx: GenerationContext) -> None:
        rng = ctx.rng("map.landmass")
        for land in self.landmasses:
            radius_x = roll(rng, land.radius_x)
            radius_y = roll(rng, land.radius_y)
            match land.kind:
                case "wave":
                    changed = carve_landmass(
                        ctx.grid,
                        land.center,
                        radius_x,
                        radius_y,
                        land.code,
                        None,
                        rng,
                        threshold=land.threshold,
                        wave=land.wave,
                    )
                case "blob":
                    changed = carve_blob(
                        ctx.grid,
                        land.center,
                        radius_x,
                        radius_y,
                        land.noise,
                        land.code,
                        None,
                        rng,
                        threshold=land.threshold,
                        bbox_margin=land.bbox_margin,
                    )
                case _:
                    raise ValueError(f"Unknown landmass kind: {land.kind!r}")
            logger.debug(f"Landmass {land.code.name} at {land.center}: {changed} cells")
            if land.hub_offset is not None:
                ox, oy = land.hub_offset
                ctx.add_hub((land.center[0] + ox, land.center[1] + oy))


class ThroneRoomLayer(GenerationLayer):
    """Carves the large room at the bottom centre of a castle."""

    def __init__(self, spec: ThroneRoom) -> None:
        self.spec = spec

    def apply(self, ctx: GenerationContext) -> None:
        spec = self.spec
        room = Rect(
            ctx.width // 2 - spec.width // 2,
            ctx.height - spec.height - spec.bottom_margin,
            spec.width,
            spec.height,
        )
        carve_room(ctx.grid, room, ctx.table.floor)
        ctx.rooms.append(room)
        ctx.special_center = room.center()
        ctx.special_hub = room.center()


class VolcanoLayer(GenerationLayer):
    """Builds the central volcano and its lava flows.

    Rings around the centre, by distance d:
    - slope: radius - 8 < d < radius + 5, walkable where d < radius + U*3
    - crater: d < crater_radius, lava
    - rim: crater_radius <= d < rim_radius, lava inside a ragged midline,
      walkable outside it
    The hub sits on the southern slope.
    """

    def __init__(self, spec: Volcano, hazard_code: TerrainID = TerrainID.LAVA) -> None:
        self.spec = spec
        self.hazard_code = hazard_code

    def apply(self, ctx: GenerationContext) -> None:
        spec = self.spec
        rng = ctx.rng("map.special")
        cx, cy = ctx.width // 2, ctx.height // 2
        reach = spec.radius + 5
        x0, x1 = max(1, cx - reach), min(ctx.width - 1, cx + reach + 1)
        y0, y1 = max(1, cy - reach), min(ctx.height - 1, cy + reach + 1)

        xs = np.arange(x0, x1)[:, np.newaxis] - cx
        ys = np.arange(y0, y1)[np.newaxis, :] - cy
        dist = np.hypot(xs, ys)
        noise = numpy_rng(rng).random((2, *dist.shape))
        region = ctx.grid.tiles[x0:x1, y0:y1]
        floor = ctx.table.floor

        slope = (
            (dist > spec.radius - 8)
            & (dist < spec.radius + 5)
            & (dist < spec.radius + noise[0] * 3)
        )
        region[slope] = floor

        midline = (spec.crater_radius + spec.rim_radius) / 2
        rim = (dist >= spec.crater_radius) & (dist < spec.rim_radius)
        molten = rim & (dist < midline + noise[1] * 2)
        region[rim & ~molten] = floor
        region[(dist < spec.crater_radius) | molten] = self.hazard_code

        ctx.special_center = (cx, cy)
        ctx.special_hub = (cx, cy + spec.radius - 5)
        ctx.protect_disk(ctx.special_hub, config.HUB_PROTECT_RADIUS)

        if spec.flows is not None:
            changed = carve_flows(ctx, spec.flows, rng)
            logger.debug(f"Volcano flows changed {changed} cells")
