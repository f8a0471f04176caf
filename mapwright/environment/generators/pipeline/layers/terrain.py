"""Terrain refinement layers.

These layers clean up after the carvers:
- SmoothingLayer: cellular-automata passes that keep hazards intact
- WidenPassagesLayer: opens one-tile corridors in room-based maps
- BorderLayer: forces the outer rings back to the border code
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mapwright.environment.generators.carvers import enforce_border
from mapwright.environment.generators.pipeline.context import GenerationContext
from mapwright.environment.generators.pipeline.layer import GenerationLayer
from mapwright.environment.generators.refine import smooth, widen_narrow_passages

if TYPE_CHECKING:
    from mapwright.environment.biomes import Smoothing

logger = logging.getLogger(__name__)


class SmoothingLayer(GenerationLayer):
    """Runs the smoothing pass between the floor and blocked codes.

    Hazard cells are never changed. `spec.counted` widens the set of codes
    that count as open neighbours (dense cloud counts toward cloud).
    """

    def __init__(self, spec: Smoothing) -> None:
        self.spec = spec

    def apply(self, ctx: GenerationContext) -> None:
        table = ctx.table
        changed = 0
        for _ in range(self.spec.passes):
            changed += smooth(
                ctx.grid,
                table.floor,
                table.blocked,
                table.hazards,
                counted_codes=self.spec.counted,
            )
        logger.debug(f"Smoothing changed {changed} cells")


class WidenPassagesLayer(GenerationLayer):
    def __init__(self, iterations: int = 5) -> None:
        self.iterations = iterations

    def apply(self, ctx: GenerationContext) -> None:
        changed = widen_narrow_passages(
            ctx.grid, ctx.table.floor, ctx.table.blocked, self.iterations
        )
        logger.debug(f"Widened {changed} wall cells")


class BorderLayer(GenerationLayer):
    """Forces the outer `rings` rings to the table's border code."""

    def __init__(self, rings: int = 1) -> None:
        self.rings = rings

    def apply(self, ctx: GenerationContext) -> None:
        enforce_border(ctx.grid, ctx.table.border_code, self.rings)
