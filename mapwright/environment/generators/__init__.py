"""Map generation for mapwright.

Primitives, usable on any GridBuilder:
- carvers: blobs, disks, landmasses, rooms, borders, clusters, ridges
- paths: winding corridors, L-shaped corridors and drift walkers
- connectivity: link planning, reachability checks and repair
- refine: smoothing, passage widening, shorelines, re-clearing
- placement: hub-centre, player-start and entity sampling

Levels are produced by the layered pipeline; `create_pipeline(biome)` picks
the layers for a biome's recipe.
"""

from .base import BaseMapGenerator, GeneratedMapData
from .connectivity import DisconnectedMapError, validate_connectivity
from .pipeline import (
    GenerationContext,
    GenerationLayer,
    PipelineGenerator,
    create_pipeline,
)

__all__ = [
    "BaseMapGenerator",
    "DisconnectedMapError",
    "GeneratedMapData",
    "GenerationContext",
    "GenerationLayer",
    "PipelineGenerator",
    "create_pipeline",
    "validate_connectivity",
]
