"""Pipeline-based map generation system.

This package provides a layered architecture for compositional map
generation. Each layer transforms a shared GenerationContext, and the
pipeline outputs a frozen GeneratedMapData.

Example usage:
    from mapwright.environment.generators.pipeline import create_pipeline

    generator = create_pipeline("volcano", seed=12345)
    map_data = generator.generate()

The pipeline can also be assembled manually for custom configurations:
    from mapwright.environment.generators.pipeline import (
        BorderLayer,
        HubLayer,
        LinkLayer,
        PipelineGenerator,
    )

    generator = PipelineGenerator(
        layers=[HubLayer(hub_spec), LinkLayer(link_spec), BorderLayer()],
        table=table,
        map_width=120,
        map_height=80,
        seed=7,
    )
"""

from .context import GenerationContext
from .factory import create_pipeline
from .layer import GenerationLayer
from .layers import (
    BorderLayer,
    FeatureLayer,
    HubLayer,
    LandmassLayer,
    LinkLayer,
    RepairLayer,
    RoomLayer,
    SmoothingLayer,
    SpecialHubLayer,
    ThroneRoomLayer,
    VolcanoLayer,
    WidenPassagesLayer,
)
from .pipeline import PipelineGenerator

__all__ = [
    "BorderLayer",
    "FeatureLayer",
    "GenerationContext",
    "GenerationLayer",
    "HubLayer",
    "LandmassLayer",
    "LinkLayer",
    "PipelineGenerator",
    "RepairLayer",
    "RoomLayer",
    "SmoothingLayer",
    "SpecialHubLayer",
    "ThroneRoomLayer",
    "VolcanoLayer",
    "WidenPassagesLayer",
    "create_pipeline",
]
