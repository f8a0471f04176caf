"""Generation layers for the pipeline map generator.

Each layer transforms the GenerationContext in a specific way:
- Hub layers: Place chambers, clearings, rooms, landmasses and special hubs
- Link layers: Plan and carve corridors, then repair connectivity
- Feature layers: Add biome features (pools, rivers, obstacles, coasts)
- Terrain layers: Smooth, widen passages and enforce the border
"""

from .features import FeatureLayer, apply_feature
from .hubs import HubLayer, LandmassLayer, RoomLayer, ThroneRoomLayer, VolcanoLayer
from .links import LinkLayer, RepairLayer, SpecialHubLayer, carve_link
from .terrain import BorderLayer, SmoothingLayer, WidenPassagesLayer

__all__ = [
    "BorderLayer",
    "FeatureLayer",
    "HubLayer",
    "LandmassLayer",
    "LinkLayer",
    "RepairLayer",
    "RoomLayer",
    "SmoothingLayer",
    "SpecialHubLayer",
    "ThroneRoomLayer",
    "VolcanoLayer",
    "WidenPassagesLayer",
    "apply_feature",
    "carve_link",
]
