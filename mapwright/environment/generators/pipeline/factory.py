"""Factory functions for creating pre-configured pipelines.

A biome's recipe tag picks the shape of its pipeline; the biome's own data
fills in the parameters. Recipes:
- "cave-chambers": chambers, tunnels, features, smoothing
- "rooms-and-corridors": rooms, corridors, special room, features, widening
- "clearings-and-paths": special structure, landmasses, clearings, paths,
  features, smoothing, details
- "islands-and-bridges": landmasses, islands, bridges, features, smoothing,
  details

Every recipe ends by enforcing the border and repairing connectivity.
"""

from __future__ import annotations

from mapwright.environment.biomes import BiomeConfig, ThroneRoom, Volcano, get_biome
from mapwright.types import RandomSeed

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


def create_pipeline(
    biome: BiomeConfig | str,
    seed: RandomSeed = None,
) -> PipelineGenerator:
    """Create the pipeline for a biome.

    Args:
        biome: A BiomeConfig or the name of a registered biome.
        seed: Optional random seed for deterministic generation.

    Returns:
        A configured PipelineGenerator ready to generate maps.

    Raises:
        ValueError: If the biome name or its recipe is not recognized.
    """
    if isinstance(biome, str):
        biome = get_biome(biome)

    match biome.recipe:
        case "cave-chambers":
            layers = _cave_layers(biome)
        case "rooms-and-corridors":
            layers = _room_layers(biome)
        case "clearings-and-paths":
            layers = _clearing_layers(biome)
        case "islands-and-bridges":
            layers = _island_layers(biome)
        case _:
            raise ValueError(f"Unknown recipe: {biome.recipe!r}")

    layers += [BorderLayer(biome.border_rings), RepairLayer(biome.border_rings)]
    return PipelineGenerator(
        layers=layers,
        table=biome.terrain,
        map_width=biome.width,
        map_height=biome.height,
        seed=seed,
        biome=biome,
    )


def _cave_layers(biome: BiomeConfig) -> list[GenerationLayer]:
    layers: list[GenerationLayer] = []
    if biome.hubs is not None:
        layers.append(HubLayer(biome.hubs))
    if biome.links is not None:
        layers.append(LinkLayer(biome.links))
    layers.append(FeatureLayer(biome.features))
    if biome.smoothing is not None:
        layers.append(SmoothingLayer(biome.smoothing))
    return layers


def _room_layers(biome: BiomeConfig) -> list[GenerationLayer]:
    layers: list[GenerationLayer] = []
    if biome.rooms is not None:
        layers.append(RoomLayer(biome.rooms))
    if biome.links is not None:
        layers.append(LinkLayer(biome.links))
    if isinstance(biome.special, ThroneRoom):
        layers.append(ThroneRoomLayer(biome.special))
        if biome.links is not None:
            layers.append(SpecialHubLayer(biome.links))
    layers.append(FeatureLayer(biome.features))
    if biome.widen_passages:
        layers.append(WidenPassagesLayer())
    return layers


def _clearing_layers(biome: BiomeConfig) -> list[GenerationLayer]:
    layers: list[GenerationLayer] = []
    # The volcano goes first so clearings can keep their distance
    if isinstance(biome.special, Volcano):
        layers.append(VolcanoLayer(biome.special))
    if biome.landmasses:
        layers.append(LandmassLayer(biome.landmasses))
    if biome.hubs is not None:
        layers.append(HubLayer(biome.hubs))
    if biome.links is not None:
        layers.append(LinkLayer(biome.links))
        if biome.special is not None:
            layers.append(SpecialHubLayer(biome.links))
    layers.append(FeatureLayer(biome.features))
    if biome.smoothing is not None:
        layers.append(SmoothingLayer(biome.smoothing))
    layers.append(FeatureLayer(biome.details, domain="map.details"))
    return layers


def _island_layers(biome: BiomeConfig) -> list[GenerationLayer]:
    layers: list[GenerationLayer] = []
    if biome.landmasses:
        layers.append(LandmassLayer(biome.landmasses))
    if biome.hubs is not None:
        layers.append(HubLayer(biome.hubs))
    if biome.links is not None:
        layers.append(LinkLayer(biome.links))
    layers.append(FeatureLayer(biome.features))
    if biome.smoothing is not None:
        layers.append(SmoothingLayer(biome.smoothing))
    layers.append(FeatureLayer(biome.details, domain="map.details"))
    return layers
