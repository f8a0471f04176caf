"""Biome definitions.

A biome is plain data: map size, the terrain table, and the parameters of
each generation stage. The recipe tag picks which pipeline shape the factory
assembles (`mapwright.environment.generators.pipeline.factory`); everything
else is read by the layers.

Features are frozen dataclasses forming a tagged union (`Feature`). Each
biome lists the ones it uses in `features` (run before smoothing) and
`details` (run after smoothing), in order.

Ranges are inclusive `(low, high)` tuples rolled per use: a hub count is
rolled once per level, a radius once per blob.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias

from mapwright import config
from mapwright.environment.tile_types import TerrainID, TerrainTable
from mapwright.types import (
    FloatRange,
    Heading,
    IntRange,
    RecipeName,
    RoomShape,
    WorldTilePos,
)

# =============================================================================
# STAGE PARAMETERS
# =============================================================================


@dataclass(frozen=True)
class HubSpec:
    """Organic hubs: cave chambers, clearings and cloud islands.

    Centres are rejection-sampled inside the margins with `spacing` between
    them. A zero `radius_x` leaves the hub uncarved (open fields).
    """

    count: IntRange
    x_margin: int
    y_margin: int
    spacing: float
    radius_x: IntRange = (0, 0)
    radius_y: IntRange = (0, 0)
    noise: float = 0.3
    threshold: float = 1.0
    bbox_margin: int = config.BLOB_BBOX_MARGIN
    core_code: TerrainID | None = None
    core_threshold: float = 0.3
    attempts_per_hub: int = config.HUB_ATTEMPT_FACTOR
    on_codes: frozenset[TerrainID] = frozenset()
    special_clearance: float = 0.0
    overwritable: frozenset[TerrainID] | None = None


@dataclass(frozen=True)
class RoomSizeClass:
    weight: float
    width: IntRange
    height: IntRange


@dataclass(frozen=True)
class RoomSpec:
    """Rectangular hubs. `shapes=None` carves plain rectangles."""

    count: IntRange
    size_classes: tuple[RoomSizeClass, ...]
    placement_margin: int = 5
    overlap_margin: int = config.ROOM_OVERLAP_MARGIN
    max_attempts: int | None = None
    shapes: tuple[tuple[RoomShape, float], ...] | None = None


@dataclass(frozen=True)
class Landmass:
    """A fixed land body carved over the background.

    `kind="wave"` uses the sinusoidal coastline carver, `"blob"` a noisy
    ellipse. With `hub_offset` set, centre + offset becomes a hub.
    """

    center: WorldTilePos
    radius_x: IntRange
    radius_y: IntRange
    code: TerrainID
    kind: Literal["blob", "wave"] = "blob"
    noise: float = 0.2
    threshold: float = 1.0
    wave: tuple[float, float, float, float] = (0.1, 0.15, 0.15, 0.1)
    bbox_margin: int = 5
    hub_offset: WorldTilePos | None = None


@dataclass(frozen=True)
class LinkSpec:
    """How hub pairs are chosen and how each corridor is carved."""

    planner: Literal["nearest", "spanning", "chain"] = "nearest"
    k: IntRange = (1, 3)
    extra: IntRange = (0, 0)
    width: IntRange = (3, 5)
    windiness: FloatRange = (0.0, 0.0)
    wind_frequency: float = config.WIND_FREQUENCY
    wind_scale: float = config.WIND_SCALE
    jitter: float = config.PATH_JITTER
    style: Literal["winding", "elbow"] = "winding"
    protected: frozenset[TerrainID] = frozenset()
    overwritable: frozenset[TerrainID] | None = None
    code: TerrainID | None = None


@dataclass(frozen=True)
class ThroneRoom:
    """Large room at the bottom centre of the map, appended as the last hub."""

    width: int
    height: int
    bottom_margin: int


@dataclass(frozen=True)
class Volcano:
    """Central volcano: walkable slope ring, lava crater and tapering flows.

    The hub sits on the southern slope, `radius - 5` below the centre.
    """

    radius: int = 25
    crater_radius: int = 8
    rim_radius: int = 12
    flows: Flows | None = None


SpecialHub: TypeAlias = ThroneRoom | Volcano


@dataclass(frozen=True)
class Smoothing:
    passes: int = 1
    counted: frozenset[TerrainID] | None = None


# =============================================================================
# FEATURES
# =============================================================================


@dataclass(frozen=True)
class Blobs:
    """Noisy ellipses: lava pools, ponds, side chambers, platforms, forests.

    A candidate centre is dropped when it fails `on_codes`, has none of
    `near_codes` within `near_radius` (Chebyshev), or comes within
    `hub_clearance` of a hub or `special_clearance` of the special hub.
    `radius_y=None` makes circles. With `anchor` set the blob is placed
    there instead of at a random centre.
    """

    count: IntRange
    radius_x: IntRange
    code: TerrainID
    radius_y: IntRange | None = None
    noise: float = 0.3
    threshold: float = 1.0
    x_margin: int = 10
    y_margin: int = 10
    bbox_margin: int = 0
    edge_margin: int = config.DEFAULT_EDGE_MARGIN
    overwritable: frozenset[TerrainID] | None = None
    skip: frozenset[TerrainID] = frozenset()
    on_codes: frozenset[TerrainID] = frozenset()
    near_codes: frozenset[TerrainID] = frozenset()
    near_radius: int = 0
    hub_clearance: float = 0.0
    special_clearance: float = 0.0
    core_code: TerrainID | None = None
    core_threshold: float = 0.3
    anchor: WorldTilePos | None = None


@dataclass(frozen=True)
class Flows:
    """Drifting walkers: lava rivers, water rivers, volcano flows.

    Start modes:
    - "edge": 5 tiles in from a map side in `sides` ("t", "b", "l", "r"),
      heading inward (toward the centre, +/- `aim_spread`, with `aim_center`).
    - "interior": anywhere inside the margins, random heading.
    - "special": the special hub's centre, random heading.
    """

    count: IntRange
    length: IntRange
    width: IntRange
    code: TerrainID
    start: Literal["edge", "interior", "special"] = "edge"
    sides: str = "tb"
    aim_center: bool = False
    aim_spread: int = 30
    drift: Heading = (0.2, 0.2)
    taper: bool = False
    x_margin: int = 10
    y_margin: int = 10
    skip: frozenset[TerrainID] = frozenset()
    hub_clearance: float = 0.0
    keep_clear: float = 0.0
    special_stop: float = 0.0


@dataclass(frozen=True)
class Branches:
    """Dead-end tunnels started from open cells."""

    count: IntRange
    length: IntRange
    width: IntRange
    windiness: FloatRange
    jitter: float = config.PATH_JITTER
    wind_frequency: float = config.WIND_FREQUENCY
    wind_scale: float = config.WIND_SCALE
    margin: int = 10
    scatter: int = 5
    tries: int = 20
    overwritable: frozenset[TerrainID] | None = None


@dataclass(frozen=True)
class Scatter:
    """Single obstacle cells dropped at random on `on_codes`."""

    count: IntRange
    code: TerrainID
    on_codes: frozenset[TerrainID]
    hub_clearance: float = 0.0
    margin: int = 5


@dataclass(frozen=True)
class Clusters:
    """Ellipses sprinkled with `code` at a rolled density (forests, palms)."""

    count: IntRange
    radius_x: IntRange
    density: FloatRange
    code: TerrainID
    on_codes: frozenset[TerrainID]
    radius_y: IntRange | None = None
    x_margin: int = 20
    y_margin: int = 15
    center_on: frozenset[TerrainID] = frozenset()
    center_not: frozenset[TerrainID] = frozenset()
    hub_clearance: float = 0.0
    anchor: WorldTilePos | None = None


@dataclass(frozen=True)
class Ridge:
    """Mountain range along a sinusoidal baseline."""

    start: WorldTilePos
    length: int
    width: int
    code: TerrainID
    on_codes: frozenset[TerrainID]
    wave: tuple[float, float] = (0.3, 3.0)
    falloff: float = 0.5


@dataclass(frozen=True)
class Shoreline:
    source: frozenset[TerrainID]
    target: TerrainID
    near: frozenset[TerrainID]
    radius: float
    chance: float = 1.0


@dataclass(frozen=True)
class BorderBand:
    depth: int
    chance: float
    code: TerrainID
    overwritable: frozenset[TerrainID] | None = None


@dataclass(frozen=True)
class Reclear:
    """Re-open a disk around every regular hub."""

    radius: IntRange
    code: TerrainID
    keep: frozenset[TerrainID] = frozenset()


Feature: TypeAlias = (
    Blobs
    | Flows
    | Branches
    | Scatter
    | Clusters
    | Ridge
    | Shoreline
    | BorderBand
    | Reclear
)


# =============================================================================
# BIOME CONFIG
# =============================================================================


@dataclass(frozen=True)
class BiomeConfig:
    name: str
    recipe: RecipeName
    width: int
    height: int
    terrain: TerrainTable
    border_rings: int = 1
    hubs: HubSpec | None = None
    rooms: RoomSpec | None = None
    landmasses: tuple[Landmass, ...] = ()
    links: LinkSpec | None = None
    special: SpecialHub | None = None
    features: tuple[Feature, ...] = ()
    details: tuple[Feature, ...] = ()
    smoothing: Smoothing | None = None
    widen_passages: bool = False
    entity_count: IntRange = (0, 0)
    entity_exclusion: float = 12.0


# =============================================================================
# TERRAIN TABLES
# =============================================================================

_CAVE = TerrainTable(
    floor=TerrainID.FLOOR,
    blocked=TerrainID.WALL,
    walkable=frozenset({TerrainID.FLOOR}),
    hazards=frozenset({TerrainID.LAVA}),
)

_CASTLE = TerrainTable(
    floor=TerrainID.FLOOR,
    blocked=TerrainID.WALL,
    walkable=frozenset({TerrainID.FLOOR}),
)

_SKY_CASTLE = TerrainTable(
    floor=TerrainID.CLOUD,
    blocked=TerrainID.WALL,
    walkable=frozenset({TerrainID.CLOUD}),
)

_GRASSLAND = TerrainTable(
    floor=TerrainID.GRASS,
    blocked=TerrainID.OBSTACLE,
    walkable=frozenset({TerrainID.GRASS, TerrainID.PATH}),
    decorable=frozenset({TerrainID.GRASS}),
    background=TerrainID.GRASS,
    path=TerrainID.PATH,
)

_DEMON_FIELD = TerrainTable(
    floor=TerrainID.DARKLAND,
    blocked=TerrainID.OBSTACLE,
    walkable=frozenset({TerrainID.DARKLAND, TerrainID.PATH}),
    hazards=frozenset({TerrainID.LAVA}),
    decorable=frozenset({TerrainID.DARKLAND}),
    background=TerrainID.DARKLAND,
    path=TerrainID.PATH,
)

_BEACH = TerrainTable(
    floor=TerrainID.SAND,
    blocked=TerrainID.OBSTACLE,
    walkable=frozenset({TerrainID.SAND}),
    decorable=frozenset({TerrainID.SAND}),
    background=TerrainID.DEEP_WATER,
    border=TerrainID.DEEP_WATER,
    extra=frozenset({TerrainID.SHALLOW_WATER}),
)

_JUNGLE = TerrainTable(
    floor=TerrainID.GRASS,
    blocked=TerrainID.UNDERGROWTH,
    walkable=frozenset({TerrainID.GRASS}),
    hazards=frozenset({TerrainID.LAVA}),
    extra=frozenset({TerrainID.WATER}),
)

_CLOUD_FIELD = TerrainTable(
    floor=TerrainID.CLOUD,
    blocked=TerrainID.SKY,
    walkable=frozenset({TerrainID.CLOUD, TerrainID.DENSE_CLOUD}),
)

_WORLD_LAND = frozenset(
    {
        TerrainID.SAND,
        TerrainID.GRASS,
        TerrainID.FOREST,
        TerrainID.SNOW,
        TerrainID.DARKLAND,
        TerrainID.VOLCANO,
        TerrainID.JUNGLE,
    }
)

_WORLD = TerrainTable(
    floor=TerrainID.GRASS,
    blocked=TerrainID.OCEAN,
    walkable=_WORLD_LAND | {TerrainID.SHALLOW_WATER},
    path=TerrainID.SAND,
    extra=frozenset({TerrainID.MOUNTAIN}),
)

# =============================================================================
# BIOMES
# =============================================================================

_CHAMBERS = HubSpec(
    count=(10, 16),
    x_margin=25,
    y_margin=20,
    spacing=28,
    radius_x=(8, 16),
    radius_y=(6, 13),
    noise=0.3,
)

VOLCANO = BiomeConfig(
    name="volcano",
    recipe="cave-chambers",
    width=200,
    height=150,
    terrain=_CAVE,
    hubs=_CHAMBERS,
    links=LinkSpec(
        k=(1, 3),
        width=(3, 5),
        windiness=(0.2, 0.8),
        wind_scale=0.9,
        jitter=0.2,
        overwritable=frozenset({TerrainID.WALL}),
    ),
    features=(
        Flows(
            count=(2, 4),
            length=(60, 100),
            width=(2, 4),
            code=TerrainID.LAVA,
            start="edge",
            sides="tb",
            drift=(0.2, 0.1),
        ),
        Blobs(
            count=(5, 10),
            radius_x=(4, 10),
            radius_y=(3, 8),
            code=TerrainID.LAVA,
            noise=0.3,
            near_codes=frozenset({TerrainID.FLOOR}),
            near_radius=8,
        ),
        Branches(
            count=(8, 15),
            length=(12, 30),
            width=(3, 5),
            windiness=(0.2, 0.8),
            wind_scale=0.9,
            overwritable=frozenset({TerrainID.WALL}),
        ),
    ),
    smoothing=Smoothing(),
    entity_count=(65, 100),
    entity_exclusion=12,
)

UNDERWATER = BiomeConfig(
    name="underwater",
    recipe="cave-chambers",
    width=200,
    height=150,
    terrain=_CAVE,
    hubs=_CHAMBERS,
    links=LinkSpec(
        k=(1, 3),
        width=(3, 5),
        windiness=(0.3, 1.0),
        wind_frequency=0.08,
        wind_scale=0.9,
        jitter=0.25,
    ),
    features=(
        Branches(
            count=(12, 22),
            length=(12, 35),
            width=(3, 5),
            windiness=(0.3, 1.0),
            jitter=0.25,
            wind_frequency=0.08,
            wind_scale=0.9,
        ),
        Blobs(
            count=(6, 14),
            radius_x=(4, 7),
            radius_y=(3, 6),
            code=TerrainID.FLOOR,
            noise=0.3,
            x_margin=15,
            y_margin=15,
            bbox_margin=3,
            near_codes=frozenset({TerrainID.FLOOR}),
            near_radius=5,
        ),
    ),
    smoothing=Smoothing(),
    entity_count=(50, 80),
    entity_exclusion=12,
)

DEMON_CASTLE = BiomeConfig(
    name="demon_castle",
    recipe="rooms-and-corridors",
    width=200,
    height=150,
    terrain=_CASTLE,
    border_rings=2,
    rooms=RoomSpec(
        count=(12, 18),
        size_classes=(RoomSizeClass(1.0, (12, 25), (10, 20)),),
    ),
    links=LinkSpec(
        planner="spanning",
        extra=(3, 6),
        width=(1, 2),
        jitter=0.0,
        style="elbow",
    ),
    special=ThroneRoom(width=30, height=25, bottom_margin=10),
    entity_count=(70, 110),
    entity_exclusion=12,
)

CLOUD_KINGDOM = BiomeConfig(
    name="cloud_kingdom",
    recipe="rooms-and-corridors",
    width=200,
    height=150,
    terrain=_SKY_CASTLE,
    border_rings=2,
    rooms=RoomSpec(
        count=(14, 20),
        size_classes=(RoomSizeClass(1.0, (14, 28), (12, 22)),),
    ),
    links=LinkSpec(
        planner="spanning",
        extra=(3, 6),
        width=(2, 3),
        jitter=0.0,
        style="elbow",
    ),
    special=ThroneRoom(width=35, height=28, bottom_margin=8),
    entity_count=(60, 95),
    entity_exclusion=12,
)

DUNGEON_FLOOR = BiomeConfig(
    name="dungeon_floor",
    recipe="rooms-and-corridors",
    width=240,
    height=180,
    terrain=_CASTLE,
    rooms=RoomSpec(
        count=(12, 12),
        size_classes=(
            RoomSizeClass(0.25, (8, 12), (8, 12)),
            RoomSizeClass(0.35, (14, 22), (14, 22)),
            RoomSizeClass(0.25, (24, 35), (24, 35)),
            RoomSizeClass(0.15, (36, 50), (28, 40)),
        ),
        placement_margin=3,
        max_attempts=500,
        shapes=(("rect", 0.5), ("l", 0.25), ("oval", 0.25)),
    ),
    links=LinkSpec(
        planner="chain",
        extra=(2, 5),
        width=(1, 2),
        jitter=0.0,
        style="elbow",
    ),
    features=(
        Blobs(
            count=(5, 5),
            radius_x=(5, 12),
            code=TerrainID.FLOOR,
            noise=0.5,
            threshold=0.8,
            x_margin=20,
            y_margin=20,
            bbox_margin=2,
        ),
    ),
    widen_passages=True,
    entity_count=(100, 150),
    entity_exclusion=8,
)

GRASSLAND = BiomeConfig(
    name="grassland",
    recipe="clearings-and-paths",
    width=200,
    height=150,
    terrain=_GRASSLAND,
    hubs=HubSpec(count=(6, 10), x_margin=30, y_margin=25, spacing=35),
    links=LinkSpec(k=(1, 2), width=(2, 4), jitter=0.15),
    features=(
        Scatter(
            count=(150, 250),
            code=TerrainID.OBSTACLE,
            on_codes=frozenset({TerrainID.GRASS}),
            hub_clearance=12,
        ),
        Clusters(
            count=(8, 15),
            radius_x=(6, 15),
            radius_y=(5, 12),
            density=(0.3, 0.6),
            code=TerrainID.OBSTACLE,
            on_codes=frozenset({TerrainID.GRASS}),
            hub_clearance=20,
        ),
    ),
    details=(
        Reclear(radius=(10, 15), code=TerrainID.GRASS),
        BorderBand(depth=5, chance=0.7, code=TerrainID.OBSTACLE),
    ),
    entity_count=(40, 70),
    entity_exclusion=15,
)

DEMON_FIELD = BiomeConfig(
    name="demon_field",
    recipe="clearings-and-paths",
    width=200,
    height=150,
    terrain=_DEMON_FIELD,
    hubs=HubSpec(count=(6, 10), x_margin=30, y_margin=25, spacing=35),
    links=LinkSpec(
        k=(1, 2),
        width=(2, 4),
        jitter=0.15,
        protected=frozenset({TerrainID.LAVA}),
    ),
    features=(
        Blobs(
            count=(8, 15),
            radius_x=(4, 12),
            radius_y=(3, 10),
            code=TerrainID.LAVA,
            noise=0.3,
            x_margin=15,
            y_margin=12,
            bbox_margin=2,
            edge_margin=3,
            hub_clearance=18,
        ),
        Flows(
            count=(2, 4),
            length=(30, 60),
            width=(2, 4),
            code=TerrainID.LAVA,
            start="interior",
            drift=(0.25, 0.25),
            x_margin=20,
            y_margin=10,
            hub_clearance=15,
            keep_clear=12,
        ),
        Scatter(
            count=(120, 200),
            code=TerrainID.OBSTACLE,
            on_codes=frozenset({TerrainID.DARKLAND}),
            hub_clearance=10,
        ),
        Clusters(
            count=(8, 14),
            radius_x=(4, 10),
            density=(0.25, 0.55),
            code=TerrainID.OBSTACLE,
            on_codes=frozenset({TerrainID.DARKLAND}),
            center_not=frozenset({TerrainID.LAVA}),
            hub_clearance=15,
        ),
    ),
    details=(
        Reclear(
            radius=(10, 14),
            code=TerrainID.DARKLAND,
            keep=frozenset({TerrainID.LAVA}),
        ),
        BorderBand(depth=5, chance=0.6, code=TerrainID.OBSTACLE),
    ),
    entity_count=(50, 80),
    entity_exclusion=15,
)

BEACH = BiomeConfig(
    name="beach",
    recipe="clearings-and-paths",
    width=200,
    height=150,
    terrain=_BEACH,
    landmasses=(
        Landmass(
            center=(100, 75),
            radius_x=(70, 85),
            radius_y=(50, 65),
            code=TerrainID.SAND,
            kind="wave",
            threshold=0.85,
            wave=(0.15, 0.15, 0.12, 0.12),
        ),
    ),
    hubs=HubSpec(
        count=(5, 8),
        x_margin=30,
        y_margin=25,
        spacing=30,
        attempts_per_hub=50,
        on_codes=frozenset({TerrainID.SAND}),
    ),
    links=LinkSpec(
        k=(1, 2),
        width=(1, 2),
        jitter=0.1,
        overwritable=frozenset({TerrainID.DEEP_WATER, TerrainID.SHALLOW_WATER}),
    ),
    features=(
        Blobs(
            count=(3, 6),
            radius_x=(15, 30),
            radius_y=(12, 25),
            code=TerrainID.SAND,
            noise=0.2,
            x_margin=30,
            y_margin=25,
            bbox_margin=5,
            overwritable=frozenset({TerrainID.DEEP_WATER, TerrainID.SHALLOW_WATER}),
        ),
        Shoreline(
            source=frozenset({TerrainID.DEEP_WATER}),
            target=TerrainID.SHALLOW_WATER,
            near=frozenset({TerrainID.SAND}),
            radius=3.5,
        ),
        Scatter(
            count=(80, 150),
            code=TerrainID.OBSTACLE,
            on_codes=frozenset({TerrainID.SAND}),
            hub_clearance=10,
        ),
        Clusters(
            count=(6, 12),
            radius_x=(4, 8),
            density=(0.2, 0.45),
            code=TerrainID.OBSTACLE,
            on_codes=frozenset({TerrainID.SAND}),
            center_on=frozenset({TerrainID.SAND}),
            hub_clearance=15,
        ),
    ),
    details=(
        Reclear(
            radius=(8, 12),
            code=TerrainID.SAND,
            keep=frozenset(
                {TerrainID.SAND, TerrainID.DEEP_WATER, TerrainID.SHALLOW_WATER}
            ),
        ),
    ),
    entity_count=(35, 60),
    entity_exclusion=15,
)

JUNGLE = BiomeConfig(
    name="jungle",
    recipe="clearings-and-paths",
    width=200,
    height=150,
    terrain=_JUNGLE,
    special=Volcano(
        radius=25,
        crater_radius=8,
        rim_radius=12,
        flows=Flows(
            count=(2, 4),
            length=(30, 50),
            width=(2, 4),
            code=TerrainID.LAVA,
            start="special",
            taper=True,
        ),
    ),
    hubs=HubSpec(
        count=(10, 16),
        x_margin=20,
        y_margin=20,
        spacing=25,
        radius_x=(8, 15),
        radius_y=(6, 12),
        noise=0.35,
        special_clearance=40,
        overwritable=frozenset(
            {TerrainID.UNDERGROWTH, TerrainID.GRASS, TerrainID.WATER}
        ),
    ),
    links=LinkSpec(
        k=(1, 2),
        width=(2, 4),
        windiness=(0.2, 0.7),
        wind_scale=0.9,
        jitter=0.2,
        protected=frozenset({TerrainID.LAVA, TerrainID.WATER}),
    ),
    features=(
        Flows(
            count=(1, 2),
            length=(80, 120),
            width=(3, 5),
            code=TerrainID.WATER,
            start="edge",
            sides="tblr",
            aim_center=True,
            drift=(0.15, 0.15),
            skip=frozenset({TerrainID.LAVA}),
            special_stop=35,
        ),
        Blobs(
            count=(3, 6),
            radius_x=(4, 8),
            code=TerrainID.WATER,
            noise=0.5,
            x_margin=15,
            y_margin=15,
            bbox_margin=2,
            skip=frozenset({TerrainID.LAVA}),
            special_clearance=40,
        ),
    ),
    smoothing=Smoothing(),
    entity_count=(55, 90),
    entity_exclusion=12,
)

CLOUD_FIELD = BiomeConfig(
    name="cloud_field",
    recipe="islands-and-bridges",
    width=200,
    height=150,
    terrain=_CLOUD_FIELD,
    hubs=HubSpec(
        count=(10, 16),
        x_margin=25,
        y_margin=20,
        spacing=28,
        radius_x=(10, 20),
        radius_y=(8, 16),
        noise=0.4,
        threshold=0.6,
        bbox_margin=4,
        core_code=TerrainID.DENSE_CLOUD,
    ),
    links=LinkSpec(
        k=(1, 2),
        width=(3, 5),
        windiness=(0.1, 0.5),
        wind_frequency=0.08,
        wind_scale=0.4,
        jitter=0.15,
        overwritable=frozenset({TerrainID.SKY}),
    ),
    features=(
        Blobs(
            count=(8, 15),
            radius_x=(3, 6),
            code=TerrainID.CLOUD,
            noise=0.4,
            threshold=0.6,
            bbox_margin=4,
            on_codes=frozenset({TerrainID.SKY}),
            near_codes=frozenset({TerrainID.CLOUD, TerrainID.DENSE_CLOUD}),
            near_radius=8,
            core_code=TerrainID.DENSE_CLOUD,
        ),
    ),
    smoothing=Smoothing(
        counted=frozenset({TerrainID.CLOUD, TerrainID.DENSE_CLOUD}),
    ),
    entity_count=(50, 80),
    entity_exclusion=12,
)

WORLD_MAP = BiomeConfig(
    name="world_map",
    recipe="islands-and-bridges",
    width=160,
    height=120,
    terrain=_WORLD,
    landmasses=(
        Landmass(
            center=(80, 60),
            radius_x=(55, 55),
            radius_y=(40, 40),
            code=TerrainID.GRASS,
            kind="wave",
            hub_offset=(0, 5),
        ),
        Landmass(
            center=(80, 95),
            radius_x=(25, 25),
            radius_y=(18, 18),
            code=TerrainID.JUNGLE,
            hub_offset=(0, 0),
        ),
        Landmass(
            center=(25, 20),
            radius_x=(18, 18),
            radius_y=(14, 14),
            code=TerrainID.SNOW,
            hub_offset=(0, 0),
        ),
        Landmass(
            center=(130, 25),
            radius_x=(22, 22),
            radius_y=(18, 18),
            code=TerrainID.DARKLAND,
            noise=0.15,
            bbox_margin=3,
            hub_offset=(0, 0),
        ),
    ),
    links=LinkSpec(
        planner="spanning",
        width=(1, 1),
        jitter=0.1,
        overwritable=frozenset({TerrainID.OCEAN, TerrainID.SHALLOW_WATER}),
    ),
    features=(
        Blobs(
            count=(30, 30),
            radius_x=(4, 10),
            code=TerrainID.FOREST,
            noise=0.5,
            x_margin=20,
            y_margin=20,
            bbox_margin=2,
            overwritable=frozenset({TerrainID.GRASS}),
            on_codes=frozenset({TerrainID.GRASS}),
        ),
        Ridge(
            start=(65, 40),
            length=30,
            width=12,
            code=TerrainID.MOUNTAIN,
            on_codes=frozenset({TerrainID.GRASS, TerrainID.FOREST}),
        ),
        Ridge(
            start=(90, 50),
            length=15,
            width=8,
            code=TerrainID.MOUNTAIN,
            on_codes=frozenset({TerrainID.GRASS, TerrainID.FOREST}),
        ),
        Shoreline(
            source=frozenset({TerrainID.GRASS, TerrainID.FOREST}),
            target=TerrainID.SAND,
            near=frozenset({TerrainID.OCEAN, TerrainID.SHALLOW_WATER}),
            radius=1.5,
            chance=0.7,
        ),
        Blobs(
            count=(1, 1),
            radius_x=(5, 5),
            code=TerrainID.VOLCANO,
            noise=0.0,
            anchor=(80, 95),
        ),
        Clusters(
            count=(1, 1),
            radius_x=(6, 6),
            density=(0.6, 0.6),
            code=TerrainID.MOUNTAIN,
            on_codes=frozenset({TerrainID.SNOW}),
            anchor=(25, 20),
        ),
    ),
    details=(
        Shoreline(
            source=frozenset({TerrainID.OCEAN}),
            target=TerrainID.SHALLOW_WATER,
            near=_WORLD_LAND | {TerrainID.MOUNTAIN},
            radius=2.9,
        ),
    ),
    entity_count=(0, 0),
    entity_exclusion=0,
)

BIOMES: dict[str, BiomeConfig] = {
    biome.name: biome
    for biome in (
        VOLCANO,
        UNDERWATER,
        DEMON_CASTLE,
        CLOUD_KINGDOM,
        DUNGEON_FLOOR,
        GRASSLAND,
        DEMON_FIELD,
        BEACH,
        JUNGLE,
        CLOUD_FIELD,
        WORLD_MAP,
    )
}


def get_biome(name: str) -> BiomeConfig:
    """Look up a biome by name.

    Raises:
        ValueError: If no biome has that name.
    """
    try:
        return BIOMES[name]
    except KeyError:
        raise ValueError(f"Unknown biome: {name!r}") from None
