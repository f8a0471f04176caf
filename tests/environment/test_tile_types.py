from __future__ import annotations

import numpy as np
import pytest

from mapwright.environment import tile_types
from mapwright.environment.tile_types import TerrainID, TerrainTable


class TestRegistry:
    """Tests for the flyweight registry."""

    @pytest.mark.parametrize(
        ("terrain", "name"),
        [
            (TerrainID.WALL, "Wall"),
            (TerrainID.LAVA, "Lava"),
            (TerrainID.DEEP_WATER, "Deep Water"),
            (TerrainID.JUNGLE, "Jungle"),
        ],
    )
    def test_enum_matches_registration_order(
        self, terrain: TerrainID, name: str
    ) -> None:
        data = tile_types.get_terrain_data_by_id(terrain)
        assert str(data["display_name"]) == name

    def test_only_lava_is_intrinsically_hazardous(self) -> None:
        hazards = [
            t for t in TerrainID if tile_types.get_terrain_data_by_id(t)["hazard"]
        ]
        assert hazards == [TerrainID.LAVA]

    def test_register_duplicate_name_raises(self) -> None:
        data = tile_types.make_terrain_type_data(glyph="?", display_name="Dup")
        with pytest.raises(ValueError, match="already registered"):
            tile_types.register_terrain_type("wall", data)

    def test_unknown_id_raises_index_error(self) -> None:
        with pytest.raises(IndexError):
            tile_types.get_terrain_data_by_id(250)

    def test_name_lookup(self) -> None:
        assert tile_types.get_terrain_name_by_id(TerrainID.SHALLOW_WATER) == (
            "Shallow Water"
        )
        assert "Unknown" in tile_types.get_terrain_name_by_id(999)

    def test_glyph_and_hazard_maps(self) -> None:
        tiles = np.array(
            [[TerrainID.WALL, TerrainID.LAVA], [TerrainID.FLOOR, TerrainID.GRASS]],
            dtype=np.uint8,
        )
        np.testing.assert_array_equal(
            tile_types.get_glyph_map(tiles), [["#", "~"], [".", ","]]
        )
        np.testing.assert_array_equal(
            tile_types.get_hazard_map(tiles), [[False, True], [False, False]]
        )


class TestTerrainTable:
    """Tests for per-biome walkability rules."""

    def test_defaults_follow_floor_and_blocked(self, caves_table: TerrainTable) -> None:
        assert caves_table.fill_code == TerrainID.WALL
        assert caves_table.border_code == TerrainID.WALL
        assert caves_table.path_code == TerrainID.FLOOR

    def test_codes_and_obstacles(self, caves_table: TerrainTable) -> None:
        assert caves_table.codes == {TerrainID.FLOOR, TerrainID.WALL, TerrainID.LAVA}
        assert caves_table.obstacles == {TerrainID.WALL, TerrainID.LAVA}

    def test_floor_must_be_walkable(self) -> None:
        with pytest.raises(ValueError, match="must be walkable"):
            TerrainTable(
                floor=TerrainID.FLOOR,
                blocked=TerrainID.WALL,
                walkable=frozenset({TerrainID.GRASS}),
            )

    def test_blocked_cannot_be_walkable(self) -> None:
        with pytest.raises(ValueError, match="cannot be walkable"):
            TerrainTable(
                floor=TerrainID.FLOOR,
                blocked=TerrainID.WALL,
                walkable=frozenset({TerrainID.FLOOR, TerrainID.WALL}),
            )

    def test_walkability_is_per_table(self) -> None:
        """Shallow water can be walkable in one biome and not another."""
        world = TerrainTable(
            floor=TerrainID.GRASS,
            blocked=TerrainID.OCEAN,
            walkable=frozenset({TerrainID.GRASS, TerrainID.SHALLOW_WATER}),
        )
        beach = TerrainTable(
            floor=TerrainID.SAND,
            blocked=TerrainID.OBSTACLE,
            walkable=frozenset({TerrainID.SAND}),
            extra=frozenset({TerrainID.SHALLOW_WATER}),
        )
        assert world.is_walkable(TerrainID.SHALLOW_WATER)
        assert not beach.is_walkable(TerrainID.SHALLOW_WATER)

    def test_vectorized_maps(self, caves_table: TerrainTable) -> None:
        tiles = np.array([[TerrainID.FLOOR, TerrainID.LAVA, TerrainID.WALL]])
        np.testing.assert_array_equal(
            caves_table.walkable_map(tiles), [[True, False, False]]
        )
        np.testing.assert_array_equal(
            caves_table.hazard_map(tiles), [[False, True, False]]
        )
        assert caves_table.is_hazard(TerrainID.LAVA)
        assert not caves_table.is_hazard(TerrainID.WALL)
