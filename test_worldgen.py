"""test_worldgen.py — Map generation invariants.

Every authored blueprint is generated with a fixed seed and checked
for grid shape, tile coordinates, protected terrain, building
entrances and walkable roads.

Run:  python test_worldgen.py
"""
from __future__ import annotations
import sys, random, traceback

from core.constants import (
    TERRAIN_BUILDING, TERRAIN_GRASS, TERRAIN_ROAD, TERRAIN_WATER, TERRAIN_DIRT,
)
from core.data import Catalog, load_catalog
from components import Connection
from data.generate_zones import ZONE_BLUEPRINTS
from logic.worldgen import (
    BuildingSpec, RuinCluster, WaterSpec, ZoneBlueprint,
    build_tiles, carve_path, carve_road, clear_area, entrance_of, fill_base,
    footprint, generate_map, stamp_building,
)

CATALOG = load_catalog()
SEED = 1234


def _all_maps():
    for map_id, make in ZONE_BLUEPRINTS.items():
        bp = make()
        yield bp, generate_map(bp, CATALOG, random.Random(f"{SEED}:{map_id}"))


# ── Shape ────────────────────────────────────────────────────────────

def test_grid_shape_and_coordinates():
    for bp, game_map in _all_maps():
        assert game_map.id == bp.id
        assert len(game_map.tiles) == bp.height, bp.id
        for y, row in enumerate(game_map.tiles):
            assert len(row) == bp.width, (bp.id, y)
            for x, tile in enumerate(row):
                assert (tile.x, tile.y) == (x, y), (bp.id, x, y)


def test_fresh_map_is_undiscovered():
    for _, game_map in _all_maps():
        assert not any(t.discovered or t.visible
                       for row in game_map.tiles for t in row)


def test_nine_authored_maps():
    assert set(ZONE_BLUEPRINTS) == {
        "capital_wasteland", "northern_wasteland", "military_base",
        "industrial_zone", "eastern_districts", "southern_ruins",
        "metro_tunnels", "western_outskirts", "dead_marsh",
    }
    cap = ZONE_BLUEPRINTS["capital_wasteland"]()
    assert (cap.width, cap.height) == (120, 120)


# ── Buildings ────────────────────────────────────────────────────────

def test_one_walkable_entrance_per_building():
    for bp, game_map in _all_maps():
        for i, spec in enumerate(bp.buildings):
            x0, y0, x1, y1 = footprint(spec)
            entrances = []
            for y in range(y0, y1 + 1):
                for x in range(x0, x1 + 1):
                    tile = game_map.tile_at(x, y)
                    if tile is None:
                        continue
                    assert tile.type == TERRAIN_BUILDING, (bp.id, x, y)
                    assert tile.building is not None
                    if tile.walkable:
                        entrances.append((x, y))
            assert entrances == [entrance_of(spec)], (bp.id, i, entrances)
            ex, ey = entrances[0]
            assert ey == y1
            assert ex == x0 + spec.w // 2


def test_building_ids_default_and_authored():
    bp = ZoneBlueprint(id="t", name="T", width=20, height=20, base=TERRAIN_GRASS,
                       buildings=[BuildingSpec(5, 5),
                                  BuildingSpec(14, 14, building_id="store")])
    tiles = build_tiles(bp, random.Random(0))
    assert tiles[5][5].building.building_id == "t_bldg_0"
    assert tiles[14][14].building.building_id == "store"


def test_building_metadata_on_capital_entrances():
    cap = ZONE_BLUEPRINTS["capital_wasteland"]()
    game_map = generate_map(cap, CATALOG, random.Random(5))
    named = [s for s in cap.buildings if s.name]
    assert named
    for spec in named:
        ex, ey = entrance_of(spec)
        info = game_map.tile_at(ex, ey).building
        assert info.is_entrance
        assert info.name == spec.name
        assert info.kind == spec.kind


# ── Protected terrain ────────────────────────────────────────────────

def test_carving_never_overwrites_water_or_building():
    tiles = fill_base(20, 20, TERRAIN_GRASS)
    from logic.worldgen import stamp_water
    stamp_water(tiles, WaterSpec(5, 5, 2))
    stamp_building(tiles, BuildingSpec(14, 5), "b")
    before = {(t.x, t.y): t.type for row in tiles for t in row
              if t.type in (TERRAIN_WATER, TERRAIN_BUILDING)}
    assert before

    carve_road(tiles, row=5)
    carve_road(tiles, col=5)
    carve_road(tiles, col=14)
    clear_area(tiles, 10, 5, 6, TERRAIN_DIRT)
    carve_path(tiles, (0, 0), (19, 19))
    carve_path(tiles, (5, 5), (14, 5))

    for (x, y), terrain in before.items():
        assert tiles[y][x].type == terrain, (x, y)


def test_generated_water_survives_roads():
    bp = ZoneBlueprint(id="lake", name="Lake", width=30, height=30,
                       base=TERRAIN_GRASS, water=[WaterSpec(15, 15, 3)],
                       road_rows=[15], road_cols=[15],
                       ruins=[RuinCluster(15, 15, 4)])
    tiles = build_tiles(bp, random.Random(2))
    assert tiles[15][15].type == TERRAIN_WATER
    assert tiles[15][12].type == TERRAIN_WATER
    assert tiles[15][0].type == TERRAIN_ROAD
    assert tiles[0][15].type == TERRAIN_ROAD


def test_roads_are_walkable():
    for bp, game_map in _all_maps():
        for row in bp.road_rows:
            for tile in game_map.tiles[row]:
                if tile.type == TERRAIN_ROAD:
                    assert tile.walkable
        for col in bp.road_cols:
            for y in range(bp.height):
                tile = game_map.tiles[y][col]
                if tile.type == TERRAIN_ROAD:
                    assert tile.walkable


def test_water_blocks():
    for _, game_map in _all_maps():
        for row in game_map.tiles:
            for tile in row:
                if tile.type == TERRAIN_WATER:
                    assert not tile.walkable


# ── Content ──────────────────────────────────────────────────────────

def test_catalog_actors_land_on_their_maps():
    cap = generate_map(ZONE_BLUEPRINTS["capital_wasteland"](), CATALOG,
                       random.Random(0))
    ids = {n.id for n in cap.npcs}
    assert "old_man_harlan" in ids          # no map_id → default map
    marsh = generate_map(ZONE_BLUEPRINTS["dead_marsh"](), CATALOG,
                         random.Random(0))
    assert "old_man_harlan" not in {n.id for n in marsh.npcs}
    # copies, not the catalog's own objects
    source = {n.id: n for n in CATALOG.npcs}
    for npc in cap.npcs:
        assert npc is not source[npc.id]
        assert npc == source[npc.id]


def test_lootable_count_follows_density():
    for bp, game_map in _all_maps():
        assert len(game_map.lootables) == int(bp.width * bp.height * bp.loot_density)
        assert all(lt.id.startswith(bp.id) for lt in game_map.lootables)


def test_connections_are_copied():
    bp = ZoneBlueprint(id="a", name="A", width=10, height=10, base=TERRAIN_GRASS,
                       connections=[Connection("east", "b")], loot_density=0.0)
    m = generate_map(bp, Catalog(), random.Random(0))
    assert m.connection("east").target_map_id == "b"
    assert m.connections[0] is not bp.connections[0]


def test_same_seed_same_map():
    bp = ZONE_BLUEPRINTS["industrial_zone"]()
    a = generate_map(bp, CATALOG, random.Random(77))
    b = generate_map(bp, CATALOG, random.Random(77))
    assert [[t.type for t in r] for r in a.tiles] == [[t.type for t in r] for r in b.tiles]
    assert [(l.x, l.y) for l in a.lootables] == [(l.x, l.y) for l in b.lootables]


# ═══════════════════════════════════════════════════════════════════════
#  MAIN
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    _passed = 0
    _failed = 0
    tests = [(name, fn) for name, fn in sorted(globals().items())
             if name.startswith("test_") and callable(fn)]
    for name, fn in tests:
        try:
            fn()
            _passed += 1
            print(f"  [PASS] {name}")
        except Exception:
            _failed += 1
            print(f"  [FAIL] {name}")
            traceback.print_exc()

    print(f"\n{'=' * 60}")
    print(f"  Worldgen Tests: {_passed} passed, {_failed} failed")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
