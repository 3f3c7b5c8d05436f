"""data/generate_zones.py — Authored blueprints for the 9 wasteland maps.

Each ``make_*`` function returns a ZoneBlueprint; logic/worldgen.py turns
it into tiles.  ZONE_BLUEPRINTS is the fixed table the map registry
reads at startup.

Preview a map in the terminal:  python -m data.generate_zones capital_wasteland

World layout (connections are symmetric):

                       military_base
                             |
                     northern_wasteland --- industrial_zone
                             |                     |
    western_outskirts --- capital_wasteland --- eastern_districts
            |                |
        dead_marsh ------ southern_ruins
                             |
                        metro_tunnels
"""

import sys

from core.constants import (
    TILE_SIZE, NORTH, SOUTH, EAST, WEST,
    TERRAIN_GRASS, TERRAIN_DIRT, TERRAIN_STONE, TERRAIN_SAND,
    TERRAIN_RUINS, TERRAIN_CONCRETE, TERRAIN_ASH, TERRAIN_MUD,
)
from components.maps import Connection
from logic.worldgen import ZoneBlueprint, BuildingSpec, WaterSpec, RuinCluster


def _link(direction: str, target: str, w: int, h: int) -> Connection:
    """Connection leaving the middle of an edge.

    Positions are authored for reference only; the engine lands the
    player at a fixed inset instead.
    """
    mx = (w // 2) * TILE_SIZE
    my = (h // 2) * TILE_SIZE
    if direction == NORTH:
        frm, to = (mx, 0), (mx, (h - 1) * TILE_SIZE)
    elif direction == SOUTH:
        frm, to = (mx, (h - 1) * TILE_SIZE), (mx, 0)
    elif direction == EAST:
        frm, to = ((w - 1) * TILE_SIZE, my), (0, my)
    else:
        frm, to = (0, my), ((w - 1) * TILE_SIZE, my)
    return Connection(direction, target, frm, to)


# ═════════════════════════════════════════════════════════════════════
#  CAPITAL WASTELAND  120×120 — starting map
# ═════════════════════════════════════════════════════════════════════

def make_capital_wasteland():
    W, H = 120, 120
    return ZoneBlueprint(
        id="capital_wasteland", name="Capital Wasteland",
        width=W, height=H, bg_music="wasteland_ambient",
        base=TERRAIN_GRASS,
        secondary=TERRAIN_DIRT, secondary_chance=0.10,
        tertiary=TERRAIN_STONE, tertiary_chance=0.05,
        water=[WaterSpec(90, 25, 5), WaterSpec(20, 95, 4)],
        road_rows=[60], road_cols=[60],
        buildings=[
            # Megaton
            BuildingSpec(36, 26, 5, 4, "trader_post", "Craterside Supply",
                         "craterside_supply"),
            BuildingSpec(41, 36, 4, 4, "clinic", "Megaton Clinic",
                         "megaton_clinic", yard_terrain=TERRAIN_STONE),
            BuildingSpec(46, 41, 4, 4, "weapon_shop", "Megaton Armory",
                         "megaton_armory"),
            BuildingSpec(29, 36, 5, 4, "tavern", "Megaton Saloon",
                         "megaton_saloon"),
            BuildingSpec(33, 30, 4, 3, "security", "Megaton Security Office",
                         "megaton_security", yard_radius=2),
            # Rivet City
            BuildingSpec(82, 66, 6, 4, "market", "Rivet City Market",
                         "rivet_city_market", yard_terrain=TERRAIN_STONE),
            BuildingSpec(95, 60, 5, 4, "clinic", "Rivet City Medical Bay",
                         "rivet_city_clinic", yard_terrain=TERRAIN_STONE),
        ],
        ruins=[RuinCluster(100, 100, 3), RuinCluster(15, 15, 2.5),
               RuinCluster(75, 90, 3)],
        connections=[
            _link(NORTH, "northern_wasteland", W, H),
            _link(SOUTH, "southern_ruins", W, H),
            _link(EAST, "eastern_districts", W, H),
            _link(WEST, "western_outskirts", W, H),
        ],
        loot_density=0.004,
    )


# ═════════════════════════════════════════════════════════════════════
#  NORTHERN WASTELAND  80×80 — scrapyards and factories
# ═════════════════════════════════════════════════════════════════════

def make_northern_wasteland():
    W, H = 80, 80
    return ZoneBlueprint(
        id="northern_wasteland", name="Northern Wasteland",
        width=W, height=H, bg_music="industrial_ambient",
        base=TERRAIN_DIRT,
        secondary=TERRAIN_STONE, secondary_chance=0.30,
        tertiary=TERRAIN_RUINS, tertiary_chance=0.10,
        road_cols=[40],
        buildings=[
            BuildingSpec(30, 30, 8, 5, "factory", "Old Press Works"),
            BuildingSpec(55, 25, 6, 4, "warehouse", "Scrap Warehouse"),
            BuildingSpec(45, 55, 5, 3, "bunkhouse", "Workers' Bunkhouse"),
        ],
        hub=(40, 40),
        ruins=[RuinCluster(65, 65, 3), RuinCluster(12, 60, 2)],
        connections=[
            _link(SOUTH, "capital_wasteland", W, H),
            _link(NORTH, "military_base", W, H),
            _link(EAST, "industrial_zone", W, H),
        ],
        loot_density=0.003,
    )


# ═════════════════════════════════════════════════════════════════════
#  MILITARY BASE  60×60 — sparse, guarded
# ═════════════════════════════════════════════════════════════════════

def make_military_base():
    W, H = 60, 60
    return ZoneBlueprint(
        id="military_base", name="Fort Constantine",
        width=W, height=H, bg_music="military_ambient",
        base=TERRAIN_CONCRETE,
        secondary=TERRAIN_DIRT, secondary_chance=0.15,
        tertiary=TERRAIN_SAND, tertiary_chance=0.05,
        road_rows=[35], road_cols=[30],
        buildings=[
            BuildingSpec(20, 20, 6, 4, "barracks", "Barracks"),
            BuildingSpec(30, 15, 7, 5, "command", "Command Center",
                         yard_terrain=TERRAIN_CONCRETE),
            BuildingSpec(42, 30, 5, 4, "armory", "Base Armory",
                         yard_terrain=TERRAIN_CONCRETE),
        ],
        hub=(30, 35),
        connections=[_link(SOUTH, "northern_wasteland", W, H)],
        loot_density=0.002,
    )


# ═════════════════════════════════════════════════════════════════════
#  INDUSTRIAL ZONE  70×70 — dense salvage
# ═════════════════════════════════════════════════════════════════════

def make_industrial_zone():
    W, H = 70, 70
    return ZoneBlueprint(
        id="industrial_zone", name="Industrial Zone",
        width=W, height=H, bg_music="industrial_ambient",
        base=TERRAIN_CONCRETE,
        secondary=TERRAIN_RUINS, secondary_chance=0.20,
        tertiary=TERRAIN_ASH, tertiary_chance=0.08,
        water=[WaterSpec(55, 35, 3)],
        road_rows=[35],
        buildings=[
            BuildingSpec(20, 20, 8, 6, "smelter", "Smelter"),
            BuildingSpec(45, 18, 10, 6, "factory", "Assembly Plant"),
            BuildingSpec(25, 48, 6, 6, "power_station", "Power Station"),
            BuildingSpec(50, 50, 6, 4, "warehouse", "Freight Depot"),
        ],
        ruins=[RuinCluster(10, 60, 3)],
        connections=[
            _link(SOUTH, "eastern_districts", W, H),
            _link(WEST, "northern_wasteland", W, H),
        ],
        loot_density=0.009,
    )


# ═════════════════════════════════════════════════════════════════════
#  EASTERN DISTRICTS  80×80 — city blocks
# ═════════════════════════════════════════════════════════════════════

def make_eastern_districts():
    W, H = 80, 80
    return ZoneBlueprint(
        id="eastern_districts", name="Eastern Districts",
        width=W, height=H, bg_music="city_ambient",
        base=TERRAIN_RUINS,
        secondary=TERRAIN_CONCRETE, secondary_chance=0.20,
        tertiary=TERRAIN_STONE, tertiary_chance=0.10,
        road_rows=[30, 55], road_cols=[50],
        buildings=[
            BuildingSpec(20, 20, 6, 6, "apartments", "Hillside Apartments"),
            BuildingSpec(35, 20, 6, 6, "apartments", "Tenement Row"),
            BuildingSpec(62, 25, 8, 5, "office", "Office Tower"),
            BuildingSpec(44, 40, 4, 3, "clinic", "Okafor's Clinic",
                         yard_terrain=TERRAIN_STONE),
        ],
        hub=(50, 30),
        ruins=[RuinCluster(70, 70, 3), RuinCluster(15, 65, 3)],
        connections=[
            _link(WEST, "capital_wasteland", W, H),
            _link(NORTH, "industrial_zone", W, H),
        ],
        loot_density=0.006,
    )


# ═════════════════════════════════════════════════════════════════════
#  SOUTHERN RUINS  80×80 — urban decay
# ═════════════════════════════════════════════════════════════════════

def make_southern_ruins():
    W, H = 80, 80
    return ZoneBlueprint(
        id="southern_ruins", name="Southern Ruins",
        width=W, height=H, bg_music="ruins_ambient",
        base=TERRAIN_RUINS,
        secondary=TERRAIN_DIRT, secondary_chance=0.20,
        tertiary=TERRAIN_STONE, tertiary_chance=0.10,
        water=[WaterSpec(60, 65, 4)],
        road_rows=[50],
        buildings=[
            BuildingSpec(30, 25, 10, 6, "mall", "Collapsed Mall"),
            BuildingSpec(55, 40, 5, 7, "church", "Burnt Church"),
            BuildingSpec(20, 45, 7, 5, "school", "Springvale School"),
        ],
        ruins=[RuinCluster(10, 10, 3), RuinCluster(70, 15, 2)],
        connections=[
            _link(NORTH, "capital_wasteland", W, H),
            _link(SOUTH, "metro_tunnels", W, H),
            _link(WEST, "dead_marsh", W, H),
        ],
        loot_density=0.005,
    )


# ═════════════════════════════════════════════════════════════════════
#  METRO TUNNELS  60×40 — dense, cramped
# ═════════════════════════════════════════════════════════════════════

def make_metro_tunnels():
    W, H = 60, 40
    return ZoneBlueprint(
        id="metro_tunnels", name="Metro Tunnels",
        width=W, height=H, bg_music="tunnel_ambient",
        base=TERRAIN_CONCRETE,
        secondary=TERRAIN_STONE, secondary_chance=0.20,
        tertiary=TERRAIN_RUINS, tertiary_chance=0.10,
        water=[WaterSpec(50, 33, 3)],
        road_rows=[20], road_cols=[30],
        buildings=[
            BuildingSpec(15, 16, 6, 3, "station", "Farragut Platform",
                         yard_radius=2, yard_terrain=TERRAIN_CONCRETE),
            BuildingSpec(45, 16, 6, 3, "station", "Metro Central Platform",
                         yard_radius=2, yard_terrain=TERRAIN_CONCRETE),
        ],
        hub=(30, 20),
        ruins=[RuinCluster(8, 32, 2)],
        connections=[_link(NORTH, "southern_ruins", W, H)],
        loot_density=0.01,
    )


# ═════════════════════════════════════════════════════════════════════
#  WESTERN OUTSKIRTS  80×80 — open wilderness
# ═════════════════════════════════════════════════════════════════════

def make_western_outskirts():
    W, H = 80, 80
    return ZoneBlueprint(
        id="western_outskirts", name="Western Outskirts",
        width=W, height=H, bg_music="wilderness_ambient",
        base=TERRAIN_SAND,
        secondary=TERRAIN_DIRT, secondary_chance=0.15,
        tertiary=TERRAIN_GRASS, tertiary_chance=0.05,
        water=[WaterSpec(40, 45, 4)],
        road_rows=[40],
        buildings=[
            BuildingSpec(55, 30, 5, 4, "farmhouse", "Abandoned Farmhouse"),
            BuildingSpec(20, 60, 4, 4, "outpost", "Ranger Outpost"),
        ],
        ruins=[RuinCluster(65, 65, 2)],
        connections=[
            _link(EAST, "capital_wasteland", W, H),
            _link(SOUTH, "dead_marsh", W, H),
        ],
        loot_density=0.002,
    )


# ═════════════════════════════════════════════════════════════════════
#  DEAD MARSH  70×70 — pools and mud
# ═════════════════════════════════════════════════════════════════════

def make_dead_marsh():
    W, H = 70, 70
    return ZoneBlueprint(
        id="dead_marsh", name="Dead Marsh",
        width=W, height=H, bg_music="marsh_ambient",
        base=TERRAIN_MUD,
        secondary=TERRAIN_GRASS, secondary_chance=0.15,
        tertiary=TERRAIN_ASH, tertiary_chance=0.05,
        water=[WaterSpec(20, 20, 5), WaterSpec(50, 20, 4),
               WaterSpec(45, 55, 6), WaterSpec(15, 40, 3)],
        buildings=[
            BuildingSpec(36, 27, 4, 3, "shack", "Hermit's Shack",
                         yard_radius=3),
        ],
        ruins=[RuinCluster(60, 40, 2, TERRAIN_DIRT)],
        connections=[
            _link(NORTH, "western_outskirts", W, H),
            _link(EAST, "southern_ruins", W, H),
        ],
        loot_density=0.003,
    )


# ═════════════════════════════════════════════════════════════════════
#  Registry table
# ═════════════════════════════════════════════════════════════════════

ZONE_BLUEPRINTS = {
    "capital_wasteland":  make_capital_wasteland,
    "northern_wasteland": make_northern_wasteland,
    "military_base":      make_military_base,
    "industrial_zone":    make_industrial_zone,
    "eastern_districts":  make_eastern_districts,
    "southern_ruins":     make_southern_ruins,
    "metro_tunnels":      make_metro_tunnels,
    "western_outskirts":  make_western_outskirts,
    "dead_marsh":         make_dead_marsh,
}


# ── ASCII preview ────────────────────────────────────────────────────

_GLYPHS = {
    "grass": ",", "dirt": ".", "stone": ":", "sand": "_", "ruins": "%",
    "concrete": "=", "ash": "~", "mud": ";", "water": "W", "road": "#",
    "path": "+", "building": "B",
}


def preview(map_id: str, seed: int = 0):
    import random
    from core.data import load_catalog
    from logic.worldgen import build_tiles

    bp = ZONE_BLUEPRINTS[map_id]()
    tiles = build_tiles(bp, random.Random(seed))
    for row in tiles:
        print("".join("E" if t.is_entrance else _GLYPHS.get(t.type, "?")
                      for t in row))
    print(f"{bp.name}: {bp.width}x{bp.height}, "
          f"{len(load_catalog().npcs_for(map_id))} npcs")


if __name__ == "__main__":
    preview(sys.argv[1] if len(sys.argv) > 1 else "capital_wasteland")
