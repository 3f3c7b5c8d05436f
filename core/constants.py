"""core/constants.py — Shared constants used across the codebase.

Centralises magic numbers so there's exactly one place to change them.

Unit System
-----------
Positions of the player, NPCs, enemies and lootables are stored in
**pixels**; the tile grid is addressed in **tiles**:

    tile = floor(pixel / TILE_SIZE)

Speeds are pixels per second, radii are tiles.  Anything that can be
tuned at runtime lives in ``data/tuning.toml`` (see core/tuning.py);
the values here are the fixed defaults.
"""

# ── Render / grid scale ─────────────────────────────────────────────
TILE_SIZE = 32                     # px per tile

VIEWPORT_WIDTH = 960               # px
VIEWPORT_HEIGHT = 640              # px

# ── Exploration defaults ────────────────────────────────────────────
PLAYER_SPEED = 128.0               # px/s per held axis
VISIBILITY_RADIUS = 8              # tiles (Euclidean)
FOG_DARKENING = 0.5                # colour multiplier for remembered tiles
MINIMAP_SCALE = 2                  # px per tile on the minimap

DEFAULT_MAP_ID = "capital_wasteland"

# ── Terrain tags ────────────────────────────────────────────────────
TERRAIN_GRASS    = "grass"
TERRAIN_DIRT     = "dirt"
TERRAIN_STONE    = "stone"
TERRAIN_SAND     = "sand"
TERRAIN_RUINS    = "ruins"
TERRAIN_CONCRETE = "concrete"
TERRAIN_ASH      = "ash"
TERRAIN_MUD      = "mud"
TERRAIN_WATER    = "water"
TERRAIN_ROAD     = "road"
TERRAIN_PATH     = "path"
TERRAIN_BUILDING = "building"

# Carving / clearing never overwrites these.
PROTECTED_TERRAIN = frozenset({TERRAIN_WATER, TERRAIN_BUILDING})

# Non-walkable by default (building entrances are the exception).
BLOCKING_TERRAIN = frozenset({TERRAIN_WATER, TERRAIN_BUILDING})

# Simple tile palette: tag → color
TILE_COLORS = {
    TERRAIN_GRASS:    (58, 74, 40),
    TERRAIN_DIRT:     (92, 76, 52),
    TERRAIN_STONE:    (88, 88, 92),
    TERRAIN_SAND:     (150, 132, 90),
    TERRAIN_RUINS:    (76, 64, 60),
    TERRAIN_CONCRETE: (110, 108, 100),
    TERRAIN_ASH:      (62, 60, 58),
    TERRAIN_MUD:      (64, 54, 38),
    TERRAIN_WATER:    (34, 62, 84),
    TERRAIN_ROAD:     (48, 48, 50),
    TERRAIN_PATH:     (112, 94, 66),
    TERRAIN_BUILDING: (120, 96, 80),
}
ENTRANCE_COLOR = (200, 160, 60)

# Entity markers
PLAYER_COLOR   = (255, 255, 100)
NPC_COLOR      = (120, 200, 255)
ENEMY_COLOR    = (230, 70, 60)
LOOTABLE_COLORS = {
    "container": (200, 170, 90),
    "corpse":    (170, 110, 110),
    "cache":     (120, 200, 120),
    "safe":      (150, 150, 170),
    "locker":    (110, 140, 150),
}

# ── Directions ──────────────────────────────────────────────────────
NORTH = "north"
SOUTH = "south"
EAST  = "east"
WEST  = "west"

OPPOSITE = {NORTH: SOUTH, SOUTH: NORTH, EAST: WEST, WEST: EAST}
