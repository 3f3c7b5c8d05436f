"""logic/worldgen.py — Build one map's tile grid from a ZoneBlueprint.

The pipeline runs in a fixed order for every map:

    1. fill the grid with the blueprint's base terrain
    2. per-tile Bernoulli overrides (secondary, else tertiary terrain)
    3. circular water features
    4. straight full-span roads at fixed rows / columns
    5. buildings: yard clearing → footprint + entrance → L path to the hub
    6. decorative ruin clusters
    7. authored connections
    8. NPCs / enemies from the catalog whose map_id matches
    9. lootables at the blueprint's density

Carving (roads, yards, paths, ruins) never overwrites water or building
tiles.  Randomness comes only from the ``rng`` argument, so a seeded
``random.Random`` reproduces a map exactly.

Authored blueprints live in ``data/generate_zones.py``.
"""

from __future__ import annotations
import random
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from core.constants import (
    TERRAIN_BUILDING, TERRAIN_DIRT, TERRAIN_PATH, TERRAIN_ROAD,
    TERRAIN_RUINS, TERRAIN_WATER, PROTECTED_TERRAIN,
)
from components.tiles import Tile, BuildingInfo, make_tile
from components.maps import GameMap, Connection
from logic.loot_tables import generate_lootables

if TYPE_CHECKING:
    from core.data import Catalog


# ═══════════════════════════════════════════════════════════════════
#  Blueprint types
# ═══════════════════════════════════════════════════════════════════

@dataclass
class WaterSpec:
    cx: int
    cy: int
    radius: float


@dataclass
class BuildingSpec:
    """A rectangular building centred on ``(cx, cy)``.

    ``yard_radius`` of None clears ``max(w, h) // 2 + 2`` tiles around
    the centre before the footprint goes down.
    """
    cx: int
    cy: int
    w: int = 3
    h: int = 3
    kind: str = "shack"
    name: str = ""
    building_id: str = ""
    yard_radius: float | None = None
    yard_terrain: str = TERRAIN_DIRT


@dataclass
class RuinCluster:
    cx: int
    cy: int
    radius: float = 2.0
    terrain: str = TERRAIN_RUINS


@dataclass
class ZoneBlueprint:
    id: str
    name: str
    width: int
    height: int
    base: str
    secondary: str | None = None
    secondary_chance: float = 0.15
    tertiary: str | None = None
    tertiary_chance: float = 0.05
    bg_music: str = ""
    water: list[WaterSpec] = field(default_factory=list)
    road_rows: list[int] = field(default_factory=list)
    road_cols: list[int] = field(default_factory=list)
    buildings: list[BuildingSpec] = field(default_factory=list)
    hub: tuple[int, int] | None = None        # None → map centre
    ruins: list[RuinCluster] = field(default_factory=list)
    connections: list[Connection] = field(default_factory=list)
    loot_density: float = 0.005

    @property
    def hub_tile(self) -> tuple[int, int]:
        if self.hub is not None:
            return self.hub
        return self.width // 2, self.height // 2


# ═══════════════════════════════════════════════════════════════════
#  Grid operations
# ═══════════════════════════════════════════════════════════════════

def fill_base(width: int, height: int, terrain: str) -> list[list[Tile]]:
    return [[make_tile(x, y, terrain) for x in range(width)] for y in range(height)]


def _in_grid(tiles: list[list[Tile]], x: int, y: int) -> bool:
    return 0 <= y < len(tiles) and 0 <= x < len(tiles[0])


def set_terrain(tiles: list[list[Tile]], x: int, y: int, terrain: str) -> bool:
    """Overwrite one tile unless it is water or building.

    Returns True if the tile changed.
    """
    if not _in_grid(tiles, x, y):
        return False
    old = tiles[y][x]
    if old.type in PROTECTED_TERRAIN:
        return False
    tiles[y][x] = make_tile(x, y, terrain)
    tiles[y][x].discovered = old.discovered
    return True


def scatter(tiles: list[list[Tile]], bp: ZoneBlueprint, rng: random.Random):
    """Independent per-tile overrides; no spatial noise."""
    for row in tiles:
        for tile in row:
            if bp.secondary and rng.random() < bp.secondary_chance:
                row[tile.x] = make_tile(tile.x, tile.y, bp.secondary)
            elif bp.tertiary and rng.random() < bp.tertiary_chance:
                row[tile.x] = make_tile(tile.x, tile.y, bp.tertiary)


def _disc(cx: int, cy: int, radius: float):
    """Tile coords within Euclidean *radius* of (cx, cy)."""
    r = int(radius)
    r_sq = radius * radius
    for y in range(cy - r, cy + r + 1):
        for x in range(cx - r, cx + r + 1):
            if (x - cx) ** 2 + (y - cy) ** 2 <= r_sq:
                yield x, y


def stamp_water(tiles: list[list[Tile]], spec: WaterSpec):
    for x, y in _disc(spec.cx, spec.cy, spec.radius):
        if _in_grid(tiles, x, y):
            tiles[y][x] = make_tile(x, y, TERRAIN_WATER)


def carve_road(tiles: list[list[Tile]], row: int | None = None,
               col: int | None = None):
    """Full-span road along *row* (horizontal) or *col* (vertical)."""
    height = len(tiles)
    width = len(tiles[0]) if height else 0
    if row is not None and 0 <= row < height:
        for x in range(width):
            set_terrain(tiles, x, row, TERRAIN_ROAD)
    if col is not None and 0 <= col < width:
        for y in range(height):
            set_terrain(tiles, col, y, TERRAIN_ROAD)


def clear_area(tiles: list[list[Tile]], cx: int, cy: int, radius: float,
               terrain: str):
    for x, y in _disc(cx, cy, radius):
        set_terrain(tiles, x, y, terrain)


def footprint(spec: BuildingSpec) -> tuple[int, int, int, int]:
    """(x0, y0, x1, y1) inclusive corners of the building rectangle."""
    x0 = spec.cx - spec.w // 2
    y0 = spec.cy - spec.h // 2
    return x0, y0, x0 + spec.w - 1, y0 + spec.h - 1


def entrance_of(spec: BuildingSpec) -> tuple[int, int]:
    """Bottom-centre tile of the footprint."""
    x0, y0, _, y1 = footprint(spec)
    return x0 + spec.w // 2, y1


def stamp_building(tiles: list[list[Tile]], spec: BuildingSpec,
                   building_id: str) -> tuple[int, int]:
    """Stamp the footprint; only the entrance tile stays walkable."""
    x0, y0, x1, y1 = footprint(spec)
    ex, ey = entrance_of(spec)
    for y in range(y0, y1 + 1):
        for x in range(x0, x1 + 1):
            if not _in_grid(tiles, x, y):
                continue
            is_entrance = (x, y) == (ex, ey)
            tiles[y][x] = Tile(
                x=x, y=y, type=TERRAIN_BUILDING, walkable=is_entrance,
                building=BuildingInfo(kind=spec.kind, name=spec.name,
                                      building_id=building_id,
                                      is_entrance=is_entrance),
            )
    return ex, ey


def carve_path(tiles: list[list[Tile]], start: tuple[int, int],
               end: tuple[int, int], terrain: str = TERRAIN_PATH):
    """L-shaped path: along start's row to end's column, then to end's row."""
    sx, sy = start
    ex, ey = end
    step = 1 if ex >= sx else -1
    for x in range(sx, ex + step, step):
        set_terrain(tiles, x, sy, terrain)
    step = 1 if ey >= sy else -1
    for y in range(sy, ey + step, step):
        set_terrain(tiles, ex, y, terrain)


# ═══════════════════════════════════════════════════════════════════
#  Pipeline
# ═══════════════════════════════════════════════════════════════════

def build_tiles(bp: ZoneBlueprint, rng: random.Random) -> list[list[Tile]]:
    """Steps 1–6: the terrain grid only."""
    tiles = fill_base(bp.width, bp.height, bp.base)
    scatter(tiles, bp, rng)
    for water in bp.water:
        stamp_water(tiles, water)
    for row in bp.road_rows:
        carve_road(tiles, row=row)
    for col in bp.road_cols:
        carve_road(tiles, col=col)

    hub = bp.hub_tile
    for i, spec in enumerate(bp.buildings):
        radius = spec.yard_radius
        if radius is None:
            radius = max(spec.w, spec.h) // 2 + 2
        clear_area(tiles, spec.cx, spec.cy, radius, spec.yard_terrain)
        stamp_building(tiles, spec, spec.building_id or f"{bp.id}_bldg_{i}")
        carve_path(tiles, (spec.cx, spec.cy), hub)

    for ruin in bp.ruins:
        clear_area(tiles, ruin.cx, ruin.cy, ruin.radius, ruin.terrain)
    return tiles


def generate_map(bp: ZoneBlueprint, catalog: Catalog,
                 rng: random.Random | None = None) -> GameMap:
    """Materialise *bp* into a fresh GameMap."""
    rng = rng or random.Random()
    tiles = build_tiles(bp, rng)
    lootables = generate_lootables(bp.width, bp.height, bp.loot_density,
                                   catalog.items, rng, prefix=bp.id)
    game_map = GameMap(
        id=bp.id,
        width=bp.width,
        height=bp.height,
        tiles=tiles,
        name=bp.name,
        bg_music=bp.bg_music,
        npcs=[replace(n) for n in catalog.npcs_for(bp.id)],
        enemies=[replace(e) for e in catalog.enemies_for(bp.id)],
        lootables=lootables,
        connections=[replace(c) for c in bp.connections],
    )
    print(f"[WORLDGEN] {bp.id}: {bp.width}x{bp.height}, "
          f"{len(bp.buildings)} buildings, {len(lootables)} lootables, "
          f"{len(game_map.npcs)} npcs, {len(game_map.enemies)} enemies")
    return game_map
