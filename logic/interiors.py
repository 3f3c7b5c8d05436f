"""logic/interiors.py — Building interiors.

Every building stamped on an outdoor map has one walkable entrance
tile.  Behind it is a separate small map, ``<building_id>_interior``,
built on demand from the template for the building's kind
(``data/interiors.toml``; unknown kinds use ``[default]``):

    library = load_interiors()
    for link in find_entrances(game_map):           # one per building
        room = generate_interior(library.template_for(link.kind), link,
                                 catalog.items, rng)

A room is a floor rectangle ringed by wall.  Its own entrance sits on
the ring and is the way back out: ``parent_map_id`` and ``exit_tile``
on the generated GameMap say where to.
"""

from __future__ import annotations
try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from core.constants import TILE_SIZE, TERRAIN_BUILDING, TERRAIN_STONE
from components.tiles import Tile, BuildingInfo, make_tile
from components.items import ItemStack, Lootable
from components.actors import NPC
from components.maps import GameMap
from logic.worldgen import fill_base

if TYPE_CHECKING:
    from components.item_registry import ItemRegistry

INTERIORS_PATH = Path(__file__).resolve().parent.parent / "data" / "interiors.toml"
DEFAULT_KIND = "default"


def interior_id(building_id: str) -> str:
    return f"{building_id}_interior"


def _centre(tx: int, ty: int) -> tuple[float, float]:
    return float(tx * TILE_SIZE + TILE_SIZE / 2), float(ty * TILE_SIZE + TILE_SIZE / 2)


# ═══════════════════════════════════════════════════════════════════
#  Templates
# ═══════════════════════════════════════════════════════════════════

@dataclass
class NPCSlot:
    id: str
    name: str
    tile: tuple[int, int]
    kind: str = "neutral"
    dialogue_id: str = ""
    faction: str = "neutral"


@dataclass
class LootSlot:
    tile: tuple[int, int]
    items: list[str] = field(default_factory=list)
    kind: str = "container"


@dataclass
class InteriorTemplate:
    kind: str
    name: str
    width: int
    height: int
    entrance: tuple[int, int]
    floor: str = TERRAIN_STONE
    bg_music: str = ""
    furniture: list[tuple[int, int]] = field(default_factory=list)
    npcs: list[NPCSlot] = field(default_factory=list)
    lootables: list[LootSlot] = field(default_factory=list)

    def _inside(self, x: int, y: int) -> bool:
        return 0 < x < self.width - 1 and 0 < y < self.height - 1

    def problems(self) -> list[str]:
        """Layout errors: entrance off the wall ring, things in the walls."""
        if self.width < 3 or self.height < 3:
            return [f"{self.kind}: room {self.width}x{self.height} is too small"]
        out = []
        ex, ey = self.entrance
        on_x_edge = ex in (0, self.width - 1)
        on_y_edge = ey in (0, self.height - 1)
        in_range = 0 <= ex < self.width and 0 <= ey < self.height
        # Exactly one edge: corners have no floor tile next to them.
        if not in_range or on_x_edge == on_y_edge:
            out.append(f"{self.kind}: entrance {self.entrance} is not on a wall")
        placed = ([("furniture", p) for p in self.furniture]
                  + [(f"npc {n.id}", n.tile) for n in self.npcs]
                  + [("lootable", lt.tile) for lt in self.lootables])
        for what, (x, y) in placed:
            if not self._inside(x, y):
                out.append(f"{self.kind}: {what} at ({x}, {y}) is outside the floor")
        return out


FALLBACK_TEMPLATE = InteriorTemplate(kind=DEFAULT_KIND, name="Abandoned Building",
                                     width=8, height=6, entrance=(4, 5))


@dataclass
class InteriorLibrary:
    templates: dict[str, InteriorTemplate] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)

    def template_for(self, kind: str) -> InteriorTemplate:
        """Template for a building *kind*, else [default], else a bare room."""
        kind = self.aliases.get(kind, kind)
        tpl = self.templates.get(kind) or self.templates.get(DEFAULT_KIND)
        return tpl if tpl is not None else FALLBACK_TEMPLATE

    def __contains__(self, kind: str) -> bool:
        return self.aliases.get(kind, kind) in self.templates

    def __len__(self) -> int:
        return len(self.templates)


def _parse_template(kind: str, section: dict) -> InteriorTemplate:
    return InteriorTemplate(
        kind=kind,
        name=section.get("name", kind),
        width=int(section["width"]),
        height=int(section["height"]),
        entrance=tuple(section["entrance"]),
        floor=section.get("floor", TERRAIN_STONE),
        bg_music=section.get("bg_music", ""),
        furniture=[tuple(p) for p in section.get("furniture", [])],
        npcs=[NPCSlot(id=n["id"], name=n.get("name", n["id"]), tile=tuple(n["tile"]),
                      kind=n.get("kind", "neutral"),
                      dialogue_id=n.get("dialogue_id", n["id"]),
                      faction=n.get("faction", "neutral"))
              for n in section.get("npcs", [])],
        lootables=[LootSlot(tile=tuple(lt["tile"]), items=list(lt.get("items", [])),
                            kind=lt.get("kind", "container"))
                   for lt in section.get("lootables", [])],
    )


def load_interiors(path: str | Path | None = None) -> InteriorLibrary:
    """Load interiors.toml.  Templates with layout errors are skipped."""
    path = Path(path) if path is not None else INTERIORS_PATH
    library = InteriorLibrary()
    if not path.exists():
        print(f"[INTERIOR] {path} not found, every building gets a bare room")
        return library
    with open(path, "rb") as f:
        raw = tomllib.load(f)
    library.aliases = dict(raw.pop("aliases", {}))
    for kind, section in raw.items():
        if not isinstance(section, dict):
            continue
        tpl = _parse_template(kind, section)
        problems = tpl.problems()
        if problems:
            for p in problems:
                print(f"[INTERIOR] WARNING {p}")
            continue
        library.templates[kind] = tpl
    print(f"[INTERIOR] Loaded {len(library)} templates from {path.name}")
    return library


# ═══════════════════════════════════════════════════════════════════
#  Entrances → rooms
# ═══════════════════════════════════════════════════════════════════

@dataclass
class InteriorLink:
    """One outdoor entrance and the room behind it."""
    building_id: str
    kind: str
    name: str
    parent_map_id: str
    exit_tile: tuple[int, int]

    @property
    def map_id(self) -> str:
        return interior_id(self.building_id)


def find_entrances(game_map: GameMap) -> list[InteriorLink]:
    links = []
    for row in game_map.tiles:
        for tile in row:
            b = tile.building
            if b is not None and b.is_entrance and b.building_id:
                links.append(InteriorLink(b.building_id, b.kind, b.name,
                                          game_map.id, (tile.x, tile.y)))
    return links


def _wall(tiles: list[list[Tile]], x: int, y: int):
    tiles[y][x] = make_tile(x, y, TERRAIN_BUILDING)


def generate_interior(template: InteriorTemplate, link: InteriorLink,
                      items: ItemRegistry,
                      rng: random.Random | None = None) -> GameMap:
    """Build the room behind *link*.  Item ids missing from *items* are skipped."""
    rng = rng or random.Random()
    w, h = template.width, template.height
    tiles = fill_base(w, h, template.floor)
    for x in range(w):
        _wall(tiles, x, 0)
        _wall(tiles, x, h - 1)
    for y in range(h):
        _wall(tiles, 0, y)
        _wall(tiles, w - 1, y)
    for x, y in template.furniture:
        _wall(tiles, x, y)

    ex, ey = template.entrance
    tiles[ey][ex] = Tile(x=ex, y=ey, type=template.floor, walkable=True,
                         building=BuildingInfo(kind=link.kind, name=link.name,
                                               building_id=link.building_id,
                                               is_entrance=True))

    map_id = link.map_id
    npcs = []
    for slot in template.npcs:
        x, y = _centre(*slot.tile)
        npcs.append(NPC(id=f"{link.building_id}_{slot.id}", name=slot.name,
                        kind=slot.kind, x=x, y=y, map_id=map_id,
                        dialogue_id=slot.dialogue_id or slot.id,
                        faction=slot.faction))

    lootables = []
    for i, slot in enumerate(template.lootables):
        stacks = []
        for item_id in slot.items:
            item = items.get_item(item_id)
            if item is None:
                print(f"[INTERIOR] {template.kind}: unknown item {item_id!r} skipped")
                continue
            stacks.append(ItemStack(item, rng.randint(1, 3) if item.stackable else 1))
        x, y = _centre(*slot.tile)
        lootables.append(Lootable(id=f"{link.building_id}_loot_{i}", x=x, y=y,
                                  items=stacks, kind=slot.kind))

    print(f"[WORLDGEN] {map_id}: {template.kind} room {w}x{h}, "
          f"{len(npcs)} npcs, {len(lootables)} lootables")
    return GameMap(
        id=map_id, width=w, height=h, tiles=tiles,
        name=link.name or template.name,
        bg_music=template.bg_music,
        npcs=npcs,
        lootables=lootables,
        parent_map_id=link.parent_map_id,
        exit_tile=link.exit_tile,
    )


def arrival_tile(game_map: GameMap) -> tuple[int, int]:
    """The floor tile just inside a room's entrance."""
    for row in game_map.tiles:
        for tile in row:
            if not tile.is_entrance:
                continue
            x, y = tile.x, tile.y
            if y == game_map.height - 1:
                return x, y - 1
            if y == 0:
                return x, 1
            if x == 0:
                return 1, y
            return x - 1, y
    return game_map.width // 2, game_map.height // 2
