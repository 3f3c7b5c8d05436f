"""logic/interaction.py — What is the player standing next to?

Scans the 3×3 neighbourhood of the player's tile, row by row.  NPCs
win over lootables, and lootables over building entrances: the whole
neighbourhood is checked for one kind before the next is considered.
"""

from __future__ import annotations
from dataclasses import dataclass

from components.actors import NPC
from components.items import Lootable
from components.maps import GameMap
from components.tiles import Tile

# Row-major: (-1,-1) (0,-1) (1,-1) (-1,0) ... (1,1)
NEIGHBOUR_OFFSETS = tuple((dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1))


@dataclass
class InteractionTarget:
    kind: str                      # "npc", "lootable" or "entrance"
    npc: NPC | None = None
    lootable: Lootable | None = None
    tile: Tile | None = None


def find_npc(game_map: GameMap, tx: int, ty: int) -> NPC | None:
    for dx, dy in NEIGHBOUR_OFFSETS:
        found = game_map.npcs_at(tx + dx, ty + dy)
        if found:
            return found[0]
    return None


def find_lootable(game_map: GameMap, tx: int, ty: int) -> Lootable | None:
    for dx, dy in NEIGHBOUR_OFFSETS:
        for lootable in game_map.lootables_at(tx + dx, ty + dy):
            if not lootable.looted:
                return lootable
    return None


def find_entrance(game_map: GameMap, tx: int, ty: int) -> Tile | None:
    """Entrance tile under or next to the player."""
    for dx, dy in NEIGHBOUR_OFFSETS:
        tile = game_map.tile_at(tx + dx, ty + dy)
        if tile is not None and tile.is_entrance:
            return tile
    return None


def find_target(game_map: GameMap, tx: int, ty: int) -> InteractionTarget | None:
    npc = find_npc(game_map, tx, ty)
    if npc is not None:
        return InteractionTarget("npc", npc=npc)
    lootable = find_lootable(game_map, tx, ty)
    if lootable is not None:
        return InteractionTarget("lootable", lootable=lootable)
    tile = find_entrance(game_map, tx, ty)
    if tile is not None:
        return InteractionTarget("entrance", tile=tile)
    return None
