"""components.actors — NPCs and enemies placed on maps.

Both are loaded from the content catalog (``data/npcs.toml`` and
``data/enemies.toml``).  ``map_id`` of ``None`` means "belongs to the
default map".  Positions are pixels.
"""

from __future__ import annotations
from dataclasses import dataclass

from core.constants import TILE_SIZE


@dataclass
class NPC:
    id: str
    name: str
    kind: str = "neutral"          # trader / quest_giver / recruitable / neutral
    x: float = 0.0
    y: float = 0.0
    map_id: str | None = None
    dialogue_id: str = ""
    faction: str = "neutral"
    hostile: bool = False

    @property
    def tile(self) -> tuple[int, int]:
        return int(self.x // TILE_SIZE), int(self.y // TILE_SIZE)


@dataclass
class Enemy:
    id: str
    name: str
    kind: str = "raider"           # raider / mutant / robot / beast / boss
    x: float = 0.0
    y: float = 0.0
    map_id: str | None = None
    level: int = 1
    health: int = 10
    damage: int = 1

    @property
    def tile(self) -> tuple[int, int]:
        return int(self.x // TILE_SIZE), int(self.y // TILE_SIZE)
