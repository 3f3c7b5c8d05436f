"""components.player — The player's runtime state.

Position is continuous pixels; the occupied map is referenced by id so
the state can be saved and restored without embedding a whole map.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from core.constants import TILE_SIZE


@dataclass
class Statistics:
    distance_traveled: float = 0.0     # px
    items_found: int = 0
    tiles_discovered: int = 0
    maps_visited: list[str] = field(default_factory=list)


@dataclass
class PlayerState:
    x: float = 0.0                     # px
    y: float = 0.0                     # px
    map_id: str = ""
    facing: str = "down"               # up / down / left / right
    is_moving: bool = False
    name: str = "Wanderer"
    level: int = 1
    health: int = 100
    max_health: int = 100
    energy: int = 50
    max_energy: int = 50
    gold: int = 0
    inventory: dict[str, int] = field(default_factory=dict)
    stats: Statistics = field(default_factory=Statistics)

    @property
    def tile(self) -> tuple[int, int]:
        return int(self.x // TILE_SIZE), int(self.y // TILE_SIZE)

    def place_on_tile(self, tx: int, ty: int) -> None:
        self.x = float(tx * TILE_SIZE)
        self.y = float(ty * TILE_SIZE)

    def add_item(self, item_id: str, quantity: int = 1) -> None:
        self.inventory[item_id] = self.inventory.get(item_id, 0) + quantity
