"""components.maps — A bounded tile grid plus what lives on it."""

from __future__ import annotations
from dataclasses import dataclass, field

from core.constants import TILE_SIZE
from components.tiles import Tile
from components.items import Lootable
from components.actors import NPC, Enemy


@dataclass
class Connection:
    """Directional link from one map edge to another map.

    ``from_position`` / ``to_position`` are authored pixel positions.
    The engine does not place the player with them; arrival uses a
    fixed inset from the opposite edge instead.
    """
    direction: str
    target_map_id: str
    from_position: tuple[float, float] = (0.0, 0.0)
    to_position: tuple[float, float] = (0.0, 0.0)


@dataclass
class GameMap:
    id: str
    width: int
    height: int
    tiles: list[list[Tile]]
    name: str = ""
    bg_music: str = ""
    npcs: list[NPC] = field(default_factory=list)
    enemies: list[Enemy] = field(default_factory=list)
    lootables: list[Lootable] = field(default_factory=list)
    connections: list[Connection] = field(default_factory=list)
    # Interiors only: the outdoor map and the tile the player leaves onto.
    parent_map_id: str = ""
    exit_tile: tuple[int, int] | None = None

    @property
    def is_interior(self) -> bool:
        return bool(self.parent_map_id)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, x: int, y: int) -> Tile | None:
        if not self.in_bounds(x, y):
            return None
        return self.tiles[y][x]

    def connection(self, direction: str) -> Connection | None:
        """First authored connection leaving through *direction*."""
        for conn in self.connections:
            if conn.direction == direction:
                return conn
        return None

    def npcs_at(self, x: int, y: int) -> list[NPC]:
        return [n for n in self.npcs if n.tile == (x, y)]

    def lootables_at(self, x: int, y: int) -> list[Lootable]:
        return [lt for lt in self.lootables if lt.tile == (x, y)]

    @property
    def pixel_size(self) -> tuple[int, int]:
        return self.width * TILE_SIZE, self.height * TILE_SIZE
