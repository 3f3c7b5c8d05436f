"""components.tiles — One grid cell of a map.

Tiles are addressed in tile units; ``x`` is the column and ``y`` the row,
so a map's grid is indexed ``tiles[y][x]``.
"""

from __future__ import annotations
from dataclasses import dataclass

from core.constants import BLOCKING_TERRAIN


@dataclass
class BuildingInfo:
    """Metadata stamped onto every tile of a building footprint.

    ``building_id`` names the interior map behind the entrance
    (``<building_id>_interior``).  Only the entrance tile is walkable.
    """
    kind: str = "shack"
    name: str = ""
    building_id: str = ""
    is_entrance: bool = False


@dataclass
class Tile:
    x: int
    y: int
    type: str
    walkable: bool = True
    discovered: bool = False
    visible: bool = False
    building: BuildingInfo | None = None

    @property
    def is_entrance(self) -> bool:
        return self.building is not None and self.building.is_entrance


def make_tile(x: int, y: int, terrain: str) -> Tile:
    """Build a tile whose walkability follows its terrain tag."""
    return Tile(x=x, y=y, type=terrain, walkable=terrain not in BLOCKING_TERRAIN)
