"""logic/movement.py — Player movement with a single destination check.

Each held direction adds ``speed * dt`` to its own axis, so diagonals
travel at full speed on both axes.  The summed destination point is
then validated once: its tile must be on the map and walkable.  There
is no sub-stepping, so a fast step can pass over a thin wall as long
as it lands on a walkable tile.
"""

from __future__ import annotations
import math

from core.constants import TILE_SIZE
from components.maps import GameMap
from components.player import PlayerState

DIRECTION_DELTAS = {
    "up":    (0.0, -1.0),
    "down":  (0.0, 1.0),
    "left":  (-1.0, 0.0),
    "right": (1.0, 0.0),
}


def pixel_to_tile(px: float, py: float) -> tuple[int, int]:
    return int(px // TILE_SIZE), int(py // TILE_SIZE)


def can_stand(game_map: GameMap, px: float, py: float) -> bool:
    tx, ty = pixel_to_tile(px, py)
    tile = game_map.tile_at(tx, ty)
    return tile is not None and tile.walkable


def step_player(player: PlayerState, game_map: GameMap,
                directions: list[str], dt: float, speed: float) -> bool:
    """Apply one frame of movement.  Returns True if the player moved.

    Rejection leaves the position untouched and clears ``is_moving``.
    """
    if not directions:
        player.is_moving = False
        return False

    nx, ny = player.x, player.y
    for d in directions:
        dx, dy = DIRECTION_DELTAS[d]
        nx += dx * speed * dt
        ny += dy * speed * dt
        player.facing = d

    if not can_stand(game_map, nx, ny):
        player.is_moving = False
        return False

    dist = math.hypot(nx - player.x, ny - player.y)
    player.x, player.y = nx, ny
    player.is_moving = dist > 0
    player.stats.distance_traveled += dist
    return player.is_moving
