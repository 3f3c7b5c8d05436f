"""scenes/zone_manager.py — Map-edge detection and map transitions.

Stand-alone functions that operate on a WorldScene instance.  The
player leaves a map by standing on an edge tile that has an authored
Connection in that direction; edges are checked west, east, north,
south, so a corner tile always resolves west/east first.

Arrival ignores the connection's authored ``to_position``: the player
lands one tile in from the edge opposite to the one crossed and keeps
the other coordinate as-is, even if the target map is smaller.

Buildings are entered and left explicitly (interact on or next to an
entrance tile, or Esc inside).  Entering lands on the floor tile just
inside the room's entrance; leaving lands on the outdoor entrance tile.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from core.constants import TILE_SIZE, NORTH, SOUTH, EAST, WEST
from core.events import StateChanged
from components.maps import GameMap, Connection
from logic.interiors import interior_id, arrival_tile

if TYPE_CHECKING:
    from scenes.world_scene import WorldScene

EDGE_PRIORITY = (WEST, EAST, NORTH, SOUTH)


def edges_touched(game_map: GameMap, tx: int, ty: int) -> list[str]:
    """Edges tile (tx, ty) lies on, in priority order."""
    touched = []
    if tx <= 0:
        touched.append(WEST)
    if tx >= game_map.width - 1:
        touched.append(EAST)
    if ty <= 0:
        touched.append(NORTH)
    if ty >= game_map.height - 1:
        touched.append(SOUTH)
    return touched


def find_exit(game_map: GameMap, tx: int, ty: int) -> Connection | None:
    """First touched edge that has a connection, or None."""
    for direction in edges_touched(game_map, tx, ty):
        conn = game_map.connection(direction)
        if conn is not None:
            return conn
    return None


def arrival_position(direction: str, target: GameMap,
                     x: float, y: float) -> tuple[float, float]:
    """Where the player lands after leaving through *direction*."""
    if direction == WEST:
        return float((target.width - 2) * TILE_SIZE), y
    if direction == EAST:
        return float(TILE_SIZE), y
    if direction == NORTH:
        return x, float((target.height - 2) * TILE_SIZE)
    return x, float(TILE_SIZE)


def check_map_transition(scene: WorldScene) -> bool:
    """Cross to the connected map if the player is on an exit edge."""
    state = scene.state
    player = scene.player
    tx, ty = player.tile
    conn = find_exit(state.current_map, tx, ty)
    if conn is None:
        return False
    return change_map(scene, conn.target_map_id, direction=conn.direction)


def change_map(scene: WorldScene, map_id: str, *, direction: str | None = None,
               x: float | None = None, y: float | None = None) -> bool:
    """Make *map_id* current.

    With *direction*, the arrival inset is used; otherwise *x*/*y* (or
    the player's current position).  An unknown map id is logged and
    nothing changes.
    """
    state = scene.state
    player = scene.player
    old_id = state.current_map.id

    if not scene.registry.has(map_id):
        print(f"[ZONE] {old_id}: unknown target map {map_id!r}, staying put")
        scene.dev_log.record("zone", f"transition aborted: unknown map {map_id!r}",
                             t=state.clock.time,
                             details={"from": old_id, "direction": direction})
        return False
    try:
        target = scene.registry.get(map_id)
    except KeyError:
        print(f"[ZONE] {old_id}: map {map_id!r} vanished from the registry")
        return False

    if direction is not None:
        nx, ny = arrival_position(direction, target, player.x, player.y)
    else:
        nx = player.x if x is None else x
        ny = player.y if y is None else y

    state.current_map = target
    player.x, player.y = nx, ny
    player.map_id = target.id
    state.visibility.reset(target)
    scene.note_visit(target.id)

    print(f"[ZONE] {old_id} → {target.id} ({direction or 'direct'}) "
          f"at ({nx:.0f}, {ny:.0f})")
    scene.dev_log.record("zone", f"{old_id} → {target.id}", t=state.clock.time,
                         details={"x": nx, "y": ny, "direction": direction})
    scene.bus.emit(StateChanged(reason="map", mode=state.mode.value,
                                previous_mode=state.mode.value,
                                map_id=target.id, previous_map_id=old_id))
    return True


def enter_building(scene: WorldScene, building_id: str) -> bool:
    """Step through an outdoor entrance into the building's interior."""
    map_id = interior_id(building_id)
    if not scene.registry.has(map_id):
        return change_map(scene, map_id)          # logs the abort
    tx, ty = arrival_tile(scene.registry.get(map_id))
    return change_map(scene, map_id, x=float(tx * TILE_SIZE),
                      y=float(ty * TILE_SIZE))


def leave_building(scene: WorldScene) -> bool:
    """Back out to the parent map, onto the entrance tile."""
    room = scene.state.current_map
    if not room.is_interior:
        return False
    x = y = None
    if room.exit_tile is not None:
        x, y = (float(v * TILE_SIZE) for v in room.exit_tile)
    return change_map(scene, room.parent_map_id, x=x, y=y)
