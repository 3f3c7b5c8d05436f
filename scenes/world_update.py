"""scenes/world_update.py — The per-frame simulation step.

Functions that previously lived as methods on WorldScene.  Each takes
the scene (or just the pieces it needs) so the step can be driven
headlessly from tests.

Order inside one exploration frame:

    movement → camera → visibility → edge transition
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from core import tuning
from core.constants import (
    TILE_SIZE, PLAYER_SPEED, VISIBILITY_RADIUS,
    VIEWPORT_WIDTH, VIEWPORT_HEIGHT,
)
from components.maps import GameMap
from components.player import PlayerState
from components.resources import Camera
from logic.movement import step_player
from scenes.zone_manager import check_map_transition

if TYPE_CHECKING:
    from scenes.world_scene import WorldScene


def viewport_size() -> tuple[int, int]:
    return (int(tuning.get("engine", "viewport_width", VIEWPORT_WIDTH)),
            int(tuning.get("engine", "viewport_height", VIEWPORT_HEIGHT)))


# ── Camera ───────────────────────────────────────────────────────────

def clamp_axis(value: float, limit: float) -> float:
    """Clamp to ``[0, limit]``; a negative limit (map smaller than the
    viewport) pins the axis at 0."""
    return max(0.0, min(value, limit))


def update_camera(camera: Camera, player: PlayerState, game_map: GameMap,
                  viewport: tuple[int, int]):
    vw, vh = viewport
    map_w, map_h = game_map.pixel_size
    camera.x = clamp_axis(player.x - vw / 2, map_w - vw)
    camera.y = clamp_axis(player.y - vh / 2, map_h - vh)


def screen_to_world(camera: Camera, sx: float, sy: float) -> tuple[float, float]:
    return sx + camera.x, sy + camera.y


# ── Visibility ───────────────────────────────────────────────────────

def update_visibility(scene: WorldScene) -> int:
    state = scene.state
    radius = int(tuning.get("engine", "visibility_radius", VISIBILITY_RADIUS))
    tx, ty = scene.player.tile
    newly = state.visibility.reveal(state.current_map, tx, ty, radius)
    scene.player.stats.tiles_discovered += newly
    return newly


# ── Full step ────────────────────────────────────────────────────────

def simulation_step(scene: WorldScene, dt: float):
    """One exploration frame.  Callers gate this on the mode."""
    state = scene.state
    state.clock.time += dt
    speed = float(tuning.get("engine", "player_speed", PLAYER_SPEED))
    step_player(scene.player, state.current_map, scene.input.directions(),
                dt, speed)
    update_camera(state.camera, scene.player, state.current_map,
                  scene.viewport)
    update_visibility(scene)
    check_map_transition(scene)


def tile_under_pointer(scene: WorldScene, sx: float, sy: float) -> tuple[int, int]:
    wx, wy = screen_to_world(scene.state.camera, sx, sy)
    return int(wx // TILE_SIZE), int(wy // TILE_SIZE)
