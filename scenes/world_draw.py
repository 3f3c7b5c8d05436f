"""scenes/world_draw.py — Rendering helpers for the world scene.

All pure-draw functions live here so that WorldScene.draw() stays thin.
Every function receives the data it needs as parameters, no implicit
coupling to the scene object beyond what is explicitly passed (the
debug overlay is the one exception; it reads the scene directly).
"""

from __future__ import annotations
from typing import TYPE_CHECKING

import pygame
from core import tuning
from core.app import App
from core.constants import (
    TILE_SIZE, TILE_COLORS, ENTRANCE_COLOR, FOG_DARKENING, MINIMAP_SCALE,
    PLAYER_COLOR, NPC_COLOR, ENEMY_COLOR, LOOTABLE_COLORS,
)
from components import GameMap, PlayerState, Camera, ItemRegistry
from logic.inventory_ops import inventory_lines, inventory_value
from logic.modes import Mode
from logic.visibility import VisibilityTracker

if TYPE_CHECKING:
    from core.zone import MapRegistry
    from logic.dialogue import DialogueSession
    from scenes.world_scene import WorldScene

UNKNOWN_COLOR = (255, 0, 255)


# ── Helpers ─────────────────────────────────────────────────────────

def visible_tile_range(camera: Camera, viewport: tuple[int, int],
                       game_map: GameMap) -> tuple[int, int, int, int]:
    """``(start_col, start_row, end_col, end_row)`` covering the viewport.

    One tile of overscan on each side; clipped to the map.
    """
    vw, vh = viewport
    start_col = max(0, int(camera.x // TILE_SIZE) - 1)
    start_row = max(0, int(camera.y // TILE_SIZE) - 1)
    end_col = min(game_map.width, int((camera.x + vw) // TILE_SIZE) + 2)
    end_row = min(game_map.height, int((camera.y + vh) // TILE_SIZE) + 2)
    return start_col, start_row, end_col, end_row


def darken(color: tuple, factor: float) -> tuple[int, int, int]:
    r, g, b = color[:3]
    return int(r * factor), int(g * factor), int(b * factor)


def tile_color(tile) -> tuple[int, int, int]:
    if tile.is_entrance:
        return ENTRANCE_COLOR
    return TILE_COLORS.get(tile.type, UNKNOWN_COLOR)


# ── Tiles ───────────────────────────────────────────────────────────

def draw_tiles(surface: pygame.Surface, game_map: GameMap, camera: Camera):
    """Discovered tiles only; remembered-but-not-visible ones are dimmed."""
    fog = float(tuning.get("engine", "fog_darkening", FOG_DARKENING))
    start_col, start_row, end_col, end_row = visible_tile_range(
        camera, surface.get_size(), game_map)
    ox = -int(camera.x)
    oy = -int(camera.y)
    for row in range(start_row, end_row):
        tiles = game_map.tiles[row]
        for col in range(start_col, end_col):
            tile = tiles[col]
            if not tile.discovered:
                continue
            color = tile_color(tile)
            if not tile.visible:
                color = darken(color, fog)
            rect = pygame.Rect(ox + col * TILE_SIZE, oy + row * TILE_SIZE,
                               TILE_SIZE, TILE_SIZE)
            pygame.draw.rect(surface, color, rect)


# ── Entities ────────────────────────────────────────────────────────

def draw_entities(surface: pygame.Surface, game_map: GameMap,
                  visibility: VisibilityTracker, camera: Camera):
    """NPCs, enemies and unlooted containers standing on visible tiles."""
    ox = -int(camera.x)
    oy = -int(camera.y)
    half = TILE_SIZE // 2

    for lootable in game_map.lootables:
        if lootable.looted or not visibility.is_visible(*lootable.tile):
            continue
        color = LOOTABLE_COLORS.get(lootable.kind, (200, 200, 200))
        tx, ty = lootable.tile
        rect = pygame.Rect(ox + tx * TILE_SIZE + 8, oy + ty * TILE_SIZE + 8,
                           TILE_SIZE - 16, TILE_SIZE - 16)
        pygame.draw.rect(surface, color, rect)

    for npc in game_map.npcs:
        tx, ty = npc.tile
        if not visibility.is_visible(tx, ty):
            continue
        center = (ox + tx * TILE_SIZE + half, oy + ty * TILE_SIZE + half)
        pygame.draw.circle(surface, NPC_COLOR, center, half - 6)

    for enemy in game_map.enemies:
        tx, ty = enemy.tile
        if not visibility.is_visible(tx, ty):
            continue
        cx = ox + tx * TILE_SIZE + half
        cy = oy + ty * TILE_SIZE + half
        r = half - 6
        pygame.draw.polygon(surface, ENEMY_COLOR,
                            [(cx, cy - r), (cx + r, cy + r), (cx - r, cy + r)])


def draw_player(surface: pygame.Surface, player: PlayerState, camera: Camera):
    sx = int(player.x - camera.x)
    sy = int(player.y - camera.y)
    rect = pygame.Rect(sx + 4, sy + 4, TILE_SIZE - 8, TILE_SIZE - 8)
    pygame.draw.rect(surface, PLAYER_COLOR, rect)

    # Facing notch
    cx, cy = rect.center
    dx, dy = {"up": (0, -1), "down": (0, 1),
              "left": (-1, 0), "right": (1, 0)}.get(player.facing, (0, 1))
    pygame.draw.line(surface, (40, 40, 40), (cx, cy),
                     (cx + dx * (TILE_SIZE // 2 - 4), cy + dy * (TILE_SIZE // 2 - 4)), 3)


# ── Minimap ─────────────────────────────────────────────────────────

def draw_minimap(surface: pygame.Surface, game_map: GameMap, player: PlayerState):
    scale = int(tuning.get("engine", "minimap_scale", MINIMAP_SCALE))
    mw = game_map.width * scale
    mh = game_map.height * scale
    x0 = surface.get_width() - mw - 8
    y0 = 8

    bg = pygame.Surface((mw + 4, mh + 4), pygame.SRCALPHA)
    bg.fill((0, 0, 0, 170))
    surface.blit(bg, (x0 - 2, y0 - 2))

    for row in game_map.tiles:
        for tile in row:
            if not tile.discovered:
                continue
            pygame.draw.rect(surface, tile_color(tile),
                             (x0 + tile.x * scale, y0 + tile.y * scale, scale, scale))

    px, py = player.tile
    pygame.draw.rect(surface, PLAYER_COLOR,
                     (x0 + px * scale - 1, y0 + py * scale - 1, scale + 2, scale + 2))


# ── HUD ─────────────────────────────────────────────────────────────

def draw_stats_panel(surface: pygame.Surface, app: App, player: PlayerState,
                     game_map: GameMap):
    x, y = 8, 8
    lines = [
        (f"{player.name}  Lv {player.level}", (255, 255, 255)),
        (f"HP {player.health}/{player.max_health}", (220, 90, 90)),
        (f"EN {player.energy}/{player.max_energy}", (90, 160, 230)),
        (f"Gold {player.gold}", (230, 200, 80)),
        (game_map.name or game_map.id, (180, 180, 180)),
    ]
    if game_map.is_interior:
        lines.append(("Esc: leave building", (200, 160, 60)))
    for text, color in lines:
        app.draw_text_bg(surface, text, x, y, color)
        y += 18


def draw_dialogue(surface: pygame.Surface, app: App, session: DialogueSession):
    sw, sh = surface.get_size()
    box_h = 200
    box = pygame.Surface((sw - 40, box_h), pygame.SRCALPHA)
    box.fill((10, 10, 20, 220))
    surface.blit(box, (20, sh - box_h - 20))
    pygame.draw.rect(surface, (160, 160, 120),
                     (20, sh - box_h - 20, sw - 40, box_h), 1)

    x = 32
    y = sh - box_h - 10
    app.draw_text(surface, session.npc_name or session.npc_id, x, y,
                  (230, 200, 80), app.font_lg)
    y += 24

    # Last few history lines, newest at the bottom
    room = max(1, 5 - len(session.choices))
    for line in session.history[-room:]:
        color = (150, 200, 150) if line.startswith(">") else (220, 220, 220)
        app.draw_text(surface, line, x, y, color)
        y += 16

    y += 6
    for i, choice in enumerate(session.choices[:9], start=1):
        app.draw_text(surface, f"{i}. {choice.get('text', '')}", x + 8, y,
                      (255, 255, 160))
        y += 16
    if not session.choices:
        app.draw_text(surface, "[Esc] leave", x + 8, y, (140, 140, 140))


def draw_mode_overlay(surface: pygame.Surface, app: App, mode: Mode,
                      player: PlayerState, items: ItemRegistry,
                      registry: MapRegistry):
    sw, sh = surface.get_size()
    panel = pygame.Surface((sw - 160, sh - 120), pygame.SRCALPHA)
    panel.fill((0, 0, 0, 200))
    surface.blit(panel, (80, 60))

    x, y = 100, 76
    app.draw_text(surface, mode.value.upper(), x, y, (230, 200, 80), app.font_lg)
    y += 30

    if mode == Mode.INVENTORY:
        rows = inventory_lines(player.inventory, items)
        if not rows:
            rows = ["(empty)"]
        for row in rows[:28]:
            app.draw_text(surface, row, x, y)
            y += 16
        y += 8
        app.draw_text(surface, f"Value: {inventory_value(player.inventory, items)}",
                      x, y, (200, 200, 120))
    elif mode == Mode.CHARACTER:
        st = player.stats
        for text in (
            f"Name: {player.name}",
            f"Level: {player.level}",
            f"Health: {player.health}/{player.max_health}",
            f"Energy: {player.energy}/{player.max_energy}",
            f"Gold: {player.gold}",
            "",
            f"Distance: {st.distance_traveled / TILE_SIZE:.0f} tiles",
            f"Items found: {st.items_found}",
            f"Tiles discovered: {st.tiles_discovered}",
            f"Maps visited: {len(st.maps_visited)}",
        ):
            app.draw_text(surface, text, x, y)
            y += 16
    elif mode == Mode.MAP:
        visited = set(player.stats.maps_visited)
        link = registry.interior_link(player.map_id)
        outdoors = link.parent_map_id if link is not None else player.map_id
        for map_id in registry.ids():
            bp = registry.blueprint(map_id)
            name = bp.name if bp is not None else map_id
            here = map_id == outdoors
            mark = "@" if here else ("*" if map_id in visited else " ")
            color = (255, 255, 120) if here else (
                (200, 200, 200) if map_id in visited else (110, 110, 110))
            app.draw_text(surface, f"{mark} {name}", x, y, color)
            y += 16
    else:
        app.draw_text(surface, "Nothing here yet.", x, y, (140, 140, 140))

    app.draw_text(surface, "[Esc] close", x, sh - 84, (120, 120, 120))


# ── Debug ───────────────────────────────────────────────────────────

def draw_debug_overlay(surface: pygame.Surface, app: App, scene: WorldScene):
    state = scene.state
    player = scene.player
    tx, ty = player.tile

    panel_bg = pygame.Surface((360, 240), pygame.SRCALPHA)
    panel_bg.fill((0, 0, 0, 170))
    y0 = surface.get_height() - 248
    surface.blit(panel_bg, (4, y0))

    y = y0 + 4
    info = [
        f"map {state.current_map.id}  mode {state.mode.value}  t={state.clock.time:.1f}",
        f"pos ({player.x:.0f}, {player.y:.0f}) tile ({tx}, {ty}) {player.facing}",
        f"cam ({state.camera.x:.0f}, {state.camera.y:.0f})  "
        f"visible {state.visibility.visible_count()}",
        f"keys {' '.join(sorted(state.pressed)) or '-'}",
    ]
    tile = state.current_map.tile_at(tx, ty)
    if tile is not None and tile.building is not None:
        b = tile.building
        info.append(f"building {b.building_id} ({b.kind}) {b.name}"
                    f"{' [entrance]' if b.is_entrance else ''}")
    if scene.last_click is not None:
        cx, cy = scene.last_click
        info.append(f"click ({cx:.0f}, {cy:.0f})")
    for text in info:
        app.draw_text(surface, text, 10, y, (0, 255, 0), app.font_sm)
        y += 13

    y += 4
    app.draw_text(surface, "── Dev log ──", 10, y, (100, 200, 255), app.font_sm)
    y += 13
    for entry in scene.dev_log.recent(8):
        app.draw_text(surface, f"{entry['t']:7.1f} [{entry['cat']}] {entry['msg']}",
                      10, y, (160, 180, 220), app.font_sm)
        y += 13
