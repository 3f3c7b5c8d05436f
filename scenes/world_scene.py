"""
scenes/world_scene.py — Top-down exploration view (the engine core)

Owns the EngineState for the current map and drives it every frame:
movement, camera, fog-of-war and edge transitions run only while the
mode is EXPLORATION; every other mode is a pause overlay.  Drawing
always runs.

Input arrives through an injected InputSource, so the scene can be
driven without a window:

    source = InputSource()
    scene = WorldScene(registry, player, input_source=source)
    source.key_down("right")
    scene.update(1.0, None)

Keys: arrows/WASD move, Space/F interact (talk, loot, enter or leave a
building), I E C Q M toggle overlays, Esc closes any overlay or leaves
the building you are in, 1-9 pick dialogue choices, Tab debug overlay,
F5 reload tuning, F6 quicksave, F9 quickload.
"""

from __future__ import annotations
import pygame
from core.scene import Scene
from core.app import App
from core.constants import DEFAULT_MAP_ID
from core.events import EventBus, StateChanged, LootableOpened, DialogueAction
from core.zone import MapRegistry
from core.save import save_game_state, load_game_state, apply_save
from core import tuning
from components import EngineState, PlayerState, DevLog, ItemRegistry
from logic.modes import Mode, toggle, escape, simulates
from logic.dialogue import DialogueManager, UnknownDialogueNode
from logic.input_manager import InputManager, InputSource, PygameInputSource
from logic.interaction import find_target
from scenes.zone_manager import enter_building, leave_building
from scenes.world_update import (
    simulation_step, update_camera, update_visibility, viewport_size,
    screen_to_world, tile_under_pointer,
)
from scenes.world_draw import (
    draw_tiles, draw_entities, draw_player, draw_minimap, draw_stats_panel,
    draw_mode_overlay, draw_dialogue, draw_debug_overlay,
)

MODE_INTENTS = {f"toggle_{m.value}": m for m in Mode
                if m not in (Mode.EXPLORATION, Mode.DIALOGUE)}


class WorldScene(Scene):
    def __init__(self, registry: MapRegistry, player: PlayerState, *,
                 dialogues: DialogueManager | None = None,
                 items: ItemRegistry | None = None,
                 bus: EventBus | None = None,
                 input_source: InputSource | None = None,
                 start_map: str | None = None):
        self.registry = registry
        self.player = player
        self.dialogues = dialogues if dialogues is not None else DialogueManager()
        self.items = items if items is not None else registry.catalog.items
        self.bus = bus if bus is not None else EventBus()
        self.dev_log = DevLog()
        self.show_debug = False
        self.viewport = viewport_size()
        self.last_click: tuple[float, float] | None = None

        map_id = start_map or player.map_id or DEFAULT_MAP_ID
        game_map = registry.get(map_id)
        self.state = EngineState(current_map=game_map)
        self.state.visibility.reset(game_map)
        player.map_id = game_map.id
        self.note_visit(game_map.id)

        self.source = input_source or PygameInputSource()
        self.input = InputManager(self.state.pressed,
                                  on_intent=self.on_intent,
                                  on_pointer=self.on_pointer)
        self.input.attach(self.source)

    def on_enter(self, app: App):
        if not self.input.attached:
            self.input.attach(self.source)
        self.viewport = viewport_size()
        update_camera(self.state.camera, self.player, self.state.current_map,
                      self.viewport)

    def on_exit(self, app: App):
        self.input.detach()

    # ── bookkeeping ──────────────────────────────────────────────────

    def note_visit(self, map_id: str):
        visited = self.player.stats.maps_visited
        if map_id not in visited:
            visited.append(map_id)

    def set_mode(self, mode: Mode):
        old = self.state.mode
        if mode == old:
            return
        self.state.mode = mode
        self.dev_log.record("mode", f"{old.value} → {mode.value}",
                            t=self.state.clock.time)
        self.bus.emit(StateChanged(reason="mode", mode=mode.value,
                                   previous_mode=old.value,
                                   map_id=self.state.current_map.id,
                                   previous_map_id=self.state.current_map.id))

    # ── input callbacks (run immediately, effects seen next frame) ──

    def on_intent(self, intent: str):
        mode = MODE_INTENTS.get(intent)
        if mode is not None:
            self.set_mode(toggle(self.state.mode, mode))
        elif intent == "escape":
            if self.state.dialogue is not None:
                self.close_dialogue()
            elif (self.state.mode == Mode.EXPLORATION
                  and self.state.current_map.is_interior):
                leave_building(self)
            self.set_mode(escape(self.state.mode))
        elif intent == "interact":
            self.interact()
        elif intent.startswith("choice_"):
            if self.state.mode == Mode.DIALOGUE:
                self.choose(int(intent.split("_")[1]) - 1)
        elif intent == "toggle_debug":
            self.show_debug = not self.show_debug
        elif intent == "reload_tuning":
            tuning.reload()
            self.viewport = viewport_size()
        elif intent == "quicksave":
            save_game_state(self)
        elif intent == "quickload":
            self.quickload()

    def on_pointer(self, sx: float, sy: float, button: int):
        """Diagnostic only: resolve the click to world coordinates."""
        wx, wy = screen_to_world(self.state.camera, sx, sy)
        tx, ty = tile_under_pointer(self, sx, sy)
        self.last_click = (wx, wy)
        print(f"[INPUT] click {button} at screen ({sx:.0f}, {sy:.0f}) → "
              f"world ({wx:.0f}, {wy:.0f}) tile ({tx}, {ty})")

    # ── interaction / dialogue ───────────────────────────────────────

    def interact(self) -> str | None:
        """Talk to an adjacent NPC, else open a container, else use a door."""
        tx, ty = self.player.tile
        target = find_target(self.state.current_map, tx, ty)
        if target is None:
            return None
        if target.kind == "npc":
            npc = target.npc
            self.state.dialogue = self.dialogues.start(
                npc.id, npc.dialogue_id or npc.id, npc.name)
            print(f"[INTERACT] talking to {npc.name}")
            self.dev_log.record("interact", f"dialogue with {npc.id}",
                                t=self.state.clock.time)
            self.set_mode(Mode.DIALOGUE)
            return "npc"

        if target.kind == "entrance":
            if self.state.current_map.is_interior:
                leave_building(self)
            else:
                enter_building(self, target.tile.building.building_id)
            return "entrance"

        lootable = target.lootable
        lootable.discovered = True
        print(f"[INTERACT] opened {lootable.kind} {lootable.id}")
        self.dev_log.record("interact", f"opened {lootable.id}",
                            t=self.state.clock.time)
        self.bus.emit(LootableOpened(map_id=self.state.current_map.id,
                                     lootable=lootable))
        return "lootable"

    def choose(self, index: int):
        session = self.state.dialogue
        if session is None:
            return
        try:
            choice = session.choose(index)
        except UnknownDialogueNode as exc:
            print(f"[DIALOGUE] {exc}, closing conversation")
            self.dev_log.record("dialogue", f"unexpected node {exc.node_id!r}",
                                t=self.state.clock.time,
                                details={"npc": session.npc_id})
            self.close_dialogue()
            self.set_mode(Mode.EXPLORATION)
            return
        if choice is None:
            return
        if choice.get("action"):
            self.bus.emit(DialogueAction(npc_id=session.npc_id,
                                         action=choice["action"],
                                         choice_id=choice.get("id", "")))
        if session.ended:
            self.close_dialogue()
            self.set_mode(Mode.EXPLORATION)

    def close_dialogue(self):
        self.state.dialogue = None

    # ── save / load ──────────────────────────────────────────────────

    def quickload(self, slot: int = 0) -> bool:
        data = load_game_state(slot)
        if data is None:
            print(f"[SAVE] slot {slot} is empty")
            return False
        apply_save(self, data)
        return True

    # ── event handler ────────────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event, app: App):
        if isinstance(self.source, PygameInputSource):
            self.source.feed(event)

    # ── update ───────────────────────────────────────────────────────

    def update(self, dt: float, app: App | None):
        if simulates(self.state.mode):
            simulation_step(self, dt)
        self.bus.drain()

    def refresh_view(self):
        """Recompute camera and visibility without moving (after a load)."""
        update_camera(self.state.camera, self.player, self.state.current_map,
                      self.viewport)
        update_visibility(self)

    # ── draw ─────────────────────────────────────────────────────────

    def draw(self, surface: pygame.Surface, app: App):
        surface.fill((12, 12, 14))
        state = self.state
        draw_tiles(surface, state.current_map, state.camera)
        draw_entities(surface, state.current_map, state.visibility, state.camera)
        draw_player(surface, self.player, state.camera)
        draw_minimap(surface, state.current_map, self.player)
        draw_stats_panel(surface, app, self.player, state.current_map)

        if state.mode == Mode.DIALOGUE and state.dialogue is not None:
            draw_dialogue(surface, app, state.dialogue)
        elif state.mode != Mode.EXPLORATION:
            draw_mode_overlay(surface, app, state.mode, self.player,
                              self.items, self.registry)

        if self.show_debug:
            draw_debug_overlay(surface, app, self)
