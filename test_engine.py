"""test_engine.py — Headless tests of the exploration loop.

Drives WorldScene through an injected InputSource on small hand-built
maps: movement, camera, fog-of-war, edge transitions, modes,
interaction, dialogue and the host event bus.

Run:  python test_engine.py

Maps used:
  open 10×10 / 40×40 grass fields
  walled 120×120 field with a one-tile water wall (tunnelling case)
  pairs of linked maps for transitions (same and different sizes)
"""
from __future__ import annotations
import sys, traceback

from core.constants import (
    TILE_SIZE, TERRAIN_GRASS, TERRAIN_WATER, EAST, WEST, NORTH, SOUTH,
)
from core.data import Catalog
from core.events import EventBus
from core.zone import MapRegistry
from components import (
    Camera, Connection, GameMap, Item, ItemStack, Lootable, NPC, PlayerState,
    make_tile,
)
from logic.dialogue import DialogueManager
from logic.input_manager import InputManager, InputSource
from logic.interaction import find_target
from logic.inventory_ops import transfer_loot, consume_item, inventory_lines
from logic.modes import Mode, toggle, escape, can_toggle, simulates
from logic.movement import step_player
from logic.worldgen import ZoneBlueprint, fill_base
from scenes.world_scene import WorldScene
from scenes.world_update import update_camera
from scenes.zone_manager import change_map, edges_touched

DT = 1.0 / 60.0


# ── Builders ─────────────────────────────────────────────────────────

def _map(map_id: str, w: int = 10, h: int = 10, connections=(),
         blocked=()) -> GameMap:
    tiles = fill_base(w, h, TERRAIN_GRASS)
    for x, y in blocked:
        tiles[y][x] = make_tile(x, y, TERRAIN_WATER)
    return GameMap(id=map_id, width=w, height=h, tiles=tiles, name=map_id,
                   connections=list(connections))


def _world(*maps: GameMap, tile=(5, 5), dialogues=None):
    blueprints = {
        m.id: ZoneBlueprint(id=m.id, name=m.name, width=m.width, height=m.height,
                            base=TERRAIN_GRASS, connections=list(m.connections),
                            loot_density=0.0)
        for m in maps
    }
    registry = MapRegistry(Catalog(), blueprints, strict=False)
    for m in maps:
        registry.put(m)
    player = PlayerState(map_id=maps[0].id)
    player.place_on_tile(*tile)
    source = InputSource()
    scene = WorldScene(registry, player, dialogues=dialogues, bus=EventBus(),
                       input_source=source)
    return scene, source


def _record(bus: EventBus, name: str) -> list:
    seen: list = []
    bus.subscribe(name, seen.append)
    return seen


SCRAP = Item(id="scrap_metal", name="Scrap Metal", stackable=True, value=1)
STIM = Item(id="stimpak", name="Stimpak", type="consumable", value=20)


def _centre(tx: int, ty: int) -> tuple[float, float]:
    return tx * TILE_SIZE + TILE_SIZE / 2, ty * TILE_SIZE + TILE_SIZE / 2


# ═══════════════════════════════════════════════════════════════════════
#  Movement
# ═══════════════════════════════════════════════════════════════════════

def test_move_rejected_into_water():
    scene, source = _world(_map("a", blocked=[(6, 5)]))
    player = scene.player
    source.key_down("right")
    scene.update(0.25, None)                 # +32 px lands on the water tile
    assert (player.x, player.y) == (160.0, 160.0)
    assert player.facing == "right"
    assert not player.is_moving
    assert player.stats.distance_traveled == 0.0


def test_move_accepted_exactly():
    scene, source = _world(_map("a", blocked=[(6, 5)]))
    player = scene.player
    source.key_down("right")
    scene.update(0.125, None)                # +16 px stays on tile 5
    assert (player.x, player.y) == (176.0, 160.0)
    assert player.is_moving
    assert player.stats.distance_traveled == 16.0
    source.key_up("right")
    scene.update(DT, None)
    assert not player.is_moving
    assert player.x == 176.0


def test_move_rejected_off_map():
    game_map = _map("a")
    player = PlayerState(x=0.0, y=0.0)
    assert not step_player(player, game_map, ["left"], 0.1, 128.0)
    assert (player.x, player.y) == (0.0, 0.0)
    assert player.facing == "left"
    assert not step_player(player, game_map, ["up"], 0.1, 128.0)
    assert player.facing == "up"


def test_diagonal_moves_full_speed_on_both_axes():
    game_map = _map("a", 40, 40)
    player = PlayerState()
    player.place_on_tile(10, 10)
    assert step_player(player, game_map, ["down", "right"], 0.5, 128.0)
    assert (player.x, player.y) == (384.0, 384.0)
    assert player.facing == "right"           # last applied direction


def test_opposite_directions_cancel():
    game_map = _map("a")
    player = PlayerState()
    player.place_on_tile(5, 5)
    assert not step_player(player, game_map, ["left", "right"], 0.2, 128.0)
    assert (player.x, player.y) == (160.0, 160.0)
    assert not player.is_moving


def test_single_destination_check_tunnels_thin_wall():
    wall = [(51, y) for y in range(120)]
    scene, source = _world(_map("big", 120, 120, blocked=wall), tile=(50, 50))
    assert not scene.state.visibility.any_visible()
    assert not any(t.visible for row in scene.state.current_map.tiles for t in row)
    source.key_down("right")
    scene.update(1.0, None)                  # 128 px; wall is 32 px away
    assert scene.player.tile == (54, 50)
    assert scene.player.x == 1728.0
    assert scene.state.visibility.is_visible(54, 50)


def test_held_directions_fixed_order():
    pressed: set[str] = set()
    mgr = InputManager(pressed)
    source = InputSource()
    mgr.attach(source)
    for key in ("d", "up", "a", "s"):
        source.key_down(key)
    assert mgr.directions() == ["up", "down", "left", "right"]
    source.key_up("up")
    assert mgr.directions() == ["down", "left", "right"]


# ═══════════════════════════════════════════════════════════════════════
#  Camera
# ═══════════════════════════════════════════════════════════════════════

def test_camera_clamps_to_map():
    game_map = _map("big", 120, 120)
    cam = Camera()
    player = PlayerState()
    viewport = (960, 640)

    player.place_on_tile(0, 0)
    update_camera(cam, player, game_map, viewport)
    assert (cam.x, cam.y) == (0.0, 0.0)

    player.x, player.y = 1920.0, 1920.0
    update_camera(cam, player, game_map, viewport)
    assert (cam.x, cam.y) == (1440.0, 1600.0)

    player.place_on_tile(119, 119)
    update_camera(cam, player, game_map, viewport)
    assert (cam.x, cam.y) == (3840.0 - 960, 3840.0 - 640)


def test_camera_pins_on_undersized_map():
    game_map = _map("tiny", 10, 10)          # 320×320 < viewport
    cam = Camera()
    player = PlayerState()
    player.place_on_tile(9, 9)
    update_camera(cam, player, game_map, (960, 640))
    assert (cam.x, cam.y) == (0.0, 0.0)


# ═══════════════════════════════════════════════════════════════════════
#  Visibility
# ═══════════════════════════════════════════════════════════════════════

def test_visibility_radius_and_discovery():
    scene, _ = _world(_map("a", 40, 40), tile=(20, 20))
    scene.update(DT, None)
    vis = scene.state.visibility
    assert vis.is_visible(20, 20)
    assert vis.is_visible(28, 20)            # radius 8
    assert not vis.is_visible(29, 20)
    assert not vis.is_visible(26, 26)        # 6²+6² > 64
    tile = scene.state.current_map.tile_at(28, 20)
    assert tile.discovered and tile.visible
    assert scene.player.stats.tiles_discovered == vis.visible_count()


def test_visibility_is_monotonic_within_a_map():
    scene, source = _world(_map("a", 40, 40), tile=(5, 5))
    scene.update(DT, None)
    vis = scene.state.visibility
    before = {(x, y) for y in range(40) for x in range(40) if vis.is_visible(x, y)}
    source.key_down("right")
    for _ in range(4):
        scene.update(0.5, None)
    assert scene.player.tile == (13, 5)
    after = {(x, y) for y in range(40) for x in range(40) if vis.is_visible(x, y)}
    assert before <= after
    assert len(after) > len(before)


# ═══════════════════════════════════════════════════════════════════════
#  Transitions
# ═══════════════════════════════════════════════════════════════════════

def test_west_transition_lands_inset():
    a = _map("a", connections=[Connection(WEST, "b")])
    b = _map("b", 20, 12, connections=[Connection(EAST, "a")])
    scene, _ = _world(a, b, tile=(0, 5))
    changes = _record(scene.bus, "StateChanged")
    scene.update(DT, None)

    assert scene.state.current_map.id == "b"
    assert scene.player.map_id == "b"
    assert scene.player.x == (20 - 2) * TILE_SIZE
    assert scene.player.y == 5 * TILE_SIZE
    assert not scene.state.visibility.any_visible()
    assert (scene.state.visibility.width, scene.state.visibility.height) == (20, 12)
    assert "b" in scene.player.stats.maps_visited
    assert [(c.reason, c.previous_map_id, c.map_id) for c in changes] == [("map", "a", "b")]


def test_other_edges_land_inset():
    a = _map("a", connections=[Connection(EAST, "b")])
    b = _map("b", connections=[Connection(WEST, "a"), Connection(SOUTH, "c")])
    c = _map("c", 12, 14, connections=[Connection(NORTH, "b")])
    scene, _ = _world(a, b, c, tile=(9, 3))
    scene.update(DT, None)
    assert scene.state.current_map.id == "b"
    assert scene.player.x == TILE_SIZE
    assert scene.player.y == 3 * TILE_SIZE

    change_map(scene, "b", x=4 * TILE_SIZE, y=9 * TILE_SIZE)
    scene.update(DT, None)
    assert scene.state.current_map.id == "c"
    assert scene.player.y == TILE_SIZE
    assert scene.player.x == 4 * TILE_SIZE

    # north edge of c back to b: lands one tile above b's bottom edge
    scene.player.y = 0.0
    scene.update(DT, None)
    assert scene.state.current_map.id == "b"
    assert scene.player.y == (10 - 2) * TILE_SIZE


def test_corner_resolves_west_first():
    c = _map("c", connections=[Connection(WEST, "w"), Connection(NORTH, "n")])
    w = _map("w", connections=[Connection(EAST, "c")])
    n = _map("n", connections=[Connection(SOUTH, "c")])
    assert edges_touched(c, 0, 0) == [WEST, NORTH]
    scene, _ = _world(c, w, n, tile=(0, 0))
    scene.update(DT, None)
    assert scene.state.current_map.id == "w"


def test_edge_without_connection_is_a_wall():
    a = _map("a", connections=[Connection(EAST, "b")])
    b = _map("b", connections=[Connection(WEST, "a")])
    scene, _ = _world(a, b, tile=(0, 5))
    scene.update(DT, None)
    assert scene.state.current_map.id == "a"


def test_arrival_keeps_out_of_range_coordinate():
    a = _map("a", 30, 30, connections=[Connection(WEST, "b")])
    b = _map("b", 10, 10, connections=[Connection(EAST, "a")])
    scene, source = _world(a, b, tile=(0, 25))
    scene.update(DT, None)
    assert scene.state.current_map.id == "b"
    assert scene.player.x == 8 * TILE_SIZE
    assert scene.player.y == 25 * TILE_SIZE   # beyond b's 10 rows

    # The off-map position is not walkable, so every step is rejected.
    source.key_down("up")
    scene.update(0.1, None)
    assert scene.player.y == 25 * TILE_SIZE
    assert scene.state.current_map.id == "b"


def test_unknown_target_aborts_transition():
    a = _map("a", connections=[Connection(WEST, "ghost")])
    scene, _ = _world(a, tile=(0, 5))
    changes = _record(scene.bus, "StateChanged")
    scene.update(DT, None)
    assert scene.state.current_map.id == "a"
    assert (scene.player.x, scene.player.y) == (0.0, 160.0)
    assert scene.state.visibility.any_visible()
    assert changes == []
    msgs = [e["msg"] for e in scene.dev_log.for_cat("zone")]
    assert any("transition aborted" in m for m in msgs)


# ═══════════════════════════════════════════════════════════════════════
#  Modes
# ═══════════════════════════════════════════════════════════════════════

def test_mode_transition_table():
    assert toggle(Mode.EXPLORATION, Mode.INVENTORY) == Mode.INVENTORY
    assert toggle(Mode.INVENTORY, Mode.INVENTORY) == Mode.EXPLORATION
    assert toggle(Mode.INVENTORY, Mode.MAP) == Mode.MAP
    assert toggle(Mode.DIALOGUE, Mode.INVENTORY) == Mode.DIALOGUE
    assert not can_toggle(Mode.EXPLORATION, Mode.DIALOGUE)
    for mode in Mode:
        assert escape(mode) == Mode.EXPLORATION
        assert simulates(mode) == (mode == Mode.EXPLORATION)


def test_overlay_mode_pauses_simulation():
    scene, source = _world(_map("a"))
    changes = _record(scene.bus, "StateChanged")
    source.key_down("i")
    assert scene.state.mode == Mode.INVENTORY
    source.key_down("right")
    scene.update(0.5, None)
    assert scene.player.x == 160.0
    assert scene.state.clock.time == 0.0

    source.key_down("m")
    assert scene.state.mode == Mode.MAP
    source.key_down("m")
    assert scene.state.mode == Mode.EXPLORATION
    scene.update(0.125, None)
    assert scene.player.x == 176.0
    reasons = [(c.reason, c.previous_mode, c.mode) for c in changes]
    assert reasons == [
        ("mode", "exploration", "inventory"),
        ("mode", "inventory", "map"),
        ("mode", "map", "exploration"),
    ]


def test_escape_closes_overlay():
    scene, source = _world(_map("a"))
    source.key_down("c")
    assert scene.state.mode == Mode.CHARACTER
    source.key_down("escape")
    assert scene.state.mode == Mode.EXPLORATION


# ═══════════════════════════════════════════════════════════════════════
#  Interaction / dialogue
# ═══════════════════════════════════════════════════════════════════════

def _joe_dialogue() -> DialogueManager:
    mgr = DialogueManager()
    mgr.register("joe", [
        {"id": "start", "text": "Need something?",
         "choices": [
             {"id": "trade", "text": "Show me your wares.", "next": "wares",
              "action": "open_trade"},
             {"id": "bye", "text": "Just passing through."},
         ]},
        {"id": "wares", "text": "Take a look.",
         "choices": [
             {"id": "odd", "text": "What's in the back?", "next": "back_room"},
         ]},
    ])
    return mgr


def _joe(tx: int, ty: int) -> NPC:
    x, y = _centre(tx, ty)
    return NPC(id="joe", name="Trader Joe", kind="trader", x=x, y=y,
               dialogue_id="joe")


def _crate(tx: int, ty: int, lid: str = "crate") -> Lootable:
    x, y = _centre(tx, ty)
    return Lootable(id=lid, x=x, y=y, items=[ItemStack(SCRAP, 2), ItemStack(STIM, 1)])


def test_find_target_prefers_npc():
    game_map = _map("a")
    game_map.npcs.append(_joe(6, 6))
    game_map.lootables.append(_crate(4, 4))
    target = find_target(game_map, 5, 5)
    assert target.kind == "npc" and target.npc.id == "joe"

    game_map.npcs.clear()
    target = find_target(game_map, 5, 5)
    assert target.kind == "lootable"

    game_map.lootables[0].looted = True
    assert find_target(game_map, 5, 5) is None


def test_find_target_only_adjacent():
    game_map = _map("a")
    game_map.npcs.append(_joe(7, 5))
    assert find_target(game_map, 5, 5) is None
    assert find_target(game_map, 6, 5).npc.id == "joe"
    assert find_target(game_map, 7, 5).npc.id == "joe"   # own tile counts


def test_interact_opens_lootable_and_signals_host():
    game_map = _map("a")
    game_map.lootables.append(_crate(5, 6))
    scene, source = _world(game_map)
    opened = _record(scene.bus, "LootableOpened")
    scene.bus.subscribe("LootableOpened",
                        lambda ev: transfer_loot(scene.player, ev.lootable))

    source.key_down("space")
    assert game_map.lootables[0].discovered
    scene.update(DT, None)
    assert [ev.lootable.id for ev in opened] == ["crate"]
    assert scene.player.inventory == {"scrap_metal": 2, "stimpak": 1}
    assert scene.player.stats.items_found == 3
    assert game_map.lootables[0].looted

    # Looted containers are no longer interaction targets.
    assert scene.interact() is None
    assert scene.state.mode == Mode.EXPLORATION


def test_dialogue_advances_and_emits_action():
    game_map = _map("a")
    game_map.npcs.append(_joe(5, 4))
    game_map.lootables.append(_crate(5, 6))
    scene, source = _world(game_map, dialogues=_joe_dialogue())
    actions = _record(scene.bus, "DialogueAction")

    source.key_down("f")
    assert scene.state.mode == Mode.DIALOGUE
    session = scene.state.dialogue
    assert session.npc_name == "Trader Joe"
    assert session.history == ["Need something?"]
    assert len(session.choices) == 2
    assert not game_map.lootables[0].discovered

    # Toggles are locked out while talking; the world is paused.
    source.key_down("i")
    assert scene.state.mode == Mode.DIALOGUE
    source.key_down("down")
    scene.update(0.5, None)
    assert scene.player.y == 160.0

    source.key_down("1")
    scene.update(DT, None)
    assert session.node_id == "wares"
    assert session.history[-2:] == ["> Show me your wares.", "Take a look."]
    assert [(a.npc_id, a.action, a.choice_id) for a in actions] == \
           [("joe", "open_trade", "trade")]

    source.key_down("9")                      # no such choice
    assert scene.state.mode == Mode.DIALOGUE
    assert session.node_id == "wares"


def test_dialogue_choice_without_next_ends():
    game_map = _map("a")
    game_map.npcs.append(_joe(5, 4))
    scene, source = _world(game_map, dialogues=_joe_dialogue())
    scene.interact()
    session = scene.state.dialogue
    source.key_down("2")
    assert session.ended
    assert scene.state.dialogue is None
    assert scene.state.mode == Mode.EXPLORATION


def test_dialogue_unknown_node_closes_conversation():
    game_map = _map("a")
    game_map.npcs.append(_joe(5, 4))
    scene, source = _world(game_map, dialogues=_joe_dialogue())
    scene.interact()
    source.key_down("1")
    source.key_down("1")                      # points at "back_room"
    assert scene.state.dialogue is None
    assert scene.state.mode == Mode.EXPLORATION
    msgs = [e["msg"] for e in scene.dev_log.for_cat("dialogue")]
    assert any("back_room" in m for m in msgs)


def test_npc_without_tree_gets_a_line():
    game_map = _map("a")
    game_map.npcs.append(_joe(5, 4))
    scene, source = _world(game_map)
    assert scene.interact() == "npc"
    session = scene.state.dialogue
    assert session.history == ["Trader Joe has nothing to say."]
    assert session.choices == []
    source.key_down("escape")
    assert scene.state.dialogue is None
    assert scene.state.mode == Mode.EXPLORATION


# ═══════════════════════════════════════════════════════════════════════
#  Input source / host plumbing
# ═══════════════════════════════════════════════════════════════════════

def test_scene_unsubscribes_on_exit():
    scene, source = _world(_map("a"))
    assert source.listener_count() == 3
    scene.on_exit(None)
    assert source.listener_count() == 0
    source.key_down("i")
    assert scene.state.mode == Mode.EXPLORATION
    scene.on_enter(None)
    assert source.listener_count() == 3
    source.key_down("i")
    assert scene.state.mode == Mode.INVENTORY


def test_pointer_click_resolves_world_position():
    scene, source = _world(_map("a"))
    scene.state.camera.x, scene.state.camera.y = 64.0, 32.0
    source.pointer(100, 50, 1)
    assert scene.last_click == (164.0, 82.0)
    assert scene.player.x == 160.0


def test_unknown_input_kind_rejected():
    source = InputSource()
    try:
        source.subscribe("wheel", lambda *a: None)
    except ValueError:
        return
    raise AssertionError("subscribe accepted an unknown event kind")


def test_bus_isolates_failing_handler():
    bus = EventBus()
    seen = []

    def broken(ev):
        raise RuntimeError("boom")

    bus.subscribe("StateChanged", broken)
    bus.subscribe("StateChanged", seen.append)
    from core.events import StateChanged
    bus.emit(StateChanged(reason="mode"))
    assert bus.drain() == 1
    assert len(seen) == 1


def test_inventory_helpers():
    player = PlayerState()
    loot = Lootable(id="x", x=0.0, y=0.0, items=[ItemStack(SCRAP, 3)])
    assert [s.quantity for s in transfer_loot(player, loot)] == [3]
    assert transfer_loot(player, loot) == []
    assert consume_item(player, "scrap_metal", 2)
    assert player.inventory == {"scrap_metal": 1}
    assert not consume_item(player, "scrap_metal", 5)
    assert consume_item(player, "scrap_metal")
    assert player.inventory == {}
    player.add_item("stimpak", 2)
    assert inventory_lines(player.inventory) == ["stimpak x2"]


# ═══════════════════════════════════════════════════════════════════════
#  MAIN
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    _passed = 0
    _failed = 0
    tests = [(name, fn) for name, fn in globals().items()
             if name.startswith("test_") and callable(fn)]
    for name, fn in tests:
        try:
            fn()
            _passed += 1
            print(f"  [PASS] {name}")
        except Exception:
            _failed += 1
            print(f"  [FAIL] {name}")
            traceback.print_exc()

    print(f"\n{'=' * 60}")
    print(f"  Engine Tests: {_passed} passed, {_failed} failed")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
