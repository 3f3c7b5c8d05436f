"""core/save.py — Game state persistence.

Save files (JSON) hold the runtime state of one session:
- Player position, vitals, inventory, statistics
- Engine mode, camera, clock, open conversation
- The fog-of-war grid of the current map (lit tiles stay lit)
- The *current* map in full: terrain, discovered flags, buildings,
  lootables (with remaining items), NPCs, enemies, connections, and
  for a building interior the parent map and exit tile

Other maps are not saved.  They regenerate lazily from their
blueprints on the next visit, so with a fixed world seed they come
back identical.

When loading a game:
1. Read the JSON (``load_game_state``)
2. Rebuild the current map and install it in the registry
3. Overlay player / engine state on the running scene (``apply_save``)
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Any, TYPE_CHECKING

from components import (
    Tile, BuildingInfo, make_tile, ItemStack, Lootable, NPC, Enemy,
    GameMap, Connection, PlayerState, Statistics, ItemRegistry,
)
from logic.modes import Mode

if TYPE_CHECKING:
    from scenes.world_scene import WorldScene


SAVES_DIR = Path("saves")
FORMAT_VERSION = 1


def get_save_file(slot: int = 0, saves_dir: Path | None = None) -> Path:
    """Get the path for a save slot."""
    folder = Path(saves_dir) if saves_dir is not None else SAVES_DIR
    folder.mkdir(parents=True, exist_ok=True)
    return folder / f"slot{slot}.json"


# ── Snapshot ────────────────────────────────────────────────────────

def snapshot_player(player: PlayerState) -> dict[str, Any]:
    st = player.stats
    return {
        "x": float(player.x), "y": float(player.y),
        "map_id": player.map_id,
        "facing": player.facing,
        "name": player.name,
        "level": player.level,
        "health": player.health, "max_health": player.max_health,
        "energy": player.energy, "max_energy": player.max_energy,
        "gold": player.gold,
        "inventory": dict(player.inventory),
        "stats": {
            "distance_traveled": float(st.distance_traveled),
            "items_found": st.items_found,
            "tiles_discovered": st.tiles_discovered,
            "maps_visited": list(st.maps_visited),
        },
    }


def snapshot_map(game_map: GameMap) -> dict[str, Any]:
    buildings = []
    for row in game_map.tiles:
        for tile in row:
            if tile.building is None:
                continue
            b = tile.building
            buildings.append({"x": tile.x, "y": tile.y, "kind": b.kind,
                              "name": b.name, "building_id": b.building_id,
                              "is_entrance": b.is_entrance})
    return {
        "id": game_map.id,
        "name": game_map.name,
        "bg_music": game_map.bg_music,
        "width": game_map.width,
        "height": game_map.height,
        "terrain": [[t.type for t in row] for row in game_map.tiles],
        "discovered": ["".join("1" if t.discovered else "0" for t in row)
                       for row in game_map.tiles],
        "buildings": buildings,
        "lootables": [
            {"id": lt.id, "x": lt.x, "y": lt.y, "kind": lt.kind,
             "discovered": lt.discovered, "looted": lt.looted,
             "items": [[s.item_id, s.quantity] for s in lt.items]}
            for lt in game_map.lootables
        ],
        "npcs": [
            {"id": n.id, "name": n.name, "kind": n.kind, "x": n.x, "y": n.y,
             "dialogue_id": n.dialogue_id, "faction": n.faction,
             "hostile": n.hostile}
            for n in game_map.npcs
        ],
        "enemies": [
            {"id": e.id, "name": e.name, "kind": e.kind, "x": e.x, "y": e.y,
             "level": e.level, "health": e.health, "damage": e.damage}
            for e in game_map.enemies
        ],
        "connections": [
            {"direction": c.direction, "target_map_id": c.target_map_id,
             "from_position": list(c.from_position),
             "to_position": list(c.to_position)}
            for c in game_map.connections
        ],
        "parent_map_id": game_map.parent_map_id,
        "exit_tile": list(game_map.exit_tile) if game_map.exit_tile else None,
    }


def snapshot(scene: WorldScene) -> dict[str, Any]:
    state = scene.state
    return {
        "format_version": FORMAT_VERSION,
        "player": snapshot_player(scene.player),
        "mode": state.mode.value,
        "camera": [float(state.camera.x), float(state.camera.y)],
        "clock": float(state.clock.time),
        "map": snapshot_map(state.current_map),
        "visible": state.visibility.rows(),
        "dialogue": state.dialogue.snapshot() if state.dialogue else None,
    }


def save_game_state(scene: WorldScene, slot: int = 0,
                    saves_dir: Path | None = None) -> Path:
    """Write the scene's state to *slot*.  Returns path to save file."""
    save_path = get_save_file(slot, saves_dir)
    data = snapshot(scene)
    with open(save_path, "w") as f:
        json.dump(data, f, indent=2)
    print(f"[SAVE] Saved {data['map']['id']} to {save_path}")
    scene.dev_log.record("save", f"saved slot {slot}", t=scene.state.clock.time)
    return save_path


def load_game_state(slot: int = 0,
                    saves_dir: Path | None = None) -> dict[str, Any] | None:
    """Read a save slot.  Returns None if the file is missing or unreadable."""
    save_path = get_save_file(slot, saves_dir)
    if not save_path.exists():
        return None

    try:
        with open(save_path, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as ex:
        print(f"[SAVE] Error loading save file: {ex}")
        return None
    if data.get("format_version") != FORMAT_VERSION:
        print(f"[SAVE] {save_path}: unsupported format "
              f"{data.get('format_version')!r}")
        return None
    return data


# ── Restore ─────────────────────────────────────────────────────────

def restore_map(data: dict[str, Any], items: ItemRegistry) -> GameMap:
    """Rebuild a GameMap from ``snapshot_map`` output.

    Item ids no longer in the catalog are dropped from lootables.
    """
    tiles: list[list[Tile]] = []
    discovered = data.get("discovered", [])
    for y, row in enumerate(data["terrain"]):
        flags = discovered[y] if y < len(discovered) else ""
        tiles.append([])
        for x, terrain in enumerate(row):
            tile = make_tile(x, y, terrain)
            tile.discovered = x < len(flags) and flags[x] == "1"
            tiles[y].append(tile)

    for b in data.get("buildings", []):
        tile = tiles[b["y"]][b["x"]]
        tile.building = BuildingInfo(kind=b["kind"], name=b["name"],
                                     building_id=b["building_id"],
                                     is_entrance=b["is_entrance"])
        tile.walkable = b["is_entrance"]

    lootables = []
    for lt in data.get("lootables", []):
        stacks = []
        for item_id, qty in lt.get("items", []):
            item = items.get_item(item_id)
            if item is None:
                print(f"[SAVE] {lt['id']}: unknown item {item_id!r} dropped")
                continue
            stacks.append(ItemStack(item=item, quantity=qty))
        lootables.append(Lootable(id=lt["id"], x=lt["x"], y=lt["y"],
                                  items=stacks, kind=lt.get("kind", "container"),
                                  discovered=lt.get("discovered", False),
                                  looted=lt.get("looted", False)))

    map_id = data["id"]
    exit_tile = data.get("exit_tile")
    return GameMap(
        id=map_id,
        width=data["width"],
        height=data["height"],
        tiles=tiles,
        name=data.get("name", ""),
        bg_music=data.get("bg_music", ""),
        npcs=[NPC(map_id=map_id, **n) for n in data.get("npcs", [])],
        enemies=[Enemy(map_id=map_id, **e) for e in data.get("enemies", [])],
        lootables=lootables,
        connections=[
            Connection(direction=c["direction"],
                       target_map_id=c["target_map_id"],
                       from_position=tuple(c.get("from_position", (0.0, 0.0))),
                       to_position=tuple(c.get("to_position", (0.0, 0.0))))
            for c in data.get("connections", [])
        ],
        parent_map_id=data.get("parent_map_id", ""),
        exit_tile=tuple(exit_tile) if exit_tile else None,
    )


def restore_player(player: PlayerState, data: dict[str, Any]) -> PlayerState:
    """Overlay saved fields onto *player* in place."""
    for key in ("x", "y", "map_id", "facing", "name", "level", "health",
                "max_health", "energy", "max_energy", "gold"):
        if key in data:
            setattr(player, key, data[key])
    player.is_moving = False
    player.inventory = dict(data.get("inventory", {}))
    st = data.get("stats", {})
    player.stats = Statistics(
        distance_traveled=float(st.get("distance_traveled", 0.0)),
        items_found=st.get("items_found", 0),
        tiles_discovered=st.get("tiles_discovered", 0),
        maps_visited=list(st.get("maps_visited", [])),
    )
    return player


def apply_save(scene: WorldScene, data: dict[str, Any]) -> None:
    """Replace the scene's running state with *data*."""
    from logic.dialogue import DialogueSession

    state = scene.state
    game_map = scene.registry.put(restore_map(data["map"], scene.items))
    restore_player(scene.player, data["player"])
    scene.player.map_id = game_map.id

    state.current_map = game_map
    state.visibility.restore(game_map, data.get("visible"))
    state.pressed.clear()
    state.clock.time = float(data.get("clock", 0.0))
    try:
        state.mode = Mode(data.get("mode", Mode.EXPLORATION.value))
    except ValueError:
        state.mode = Mode.EXPLORATION

    state.dialogue = None
    dlg = data.get("dialogue")
    if dlg:
        state.dialogue = DialogueSession.restore(scene.dialogues, dlg)
    if state.mode == Mode.DIALOGUE and state.dialogue is None:
        state.mode = Mode.EXPLORATION

    scene.refresh_view()
    print(f"[SAVE] Restored {game_map.id} at "
          f"({scene.player.x:.0f}, {scene.player.y:.0f})")
    scene.dev_log.record("save", f"loaded {game_map.id}", t=state.clock.time)
