"""
main.py — Bootstrap

1. Load tuning
2. Create the app (fails fast without a display)
3. Load the content catalog and dialogue trees
4. Build the map registry (maps generate lazily on first visit)
5. Create the player on the start tile
6. Wire host reactions to engine events
7. Push the world scene and run
"""

from core import tuning
from core.app import App
from core.constants import DEFAULT_MAP_ID, VIEWPORT_WIDTH, VIEWPORT_HEIGHT
from core.data import load_catalog
from core.events import EventBus
from core.zone import MapRegistry
from components import PlayerState
from logic.dialogue import load_dialogue
from logic.inventory_ops import transfer_loot
from scenes.world_scene import WorldScene


def make_player(map_id: str) -> PlayerState:
    cfg = tuning.section("player")
    health = int(cfg.get("health", 100))
    energy = int(cfg.get("energy", 50))
    player = PlayerState(
        map_id=map_id,
        name=str(cfg.get("name", "Wanderer")),
        health=health, max_health=health,
        energy=energy, max_energy=energy,
        gold=int(cfg.get("gold", 0)),
    )
    tx, ty = tuning.get("engine", "start_tile", [50, 50])
    player.place_on_tile(int(tx), int(ty))
    return player


def main():
    tuning.load()

    app = App(title="Wasteland Explorer",
              width=int(tuning.get("engine", "viewport_width", VIEWPORT_WIDTH)),
              height=int(tuning.get("engine", "viewport_height", VIEWPORT_HEIGHT)))

    # -- Static content --
    catalog = load_catalog()
    dialogues = load_dialogue()

    # -- World --
    registry = MapRegistry(catalog, seed=tuning.get("world", "seed"))
    start_map = str(tuning.get("engine", "start_map", DEFAULT_MAP_ID))
    player = make_player(start_map)

    # -- Host reactions to engine events --
    bus = EventBus()
    bus.subscribe("LootableOpened", lambda ev: transfer_loot(player, ev.lootable))
    bus.subscribe("DialogueAction",
                  lambda ev: print(f"[MAIN] {ev.npc_id} → action {ev.action!r}"))

    # -- Start --
    scene = WorldScene(registry, player, dialogues=dialogues, bus=bus,
                       start_map=start_map)
    app.push_scene(scene)
    app.run()


if __name__ == "__main__":
    main()
