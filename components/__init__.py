"""components — Plain data for the world and the exploration loop.

Submodules
----------
tiles          Tile, BuildingInfo
items          Item, ItemStack, Lootable
actors         NPC, Enemy
maps           GameMap, Connection
player         PlayerState, Statistics
resources      Camera, GameClock, EngineState
item_registry  ItemRegistry
dev_log        DevLog

All public names are re-exported here so code can do
``from components import GameMap``.
"""

# ── Grid ─────────────────────────────────────────────────────────────
from components.tiles import Tile, BuildingInfo, make_tile

# ── Items / loot ─────────────────────────────────────────────────────
from components.items import Item, ItemStack, Lootable

# ── Actors ───────────────────────────────────────────────────────────
from components.actors import NPC, Enemy

# ── Maps ─────────────────────────────────────────────────────────────
from components.maps import GameMap, Connection

# ── Player ───────────────────────────────────────────────────────────
from components.player import PlayerState, Statistics

# ── Engine resources / singletons ────────────────────────────────────
from components.resources import Camera, GameClock, EngineState

# ── Registries / logs ────────────────────────────────────────────────
from components.item_registry import ItemRegistry
from components.dev_log import DevLog

__all__ = [
    # grid
    "Tile", "BuildingInfo", "make_tile",
    # items
    "Item", "ItemStack", "Lootable",
    # actors
    "NPC", "Enemy",
    # maps
    "GameMap", "Connection",
    # player
    "PlayerState", "Statistics",
    # resources
    "Camera", "GameClock", "EngineState",
    # registries
    "ItemRegistry", "DevLog",
]
