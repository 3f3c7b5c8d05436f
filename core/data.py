"""
core/data.py — TOML → content catalog loader

Reads the static content files and turns each top-level table into a
model dataclass.  The catalog is immutable for the process lifetime;
the world generator and the engine only read it.

You define your model types in components/.
You define your game content in .toml files.
This file connects them.

Usage:
    catalog = load_catalog("data")
    catalog.items.get_item("scrap_metal")
    catalog.npcs_for("capital_wasteland")
"""

from __future__ import annotations
try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path

from core.constants import TILE_SIZE, DEFAULT_MAP_ID
from components.items import Item
from components.actors import NPC, Enemy
from components.item_registry import ItemRegistry

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass
class Catalog:
    """Id-keyed static content consumed by generation and the engine."""
    items: ItemRegistry = field(default_factory=ItemRegistry)
    npcs: list[NPC] = field(default_factory=list)
    enemies: list[Enemy] = field(default_factory=list)
    default_map: str = DEFAULT_MAP_ID

    def _belongs(self, map_id: str | None, target: str) -> bool:
        if map_id is None:
            return target == self.default_map
        return map_id == target

    def npcs_for(self, map_id: str) -> list[NPC]:
        return [n for n in self.npcs if self._belongs(n.map_id, map_id)]

    def enemies_for(self, map_id: str) -> list[Enemy]:
        return [e for e in self.enemies if self._belongs(e.map_id, map_id)]


def _read(path: Path) -> dict:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _build(model: type, kwargs: dict):
    """Build a dataclass instance, skipping unknown fields."""
    valid = {f.name for f in fields(model)}
    return model(**{k: v for k, v in kwargs.items() if k in valid})


def _tile_to_pixels(section: dict) -> dict:
    """Authored ``tile = [x, y]`` → pixel centre ``x``/``y`` kwargs."""
    out = dict(section)
    tile = out.pop("tile", None)
    if isinstance(tile, (list, tuple)) and len(tile) == 2:
        out["x"] = float(tile[0] * TILE_SIZE + TILE_SIZE / 2)
        out["y"] = float(tile[1] * TILE_SIZE + TILE_SIZE / 2)
    return out


def load_items(path: str | Path, registry: ItemRegistry | None = None) -> ItemRegistry:
    """Load items.toml into an ItemRegistry.  Table order is kept."""
    registry = registry if registry is not None else ItemRegistry()
    for item_id, section in _read(Path(path)).items():
        if not isinstance(section, dict):
            continue
        stats = section.get("stats", {})
        kwargs = {k: v for k, v in section.items() if k != "stats"}
        kwargs["id"] = item_id
        kwargs.setdefault("name", item_id)
        kwargs["stats"] = tuple((k, float(v)) for k, v in stats.items())
        registry.register(_build(Item, kwargs))
    return registry


def load_npcs(path: str | Path) -> list[NPC]:
    npcs: list[NPC] = []
    for npc_id, section in _read(Path(path)).items():
        if not isinstance(section, dict):
            continue
        kwargs = _tile_to_pixels(section)
        kwargs["id"] = npc_id
        kwargs.setdefault("name", npc_id)
        kwargs.setdefault("dialogue_id", npc_id)
        npcs.append(_build(NPC, kwargs))
    return npcs


def load_enemies(path: str | Path) -> list[Enemy]:
    enemies: list[Enemy] = []
    for enemy_id, section in _read(Path(path)).items():
        if not isinstance(section, dict):
            continue
        kwargs = _tile_to_pixels(section)
        kwargs["id"] = enemy_id
        kwargs.setdefault("name", enemy_id)
        enemies.append(_build(Enemy, kwargs))
    return enemies


def load_catalog(data_dir: str | Path | None = None) -> Catalog:
    """Load items, NPCs and enemies from *data_dir* (default ``data/``).

    items.toml is required; a missing npcs/enemies file just means the
    world has nobody in it.
    """
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
    items = load_items(data_dir / "items.toml")

    npc_path = data_dir / "npcs.toml"
    enemy_path = data_dir / "enemies.toml"
    npcs = load_npcs(npc_path) if npc_path.exists() else []
    enemies = load_enemies(enemy_path) if enemy_path.exists() else []

    print(f"[DATA] {len(items)} items, {len(npcs)} npcs, "
          f"{len(enemies)} enemies from {data_dir}")
    return Catalog(items=items, npcs=npcs, enemies=enemies)
