"""components.item_registry — Item catalog lookup table.

This is the only component with real business logic (rarity buckets,
fallback resolution) so it lives in its own module.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from components.items import Item


@dataclass
class ItemRegistry:
    """Lookup table mapping item IDs → immutable ``Item`` templates.

    Populated by ``core.data.load_catalog`` from ``data/items.toml``.
    Iteration order is registration order, which is also what the
    loot sampler uses to build its pools::

        registry = catalog.items
        name = registry.display_name("scrap_metal")
        rares = registry.by_rarity("rare")
    """
    _entries: dict[str, Item] = field(default_factory=dict)

    # ── core helpers ─────────────────────────────────────────────────

    def register(self, item: Item) -> None:
        self._entries[item.id] = item

    def get_item(self, item_id: str) -> Item | None:
        return self._entries.get(item_id)

    def all(self) -> list[Item]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._entries

    # ── semantic helpers ─────────────────────────────────────────────

    def display_name(self, item_id: str) -> str:
        """Human-readable name for an item ID, falling back to the ID itself."""
        entry = self._entries.get(item_id)
        return entry.name if entry else item_id

    def by_rarity(self, rarity: str) -> list[Item]:
        return [i for i in self._entries.values() if i.rarity == rarity]

    def fallback(self, preferred_id: str = "scrap_metal") -> Item:
        """The item handed out when a loot pool comes up empty.

        *preferred_id* if the catalog has it, else the first catalog item.
        """
        item = self._entries.get(preferred_id)
        if item is not None:
            return item
        for item in self._entries.values():
            return item
        raise LookupError("item catalog is empty, no fallback item")
