"""components.items — Item templates, stacks, and lootable containers.

``Item`` is an immutable catalog template.  Everything that ends up in
a container or an inventory is an ``ItemStack``: a reference to the
template plus a quantity.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from core.constants import TILE_SIZE

ITEM_TYPES = ("weapon", "armor", "consumable", "material", "accessory", "quest")
RARITIES = ("common", "uncommon", "rare", "epic", "legendary")
LOOTABLE_KINDS = ("container", "corpse", "cache")


@dataclass(frozen=True)
class Item:
    id: str
    name: str
    type: str = "material"
    rarity: str = "common"
    value: int = 0
    stackable: bool = False
    description: str = ""
    stats: tuple[tuple[str, float], ...] = ()

    def stat(self, key: str, default: float = 0.0) -> float:
        for k, v in self.stats:
            if k == key:
                return v
        return default


@dataclass
class ItemStack:
    item: Item
    quantity: int = 1

    @property
    def item_id(self) -> str:
        return self.item.id


@dataclass
class Lootable:
    """A world object holding item stacks that can be opened once."""
    id: str
    x: float                       # px (tile centre)
    y: float                       # px (tile centre)
    items: list[ItemStack] = field(default_factory=list)
    kind: str = "container"
    discovered: bool = False
    looted: bool = False

    @property
    def tile(self) -> tuple[int, int]:
        return int(self.x // TILE_SIZE), int(self.y // TILE_SIZE)

    def take_all(self) -> list[ItemStack]:
        """Empty the container.  A looted container yields nothing."""
        if self.looted:
            return []
        stacks = list(self.items)
        self.items.clear()
        self.looted = True
        self.discovered = True
        return stacks
