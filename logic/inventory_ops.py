"""logic/inventory_ops.py — Moving items between containers and the player.

The engine only *signals* that a lootable was opened (LootableOpened);
what happens next belongs to the host.  These are the operations the
default host in main.py uses.

Public API
----------
``transfer_loot``     — empty a lootable into the player's inventory
``consume_item``      — decrement an inventory count, delete if zero
``inventory_value``   — total catalog value of an inventory
``inventory_lines``   — display rows for the inventory overlay
"""

from __future__ import annotations

from components.items import ItemStack, Lootable
from components.item_registry import ItemRegistry
from components.player import PlayerState


def transfer_loot(player: PlayerState, lootable: Lootable) -> list[ItemStack]:
    """Move every stack from *lootable* into *player*'s inventory.

    A looted container yields nothing, so calling this twice is safe.
    """
    stacks = lootable.take_all()
    for stack in stacks:
        player.add_item(stack.item_id, stack.quantity)
        player.stats.items_found += stack.quantity
    if stacks:
        names = ", ".join(f"{s.item.name} x{s.quantity}" for s in stacks)
        print(f"[LOOT] {lootable.id} ({lootable.kind}): {names}")
    return stacks


def consume_item(player: PlayerState, item_id: str, count: int = 1) -> bool:
    """Decrement *item_id* by *count*.  Returns False if there weren't enough."""
    qty = player.inventory.get(item_id, 0)
    if qty < count:
        return False
    player.inventory[item_id] = qty - count
    if player.inventory[item_id] <= 0:
        del player.inventory[item_id]
    return True


def inventory_value(inventory: dict[str, int], registry: ItemRegistry) -> int:
    total = 0
    for item_id, qty in inventory.items():
        item = registry.get_item(item_id)
        if item is not None:
            total += item.value * qty
    return total


def inventory_lines(inventory: dict[str, int],
                    registry: ItemRegistry | None = None) -> list[str]:
    """``"Name x3"`` rows sorted by display name."""
    rows = []
    for item_id, qty in inventory.items():
        name = registry.display_name(item_id) if registry else item_id
        rows.append(f"{name} x{qty}")
    return sorted(rows)
