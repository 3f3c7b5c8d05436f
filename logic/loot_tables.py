"""Loot table sampler — rarity-weighted pools built by repetition.

A pool is a flat list, not a probability table.  Each rarity bucket is
appended a fixed number of times, and the two top tiers are appended
only if a single coin flip per build comes up:

    common subset (materials + cheap consumables)   ×70
    all common                                      ×20
    all uncommon                                    ×7
    all rare                                        ×2
    all epic                                        ×1 with p = 0.004
    all legendary                                   ×1 with p = 0.001

The result is heavily common-skewed with rare high-variance spikes.

Usage:
    rng = random.Random(7)
    pool = build_weighted_table(catalog.items, rng)
    item = sample(pool, catalog.items, rng)
    lootables = generate_lootables(100, 100, 0.005, catalog.items, rng)
"""

from __future__ import annotations
import math
import random

from core import tuning
from core.constants import TILE_SIZE
from components.items import Item, ItemStack, Lootable, LOOTABLE_KINDS
from components.item_registry import ItemRegistry

COMMON_SUBSET_REPEAT = 70
COMMON_REPEAT = 20
UNCOMMON_REPEAT = 7
RARE_REPEAT = 2
EPIC_CHANCE = 0.004
LEGENDARY_CHANCE = 0.001

CHEAP_CONSUMABLE_VALUE = 20

# Stack-count split per container: 1 → 70 %, 2 → 25 %, 3 → 5 %.
ONE_STACK_CHANCE = 0.70
TWO_STACK_CHANCE = 0.95            # cumulative
DOUBLE_QUANTITY_CHANCE = 0.30


def _is_common_staple(item: Item) -> bool:
    if item.type == "material":
        return True
    return item.type == "consumable" and item.value <= CHEAP_CONSUMABLE_VALUE


def build_weighted_table(catalog: ItemRegistry,
                         rng: random.Random | None = None) -> list[Item]:
    """Build a fresh sampling pool from *catalog*."""
    rng = rng or random.Random()
    common = catalog.by_rarity("common")
    staples = [i for i in common if _is_common_staple(i)]

    pool: list[Item] = []
    pool.extend(staples * COMMON_SUBSET_REPEAT)
    pool.extend(common * COMMON_REPEAT)
    pool.extend(catalog.by_rarity("uncommon") * UNCOMMON_REPEAT)
    pool.extend(catalog.by_rarity("rare") * RARE_REPEAT)
    if rng.random() < EPIC_CHANCE:
        pool.extend(catalog.by_rarity("epic"))
    if rng.random() < LEGENDARY_CHANCE:
        pool.extend(catalog.by_rarity("legendary"))
    return pool


def base_table_size(catalog: ItemRegistry) -> int:
    """Pool length before the epic/legendary coin flips."""
    common = catalog.by_rarity("common")
    staples = [i for i in common if _is_common_staple(i)]
    return (COMMON_SUBSET_REPEAT * len(staples)
            + COMMON_REPEAT * len(common)
            + UNCOMMON_REPEAT * len(catalog.by_rarity("uncommon"))
            + RARE_REPEAT * len(catalog.by_rarity("rare")))


def sample(pool: list[Item], catalog: ItemRegistry,
           rng: random.Random | None = None) -> Item:
    """Uniform draw from *pool*; an empty pool yields the fallback item."""
    if not pool:
        return catalog.fallback(tuning.get("loot", "fallback_item", "scrap_metal"))
    rng = rng or random.Random()
    return pool[rng.randrange(len(pool))]


def roll_stack_count(rng: random.Random) -> int:
    r = rng.random()
    if r < ONE_STACK_CHANCE:
        return 1
    if r < TWO_STACK_CHANCE:
        return 2
    return 3


def roll_quantity(item: Item, rng: random.Random) -> int:
    if item.stackable and rng.random() < DOUBLE_QUANTITY_CHANCE:
        return 2
    return 1


def generate_lootables(width: int, height: int, density: float,
                       catalog: ItemRegistry,
                       rng: random.Random | None = None,
                       prefix: str = "loot") -> list[Lootable]:
    """Scatter ``floor(width * height * density)`` containers over the map.

    Positions are uniformly random tiles; two containers may share one.
    Every stack draws from its own freshly built pool.
    """
    rng = rng or random.Random()
    count = math.floor(width * height * density)
    lootables: list[Lootable] = []
    for i in range(count):
        tx = rng.randrange(width)
        ty = rng.randrange(height)
        kind = rng.choice(LOOTABLE_KINDS)
        stacks: list[ItemStack] = []
        for _ in range(roll_stack_count(rng)):
            pool = build_weighted_table(catalog, rng)
            item = sample(pool, catalog, rng)
            stacks.append(ItemStack(item=item, quantity=roll_quantity(item, rng)))
        lootables.append(Lootable(
            id=f"{prefix}_{i}",
            x=tx * TILE_SIZE + TILE_SIZE / 2,
            y=ty * TILE_SIZE + TILE_SIZE / 2,
            items=stacks,
            kind=kind,
        ))
    return lootables
