"""test_loot_tables.py — Loot pool construction and container scattering.

Checks the pool-length formula, the empty-pool fallback, and the
stack-count split of a seeded 100×100 scatter.

Run:  python test_loot_tables.py
"""
from __future__ import annotations
import sys, random, traceback

from core.data import load_catalog
from components import Item, ItemRegistry
from logic.loot_tables import (
    build_weighted_table, base_table_size, sample, generate_lootables,
    roll_stack_count,
)

CATALOG = load_catalog()
ITEMS = CATALOG.items


def _counts(registry: ItemRegistry) -> dict[str, int]:
    common = registry.by_rarity("common")
    staples = [i for i in common
               if i.type == "material"
               or (i.type == "consumable" and i.value <= 20)]
    return {
        "staples": len(staples),
        "common": len(common),
        "uncommon": len(registry.by_rarity("uncommon")),
        "rare": len(registry.by_rarity("rare")),
        "epic": len(registry.by_rarity("epic")),
        "legendary": len(registry.by_rarity("legendary")),
    }


# ── Pool length ──────────────────────────────────────────────────────

def test_pool_length_formula():
    c = _counts(ITEMS)
    expected = 70 * c["staples"] + 20 * c["common"] + 7 * c["uncommon"] + 2 * c["rare"]
    assert base_table_size(ITEMS) == expected

    # Seeds that skip / hit the top tiers: the pool is always the base
    # length plus 0, epic, legendary, or both.
    allowed = {expected, expected + c["epic"], expected + c["legendary"],
               expected + c["epic"] + c["legendary"]}
    for seed in range(50):
        pool = build_weighted_table(ITEMS, random.Random(seed))
        assert len(pool) in allowed, (seed, len(pool))


def test_pool_top_tiers_follow_coin_flips():
    class Forced(random.Random):
        def random(self):
            return 0.0

    c = _counts(ITEMS)
    pool = build_weighted_table(ITEMS, Forced())
    assert len(pool) == base_table_size(ITEMS) + c["epic"] + c["legendary"]
    assert any(i.rarity == "legendary" for i in pool)

    class Never(random.Random):
        def random(self):
            return 0.999

    pool = build_weighted_table(ITEMS, Never())
    assert len(pool) == base_table_size(ITEMS)
    assert not any(i.rarity in ("epic", "legendary") for i in pool)


def test_staples_dominate_pool():
    pool = build_weighted_table(ITEMS, random.Random(3))
    scrap = sum(1 for i in pool if i.id == "scrap_metal")
    # material staple: 70 + 20 copies
    assert scrap == 90


def test_empty_pool_returns_fallback():
    item = sample([], ITEMS, random.Random(1))
    assert item.id == "scrap_metal"


def test_fallback_without_scrap_metal():
    reg = ItemRegistry()
    reg.register(Item(id="bottle_cap", name="Bottle Cap"))
    reg.register(Item(id="tin_can", name="Tin Can"))
    assert sample([], reg).id == "bottle_cap"


def test_empty_catalog_fallback_raises():
    try:
        sample([], ItemRegistry())
    except LookupError:
        return
    raise AssertionError("empty catalog should have no fallback item")


# ── Scattering ───────────────────────────────────────────────────────

def test_generate_lootables_count_and_split():
    rng = random.Random(42)
    lootables = generate_lootables(100, 100, 0.005, ITEMS, rng)
    assert len(lootables) == 50
    ids = {lt.id for lt in lootables}
    assert len(ids) == 50
    for lt in lootables:
        assert 1 <= len(lt.items) <= 3
        assert not lt.looted and not lt.discovered
        tx, ty = lt.tile
        assert 0 <= tx < 100 and 0 <= ty < 100

    # The 70/25/5 split over many draws of the same roll.
    rng = random.Random(7)
    n = 20000
    hist = {1: 0, 2: 0, 3: 0}
    for _ in range(n):
        hist[roll_stack_count(rng)] += 1
    assert abs(hist[1] / n - 0.70) < 0.02, hist
    assert abs(hist[2] / n - 0.25) < 0.02, hist
    assert abs(hist[3] / n - 0.05) < 0.01, hist


def test_generate_lootables_is_seeded():
    a = generate_lootables(40, 40, 0.01, ITEMS, random.Random(9), prefix="x")
    b = generate_lootables(40, 40, 0.01, ITEMS, random.Random(9), prefix="x")
    assert [(l.x, l.y, l.kind, [(s.item_id, s.quantity) for s in l.items]) for l in a] == \
           [(l.x, l.y, l.kind, [(s.item_id, s.quantity) for s in l.items]) for l in b]
    assert a[0].id == "x_0"


def test_zero_density_scatters_nothing():
    assert generate_lootables(10, 10, 0.0, ITEMS, random.Random(0)) == []


# ═══════════════════════════════════════════════════════════════════════
#  MAIN
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    _passed = 0
    _failed = 0
    tests = [(name, fn) for name, fn in sorted(globals().items())
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
    print(f"  Loot Tests: {_passed} passed, {_failed} failed")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
