"""logic — Game systems package.

Top-level modules
-----------------
worldgen        — blueprint → GameMap generation (terrain, buildings, roads)
loot_tables     — rarity-weighted loot pools and container scattering
movement        — held-direction player stepping + walkability
visibility      — fog-of-war tracker for the current map
interaction     — adjacent NPC / container / entrance lookup
interiors       — building interior templates and room generation
inventory_ops   — loot transfer and inventory helpers
input_manager   — injected input source → intent mapping
modes           — engine mode state machine
dialogue        — dialogue trees + conversation sessions
"""
