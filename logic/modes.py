"""logic/modes.py — Top-level engine mode state machine.

Only ``EXPLORATION`` runs the simulation step.  Every other mode is a
pause overlay.  Transitions are looked up in a static table instead of
being scattered across input handlers:

    mode = toggle(Mode.EXPLORATION, Mode.INVENTORY)   # → INVENTORY
    mode = toggle(mode, Mode.INVENTORY)               # → EXPLORATION
    mode = toggle(mode, Mode.MAP)                     # → MAP
"""

from __future__ import annotations
from enum import Enum


class Mode(Enum):
    EXPLORATION = "exploration"
    INVENTORY   = "inventory"
    EQUIPMENT   = "equipment"
    CHARACTER   = "character"
    QUESTS      = "quests"
    MAP         = "map"
    DIALOGUE    = "dialogue"


# Overlay modes the player can toggle from the keyboard.
TOGGLE_KEYS: dict[str, Mode] = {
    "i": Mode.INVENTORY,
    "e": Mode.EQUIPMENT,
    "c": Mode.CHARACTER,
    "q": Mode.QUESTS,
    "m": Mode.MAP,
}

_OVERLAYS = frozenset(TOGGLE_KEYS.values())

# current mode → modes a toggle key may switch to from there.
# Dialogue is entered only through interaction and left only through
# the conversation ending or Escape.
TRANSITIONS: dict[Mode, frozenset[Mode]] = {
    Mode.EXPLORATION: _OVERLAYS,
    Mode.INVENTORY:   _OVERLAYS,
    Mode.EQUIPMENT:   _OVERLAYS,
    Mode.CHARACTER:   _OVERLAYS,
    Mode.QUESTS:      _OVERLAYS,
    Mode.MAP:         _OVERLAYS,
    Mode.DIALOGUE:    frozenset(),
}


def can_toggle(current: Mode, target: Mode) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def toggle(current: Mode, target: Mode) -> Mode:
    """Return the mode after pressing *target*'s toggle key.

    Pressing the key of the active overlay returns to exploration.
    Disallowed toggles leave the mode unchanged.
    """
    if not can_toggle(current, target):
        return current
    if current == target:
        return Mode.EXPLORATION
    return target


def escape(current: Mode) -> Mode:
    """Escape leaves any modal."""
    return Mode.EXPLORATION


def simulates(mode: Mode) -> bool:
    """True if the world advances in *mode*."""
    return mode == Mode.EXPLORATION
