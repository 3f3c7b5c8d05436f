"""logic/input_manager.py — Injected input source + intent mapping.

The engine never reads global input.  It is handed an ``InputSource``
that it can subscribe to and unsubscribe from; the host (or a test)
pushes key names and pointer clicks into that source.

Key names are ``pygame.key.name()`` strings: ``"up"``, ``"w"``,
``"space"``, ``"escape"``, ``"1"``...

Usage (in world_scene):

    source = PygameInputSource()          # or InputSource() in tests
    self.input = InputManager(state.pressed, on_intent=self._on_intent)
    self.input.attach(source)
    # each pygame event:
    source.feed(event)
    # each frame:
    dirs = self.input.directions()        # held movement, fixed order
"""

from __future__ import annotations
from typing import Callable

import pygame

from logic.modes import TOGGLE_KEYS

KEY_DOWN = "key_down"
KEY_UP = "key_up"
POINTER = "pointer"


# ── Input source ────────────────────────────────────────────────────

class InputSource:
    """Subscribe/unsubscribe capability for key and pointer events.

    Listeners: ``key_down(name)``, ``key_up(name)``,
    ``pointer(x, y, button)`` with screen coordinates.
    """

    def __init__(self):
        self._listeners: dict[str, list[Callable]] = {
            KEY_DOWN: [], KEY_UP: [], POINTER: [],
        }

    def subscribe(self, kind: str, listener: Callable) -> None:
        if kind not in self._listeners:
            raise ValueError(f"unknown input event kind {kind!r}")
        self._listeners[kind].append(listener)

    def unsubscribe(self, kind: str, listener: Callable) -> None:
        listeners = self._listeners.get(kind, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self) -> int:
        return sum(len(v) for v in self._listeners.values())

    # ── dispatch (host side) ────────────────────────────────────────

    def key_down(self, key: str) -> None:
        for listener in list(self._listeners[KEY_DOWN]):
            listener(key)

    def key_up(self, key: str) -> None:
        for listener in list(self._listeners[KEY_UP]):
            listener(key)

    def pointer(self, x: float, y: float, button: int = 1) -> None:
        for listener in list(self._listeners[POINTER]):
            listener(x, y, button)


class PygameInputSource(InputSource):
    """InputSource fed from the pygame event queue."""

    def feed(self, event: pygame.event.Event) -> bool:
        """Translate one pygame event.  Returns True if it was input."""
        if event.type == pygame.KEYDOWN:
            self.key_down(pygame.key.name(event.key))
            return True
        if event.type == pygame.KEYUP:
            self.key_up(pygame.key.name(event.key))
            return True
        if event.type == pygame.MOUSEBUTTONDOWN:
            x, y = event.pos
            self.pointer(x, y, event.button)
            return True
        return False


# ── Bindings ────────────────────────────────────────────────────────
# Intent names:
#   move_up  move_down  move_left  move_right   (held)
#   interact  escape  toggle_<mode>  choice_1 .. choice_9
#   toggle_debug  reload_tuning  quicksave  quickload

# Fixed application order for held movement.
MOVE_INTENTS = (
    ("move_up", "up"),
    ("move_down", "down"),
    ("move_left", "left"),
    ("move_right", "right"),
)

DEFAULT_BINDS: dict[str, list[str]] = {
    "move_up":          ["up", "w"],
    "move_down":        ["down", "s"],
    "move_left":        ["left", "a"],
    "move_right":       ["right", "d"],
    "interact":         ["space", "f"],
    "escape":           ["escape"],
    "toggle_debug":     ["tab"],
    "reload_tuning":    ["f5"],
    "quicksave":        ["f6"],
    "quickload":        ["f9"],
}
for _key, _mode in TOGGLE_KEYS.items():
    DEFAULT_BINDS[f"toggle_{_mode.value}"] = [_key]
for _n in range(1, 10):
    DEFAULT_BINDS[f"choice_{_n}"] = [str(_n)]


# ── InputManager ────────────────────────────────────────────────────

class InputManager:
    """Maps key names to intents and tracks the held-key set.

    ``pressed`` is shared with EngineState so the frame step reads the
    same set the input callbacks write.  Discrete intents are delivered
    immediately through ``on_intent``; pointer clicks through
    ``on_pointer``.
    """

    def __init__(self, pressed: set[str] | None = None,
                 binds: dict[str, list[str]] | None = None,
                 on_intent: Callable[[str], None] | None = None,
                 on_pointer: Callable[[float, float, int], None] | None = None):
        self.pressed: set[str] = pressed if pressed is not None else set()
        self.binds = binds or DEFAULT_BINDS
        self.on_intent = on_intent
        self.on_pointer = on_pointer
        self._source: InputSource | None = None
        self._by_key: dict[str, list[str]] = {}
        for intent, keys in self.binds.items():
            for key in keys:
                self._by_key.setdefault(key, []).append(intent)

    # ── source lifecycle ────────────────────────────────────────────

    @property
    def attached(self) -> bool:
        return self._source is not None

    def attach(self, source: InputSource) -> None:
        self.detach()
        source.subscribe(KEY_DOWN, self._key_down)
        source.subscribe(KEY_UP, self._key_up)
        source.subscribe(POINTER, self._pointer)
        self._source = source

    def detach(self) -> None:
        if self._source is None:
            return
        self._source.unsubscribe(KEY_DOWN, self._key_down)
        self._source.unsubscribe(KEY_UP, self._key_up)
        self._source.unsubscribe(POINTER, self._pointer)
        self._source = None
        self.pressed.clear()

    # ── listeners ───────────────────────────────────────────────────

    def _key_down(self, key: str):
        self.pressed.add(key)
        if self.on_intent is None:
            return
        for intent in self._by_key.get(key, []):
            if intent.startswith("move_"):
                continue
            self.on_intent(intent)

    def _key_up(self, key: str):
        self.pressed.discard(key)

    def _pointer(self, x: float, y: float, button: int):
        if self.on_pointer is not None:
            self.on_pointer(x, y, button)

    # ── queries ─────────────────────────────────────────────────────

    def held(self, intent: str) -> bool:
        """True if any key bound to *intent* is in the pressed set."""
        return any(k in self.pressed for k in self.binds.get(intent, []))

    def directions(self) -> list[str]:
        """Held movement directions in application order (up, down, left, right).

        Opposite directions are both reported; nothing is normalised.
        """
        return [d for intent, d in MOVE_INTENTS if self.held(intent)]

    def intents_for(self, key: str) -> list[str]:
        return list(self._by_key.get(key, []))
