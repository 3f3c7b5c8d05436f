"""core/events.py — Host-facing event bus.

The engine *signals* things the host UI reacts to (a mode changed, the
player crossed into another map, a container was opened) without
knowing who is listening::

    bus.emit(StateChanged(reason="map", map_id="dead_marsh"))

The host subscribes by event class name::

    bus.subscribe("LootableOpened", on_loot)

WorldScene drains the bus once per frame, after the simulation step::

    bus.drain()

Design rules:
  - Events are plain dataclasses with no behaviour.
  - ``emit()`` just appends.
  - ``drain()`` processes queued events in FIFO order.
  - Handlers may emit new events; those are processed in the same drain.
  - A failing handler is logged and skipped; it never stops the frame.
"""

from __future__ import annotations
import traceback
from dataclasses import dataclass
from typing import Any, Callable
from collections import Counter, defaultdict, deque


# ═══════════════════════════════════════════════════════════════════
#  Event definitions
# ═══════════════════════════════════════════════════════════════════

@dataclass
class StateChanged:
    """Mode change or map transition; never emitted per frame.

    ``reason`` is ``"mode"`` or ``"map"``.
    """
    reason: str
    mode: str = ""
    previous_mode: str = ""
    map_id: str = ""
    previous_map_id: str = ""


@dataclass
class LootableOpened:
    """The player interacted with a non-looted container."""
    map_id: str
    lootable: Any                  # components.items.Lootable


@dataclass
class DialogueAction:
    """A dialogue choice carried a command for an external collaborator."""
    npc_id: str
    action: str
    choice_id: str = ""


# ═══════════════════════════════════════════════════════════════════
#  Event Bus
# ═══════════════════════════════════════════════════════════════════

class EventBus:
    """Fire-and-forget event bus shared by the engine and its host."""

    # Upper bound on events handled per drain, so handlers that keep
    # re-emitting cannot hang the frame.
    MAX_PER_DRAIN = 1000

    def __init__(self):
        self._pending: deque = deque()
        self._handlers: dict[str, list[Callable]] = defaultdict(list)
        self._counts: Counter = Counter()

    def emit(self, event) -> None:
        """Queue *event*; nothing runs until the next ``drain()``."""
        self._pending.append(event)

    def subscribe(self, event_type: str, handler: Callable) -> None:
        """Call *handler* for every event whose class name is *event_type*."""
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: str, handler: Callable) -> None:
        try:
            self._handlers[event_type].remove(handler)
        except ValueError:
            pass

    def drain(self) -> int:
        """Deliver queued events in order, including ones emitted meanwhile."""
        handled = 0
        while self._pending and handled < self.MAX_PER_DRAIN:
            event = self._pending.popleft()
            name = type(event).__name__
            self._counts[name] += 1
            handled += 1
            for handler in tuple(self._handlers.get(name, ())):
                try:
                    handler(event)
                except Exception as exc:
                    print(f"[EVENT] {name} handler {getattr(handler, '__name__', handler)} failed: {exc}")
                    traceback.print_exc()
        if self._pending:
            print(f"[EVENT] drain stopped with {len(self._pending)} events still queued")
        return handled

    def clear(self) -> None:
        self._pending.clear()

    def stats(self) -> dict[str, int]:
        """Events delivered so far, by class name."""
        return dict(self._counts)

    def pending_count(self) -> int:
        return len(self._pending)

    def __repr__(self) -> str:
        return f"EventBus(pending={len(self._pending)}, types={len(self._handlers)})"
