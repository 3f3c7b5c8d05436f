"""components.dev_log — Structured engine event log.

A bounded log of timestamped engine events: map transitions (and
aborted ones), interactions, mode changes, saves and dialogue errors.
The Tab debug overlay shows the tail so the developer gets a live feed
of what the exploration loop just did.

    scene.dev_log.record("zone", "capital_wasteland → northern_wasteland",
                         t=clock.time, details={"x": 400.0, "y": 736.0})

Entries are plain dicts: ``{"t", "cat", "msg", "details"}``.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field


@dataclass
class DevLog:
    max_entries: int = 500
    entries: deque = field(default_factory=deque)

    def __post_init__(self):
        self.entries = deque(self.entries, maxlen=self.max_entries)

    def record(self, cat: str, msg: str, *, t: float = 0.0,
               details: dict | None = None) -> None:
        self.entries.append({"t": t, "cat": cat, "msg": msg, "details": details})

    def clear(self):
        self.entries.clear()

    def recent(self, n: int = 50) -> list[dict]:
        """The *n* newest entries, oldest first."""
        return list(self.entries)[-n:] if n > 0 else []

    def for_cat(self, cat: str, n: int = 50) -> list[dict]:
        return [e for e in self.entries if e["cat"] == cat][-n:]

    def __len__(self) -> int:
        return len(self.entries)
