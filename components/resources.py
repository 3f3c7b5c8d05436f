"""components.resources — Engine-level singletons (not per-map)."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from logic.modes import Mode
from logic.visibility import VisibilityTracker

if TYPE_CHECKING:
    from components.maps import GameMap
    from logic.dialogue import DialogueSession


@dataclass
class GameClock:
    """Monotonic session time: accumulated ``dt`` while exploring."""
    time: float = 0.0


@dataclass
class Camera:
    """Top-left corner of the viewport in world pixels."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class EngineState:
    """Everything the exploration loop reads and writes each frame."""
    current_map: GameMap
    camera: Camera = field(default_factory=Camera)
    visibility: VisibilityTracker = field(default_factory=VisibilityTracker)
    dialogue: DialogueSession | None = None
    mode: Mode = Mode.EXPLORATION
    pressed: set[str] = field(default_factory=set)
    clock: GameClock = field(default_factory=GameClock)
