"""
core/scene.py — Scene interface

Every screen is a Scene; the App holds a stack of them and only the top
one is updated and drawn.  The exploration view (scenes/world_scene.py)
is the only scene the game ships with.

Lifecycle hooks pair up: ``on_enter`` when a scene becomes the top of
the stack, ``on_exit`` when it is covered, popped or the app stops.
Scenes that subscribe to an input source do it in ``on_enter`` and
unsubscribe in ``on_exit``.

``app`` may be None when a scene is driven headlessly from a test.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pygame
    from core.app import App


class Scene:
    def on_enter(self, app: App | None):
        pass

    def on_exit(self, app: App | None):
        pass

    def handle_event(self, event: pygame.event.Event, app: App):
        """One pygame event, before this frame's update."""
        pass

    def update(self, dt: float, app: App | None):
        """Advance by *dt* seconds."""
        pass

    def draw(self, surface: pygame.Surface, app: App):
        pass
