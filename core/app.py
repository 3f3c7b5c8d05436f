"""
core/app.py — Pygame application shell

Owns the window, the fixed-size render surface, the frame loop and the
scene stack.  Game code lives in Scenes that are pushed and popped:

    app = App(title="Wasteland Explorer", width=960, height=640)
    app.push_scene(WorldScene(registry, player))
    app.run()

One frame = dispatch every queued pygame event, ``update(dt)``, then
``draw`` to the render surface, which is scaled to the window.  Input
callbacks therefore run before the frame's update and their effects are
seen by it.  ``stop()`` ends the loop after the current frame.
"""

from __future__ import annotations
import pygame
from core.scene import Scene

MOUSE_EVENTS = (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP, pygame.MOUSEMOTION)


class App:
    def __init__(self, title: str = "Wasteland Explorer", width: int = 960,
                 height: int = 640, fps: int = 60):
        pygame.init()
        self._windowed_size = (width, height)
        # Scenes always draw at this size; the window just scales it.
        self._virtual_size = (width, height)
        try:
            self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        except pygame.error as exc:
            raise RuntimeError(f"no display surface available: {exc}") from exc
        if pygame.display.get_surface() is None:
            raise RuntimeError("no display surface available")
        pygame.display.set_caption(title)

        self._render_surface = pygame.Surface((width, height))
        self.clock = pygame.time.Clock()
        self.running = False
        self.fullscreen = False
        self.fps = fps
        self.dt = 0.0
        self._scenes: list[Scene] = []

        self.font = pygame.font.SysFont("monospace", 14)
        self.font_sm = pygame.font.SysFont("monospace", 11)
        self.font_lg = pygame.font.SysFont("monospace", 18)

    # -- Scene stack (only the top scene is active) --

    @property
    def scene(self) -> Scene | None:
        return self._scenes[-1] if self._scenes else None

    def push_scene(self, scene: Scene):
        if self._scenes:
            self._scenes[-1].on_exit(self)
        self._scenes.append(scene)
        scene.on_enter(self)

    def pop_scene(self):
        if self._scenes:
            self._scenes.pop().on_exit(self)
        if self._scenes:
            self._scenes[-1].on_enter(self)

    # -- Window → virtual coordinates --

    def to_virtual(self, x: float, y: float) -> tuple[int, int]:
        sw, sh = self.screen.get_size()
        vw, vh = self._virtual_size
        return int(x * vw / sw), int(y * vh / sh)

    def mouse_pos(self) -> tuple[int, int]:
        return self.to_virtual(*pygame.mouse.get_pos())

    def _remap_mouse_event(self, event: pygame.event.Event) -> pygame.event.Event:
        attrs = {k: getattr(event, k)
                 for k in ("button", "buttons", "rel", "touch", "window")
                 if hasattr(event, k)}
        attrs["pos"] = self.to_virtual(*event.pos)
        return pygame.event.Event(event.type, **attrs)

    # -- Frame loop --

    def run(self):
        self.running = True
        while self.running:
            self.dt = self.clock.tick(self.fps) / 1000.0
            for event in pygame.event.get():
                self._dispatch(event)
            self.frame(self.dt)
        for scene in reversed(self._scenes):
            scene.on_exit(self)
        pygame.quit()

    def _dispatch(self, event: pygame.event.Event):
        if event.type == pygame.QUIT:
            self.stop()
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_F11:
            self.toggle_fullscreen()
        elif event.type == pygame.VIDEORESIZE and not self.fullscreen:
            self._windowed_size = (event.w, event.h)
            self.screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
        elif self.scene:
            if event.type in MOUSE_EVENTS:
                event = self._remap_mouse_event(event)
            self.scene.handle_event(event, self)

    def frame(self, dt: float):
        """Update and draw the top scene once, then present."""
        scene = self.scene
        if scene:
            scene.update(dt, self)
            scene.draw(self._render_surface, self)
        pygame.transform.scale(self._render_surface, self.screen.get_size(), self.screen)
        pygame.display.flip()

    def stop(self):
        """Leave the frame loop; no further frame runs after this one."""
        self.running = False

    def toggle_fullscreen(self):
        """Switch between windowed and fullscreen (F11)."""
        self.fullscreen = not self.fullscreen
        if self.fullscreen:
            self.screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        else:
            self.screen = pygame.display.set_mode(self._windowed_size, pygame.RESIZABLE)

    # -- Text helpers --

    def draw_text(self, surface: pygame.Surface, text: str, x: int, y: int,
                  color=(255, 255, 255), font=None):
        """Quick text draw. Returns the rect for layout chaining."""
        img = (font or self.font).render(text, True, color)
        return surface.blit(img, (x, y))

    def draw_text_bg(self, surface: pygame.Surface, text: str, x: int, y: int,
                     color=(255, 255, 255), bg=(0, 0, 0, 160), font=None,
                     pad: int = 2):
        """Text over a semi-transparent box."""
        img = (font or self.font).render(text, True, color)
        w, h = img.get_size()
        box = pygame.Surface((w + pad * 2, h + pad * 2), pygame.SRCALPHA)
        box.fill(bg)
        surface.blit(box, (x - pad, y - pad))
        return surface.blit(img, (x, y))
