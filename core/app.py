"""
core/app.py — Window, frame loop and scene stack

The app owns what every screen shares: the window, the scene stack,
the outcome recorder (saved stats, achievements, leaderboard) and the
audio cue sink.

    app = App()
    app.push_scene(MenuScene())
    app.run()

Scenes always draw onto one fixed-size canvas (the 800×600 arena plus
the HUD strip).  Each frame the canvas is scaled into the window with
its aspect ratio kept, and mouse positions are mapped back onto it, so
scene code never sees window pixels.
"""

from __future__ import annotations
import pygame

from core.constants import ARENA_WIDTH, ARENA_HEIGHT
from core.scene import Scene
from logic.cues import AudioCueSink, ToneCueSink
from logic.outcome import OutcomeRecorder

HUD_HEIGHT = 80

# A frame longer than this (window drag, breakpoint) is treated as this long
MAX_FRAME_DT = 0.25

_MOUSE_EVENTS = (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP, pygame.MOUSEMOTION)


class App:
    def __init__(self, title: str = "Forest Keeper",
                 width: int = ARENA_WIDTH, height: int = ARENA_HEIGHT + HUD_HEIGHT,
                 recorder: OutcomeRecorder | None = None,
                 audio: AudioCueSink | None = None):
        pygame.init()
        self.canvas_size = (width, height)
        self.canvas = pygame.Surface(self.canvas_size)
        self._window_size = (width, height)
        self.screen = pygame.display.set_mode(self._window_size, pygame.RESIZABLE)
        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()
        self.fps = 60
        self.dt = 0.0
        self.running = True
        self.fullscreen = False

        self._scenes: list[Scene] = []

        self.recorder = recorder or OutcomeRecorder.load()
        self.audio = audio or ToneCueSink()

        self.font = pygame.font.SysFont("monospace", 16)
        self.font_sm = pygame.font.SysFont("monospace", 13)
        self.font_lg = pygame.font.SysFont("monospace", 28, bold=True)

    # -- Scene stack --

    @property
    def scene(self) -> Scene | None:
        return self._scenes[-1] if self._scenes else None

    def push_scene(self, scene: Scene):
        if self._scenes:
            self._scenes[-1].on_exit(self)
        self._scenes.append(scene)
        scene.on_enter(self)

    def pop_scene(self):
        """Leave the top scene.  Popping the last one quits."""
        if not self._scenes:
            return
        self._scenes.pop().on_exit(self)
        if self._scenes:
            self._scenes[-1].on_enter(self)
        else:
            self.running = False

    # -- Canvas placement --

    def _viewport(self) -> pygame.Rect:
        """Where the scaled canvas sits inside the window (letterboxed)."""
        ww, wh = self.screen.get_size()
        cw, ch = self.canvas_size
        scale = min(ww / cw, wh / ch)
        w, h = max(1, int(cw * scale)), max(1, int(ch * scale))
        return pygame.Rect((ww - w) // 2, (wh - h) // 2, w, h)

    def to_canvas(self, pos: tuple[int, int]) -> tuple[int, int]:
        """Map a window pixel to canvas coordinates."""
        vp = self._viewport()
        cw, ch = self.canvas_size
        return (int((pos[0] - vp.x) * cw / vp.w),
                int((pos[1] - vp.y) * ch / vp.h))

    def _present(self):
        vp = self._viewport()
        self.screen.fill((0, 0, 0))
        self.screen.blit(pygame.transform.smoothscale(self.canvas, vp.size), vp.topleft)
        pygame.display.flip()

    # -- Frame loop --

    def _dispatch(self, event: pygame.event.Event, scene: Scene):
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_F11:
            self.toggle_fullscreen()
        elif event.type == pygame.VIDEORESIZE:
            if not self.fullscreen:
                self._window_size = (event.w, event.h)
                self.screen = pygame.display.set_mode(self._window_size, pygame.RESIZABLE)
        else:
            if event.type in _MOUSE_EVENTS:
                attrs = dict(event.dict)
                attrs["pos"] = self.to_canvas(event.pos)
                event = pygame.event.Event(event.type, attrs)
            scene.handle_event(event, self)

    def run(self):
        while self.running:
            self.dt = min(self.clock.tick(self.fps) / 1000.0, MAX_FRAME_DT)

            scene = self.scene
            if scene is None:
                break
            scene.begin_frame(self)
            for event in pygame.event.get():
                self._dispatch(event, scene)

            # Handling input may have popped or swapped the scene
            if self.scene:
                self.scene.update(self.dt, self)
            if self.scene:
                self.scene.draw(self.canvas, self)
            self._present()

        pygame.quit()

    def toggle_fullscreen(self):
        """F11: fullscreen ↔ the last windowed size."""
        self.fullscreen = not self.fullscreen
        if self.fullscreen:
            self.screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        else:
            self.screen = pygame.display.set_mode(self._window_size, pygame.RESIZABLE)

    # -- Text helpers --

    def draw_text(self, surface: pygame.Surface, text: str, x: int, y: int,
                  color=(255, 255, 255), font=None) -> pygame.Rect:
        """Blit one line of text; returns its rect for layout chaining."""
        img = (font or self.font).render(text, True, color)
        return surface.blit(img, (x, y))

    def draw_text_centered(self, surface: pygame.Surface, text: str, cx: int,
                           y: int, color=(255, 255, 255), font=None) -> pygame.Rect:
        img = (font or self.font).render(text, True, color)
        return surface.blit(img, (cx - img.get_width() // 2, y))
