"""
core/scene.py — Base class for screens

The app keeps a stack of scenes and only the top one runs.  A scene
gets its raw pygame events through its own ``InputAggregator`` and
picks the key bindings it wants with ``input_context``:

    class RecordsScene(Scene):
        input_context = InputContext.MENU

        def update(self, dt, app):
            if self.input.just("back"):
                app.pop_scene()

Per frame the app calls ``begin_frame``, then ``handle_event`` for each
event, then ``update`` and ``draw``.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from logic.input_manager import InputAggregator, InputContext

if TYPE_CHECKING:
    import pygame
    from core.app import App


class Scene:
    input_context: InputContext = InputContext.MENU

    def __init__(self):
        self.input = InputAggregator()
        self.input.set_context(self.input_context)

    def on_enter(self, app: App):
        """Became the top scene, either pushed or uncovered."""
        self.input.set_context(self.input_context)

    def on_exit(self, app: App):
        """Popped or covered by another scene.  Held keys are dropped."""
        self.input.release_all()

    def begin_frame(self, app: App):
        self.input.begin_frame()

    def handle_event(self, event: pygame.event.Event, app: App):
        self.input.feed(event)

    def update(self, dt: float, app: App):
        pass

    def draw(self, surface: pygame.Surface, app: App):
        pass
