"""scenes/game_scene.py — One run on screen.

Drives a ``RunController`` from the frame loop and renders whatever
state it currently holds.  The scene only *reads* ``controller.state``;
the controller is its single writer.

    WASD / arrows / drag   move
    R                      restart with a fresh run
    Tab                    debug overlay (run log)
    F5                     reload tuning
    Esc                    back to the menu

After a won run the player can type a name for the leaderboard
(Enter submits, Esc skips).
"""

from __future__ import annotations
import pygame

from core.app import App, HUD_HEIGHT
from core import tuning
from core.constants import (
    ARENA_WIDTH, ARENA_HEIGHT, PLAYER_SIZE, KEEPER_SIZE, TREE_SIZE,
    COLOR_BG_DAY, COLOR_BG_NIGHT, COLOR_TREE, COLOR_TRUNK, COLOR_KEEPER,
    COLOR_KEEPER_HAT, COLOR_PLAYER, COLOR_PLAYER_EDGE, COLOR_PLAYER_HIDDEN,
    COLOR_PLAYER_HIDDEN_EDGE, COLOR_TEXT, COLOR_GOOD, COLOR_ACCENT,
)
from core.events import EventBus
from core.scene import Scene
from components.dev_log import DevLog
from components.difficulty import Difficulty, profile_for
from components.state import Phase
from logic.input_manager import InputContext, edit_text
from logic.scheduler import RunController
from logic.step import player_center
from ui.helpers import draw_overlay, draw_panel, draw_meter, draw_vision_mask

HUD_H = HUD_HEIGHT
_NAME_MAX = 16


class GameScene(Scene):
    input_context = InputContext.GAMEPLAY

    def __init__(self, difficulty: Difficulty, night_mode: bool = False):
        super().__init__()
        self.difficulty = difficulty
        self.input.arena_size = (ARENA_WIDTH, ARENA_HEIGHT + HUD_H)
        self.night_mode = night_mode
        self.bus = EventBus()
        self.log = DevLog()
        self.controller = RunController(self.input.intent, bus=self.bus, log=self.log)
        self.show_debug = False
        self.name_entry: str | None = None
        self.submitted_score: int | None = None
        self._wired = False

    # ── lifecycle ───────────────────────────────────────────────────

    def on_enter(self, app: App):
        super().on_enter(app)
        if not self._wired:
            self.bus.subscribe("RunEnded", app.recorder.on_run_ended)
            self.bus.subscribe("RunEnded", self._on_run_ended)
            self.bus.subscribe("SoundCue", app.audio.on_cue)
            self._wired = True
        if self.controller.state is None:
            self._start()

    def on_exit(self, app: App):
        super().on_exit(app)
        self.controller.stop()

    def _start(self):
        self.name_entry = None
        self.submitted_score = None
        self.input.set_context(InputContext.GAMEPLAY)
        self.log.clear()
        self.controller.start_run(self.difficulty, self.night_mode)

    def _on_run_ended(self, event):
        # Controller already stopped ticking; free the keys for menus
        self.input.release_all()

    # ── update ──────────────────────────────────────────────────────

    def update(self, dt: float, app: App):
        if self.name_entry is not None:
            self._update_name_entry(app)
            return

        inp = self.input
        if inp.just("back"):
            app.pop_scene()
            return
        if inp.just("toggle_debug"):
            self.show_debug = not self.show_debug
        if inp.just("reload_tuning"):
            tuning.reload()
        if inp.just("restart"):
            self._start()
            return

        state = self.controller.state
        if state is not None and state.phase.terminal:
            if app.recorder.pending_score and inp.just("confirm"):
                self.name_entry = ""
                self.input.set_context(InputContext.TEXT)
            return

        self.controller.update(dt)

    def _update_name_entry(self, app: App):
        text, done = edit_text(self.name_entry, self.input.text_events, _NAME_MAX)
        if done is None:
            self.name_entry = text
            return
        if done == "submit":
            entry = app.recorder.submit_score(text)
            self.submitted_score = entry.score if entry else None
        self.name_entry = None
        self.input.set_context(InputContext.GAMEPLAY)

    # ── drawing ─────────────────────────────────────────────────────

    def draw(self, surface: pygame.Surface, app: App):
        state = self.controller.state
        surface.fill((13, 13, 13))
        if state is None:
            return
        arena = pygame.Rect(0, HUD_H, ARENA_WIDTH, ARENA_HEIGHT)
        self._draw_hud(surface, app, state)
        self._draw_arena(surface, arena, state)
        self._draw_touch_stick(surface, arena)
        if state.phase.terminal:
            self._draw_game_over(surface, app, state)
        if self.show_debug:
            self._draw_debug(surface, app)

    def _draw_hud(self, surface, app, state):
        profile = profile_for(state.difficulty)
        app.draw_text(surface, "DANGER", 12, 10, COLOR_TEXT, app.font)
        app.draw_text(surface, f"{round(state.detection_level)}%", 740, 10,
                      COLOR_TEXT, app.font)
        draw_meter(surface, pygame.Rect(12, 32, ARENA_WIDTH - 24, 18),
                   state.detection_level / 100.0)
        mode = "Night" if state.night_mode else "Day"
        app.draw_text(surface,
                      f"{mode} - {state.difficulty.label}   "
                      f"{state.elapsed_time:5.1f}s / {profile.survive_seconds:.0f}s",
                      12, 56, (200, 200, 200), app.font_sm)
        if state.hidden:
            app.draw_text(surface, "HIDDEN BEHIND A TREE", 520, 56,
                          COLOR_GOOD, app.font_sm)

    def _draw_arena(self, surface, arena: pygame.Rect, state):
        night = state.night_mode
        profile = profile_for(state.difficulty)
        surface.fill(COLOR_BG_NIGHT if night else COLOR_BG_DAY, arena)
        ox, oy = arena.topleft
        eye = player_center(state.player_pos)

        # Night vision only hides things from the player's eyes
        def visible(x: float, y: float) -> bool:
            return not night or ((x - eye.x) ** 2 + (y - eye.y) ** 2) ** 0.5 < profile.vision_radius

        for ob in self.controller.arena.obstacles:
            if not visible(ob.x, ob.y):
                continue
            tx, ty = ox + ob.x, oy + ob.y
            pygame.draw.polygon(surface, COLOR_TREE, [
                (tx, ty - TREE_SIZE / 2),
                (tx - TREE_SIZE / 3, ty + TREE_SIZE / 2),
                (tx + TREE_SIZE / 3, ty + TREE_SIZE / 2),
            ])
            surface.fill(COLOR_TRUNK, pygame.Rect(int(tx - 5), int(ty + TREE_SIZE / 2), 10, 15))

        for k in state.keeper_positions:
            if not visible(k.x, k.y):
                continue
            kx, ky = int(ox + k.x), int(oy + k.y)
            surface.fill(COLOR_KEEPER, pygame.Rect(kx - KEEPER_SIZE // 2, ky - KEEPER_SIZE // 2,
                                                   KEEPER_SIZE, KEEPER_SIZE))
            surface.fill(COLOR_KEEPER_HAT, pygame.Rect(kx - KEEPER_SIZE // 4,
                                                       ky - KEEPER_SIZE // 2 + 5,
                                                       KEEPER_SIZE // 2, 5))

        if night:
            draw_vision_mask(surface, (int(ox + eye.x), int(oy + eye.y)),
                             profile.vision_radius, arena)

        p = pygame.Rect(int(ox + state.player_pos.x), int(oy + state.player_pos.y),
                        PLAYER_SIZE, PLAYER_SIZE)
        surface.fill(COLOR_PLAYER_HIDDEN if state.hidden else COLOR_PLAYER, p)
        pygame.draw.rect(surface, COLOR_PLAYER_HIDDEN_EDGE if state.hidden
                         else COLOR_PLAYER_EDGE, p, 2)
        pygame.draw.rect(surface, COLOR_ACCENT, arena, 2)

    def _draw_touch_stick(self, surface, arena: pygame.Rect):
        pts = self.input.touch_points()
        if pts is None:
            return
        (sx, sy), (cx, cy) = pts
        pygame.draw.circle(surface, (255, 255, 255), (int(sx), int(sy)), 40, 2)
        pygame.draw.circle(surface, (200, 200, 200), (int(cx), int(cy)), 14)

    def _draw_game_over(self, surface, app, state):
        draw_overlay(surface, 140)
        sw, sh = surface.get_size()
        rect = pygame.Rect(sw // 2 - 240, sh // 2 - 110, 480, 220)
        draw_panel(surface, rect)
        cx = rect.centerx
        o = state.outcome
        if state.phase is Phase.WON:
            app.draw_text_centered(surface, "YOU SURVIVED!", cx, rect.y + 20, COLOR_GOOD, app.font_lg)
            app.draw_text_centered(surface, "Dima slipped away from the keeper", cx, rect.y + 62,
                                   COLOR_TEXT, app.font)
        else:
            app.draw_text_centered(surface, "CAUGHT!", cx, rect.y + 20, COLOR_ACCENT, app.font_lg)
            app.draw_text_centered(surface, "The keeper found Dima...", cx, rect.y + 62,
                                   COLOR_TEXT, app.font)
        if o is not None:
            app.draw_text_centered(surface,
                                   f"{o.elapsed_seconds:.1f}s   max detection {o.max_detection_reached:.0f}%",
                                   cx, rect.y + 92, (200, 200, 200), app.font_sm)

        pending = app.recorder.pending_score
        if self.name_entry is not None:
            app.draw_text_centered(surface, f"Name: {self.name_entry}_", cx, rect.y + 124,
                                   COLOR_TEXT, app.font)
            hint = "[Enter] submit   [Esc] skip"
        elif pending is not None:
            app.draw_text_centered(surface, f"Score: {pending.score}", cx, rect.y + 124,
                                   COLOR_GOOD, app.font)
            hint = "[Enter] add to leaderboard   [R] play again   [Esc] menu"
        else:
            if self.submitted_score is not None:
                app.draw_text_centered(surface, f"Saved {self.submitted_score} points",
                                       cx, rect.y + 124, COLOR_GOOD, app.font)
            hint = "[R] play again   [Esc] menu"
        app.draw_text_centered(surface, hint, cx, rect.bottom - 36, (180, 180, 180), app.font_sm)

        for i, ach in enumerate(app.recorder.last_unlocked[:3]):
            app.draw_text_centered(surface, f"Achievement unlocked: {ach.title}",
                                   cx, rect.bottom + 12 + i * 20, (255, 215, 0), app.font_sm)

    def _draw_debug(self, surface, app):
        state = self.controller.state
        lines = [f"ticks {state.ticks}  phase {state.phase.value}  "
                 f"max {state.max_detection_reached:.0f}%  bus {self.bus.stats()}"]
        for k in state.keeper_positions:
            d = k.distance_to(state.player_pos)
            lines.append(f"keeper ({k.x:.0f},{k.y:.0f}) dist {d:.0f}")
        lines.extend(self.log.lines(8))
        y = HUD_H + 8
        for line in lines:
            app.draw_text(surface, line, 10, y, (0, 255, 200), app.font_sm)
            y += 16
