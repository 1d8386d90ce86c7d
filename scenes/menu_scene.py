"""scenes/menu_scene.py — Title menu.

Pick a difficulty, toggle night mode, start a run, or open the
records screens.

    Up/Down or 1-5   choose difficulty
    N                toggle night mode
    Enter / Space    start
    S                stats & achievements
    L                leaderboard & history
    Esc              quit
"""

from __future__ import annotations
import pygame

from core.app import App
from core.constants import COLOR_ACCENT, COLOR_TEXT, COLOR_GOOD
from core.scene import Scene
from components.difficulty import Difficulty, profile_for
from logic.input_manager import InputContext
from ui.helpers import draw_panel

_TIERS = list(Difficulty)

_TIER_COLORS = {
    Difficulty.EASY: (74, 222, 128),
    Difficulty.NORMAL: (250, 204, 21),
    Difficulty.HARD: (251, 146, 60),
    Difficulty.NIGHTMARE: (239, 68, 68),
    Difficulty.HARDCORE: (168, 85, 247),
}


class MenuScene(Scene):
    input_context = InputContext.MENU

    def __init__(self, difficulty: Difficulty = Difficulty.NORMAL,
                 night_mode: bool = False):
        super().__init__()
        self.selected = _TIERS.index(difficulty)
        self.night_mode = night_mode

    @property
    def difficulty(self) -> Difficulty:
        return _TIERS[self.selected]

    def update(self, dt: float, app: App):
        inp = self.input
        if inp.just("back"):
            app.pop_scene()
            return
        if inp.just("ui_up"):
            self.selected = (self.selected - 1) % len(_TIERS)
        if inp.just("ui_down"):
            self.selected = (self.selected + 1) % len(_TIERS)
        for i in range(len(_TIERS)):
            if inp.just(f"tier_{i + 1}"):
                self.selected = i
        if inp.just("toggle_night"):
            self.night_mode = not self.night_mode
        if inp.just("show_stats"):
            from scenes.records_scene import RecordsScene
            app.push_scene(RecordsScene(tab="stats"))
        elif inp.just("show_board"):
            from scenes.records_scene import RecordsScene
            app.push_scene(RecordsScene(tab="leaderboard"))
        elif inp.just("confirm"):
            from scenes.game_scene import GameScene
            app.push_scene(GameScene(self.difficulty, self.night_mode))

    def draw(self, surface: pygame.Surface, app: App):
        surface.fill((13, 13, 13))
        sw, sh = surface.get_size()
        cx = sw // 2

        app.draw_text_centered(surface, "FOREST KEEPER", cx, 40, COLOR_ACCENT, app.font_lg)
        app.draw_text_centered(surface, "Hide behind the trees. Don't let the keeper see you.",
                               cx, 84, (180, 180, 180), app.font_sm)

        panel = pygame.Rect(cx - 260, 120, 520, 300)
        draw_panel(surface, panel)
        y = panel.y + 20
        for i, tier in enumerate(_TIERS):
            p = profile_for(tier)
            sel = i == self.selected
            prefix = "> " if sel else "  "
            color = _TIER_COLORS[tier] if sel else (150, 150, 150)
            keepers = f" x{p.keeper_count}" if p.keeper_count > 1 else ""
            app.draw_text(surface, f"{prefix}{i + 1}. {tier.label:<10}", panel.x + 24, y,
                          color, app.font)
            app.draw_text(surface,
                          f"survive {p.survive_seconds:.0f}s  speed {p.keeper_speed:.1f}{keepers}",
                          panel.x + 230, y + 2, color, app.font_sm)
            y += 40

        mode = "NIGHT" if self.night_mode else "DAY"
        mode_color = (120, 140, 255) if self.night_mode else (255, 220, 120)
        app.draw_text(surface, f"Mode: {mode}   [N] toggle", panel.x + 24, panel.bottom - 50,
                      mode_color, app.font)

        stats = app.recorder.stats
        app.draw_text_centered(
            surface,
            f"Played {stats.games_played}  Won {stats.games_won}  "
            f"Best {stats.best_time:.1f}s  Streak {stats.current_streak}",
            cx, panel.bottom + 24, COLOR_GOOD, app.font_sm)

        hints = "[Enter] start   [S] stats   [L] leaderboard   [Esc] quit"
        app.draw_text_centered(surface, hints, cx, sh - 60, COLOR_TEXT, app.font_sm)
        app.draw_text_centered(surface, "Move: WASD / arrows / drag", cx, sh - 36,
                               (150, 150, 150), app.font_sm)
