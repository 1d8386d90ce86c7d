"""scenes/records_scene.py — Stats, achievements, leaderboard, history.

Left/Right switches tabs, C clears the run history (history tab only),
Esc goes back to the menu.
"""

from __future__ import annotations
import pygame

from core.app import App
from core.constants import COLOR_ACCENT, COLOR_TEXT, COLOR_GOOD
from core.scene import Scene
from logic.input_manager import InputContext
from ui.helpers import draw_panel, draw_lines

TABS = ("stats", "achievements", "leaderboard", "history")


class RecordsScene(Scene):
    input_context = InputContext.MENU

    def __init__(self, tab: str = "stats"):
        super().__init__()
        self.tab = TABS.index(tab) if tab in TABS else 0

    def update(self, dt: float, app: App):
        inp = self.input
        if inp.just("back"):
            app.pop_scene()
            return
        if inp.just("ui_left"):
            self.tab = (self.tab - 1) % len(TABS)
        if inp.just("ui_right"):
            self.tab = (self.tab + 1) % len(TABS)
        if TABS[self.tab] == "history" and inp.just("clear_history"):
            app.recorder.clear_history()

    def draw(self, surface: pygame.Surface, app: App):
        surface.fill((13, 13, 13))
        sw, sh = surface.get_size()

        x = 40
        for i, name in enumerate(TABS):
            color = COLOR_ACCENT if i == self.tab else (140, 140, 140)
            r = app.draw_text(surface, name.upper(), x, 24, color, app.font)
            x = r.right + 30

        panel = pygame.Rect(30, 60, sw - 60, sh - 120)
        draw_panel(surface, panel)
        rows = getattr(self, f"_rows_{TABS[self.tab]}")(app)
        draw_lines(surface, app, rows, panel.x + 20, panel.y + 16, font=app.font_sm)

        hint = "[Left/Right] tabs   [Esc] back"
        if TABS[self.tab] == "history":
            hint += "   [C] clear history"
        app.draw_text(surface, hint, 40, sh - 44, (160, 160, 160), app.font_sm)

    # ── tab contents ────────────────────────────────────────────────

    def _rows_stats(self, app: App) -> list[tuple[str, tuple]]:
        s = app.recorder.stats
        rate = (s.games_won / s.games_played * 100) if s.games_played else 0.0
        return [
            (f"Games played     {s.games_played}", COLOR_TEXT),
            (f"Games won        {s.games_won}  ({rate:.0f}%)", COLOR_TEXT),
            (f"Total time       {s.total_time:.1f}s", COLOR_TEXT),
            (f"Best time        {s.best_time:.1f}s", COLOR_TEXT),
            (f"Wins  easy {s.easy_wins}  normal {s.normal_wins}  hard {s.hard_wins}  "
             f"nightmare {s.nightmare_wins}  hardcore {s.hardcore_wins}", COLOR_TEXT),
            (f"Night wins       {s.night_wins}", COLOR_TEXT),
            (f"Perfect runs     {s.perfect_runs}", COLOR_TEXT),
            (f"Streak           {s.current_streak}  (best {s.best_streak})", COLOR_TEXT),
        ]

    def _rows_achievements(self, app: App) -> list[tuple[str, tuple]]:
        rows = []
        for a in app.recorder.achievements:
            mark = "[x]" if a.unlocked else "[ ]"
            color = COLOR_GOOD if a.unlocked else (120, 120, 120)
            rows.append((f"{mark} {a.title:<14} {a.description}", color))
        return rows

    def _rows_leaderboard(self, app: App) -> list[tuple[str, tuple]]:
        board = app.recorder.leaderboard
        if not board:
            return [("No scores yet. Win a run to get on the board.", (150, 150, 150))]
        rows = []
        for i, e in enumerate(board[:20], start=1):
            rows.append((f"{i:>2}. {e.player_name:<16} {e.score:>7}  "
                         f"{e.difficulty:<9} {e.mode:<5} {e.time:5.1f}s", COLOR_TEXT))
        return rows

    def _rows_history(self, app: App) -> list[tuple[str, tuple]]:
        history = app.recorder.history
        if not history:
            return [("No games played yet.", (150, 150, 150))]
        rows = []
        for r in history[:20]:
            result = "ESCAPED" if r.survived else "CAUGHT "
            color = COLOR_GOOD if r.survived else COLOR_ACCENT
            rows.append((f"{r.date[:16].replace('T', ' ')}  {result}  {r.difficulty:<9} "
                         f"{r.mode:<5} {r.time:5.1f}s  max {r.max_detection:.0f}%", color))
        return rows
