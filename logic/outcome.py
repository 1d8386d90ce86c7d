"""logic/outcome.py — Outcome recorder.

Subscribes to ``RunEnded`` and keeps the player's long-term records:
run history, aggregate stats, achievements, and the leaderboard.

    recorder = OutcomeRecorder.load()
    bus.subscribe("RunEnded", recorder.on_run_ended)
    ...
    if recorder.pending_score:
        recorder.submit_score("Dima")

Everything here happens *after* the run is over.  A failed write is
logged and forgotten; the finished run is never touched again.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from core import save
from core.events import RunEnded
from core.tuning import get as _tun
from components.difficulty import Difficulty
from components.records import (
    GameRecord, PlayerStats, LeaderboardEntry, Achievement,
    default_achievements, mode_name,
)
from components.state import RunOutcome
from logic.scoring import score_outcome, is_perfect_run


@dataclass(frozen=True)
class PendingScore:
    """A won run waiting for the player to type a leaderboard name."""
    time: float
    difficulty: Difficulty
    night_mode: bool
    score: int


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _load_rows(kind, rows: list, name: str) -> list:
    """Parse saved rows, skipping any that are not usable records."""
    out = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        try:
            out.append(kind.from_dict(row))
        except (TypeError, ValueError) as ex:
            print(f"[RECORDS] skipped bad {name} row {row!r}: {ex}")
    return out


class OutcomeRecorder:

    def __init__(self, directory: str | Path | None = None, *,
                 persist: bool = True,
                 clock: Callable[[], datetime] = _utc_now):
        self.directory = Path(directory) if directory is not None else save.save_dir()
        self.persist = persist
        self.clock = clock
        self.stats = PlayerStats()
        self.history: list[GameRecord] = []
        self.leaderboard: list[LeaderboardEntry] = []
        self.achievements: list[Achievement] = default_achievements()
        self.pending_score: PendingScore | None = None
        self.last_unlocked: list[Achievement] = []
        self.write_errors = 0

    # ── Loading ──────────────────────────────────────────────────────

    @classmethod
    def load(cls, directory: str | Path | None = None, **kw) -> "OutcomeRecorder":
        """Build a recorder from whatever is on disk (defaults otherwise)."""
        rec = cls(directory, **kw)
        d = rec.directory

        data = save.read_json(save.get_save_file("stats", d))
        if isinstance(data, dict):
            rec.stats = PlayerStats.from_dict(data)

        data = save.read_json(save.get_save_file("history", d))
        if isinstance(data, list):
            rec.history = _load_rows(GameRecord, data, "history")

        data = save.read_json(save.get_save_file("leaderboard", d))
        if isinstance(data, list):
            rec.leaderboard = _load_rows(LeaderboardEntry, data, "leaderboard")

        data = save.read_json(save.get_save_file("achievements", d))
        if isinstance(data, dict):
            for ach in rec.achievements:
                ach.unlocked = bool(data.get(ach.id, False))
        return rec

    # ── Event handler ────────────────────────────────────────────────

    def on_run_ended(self, event: RunEnded) -> None:
        self.record(event.outcome)

    def record(self, outcome: RunOutcome) -> None:
        """Fold one finished run into history, stats and achievements."""
        won = outcome.survived
        tier = outcome.difficulty
        record = GameRecord(
            difficulty=tier.value,
            mode=mode_name(outcome.night_mode),
            time=outcome.elapsed_seconds,
            survived=won,
            date=self.clock().isoformat(),
            max_detection=outcome.max_detection_reached,
        )
        s = self.stats
        s.games_played += 1
        s.total_time += outcome.elapsed_seconds
        if won:
            s.games_won += 1
            if s.best_time == 0 or outcome.elapsed_seconds > s.best_time:
                s.best_time = outcome.elapsed_seconds
            attr = f"{tier.value}_wins"
            setattr(s, attr, getattr(s, attr) + 1)
            if outcome.night_mode:
                s.night_wins += 1
            if is_perfect_run(outcome):
                s.perfect_runs += 1
            s.current_streak += 1
        else:
            s.current_streak = 0
        s.best_streak = max(s.best_streak, s.current_streak)

        self.history.insert(0, record)
        del self.history[int(_tun("records", "history_size", 200)):]

        if won:
            self.pending_score = PendingScore(
                time=outcome.elapsed_seconds,
                difficulty=tier,
                night_mode=outcome.night_mode,
                score=score_outcome(outcome),
            )
        else:
            self.pending_score = None

        self.last_unlocked = self._unlock_achievements()
        for ach in self.last_unlocked:
            print(f"[RECORDS] Achievement unlocked: {ach.title}")

        self._write("history", [r.to_dict() for r in self.history])
        self._write("stats", self.stats.to_dict())
        self._write("achievements", {a.id: a.unlocked for a in self.achievements})

    # ── Leaderboard / history ────────────────────────────────────────

    def submit_score(self, player_name: str) -> LeaderboardEntry | None:
        """Put the pending score on the leaderboard under *player_name*."""
        pending = self.pending_score
        if pending is None:
            return None
        entry = LeaderboardEntry(
            player_name=player_name.strip() or "Anonymous",
            difficulty=pending.difficulty.value,
            mode=mode_name(pending.night_mode),
            time=pending.time,
            date=self.clock().isoformat(),
            score=pending.score,
        )
        size = int(_tun("records", "leaderboard_size", 100))
        board = sorted(self.leaderboard + [entry], key=lambda e: e.score,
                       reverse=True)
        self.leaderboard = board[:size]
        self.pending_score = None
        print(f"[RECORDS] {entry.player_name}: {entry.score} points")
        self._write("leaderboard", [e.to_dict() for e in self.leaderboard])
        return entry

    def clear_history(self) -> None:
        self.history.clear()
        if self.persist:
            save.remove(save.get_save_file("history", self.directory))

    def unlocked(self) -> list[Achievement]:
        return [a for a in self.achievements if a.unlocked]

    # ── internal ─────────────────────────────────────────────────────

    def _unlock_achievements(self) -> list[Achievement]:
        newly = []
        for ach in self.achievements:
            if not ach.unlocked and ach.condition(self.stats):
                ach.unlocked = True
                newly.append(ach)
        return newly

    def _write(self, name: str, data) -> None:
        if not self.persist:
            return
        path = save.get_save_file(name, self.directory)
        try:
            save.write_json(path, data)
        except (OSError, TypeError, ValueError) as ex:
            self.write_errors += 1
            print(f"[RECORDS] could not write {path}: {ex}")
