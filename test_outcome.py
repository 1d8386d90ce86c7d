"""test_outcome.py — Outcome recorder, save files and tuning overrides.

Every test writes into its own temporary directory.

Run:  python test_outcome.py      (or: pytest test_outcome.py)
"""
from __future__ import annotations
import json, sys, tempfile, traceback
from datetime import datetime, timezone
from pathlib import Path

from core import tuning
tuning.load()

from core import save
from core.events import EventBus, RunEnded
from components.difficulty import Difficulty
from components.state import RunOutcome
from logic.outcome import OutcomeRecorder


# ── Test harness ─────────────────────────────────────────────────────

_passed = 0
_failed = 0

def ok(label: str):
    global _passed
    _passed += 1
    print(f"  [PASS] {label}")

def fail(label: str, detail: str = ""):
    global _failed
    _failed += 1
    msg = f"  [FAIL] {label}"
    if detail:
        msg += f" — {detail}"
    print(msg)

def check(cond: bool, label: str, detail: str = ""):
    if cond:
        ok(label)
    else:
        fail(label, detail)
    assert cond, f"{label} {detail}"


def _clock():
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _outcome(won: bool, seconds: float, tier: Difficulty = Difficulty.NORMAL,
             night: bool = False, max_det: float = 50.0) -> RunOutcome:
    return RunOutcome(survived=won, elapsed_seconds=seconds,
                      max_detection_reached=max_det, difficulty=tier,
                      night_mode=night)


# ═══════════════════════════════════════════════════════════════════════

def test_won_run_updates_everything():
    print("\n--- Won run ---")
    with tempfile.TemporaryDirectory() as tmp:
        rec = OutcomeRecorder(tmp, clock=_clock)
        rec.record(_outcome(True, 60.0, night=True, max_det=5.0))
        s = rec.stats
        check((s.games_played, s.games_won, s.normal_wins, s.night_wins,
               s.perfect_runs, s.current_streak, s.best_streak) == (1, 1, 1, 1, 1, 1, 1),
              "stats counted the win", str(s))
        check(s.best_time == 60.0 and s.total_time == 60.0, "times recorded")
        check(rec.pending_score is not None and rec.pending_score.score == 3600,
              "pending score computed")
        unlocked = {a.id for a in rec.last_unlocked}
        check(unlocked == {"first_win", "normal_master", "night_owl", "ghost"},
              "achievements unlocked", str(sorted(unlocked)))

        h = rec.history[0]
        check((h.difficulty, h.mode, h.survived, h.max_detection) == ("normal", "night", True, 5.0),
              "history record")
        check(h.date.startswith("2024-05-01T12:00"), "dated by the injected clock")

        for name in ("history", "stats", "achievements"):
            check(save.get_save_file(name, tmp).exists(), f"{name}.json written")
        check(not save.get_save_file("leaderboard", tmp).exists(),
              "leaderboard waits for a name")


def test_streaks_and_losses():
    print("\n--- Streaks ---")
    rec = OutcomeRecorder(persist=False, clock=_clock)
    rec.record(_outcome(True, 45.0, Difficulty.EASY))
    rec.record(_outcome(True, 60.0))
    rec.record(_outcome(False, 12.5))
    s = rec.stats
    check(s.current_streak == 0 and s.best_streak == 2, "loss resets the streak")
    check(s.games_played == 3 and s.games_won == 2, "counts")
    check(rec.pending_score is None, "a loss has no pending score")
    check(rec.submit_score("Dima") is None, "nothing to submit")
    check([r.survived for r in rec.history] == [False, True, True], "newest first")
    check(any(a.id == "speedrunner" and a.unlocked for a in rec.achievements),
          "the 45 s win unlocked speedrunner for good")


def test_leaderboard():
    print("\n--- Leaderboard ---")
    rec = OutcomeRecorder(persist=False, clock=_clock)
    for i in range(105):
        rec.record(_outcome(True, 45.0 + (i * 37) % 50, Difficulty.EASY))
        rec.submit_score(f"p{i}")
    board = rec.leaderboard
    check(len(board) == 100, "capped at 100", str(len(board)))
    check(all(a.score >= b.score for a, b in zip(board, board[1:])),
          "sorted best first")

    rec.record(_outcome(True, 90.0, Difficulty.NIGHTMARE, night=True, max_det=1.0))
    entry = rec.submit_score("   ")
    check(entry.player_name == "Anonymous", "blank name becomes Anonymous")
    check(rec.leaderboard[0] is entry, "top score goes first")
    check(rec.pending_score is None, "pending score consumed")


def test_persistence_round_trip():
    print("\n--- Persistence ---")
    with tempfile.TemporaryDirectory() as tmp:
        rec = OutcomeRecorder(tmp, clock=_clock)
        rec.record(_outcome(True, 75.0, Difficulty.HARD))
        rec.submit_score("Dima")
        rec.record(_outcome(False, 20.0, Difficulty.HARD))

        again = OutcomeRecorder.load(tmp)
        check(again.stats == rec.stats, "stats reloaded")
        check(again.history == rec.history, "history reloaded")
        check(again.leaderboard == rec.leaderboard, "leaderboard reloaded")
        check({a.id for a in again.unlocked()} == {a.id for a in rec.unlocked()},
              "achievements reloaded")

        again.clear_history()
        check(again.history == [] and not save.get_save_file("history", tmp).exists(),
              "clear_history empties and deletes")


def test_corrupt_files_fall_back():
    print("\n--- Corrupt save files ---")
    with tempfile.TemporaryDirectory() as tmp:
        Path(tmp, "stats.json").write_text("{ not json", encoding="utf-8")
        Path(tmp, "history.json").write_text(json.dumps({"oops": 1}), encoding="utf-8")
        rec = OutcomeRecorder.load(tmp)
        check(rec.stats.games_played == 0, "bad stats: defaults")
        check(rec.history == [], "wrong shape: defaults")


def test_wrong_field_types_fall_back():
    print("\n--- Wrong field types ---")
    with tempfile.TemporaryDirectory() as tmp:
        Path(tmp, "history.json").write_text(json.dumps(
            [{"time": "abc"}, {"time": 12.5, "survived": True}]), encoding="utf-8")
        Path(tmp, "stats.json").write_text(json.dumps(
            {"games_played": "3", "games_won": None, "best_time": "x"}), encoding="utf-8")
        Path(tmp, "leaderboard.json").write_text(json.dumps(
            [{"player_name": "Dima", "score": "lots"}, "junk"]), encoding="utf-8")

        rec = OutcomeRecorder.load(tmp, clock=_clock)
        check(len(rec.history) == 1 and rec.history[0].time == 12.5,
              "unreadable history row skipped", str(rec.history))
        check(rec.leaderboard == [], "unreadable leaderboard rows skipped")
        s = rec.stats
        check((s.games_played, s.games_won, s.best_time) == (3, 0, 0.0),
              "stats cast to their types or defaulted", str(s))

        rec.record(_outcome(True, 60.0))
        check(rec.stats.games_played == 4 and rec.stats.games_won == 1,
              "recording works on the repaired stats")
        check(len(rec.history) == 2 and rec.write_errors == 0, "and is saved")


def test_write_failure_is_swallowed():
    print("\n--- Write failure ---")
    with tempfile.TemporaryDirectory() as tmp:
        blocker = Path(tmp, "blocker")
        blocker.write_text("", encoding="utf-8")
        rec = OutcomeRecorder(blocker / "saves", clock=_clock)

        bus = EventBus()
        bus.subscribe("RunEnded", rec.on_run_ended)
        bus.emit(RunEnded(outcome=_outcome(True, 60.0)))
        bus.drain()
        check(rec.write_errors == 3, "three failed writes counted", str(rec.write_errors))
        check(rec.stats.games_played == 1 and len(rec.history) == 1,
              "the run is still recorded in memory")
        check(bus.drain() == 0 and rec.stats.games_played == 1,
              "nothing re-emitted")


def test_tuning_overrides():
    print("\n--- Tuning ---")
    try:
        check(tuning.get("loop", "tick_ms") == 50, "default tick")
        check(tuning.get("nope", "x", 7) == 7, "missing key falls back")
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp, "t.toml")
            path.write_text("[records]\nleaderboard_size = 3\n"
                            "[input.touch]\naxis_px = 4.0\n", encoding="utf-8")
            tuning.load(path)
            check(tuning.get("records", "leaderboard_size") == 3, "override applied")
            check(tuning.get("records", "history_size") == 200, "siblings keep defaults")
            check(tuning.get("input.touch", "axis_px") == 4.0, "nested table")

            rec = OutcomeRecorder(persist=False, clock=_clock)
            for i in range(5):
                rec.record(_outcome(True, 60.0 + i))
                rec.submit_score(f"p{i}")
            check(len(rec.leaderboard) == 3, "recorder honours the tuned cap")
    finally:
        tuning.load()
    check(tuning.get("records", "leaderboard_size") == 100, "restored")


# ═══════════════════════════════════════════════════════════════════════
#  MAIN
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    sections = [
        ("Won Run", test_won_run_updates_everything),
        ("Streaks", test_streaks_and_losses),
        ("Leaderboard", test_leaderboard),
        ("Persistence", test_persistence_round_trip),
        ("Corrupt Files", test_corrupt_files_fall_back),
        ("Wrong Field Types", test_wrong_field_types_fall_back),
        ("Write Failure", test_write_failure_is_swallowed),
        ("Tuning", test_tuning_overrides),
    ]

    for name, fn in sections:
        try:
            fn()
        except AssertionError:
            pass    # already reported by check()
        except Exception:
            _failed += 1
            print(f"\n  [CRASH] {name} — unhandled exception:")
            traceback.print_exc()

    total = _passed + _failed
    print(f"\n{'=' * 60}")
    print(f"  Outcome Tests: {_passed} passed, {_failed} failed  (total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
