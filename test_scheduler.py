"""test_scheduler.py — Tick driver, run controller, event bus and cues.

Run:  python test_scheduler.py      (or: pytest test_scheduler.py)
"""
from __future__ import annotations
import array, sys, traceback
from dataclasses import replace

from core.tuning import load as _load_tuning
_load_tuning()

from core.events import EventBus, RunEnded, SoundCue
from components.dev_log import DevLog
from components.spatial import Arena, Obstacle
from components.state import SimState, MovementIntent, Phase, IDLE
from logic.scheduler import FixedTicker, RunController
from logic.cues import cues_for, RecordingCueSink, _tone


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


class _AlwaysRng:
    """Stand-in RNG whose every roll succeeds."""
    def random(self) -> float:
        return 0.0


def _run_to_end(rc: RunController, dt: float = 1.0, limit: int = 1000) -> int:
    frames = 0
    while rc.running and frames < limit:
        rc.update(dt)
        frames += 1
    return frames


# ═══════════════════════════════════════════════════════════════════════
#  FixedTicker
# ═══════════════════════════════════════════════════════════════════════

def test_fixed_ticker():
    print("\n--- FixedTicker ---")
    calls = []
    t = FixedTicker(0.25, lambda: calls.append(1))
    check(t.advance(0.5) == 2, "two whole ticks in 0.5 s")
    check(t.advance(0.125) == 0, "half a tick waits")
    check(t.advance(0.125) == 1, "remainder carries over")
    check(len(calls) == 3 and t.ticks_fired == 3, "on_tick called once per tick")
    check(t.advance(0) == 0 and t.advance(-1) == 0, "non-positive dt is ignored")

    try:
        FixedTicker(0, lambda: None)
        raised = False
    except ValueError:
        raised = True
    check(raised, "zero tick period rejected")


def test_catchup_cap():
    print("\n--- Catch-up cap ---")
    t = FixedTicker(0.25, lambda: None, max_catchup=3)
    check(t.advance(10.0) == 3, "a 10 s stall runs at most 3 ticks")
    check(t.advance(0.125) == 0, "the backlog is dropped")


def test_stop_is_idempotent():
    print("\n--- Stop ---")
    t = FixedTicker(0.25, lambda: None)
    t.advance(0.125)
    t.stop()
    t.stop()
    check(t.stopped, "stopped")
    check(t.advance(5.0) == 0, "no ticks after stop")

    fired = []
    t2 = FixedTicker(0.25, lambda: (fired.append(1), t2.stop()))
    check(t2.advance(1.0) == 1, "stop inside a tick ends the frame")


def test_no_reentrancy():
    print("\n--- Reentrancy ---")
    inner = []
    t = FixedTicker(0.25, lambda: inner.append(t.advance(1.0)))
    check(t.advance(0.5) == 2, "outer frame runs its ticks")
    check(inner == [0, 0], "nested advance() fires nothing", str(inner))


# ═══════════════════════════════════════════════════════════════════════
#  RunController
# ═══════════════════════════════════════════════════════════════════════

def test_run_controller_stops_on_terminal():
    print("\n--- RunController ---")
    bus = EventBus()
    started, ended = [], []
    bus.subscribe("RunStarted", started.append)
    bus.subscribe("RunEnded", ended.append)
    log = DevLog()

    rc = RunController(bus=bus, log=log)
    s = rc.start_run("easy")
    check(s.phase is Phase.RUNNING and rc.running, "start_run gives a running state")
    check(len(started) == 1 and started[0].difficulty == "easy", "RunStarted published")

    check(rc.update(0.05) == 1, "one tick per 50 ms")
    check(rc.state.ticks == 1, "state advanced")

    frames = _run_to_end(rc)
    end = rc.state
    check(end.phase.terminal, "run reached a terminal phase", f"after {frames} frames")
    check(not rc.running and rc.ticker.stopped, "ticker stopped itself")
    check(rc.update(5.0) == 0 and rc.state is end, "nothing ticks after the end")
    check(len(ended) == 1 and ended[0].outcome == end.outcome, "exactly one RunEnded")

    cats = [e["cat"] for e in log.entries]
    check("danger" in cats and cats[-1] == "end", "dev log saw danger and the end", str(cats))


def test_restart_is_a_fresh_state():
    print("\n--- Restart ---")
    rc = RunController(intent_source=lambda: MovementIntent(right=True))
    rc.start_run("normal", night_mode=True)
    rc.update(1.0)
    first = rc.ticker
    s = rc.start_run("hard")
    check(first.stopped, "previous ticker stopped")
    check(s.ticks == 0 and s.detection_level == 0 and not s.night_mode,
          "new run starts from scratch")


def test_intent_sampled_each_tick():
    print("\n--- Intent sampling ---")
    intents = iter([MovementIntent(right=True), MovementIntent(down=True), IDLE])
    rc = RunController(intent_source=lambda: next(intents, IDLE),
                       arena=Arena(obstacles=()))
    start = rc.start_run("easy").player_pos
    rc.update(0.05)
    rc.update(0.05)
    rc.update(0.05)
    p = rc.state.player_pos
    check((p.x, p.y) == (start.x + 3, start.y + 3), "each tick used its own intent",
          f"got {p}")


# ═══════════════════════════════════════════════════════════════════════
#  Event bus
# ═══════════════════════════════════════════════════════════════════════

def test_failing_handler_is_contained():
    print("\n--- Event bus ---")
    bus = EventBus()
    got = []

    def boom(event):
        raise OSError("disk full")

    bus.subscribe("RunEnded", boom)
    bus.subscribe("RunEnded", got.append)
    bus.emit(RunEnded(outcome=None))
    check(bus.pending_count() == 1, "queued until drain")
    check(bus.drain() == 1, "one event processed")
    check(len(got) == 1, "later handlers still run")
    check(bus.drain() == 0, "nothing re-emitted")
    check(bus.stats().get("RunEnded") == 1, "stats counted it once")
    check(bus.handler_errors == 1, "the failure was counted")


# ═══════════════════════════════════════════════════════════════════════
#  Cues
# ═══════════════════════════════════════════════════════════════════════

def test_cues_from_transitions():
    print("\n--- Cues ---")
    base = SimState.new_run("easy").start()
    rng = _AlwaysRng()

    names = [c.name for c in cues_for(base, replace(base, moved=True), rng)]
    check(names == ["step"], "movement can play a step", str(names))

    names = [c.name for c in cues_for(base, replace(base, hidden=True), rng)]
    check(names == ["hide"], "hide on the rising edge only", str(names))
    hidden = replace(base, hidden=True)
    check(cues_for(hidden, hidden, rng) == [], "staying hidden is quiet")

    a = replace(base, detection_level=70.0)
    names = [c.name for c in cues_for(a, replace(a, detection_level=72.0), rng)]
    check(names == ["danger"], "crossing 70 % upward", str(names))
    b = replace(base, detection_level=75.0)
    check(cues_for(b, replace(b, detection_level=77.0), rng) == [],
          "already above 70 % is quiet")

    names = [c.name for c in cues_for(base, replace(base, phase=Phase.LOST), rng)]
    check(names == ["caught"], "caught on the losing tick")
    names = [c.name for c in cues_for(base, replace(base, phase=Phase.WON), rng)]
    check(names == ["escape"], "escape on the winning tick")


def test_controller_feeds_the_cue_sink():
    print("\n--- Cue sink wiring ---")
    bus = EventBus()
    sink = RecordingCueSink()
    bus.subscribe("SoundCue", sink.on_cue)
    rc = RunController(bus=bus, rng=_AlwaysRng())
    rc.start_run("easy")
    _run_to_end(rc)
    check(sink.played == ["danger", "caught"],
          "idle easy run: danger then caught", str(sink.played))

    bus = EventBus()
    sink = RecordingCueSink()
    bus.subscribe("SoundCue", sink.on_cue)
    arena = Arena(obstacles=(Obstacle(63, 60),))
    rc = RunController(intent_source=lambda: MovementIntent(right=True),
                       bus=bus, arena=arena, rng=_AlwaysRng())
    rc.start_run("easy")
    rc.update(0.05)
    check(sink.played[:2] == ["step", "hide"], "walking behind a tree", str(sink.played))
    check(isinstance(SoundCue("x").name, str), "cue events carry a name")


def test_tone_buffers():
    print("\n--- Tone synthesis ---")
    mono = _tone(22050, 440.0, 0.1, "sine", 0.2)
    stereo = _tone(22050, 440.0, 0.1, "square", 0.2, channels=2)
    check(len(mono) == 2205 * 2, "16-bit mono samples", str(len(mono)))
    check(len(stereo) == 2 * len(mono), "stereo doubles the frames")

    u8 = _tone(22050, 440.0, 0.1, "sine", 0.2, size=8)
    check(len(u8) == 2205 and abs(u8[0] - 128) <= 1, "unsigned 8-bit centres on 128",
          str(u8[0]))
    f32 = array.array("f", _tone(22050, 440.0, 0.1, "saw", 0.2, size=32))
    check(len(f32) == 2205 and max(abs(x) for x in f32) <= 0.2 + 1e-6,
          "float samples stay within the gain")
    try:
        _tone(22050, 440.0, 0.1, "sine", 0.2, size=24)
        raised = False
    except ValueError:
        raised = True
    check(raised, "unknown sample size rejected")


# ═══════════════════════════════════════════════════════════════════════
#  MAIN
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    sections = [
        ("FixedTicker", test_fixed_ticker),
        ("Catch-up Cap", test_catchup_cap),
        ("Stop", test_stop_is_idempotent),
        ("Reentrancy", test_no_reentrancy),
        ("RunController", test_run_controller_stops_on_terminal),
        ("Restart", test_restart_is_a_fresh_state),
        ("Intent Sampling", test_intent_sampled_each_tick),
        ("Event Bus", test_failing_handler_is_contained),
        ("Cues", test_cues_from_transitions),
        ("Cue Sink", test_controller_feeds_the_cue_sink),
        ("Tones", test_tone_buffers),
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
    print(f"  Scheduler Tests: {_passed} passed, {_failed} failed  (total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
