"""logic/scheduler.py — Fixed-rate tick driver and run controller.

The render loop runs at whatever frame rate pygame gives us; the
simulation runs at a fixed ``tick_ms``.  ``FixedTicker`` turns frame
deltas into whole ticks::

    ticker = FixedTicker(0.05, on_tick)
    ticker.advance(frame_dt)      # calls on_tick() 0..N times

``RunController`` owns one run: the current ``SimState``, the event
bus, and the ticker that steps it.  Each tick samples the input
aggregator's intent *once*, steps the state, and swaps the new state in
whole.  Intent changes made between ticks are seen at the next tick.
"""

from __future__ import annotations
import random
from typing import Callable, TYPE_CHECKING

from core.constants import TICK_MS, DANGER_THRESHOLD
from core.events import EventBus, RunStarted
from core.tuning import get as _tun
from components.spatial import Arena
from components.difficulty import Difficulty
from components.state import SimState, MovementIntent, IDLE
from logic.step import step
from logic.cues import cues_for

if TYPE_CHECKING:
    from components.dev_log import DevLog


class FixedTicker:
    """Accumulates frame time and fires ``on_tick`` once per whole tick.

    Ticks are never reentrant: a tick that triggers ``advance()`` again
    (directly or through a handler) is ignored.  After ``stop()`` no
    further ticks fire; calling ``stop()`` again does nothing.
    """

    def __init__(self, tick_seconds: float, on_tick: Callable[[], None],
                 max_catchup: int = 5):
        if tick_seconds <= 0:
            raise ValueError("tick_seconds must be positive")
        self.tick_seconds = tick_seconds
        self.on_tick = on_tick
        self.max_catchup = max(1, int(max_catchup))
        self.ticks_fired = 0
        self._acc = 0.0
        self._stopped = False
        self._in_tick = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    def advance(self, dt: float) -> int:
        """Feed *dt* seconds of wall time.  Returns ticks fired."""
        if self._stopped or self._in_tick or dt <= 0:
            return 0
        self._acc += dt
        fired = 0
        while self._acc >= self.tick_seconds and not self._stopped:
            if fired >= self.max_catchup:
                # Fell too far behind (window drag, breakpoint): drop the backlog
                self._acc = 0.0
                break
            self._acc -= self.tick_seconds
            self._in_tick = True
            try:
                self.on_tick()
            finally:
                self._in_tick = False
            fired += 1
            self.ticks_fired += 1
        return fired

    def stop(self) -> None:
        self._stopped = True
        self._acc = 0.0


class RunController:
    """Drives one run from start to its terminal tick.

    *intent_source* is any zero-argument callable returning a
    ``MovementIntent``, usually ``InputAggregator.intent``.
    """

    def __init__(self, intent_source: Callable[[], MovementIntent] | None = None,
                 bus: EventBus | None = None, arena: Arena | None = None,
                 log: "DevLog | None" = None,
                 rng: random.Random | None = None):
        self.intent_source = intent_source or (lambda: IDLE)
        self.bus = bus or EventBus()
        self.arena = arena or Arena.reference()
        self.log = log
        self.rng = rng or random.Random()
        self.state: SimState | None = None
        self.ticker: FixedTicker | None = None

    @property
    def tick_seconds(self) -> float:
        return float(_tun("loop", "tick_ms", TICK_MS)) / 1000.0

    def start_run(self, difficulty: "Difficulty | str",
                  night_mode: bool = False) -> SimState:
        """Begin a fresh run.  Any previous run's ticker is stopped."""
        self.stop()
        tick = self.tick_seconds
        self.state = SimState.new_run(difficulty, night_mode,
                                      tick_seconds=tick).start()
        self.ticker = FixedTicker(tick, self.tick,
                                  max_catchup=_tun("loop", "max_catchup_ticks", 5))
        self.bus.emit(RunStarted(difficulty=self.state.difficulty.value,
                                 night_mode=self.state.night_mode))
        print(f"[RUN] start {self.state.difficulty.value} "
              f"{'night' if night_mode else 'day'} tick={tick * 1000:.0f}ms")
        self.bus.drain()
        return self.state

    def update(self, dt: float) -> int:
        """Feed frame time; returns how many ticks ran."""
        if self.ticker is None:
            return 0
        return self.ticker.advance(dt)

    def tick(self) -> None:
        """One scheduled tick: sample intent, step, publish."""
        prev = self.state
        if prev is None or not prev.running:
            self.stop()
            return
        intent = self.intent_source()
        nxt = step(prev, intent, arena=self.arena, bus=self.bus)
        self.state = nxt

        for cue in cues_for(prev, nxt, self.rng):
            self.bus.emit(cue)
        if self.log is not None:
            _log_transitions(self.log, prev, nxt)

        if nxt.phase.terminal:
            self.stop()
            o = nxt.outcome
            print(f"[RUN] {'escaped' if o.survived else 'caught'} after "
                  f"{o.elapsed_seconds:.2f}s (max detection {o.max_detection_reached:.0f}%)")
        self.bus.drain()

    def stop(self) -> None:
        """Stop ticking.  Safe to call any number of times."""
        if self.ticker is not None:
            self.ticker.stop()

    @property
    def running(self) -> bool:
        return (self.state is not None and self.state.running
                and self.ticker is not None and not self.ticker.stopped)


def _log_transitions(log: "DevLog", prev: SimState, nxt: SimState) -> None:
    t = nxt.elapsed_time
    if nxt.hidden != prev.hidden:
        log.record("hide", "hidden" if nxt.hidden else "exposed", t=t)
    if nxt.detection_level > DANGER_THRESHOLD >= prev.detection_level:
        log.record("danger", f"detection {nxt.detection_level:.0f}%", t=t)
    if nxt.phase.terminal:
        log.record("end", nxt.phase.value, t=t,
                   details={"max_detection": nxt.max_detection_reached})
