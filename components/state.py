"""components.state — The per-run simulation state and its inputs.

``SimState`` is immutable.  The step engine never edits one; it builds
the next state with ``dataclasses.replace``.  Readers (renderer, HUD,
recorder) can hold on to any state safely.

Lifecycle::

    s = SimState.new_run(Difficulty.NORMAL, night_mode=False)   # NOT_STARTED
    s = s.start()                                              # RUNNING
    s = step(s, intent)  ...                                   # → WON / LOST

A terminal state is final.  Starting over means ``new_run()`` again.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum

from core.constants import PLAYER_START, KEEPER_STARTS, TICK_SECONDS
from components.spatial import Vector2
from components.difficulty import Difficulty, profile_for


@dataclass(frozen=True)
class MovementIntent:
    """Which direction keys are held.  Bits are independent."""
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False

    @property
    def any(self) -> bool:
        return self.up or self.down or self.left or self.right

    @classmethod
    def from_names(cls, names) -> "MovementIntent":
        """Build from an iterable like ``{"up", "left"}``."""
        names = set(names)
        return cls(up="up" in names, down="down" in names,
                   left="left" in names, right="right" in names)


IDLE = MovementIntent()


class Phase(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    WON = "won"
    LOST = "lost"

    @property
    def terminal(self) -> bool:
        return self in (Phase.WON, Phase.LOST)


@dataclass(frozen=True)
class RunOutcome:
    """Terminal-outcome event payload.  Emitted exactly once per run."""
    survived: bool
    elapsed_seconds: float
    max_detection_reached: float
    difficulty: Difficulty
    night_mode: bool


@dataclass(frozen=True)
class SimState:
    player_pos: Vector2
    keeper_positions: tuple[Vector2, ...]
    difficulty: Difficulty
    night_mode: bool = False
    hidden: bool = False
    detection_level: float = 0.0
    max_detection_reached: float = 0.0
    ticks: int = 0
    tick_seconds: float = TICK_SECONDS
    phase: Phase = Phase.NOT_STARTED
    moved: bool = False                   # last tick; audio only
    outcome: RunOutcome | None = None

    @classmethod
    def new_run(cls, difficulty: "Difficulty | str", night_mode: bool = False,
                tick_seconds: float = TICK_SECONDS) -> "SimState":
        """Fresh state with the player and keepers in opposite corners."""
        tier = Difficulty.parse(difficulty)
        count = profile_for(tier).keeper_count
        keepers = tuple(Vector2(*KEEPER_STARTS[i % len(KEEPER_STARTS)])
                        for i in range(count))
        return cls(
            player_pos=Vector2(*PLAYER_START),
            keeper_positions=keepers,
            difficulty=tier,
            night_mode=bool(night_mode),
            tick_seconds=tick_seconds,
        )

    def start(self) -> "SimState":
        if self.phase is not Phase.NOT_STARTED:
            return self
        return replace(self, phase=Phase.RUNNING)

    @property
    def elapsed_time(self) -> float:
        """Seconds simulated so far (derived from the tick count)."""
        return self.ticks * self.tick_seconds

    @property
    def running(self) -> bool:
        return self.phase is Phase.RUNNING

    @property
    def survived(self) -> bool:
        return self.phase is Phase.WON
