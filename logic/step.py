"""logic/step.py — The fixed-timestep simulation step.

One call advances one run by one tick::

    state = step(state, intent)                 # raises on misuse
    state = advance(state, intent)              # no-op once terminal

Per tick, in order:

1. Move the player one ``BASE_MOVE_SPEED`` per held direction, then
   clamp to the arena.  Diagonals are not normalised.
2. Hide test: player centre within ``TREE_HIDE_RANGE`` of a tree.
3. Each keeper closes in on the player by ``keeper_speed`` unless the
   player is hidden or the keeper is inside its deadzone.
4. Shared detection meter: grows by ``detection_rate`` if any keeper
   is within ``BASE_DETECTION_RANGE`` of a visible player, else decays.
5. High-water mark.
6. Terminal check: loss (meter full, or caught) beats the win clock.
7. Clock advance.

Keeper distances in steps 3–6 are measured from where the keeper
stood at the start of the tick.  The win check and the recorded
outcome use the clock *after* this tick's advance.

Night mode and the profile's ``vision_radius`` play no part here;
they only change what the renderer lets the player see.
"""

from __future__ import annotations
import math
from dataclasses import replace

from core.constants import (
    BASE_MOVE_SPEED, BASE_DETECTION_RANGE, TREE_HIDE_RANGE,
    KEEPER_DEADZONE, CATCH_RADIUS, PLAYER_SIZE, KEEPER_SIZE,
    DETECTION_MAX, DETECTION_DECAY,
)
from core.errors import InvalidStep
from core.events import EventBus, RunEnded
from components.spatial import Arena, Vector2
from components.difficulty import DifficultyProfile, profile_for
from components.state import SimState, MovementIntent, Phase, RunOutcome

_REFERENCE_ARENA = Arena.reference()

# Tolerance on the win clock so 900 × 0.05 s counts as 45 s.
_CLOCK_EPS = 1e-9


# ── Sub-steps ────────────────────────────────────────────────────────

def move_player(pos: Vector2, intent: MovementIntent,
                arena: Arena) -> tuple[Vector2, bool]:
    """Apply *intent* to the player's top-left corner.

    Returns ``(new_pos, moved)``.
    """
    x, y = pos.x, pos.y
    moved = False
    if intent.up:
        y -= BASE_MOVE_SPEED
        moved = True
    if intent.down:
        y += BASE_MOVE_SPEED
        moved = True
    if intent.left:
        x -= BASE_MOVE_SPEED
        moved = True
    if intent.right:
        x += BASE_MOVE_SPEED
        moved = True
    return arena.clamp(Vector2(x, y), 0.0, PLAYER_SIZE), moved


def player_center(pos: Vector2) -> Vector2:
    half = PLAYER_SIZE / 2
    return Vector2(pos.x + half, pos.y + half)


def is_hidden(player_pos: Vector2, arena: Arena) -> bool:
    """True if the player's centre is strictly inside hide range of a tree."""
    hit = arena.nearest_obstacle(player_center(player_pos),
                                 within=TREE_HIDE_RANGE)
    return hit is not None and hit[1] < TREE_HIDE_RANGE


def pursue(keeper: Vector2, target: Vector2, speed: float, hidden: bool,
           arena: Arena) -> tuple[Vector2, float]:
    """Greedy pursuit.  Returns ``(new_keeper_pos, distance_before_move)``."""
    dx = target.x - keeper.x
    dy = target.y - keeper.y
    distance = math.hypot(dx, dy)
    if hidden or distance <= KEEPER_DEADZONE:
        return keeper, distance
    moved = Vector2(keeper.x + dx / distance * speed,
                    keeper.y + dy / distance * speed)
    half = KEEPER_SIZE / 2
    return arena.clamp(moved, half, half), distance


def integrate_detection(level: float, exposed: bool,
                        profile: DifficultyProfile) -> float:
    if exposed:
        return min(DETECTION_MAX, level + profile.detection_rate)
    return max(0.0, level - DETECTION_DECAY)


# ── Step ─────────────────────────────────────────────────────────────

def step(state: SimState, intent: MovementIntent, *,
         arena: Arena | None = None,
         bus: EventBus | None = None) -> SimState:
    """Advance a RUNNING *state* by one tick and return the new state.

    Raises ``InvalidStep`` if *state* is not running or *intent* is not
    a ``MovementIntent``.  On the tick the run ends, one ``RunEnded``
    event is emitted on *bus* (if given) and attached as ``outcome``.
    """
    if state.phase is not Phase.RUNNING:
        raise InvalidStep(f"cannot step a run in phase {state.phase.value}")
    if not isinstance(intent, MovementIntent):
        raise InvalidStep(f"intent must be a MovementIntent, got {type(intent).__name__}")

    arena = arena or _REFERENCE_ARENA
    profile = profile_for(state.difficulty)

    # 1. player
    player, moved = move_player(state.player_pos, intent, arena)

    # 2. hide
    hidden = is_hidden(player, arena)

    # 3. keepers
    keepers: list[Vector2] = []
    distances: list[float] = []
    for keeper in state.keeper_positions:
        new_pos, dist = pursue(keeper, player, profile.keeper_speed,
                               hidden, arena)
        keepers.append(new_pos)
        distances.append(dist)

    # 4. detection: any keeper in range drives the shared meter
    exposed = not hidden and any(d < BASE_DETECTION_RANGE for d in distances)
    detection = integrate_detection(state.detection_level, exposed, profile)

    # 5. high-water mark
    max_detection = max(state.max_detection_reached, detection)

    # 6 + 7. terminal check against the advanced clock
    ticks = state.ticks + 1
    elapsed = ticks * state.tick_seconds
    caught = any(d < CATCH_RADIUS for d in distances)
    if detection >= DETECTION_MAX or caught:
        phase = Phase.LOST
    elif elapsed + _CLOCK_EPS >= profile.survive_seconds:
        phase = Phase.WON
    else:
        phase = Phase.RUNNING

    outcome = None
    if phase.terminal:
        outcome = RunOutcome(
            survived=phase is Phase.WON,
            elapsed_seconds=elapsed,
            max_detection_reached=max_detection,
            difficulty=state.difficulty,
            night_mode=state.night_mode,
        )
        if bus is not None:
            bus.emit(RunEnded(outcome=outcome))

    return replace(
        state,
        player_pos=player,
        keeper_positions=tuple(keepers),
        hidden=hidden,
        detection_level=detection,
        max_detection_reached=max_detection,
        ticks=ticks,
        phase=phase,
        moved=moved,
        outcome=outcome,
    )


def advance(state: SimState, intent: MovementIntent, *,
            arena: Arena | None = None,
            bus: EventBus | None = None) -> SimState:
    """Like ``step()`` but a finished or unstarted run is returned as is."""
    if state.phase is not Phase.RUNNING:
        return state
    return step(state, intent, arena=arena, bus=bus)
