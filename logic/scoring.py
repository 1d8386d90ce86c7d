"""logic/scoring.py — Leaderboard score for a won run.

    score = floor(seconds × 10 × difficulty × night bonus × stealth bonus)

Pure arithmetic over a ``RunOutcome``.  Lost runs have no score.
"""

from __future__ import annotations
import math

from core.errors import GameError
from components.difficulty import Difficulty
from components.state import RunOutcome

DIFFICULTY_MULTIPLIER: dict[Difficulty, int] = {
    Difficulty.EASY: 1,
    Difficulty.NORMAL: 2,
    Difficulty.HARD: 3,
    Difficulty.NIGHTMARE: 4,
    Difficulty.HARDCORE: 5,
}

NIGHT_BONUS = 1.5


def stealth_bonus(max_detection: float) -> float:
    if max_detection < 10:
        return 2.0
    if max_detection < 30:
        return 1.5
    return 1.0


def score_outcome(outcome: RunOutcome) -> int:
    """Score a won *outcome*.  Raises ``GameError`` for a lost one."""
    if not outcome.survived:
        raise GameError("lost runs are not scored")
    mult = DIFFICULTY_MULTIPLIER[outcome.difficulty]
    mode = NIGHT_BONUS if outcome.night_mode else 1.0
    stealth = stealth_bonus(outcome.max_detection_reached)
    return math.floor(outcome.elapsed_seconds * 10 * mult * mode * stealth)


def is_perfect_run(outcome: RunOutcome) -> bool:
    """Won without the meter ever reaching 10 %."""
    return outcome.survived and outcome.max_detection_reached < 10
