"""components.difficulty — Difficulty tiers and their profiles.

The profile table is closed and static: five tiers, one profile each.
It is deliberately *not* read from ``data/tuning.toml``; a tier that
isn't in the table is a caller bug and raises ``UnknownDifficulty``.

    profile = profile_for(Difficulty.HARD)
    profile.keeper_speed   # 2.0 u/tick
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from core.errors import UnknownDifficulty


class Difficulty(Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"
    NIGHTMARE = "nightmare"
    HARDCORE = "hardcore"

    @classmethod
    def parse(cls, tag: "str | Difficulty") -> "Difficulty":
        """Map a tag like ``"hard"`` to its tier."""
        if isinstance(tag, cls):
            return tag
        try:
            return cls(str(tag).strip().lower())
        except ValueError:
            raise UnknownDifficulty(tag) from None

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class DifficultyProfile:
    keeper_speed: float       # u/tick
    detection_rate: float     # %/tick while exposed
    survive_seconds: float    # s required to win
    vision_radius: float      # u, night-mode rendering only
    keeper_count: int = 1


PROFILES: dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY:      DifficultyProfile(1.0, 1.0, 45.0, 250.0),
    Difficulty.NORMAL:    DifficultyProfile(1.5, 2.0, 60.0, 200.0),
    Difficulty.HARD:      DifficultyProfile(2.0, 3.0, 75.0, 150.0),
    Difficulty.NIGHTMARE: DifficultyProfile(2.5, 4.0, 90.0, 120.0),
    Difficulty.HARDCORE:  DifficultyProfile(2.2, 3.5, 120.0, 140.0,
                                            keeper_count=2),
}


def profile_for(difficulty: "Difficulty | str") -> DifficultyProfile:
    """Return the profile for *difficulty* (tier or tag)."""
    tier = Difficulty.parse(difficulty)
    try:
        return PROFILES[tier]
    except KeyError:
        raise UnknownDifficulty(difficulty) from None
