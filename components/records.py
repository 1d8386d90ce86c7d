"""components.records — Persistent bookkeeping types.

These belong to the outcome recorder, not the simulation.  They are
plain dataclasses that round-trip through JSON via ``to_dict`` /
``from_dict``.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict, fields
from typing import Callable


def mode_name(night_mode: bool) -> str:
    return "night" if night_mode else "day"


@dataclass
class GameRecord:
    """One finished run, newest first in the history list."""
    difficulty: str
    mode: str
    time: float
    survived: bool
    date: str
    max_detection: float

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "GameRecord":
        return cls(
            difficulty=str(d.get("difficulty", "normal")),
            mode=str(d.get("mode", "day")),
            time=float(d.get("time", 0.0)),
            survived=bool(d.get("survived", False)),
            date=str(d.get("date", "")),
            max_detection=float(d.get("max_detection", 0.0)),
        )


@dataclass
class PlayerStats:
    games_played: int = 0
    games_won: int = 0
    total_time: float = 0.0
    best_time: float = 0.0
    easy_wins: int = 0
    normal_wins: int = 0
    hard_wins: int = 0
    nightmare_wins: int = 0
    hardcore_wins: int = 0
    night_wins: int = 0
    perfect_runs: int = 0
    current_streak: int = 0
    best_streak: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "PlayerStats":
        """Known fields, cast to their field type; bad values keep the default."""
        stats = cls()
        for f in fields(cls):
            if f.name not in d:
                continue
            kind = type(f.default)
            try:
                setattr(stats, f.name, kind(d[f.name]))
            except (TypeError, ValueError):
                print(f"[RECORDS] bad stats field {f.name}={d[f.name]!r}, using {f.default}")
        return stats


@dataclass
class LeaderboardEntry:
    player_name: str
    difficulty: str
    mode: str
    time: float
    date: str
    score: int

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "LeaderboardEntry":
        return cls(
            player_name=str(d.get("player_name", "")),
            difficulty=str(d.get("difficulty", "normal")),
            mode=str(d.get("mode", "day")),
            time=float(d.get("time", 0.0)),
            date=str(d.get("date", "")),
            score=int(d.get("score", 0)),
        )


@dataclass
class Achievement:
    id: str
    title: str
    description: str
    condition: Callable[[PlayerStats], bool] = field(repr=False, compare=False)
    unlocked: bool = False


def default_achievements() -> list[Achievement]:
    """Fresh (all locked) copy of the achievement list."""
    return [
        Achievement("first_win", "First Win", "Win your first game",
                    lambda s: s.games_won >= 1),
        Achievement("veteran", "Veteran", "Play 10 games",
                    lambda s: s.games_played >= 10),
        Achievement("master", "Master", "Win 5 games",
                    lambda s: s.games_won >= 5),
        Achievement("speedrunner", "Speedrunner", "Survive in 45 seconds",
                    lambda s: 0 < s.best_time <= 45),
        Achievement("survivor", "Survivor", "Last 90 seconds",
                    lambda s: s.best_time >= 90),
        Achievement("easy_master", "Rookie", "Win on easy",
                    lambda s: s.easy_wins >= 1),
        Achievement("normal_master", "Seasoned", "Win on normal",
                    lambda s: s.normal_wins >= 1),
        Achievement("hard_master", "Pro", "Win on hard",
                    lambda s: s.hard_wins >= 1),
        Achievement("nightmare_master", "Legend", "Win on nightmare",
                    lambda s: s.nightmare_wins >= 1),
        Achievement("hardcore_master", "Madman", "Win on hardcore",
                    lambda s: s.hardcore_wins >= 1),
        Achievement("night_owl", "Night Owl", "Win at night",
                    lambda s: s.night_wins >= 1),
        Achievement("ghost", "Ghost", "Win without being noticed",
                    lambda s: s.perfect_runs >= 1),
        Achievement("unstoppable", "Unstoppable", "Win 3 times on hard or above",
                    lambda s: s.hard_wins + s.nightmare_wins >= 3),
    ]


__all__ = [
    "GameRecord", "PlayerStats", "LeaderboardEntry", "Achievement",
    "default_achievements", "mode_name",
]
