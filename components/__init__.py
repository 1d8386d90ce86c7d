"""components — Data model dataclasses, organised by domain.

Submodules
----------
spatial        Vector2, Obstacle, Arena, ObstacleGrid
difficulty     Difficulty, DifficultyProfile, PROFILES, profile_for
state          MovementIntent, Phase, RunOutcome, SimState
records        GameRecord, PlayerStats, LeaderboardEntry, Achievement
dev_log        DevLog

All public names are re-exported here so code can do
``from components import SimState``.
"""

# ── Spatial ──────────────────────────────────────────────────────────
from components.spatial import Vector2, Obstacle, Arena, ObstacleGrid

# ── Difficulty ───────────────────────────────────────────────────────
from components.difficulty import Difficulty, DifficultyProfile, PROFILES, profile_for

# ── Run state ────────────────────────────────────────────────────────
from components.state import MovementIntent, IDLE, Phase, RunOutcome, SimState

# ── Records ──────────────────────────────────────────────────────────
from components.records import (
    GameRecord, PlayerStats, LeaderboardEntry, Achievement, default_achievements,
)

# ── Debug ────────────────────────────────────────────────────────────
from components.dev_log import DevLog

__all__ = [
    # spatial
    "Vector2", "Obstacle", "Arena", "ObstacleGrid",
    # difficulty
    "Difficulty", "DifficultyProfile", "PROFILES", "profile_for",
    # state
    "MovementIntent", "IDLE", "Phase", "RunOutcome", "SimState",
    # records
    "GameRecord", "PlayerStats", "LeaderboardEntry", "Achievement",
    "default_achievements",
    # debug
    "DevLog",
]
