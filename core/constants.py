"""core/constants.py — Shared constants used across the codebase.

Centralises magic numbers so there's exactly one place to change them.

Unit System
-----------
All gameplay distances are measured in arena **units**, where:

    1 unit = 1 canvas pixel at the design resolution (800×600)

Standard units used throughout the codebase:

    Distance / position     u       (arena units)
    Speed                   u/tick  (per fixed simulation tick)
    Detection               %       (0 – 100)
    Time                    s       (seconds, real time)

The simulation advances in fixed ticks of ``TICK_MS`` milliseconds.
Speeds are per tick, not per second, so changing the tick rate changes
how fast the game plays.  The clock itself is kept as an integer tick
count; seconds are derived from it.

Position conventions:
    player   ``(x, y)`` is the sprite's top-left corner
    keeper   ``(x, y)`` is the sprite's centre
    tree     ``(x, y)`` is the trunk point the player hides next to

Distance Hierarchy (small → large):
    30 u   Hide range (player centre ↔ tree)
    40 u   Catch radius (keeper ↔ player, instant loss)
    50 u   Keeper deadzone (keeper stops closing in)
   150 u   Detection range (keeper notices the player)
"""

# ── Arena ───────────────────────────────────────────────────────────
ARENA_WIDTH = 800
ARENA_HEIGHT = 600
PLAYER_SIZE = 20
KEEPER_SIZE = 24
TREE_SIZE = 40            # render only

# ── Movement ────────────────────────────────────────────────────────
BASE_MOVE_SPEED = 3.0     # u/tick per active axis (diagonals not normalised)

# ── Perception ──────────────────────────────────────────────────────
TREE_HIDE_RANGE = 30.0
CATCH_RADIUS = 40.0
KEEPER_DEADZONE = 50.0
BASE_DETECTION_RANGE = 150.0

DETECTION_MAX = 100.0
DETECTION_DECAY = 1.0     # %/tick while unseen
DANGER_THRESHOLD = 70.0   # audio cue when the meter crosses this

# ── Timing ──────────────────────────────────────────────────────────
TICK_MS = 50
TICK_SECONDS = TICK_MS / 1000.0

# ── Start layout ────────────────────────────────────────────────────
PLAYER_START = (50.0, 50.0)
KEEPER_STARTS = (
    (700.0, 500.0),
    (700.0, 50.0),
)

# Reference hiding spots (tree trunk points)
REFERENCE_TREES = (
    (150.0, 100.0),
    (400.0, 150.0),
    (650.0, 120.0),
    (200.0, 300.0),
    (500.0, 280.0),
    (700.0, 400.0),
    (100.0, 500.0),
    (600.0, 500.0),
    (350.0, 450.0),
)

# ── Render palette ──────────────────────────────────────────────────
COLOR_BG_DAY = (26, 26, 26)
COLOR_BG_NIGHT = (10, 10, 10)
COLOR_TREE = (45, 80, 22)
COLOR_TRUNK = (74, 50, 40)
COLOR_KEEPER = (139, 0, 0)
COLOR_KEEPER_HAT = (255, 215, 0)
COLOR_PLAYER = (65, 105, 225)
COLOR_PLAYER_EDGE = (46, 92, 184)
COLOR_PLAYER_HIDDEN = (76, 175, 80)
COLOR_PLAYER_HIDDEN_EDGE = (69, 160, 73)
COLOR_PANEL = (44, 24, 16)
COLOR_ACCENT = (139, 0, 0)
COLOR_TEXT = (255, 255, 255)
COLOR_GOOD = (74, 222, 128)
