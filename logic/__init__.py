"""logic — Game systems package.

Top-level modules
-----------------
step            — the fixed-timestep simulation step (pure)
scoring         — leaderboard score for a won run
scheduler       — fixed-rate tick driver + run controller
input_manager   — raw input → movement intent
cues            — audio cues derived from consecutive states
outcome         — history, stats, achievements, leaderboard
"""
