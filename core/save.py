"""core/save.py — Local persistence for the outcome recorder.

Each record kind lives in its own JSON file in the save directory:

    stats.json          PlayerStats
    history.json        [GameRecord, ...]       newest first
    leaderboard.json    [LeaderboardEntry, ...] best score first
    achievements.json   {achievement_id: unlocked}

Reads never raise: a missing or corrupt file yields ``None`` and the
caller falls back to defaults.  Writes raise ``OSError`` /
``TypeError`` to the caller, which decides whether to swallow it.
"""

from __future__ import annotations
import json
import os
from pathlib import Path
from typing import Any

from core.tuning import get as _tun


def save_dir() -> Path:
    """The configured save directory (``[records] save_dir``)."""
    return Path(_tun("records", "save_dir", "saves"))


def get_save_file(name: str, directory: str | Path | None = None) -> Path:
    """Path of record file *name* (without extension)."""
    base = Path(directory) if directory is not None else save_dir()
    return base / f"{name}.json"


def write_json(path: Path, data: Any) -> Path:
    """Write *data* atomically (temp file + replace)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    os.replace(tmp, path)
    return path


def read_json(path: Path) -> Any | None:
    """Load *path*, or ``None`` if it is missing or unreadable."""
    if not path.exists():
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as ex:
        print(f"[SAVE] Error loading {path}: {ex}")
        return None


def remove(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
