"""core/tuning.py — Data-driven tuning constants.

Loop timing, input thresholds, audio levels and record-keeping limits
have built-in defaults (``DEFAULTS``) which ``data/tuning.toml`` may
override key by key.  Any system can read a value with::

    from core.tuning import get
    tick_ms = get("loop", "tick_ms")

The difficulty table is not here — it is a closed table in
``components.difficulty``.

Hot-reload: call ``reload()`` to re-read the file.  In-game, press F5.
"""

from __future__ import annotations
import copy
import os
from pathlib import Path

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:
    try:
        import tomli as tomllib            # pip install tomli
    except ModuleNotFoundError:
        tomllib = None                     # type: ignore[assignment]


DEFAULTS: dict = {
    "loop": {
        "tick_ms": 50,
        "max_catchup_ticks": 5,
    },
    "input": {
        "touch": {
            "deadzone_px": 15.0,       # drag shorter than this = idle
            "axis_px": 10.0,           # per-axis offset that sets a flag
        },
    },
    "audio": {
        "enabled": True,
        "step_chance": 0.3,
        "volume": 0.5,
    },
    "records": {
        "save_dir": "saves",
        "leaderboard_size": 100,
        "history_size": 200,
    },
}

_data: dict = copy.deepcopy(DEFAULTS)
_path: Path | None = None


def default_path() -> Path:
    """``$FOREST_KEEPER_TUNING`` or ``data/tuning.toml`` under the project root."""
    env = os.environ.get("FOREST_KEEPER_TUNING")
    if env:
        return Path(env)
    return Path(__file__).resolve().parent.parent / "data" / "tuning.toml"


def load(path: str | Path | None = None) -> None:
    """Load (or reload) tuning overrides from *path* on top of ``DEFAULTS``."""
    global _data, _path

    _path = Path(path) if path is not None else default_path()
    _data = copy.deepcopy(DEFAULTS)

    if not _path.exists():
        print(f"[TUNING] {_path} not found — using defaults")
        return
    if tomllib is None:
        print("[TUNING] No TOML parser available (need Python 3.11+ or `pip install tomli`)")
        return

    with open(_path, "rb") as f:
        overrides = tomllib.load(f)
    count = _merge(_data, overrides)
    print(f"[TUNING] Applied {count} overrides from {_path}")


def reload() -> None:
    """Re-read the tuning file from disk (hot-reload)."""
    load(_path)


def get(section: str, key: str, default=None):
    """Read a tuning value.

    *section* uses dot-notation for nested tables, e.g. ``"input.touch"``.
    *default* is only used for keys missing from ``DEFAULTS`` too.

    >>> get("input.touch", "deadzone_px")
    15.0
    """
    node = _lookup(section)
    if isinstance(node, dict):
        return node.get(key, default)
    return default


def section(section_path: str) -> dict:
    """Return an entire section dict (shallow copy), or empty dict."""
    node = _lookup(section_path)
    return dict(node) if isinstance(node, dict) else {}


def _lookup(section_path: str):
    node = _data
    for part in section_path.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
    return node


def _merge(base: dict, overrides: dict) -> int:
    """Deep-merge *overrides* into *base*.  Returns the number of leaves set."""
    n = 0
    for k, v in overrides.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            n += _merge(base[k], v)
        else:
            base[k] = v
            n += 1
    return n
