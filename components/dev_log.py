"""components.dev_log — Per-run transition log for the debug overlay.

The run controller writes one entry whenever something worth seeing
happens (player hides or steps out, the meter passes the danger line,
the run ends).  The game scene shows the newest lines under Tab.

    log = DevLog()
    log.record("hide", "hidden", t=12.35)
    log.lines(8)        # ["  12.35 [hide] hidden", ...]

Entries are dicts ``{"t", "cat", "msg", "details"}``; only the newest
``max_entries`` are kept.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field


@dataclass
class DevLog:
    max_entries: int = 200
    entries: deque = field(init=False, repr=False)

    def __post_init__(self):
        self.entries = deque(maxlen=self.max_entries)

    def record(self, cat: str, msg: str, *, t: float = 0.0,
               details: dict | None = None) -> None:
        self.entries.append({"t": t, "cat": cat, "msg": msg, "details": details})

    def clear(self) -> None:
        self.entries.clear()

    def recent(self, n: int = 20) -> list[dict]:
        """The *n* newest entries, oldest first."""
        return list(self.entries)[-n:] if n > 0 else []

    def lines(self, n: int = 8) -> list[str]:
        return [f"{e['t']:7.2f} [{e['cat']}] {e['msg']}" for e in self.recent(n)]
