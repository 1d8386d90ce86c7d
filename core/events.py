"""core/events.py — Run events and the bus that delivers them.

The simulation only *announces* things; the recorder, audio sink and
game scene *react* to them::

    bus = EventBus()
    bus.subscribe("RunEnded", recorder.on_run_ended)
    bus.subscribe("SoundCue", audio.on_cue)

    bus.emit(RunEnded(outcome=...))     # queued, nothing runs yet
    bus.drain()                         # handlers run here, FIFO

Handlers are keyed by event class name.  An event emitted from inside a
handler is delivered in the same ``drain()``.  A handler that raises is
reported and skipped: the rest of the handlers still get the event and
the event is never queued again, so a recorder that cannot write its
files cannot undo or repeat the end of a run.
"""

from __future__ import annotations
import traceback
from collections import Counter, defaultdict, deque
from dataclasses import dataclass
from typing import Any, Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from components.state import RunOutcome


# ── Events ───────────────────────────────────────────────────────────

@dataclass
class RunStarted:
    difficulty: str = ""
    night_mode: bool = False


@dataclass
class RunEnded:
    """Published once, on the tick a run is won or lost."""
    outcome: "RunOutcome"


@dataclass
class SoundCue:
    """A named audio cue: step, hide, danger, caught, escape."""
    name: str = ""


# ── Bus ──────────────────────────────────────────────────────────────

# Upper bound on events handled by one drain(); stops handler ping-pong
MAX_EVENTS_PER_DRAIN = 10_000


class EventBus:

    def __init__(self):
        self._queue: deque[Any] = deque()
        self._handlers: dict[str, list[Callable[[Any], None]]] = defaultdict(list)
        self._delivered: Counter[str] = Counter()
        self.handler_errors = 0

    def subscribe(self, event_type: str, handler: Callable[[Any], None]) -> None:
        self._handlers[event_type].append(handler)

    def emit(self, event) -> None:
        self._queue.append(event)

    def drain(self) -> int:
        """Deliver queued events in order.  Returns how many were handled."""
        handled = 0
        while self._queue and handled < MAX_EVENTS_PER_DRAIN:
            event = self._queue.popleft()
            name = type(event).__name__
            self._delivered[name] += 1
            handled += 1
            for handler in list(self._handlers.get(name, ())):
                try:
                    handler(event)
                except Exception as exc:
                    self.handler_errors += 1
                    print(f"[EVENT] handler error for {name}: {exc}")
                    traceback.print_exc()
        if self._queue:
            print(f"[EVENT] drain stopped with {len(self._queue)} events left")
        return handled

    def clear(self) -> None:
        self._queue.clear()

    def stats(self) -> dict[str, int]:
        """Events delivered so far, by type."""
        return dict(self._delivered)

    def pending_count(self) -> int:
        return len(self._queue)

    def __repr__(self) -> str:
        return f"EventBus(pending={len(self._queue)}, types={len(self._handlers)})"
