"""logic/input_manager.py — Raw events → movement intent.

Sits between raw pygame events and the simulation.  The scene feeds
in raw events; the aggregator keeps the current ``MovementIntent`` and
a per-frame set of discrete *actions* for menus.  The step engine
never touches raw keycodes.

Usage (in game_scene)::

    self.input = InputAggregator()
    # each frame:
    self.input.begin_frame()
    for event in events:
        self.input.feed(event)

    if self.input.just("restart"):      # discrete press
        ...
    intent = self.input.intent()        # sampled once per tick

Keyboard movement: WASD, the same physical keys on a Russian layout
(ц ф ы в) and the arrow keys.  Touch: drag from where the finger went
down; past ``deadzone_px`` of total drag, every axis offset beyond
``axis_px`` sets that direction.  A left-button mouse drag behaves
like a touch.

``intent()`` returns an immutable snapshot.  It is rebuilt and swapped
in whole whenever the input changes, so a reader never sees a
half-updated value.
"""

from __future__ import annotations
import math
from enum import Enum, auto
import pygame

from core.constants import ARENA_WIDTH, ARENA_HEIGHT
from core.tuning import get as _tun
from components.state import MovementIntent, IDLE


# ── Input contexts ──────────────────────────────────────────────────

class InputContext(Enum):
    """Determines which key-bindings are active."""
    GAMEPLAY = auto()   # a run is on screen
    MENU     = auto()   # difficulty / stats / leaderboard screens
    TEXT     = auto()   # typing a leaderboard name


# ── Default key bindings ────────────────────────────────────────────

# Direction → keycodes.  SDL reports layout keycodes, so the Cyrillic
# letters arrive as their own code points.
_MOVE_BINDS: dict[str, tuple[int, ...]] = {
    "up":    (pygame.K_w, ord("ц"), pygame.K_UP),
    "down":  (pygame.K_s, ord("ы"), pygame.K_DOWN),
    "left":  (pygame.K_a, ord("ф"), pygame.K_LEFT),
    "right": (pygame.K_d, ord("в"), pygame.K_RIGHT),
}

_GAMEPLAY_ACTIONS: dict[str, tuple[int, ...]] = {
    "restart":      (pygame.K_r,),
    "back":         (pygame.K_ESCAPE,),
    "toggle_debug": (pygame.K_TAB,),
    "reload_tuning":(pygame.K_F5,),
    "confirm":      (pygame.K_RETURN, pygame.K_KP_ENTER),
}

_MENU_ACTIONS: dict[str, tuple[int, ...]] = {
    "ui_up":        (pygame.K_UP,),
    "ui_down":      (pygame.K_DOWN,),
    "ui_left":      (pygame.K_a, pygame.K_LEFT),
    "ui_right":     (pygame.K_d, pygame.K_RIGHT),
    "confirm":      (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE),
    "back":         (pygame.K_ESCAPE,),
    "toggle_night": (pygame.K_n,),
    "show_stats":   (pygame.K_s,),
    "show_board":   (pygame.K_l,),
    "clear_history":(pygame.K_c,),
    "tier_1":       (pygame.K_1,),
    "tier_2":       (pygame.K_2,),
    "tier_3":       (pygame.K_3,),
    "tier_4":       (pygame.K_4,),
    "tier_5":       (pygame.K_5,),
}


# ── InputAggregator ─────────────────────────────────────────────────

class InputAggregator:
    """Owns the current movement intent.

    Call ``begin_frame()`` before processing events and ``feed(event)``
    for each pygame event.  Then use ``just(action)`` for discrete
    presses and ``intent()`` for movement.
    """

    def __init__(self, arena_size: tuple[float, float] = (ARENA_WIDTH, ARENA_HEIGHT)):
        self.context: InputContext = InputContext.GAMEPLAY
        self.arena_size = arena_size
        # Movement keycodes currently down
        self._held_keys: set[int] = set()
        # Actions pressed *this frame* (rising edge)
        self._pressed: set[str] = set()
        # Touch / mouse drag: start and current point in arena coords
        self._touch_start: tuple[float, float] | None = None
        self._touch_now: tuple[float, float] | None = None
        self._touch_names: frozenset[str] = frozenset()
        # Raw KEYDOWNs for TEXT context, in arrival order
        self.text_events: list[pygame.event.Event] = []
        # Stash for raw events the scene still needs (e.g. QUIT)
        self.raw_events: list[pygame.event.Event] = []
        self._intent: MovementIntent = IDLE

    # ── frame lifecycle ─────────────────────────────────────────

    def begin_frame(self):
        """Call at the start of each frame before feeding events."""
        self._pressed.clear()
        self.text_events.clear()
        self.raw_events.clear()

    def feed(self, event: pygame.event.Event):
        """Feed a raw pygame event."""
        if event.type == pygame.QUIT:
            self.raw_events.append(event)
            return

        if self.context == InputContext.TEXT:
            if event.type == pygame.KEYDOWN:
                self.text_events.append(event)
            return

        if event.type == pygame.KEYDOWN:
            key = event.key
            if self.context == InputContext.GAMEPLAY and _is_move_key(key):
                self._held_keys.add(key)
                self._refresh()
            for action, keys in self._active_actions().items():
                if key in keys:
                    self._pressed.add(action)

        elif event.type == pygame.KEYUP:
            if event.key in self._held_keys:
                self._held_keys.discard(event.key)
                self._refresh()

        elif event.type == pygame.FINGERDOWN:
            self._touch_begin(self._finger_pos(event))
        elif event.type == pygame.FINGERMOTION:
            self._touch_move(self._finger_pos(event))
        elif event.type == pygame.FINGERUP:
            self._touch_end()

        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._touch_begin(event.pos)
        elif event.type == pygame.MOUSEMOTION and self._touch_start is not None:
            self._touch_move(event.pos)
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self._touch_end()

        else:
            self.raw_events.append(event)

    def set_context(self, context: InputContext):
        """Switch bindings.  Leaving gameplay drops any held movement."""
        if context != InputContext.GAMEPLAY:
            self.release_all()
        self.context = context

    def release_all(self):
        self._held_keys.clear()
        self._touch_start = None
        self._touch_now = None
        self._touch_names = frozenset()
        self._refresh()

    # ── queries ─────────────────────────────────────────────────

    def intent(self) -> MovementIntent:
        """The current movement intent snapshot."""
        return self._intent

    def just(self, action: str) -> bool:
        """True if the action was triggered this frame (rising edge)."""
        return action in self._pressed

    def any_pressed(self) -> set[str]:
        return set(self._pressed)

    @property
    def touch_active(self) -> bool:
        return self._touch_start is not None

    def touch_points(self) -> tuple[tuple[float, float], tuple[float, float]] | None:
        """``(start, current)`` of an active drag, for the on-screen stick."""
        if self._touch_start is None or self._touch_now is None:
            return None
        return self._touch_start, self._touch_now

    # ── internal ────────────────────────────────────────────────

    def _active_actions(self) -> dict[str, tuple[int, ...]]:
        if self.context == InputContext.GAMEPLAY:
            return _GAMEPLAY_ACTIONS
        if self.context == InputContext.MENU:
            return _MENU_ACTIONS
        return {}

    def _finger_pos(self, event) -> tuple[float, float]:
        # finger events carry normalised 0..1 coordinates
        w, h = self.arena_size
        return event.x * w, event.y * h

    def _touch_begin(self, pos):
        if self.context != InputContext.GAMEPLAY:
            return
        self._touch_start = (float(pos[0]), float(pos[1]))
        self._touch_now = self._touch_start
        self._touch_names = frozenset()
        self._refresh()

    def _touch_move(self, pos):
        if self._touch_start is None:
            return
        self._touch_now = (float(pos[0]), float(pos[1]))
        self._touch_names = drag_directions(self._touch_start, self._touch_now)
        self._refresh()

    def _touch_end(self):
        if self._touch_start is None:
            return
        self._touch_start = None
        self._touch_now = None
        self._touch_names = frozenset()
        self._refresh()

    def _refresh(self):
        if self._touch_start is not None:
            names = self._touch_names
        else:
            names = {d for d, keys in _MOVE_BINDS.items()
                     if any(k in self._held_keys for k in keys)}
        self._intent = MovementIntent.from_names(names)


def _is_move_key(key: int) -> bool:
    return any(key in keys for keys in _MOVE_BINDS.values())


def drag_directions(start: tuple[float, float],
                    now: tuple[float, float]) -> frozenset[str]:
    """Directions set by a drag from *start* to *now* (screen coords, y down)."""
    dx = now[0] - start[0]
    dy = now[1] - start[1]
    if math.hypot(dx, dy) <= _tun("input.touch", "deadzone_px", 15.0):
        return frozenset()
    axis = _tun("input.touch", "axis_px", 10.0)
    names = set()
    if abs(dx) > axis:
        names.add("right" if dx > 0 else "left")
    if abs(dy) > axis:
        names.add("down" if dy > 0 else "up")
    return frozenset(names)


def edit_text(text: str, events: list[pygame.event.Event],
              max_len: int = 16) -> tuple[str, str | None]:
    """Apply one frame of TEXT-context keys to *text*.

    Returns the new text and ``"submit"`` / ``"cancel"`` when Enter or
    Esc was pressed (keys after it in the same frame are ignored), or
    ``None`` while typing continues.
    """
    for ev in events:
        if ev.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            return text, "submit"
        if ev.key == pygame.K_ESCAPE:
            return text, "cancel"
        if ev.key == pygame.K_BACKSPACE:
            text = text[:-1]
            continue
        ch = getattr(ev, "unicode", "")
        if ch and ch.isprintable() and len(text) < max_len:
            text += ch
    return text, None
