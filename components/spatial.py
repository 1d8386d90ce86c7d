"""components.spatial — Coordinates, hiding spots and the arena.

All coordinates are in arena units (1 u = 1 px at 800×600).
The arena is static data: built once, never mutated.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field

from core.constants import ARENA_WIDTH, ARENA_HEIGHT, REFERENCE_TREES


@dataclass(frozen=True)
class Vector2:
    x: float = 0.0        # u
    y: float = 0.0        # u

    def distance_to(self, other: "Vector2") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Obstacle:
    """A tree.  ``(x, y)`` is the point the player hides next to."""
    x: float = 0.0
    y: float = 0.0


# Above this many obstacles the arena buckets them by grid cell.
_GRID_MIN_OBSTACLES = 32


class ObstacleGrid:
    """Uniform-grid bucket index for nearest-obstacle queries.

    Only cells that can hold an obstacle within *radius* of the query
    point are scanned, so a query costs O(obstacles per cell) instead of
    O(all obstacles).
    """

    def __init__(self, obstacles: tuple[Obstacle, ...], cell: float):
        self.cell = cell
        self._cells: dict[tuple[int, int], list[Obstacle]] = {}
        for ob in obstacles:
            key = (int(ob.x // cell), int(ob.y // cell))
            self._cells.setdefault(key, []).append(ob)

    def nearest_within(self, point: Vector2,
                       radius: float) -> tuple[Obstacle, float] | None:
        cx = int(point.x // self.cell)
        cy = int(point.y // self.cell)
        reach = int(math.ceil(radius / self.cell))
        best = None
        best_d = math.inf
        for gx in range(cx - reach, cx + reach + 1):
            for gy in range(cy - reach, cy + reach + 1):
                for ob in self._cells.get((gx, gy), ()):
                    d = math.hypot(point.x - ob.x, point.y - ob.y)
                    if d < best_d:
                        best, best_d = ob, d
        if best is None or best_d > radius:
            return None
        return best, best_d


@dataclass(frozen=True)
class Arena:
    """Bounded plane plus its fixed set of hiding spots."""
    width: float = ARENA_WIDTH
    height: float = ARENA_HEIGHT
    obstacles: tuple[Obstacle, ...] = ()
    _grid: ObstacleGrid | None = field(default=None, init=False,
                                       repr=False, compare=False)

    def __post_init__(self):
        # frozen dataclass: normalise the sequence and build the index once
        object.__setattr__(self, "obstacles", tuple(self.obstacles))
        if len(self.obstacles) >= _GRID_MIN_OBSTACLES:
            object.__setattr__(self, "_grid",
                               ObstacleGrid(self.obstacles, cell=64.0))

    @classmethod
    def reference(cls) -> "Arena":
        """The 800×600 forest with the nine reference trees."""
        return cls(obstacles=tuple(Obstacle(x, y) for x, y in REFERENCE_TREES))

    def nearest_obstacle(self, point: Vector2,
                         within: float = math.inf) -> tuple[Obstacle, float] | None:
        """Return ``(obstacle, distance)`` for the closest obstacle.

        Returns ``None`` if the arena has no obstacles, or none lies
        within *within* units.
        """
        if not self.obstacles:
            return None
        if self._grid is not None and math.isfinite(within):
            return self._grid.nearest_within(point, within)
        best = min(self.obstacles,
                   key=lambda ob: math.hypot(point.x - ob.x, point.y - ob.y))
        d = math.hypot(point.x - best.x, point.y - best.y)
        if d > within:
            return None
        return best, d

    def clamp(self, pos: Vector2, lo: float, hi_margin: float) -> Vector2:
        """Clamp *pos* into ``[lo, size - hi_margin]`` on both axes."""
        return Vector2(
            min(max(pos.x, lo), self.width - hi_margin),
            min(max(pos.y, lo), self.height - hi_margin),
        )
