import math
import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .cells import Grid
from .config import GenerationParams, TrendVector

# Placement attempts allowed per requested room before giving up.
ATTEMPTS_PER_ROOM = 10


@dataclass(frozen=True)
class Room:
    id: int
    x: int
    y: int
    w: int
    h: int
    elevation: int = 0

    def cells(self) -> Iterator[Tuple[int, int]]:
        for iy in range(self.y, self.y + self.h):
            for ix in range(self.x, self.x + self.w):
                yield ix, iy

    def interior_cells(self) -> Iterator[Tuple[int, int]]:
        """Cells not on the room's one-cell perimeter ring."""
        for iy in range(self.y + 1, self.y + self.h - 1):
            for ix in range(self.x + 1, self.x + self.w - 1):
                yield ix, iy

    @property
    def interior_area(self) -> int:
        return max(0, self.w - 2) * max(0, self.h - 2)

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.w // 2, self.y + self.h // 2)

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.w and self.y <= y < self.y + self.h

    def on_perimeter(self, x: int, y: int) -> bool:
        return self.contains(x, y) and (
            x in (self.x, self.x + self.w - 1) or y in (self.y, self.y + self.h - 1)
        )

    def intersects(self, other: "Room") -> bool:
        return not (
            self.x + self.w <= other.x
            or other.x + other.w <= self.x
            or self.y + self.h <= other.y
            or other.y + other.h <= self.y
        )

    def expanded(self, margin: int) -> "Room":
        return Room(self.id, self.x - margin, self.y - margin, self.w + 2 * margin, self.h + 2 * margin, self.elevation)

    def to_dict(self):
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h, "elevation": self.elevation}


@dataclass
class PlacementResult:
    rooms: List[Room]
    requested: int
    attempts: int

    @property
    def shortfall(self) -> bool:
        return len(self.rooms) < self.requested


def place_rooms(grid: Grid, params: GenerationParams, rng: random.Random) -> PlacementResult:
    """Rejection-sample non-overlapping rooms and carve them into the grid.

    Candidates whose margin-expanded box touches an accepted room are discarded.
    Accepted rooms are stably ordered by horizontal center, given ids in that
    order, and carved as passable cells owned by the room.
    """
    budget = params.rooms * ATTEMPTS_PER_ROOM
    placed: List[Room] = []
    attempts = 0
    while len(placed) < params.rooms and attempts < budget:
        attempts += 1
        w = rng.randint(params.min_room, params.max_room)
        h = rng.randint(params.min_room, params.max_room)
        if w >= params.width - 4 or h >= params.height - 4:
            continue
        x, y = _sample_origin(params, w, h, rng)
        candidate = Room(-1, x, y, w, h)
        if _overlaps_with_margin(candidate, placed, params.margin):
            continue
        elevation = _sample_elevation(candidate, params, rng) if params.enable_elevation else 0
        placed.append(Room(-1, x, y, w, h, elevation))

    placed.sort(key=lambda r: r.center[0])
    rooms = [Room(i, r.x, r.y, r.w, r.h, r.elevation) for i, r in enumerate(placed)]
    for room in rooms:
        for ix, iy in room.cells():
            cell = grid[ix][iy]
            cell.passable = True
            cell.room_id = room.id
            cell.elevation = room.elevation
    return PlacementResult(rooms=rooms, requested=params.rooms, attempts=attempts)


def _overlaps_with_margin(candidate: Room, existing: List[Room], margin: int) -> bool:
    grown = candidate.expanded(margin)
    return any(grown.intersects(r) for r in existing)


def _origin(params: GenerationParams) -> Tuple[float, float]:
    if params.start_point is not None:
        return float(params.start_point[0]), float(params.start_point[1])
    return params.width / 2.0, params.height / 2.0


def _trend_direction(trend: Optional[TrendVector]) -> Optional[Tuple[float, float]]:
    if trend is None:
        return None
    tx, ty = trend.horizontal
    norm = math.hypot(tx, ty)
    if norm == 0:
        return None
    return tx / norm, ty / norm


def _reach(params: GenerationParams) -> float:
    return (params.width + params.height) / 2.0


def _sample_origin(params: GenerationParams, w: int, h: int, rng: random.Random) -> Tuple[int, int]:
    max_x = params.width - w - 2
    max_y = params.height - h - 2
    direction = _trend_direction(params.trend)
    if direction is not None and rng.random() < params.trend.strength:
        ox, oy = _origin(params)
        dx, dy = direction
        reach = _reach(params)
        t = rng.uniform(0.0, reach)
        # Perpendicular jitter narrows as the trend gets stronger.
        spread = reach * (1.0 - params.trend.strength) / 2.0 + params.min_room
        j = rng.uniform(-spread, spread)
        cx = ox + dx * t - dy * j
        cy = oy + dy * t + dx * j
        x = min(max(1, int(round(cx)) - w // 2), max_x)
        y = min(max(1, int(round(cy)) - h // 2), max_y)
        return x, y
    return rng.randint(1, max_x), rng.randint(1, max_y)


def trend_progress(room: Room, params: GenerationParams) -> float:
    """Signed position of a room along the trend direction, clamped to [-1, 1].

    A trend without horizontal component applies its vertical skew uniformly (1.0).
    """
    direction = _trend_direction(params.trend)
    if direction is None:
        return 1.0
    ox, oy = _origin(params)
    cx, cy = room.center
    along = (cx - ox) * direction[0] + (cy - oy) * direction[1]
    return max(-1.0, min(1.0, along / _reach(params)))


def _sample_elevation(room: Room, params: GenerationParams, rng: random.Random) -> int:
    top = params.max_elevation
    base = rng.randint(-top, top)
    trend = params.trend
    if trend is None or trend.z == 0:
        return base
    skew = trend.z * trend.strength * top * trend_progress(room, params)
    return max(-top, min(top, int(round(base + skew))))


__all__ = ["Room", "PlacementResult", "place_rooms", "trend_progress", "ATTEMPTS_PER_ROOM"]
