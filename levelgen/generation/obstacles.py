import random
from typing import List, Set, Tuple

from .cells import Coord2D, Grid
from .config import GenerationParams
from .rooms import Room

# Rooms need at least a 3x3 interior before anything is scattered in them.
MIN_INTERIOR_AREA = 9


def connection_points(grid: Grid, room: Room) -> Set[Coord2D]:
    """Perimeter cells of ``room`` that touch passable space outside it."""
    points = set()
    for x, y in room.cells():
        if not room.on_perimeter(x, y):
            continue
        for _, nx, ny in grid.neighbors4(x, y):
            if not room.contains(nx, ny) and grid[nx][ny].passable:
                points.add((x, y))
                break
    return points


def eligible_cells(grid: Grid, room: Room) -> List[Coord2D]:
    """Interior cells (row-major) keeping a one-cell clearance around every entry."""
    if room.interior_area < MIN_INTERIOR_AREA:
        return []
    entries = connection_points(grid, room)
    out = []
    for x, y in room.interior_cells():
        if any(max(abs(x - ex), abs(y - ey)) <= 1 for ex, ey in entries):
            continue
        out.append((x, y))
    return out


def place_obstacles(grid: Grid, rooms: List[Room], params: GenerationParams, rng: random.Random) -> List[Tuple[int, int]]:
    """Scatter obstacles inside large rooms; returns the converted coordinates.

    Eligible cells of every room are visited in one row-major scan of the
    grid, one draw each. The perimeter ring is never touched, so every entry
    of a room stays reachable from every other along it.
    """
    if not params.enable_obstacles:
        return []
    candidates: Set[Coord2D] = set()
    for room in rooms:
        candidates.update(eligible_cells(grid, room))
    placed = []
    for y in range(grid.height):
        for x in range(grid.width):
            if (x, y) in candidates and rng.random() < params.obstacle_density:
                grid[x][y].obstacle = True
                placed.append((x, y))
    return placed


__all__ = ["place_obstacles", "connection_points", "eligible_cells", "MIN_INTERIOR_AREA"]
