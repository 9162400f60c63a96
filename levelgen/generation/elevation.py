"""Elevation assignment for carved levels.

Rooms carry their own elevation from placement. Corridor cells inherit the
elevation of whichever room reaches them first in a multi-source breadth-first
flood, then a bounded relaxation nudges cells one unit at a time until no two
adjacent passable cells differ by more than the configured step.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import List

from .cells import Grid
from .config import GenerationParams
from .rooms import Room

MAX_SMOOTHING_PASSES = 50


@dataclass
class SmoothingReport:
    passes: int = 0
    nudges: int = 0
    violations: int = 0
    seeded: int = 0

    @property
    def converged(self) -> bool:
        return self.violations == 0


def seed_elevations(grid: Grid, rooms: List[Room]) -> int:
    """Flood room elevations into corridors. Returns the number of corridor cells reached.

    Every room cell is enqueued up front (rooms in id order, cells in scan
    order) so the nearest room wins and ties go to the earliest enqueued source.
    Passable cells no room can reach keep elevation 0.
    """
    visited = [[False] * grid.height for _ in range(grid.width)]
    queue = deque()
    for room in rooms:
        for x, y in room.cells():
            if not grid.in_bounds(x, y) or visited[x][y]:
                continue
            visited[x][y] = True
            grid[x][y].elevation = room.elevation
            queue.append((x, y))
    reached = 0
    while queue:
        x, y = queue.popleft()
        level = grid[x][y].elevation
        for _, nx, ny in grid.neighbors4(x, y):
            if visited[nx][ny] or not grid[nx][ny].passable:
                continue
            visited[nx][ny] = True
            grid[nx][ny].elevation = level
            reached += 1
            queue.append((nx, ny))
    return reached


def smooth_elevations(grid: Grid, tolerance: int = 1, max_passes: int = MAX_SMOOTHING_PASSES) -> SmoothingReport:
    """Relax elevation steps larger than ``tolerance``.

    Each pass scans passable cells row-major; a cell with a too-steep neighbor
    (first match in N, E, S, W order) moves one unit toward that neighbor.
    Updates are in place, so later cells in the same pass see earlier nudges.
    """
    report = SmoothingReport()
    while report.passes < max_passes:
        report.passes += 1
        nudged = 0
        for x, y in grid.passable_cells():
            cell = grid[x][y]
            for _, nx, ny in grid.neighbors4(x, y):
                other = grid[nx][ny]
                if not other.passable:
                    continue
                diff = other.elevation - cell.elevation
                if abs(diff) > tolerance:
                    cell.elevation += 1 if diff > 0 else -1
                    nudged += 1
                    break
        report.nudges += nudged
        if not nudged:
            break
    report.violations = count_violations(grid, tolerance)
    return report


def count_violations(grid: Grid, tolerance: int = 1) -> int:
    """Number of adjacent passable pairs whose elevation differs by more than tolerance."""
    total = 0
    for x, y in grid.passable_cells():
        here = grid[x][y].elevation
        # east and south only so each pair counts once
        for nx, ny in ((x + 1, y), (x, y + 1)):
            if grid.in_bounds(nx, ny) and grid[nx][ny].passable and abs(grid[nx][ny].elevation - here) > tolerance:
                total += 1
    return total


def resolve_elevation(grid: Grid, rooms: List[Room], params: GenerationParams) -> SmoothingReport:
    if not params.enable_elevation:
        for column in grid.cells:
            for cell in column:
                cell.elevation = 0
        return SmoothingReport()
    seeded = seed_elevations(grid, rooms)
    report = smooth_elevations(grid, params.max_elevation_change)
    report.seeded = seeded
    return report


__all__ = [
    "MAX_SMOOTHING_PASSES",
    "SmoothingReport",
    "seed_elevations",
    "smooth_elevations",
    "count_violations",
    "resolve_elevation",
]
