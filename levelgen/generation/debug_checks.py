"""Structural invariant checks for generated levels.

Used by ``scripts/diagnose_seeds.py`` and the test-suite. ``analyze`` never
mutates the level; every entry of the returned dict is empty (or zero) for a
healthy level.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Dict, List, Set, Tuple

from .classifier import SLOPE_ELIGIBLE, classify_connectivity, connectivity_mask, mask_directions, slope_direction
from .elevation import count_violations
from .obstacles import connection_points
from .tiles import TileType


def margin_violations(level) -> List[Tuple[int, int]]:
    margin = level.params.margin
    out = []
    for i, a in enumerate(level.rooms):
        grown = a.expanded(margin)
        for b in level.rooms[i + 1:]:
            if grown.intersects(b):
                out.append((a.id, b.id))
    return out


def unreachable_rooms(level) -> List[int]:
    """Rooms not reachable from room 0 over open cells."""
    if not level.rooms:
        return []
    grid = level.grid
    first = level.rooms[0]
    start = (first.x, first.y)  # corners are perimeter cells, never obstacles
    seen: Set[Tuple[int, int]] = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for _, nx, ny in grid.neighbors4(x, y):
            if (nx, ny) not in seen and grid[nx][ny].is_open:
                seen.add((nx, ny))
                queue.append((nx, ny))
    return [r.id for r in level.rooms if not any(c in seen for c in r.cells())]


def tile_rule_violations(level) -> Dict[str, List[Tuple[int, int]]]:
    """Rotation and slope rule breaches. Empty lists in classic mode."""
    bad_rotation: List[Tuple[int, int]] = []
    bad_slope: List[Tuple[int, int]] = []
    if level.marble_tiles is None:
        return {"bad_rotations": bad_rotation, "slope_rule_violations": bad_slope}
    grid = level.grid
    for y, row in enumerate(level.marble_tiles):
        for x, tile in enumerate(row):
            if tile.rotation not in (0, 1, 2, 3):
                bad_rotation.append((x, y))
            cell = grid[x][y]
            if not cell.is_open:
                continue
            mask = connectivity_mask(grid, x, y)
            rule = classify_connectivity(mask, cell.room_id is not None)
            if rule is None:
                continue
            base = rule[0]
            actual = set(mask_directions(mask))
            if base in (TileType.CURVE_90, TileType.T_JUNCTION) and set(tile.connections()) != actual:
                bad_rotation.append((x, y))
            if base in SLOPE_ELIGIBLE:
                toward = slope_direction(grid, x, y)
                if tile.tile_type.is_slope != (toward is not None):
                    bad_slope.append((x, y))
                elif toward is not None and tile.rotation != int(toward):
                    bad_slope.append((x, y))
            elif tile.tile_type.is_slope:
                bad_slope.append((x, y))
    return {"bad_rotations": bad_rotation, "slope_rule_violations": bad_slope}


def obstacle_clearance_violations(level) -> List[Tuple[int, int]]:
    grid = level.grid
    out = []
    for room in level.rooms:
        entries = connection_points(grid, room)
        for x, y in room.cells():
            if not grid[x][y].obstacle:
                continue
            if room.on_perimeter(x, y) or any(max(abs(x - ex), abs(y - ey)) <= 1 for ex, ey in entries):
                out.append((x, y))
    return out


def analyze(level) -> Dict[str, Any]:
    elevation = 0
    if level.marble_tiles is not None and level.params.enable_elevation:
        elevation = count_violations(level.grid, level.params.max_elevation_change)
    res: Dict[str, Any] = {
        "margin_violations": margin_violations(level),
        "unreachable_rooms": unreachable_rooms(level),
        "elevation_violations": elevation,
        "obstacle_clearance_violations": obstacle_clearance_violations(level),
    }
    res.update(tile_rule_violations(level))
    return res


def issue_counts(res: Dict[str, Any]) -> Dict[str, int]:
    return {k: (v if isinstance(v, int) else len(v)) for k, v in res.items()}


__all__ = [
    "analyze",
    "issue_counts",
    "margin_violations",
    "unreachable_rooms",
    "tile_rule_violations",
    "obstacle_clearance_violations",
]
