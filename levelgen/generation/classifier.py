"""Connectivity based tile classification.

Each cell is classified from its four cardinal neighbors only. The open
neighbors form a bitmask (N=1, E=2, S=4, W=8) which selects a base tile type;
rotation is the smallest clockwise turn of that type's base connections that
lines up with the actual neighbors. A gentle one-level step next to a plain
run turns the tile into a slope.

The classifier reads the grid and never writes to it, so running it twice on
the same grid gives identical tiles.
"""

from __future__ import annotations

import json
from typing import Iterable, List, Optional, Sequence

from .cells import Grid
from .errors import ClassificationGap
from .rooms import Room
from .tiles import BASE_CONNECTIONS, Direction, MarbleTile, TileType

MASK_BITS = {Direction.NORTH: 1, Direction.EAST: 2, Direction.SOUTH: 4, Direction.WEST: 8}

# Base types that may become a slope when exactly one neighbor sits one level away.
SLOPE_ELIGIBLE = frozenset({TileType.STRAIGHT, TileType.CROSS_JUNCTION, TileType.OPEN_PLATFORM})


def mask_directions(mask: int) -> List[Direction]:
    return [d for d in Direction if mask & MASK_BITS[d]]


def connectivity_mask(grid: Grid, x: int, y: int) -> int:
    mask = 0
    for d, nx, ny in grid.neighbors4(x, y):
        if grid[nx][ny].is_open:
            mask |= MASK_BITS[Direction(d)]
    return mask


def rotation_for(tile_type: TileType, directions: Iterable[Direction], exact: bool = True) -> int:
    """Smallest clockwise rotation whose connections match ``directions``.

    With ``exact=False`` the rotated connections only need to cover them
    (a one-neighbor straight is still a two-ended piece).
    """
    wanted = set(directions)
    for r in range(4):
        have = {d.rotate(r) for d in BASE_CONNECTIONS[tile_type]}
        if have == wanted or (not exact and wanted <= have):
            return r
    raise ValueError(f"{tile_type.value} cannot connect {sorted(d.name for d in wanted)}")


def classify_connectivity(mask: int, in_room: bool):
    """Map a connectivity mask to ``(tile_type, rotation, metadata)``.

    Returns None when no rule applies (no neighbors outside a room).
    """
    dirs = mask_directions(mask)
    count = len(dirs)
    if count == 0:
        if in_room:
            return TileType.OPEN_PLATFORM, 0, ""
        return None
    if count == 1:
        only = dirs[0]
        meta = json.dumps({"capped": only.opposite().name.lower()})
        return TileType.STRAIGHT, rotation_for(TileType.STRAIGHT, dirs, exact=False), meta
    if count == 2:
        a, b = dirs
        if a.opposite() == b:
            return TileType.STRAIGHT, rotation_for(TileType.STRAIGHT, dirs), ""
        return TileType.CURVE_90, rotation_for(TileType.CURVE_90, dirs), ""
    if count == 3:
        return TileType.T_JUNCTION, rotation_for(TileType.T_JUNCTION, dirs), ""
    return TileType.CROSS_JUNCTION, 0, ""


def slope_direction(grid: Grid, x: int, y: int) -> Optional[Direction]:
    """Direction of the single open neighbor exactly one level away, if the
    cell has one such neighbor and no steeper ones."""
    here = grid[x][y].elevation
    found = None
    for d, nx, ny in grid.neighbors4(x, y):
        other = grid[nx][ny]
        if not other.is_open:
            continue
        diff = abs(other.elevation - here)
        if diff > 1:
            return None
        if diff == 1:
            if found is not None:
                return None
            found = Direction(d)
    return found


def classify_cell(grid: Grid, x: int, y: int, open_rooms: Optional[Sequence[int]] = None) -> MarbleTile:
    cell = grid[x][y]
    if not cell.passable:
        return MarbleTile.empty()
    if cell.obstacle:
        return MarbleTile.of(TileType.OBSTACLE, cell.elevation, has_walls=False)
    in_room = cell.room_id is not None
    mask = connectivity_mask(grid, x, y)
    rule = classify_connectivity(mask, in_room)
    if rule is None:
        raise ClassificationGap(x, y, mask)
    tile_type, rotation, metadata = rule
    if tile_type in SLOPE_ELIGIBLE:
        toward = slope_direction(grid, x, y)
        if toward is not None:
            nx, ny = x + toward.offset[0], y + toward.offset[1]
            tile_type = TileType.SLOPE_UP if grid[nx][ny].elevation > cell.elevation else TileType.SLOPE_DOWN
            rotation = int(toward)
    is_open = in_room and (open_rooms is None or cell.room_id in open_rooms)
    has_walls = not (is_open or tile_type is TileType.OPEN_PLATFORM)
    return MarbleTile(tile_type, cell.elevation, rotation, has_walls, metadata)


def classify_grid(grid: Grid, rooms: Optional[List[Room]] = None) -> List[List[MarbleTile]]:
    """Classify every cell, returning rows (``tiles[y][x]``).

    ``rooms`` lists the open rooms; their cells render without walls. When
    omitted every room is treated as open.
    """
    open_rooms = None if rooms is None else {r.id for r in rooms}
    return [[classify_cell(grid, x, y, open_rooms) for x in range(grid.width)] for y in range(grid.height)]


__all__ = [
    "MASK_BITS",
    "SLOPE_ELIGIBLE",
    "mask_directions",
    "connectivity_mask",
    "rotation_for",
    "classify_connectivity",
    "slope_direction",
    "classify_cell",
    "classify_grid",
]
