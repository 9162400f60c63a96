import random
from typing import List, Tuple

from .cells import Grid
from .config import GenerationParams
from .rooms import Room


def connect_rooms(grid: Grid, rooms: List[Room], params: GenerationParams, rng: random.Random) -> List[Tuple[int, int, bool]]:
    """Carve an L-shaped channel between each consecutive pair of ordered rooms.

    One orientation draw per pair, in pair order, keeps the random stream
    position independent of channel geometry. Returns (from_id, to_id,
    horizontal_first) for each connection carved.
    """
    connections = []
    for prev, cur in zip(rooms, rooms[1:]):
        horizontal_first = rng.random() < 0.5
        if params.marble:
            carve_channel(grid, prev.center, cur.center, horizontal_first, params.channel_width, params.corner_radius)
        else:
            carve_channel(grid, prev.center, cur.center, horizontal_first, 1, 0)
        connections.append((prev.id, cur.id, horizontal_first))
    return connections


def band_offsets(width_tiles: int) -> range:
    """Perpendicular offsets covering exactly ``width_tiles`` cells around the axis."""
    return range(-((width_tiles - 1) // 2), width_tiles // 2 + 1)


def carve_channel(
    grid: Grid,
    a: Tuple[int, int],
    b: Tuple[int, int],
    horizontal_first: bool,
    width_tiles: int = 1,
    corner_radius: int = 0,
):
    """Carve an L path from a to b with a band of ``width_tiles`` cells.

    Horizontal-first runs along a's row to b's column, then down b's column;
    vertical-first is the mirror. When the path turns, a quarter ring of
    radius ``max(corner_radius, width_tiles // 2)`` is carved inside the joint.
    The radius never exceeds either leg, so the arc always meets both legs.
    """
    (x1, y1), (x2, y2) = a, b
    if horizontal_first:
        carve_wide_horizontal(grid, x1, x2, y1, width_tiles)
        carve_wide_vertical(grid, y1, y2, x2, width_tiles)
        joint = (x2, y1)
        back = (_sign(x1 - x2), 0)
        ahead = (0, _sign(y2 - y1))
    else:
        carve_wide_vertical(grid, y1, y2, x1, width_tiles)
        carve_wide_horizontal(grid, x1, x2, y2, width_tiles)
        joint = (x1, y2)
        back = (0, _sign(y1 - y2))
        ahead = (_sign(x2 - x1), 0)
    if back == (0, 0) or ahead == (0, 0):
        return  # straight run, nothing to round
    radius = min(max(corner_radius, width_tiles // 2), abs(x2 - x1), abs(y2 - y1))
    if radius > 0:
        carve_quarter_ring(grid, joint, back, ahead, radius, width_tiles)


def carve_wide_horizontal(grid: Grid, x1: int, x2: int, y: int, width_tiles: int):
    start, end = (x1, x2) if x1 <= x2 else (x2, x1)
    for x in range(start, end + 1):
        for dy in band_offsets(width_tiles):
            grid.set_passable(x, y + dy)


def carve_wide_vertical(grid: Grid, y1: int, y2: int, x: int, width_tiles: int):
    start, end = (y1, y2) if y1 <= y2 else (y2, y1)
    for y in range(start, end + 1):
        for dx in band_offsets(width_tiles):
            grid.set_passable(x + dx, y)


def carve_quarter_ring(
    grid: Grid,
    joint: Tuple[int, int],
    back: Tuple[int, int],
    ahead: Tuple[int, int],
    radius: int,
    width_tiles: int,
):
    """Approximate a rounded corner: cells between the inner and outer radius,
    limited to the quadrant spanned by the incoming leg (``back``) and the
    outgoing leg (``ahead``).

    The ring is at least two cells thick. Cells left without any passable
    cardinal neighbor once the ring is clipped at the grid edge are skipped.
    """
    cx, cy = joint
    half = max(width_tiles // 2, 1)
    inner = max(radius - half, 0)
    outer = radius + half
    qx = back[0] or ahead[0]
    qy = back[1] or ahead[1]
    ring = set()
    for dy in range(0, outer + 1):
        for dx in range(0, outer + 1):
            d2 = dx * dx + dy * dy
            x, y = cx + qx * dx, cy + qy * dy
            if inner * inner <= d2 <= outer * outer and grid.in_bounds(x, y):
                ring.add((x, y))
    for x, y in ring:
        if any((nx, ny) in ring or grid[nx][ny].passable for _, nx, ny in grid.neighbors4(x, y)):
            grid.set_passable(x, y)


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


__all__ = [
    "connect_rooms",
    "carve_channel",
    "carve_wide_horizontal",
    "carve_wide_vertical",
    "carve_quarter_ring",
    "band_offsets",
]
