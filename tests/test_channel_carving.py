import random

import pytest

from levelgen.generation import GenerationParams, Grid, Room, classify_grid, connect_rooms, generate
from levelgen.generation.tunnels import band_offsets, carve_channel, carve_quarter_ring

from level_test_utils import bfs_open, carve_room, passable_set


@pytest.mark.parametrize(
    "width,expected",
    [(1, [0]), (2, [0, 1]), (3, [-1, 0, 1]), (4, [-1, 0, 1, 2])],
)
def test_band_offsets_cover_exact_width(width, expected):
    assert list(band_offsets(width)) == expected


def test_sharp_l_horizontal_first():
    grid = Grid(12, 10)
    carve_channel(grid, (2, 2), (8, 6), True, 1, 0)
    expected = {(x, 2) for x in range(2, 9)} | {(8, y) for y in range(2, 7)}
    assert passable_set(grid) == expected


def test_sharp_l_vertical_first():
    grid = Grid(12, 10)
    carve_channel(grid, (8, 6), (2, 2), False, 1, 0)
    expected = {(8, y) for y in range(2, 7)} | {(x, 2) for x in range(2, 9)}
    assert passable_set(grid) == expected


def test_wide_straight_run_has_no_arc():
    grid = Grid(12, 10)
    carve_channel(grid, (1, 3), (7, 3), True, 2, 5)
    cells = passable_set(grid)
    assert {y for _, y in cells} == {3, 4}
    assert all((x, 3) in cells and (x, 4) in cells for x in range(1, 8))


def test_rounded_corner_fills_inside_of_turn():
    grid = Grid(16, 16)
    carve_channel(grid, (2, 2), (12, 12), True, 1, 3)
    cells = passable_set(grid)
    # joint at (12, 2); the arc bulges toward (2, 12)
    assert (10, 4) in cells
    assert (11, 3) not in cells  # inside inner radius
    assert (9, 5) not in cells  # beyond outer radius
    assert (13, 1) not in cells  # wrong quadrant
    assert bfs_open(grid, (2, 2)) == cells


def test_quarter_ring_is_connected_for_large_radius():
    grid = Grid(30, 30)
    carve_quarter_ring(grid, (15, 15), (-1, 0), (0, 1), 9, 1)
    cells = passable_set(grid)
    start = next(iter(sorted(cells)))
    assert bfs_open(grid, start) == cells
    assert all(x <= 15 and y >= 15 for x, y in cells)


def test_carving_clips_at_grid_edge():
    grid = Grid(10, 10)
    carve_channel(grid, (0, 0), (9, 9), False, 4, 6)
    assert grid.width == 10 and len(grid.cells) == 10
    assert all(len(col) == 10 for col in grid.cells)
    cells = passable_set(grid)
    assert bfs_open(grid, (0, 0)) == cells
    tiles = classify_grid(grid)
    assert all(tiles[y][x].tile_type.is_passable for x, y in cells)


def test_arc_radius_is_limited_by_short_legs():
    grid = Grid(15, 10)
    carve_channel(grid, (10, 7), (12, 6), False, 3, 6)
    cells = passable_set(grid)
    assert (10, 8) in cells
    # a radius-6 arc would have reached the bottom row
    assert not any((x, 9) in cells for x in range(15))
    assert all(9 <= x <= 12 and 5 <= y <= 8 for x, y in cells)
    assert bfs_open(grid, (10, 7)) == cells
    classify_grid(grid)


def test_clipped_ring_never_leaves_isolated_cells():
    grid = Grid(15, 10)
    # only (14, 9) of this ring is in bounds, and it touches nothing
    carve_quarter_ring(grid, (10, 6), (0, 1), (1, 0), 6, 1)
    assert grid.count_passable() == 0


@pytest.mark.parametrize("seed", [1124, 1125, 1126, 7, 42])
def test_small_map_with_large_corners_classifies(seed):
    level = generate(GenerationParams(seed=seed, width=15, height=10, channel_width=3, corner_radius=6))
    for x, y in passable_set(level.grid):
        assert any(level.grid[nx][ny].passable for _, nx, ny in level.grid.neighbors4(x, y)), (x, y)
    assert level.marble_tiles is not None


def test_carving_keeps_room_ownership_and_elevation():
    grid = Grid(20, 10)
    room = carve_room(grid, Room(0, 8, 2, 4, 4, elevation=2))
    carve_channel(grid, (1, 3), (18, 3), True, 2, 2)
    for x, y in room.cells():
        assert grid[x][y].room_id == 0
        assert grid[x][y].elevation == 2
    assert grid[1][3].room_id is None and grid[1][3].elevation == 0


def _two_rooms(grid):
    a = carve_room(grid, Room(0, 2, 2, 4, 4))
    b = carve_room(grid, Room(1, 20, 10, 5, 5))
    return [a, b]


def test_connect_rooms_links_consecutive_pairs():
    params = GenerationParams(width=30, height=20, seed=3)
    grid = Grid(params.width, params.height)
    rooms = _two_rooms(grid)
    rooms.append(carve_room(grid, Room(2, 26, 2, 3, 3)))
    links = connect_rooms(grid, rooms, params, random.Random(3))
    assert [(a, b) for a, b, _ in links] == [(0, 1), (1, 2)]
    reach = bfs_open(grid, rooms[0].center)
    for r in rooms:
        assert r.center in reach


def test_classic_mode_carves_single_width_tunnels():
    params = GenerationParams(width=30, height=20, mode="classic", channel_width=3, corner_radius=4)
    grid = Grid(params.width, params.height)
    rooms = _two_rooms(grid)
    before = passable_set(grid)
    (_, _, horizontal_first), = connect_rooms(grid, rooms, params, random.Random(8))
    added = passable_set(grid) - before
    (x1, y1), (x2, y2) = rooms[0].center, rooms[1].center
    if horizontal_first:
        path = {(x, y1) for x in range(x1, x2 + 1)} | {(x2, y) for y in range(y1, y2 + 1)}
    else:
        path = {(x1, y) for y in range(y1, y2 + 1)} | {(x, y2) for x in range(x1, x2 + 1)}
    assert added == path - before


def test_orientation_draw_is_one_per_pair():
    params = GenerationParams(width=30, height=20)
    rng = random.Random(99)
    grid = Grid(params.width, params.height)
    connect_rooms(grid, _two_rooms(grid), params, rng)
    reference = random.Random(99)
    reference.random()
    assert rng.random() == reference.random()
