import pytest

from levelgen.generation import GenerationParams, Grid, Room, resolve_elevation
from levelgen.generation.elevation import (
    MAX_SMOOTHING_PASSES,
    count_violations,
    seed_elevations,
    smooth_elevations,
)

from level_test_utils import carve_cells, carve_room


def _row(grid, y=0, xs=None):
    xs = xs if xs is not None else range(grid.width)
    return [grid[x][y].elevation for x in xs]


def test_bfs_floods_from_nearest_room():
    grid = Grid(10, 3)
    rooms = [carve_room(grid, Room(0, 0, 0, 2, 1, elevation=2)), carve_room(grid, Room(1, 6, 0, 2, 1, elevation=-1))]
    carve_cells(grid, [(x, 0) for x in range(2, 6)])
    reached = seed_elevations(grid, rooms)
    assert reached == 4
    assert _row(grid, xs=range(8)) == [2, 2, 2, 2, -1, -1, -1, -1]


def test_bfs_tie_goes_to_earlier_room():
    grid = Grid(10, 3)
    rooms = [carve_room(grid, Room(0, 0, 0, 2, 1, elevation=1)), carve_room(grid, Room(1, 7, 0, 2, 1, elevation=3))]
    carve_cells(grid, [(x, 0) for x in range(2, 7)])
    seed_elevations(grid, rooms)
    # (4, 0) is equidistant; room 0 was enqueued first
    assert _row(grid, xs=range(2, 7)) == [1, 1, 1, 3, 3]


def test_unreachable_corridor_keeps_zero():
    grid = Grid(10, 5)
    rooms = [carve_room(grid, Room(0, 0, 0, 2, 2, elevation=3))]
    carve_cells(grid, [(6, 4), (7, 4)])
    seed_elevations(grid, rooms)
    assert grid[6][4].elevation == 0 and grid[7][4].elevation == 0


def test_smoothing_nudges_one_step_per_pass():
    grid = Grid(5, 2)
    carve_cells(grid, [(0, 0), (1, 0)], elevation=0)
    carve_cells(grid, [(2, 0), (3, 0), (4, 0)], elevation=3)
    report = smooth_elevations(grid, tolerance=1)
    assert _row(grid) == [0, 1, 2, 3, 3]
    assert (report.passes, report.nudges, report.violations) == (2, 2, 0)
    assert report.converged


def test_smoothing_stops_at_pass_cap():
    grid = Grid(4, 1)
    carve_cells(grid, [(0, 0), (1, 0), (2, 0)], elevation=0)
    carve_cells(grid, [(3, 0)], elevation=6)
    report = smooth_elevations(grid, tolerance=1, max_passes=1)
    assert _row(grid) == [0, 0, 1, 5]
    assert report.passes == 1
    assert report.violations == 1 and not report.converged


def test_smoothing_respects_custom_tolerance():
    grid = Grid(3, 1)
    carve_cells(grid, [(0, 0)], elevation=0)
    carve_cells(grid, [(1, 0)], elevation=2)
    carve_cells(grid, [(2, 0)], elevation=4)
    report = smooth_elevations(grid, tolerance=2)
    assert report.nudges == 0 and report.passes == 1
    assert count_violations(grid, 1) == 2
    assert count_violations(grid, 2) == 0


def test_impassable_neighbors_are_ignored():
    grid = Grid(3, 1)
    carve_cells(grid, [(0, 0)], elevation=0)
    grid[1][0].elevation = 9  # solid cell
    carve_cells(grid, [(2, 0)], elevation=5)
    report = smooth_elevations(grid)
    assert report.nudges == 0 and report.violations == 0


def test_resolve_disabled_flattens_everything():
    grid = Grid(10, 10)
    room = carve_room(grid, Room(0, 1, 1, 3, 3, elevation=2))
    params = GenerationParams(width=10, height=10, enable_elevation=False)
    report = resolve_elevation(grid, [room], params)
    assert report.passes == 0 and report.nudges == 0
    assert all(c.elevation == 0 for col in grid.cells for c in col)


def test_resolve_enabled_seeds_then_smooths():
    grid = Grid(12, 3)
    rooms = [carve_room(grid, Room(0, 0, 0, 2, 1, elevation=-2)), carve_room(grid, Room(1, 10, 0, 2, 1, elevation=2))]
    carve_cells(grid, [(x, 0) for x in range(2, 10)])
    params = GenerationParams(width=12, height=10, enable_elevation=True, max_elevation=2)
    report = resolve_elevation(grid, rooms, params)
    assert report.seeded == 8
    assert report.converged
    assert count_violations(grid, 1) == 0
    values = _row(grid)
    assert min(values) >= -2 and max(values) <= 2


def test_pass_cap_constant():
    assert MAX_SMOOTHING_PASSES == 50
