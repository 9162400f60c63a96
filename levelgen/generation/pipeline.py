"""Pipeline orchestration for level generation.

``generate`` validates parameters, then runs the stages strictly in order over
one shared grid: room placement, channel carving, elevation, tile
classification and obstacle placement. Every random draw comes from a single
``random.Random`` seeded once per call, so equal parameters give equal levels.
"""
from __future__ import annotations

import os
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..logging_utils import get_logger
from .cells import Grid
from .classifier import classify_grid
from .config import GenerationParams
from .elevation import resolve_elevation
from .errors import ElevationConvergenceWarning, GenerationDiagnostic, PlacementShortfall
from .metrics import init_metrics
from .obstacles import place_obstacles
from .rooms import Room, place_rooms
from .tiles import MarbleTile, TileType
from .tunnels import connect_rooms

log = get_logger("levelgen.pipeline")

# Upper bound for a randomly chosen seed when the caller supplies none.
RANDOM_SEED_MAX = 2**31 - 1


def metrics_enabled() -> bool:
    val = os.environ.get('LEVELGEN_ENABLE_GENERATION_METRICS', '1').lower()
    return val not in {'0', 'false', 'no', ''}


@dataclass
class Level:
    width: int
    height: int
    seed: int
    params: GenerationParams
    rooms: List[Room]
    grid: Grid
    marble_tiles: Optional[List[List[MarbleTile]]] = None
    diagnostics: List[GenerationDiagnostic] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def tiles(self) -> List[str]:
        """Plain rows: '#' for solid, '.' for passable."""
        return [
            ''.join('.' if self.grid[x][y].passable else '#' for x in range(self.width))
            for y in range(self.height)
        ]

    def tile_at(self, x: int, y: int) -> Optional[MarbleTile]:
        if self.marble_tiles is None:
            return None
        return self.marble_tiles[y][x]

    def count_tiles(self, *types: TileType) -> int:
        if self.marble_tiles is None:
            return 0
        return sum(1 for row in self.marble_tiles for t in row if t.tile_type in types)


def resolve_seed(seed: Optional[int]) -> int:
    # 0 is a valid deterministic seed; None means pick one.
    if seed is None:
        return random.randint(0, RANDOM_SEED_MAX)
    return seed


def generate(params: GenerationParams) -> Level:
    """Run the full generation pipeline and return the finished level.

    Raises ConfigurationError before any work when params are invalid and
    ClassificationGap when a passable cell matches no tile rule. Shortfalls
    and unconverged smoothing are recorded as diagnostics instead.
    """
    params.validate()
    seed = resolve_seed(params.seed)
    rng = random.Random(seed)
    enable_metrics = metrics_enabled()
    metrics: Dict[str, Any] = init_metrics() if enable_metrics else {}
    diagnostics: List[GenerationDiagnostic] = []

    if enable_metrics:
        start = time.perf_counter()
        phase_times = {}

        def _phase(label, fn, *a, **k):
            ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
            phase_times[label] = int((pe - ps) * 1000)
            return r
    else:
        def _phase(label, fn, *a, **k):
            return fn(*a, **k)

    grid = Grid(params.width, params.height)
    placement = _phase('place_rooms', place_rooms, grid, params, rng)
    rooms = placement.rooms
    log.debug(event="rooms_placed", seed=seed, rooms=len(rooms), attempts=placement.attempts)
    if placement.shortfall:
        diagnostics.append(PlacementShortfall(params.rooms, len(rooms), placement.attempts))

    connections = _phase('connect_rooms', connect_rooms, grid, rooms, params, rng)
    log.debug(event="channels_carved", seed=seed, channels=len(connections))

    level = Level(params.width, params.height, seed, params, rooms, grid, diagnostics=diagnostics, metrics=metrics)
    obstacles = []
    report = None
    if params.marble:
        report = _phase('resolve_elevation', resolve_elevation, grid, rooms, params)
        if not report.converged:
            diagnostics.append(ElevationConvergenceWarning(report.passes, report.violations))
        level.marble_tiles = _phase('classify', classify_grid, grid, rooms)
        obstacles = _phase('place_obstacles', place_obstacles, grid, rooms, params, rng)
        if obstacles:
            # Neighbors of an obstacle lose a connection, so the whole grid is redone.
            level.marble_tiles = _phase('reclassify', classify_grid, grid, rooms)
        log.debug(event="tiles_classified", seed=seed, obstacles=len(obstacles))

    for diag in diagnostics:
        log.warn(event=diag.code, seed=seed, detail=diag.message)

    if enable_metrics:
        metrics['rooms_requested'] = params.rooms
        metrics['rooms_placed'] = len(rooms)
        metrics['placement_attempts'] = placement.attempts
        metrics['channels_carved'] = len(connections)
        metrics['passable_cells'] = grid.count_passable()
        if report is not None:
            metrics['corridor_cells_seeded'] = report.seeded
            metrics['smoothing_passes'] = report.passes
            metrics['smoothing_nudges'] = report.nudges
            metrics['elevation_violations'] = report.violations
        metrics['obstacles_placed'] = len(obstacles)
        metrics['slope_tiles'] = level.count_tiles(TileType.SLOPE_UP, TileType.SLOPE_DOWN)
        metrics['diagnostics'] = len(diagnostics)
        metrics['runtime_ms'] = int((time.perf_counter() - start) * 1000)
        metrics['phase_ms'] = phase_times

    log.info(
        event="level_generated",
        seed=seed,
        mode=params.mode,
        rooms=len(rooms),
        diagnostics=len(diagnostics),
        runtime_ms=metrics.get('runtime_ms'),
    )
    return level


__all__ = ["Level", "generate", "resolve_seed", "metrics_enabled"]
