"""Public level generation interface."""

from .cells import Cell, Grid
from .classifier import classify_grid
from .config import GenerationParams, TrendVector, coerce_seed, params_from_mapping
from .elevation import SmoothingReport, resolve_elevation
from .errors import (
    ClassificationGap,
    ConfigurationError,
    ElevationConvergenceWarning,
    GenerationDiagnostic,
    PlacementShortfall,
)
from .obstacles import place_obstacles
from .pipeline import Level, generate
from .rooms import Room, place_rooms
from .tiles import Direction, MarbleTile, TileType
from .tunnels import connect_rooms

__all__ = [
    "Cell",
    "Grid",
    "GenerationParams",
    "TrendVector",
    "coerce_seed",
    "params_from_mapping",
    "Room",
    "place_rooms",
    "connect_rooms",
    "SmoothingReport",
    "resolve_elevation",
    "classify_grid",
    "place_obstacles",
    "Level",
    "generate",
    "Direction",
    "MarbleTile",
    "TileType",
    "ConfigurationError",
    "ClassificationGap",
    "GenerationDiagnostic",
    "PlacementShortfall",
    "ElevationConvergenceWarning",
]
