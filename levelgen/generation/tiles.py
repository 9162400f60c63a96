"""Marble tile vocabulary.

Tile types, connection directions and the MarbleTile record produced by the
classifier. Presentation (colors, wall heights) lives with the renderers; a
tile only knows its type, elevation, rotation, walls flag and metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Tuple


class TileType(str, Enum):
    EMPTY = "Empty"
    STRAIGHT = "Straight"
    CURVE_90 = "Curve90"
    T_JUNCTION = "TJunction"
    Y_JUNCTION = "YJunction"
    CROSS_JUNCTION = "CrossJunction"
    SLOPE_UP = "SlopeUp"
    SLOPE_DOWN = "SlopeDown"
    OPEN_PLATFORM = "OpenPlatform"
    OBSTACLE = "Obstacle"
    # Reserved vocabulary: no automatic placement rule emits these.
    MERGE = "Merge"
    ONE_WAY_GATE = "OneWayGate"
    LOOP_DE_LOOP = "LoopDeLoop"
    HALF_PIPE = "HalfPipe"
    LAUNCH_PAD = "LaunchPad"
    BRIDGE = "Bridge"
    TUNNEL = "Tunnel"

    @property
    def is_passable(self) -> bool:
        return self not in (TileType.EMPTY, TileType.OBSTACLE)

    @property
    def is_slope(self) -> bool:
        return self in (TileType.SLOPE_UP, TileType.SLOPE_DOWN)

    @property
    def has_default_walls(self) -> bool:
        return self in _WALLED_BY_DEFAULT

    def to_ascii(self, has_walls: bool) -> str:
        if self is TileType.EMPTY:
            return "#"
        if self is TileType.OBSTACLE:
            return "O"
        return "." if has_walls else "·"


_WALLED_BY_DEFAULT = frozenset(
    {
        TileType.STRAIGHT,
        TileType.CURVE_90,
        TileType.T_JUNCTION,
        TileType.Y_JUNCTION,
        TileType.CROSS_JUNCTION,
        TileType.SLOPE_UP,
        TileType.SLOPE_DOWN,
        TileType.MERGE,
        TileType.LOOP_DE_LOOP,
    }
)


class Direction(IntEnum):
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    def opposite(self) -> "Direction":
        return Direction((self + 2) % 4)

    def rotate(self, steps: int) -> "Direction":
        """Rotate clockwise by ``steps`` quarter turns."""
        return Direction((self + steps) % 4)

    @property
    def offset(self) -> Tuple[int, int]:
        return _OFFSETS[self]


_OFFSETS = {
    Direction.NORTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
}

N, E, S, W = Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST

# Connections at rotation 0; rotation r turns each one clockwise r times.
BASE_CONNECTIONS = {
    TileType.EMPTY: (),
    TileType.OBSTACLE: (),
    TileType.STRAIGHT: (N, S),
    TileType.CURVE_90: (N, E),
    TileType.T_JUNCTION: (N, E, S),
    TileType.Y_JUNCTION: (N, E, S),
    TileType.CROSS_JUNCTION: (N, E, S, W),
    TileType.SLOPE_UP: (N, S),
    TileType.SLOPE_DOWN: (N, S),
    TileType.OPEN_PLATFORM: (N, E, S, W),
    TileType.MERGE: (N, E, W),
    TileType.ONE_WAY_GATE: (N, S),
    TileType.LOOP_DE_LOOP: (N, S),
    TileType.HALF_PIPE: (N, S),
    TileType.LAUNCH_PAD: (N,),
    TileType.BRIDGE: (N, S),
    TileType.TUNNEL: (N, S),
}


@dataclass
class MarbleTile:
    tile_type: TileType = TileType.EMPTY
    elevation: int = 0
    rotation: int = 0
    has_walls: bool = False
    metadata: str = ""

    def __post_init__(self):
        self.rotation %= 4

    @classmethod
    def empty(cls) -> "MarbleTile":
        return cls()

    @classmethod
    def of(cls, tile_type: TileType, elevation: int = 0, rotation: int = 0, has_walls=None, metadata: str = ""):
        if has_walls is None:
            has_walls = tile_type.has_default_walls
        return cls(tile_type, elevation, rotation, has_walls, metadata)

    def connections(self) -> List[Direction]:
        return [d.rotate(self.rotation) for d in BASE_CONNECTIONS[self.tile_type]]

    def connects(self, direction: Direction) -> bool:
        return direction in self.connections()

    def compatible_with(self, other: "MarbleTile", direction: Direction) -> bool:
        """True when both tiles open toward each other at a traversable height.

        Slopes bridge one level; everything else must match elevation exactly.
        """
        if not self.connects(direction) or not other.connects(direction.opposite()):
            return False
        if self.tile_type.is_slope or other.tile_type.is_slope:
            return abs(self.elevation - other.elevation) <= 1
        return self.elevation == other.elevation

    def to_ascii(self) -> str:
        return self.tile_type.to_ascii(self.has_walls)

    def to_dict(self):
        return {
            "tile_type": self.tile_type.value,
            "elevation": self.elevation,
            "rotation": self.rotation,
            "has_walls": self.has_walls,
            "metadata": self.metadata,
        }


__all__ = ["TileType", "Direction", "MarbleTile", "BASE_CONNECTIONS"]
