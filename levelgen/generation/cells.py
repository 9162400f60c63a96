from typing import Iterator, List, Optional, Tuple

Coord2D = Tuple[int, int]

# Cardinal offsets in Direction order: north, east, south, west (north is y - 1).
NEIGHBOR_OFFSETS: Tuple[Coord2D, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))


class Cell:
    """Lightweight container for a level grid cell."""

    __slots__ = ("passable", "elevation", "room_id", "obstacle")

    def __init__(self, passable: bool = False, elevation: int = 0, room_id: Optional[int] = None):
        self.passable = passable
        self.elevation = elevation
        self.room_id = room_id
        self.obstacle = False

    @property
    def is_open(self) -> bool:
        return self.passable and not self.obstacle

    def to_dict(self):
        return {
            "passable": self.passable,
            "elevation": self.elevation,
            "room_id": self.room_id,
            "obstacle": self.obstacle,
        }


class Grid:
    """Column-major cell grid: ``cells[x][y]``."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.cells: List[List[Cell]] = [[Cell() for _ in range(height)] for _ in range(width)]

    def __getitem__(self, x: int) -> List[Cell]:
        return self.cells[x]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_passable(self, x: int, y: int, room_id: Optional[int] = None) -> bool:
        """Mark (x, y) passable if in bounds. Never clears an existing room owner."""
        if not self.in_bounds(x, y):
            return False
        cell = self.cells[x][y]
        cell.passable = True
        if room_id is not None:
            cell.room_id = room_id
        return True

    def neighbors4(self, x: int, y: int) -> Iterator[Tuple[int, int, int]]:
        """Yield (direction_index, nx, ny) for in-bounds cardinal neighbors."""
        for d, (dx, dy) in enumerate(NEIGHBOR_OFFSETS):
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                yield d, nx, ny

    def passable_cells(self) -> Iterator[Coord2D]:
        """Passable coordinates in row-major scan order (y outer, x inner)."""
        for y in range(self.height):
            for x in range(self.width):
                if self.cells[x][y].passable:
                    yield x, y

    def count_passable(self) -> int:
        return sum(1 for col in self.cells for c in col if c.passable)


__all__ = ["Cell", "Grid", "Coord2D", "NEIGHBOR_OFFSETS"]
