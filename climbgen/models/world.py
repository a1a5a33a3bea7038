"""Terrain data structures and the climbing queries built on them."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Any, Iterable, List, Optional, Sequence


@dataclass(frozen=True)
class Column:
    """A position on the ground grid, spanning every height level."""
    x: int
    y: int

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Cell:
    """A single voxel position."""
    x: int
    y: int
    z: int

    @property
    def column(self) -> Column:
        return Column(self.x, self.y)

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "z": self.z}


def manhattan_distance(a: Cell, b: Cell) -> int:
    """3D Manhattan distance between two cells."""
    return abs(a.x - b.x) + abs(a.y - b.y) + abs(a.z - b.z)


class World(ABC):
    """Common climbing capabilities shared by every terrain representation.

    Subclasses only need to answer ``is_solid``; standability and the
    landing-height movement rule are derived from it, so pathfinding and
    validation code is written once for both representations.
    """

    id: int
    width: int
    depth: int
    height: int

    @property
    @abstractmethod
    def start(self) -> Cell:
        """Cell the actor stands on when the level begins."""

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.depth

    @abstractmethod
    def is_solid(self, x: int, y: int, z: int) -> bool:
        """True when the cell holds a block; out-of-range cells are empty."""

    def is_standable(self, x: int, y: int, z: int) -> bool:
        """Solid with empty space (or the top of the world) directly above."""
        return self.is_solid(x, y, z) and not self.is_solid(x, y, z + 1)

    def standable_levels(self, x: int, y: int) -> List[int]:
        if not self.in_bounds(x, y):
            return []
        return [z for z in range(self.height) if self.is_standable(x, y, z)]

    def landing_height(self, current: Cell, column: Column) -> Optional[int]:
        """
        Level an actor standing on ``current`` ends at after stepping into ``column``.

        The highest standable level at most one above the current level wins;
        otherwise the actor drops to the highest standable level below it.
        Columns with nothing to stand on cannot be entered.
        """
        levels = self.standable_levels(column.x, column.y)
        if not levels:
            return None
        climbable = [z for z in levels if current.z <= z <= current.z + 1]
        if climbable:
            return max(climbable)
        drops = [z for z in levels if z < current.z]
        if drops:
            return max(drops)
        return None

    @property
    def max_level(self) -> int:
        """Highest standable level anywhere in the world (-1 when empty)."""
        best = -1
        for y in range(self.depth):
            for x in range(self.width):
                levels = self.standable_levels(x, y)
                if levels:
                    best = max(best, levels[-1])
        return best

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Level file entry for this world."""


class HeightFieldWorld(World):
    """Legacy terrain: one solid stack per column, ``heights[y][x]`` blocks tall."""

    def __init__(self, id: int, width: int, depth: int, start: Column, heights: Sequence[Sequence[int]]):
        self.id = id
        self.width = width
        self.depth = depth
        self.start_column = start
        self.heights = [list(row) for row in heights]
        self.height = max((h for row in self.heights for h in row), default=0)

    def height_at(self, x: int, y: int) -> int:
        """Stack height of a column; out-of-range columns read as holes."""
        if not (0 <= y < len(self.heights)):
            return 0
        row = self.heights[y]
        if not (0 <= x < len(row)):
            return 0
        return row[x]

    @property
    def start(self) -> Cell:
        top = self.height_at(self.start_column.x, self.start_column.y)
        return Cell(self.start_column.x, self.start_column.y, max(0, top - 1))

    @property
    def max_height(self) -> int:
        return self.height

    def is_solid(self, x: int, y: int, z: int) -> bool:
        return 0 <= z < self.height_at(x, y)

    def standable_levels(self, x: int, y: int) -> List[int]:
        top = self.height_at(x, y)
        return [top - 1] if top > 0 else []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "width": self.width,
            "depth": self.depth,
            "start": self.start_column.to_dict(),
            "heights": [list(row) for row in self.heights],
        }


class VoxelWorld(World):
    """Dense occupancy grid stored as a flat arena.

    Cell ``(x, y, z)`` lives at ``(z * depth + y) * width + x``. Reads outside
    the bounds are empty and writes outside the bounds are ignored.
    """

    def __init__(self, id: int, width: int, depth: int, height: int, start: Cell,
                 cells: Optional[bytearray] = None):
        self.id = id
        self.width = width
        self.depth = depth
        self.height = height
        self._start = start
        size = width * depth * height
        if cells is None:
            cells = bytearray(size)
        elif len(cells) != size:
            raise ValueError(f"Arena has {len(cells)} cells, expected {size}")
        self.cells = cells

    @classmethod
    def from_layers(cls, id: int, start: Cell, layers: Sequence[Sequence[Sequence[int]]]) -> "VoxelWorld":
        """Build from a nested ``layers[z][y][x]`` array."""
        height = len(layers)
        depth = len(layers[0]) if height else 0
        width = len(layers[0][0]) if depth else 0
        world = cls(id, width, depth, height, start)
        for z, layer in enumerate(layers):
            for y, row in enumerate(layer):
                for x, value in enumerate(row):
                    if value:
                        world.set(x, y, z)
        return world

    @classmethod
    def from_height_field(cls, source: HeightFieldWorld) -> "VoxelWorld":
        """Voxelise a height field: a column of height h is solid below h."""
        height = max(1, source.max_height)
        world = cls(source.id, source.width, source.depth, height, source.start)
        for y in range(source.depth):
            for x in range(source.width):
                top = source.height_at(x, y)
                if top > 0:
                    world.fill_pillar(x, y, top - 1)
        return world

    @property
    def start(self) -> Cell:
        return self._start

    def contains(self, x: int, y: int, z: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.depth and 0 <= z < self.height

    def index(self, x: int, y: int, z: int) -> int:
        return (z * self.depth + y) * self.width + x

    def get(self, x: int, y: int, z: int) -> int:
        if not self.contains(x, y, z):
            return 0
        return self.cells[self.index(x, y, z)]

    def set(self, x: int, y: int, z: int, value: int = 1) -> None:
        if self.contains(x, y, z):
            self.cells[self.index(x, y, z)] = 1 if value else 0

    def fill_pillar(self, x: int, y: int, top: int) -> None:
        """Make every level from 0 up to ``top`` (inclusive) solid."""
        for z in range(0, min(top, self.height - 1) + 1):
            self.set(x, y, z)

    def is_solid(self, x: int, y: int, z: int) -> bool:
        return self.get(x, y, z) != 0

    def is_supported(self, x: int, y: int, z: int) -> bool:
        """Ground level, or solid directly underneath."""
        return z == 0 or self.is_solid(x, y, z - 1)

    def count_layer(self, z: int) -> int:
        if not (0 <= z < self.height):
            return 0
        begin = self.index(0, 0, z)
        return sum(self.cells[begin:begin + self.width * self.depth])

    def solid_cells(self) -> Iterable[Cell]:
        for z in range(self.height):
            for y in range(self.depth):
                for x in range(self.width):
                    if self.cells[self.index(x, y, z)]:
                        yield Cell(x, y, z)

    @property
    def layers(self) -> List[List[List[int]]]:
        """Nested ``[z][y][x]`` copy of the arena."""
        return [
            [
                list(self.cells[self.index(0, y, z):self.index(0, y, z) + self.width])
                for y in range(self.depth)
            ]
            for z in range(self.height)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "width": self.width,
            "depth": self.depth,
            "height": self.height,
            "start": self._start.to_dict(),
            "layers": self.layers,
        }


# Baseline terrain returned whenever generation gives up
BASELINE_HEIGHTS = [
    [1, 1, 2, 2, 2],
    [1, 2, 2, 3, 2],
    [1, 2, 3, 3, 2],
    [1, 2, 3, 4, 2],
    [1, 1, 2, 2, 2],
]


def baseline_height_field(id: int = 1) -> HeightFieldWorld:
    """Fixed 5x5 level that is always climbable from its start."""
    return HeightFieldWorld(id=id, width=5, depth=5, start=Column(0, 4), heights=BASELINE_HEIGHTS)


def baseline_voxel_world(id: int = 1) -> VoxelWorld:
    return VoxelWorld.from_height_field(baseline_height_field(id))
