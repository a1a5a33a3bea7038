"""Move-code alphabet and path sequence encoding.

A route is serialised as a list of integer codes, one per step. Each code
names one of 16 step vectors: a unit move along x or y combined with a
height change of 0, +1, -1 or -2. The code numbering comes from iterating
axis, then sign, then height change, and must stay stable because stored
sequences depend on it.

Vectors use an upward-positive y axis while grid coordinates grow
downwards, so the y component is negated whenever a vector is applied to,
or read from, a grid path.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..models.level import SizeRequirement
from ..models.world import Cell, Column
from .rng import SeededRandom

DZ_OPTIONS = (0, 1, -1, -2)


@dataclass(frozen=True)
class StepVector:
    """One entry of the move alphabet."""
    dx: int
    dy: int
    dz: int
    code: int

    @property
    def key(self) -> Tuple[int, int, int]:
        return (self.dx, self.dy, self.dz)


def _build_vector_table() -> List[StepVector]:
    vectors: List[StepVector] = []
    code = 0
    for axis in (0, 1):
        for sign in (-1, 1):
            for dz in DZ_OPTIONS:
                dx = sign if axis == 0 else 0
                dy = sign if axis == 1 else 0
                vectors.append(StepVector(dx=dx, dy=dy, dz=dz, code=code))
                code += 1
    return vectors


VECTOR_TABLE: List[StepVector] = _build_vector_table()
CODE_BY_VECTOR: Dict[Tuple[int, int, int], int] = {vector.key: vector.code for vector in VECTOR_TABLE}
ALLOWED_DZ = frozenset(vector.dz for vector in VECTOR_TABLE)
CODE_COUNT = len(VECTOR_TABLE)


def step_vector(code: int) -> Optional[StepVector]:
    if not isinstance(code, int) or not 0 <= code < CODE_COUNT:
        return None
    return VECTOR_TABLE[code]


def code_for(dx: int, dy: int, dz: int) -> Optional[int]:
    """Code of a step vector, or None when it is not part of the alphabet."""
    return CODE_BY_VECTOR.get((dx, dy, dz))


def grid_delta(vector: StepVector) -> Tuple[int, int, int]:
    """Displacement applied to grid coordinates for a vector."""
    return (vector.dx, -vector.dy, vector.dz)


def has_alternate_predecessor(
    column: Column,
    used: Mapping[Column, int],
    current: Column,
    candidate_z: int,
    enabled: bool = False,
) -> bool:
    """
    Check whether ``column`` could be entered from a used column other than ``current``.

    A neighbouring used column counts when the height change from it to
    ``candidate_z`` is one the alphabet allows. The rule is off unless
    ``enabled`` is set, in which case it keeps routes free of alternative
    entry points.
    """
    if not enabled:
        return False
    neighbours = (
        Column(column.x + 1, column.y),
        Column(column.x - 1, column.y),
        Column(column.x, column.y + 1),
        Column(column.x, column.y - 1),
    )
    for neighbour in neighbours:
        if neighbour == current:
            continue
        neighbour_z = used.get(neighbour)
        if neighbour_z is not None and candidate_z - neighbour_z in ALLOWED_DZ:
            return True
    return False


def encode_path(path: Sequence[Cell]) -> Optional[List[int]]:
    """Codes for consecutive steps of a grid path; None if a step is not encodable."""
    codes: List[int] = []
    for previous, current in zip(path, path[1:]):
        code = code_for(current.x - previous.x, -(current.y - previous.y), current.z - previous.z)
        if code is None:
            return None
        codes.append(code)
    return codes


def relative_path(codes: Sequence[int], enforce_unique_predecessor: bool = False) -> Optional[List[Cell]]:
    """
    Replay codes from the origin.

    Returns:
        The visited cells starting at (0, 0, 0), or None for an empty
        sequence, an unknown code, a revisited column, or (when enforced)
        a step with an alternate predecessor.
    """
    if not codes:
        return None
    current = Cell(0, 0, 0)
    path = [current]
    used: Dict[Column, int] = {current.column: 0}

    for code in codes:
        vector = step_vector(code)
        if vector is None:
            return None
        dx, dy, dz = grid_delta(vector)
        nxt = Cell(current.x + dx, current.y + dy, current.z + dz)
        column = nxt.column
        if column in used:
            return None
        if has_alternate_predecessor(column, used, current.column, nxt.z, enforce_unique_predecessor):
            return None
        path.append(nxt)
        used[column] = nxt.z
        current = nxt

    return path


def vector_tuples(codes: Iterable[int]) -> List[Tuple[int, int, int]]:
    """(dx, dy, dz) triples for codes, skipping unknown codes."""
    tuples = []
    for code in codes:
        vector = step_vector(code)
        if vector is not None:
            tuples.append(vector.key)
    return tuples


def sequence_from_vectors(vectors: Iterable[Sequence[int]]) -> Optional[List[int]]:
    """Codes for raw triples; None if any triple is not in the alphabet."""
    codes: List[int] = []
    for vector in vectors:
        if len(vector) != 3:
            return None
        code = code_for(vector[0], vector[1], vector[2])
        if code is None:
            return None
        codes.append(code)
    return codes


def path_bounds(path: Sequence[Cell]) -> Optional[Tuple[int, int, int, int, int, int]]:
    """(min_x, max_x, min_y, max_y, min_z, max_z) of a path."""
    if not path:
        return None
    xs = [cell.x for cell in path]
    ys = [cell.y for cell in path]
    zs = [cell.z for cell in path]
    return (min(xs), max(xs), min(ys), max(ys), min(zs), max(zs))


def size_of_path(path: Sequence[Cell]) -> Optional[SizeRequirement]:
    bounds = path_bounds(path)
    if bounds is None:
        return None
    min_x, max_x, min_y, max_y, min_z, max_z = bounds
    return SizeRequirement(max_x - min_x + 1, max_y - min_y + 1, max_z - min_z + 1)


def required_size(codes: Sequence[int], enforce_unique_predecessor: bool = False) -> Optional[SizeRequirement]:
    """Minimal (width, depth, height) able to hold the route described by ``codes``."""
    path = relative_path(codes, enforce_unique_predecessor)
    if path is None:
        return None
    return size_of_path(path)


def expand_to_fit(width: int, depth: int, height: int, size: Optional[SizeRequirement]) -> SizeRequirement:
    """Grow world bounds so they are at least ``size`` on every axis."""
    if size is None:
        return SizeRequirement(width, depth, height)
    return SizeRequirement(max(width, size.width), max(depth, size.depth), max(height, size.height))


def start_for_sequence(
    path: Sequence[Cell],
    width: int,
    depth: int,
    height: int,
    rng: SeededRandom,
) -> Optional[Cell]:
    """
    Pick an offset that keeps a relative path inside the world.

    x and y are drawn uniformly from their legal ranges; z stays at 0 when
    that fits, otherwise it is drawn uniformly too.
    """
    bounds = path_bounds(path)
    if bounds is None:
        return None
    min_x, max_x, min_y, max_y, min_z, max_z = bounds
    x_low, x_high = -min_x, width - 1 - max_x
    y_low, y_high = -min_y, depth - 1 - max_y
    z_low, z_high = -min_z, height - 1 - max_z
    if x_low > x_high or y_low > y_high or z_low > z_high:
        return None

    x = rng.randint_inclusive(x_low, x_high)
    y = rng.randint_inclusive(y_low, y_high)
    z = 0 if z_low <= 0 <= z_high else rng.randint_inclusive(z_low, z_high)
    return Cell(x, y, z)


def offset_path(path: Sequence[Cell], start: Cell) -> List[Cell]:
    return [Cell(cell.x + start.x, cell.y + start.y, cell.z + start.z) for cell in path]
