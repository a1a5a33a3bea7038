"""Main route generation: weighted random walks and move-code routes."""
import logging
from typing import Dict, List, Optional, Tuple

from ..models.level import clamp
from ..models.world import Cell, Column
from .codec import VECTOR_TABLE, StepVector, grid_delta, has_alternate_predecessor
from .rng import SeededRandom

logger = logging.getLogger(__name__)

MIN_WALK_ATTEMPTS = 80
MIN_WEIGHT = 0.05


def neighbor_columns(column: Column, width: int, depth: int) -> List[Column]:
    """In-bounds 4-connected neighbours, in +x, -x, +y, -y order."""
    candidates = [
        Column(column.x + 1, column.y),
        Column(column.x - 1, column.y),
        Column(column.x, column.y + 1),
        Column(column.x, column.y - 1),
    ]
    return [c for c in candidates if 0 <= c.x < width and 0 <= c.y < depth]


def is_edge(column: Column, width: int, depth: int) -> bool:
    return column.x == 0 or column.x == width - 1 or column.y == 0 or column.y == depth - 1


def is_near_edge(column: Column, width: int, depth: int) -> bool:
    return column.x == 1 or column.x == width - 2 or column.y == 1 or column.y == depth - 2


def is_interior(column: Column, width: int, depth: int) -> bool:
    return not is_edge(column, width, depth)


def _walk_weight(
    candidate: Column,
    current: Column,
    last_direction: Optional[Tuple[int, int]],
    width: int,
    depth: int,
    avoid_edge_bias: float,
    turn_bias: float,
) -> float:
    weight = 1.0
    if is_edge(candidate, width, depth):
        weight *= 1.0 - avoid_edge_bias
    elif is_near_edge(candidate, width, depth):
        weight *= 1.0 - avoid_edge_bias * 0.5

    if last_direction is not None:
        delta = (candidate.x - current.x, candidate.y - current.y)
        if delta == last_direction:
            weight *= 1.0 - turn_bias
        else:
            weight *= 1.0 + turn_bias * 0.4

    return max(weight, MIN_WEIGHT)


def generate_walk(
    width: int,
    depth: int,
    start: Column,
    min_length: int,
    avoid_edge_bias: float,
    turn_bias: float,
    max_attempts: int,
    rng: SeededRandom,
    prefer_interior: bool = False,
) -> Optional[List[Column]]:
    """
    Self-avoiding weighted random walk over the column grid.

    The walk is accepted once it holds at least ``min_length`` columns and
    stands on an interior column. Walks that run into a dead end are thrown
    away and restarted from ``start``.

    Args:
        prefer_interior: Once past the first two columns, keep only
            non-edge candidates whenever one exists.

    Returns:
        The columns of the walk, or None when every attempt failed.
    """
    max_steps = width * depth * 4
    avoid_edge_bias = clamp(avoid_edge_bias, 0.0, 0.9)
    turn_bias = clamp(turn_bias, 0.0, 0.9)

    for _ in range(max(MIN_WALK_ATTEMPTS, max_attempts // 2)):
        path = [start]
        visited = {start}
        last_direction: Optional[Tuple[int, int]] = None

        for _ in range(max_steps):
            current = path[-1]
            if len(path) >= min_length and is_interior(current, width, depth):
                return path

            candidates = [c for c in neighbor_columns(current, width, depth) if c not in visited]
            if not candidates:
                break

            if prefer_interior and len(path) > 2:
                inner = [c for c in candidates if not is_edge(c, width, depth)]
                if inner:
                    candidates = inner

            weighted = [
                (c, _walk_weight(c, current, last_direction, width, depth, avoid_edge_bias, turn_bias))
                for c in candidates
            ]
            nxt = rng.choose_weighted(weighted)
            last_direction = (nxt.x - current.x, nxt.y - current.y)
            path.append(nxt)
            visited.add(nxt)

    logger.debug("No walk of length %d found on %dx%d grid", min_length, width, depth)
    return None


def step_path_target_height(steps: int, height: int) -> int:
    """Height a move-code route of ``steps`` moves climbs to."""
    return min(height - 1, max(2, min(steps, height - 1)))


def generate_step_path(
    steps: int,
    start: Cell,
    width: int,
    depth: int,
    height: int,
    rng: SeededRandom,
    enforce_unique_predecessor: bool = False,
) -> Optional[Tuple[List[int], List[Cell]]]:
    """
    Build a route of exactly ``steps`` moves from the move-code alphabet.

    Heights are kept inside a corridor so that the route only touches its
    target height on the last step and can still reach it from anywhere
    along the way. Each column is used once.

    Returns:
        (codes, cells) with ``len(cells) == steps + 1``, or None when the
        route boxed itself in.
    """
    target = step_path_target_height(steps, height)
    codes: List[int] = []
    path = [start]
    used: Dict[Column, int] = {start.column: start.z}
    current = start

    for step_index in range(steps):
        remaining = steps - step_index - 1
        min_z = max(0, target - remaining)
        max_z = target if remaining == 0 else target - 1
        candidates: List[Tuple[StepVector, Cell]] = []
        for vector in VECTOR_TABLE:
            dx, dy, dz = grid_delta(vector)
            nxt = Cell(current.x + dx, current.y + dy, current.z + dz)
            if not (0 <= nxt.x < width and 0 <= nxt.y < depth):
                continue
            if nxt.z < 0 or nxt.z > target:
                continue
            column = nxt.column
            if column in used:
                continue
            if has_alternate_predecessor(column, used, current.column, nxt.z, enforce_unique_predecessor):
                continue
            if nxt.z < min_z or nxt.z > max_z:
                continue
            candidates.append((vector, nxt))

        if not candidates:
            return None
        vector, nxt = rng.choice(candidates)
        codes.append(vector.code)
        path.append(nxt)
        used[nxt.column] = nxt.z
        current = nxt

    return codes, path
