"""Decoy branches that make the main route less obvious."""
import logging
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from ..models.level import BranchConfig, DeadEndBranch, DeadEndKind
from ..models.world import Cell, Column, manhattan_distance
from .codec import VECTOR_TABLE, grid_delta
from .path import neighbor_columns
from .rng import SeededRandom

logger = logging.getLogger(__name__)

BRANCH_ATTEMPTS = 80
BLOCKER_RISE = 2


def has_adjacent_path_column(
    column: Column,
    path_columns: Set[Column],
    width: int,
    depth: int,
    excluding: Optional[Column] = None,
) -> bool:
    for neighbour in neighbor_columns(column, width, depth):
        if excluding is not None and neighbour == excluding:
            continue
        if neighbour in path_columns:
            return True
    return False


def generate_branch(
    start: Cell,
    length: int,
    path_columns: Set[Column],
    reserved: Set[Column],
    width: int,
    depth: int,
    height: int,
    rng: SeededRandom,
    target: Optional[Cell] = None,
) -> Optional[List[Cell]]:
    """
    Grow ``length`` cells away from ``start`` using the move-code alphabet.

    Cells avoid reserved columns and never touch the main route sideways,
    except that the first step may stay next to its own start column. With
    a ``target`` the branch greedily heads for it, breaking ties randomly.
    """
    if length <= 0:
        return None
    start_column = start.column
    used = set(reserved)
    branch: List[Cell] = []
    current = start

    for step_index in range(length):
        candidates: List[Cell] = []
        for vector in VECTOR_TABLE:
            dx, dy, dz = grid_delta(vector)
            nxt = Cell(current.x + dx, current.y + dy, current.z + dz)
            if not (0 <= nxt.x < width and 0 <= nxt.y < depth):
                continue
            if not 0 <= nxt.z < height:
                continue
            if nxt.column in used:
                continue
            excluding = start_column if step_index == 0 else None
            if has_adjacent_path_column(nxt.column, path_columns, width, depth, excluding):
                continue
            candidates.append(nxt)

        if not candidates:
            return None
        if target is not None:
            best_distance = min(manhattan_distance(c, target) for c in candidates)
            nearest = [c for c in candidates if manhattan_distance(c, target) == best_distance]
            nxt = rng.choice(nearest)
        else:
            nxt = rng.choice(candidates)

        branch.append(nxt)
        used.add(nxt.column)
        current = nxt

    return branch


def split_branch_for_blocker(
    branch: Sequence[Cell],
    height: int,
    rng: SeededRandom,
) -> Optional[Tuple[List[Cell], Cell]]:
    """
    Cut a branch short and plug the column right after the cut.

    The blocker sits two levels above the last kept cell, so the branch
    visibly carries on but cannot be climbed past the cut.

    Returns:
        (kept cells, blocker), or None if the branch is too short or the
        blocker would leave the world.
    """
    if len(branch) < 2:
        return None
    cut_max = len(branch) - 2
    cut_index = 1 + rng.next_int(cut_max) if cut_max >= 1 else 0
    end = branch[cut_index]
    blocked = branch[cut_index + 1]
    blocker_z = end.z + BLOCKER_RISE
    if blocker_z >= height:
        return None
    return list(branch[:cut_index + 1]), Cell(blocked.x, blocked.y, blocker_z)


def generate_dead_ends(
    path: Sequence[Cell],
    width: int,
    depth: int,
    height: int,
    config: BranchConfig,
    rng: SeededRandom,
) -> List[DeadEndBranch]:
    """
    Grow blocked decoy routes and blind alleys off the main route.

    Blocked decoys start in the first third of the route and head for its
    last cell; blind alleys start anywhere after the first cell and wander.
    Kinds are shuffled so neither always gets the free space first. A kind
    that cannot be placed within its attempt budget is skipped.
    """
    blocked_main_count = max(0, config.main_route_count - 1)
    branch_count = max(0, config.dead_end_count)
    if blocked_main_count + branch_count <= 0 or len(path) <= 2:
        return []

    min_length = max(1, config.dead_end_min_length)
    max_length = max(min_length, config.dead_end_max_length)
    path_columns = {cell.column for cell in path}
    reserved = set(path_columns)
    goal = path[-1]

    kinds = [DeadEndKind.BLOCKED_MAIN] * blocked_main_count + [DeadEndKind.BRANCH] * branch_count
    rng.shuffle(kinds)

    dead_ends: List[DeadEndBranch] = []
    for kind in kinds:
        for _ in range(BRANCH_ATTEMPTS):
            if kind == DeadEndKind.BLOCKED_MAIN:
                start_index = rng.next_int(max(1, (len(path) - 2) // 3) + 1)
                length = max_length
                target: Optional[Cell] = goal
            else:
                start_index = 1 + rng.next_int(max(1, len(path) - 2))
                length = min_length + rng.next_int(max_length - min_length + 1)
                target = None

            branch = generate_branch(
                path[start_index], length, path_columns, reserved,
                width, depth, height, rng, target=target,
            )
            if branch is None:
                continue

            blocker: Optional[Cell] = None
            if kind == DeadEndKind.BLOCKED_MAIN:
                split = split_branch_for_blocker(branch, height, rng)
                if split is None:
                    continue
                branch, blocker = split

            dead_end = DeadEndBranch(points=branch, kind=kind, blocker=blocker)
            dead_ends.append(dead_end)
            reserved.update(dead_end.columns)
            break
        else:
            logger.debug("Gave up placing a %s dead end", kind.value)

    return dead_ends


def expand_columns(columns: Iterable[Column], width: int, depth: int, distance: int) -> Set[Column]:
    """Every in-bounds column within Manhattan ``distance`` of ``columns``."""
    columns = set(columns)
    if distance <= 0:
        return columns
    expanded: Set[Column] = set()
    for column in columns:
        for dx in range(-distance, distance + 1):
            for dy in range(-distance, distance + 1):
                if abs(dx) + abs(dy) > distance:
                    continue
                nx, ny = column.x + dx, column.y + dy
                if 0 <= nx < width and 0 <= ny < depth:
                    expanded.add(Column(nx, ny))
    return expanded


def build_blocked_columns(
    path_columns: Iterable[Column],
    dead_ends: Iterable[DeadEndBranch],
    width: int,
    depth: int,
) -> Set[Column]:
    """Columns decorations must keep out of: built geometry plus a one-column buffer."""
    blocked = expand_columns(path_columns, width, depth, 1)
    for dead_end in dead_ends:
        blocked |= expand_columns(dead_end.columns, width, depth, 1)
    return blocked
