"""Turn routes into terrain: support pillars, decoration and anchoring."""
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from ..models.level import BranchConfig, DeadEndBranch, VoxelConfig, clamp
from ..models.world import Cell, Column, HeightFieldWorld, VoxelWorld
from .dead_ends import build_blocked_columns, generate_dead_ends
from .rng import SeededRandom

PAIR_DIRECTIONS = [(1, 0), (-1, 0), (0, 1), (0, -1)]
ANCHOR_DISTANCE = 2


class PairPolicy(str, Enum):
    """Which support situations a two-block decoration may be placed in."""
    EITHER = "either"        # at least one block supported
    EXCLUSIVE = "exclusive"  # exactly one block supported


def build_height_field(
    id: int,
    width: int,
    depth: int,
    max_height: int,
    start: Column,
    path: Sequence[Column],
    profile: Sequence[int],
    hole_chance: float,
    rng: SeededRandom,
) -> HeightFieldWorld:
    """
    Lay a route into a height field.

    Route columns take their profile height. Every other column becomes a
    hole with probability ``hole_chance`` or a stack strictly lower than
    ``max_height``, so only the route reaches the top.
    """
    hole_chance = clamp(hole_chance, 0.0, 0.6)
    route = {column: profile[index] for index, column in enumerate(path)}
    heights = [[0] * width for _ in range(depth)]
    for y in range(depth):
        for x in range(width):
            column = Column(x, y)
            if column in route:
                heights[y][x] = route[column]
            elif rng.next_double() < hole_chance:
                heights[y][x] = 0
            else:
                heights[y][x] = 1 + rng.next_int(max_height - 1)
    return HeightFieldWorld(id=id, width=width, depth=depth, start=start, heights=heights)


def support_cells(world: VoxelWorld, cells: Iterable[Cell], protected: Set[Cell]) -> None:
    """Stand every cell on a pillar and keep the space above it clear of decoration."""
    for cell in cells:
        world.fill_pillar(cell.x, cell.y, cell.z)
        if cell.z + 1 < world.height:
            protected.add(Cell(cell.x, cell.y, cell.z + 1))


def _place_single(
    world: VoxelWorld,
    z: int,
    protected: Set[Cell],
    blocked_columns: Optional[Set[Column]],
    rng: SeededRandom,
) -> bool:
    x = rng.next_int(world.width)
    y = rng.next_int(world.depth)
    if blocked_columns and Column(x, y) in blocked_columns:
        return False
    if world.is_solid(x, y, z):
        return False
    if Cell(x, y, z) in protected:
        return False
    if not world.is_supported(x, y, z):
        return False
    world.set(x, y, z)
    return True


def _place_pair(
    world: VoxelWorld,
    z: int,
    protected: Set[Cell],
    blocked_columns: Optional[Set[Column]],
    policy: PairPolicy,
    rng: SeededRandom,
) -> bool:
    dx, dy = PAIR_DIRECTIONS[rng.next_int(len(PAIR_DIRECTIONS))]
    x = rng.next_int(world.width)
    y = rng.next_int(world.depth)
    nx, ny = x + dx, y + dy
    if not world.in_bounds(nx, ny):
        return False
    if blocked_columns and (Column(x, y) in blocked_columns or Column(nx, ny) in blocked_columns):
        return False
    if world.is_solid(x, y, z) or world.is_solid(nx, ny, z):
        return False
    if Cell(x, y, z) in protected or Cell(nx, ny, z) in protected:
        return False

    support_a = world.is_supported(x, y, z)
    support_b = world.is_supported(nx, ny, z)
    if policy == PairPolicy.EXCLUSIVE:
        if support_a == support_b:
            return False
    elif not support_a and not support_b:
        return False

    world.set(x, y, z)
    world.set(nx, ny, z)
    return True


def layer_target(width: int, depth: int, height: int, z: int, fill_chance: float, height_falloff: float) -> int:
    """Decoration budget for one layer; upper layers get fewer blocks."""
    height_factor = 1.0 - (z / max(height - 1, 1)) * height_falloff
    return int(width * depth * fill_chance * max(0.1, height_factor))


def fill_decorations(
    world: VoxelWorld,
    protected: Set[Cell],
    fill_chance: float,
    height_falloff: float,
    pair_chance: float,
    rng: SeededRandom,
    blocked_columns: Optional[Set[Column]] = None,
    pair_policy: PairPolicy = PairPolicy.EITHER,
    count_existing: bool = False,
) -> None:
    """
    Scatter filler blocks layer by layer, bottom-up.

    Each attempt first rolls for a pair of side-by-side blocks and falls
    back to a single supported block. Protected cells and blocked columns
    are never filled.

    Args:
        count_existing: Count blocks already in a layer towards its target
            instead of adding the target on top of them.
    """
    fill_chance = clamp(fill_chance, 0.0, 0.45)
    height_falloff = clamp(height_falloff, 0.0, 0.85)
    pair_chance = clamp(pair_chance, 0.0, 0.9)
    area = world.width * world.depth

    for z in range(world.height):
        target = layer_target(world.width, world.depth, world.height, z, fill_chance, height_falloff)
        existing = world.count_layer(z)
        if count_existing:
            remaining = target - existing
            attempt_limit = max(area * 6, target * 10)
        else:
            remaining = min(target, area - existing)
            attempt_limit = max(area * 6, remaining * 10)

        for _ in range(attempt_limit):
            if remaining <= 0:
                break
            if rng.next_double() < pair_chance and remaining > 1:
                if _place_pair(world, z, protected, blocked_columns, pair_policy, rng):
                    remaining -= 2
                    continue
            if _place_single(world, z, protected, blocked_columns, rng):
                remaining -= 1


def _has_anchored_neighbour(x: int, y: int, anchored: List[List[bool]], max_distance: int) -> bool:
    depth = len(anchored)
    width = len(anchored[0]) if depth else 0
    for dx in range(-max_distance, max_distance + 1):
        for dy in range(-max_distance, max_distance + 1):
            if abs(dx) + abs(dy) > max_distance:
                continue
            nx, ny = x + dx, y + dy
            if 0 <= nx < width and 0 <= ny < depth and anchored[ny][nx]:
                return True
    return False


def enforce_floating_adjacency(world: VoxelWorld, max_distance: int = ANCHOR_DISTANCE) -> None:
    """
    Prop up blocks that float too far from anything supported.

    A block with nothing under it may overhang as long as a supported
    block on the same layer is within ``max_distance`` columns; otherwise
    a pillar is filled in beneath it, and it then anchors its neighbours.
    """
    for z in range(1, world.height):
        anchored = [
            [world.is_solid(x, y, z) and world.is_solid(x, y, z - 1) for x in range(world.width)]
            for y in range(world.depth)
        ]
        for y in range(world.depth):
            for x in range(world.width):
                if not world.is_solid(x, y, z) or world.is_solid(x, y, z - 1):
                    continue
                if _has_anchored_neighbour(x, y, anchored, max_distance):
                    continue
                world.fill_pillar(x, y, z - 1)
                anchored[y][x] = True


def floating_cells(world: VoxelWorld, max_distance: int = ANCHOR_DISTANCE) -> List[Cell]:
    """Unsupported blocks with no supported block within ``max_distance`` on their layer."""
    result = []
    for z in range(1, world.height):
        anchored = [
            [world.is_solid(x, y, z) and world.is_solid(x, y, z - 1) for x in range(world.width)]
            for y in range(world.depth)
        ]
        for y in range(world.depth):
            for x in range(world.width):
                if world.is_solid(x, y, z) and not world.is_solid(x, y, z - 1):
                    if not _has_anchored_neighbour(x, y, anchored, max_distance):
                        result.append(Cell(x, y, z))
    return result


def build_voxel_world(
    id: int,
    width: int,
    depth: int,
    height: int,
    start: Cell,
    path: Sequence[Cell],
    config: VoxelConfig,
    rng: SeededRandom,
) -> VoxelWorld:
    """Route pillars, lenient pair decoration, then the anchoring pass."""
    world = VoxelWorld(id, width, depth, height, start)
    protected: Set[Cell] = set()
    support_cells(world, path, protected)
    fill_decorations(
        world,
        protected,
        config.fill_chance,
        config.height_falloff,
        config.pair_chance,
        rng,
        pair_policy=PairPolicy.EITHER,
    )
    enforce_floating_adjacency(world)
    return world


def build_branching_world(
    id: int,
    width: int,
    depth: int,
    height: int,
    start: Cell,
    path: Sequence[Cell],
    config: BranchConfig,
    rng: SeededRandom,
) -> Tuple[VoxelWorld, List[DeadEndBranch]]:
    """
    Route pillars, dead-end branches and blockers, then decoration kept away
    from all constructed geometry.
    """
    world = VoxelWorld(id, width, depth, height, start)
    protected: Set[Cell] = set()
    support_cells(world, path, protected)

    dead_ends = generate_dead_ends(path, width, depth, height, config, rng)
    blocked_columns = build_blocked_columns({cell.column for cell in path}, dead_ends, width, depth)
    for dead_end in dead_ends:
        support_cells(world, dead_end.points, protected)
        if dead_end.blocker is not None:
            support_cells(world, [dead_end.blocker], protected)

    fill_decorations(
        world,
        protected,
        config.fill_chance,
        config.height_falloff,
        config.pair_chance,
        rng,
        blocked_columns=blocked_columns,
        pair_policy=PairPolicy.EXCLUSIVE,
        count_existing=True,
    )
    return world, dead_ends
