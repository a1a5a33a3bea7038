"""Reachability checks over the climbing movement graph."""
from collections import deque
from dataclasses import dataclass
from typing import Dict, Any, List, Optional

from ..models.world import Cell, Column, World


@dataclass
class ValidationReport:
    """Outcome of a reachability check."""
    reachable: bool
    goal: Optional[Cell]
    shortest: Optional[int]
    max_reached: int
    visited: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "reachable": self.reachable,
            "goal": self.goal.to_dict() if self.goal else None,
            "shortest": self.shortest,
            "max_reached": self.max_reached,
            "visited": self.visited,
        }


def neighbors(world: World, cell: Cell) -> List[Cell]:
    """Cells reachable from ``cell`` in one move, in +x, -x, +y, -y order."""
    columns = (
        Column(cell.x + 1, cell.y),
        Column(cell.x - 1, cell.y),
        Column(cell.x, cell.y + 1),
        Column(cell.x, cell.y - 1),
    )
    results = []
    for column in columns:
        if not world.in_bounds(column.x, column.y):
            continue
        landing = world.landing_height(cell, column)
        if landing is None:
            continue
        results.append(Cell(column.x, column.y, landing))
    return results


def is_legal_move(world: World, current: Cell, target: Column) -> bool:
    """A move is legal between 4-adjacent columns when the target has a landing level."""
    if abs(current.x - target.x) + abs(current.y - target.y) != 1:
        return False
    if not world.in_bounds(target.x, target.y):
        return False
    return world.landing_height(current, target) is not None


def bfs_distances(world: World, start: Cell) -> Dict[Cell, int]:
    """Move count from ``start`` to every reachable cell."""
    distances = {start: 0}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for nxt in neighbors(world, current):
            if nxt in distances:
                continue
            distances[nxt] = distances[current] + 1
            queue.append(nxt)
    return distances


def find_goal(world: World, start: Optional[Cell] = None) -> Cell:
    """
    Highest, then farthest, then most canonical reachable cell.

    Distance is the Manhattan column distance from ``start``; remaining ties
    go to the smallest y, then the smallest x.
    """
    start = start or world.start
    best = start
    best_key = None
    for cell in bfs_distances(world, start):
        distance = abs(cell.x - start.x) + abs(cell.y - start.y)
        key = (-cell.z, -distance, cell.y, cell.x)
        if best_key is None or key < best_key:
            best, best_key = cell, key
    return best


def shortest_path_length(world: World, start: Cell, goal: Cell) -> Optional[int]:
    """Fewest moves from ``start`` to ``goal``, or None if it cannot be reached."""
    distances = {start: 0}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current == goal:
            return distances[current]
        for nxt in neighbors(world, current):
            if nxt in distances:
                continue
            distances[nxt] = distances[current] + 1
            queue.append(nxt)
    return None


def reaches_height(world: World, start: Cell, target_z: int) -> bool:
    """Whether any reachable cell stands on level ``target_z``."""
    visited = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current.z == target_z:
            return True
        for nxt in neighbors(world, current):
            if nxt in visited:
                continue
            visited.add(nxt)
            queue.append(nxt)
    return False


def find_path(
    world: World,
    start: Optional[Cell] = None,
    goal: Optional[Cell] = None,
    target_z: Optional[int] = None,
) -> Optional[List[Cell]]:
    """
    Shortest move sequence for hints and auto-solve.

    Stops at ``goal`` when given, otherwise at the first cell on level
    ``target_z``, otherwise at the world's computed goal.

    Returns:
        Cells from ``start`` to the destination (inclusive), or None.
    """
    start = start or world.start
    if goal is None and target_z is None:
        goal = find_goal(world, start)

    parents: Dict[Cell, Optional[Cell]] = {start: None}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if (goal is not None and current == goal) or (goal is None and current.z == target_z):
            path = [current]
            while parents[path[-1]] is not None:
                path.append(parents[path[-1]])
            path.reverse()
            return path
        for nxt in neighbors(world, current):
            if nxt in parents:
                continue
            parents[nxt] = current
            queue.append(nxt)
    return None


def validate_world(
    world: World,
    min_route_length: Optional[int] = None,
    target_z: Optional[int] = None,
    goal: Optional[Cell] = None,
) -> ValidationReport:
    """
    Check a world against a climbing requirement.

    With ``target_z`` the world passes when that level can be reached. With
    ``min_route_length`` it passes when the goal (given or computed) is
    reachable and no shorter than that. Without either, reaching the goal
    is enough.
    """
    start = world.start
    distances = bfs_distances(world, start)
    max_reached = max(cell.z for cell in distances)

    if target_z is not None:
        return ValidationReport(
            reachable=any(cell.z == target_z for cell in distances),
            goal=None,
            shortest=None,
            max_reached=max_reached,
            visited=len(distances),
        )

    goal = goal or find_goal(world, start)
    shortest = distances.get(goal)
    reachable = shortest is not None
    if reachable and min_route_length is not None:
        reachable = shortest >= min_route_length
    return ValidationReport(
        reachable=reachable,
        goal=goal,
        shortest=shortest,
        max_reached=max_reached,
        visited=len(distances),
    )
