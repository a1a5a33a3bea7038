"""Height profile assignment along a route."""
from typing import List, Optional, Sequence

from .rng import SeededRandom


def build_height_profile(step_count: int, increments: int, rng: SeededRandom, base: int = 0) -> Optional[List[int]]:
    """
    Spread ``increments`` single-level climbs over the gaps of a route.

    The ``step_count - 1`` gaps between consecutive route cells are
    shuffled and the first ``increments`` of them each carry a +1 rise.

    Args:
        step_count: Number of cells on the route.
        increments: Total rise required between the first and last cell.
        rng: Random source.
        base: Height of the first cell.

    Returns:
        Non-decreasing heights, one per cell, or None when there are fewer
        gaps than required climbs.
    """
    if step_count <= 0 or increments < 0:
        return None
    slots = step_count - 1
    if slots < increments:
        return None

    steps = [0] * slots
    indices = list(range(slots))
    rng.shuffle(indices)
    for index in indices[:increments]:
        steps[index] = 1

    heights = [base] * step_count
    for index in range(1, step_count):
        heights[index] = heights[index - 1] + steps[index - 1]
    return heights


def is_valid_profile(profile: Sequence[int], increments: int, base: int = 0) -> bool:
    """Non-decreasing by steps of 0 or 1, starting at ``base``, rising by ``increments``."""
    if not profile or profile[0] != base:
        return False
    for previous, current in zip(profile, profile[1:]):
        if current - previous not in (0, 1):
            return False
    return profile[-1] - profile[0] == increments
