"""Move-code route generator with dead ends, and sequence replay."""
import logging
import time
from typing import List, Optional, Sequence

from ..models.level import BranchConfig, BranchGenerationResult
from ..models.world import Cell, baseline_voxel_world
from .builder import build_branching_world
from .codec import expand_to_fit, offset_path, relative_path, size_of_path, start_for_sequence
from .path import generate_step_path
from .rng import SeededRandom, derive_seed
from .validator import find_goal, shortest_path_length

logger = logging.getLogger(__name__)


class BranchLevelGenerator:
    """Generates voxel levels whose route is a move-code sequence, padded with decoys."""

    # Stride between per-level seeds in a batch and between replay attempts
    SEED_STRIDE = 9973

    MIN_LEVEL_ATTEMPTS = 10

    # A replayed route may be this many moves shorter than its sequence
    REPLAY_SLACK = 5

    MIN_WIDTH = 3
    MIN_DEPTH = 3
    MIN_HEIGHT = 2

    def generate(
        self, config: BranchConfig, id: int = 1, seed: Optional[int] = None
    ) -> BranchGenerationResult:
        """
        Generate a level around a random move-code route.

        A candidate is accepted only if the shortest climb from the start to
        the world's goal is at least as long as the route, meaning neither
        decoration nor dead ends opened a shortcut.

        Args:
            config: Generation parameters.
            id: Level identifier stored in the result.
            seed: Overrides ``config.seed``.

        Returns:
            BranchGenerationResult with the level, its sequence, route and
            dead ends; the voxelised baseline level with ``fallback`` set
            when every attempt failed.
        """
        start_time = time.time()
        rng = SeededRandom(config.seed if seed is None else seed)
        width = max(self.MIN_WIDTH, config.width)
        depth = max(self.MIN_DEPTH, config.depth)
        height = max(self.MIN_HEIGHT, config.height)
        steps = max(1, min(config.steps, width * depth - 1))

        attempts = max(self.MIN_LEVEL_ATTEMPTS, config.max_attempts)
        for attempt in range(1, attempts + 1):
            start = Cell(rng.next_int(width), rng.next_int(depth), 0)
            route = generate_step_path(
                steps, start, width, depth, height, rng, config.enforce_unique_predecessor
            )
            if route is None:
                continue
            codes, path = route

            world, dead_ends = build_branching_world(id, width, depth, height, start, path, config, rng)
            goal = find_goal(world, start)
            shortest = shortest_path_length(world, start, goal)
            if shortest is not None and shortest >= steps:
                logger.info("Branch level %d accepted after %d attempts", id, attempt)
                return BranchGenerationResult(
                    world=world,
                    sequence=codes,
                    path=path,
                    dead_ends=dead_ends,
                    attempts=attempt,
                    generation_time_ms=int((time.time() - start_time) * 1000),
                )
            logger.debug("Branch level %d attempt %d: shortest %s < %d", id, attempt, shortest, steps)

        logger.warning("Branch level %d fell back to the baseline after %d attempts", id, attempts)
        return BranchGenerationResult(
            world=baseline_voxel_world(id),
            fallback=True,
            attempts=attempts,
            generation_time_ms=int((time.time() - start_time) * 1000),
        )

    def generate_levels(self, count: int, config: BranchConfig) -> List[BranchGenerationResult]:
        """Batch of levels with ids from 1 and offset seeds."""
        return [
            self.generate(config, id=index + 1, seed=derive_seed(config.seed, index, self.SEED_STRIDE))
            for index in range(max(0, count))
        ]

    def generate_from_sequence(
        self,
        config: BranchConfig,
        sequence: Sequence[int],
        id: int = 1,
        seed: Optional[int] = None,
        enforce_unique_predecessor: bool = False,
        auto_expand: bool = True,
    ) -> Optional[BranchGenerationResult]:
        """
        Rebuild a level around a fixed move-code sequence.

        The sequence is replayed from the origin, the world grows to fit it
        when ``auto_expand`` is set, and the route is placed at a random
        in-bounds offset. Decoration and dead ends are then retried with a
        fresh seed per attempt until the route survives validation.

        Returns:
            BranchGenerationResult, or None when the sequence is invalid,
            does not fit, or no attempt validated.
        """
        start_time = time.time()
        base_seed = config.seed if seed is None else seed
        width = max(self.MIN_WIDTH, config.width)
        depth = max(self.MIN_DEPTH, config.depth)
        height = max(self.MIN_HEIGHT, config.height)

        relative = relative_path(sequence, enforce_unique_predecessor)
        if relative is None:
            logger.warning("Rejected sequence of %d codes: not decodable", len(sequence))
            return None
        if auto_expand:
            width, depth, height = expand_to_fit(width, depth, height, size_of_path(relative))

        start = start_for_sequence(relative, width, depth, height, SeededRandom(base_seed))
        if start is None:
            logger.warning("Rejected sequence: route does not fit in %dx%dx%d", width, depth, height)
            return None
        path = offset_path(relative, start)
        required = len(sequence) - self.REPLAY_SLACK

        attempts = max(1, config.max_attempts)
        for attempt in range(attempts):
            rng = SeededRandom(derive_seed(base_seed, attempt, self.SEED_STRIDE))
            world, dead_ends = build_branching_world(id, width, depth, height, start, path, config, rng)
            goal = find_goal(world, start)
            shortest = shortest_path_length(world, start, goal)
            if shortest is not None and shortest >= required:
                logger.info("Sequence level %d accepted after %d attempts", id, attempt + 1)
                return BranchGenerationResult(
                    world=world,
                    sequence=list(sequence),
                    path=path,
                    dead_ends=dead_ends,
                    attempts=attempt + 1,
                    generation_time_ms=int((time.time() - start_time) * 1000),
                )
            logger.debug("Sequence level %d attempt %d: shortest %s < %d", id, attempt + 1, shortest, required)

        logger.warning("Rejected sequence: no valid build in %d attempts", attempts)
        return None


# Singleton instance
_branch_generator = None


def get_branch_generator() -> BranchLevelGenerator:
    """Get or create branch generator singleton instance."""
    global _branch_generator
    if _branch_generator is None:
        _branch_generator = BranchLevelGenerator()
    return _branch_generator
