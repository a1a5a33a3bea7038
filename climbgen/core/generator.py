"""Walk-based level generators (height-field and anchored voxel variants)."""
import logging
import time
from typing import List, Optional

from ..models.level import GenerationResult, HeightFieldConfig, VoxelConfig, clamp
from ..models.world import Cell, Column, baseline_height_field, baseline_voxel_world
from .builder import build_height_field, build_voxel_world
from .heights import build_height_profile
from .path import generate_walk
from .rng import SeededRandom, derive_seed
from .validator import reaches_height

logger = logging.getLogger(__name__)


class LevelGenerator:
    """Generates climbing levels around a weighted random-walk route."""

    # Stride between per-level seeds in a batch
    BATCH_SEED_STRIDE = 7919

    # Lower bound on whole-level attempts regardless of configuration
    MIN_LEVEL_ATTEMPTS = 10

    MIN_WIDTH = 3
    MIN_DEPTH = 3
    MIN_HEIGHT = 2

    def generate_height_field(
        self, config: HeightFieldConfig, id: int = 1, seed: Optional[int] = None
    ) -> GenerationResult:
        """
        Generate a height-field level whose route climbs to ``max_height``.

        The route starts in the bottom-left column at height 1 and every
        candidate is accepted only if its top level can actually be
        reached. When no candidate passes, the baseline level is returned.

        Args:
            config: Generation parameters.
            id: Level identifier stored in the result.
            seed: Overrides ``config.seed``.

        Returns:
            GenerationResult with the level, its route and height profile.
        """
        start_time = time.time()
        rng = SeededRandom(config.seed if seed is None else seed)
        width = max(self.MIN_WIDTH, config.width)
        depth = max(self.MIN_DEPTH, config.depth)
        max_height = max(self.MIN_HEIGHT, config.max_height)
        start = Column(0, depth - 1)
        min_length = max(
            int(width * depth * clamp(config.path_length_factor, 0.2, 0.9)),
            max_height,
        )

        attempts = max(self.MIN_LEVEL_ATTEMPTS, config.max_attempts)
        for attempt in range(1, attempts + 1):
            path = generate_walk(
                width, depth, start, min_length,
                config.avoid_edge_bias, config.turn_bias, config.max_attempts,
                rng, prefer_interior=True,
            )
            if path is None:
                continue

            profile = build_height_profile(len(path), max_height - 1, rng, base=1)
            if profile is None:
                continue

            world = build_height_field(
                id, width, depth, max_height, start, path, profile, config.hole_chance, rng
            )
            if reaches_height(world, world.start, max_height - 1):
                logger.info("Height-field level %d accepted after %d attempts", id, attempt)
                return GenerationResult(
                    world=world,
                    path=path,
                    heights=profile,
                    attempts=attempt,
                    generation_time_ms=int((time.time() - start_time) * 1000),
                )
            logger.debug("Height-field level %d attempt %d failed validation", id, attempt)

        logger.warning("Height-field level %d fell back to the baseline after %d attempts", id, attempts)
        return GenerationResult(
            world=baseline_height_field(id),
            fallback=True,
            attempts=attempts,
            generation_time_ms=int((time.time() - start_time) * 1000),
        )

    def generate_voxel(
        self, config: VoxelConfig, id: int = 1, seed: Optional[int] = None
    ) -> GenerationResult:
        """
        Generate a voxel level whose route climbs to the top layer.

        Decoration is anchored afterwards so no block floats more than two
        columns away from a supported one. Falls back to the voxelised
        baseline level when every attempt fails.
        """
        start_time = time.time()
        rng = SeededRandom(config.seed if seed is None else seed)
        width = max(self.MIN_WIDTH, config.width)
        depth = max(self.MIN_DEPTH, config.depth)
        height = max(self.MIN_HEIGHT, config.height)
        start_column = Column(0, depth - 1)
        start = Cell(start_column.x, start_column.y, 0)
        target_height = height - 1
        min_length = max(
            int(width * depth * clamp(config.path_length_factor, 0.2, 0.9)),
            target_height + 1,
        )

        attempts = max(self.MIN_LEVEL_ATTEMPTS, config.max_attempts)
        for attempt in range(1, attempts + 1):
            path = generate_walk(
                width, depth, start_column, min_length,
                config.avoid_edge_bias, config.turn_bias, config.max_attempts, rng,
            )
            if path is None:
                continue

            profile = build_height_profile(len(path), target_height, rng, base=0)
            if profile is None:
                continue

            cells = [Cell(column.x, column.y, profile[index]) for index, column in enumerate(path)]
            world = build_voxel_world(id, width, depth, height, start, cells, config, rng)
            if reaches_height(world, start, target_height):
                logger.info("Voxel level %d accepted after %d attempts", id, attempt)
                return GenerationResult(
                    world=world,
                    path=path,
                    heights=profile,
                    attempts=attempt,
                    generation_time_ms=int((time.time() - start_time) * 1000),
                )
            logger.debug("Voxel level %d attempt %d failed validation", id, attempt)

        logger.warning("Voxel level %d fell back to the baseline after %d attempts", id, attempts)
        return GenerationResult(
            world=baseline_voxel_world(id),
            fallback=True,
            attempts=attempts,
            generation_time_ms=int((time.time() - start_time) * 1000),
        )

    def generate_height_field_levels(self, count: int, config: HeightFieldConfig) -> List[GenerationResult]:
        """Batch of height-field levels with ids from 1 and offset seeds."""
        return [
            self.generate_height_field(config, id=index + 1,
                                       seed=derive_seed(config.seed, index, self.BATCH_SEED_STRIDE))
            for index in range(max(0, count))
        ]

    def generate_voxel_levels(self, count: int, config: VoxelConfig) -> List[GenerationResult]:
        """Batch of voxel levels with ids from 1 and offset seeds."""
        return [
            self.generate_voxel(config, id=index + 1,
                                seed=derive_seed(config.seed, index, self.BATCH_SEED_STRIDE))
            for index in range(max(0, count))
        ]


# Singleton instance
_generator = None


def get_generator() -> LevelGenerator:
    """Get or create generator singleton instance."""
    global _generator
    if _generator is None:
        _generator = LevelGenerator()
    return _generator
