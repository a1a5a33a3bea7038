"""Tests for the walk-based level generators."""
import pytest
from climbgen.core.builder import floating_cells
from climbgen.core.generator import LevelGenerator, get_generator
from climbgen.core.heights import is_valid_profile
from climbgen.core.rng import derive_seed
from climbgen.core.validator import reaches_height
from climbgen.models.level import HeightFieldConfig, VoxelConfig
from climbgen.models.world import HeightFieldWorld, VoxelWorld, baseline_height_field, baseline_voxel_world


@pytest.fixture
def generator():
    """Create generator instance."""
    return LevelGenerator()


@pytest.fixture
def small_voxel_config():
    return VoxelConfig(width=6, depth=6, height=5, max_attempts=60)


class TestHeightFieldGeneration:
    """Test cases for LevelGenerator.generate_height_field."""

    def test_returns_result(self, generator):
        """Test that generation returns a level with timing and attempts."""
        result = generator.generate_height_field(HeightFieldConfig())

        assert isinstance(result.world, HeightFieldWorld)
        assert result.attempts >= 1
        assert result.generation_time_ms >= 0

    def test_deterministic(self, generator):
        """Same config and seed produce the same level."""
        config = HeightFieldConfig(seed=77)
        a = generator.generate_height_field(config)
        b = generator.generate_height_field(config)
        assert a.world.to_dict() == b.world.to_dict()
        assert a.path == b.path

    def test_top_is_reachable(self, generator):
        """The route's top level can always be climbed to."""
        result = generator.generate_height_field(HeightFieldConfig(seed=5))
        world = result.world
        assert reaches_height(world, world.start, world.max_level)

    def test_route_follows_profile(self, generator):
        config = HeightFieldConfig(seed=11)
        result = generator.generate_height_field(config)
        assert not result.fallback

        assert result.path[0].x == 0 and result.path[0].y == config.depth - 1
        assert is_valid_profile(result.heights, config.max_height - 1, base=1)
        for column, height in zip(result.path, result.heights):
            assert result.world.height_at(column.x, column.y) == height

    def test_fallback_on_impossible_geometry(self, generator):
        """A 3x3 grid cannot hold a 20-level climb."""
        result = generator.generate_height_field(HeightFieldConfig(width=3, depth=3, max_height=20, max_attempts=1))
        assert result.fallback
        assert result.world.to_dict() == baseline_height_field(1).to_dict()


class TestVoxelGeneration:
    """Test cases for LevelGenerator.generate_voxel."""

    def test_returns_voxel_world(self, generator, small_voxel_config):
        result = generator.generate_voxel(small_voxel_config)
        assert isinstance(result.world, VoxelWorld)

    def test_deterministic(self, generator, small_voxel_config):
        a = generator.generate_voxel(small_voxel_config)
        b = generator.generate_voxel(small_voxel_config)
        assert a.world.to_dict() == b.world.to_dict()

    def test_seed_override(self, generator, small_voxel_config):
        a = generator.generate_voxel(small_voxel_config, seed=99)
        small_voxel_config.seed = 99
        b = generator.generate_voxel(small_voxel_config)
        assert a.world.to_dict() == b.world.to_dict()

    def test_valid_and_anchored(self, generator, small_voxel_config):
        """Accepted levels reach the top layer and nothing floats too far."""
        result = generator.generate_voxel(small_voxel_config)
        world = result.world
        assert reaches_height(world, world.start, world.height - 1)
        assert floating_cells(world) == []

    def test_fallback_on_impossible_geometry(self, generator):
        result = generator.generate_voxel(VoxelConfig(width=3, depth=3, height=20, max_attempts=1))
        assert result.fallback
        assert result.attempts == LevelGenerator.MIN_LEVEL_ATTEMPTS
        assert result.world.to_dict() == baseline_voxel_world(1).to_dict()


class TestBatches:
    """Test cases for batch generation."""

    def test_batch_ids_and_seeds(self, generator, small_voxel_config):
        """Level i uses id i + 1 and the base seed offset by i strides."""
        results = generator.generate_voxel_levels(3, small_voxel_config)
        assert [r.world.id for r in results] == [1, 2, 3]

        single = generator.generate_voxel(
            small_voxel_config,
            id=3,
            seed=derive_seed(small_voxel_config.seed, 2, LevelGenerator.BATCH_SEED_STRIDE),
        )
        assert results[2].world.to_dict() == single.world.to_dict()

    def test_height_field_batch(self, generator):
        config = HeightFieldConfig(width=6, depth=6, max_height=4)
        results = generator.generate_height_field_levels(2, config)
        assert [r.world.id for r in results] == [1, 2]

    def test_empty_batch(self, generator, small_voxel_config):
        assert generator.generate_voxel_levels(0, small_voxel_config) == []


class TestGeneratorSingleton:
    """Test singleton pattern for generator."""

    def test_get_generator_returns_same_instance(self):
        assert get_generator() is get_generator()
