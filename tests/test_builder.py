"""Tests for terrain building: pillars, decoration and anchoring."""
import pytest
from climbgen.core.builder import (
    PairPolicy,
    _place_pair,
    build_branching_world,
    build_height_field,
    build_voxel_world,
    enforce_floating_adjacency,
    fill_decorations,
    floating_cells,
    layer_target,
    support_cells,
)
from climbgen.core.path import generate_step_path
from climbgen.core.rng import SeededRandom
from climbgen.models.level import BranchConfig, VoxelConfig
from climbgen.models.world import Cell, Column, VoxelWorld


def overhang_has_partner(world, cell):
    """An unsupported block sits beside a supported block on its layer."""
    for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
        x, y = cell.x + dx, cell.y + dy
        if world.is_solid(x, y, cell.z) and world.is_supported(x, y, cell.z):
            return True
    return False


@pytest.fixture
def route():
    """A short climbing route along the bottom row of a 6x6 world."""
    return [Cell(0, 5, 0), Cell(1, 5, 1), Cell(2, 5, 1), Cell(3, 5, 2), Cell(3, 4, 3)]


class TestHeightFieldBuilder:
    """Test cases for build_height_field."""

    def test_route_columns_and_lower_fill(self):
        path = [Column(0, 4), Column(1, 4), Column(2, 4), Column(2, 3)]
        profile = [1, 2, 3, 4]
        world = build_height_field(1, 5, 5, 4, Column(0, 4), path, profile, 0.3, SeededRandom(3))

        for column, height in zip(path, profile):
            assert world.height_at(column.x, column.y) == height
        for y in range(5):
            for x in range(5):
                if Column(x, y) not in path:
                    assert 0 <= world.height_at(x, y) < 4

    def test_hole_chance_capped(self):
        """Even with hole_chance 1.0 some columns keep blocks."""
        path = [Column(0, 4), Column(1, 4)]
        world = build_height_field(1, 6, 6, 3, Column(0, 4), path, [1, 2], 1.0, SeededRandom(8))
        filled = sum(1 for row in world.heights for h in row if h > 0)
        assert filled > 2


class TestSupport:
    """Test cases for support_cells."""

    def test_pillars_and_headroom(self, route):
        world = VoxelWorld(1, 6, 6, 5, route[0])
        protected = set()
        support_cells(world, route, protected)

        for cell in route:
            for z in range(cell.z + 1):
                assert world.is_solid(cell.x, cell.y, z)
            assert Cell(cell.x, cell.y, cell.z + 1) in protected
        assert world.standable_levels(3, 4) == [3]


class TestDecoration:
    """Test cases for fill_decorations."""

    def test_layer_target_shrinks_with_height(self):
        targets = [layer_target(9, 9, 8, z, 0.16, 0.45) for z in range(8)]
        assert targets == sorted(targets, reverse=True)
        assert targets[0] == int(81 * 0.16)

    @pytest.mark.parametrize("policy", [PairPolicy.EITHER, PairPolicy.EXCLUSIVE])
    def test_protected_and_overhangs(self, route, policy):
        """Protected cells stay empty and every overhang has a supported partner."""
        world = VoxelWorld(1, 6, 6, 5, route[0])
        protected = set()
        support_cells(world, route, protected)
        fill_decorations(world, protected, 0.4, 0.3, 0.8, SeededRandom(21), pair_policy=policy)

        for cell in protected:
            assert not world.is_solid(cell.x, cell.y, cell.z)
        for cell in world.solid_cells():
            if not world.is_supported(cell.x, cell.y, cell.z):
                assert overhang_has_partner(world, cell)

    def test_blocked_columns_stay_empty(self, route):
        world = VoxelWorld(1, 6, 6, 5, route[0])
        blocked = {Column(x, y) for x in range(6) for y in range(3)}
        fill_decorations(world, set(), 0.45, 0.0, 0.5, SeededRandom(4), blocked_columns=blocked)

        assert world.count_layer(0) > 0
        for cell in world.solid_cells():
            assert cell.column not in blocked

    def test_exclusive_pair_needs_exactly_one_support(self):
        """On the ground both blocks are supported, so exclusive pairs never fit there."""
        for seed in range(1, 51):
            world = VoxelWorld(1, 3, 3, 2, Cell(0, 0, 0))
            _place_pair(world, 0, set(), None, PairPolicy.EXCLUSIVE, SeededRandom(seed))
            assert world.count_layer(0) == 0

    def test_either_pair_fits_on_ground(self):
        placed = 0
        for seed in range(1, 51):
            world = VoxelWorld(1, 3, 3, 2, Cell(0, 0, 0))
            if _place_pair(world, 0, set(), None, PairPolicy.EITHER, SeededRandom(seed)):
                assert world.count_layer(0) == 2
                placed += 1
        assert placed > 0

    def test_count_existing_respects_target(self):
        """A layer already at its target gets nothing more when existing blocks count."""
        world = VoxelWorld(1, 5, 5, 2, Cell(0, 0, 0))
        columns = [(x, y) for y in range(5) for x in range(5)][:11]
        for x, y in columns:
            world.fill_pillar(x, y, 1)
        before = bytes(world.cells)

        fill_decorations(world, set(), 0.45, 0.0, 0.5, SeededRandom(2), count_existing=True)
        assert bytes(world.cells) == before

    def test_additive_fill_adds_blocks(self):
        world = VoxelWorld(1, 5, 5, 2, Cell(0, 0, 0))
        for x, y in [(x, y) for y in range(5) for x in range(5)][:11]:
            world.fill_pillar(x, y, 1)
        fill_decorations(world, set(), 0.45, 0.0, 0.5, SeededRandom(2))
        assert world.count_layer(0) > 11


class TestAnchoring:
    """Test cases for enforce_floating_adjacency."""

    def test_near_overhang_kept(self):
        world = VoxelWorld(1, 7, 1, 3, Cell(0, 0, 0))
        world.fill_pillar(0, 0, 1)
        world.set(1, 0, 1)
        enforce_floating_adjacency(world)
        assert not world.is_solid(1, 0, 0)

    def test_far_block_gets_pillar(self):
        world = VoxelWorld(1, 7, 1, 3, Cell(0, 0, 0))
        world.fill_pillar(0, 0, 1)
        world.set(5, 0, 2)
        assert floating_cells(world) == [Cell(5, 0, 2)]

        enforce_floating_adjacency(world)
        assert world.is_solid(5, 0, 1)
        assert world.is_solid(5, 0, 0)
        assert floating_cells(world) == []


class TestWorldBuilders:
    """Test cases for the full voxel builders."""

    def test_voxel_world_is_anchored(self, route):
        world = build_voxel_world(1, 6, 6, 5, route[0], route, VoxelConfig(), SeededRandom(17))
        assert floating_cells(world) == []
        for cell in route:
            assert world.is_standable(cell.x, cell.y, cell.z)

    def test_branching_world_keeps_decoration_away(self):
        config = BranchConfig(width=10, depth=10, height=8, steps=8)
        route = None
        for seed in range(1, 200):
            rng = SeededRandom(seed)
            route = generate_step_path(8, Cell(4, 4, 0), 10, 10, 8, rng)
            if route is not None:
                break
        assert route is not None
        _, path = route

        world, dead_ends = build_branching_world(1, 10, 10, 8, path[0], path, config, SeededRandom(5))
        constructed = {cell.column for cell in path}
        for dead_end in dead_ends:
            constructed.update(dead_end.columns)

        for cell in path:
            assert world.is_standable(cell.x, cell.y, cell.z)
        for cell in world.solid_cells():
            if cell.column not in constructed:
                for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1), (0, 0)):
                    assert Column(cell.x + dx, cell.y + dy) not in constructed
