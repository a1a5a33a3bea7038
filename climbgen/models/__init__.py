"""Data models package.

This package contains terrain structures, generation parameters and
results, and the API schemas.
"""
from .world import (
    Column,
    Cell,
    World,
    HeightFieldWorld,
    VoxelWorld,
    baseline_height_field,
    baseline_voxel_world,
)
from .level import (
    HeightFieldConfig,
    VoxelConfig,
    BranchConfig,
    DeadEndKind,
    DeadEndBranch,
    SizeRequirement,
    GenerationResult,
    BranchGenerationResult,
)

__all__ = [
    # Terrain
    "Column",
    "Cell",
    "World",
    "HeightFieldWorld",
    "VoxelWorld",
    "baseline_height_field",
    "baseline_voxel_world",
    # Generation
    "HeightFieldConfig",
    "VoxelConfig",
    "BranchConfig",
    "DeadEndKind",
    "DeadEndBranch",
    "SizeRequirement",
    "GenerationResult",
    "BranchGenerationResult",
]
