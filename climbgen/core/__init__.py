"""Core generation package.

This package contains the random source, route generators, terrain
builders, the reachability validator and the move-code codec.
"""
from .rng import SeededRandom, derive_seed
from .generator import LevelGenerator, get_generator
from .branch_generator import BranchLevelGenerator, get_branch_generator
from .validator import ValidationReport, find_goal, find_path, validate_world

__all__ = [
    "SeededRandom",
    "derive_seed",
    "LevelGenerator",
    "get_generator",
    "BranchLevelGenerator",
    "get_branch_generator",
    "ValidationReport",
    "find_goal",
    "find_path",
    "validate_world",
]
