"""API dependencies."""
from ..config import Settings, get_settings
from ..core.generator import get_generator, LevelGenerator
from ..core.branch_generator import get_branch_generator, BranchLevelGenerator


def get_level_generator() -> LevelGenerator:
    """Dependency for the walk-based level generator."""
    return get_generator()


def get_level_branch_generator() -> BranchLevelGenerator:
    """Dependency for the branching level generator."""
    return get_branch_generator()


def get_app_settings() -> Settings:
    """Dependency for application settings."""
    return get_settings()
