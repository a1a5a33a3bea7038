"""Level generation parameters and result structures."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Any, NamedTuple, Optional

from .world import Cell, Column, World


def clamp(value: float, low: float, high: float) -> float:
    """Clamp a value into the inclusive range [low, high]."""
    return max(low, min(high, value))


@dataclass
class HeightFieldConfig:
    """Parameters for the legacy height-field generator."""
    width: int = 9
    depth: int = 9
    max_height: int = 6
    hole_chance: float = 0.12
    path_length_factor: float = 0.5
    avoid_edge_bias: float = 0.65
    turn_bias: float = 0.6
    seed: int = 2025
    max_attempts: int = 300


@dataclass
class VoxelConfig:
    """Parameters for the anchored voxel generator."""
    width: int = 9
    depth: int = 9
    height: int = 8
    fill_chance: float = 0.16      # share of a layer decorated at ground level
    height_falloff: float = 0.45   # how much sparser the top layer is
    pair_chance: float = 0.6
    path_length_factor: float = 0.65
    avoid_edge_bias: float = 0.65
    turn_bias: float = 0.6
    seed: int = 2025
    max_attempts: int = 300


@dataclass
class BranchConfig:
    """Parameters for the branching voxel generator with dead ends."""
    width: int = 9
    depth: int = 9
    height: int = 8
    steps: int = 10
    main_route_count: int = 2      # every route beyond the first is a blocked decoy
    dead_end_count: int = 4
    dead_end_min_length: int = 2
    dead_end_max_length: int = 5
    fill_chance: float = 0.14
    height_falloff: float = 0.5
    pair_chance: float = 0.6
    seed: int = 2048
    max_attempts: int = 2500
    # Reject steps whose column could also be entered from another used column
    enforce_unique_predecessor: bool = False


class DeadEndKind(str, Enum):
    """Dead-end branch flavours."""
    BLOCKED_MAIN = "blocked_main"  # heads for the goal, then gets plugged
    BRANCH = "branch"              # plain blind alley


@dataclass
class DeadEndBranch:
    """Decoy geometry grown off the main route."""
    points: List[Cell]
    kind: DeadEndKind
    blocker: Optional[Cell] = None

    @property
    def columns(self) -> List[Column]:
        columns = [point.column for point in self.points]
        if self.blocker is not None:
            columns.append(self.blocker.column)
        return columns

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "points": [point.to_dict() for point in self.points],
            "blocker": self.blocker.to_dict() if self.blocker else None,
        }


class SizeRequirement(NamedTuple):
    """Smallest world bounds able to hold a path."""
    width: int
    depth: int
    height: int


@dataclass
class GenerationResult:
    """Result of a walk-based (height-field or voxel) generation."""
    world: World
    path: List[Column] = field(default_factory=list)
    heights: List[int] = field(default_factory=list)
    fallback: bool = False
    attempts: int = 0
    generation_time_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "level": self.world.to_dict(),
            "path": [column.to_dict() for column in self.path],
            "heights": list(self.heights),
            "fallback": self.fallback,
            "attempts": self.attempts,
            "generation_time_ms": self.generation_time_ms,
        }


@dataclass
class BranchGenerationResult:
    """Result of a branching generation or sequence replay."""
    world: World
    sequence: List[int] = field(default_factory=list)
    path: List[Cell] = field(default_factory=list)
    dead_ends: List[DeadEndBranch] = field(default_factory=list)
    fallback: bool = False
    attempts: int = 0
    generation_time_ms: int = 0

    @property
    def blocked_main_paths(self) -> List[List[Cell]]:
        """Point lists of the decoy routes that end behind a blocker."""
        return [
            branch.points for branch in self.dead_ends
            if branch.kind == DeadEndKind.BLOCKED_MAIN
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "level": self.world.to_dict(),
            "sequence": list(self.sequence),
            "path": [cell.to_dict() for cell in self.path],
            "dead_ends": [branch.to_dict() for branch in self.dead_ends],
            "fallback": self.fallback,
            "attempts": self.attempts,
            "generation_time_ms": self.generation_time_ms,
        }
