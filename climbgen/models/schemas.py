"""Pydantic schemas for API request/response validation."""
from pydantic import BaseModel, Field
from typing import Dict, List, Any, Literal, Optional

UINT64_MAX = 2 ** 64 - 1


class ConfigOverrides(BaseModel):
    """Generation parameters to override; unset fields keep their defaults."""
    width: Optional[int] = Field(default=None, ge=3, le=64, description="Grid width (x)")
    depth: Optional[int] = Field(default=None, ge=3, le=64, description="Grid depth (y)")
    height: Optional[int] = Field(default=None, ge=2, le=64, description="Layer count (voxel variants)")
    max_height: Optional[int] = Field(default=None, ge=2, le=64, description="Top height (height-field variant)")
    steps: Optional[int] = Field(default=None, ge=1, le=512, description="Route moves (branch variant)")
    main_route_count: Optional[int] = Field(default=None, ge=0, le=16, description="Main route plus blocked decoys")
    dead_end_count: Optional[int] = Field(default=None, ge=0, le=32, description="Blind alley count")
    dead_end_min_length: Optional[int] = Field(default=None, ge=1, le=64, description="Shortest blind alley")
    dead_end_max_length: Optional[int] = Field(default=None, ge=1, le=64, description="Longest blind alley")
    fill_chance: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Decoration density")
    hole_chance: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Hole probability (height field)")
    height_falloff: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Decoration thinning with height")
    pair_chance: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Paired decoration probability")
    path_length_factor: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Route length vs grid area")
    avoid_edge_bias: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Walk edge avoidance")
    turn_bias: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Walk turn preference")
    max_attempts: Optional[int] = Field(default=None, ge=1, le=10000, description="Attempt budget")
    enforce_unique_predecessor: Optional[bool] = Field(default=None, description="Strict single-entry routes")


class GenerateRequest(BaseModel):
    """Request schema for level generation."""
    variant: Literal["height_field", "voxel", "branch"] = Field(
        default="branch", description="Generator variant"
    )
    count: int = Field(default=1, ge=1, description="Number of levels")
    seed: Optional[int] = Field(default=None, ge=0, le=UINT64_MAX, description="Base seed")
    config: Optional[ConfigOverrides] = Field(default=None, description="Parameter overrides")
    debug: bool = Field(default=False, description="Include routes, sequences and dead ends")


class GenerateResponse(BaseModel):
    """Response schema for level generation."""
    levels: List[Dict[str, Any]] = Field(..., description="Generated levels")
    fallback_count: int = Field(default=0, description="Levels replaced by the baseline")
    generation_time_ms: int = Field(default=0, description="Total generation time in milliseconds")
    debug: Optional[List[Dict[str, Any]]] = Field(default=None, description="Per-level generation details")


class SequenceInput(BaseModel):
    """A move-code sequence given as codes, vectors or free text."""
    codes: Optional[List[int]] = Field(default=None, description="Move codes (0-15)")
    vectors: Optional[List[List[int]]] = Field(default=None, description="[dx, dy, dz] triples")
    text: Optional[str] = Field(default=None, description="Free-form codes or vectors")


class SequenceImportRequest(SequenceInput):
    """Request schema for rebuilding a level around a sequence."""
    seed: Optional[int] = Field(default=None, ge=0, le=UINT64_MAX, description="Seed")
    config: Optional[ConfigOverrides] = Field(default=None, description="Parameter overrides")
    auto_expand: bool = Field(default=True, description="Grow the world to fit the route")
    enforce_unique_predecessor: bool = Field(default=False, description="Strict single-entry routes")


class SequenceImportResponse(BaseModel):
    """Response schema for sequence import."""
    level: Dict[str, Any] = Field(..., description="Rebuilt level")
    sequence: List[int] = Field(..., description="Move codes used")
    path: List[Dict[str, int]] = Field(default=[], description="Route cells")
    dead_ends: List[Dict[str, Any]] = Field(default=[], description="Decoy branches")
    attempts: int = Field(default=0, description="Build attempts used")
    generation_time_ms: int = Field(default=0, description="Generation time in milliseconds")


class SequenceSizeRequest(SequenceInput):
    """Request schema for sizing a sequence."""
    enforce_unique_predecessor: bool = Field(default=False, description="Strict single-entry routes")


class SequenceSizeResponse(BaseModel):
    """Smallest bounds able to hold a sequence."""
    width: int = Field(..., description="Required width")
    depth: int = Field(..., description="Required depth")
    height: int = Field(..., description="Required height")


class SequenceVectorsResponse(BaseModel):
    """A sequence in both notations."""
    codes: List[int] = Field(..., description="Move codes")
    vectors: List[List[int]] = Field(..., description="[dx, dy, dz] triples")


class CellModel(BaseModel):
    """Voxel position."""
    x: int
    y: int
    z: int


class ValidateRequest(BaseModel):
    """Request schema for level validation."""
    level_json: Dict[str, Any] = Field(..., description="Level JSON to validate")
    min_route_length: Optional[int] = Field(default=None, ge=0, description="Required shortest route to the goal")
    target_height: Optional[int] = Field(default=None, ge=0, description="Level that must be reachable")


class ValidateResponse(BaseModel):
    """Response schema for level validation."""
    reachable: bool = Field(..., description="Whether the requirement is met")
    goal: Optional[Dict[str, int]] = Field(default=None, description="Goal cell")
    shortest: Optional[int] = Field(default=None, description="Shortest route length to the goal")
    max_reached: int = Field(..., description="Highest reachable level")
    visited: int = Field(..., description="Reachable cell count")


class HintRequest(BaseModel):
    """Request schema for a hint path."""
    level_json: Dict[str, Any] = Field(..., description="Level JSON")
    position: Optional[CellModel] = Field(default=None, description="Current position; defaults to start")
    goal: Optional[CellModel] = Field(default=None, description="Destination; defaults to the computed goal")


class HintResponse(BaseModel):
    """Response schema for a hint path."""
    found: bool = Field(..., description="Whether a path exists")
    path: List[Dict[str, int]] = Field(default=[], description="Cells from position to goal")


class ErrorResponse(BaseModel):
    """Error response schema."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(default=None, description="Detailed error information")
