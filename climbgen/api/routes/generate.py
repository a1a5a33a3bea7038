"""Level generation API routes."""
from typing import List, Union

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from ...config import Settings
from ...models.schemas import ErrorResponse, GenerateRequest, GenerateResponse
from ...models.level import (
    BranchConfig,
    BranchGenerationResult,
    GenerationResult,
    HeightFieldConfig,
    VoxelConfig,
)
from ...core.generator import LevelGenerator
from ...core.branch_generator import BranchLevelGenerator
from ...utils.helpers import apply_config_overrides, encode_levels
from ..deps import get_app_settings, get_level_branch_generator, get_level_generator

router = APIRouter(prefix="/api", tags=["generate"])

AnyResult = Union[GenerationResult, BranchGenerationResult]


def _run_generation(
    request: GenerateRequest,
    generator: LevelGenerator,
    branch_generator: BranchLevelGenerator,
) -> List[AnyResult]:
    overrides = request.config.model_dump(exclude_none=True) if request.config else None

    if request.variant == "height_field":
        config = apply_config_overrides(HeightFieldConfig(), overrides, request.seed)
        return generator.generate_height_field_levels(request.count, config)
    if request.variant == "voxel":
        config = apply_config_overrides(VoxelConfig(), overrides, request.seed)
        return generator.generate_voxel_levels(request.count, config)
    config = apply_config_overrides(BranchConfig(), overrides, request.seed)
    return branch_generator.generate_levels(request.count, config)


def _check_batch_size(request: GenerateRequest, settings: Settings) -> None:
    if request.count > settings.max_batch_size:
        raise HTTPException(
            status_code=400,
            detail=f"count must be at most {settings.max_batch_size}",
        )


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}},
)
async def generate_levels(
    request: GenerateRequest,
    generator: LevelGenerator = Depends(get_level_generator),
    branch_generator: BranchLevelGenerator = Depends(get_level_branch_generator),
    settings: Settings = Depends(get_app_settings),
) -> GenerateResponse:
    """
    Generate a batch of climbing levels.

    Args:
        request: GenerateRequest with variant, count, seed and overrides.
        generator: LevelGenerator dependency.
        branch_generator: BranchLevelGenerator dependency.
        settings: Application settings dependency.

    Returns:
        GenerateResponse with the levels and, in debug mode, their routes.
    """
    _check_batch_size(request, settings)
    try:
        results = _run_generation(request, generator, branch_generator)

        return GenerateResponse(
            levels=[result.world.to_dict() for result in results],
            fallback_count=sum(1 for result in results if result.fallback),
            generation_time_ms=sum(result.generation_time_ms for result in results),
            debug=[result.to_dict() for result in results] if request.debug else None,
        )
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Generation failed: {str(e)}")


@router.post("/levels/export", responses={400: {"model": ErrorResponse}})
async def export_levels(
    request: GenerateRequest,
    generator: LevelGenerator = Depends(get_level_generator),
    branch_generator: BranchLevelGenerator = Depends(get_level_branch_generator),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """Generate a batch and return it as a JSON level file."""
    _check_batch_size(request, settings)
    try:
        results = _run_generation(request, generator, branch_generator)
        text = encode_levels(result.world for result in results)
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Export failed: {str(e)}")

    return Response(content=text, media_type="application/json")
