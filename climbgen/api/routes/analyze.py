"""Level validation and hint API routes."""
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from ...models.schemas import (
    HintRequest,
    HintResponse,
    ValidateRequest,
    ValidateResponse,
)
from ...models.world import Cell, World
from ...core.validator import find_path, validate_world
from ...utils.helpers import validate_level_json, world_from_dict

router = APIRouter(prefix="/api", tags=["analyze"])


def _load_world(level_json: Dict[str, Any]) -> World:
    ok, error = validate_level_json(level_json)
    if not ok:
        raise HTTPException(status_code=422, detail=f"Invalid level: {error}")
    return world_from_dict(level_json)


@router.post("/validate", response_model=ValidateResponse)
async def validate_level(request: ValidateRequest) -> ValidateResponse:
    """
    Check that a level can be climbed.

    Args:
        request: ValidateRequest with level_json and an optional requirement.

    Returns:
        ValidateResponse with reachability, goal and shortest route.
    """
    world = _load_world(request.level_json)
    try:
        report = validate_world(
            world,
            min_route_length=request.min_route_length,
            target_z=request.target_height,
        )
        return ValidateResponse(**report.to_dict())
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Validation failed: {str(e)}")


@router.post("/hint", response_model=HintResponse)
async def hint_path(request: HintRequest) -> HintResponse:
    """Shortest route from a position (default: the start) to the goal."""
    world = _load_world(request.level_json)

    start = world.start
    if request.position is not None:
        start = Cell(request.position.x, request.position.y, request.position.z)
        if not world.in_bounds(start.x, start.y) or not world.is_standable(start.x, start.y, start.z):
            raise HTTPException(status_code=422, detail="Position is not a standable cell")
    goal = None
    if request.goal is not None:
        goal = Cell(request.goal.x, request.goal.y, request.goal.z)

    try:
        path = find_path(world, start=start, goal=goal)
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Hint failed: {str(e)}")

    if path is None:
        return HintResponse(found=False)
    return HintResponse(found=True, path=[cell.to_dict() for cell in path])
