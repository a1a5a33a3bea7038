"""Move-code sequence API routes."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ...models.schemas import (
    ErrorResponse,
    SequenceImportRequest,
    SequenceImportResponse,
    SequenceInput,
    SequenceSizeRequest,
    SequenceSizeResponse,
    SequenceVectorsResponse,
)
from ...models.level import BranchConfig
from ...core.branch_generator import BranchLevelGenerator
from ...core.codec import required_size, sequence_from_vectors, vector_tuples
from ...utils.helpers import apply_config_overrides, parse_sequence_input, validate_codes
from ..deps import get_level_branch_generator

router = APIRouter(prefix="/api/sequence", tags=["sequence"])


def resolve_codes(request: SequenceInput) -> List[int]:
    """
    Read move codes from whichever form the request used.

    Free text wins over vectors, vectors over codes.

    Raises:
        HTTPException: 422 when the input is missing or malformed.
    """
    if request.text is not None:
        codes, error = parse_sequence_input(request.text)
    elif request.vectors is not None:
        converted = sequence_from_vectors(request.vectors)
        if converted is None:
            codes, error = None, "Vectors must match the 16 allowed steps."
        else:
            codes, error = validate_codes(converted)
    elif request.codes is not None:
        codes, error = validate_codes(request.codes)
    else:
        codes, error = None, "Provide codes, vectors or text."

    if codes is None:
        raise HTTPException(status_code=422, detail=error)
    return codes


@router.post(
    "/import",
    response_model=SequenceImportResponse,
    responses={400: {"model": ErrorResponse}},
)
async def import_sequence(
    request: SequenceImportRequest,
    branch_generator: BranchLevelGenerator = Depends(get_level_branch_generator),
) -> SequenceImportResponse:
    """
    Build a level whose main route follows the given sequence.

    Args:
        request: SequenceImportRequest with the sequence and build options.
        branch_generator: BranchLevelGenerator dependency.

    Returns:
        SequenceImportResponse with the rebuilt level.
    """
    codes = resolve_codes(request)
    overrides = request.config.model_dump(exclude_none=True) if request.config else None

    try:
        config = apply_config_overrides(BranchConfig(), overrides, request.seed)
        result = branch_generator.generate_from_sequence(
            config,
            codes,
            enforce_unique_predecessor=request.enforce_unique_predecessor,
            auto_expand=request.auto_expand,
        )
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Import failed: {str(e)}")

    if result is None:
        raise HTTPException(status_code=422, detail="Sequence rejected")

    return SequenceImportResponse(
        level=result.world.to_dict(),
        sequence=result.sequence,
        path=[cell.to_dict() for cell in result.path],
        dead_ends=[branch.to_dict() for branch in result.dead_ends],
        attempts=result.attempts,
        generation_time_ms=result.generation_time_ms,
    )


@router.post("/size", response_model=SequenceSizeResponse)
async def sequence_size(request: SequenceSizeRequest) -> SequenceSizeResponse:
    """Smallest world a sequence fits in."""
    codes = resolve_codes(request)
    size = required_size(codes, request.enforce_unique_predecessor)
    if size is None:
        raise HTTPException(status_code=422, detail="Sequence rejected")
    return SequenceSizeResponse(width=size.width, depth=size.depth, height=size.height)


@router.post("/vectors", response_model=SequenceVectorsResponse)
async def sequence_vectors(request: SequenceInput) -> SequenceVectorsResponse:
    """Convert a sequence between move codes and step vectors."""
    codes = resolve_codes(request)
    return SequenceVectorsResponse(
        codes=codes,
        vectors=[list(vector) for vector in vector_tuples(codes)],
    )
