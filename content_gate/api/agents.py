from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from typing import Optional
import logging
import uuid

from content_gate.api.deps import get_generation_log_repository, get_generation_service
from content_gate.errors import PersistenceError
from content_gate.pipeline.service import DocGenerationService
from content_gate.repositories import GenerationLogRepository
from content_gate.schemas import (
    ErrorResponse,
    GenerationLogListResponse,
    GenerationLogResponse,
    GenerationRequest,
    GenerationResponse,
    ReviewQueueResponse,
)
from content_gate.services.response import compose_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/agents", tags=["agents"])


@router.post(
    "/generate/doc",
    response_model=GenerationResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "Brand config could not be loaded, or scoring/linting failed"},
        502: {"model": ErrorResponse, "description": "Generator failed on every attempt"},
    },
)
async def generate_doc(
    generation_request: GenerationRequest,
    service: DocGenerationService = Depends(get_generation_service),
):
    """
    Generate brand-safe copy behind the quality and compliance gate.

    Blocked and exhausted outcomes are normal results (200 with
    ``success=false``); only validation and generation failures are errors.
    """
    result = await service.generate(generation_request)
    return compose_response(result.outcome, result.log_id)


@router.get("/logs", response_model=GenerationLogListResponse)
async def list_generation_logs(
    brand_id: Optional[str] = Query(None, description="Only logs for this brand"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    repository: GenerationLogRepository = Depends(get_generation_log_repository),
):
    """List audit rows, newest first."""
    rows, total = await repository.list_for_brand(brand_id=brand_id, limit=limit, offset=offset)
    return GenerationLogListResponse(
        logs=[GenerationLogResponse.model_validate(row) for row in rows],
        total=total,
    )


@router.get("/logs/{log_id}", response_model=GenerationLogResponse)
async def get_generation_log(
    log_id: uuid.UUID,
    repository: GenerationLogRepository = Depends(get_generation_log_repository),
):
    row = await repository.get(log_id)
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Generation log {log_id} not found",
        )
    return GenerationLogResponse.model_validate(row)


@router.get("/review/queue/{brand_id}", response_model=ReviewQueueResponse)
async def get_review_queue(
    brand_id: str = Path(..., min_length=1, max_length=255),
    repository: GenerationLogRepository = Depends(get_generation_log_repository),
):
    """
    Content held for human review, newest first.

    A storage failure yields an empty queue rather than an error.
    """
    try:
        rows = await repository.list_review_queue(brand_id)
    except PersistenceError as e:
        logger.warning(f"Review queue for brand {brand_id} unavailable: {e}")
        return ReviewQueueResponse(items=[], total_count=0, pending_count=0)
    items = [GenerationLogResponse.model_validate(row) for row in rows]
    return ReviewQueueResponse(items=items, total_count=len(items), pending_count=len(items))
