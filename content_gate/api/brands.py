from fastapi import APIRouter, Depends, Path
import logging

from content_gate.api.deps import get_safety_config_repository
from content_gate.errors import SchemaUnavailableError
from content_gate.repositories import SafetyConfigRepository
from content_gate.schemas import (
    BrandSafetyConfig,
    DEFAULT_SAFETY_CONFIG,
    SafetyConfigResponse,
    SafetyConfigUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/brands", tags=["brands"])


@router.get("/{brand_id}/safety-config", response_model=SafetyConfigResponse)
async def get_safety_config(
    brand_id: str = Path(..., min_length=1, max_length=255, description="Brand identifier"),
    repository: SafetyConfigRepository = Depends(get_safety_config_repository),
):
    """Effective safety config for a brand; the system default when none is stored."""
    warnings = []
    try:
        stored = await repository.get(brand_id)
    except SchemaUnavailableError as e:
        logger.warning(f"Safety config store unavailable for brand {brand_id}: {e}")
        warnings.append("Safety config store unavailable; showing system defaults")
        stored = None

    return SafetyConfigResponse(
        brand_id=brand_id,
        is_default=stored is None,
        config=stored or DEFAULT_SAFETY_CONFIG,
        warnings=warnings,
    )


@router.put("/{brand_id}/safety-config", response_model=SafetyConfigResponse)
async def put_safety_config(
    update: SafetyConfigUpdate,
    brand_id: str = Path(..., min_length=1, max_length=255, description="Brand identifier"),
    repository: SafetyConfigRepository = Depends(get_safety_config_repository),
):
    """Create or replace a brand's safety config."""
    config = await repository.put(brand_id, BrandSafetyConfig(**update.model_dump()))
    return SafetyConfigResponse(brand_id=brand_id, is_default=False, config=config)
