"""
Pydantic schemas re-exported for convenient imports.

Usage:
    from content_gate.schemas import Candidate, QualityVerdict, BrandSafetyConfig, ...
"""

from content_gate.schemas.brand import (
    BrandSafetyConfig,
    BrandVoice,
    CompliancePack,
    DEFAULT_BRAND_VOICE,
    DEFAULT_SAFETY_CONFIG,
    SafetyConfigResponse,
    SafetyConfigUpdate,
    SafetyMode,
)
from content_gate.schemas.generation import (
    Candidate,
    ContentInput,
    DocOutput,
    ErrorResponse,
    FieldError,
    GenerationLogEntry,
    GenerationLogListResponse,
    GenerationLogResponse,
    GenerationRequest,
    GenerationResponse,
    GenerationUsage,
    ReviewQueueResponse,
)
from content_gate.schemas.verdicts import ComplianceVerdict, PlatformViolation, QualityVerdict

__all__ = [
    # Brand policy
    "BrandSafetyConfig",
    "BrandVoice",
    "CompliancePack",
    "DEFAULT_BRAND_VOICE",
    "DEFAULT_SAFETY_CONFIG",
    "SafetyConfigResponse",
    "SafetyConfigUpdate",
    "SafetyMode",
    # Generation
    "Candidate",
    "ContentInput",
    "DocOutput",
    "ErrorResponse",
    "FieldError",
    "GenerationLogEntry",
    "GenerationLogListResponse",
    "GenerationLogResponse",
    "GenerationRequest",
    "GenerationResponse",
    "GenerationUsage",
    "ReviewQueueResponse",
    # Verdicts
    "ComplianceVerdict",
    "PlatformViolation",
    "QualityVerdict",
]
