from pydantic import BaseModel, Field, computed_field
from typing import List, Literal, Optional
from datetime import datetime
import uuid

from content_gate.constants import DEFAULT_CTA, DEFAULT_TONE_USED, MAX_TOPIC_LENGTH_CHARS
from content_gate.schemas.brand import SafetyMode
from content_gate.schemas.verdicts import QualityVerdict, ComplianceVerdict


# ── Request Schemas ──


class ContentInput(BaseModel):
    """What to write: topic plus platform/format hints."""
    topic: str = Field(..., min_length=1, max_length=MAX_TOPIC_LENGTH_CHARS, description="Topic or content brief")
    platform: str = Field(..., min_length=1, description="Target platform (instagram, linkedin, facebook, twitter, ...)")
    tone: str = Field(..., min_length=1, description="Requested tone of voice")
    format: Literal["reel", "carousel", "image", "story", "post"] = Field(..., description="Content format")
    max_length: Optional[int] = Field(None, ge=1, le=125000, description="Maximum body length in characters")
    include_cta: bool = Field(default=True, description="Whether to include a call-to-action")
    cta_type: Optional[Literal["link", "comment", "dm", "bio"]] = Field(None, description="Kind of CTA to write")

    class Config:
        frozen = True


class GenerationRequest(BaseModel):
    brand_id: str = Field(..., min_length=1, max_length=255, description="Brand identifier")
    input: ContentInput
    safety_mode: Optional[SafetyMode] = Field(None, description="Override for the brand's stored safety mode")

    class Config:
        frozen = True


# ── Domain records ──


class Candidate(BaseModel):
    """Working draft for one attempt."""
    headline: str = ""
    body: str
    cta: str = DEFAULT_CTA
    hashtags: List[str] = []
    post_theme: str = "post"
    tone_used: str = DEFAULT_TONE_USED
    aspect_ratio: Optional[str] = None

    @computed_field
    @property
    def char_count(self) -> int:
        return len(self.body)


class GenerationUsage(BaseModel):
    """Token and provider metadata for one generator call (or the sum over a request)."""
    tokens_in: int = 0
    tokens_out: int = 0
    provider: str = "unknown"
    model: str = "unknown"


# ── Response Schemas ──


class DocOutput(BaseModel):
    headline: str
    body: str
    cta: str
    hashtags: List[str]
    post_theme: str
    tone_used: str
    aspect_ratio: Optional[str] = None
    char_count: int
    bfs: QualityVerdict
    linter: ComplianceVerdict


class GenerationResponse(BaseModel):
    success: bool
    output: Optional[DocOutput] = None
    needs_review: bool = False
    blocked: bool = False
    error: Optional[str] = None
    error_code: Optional[str] = None
    log_id: str = ""


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Body returned for validation and internal failures."""
    success: bool = False
    needs_review: bool = False
    blocked: bool = False
    error: str
    error_code: str
    details: List[FieldError] = []
    log_id: str = ""


class GenerationLogResponse(BaseModel):
    id: uuid.UUID
    brand_id: str
    agent: str
    prompt_version: Optional[str] = None
    safety_mode: str
    status: str
    input: dict
    output: Optional[dict] = None
    bfs: Optional[dict] = None
    linter: Optional[dict] = None
    approved: bool
    attempts_used: int
    duration_ms: int
    tokens_in: int
    tokens_out: int
    provider: str
    model: str
    request_id: str
    error: Optional[str] = None
    reviewer_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GenerationLogListResponse(BaseModel):
    logs: List[GenerationLogResponse]
    total: int


class GenerationLogEntry(BaseModel):
    """Row written to ``generation_logs`` for every request."""
    brand_id: str
    agent: str
    prompt_version: Optional[str] = None
    safety_mode: str
    status: str
    input: dict
    output: Optional[dict] = None
    bfs: Optional[dict] = None
    linter: Optional[dict] = None
    approved: bool = False
    attempts_used: int = 0
    duration_ms: int = 0
    tokens_in: int = 0
    tokens_out: int = 0
    provider: str = "unknown"
    model: str = "unknown"
    request_id: str
    error: Optional[str] = None


class ReviewQueueResponse(BaseModel):
    """Rows awaiting human review: not approved and not failed."""
    items: List[GenerationLogResponse]
    total_count: int
    pending_count: int
