"""
Verdicts produced by the scorer and the linter.

Both are frozen; the compliance gate records auto-fixes by copying the
verdict with ``fixes_applied`` set, never by mutating it.
"""

from pydantic import BaseModel, Field
from typing import List, Literal


class QualityVerdict(BaseModel):
    """Brand Fidelity Score for one candidate."""
    overall: float = Field(ge=0, le=1)
    tone_alignment: float = Field(ge=0, le=1)
    terminology_match: float = Field(ge=0, le=1)
    compliance: float = Field(ge=0, le=1)
    cta_fit: float = Field(ge=0, le=1)
    platform_fit: float = Field(ge=0, le=1)
    passed: bool
    issues: List[str] = []

    class Config:
        frozen = True


class PlatformViolation(BaseModel):
    """A platform limit the candidate exceeds."""
    platform: str
    issue: Literal["char_limit", "hashtag_limit"]
    current: int
    limit: int
    suggestion: str = ""

    class Config:
        frozen = True


class ComplianceVerdict(BaseModel):
    """Linter result. ``blocked`` is independent of ``passed`` and always wins."""
    passed: bool
    blocked: bool = False
    needs_human_review: bool = False
    profanity_detected: bool = False
    toxicity_score: float = Field(default=0.0, ge=0, le=1)
    banned_phrases_found: List[str] = []
    banned_claims_found: List[str] = []
    missing_disclaimers: List[str] = []
    missing_hashtags: List[str] = []
    platform_violations: List[PlatformViolation] = []
    pii_detected: List[str] = []
    competitor_mentions: List[str] = []
    fixes_applied: List[str] = []

    class Config:
        frozen = True
