from pydantic import BaseModel, Field
from typing import List, Literal, Optional

SafetyMode = Literal["safe", "bold", "edgy_opt_in"]
CompliancePack = Literal["finance", "real_estate", "wellness", "none"]


class BrandSafetyConfig(BaseModel):
    """Per-brand compliance policy. Snapshot at request start, read-only afterwards."""
    safety_mode: SafetyMode = "safe"
    banned_phrases: List[str] = []
    competitor_names: List[str] = []
    claims: List[str] = []
    required_disclaimers: List[str] = []
    required_hashtags: List[str] = []
    brand_links: List[str] = []
    disallowed_topics: List[str] = []
    allow_topics: List[str] = []
    compliance_pack: CompliancePack = "none"

    class Config:
        frozen = True


# System default used when a brand has no configuration or storage is degraded
DEFAULT_SAFETY_CONFIG = BrandSafetyConfig(
    safety_mode="safe",
    disallowed_topics=["politics", "religion", "medical advice"],
    compliance_pack="none",
)


class BrandVoice(BaseModel):
    """Brand voice parameters handed to the Brand-Fidelity Scorer."""
    brand_name: str = "Your Brand"
    tone_keywords: List[str] = []
    brand_personality: List[str] = []
    writing_style: str = "professional"
    common_phrases: List[str] = []

    class Config:
        frozen = True


DEFAULT_BRAND_VOICE = BrandVoice()


class SafetyConfigUpdate(BaseModel):
    """Request body for ``PUT /brands/{brand_id}/safety-config``."""
    safety_mode: SafetyMode = "safe"
    banned_phrases: List[str] = Field(default=[], max_length=500)
    competitor_names: List[str] = Field(default=[], max_length=200)
    claims: List[str] = Field(default=[], max_length=500)
    required_disclaimers: List[str] = Field(default=[], max_length=50)
    required_hashtags: List[str] = Field(default=[], max_length=30)
    brand_links: List[str] = []
    disallowed_topics: List[str] = []
    allow_topics: List[str] = []
    compliance_pack: CompliancePack = "none"


class SafetyConfigResponse(BaseModel):
    brand_id: str
    is_default: bool
    config: BrandSafetyConfig
    warnings: List[str] = []
