from typing import TypedDict, Optional

from content_gate.schemas import (
    BrandSafetyConfig,
    BrandVoice,
    Candidate,
    ComplianceVerdict,
    ContentInput,
    QualityVerdict,
)


class GateState(TypedDict):
    """State for one regeneration run.

    Inputs are set once by the controller; the per-attempt keys are
    overwritten on every pass through ``generate``.
    """

    request_id: str
    brand_id: str
    content_input: ContentInput
    system_prompt: str
    prompt: str
    safety_config: BrandSafetyConfig
    brand_voice: BrandVoice

    # Progress
    attempt: int
    candidates_seen: int

    # Current attempt (cleared by generate)
    candidate: Optional[Candidate]
    quality: Optional[QualityVerdict]
    compliance: Optional[ComplianceVerdict]

    # Routing
    decision: Optional[str]     # GateDecision value
    last_error: Optional[str]
