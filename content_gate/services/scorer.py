"""
Brand-Fidelity Scorer: LLM-based brand voice scoring.

Scores a candidate on tone alignment, terminology match, compliance, CTA fit,
and platform fit (each 0–1) and combines them into a weighted overall score.
The pipeline only depends on the ``Scorer`` protocol.
"""

from typing import Optional, Protocol
import logging

from pydantic import BaseModel, Field
from langchain_core.messages import SystemMessage, HumanMessage

from content_gate.config import settings
from content_gate.schemas import BrandVoice, Candidate, QualityVerdict
from content_gate.services.llm import get_llm

logger = logging.getLogger(__name__)


class Scorer(Protocol):
    async def score(self, candidate: Candidate, voice: BrandVoice, platform: str) -> QualityVerdict:
        ...


class BrandFidelityOutput(BaseModel):
    """Structured sub-scores from the LLM."""
    tone_alignment: float = Field(ge=0, le=1, description="Match with brand tone keywords and personality")
    terminology_match: float = Field(ge=0, le=1, description="Use of brand terminology and common phrases")
    compliance: float = Field(ge=0, le=1, description="Absence of off-brand or risky wording")
    cta_fit: float = Field(ge=0, le=1, description="CTA suits the brand voice and goal")
    platform_fit: float = Field(ge=0, le=1, description="Length, structure and hashtags suit the platform")
    summary: str = Field(default="", description="One or two sentences explaining the scores")


BFS_SYSTEM_PROMPT = """You are a brand fidelity reviewer for marketing copy.
Score the following post for the brand "{brand_name}" on each dimension from 0.0 to 1.0.

Brand voice:
- Tone keywords: {tone_keywords}
- Personality: {personality}
- Writing style: {writing_style}
- Common phrases: {common_phrases}
Target platform: {platform}

Scoring rubric:
- tone_alignment: Does the copy sound like this brand?
- terminology_match: Does it use the brand's vocabulary and phrases?
- compliance: Is it free of off-brand, exaggerated, or risky claims?
- cta_fit: Is the call-to-action natural for this brand and platform?
- platform_fit: Are length, structure and hashtags right for the platform?

Be strict and consistent. Give a short summary with specific examples."""


# Weights for computing the weighted overall score
BFS_WEIGHTS = {
    "tone": 0.30,
    "terminology": 0.20,
    "compliance": 0.20,
    "cta": 0.15,
    "platform": 0.15,
}

# Per-dimension floors below which an issue is reported
_ISSUE_FLOORS = (
    ("tone_alignment", 0.7, "Tone does not match brand personality"),
    ("terminology_match", 0.7, "Missing key brand terminology or phrases"),
    ("compliance", 1.0, "Compliance issues detected (banned phrases or missing disclaimers)"),
    ("cta_fit", 0.7, "CTA does not align with brand voice or goals"),
    ("platform_fit", 0.8, "Content does not fit platform best practices"),
)


def build_quality_verdict(output: BrandFidelityOutput, threshold: Optional[float] = None) -> QualityVerdict:
    """Combine sub-scores into a verdict. Pure, so it is tested without an LLM."""
    threshold = settings.bfs_pass_threshold if threshold is None else threshold
    overall = round(
        output.tone_alignment * BFS_WEIGHTS["tone"]
        + output.terminology_match * BFS_WEIGHTS["terminology"]
        + output.compliance * BFS_WEIGHTS["compliance"]
        + output.cta_fit * BFS_WEIGHTS["cta"]
        + output.platform_fit * BFS_WEIGHTS["platform"],
        4,
    )
    issues = [message for name, floor, message in _ISSUE_FLOORS if getattr(output, name) < floor]
    return QualityVerdict(
        overall=overall,
        tone_alignment=output.tone_alignment,
        terminology_match=output.terminology_match,
        compliance=output.compliance,
        cta_fit=output.cta_fit,
        platform_fit=output.platform_fit,
        passed=overall >= threshold,
        issues=issues,
    )


class LLMBrandFidelityScorer:
    """Scorer that asks a chat model for structured sub-scores."""

    def __init__(self, provider: Optional[str] = None, threshold: Optional[float] = None):
        self.provider = provider or settings.scorer_llm_provider
        self.threshold = threshold

    async def score(self, candidate: Candidate, voice: BrandVoice, platform: str) -> QualityVerdict:
        structured_llm = get_llm(self.provider).with_structured_output(BrandFidelityOutput)

        system_prompt = BFS_SYSTEM_PROMPT.format(
            brand_name=voice.brand_name,
            tone_keywords=", ".join(voice.tone_keywords) or "not specified",
            personality=", ".join(voice.brand_personality) or "not specified",
            writing_style=voice.writing_style,
            common_phrases=", ".join(voice.common_phrases) or "none",
            platform=platform,
        )
        human_content = (
            f"Headline: {candidate.headline}\n\n{candidate.body}\n\n"
            f"CTA: {candidate.cta}\nHashtags: {' '.join(candidate.hashtags)}"
        )

        output = await structured_llm.ainvoke([
            SystemMessage(content=system_prompt),
            HumanMessage(content=human_content),
        ])
        verdict = build_quality_verdict(output, self.threshold)

        logger.info(
            f"[BFS] overall={verdict.overall} passed={verdict.passed} "
            f"(tone={verdict.tone_alignment}, terms={verdict.terminology_match}, "
            f"compliance={verdict.compliance}, cta={verdict.cta_fit}, "
            f"platform={verdict.platform_fit}) summary={output.summary}"
        )
        return verdict
