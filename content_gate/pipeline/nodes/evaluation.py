"""
Quality Evaluator: brand-fidelity scoring of the raw candidate.

Scores the candidate exactly as generated, before any compliance auto-fix.
A scorer failure propagates to the controller, which treats it as a
failed attempt.
"""

import logging

from content_gate.schemas import BrandVoice, Candidate, QualityVerdict

logger = logging.getLogger(__name__)


class QualityEvaluator:
    def __init__(self, scorer):
        self.scorer = scorer

    async def evaluate(self, candidate: Candidate, voice: BrandVoice, platform: str) -> QualityVerdict:
        verdict = await self.scorer.score(candidate, voice, platform)
        logger.info(
            f"[QualityEvaluator] overall={verdict.overall:.2f} passed={verdict.passed} "
            f"issues={len(verdict.issues)}"
        )
        return verdict
