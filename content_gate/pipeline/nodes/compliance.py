"""
Compliance Gate: lint, then auto-fix what can be fixed mechanically.

A blocked verdict is final for the attempt: no fix is tried. When the
linter's fixer changes nothing, the original candidate and verdict stand.
"""

from dataclasses import dataclass
from typing import List
import logging

from content_gate.schemas import BrandSafetyConfig, Candidate, ComplianceVerdict

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("headline", "body", "cta")


@dataclass(frozen=True)
class GateResult:
    candidate: Candidate
    verdict: ComplianceVerdict

    @property
    def fixes_applied(self) -> List[str]:
        return list(self.verdict.fixes_applied)


def merge_fixed_fields(original: Candidate, fixed: Candidate) -> Candidate:
    """Take the fixer's non-empty fields over the original's."""
    updates = {name: getattr(fixed, name) for name in _TEXT_FIELDS if getattr(fixed, name)}
    if fixed.hashtags:
        updates["hashtags"] = list(fixed.hashtags)
    return original.model_copy(update=updates)


class ComplianceGate:
    def __init__(self, linter):
        self.linter = linter

    async def check(self, candidate: Candidate, platform: str, config: BrandSafetyConfig) -> GateResult:
        verdict = await self.linter.lint(candidate, platform, config)
        if verdict.blocked or verdict.passed:
            return GateResult(candidate=candidate, verdict=verdict)

        fixed, fixes = self.linter.auto_fix(candidate, verdict, config, platform=platform)
        if not fixes:
            return GateResult(candidate=candidate, verdict=verdict)

        logger.info(f"[ComplianceGate] Applied {len(fixes)} fix(es): {', '.join(fixes)}")
        return GateResult(
            candidate=merge_fixed_fields(candidate, fixed),
            verdict=verdict.model_copy(update={"fixes_applied": list(fixes)}),
        )
