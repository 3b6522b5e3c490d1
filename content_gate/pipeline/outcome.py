"""
Terminal outcomes of a generation run and the pure gate decision that
drives the regeneration loop.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from content_gate.schemas import Candidate, ComplianceVerdict, GenerationUsage, QualityVerdict


class OutcomeStatus(str, Enum):
    ACCEPTED = "accepted"
    NEEDS_REVIEW = "needs_review"
    BLOCKED = "blocked"
    EXHAUSTED = "exhausted"
    # Audit-only: the run ended without an outcome the caller sees as 200
    FAILED = "failed"
    CANCELLED = "cancelled"


class GateDecision(str, Enum):
    BLOCKED = "blocked"
    ACCEPTED = "accepted"
    NEEDS_REVIEW = "needs_review"
    RETRY = "retry"
    EXHAUSTED = "exhausted"


def decide(
    quality: QualityVerdict,
    compliance: ComplianceVerdict,
    attempts_remaining: int,
) -> GateDecision:
    """
    Fixed priority: blocked, accepted, needs review, retry, exhausted.

    A candidate is accepted when it passes quality and either passes
    compliance outright or was repaired by auto-fix.
    """
    if compliance.blocked:
        return GateDecision.BLOCKED
    if quality.passed and (compliance.passed or compliance.fixes_applied):
        return GateDecision.ACCEPTED
    if compliance.needs_human_review:
        return GateDecision.NEEDS_REVIEW
    if attempts_remaining > 0:
        return GateDecision.RETRY
    return GateDecision.EXHAUSTED


@dataclass(frozen=True)
class GenerationOutcome:
    status: OutcomeStatus
    candidate: Optional[Candidate] = None
    quality: Optional[QualityVerdict] = None
    compliance: Optional[ComplianceVerdict] = None
    error: Optional[str] = None

    def __post_init__(self):
        if self.status == OutcomeStatus.BLOCKED and self.candidate is not None:
            raise ValueError("A blocked outcome never carries a candidate")
        if self.status in (OutcomeStatus.ACCEPTED, OutcomeStatus.NEEDS_REVIEW):
            if self.candidate is None or self.quality is None or self.compliance is None:
                raise ValueError(f"{self.status.value} outcome requires candidate, quality and compliance")

    @classmethod
    def accepted(cls, candidate: Candidate, quality: QualityVerdict, compliance: ComplianceVerdict):
        return cls(OutcomeStatus.ACCEPTED, candidate, quality, compliance)

    @classmethod
    def needs_review(cls, candidate: Candidate, quality: QualityVerdict, compliance: ComplianceVerdict):
        return cls(OutcomeStatus.NEEDS_REVIEW, candidate, quality, compliance)

    @classmethod
    def blocked(cls, quality: QualityVerdict, compliance: ComplianceVerdict):
        return cls(OutcomeStatus.BLOCKED, None, quality, compliance)

    @classmethod
    def exhausted(cls, error: Optional[str] = None):
        return cls(OutcomeStatus.EXHAUSTED, error=error)

    @classmethod
    def failed(cls, error: str):
        return cls(OutcomeStatus.FAILED, error=error)

    @classmethod
    def cancelled(cls):
        return cls(OutcomeStatus.CANCELLED)

    @property
    def approved(self) -> bool:
        return self.status == OutcomeStatus.ACCEPTED

    @property
    def fixes_applied(self) -> List[str]:
        return list(self.compliance.fixes_applied) if self.compliance else []


@dataclass
class AttemptRecord:
    """The evaluated state of one iteration; only the latest one is kept."""
    attempt: int
    candidate: Candidate
    quality: QualityVerdict
    compliance: ComplianceVerdict
    decision: GateDecision


@dataclass
class RunStats:
    """
    Mutable progress of one controller run.

    Owned by the caller so that a cancelled run can still be audited with
    the attempts and tokens it consumed.
    """
    attempts_used: int = 0
    candidates_seen: int = 0
    tokens_in: int = 0
    tokens_out: int = 0
    provider: str = "unknown"
    model: str = "unknown"
    last_attempt: Optional[AttemptRecord] = None

    def add_usage(self, usage: Optional[GenerationUsage]) -> None:
        if usage is None:
            return
        self.tokens_in += usage.tokens_in
        self.tokens_out += usage.tokens_out
        if usage.provider != "unknown":
            self.provider = usage.provider
        if usage.model != "unknown":
            self.model = usage.model

    @property
    def usage(self) -> GenerationUsage:
        return GenerationUsage(
            tokens_in=self.tokens_in,
            tokens_out=self.tokens_out,
            provider=self.provider,
            model=self.model,
        )
