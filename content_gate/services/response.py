"""
ResponseComposer: map a terminal outcome onto the caller-facing response.
"""

from typing import Optional

from content_gate.constants import (
    ERROR_BLOCKED,
    ERROR_CODE_BLOCKED,
    ERROR_CODE_EXHAUSTED,
    ERROR_EXHAUSTED,
)
from content_gate.pipeline.outcome import GenerationOutcome, OutcomeStatus
from content_gate.schemas import DocOutput, GenerationResponse


def build_doc_output(outcome: GenerationOutcome) -> Optional[DocOutput]:
    """Candidate plus both verdicts; ``None`` for outcomes without content."""
    if outcome.candidate is None or outcome.quality is None or outcome.compliance is None:
        return None
    return DocOutput(
        **outcome.candidate.model_dump(),
        bfs=outcome.quality,
        linter=outcome.compliance,
    )


def compose_response(outcome: GenerationOutcome, log_id: Optional[str]) -> GenerationResponse:
    log_id = log_id or ""
    if outcome.status == OutcomeStatus.ACCEPTED:
        return GenerationResponse(success=True, output=build_doc_output(outcome), log_id=log_id)
    if outcome.status == OutcomeStatus.NEEDS_REVIEW:
        return GenerationResponse(
            success=True,
            output=build_doc_output(outcome),
            needs_review=True,
            log_id=log_id,
        )
    if outcome.status == OutcomeStatus.BLOCKED:
        return GenerationResponse(
            success=False,
            blocked=True,
            error=ERROR_BLOCKED,
            error_code=ERROR_CODE_BLOCKED,
            log_id=log_id,
        )
    if outcome.status == OutcomeStatus.EXHAUSTED:
        return GenerationResponse(
            success=False,
            error=ERROR_EXHAUSTED,
            error_code=ERROR_CODE_EXHAUSTED,
            log_id=log_id,
        )
    raise ValueError(f"Outcome status {outcome.status.value} has no caller response")
