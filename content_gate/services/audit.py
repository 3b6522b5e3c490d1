"""
AuditLogger: one ``generation_logs`` row per request, whatever the outcome.

The audit trail is best-effort from the caller's point of view: a failed or
slow write is logged and reported on the warnings side-channel, and the
request still gets its response.
"""

from typing import List, Optional
import asyncio
import logging

from content_gate.config import settings
from content_gate.constants import AGENT_DOC, ERROR_BLOCKED, ERROR_CANCELLED, ERROR_EXHAUSTED_LOG
from content_gate.pipeline.outcome import GenerationOutcome, OutcomeStatus, RunStats
from content_gate.schemas import BrandSafetyConfig, GenerationLogEntry, GenerationRequest
from content_gate.services.response import build_doc_output

logger = logging.getLogger(__name__)


def _error_text(outcome: GenerationOutcome) -> Optional[str]:
    if outcome.status == OutcomeStatus.BLOCKED:
        return ERROR_BLOCKED
    if outcome.status == OutcomeStatus.EXHAUSTED:
        return ERROR_EXHAUSTED_LOG
    if outcome.status == OutcomeStatus.FAILED:
        return outcome.error
    if outcome.status == OutcomeStatus.CANCELLED:
        return ERROR_CANCELLED
    return None


class AuditLogger:
    def __init__(
        self,
        log_repository,
        timeout_seconds: Optional[float] = None,
        agent: str = AGENT_DOC,
        prompt_version: Optional[str] = None,
    ):
        self.log_repository = log_repository
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.persistence_timeout_seconds
        self.agent = agent
        self.prompt_version = prompt_version or settings.prompt_version

    def build_entry(
        self,
        request: GenerationRequest,
        request_id: str,
        safety_config: BrandSafetyConfig,
        outcome: GenerationOutcome,
        stats: RunStats,
        duration_ms: int,
    ) -> GenerationLogEntry:
        # Blocked runs keep their verdicts for review even though no content is stored
        quality = outcome.quality
        compliance = outcome.compliance
        if quality is None and stats.last_attempt is not None and outcome.status == OutcomeStatus.BLOCKED:
            quality = stats.last_attempt.quality
            compliance = stats.last_attempt.compliance

        output = build_doc_output(outcome)
        return GenerationLogEntry(
            brand_id=request.brand_id,
            agent=self.agent,
            prompt_version=self.prompt_version,
            safety_mode=safety_config.safety_mode,
            status=outcome.status.value,
            input=request.input.model_dump(mode="json"),
            output=output.model_dump(mode="json") if output else None,
            bfs=quality.model_dump(mode="json") if quality else None,
            linter=compliance.model_dump(mode="json") if compliance else None,
            approved=outcome.approved,
            attempts_used=stats.attempts_used,
            duration_ms=duration_ms,
            tokens_in=stats.tokens_in,
            tokens_out=stats.tokens_out,
            provider=stats.provider,
            model=stats.model,
            request_id=request_id,
            error=_error_text(outcome),
        )

    async def record(
        self,
        request: GenerationRequest,
        request_id: str,
        safety_config: BrandSafetyConfig,
        outcome: GenerationOutcome,
        stats: RunStats,
        duration_ms: int,
        warnings: Optional[List[str]] = None,
    ) -> Optional[str]:
        """Persist the entry; returns the log id, or ``None`` when the write failed."""
        entry = self.build_entry(request, request_id, safety_config, outcome, stats, duration_ms)
        try:
            log_id = await asyncio.wait_for(self.log_repository.insert(entry), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            message = f"Audit log write timed out after {self.timeout_seconds}s"
            logger.error(f"Request {request_id}: {message}")
        except Exception as e:
            message = f"Audit log write failed: {e}"
            logger.error(f"Request {request_id}: {message}", exc_info=True)
        else:
            logger.info(
                f"Request {request_id}: Logged {entry.status} for brand {entry.brand_id} "
                f"(log_id={log_id}, attempts={entry.attempts_used}, duration={duration_ms}ms)"
            )
            return log_id

        if warnings is not None:
            warnings.append(message)
        return None
