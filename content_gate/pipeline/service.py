"""
DocGenerationService: one generation request from resolved config to audit row.

Every request is audited exactly once, including requests whose generation
failed outright or whose caller went away mid-run.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import asyncio
import logging
import time
import uuid

from content_gate.errors import GenerationError
from content_gate.pipeline.graph import RegenerationController
from content_gate.pipeline.outcome import GenerationOutcome, RunStats
from content_gate.pipeline.prompts import build_doc_prompt
from content_gate.schemas import GenerationRequest
from content_gate.services.audit import AuditLogger
from content_gate.services.safety_config import SafetyConfigResolver

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    outcome: GenerationOutcome
    log_id: Optional[str]
    attempts_used: int
    request_id: str
    warnings: List[str] = field(default_factory=list)


class DocGenerationService:
    def __init__(
        self,
        controller: RegenerationController,
        resolver: SafetyConfigResolver,
        audit_logger: AuditLogger,
    ):
        self.controller = controller
        self.resolver = resolver
        self.audit_logger = audit_logger

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Raises:
            SafetyConfigLoadError: brand config could not be loaded (nothing is audited).
            GenerationError: the final attempt failed with no candidate ever produced;
                the failure is audited and ``log_id`` is set on the exception.
            Exception: a scorer or linter failure on the final attempt with no
                candidate ever evaluated; audited the same way.
        """
        request_id = str(uuid.uuid4())
        started = time.monotonic()
        warnings: List[str] = []
        stats = RunStats()

        logger.info(
            f"Request {request_id}: Generating {request.input.format} for brand {request.brand_id} "
            f"on {request.input.platform}"
        )
        safety_config = await self.resolver.resolve(request.brand_id, request.safety_mode, warnings)
        voice = await self.resolver.resolve_voice(request.brand_id, warnings)
        system_prompt, prompt = build_doc_prompt(request.input, voice, safety_config)

        def audit(outcome: GenerationOutcome):
            duration_ms = int((time.monotonic() - started) * 1000)
            return self.audit_logger.record(
                request, request_id, safety_config, outcome, stats, duration_ms, warnings
            )

        try:
            outcome = await self.controller.run(
                request_id=request_id,
                brand_id=request.brand_id,
                content_input=request.input,
                system_prompt=system_prompt,
                prompt=prompt,
                safety_config=safety_config,
                brand_voice=voice,
                stats=stats,
            )
        except GenerationError as e:
            logger.error(f"Request {request_id}: Generation failed after {stats.attempts_used} attempt(s): {e}")
            e.log_id = await audit(GenerationOutcome.failed(str(e)))
            raise
        except asyncio.CancelledError:
            logger.warning(f"Request {request_id}: Cancelled during attempt {stats.attempts_used}")
            await asyncio.shield(audit(GenerationOutcome.cancelled()))
            raise
        except Exception as e:
            logger.error(
                f"Request {request_id}: Pipeline failed after {stats.attempts_used} attempt(s): {e}",
                exc_info=True,
            )
            e.log_id = await audit(GenerationOutcome.failed(f"{type(e).__name__}: {e}"))
            raise

        log_id = await audit(outcome)
        logger.info(
            f"Request {request_id}: {outcome.status.value} after {stats.attempts_used} attempt(s)"
            + (f" with {len(warnings)} warning(s)" if warnings else "")
        )
        return GenerationResult(
            outcome=outcome,
            log_id=log_id,
            attempts_used=stats.attempts_used,
            request_id=request_id,
            warnings=warnings,
        )
