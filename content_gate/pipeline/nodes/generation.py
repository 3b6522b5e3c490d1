"""
Generator Adapter: one bounded generator call turned into a Candidate.

Every failure mode surfaces as a ``GenerationError`` subclass so the
controller can decide between retrying and giving up.
"""

from typing import Tuple
import asyncio
import logging

from content_gate.errors import GenerationError, GeneratorTimeoutError, TransientGenerationError
from content_gate.pipeline.parsing import parse_candidate
from content_gate.schemas import Candidate, ContentInput, GenerationUsage

logger = logging.getLogger(__name__)


class GeneratorAdapter:
    def __init__(self, generator, timeout_seconds: float):
        self.generator = generator
        self.timeout_seconds = timeout_seconds

    async def generate(
        self,
        system_prompt: str,
        prompt: str,
        content_input: ContentInput,
    ) -> Tuple[Candidate, GenerationUsage]:
        try:
            result = await asyncio.wait_for(
                self.generator.generate(prompt, system_prompt=system_prompt),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise GeneratorTimeoutError(
                f"Generator did not respond within {self.timeout_seconds}s"
            ) from e
        except GenerationError:
            raise
        except Exception as e:
            raise TransientGenerationError(f"Generator failed: {e}") from e

        usage = GenerationUsage(
            tokens_in=result.tokens_in,
            tokens_out=result.tokens_out,
            provider=result.provider,
            model=result.model,
        )
        try:
            parsed = parse_candidate(result.text, content_input)
        except GenerationError as e:
            e.usage = usage
            raise

        if not parsed.structured:
            logger.warning(
                f"Generator output was not valid JSON; used line-based fallback "
                f"({len(result.text)} chars)"
            )
        return parsed.candidate, usage
