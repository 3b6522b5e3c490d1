"""
Generator collaborator: one chat-model call per attempt.

The pipeline only depends on the ``Generator`` protocol; ``LangChainGenerator``
is the production implementation over the configured provider.
"""

from typing import Optional, Protocol
import logging

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel

from content_gate.config import settings
from content_gate.errors import TransientGenerationError
from content_gate.services.llm import get_llm, model_name_for

logger = logging.getLogger(__name__)


class GeneratorResult(BaseModel):
    """Raw generator output plus usage metadata."""
    text: str
    tokens_in: int = 0
    tokens_out: int = 0
    provider: str = "unknown"
    model: str = "unknown"


class Generator(Protocol):
    async def generate(self, prompt: str, system_prompt: Optional[str] = None) -> GeneratorResult:
        ...


class LangChainGenerator:
    """Generator backed by a LangChain chat model."""

    def __init__(self, provider: Optional[str] = None):
        self.provider = provider or settings.llm_provider

    async def generate(self, prompt: str, system_prompt: Optional[str] = None) -> GeneratorResult:
        llm = get_llm(self.provider)
        messages = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=prompt))

        try:
            response = await llm.ainvoke(messages)
        except Exception as e:
            raise TransientGenerationError(f"{self.provider} generation failed: {e}") from e

        usage = getattr(response, "usage_metadata", None) or {}
        metadata = getattr(response, "response_metadata", None) or {}
        model = metadata.get("model_name") or metadata.get("model") or model_name_for(self.provider)
        content = response.content
        if isinstance(content, list):
            # Anthropic returns content blocks
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block) for block in content
            )

        result = GeneratorResult(
            text=str(content),
            tokens_in=int(usage.get("input_tokens", 0) or 0),
            tokens_out=int(usage.get("output_tokens", 0) or 0),
            provider=self.provider,
            model=str(model),
        )
        logger.debug(
            f"Generator returned {len(result.text)} chars "
            f"(provider={result.provider}, model={result.model}, "
            f"tokens_in={result.tokens_in}, tokens_out={result.tokens_out})"
        )
        return result
