"""LangChainGenerator against a mocked chat model."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from content_gate.errors import TransientGenerationError
from content_gate.services.generator import LangChainGenerator


def _chat_model(response=None, error=None):
    llm = MagicMock()
    llm.ainvoke = AsyncMock(return_value=response, side_effect=error)
    return llm


class TestLangChainGenerator:

    @pytest.mark.asyncio
    async def test_reads_text_and_usage(self):
        response = SimpleNamespace(
            content='{"body": "hi"}',
            usage_metadata={"input_tokens": 120, "output_tokens": 45},
            response_metadata={"model_name": "gpt-4o-2024-08-06"},
        )
        llm = _chat_model(response)
        with patch("content_gate.services.generator.get_llm", return_value=llm):
            result = await LangChainGenerator(provider="openai").generate("prompt", system_prompt="system")

        assert result.text == '{"body": "hi"}'
        assert (result.tokens_in, result.tokens_out) == (120, 45)
        assert result.provider == "openai"
        assert result.model == "gpt-4o-2024-08-06"
        messages = llm.ainvoke.call_args.args[0]
        assert [m.content for m in messages] == ["system", "prompt"]

    @pytest.mark.asyncio
    async def test_joins_content_blocks(self):
        response = SimpleNamespace(
            content=[{"type": "text", "text": "Hello "}, {"type": "text", "text": "world"}],
            usage_metadata=None,
            response_metadata={},
        )
        with patch("content_gate.services.generator.get_llm", return_value=_chat_model(response)):
            result = await LangChainGenerator(provider="anthropic").generate("prompt")

        assert result.text == "Hello world"
        assert (result.tokens_in, result.tokens_out) == (0, 0)

    @pytest.mark.asyncio
    async def test_provider_errors_are_transient(self):
        with patch("content_gate.services.generator.get_llm", return_value=_chat_model(error=ConnectionError("reset"))):
            with pytest.raises(TransientGenerationError, match="reset"):
                await LangChainGenerator(provider="ollama").generate("prompt")
