# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the LiteLLM completion client."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.core.config.settings import LLMSettings
from src.core.intelligence.llm import LLMClient, LLMError


@pytest.fixture
def llm_settings():
    """Provide Ollama settings."""
    return LLMSettings(default_provider="ollama")


def _completion(content: str) -> MagicMock:
    response = MagicMock()
    response.choices[0].message.content = content
    response.choices[0].finish_reason = "stop"
    response.usage.prompt_tokens = 120
    response.usage.completion_tokens = 80
    return response


class TestLLMClient:
    """Tests for LLMClient class."""

    def test_default_model_from_settings(self, llm_settings):
        """Test the provider's default model is used."""
        client = LLMClient(llm_settings=llm_settings)

        assert client.model == "ollama/qwen2.5:7b"

    @pytest.mark.asyncio
    async def test_complete(self, llm_settings):
        """Test a completion returns content and usage."""
        client = LLMClient(llm_settings=llm_settings)

        with patch(
            "src.core.intelligence.llm.client.acompletion",
            AsyncMock(return_value=_completion('{"a": 1}')),
        ) as acompletion:
            response = await client.complete("Write a question", system_prompt="JSON only")

        assert response.content == '{"a": 1}'
        assert response.total_tokens == 200
        kwargs = acompletion.call_args.kwargs
        assert kwargs["model"] == "ollama/qwen2.5:7b"
        assert kwargs["api_base"] == "http://localhost:11434"
        assert kwargs["messages"] == [
            {"role": "system", "content": "JSON only"},
            {"role": "user", "content": "Write a question"},
        ]

    @pytest.mark.asyncio
    async def test_provider_failure(self, llm_settings):
        """Test provider errors are wrapped."""
        client = LLMClient(llm_settings=llm_settings)

        with patch(
            "src.core.intelligence.llm.client.acompletion",
            AsyncMock(side_effect=RuntimeError("connection refused")),
        ):
            with pytest.raises(LLMError) as exc_info:
                await client.complete("Write a question")

        assert exc_info.value.model == "ollama/qwen2.5:7b"
        assert isinstance(exc_info.value.original_error, RuntimeError)

    @pytest.mark.asyncio
    async def test_empty_prompt(self, llm_settings):
        """Test a blank prompt is rejected."""
        client = LLMClient(llm_settings=llm_settings)

        with pytest.raises(ValueError):
            await client.complete("   ")
