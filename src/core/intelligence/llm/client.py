# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""LiteLLM-backed completion client.

The practice backend only needs single-shot completions: a system prompt
describing the question format and one user prompt describing the
question to write. The provider (Ollama, OpenAI or Anthropic) and its
credentials come from LLMSettings and are handed to ``acompletion()`` on
every call.

Example:
    >>> client = LLMClient()
    >>> response = await client.complete(
    ...     "Write a Java question about integer division",
    ...     system_prompt="Respond with one JSON object.",
    ... )
    >>> response.content
    '{"question_text": ...}'
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import litellm
from litellm import acompletion

from src.core.config.settings import LLMSettings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Text and usage of one completion.

    Attributes:
        content: Generated text, empty if the model returned none.
        model: Model that served the request.
        tokens_input: Prompt tokens reported by the provider.
        tokens_output: Completion tokens reported by the provider.
        finish_reason: Provider stop reason.
        raw_response: LiteLLM response object.
    """

    content: str
    model: str
    tokens_input: int = 0
    tokens_output: int = 0
    finish_reason: str = "stop"
    raw_response: Optional[object] = field(default=None, repr=False)

    @property
    def total_tokens(self) -> int:
        return self.tokens_input + self.tokens_output


class LLMError(Exception):
    """Raised when a completion request fails.

    Attributes:
        message: Error description.
        model: Model the request was sent to.
        original_error: Exception raised by LiteLLM.
    """

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.model = model
        self.original_error = original_error
        super().__init__(self.message)


class LLMClient:
    """Completion client for the configured provider.

    Attributes:
        model: Model used when a call does not name one.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        llm_settings: Optional[LLMSettings] = None,
    ):
        """Initialize the client.

        Args:
            model: LiteLLM model name. Defaults to the provider's model.
            timeout: Per-request timeout in seconds.
            max_retries: Retries LiteLLM performs before giving up.
            llm_settings: Provider settings. Uses get_settings().llm if None.
        """
        self._settings = llm_settings or get_settings().llm
        self._model = model or self._settings.get_default_model()
        self._timeout = timeout or self._settings.request_timeout
        self._max_retries = (
            self._settings.max_retries if max_retries is None else max_retries
        )

        # Providers reject params they do not know (e.g. Ollama and max_tokens)
        litellm.drop_params = True

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        model: Optional[str] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Run one completion.

        Args:
            prompt: User message.
            system_prompt: Optional system message sent first.
            temperature: Sampling temperature.
            max_tokens: Upper bound on generated tokens.
            model: Model override for this call.
            **kwargs: Extra LiteLLM parameters.

        Returns:
            The generated text with token usage.

        Raises:
            ValueError: If the prompt is blank.
            LLMError: If the provider call fails.
        """
        if not prompt.strip():
            raise ValueError("Prompt cannot be empty")

        target_model = model or self._model
        try:
            response = await acompletion(
                model=target_model,
                messages=self._build_messages(prompt, system_prompt),
                temperature=temperature,
                max_tokens=max_tokens,
                timeout=self._timeout,
                num_retries=self._max_retries,
                **self._settings.get_provider_params(),
                **kwargs,
            )
        except Exception as e:
            logger.error("Completion failed: model=%s, error=%s", target_model, str(e))
            raise LLMError(
                message=f"Completion failed: {e}",
                model=target_model,
                original_error=e,
            ) from e

        result = self._to_response(response, target_model)
        logger.debug(
            "Completion done: model=%s, tokens=%d, finish_reason=%s",
            target_model,
            result.total_tokens,
            result.finish_reason,
        )
        return result

    @staticmethod
    def _build_messages(prompt: str, system_prompt: Optional[str]) -> list[dict[str, str]]:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    @staticmethod
    def _to_response(response: Any, model: str) -> LLMResponse:
        choice = response.choices[0]
        usage = getattr(response, "usage", None)
        return LLMResponse(
            content=choice.message.content or "",
            model=model,
            tokens_input=getattr(usage, "prompt_tokens", 0) or 0,
            tokens_output=getattr(usage, "completion_tokens", 0) or 0,
            finish_reason=choice.finish_reason or "stop",
            raw_response=response,
        )

    def __repr__(self) -> str:
        return f"LLMClient(model={self._model!r}, timeout={self._timeout})"
