# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Intelligence module for AI-powered operations.

Provides LLM completions via LiteLLM, used to generate practice
questions on demand.

Example:
    >>> from src.core.intelligence import LLMClient
    >>> client = LLMClient()
    >>> response = await client.complete("What is 2+2?")
"""

from src.core.intelligence.llm import LLMClient, LLMError, LLMResponse

__all__ = [
    "LLMClient",
    "LLMError",
    "LLMResponse",
]
