# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Question bank domain: selection, answer checking and generation."""

from src.domains.question.generator import (
    QuestionGenerationError,
    QuestionGenerator,
    extract_json_object,
)
from src.domains.question.service import (
    AnswerCheck,
    GeneratedQuestion,
    QuestionGenerationSpec,
    QuestionNotFoundError,
    QuestionService,
    QuestionServiceError,
    is_answer_correct,
    normalize_answer,
    to_payload,
)

__all__ = [
    "AnswerCheck",
    "GeneratedQuestion",
    "QuestionGenerationError",
    "QuestionGenerationSpec",
    "QuestionGenerator",
    "QuestionNotFoundError",
    "QuestionService",
    "QuestionServiceError",
    "extract_json_object",
    "is_answer_correct",
    "normalize_answer",
    "to_payload",
]
