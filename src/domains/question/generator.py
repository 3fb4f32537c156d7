# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""On-demand question generation through an LLM.

Used when the approved question bank has nothing left for a learner in
a unit. The model is asked for a single JSON object, which is extracted
from the raw completion and validated as GeneratedQuestionContent.

Example:
    >>> generator = QuestionGenerator()
    >>> content = await generator.generate(
    ...     unit_name="Primitive Types",
    ...     topic_name=None,
    ...     question_type=QuestionType.MULTIPLE_CHOICE,
    ...     difficulty=DifficultyLevel.EASY,
    ... )
    >>> content.correct_answer
    'B'
"""

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from src.core.intelligence.llm import LLMClient, LLMError
from src.models.question import DifficultyLevel, GeneratedQuestionContent, QuestionType

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "You write practice questions for the AP Computer Science A course (Java). "
    "Respond with exactly one JSON object and nothing else."
)

DIFFICULTY_GUIDANCE = {
    DifficultyLevel.EASY: "recall of a single concept, short code if any",
    DifficultyLevel.MEDIUM: "apply one concept to a short code fragment",
    DifficultyLevel.HARD: "trace or combine several concepts in a method",
    DifficultyLevel.EXPERT: "exam-level reasoning about subtle behavior or edge cases",
}

TYPE_GUIDANCE = {
    QuestionType.MULTIPLE_CHOICE: (
        'Provide exactly four "options" as plain strings without letter labels. '
        '"correct_answer" is the letter (A-D) of the correct option.'
    ),
    QuestionType.TRUE_FALSE: (
        '"options" is ["True", "False"] and "correct_answer" is "True" or "False".'
    ),
    QuestionType.FREE_RESPONSE: '"options" is null and "correct_answer" is a short exact answer.',
    QuestionType.CODE_ANALYSIS: (
        'Put the Java code in "code_snippet". "options" is null and '
        '"correct_answer" is the exact output or value.'
    ),
    QuestionType.CODE_COMPLETION: (
        'Put the Java code with a blank (____) in "code_snippet". "options" is null '
        'and "correct_answer" is the exact missing code.'
    ),
}


class QuestionGenerationError(Exception):
    """Raised when a question cannot be generated.

    Attributes:
        message: Error description.
        original_error: Original exception if any.
    """

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


def extract_json_object(response: str) -> dict[str, Any]:
    """Extract a JSON object from an LLM response.

    Handles responses wrapped in markdown code blocks or surrounded by
    prose.

    Args:
        response: Raw LLM response text.

    Returns:
        Parsed JSON as dictionary.

    Raises:
        QuestionGenerationError: If no JSON object can be parsed.
    """
    text = response.strip()

    # Markdown code block
    match = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
    if match:
        text = match.group(1).strip()

    # Outermost object
    match = re.search(r"\{[\s\S]*\}", text)
    if match:
        text = match.group(0)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise QuestionGenerationError(
            f"Failed to parse JSON from response: {e}", original_error=e
        ) from e

    if not isinstance(data, dict):
        raise QuestionGenerationError("Response JSON is not an object")
    return data


class QuestionGenerator:
    """Generates question content with the configured LLM.

    Attributes:
        _llm: LLM client used for completions.
    """

    def __init__(self, llm_client: LLMClient | None = None) -> None:
        self._llm = llm_client or LLMClient()

    def build_prompt(
        self,
        unit_name: str,
        topic_name: str | None,
        question_type: QuestionType,
        difficulty: DifficultyLevel,
    ) -> str:
        """Build the user prompt for one question."""
        scope = f'unit "{unit_name}"'
        if topic_name:
            scope += f', topic "{topic_name}"'

        return "\n".join(
            [
                f"Write one {question_type.value} question for {scope}.",
                f"Difficulty: {difficulty.value} ({DIFFICULTY_GUIDANCE[difficulty]}).",
                TYPE_GUIDANCE[question_type],
                "Return a JSON object with the keys: question_text, code_snippet "
                "(string or null), options (list or null), correct_answer, explanation.",
            ]
        )

    async def generate(
        self,
        unit_name: str,
        topic_name: str | None,
        question_type: QuestionType,
        difficulty: DifficultyLevel,
    ) -> GeneratedQuestionContent:
        """Generate and validate one question.

        Args:
            unit_name: Name of the unit the question belongs to.
            topic_name: Topic name, or None for a unit-wide question.
            question_type: Requested question format.
            difficulty: Requested difficulty tier.

        Returns:
            Validated question content.

        Raises:
            QuestionGenerationError: If the LLM call fails or the response
                is not a valid question.
        """
        prompt = self.build_prompt(unit_name, topic_name, question_type, difficulty)

        try:
            response = await self._llm.complete(
                prompt=prompt,
                system_prompt=SYSTEM_PROMPT,
                temperature=0.8,
                max_tokens=1024,
            )
        except LLMError as e:
            raise QuestionGenerationError(
                f"LLM request failed: {e.message}", original_error=e
            ) from e

        data = extract_json_object(response.content)

        try:
            content = GeneratedQuestionContent.model_validate(data)
        except ValidationError as e:
            raise QuestionGenerationError(
                f"Generated question is invalid: {e.error_count()} error(s)",
                original_error=e,
            ) from e

        if question_type == QuestionType.MULTIPLE_CHOICE and not content.options:
            raise QuestionGenerationError("Generated multiple-choice question has no options")

        logger.info(
            "Question generated: unit=%s, type=%s, difficulty=%s, model=%s",
            unit_name,
            question_type.value,
            difficulty.value,
            response.model,
        )
        return content
