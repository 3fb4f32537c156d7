# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Question enums and client-facing question payloads."""

from enum import Enum
from typing import Any

from pydantic import Field

from src.models.base import CamelModel


class DifficultyLevel(str, Enum):
    """Difficulty tiers, declared in ascending order.

    EASY < MEDIUM < HARD < EXPERT. Comparison and movement use the
    declaration order.
    """

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"
    EXPERT = "EXPERT"

    @classmethod
    def ordered(cls) -> list["DifficultyLevel"]:
        """All tiers from easiest to hardest."""
        return list(cls)

    @property
    def rank(self) -> int:
        """Zero-based position in the tier order."""
        return DifficultyLevel.ordered().index(self)

    @property
    def is_hardest(self) -> bool:
        return self is DifficultyLevel.EXPERT

    @property
    def is_easiest(self) -> bool:
        return self is DifficultyLevel.EASY

    def harder(self) -> "DifficultyLevel":
        """Next tier up, or self when already at EXPERT."""
        tiers = DifficultyLevel.ordered()
        return tiers[min(self.rank + 1, len(tiers) - 1)]

    def easier(self) -> "DifficultyLevel":
        """Next tier down, or self when already at EASY."""
        return DifficultyLevel.ordered()[max(self.rank - 1, 0)]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DifficultyLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, DifficultyLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, DifficultyLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, DifficultyLevel):
            return NotImplemented
        return self.rank >= other.rank


class QuestionType(str, Enum):
    """Supported question formats."""

    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    FREE_RESPONSE = "FREE_RESPONSE"
    CODE_ANALYSIS = "CODE_ANALYSIS"
    CODE_COMPLETION = "CODE_COMPLETION"
    TRUE_FALSE = "TRUE_FALSE"


class UnitBrief(CamelModel):
    """Unit reference embedded in a question."""

    id: str
    unit_number: int
    name: str


class TopicBrief(CamelModel):
    """Topic reference embedded in a question."""

    id: str
    name: str


class QuestionPayload(CamelModel):
    """A question as shown to the learner.

    Never carries the correct answer or the explanation; those are only
    returned after an answer is submitted.
    """

    id: str
    question_text: str
    code_snippet: str | None = None
    options: list[Any] | None = None
    type: QuestionType
    difficulty: DifficultyLevel
    unit: UnitBrief
    topic: TopicBrief | None = None


class GeneratedQuestionContent(CamelModel):
    """Question content produced by the generation model.

    Validated before the question is stored.
    """

    question_text: str = Field(min_length=1)
    code_snippet: str | None = None
    options: list[str] | None = None
    correct_answer: str = Field(min_length=1)
    explanation: str = ""
