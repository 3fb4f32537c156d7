# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Question bank service.

Selects unseen questions, checks and records answers, and stores
questions generated on demand.

A question a user has answered in a unit is never selected again for that
user and unit. The exclusion set is built from the user's persisted
responses joined to the questions of the unit, plus whatever ids the
caller already knows about.
"""

import logging
import random
import re
from dataclasses import dataclass
from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.domains.question.generator import QuestionGenerator
from src.infrastructure.database.models import (
    Question,
    QuestionResponse,
    Topic,
    Unit,
    new_id,
)
from src.models.question import (
    DifficultyLevel,
    GeneratedQuestionContent,
    QuestionPayload,
    QuestionType,
    TopicBrief,
    UnitBrief,
)

logger = logging.getLogger(__name__)

_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_OPTION_LABEL = re.compile(r"^[A-Z][\).:]\s+")


class QuestionServiceError(Exception):
    """Base exception for question service errors."""

    pass


class QuestionNotFoundError(QuestionServiceError):
    """Raised when a question is not found."""

    pass


@dataclass
class AnswerCheck:
    """Outcome of checking and recording one answer.

    Attributes:
        response_id: ID of the recorded QuestionResponse.
        is_correct: Whether the answer matched.
        correct_answer: The stored correct answer.
        explanation: The stored explanation.
        question: The answered question.
    """

    response_id: str
    is_correct: bool
    correct_answer: str
    explanation: str
    question: Question


@dataclass
class QuestionGenerationSpec:
    """What to generate when the bank is exhausted.

    Attributes:
        unit_id: Unit the question belongs to.
        type: Requested question format.
        difficulty: Requested difficulty tier.
        topic_id: Topic scope, or None for a unit-wide question.
        auto_approve: Store the question as approved, skipping review.
    """

    unit_id: str
    type: QuestionType
    difficulty: DifficultyLevel
    topic_id: str | None = None
    auto_approve: bool = False


@dataclass
class GeneratedQuestion:
    """A generated question after it has been stored."""

    question: Question
    content: GeneratedQuestionContent


def normalize_answer(value: str) -> str:
    """Lowercase and collapse whitespace."""
    return " ".join(value.split()).lower()


def _option_index(answer: str, options: list[Any]) -> int | None:
    """Resolve an answer to a multiple-choice option position.

    Accepts either the option letter (A, B, ...) or the option text,
    with or without a leading "A) " style label.
    """
    value = answer.strip()
    if len(value) == 1 and value.upper() in _LETTERS:
        index = _LETTERS.index(value.upper())
        return index if index < len(options) else None

    target = normalize_answer(_OPTION_LABEL.sub("", value))
    for index, option in enumerate(options):
        text = normalize_answer(_OPTION_LABEL.sub("", str(option)))
        if text == target:
            return index
    return None


def is_answer_correct(question: Question, user_answer: str) -> bool:
    """Check a user's answer against a question's correct answer.

    The comparison ignores case and surrounding/repeated whitespace. For
    multiple-choice questions an option letter and the option text it
    labels are equivalent.
    """
    if normalize_answer(user_answer) == normalize_answer(question.correct_answer):
        return True

    if question.type == QuestionType.MULTIPLE_CHOICE.value and question.options:
        expected = _option_index(question.correct_answer, question.options)
        given = _option_index(user_answer, question.options)
        return expected is not None and expected == given

    return False


def to_payload(question: Question) -> QuestionPayload:
    """Build the client-facing payload of a question.

    The unit (and topic, when set) relationships must already be loaded.
    """
    topic = None
    if question.topic is not None:
        topic = TopicBrief(id=question.topic.id, name=question.topic.name)

    return QuestionPayload(
        id=question.id,
        question_text=question.question_text,
        code_snippet=question.code_snippet,
        options=question.options,
        type=QuestionType(question.type),
        difficulty=DifficultyLevel(question.difficulty),
        unit=UnitBrief(
            id=question.unit.id,
            unit_number=question.unit.unit_number,
            name=question.unit.name,
        ),
        topic=topic,
    )


class QuestionService:
    """Service for selecting, answering and generating questions.

    Attributes:
        _db: Async database session.
        _generator: Generator used when the bank is exhausted.

    Example:
        >>> service = QuestionService(db)
        >>> question = await service.get_random_question(
        ...     unit_id, DifficultyLevel.EASY, exclude_ids={"q1"}
        ... )
    """

    def __init__(
        self,
        db: AsyncSession,
        generator: QuestionGenerator | None = None,
    ) -> None:
        self._db = db
        self._generator = generator

    @property
    def generator(self) -> QuestionGenerator:
        """Question generator, created on first use."""
        if self._generator is None:
            self._generator = QuestionGenerator()
        return self._generator

    async def get_question(self, question_id: str) -> Question | None:
        """Load a question with its unit and topic."""
        result = await self._db.execute(
            select(Question)
            .options(selectinload(Question.unit), selectinload(Question.topic))
            .where(Question.id == question_id)
        )
        return result.scalar_one_or_none()

    async def get_answered_question_ids(self, user_id: str, unit_id: str) -> set[str]:
        """IDs of every question of the unit the user has answered."""
        result = await self._db.execute(
            select(QuestionResponse.question_id)
            .join(Question, Question.id == QuestionResponse.question_id)
            .where(
                QuestionResponse.user_id == user_id,
                Question.unit_id == unit_id,
            )
            .distinct()
        )
        return set(result.scalars().all())

    async def get_random_question(
        self,
        unit_id: str,
        difficulty: DifficultyLevel,
        exclude_ids: Iterable[str] = (),
    ) -> Question | None:
        """Pick a random approved question the user has not seen.

        Args:
            unit_id: Unit to pick from.
            difficulty: Tier to pick from.
            exclude_ids: Question IDs that must not be returned.

        Returns:
            A question with unit and topic loaded, or None when no
            candidate is left at this tier.
        """
        stmt = select(Question.id).where(
            Question.unit_id == unit_id,
            Question.difficulty == difficulty.value,
            Question.is_approved.is_(True),
        )
        excluded = list(exclude_ids)
        if excluded:
            stmt = stmt.where(Question.id.not_in(excluded))

        result = await self._db.execute(stmt)
        candidate_ids = list(result.scalars().all())
        if not candidate_ids:
            logger.debug(
                "No questions left: unit=%s, difficulty=%s, excluded=%d",
                unit_id,
                difficulty.value,
                len(excluded),
            )
            return None

        return await self.get_question(random.choice(candidate_ids))

    async def submit_answer(
        self,
        user_id: str,
        question_id: str,
        user_answer: str,
        time_spent: int | None = None,
        unit_id: str | None = None,
    ) -> AnswerCheck:
        """Check an answer and record the response.

        Args:
            user_id: The answering user.
            question_id: The answered question.
            user_answer: The raw answer text.
            time_spent: Seconds spent, if known.
            unit_id: When set, the question must belong to this unit.

        Returns:
            The check result, including the new response's ID.

        Raises:
            QuestionNotFoundError: If the question does not exist, or is
                outside the given unit.
        """
        question = await self.get_question(question_id)
        if question is None:
            raise QuestionNotFoundError(f"Question {question_id} not found")
        if unit_id is not None and question.unit_id != unit_id:
            raise QuestionNotFoundError(f"Question {question_id} not found in unit {unit_id}")

        is_correct = is_answer_correct(question, user_answer)
        response = QuestionResponse(
            id=new_id(),
            user_id=user_id,
            question_id=question.id,
            user_answer=user_answer,
            is_correct=is_correct,
            time_spent=time_spent,
        )
        self._db.add(response)
        await self._db.flush()

        logger.debug(
            "Answer recorded: user=%s, question=%s, correct=%s",
            user_id,
            question_id,
            is_correct,
        )

        return AnswerCheck(
            response_id=response.id,
            is_correct=is_correct,
            correct_answer=question.correct_answer,
            explanation=question.explanation,
            question=question,
        )

    async def generate_and_store_question(
        self,
        spec: QuestionGenerationSpec,
    ) -> GeneratedQuestion:
        """Generate a question and add it to the bank.

        Args:
            spec: Unit, topic, type and difficulty of the question.

        Returns:
            The stored question (with unit and topic set) and its content.

        Raises:
            QuestionServiceError: If the unit does not exist.
            QuestionGenerationError: If generation fails.
        """
        unit = await self._db.get(Unit, spec.unit_id)
        if unit is None:
            raise QuestionServiceError(f"Unit {spec.unit_id} not found")

        topic = None
        if spec.topic_id is not None:
            topic = await self._db.get(Topic, spec.topic_id)

        content = await self.generator.generate(
            unit_name=unit.name,
            topic_name=topic.name if topic else None,
            question_type=spec.type,
            difficulty=spec.difficulty,
        )

        question = Question(
            id=new_id(),
            unit_id=unit.id,
            topic_id=topic.id if topic else None,
            type=spec.type.value,
            difficulty=spec.difficulty.value,
            question_text=content.question_text,
            code_snippet=content.code_snippet,
            options=content.options,
            correct_answer=content.correct_answer,
            explanation=content.explanation,
            is_approved=spec.auto_approve,
            is_ai_generated=True,
        )
        question.unit = unit
        question.topic = topic
        self._db.add(question)
        await self._db.flush()

        logger.info(
            "Generated question stored: question=%s, unit=%s, difficulty=%s, approved=%s",
            question.id,
            unit.id,
            spec.difficulty.value,
            spec.auto_approve,
        )
        return GeneratedQuestion(question=question, content=content)
