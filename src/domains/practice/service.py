# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Practice session service.

This service manages bounded practice sessions: it starts a session with
its first question, serves further questions at the adaptively
recommended difficulty, records answers and finalizes the session with a
summary.

Question selection and answer checking are delegated to QuestionService,
difficulty adaptation to AdaptiveLearningService. Progress is always
tracked in the session's scope (unit, plus topic when the session has
one), so recommendations and updates read and write the same record.

All writes happen on the request's AsyncSession; the caller commits.
"""

import logging
from collections import defaultdict
from typing import Callable, Iterable

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.config.settings import Settings, get_settings
from src.domains.adaptive import AdaptiveLearningService
from src.domains.question import (
    QuestionGenerationSpec,
    QuestionService,
    to_payload,
)
from src.infrastructure.database.models import (
    Question,
    QuestionResponse,
    StudySession,
    Unit,
    User,
    new_id,
)
from src.models.practice import (
    AnswerResultResponse,
    BreakdownEntry,
    EndSessionResponse,
    NextQuestionRequest,
    SessionResponse,
    SessionSummary,
    SessionType,
    StartSessionRequest,
    StartSessionResponse,
    SubmitAnswerRequest,
)
from src.models.question import DifficultyLevel, QuestionPayload, QuestionType
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

GENERAL_TOPIC = "General"


class PracticeServiceError(Exception):
    """Base exception for practice service errors."""

    pass


class UnitNotFoundError(PracticeServiceError):
    """Raised when a unit is not found."""

    pass


class SessionNotFoundError(PracticeServiceError):
    """Raised when a session is not found."""

    pass


class SessionCompleteError(PracticeServiceError):
    """Raised when an answer is submitted to a session that reached its target."""

    pass


def _percentage(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


class PracticeService:
    """Service for managing practice sessions.

    Attributes:
        _db: Async database session.
        _questions: Question selection, answer checking and generation.
        _adaptive: Progress tracking and difficulty recommendation.
        _settings: Application settings (session size, goal accuracy).

    Example:
        >>> service = PracticeService(db, question_service, adaptive_service)
        >>> started = await service.start_session(
        ...     StartSessionRequest(user_id="user_1", unit_id=unit_id)
        ... )
        >>> result = await service.submit_answer(
        ...     SubmitAnswerRequest(
        ...         user_id="user_1",
        ...         session_id=started.session.id,
        ...         question_id=started.question.id,
        ...         user_answer="B",
        ...     )
        ... )
    """

    def __init__(
        self,
        db: AsyncSession,
        question_service: QuestionService,
        adaptive_service: AdaptiveLearningService,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the practice service.

        Args:
            db: Async database session.
            question_service: Service for the question bank.
            adaptive_service: Service for adaptive progress.
            settings: Application settings. Uses get_settings() if None.
        """
        self._db = db
        self._questions = question_service
        self._adaptive = adaptive_service
        self._settings = settings or get_settings()

    @property
    def questions_per_session(self) -> int:
        """Target number of answered questions per session."""
        return self._settings.practice.questions_per_session

    async def start_session(self, request: StartSessionRequest) -> StartSessionResponse:
        """Start a new practice session and pick its first question.

        Args:
            request: User, unit and optional topic of the session.

        Returns:
            The created session, its first question and the recommended
            difficulty.

        Raises:
            UnitNotFoundError: If the unit does not exist.
            QuestionGenerationError: If the bank is exhausted and generation
                fails.
        """
        logger.info(
            "Starting practice session: user=%s, unit=%s, topic=%s",
            request.user_id,
            request.unit_id,
            request.topic_id,
        )

        await self._ensure_user(request.user_id, request.user_email, request.user_name)

        unit = await self._db.get(Unit, request.unit_id)
        if unit is None:
            raise UnitNotFoundError(f"Unit {request.unit_id} not found")

        answered_ids = await self._questions.get_answered_question_ids(
            request.user_id, request.unit_id
        )
        recommended = await self._adaptive.get_recommended_difficulty(
            request.user_id, request.unit_id, request.topic_id
        )

        target = self.questions_per_session
        session = StudySession(
            id=new_id(),
            user_id=request.user_id,
            unit_id=request.unit_id,
            topic_id=request.topic_id,
            session_type=SessionType.PRACTICE.value,
            total_questions=0,
            correct_answers=0,
            target_questions=target,
            started_at=utc_now(),
        )
        self._db.add(session)
        await self._db.flush()

        question = await self._questions.get_random_question(
            request.unit_id, recommended, answered_ids
        )
        if question is None:
            logger.info(
                "No unseen questions at %s, generating: session=%s",
                recommended.value,
                session.id,
            )
            question = await self._generate_question(
                request.unit_id, request.topic_id, recommended
            )

        logger.info(
            "Practice session started: session=%s, difficulty=%s, answered_before=%d",
            session.id,
            recommended.value,
            len(answered_ids),
        )

        return StartSessionResponse(
            session=SessionResponse.model_validate(session),
            question=to_payload(question),
            recommended_difficulty=recommended,
            questions_remaining=target - 1,
            total_questions=target,
        )

    async def get_next_question(self, request: NextQuestionRequest) -> QuestionPayload | None:
        """Get the next unseen question of a session.

        Tries the recommended difficulty first, then the other tiers from
        EASY to EXPERT, and finally generates a question at the
        recommended difficulty.

        Args:
            request: Session, unit and the question IDs the client has
                already seen in this session.

        Returns:
            The next question, or None once the session reached its target.

        Raises:
            SessionNotFoundError: If the session does not exist or belongs
                to another user.
            QuestionGenerationError: If generation fails.
        """
        session = await self._get_session(request.session_id, request.user_id)
        if session.total_questions >= session.target_questions:
            logger.info("Session complete: session=%s", session.id)
            return None

        answered_ids = await self._questions.get_answered_question_ids(
            request.user_id, session.unit_id
        )
        answered_ids.update(request.answered_question_ids)

        topic_id = session.topic_id if session.topic_id is not None else request.topic_id
        recommended = await self._adaptive.get_recommended_difficulty(
            request.user_id, session.unit_id, topic_id
        )

        question = await self._select_with_fallback(session.unit_id, recommended, answered_ids)
        if question is None:
            logger.info(
                "Question bank exhausted, generating: session=%s, difficulty=%s",
                session.id,
                recommended.value,
            )
            question = await self._generate_question(session.unit_id, topic_id, recommended)

        return to_payload(question)

    async def submit_answer(self, request: SubmitAnswerRequest) -> AnswerResultResponse:
        """Check an answer, adapt difficulty and advance the session.

        Args:
            request: Session, question and the user's answer.

        Returns:
            Correctness, the correct answer and explanation, updated
            progress and the session's remaining count.

        Raises:
            SessionNotFoundError: If the session does not exist or belongs
                to another user.
            SessionCompleteError: If the session already reached its target.
            QuestionNotFoundError: If the question is not part of the
                session's unit.
        """
        session = await self._get_session(request.session_id, request.user_id)
        if session.total_questions >= session.target_questions:
            raise SessionCompleteError(f"Session {session.id} is already complete")

        check = await self._questions.submit_answer(
            request.user_id,
            request.question_id,
            request.user_answer,
            request.time_spent,
            unit_id=session.unit_id,
        )

        progress = await self._adaptive.update_progress(
            request.user_id,
            session.unit_id,
            check.is_correct,
            request.time_spent,
            session.topic_id,
        )

        total_questions = await self._increment_counters(session.id, check.is_correct)
        if total_questions is None:
            # Another submit took the last slot.
            raise SessionCompleteError(f"Session {session.id} is already complete")

        await self._db.execute(
            update(QuestionResponse)
            .where(QuestionResponse.id == check.response_id)
            .values(session_id=session.id)
        )

        logger.info(
            "Answer submitted: session=%s, question=%s, correct=%s, answered=%d/%d",
            session.id,
            request.question_id,
            check.is_correct,
            total_questions,
            session.target_questions,
        )

        # Compared with the answered question, which differs from the
        # tracker's tier when a fallback question was served.
        difficulty_changed = progress.current_difficulty != DifficultyLevel(
            check.question.difficulty
        )

        return AnswerResultResponse(
            is_correct=check.is_correct,
            correct_answer=check.correct_answer,
            explanation=check.explanation,
            progress=progress,
            difficulty_changed=difficulty_changed,
            questions_remaining=max(session.target_questions - total_questions, 0),
            is_session_complete=total_questions >= session.target_questions,
        )

    async def end_session(self, session_id: str) -> EndSessionResponse:
        """Finalize a session and summarize it.

        Args:
            session_id: The session ID.

        Returns:
            The updated session and its summary.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        result = await self._db.execute(
            select(StudySession)
            .options(
                selectinload(StudySession.responses)
                .selectinload(QuestionResponse.question)
                .selectinload(Question.topic)
            )
            .where(StudySession.id == session_id)
            .execution_options(populate_existing=True)
        )
        session = result.scalar_one_or_none()
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")

        responses = sorted(session.responses, key=lambda r: r.created_at)
        total = session.total_questions
        total_time = sum(r.time_spent or 0 for r in responses)
        average_time = total_time / total if total > 0 else 0.0
        accuracy_rate = _percentage(session.correct_answers, total)
        goal_achieved = accuracy_rate >= self._settings.practice.goal_accuracy

        session.ended_at = utc_now()
        session.total_duration = total_time
        session.average_time = average_time
        session.accuracy_rate = accuracy_rate
        session.goal_achieved = goal_achieved
        await self._db.flush()

        summary = SessionSummary(
            total_questions=total,
            correct_answers=session.correct_answers,
            accuracy_rate=round(accuracy_rate),
            total_time=total_time,
            average_time=round(average_time),
            topic_breakdown=_breakdown(
                responses,
                lambda r: r.question.topic.name if r.question.topic else GENERAL_TOPIC,
            ),
            difficulty_breakdown=_breakdown(responses, lambda r: r.question.difficulty),
            target_questions=session.target_questions,
            completion_percentage=round(_percentage(total, session.target_questions)),
            goal_achieved=goal_achieved,
        )

        logger.info(
            "Practice session ended: session=%s, answered=%d, accuracy=%d, goal=%s",
            session.id,
            total,
            summary.accuracy_rate,
            goal_achieved,
        )

        return EndSessionResponse(
            session=SessionResponse.model_validate(session),
            summary=summary,
        )

    async def _ensure_user(
        self,
        user_id: str,
        email: str | None,
        name: str | None,
    ) -> User:
        user = await self._db.get(User, user_id)
        if user is None:
            logger.info("Creating user: user=%s", user_id)
            user = User(id=user_id, email=email or f"{user_id}@clerk.user", name=name)
            self._db.add(user)
            await self._db.flush()
        return user

    async def _get_session(self, session_id: str, user_id: str | None = None) -> StudySession:
        session = await self._db.get(StudySession, session_id, populate_existing=True)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        if user_id is not None and session.user_id != user_id:
            logger.warning(
                "Session owner mismatch: session=%s, owner=%s, caller=%s",
                session_id,
                session.user_id,
                user_id,
            )
            raise SessionNotFoundError(f"Session {session_id} not found for user {user_id}")
        return session

    async def _select_with_fallback(
        self,
        unit_id: str,
        recommended: DifficultyLevel,
        exclude_ids: Iterable[str],
    ) -> Question | None:
        excluded = set(exclude_ids)
        question = await self._questions.get_random_question(unit_id, recommended, excluded)
        if question is not None:
            return question

        for difficulty in DifficultyLevel.ordered():
            if difficulty == recommended:
                continue
            question = await self._questions.get_random_question(unit_id, difficulty, excluded)
            if question is not None:
                logger.debug(
                    "Fallback question: unit=%s, recommended=%s, served=%s",
                    unit_id,
                    recommended.value,
                    difficulty.value,
                )
                return question
        return None

    async def _generate_question(
        self,
        unit_id: str,
        topic_id: str | None,
        difficulty: DifficultyLevel,
    ) -> Question:
        generated = await self._questions.generate_and_store_question(
            QuestionGenerationSpec(
                unit_id=unit_id,
                topic_id=topic_id,
                type=QuestionType(self._settings.practice.generated_question_type),
                difficulty=difficulty,
                auto_approve=True,
            )
        )
        return generated.question

    async def _increment_counters(self, session_id: str, was_correct: bool) -> int | None:
        """Count one answer against the session.

        The update only applies while the session is below its target, so
        the cap holds under concurrent submits.

        Returns:
            The new answered count, or None if the session was already full.
        """
        values = {"total_questions": StudySession.total_questions + 1}
        if was_correct:
            values["correct_answers"] = StudySession.correct_answers + 1

        result = await self._db.execute(
            update(StudySession)
            .where(
                StudySession.id == session_id,
                StudySession.total_questions < StudySession.target_questions,
            )
            .values(**values)
            .returning(StudySession.total_questions)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none()


def _breakdown(
    responses: list[QuestionResponse],
    key: Callable[[QuestionResponse], str],
) -> dict[str, BreakdownEntry]:
    """Correct/total counts of responses grouped by key."""
    stats: dict[str, BreakdownEntry] = defaultdict(BreakdownEntry)
    for response in responses:
        entry = stats[key(response)]
        entry.total += 1
        if response.is_correct:
            entry.correct += 1
    return dict(stats)
