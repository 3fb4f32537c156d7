# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Adaptive learning service.

Persists per-user progress records and turns them into difficulty
recommendations. The tier logic itself lives in DifficultyPolicy; this
service only loads a record, converts it to a ProgressState, applies the
policy and writes the result back.

Progress is scoped by (user, unit, topic). A missing topic means the
unit-level record (``topic_id IS NULL``).
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.adaptive.policy import DifficultyPolicy, ProgressState
from src.infrastructure.database.models import UserProgress
from src.models.practice import ProgressMetrics
from src.models.question import DifficultyLevel
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def _to_state(record: UserProgress) -> ProgressState:
    return ProgressState(
        difficulty=DifficultyLevel(record.current_difficulty),
        consecutive_correct=record.consecutive_correct,
        consecutive_wrong=record.consecutive_wrong,
        best_streak=record.best_streak,
        total_attempts=record.total_attempts,
        correct_attempts=record.correct_attempts,
        total_time_spent=record.total_time_spent,
        mastery_level=record.mastery_level,
    )


def _write_state(record: UserProgress, state: ProgressState) -> None:
    record.current_difficulty = state.difficulty.value
    record.consecutive_correct = state.consecutive_correct
    record.consecutive_wrong = state.consecutive_wrong
    record.best_streak = state.best_streak
    record.total_attempts = state.total_attempts
    record.correct_attempts = state.correct_attempts
    record.total_time_spent = state.total_time_spent
    record.mastery_level = state.mastery_level


class AdaptiveLearningService:
    """Tracks mastery and recommends difficulty per user and unit.

    Attributes:
        _db: Async database session.
        _policy: Difficulty policy applied on every answer.

    Example:
        >>> service = AdaptiveLearningService(db)
        >>> await service.get_recommended_difficulty(user_id, unit_id)
        <DifficultyLevel.EASY: 'EASY'>
    """

    def __init__(
        self,
        db: AsyncSession,
        policy: DifficultyPolicy | None = None,
    ) -> None:
        self._db = db
        self._policy = policy or DifficultyPolicy()

    async def get_progress(
        self,
        user_id: str,
        unit_id: str,
        topic_id: str | None = None,
    ) -> UserProgress | None:
        """Load the progress record for a user on a unit/topic.

        Args:
            user_id: The user's ID.
            unit_id: The unit's ID.
            topic_id: Topic ID, or None for unit-level progress.

        Returns:
            The record, or None if the user never answered in this scope.
        """
        stmt = select(UserProgress).where(
            UserProgress.user_id == user_id,
            UserProgress.unit_id == unit_id,
        )
        if topic_id is None:
            stmt = stmt.where(UserProgress.topic_id.is_(None))
        else:
            stmt = stmt.where(UserProgress.topic_id == topic_id)

        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_recommended_difficulty(
        self,
        user_id: str,
        unit_id: str,
        topic_id: str | None = None,
    ) -> DifficultyLevel:
        """Recommend the difficulty tier for the next question.

        New learners start at EASY.
        """
        progress = await self.get_progress(user_id, unit_id, topic_id)
        if progress is None:
            return DifficultyLevel.EASY
        return DifficultyLevel(progress.current_difficulty)

    async def update_progress(
        self,
        user_id: str,
        unit_id: str,
        was_correct: bool,
        time_spent: int | None = None,
        topic_id: str | None = None,
    ) -> ProgressMetrics:
        """Record an answer and adapt the difficulty.

        Creates the progress record on first interaction.

        Args:
            user_id: The user's ID.
            unit_id: The unit's ID.
            was_correct: Whether the answer was correct.
            time_spent: Seconds spent on the question.
            topic_id: Topic scope, or None for unit-level progress.

        Returns:
            Updated metrics, including the tier before the update.
        """
        record = await self.get_progress(user_id, unit_id, topic_id)
        if record is None:
            record = UserProgress(
                user_id=user_id,
                unit_id=unit_id,
                topic_id=topic_id,
                current_difficulty=DifficultyLevel.EASY.value,
                consecutive_correct=0,
                consecutive_wrong=0,
                best_streak=0,
                total_attempts=0,
                correct_attempts=0,
                total_time_spent=0,
                mastery_level=0,
            )
            self._db.add(record)

        before = _to_state(record)
        after = self._policy.apply(before, was_correct, time_spent)
        _write_state(record, after)
        record.last_practiced_at = utc_now()
        await self._db.flush()

        if after.difficulty != before.difficulty:
            logger.info(
                "Difficulty changed: user=%s, unit=%s, %s -> %s",
                user_id,
                unit_id,
                before.difficulty.value,
                after.difficulty.value,
            )

        return ProgressMetrics(
            current_difficulty=after.difficulty,
            previous_difficulty=before.difficulty,
            consecutive_correct=after.consecutive_correct,
            consecutive_wrong=after.consecutive_wrong,
            total_attempts=after.total_attempts,
            correct_attempts=after.correct_attempts,
            mastery_level=after.mastery_level,
        )

    async def list_unit_progress(self, user_id: str, unit_id: str) -> list[UserProgress]:
        """Every progress record of a user on a unit, unit-level and per topic."""
        result = await self._db.execute(
            select(UserProgress)
            .where(
                UserProgress.user_id == user_id,
                UserProgress.unit_id == unit_id,
            )
            .order_by(UserProgress.last_practiced_at.desc().nulls_last())
        )
        return list(result.scalars().all())

    async def list_user_progress(self, user_id: str) -> list[UserProgress]:
        """All progress records of a user, most recently practiced first."""
        result = await self._db.execute(
            select(UserProgress)
            .where(UserProgress.user_id == user_id)
            .order_by(UserProgress.last_practiced_at.desc().nulls_last())
        )
        return list(result.scalars().all())
