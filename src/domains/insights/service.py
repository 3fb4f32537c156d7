# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning insights for a user on a unit.

Combines every progress record of the unit (the unit-level record and
any topic-scoped ones) with per-topic accuracy computed from the user's
recorded responses:
- Weak topics: accuracy below ADAPTIVE_WEAK_TOPIC_ACCURACY
- Strong topics: accuracy at or above ADAPTIVE_STRONG_TOPIC_ACCURACY
- Recommendations: short study hints derived from mastery, weak topics,
  pace and current difficulty
- Next review: last practice plus an interval that grows with mastery

Topics need a minimum number of answers before they are classified.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import Integer, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config.settings import Settings, get_settings
from src.domains.adaptive import AdaptiveLearningService
from src.infrastructure.database.models import (
    Question,
    QuestionResponse,
    Topic,
    Unit,
    UserProgress,
)
from src.models.insights import (
    LearningInsightsResponse,
    PatternEntry,
    PerformancePatternsResponse,
    PerformanceTrend,
    ReviewItemResponse,
    UserProgressResponse,
)
from src.models.question import DifficultyLevel
from src.utils.datetime import ensure_utc, format_duration, utc_now

logger = logging.getLogger(__name__)

MIN_TOPIC_ATTEMPTS = 3
SLOW_ANSWER_SECONDS = 120
GENERAL_TOPIC = "General"

# (minimum mastery, days until the next review), highest first
REVIEW_INTERVALS = ((85, 14), (70, 7), (50, 3), (0, 1))

TREND_WINDOW = 10
TREND_MARGIN = 10

_NEVER = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class UnitProgress:
    """All progress records of one unit folded into one view."""

    mastery_level: int
    current_difficulty: DifficultyLevel
    total_attempts: int
    correct_attempts: int
    total_time_spent: int
    last_practiced_at: datetime | None

    @property
    def accuracy(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.correct_attempts / self.total_attempts


def _practiced_at(record: UserProgress) -> datetime:
    if record.last_practiced_at is None:
        return _NEVER
    return ensure_utc(record.last_practiced_at)


def combine_progress(records: list[UserProgress]) -> UnitProgress | None:
    """Fold unit-level and topic-scoped records into one unit view.

    Attempts and time are summed, mastery is weighted by attempts and the
    difficulty is taken from the most recently practiced record.

    Returns:
        The combined view, or None when nothing was answered.
    """
    practiced = [r for r in records if r.total_attempts > 0]
    if not practiced:
        return None

    total = sum(r.total_attempts for r in practiced)
    latest = max(practiced, key=_practiced_at)
    last_practiced = [ensure_utc(r.last_practiced_at) for r in practiced if r.last_practiced_at]

    return UnitProgress(
        mastery_level=round(sum(r.mastery_level * r.total_attempts for r in practiced) / total),
        current_difficulty=DifficultyLevel(latest.current_difficulty),
        total_attempts=total,
        correct_attempts=sum(r.correct_attempts for r in practiced),
        total_time_spent=sum(r.total_time_spent for r in practiced),
        last_practiced_at=max(last_practiced) if last_practiced else None,
    )


def next_review_date(mastery_level: int, last_practiced_at: datetime) -> datetime:
    """Schedule the next review; higher mastery waits longer."""
    for threshold, days in REVIEW_INTERVALS:
        if mastery_level >= threshold:
            return ensure_utc(last_practiced_at) + timedelta(days=days)
    return ensure_utc(last_practiced_at) + timedelta(days=REVIEW_INTERVALS[-1][1])


class InsightsService:
    """Service for learning insights and progress overviews.

    Attributes:
        _db: Async database session.
        _adaptive: Progress record access.
        _settings: Application settings (topic accuracy thresholds).
    """

    def __init__(
        self,
        db: AsyncSession,
        adaptive_service: AdaptiveLearningService,
        settings: Settings | None = None,
    ) -> None:
        self._db = db
        self._adaptive = adaptive_service
        self._settings = settings or get_settings()

    async def get_learning_insights(self, user_id: str, unit_id: str) -> LearningInsightsResponse:
        """Summarize a user's learning on a unit.

        Args:
            user_id: The user's ID.
            unit_id: The unit's ID.

        Returns:
            Mastery, accuracy, pace, topic strengths and recommendations.
            A user without progress gets zeros at EASY.
        """
        records = await self._adaptive.list_unit_progress(user_id, unit_id)
        progress = combine_progress(records)

        review_date = None
        if progress is None:
            mastery = 0
            difficulty = DifficultyLevel.EASY
            accuracy = 0
            total_attempts = 0
            average_time = 0
        else:
            mastery = progress.mastery_level
            difficulty = progress.current_difficulty
            accuracy = round(progress.accuracy * 100)
            total_attempts = progress.total_attempts
            average_time = round(progress.total_time_spent / progress.total_attempts)
            if progress.last_practiced_at is not None:
                review_date = next_review_date(mastery, progress.last_practiced_at)

        weak_topics, strong_topics = await self._classify_topics(user_id, unit_id)

        recommendations = self._build_recommendations(
            mastery=mastery,
            difficulty=difficulty,
            accuracy=accuracy,
            total_attempts=total_attempts,
            average_time=average_time,
            weak_topics=weak_topics,
        )

        logger.debug(
            "Insights built: user=%s, unit=%s, records=%d, mastery=%d, weak=%d, strong=%d",
            user_id,
            unit_id,
            len(records),
            mastery,
            len(weak_topics),
            len(strong_topics),
        )

        return LearningInsightsResponse(
            mastery_level=mastery,
            current_difficulty=difficulty,
            accuracy=accuracy,
            total_attempts=total_attempts,
            average_time_per_question=average_time,
            next_review_date=review_date,
            weak_topics=weak_topics,
            strong_topics=strong_topics,
            recommendations=recommendations,
        )

    async def get_performance_patterns(
        self, user_id: str, unit_id: str
    ) -> PerformancePatternsResponse:
        """Break a user's answers on a unit down by tier, topic and time.

        The trend compares the accuracy of the latest TREND_WINDOW answers
        with the TREND_WINDOW answers before them. A difference within
        TREND_MARGIN percentage points is steady.

        Args:
            user_id: The user's ID.
            unit_id: The unit's ID.

        Returns:
            Per-difficulty and per-topic statistics and the accuracy trend.
        """
        result = await self._db.execute(
            select(
                QuestionResponse.is_correct,
                QuestionResponse.time_spent,
                Question.difficulty,
                Topic.name,
            )
            .select_from(QuestionResponse)
            .join(Question, Question.id == QuestionResponse.question_id)
            .outerjoin(Topic, Topic.id == Question.topic_id)
            .where(
                QuestionResponse.user_id == user_id,
                Question.unit_id == unit_id,
            )
            .order_by(QuestionResponse.created_at.desc())
        )
        rows = result.all()

        by_difficulty: dict[str, list[tuple[bool, int]]] = defaultdict(list)
        by_topic: dict[str, list[tuple[bool, int]]] = defaultdict(list)
        for is_correct, time_spent, difficulty, topic_name in rows:
            by_difficulty[difficulty].append((is_correct, time_spent or 0))
            by_topic[topic_name or GENERAL_TOPIC].append((is_correct, time_spent or 0))

        outcomes = [row[0] for row in rows]
        recent = _accuracy(outcomes[:TREND_WINDOW])
        previous = _accuracy(outcomes[TREND_WINDOW : 2 * TREND_WINDOW])

        return PerformancePatternsResponse(
            total_responses=len(rows),
            by_difficulty={
                level.value: _pattern(by_difficulty[level.value])
                for level in DifficultyLevel.ordered()
                if level.value in by_difficulty
            },
            by_topic={name: _pattern(by_topic[name]) for name in sorted(by_topic)},
            recent_accuracy=recent,
            previous_accuracy=previous,
            trend=_trend(recent, previous),
        )

    async def get_review_needed(self, user_id: str) -> list[ReviewItemResponse]:
        """Units whose next review date has passed, most overdue first.

        Args:
            user_id: The user's ID.

        Returns:
            One entry per practiced unit that is due for review.
        """
        records = await self._adaptive.list_user_progress(user_id)

        per_unit: dict[str, list[UserProgress]] = defaultdict(list)
        for record in records:
            per_unit[record.unit_id].append(record)

        now = utc_now()
        due: list[tuple[str, UnitProgress, datetime]] = []
        for unit_id, unit_records in per_unit.items():
            progress = combine_progress(unit_records)
            if progress is None or progress.last_practiced_at is None:
                continue
            review_date = next_review_date(progress.mastery_level, progress.last_practiced_at)
            if review_date <= now:
                due.append((unit_id, progress, review_date))

        if not due:
            return []

        result = await self._db.execute(
            select(Unit).where(Unit.id.in_([unit_id for unit_id, _, _ in due]))
        )
        units = {unit.id: unit for unit in result.scalars().all()}

        items = [
            ReviewItemResponse(
                unit_id=unit_id,
                unit_number=units[unit_id].unit_number,
                unit_name=units[unit_id].name,
                mastery_level=progress.mastery_level,
                last_practiced_at=progress.last_practiced_at,
                next_review_date=review_date,
                days_overdue=(now - review_date).days,
            )
            for unit_id, progress, review_date in due
            if unit_id in units
        ]
        items.sort(key=lambda item: item.next_review_date)

        logger.debug("Reviews due: user=%s, units=%d", user_id, len(items))
        return items

    async def list_user_progress(self, user_id: str) -> list[UserProgressResponse]:
        """All progress records of a user, most recently practiced first."""
        records = await self._adaptive.list_user_progress(user_id)
        return [UserProgressResponse.model_validate(record) for record in records]

    async def _classify_topics(self, user_id: str, unit_id: str) -> tuple[list[str], list[str]]:
        """Split the unit's practiced topics into weak and strong ones."""
        result = await self._db.execute(
            select(
                Topic.name,
                func.count(QuestionResponse.id),
                func.sum(cast(QuestionResponse.is_correct, Integer)),
            )
            .select_from(QuestionResponse)
            .join(Question, Question.id == QuestionResponse.question_id)
            .join(Topic, Topic.id == Question.topic_id)
            .where(
                QuestionResponse.user_id == user_id,
                Question.unit_id == unit_id,
            )
            .group_by(Topic.name)
            .order_by(Topic.name)
        )

        weak: list[str] = []
        strong: list[str] = []
        for name, total, correct in result.all():
            if total < MIN_TOPIC_ATTEMPTS:
                continue
            accuracy = (correct or 0) / total * 100
            if accuracy < self._settings.adaptive.weak_topic_accuracy:
                weak.append(name)
            elif accuracy >= self._settings.adaptive.strong_topic_accuracy:
                strong.append(name)
        return weak, strong

    def _build_recommendations(
        self,
        mastery: int,
        difficulty: DifficultyLevel,
        accuracy: int,
        total_attempts: int,
        average_time: int,
        weak_topics: list[str],
    ) -> list[str]:
        if total_attempts == 0:
            return ["Start a practice session to get personalized recommendations."]

        recommendations: list[str] = []

        if mastery >= 85:
            recommendations.append(
                "You have mastered this unit. Move on to the next unit or keep "
                "practicing at higher difficulty."
            )
        elif mastery >= 70:
            recommendations.append("Good progress. Keep practicing to reach mastery.")
        elif mastery >= 50:
            recommendations.append("You are making progress. Focus on your weak areas.")
        else:
            recommendations.append("Review the fundamentals of this unit before moving on.")

        if weak_topics:
            recommendations.append(f"Review these topics: {', '.join(weak_topics)}.")

        if average_time > SLOW_ANSWER_SECONDS:
            recommendations.append(
                f"You spend about {format_duration(average_time)} per question. "
                "Practice shorter sessions to build speed."
            )

        if not difficulty.is_hardest and accuracy >= self._settings.adaptive.strong_topic_accuracy:
            recommendations.append(
                f"Answer {self._settings.adaptive.promote_after} questions in a row "
                "correctly to unlock harder questions."
            )

        return recommendations


def _accuracy(outcomes: list[bool]) -> int | None:
    if not outcomes:
        return None
    return round(sum(1 for correct in outcomes if correct) / len(outcomes) * 100)


def _pattern(answers: list[tuple[bool, int]]) -> PatternEntry:
    correct = sum(1 for is_correct, _ in answers if is_correct)
    return PatternEntry(
        total=len(answers),
        correct=correct,
        accuracy=round(correct / len(answers) * 100),
        average_time=round(sum(time for _, time in answers) / len(answers)),
    )


def _trend(recent: int | None, previous: int | None) -> PerformanceTrend:
    if recent is None or previous is None:
        return PerformanceTrend.INSUFFICIENT_DATA
    if recent - previous > TREND_MARGIN:
        return PerformanceTrend.IMPROVING
    if previous - recent > TREND_MARGIN:
        return PerformanceTrend.DECLINING
    return PerformanceTrend.STEADY
