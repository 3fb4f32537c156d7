# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for learning insights service."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.config.settings import Settings
from src.domains.insights import InsightsService
from src.domains.insights.service import combine_progress, next_review_date
from src.infrastructure.database.models import Unit, UserProgress
from src.models.insights import PerformanceTrend
from src.models.question import DifficultyLevel
from src.utils.datetime import utc_now


@pytest.fixture
def mock_adaptive_service():
    """Create mock adaptive learning service."""
    service = MagicMock()
    service.list_unit_progress = AsyncMock(return_value=[])
    service.list_user_progress = AsyncMock(return_value=[])
    return service


@pytest.fixture
def insights_service(mock_db, mock_adaptive_service):
    """Create insights service with default thresholds."""
    return InsightsService(mock_db, mock_adaptive_service, settings=Settings())


def _topic_rows(mock_db, rows):
    result = MagicMock()
    result.all.return_value = rows
    mock_db.execute.return_value = result


def _progress(**overrides) -> UserProgress:
    fields = {
        "id": "progress-1",
        "user_id": "user_1",
        "unit_id": "unit-1",
        "topic_id": None,
        "current_difficulty": "HARD",
        "consecutive_correct": 1,
        "consecutive_wrong": 0,
        "best_streak": 6,
        "total_attempts": 20,
        "correct_attempts": 15,
        "total_time_spent": 3000,
        "mastery_level": 72,
        "last_practiced_at": datetime(2025, 1, 15, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return UserProgress(**fields)


class TestInsightsService:
    """Tests for InsightsService class."""

    @pytest.mark.asyncio
    async def test_no_progress(self, insights_service, mock_db):
        """Test a user who never practiced gets zeros and a start hint."""
        _topic_rows(mock_db, [])

        insights = await insights_service.get_learning_insights("user_1", "unit-1")

        assert insights.mastery_level == 0
        assert insights.current_difficulty == DifficultyLevel.EASY
        assert insights.accuracy == 0
        assert insights.average_time_per_question == 0
        assert insights.next_review_date is None
        assert insights.weak_topics == []
        assert insights.strong_topics == []
        assert len(insights.recommendations) == 1
        assert "Start a practice session" in insights.recommendations[0]

    @pytest.mark.asyncio
    async def test_insights_from_progress(
        self, insights_service, mock_db, mock_adaptive_service
    ):
        """Test mastery, pace and topic classification."""
        mock_adaptive_service.list_unit_progress.return_value = [_progress()]
        _topic_rows(
            mock_db,
            [
                ("Casting and Ranges of Variables", 5, 2),
                ("Compound Assignment Operators", 2, 0),
                ("String Methods", 4, 4),
            ],
        )

        insights = await insights_service.get_learning_insights("user_1", "unit-1")

        assert insights.mastery_level == 72
        assert insights.current_difficulty == DifficultyLevel.HARD
        assert insights.accuracy == 75
        assert insights.total_attempts == 20
        assert insights.average_time_per_question == 150
        assert insights.next_review_date == datetime(2025, 1, 22, tzinfo=timezone.utc)
        assert insights.weak_topics == ["Casting and Ranges of Variables"]
        assert insights.strong_topics == ["String Methods"]

        recommendations = insights.recommendations
        assert recommendations[0].startswith("Good progress")
        assert "Casting and Ranges of Variables" in recommendations[1]
        assert "2m 30s" in recommendations[2]
        assert len(recommendations) == 3

    @pytest.mark.asyncio
    async def test_unlock_hint_for_accurate_learner(
        self, insights_service, mock_db, mock_adaptive_service
    ):
        """Test accurate learners below EXPERT are told how to move up."""
        mock_adaptive_service.list_unit_progress.return_value = [
            _progress(
                current_difficulty="MEDIUM",
                correct_attempts=18,
                total_time_spent=600,
                mastery_level=90,
            )
        ]
        _topic_rows(mock_db, [])

        insights = await insights_service.get_learning_insights("user_1", "unit-1")

        assert insights.recommendations[0].startswith("You have mastered this unit")
        assert any("3 questions in a row" in r for r in insights.recommendations)

    @pytest.mark.asyncio
    async def test_list_user_progress(self, insights_service, mock_adaptive_service):
        """Test progress records are returned as responses."""
        mock_adaptive_service.list_user_progress.return_value = [_progress()]

        progress = await insights_service.list_user_progress("user_1")

        assert len(progress) == 1
        dumped = progress[0].model_dump(by_alias=True)
        assert dumped["unitId"] == "unit-1"
        assert dumped["masteryLevel"] == 72
        assert dumped["currentDifficulty"] == DifficultyLevel.HARD

    @pytest.mark.asyncio
    async def test_topic_scoped_progress_counts(
        self, insights_service, mock_db, mock_adaptive_service
    ):
        """Test a learner who only practiced one topic gets that topic's progress."""
        mock_adaptive_service.list_unit_progress.return_value = [
            _progress(
                topic_id="topic-1",
                current_difficulty="MEDIUM",
                total_attempts=6,
                correct_attempts=5,
                total_time_spent=180,
                mastery_level=64,
            )
        ]
        _topic_rows(mock_db, [])

        insights = await insights_service.get_learning_insights("user_1", "unit-1")

        mock_adaptive_service.list_unit_progress.assert_awaited_once_with("user_1", "unit-1")
        assert insights.mastery_level == 64
        assert insights.current_difficulty == DifficultyLevel.MEDIUM
        assert insights.total_attempts == 6
        assert insights.accuracy == 83
        assert insights.average_time_per_question == 30
        assert insights.next_review_date is not None


class TestCombineProgress:
    """Tests for folding a unit's progress records together."""

    def test_empty(self):
        """Test no records, or records without answers, combine to None."""
        assert combine_progress([]) is None
        assert combine_progress([_progress(total_attempts=0, correct_attempts=0)]) is None

    def test_unit_and_topic_records(self):
        """Test attempts add up and mastery is weighted by attempts."""
        unit_level = _progress(
            total_attempts=10,
            correct_attempts=6,
            total_time_spent=400,
            mastery_level=50,
            current_difficulty="EASY",
            last_practiced_at=datetime(2025, 1, 10, tzinfo=timezone.utc),
        )
        topic_level = _progress(
            id="progress-2",
            topic_id="topic-1",
            total_attempts=30,
            correct_attempts=27,
            total_time_spent=900,
            mastery_level=90,
            current_difficulty="HARD",
            last_practiced_at=datetime(2025, 1, 20, tzinfo=timezone.utc),
        )

        combined = combine_progress([unit_level, topic_level])

        assert combined.total_attempts == 40
        assert combined.correct_attempts == 33
        assert combined.total_time_spent == 1300
        assert combined.mastery_level == 80
        assert combined.current_difficulty == DifficultyLevel.HARD
        assert combined.last_practiced_at == datetime(2025, 1, 20, tzinfo=timezone.utc)

    def test_review_interval_grows_with_mastery(self):
        """Test higher mastery schedules the review further out."""
        practiced = datetime(2025, 3, 1, tzinfo=timezone.utc)

        assert next_review_date(30, practiced) == practiced + timedelta(days=1)
        assert next_review_date(55, practiced) == practiced + timedelta(days=3)
        assert next_review_date(70, practiced) == practiced + timedelta(days=7)
        assert next_review_date(95, practiced) == practiced + timedelta(days=14)


class TestPerformancePatterns:
    """Tests for InsightsService.get_performance_patterns."""

    @pytest.mark.asyncio
    async def test_no_responses(self, insights_service, mock_db):
        """Test a user without answers has empty patterns."""
        _topic_rows(mock_db, [])

        patterns = await insights_service.get_performance_patterns("user_1", "unit-1")

        assert patterns.total_responses == 0
        assert patterns.by_difficulty == {}
        assert patterns.by_topic == {}
        assert patterns.recent_accuracy is None
        assert patterns.trend == PerformanceTrend.INSUFFICIENT_DATA

    @pytest.mark.asyncio
    async def test_breakdown_and_trend(self, insights_service, mock_db):
        """Test answers are grouped by tier and topic, newest first for the trend."""
        recent = [(True, 20, "MEDIUM", "Casting and Ranges of Variables")] * 9 + [
            (False, 40, "MEDIUM", None)
        ]
        older = [(False, 60, "EASY", "Arithmetic Expressions")] * 6 + [
            (True, 30, "EASY", "Arithmetic Expressions")
        ] * 4
        _topic_rows(mock_db, recent + older)

        patterns = await insights_service.get_performance_patterns("user_1", "unit-1")

        assert patterns.total_responses == 20
        assert list(patterns.by_difficulty) == ["EASY", "MEDIUM"]
        assert patterns.by_difficulty["MEDIUM"].total == 10
        assert patterns.by_difficulty["MEDIUM"].accuracy == 90
        assert patterns.by_difficulty["MEDIUM"].average_time == 22
        assert patterns.by_difficulty["EASY"].correct == 4
        assert patterns.by_topic["General"].total == 1
        assert patterns.by_topic["Arithmetic Expressions"].accuracy == 40
        assert patterns.recent_accuracy == 90
        assert patterns.previous_accuracy == 40
        assert patterns.trend == PerformanceTrend.IMPROVING

    @pytest.mark.asyncio
    async def test_steady_trend(self, insights_service, mock_db):
        """Test small accuracy changes are reported as steady."""
        rows = [(True, 10, "EASY", None), (False, 10, "EASY", None)] * 10
        _topic_rows(mock_db, rows)

        patterns = await insights_service.get_performance_patterns("user_1", "unit-1")

        assert patterns.recent_accuracy == 50
        assert patterns.previous_accuracy == 50
        assert patterns.trend == PerformanceTrend.STEADY


class TestReviewNeeded:
    """Tests for InsightsService.get_review_needed."""

    @pytest.mark.asyncio
    async def test_nothing_practiced(self, insights_service, mock_db):
        """Test a user without progress has nothing to review."""
        assert await insights_service.get_review_needed("user_1") == []
        mock_db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_only_overdue_units(
        self, insights_service, mock_db, mock_adaptive_service, scalars_result
    ):
        """Test recently practiced units are left out and overdue ones listed."""
        mock_adaptive_service.list_user_progress.return_value = [
            _progress(
                id="progress-2",
                unit_id="unit-2",
                mastery_level=90,
                last_practiced_at=utc_now() - timedelta(hours=1),
            ),
            _progress(unit_id="unit-1", mastery_level=40),
        ]
        mock_db.execute.return_value = scalars_result(
            [Unit(id="unit-1", unit_number=1, name="Primitive Types", is_active=True)]
        )

        items = await insights_service.get_review_needed("user_1")

        assert len(items) == 1
        item = items[0]
        assert item.unit_id == "unit-1"
        assert item.unit_name == "Primitive Types"
        assert item.next_review_date == datetime(2025, 1, 16, tzinfo=timezone.utc)
        assert item.days_overdue > 0
