# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for unit, insights and health endpoints."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.dependencies import get_curriculum_service, get_insights_service
from src.models.curriculum import TopicResponse, UnitResponse
from src.models.insights import (
    LearningInsightsResponse,
    PatternEntry,
    PerformancePatternsResponse,
    PerformanceTrend,
    ReviewItemResponse,
    UserProgressResponse,
)
from src.models.question import DifficultyLevel


@pytest.fixture
def mock_curriculum_service():
    """Create mock curriculum service."""
    service = MagicMock()
    service.list_units = AsyncMock(return_value=[])
    service.get_unit = AsyncMock(return_value=None)
    return service


@pytest.fixture
def mock_insights_service():
    """Create mock insights service."""
    service = MagicMock()
    service.get_learning_insights = AsyncMock()
    service.get_performance_patterns = AsyncMock()
    service.get_review_needed = AsyncMock(return_value=[])
    service.list_user_progress = AsyncMock(return_value=[])
    return service


@pytest.fixture
def client(mock_curriculum_service, mock_insights_service):
    """Create test client with services overridden."""
    app = create_app()
    app.dependency_overrides[get_curriculum_service] = lambda: mock_curriculum_service
    app.dependency_overrides[get_insights_service] = lambda: mock_insights_service
    return TestClient(app)


def _unit() -> UnitResponse:
    return UnitResponse(
        id="unit-1",
        unit_number=1,
        name="Primitive Types",
        is_active=True,
        topics=[
            TopicResponse(
                id="topic-1",
                name="Arithmetic Expressions",
                unit_id="unit-1",
                order_index=0,
            )
        ],
    )


class TestUnitsEndpoints:
    """Tests for /api/v1/units."""

    def test_list_units(self, client, mock_curriculum_service):
        """Test units are listed with topics."""
        mock_curriculum_service.list_units.return_value = [_unit()]

        response = client.get("/api/v1/units")

        assert response.status_code == 200
        body = response.json()
        assert body[0]["unitNumber"] == 1
        assert body[0]["topics"][0]["orderIndex"] == 0

    def test_get_unit(self, client, mock_curriculum_service):
        """Test a unit is returned by ID."""
        mock_curriculum_service.get_unit.return_value = _unit()

        response = client.get("/api/v1/units/unit-1")

        assert response.status_code == 200
        assert response.json()["name"] == "Primitive Types"

    def test_get_unit_not_found(self, client):
        """Test an unknown unit returns 404."""
        response = client.get("/api/v1/units/missing")

        assert response.status_code == 404

    def test_user_progress(self, client, mock_insights_service):
        """Test progress records are returned for a user."""
        mock_insights_service.list_user_progress.return_value = [
            UserProgressResponse(
                id="progress-1",
                unit_id="unit-1",
                mastery_level=64,
                total_attempts=12,
                correct_attempts=8,
                current_difficulty=DifficultyLevel.MEDIUM,
            )
        ]

        response = client.get("/api/v1/units/progress/user_1")

        assert response.status_code == 200
        assert response.json()[0]["currentDifficulty"] == "MEDIUM"
        mock_insights_service.list_user_progress.assert_awaited_once_with("user_1")


class TestInsightsEndpoints:
    """Tests for /api/v1/insights."""

    def test_learning_insights(self, client, mock_insights_service):
        """Test insights are returned in camelCase."""
        mock_insights_service.get_learning_insights.return_value = LearningInsightsResponse(
            mastery_level=72,
            current_difficulty=DifficultyLevel.HARD,
            accuracy=75,
            total_attempts=20,
            average_time_per_question=45,
            weak_topics=["Casting"],
            strong_topics=[],
            recommendations=["Good progress. Keep practicing to reach mastery."],
        )

        response = client.get("/api/v1/insights/user_1/unit/unit-1")

        assert response.status_code == 200
        body = response.json()
        assert body["masteryLevel"] == 72
        assert body["averageTimePerQuestion"] == 45
        assert body["weakTopics"] == ["Casting"]
        mock_insights_service.get_learning_insights.assert_awaited_once_with("user_1", "unit-1")

    def test_performance_patterns(self, client, mock_insights_service):
        """Test patterns are keyed by tier and topic."""
        mock_insights_service.get_performance_patterns.return_value = PerformancePatternsResponse(
            total_responses=4,
            by_difficulty={"EASY": PatternEntry(total=4, correct=3, accuracy=75, average_time=20)},
            by_topic={"General": PatternEntry(total=4, correct=3, accuracy=75, average_time=20)},
            trend=PerformanceTrend.INSUFFICIENT_DATA,
        )

        response = client.get("/api/v1/insights/user_1/patterns/unit-1")

        assert response.status_code == 200
        body = response.json()
        assert body["totalResponses"] == 4
        assert body["byDifficulty"]["EASY"]["averageTime"] == 20
        assert body["recentAccuracy"] is None
        assert body["trend"] == "insufficient_data"
        mock_insights_service.get_performance_patterns.assert_awaited_once_with(
            "user_1", "unit-1"
        )

    def test_review_needed(self, client, mock_insights_service):
        """Test due reviews are listed in camelCase."""
        mock_insights_service.get_review_needed.return_value = [
            ReviewItemResponse(
                unit_id="unit-1",
                unit_number=1,
                unit_name="Primitive Types",
                mastery_level=40,
                last_practiced_at=datetime(2025, 1, 15, tzinfo=timezone.utc),
                next_review_date=datetime(2025, 1, 16, tzinfo=timezone.utc),
                days_overdue=3,
            )
        ]

        response = client.get("/api/v1/insights/user_1/review-needed")

        assert response.status_code == 200
        body = response.json()
        assert body[0]["unitName"] == "Primitive Types"
        assert body[0]["daysOverdue"] == 3
        assert body[0]["nextReviewDate"].startswith("2025-01-16")
        mock_insights_service.get_review_needed.assert_awaited_once_with("user_1")


class TestHealthEndpoints:
    """Tests for /health and /ready."""

    def test_health_database_up(self, client):
        """Test a reachable database reports healthy."""
        with patch(
            "src.api.routes.health.check_database_connection",
            AsyncMock(return_value=True),
        ):
            response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"]["status"] == "healthy"

    def test_ready_database_down(self, client):
        """Test an unreachable database is not ready."""
        with patch(
            "src.api.routes.health.check_database_connection",
            AsyncMock(return_value=False),
        ):
            response = client.get("/ready")

        assert response.status_code == 200
        assert response.json() == {"ready": False}
