# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for database models.

Tests model definitions, constraints, and helper properties.
"""

from datetime import datetime, timezone

from src.infrastructure.database.models import (
    Base,
    Question,
    QuestionResponse,
    StudySession,
    Topic,
    Unit,
    User,
    UserProgress,
    new_id,
)


class TestBase:
    """Test base model functionality."""

    def test_all_tables_registered(self):
        """Verify every table is on the shared metadata."""
        assert set(Base.metadata.tables) == {
            "users",
            "units",
            "topics",
            "questions",
            "study_sessions",
            "question_responses",
            "user_progress",
        }

    def test_new_id_is_unique(self):
        """Verify generated ids are distinct UUID strings."""
        first, second = new_id(), new_id()

        assert first != second
        assert len(first) == 36


class TestCurriculumModels:
    """Test unit and topic models."""

    def test_unit_number_unique(self):
        """Verify unit numbers are unique."""
        assert Unit.__table__.c.unit_number.unique is True

    def test_topics_back_populate(self):
        """Verify assigning topics sets their unit."""
        unit = Unit(id="unit-1", unit_number=1, name="Primitive Types")
        topic = Topic(id="topic-1", name="Casting", order_index=0)

        unit.topics = [topic]

        assert topic.unit is unit


class TestStudySession:
    """Test study session model."""

    def test_target_constraint(self):
        """Verify answered count is capped at the target in the schema."""
        constraints = {c.name for c in StudySession.__table__.constraints}

        assert "ck_study_sessions_target" in constraints

    def test_is_ended(self):
        """Verify is_ended follows ended_at."""
        session = StudySession(id="s-1", user_id="user_1", unit_id="unit-1")
        assert session.is_ended is False

        session.ended_at = datetime(2025, 1, 15, tzinfo=timezone.utc)
        assert session.is_ended is True

    def test_responses_back_populate(self):
        """Verify appending a response links it to the session."""
        session = StudySession(id="s-1", user_id="user_1", unit_id="unit-1")
        response = QuestionResponse(
            id="r-1",
            user_id="user_1",
            question_id="q-1",
            user_answer="B",
            is_correct=True,
        )

        session.responses.append(response)

        assert response.session is session


class TestUserProgress:
    """Test progress model."""

    def test_scope_unique(self):
        """Verify one record per user, unit and topic."""
        constraints = {c.name for c in UserProgress.__table__.constraints}

        assert "uq_user_progress_scope" in constraints

    def test_accuracy(self):
        """Verify accuracy is the correct fraction."""
        progress = UserProgress(total_attempts=4, correct_attempts=3)

        assert progress.accuracy == 0.75

    def test_accuracy_without_attempts(self):
        """Verify accuracy is 0.0 without attempts."""
        assert UserProgress(total_attempts=0, correct_attempts=0).accuracy == 0.0


class TestQuestion:
    """Test question model."""

    def test_repr(self):
        """Verify repr shows id and difficulty."""
        question = Question(id="q-1", difficulty="HARD")

        assert repr(question) == "<Question q-1 HARD>"

    def test_user_email_required(self):
        """Verify users need an email."""
        assert User.__table__.c.email.nullable is False
