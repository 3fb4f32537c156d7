# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.infrastructure.database.models import Question, Topic, Unit


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (app wiring or a real database)"
    )


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.execute = AsyncMock()
    db.get = AsyncMock(return_value=None)
    return db


def _scalar_result(value: Any) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _scalars_result(values: list[Any]) -> MagicMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = values
    return result


@pytest.fixture
def scalar_result():
    """Factory for mock execute() results answering scalar_one_or_none()."""
    return _scalar_result


@pytest.fixture
def scalars_result():
    """Factory for mock execute() results answering scalars().all()."""
    return _scalars_result


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def sample_user_id() -> str:
    """Provide a sample identity provider user ID."""
    return "user_2abcDEF123"


@pytest.fixture
def sample_unit() -> Unit:
    """Provide the "Primitive Types" unit with one topic."""
    unit = Unit(
        id="unit-1",
        unit_number=1,
        name="Primitive Types",
        description="Variables, data types, arithmetic operators, and compound assignment",
        is_active=True,
    )
    unit.topics = [
        Topic(id="topic-1", unit_id="unit-1", name="Arithmetic Expressions", order_index=0),
    ]
    return unit


def _make_question(
    question_id: str = "q-1",
    difficulty: str = "EASY",
    unit: Unit | None = None,
    topic: Topic | None = None,
    **overrides: Any,
) -> Question:
    """Build a multiple-choice question with its relationships set."""
    unit = unit or Unit(id="unit-1", unit_number=1, name="Primitive Types", is_active=True)
    fields: dict[str, Any] = {
        "id": question_id,
        "unit_id": unit.id,
        "topic_id": topic.id if topic else None,
        "type": "MULTIPLE_CHOICE",
        "difficulty": difficulty,
        "question_text": "What is the value of 7 / 2 in Java?",
        "code_snippet": None,
        "options": ["3.5", "3", "4", "3.0"],
        "correct_answer": "B",
        "explanation": "Integer division truncates.",
        "is_approved": True,
        "is_ai_generated": False,
        "created_at": datetime(2025, 1, 15, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    question = Question(**fields)
    question.unit = unit
    question.topic = topic
    return question


@pytest.fixture
def make_question():
    """Factory for questions with unit and topic relationships set."""
    return _make_question
