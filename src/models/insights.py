# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning insight and progress overview models."""

from datetime import datetime
from enum import Enum

from src.models.base import CamelModel
from src.models.question import DifficultyLevel


class UserProgressResponse(CamelModel):
    """One progress record of a user."""

    id: str
    unit_id: str
    topic_id: str | None = None
    mastery_level: int
    total_attempts: int
    correct_attempts: int
    current_difficulty: DifficultyLevel
    last_practiced_at: datetime | None = None


class LearningInsightsResponse(CamelModel):
    """Unit-level learning insights for the practice screen.

    ``next_review_date`` is only set once the user has answered in the unit.
    """

    mastery_level: int
    current_difficulty: DifficultyLevel
    accuracy: int
    total_attempts: int
    average_time_per_question: int
    next_review_date: datetime | None = None
    weak_topics: list[str]
    strong_topics: list[str]
    recommendations: list[str]


class PerformanceTrend(str, Enum):
    """Direction of recent accuracy compared with the answers before it."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STEADY = "steady"
    INSUFFICIENT_DATA = "insufficient_data"


class PatternEntry(CamelModel):
    """Answer statistics for one difficulty tier or topic."""

    total: int = 0
    correct: int = 0
    accuracy: int = 0
    average_time: int = 0


class PerformancePatternsResponse(CamelModel):
    """How a user performs on a unit, by tier, by topic and over time."""

    total_responses: int
    by_difficulty: dict[str, PatternEntry]
    by_topic: dict[str, PatternEntry]
    recent_accuracy: int | None = None
    previous_accuracy: int | None = None
    trend: PerformanceTrend


class ReviewItemResponse(CamelModel):
    """A unit whose spaced-repetition review is due."""

    unit_id: str
    unit_number: int
    unit_name: str
    mastery_level: int
    last_practiced_at: datetime
    next_review_date: datetime
    days_overdue: int
