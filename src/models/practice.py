# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Practice session request and response models."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from src.models.base import CamelModel
from src.models.question import DifficultyLevel, QuestionPayload


class SessionType(str, Enum):
    """Kinds of study session."""

    PRACTICE = "PRACTICE"


# =============================================================================
# Requests
# =============================================================================


class StartSessionRequest(CamelModel):
    """Start a practice session.

    ``topic_id`` is optional; without it the session and the progress
    record are scoped to the whole unit. ``user_email``/``user_name`` come
    from the identity provider and are used only when the local user row
    has to be created.
    """

    user_id: str = Field(min_length=1)
    unit_id: str = Field(min_length=1)
    topic_id: str | None = None
    user_email: str | None = None
    user_name: str | None = None


class NextQuestionRequest(CamelModel):
    """Fetch the next question of a session."""

    user_id: str = Field(min_length=1)
    session_id: str = Field(min_length=1)
    unit_id: str = Field(min_length=1)
    answered_question_ids: list[str] = Field(default_factory=list)
    topic_id: str | None = None


class SubmitAnswerRequest(CamelModel):
    """Submit an answer to a question within a session."""

    user_id: str = Field(min_length=1)
    session_id: str = Field(min_length=1)
    question_id: str = Field(min_length=1)
    user_answer: str
    time_spent: int | None = Field(default=None, ge=0, description="Seconds spent")


# =============================================================================
# Responses
# =============================================================================


class SessionResponse(CamelModel):
    """Persisted state of a study session."""

    id: str
    user_id: str
    unit_id: str
    topic_id: str | None = None
    session_type: str
    total_questions: int
    correct_answers: int
    target_questions: int
    started_at: datetime
    ended_at: datetime | None = None
    total_duration: int | None = None
    average_time: float | None = None
    accuracy_rate: float | None = None
    goal_achieved: bool | None = None


class StartSessionResponse(CamelModel):
    """Session plus its first question."""

    session: SessionResponse
    question: QuestionPayload
    recommended_difficulty: DifficultyLevel
    questions_remaining: int
    total_questions: int


class NextQuestionResponse(CamelModel):
    """Next question, or ``None`` once the session target is reached."""

    question: QuestionPayload | None = None
    is_session_complete: bool = False


class ProgressMetrics(CamelModel):
    """Adaptive progress after an answer."""

    current_difficulty: DifficultyLevel
    previous_difficulty: DifficultyLevel
    consecutive_correct: int
    consecutive_wrong: int
    total_attempts: int
    correct_attempts: int
    mastery_level: int

    @property
    def difficulty_changed(self) -> bool:
        return self.current_difficulty != self.previous_difficulty


class AnswerResultResponse(CamelModel):
    """Feedback for a submitted answer."""

    is_correct: bool
    correct_answer: str
    explanation: str
    progress: ProgressMetrics
    difficulty_changed: bool
    questions_remaining: int
    is_session_complete: bool


class BreakdownEntry(CamelModel):
    """Correct/total counts for one bucket of a session breakdown."""

    correct: int = 0
    total: int = 0


class SessionSummary(CamelModel):
    """Aggregates computed when a session ends."""

    total_questions: int
    correct_answers: int
    accuracy_rate: int
    total_time: int
    average_time: int
    topic_breakdown: dict[str, BreakdownEntry]
    difficulty_breakdown: dict[str, BreakdownEntry]
    target_questions: int
    completion_percentage: int
    goal_achieved: bool


class EndSessionResponse(CamelModel):
    """Finalized session and its summary."""

    session: SessionResponse
    summary: SessionSummary
