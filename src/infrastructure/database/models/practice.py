# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Practice session and response models."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, new_id
from src.infrastructure.database.models.question import Question
from src.utils.datetime import utc_now


class StudySession(Base):
    """One bounded practice run of a user on a unit (and optional topic).

    ``total_questions`` counts answered questions and never exceeds
    ``target_questions``; the aggregate columns are filled in when the
    session is ended.
    """

    __tablename__ = "study_sessions"
    __table_args__ = (
        CheckConstraint(
            "total_questions <= target_questions",
            name="ck_study_sessions_target",
        ),
        Index("idx_study_sessions_user_unit", "user_id", "unit_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    unit_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("units.id", ondelete="CASCADE"),
        nullable=False,
    )
    topic_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("topics.id", ondelete="SET NULL"),
        nullable=True,
    )
    session_type: Mapped[str] = mapped_column(String(32), default="PRACTICE", nullable=False)
    total_questions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    correct_answers: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    target_questions: Mapped[int] = mapped_column(Integer, default=40, nullable=False)
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    total_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    average_time: Mapped[float | None] = mapped_column(Float, nullable=True)
    accuracy_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    goal_achieved: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    responses: Mapped[list["QuestionResponse"]] = relationship(
        back_populates="session",
        order_by="QuestionResponse.created_at",
    )

    @property
    def is_ended(self) -> bool:
        """Whether the session has been finalized."""
        return self.ended_at is not None

    def __repr__(self) -> str:
        return f"<StudySession {self.id} {self.total_questions}/{self.target_questions}>"


class QuestionResponse(Base):
    """A user's answer to a question.

    Created once per submission. ``session_id`` is attached after the
    session counters have been updated.
    """

    __tablename__ = "question_responses"
    __table_args__ = (
        Index("idx_question_responses_user_question", "user_id", "question_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    question_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
    )
    session_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("study_sessions.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    user_answer: Mapped[str] = mapped_column(Text, nullable=False)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False)
    time_spent: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    question: Mapped[Question] = relationship()
    session: Mapped[StudySession | None] = relationship(back_populates="responses")

    def __repr__(self) -> str:
        return f"<QuestionResponse {self.id} correct={self.is_correct}>"
