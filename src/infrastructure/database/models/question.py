# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Question bank model.

Questions are immutable once created. They are either authored ahead of
time (seeded/imported, approved) or generated on demand by an LLM, in which
case ``is_ai_generated`` is set and ``is_approved`` reflects whether the
review gate was bypassed.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, new_id
from src.infrastructure.database.models.curriculum import Topic, Unit
from src.utils.datetime import utc_now


class Question(Base):
    """A practice question belonging to a unit and optional topic."""

    __tablename__ = "questions"
    __table_args__ = (
        Index("idx_questions_unit_difficulty", "unit_id", "difficulty", "is_approved"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
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
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    difficulty: Mapped[str] = mapped_column(String(16), nullable=False)
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    code_snippet: Mapped[str | None] = mapped_column(Text, nullable=True)
    options: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    correct_answer: Mapped[str] = mapped_column(Text, nullable=False)
    explanation: Mapped[str] = mapped_column(Text, default="", nullable=False)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_ai_generated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    unit: Mapped[Unit] = relationship()
    topic: Mapped[Topic | None] = relationship()

    def __repr__(self) -> str:
        return f"<Question {self.id} {self.difficulty}>"
