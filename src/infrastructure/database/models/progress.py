# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Per-user adaptive progress model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin, new_id


class UserProgress(Base, TimestampMixin):
    """Streaks, attempt counts and current difficulty for a user on a unit.

    ``topic_id`` is NULL for unit-level progress.
    """

    __tablename__ = "user_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "unit_id", "topic_id", name="uq_user_progress_scope"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    unit_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("units.id", ondelete="CASCADE"),
        nullable=False,
    )
    topic_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("topics.id", ondelete="CASCADE"),
        nullable=True,
    )
    current_difficulty: Mapped[str] = mapped_column(String(16), default="EASY", nullable=False)
    consecutive_correct: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    consecutive_wrong: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    best_streak: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    correct_attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_time_spent: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    mastery_level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_practiced_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    @property
    def accuracy(self) -> float:
        """Fraction of correct attempts, 0.0 without attempts."""
        if self.total_attempts == 0:
            return 0.0
        return self.correct_attempts / self.total_attempts

    def __repr__(self) -> str:
        return f"<UserProgress {self.user_id}/{self.unit_id} {self.current_difficulty}>"
