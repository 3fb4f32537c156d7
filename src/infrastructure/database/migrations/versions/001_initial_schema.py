# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial practice database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-01-15

This migration creates all tables based on the SQLAlchemy models in
src/infrastructure/database/models/.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    """Create practice database tables."""
    # ==========================================================================
    # 1. users table
    # ==========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        *_timestamps(),
    )

    # ==========================================================================
    # 2. units / topics tables
    # ==========================================================================
    op.create_table(
        "units",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("unit_number", sa.Integer, unique=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("icon", sa.String(64), nullable=True),
        sa.Column("color", sa.String(16), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "topics",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "unit_id",
            sa.String(36),
            sa.ForeignKey("units.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("order_index", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_topics_unit_id", "topics", ["unit_id"])

    # ==========================================================================
    # 3. questions table
    # ==========================================================================
    op.create_table(
        "questions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "unit_id",
            sa.String(36),
            sa.ForeignKey("units.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "topic_id",
            sa.String(36),
            sa.ForeignKey("topics.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("difficulty", sa.String(16), nullable=False),
        sa.Column("question_text", sa.Text, nullable=False),
        sa.Column("code_snippet", sa.Text, nullable=True),
        sa.Column("options", sa.JSON, nullable=True),
        sa.Column("correct_answer", sa.Text, nullable=False),
        sa.Column("explanation", sa.Text, nullable=False, server_default=""),
        sa.Column("is_approved", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_ai_generated", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.CheckConstraint(
            "difficulty IN ('EASY', 'MEDIUM', 'HARD', 'EXPERT')",
            name="valid_question_difficulty",
        ),
    )
    op.create_index(
        "idx_questions_unit_difficulty",
        "questions",
        ["unit_id", "difficulty", "is_approved"],
    )

    # ==========================================================================
    # 4. study_sessions table
    # ==========================================================================
    op.create_table(
        "study_sessions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(64),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "unit_id",
            sa.String(36),
            sa.ForeignKey("units.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "topic_id",
            sa.String(36),
            sa.ForeignKey("topics.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("session_type", sa.String(32), nullable=False, server_default="PRACTICE"),
        sa.Column("total_questions", sa.Integer, nullable=False, server_default="0"),
        sa.Column("correct_answers", sa.Integer, nullable=False, server_default="0"),
        sa.Column("target_questions", sa.Integer, nullable=False, server_default="40"),
        sa.Column(
            "started_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_duration", sa.Integer, nullable=True),
        sa.Column("average_time", sa.Float, nullable=True),
        sa.Column("accuracy_rate", sa.Float, nullable=True),
        sa.Column("goal_achieved", sa.Boolean, nullable=True),
        sa.CheckConstraint(
            "total_questions <= target_questions",
            name="ck_study_sessions_target",
        ),
    )
    op.create_index("idx_study_sessions_user_unit", "study_sessions", ["user_id", "unit_id"])

    # ==========================================================================
    # 5. question_responses table
    # ==========================================================================
    op.create_table(
        "question_responses",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(64),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "question_id",
            sa.String(36),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "session_id",
            sa.String(36),
            sa.ForeignKey("study_sessions.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("user_answer", sa.Text, nullable=False),
        sa.Column("is_correct", sa.Boolean, nullable=False),
        sa.Column("time_spent", sa.Integer, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index(
        "idx_question_responses_user_question",
        "question_responses",
        ["user_id", "question_id"],
    )
    op.create_index("ix_question_responses_session_id", "question_responses", ["session_id"])

    # ==========================================================================
    # 6. user_progress table
    # ==========================================================================
    op.create_table(
        "user_progress",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(64),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "unit_id",
            sa.String(36),
            sa.ForeignKey("units.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "topic_id",
            sa.String(36),
            sa.ForeignKey("topics.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("current_difficulty", sa.String(16), nullable=False, server_default="EASY"),
        sa.Column("consecutive_correct", sa.Integer, nullable=False, server_default="0"),
        sa.Column("consecutive_wrong", sa.Integer, nullable=False, server_default="0"),
        sa.Column("best_streak", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_attempts", sa.Integer, nullable=False, server_default="0"),
        sa.Column("correct_attempts", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_time_spent", sa.Integer, nullable=False, server_default="0"),
        sa.Column("mastery_level", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_practiced_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "unit_id", "topic_id", name="uq_user_progress_scope"),
    )
    op.create_index("ix_user_progress_user_id", "user_progress", ["user_id"])


def downgrade() -> None:
    """Drop practice database tables."""
    op.drop_table("user_progress")
    op.drop_table("question_responses")
    op.drop_table("study_sessions")
    op.drop_table("questions")
    op.drop_table("topics")
    op.drop_table("units")
    op.drop_table("users")
