# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models.

Importing this package registers every table on ``Base.metadata``
(used by Alembic autogeneration).
"""

from src.infrastructure.database.models.base import Base, TimestampMixin, new_id
from src.infrastructure.database.models.curriculum import Topic, Unit
from src.infrastructure.database.models.practice import QuestionResponse, StudySession
from src.infrastructure.database.models.progress import UserProgress
from src.infrastructure.database.models.question import Question
from src.infrastructure.database.models.user import User

__all__ = [
    "Base",
    "TimestampMixin",
    "new_id",
    "User",
    "Unit",
    "Topic",
    "Question",
    "StudySession",
    "QuestionResponse",
    "UserProgress",
]
