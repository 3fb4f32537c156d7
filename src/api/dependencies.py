# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions (one unit of work per request)
- Get service instances wired to that session

Example:
    @router.post("/start")
    async def start_session(
        data: StartSessionRequest,
        service: PracticeService = Depends(get_practice_service),
    ):
        ...
"""

import logging
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import Settings, get_settings
from src.domains.adaptive import AdaptiveLearningService, DifficultyPolicy
from src.domains.curriculum import CurriculumService
from src.domains.insights import InsightsService
from src.domains.practice import PracticeService
from src.domains.question import QuestionGenerator, QuestionService
from src.infrastructure.database.connection import (
    close_database,
    get_session,
    init_database,
)

logger = logging.getLogger(__name__)


async def init_db() -> None:
    """Initialize the database connection pool."""
    await init_database(get_settings())


async def close_db() -> None:
    """Close the database connection pool."""
    await close_database()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for the request.

    The session is committed when the endpoint returns and rolled back
    if it raises.

    Yields:
        AsyncSession for the practice database.
    """
    async with get_session() as session:
        yield session


# =========================================================================
# Service Dependencies
# =========================================================================


def get_question_generator() -> QuestionGenerator:
    """Get the LLM-backed question generator."""
    return QuestionGenerator()


def get_question_service(
    db: AsyncSession = Depends(get_db),
    generator: QuestionGenerator = Depends(get_question_generator),
) -> QuestionService:
    """Get question service instance."""
    return QuestionService(db=db, generator=generator)


def get_adaptive_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AdaptiveLearningService:
    """Get adaptive learning service with the configured streak thresholds."""
    policy = DifficultyPolicy(
        promote_after=settings.adaptive.promote_after,
        demote_after=settings.adaptive.demote_after,
    )
    return AdaptiveLearningService(db=db, policy=policy)


def get_practice_service(
    db: AsyncSession = Depends(get_db),
    question_service: QuestionService = Depends(get_question_service),
    adaptive_service: AdaptiveLearningService = Depends(get_adaptive_service),
    settings: Settings = Depends(get_settings),
) -> PracticeService:
    """Get practice service instance.

    Args:
        db: Request database session.
        question_service: Question bank service on the same session.
        adaptive_service: Adaptive progress service on the same session.
        settings: Application settings.

    Returns:
        Configured PracticeService instance.
    """
    return PracticeService(
        db=db,
        question_service=question_service,
        adaptive_service=adaptive_service,
        settings=settings,
    )


def get_curriculum_service(db: AsyncSession = Depends(get_db)) -> CurriculumService:
    """Get curriculum service instance."""
    return CurriculumService(db=db)


def get_insights_service(
    db: AsyncSession = Depends(get_db),
    adaptive_service: AdaptiveLearningService = Depends(get_adaptive_service),
    settings: Settings = Depends(get_settings),
) -> InsightsService:
    """Get insights service instance."""
    return InsightsService(db=db, adaptive_service=adaptive_service, settings=settings)
