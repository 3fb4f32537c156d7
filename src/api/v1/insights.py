# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning insights API endpoints.

- GET /{user_id}/unit/{unit_id} - Insights for a user on a unit
- GET /{user_id}/patterns/{unit_id} - Performance by tier, topic and over time
- GET /{user_id}/review-needed - Units due for spaced-repetition review
"""

import logging

from fastapi import APIRouter, Depends

from src.api.dependencies import get_insights_service
from src.domains.insights import InsightsService
from src.models.insights import (
    LearningInsightsResponse,
    PerformancePatternsResponse,
    ReviewItemResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/{user_id}/unit/{unit_id}",
    response_model=LearningInsightsResponse,
    summary="Get learning insights",
    description="Mastery, accuracy, pace, weak and strong topics and study recommendations for a unit.",
)
async def get_learning_insights(
    user_id: str,
    unit_id: str,
    service: InsightsService = Depends(get_insights_service),
) -> LearningInsightsResponse:
    """Get learning insights for a user on a unit.

    Args:
        user_id: The user's ID.
        unit_id: The unit's ID.
        service: Insights service.

    Returns:
        LearningInsightsResponse. A user without progress gets zeros.
    """
    return await service.get_learning_insights(user_id, unit_id)


@router.get(
    "/{user_id}/patterns/{unit_id}",
    response_model=PerformancePatternsResponse,
    summary="Get performance patterns",
    description="Accuracy and pace by difficulty and topic, and the recent accuracy trend.",
)
async def get_performance_patterns(
    user_id: str,
    unit_id: str,
    service: InsightsService = Depends(get_insights_service),
) -> PerformancePatternsResponse:
    """Get performance patterns for a user on a unit."""
    return await service.get_performance_patterns(user_id, unit_id)


@router.get(
    "/{user_id}/review-needed",
    response_model=list[ReviewItemResponse],
    summary="Get units due for review",
)
async def get_review_needed(
    user_id: str,
    service: InsightsService = Depends(get_insights_service),
) -> list[ReviewItemResponse]:
    """List the units whose review date has passed.

    Args:
        user_id: The user's ID.
        service: Insights service.

    Returns:
        Units due for review, most overdue first. Empty when nothing is due.
    """
    return await service.get_review_needed(user_id)
