# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit API endpoints.

This module provides endpoints for the curriculum and user progress:
- GET / - List active units with their topics
- GET /progress/{user_id} - Progress records of a user
- GET /{unit_id} - Get a unit with its topics
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_curriculum_service, get_insights_service
from src.domains.curriculum import CurriculumService
from src.domains.insights import InsightsService
from src.models.curriculum import UnitResponse
from src.models.insights import UserProgressResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=list[UnitResponse],
    summary="List units",
    description="List active units ordered by unit number, with their topics.",
)
async def list_units(
    service: CurriculumService = Depends(get_curriculum_service),
) -> list[UnitResponse]:
    """List active units."""
    return await service.list_units()


@router.get(
    "/progress/{user_id}",
    response_model=list[UserProgressResponse],
    summary="Get user progress",
    description="Get all progress records of a user, most recently practiced first.",
)
async def get_user_progress(
    user_id: str,
    service: InsightsService = Depends(get_insights_service),
) -> list[UserProgressResponse]:
    """Get progress records of a user."""
    return await service.list_user_progress(user_id)


@router.get(
    "/{unit_id}",
    response_model=UnitResponse,
    summary="Get unit",
    description="Get a unit with its topics.",
)
async def get_unit(
    unit_id: str,
    service: CurriculumService = Depends(get_curriculum_service),
) -> UnitResponse:
    """Get a unit by ID.

    Raises:
        HTTPException: If the unit is not found.
    """
    unit = await service.get_unit(unit_id)
    if unit is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unit not found",
        )
    return unit
