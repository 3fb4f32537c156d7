# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    practice: Practice session endpoints (start, next question, answer, end).
    units: Curriculum units and user progress endpoints.
    insights: Learning insights endpoints.
"""

from fastapi import APIRouter

from src.api.v1 import insights, practice, units

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(practice.router, prefix="/practice", tags=["Practice"])
router.include_router(units.router, prefix="/units", tags=["Units"])
router.include_router(insights.router, prefix="/insights", tags=["Insights"])

__all__ = ["router"]
