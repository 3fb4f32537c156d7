# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the adaptive
practice API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select

from src.api.dependencies import close_db, init_db
from src.api.middleware import RequestContextMiddleware
from src.api.routes import health
from src.api.v1 import router as v1_router
from src.core.config import get_settings
from src.infrastructure.database.connection import DatabaseError, get_session
from src.infrastructure.database.models import Unit
from src.infrastructure.database.seeds import seed_curriculum
from src.utils.logging import setup_logging

logger = logging.getLogger(__name__)


async def _database_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Database error on %s %s: %s",
        request.method,
        request.url.path,
        str(exc),
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"},
    )


async def seed_if_empty() -> None:
    """Seed the curriculum when the units table is empty."""
    async with get_session() as session:
        result = await session.execute(select(Unit.id).limit(1))
        if result.scalar_one_or_none() is not None:
            logger.info("Curriculum already present, skipping seed")
            return

        logger.info("No units found, seeding curriculum")
        await seed_curriculum(session)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events for the application.
    Initializes and cleans up:
    - Logging
    - Database connections
    - Curriculum seed data (first start only)

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Starting adaptive practice API: environment=%s, debug=%s",
        settings.environment,
        settings.debug,
    )

    # =========================================================================
    # Startup
    # =========================================================================

    try:
        await init_db()
        logger.info("Database connection initialized")
    except Exception as e:
        logger.warning("Failed to initialize database connection: %s", str(e))

    if settings.seed_curriculum:
        try:
            await seed_if_empty()
        except Exception as e:
            logger.warning("Failed to seed curriculum: %s", str(e))

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    try:
        await close_db()
        logger.info("Database connection closed")
    except Exception as e:
        logger.warning("Error closing database connection: %s", str(e))

    logger.info("Shutting down adaptive practice API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a new FastAPI instance with all
    middleware, routes, and configurations applied.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Adaptive Practice API",
        description="Adaptive practice questions for AP Computer Science A",
        version=health.API_VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_exception_handler(DatabaseError, _database_error_handler)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================

    app.add_middleware(RequestContextMiddleware)

    # CORS middleware (should be last to execute first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router)

    return app
