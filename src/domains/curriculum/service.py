# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum service for unit and topic lookups.

Units are ordered by unit number and always returned with their topics
(ordered by ``order_index``).

Example:
    >>> service = CurriculumService(db_session)
    >>> units = await service.list_units()
    >>> unit = await service.get_unit(units[0].id)
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.infrastructure.database.models import Unit
from src.models.curriculum import UnitResponse

logger = logging.getLogger(__name__)


class CurriculumService:
    """Read access to the curriculum.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list_units(self, include_inactive: bool = False) -> list[UnitResponse]:
        """List units with their topics.

        Args:
            include_inactive: Also return units that are switched off.

        Returns:
            Units ordered by unit number.
        """
        stmt = select(Unit).options(selectinload(Unit.topics)).order_by(Unit.unit_number)
        if not include_inactive:
            stmt = stmt.where(Unit.is_active.is_(True))

        result = await self._db.execute(stmt)
        units = result.scalars().all()
        logger.debug("Listed units: count=%d", len(units))
        return [UnitResponse.model_validate(unit) for unit in units]

    async def get_unit(self, unit_id: str) -> UnitResponse | None:
        """Get a unit with its topics, or None if it does not exist."""
        result = await self._db.execute(
            select(Unit).options(selectinload(Unit.topics)).where(Unit.id == unit_id)
        )
        unit = result.scalar_one_or_none()
        if unit is None:
            return None
        return UnitResponse.model_validate(unit)
