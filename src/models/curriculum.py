# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum response models."""

from src.models.base import CamelModel


class TopicResponse(CamelModel):
    """Topic within a unit."""

    id: str
    name: str
    description: str | None = None
    unit_id: str
    order_index: int


class UnitResponse(CamelModel):
    """Unit with its ordered topics."""

    id: str
    unit_number: int
    name: str
    description: str | None = None
    icon: str | None = None
    color: str | None = None
    is_active: bool
    topics: list[TopicResponse] = []
