# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum domain services.

Read access to units and their topics. The curriculum itself is seeded
at startup (see src.infrastructure.database.seeds).
"""

from src.domains.curriculum.service import CurriculumService

__all__ = ["CurriculumService"]
