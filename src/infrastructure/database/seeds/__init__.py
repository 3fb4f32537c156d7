# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database seed package.

This package contains seed data for initializing the practice database:
- Curriculum seeds: AP Computer Science A units, topics, starter questions
"""

from src.infrastructure.database.seeds.curriculum import seed_curriculum

__all__ = ["seed_curriculum"]
