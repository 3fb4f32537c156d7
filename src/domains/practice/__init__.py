# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Practice domain services.

This module provides the service that runs bounded practice sessions
on top of the question bank and the adaptive progress tracker.
"""

from src.domains.practice.service import (
    PracticeService,
    PracticeServiceError,
    SessionCompleteError,
    SessionNotFoundError,
    UnitNotFoundError,
)

__all__ = [
    "PracticeService",
    "PracticeServiceError",
    "SessionCompleteError",
    "SessionNotFoundError",
    "UnitNotFoundError",
]
