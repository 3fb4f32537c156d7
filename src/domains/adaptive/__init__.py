# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Adaptive difficulty domain.

Tracks per-user mastery and streaks and recommends the difficulty tier
of the next question.
"""

from src.domains.adaptive.policy import (
    DifficultyPolicy,
    ProgressState,
    calculate_mastery,
)
from src.domains.adaptive.service import AdaptiveLearningService

__all__ = [
    "AdaptiveLearningService",
    "DifficultyPolicy",
    "ProgressState",
    "calculate_mastery",
]
