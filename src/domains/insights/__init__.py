# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning insights domain."""

from src.domains.insights.service import InsightsService

__all__ = ["InsightsService"]
