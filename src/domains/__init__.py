# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer.

This package contains domain services that encapsulate business logic.

Domains:
    adaptive: Progress tracking and difficulty recommendation.
    curriculum: Unit and topic lookup.
    insights: Learning insights derived from progress and responses.
    practice: Practice session lifecycle.
    question: Question selection, answer checking and generation.
"""
