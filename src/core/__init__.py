# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package.

This package contains shared building blocks used by the domains:
- config: Application configuration and settings
- intelligence: LLM access for question generation
"""
