# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic request/response models (API contract).

Field names are snake_case in Python and camelCase on the wire.
"""
