# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database migrations package.

Alembic environment and revisions for the practice database.
Run from the repository root with ``alembic upgrade head``.
"""
