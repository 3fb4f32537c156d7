"""Adaptive Practice Backend.

Practice-question service that adapts question difficulty to each
learner's streaks, avoids repeats across sessions, and summarises
every 40-question session.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
