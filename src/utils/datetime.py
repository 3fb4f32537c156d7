# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Time helpers.

Every timestamp column is TIMESTAMPTZ and every datetime created by the
application is UTC-aware.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime (used for column defaults)."""
    return datetime.now(timezone.utc)


def format_duration(seconds: int) -> str:
    """Render a duration for learner-facing text.

    Two units at most: "45s", "2m 30s", "1h 5m".

    Args:
        seconds: Duration in whole seconds.

    Returns:
        Short human-readable duration.
    """
    hours, remainder = divmod(max(seconds, 0), 3600)
    minutes, secs = divmod(remainder, 60)

    if hours:
        return f"{hours}h {minutes}m" if minutes else f"{hours}h"
    if minutes:
        return f"{minutes}m {secs}s" if secs else f"{minutes}m"
    return f"{secs}s"


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to a naive datetime read back from the database."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
