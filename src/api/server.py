# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Server entry point.

Runs the application factory under uvicorn with the API_* settings:

    python -m src.api.server
"""

import uvicorn

from src.core.config import get_settings

APP_FACTORY = "src.api.app:create_app"


def run() -> None:
    """Start uvicorn with host, port, workers and reload from settings.

    Reload and multiple workers are mutually exclusive in uvicorn, so
    workers are only passed when reload is off.
    """
    settings = get_settings()
    options = {
        "host": settings.api.host,
        "port": settings.api.port,
        "log_level": settings.log_level.lower(),
        "factory": True,
    }
    if settings.api.reload:
        options["reload"] = True
    else:
        options["workers"] = settings.api.workers

    uvicorn.run(APP_FACTORY, **options)


if __name__ == "__main__":
    run()
