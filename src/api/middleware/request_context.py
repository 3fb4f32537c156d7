# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request context middleware.

Assigns every request an ID (taken from the X-Request-ID header when the
client sends one), binds it to the structlog context so all log lines of
the request carry it, and echoes it back in the response headers.

Example:
    # Request
    POST /api/v1/practice/start
    X-Request-ID: 3f2b...

    # Response
    X-Request-ID: 3f2b...
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.utils.logging import bind_context, clear_context

logger = logging.getLogger(__name__)

# Header name for the request ID
REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware that binds a request ID to the logging context.

    The ID is stored in request.state.request_id.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        """Process the request inside a bound logging context.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware/handler.

        Returns:
            HTTP response with the X-Request-ID header set.
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        clear_context()
        bind_context(request_id=request_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.debug(
                "%s %s -> %d (%.1fms)",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_context()
