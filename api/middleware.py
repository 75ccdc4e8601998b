"""
Request timing and access logging.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

PROCESS_TIME_HEADER = "X-Process-Time"


def register_middleware(app: FastAPI) -> None:
    """Time every request and log it; server errors are logged at WARNING."""

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers[PROCESS_TIME_HEADER] = f"{elapsed:.4f}"

        level = logging.WARNING if response.status_code >= 500 else logging.DEBUG
        client = request.client.host if request.client else "-"
        logger.log(
            level,
            "%s %s %s -> %d in %.3fs",
            client, request.method, request.url.path, response.status_code, elapsed,
        )
        return response
