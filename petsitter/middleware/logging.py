"""
PetSitter Connect Backend — Access Log Middleware
==================================================

What:  One log line per request on the "petsitter.access" logger.
Format:
    PATCH /applications/7 200 12.3ms [a1b2c3d4] from 127.0.0.1

Level follows the status: 5xx ERROR, 4xx WARNING, everything else INFO.
Request bodies are never logged. /health is skipped to keep probe traffic
out of the log.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from petsitter.middleware.request_id import request_id_var

logger = logging.getLogger("petsitter.access")


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path.endswith("/health"):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        logger.log(
            _level_for(response.status_code),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            response.status_code,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
