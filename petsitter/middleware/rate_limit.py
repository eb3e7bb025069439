"""
PetSitter Connect Backend — Rate Limiting Middleware
=====================================================

What:  Per-client sliding-window request limit.
How:   Keeps the timestamps of each client's recent requests in a deque; a
       request is refused with 429 once the deque holds `max_requests`
       entries younger than `window_seconds`.
When:  Outermost middleware, so refused requests cost nothing downstream.

Limits default to RATE_LIMIT_REQUESTS / RATE_LIMIT_WINDOW (100 per 60s).
State is per process; several uvicorn workers each keep their own counters.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from petsitter.config import settings
from petsitter.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding-window limiter keyed by client address.

    Health checks and the API docs are never limited.
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
    ):
        super().__init__(app)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)

    def _is_excluded(self, path: str) -> bool:
        prefix = settings.api_prefix
        if prefix and path.startswith(prefix):
            path = path[len(prefix):] or "/"
        return path in self.EXCLUDED_PATHS

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if self._is_excluded(request.url.path):
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        now = time.monotonic()
        hits = self._hits[client]

        # Drop timestamps that fell out of the window
        while hits and hits[0] <= now - self.window_seconds:
            hits.popleft()

        if len(hits) >= self.max_requests:
            retry_after = int(hits[0] + self.window_seconds - now) + 1
            logger.warning(
                "Rate limit exceeded for %s: %d requests in %ds",
                client, len(hits), self.window_seconds,
            )
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": (
                        f"Too many requests. Please wait {retry_after} seconds "
                        "before retrying."
                    ),
                    "details": {"retry_after": retry_after},
                    "request_id": request_id_var.get(""),
                    "path": request.url.path,
                },
                headers={"Retry-After": str(retry_after)},
            )

        hits.append(now)

        if len(self._hits) > 1000:
            self._forget_idle_clients(now)

        return await call_next(request)

    def _forget_idle_clients(self, now: float) -> None:
        idle = [
            client for client, hits in self._hits.items()
            if not hits or hits[-1] <= now - self.window_seconds
        ]
        for client in idle:
            del self._hits[client]
        if idle:
            logger.debug("Forgot %d idle rate-limit clients", len(idle))
