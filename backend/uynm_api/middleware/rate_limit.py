"""
UYNM Backend — Rate Limiting Middleware
=========================================

What:  Per-IP sliding window limiter that keeps form spam bursts away from
       the store and the admin inbox.
How:   Each IP keeps the timestamps of its requests inside the window. A
       request arriving when the window is full gets 429 with Retry-After
       (seconds until the oldest timestamp leaves the window).
When:  Limits come from RATE_LIMIT_REQUESTS / RATE_LIMIT_WINDOW
       (default 100 requests per 15 minutes).

Single-process only: the counters live in this process's memory.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from uynm_api.exceptions import RateLimitExceededError
from uynm_api.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDED_PATHS = frozenset({"/", "/api/health", "/docs", "/redoc", "/openapi.json"})

# Forget idle IPs every this many recorded requests
CLEANUP_INTERVAL = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Args:
        max_requests: requests allowed per IP inside one window
        window_seconds: window length
        excluded_paths: paths never counted (banner, health probe, docs)
    """

    def __init__(
        self,
        app: ASGIApp,
        max_requests: int = 100,
        window_seconds: int = 900,
        excluded_paths: Optional[Iterable[str]] = None,
    ):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.excluded_paths = frozenset(
            DEFAULT_EXCLUDED_PATHS if excluded_paths is None else excluded_paths
        )
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._recorded = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # Preflights are answered by CORS before reaching here; never count them
        if request.method == "OPTIONS" or request.url.path in self.excluded_paths:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()
        window_start = now - self.window_seconds

        timestamps = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = timestamps

        if len(timestamps) >= self.max_requests:
            retry_after = int(timestamps[0] + self.window_seconds - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(timestamps),
                self.window_seconds,
            )
            return self._rejection(RateLimitExceededError(retry_after=retry_after))

        timestamps.append(now)
        self._recorded += 1
        if self._recorded % CLEANUP_INTERVAL == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    @staticmethod
    def _rejection(exc: RateLimitExceededError) -> JSONResponse:
        # Exception handlers do not run for responses produced in middleware,
        # so the envelope is built here.
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": exc.error_code,
                "message": exc.message,
                "request_id": request_id_var.get(""),
            },
            headers={"Retry-After": str(exc.retry_after)},
        )

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
