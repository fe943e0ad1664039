"""
Rate limiter implementation for FastAPI.
"""

from typing import Dict
import time
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.status import HTTP_429_TOO_MANY_REQUESTS
from signage.core.config import settings

# Kiosks poll these every few seconds; they must never be throttled.
KIOSK_POLLING_MARKERS = ("/refresh-signal", "/pings/pending/", "/heartbeat")


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        max_requests: int = 60,
        window_seconds: int = 60,
    ):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.request_records: Dict[str, list] = {}  # IP -> list of request timestamps

    async def dispatch(self, request: Request, call_next):
        if settings.ENVIRONMENT != "production" and not settings.RATE_LIMITING_ENABLED:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"

        if self._is_exempt(client_ip, request.url.path):
            return await call_next(request)

        now = time.time()
        records = [
            timestamp for timestamp in self.request_records.get(client_ip, [])
            if now - timestamp < self.window_seconds
        ]

        if len(records) >= self.max_requests:
            self.request_records[client_ip] = records
            return JSONResponse(
                content={"detail": "Too many requests"},
                status_code=HTTP_429_TOO_MANY_REQUESTS,
            )

        records.append(now)
        self.request_records[client_ip] = records
        return await call_next(request)

    def _is_exempt(self, client_ip: str, path: str) -> bool:
        """Check if an IP or path is exempt from rate limiting."""
        if path.endswith("/health"):
            return True

        if any(marker in path for marker in KIOSK_POLLING_MARKERS):
            return True

        if client_ip in settings.RATE_LIMITING_WHITELIST:
            return True

        return False
