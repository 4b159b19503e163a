"""
Rate limiting for the HTTP API
"""
import time
from collections import deque
from fastapi import Request, HTTPException
from typing import Deque, Dict
import logging

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60


class RateLimiter:
    """
    In-memory sliding-window rate limiter keyed by client address
    """

    def __init__(self, requests_per_minute: int = 60):
        self.requests_per_minute = requests_per_minute
        self.requests: Dict[str, Deque[float]] = {}

    def _get_client_id(self, request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def _cleanup_old_entries(self, now: float):
        """Drop timestamps older than the window and forget idle clients"""
        cutoff_time = now - WINDOW_SECONDS

        for client_id in list(self.requests.keys()):
            window = self.requests[client_id]
            while window and window[0] <= cutoff_time:
                window.popleft()

            # Remove empty entries
            if not window:
                del self.requests[client_id]

    async def check_rate_limit(self, request: Request) -> None:
        """
        Record a request and reject it when the client is over its limit

        Raises:
            HTTPException: 429 if rate limit exceeded
        """
        client_id = self._get_client_id(request)
        now = time.monotonic()

        self._cleanup_old_entries(now)

        window = self.requests.get(client_id)
        if window is not None and len(window) >= self.requests_per_minute:
            logger.warning(f"Rate limit exceeded: {client_id}")
            raise HTTPException(
                status_code=429,
                detail=f"Too many requests. Limit: {self.requests_per_minute} requests per minute",
            )

        self.requests.setdefault(client_id, deque()).append(now)


# Global instance
from quizbot.config import settings
rate_limiter = RateLimiter(requests_per_minute=settings.RATE_LIMIT_PER_MINUTE)
