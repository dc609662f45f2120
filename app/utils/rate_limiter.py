"""
Rate limiting for HTTP API endpoints
"""
import time
from collections import defaultdict, deque
from fastapi import Request, HTTPException
from typing import Deque, Dict
import logging

from app.config import settings

logger = logging.getLogger(__name__)

# Monitoring and docs are never limited
EXEMPT_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


class RateLimiter:
    """
    In-memory sliding-window rate limiter, keyed by client address
    Production: Use Redis for distributed rate limiting
    """

    def __init__(self, requests_per_minute: int = 60, requests_per_hour: int = 1000):
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour

        # {client_id: timestamps of requests within the last hour}
        self.history: Dict[str, Deque[float]] = defaultdict(deque)

    def _get_client_id(self, request: Request) -> str:
        """Extract client identifier from request"""
        return request.client.host if request.client else "unknown"

    def _cleanup_old_entries(self, now: float) -> None:
        """Drop timestamps older than an hour and clients left with none"""
        cutoff_time = now - 3600

        for client_id in list(self.history.keys()):
            timestamps = self.history[client_id]
            while timestamps and timestamps[0] <= cutoff_time:
                timestamps.popleft()

            # Remove empty entries
            if not timestamps:
                del self.history[client_id]

    def _reject(self, client_id: str, limit: int, window: str, retry_after: int):
        logger.warning(f"Rate limit exceeded ({window}): {client_id}")
        raise HTTPException(
            status_code=429,
            detail={
                "error": "rate_limit_exceeded",
                "message": f"Too many requests. Limit: {limit} requests per {window}",
                "retry_after": retry_after
            }
        )

    async def check_rate_limit(self, request: Request) -> None:
        """
        Check if request exceeds rate limits

        Raises:
            HTTPException: 429 if rate limit exceeded
        """
        if request.url.path in EXEMPT_PATHS:
            return

        client_id = self._get_client_id(request)
        now = time.time()

        self._cleanup_old_entries(now)
        timestamps = self.history[client_id]

        minute_requests = sum(1 for ts in timestamps if ts > now - 60)
        if minute_requests >= self.requests_per_minute:
            self._reject(client_id, self.requests_per_minute, "minute", 60)

        if len(timestamps) >= self.requests_per_hour:
            self._reject(client_id, self.requests_per_hour, "hour", 3600)

        timestamps.append(now)
        logger.debug(f"Rate limit check passed: {client_id} (minute: {minute_requests+1}, hour: {len(timestamps)})")

    def reset(self) -> None:
        self.history.clear()


# Global instance
rate_limiter = RateLimiter(
    requests_per_minute=settings.RATE_LIMIT_PER_MINUTE,
    requests_per_hour=settings.RATE_LIMIT_PER_HOUR
)
