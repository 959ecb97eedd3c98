"""
In-memory fixed-window rate limiter for the API routes.

Counting is delegated to the `limits` package. Counters live in process
memory, so limits apply per worker.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import Request, Response
from limits import RateLimitItem, RateLimitItemPerSecond
from limits.storage import MemoryStorage, Storage
from limits.strategies import FixedWindowRateLimiter

from .config import get_settings
from .errors import RateLimitError


@dataclass(frozen=True)
class RateLimitRule:
    limit: int
    window_seconds: int


@dataclass(frozen=True)
class RateLimitStatus:
    allowed: bool
    remaining: int
    reset_time: int  # seconds until the window resets


class RateLimiter:
    """Counts requests per identifier inside a fixed window."""

    def __init__(self, storage: Optional[Storage] = None):
        self._storage = storage or MemoryStorage()
        self._strategy = FixedWindowRateLimiter(self._storage)

    @staticmethod
    def _item(limit: int, window_seconds: int) -> RateLimitItem:
        return RateLimitItemPerSecond(limit, int(window_seconds))

    def check(self, identifier: str, limit: int, window_seconds: int) -> bool:
        """Record a request. Returns False when the identifier is over its limit."""
        return self._strategy.hit(self._item(limit, window_seconds), identifier)

    def get_remaining(self, identifier: str, limit: int, window_seconds: int) -> int:
        stats = self._strategy.get_window_stats(self._item(limit, window_seconds), identifier)
        return max(0, stats.remaining)

    def get_reset_time(self, identifier: str, limit: int, window_seconds: int) -> int:
        stats = self._strategy.get_window_stats(self._item(limit, window_seconds), identifier)
        return max(0, math.ceil(stats.reset_time - time.time()))

    def clear(self) -> None:
        self._storage.reset()


# Global instance
rate_limiter = RateLimiter()


def get_rate_limits() -> Dict[str, RateLimitRule]:
    settings = get_settings()
    window = settings.rate_limit_window_seconds
    return {
        "AI_TUTOR": RateLimitRule(settings.ai_tutor_rate_limit, window),
        "OCR": RateLimitRule(settings.ocr_rate_limit, window),
        "SESSIONS": RateLimitRule(settings.sessions_rate_limit, window),
    }


def get_client_identifier(request: Request) -> str:
    """Identify the caller by proxy headers, falling back to a shared bucket."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    return "anonymous"


def check_rate_limit(
    request: Request,
    limit: int,
    window_seconds: int,
    limiter: Optional[RateLimiter] = None,
    scope: str = "",
) -> RateLimitStatus:
    limiter = limiter or rate_limiter
    identifier = get_client_identifier(request)
    if scope:
        identifier = f"{scope}:{identifier}"
    allowed = limiter.check(identifier, limit, window_seconds)
    return RateLimitStatus(
        allowed=allowed,
        remaining=limiter.get_remaining(identifier, limit, window_seconds),
        reset_time=limiter.get_reset_time(identifier, limit, window_seconds),
    )


def get_rate_limit_headers(limit: int, remaining: int, reset_time: int) -> Dict[str, str]:
    return {
        "X-RateLimit-Limit": str(limit),
        "X-RateLimit-Remaining": str(remaining),
        "X-RateLimit-Reset": str(reset_time),
    }


def rate_limit(rule_name: str):
    """FastAPI dependency enforcing one of the named limits from `get_rate_limits()`."""

    def dependency(request: Request, response: Response) -> RateLimitStatus:
        rule = get_rate_limits()[rule_name]
        status = check_rate_limit(request, rule.limit, rule.window_seconds, scope=rule_name)
        headers = get_rate_limit_headers(rule.limit, status.remaining, status.reset_time)
        if not status.allowed:
            raise RateLimitError(status.reset_time, headers)
        for name, value in headers.items():
            response.headers[name] = value
        return status

    return dependency
