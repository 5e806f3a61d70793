"""Fixed-window request throttling keyed by client IP and route.

State lives in a process-local dict owned by a ``RateLimiter`` instance. In a
multi-instance deployment every instance keeps its own counters, so the
effective global cap is ``max_requests * instance_count``.
"""
import logging
import math
import random
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, Request, Response

from core.errors import RateLimited

logger = logging.getLogger(__name__)

CLIENT_IP_HEADERS = ("x-forwarded-for", "x-real-ip", "cf-connecting-ip")
FALLBACK_IP = "127.0.0.1"
CLEANUP_PROBABILITY = 0.01


@dataclass(frozen=True)
class RateLimitConfig:
    window_ms: int
    max_requests: int


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_time: int  # epoch milliseconds

    def headers(self) -> dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_time),
        }


@dataclass
class _Entry:
    count: int
    reset_time: int


RATE_LIMIT_PRESETS = {
    "donations": RateLimitConfig(window_ms=60 * 1000, max_requests=10),
    "posts": RateLimitConfig(window_ms=60 * 1000, max_requests=30),
    "goals": RateLimitConfig(window_ms=60 * 1000, max_requests=20),
    "strict": RateLimitConfig(window_ms=60 * 1000, max_requests=5),
    "passwordReset": RateLimitConfig(window_ms=60 * 60 * 1000, max_requests=3),
    "subscribe": RateLimitConfig(window_ms=60 * 60 * 1000, max_requests=5),
}


def get_client_ip(headers) -> str:
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    for name in CLIENT_IP_HEADERS[1:]:
        value = headers.get(name)
        if value:
            return value
    return FALLBACK_IP


def _now_ms() -> int:
    return int(time.time() * 1000)


class RateLimiter:
    def __init__(
        self,
        clock: Callable[[], int] = _now_ms,
        rng: Callable[[], float] = random.random,
    ):
        self._store: dict[str, _Entry] = {}
        self._clock = clock
        self._rng = rng

    def __len__(self):
        return len(self._store)

    def hit(self, key: str, config: RateLimitConfig) -> RateLimitResult:
        now = self._clock()
        self._maybe_cleanup(now)

        entry = self._store.get(key)
        if entry is None or now > entry.reset_time:
            entry = _Entry(count=1, reset_time=now + config.window_ms)
            self._store[key] = entry
            return RateLimitResult(True, config.max_requests, config.max_requests - 1, entry.reset_time)

        if entry.count >= config.max_requests:
            return RateLimitResult(False, config.max_requests, 0, entry.reset_time)

        entry.count += 1
        return RateLimitResult(
            True, config.max_requests, config.max_requests - entry.count, entry.reset_time
        )

    def check(self, request: Request, config: RateLimitConfig) -> RateLimitResult:
        key = f"{get_client_ip(request.headers)}:{request.url.path}"
        return self.hit(key, config)

    def sweep(self, now: int | None = None) -> int:
        now = self._clock() if now is None else now
        expired = [k for k, e in self._store.items() if now > e.reset_time]
        for k in expired:
            del self._store[k]
        return len(expired)

    def reset(self) -> None:
        self._store.clear()

    def _maybe_cleanup(self, now: int) -> None:
        if self._rng() < CLEANUP_PROBABILITY:
            removed = self.sweep(now)
            if removed:
                logger.debug("Swept %d expired rate-limit entries", removed)

    def retry_after_seconds(self, result: RateLimitResult) -> int:
        return max(0, math.ceil((result.reset_time - self._clock()) / 1000))


rate_limiter = RateLimiter()


def get_rate_limiter() -> RateLimiter:
    return rate_limiter


def rate_limited(preset: str):
    """Dependency that throttles a route with one of ``RATE_LIMIT_PRESETS``."""
    config = RATE_LIMIT_PRESETS[preset]

    def dependency(
        request: Request,
        response: Response,
        limiter: RateLimiter = Depends(get_rate_limiter),
    ) -> RateLimitResult:
        result = limiter.check(request, config)
        if not result.allowed:
            logger.warning(
                "Rate limit exceeded for %s on %s (%s)",
                get_client_ip(request.headers),
                request.url.path,
                preset,
            )
            headers = result.headers()
            headers["Retry-After"] = str(limiter.retry_after_seconds(result))
            raise RateLimited("Rate limit exceeded. Please try again later.", headers=headers)
        response.headers.update(result.headers())
        return result

    return dependency
