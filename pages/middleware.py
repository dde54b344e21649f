import logging
import math
import time
from dataclasses import dataclass

from django.conf import settings
from django.core.cache import caches
from django.http import JsonResponse

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "กรุณารอสักครู่ก่อนลองใหม่ (Rate limit exceeded)"


@dataclass
class WindowState:
    count: int
    limit: int
    reset_at: float

    @property
    def allowed(self) -> bool:
        return self.count <= self.limit

    def remaining(self) -> int:
        return max(0, self.limit - self.count)

    def seconds_left(self, now: float) -> int:
        return max(0, math.ceil(self.reset_at - now))


class FixedWindowCounter:
    """Fixed-window counters kept in the Django cache.

    Each window is a pair of cache entries (hit count and reset timestamp)
    that expire with the window, so the cache backend does the cleanup and
    a shared backend shares the limit between processes. The limit is part
    of the key: changing it starts a fresh window.
    """

    def __init__(self, window_seconds: float, cache_alias: str = "default", key_prefix: str = "ratelimit"):
        self.window = window_seconds
        self.cache = caches[cache_alias]
        self.key_prefix = key_prefix

    def cache_key(self, key: str, limit: int) -> str:
        return f"{self.key_prefix}:{key}:{limit}"

    def hit(self, key: str, limit: int, now: float) -> WindowState:
        count_key = self.cache_key(key, limit)
        reset_key = f"{count_key}:reset"

        self.cache.add(reset_key, now + self.window, timeout=self.window)
        if self.cache.add(count_key, 1, timeout=self.window):
            count = 1
        else:
            try:
                count = self.cache.incr(count_key)
            except ValueError:
                # Expired between add() and incr()
                self.cache.set(count_key, 1, timeout=self.window)
                self.cache.set(reset_key, now + self.window, timeout=self.window)
                count = 1
        reset_at = self.cache.get(reset_key, now + self.window)
        return WindowState(min(count, limit + 1), limit, reset_at)


def client_ip(request) -> str:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.META.get("HTTP_X_REAL_IP") or request.META.get("REMOTE_ADDR") or "unknown"


class RateLimitMiddleware:
    """Global per-IP limiter answering 429 before any view runs."""

    def __init__(self, get_response):
        self.get_response = get_response
        self.enabled = getattr(settings, "RATE_LIMIT_ENABLED", True)
        self.limit_anon = getattr(settings, "RATE_LIMIT_MAX_REQUESTS_ANON", 2000)
        self.limit_auth = getattr(settings, "RATE_LIMIT_MAX_REQUESTS_AUTH", 4000)
        self.counter = FixedWindowCounter(
            getattr(settings, "RATE_LIMIT_WINDOW_MS", 60000) / 1000.0,
            cache_alias=getattr(settings, "RATE_LIMIT_CACHE_ALIAS", "default"),
        )

    def __call__(self, request):
        if not self.enabled:
            return self.get_response(request)

        authed = bool(request.META.get("HTTP_AUTHORIZATION"))
        limit = self.limit_auth if authed else self.limit_anon
        if limit <= 0:
            return self.get_response(request)

        ip = client_ip(request)
        key = f"{ip}:{'auth' if authed else 'anon'}"
        now = time.time()
        state = self.counter.hit(key, limit, now)

        if not state.allowed:
            retry_after = state.seconds_left(now)
            logger.info("Rate limit exceeded for %s (limit %d)", key, limit)
            response = JsonResponse(
                {
                    "success": False,
                    "error": "Too Many Requests",
                    "message": RATE_LIMIT_MESSAGE,
                    "retryAfter": retry_after,
                },
                status=429,
                json_dumps_params={"ensure_ascii": False},
            )
            response["Retry-After"] = str(retry_after)
            return response

        response = self.get_response(request)
        response["X-RateLimit-Limit"] = str(state.limit)
        response["X-RateLimit-Remaining"] = str(state.remaining())
        response["X-RateLimit-Reset"] = str(state.seconds_left(now))
        return response
