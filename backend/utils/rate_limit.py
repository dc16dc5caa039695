# backend/utils/rate_limit.py
import logging
import threading
import time
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque, Dict

from fastapi import Request

from config import settings
from utils.errors import RateLimited

logger = logging.getLogger(__name__)


class RateLimiter(ABC):
    """Decides whether one more request for ``key`` fits in the budget."""

    @abstractmethod
    def allow(self, key: str) -> bool:
        """Record a hit for ``key`` and return False once it is over budget."""

    @abstractmethod
    def reset(self) -> None:
        """Forget every key."""


class SlidingWindowRateLimiter(RateLimiter):
    """In-process sliding window: at most ``max_requests`` per ``window_seconds``.

    State lives in process memory only, so it resets on restart and is not
    shared between workers. Multi-instance deployments need a shared counter
    implementing the same ``allow`` method. Keys with no hit inside the window
    are swept at most once per window.
    """

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def tracked_keys(self) -> int:
        return len(self._hits)

    def _sweep(self, window_start: float) -> None:
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for key in stale:
            del self._hits[key]

    def allow(self, key: str) -> bool:
        now = self._clock()
        window_start = now - self.window_seconds
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(window_start)
                self._last_sweep = now

            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= window_start:
                hits.popleft()
            if len(hits) >= self.max_requests:
                return False
            hits.append(now)
            return True

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._last_sweep = self._clock()


login_limiter = SlidingWindowRateLimiter(
    max_requests=settings.LOGIN_RATE_LIMIT,
    window_seconds=settings.LOGIN_RATE_WINDOW_SECONDS,
)


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


# Dependency factory guarding a route with a limiter keyed by client IP
def rate_limited(limiter: RateLimiter, message: str = None):
    def _checker(request: Request):
        key = client_ip(request)
        if not limiter.allow(key):
            logger.warning("Rate limit exceeded for %s on %s", key, request.url.path)
            raise RateLimited(message)
    return _checker
