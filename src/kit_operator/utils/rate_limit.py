"""Rate limiting utilities for API calls."""

from __future__ import annotations

import os
import threading
import time
from functools import wraps
from typing import Any, Callable, TypeVar

_F = TypeVar("_F", bound=Callable[..., Any])


class RateLimiter:
    """Enforce a minimum interval between calls across threads."""

    def __init__(self, calls_per_second: float):
        self.min_interval = 1.0 / calls_per_second if calls_per_second > 0 else 0.0
        self._lock = threading.Lock()
        self._next_slot = 0.0

    def acquire(self) -> None:
        """Block until the caller may issue its call."""
        with self._lock:
            now = time.monotonic()
            slot = max(now, self._next_slot)
            self._next_slot = slot + self.min_interval
        wait = slot - now
        if wait > 0:
            time.sleep(wait)

    def __call__(self, func: _F) -> _F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            self.acquire()
            return func(*args, **kwargs)

        return wrapper  # type: ignore


_k8s_limiter = RateLimiter(float(os.getenv("K8S_RATE_LIMIT_PER_SECOND", "10.0")))
_aws_limiter = RateLimiter(float(os.getenv("AWS_RATE_LIMIT_PER_SECOND", "5.0")))


def rate_limit_k8s(func: _F) -> _F:
    """Decorator to rate limit Kubernetes API calls."""
    return _k8s_limiter(func)


def rate_limit_aws(func: _F) -> _F:
    """Decorator to rate limit AWS API calls."""
    return _aws_limiter(func)
