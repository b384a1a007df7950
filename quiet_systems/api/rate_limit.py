"""Per-client fixed-window request limiter for the admin surface."""

from __future__ import annotations

import threading
import time
from typing import Callable


class AdminRateLimitExceededError(RuntimeError):
    """Raised when one client exceeds the admin request cap for the current window."""


class ClientRateLimiter:
    """Fixed-window counter keyed by client address.

    Each client gets `max_requests` per window; the window starts with the
    client's first request and resets once `window_seconds` have elapsed.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] | None = None,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock or time.monotonic
        self._lock = threading.Lock()
        self._windows: dict[str, tuple[float, int]] = {}

    def limiter_try_acquire(self, client_key: str) -> bool:
        """Count one request for the client. Returns True while under the cap."""

        now = self._clock()
        with self._lock:
            self._limiter_prune_expired(now)
            window_started_at, request_count = self._windows.get(client_key, (now, 0))
            if request_count >= self.max_requests:
                return False
            self._windows[client_key] = (window_started_at, request_count + 1)
            return True

    def _limiter_prune_expired(self, now: float) -> None:
        expired_keys = [
            client_key
            for client_key, (window_started_at, _) in self._windows.items()
            if now - window_started_at >= self.window_seconds
        ]
        for client_key in expired_keys:
            del self._windows[client_key]
