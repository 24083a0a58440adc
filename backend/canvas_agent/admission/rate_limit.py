"""Per-identity fixed-window rate limiter (in-memory, single process)."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass
class RateLimitWindow:
    count: int
    reset_at: float


class RateLimiter:
    """``limit`` requests per ``window_s`` seconds for each identity.

    The first request in a window opens it (count=1, reset_at=now+window). A
    request at or after ``reset_at`` opens a fresh window instead of being denied.
    """

    def __init__(
        self,
        limit: int,
        window_s: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window_s = window_s
        self._clock = clock
        self._windows: dict[str, RateLimitWindow] = {}
        self._lock = threading.Lock()

    def try_admit(self, identity: str) -> bool:
        with self._lock:
            now = self._clock()
            window = self._windows.get(identity)
            if window is None or now >= window.reset_at:
                self._windows[identity] = RateLimitWindow(count=1, reset_at=now + self.window_s)
                return True
            if window.count >= self.limit:
                logger.info("Rate limit exceeded for %s: %d/%d", identity, window.count, self.limit)
                return False
            window.count += 1
            return True

    def remaining(self, identity: str) -> int:
        with self._lock:
            window = self._windows.get(identity)
            if window is None or self._clock() >= window.reset_at:
                return self.limit
            return max(0, self.limit - window.count)

    def retry_after(self, identity: str) -> float:
        """Seconds until the identity's current window resets (0 if none is open)."""
        with self._lock:
            window = self._windows.get(identity)
            if window is None:
                return 0.0
            return max(0.0, window.reset_at - self._clock())

    def window(self, identity: str) -> RateLimitWindow | None:
        with self._lock:
            window = self._windows.get(identity)
            return RateLimitWindow(window.count, window.reset_at) if window else None

    def sweep(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [k for k, w in self._windows.items() if now >= w.reset_at]
            for k in expired:
                del self._windows[k]
        return len(expired)

    def __len__(self) -> int:
        return len(self._windows)
