"""Request-id → result cache with a fixed TTL (in-memory, single process)."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from canvas_agent.models.responses import CommandResult

logger = logging.getLogger(__name__)


@dataclass
class IdempotencyEntry:
    result: CommandResult
    expires_at: float


class IdempotencyStore:
    def __init__(self, ttl_s: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_s = ttl_s
        self._clock = clock
        self._entries: dict[str, IdempotencyEntry] = {}
        self._lock = threading.Lock()

    def get(self, request_id: str) -> CommandResult | None:
        """Stored result for ``request_id``, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(request_id)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[request_id]
                return None
            logger.info("Idempotency: returning cached result for requestId %s", request_id)
            return entry.result

    def put(self, request_id: str, result: CommandResult) -> None:
        with self._lock:
            self._entries[request_id] = IdempotencyEntry(
                result=result,
                expires_at=self._clock() + self.ttl_s,
            )
        logger.info("Idempotency: cached result for requestId %s", request_id)

    def sweep(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if now >= e.expires_at]
            for k in expired:
                del self._entries[k]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)
