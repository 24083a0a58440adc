"""Admission controller: idempotency gate, then rate gate.

Owns all process-wide mutable admission state. The cache is consulted before
rate accounting so that retries of an already-answered request never spend quota.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from canvas_agent.admission.idempotency import IdempotencyStore
from canvas_agent.admission.rate_limit import RateLimiter
from canvas_agent.config import Settings
from canvas_agent.errors import AdmissionDenied
from canvas_agent.models.responses import CommandResult

logger = logging.getLogger(__name__)


class AdmissionController:
    def __init__(
        self,
        rate_limit: int,
        window_s: float,
        ttl_s: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.rate_limiter = RateLimiter(rate_limit, window_s, clock=clock)
        self.idempotency = IdempotencyStore(ttl_s, clock=clock)

    @classmethod
    def from_settings(cls, settings: Settings, clock: Callable[[], float] = time.monotonic) -> AdmissionController:
        return cls(
            rate_limit=settings.rate_limit_requests,
            window_s=settings.rate_limit_window_s,
            ttl_s=settings.idempotency_ttl_s,
            clock=clock,
        )

    def lookup(self, request_id: str) -> CommandResult | None:
        """Gate 1: a previously computed result, marked as a cache hit."""
        result = self.idempotency.get(request_id)
        if result is None:
            return None
        return result.model_copy(update={"cached": True})

    def try_admit(self, identity: str) -> bool:
        """Gate 2: consume one unit of the identity's quota if available."""
        return self.rate_limiter.try_admit(identity)

    def admit(self, identity: str) -> None:
        """Like ``try_admit`` but raises AdmissionDenied with quota details."""
        if not self.rate_limiter.try_admit(identity):
            raise AdmissionDenied(
                identity,
                remaining=self.rate_limiter.remaining(identity),
                retry_after=self.rate_limiter.retry_after(identity),
            )

    def remember(self, request_id: str, result: CommandResult) -> None:
        self.idempotency.put(request_id, result)

    def remaining(self, identity: str) -> int:
        return self.rate_limiter.remaining(identity)

    def sweep(self) -> tuple[int, int]:
        """Drop expired windows and cache entries. Returns (windows, entries) removed."""
        removed = (self.rate_limiter.sweep(), self.idempotency.sweep())
        if any(removed):
            logger.debug("Swept %d rate windows, %d cached results", *removed)
        return removed

    async def run_sweeper(self, interval_s: float) -> None:
        """Sweep every ``interval_s`` seconds until cancelled."""
        while True:
            await asyncio.sleep(interval_s)
            self.sweep()
