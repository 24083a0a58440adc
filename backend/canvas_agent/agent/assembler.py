"""Response assembler: loop terminal state + call log → CommandResult."""

from __future__ import annotations

import logging
import time

from canvas_agent.admission.idempotency import IdempotencyStore
from canvas_agent.agent.loop import LoopRun, LoopState
from canvas_agent.errors import ReasoningEngineFailure
from canvas_agent.models.responses import CommandResult

logger = logging.getLogger(__name__)


def _message_for(run: LoopRun, count: int) -> str:
    if run.state is LoopState.FAILED:
        return f"Partial completion: {count} operations queued"
    if run.message:
        return run.message
    if run.state is LoopState.CAPPED:
        return f"Stopped after {run.iterations} reasoning steps: {count} operations queued"
    if run.state is LoopState.CANCELLED:
        return f"Cancelled after {run.iterations} reasoning steps: {count} operations queued"
    return f"{count} operations queued"


class ResponseAssembler:
    def __init__(self, store: IdempotencyStore, batch_size: int) -> None:
        self._store = store
        self._batch_size = batch_size

    def build(self, run: LoopRun, latency_ms: float) -> CommandResult:
        """Package a terminal run. A failed run with no operations raises instead."""
        operations = run.operations
        if run.state is LoopState.FAILED and not operations:
            raise ReasoningEngineFailure(f"AI agent failed: {run.error}") from run.error

        has_more = run.state is not LoopState.FAILED and len(operations) >= self._batch_size
        return CommandResult(
            operations=operations,
            total_operations=len(operations),
            batch_number=1,
            has_more=has_more,
            message=_message_for(run, len(operations)),
            cached=False,
            latency_ms=round(latency_ms, 1),
            timestamp=time.time() * 1000,
        )

    def assemble(self, request_id: str, run: LoopRun, latency_ms: float) -> CommandResult:
        """Build the result and cache it under ``request_id`` before returning it."""
        result = self.build(run, latency_ms)
        self._store.put(request_id, result)
        logger.info(
            "Assembled %d operations for %s (state=%s, has_more=%s)",
            result.total_operations, request_id, run.state.value, result.has_more,
        )
        return result
