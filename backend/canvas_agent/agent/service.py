"""Command service: the outer handler tying admission, loop and assembly together."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable

from canvas_agent.admission.controller import AdmissionController
from canvas_agent.agent.assembler import ResponseAssembler
from canvas_agent.agent.loop import ReasoningLoop
from canvas_agent.config import Settings
from canvas_agent.engine.registry import ToolRegistry
from canvas_agent.errors import CanvasAgentError, InvalidRequest, UnexpectedFailure
from canvas_agent.models.requests import CommandRequest
from canvas_agent.models.responses import CommandResult

logger = logging.getLogger(__name__)

EngineFactory = Callable[[list[dict[str, Any]]], Any]

_MAX_COMMAND_CHARS = 4000


class CommandService:
    def __init__(
        self,
        admission: AdmissionController,
        registry: ToolRegistry,
        engine_factory: EngineFactory,
        settings: Settings,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.admission = admission
        self.registry = registry
        self._engine_factory = engine_factory
        self._settings = settings
        self._clock = clock
        self._assembler = ResponseAssembler(admission.idempotency, batch_size=settings.batch_size)

    @staticmethod
    def _validate(req: CommandRequest) -> None:
        if not req.command.strip():
            raise InvalidRequest("Missing or invalid field: command (non-empty string required)")
        if len(req.command) > _MAX_COMMAND_CHARS:
            raise InvalidRequest(f"Command too long (max {_MAX_COMMAND_CHARS} characters)")
        if not req.request_id.strip():
            raise InvalidRequest("Missing or invalid field: requestId (non-empty string required)")

    async def handle(
        self,
        req: CommandRequest,
        identity: str,
        cancel: asyncio.Event | None = None,
    ) -> CommandResult:
        """Run one command. Setting ``cancel`` stops the loop at its next cycle boundary."""
        try:
            return await self._handle(req, identity, cancel)
        except CanvasAgentError:
            raise
        except Exception as e:
            logger.exception("Unexpected error handling %s", req.request_id)
            raise UnexpectedFailure("An unexpected error occurred") from e

    async def _handle(self, req: CommandRequest, identity: str, cancel: asyncio.Event | None) -> CommandResult:
        self._validate(req)
        logger.info(
            "Command from %s (requestId=%s, shapes=%d, selection=%d): %s",
            identity, req.request_id, req.canvas_summary.shape_count,
            req.canvas_summary.selection_count, req.command[:100],
        )

        cached = self.admission.lookup(req.request_id)
        if cached is not None:
            return cached

        # An unconfigured engine must not cost the caller quota.
        engine = self._engine_factory(self.registry.definitions())
        self.admission.admit(identity)

        loop = ReasoningLoop(
            engine,
            self.registry,
            max_iterations=req.max_iterations or self._settings.max_iterations,
            clock=self._clock,
        )
        start = time.perf_counter()
        run = await loop.run(
            req.command,
            req.canvas_summary,
            cancel=cancel,
            deadline=self._clock() + self._settings.command_timeout_s,
        )
        latency_ms = (time.perf_counter() - start) * 1000

        result = self._assembler.assemble(req.request_id, run, latency_ms)
        logger.info(
            "Request %s done: %d operations in %.0fms, %d requests left for %s",
            req.request_id, result.total_operations, latency_ms,
            self.admission.remaining(identity), identity,
        )
        return result
