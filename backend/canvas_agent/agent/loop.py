"""Bounded reasoning loop: drives the engine through propose/execute cycles.

States:
    IDLE → RUNNING → COMPLETED   engine answered without tool calls
                   → CAPPED      iteration cap reached
                   → CANCELLED   cancel event set / deadline passed (checked between cycles)
                   → FAILED      engine raised

Operations appended to the call log before a failure stay in the log; the
assembler decides whether a failed run is still a usable partial result.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage, ToolMessage

from canvas_agent.engine.call_log import CallLog
from canvas_agent.engine.registry import ToolRegistry
from canvas_agent.errors import ToolError
from canvas_agent.llm.prompts import build_system_prompt
from canvas_agent.models.requests import CanvasSummary
from canvas_agent.models.tools import Operation

logger = logging.getLogger(__name__)


class LoopState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CAPPED = "capped"
    CANCELLED = "cancelled"
    FAILED = "failed"


_TERMINAL = {LoopState.COMPLETED, LoopState.CAPPED, LoopState.CANCELLED, LoopState.FAILED}


@dataclass
class LoopRun:
    """Terminal snapshot of one loop execution."""

    state: LoopState
    log: CallLog
    iterations: int = 0
    message: str = ""
    error: BaseException | None = None

    @property
    def operations(self) -> list[Operation]:
        return self.log.snapshot()


def _response_text(response: Any) -> str:
    """Flatten a chat response's content (str or Anthropic content blocks) to text."""
    content = getattr(response, "content", "")
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class ReasoningLoop:
    """One command's worth of reasoning. Not reusable: ``run`` may be called once."""

    def __init__(
        self,
        engine: Any,
        registry: ToolRegistry,
        *,
        max_iterations: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        self._engine = engine
        self._registry = registry
        self._max_iterations = max_iterations
        self._clock = clock
        self.state = LoopState.IDLE
        self.log = CallLog()
        self.iterations = 0

    def _transition(self, new_state: LoopState) -> None:
        if self.state in _TERMINAL:
            raise RuntimeError(f"Loop already finished ({self.state.value})")
        logger.debug("Loop %s → %s", self.state.value, new_state.value)
        self.state = new_state

    def _stop_requested(self, cancel: asyncio.Event | None, deadline: float | None) -> bool:
        if cancel is not None and cancel.is_set():
            return True
        return deadline is not None and self._clock() >= deadline

    def _execute(self, call: dict[str, Any], canvas: CanvasSummary) -> ToolMessage:
        name = call.get("name", "")
        call_id = call.get("id") or name
        try:
            ack = self._registry.invoke(name, call.get("args"), self.log, canvas)
        except ToolError as e:
            logger.info("Tool call %s rejected: %s", name, e)
            return ToolMessage(content=f"Error: {e}", tool_call_id=call_id, status="error")
        return ToolMessage(content=ack, tool_call_id=call_id)

    async def run(
        self,
        command: str,
        canvas: CanvasSummary,
        *,
        cancel: asyncio.Event | None = None,
        deadline: float | None = None,
    ) -> LoopRun:
        if self.state is not LoopState.IDLE:
            raise RuntimeError("ReasoningLoop.run may only be called once")
        self._transition(LoopState.RUNNING)

        messages: list[BaseMessage] = [
            SystemMessage(content=build_system_prompt(canvas)),
            HumanMessage(content=command),
        ]
        message = ""
        error: BaseException | None = None

        while True:
            if self._stop_requested(cancel, deadline):
                logger.info("Loop cancelled after %d cycles", self.iterations)
                self._transition(LoopState.CANCELLED)
                break
            if self.iterations >= self._max_iterations:
                logger.info("Loop hit iteration cap (%d)", self._max_iterations)
                self._transition(LoopState.CAPPED)
                break

            try:
                response = await self._engine.ainvoke(messages)
            except Exception as e:
                logger.warning("Reasoning engine failed on cycle %d: %s", self.iterations + 1, e)
                error = e
                self._transition(LoopState.FAILED)
                break

            self.iterations += 1
            messages.append(response)
            tool_calls = getattr(response, "tool_calls", None) or []
            if not tool_calls:
                message = _response_text(response)
                self._transition(LoopState.COMPLETED)
                break

            for call in tool_calls:
                messages.append(self._execute(call, canvas))

        logger.debug("Loop transcript: %d messages", len(messages))
        logger.info(
            "Loop finished: %s after %d cycles, %d operations",
            self.state.value, self.iterations, len(self.log),
        )
        return LoopRun(
            state=self.state,
            log=self.log,
            iterations=self.iterations,
            message=message,
            error=error,
        )
