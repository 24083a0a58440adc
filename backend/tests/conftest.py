"""Shared test fixtures: a scripted reasoning engine and a controllable clock."""

from __future__ import annotations

from typing import Any

import pytest
from langchain_core.messages import AIMessage

import canvas_agent.engine.tools  # noqa: F401  (registers tools)
from canvas_agent.engine.registry import get_registry
from canvas_agent.models.requests import CanvasShape, CanvasSummary


def tool_call(name: str, args: dict[str, Any], call_id: str | None = None) -> dict[str, Any]:
    return {"name": name, "args": args, "id": call_id or f"call_{name}", "type": "tool_call"}


def propose(*calls: dict[str, Any]) -> AIMessage:
    return AIMessage(content="", tool_calls=list(calls))


def finish(text: str = "Done.") -> AIMessage:
    return AIMessage(content=text)


class ScriptedEngine:
    """Stands in for a tool-bound chat model. Each ainvoke pops the next scripted step.

    A step is either an AIMessage to return or an exception instance to raise.
    Once the script is exhausted every further call returns ``repeat``
    (or finishes if ``repeat`` is None).
    """

    def __init__(self, steps: list[Any], repeat: AIMessage | None = None) -> None:
        self.steps = list(steps)
        self.repeat = repeat
        self.calls: list[list[Any]] = []

    async def ainvoke(self, messages: list[Any]) -> AIMessage:
        self.calls.append(list(messages))
        if self.steps:
            step = self.steps.pop(0)
            if isinstance(step, BaseException):
                raise step
            return step
        return self.repeat if self.repeat is not None else finish()


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def registry():
    return get_registry()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def canvas() -> CanvasSummary:
    return CanvasSummary(
        shapes=[
            CanvasShape(id="shape-1", type="rectangle", x=10.4, y=20.6, width=100, height=80, fill="#3B82F6"),
            CanvasShape(id="shape-2", type="circle", x=200, y=200, width=60, height=60, fill="#EF4444"),
            CanvasShape(id="shape-3", type="rectangle", x=400, y=50, width=50, height=50, fill="#2563ebff"),
        ],
        selection=["shape-2"],
    )
