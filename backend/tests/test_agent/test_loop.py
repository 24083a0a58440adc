"""Tests for the bounded reasoning loop (scripted engine, no LLM calls)."""

from __future__ import annotations

import asyncio

import pytest
from langchain_core.language_models.fake_chat_models import FakeMessagesListChatModel
from langchain_core.messages import AIMessage, SystemMessage, ToolMessage

from canvas_agent.agent.loop import LoopState, ReasoningLoop
from canvas_agent.models.requests import CanvasSummary
from tests.conftest import FakeClock, ScriptedEngine, finish, propose, tool_call

RECT = {"type": "rectangle", "x": 0, "y": 0, "width": 10, "height": 10}


def _run(loop: ReasoningLoop, command: str = "do it", canvas: CanvasSummary | None = None, **kwargs):
    return asyncio.run(loop.run(command, canvas or CanvasSummary(), **kwargs))


def test_completed_with_final_message(registry):
    engine = ScriptedEngine([
        propose(tool_call("createShape", RECT, "c1"), tool_call("createText", {"text": "Hi", "x": 1, "y": 2}, "c2")),
        finish("Created a rectangle and a label."),
    ])
    loop = ReasoningLoop(engine, registry, max_iterations=5)
    run = _run(loop)

    assert run.state is LoopState.COMPLETED
    assert run.iterations == 2
    assert run.message == "Created a rectangle and a label."
    assert [op.name.value for op in run.operations] == ["createShape", "createText"]


def test_tool_results_fed_back_in_order(registry):
    engine = ScriptedEngine([propose(tool_call("moveShape", {"id": "a", "x": 1, "y": 1}, "m1")), finish()])
    _run(ReasoningLoop(engine, registry, max_iterations=5))

    second_prompt = engine.calls[1]
    assert isinstance(second_prompt[0], SystemMessage)
    assert isinstance(second_prompt[-1], ToolMessage)
    assert second_prompt[-1].tool_call_id == "m1"
    assert "Shape move queued: a" in second_prompt[-1].content


def test_system_prompt_carries_canvas_counts(registry):
    engine = ScriptedEngine([finish()])
    _run(ReasoningLoop(engine, registry, max_iterations=1), canvas=CanvasSummary(shape_count=7, selection_count=2))
    system = engine.calls[0][0].content
    assert "Total shapes: 7" in system
    assert "Selected shapes: 2" in system
    assert "bulkCreatePattern" in system


def test_capped_at_iteration_limit(registry):
    engine = ScriptedEngine([], repeat=propose(tool_call("createShape", RECT)))
    run = _run(ReasoningLoop(engine, registry, max_iterations=3))

    assert run.state is LoopState.CAPPED
    assert run.iterations == 3
    assert len(run.operations) == 3
    assert len(engine.calls) == 3


def test_failure_keeps_collected_operations(registry):
    engine = ScriptedEngine([
        propose(tool_call("createShape", RECT, "1"), tool_call("createShape", RECT, "2")),
        propose(tool_call("createShape", RECT, "3")),
        RuntimeError("upstream 500"),
    ])
    run = _run(ReasoningLoop(engine, registry, max_iterations=10))

    assert run.state is LoopState.FAILED
    assert isinstance(run.error, RuntimeError)
    assert len(run.operations) == 3


def test_invalid_tool_call_fed_back_not_logged(registry):
    engine = ScriptedEngine([
        propose(tool_call("resizeShape", {"id": "x", "width": -5, "height": 10}, "bad"), tool_call("nope", {}, "unknown")),
        finish(),
    ])
    run = _run(ReasoningLoop(engine, registry, max_iterations=5))

    assert run.state is LoopState.COMPLETED
    assert len(run.operations) == 0
    feedback = [m for m in engine.calls[1] if isinstance(m, ToolMessage)]
    assert all(m.status == "error" for m in feedback)
    assert "Unknown tool" in feedback[1].content


def test_cancel_event_checked_between_cycles(registry):
    cancel = asyncio.Event()

    class CancellingEngine(ScriptedEngine):
        async def ainvoke(self, messages):
            response = await super().ainvoke(messages)
            cancel.set()
            return response

    engine = CancellingEngine([], repeat=propose(tool_call("createShape", RECT)))
    run = _run(ReasoningLoop(engine, registry, max_iterations=10), cancel=cancel)

    assert run.state is LoopState.CANCELLED
    assert run.iterations == 1
    assert len(run.operations) == 1


def test_deadline_uses_injected_clock(registry):
    clock = FakeClock(start=0.0)

    class SlowEngine(ScriptedEngine):
        async def ainvoke(self, messages):
            clock.advance(30)
            return await super().ainvoke(messages)

    engine = SlowEngine([], repeat=propose(tool_call("createShape", RECT)))
    run = _run(ReasoningLoop(engine, registry, max_iterations=10, clock=clock), deadline=60.0)

    assert run.state is LoopState.CANCELLED
    assert run.iterations == 2
    assert len(run.operations) == 2


def test_run_only_once(registry):
    loop = ReasoningLoop(ScriptedEngine([finish()]), registry, max_iterations=1)
    _run(loop)
    with pytest.raises(RuntimeError):
        _run(loop)


def test_rejects_non_positive_cap(registry):
    with pytest.raises(ValueError):
        ReasoningLoop(ScriptedEngine([]), registry, max_iterations=0)


def test_langchain_fake_chat_model_as_engine(registry):
    engine = FakeMessagesListChatModel(responses=[
        AIMessage(content="", tool_calls=[tool_call("bulkCreatePattern", {"pattern": "circle", "count": 12})]),
        AIMessage(content=[{"type": "text", "text": "Made a ring of 12 shapes."}]),
    ])
    run = _run(ReasoningLoop(engine, registry, max_iterations=5))

    assert run.state is LoopState.COMPLETED
    assert run.message == "Made a ring of 12 shapes."
    assert run.operations[0].arguments["count"] == 12
