"""Tests for API endpoints (scripted engine, no LLM calls)."""

from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from canvas_agent.api.command import watch_disconnect
from canvas_agent.config import Settings
from canvas_agent.main import create_app
from tests.conftest import FakeClock, ScriptedEngine, finish, propose, tool_call

HEADERS = {"X-Verified-Identity": "user-123"}
RECT = {"type": "rectangle", "x": 0, "y": 0, "width": 10, "height": 10}


class EngineFactory:
    """Hands out a fresh ScriptedEngine per request and counts invocations."""

    def __init__(self, *scripts: list) -> None:
        self.scripts = list(scripts)
        self.created = 0

    def __call__(self, tools):
        assert tools, "engine must be bound to the tool definitions"
        self.created += 1
        steps = self.scripts.pop(0) if self.scripts else [finish()]
        return ScriptedEngine(steps)


def _client(factory, clock=None, **overrides) -> TestClient:
    app_settings = Settings(anthropic_api_key="", **overrides)
    app = create_app(app_settings=app_settings, engine_factory=factory, clock=clock or FakeClock())
    return TestClient(app)


def _body(request_id: str = "req-1", command: str = "make a grid of 500 squares") -> dict:
    return {
        "command": command,
        "canvasSummary": {"shapeCount": 0, "selectionCount": 0},
        "requestId": request_id,
    }


def test_health():
    response = _client(EngineFactory()).get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["tools_registered"] == 12


def test_tools_catalogue():
    names = {t["name"] for t in _client(EngineFactory()).get("/api/tools").json()}
    assert {"createShape", "bulkCreatePattern", "createCompositeLayout", "queryShapes"} <= names


def test_command_returns_ordered_operations():
    factory = EngineFactory([
        propose(tool_call("bulkCreatePattern", {"pattern": "grid", "shape": "rectangle", "count": 500})),
        propose(tool_call("moveShape", {"id": "shape-9", "x": 10, "y": 20})),
        finish("Created 500 squares."),
    ])
    response = _client(factory).post("/api/command", json=_body(), headers=HEADERS)
    assert response.status_code == 200
    data = response.json()
    assert [op["name"] for op in data["operations"]] == ["bulkCreatePattern", "moveShape"]
    assert data["operations"][0]["arguments"]["count"] == 500
    assert len(data["operations"][0]["arguments"]["shapes"]) == 500
    assert data["totalOperations"] == 2
    assert data["batchNumber"] == 1
    assert data["hasMore"] is False
    assert data["message"] == "Created 500 squares."
    assert data["cached"] is False


def test_idempotent_retry_within_ttl():
    clock = FakeClock()
    factory = EngineFactory(
        [propose(tool_call("createShape", RECT)), finish("one")],
        [propose(tool_call("createShape", RECT), tool_call("createShape", RECT)), finish("two")],
    )
    client = _client(factory, clock=clock)

    first = client.post("/api/command", json=_body("same"), headers=HEADERS).json()
    second = client.post("/api/command", json=_body("same"), headers=HEADERS).json()
    assert second["cached"] is True
    assert second["operations"] == first["operations"]
    assert factory.created == 1

    clock.advance(301)
    third = client.post("/api/command", json=_body("same"), headers=HEADERS).json()
    assert third["cached"] is False
    assert third["totalOperations"] == 2
    assert factory.created == 2


def test_rate_limit_twenty_per_window():
    clock = FakeClock()
    client = _client(EngineFactory(), clock=clock)

    for i in range(20):
        assert client.post("/api/command", json=_body(f"r{i}"), headers=HEADERS).status_code == 200

    denied = client.post("/api/command", json=_body("r20"), headers=HEADERS)
    assert denied.status_code == 429
    assert denied.json()["remaining"] == 0
    assert "Retry-After" in denied.headers

    # cache hits never consume quota
    assert client.post("/api/command", json=_body("r0"), headers=HEADERS).json()["cached"] is True

    clock.advance(60)
    assert client.post("/api/command", json=_body("r21"), headers=HEADERS).status_code == 200


def test_partial_failure_is_success():
    factory = EngineFactory([
        propose(tool_call("createShape", RECT, "1"), tool_call("createShape", RECT, "2")),
        propose(tool_call("createText", {"text": "hi", "x": 0, "y": 0}, "3")),
        RuntimeError("engine crashed"),
    ])
    response = _client(factory).post("/api/command", json=_body(), headers=HEADERS)
    assert response.status_code == 200
    data = response.json()
    assert data["totalOperations"] == 3
    assert data["hasMore"] is False
    assert data["message"] == "Partial completion: 3 operations queued"


def test_failure_without_operations_is_surfaced():
    factory = EngineFactory([RuntimeError("engine crashed")])
    response = _client(factory).post("/api/command", json=_body(), headers=HEADERS)
    assert response.status_code == 502
    assert response.json()["error"] == "AI Command Failed"


def test_has_more_when_batch_size_reached():
    factory = EngineFactory([propose(*[tool_call("createShape", RECT, str(i)) for i in range(3)]), finish()])
    data = _client(factory, batch_size=3).post("/api/command", json=_body(), headers=HEADERS).json()
    assert data["hasMore"] is True


def test_missing_identity_is_unauthorized():
    response = _client(EngineFactory()).post("/api/command", json=_body())
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized", "message": "Missing verified identity"}


@pytest.mark.parametrize(
    "body",
    [
        {"canvasSummary": {}, "requestId": "r"},
        {"command": "draw", "canvasSummary": {}},
        {"command": "   ", "canvasSummary": {}, "requestId": "r"},
        {"command": "draw", "canvasSummary": {}, "requestId": ""},
    ],
)
def test_invalid_request(body):
    factory = EngineFactory()
    response = _client(factory).post("/api/command", json=body, headers=HEADERS)
    assert response.status_code == 400
    assert response.json()["error"] == "Bad Request"
    assert factory.created == 0


def test_engine_not_configured():
    response = _client(None).post("/api/command", json=_body(), headers=HEADERS)
    assert response.status_code == 503


def test_unexpected_error_is_generic():
    def broken_factory(tools):
        raise KeyError("secret internal detail")

    response = _client(broken_factory).post("/api/command", json=_body(), headers=HEADERS)
    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error", "message": "An unexpected error occurred"}


def test_engine_not_configured_costs_no_quota():
    client = _client(None, rate_limit_requests=1)
    assert client.post("/api/command", json=_body("a"), headers=HEADERS).status_code == 503
    assert client.post("/api/command", json=_body("b"), headers=HEADERS).status_code == 503


class _Request:
    """Minimal stand-in exposing the disconnect check the watcher polls."""

    def __init__(self, connected_polls: int) -> None:
        self.connected_polls = connected_polls
        self.polls = 0
        self.url = type("URL", (), {"path": "/api/command"})()

    async def is_disconnected(self) -> bool:
        self.polls += 1
        return self.polls > self.connected_polls


def test_watch_disconnect_sets_cancel():
    request = _Request(connected_polls=2)
    cancel = asyncio.Event()

    async def scenario():
        await asyncio.wait_for(watch_disconnect(request, cancel, interval_s=0), timeout=1)

    asyncio.run(scenario())
    assert cancel.is_set()
    assert request.polls == 3


def test_watch_disconnect_stops_when_already_cancelled():
    request = _Request(connected_polls=100)

    async def scenario():
        cancel = asyncio.Event()
        cancel.set()
        await watch_disconnect(request, cancel, interval_s=0)

    asyncio.run(scenario())
    assert request.polls == 0
