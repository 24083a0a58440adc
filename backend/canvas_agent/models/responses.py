"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from canvas_agent.models.geometry import CamelModel
from canvas_agent.models.tools import Operation


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    tools_registered: int = 0


class CommandResult(CamelModel):
    operations: list[Operation] = Field(default_factory=list)
    total_operations: int = 0
    batch_number: int = 1
    has_more: bool = False
    message: str = ""
    cached: bool = False
    latency_ms: float = 0.0
    timestamp: float = 0.0


class ErrorResponse(BaseModel):
    error: str
    message: str
    remaining: int | None = None
