"""Health check + tool catalogue endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from canvas_agent.agent.service import CommandService
from canvas_agent.dependencies import get_command_service
from canvas_agent.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(service: CommandService = Depends(get_command_service)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        tools_registered=service.registry.count,
    )


@router.get("/tools")
async def tools(service: CommandService = Depends(get_command_service)) -> list[dict[str, Any]]:
    return service.registry.definitions()
