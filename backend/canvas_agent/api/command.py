"""POST /api/command: natural-language canvas command → ordered operation batch."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from fastapi import APIRouter, Depends, Request

from canvas_agent.agent.service import CommandService
from canvas_agent.dependencies import get_command_service, get_identity
from canvas_agent.models.requests import CommandRequest
from canvas_agent.models.responses import CommandResult

logger = logging.getLogger(__name__)

router = APIRouter()

# Seconds between client-disconnect checks while a command runs
DISCONNECT_POLL_S = 0.5


async def watch_disconnect(request: Request, cancel: asyncio.Event, interval_s: float = DISCONNECT_POLL_S) -> None:
    """Set ``cancel`` once the client has gone away."""
    while not cancel.is_set():
        if await request.is_disconnected():
            logger.info("Client disconnected from %s, cancelling command", request.url.path)
            cancel.set()
            return
        await asyncio.sleep(interval_s)


@router.post("/command", response_model=CommandResult)
async def command(
    req: CommandRequest,
    request: Request,
    identity: str = Depends(get_identity),
    service: CommandService = Depends(get_command_service),
) -> CommandResult:
    cancel = asyncio.Event()
    watcher = asyncio.create_task(watch_disconnect(request, cancel))
    try:
        return await service.handle(req, identity, cancel=cancel)
    finally:
        watcher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher
