"""FastAPI dependency injection."""

from __future__ import annotations

from fastapi import Header, Request

from canvas_agent.agent.service import CommandService
from canvas_agent.errors import MissingIdentity


def get_command_service(request: Request) -> CommandService:
    return request.app.state.command_service


def get_identity(
    x_verified_identity: str | None = Header(default=None, alias="X-Verified-Identity"),
) -> str:
    """Identity string set by the authentication layer in front of this service."""
    if not x_verified_identity or not x_verified_identity.strip():
        raise MissingIdentity("Missing verified identity")
    return x_verified_identity.strip()
