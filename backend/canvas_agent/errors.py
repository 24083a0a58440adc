"""Error taxonomy for the command pipeline."""

from __future__ import annotations


class CanvasAgentError(Exception):
    """Base class for errors the outer handler knows how to report."""


class InvalidRequest(CanvasAgentError):
    """Malformed command or request id; no reasoning is attempted."""


class MissingIdentity(CanvasAgentError):
    """No verified identity reached the service."""


class AdmissionDenied(CanvasAgentError):
    """The rate gate rejected the identity for the current window."""

    def __init__(self, identity: str, remaining: int, retry_after: float) -> None:
        super().__init__(f"Rate limit exceeded for {identity}")
        self.identity = identity
        self.remaining = remaining
        self.retry_after = retry_after


class ReasoningEngineFailure(CanvasAgentError):
    """The reasoning engine failed before producing any operation."""


class ReasoningEngineUnavailable(ReasoningEngineFailure):
    """No reasoning engine is configured (missing API key)."""


class ToolError(CanvasAgentError):
    """A proposed tool invocation could not be executed. Fed back to the engine."""


class UnknownToolError(ToolError):
    pass


class ToolValidationError(ToolError):
    """Tool arguments did not match the tool's schema."""


class UnexpectedFailure(CanvasAgentError):
    """Anything else. Reported generically; details stay in the server log."""
