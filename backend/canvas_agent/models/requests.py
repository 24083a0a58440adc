"""API request models."""

from __future__ import annotations

from pydantic import Field, model_validator

from canvas_agent.models.geometry import CamelModel


class CanvasShape(CamelModel):
    """A shape already on the canvas, as reported by the client for queryShapes."""

    id: str
    type: str
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    fill: str | None = None


class CanvasSummary(CamelModel):
    shape_count: int = Field(default=0, ge=0)
    selection_count: int = Field(default=0, ge=0)
    shapes: list[CanvasShape] = Field(default_factory=list)
    selection: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _derive_counts(self) -> "CanvasSummary":
        if self.shapes and not self.shape_count:
            self.shape_count = len(self.shapes)
        if self.selection and not self.selection_count:
            self.selection_count = len(self.selection)
        return self


class CommandRequest(CamelModel):
    command: str = Field(..., description="Natural-language canvas command")
    canvas_summary: CanvasSummary = Field(default_factory=CanvasSummary)
    request_id: str = Field(..., description="Client-generated id used for idempotency")
    max_iterations: int | None = Field(default=None, ge=1, le=200)
