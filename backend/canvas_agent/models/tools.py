"""Argument schemas for the primitive tools exposed to the reasoning engine."""

from __future__ import annotations

import enum
from typing import Any, Literal

from pydantic import ConfigDict, Field

from canvas_agent.models.geometry import CamelModel, ShapeKind


class OperationName(str, enum.Enum):
    CREATE_SHAPE = "createShape"
    CREATE_TEXT = "createText"
    MOVE_SHAPE = "moveShape"
    RESIZE_SHAPE = "resizeShape"
    ROTATE_SHAPE = "rotateShape"
    UPDATE_SHAPE = "updateShape"
    DELETE_SHAPE = "deleteShape"
    ALIGN = "align"
    DISTRIBUTE = "distribute"
    QUERY_SHAPES = "queryShapes"
    BULK_CREATE_PATTERN = "bulkCreatePattern"
    CREATE_COMPOSITE_LAYOUT = "createCompositeLayout"


class Operation(CamelModel):
    """One renderer-bound instruction. Immutable once emitted."""

    model_config = ConfigDict(frozen=True)

    name: OperationName
    arguments: dict[str, Any] = Field(default_factory=dict)


class CreateShapeArgs(CamelModel):
    type: ShapeKind
    x: float = Field(..., description="X position (top-left corner)")
    y: float = Field(..., description="Y position (top-left corner)")
    width: float = Field(..., gt=0, description="Width in pixels")
    height: float = Field(..., gt=0, description="Height in pixels")
    fill: str = Field(default="#3B82F6", description="Fill color (hex)")
    stroke: str | None = Field(default=None, description="Stroke color (hex)")


class CreateTextArgs(CamelModel):
    text: str = Field(..., min_length=1)
    x: float
    y: float
    font_size: float = Field(default=16.0, gt=0, description="Font size in pixels")
    fill: str = Field(default="#000000", description="Text color (hex)")
    font_family: str = "Arial"
    bold: bool = False
    italic: bool = False


class MoveShapeArgs(CamelModel):
    id: str = Field(..., description="Shape ID to move")
    x: float
    y: float


class ResizeShapeArgs(CamelModel):
    id: str = Field(..., description="Shape ID to resize")
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


class RotateShapeArgs(CamelModel):
    id: str = Field(..., description="Shape ID to rotate")
    degrees: float = Field(..., description="Rotation angle in degrees")


class UpdateShapeArgs(CamelModel):
    id: str = Field(..., description="Shape ID to update")
    fill: str | None = None
    stroke: str | None = None
    opacity: float | None = Field(default=None, ge=0, le=1)
    blend_mode: str | None = None


class DeleteShapeArgs(CamelModel):
    id: str = Field(..., description="Shape ID to delete")


class AlignArgs(CamelModel):
    ids: list[str] = Field(..., min_length=1, description="Shape IDs to align")
    mode: Literal["left", "right", "top", "bottom", "center-h", "center-v"]


class DistributeArgs(CamelModel):
    ids: list[str] = Field(..., min_length=2, description="Shape IDs to distribute (minimum 2)")
    axis: Literal["horizontal", "vertical"]


class ShapeFilter(CamelModel):
    type: Literal["rectangle", "circle", "triangle", "star", "text"] | None = None
    fill: str | None = Field(default=None, description="Hex code or color keyword, e.g. 'blue'")


class QueryShapesArgs(CamelModel):
    filter: ShapeFilter | None = None
