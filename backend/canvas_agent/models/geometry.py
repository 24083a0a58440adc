"""Geometry compiler inputs and outputs: pattern/layout specs and shape descriptors."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ShapeKind = Literal["rectangle", "circle", "triangle", "star"]
PatternKind = Literal["grid", "row", "column", "circle", "spiral"]
LayoutKind = Literal["login_form", "navbar", "card", "button_group", "form", "dashboard"]

MAX_BULK_COUNT = 1000


class CamelModel(BaseModel):
    """Base for wire models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Point(CamelModel):
    x: float = 100.0
    y: float = 100.0


class ShapeDescriptor(CamelModel):
    """A fully resolved, renderer-ready element. No identity until the renderer persists it."""

    model_config = ConfigDict(frozen=True)

    type: str
    x: float
    y: float
    width: float
    height: float
    fill: str | None = None
    stroke: str | None = None
    opacity: float | None = None
    blend_mode: str | None = None
    rotation: float | None = None
    text: str | None = None
    font_size: float | None = None

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class PatternStyle(CamelModel):
    width: float = Field(default=50.0, gt=0, description="Shape width in pixels")
    height: float = Field(default=50.0, gt=0, description="Shape height in pixels")
    fill: str = Field(default="#3B82F6", description="Fill color (hex)")
    stroke: str | None = Field(default=None, description="Stroke color (hex)")
    opacity: float = Field(default=1.0, ge=0, le=1)
    blend_mode: str = Field(default="source-over", description="Canvas composite operation")


class PatternLayout(CamelModel):
    spacing: float = Field(default=10.0, ge=0, description="Gap between shapes in pixels")
    rows: int | None = Field(default=None, ge=1, description="Grid rows (derived from count if unset)")
    cols: int | None = Field(default=None, ge=1, description="Grid columns (derived from count if unset)")
    origin: Point = Field(default_factory=Point, description="Top-left for linear patterns, centre for radial ones")
    radius: float = Field(default=200.0, gt=0, description="Radius for circle and spiral patterns")


class PatternSpec(CamelModel):
    """Arguments of bulkCreatePattern."""

    pattern: PatternKind
    shape: ShapeKind = "rectangle"
    count: int = Field(..., ge=1, le=MAX_BULK_COUNT)
    style: PatternStyle = Field(default_factory=PatternStyle)
    layout: PatternLayout = Field(default_factory=PatternLayout)


class LayoutColors(CamelModel):
    primary_color: str = "#3B82F6"
    background_color: str = "#FFFFFF"
    text_color: str = "#000000"


class LayoutConfig(CamelModel):
    title: str | None = None
    items: list[str] = Field(default_factory=list, description="Menu items / button labels")
    fields: list[str] = Field(default_factory=list, description="Form field labels")
    style: LayoutColors = Field(default_factory=LayoutColors)


class LayoutSpec(CamelModel):
    """Arguments of createCompositeLayout."""

    type: LayoutKind
    config: LayoutConfig = Field(default_factory=LayoutConfig)
    position: Point = Field(default_factory=Point)
