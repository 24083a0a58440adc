"""Tool definitions: primitive canvas operations plus the two geometry-backed bulk tools.

Importing this module registers every tool on the module-level registry.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from canvas_agent.engine.colors import fill_matches
from canvas_agent.engine.layouts import compile_layout
from canvas_agent.engine.patterns import compile_pattern
from canvas_agent.engine.registry import ToolSpec, get_registry, tool_spec
from canvas_agent.models.geometry import LayoutSpec, PatternSpec
from canvas_agent.models.requests import CanvasSummary
from canvas_agent.models.tools import (
    AlignArgs,
    CreateShapeArgs,
    CreateTextArgs,
    DeleteShapeArgs,
    DistributeArgs,
    MoveShapeArgs,
    OperationName,
    QueryShapesArgs,
    ResizeShapeArgs,
    RotateShapeArgs,
    UpdateShapeArgs,
)

logger = logging.getLogger(__name__)


_PRIMITIVES = [
    ToolSpec(
        name=OperationName.CREATE_SHAPE,
        args_model=CreateShapeArgs,
        description=(
            "Creates one new shape (rectangle, circle, triangle or star). For more than "
            "about 10 shapes use bulkCreatePattern instead."
        ),
        acknowledge=lambda a, _: f"Shape queued: {a.type} at ({a.x}, {a.y})",
    ),
    ToolSpec(
        name=OperationName.CREATE_TEXT,
        args_model=CreateTextArgs,
        description="Creates a text element for labels, headings or any text content.",
        acknowledge=lambda a, _: f'Text queued: "{a.text}" at ({a.x}, {a.y})',
    ),
    ToolSpec(
        name=OperationName.MOVE_SHAPE,
        args_model=MoveShapeArgs,
        description="Moves an existing shape to a new position. Use queryShapes first to find its ID.",
        acknowledge=lambda a, _: f"Shape move queued: {a.id} to ({a.x}, {a.y})",
    ),
    ToolSpec(
        name=OperationName.RESIZE_SHAPE,
        args_model=ResizeShapeArgs,
        description="Resizes an existing shape. Use queryShapes first to find its ID and current size.",
        acknowledge=lambda a, _: f"Shape resize queued: {a.id} to {a.width}x{a.height}",
    ),
    ToolSpec(
        name=OperationName.ROTATE_SHAPE,
        args_model=RotateShapeArgs,
        description="Rotates an existing shape by a number of degrees.",
        acknowledge=lambda a, _: f"Shape rotation queued: {a.id} by {a.degrees} degrees",
    ),
    ToolSpec(
        name=OperationName.UPDATE_SHAPE,
        args_model=UpdateShapeArgs,
        description="Updates fill, stroke, opacity or blend mode of an existing shape.",
        acknowledge=lambda a, _: f"Shape update queued: {a.id}",
    ),
    ToolSpec(
        name=OperationName.DELETE_SHAPE,
        args_model=DeleteShapeArgs,
        description="Deletes an existing shape. Call once per shape.",
        acknowledge=lambda a, _: f"Shape deletion queued: {a.id}",
    ),
    ToolSpec(
        name=OperationName.ALIGN,
        args_model=AlignArgs,
        description="Aligns several EXISTING shapes relative to each other.",
        acknowledge=lambda a, _: f"Align queued: {len(a.ids)} shapes, mode: {a.mode}",
    ),
    ToolSpec(
        name=OperationName.DISTRIBUTE,
        args_model=DistributeArgs,
        description=(
            "Distributes EXISTING shapes evenly along an axis. Use this for "
            "'space evenly' or 'arrange in a row'."
        ),
        acknowledge=lambda a, _: f"Distribute queued: {len(a.ids)} shapes, axis: {a.axis}",
    ),
]

for _spec in _PRIMITIVES:
    get_registry().register(_spec)


def _query_ack(args: QueryShapesArgs, arguments: dict[str, Any]) -> str:
    matches = arguments["matches"]
    return f"Found {len(matches)} shape(s): {json.dumps(matches)}"


@tool_spec(
    name=OperationName.QUERY_SHAPES,
    args_model=QueryShapesArgs,
    description=(
        "Queries shapes already on the canvas, optionally filtered by type or fill color "
        "(hex or keyword such as 'blue'). Call this FIRST before moving, resizing, "
        "rotating, updating or arranging existing shapes."
    ),
    acknowledge=_query_ack,
)
def query_shapes(args: QueryShapesArgs, canvas: CanvasSummary) -> dict[str, Any]:
    shapes = canvas.shapes
    if args.filter is not None:
        if args.filter.type:
            shapes = [s for s in shapes if s.type == args.filter.type]
        if args.filter.fill:
            shapes = [s for s in shapes if fill_matches(s.fill, args.filter.fill)]
            logger.info(
                "Filter by color %r: found %d of %d shapes",
                args.filter.fill, len(shapes), len(canvas.shapes),
            )

    matches = [
        {
            "id": s.id,
            "type": s.type,
            "fill": s.fill,
            "x": round(s.x),
            "y": round(s.y),
            "width": round(s.width),
            "height": round(s.height),
        }
        for s in shapes
    ]
    arguments = args.model_dump(mode="json", by_alias=True, exclude_none=True)
    arguments["matches"] = matches
    return arguments


@tool_spec(
    name=OperationName.BULK_CREATE_PATTERN,
    args_model=PatternSpec,
    description=(
        "EFFICIENT bulk creation of up to 1000 new shapes in a grid, row, column, circle "
        "or spiral pattern. Use this instead of repeated createShape calls for 10+ shapes."
    ),
    acknowledge=lambda a, out: (
        f"Bulk created {out['count']} {a.shape}s in {a.pattern} pattern. Ready to render."
    ),
)
def bulk_create_pattern(args: PatternSpec, canvas: CanvasSummary) -> dict[str, Any]:
    shapes = compile_pattern(args)
    return {
        "pattern": args.pattern,
        "shapes": [s.to_wire() for s in shapes],
        "count": len(shapes),
    }


@tool_spec(
    name=OperationName.CREATE_COMPOSITE_LAYOUT,
    args_model=LayoutSpec,
    description=(
        "Creates a multi-element UI layout (login_form, navbar, card, button_group, form, "
        "dashboard) with shadows, labels and contrasting text already arranged."
    ),
    acknowledge=lambda a, out: f"Created {a.type} layout with {out['count']} elements. Ready to render.",
)
def create_composite_layout(args: LayoutSpec, canvas: CanvasSummary) -> dict[str, Any]:
    shapes = compile_layout(args)
    return {
        "type": args.type,
        "shapes": [s.to_wire() for s in shapes],
        "count": len(shapes),
    }
