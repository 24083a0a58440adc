"""Bulk pattern compiler: PatternSpec → ordered ShapeDescriptors.

Every pattern produces exactly ``spec.count`` descriptors. Linear patterns treat
``layout.origin`` as the top-left of the first shape; radial patterns (circle,
spiral) treat it as the centre and offset each descriptor by half its size so the
shape's centre lands on the computed point.
"""

from __future__ import annotations

import math
from typing import Callable

import numpy as np
from numpy.typing import NDArray

from canvas_agent.models.geometry import PatternSpec, ShapeDescriptor

# Spiral angular step: one full rotation every 10 shapes.
_SPIRAL_SHAPES_PER_TURN = 10

Positions = tuple[NDArray[np.float64], NDArray[np.float64]]


def grid_dimensions(count: int, rows: int | None = None, cols: int | None = None) -> tuple[int, int]:
    """Resolve grid rows/cols so that rows * cols >= count.

    Unset rows = ceil(sqrt(count)); unset cols = ceil(count / rows). If explicit
    values are too small, rows grow to fit.
    """
    rows = rows or math.ceil(math.sqrt(count))
    cols = cols or math.ceil(count / rows)
    if rows * cols < count:
        rows = math.ceil(count / cols)
    return rows, cols


def _grid(spec: PatternSpec) -> Positions:
    _, cols = grid_dimensions(spec.count, spec.layout.rows, spec.layout.cols)
    idx = np.arange(spec.count)
    r, c = np.divmod(idx, cols)
    xs = spec.layout.origin.x + c * (spec.style.width + spec.layout.spacing)
    ys = spec.layout.origin.y + r * (spec.style.height + spec.layout.spacing)
    return xs.astype(np.float64), ys.astype(np.float64)


def _row(spec: PatternSpec) -> Positions:
    idx = np.arange(spec.count, dtype=np.float64)
    xs = spec.layout.origin.x + idx * (spec.style.width + spec.layout.spacing)
    ys = np.full(spec.count, spec.layout.origin.y, dtype=np.float64)
    return xs, ys


def _column(spec: PatternSpec) -> Positions:
    idx = np.arange(spec.count, dtype=np.float64)
    xs = np.full(spec.count, spec.layout.origin.x, dtype=np.float64)
    ys = spec.layout.origin.y + idx * (spec.style.height + spec.layout.spacing)
    return xs, ys


def _radial(spec: PatternSpec, angles: NDArray[np.float64], radii: NDArray[np.float64]) -> Positions:
    cx = spec.layout.origin.x + radii * np.cos(angles)
    cy = spec.layout.origin.y + radii * np.sin(angles)
    return cx - spec.style.width / 2, cy - spec.style.height / 2


def _circle(spec: PatternSpec) -> Positions:
    idx = np.arange(spec.count, dtype=np.float64)
    angles = idx * (2 * np.pi / spec.count)
    radii = np.full(spec.count, spec.layout.radius, dtype=np.float64)
    return _radial(spec, angles, radii)


def _spiral(spec: PatternSpec) -> Positions:
    idx = np.arange(spec.count, dtype=np.float64)
    angles = idx * (2 * np.pi / _SPIRAL_SHAPES_PER_TURN)
    radii = spec.layout.radius * idx / spec.count
    return _radial(spec, angles, radii)


_PATTERNS: dict[str, Callable[[PatternSpec], Positions]] = {
    "grid": _grid,
    "row": _row,
    "column": _column,
    "circle": _circle,
    "spiral": _spiral,
}


def compile_pattern(spec: PatternSpec) -> list[ShapeDescriptor]:
    """Expand a pattern spec into exactly ``spec.count`` positioned descriptors."""
    xs, ys = _PATTERNS[spec.pattern](spec)
    style = spec.style
    return [
        ShapeDescriptor(
            type=spec.shape,
            x=float(x),
            y=float(y),
            width=style.width,
            height=style.height,
            fill=style.fill,
            stroke=style.stroke,
            opacity=style.opacity,
            blend_mode=style.blend_mode,
        )
        for x, y in zip(xs, ys)
    ]
