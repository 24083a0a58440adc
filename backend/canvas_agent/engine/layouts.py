"""Composite layout compiler: LayoutSpec → ordered ShapeDescriptors.

Each archetype is a fixed template. Elements go into three paint layers and are
emitted back to front: backdrop (shadows, panels), body (fields, buttons,
outlines), then text. A renderer that paints in list order therefore stacks
labels above the boxes they sit on without needing a z-index.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from canvas_agent.models.geometry import LayoutColors, LayoutConfig, LayoutSpec, ShapeDescriptor

DEFAULT_NAV_ITEMS = ["Home", "About", "Services", "Contact"]
DEFAULT_BUTTON_ITEMS = ["Option 1", "Option 2", "Option 3"]
DEFAULT_FORM_FIELDS = ["Name", "Email", "Message"]

_SHADOW = "#1F2937"
_BORDER = "#E5E7EB"
_FIELD_BORDER = "#D1D5DB"
_FIELD_FILL = "#F9FAFB"
_PLACEHOLDER_FILL = "#F3F4F6"
_LABEL = "#374151"
_MUTED = "#6B7280"
_HEADING = "#111827"
_ON_PRIMARY = "#FFFFFF"


@dataclass
class _Layers:
    backdrop: list[ShapeDescriptor] = field(default_factory=list)
    body: list[ShapeDescriptor] = field(default_factory=list)
    text: list[ShapeDescriptor] = field(default_factory=list)

    def flatten(self) -> list[ShapeDescriptor]:
        return [*self.backdrop, *self.body, *self.text]


def _rect(
    x: float,
    y: float,
    width: float,
    height: float,
    fill: str,
    stroke: str | None = None,
    opacity: float | None = None,
) -> ShapeDescriptor:
    return ShapeDescriptor(
        type="rectangle", x=x, y=y, width=width, height=height,
        fill=fill, stroke=stroke, opacity=opacity,
    )


def _text(
    text: str,
    x: float,
    y: float,
    width: float,
    height: float,
    font_size: float,
    fill: str,
) -> ShapeDescriptor:
    return ShapeDescriptor(
        type="text", text=text, x=x, y=y, width=width, height=height,
        font_size=font_size, fill=fill,
    )


def _login_form(x: float, y: float, config: LayoutConfig, colors: LayoutColors) -> _Layers:
    form_w, form_h, pad = 400.0, 350.0, 30.0
    field_w = form_w - pad * 2
    layers = _Layers()

    layers.backdrop.append(_rect(x - 10, y - 10, form_w + 20, form_h + 20, _SHADOW, opacity=0.3))
    layers.backdrop.append(_rect(x, y, form_w, form_h, colors.background_color, stroke=_BORDER))

    layers.body.append(_rect(x + pad, y + 105, field_w, 45, _FIELD_FILL, stroke=_FIELD_BORDER))
    layers.body.append(_rect(x + pad, y + 190, field_w, 45, _FIELD_FILL, stroke=_FIELD_BORDER))
    layers.body.append(_rect(x + pad, y + 260, field_w, 50, colors.primary_color))

    layers.text.append(_text(config.title or "Welcome Back", x + form_w / 2 - 80, y + pad, 160, 30, 28, _HEADING))
    layers.text.append(_text("Username", x + pad, y + 80, 80, 20, 14, _LABEL))
    layers.text.append(_text("Password", x + pad, y + 165, 80, 20, 14, _LABEL))
    layers.text.append(_text("Sign In", x + form_w / 2 - 40, y + 275, 80, 20, 16, _ON_PRIMARY))
    return layers


def _navbar(x: float, y: float, config: LayoutConfig, colors: LayoutColors) -> _Layers:
    items = config.items or DEFAULT_NAV_ITEMS
    layers = _Layers()

    layers.backdrop.append(_rect(x, y, 800, 60, colors.primary_color))
    layers.text.append(_text(config.title or "Logo", x + 20, y + 25, 100, 30, 20, _ON_PRIMARY))
    for i, item in enumerate(items):
        offset = i * 120
        layers.body.append(_rect(x + 200 + offset, y + 15, 100, 30, "transparent", stroke=_ON_PRIMARY))
        layers.text.append(_text(item, x + 230 + offset, y + 27, 60, 20, 14, _ON_PRIMARY))
    return layers


def _card(x: float, y: float, config: LayoutConfig, colors: LayoutColors) -> _Layers:
    layers = _Layers()

    layers.backdrop.append(_rect(x + 6, y + 6, 300, 400, _SHADOW, opacity=0.15))
    layers.backdrop.append(_rect(x, y, 300, 400, colors.background_color, stroke=_BORDER))

    layers.body.append(_rect(x + 20, y + 20, 260, 180, _PLACEHOLDER_FILL, stroke=_FIELD_BORDER))
    layers.body.append(_rect(x + 20, y + 350, 260, 35, colors.primary_color))

    layers.text.append(_text("Image", x + 125, y + 100, 50, 20, 14, _MUTED))
    layers.text.append(_text(config.title or "Card Title", x + 20, y + 220, 200, 30, 18, colors.text_color))
    layers.text.append(_text("Supporting text for this card.", x + 20, y + 260, 260, 60, 14, _MUTED))
    layers.text.append(_text("Learn More", x + 110, y + 362, 80, 20, 14, _ON_PRIMARY))
    return layers


def _button_group(x: float, y: float, config: LayoutConfig, colors: LayoutColors) -> _Layers:
    items = config.items or DEFAULT_BUTTON_ITEMS
    layers = _Layers()
    for i, item in enumerate(items):
        active = i == 0
        offset = i * 120
        fill = colors.primary_color if active else colors.background_color
        layers.body.append(_rect(x + offset, y, 110, 40, fill, stroke=colors.primary_color))
        label_fill = _ON_PRIMARY if active else colors.text_color
        layers.text.append(_text(item, x + 20 + offset, y + 15, 70, 20, 14, label_fill))
    return layers


def _form(x: float, y: float, config: LayoutConfig, colors: LayoutColors) -> _Layers:
    fields = config.fields or DEFAULT_FORM_FIELDS
    layers = _Layers()

    for i, name in enumerate(fields):
        offset = i * 60
        layers.body.append(_rect(x + 50, y + 60 + offset, 350, 45, colors.background_color, stroke=_FIELD_BORDER))
        layers.text.append(_text(name, x + 60, y + 77 + offset, 100, 20, 14, _MUTED))

    submit_y = y + 60 + len(fields) * 60 + 20
    layers.body.append(_rect(x + 50, submit_y, 350, 45, colors.primary_color))

    # Title goes first among the text layer, ahead of the field labels.
    layers.text.insert(0, _text(config.title or "Contact Form", x + 150, y + 20, 150, 30, 22, colors.text_color))
    layers.text.append(_text("Submit", x + 200, submit_y + 17, 60, 20, 16, _ON_PRIMARY))
    return layers


def _dashboard(x: float, y: float, config: LayoutConfig, colors: LayoutColors) -> _Layers:
    layers = _Layers()

    layers.backdrop.append(_rect(x, y, 1000, 80, colors.primary_color))
    layers.text.append(_text(config.title or "Dashboard", x + 20, y + 30, 150, 30, 24, _ON_PRIMARY))
    offsets = [i * 330 for i in range(3)]
    for offset in offsets:
        layers.body.append(_rect(x + 20 + offset, y + 100, 300, 120, colors.background_color, stroke=_BORDER))
    for i, offset in enumerate(offsets):
        layers.text.append(_text(f"Metric {i + 1}", x + 40 + offset, y + 120, 150, 20, 16, colors.text_color))
    for i, offset in enumerate(offsets):
        layers.text.append(_text(f"{(i + 1) * 1234}", x + 40 + offset, y + 160, 100, 30, 32, colors.primary_color))
    return layers


_ARCHETYPES: dict[str, Callable[[float, float, LayoutConfig, LayoutColors], _Layers]] = {
    "login_form": _login_form,
    "navbar": _navbar,
    "card": _card,
    "button_group": _button_group,
    "form": _form,
    "dashboard": _dashboard,
}


def compile_layout(spec: LayoutSpec) -> list[ShapeDescriptor]:
    """Expand a layout archetype into descriptors in back-to-front paint order."""
    builder = _ARCHETYPES[spec.type]
    layers = builder(spec.position.x, spec.position.y, spec.config, spec.config.style)
    return layers.flatten()
