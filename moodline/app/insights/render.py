from __future__ import annotations

from html import escape
from typing import Protocol, runtime_checkable

from .chart import Circle, CurvePath, RenderPrimitives, RoundedRect, TextLabel, Viewport


@runtime_checkable
class DrawingSurface(Protocol):
    """Immediate-mode 2D target the chart primitives are replayed onto."""

    def draw_rounded_rect(self, rect: RoundedRect) -> None: ...

    def draw_circle(self, circle: Circle) -> None: ...

    def draw_path(self, path: CurvePath) -> None: ...

    def draw_text(self, label: TextLabel) -> None: ...


def paint(primitives: RenderPrimitives, surface: DrawingSurface) -> int:
    """Replay primitives onto ``surface`` in paint order; returns the count drawn."""

    for item in primitives.items:
        match item:
            case RoundedRect():
                surface.draw_rounded_rect(item)
            case Circle():
                surface.draw_circle(item)
            case CurvePath():
                surface.draw_path(item)
            case TextLabel():
                surface.draw_text(item)
    return len(primitives.items)


def _num(value: float) -> str:
    return f"{value:.2f}"


class SvgSurface:
    """Collects primitives as SVG elements."""

    def __init__(self, viewport: Viewport, *, background: str | None = None) -> None:
        self._viewport = viewport
        self._background = background
        self._gradients: dict[tuple[str, str], str] = {}
        self._defs: list[str] = []
        self._elements: list[str] = []

    def draw_rounded_rect(self, rect: RoundedRect) -> None:
        attrs = (
            f'x="{_num(rect.top_left.x)}" y="{_num(rect.top_left.y)}" '
            f'width="{_num(rect.width)}" height="{_num(rect.height)}" '
            f'rx="{_num(rect.corner_radius)}" ry="{_num(rect.corner_radius)}"'
        )
        if rect.stroke_width is not None:
            paint_attrs = (
                f'fill="none" stroke="{rect.color}" stroke-width="{_num(rect.stroke_width)}" '
                f'stroke-opacity="{rect.opacity}"'
            )
        else:
            fill = self._gradient(rect.color, rect.gradient_to) if rect.gradient_to else rect.color
            paint_attrs = f'fill="{fill}" fill-opacity="{rect.opacity}"'
        self._elements.append(f"<rect {attrs} {paint_attrs}/>")

    def draw_circle(self, circle: Circle) -> None:
        self._elements.append(
            f'<circle cx="{_num(circle.center.x)}" cy="{_num(circle.center.y)}" '
            f'r="{_num(circle.radius)}" fill="{circle.color}" fill-opacity="{circle.opacity}"/>'
        )

    def draw_path(self, path: CurvePath) -> None:
        self._elements.append(
            f'<path d="{path.svg_data()}" fill="none" stroke="{path.color}" '
            f'stroke-width="{_num(path.stroke_width)}" stroke-opacity="{path.opacity}" '
            f'stroke-linecap="round" stroke-linejoin="round" data-series="{escape(path.name)}"/>'
        )

    def draw_text(self, label: TextLabel) -> None:
        self._elements.append(
            f'<text x="{_num(label.position.x)}" y="{_num(label.position.y)}" '
            f'font-size="{_num(label.size)}" fill="{label.color}" fill-opacity="{label.opacity}">'
            f"{escape(label.text)}</text>"
        )

    def _gradient(self, start: str, end: str) -> str:
        key = (start, end)
        if key not in self._gradients:
            gradient_id = f"g{len(self._gradients)}"
            self._gradients[key] = gradient_id
            self._defs.append(
                f'<linearGradient id="{gradient_id}" x1="0" y1="0" x2="0" y2="1">'
                f'<stop offset="0" stop-color="{start}"/><stop offset="1" stop-color="{end}"/>'
                "</linearGradient>"
            )
        return f"url(#{self._gradients[key]})"

    def to_svg(self) -> str:
        width = _num(self._viewport.width)
        height = _num(self._viewport.height)
        head = (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
            f'viewBox="0 0 {width} {height}">'
        )
        body: list[str] = []
        if self._defs:
            body.append("<defs>" + "".join(self._defs) + "</defs>")
        if self._background:
            body.append(f'<rect width="100%" height="100%" fill="{self._background}"/>')
        body.extend(self._elements)
        return head + "".join(body) + "</svg>"


def render_svg(primitives: RenderPrimitives, viewport: Viewport, *, background: str | None = None) -> str:
    surface = SvgSurface(viewport, background=background)
    paint(primitives, surface)
    return surface.to_svg()


__all__ = ["DrawingSurface", "SvgSurface", "paint", "render_svg"]
