"""Chart geometry for the metrics screen.

``layout`` turns per-day aggregates into drawing primitives for one of three
modes. All three share the stacked toggle-channel geometry:

* one ball diameter ``d`` per render, ``d = min(size cap, plot height / max total)``
  where the size cap keeps neighbouring days apart;
* every stack is exactly ``d * total`` tall with balls touching, drawn
  bottom-up in channel order W, Z, Y, X.

Mood and sleep are plotted as smoothed curves over the same x positions.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, assert_never

from ..domain.models import DayAggregate
from ..metrics import CHART_LAYOUTS

MAX_BALL_DIAMETER = 36.0
BALL_STEP_RATIO = 0.55
BALL_DRAW_RATIO = 0.95
MOOD_DOMAIN = (1.0, 5.0)
SLEEP_FLOOR_MAX = 8.0
LABEL_TARGET = 6
LABEL_OFFSET = (-18.0, -4.0)

MOOD_COLOR = "#9A7BFF"
SLEEP_COLOR = "#00E6FF"
BAR_COLORS = ("#7E6AF4", "#0EA5E9")
BAR_OPACITY = 0.38
OUTLINE_COLOR = "#9EB8FF"
OUTLINE_OPACITY = 0.25
OUTLINE_WIDTH = 1.25
LABEL_COLOR = "#DCE6FF"
LABEL_OPACITY = 0.63
LABEL_SIZE = 13.0


class Channel(str, Enum):
    X = "x"
    Y = "y"
    Z = "z"
    W = "w"


CHANNEL_COLORS: dict[Channel, str] = {
    Channel.X: "#6EE7B7",
    Channel.Y: "#F8D477",
    Channel.Z: "#FF6B6B",
    Channel.W: "#60A5FA",
}
STACK_ORDER = (Channel.W, Channel.Z, Channel.Y, Channel.X)


class ChartMode(str, Enum):
    MOOD = "mood"
    SLEEP = "sleep"
    TOTALS = "totals"


@dataclass(frozen=True)
class LineStyle:
    stroke_width: float
    opacity: float
    marker_radius: float


DOMINANT = LineStyle(stroke_width=6.0, opacity=0.9, marker_radius=5.5)
SECONDARY = LineStyle(stroke_width=4.0, opacity=0.35, marker_radius=4.0)


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float
    margin_left: float = 8.0
    margin_right: float = 8.0
    margin_top: float = 8.0
    margin_bottom: float = 28.0

    @property
    def left(self) -> float:
        return self.margin_left

    @property
    def right(self) -> float:
        return max(self.left, self.width - self.margin_right)

    @property
    def top(self) -> float:
        return self.margin_top

    @property
    def bottom(self) -> float:
        return max(self.top, self.height - self.margin_bottom)

    @property
    def plot_height(self) -> float:
        return self.bottom - self.top


class Point(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class PathCommand:
    op: str  # "M", "Q" or "L"
    points: tuple[Point, ...]


@dataclass(frozen=True)
class RoundedRect:
    top_left: Point
    width: float
    height: float
    corner_radius: float
    color: str
    opacity: float = 1.0
    stroke_width: float | None = None  # None means filled
    gradient_to: str | None = None
    kind: str = field(default="rounded_rect", init=False)


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float
    color: str
    opacity: float = 1.0
    kind: str = field(default="circle", init=False)


@dataclass(frozen=True)
class CurvePath:
    name: str
    commands: tuple[PathCommand, ...]
    stroke_width: float
    color: str
    opacity: float
    kind: str = field(default="path", init=False)

    def svg_data(self) -> str:
        parts = []
        for command in self.commands:
            coords = " ".join(f"{p.x:.2f} {p.y:.2f}" for p in command.points)
            parts.append(f"{command.op} {coords}")
        return " ".join(parts)


@dataclass(frozen=True)
class TextLabel:
    position: Point
    text: str
    color: str = LABEL_COLOR
    opacity: float = LABEL_OPACITY
    size: float = LABEL_SIZE
    kind: str = field(default="text", init=False)


Primitive = RoundedRect | Circle | CurvePath | TextLabel


@dataclass(frozen=True)
class StackLayout:
    day_index: int
    center_x: float
    bottom: float
    ball_diameter: float
    total: int

    @property
    def height(self) -> float:
        return self.ball_diameter * self.total

    @property
    def top(self) -> float:
        return self.bottom - self.height


@dataclass(frozen=True)
class RenderPrimitives:
    mode: ChartMode
    items: tuple[Primitive, ...] = ()
    ball_diameter: float = 0.0
    stacks: tuple[StackLayout, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def rects(self) -> list[RoundedRect]:
        return [item for item in self.items if isinstance(item, RoundedRect)]

    @property
    def circles(self) -> list[Circle]:
        return [item for item in self.items if isinstance(item, Circle)]

    @property
    def paths(self) -> list[CurvePath]:
        return [item for item in self.items if isinstance(item, CurvePath)]

    @property
    def labels(self) -> list[TextLabel]:
        return [item for item in self.items if isinstance(item, TextLabel)]


def smooth_path(points: Sequence[Point]) -> tuple[PathCommand, ...]:
    """Quadratic midpoint smoothing through ``points``.

    Each segment bends at the previous point and ends halfway to the next,
    so the line has no sharp corners; a final straight run reaches the last
    point.
    """

    if not points:
        return ()
    commands = [PathCommand("M", (points[0],))]
    for prev, curr in zip(points, points[1:]):
        mid = Point((prev.x + curr.x) * 0.5, (prev.y + curr.y) * 0.5)
        commands.append(PathCommand("Q", (prev, mid)))
    commands.append(PathCommand("L", (points[-1],)))
    return tuple(commands)


def day_positions(count: int, viewport: Viewport) -> tuple[list[float], float]:
    step = (viewport.right - viewport.left) / max(1, count - 1)
    return [viewport.left + i * step for i in range(count)], step


def ball_diameter(days: Sequence[DayAggregate], step: float, viewport: Viewport) -> float:
    max_total = max((day.total for day in days), default=0)
    max_total = max(max_total, 1)
    size_cap = min(MAX_BALL_DIAMETER, step * BALL_STEP_RATIO)
    return min(size_cap, viewport.plot_height / max_total)


def stack_layouts(
    days: Sequence[DayAggregate],
    xs: Sequence[float],
    diameter: float,
    viewport: Viewport,
) -> tuple[StackLayout, ...]:
    return tuple(
        StackLayout(
            day_index=index,
            center_x=xs[index],
            bottom=viewport.bottom,
            ball_diameter=diameter,
            total=day.total,
        )
        for index, day in enumerate(days)
        if day.total > 0
    )


def layout(days: Sequence[DayAggregate], mode: ChartMode, viewport: Viewport) -> RenderPrimitives:
    """Compute every primitive of one chart render, in paint order."""

    if not days:
        return RenderPrimitives(mode=mode)

    xs, step = day_positions(len(days), viewport)
    diameter = ball_diameter(days, step, viewport)
    stacks = stack_layouts(days, xs, diameter, viewport)
    mood_points = _mood_points(days, xs, viewport)
    sleep_points = _sleep_points(days, xs, viewport)

    items: list[Primitive] = []
    match mode:
        case ChartMode.MOOD:
            items.extend(_bars(stacks))
            items.extend(_curve("sleep", sleep_points, SLEEP_COLOR, SECONDARY))
            items.extend(_curve("mood", mood_points, MOOD_COLOR, DOMINANT))
        case ChartMode.SLEEP:
            items.extend(_bars(stacks))
            items.extend(_curve("mood", mood_points, MOOD_COLOR, SECONDARY))
            items.extend(_curve("sleep", sleep_points, SLEEP_COLOR, DOMINANT))
        case ChartMode.TOTALS:
            for stack in stacks:
                items.extend(_ball_stack(stack, days[stack.day_index]))
            items.extend(_curve("mood", mood_points, MOOD_COLOR, SECONDARY))
            items.extend(_curve("sleep", sleep_points, SLEEP_COLOR, SECONDARY))
        case _:
            assert_never(mode)
    items.extend(_axis_labels(days, xs, viewport))

    CHART_LAYOUTS.labels(mode=mode.value).inc()
    return RenderPrimitives(mode=mode, items=tuple(items), ball_diameter=diameter, stacks=stacks)


def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def _mood_points(days: Sequence[DayAggregate], xs: Sequence[float], viewport: Viewport) -> list[Point]:
    low, high = MOOD_DOMAIN
    return [
        Point(xs[i], viewport.bottom - _clamp01((day.mood_avg - low) / (high - low)) * viewport.plot_height)
        for i, day in enumerate(days)
        if day.mood_avg is not None
    ]


def _sleep_points(days: Sequence[DayAggregate], xs: Sequence[float], viewport: Viewport) -> list[Point]:
    top_value = max(SLEEP_FLOOR_MAX, max(day.sleep_avg for day in days))
    return [
        Point(xs[i], viewport.bottom - _clamp01(day.sleep_avg / top_value) * viewport.plot_height)
        for i, day in enumerate(days)
    ]


def _bars(stacks: Sequence[StackLayout]) -> list[RoundedRect]:
    return [
        RoundedRect(
            top_left=Point(stack.center_x - stack.ball_diameter / 2, stack.top),
            width=stack.ball_diameter,
            height=stack.height,
            corner_radius=stack.ball_diameter / 2,
            color=BAR_COLORS[0],
            gradient_to=BAR_COLORS[1],
            opacity=BAR_OPACITY,
        )
        for stack in stacks
    ]


def _ball_stack(stack: StackLayout, day: DayAggregate) -> list[Primitive]:
    diameter = stack.ball_diameter
    items: list[Primitive] = [
        RoundedRect(
            top_left=Point(stack.center_x - diameter / 2, stack.top),
            width=diameter,
            height=stack.height,
            corner_radius=diameter / 2,
            color=OUTLINE_COLOR,
            opacity=OUTLINE_OPACITY,
            stroke_width=OUTLINE_WIDTH,
        )
    ]
    counts = {
        Channel.X: day.count_x,
        Channel.Y: day.count_y,
        Channel.Z: day.count_z,
        Channel.W: day.count_w,
    }
    slot = 0
    for channel in STACK_ORDER:
        for _ in range(counts[channel]):
            center = Point(stack.center_x, stack.bottom - (slot + 0.5) * diameter)
            items.append(Circle(center, diameter / 2 * BALL_DRAW_RATIO, CHANNEL_COLORS[channel]))
            slot += 1
    return items


def _curve(name: str, points: Sequence[Point], color: str, style: LineStyle) -> list[Primitive]:
    if not points:
        return []
    items: list[Primitive] = [
        CurvePath(
            name=name,
            commands=smooth_path(points),
            stroke_width=style.stroke_width,
            color=color,
            opacity=style.opacity,
        )
    ]
    items.extend(Circle(point, style.marker_radius, color, style.opacity) for point in points)
    return items


def _axis_labels(days: Sequence[DayAggregate], xs: Sequence[float], viewport: Viewport) -> list[TextLabel]:
    every = max(1, len(days) // LABEL_TARGET)
    dx, dy = LABEL_OFFSET
    return [
        TextLabel(Point(xs[i] + dx, viewport.height + dy), f"{day.date.month}/{day.date.day}")
        for i, day in enumerate(days)
        if i % every == 0
    ]


__all__ = [
    "CHANNEL_COLORS",
    "Channel",
    "ChartMode",
    "Circle",
    "CurvePath",
    "PathCommand",
    "Point",
    "RenderPrimitives",
    "RoundedRect",
    "StackLayout",
    "TextLabel",
    "Viewport",
    "ball_diameter",
    "layout",
    "smooth_path",
]
