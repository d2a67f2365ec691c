from __future__ import annotations

from datetime import date, timedelta

import pytest

from moodline.app.domain.models import DayAggregate
from moodline.app.insights.chart import (
    CHANNEL_COLORS,
    Channel,
    ChartMode,
    PathCommand,
    Point,
    RoundedRect,
    Viewport,
    layout,
    smooth_path,
)

VIEWPORT = Viewport(width=400, height=260)  # plot area x 8..392, y 8..232
START = date(2024, 7, 1)


def _days(*fields: dict) -> list[DayAggregate]:
    return [DayAggregate(date=START + timedelta(days=i), **values) for i, values in enumerate(fields)]


def _path(primitives, name):
    return next(path for path in primitives.paths if path.name == name)


def test_empty_day_list_emits_nothing() -> None:
    for mode in ChartMode:
        primitives = layout([], mode, VIEWPORT)
        assert primitives.is_empty
        assert primitives.stacks == ()


@pytest.mark.parametrize("mode", list(ChartMode))
def test_stack_height_is_diameter_times_total(mode: ChartMode) -> None:
    days = _days(
        {"count_x": 1, "count_w": 2},
        {},
        {"count_x": 2, "count_y": 2, "count_z": 1, "count_w": 2},
        {"count_y": 1},
        {"count_z": 3, "count_w": 1},
    )

    primitives = layout(days, mode, VIEWPORT)
    diameter = primitives.ball_diameter

    assert diameter > 0
    assert [stack.day_index for stack in primitives.stacks] == [0, 2, 3, 4]
    for stack in primitives.stacks:
        assert stack.ball_diameter == diameter
        assert stack.height == pytest.approx(diameter * days[stack.day_index].total)
        assert stack.bottom == VIEWPORT.bottom

    rects = primitives.rects
    assert len(rects) == len(primitives.stacks)
    for rect, stack in zip(rects, primitives.stacks):
        assert rect.height == pytest.approx(diameter * stack.total)
        assert rect.width == pytest.approx(diameter)
        assert rect.top_left.y + rect.height == pytest.approx(VIEWPORT.bottom)


def test_tallest_stack_fills_plot_height_exactly() -> None:
    days = _days({"count_x": 3, "count_y": 3, "count_z": 3, "count_w": 3}, {"count_x": 1}, {})

    primitives = layout(days, ChartMode.TOTALS, VIEWPORT)

    assert primitives.ball_diameter == pytest.approx(VIEWPORT.plot_height / 12)
    tallest = primitives.stacks[0]
    assert tallest.top == pytest.approx(VIEWPORT.top)


def test_diameter_is_capped_by_absolute_size() -> None:
    days = _days({"count_x": 1}, {"count_y": 1}, {"count_z": 1})
    assert layout(days, ChartMode.TOTALS, VIEWPORT).ball_diameter == pytest.approx(36.0)


def test_diameter_is_capped_by_day_spacing() -> None:
    days = _days(*({"count_x": 1, "count_y": 1} for _ in range(31)))
    step = (VIEWPORT.right - VIEWPORT.left) / 30

    primitives = layout(days, ChartMode.TOTALS, VIEWPORT)

    assert primitives.ball_diameter == pytest.approx(0.55 * step)
    centers = [stack.center_x for stack in primitives.stacks]
    assert all(b - a >= primitives.ball_diameter for a, b in zip(centers, centers[1:]))


def test_balls_are_stacked_bottom_up_in_channel_order() -> None:
    days = _days({"count_x": 1, "count_y": 1, "count_z": 1, "count_w": 2})

    primitives = layout(days, ChartMode.TOTALS, VIEWPORT)
    diameter = primitives.ball_diameter
    balls = primitives.circles[:5]

    assert [ball.color for ball in balls] == [
        CHANNEL_COLORS[Channel.W],
        CHANNEL_COLORS[Channel.W],
        CHANNEL_COLORS[Channel.Z],
        CHANNEL_COLORS[Channel.Y],
        CHANNEL_COLORS[Channel.X],
    ]
    for slot, ball in enumerate(balls):
        assert ball.center.y == pytest.approx(VIEWPORT.bottom - (slot + 0.5) * diameter)
        assert ball.radius <= diameter / 2
    gaps = [upper.center.y - lower.center.y for lower, upper in zip(balls, balls[1:])]
    assert gaps == pytest.approx([-diameter] * 4)


def test_totals_outline_is_stroked_and_other_modes_use_filled_bars() -> None:
    days = _days({"count_x": 2})

    (outline,) = layout(days, ChartMode.TOTALS, VIEWPORT).rects
    (bar,) = layout(days, ChartMode.MOOD, VIEWPORT).rects

    assert isinstance(outline, RoundedRect)
    assert outline.stroke_width is not None
    assert bar.stroke_width is None
    assert bar.gradient_to is not None


def test_all_zero_totals_emit_no_stack_primitives() -> None:
    days = _days({"sleep_avg": 7}, {"sleep_avg": 6}, {})

    for mode in ChartMode:
        primitives = layout(days, mode, VIEWPORT)
        assert primitives.stacks == ()
        assert primitives.rects == []
        assert primitives.ball_diameter == pytest.approx(36.0)


def test_mood_curve_skips_days_without_mood() -> None:
    days = _days({"mood_avg": 1}, {"mood_avg": 5}, {}, {"mood_avg": 3}, {"mood_avg": 2})

    mood = _path(layout(days, ChartMode.MOOD, VIEWPORT), "mood")

    ops = [command.op for command in mood.commands]
    assert ops == ["M", "Q", "Q", "Q", "L"]
    assert mood.commands[0].points[0].y == pytest.approx(VIEWPORT.bottom)
    assert mood.commands[1].points[1].y == pytest.approx((VIEWPORT.bottom + VIEWPORT.top) / 2)
    assert mood.commands[-1].points[0].x == pytest.approx(VIEWPORT.right)


def test_no_mood_values_means_no_mood_curve() -> None:
    days = _days({"sleep_avg": 7}, {"sleep_avg": 8})
    primitives = layout(days, ChartMode.MOOD, VIEWPORT)
    assert [path.name for path in primitives.paths] == ["sleep"]


def test_sleep_scale_has_a_floor_of_eight_hours() -> None:
    sleep = _path(layout(_days({"sleep_avg": 8}, {"sleep_avg": 0}), ChartMode.SLEEP, VIEWPORT), "sleep")
    first, last = sleep.commands[0].points[0], sleep.commands[-1].points[0]
    assert first.y == pytest.approx(VIEWPORT.top)
    assert last.y == pytest.approx(VIEWPORT.bottom)

    sleep = _path(layout(_days({"sleep_avg": 12}, {"sleep_avg": 6}), ChartMode.SLEEP, VIEWPORT), "sleep")
    first, last = sleep.commands[0].points[0], sleep.commands[-1].points[0]
    assert first.y == pytest.approx(VIEWPORT.top)
    assert last.y == pytest.approx(VIEWPORT.bottom - VIEWPORT.plot_height / 2)


@pytest.mark.parametrize(
    ("mode", "mood_width", "sleep_width"),
    [
        (ChartMode.MOOD, 6.0, 4.0),
        (ChartMode.SLEEP, 4.0, 6.0),
        (ChartMode.TOTALS, 4.0, 4.0),
    ],
)
def test_mode_selects_dominant_curve(mode: ChartMode, mood_width: float, sleep_width: float) -> None:
    days = _days({"mood_avg": 4, "sleep_avg": 7}, {"mood_avg": 2, "sleep_avg": 5})

    primitives = layout(days, mode, VIEWPORT)
    mood = _path(primitives, "mood")
    sleep = _path(primitives, "sleep")

    assert mood.stroke_width == mood_width
    assert sleep.stroke_width == sleep_width
    assert (mood.opacity > sleep.opacity) == (mode is ChartMode.MOOD)
    # the dominant curve is painted last
    if mode is not ChartMode.TOTALS:
        dominant = mood if mode is ChartMode.MOOD else sleep
        assert primitives.paths[-1] is dominant


def test_axis_labels_are_thinned_to_about_six() -> None:
    fourteen = layout(_days(*({} for _ in range(14))), ChartMode.SLEEP, VIEWPORT)
    assert [label.text for label in fourteen.labels] == ["7/1", "7/3", "7/5", "7/7", "7/9", "7/11", "7/13"]
    assert fourteen.labels[0].position == Point(VIEWPORT.left - 18, VIEWPORT.height - 4)

    three = layout(_days({}, {}, {}), ChartMode.SLEEP, VIEWPORT)
    assert len(three.labels) == 3


def test_single_day_and_tiny_viewport_do_not_fail() -> None:
    single = layout(_days({"count_x": 1, "sleep_avg": 7, "mood_avg": 3}), ChartMode.TOTALS, VIEWPORT)
    assert single.stacks[0].center_x == VIEWPORT.left

    tiny = Viewport(width=10, height=20)
    primitives = layout(_days({"count_x": 4}, {"count_y": 1}), ChartMode.TOTALS, tiny)
    assert primitives.ball_diameter == 0
    assert all(stack.height == 0 for stack in primitives.stacks)


def test_smooth_path_bends_toward_midpoints() -> None:
    points = [Point(0, 0), Point(10, 10), Point(20, 0)]

    assert smooth_path(points) == (
        PathCommand("M", (Point(0, 0),)),
        PathCommand("Q", (Point(0, 0), Point(5, 5))),
        PathCommand("Q", (Point(10, 10), Point(15, 5))),
        PathCommand("L", (Point(20, 0),)),
    )


def test_smooth_path_edge_cases() -> None:
    assert smooth_path([]) == ()
    assert [command.op for command in smooth_path([Point(1, 2)])] == ["M", "L"]
