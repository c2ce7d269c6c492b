"""Screen geometry and centering arithmetic."""

from __future__ import annotations

from dataclasses import dataclass

from homeboard.data.routes import ROUTE_ORDER
from homeboard.rendering.widgets import DashboardState, ListWidget, TextWidget

SCHEDULES_HEIGHT = 8
TRAFFIC_HEIGHT = 5
TODAY_HEIGHT = 5
BORDER = 2  # one cell on each side


def _half_gap(outer: int, inner: int) -> int:
    # int() truncates toward zero, matching the integer division of the layout rules.
    return max(0, int((outer - inner) / 2))


def center_list(widget: ListWidget, vertically: bool = False) -> None:
    """Center a list horizontally on its longest line, and optionally vertically."""
    if vertically:
        widget.padding_top = _half_gap(widget.height, len(widget.items))
    longest = max((len(item) for item in widget.items), default=0)
    widget.padding_left = _half_gap(widget.width, longest)


def center_text(widget: TextWidget) -> None:
    """Center a single line of text, or drop padding when it does not fit."""
    length = len(widget.text)
    if length < widget.width:
        widget.padding_top = 1
        widget.padding_left = _half_gap(widget.width, length)
    else:
        widget.padding_top = 0
        widget.padding_left = 0


def max_forecast_bars(term_width: int) -> int:
    """Number of forecast bars that fit in the chart column."""
    return max(0, (term_width // 2) // 4 - 2)


@dataclass(frozen=True)
class ScreenGeometry:
    """Outer sizes of every panel, in terminal cells."""

    term_width: int
    term_height: int
    left_width: int
    right_width: int
    clock_height: int
    today_height: int
    traffic_height: int
    schedules_height: int
    schedule_width: int
    chart_height: int
    temperature_height: int


def compute_geometry(term_width: int, term_height: int) -> ScreenGeometry:
    """Fixed layout: clock/today/traffic/schedules on the left, charts on the right."""
    left_width = term_width // 2
    chart_height = term_height // 4
    return ScreenGeometry(
        term_width=term_width,
        term_height=term_height,
        left_width=left_width,
        right_width=term_width - left_width,
        clock_height=max(0, term_height - SCHEDULES_HEIGHT - TRAFFIC_HEIGHT - TODAY_HEIGHT),
        today_height=TODAY_HEIGHT,
        traffic_height=TRAFFIC_HEIGHT,
        schedules_height=SCHEDULES_HEIGHT,
        schedule_width=term_width // 4,
        chart_height=chart_height,
        temperature_height=term_height - 3 * chart_height,
    )


def _inner(size: int) -> int:
    return max(0, size - BORDER)


def apply_geometry(state: DashboardState, geometry: ScreenGeometry) -> None:
    """Size every widget from the geometry and re-center its content."""
    state.clock.width = geometry.left_width
    state.clock.height = geometry.clock_height
    center_list(state.clock, vertically=True)

    state.today.width = _inner(geometry.left_width)
    state.today.height = _inner(geometry.today_height)
    center_list(state.today)

    state.traffic.width = _inner(geometry.left_width)
    state.traffic.height = _inner(geometry.traffic_height)
    center_text(state.traffic)

    for category in ROUTE_ORDER:
        widget = state.schedules[category]
        widget.width = _inner(geometry.schedule_width)
        widget.height = _inner(geometry.schedules_height)
        center_list(widget)

    for chart in state.charts:
        chart.width = _inner(geometry.right_width)
        chart.height = _inner(geometry.chart_height)
    state.temperature.height = _inner(geometry.temperature_height)


__all__ = [
    "SCHEDULES_HEIGHT",
    "TRAFFIC_HEIGHT",
    "TODAY_HEIGHT",
    "ScreenGeometry",
    "apply_geometry",
    "center_list",
    "center_text",
    "compute_geometry",
    "max_forecast_bars",
]
